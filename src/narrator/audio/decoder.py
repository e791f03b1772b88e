"""Decode synthesized PCM into playable audio buffers."""

from dataclasses import dataclass

import numpy as np

from ..tts.errors import DecodeError

SAMPLE_RATE = 24000
CHANNELS = 1
SAMPLE_WIDTH = 2  # bytes per 16-bit sample


@dataclass(frozen=True)
class AudioBuffer:
    """Decoded audio ready for output.

    Args:
        samples: float32 array of shape (frames, channels), values in [-1, 1)
        sample_rate: Frames per second
        channels: Number of interleaved channels
    """

    samples: np.ndarray
    sample_rate: int
    channels: int

    @property
    def frames(self) -> int:
        return int(self.samples.shape[0])

    @property
    def duration(self) -> float:
        """Length in seconds."""
        return self.frames / self.sample_rate

    def to_pcm16(self) -> bytes:
        """Re-encode as interleaved 16-bit little-endian PCM."""
        clipped = np.clip(self.samples, -1.0, 1.0 - 1.0 / 32768)
        return (clipped * 32768).astype("<i2").tobytes()


class AudioDecoder:
    """Turns raw synthesis output into AudioBuffers.

    Holds no state between calls, so the prefetch cache can decode several
    chunks at once from worker threads.
    """

    def decode(
        self, data: bytes, sample_rate: int = SAMPLE_RATE, channels: int = CHANNELS
    ) -> AudioBuffer:
        """Decode interleaved 16-bit little-endian PCM.

        Args:
            data: Raw PCM bytes
            sample_rate: Frames per second of the input
            channels: Number of interleaved channels in the input

        Returns:
            AudioBuffer with float32 samples

        Raises:
            DecodeError: If the input is empty or not whole frames
            ValueError: If sample_rate or channels is not positive
        """
        if sample_rate <= 0:
            raise ValueError("sample_rate must be positive")
        if channels <= 0:
            raise ValueError("channels must be positive")
        if not data:
            raise DecodeError("No audio data to decode")

        frame_size = SAMPLE_WIDTH * channels
        if len(data) % frame_size:
            raise DecodeError(
                f"Malformed audio: {len(data)} bytes is not a whole number of "
                f"{channels}-channel 16-bit frames"
            )

        try:
            pcm = np.frombuffer(data, dtype="<i2")
        except (TypeError, ValueError) as e:
            raise DecodeError(f"Malformed audio: {e}", e) from e

        samples = (pcm.astype(np.float32) / 32768.0).reshape(-1, channels)
        return AudioBuffer(samples=samples, sample_rate=sample_rate, channels=channels)
