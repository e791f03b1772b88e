"""Unit tests for PCM decoding into audio buffers."""

import sys
from pathlib import Path

import numpy as np
import pytest

# Add src to path for imports
sys.path.insert(0, str(Path(__file__).parent.parent.parent / "src"))

from narrator.audio.decoder import AudioBuffer, AudioDecoder
from narrator.tts.errors import DecodeError


class TestAudioDecoder:
    """Test AudioDecoder.decode."""

    def setup_method(self) -> None:
        self.decoder = AudioDecoder()

    def test_decodes_mono_pcm(self) -> None:
        data = np.array([0, 16384, -32768, 32767], dtype="<i2").tobytes()

        buffer = self.decoder.decode(data)

        assert buffer.sample_rate == 24000
        assert buffer.channels == 1
        assert buffer.samples.dtype == np.float32
        assert buffer.samples.shape == (4, 1)
        np.testing.assert_allclose(
            buffer.samples[:, 0], [0.0, 0.5, -1.0, 32767 / 32768]
        )

    def test_decodes_interleaved_stereo(self) -> None:
        data = np.array([100, -100, 200, -200], dtype="<i2").tobytes()

        buffer = self.decoder.decode(data, sample_rate=48000, channels=2)

        assert buffer.frames == 2
        assert buffer.samples.shape == (2, 2)
        assert buffer.samples[0, 0] == pytest.approx(100 / 32768)
        assert buffer.samples[0, 1] == pytest.approx(-100 / 32768)

    def test_duration(self) -> None:
        buffer = self.decoder.decode(b"\x00\x00" * 12000)

        assert buffer.frames == 12000
        assert buffer.duration == pytest.approx(0.5)

    def test_empty_input_raises(self) -> None:
        with pytest.raises(DecodeError, match="No audio data to decode"):
            self.decoder.decode(b"")

    def test_partial_frame_raises(self) -> None:
        """
        INVARIANT: Truncated payloads are rejected, never silently padded
        BREAKS: A clicking half-sample at the end of every chunk
        """
        with pytest.raises(DecodeError, match="Malformed audio"):
            self.decoder.decode(b"\x00\x00\x00")

        with pytest.raises(DecodeError, match="Malformed audio"):
            self.decoder.decode(b"\x00\x00" * 3, channels=2)

    @pytest.mark.parametrize(
        ("sample_rate", "channels"), [(0, 1), (-24000, 1), (24000, 0)]
    )
    def test_invalid_format_raises_value_error(
        self, sample_rate: int, channels: int
    ) -> None:
        with pytest.raises(ValueError, match="must be positive"):
            self.decoder.decode(b"\x00\x00", sample_rate=sample_rate, channels=channels)


class TestAudioBuffer:
    """Test AudioBuffer helpers."""

    def test_to_pcm16_restores_input(self) -> None:
        data = np.array([0, 1, -1, 12345, -32768, 32767], dtype="<i2").tobytes()

        buffer = AudioDecoder().decode(data)

        assert buffer.to_pcm16() == data

    def test_to_pcm16_clips_out_of_range(self) -> None:
        buffer = AudioBuffer(
            samples=np.array([[2.0], [-2.0]], dtype=np.float32),
            sample_rate=24000,
            channels=1,
        )

        pcm = np.frombuffer(buffer.to_pcm16(), dtype="<i2")

        assert list(pcm) == [32767, -32768]
