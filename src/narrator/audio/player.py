"""Audio output for decoded narration buffers using pygame."""

# ruff: noqa: E402
import os

# Suppress pygame's annoying welcome message BEFORE any pygame import
os.environ["PYGAME_HIDE_SUPPORT_PROMPT"] = "1"

import warnings

# Suppress pygame's pkg_resources deprecation warning spam
warnings.filterwarnings("ignore", category=UserWarning, module="pygame.pkgdata")

import asyncio
import logging

import pygame

from ..tts.errors import OutputError
from .decoder import CHANNELS, SAMPLE_RATE, AudioBuffer

logger = logging.getLogger(__name__)


class AudioPlayer:
    """Plays AudioBuffers through the system mixer, one at a time.

    play() resolves when output finishes and reports whether it ran to its
    natural end; stop() cuts the current buffer short and is always safe.
    """

    def __init__(
        self,
        sample_rate: int = SAMPLE_RATE,
        channels: int = CHANNELS,
        poll_interval: float = 0.02,
    ) -> None:
        """Initialize the audio player with pygame mixer.

        Args:
            sample_rate: Mixer frequency, must match decoded buffers
            channels: Mixer channel count
            poll_interval: Seconds between completion checks

        Raises:
            OutputError: If pygame mixer fails to initialize.
        """
        self.sample_rate = sample_rate
        self.channels = channels
        self.poll_interval = poll_interval
        self._channel: pygame.mixer.Channel | None = None
        self._stop_requested = False

        try:
            pygame.mixer.init(frequency=sample_rate, size=-16, channels=channels)
        except pygame.error as e:
            raise OutputError(f"Failed to initialize pygame audio mixer: {e}", e) from e

    def _to_sound(self, buffer: AudioBuffer) -> pygame.mixer.Sound:
        if buffer.sample_rate != self.sample_rate:
            raise OutputError(
                f"Buffer sample rate {buffer.sample_rate} does not match "
                f"mixer rate {self.sample_rate}"
            )
        samples = buffer
        if buffer.channels != self.channels:
            if buffer.channels != 1:
                raise OutputError(
                    f"Cannot play {buffer.channels}-channel audio on a "
                    f"{self.channels}-channel mixer"
                )
            # Mono fans out to every mixer channel.
            samples = AudioBuffer(
                samples=buffer.samples.repeat(self.channels, axis=1),
                sample_rate=buffer.sample_rate,
                channels=self.channels,
            )
        return pygame.mixer.Sound(buffer=samples.to_pcm16())

    def _wait_until_done(self, channel: pygame.mixer.Channel) -> None:
        """Block until the channel goes quiet (run in a worker thread)."""
        clock = pygame.time.Clock()
        tick_rate = max(1, int(1 / self.poll_interval))
        while channel.get_busy():
            clock.tick(tick_rate)

    async def play(self, buffer: AudioBuffer) -> bool:
        """Play a buffer and wait for output to finish (async).

        Args:
            buffer: Decoded audio to play

        Returns:
            True if playback reached its natural end, False if stop() cut it short

        Raises:
            OutputError: If the buffer is empty or audio playback fails.
        """
        if buffer.frames == 0:
            raise OutputError("No audio data provided")

        try:
            sound = self._to_sound(buffer)
            self._stop_requested = False
            channel = sound.play()
        except pygame.error as e:
            raise OutputError(f"Failed to play audio: {e}", e) from e
        if channel is None:
            raise OutputError("Failed to play audio: no free mixer channel")

        self._channel = channel
        logger.debug(f"Playing {buffer.duration:.2f}s of audio")

        try:
            # Poll in a thread to keep the event loop free for scheduling
            await asyncio.to_thread(self._wait_until_done, channel)
        except pygame.error as e:
            raise OutputError(f"Failed to play audio: {e}", e) from e
        finally:
            if self._channel is channel:
                self._channel = None

        return not self._stop_requested

    def stop(self) -> None:
        """Stop current output immediately. Safe when nothing is playing."""
        self._stop_requested = True
        channel = self._channel
        if channel is None:
            return
        try:
            channel.stop()
        except pygame.error as e:
            logger.warning(f"Failed to stop audio output: {e}")

    @property
    def is_busy(self) -> bool:
        channel = self._channel
        return channel is not None and channel.get_busy()

    def close(self) -> None:
        """Stop output and shut the mixer down."""
        self.stop()
        pygame.mixer.quit()
