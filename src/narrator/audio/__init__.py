"""Audio decoding and playback package for narrator.

This package turns synthesized PCM into buffers and plays them using pygame.
"""

from .decoder import AudioBuffer, AudioDecoder
from .player import AudioPlayer

__all__ = ["AudioBuffer", "AudioDecoder", "AudioPlayer"]
