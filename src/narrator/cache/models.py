"""Data models for the prefetch cache."""

from dataclasses import dataclass

from ..audio.decoder import AudioBuffer
from ..tts.models import VoiceName


@dataclass(frozen=True)
class CacheEntry:
    """Decoded audio for one chunk of the current document.

    Attributes:
        index: Chunk index the audio belongs to
        buffer: Decoded audio ready for output
        voice: Voice the audio was synthesized with
    """

    index: int
    buffer: AudioBuffer
    voice: VoiceName
