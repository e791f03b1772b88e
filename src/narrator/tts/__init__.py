"""TTS (Text-to-Speech) package for narrator.

This package provides the synthesis client, voice table and error types.
"""

from .client import SynthesisClient
from .errors import (
    DecodeError,
    NarrationError,
    OutputError,
    SegmentationEmptyError,
    SynthesisAPIError,
    SynthesisAuthError,
    SynthesisError,
)
from .models import VoiceName, default_voice_for_language, provider_voice_for

__all__ = [
    "DecodeError",
    "NarrationError",
    "OutputError",
    "SegmentationEmptyError",
    "SynthesisAPIError",
    "SynthesisAuthError",
    "SynthesisClient",
    "SynthesisError",
    "VoiceName",
    "default_voice_for_language",
    "provider_voice_for",
]
