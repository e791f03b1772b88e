"""Synthesis client mapping narrator voices onto a TTS provider."""

import logging
from typing import TYPE_CHECKING

from .errors import SynthesisAPIError, SynthesisError
from .models import VoiceName, provider_voice_for

if TYPE_CHECKING:
    from ..providers.base import TTSProvider

logger = logging.getLogger(__name__)


class SynthesisClient:
    """Client issuing one synthesis request per chunk.

    Translates the application voice into the provider's voice through the
    fixed voice table and normalizes every failure into SynthesisError.
    Retrying is left to the caller.
    """

    def __init__(self, provider: "TTSProvider") -> None:
        """Initialize synthesis client.

        Args:
            provider: TTS provider instance performing the network call
        """
        self.provider = provider

    async def synthesize(
        self, text: str, voice: VoiceName, soothing: bool = True
    ) -> bytes:
        """Convert chunk text to encoded audio bytes.

        Args:
            text: Chunk text to narrate
            voice: Application voice to narrate with
            soothing: Style flag. Accepted for future style control; the text
                is always forwarded unmodified.

        Returns:
            Audio data as bytes (16-bit PCM, 24 kHz, mono)

        Raises:
            SynthesisError: If the provider call fails or returns no audio
            ValueError: If text is empty
        """
        if not text or not text.strip():
            raise ValueError("Text cannot be empty")

        provider_voice = provider_voice_for(voice)
        logger.debug(
            f"Synthesizing {len(text)} chars with {voice.short_name} "
            f"(provider voice {provider_voice}, soothing={soothing})"
        )

        try:
            audio_bytes = await self.provider.synthesize(text, provider_voice)
        except SynthesisError:
            raise
        except Exception as e:
            raise SynthesisAPIError(f"Speech synthesis failed: {e}", None, e) from e

        if not audio_bytes:
            raise SynthesisAPIError("No audio data returned from API")

        return audio_bytes
