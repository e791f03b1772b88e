"""Abstract base class for speech synthesis providers.

This module defines the interface that all synthesis providers must implement,
ensuring every backend returns audio in the format the decoder expects.
"""

from abc import ABC, abstractmethod


class TTSProvider(ABC):
    """Abstract base class for speech synthesis providers.

    All providers must inherit from this class and implement
    the required methods for synthesizing speech and listing voices.

    Voice Dictionary Structure:
        Each voice returned by list_voices() should follow this structure:
        {
            "id": str,       # Unique identifier for the voice
            "name": str,     # Human-readable name for the voice
            "provider": str  # Name of the provider (e.g., "gemini", "elevenlabs")
        }
    """

    @abstractmethod
    async def synthesize(self, text: str, voice: str) -> bytes:
        """Convert text to raw audio bytes with exactly one network call.

        Args:
            text: The text to convert to speech, forwarded unmodified
            voice: Provider voice name (e.g. "Kore", "Zephyr")

        Returns:
            Audio data as 16-bit PCM bytes at 24 kHz, mono (see audio.decoder)

        Raises:
            SynthesisError: If synthesis fails
        """
        pass

    @abstractmethod
    async def list_voices(self) -> list[dict]:
        """Return available voices for this provider.

        Returns:
            List of voice dictionaries, each containing:
            - id: Unique voice identifier
            - name: Human-readable voice name
            - provider: Provider name

        Raises:
            SynthesisError: If voice listing fails
        """
        pass
