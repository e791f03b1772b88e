"""ElevenLabs text-to-speech provider implementation."""

import asyncio
import os

from elevenlabs.client import ElevenLabs

from ..tts.errors import SynthesisAPIError, SynthesisAuthError
from .base import TTSProvider

# Premade ElevenLabs voices standing in for the prebuilt voice names.
VOICE_IDS: dict[str, str] = {
    "Kore": "21m00Tcm4TlvDq8ikWAM",  # Rachel
    "Zephyr": "EXAVITQu4vr4xnSDxMaL",  # Bella
    "Puck": "AZnzlk1XvdvUeBnXmlld",  # Domi
    "Charon": "VR6AewLTigWG4xSOukaG",  # Arnold
    "Fenrir": "pNInz6obpgDQGcFmaJgB",  # Adam
}

OUTPUT_FORMAT = "pcm_24000"


class ElevenLabsProvider(TTSProvider):
    """ElevenLabs TTS provider implementation.

    Requests raw 24 kHz PCM so its output decodes exactly like Gemini's.
    Provider voice names are resolved through VOICE_IDS; anything else is
    passed through as a raw ElevenLabs voice ID.
    """

    def __init__(
        self, api_key: str | None = None, model_id: str = "eleven_turbo_v2_5"
    ) -> None:
        """Initialize ElevenLabs provider.

        Args:
            api_key: ElevenLabs API key. If not provided, reads from
                    ELEVENLABS_API_KEY environment variable.
            model_id: ElevenLabs model ID to use

        Raises:
            SynthesisAuthError: If API key is not provided or invalid.
        """
        self._api_key = api_key or os.getenv("ELEVENLABS_API_KEY")
        if not self._api_key:
            raise SynthesisAuthError(
                "ElevenLabs API key not found. Set ELEVENLABS_API_KEY environment "
                "variable or provide api_key parameter."
            )

        try:
            self._client = ElevenLabs(api_key=self._api_key)
        except Exception as e:
            raise SynthesisAuthError(
                f"Failed to initialize ElevenLabs client: {e}", e
            ) from e

        self.model_id = model_id
        # Cache for voices to avoid repeated API calls
        self._voices_cache: list[dict] | None = None

    async def synthesize(self, text: str, voice: str) -> bytes:
        """Convert text to speech audio bytes.

        Args:
            text: Text to convert to speech
            voice: Provider voice name or raw ElevenLabs voice ID

        Returns:
            Audio data as bytes (16-bit PCM, 24 kHz, mono)

        Raises:
            SynthesisAPIError: If API call fails
            SynthesisAuthError: If authentication fails
            ValueError: If text is empty
        """
        if not text or not text.strip():
            raise ValueError("Text cannot be empty")

        voice_id = VOICE_IDS.get(voice, voice) or VOICE_IDS["Kore"]

        try:
            # Run synchronous ElevenLabs client in thread to avoid blocking event loop
            def _sync_convert() -> bytes:
                audio_generator = self._client.text_to_speech.convert(
                    text=text,
                    voice_id=voice_id,
                    model_id=self.model_id,
                    output_format=OUTPUT_FORMAT,
                )
                return b"".join(audio_generator)

            audio_bytes = await asyncio.to_thread(_sync_convert)

        except Exception as e:
            if "unauthorized" in str(e).lower() or "401" in str(e):
                raise SynthesisAuthError(f"Authentication failed: {e}", e) from e
            elif "429" in str(e):
                raise SynthesisAPIError(f"Rate limit exceeded: {e}", 429, e) from e
            elif "5" in str(e)[:1]:  # 5xx server errors
                raise SynthesisAPIError(f"Server error: {e}", None, e) from e
            else:
                raise SynthesisAPIError(f"API call failed: {e}", None, e) from e

        if not audio_bytes:
            raise SynthesisAPIError("No audio data received from API")

        return audio_bytes

    async def list_voices(self) -> list[dict]:
        """Get list of available voices.

        Results are cached after first call to avoid repeated API requests.

        Returns:
            List of voice dictionaries with id, name, and provider fields

        Raises:
            SynthesisAPIError: If API call fails
            SynthesisAuthError: If authentication fails
        """
        if self._voices_cache is not None:
            return self._voices_cache

        try:

            def _sync_get_voices() -> list[dict]:
                response = self._client.voices.get_all()
                return [
                    {
                        "id": voice.voice_id,
                        "name": voice.name,
                        "provider": "elevenlabs",
                    }
                    for voice in response.voices
                ]

            voices = await asyncio.to_thread(_sync_get_voices)

            self._voices_cache = voices
            return voices

        except Exception as e:
            if "unauthorized" in str(e).lower() or "401" in str(e):
                raise SynthesisAuthError(f"Authentication failed: {e}", e) from e
            elif "429" in str(e):
                raise SynthesisAPIError(f"Rate limit exceeded: {e}", 429, e) from e
            else:
                raise SynthesisAPIError(f"Failed to list voices: {e}", None, e) from e
