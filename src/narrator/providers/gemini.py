"""Gemini speech generation provider implementation."""

import base64
import binascii
import logging
import os

import httpx

from ..tts.errors import SynthesisAPIError, SynthesisAuthError
from .base import TTSProvider

logger = logging.getLogger(__name__)

GEMINI_BASE_URL = "https://generativelanguage.googleapis.com/v1beta/models"
GEMINI_TTS_MODEL = "gemini-2.5-flash-preview-tts"

PREBUILT_VOICES = ["Kore", "Puck", "Charon", "Zephyr", "Fenrir"]


class GeminiProvider(TTSProvider):
    """Gemini TTS provider using the generateContent REST endpoint.

    Audio comes back base64-encoded inside the first candidate part as raw
    16-bit PCM at 24 kHz mono, which is exactly what the decoder expects.
    """

    def __init__(
        self,
        api_key: str | None = None,
        model: str = GEMINI_TTS_MODEL,
        http_client: httpx.AsyncClient | None = None,
        timeout: float = 60.0,
    ) -> None:
        """Initialize Gemini provider.

        Args:
            api_key: Gemini API key. If not provided, reads from
                    GEMINI_API_KEY (or GOOGLE_API_KEY) environment variable.
            model: Speech generation model ID
            http_client: Optional pre-built client (tests inject a mock transport)
            timeout: Request timeout in seconds

        Raises:
            SynthesisAuthError: If API key is not provided.
        """
        self._api_key = (
            api_key or os.getenv("GEMINI_API_KEY") or os.getenv("GOOGLE_API_KEY")
        )
        if not self._api_key:
            raise SynthesisAuthError(
                "Gemini API key not found. Set GEMINI_API_KEY environment "
                "variable or provide api_key parameter."
            )

        self.model = model
        self._client = http_client or httpx.AsyncClient(timeout=timeout)

    def _build_payload(self, text: str, voice: str) -> dict:
        return {
            "contents": [{"parts": [{"text": text}]}],
            "generationConfig": {
                "responseModalities": ["AUDIO"],
                "speechConfig": {
                    "voiceConfig": {"prebuiltVoiceConfig": {"voiceName": voice}}
                },
            },
        }

    async def synthesize(self, text: str, voice: str) -> bytes:
        """Convert text to speech audio bytes.

        Args:
            text: Text to convert to speech
            voice: Prebuilt Gemini voice name

        Returns:
            Audio data as bytes (16-bit PCM, 24 kHz, mono)

        Raises:
            SynthesisAPIError: If API call fails or returns no audio
            SynthesisAuthError: If authentication fails
            ValueError: If text is empty
        """
        if not text or not text.strip():
            raise ValueError("Text cannot be empty")

        url = f"{GEMINI_BASE_URL}/{self.model}:generateContent"
        try:
            response = await self._client.post(
                url,
                headers={"x-goog-api-key": self._api_key},
                json=self._build_payload(text, voice or PREBUILT_VOICES[0]),
            )
            response.raise_for_status()
        except httpx.HTTPStatusError as e:
            status = e.response.status_code
            if status in (401, 403):
                raise SynthesisAuthError(f"Authentication failed: {e}", e) from e
            elif status == 429:
                raise SynthesisAPIError(f"Rate limit exceeded: {e}", 429, e) from e
            elif status >= 500:
                raise SynthesisAPIError(f"Server error: {e}", status, e) from e
            else:
                raise SynthesisAPIError(f"API call failed: {e}", status, e) from e
        except httpx.HTTPError as e:
            raise SynthesisAPIError(f"API call failed: {e}", None, e) from e

        try:
            data = response.json()
            encoded = data["candidates"][0]["content"]["parts"][0]["inlineData"][
                "data"
            ]
        except (ValueError, KeyError, IndexError, TypeError):
            logger.error(f"Gemini TTS response missing audio data: {response.text[:200]}")
            raise SynthesisAPIError("No audio data returned from API") from None

        try:
            audio_bytes = base64.b64decode(encoded)
        except (binascii.Error, TypeError) as e:
            raise SynthesisAPIError(f"Invalid audio payload: {e}", None, e) from e

        if not audio_bytes:
            raise SynthesisAPIError("No audio data returned from API")

        return audio_bytes

    async def list_voices(self) -> list[dict]:
        """Get list of prebuilt voices.

        Returns:
            List of voice dictionaries with id, name, and provider fields
        """
        return [
            {"id": name, "name": name, "provider": "gemini"} for name in PREBUILT_VOICES
        ]

    async def aclose(self) -> None:
        """Close the underlying HTTP client."""
        await self._client.aclose()
