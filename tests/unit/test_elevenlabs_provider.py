"""Unit tests for ElevenLabsProvider error handling and logic."""

import os
import sys
from pathlib import Path
from unittest.mock import MagicMock, patch

import pytest

# Add src to path for imports
sys.path.insert(0, str(Path(__file__).parent.parent.parent / "src"))

from narrator.providers.elevenlabs import OUTPUT_FORMAT, VOICE_IDS, ElevenLabsProvider
from narrator.tts.errors import SynthesisAPIError, SynthesisAuthError


class TestElevenLabsProviderInitialization:
    """Test ElevenLabsProvider initialization and authentication error handling."""

    def test_initialization_with_provided_api_key(self) -> None:
        """Test ElevenLabsProvider initializes successfully with provided API key."""
        with patch("narrator.providers.elevenlabs.ElevenLabs") as mock_elevenlabs:
            mock_client = MagicMock()
            mock_elevenlabs.return_value = mock_client

            provider = ElevenLabsProvider(api_key="test_key")

            assert provider._api_key == "test_key"
            mock_elevenlabs.assert_called_once_with(api_key="test_key")
            assert provider._client == mock_client

    def test_initialization_with_env_var_api_key(self) -> None:
        """Test ElevenLabsProvider reads API key from environment variable."""
        with patch.dict(os.environ, {"ELEVENLABS_API_KEY": "env_test_key"}):
            with patch("narrator.providers.elevenlabs.ElevenLabs") as mock_elevenlabs:
                provider = ElevenLabsProvider()

                assert provider._api_key == "env_test_key"
                mock_elevenlabs.assert_called_once_with(api_key="env_test_key")

    def test_initialization_no_api_key_raises_auth_error(self) -> None:
        """Test ElevenLabsProvider raises SynthesisAuthError when no API key provided."""
        with patch.dict(os.environ, {}, clear=True):
            with pytest.raises(SynthesisAuthError, match="ElevenLabs API key not found"):
                ElevenLabsProvider()

    def test_initialization_client_failure_raises_auth_error(self) -> None:
        """Test client construction failures become SynthesisAuthError."""
        with patch("narrator.providers.elevenlabs.ElevenLabs") as mock_elevenlabs:
            mock_elevenlabs.side_effect = Exception("Invalid API key")

            with pytest.raises(
                SynthesisAuthError, match="Failed to initialize ElevenLabs client"
            ):
                ElevenLabsProvider(api_key="invalid_key")


class TestElevenLabsProviderSynthesize:
    """Test ElevenLabsProvider synthesize request and error handling."""

    def setup_method(self) -> None:
        """Set up test provider with mocked ElevenLabs client."""
        with patch("narrator.providers.elevenlabs.ElevenLabs") as mock_elevenlabs:
            self.mock_client = MagicMock()
            mock_elevenlabs.return_value = self.mock_client
            self.provider = ElevenLabsProvider(api_key="test_key")

    @pytest.mark.asyncio
    async def test_requests_pcm_for_mapped_voice(self) -> None:
        """Provider voice names resolve to voice IDs and audio comes back as PCM."""
        self.mock_client.text_to_speech.convert.return_value = iter(
            [b"\x00\x01", b"\x02\x03"]
        )

        audio = await self.provider.synthesize("Hello there, reader.", "Zephyr")

        assert audio == b"\x00\x01\x02\x03"
        self.mock_client.text_to_speech.convert.assert_called_once_with(
            text="Hello there, reader.",
            voice_id=VOICE_IDS["Zephyr"],
            model_id="eleven_turbo_v2_5",
            output_format=OUTPUT_FORMAT,
        )

    @pytest.mark.asyncio
    async def test_unknown_voice_passes_through_as_id(self) -> None:
        self.mock_client.text_to_speech.convert.return_value = iter([b"\x00\x01"])

        await self.provider.synthesize("Hello there, reader.", "custom_voice_id")

        kwargs = self.mock_client.text_to_speech.convert.call_args.kwargs
        assert kwargs["voice_id"] == "custom_voice_id"

    @pytest.mark.asyncio
    async def test_synthesize_empty_text_raises_value_error(self) -> None:
        with pytest.raises(ValueError, match="Text cannot be empty"):
            await self.provider.synthesize("   ", "Kore")

    @pytest.mark.asyncio
    async def test_unauthorized_error_raises_auth_error(self) -> None:
        self.mock_client.text_to_speech.convert.side_effect = Exception(
            "401 unauthorized"
        )

        with pytest.raises(SynthesisAuthError, match="Authentication failed"):
            await self.provider.synthesize("Some text here.", "Kore")

    @pytest.mark.asyncio
    async def test_rate_limit_error(self) -> None:
        self.mock_client.text_to_speech.convert.side_effect = Exception(
            "429 Too Many Requests"
        )

        with pytest.raises(SynthesisAPIError, match="Rate limit exceeded") as exc_info:
            await self.provider.synthesize("Some text here.", "Kore")

        assert exc_info.value.status_code == 429

    @pytest.mark.asyncio
    async def test_server_error(self) -> None:
        self.mock_client.text_to_speech.convert.side_effect = Exception(
            "500 Internal Server Error"
        )

        with pytest.raises(SynthesisAPIError, match="Server error"):
            await self.provider.synthesize("Some text here.", "Kore")

    @pytest.mark.asyncio
    async def test_generic_error(self) -> None:
        self.mock_client.text_to_speech.convert.side_effect = Exception("Network down")

        with pytest.raises(SynthesisAPIError, match="API call failed"):
            await self.provider.synthesize("Some text here.", "Kore")

    @pytest.mark.asyncio
    async def test_empty_audio_raises_api_error(self) -> None:
        self.mock_client.text_to_speech.convert.return_value = iter([])

        with pytest.raises(SynthesisAPIError, match="No audio data received"):
            await self.provider.synthesize("Some text here.", "Kore")


class TestElevenLabsProviderListVoices:
    """Test list_voices caching and error handling."""

    def setup_method(self) -> None:
        with patch("narrator.providers.elevenlabs.ElevenLabs") as mock_elevenlabs:
            self.mock_client = MagicMock()
            mock_elevenlabs.return_value = self.mock_client
            self.provider = ElevenLabsProvider(api_key="test_key")

    @pytest.mark.asyncio
    async def test_list_voices_is_cached(self) -> None:
        voice = MagicMock()
        voice.voice_id = "abc"
        voice.name = "Rachel"
        self.mock_client.voices.get_all.return_value = MagicMock(voices=[voice])

        first = await self.provider.list_voices()
        second = await self.provider.list_voices()

        assert first == [{"id": "abc", "name": "Rachel", "provider": "elevenlabs"}]
        assert second is first
        self.mock_client.voices.get_all.assert_called_once()

    @pytest.mark.asyncio
    async def test_list_voices_failure(self) -> None:
        self.mock_client.voices.get_all.side_effect = Exception("boom")

        with pytest.raises(SynthesisAPIError, match="Failed to list voices"):
            await self.provider.list_voices()
