"""Unit tests for TTSProvider abstract base class."""

import sys
from pathlib import Path

import pytest

# Add src to path for imports
sys.path.insert(0, str(Path(__file__).parent.parent.parent / "src"))

from narrator.providers.base import TTSProvider


class TestTTSProviderAbstractClass:
    """Test TTSProvider abstract base class behavior."""

    def test_cannot_instantiate_abstract_class(self) -> None:
        """Test that TTSProvider cannot be instantiated directly."""
        with pytest.raises(TypeError) as exc_info:
            TTSProvider()

        error_msg = str(exc_info.value)
        assert "abstract" in error_msg.lower()
        assert "synthesize" in error_msg
        assert "list_voices" in error_msg

    def test_abstract_methods_defined(self) -> None:
        """Test that expected abstract methods are defined."""
        assert TTSProvider.__abstractmethods__ == frozenset({"synthesize", "list_voices"})

    def test_partial_implementation_fails(self) -> None:
        """Test that implementing only one abstract method still fails."""

        class PartialProvider(TTSProvider):
            async def synthesize(self, text: str, voice: str) -> bytes:
                return b"audio"

        with pytest.raises(TypeError) as exc_info:
            PartialProvider()

        assert "list_voices" in str(exc_info.value)

    @pytest.mark.asyncio
    async def test_complete_implementation_succeeds(self) -> None:
        """Test that implementing all abstract methods allows instantiation."""

        class ConcreteProvider(TTSProvider):
            async def synthesize(self, text: str, voice: str) -> bytes:
                return b"\x00\x00"

            async def list_voices(self) -> list[dict]:
                return [{"id": "v1", "name": "Voice", "provider": "concrete"}]

        provider = ConcreteProvider()

        assert await provider.synthesize("hello", "v1") == b"\x00\x00"
        assert (await provider.list_voices())[0]["id"] == "v1"
