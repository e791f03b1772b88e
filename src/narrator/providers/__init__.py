"""Speech synthesis providers for narrator.

Providers are looked up by the name given in config (`synthesis.provider`)
or on the command line (`--provider`).
"""

from typing import TYPE_CHECKING, Any, ClassVar

if TYPE_CHECKING:
    from .base import TTSProvider

from .elevenlabs import ElevenLabsProvider
from .gemini import GeminiProvider

__all__ = ["ProviderRegistry"]


class ProviderRegistry:
    """Name -> provider class lookup shared by the CLI and the library API."""

    _providers: ClassVar[dict[str, type["TTSProvider"]]] = {}

    @classmethod
    def register(cls, name: str, provider_class: type["TTSProvider"]) -> None:
        """Register a provider class, replacing any previous one of that name."""
        cls._providers[name] = provider_class

    @classmethod
    def get(cls, name: str) -> type["TTSProvider"]:
        """Get a provider class by name.

        Raises:
            KeyError: If provider name not found
        """
        if name not in cls._providers:
            available = ", ".join(cls.names()) or "none"
            raise KeyError(
                f"Provider '{name}' not found. Available providers: {available}"
            )
        return cls._providers[name]

    @classmethod
    def create(cls, name: str, **kwargs: Any) -> "TTSProvider":
        """Instantiate a registered provider.

        Args:
            name: Registered provider name
            **kwargs: Passed to the provider constructor (e.g. api_key)

        Raises:
            KeyError: If provider name not found
            SynthesisAuthError: If the provider has no usable credentials
        """
        return cls.get(name)(**kwargs)

    @classmethod
    def names(cls) -> list[str]:
        return sorted(cls._providers)


ProviderRegistry.register("gemini", GeminiProvider)
ProviderRegistry.register("elevenlabs", ElevenLabsProvider)
