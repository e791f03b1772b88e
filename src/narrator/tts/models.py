"""Voice models and the application-to-provider voice table."""

from enum import Enum


class VoiceName(str, Enum):
    """Application-level narrator voices.

    Values are the labels shown to listeners. Several locale voices share a
    provider voice, see PROVIDER_VOICES.
    """

    KORE = "Kore (Default)"
    PUCK = "Puck"
    CHARON = "Charon"
    ZEPHYR = "Zephyr"
    FENRIR = "Fenrir"
    LAYLA = "Layla (Arabic - MSA)"
    HAMZA = "Hamza (Arabic - MSA)"
    NOOR = "Noor (Arabic - Levantine)"
    ZAID = "Zaid (Arabic - Gulf)"

    @property
    def short_name(self) -> str:
        """First word of the label, e.g. "Layla"."""
        return self.value.split(" ", 1)[0]

    @classmethod
    def parse(cls, name: str) -> "VoiceName":
        """Resolve a voice from its short name, label, or enum member name.

        Args:
            name: Voice name, case-insensitive (e.g. "layla", "Kore (Default)")

        Returns:
            Matching VoiceName

        Raises:
            ValueError: If no voice matches
        """
        wanted = name.strip().lower()
        for voice in cls:
            if wanted in (voice.value.lower(), voice.short_name.lower(), voice.name.lower()):
                return voice
        available = ", ".join(voice.short_name for voice in cls)
        raise ValueError(f"Unknown voice '{name}'. Available voices: {available}")


DEFAULT_PROVIDER_VOICE = "Kore"

# Locale variants intentionally alias the same provider voice.
PROVIDER_VOICES: dict[VoiceName, str] = {
    VoiceName.KORE: "Kore",
    VoiceName.PUCK: "Puck",
    VoiceName.CHARON: "Charon",
    VoiceName.ZEPHYR: "Zephyr",
    VoiceName.FENRIR: "Fenrir",
    VoiceName.LAYLA: "Zephyr",
    VoiceName.HAMZA: "Fenrir",
    VoiceName.NOOR: "Puck",
    VoiceName.ZAID: "Charon",
}

LANGUAGE_VOICES: dict[str, VoiceName] = {
    "ar": VoiceName.LAYLA,
    "en": VoiceName.ZEPHYR,
}


def provider_voice_for(voice: VoiceName) -> str:
    """Map an application voice to the provider's prebuilt voice name."""
    return PROVIDER_VOICES.get(voice, DEFAULT_PROVIDER_VOICE)


def default_voice_for_language(language: str | None) -> VoiceName:
    """Pick the narrator voice best suited to a document language."""
    if not language:
        return VoiceName.KORE
    return LANGUAGE_VOICES.get(language.lower(), VoiceName.KORE)
