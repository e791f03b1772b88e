"""Unit tests for narrator voices and the provider voice table."""

import sys
from pathlib import Path

import pytest

# Add src to path for imports
sys.path.insert(0, str(Path(__file__).parent.parent.parent / "src"))

from narrator.tts.models import (
    PROVIDER_VOICES,
    VoiceName,
    default_voice_for_language,
    provider_voice_for,
)


class TestVoiceName:
    """Test VoiceName labels and parsing."""

    def test_short_name_is_first_word(self) -> None:
        assert VoiceName.KORE.short_name == "Kore"
        assert VoiceName.NOOR.short_name == "Noor"
        assert VoiceName.PUCK.short_name == "Puck"

    @pytest.mark.parametrize(
        "name", ["layla", "Layla", "LAYLA", "Layla (Arabic - MSA)", " layla "]
    )
    def test_parse_accepts_short_name_label_and_member(self, name: str) -> None:
        """Voice names parse case-insensitively from any of their spellings."""
        assert VoiceName.parse(name) is VoiceName.LAYLA

    def test_parse_unknown_voice_lists_available(self) -> None:
        with pytest.raises(ValueError, match="Unknown voice 'Bob'") as exc_info:
            VoiceName.parse("Bob")

        assert "Kore" in str(exc_info.value)
        assert "Zaid" in str(exc_info.value)

    def test_is_string_enum(self) -> None:
        assert VoiceName.KORE == "Kore (Default)"


class TestProviderVoiceTable:
    """Test mapping application voices onto provider voices."""

    def test_every_voice_has_a_provider_voice(self) -> None:
        assert set(PROVIDER_VOICES) == set(VoiceName)

    def test_locale_voices_alias_provider_voices(self) -> None:
        """
        INVARIANT: Locale variants share the provider voice they stand in for
        BREAKS: Arabic narration sent to a voice name the provider rejects
        """
        assert provider_voice_for(VoiceName.LAYLA) == "Zephyr"
        assert provider_voice_for(VoiceName.HAMZA) == "Fenrir"
        assert provider_voice_for(VoiceName.NOOR) == "Puck"
        assert provider_voice_for(VoiceName.ZAID) == "Charon"

    def test_base_voices_map_to_themselves(self) -> None:
        for voice in (VoiceName.PUCK, VoiceName.CHARON, VoiceName.ZEPHYR, VoiceName.FENRIR):
            assert provider_voice_for(voice) == voice.short_name
        assert provider_voice_for(VoiceName.KORE) == "Kore"


class TestDefaultVoiceForLanguage:
    """Test picking a narrator voice from the document language."""

    @pytest.mark.parametrize(
        ("language", "expected"),
        [
            ("ar", VoiceName.LAYLA),
            ("AR", VoiceName.LAYLA),
            ("en", VoiceName.ZEPHYR),
            ("fr", VoiceName.KORE),
            ("de", VoiceName.KORE),
            ("", VoiceName.KORE),
            (None, VoiceName.KORE),
        ],
    )
    def test_language_defaults(self, language: str | None, expected: VoiceName) -> None:
        assert default_voice_for_language(language) is expected
