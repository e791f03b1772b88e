"""Configuration management for narrator.

Loads configuration from ~/.config/narrator/config.toml.
Priority chain: CLI flags > env vars > config file.
"""

import os
import sys
import tomllib
from dataclasses import dataclass
from pathlib import Path

from .audio.decoder import SAMPLE_RATE

CONFIG_DIR = Path.home() / ".config" / "narrator"
CONFIG_PATH = CONFIG_DIR / "config.toml"

DEFAULT_CONFIG = """\
# narrator configuration

[synthesis]
# Provider: "gemini" (Gemini speech generation), "elevenlabs"
provider = "gemini"

# Narrator voice: Kore, Puck, Charon, Zephyr, Fenrir,
#                 Layla, Hamza, Noor, Zaid (Arabic voices)
# Leave empty to pick a voice from the document language.
voice = ""

# Calm narration style flag (kept for future style control)
soothing = true

[playback]
# Audio output format. Synthesized speech is 24 kHz mono and is not
# resampled; mono is copied to every output channel.
sample_rate = 24000
channels = 1

# Paragraphs synthesized ahead of the one playing
lookahead = 2

# Keep only this many already-played paragraphs in memory (uncomment to enable)
# retain_behind = 1

[stats]
# Record cumulative listening time
enabled = true

# Listener the time is credited to
user = "default"

# API keys are read from environment variables, not this file:
#   GEMINI_API_KEY      - Gemini provider
#   ELEVENLABS_API_KEY  - ElevenLabs provider
"""


@dataclass(frozen=True)
class SynthesisConfig:
    """Speech synthesis configuration."""

    provider: str
    voice: str
    soothing: bool


@dataclass(frozen=True)
class PlaybackConfig:
    """Playback scheduling configuration."""

    sample_rate: int
    channels: int
    lookahead: int
    retain_behind: int | None


@dataclass(frozen=True)
class StatsConfig:
    """Listening stats configuration."""

    enabled: bool
    user: str


@dataclass(frozen=True)
class NarratorConfig:
    """Top-level narrator configuration."""

    synthesis: SynthesisConfig
    playback: PlaybackConfig
    stats: StatsConfig


_cached_config: NarratorConfig | None = None


def generate_config() -> Path:
    """Generate default config file at ~/.config/narrator/config.toml."""
    CONFIG_DIR.mkdir(parents=True, exist_ok=True)
    CONFIG_PATH.write_text(DEFAULT_CONFIG)
    return CONFIG_PATH


def parse_config(data: dict) -> NarratorConfig:
    """Build a validated NarratorConfig from parsed TOML with env overrides.

    Args:
        data: Parsed TOML document

    Returns:
        NarratorConfig

    Raises:
        ValueError: If required values are missing or out of range
    """
    synthesis = data.get("synthesis", {})
    playback = data.get("playback", {})
    stats = data.get("stats", {})

    missing = []
    if "provider" not in synthesis:
        missing.append("synthesis.provider")
    if "lookahead" not in playback:
        missing.append("playback.lookahead")
    if "enabled" not in stats:
        missing.append("stats.enabled")
    if missing:
        raise ValueError(f"Missing required config values: {', '.join(missing)}")

    lookahead = int(playback["lookahead"])
    if lookahead < 0:
        raise ValueError(f"playback.lookahead must be non-negative, got {lookahead}")
    retain_behind = playback.get("retain_behind")
    if retain_behind is not None and int(retain_behind) < 0:
        raise ValueError(
            f"playback.retain_behind must be non-negative, got {retain_behind}"
        )

    sample_rate = int(playback.get("sample_rate", SAMPLE_RATE))
    if sample_rate != SAMPLE_RATE:
        raise ValueError(
            f"playback.sample_rate must be {SAMPLE_RATE} to match synthesized "
            f"audio, got {sample_rate}"
        )
    channels = int(playback.get("channels", 1))
    if channels < 1:
        raise ValueError(f"playback.channels must be at least 1, got {channels}")

    return NarratorConfig(
        synthesis=SynthesisConfig(
            provider=os.getenv("NARRATOR_PROVIDER", synthesis["provider"]),
            voice=os.getenv("NARRATOR_VOICE", synthesis.get("voice", "")),
            soothing=bool(synthesis.get("soothing", True)),
        ),
        playback=PlaybackConfig(
            sample_rate=sample_rate,
            channels=channels,
            lookahead=lookahead,
            retain_behind=int(retain_behind) if retain_behind is not None else None,
        ),
        stats=StatsConfig(
            enabled=bool(stats["enabled"]),
            user=os.getenv("NARRATOR_USER", stats.get("user", "default")),
        ),
    )


def load_config() -> NarratorConfig:
    """Load configuration from config file with env var overrides.

    On first run, generates the config file and exits so the user
    can review it before proceeding.

    Returns:
        Loaded and validated NarratorConfig.

    Raises:
        SystemExit: If config is missing (after generating) or invalid.
    """
    global _cached_config
    if _cached_config is not None:
        return _cached_config

    if not CONFIG_PATH.exists():
        path = generate_config()
        print(
            f"No config found. Generated {path}, review it and run again.",
            file=sys.stderr,
        )
        raise SystemExit(1)

    try:
        with open(CONFIG_PATH, "rb") as f:
            data = tomllib.load(f)
        _cached_config = parse_config(data)
    except (tomllib.TOMLDecodeError, ValueError) as e:
        print(f"Invalid config: {e}", file=sys.stderr)
        print(f"Edit {CONFIG_PATH} or delete it to regenerate.", file=sys.stderr)
        raise SystemExit(1) from None

    return _cached_config
