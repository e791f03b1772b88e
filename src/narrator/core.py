"""Core functionality for narrator - wires the playback engine together."""

import asyncio
import contextlib
import logging
import signal
from collections.abc import Callable
from typing import Any

from .audio.decoder import CHANNELS, SAMPLE_RATE, AudioDecoder
from .audio.player import AudioPlayer
from .cache.prefetch import PrefetchCache
from .config import NarratorConfig
from .documents import Document, DocumentSource, ensure_text
from .playback.scheduler import AudioOutput, PlaybackScheduler
from .providers import ProviderRegistry
from .providers.base import TTSProvider
from .segmenter import Chunk, segment
from .stats.accumulator import ListeningStatsSink, SessionStatsAccumulator
from .stats.storage import StatsStore
from .tts.client import SynthesisClient
from .tts.errors import SegmentationEmptyError
from .tts.models import VoiceName, provider_voice_for

logger = logging.getLogger(__name__)


def voice_table() -> list[tuple[VoiceName, str]]:
    """Application voices paired with the provider voice they synthesize with."""
    return [(voice, provider_voice_for(voice)) for voice in VoiceName]


async def list_provider_voices(provider_name: str) -> list[dict]:
    """Ask a registered provider which voices it offers.

    Raises:
        KeyError: If provider not found
        SynthesisError: If the provider cannot be reached
    """
    provider = ProviderRegistry.create(provider_name)
    try:
        return await provider.list_voices()
    finally:
        aclose = getattr(provider, "aclose", None)
        if aclose is not None:
            await aclose()


def build_scheduler(
    config: NarratorConfig,
    provider: TTSProvider,
    output: AudioOutput,
    *,
    voice: VoiceName = VoiceName.KORE,
    soothing: bool | None = None,
    store: ListeningStatsSink | None = None,
    user: str | None = None,
    on_chunk: Callable[[int, Chunk], None] | None = None,
) -> PlaybackScheduler:
    """Assemble cache, stats accumulator and scheduler from configuration.

    Args:
        config: Loaded narrator configuration
        provider: Synthesis provider instance
        output: Audio output for decoded chunks
        voice: Initial narrator voice
        soothing: Style flag (config value if omitted)
        store: Listening stats sink (None disables reporting)
        user: Listener credited with listening time (config value if omitted)
        on_chunk: Called when each chunk starts playing

    Returns:
        Scheduler in the IDLE state with an empty cache
    """
    cache = PrefetchCache(
        SynthesisClient(provider),
        AudioDecoder(),
        voice=voice,
        soothing=config.synthesis.soothing if soothing is None else soothing,
        # Provider audio is always 24 kHz mono, whatever the mixer uses
        sample_rate=SAMPLE_RATE,
        channels=CHANNELS,
    )
    stats = SessionStatsAccumulator(store, user or config.stats.user)
    return PlaybackScheduler(
        cache,
        output,
        stats,
        lookahead=config.playback.lookahead,
        retain_behind=config.playback.retain_behind,
        on_chunk=on_chunk,
    )


async def narrate_document(
    document: Document,
    config: NarratorConfig,
    *,
    provider_name: str | None = None,
    start_index: int = 0,
    soothing: bool | None = None,
    user: str | None = None,
    source: DocumentSource | None = None,
    provider: TTSProvider | None = None,
    output: AudioOutput | None = None,
    store: ListeningStatsSink | None = None,
    on_chunk: Callable[[int, Chunk], None] | None = None,
    handle_interrupt: bool = False,
) -> dict[str, Any]:
    """Narrate a document from start_index until its end or until stopped.

    Args:
        document: Document to narrate; text is fetched from source if absent
        config: Loaded narrator configuration
        provider_name: Registered provider name (config value if omitted)
        start_index: Chunk to begin with
        soothing: Style flag (config value if omitted)
        user: Listener credited with listening time (config value if omitted)
        source: Where to fetch the text when document.text is None
        provider: Pre-built provider instance (overrides provider_name)
        output: Pre-built audio output (defaults to AudioPlayer)
        store: Stats sink (defaults to StatsStore when stats are enabled)
        on_chunk: Called when each chunk starts playing
        handle_interrupt: Stop cleanly on SIGINT instead of raising

    Returns:
        Dictionary with workflow results:
            {
                "chunks": int,       # Number of chunks in the document
                "last_index": int,   # Chunk the session ended on
                "listened": float,   # Seconds of listening credited
                "completed": bool,   # True if the end of the document was reached
            }

    Raises:
        SegmentationEmptyError: If the document has nothing to narrate
        SynthesisError: If a chunk needed for playback cannot be synthesized
        DecodeError: If a chunk needed for playback cannot be decoded
        OutputError: If audio output fails
        ValueError: If start_index is out of range
        KeyError: If provider not found
    """
    if document.text is None and source is not None:
        await ensure_text(document, source)

    chunks = segment(document.text)
    if not chunks:
        raise SegmentationEmptyError(f"Nothing to narrate in document {document.id}")
    if not 0 <= start_index < len(chunks):
        raise ValueError(
            f"start_index must be between 0 and {len(chunks) - 1}, got {start_index}"
        )

    owns_provider = provider is None
    if provider is None:
        provider = ProviderRegistry.create(provider_name or config.synthesis.provider)

    owns_output = output is None
    if output is None:
        output = AudioPlayer(config.playback.sample_rate, config.playback.channels)

    if store is None and config.stats.enabled:
        store = StatsStore()

    scheduler = build_scheduler(
        config,
        provider,
        output,
        voice=document.voice or VoiceName.KORE,
        soothing=soothing,
        store=store,
        user=user,
        on_chunk=on_chunk,
    )

    loop = asyncio.get_running_loop()
    stop_tasks: list[asyncio.Task[None]] = []
    if handle_interrupt:
        with contextlib.suppress(NotImplementedError):
            loop.add_signal_handler(
                signal.SIGINT,
                lambda: stop_tasks.append(asyncio.create_task(scheduler.stop())),
            )

    try:
        await scheduler.change_document(document, start_index)
        await scheduler.start(start_index)
        await scheduler.wait_until_stopped()
        if stop_tasks:
            await asyncio.gather(*stop_tasks)
    finally:
        if scheduler.is_playing:
            await scheduler.stop()
        if handle_interrupt:
            with contextlib.suppress(NotImplementedError):
                loop.remove_signal_handler(signal.SIGINT)
        if owns_output and isinstance(output, AudioPlayer):
            output.close()
        aclose = getattr(provider, "aclose", None)
        if owns_provider and aclose is not None:
            await aclose()

    if scheduler.last_error is not None:
        raise scheduler.last_error

    return {
        "chunks": len(chunks),
        "last_index": scheduler.current_index,
        "listened": scheduler.listened_seconds,
        "completed": scheduler.finished,
    }
