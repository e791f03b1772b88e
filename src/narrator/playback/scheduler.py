"""Playback scheduler driving chunk-by-chunk narration.

The scheduler is an explicit state machine. Every start/stop bumps a
generation counter; background work compares its own generation with the
live one before touching state, so a chunk that finishes after the listener
pressed stop can never advance playback.
"""

import asyncio
import logging
from collections.abc import Callable
from enum import Enum
from typing import Protocol

from ..audio.decoder import AudioBuffer
from ..cache.prefetch import PrefetchCache
from ..documents import Document
from ..segmenter import Chunk, segment
from ..stats.accumulator import SessionStatsAccumulator
from ..tts.errors import NarrationError, OutputError
from ..tts.models import VoiceName

logger = logging.getLogger(__name__)

LOOKAHEAD = 2


class PlaybackState(str, Enum):
    """Scheduler states."""

    IDLE = "idle"
    LOADING = "loading"
    PLAYING = "playing"
    STOPPED = "stopped"


class AudioOutput(Protocol):
    """Output side of the audio service (AudioPlayer satisfies this)."""

    async def play(self, buffer: AudioBuffer) -> bool: ...

    def stop(self) -> None: ...


class PlaybackScheduler:
    """Decides which chunk plays, prefetches ahead, and advances on completion.

    Example:
        scheduler = PlaybackScheduler(cache, AudioPlayer(), stats)
        await scheduler.change_document(document)
        await scheduler.start(0)
        await scheduler.wait_until_stopped()
    """

    def __init__(
        self,
        cache: PrefetchCache,
        output: AudioOutput,
        stats: SessionStatsAccumulator,
        lookahead: int = LOOKAHEAD,
        retain_behind: int | None = None,
        on_chunk: Callable[[int, Chunk], None] | None = None,
        on_error: Callable[[int, NarrationError], None] | None = None,
    ) -> None:
        """Initialize scheduler in the IDLE state.

        Args:
            cache: Prefetch cache scoped to the current document and voice
            output: Audio output used to play decoded chunks
            stats: Session listening time accumulator
            lookahead: How many chunks after the current one to prefetch
            retain_behind: If set, evict cached chunks more than this many
                positions behind the playhead
            on_chunk: Called when a chunk starts playing
            on_error: Called when the chunk needed now cannot be played
        """
        if lookahead < 0:
            raise ValueError("lookahead cannot be negative")
        if retain_behind is not None and retain_behind < 0:
            raise ValueError("retain_behind cannot be negative")

        self.cache = cache
        self.output = output
        self.stats = stats
        self.lookahead = lookahead
        self.retain_behind = retain_behind
        self.on_chunk = on_chunk
        self.on_error = on_error

        self.state = PlaybackState.IDLE
        self.current_index = 0
        self.document: Document | None = None
        self.last_error: NarrationError | None = None
        self.listened_seconds = 0.0
        self.finished = False

        self._generation = 0
        self._task: asyncio.Task[None] | None = None
        self._stopped = asyncio.Event()

    @property
    def chunks(self) -> list[Chunk]:
        return self.cache.chunks

    @property
    def is_playing(self) -> bool:
        """True while a session is loading or playing a chunk."""
        return self.state in (PlaybackState.LOADING, PlaybackState.PLAYING)

    @property
    def voice(self) -> VoiceName:
        return self.cache.voice

    async def start(self, index: int) -> None:
        """Begin playback at a chunk, interrupting anything in progress.

        Issues ensure() for index and the next `lookahead` chunks that exist.
        Starting past the last chunk ends the session.

        Args:
            index: Chunk to play

        Raises:
            ValueError: If index is negative
        """
        if index < 0:
            raise ValueError(f"index cannot be negative, got {index}")
        if index >= len(self.chunks):
            logger.debug(f"No chunk at {index}, end of document")
            self.finished = True
            await self._halt()
            return

        self.output.stop()
        self._cancel_pending()
        self._generation += 1
        generation = self._generation

        self.state = PlaybackState.LOADING
        self.current_index = index
        self.last_error = None
        self.finished = False
        self._stopped.clear()

        if self.retain_behind is not None:
            self.cache.discard_before(index - self.retain_behind)

        current = self.cache.ensure(index)
        last = min(index + self.lookahead, len(self.chunks) - 1)
        for ahead in range(index + 1, last + 1):
            self.cache.ensure(ahead)

        self._task = asyncio.create_task(
            self._run(index, generation, current), name=f"narration-{index}"
        )

    async def seek(self, index: int) -> None:
        """Jump to a chunk; same as start()."""
        await self.start(index)

    async def stop(self) -> None:
        """Stop playback and flush the session. Safe to call at any time."""
        await self._halt()

    async def change_voice(self, voice: VoiceName) -> None:
        """Stop and discard all audio synthesized with the previous voice.

        The caller may start(current_index) again to resume with the new voice.
        """
        await self._halt()
        self.cache.reset(voice=voice)
        if self.document is not None:
            self.document.voice = voice
        logger.info(f"Voice changed to {voice.short_name}")
        self._warm(self.current_index)

    async def change_document(self, document: Document, index: int = 0) -> None:
        """Stop, discard cached audio, and load a new document's chunks.

        Synthesis of the chunk at index starts right away so it is likely
        ready by the time start(index) is called.
        """
        await self._halt()
        self.document = document
        self.cache.reset(chunks=segment(document.text), voice=document.voice)
        self.current_index = index
        logger.info(f"Loaded document {document.id} ({len(self.chunks)} chunks)")
        self._warm(index)

    async def update_text(self, text: str | None) -> None:
        """Re-segment after the current document's text arrives or changes."""
        if self.is_playing:
            await self._halt()
        if self.document is not None:
            self.document.text = text
        self.cache.reset(chunks=segment(text))
        self.current_index = 0
        self._warm(0)

    def _warm(self, index: int) -> None:
        if 0 <= index < len(self.chunks):
            self.cache.ensure(index)

    async def wait_until_stopped(self) -> None:
        """Wait until the scheduler next enters STOPPED."""
        await self._stopped.wait()

    async def _run(
        self,
        index: int,
        generation: int,
        pending: "asyncio.Future[AudioBuffer]",
    ) -> None:
        try:
            buffer = await asyncio.shield(pending)
        except NarrationError as e:
            await self._fail(index, generation, e)
            return

        if generation != self._generation:
            return

        self.state = PlaybackState.PLAYING
        self.stats.begin()
        if self.on_chunk is not None:
            self.on_chunk(index, self.chunks[index])

        try:
            completed = await self.output.play(buffer)
        except OutputError as e:
            await self._fail(index, generation, e)
            return

        # Decide on the live state, never on what was true when output began
        if not completed or not self._is_current(index, generation):
            return
        await self.start(index + 1)

    def _is_current(self, index: int, generation: int) -> bool:
        return (
            generation == self._generation
            and self.state is PlaybackState.PLAYING
            and self.current_index == index
        )

    async def _fail(self, index: int, generation: int, error: NarrationError) -> None:
        if generation != self._generation:
            logger.debug(f"Ignoring failure of superseded chunk {index}: {error}")
            return
        logger.error(f"Cannot play chunk {index}: {error}")
        self.last_error = error
        await self._halt()
        if self.on_error is not None:
            self.on_error(index, error)

    async def _halt(self) -> None:
        self._generation += 1
        generation = self._generation
        self._cancel_pending()
        self.output.stop()
        self.state = PlaybackState.STOPPED
        self.listened_seconds += await self.stats.flush()
        # A start() during the flush owns the state now
        if generation == self._generation:
            self._stopped.set()

    def _cancel_pending(self) -> None:
        task = self._task
        self._task = None
        if task is None or task.done() or task is asyncio.current_task():
            return
        task.cancel()
