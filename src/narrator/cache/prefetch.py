"""Prefetch cache of decoded chunk audio for the current document and voice."""

import asyncio
import functools
import logging
from collections.abc import Sequence

from ..audio.decoder import CHANNELS, SAMPLE_RATE, AudioBuffer, AudioDecoder
from ..segmenter import Chunk
from ..tts.client import SynthesisClient
from ..tts.errors import DecodeError, NarrationError, SynthesisError
from ..tts.models import VoiceName
from .models import CacheEntry

logger = logging.getLogger(__name__)


class PrefetchCache:
    """Chunk index -> decoded audio for one (document, voice) pair.

    Requests are deduplicated: while a chunk is being synthesized, every
    ensure() for it returns the same task. Failures are never cached, so a
    later ensure() retries from scratch. reset() wipes everything and bumps
    the scope epoch so work started for the previous scope cannot write into
    the new one.

    Example:
        cache = PrefetchCache(client, AudioDecoder(), chunks=chunks, voice=VoiceName.KORE)
        cache.ensure(1)                 # background look-ahead
        buffer = await cache.ensure(0)  # wait for the chunk needed now
        cache.get(1)                    # None until chunk 1 is decoded
    """

    def __init__(
        self,
        client: SynthesisClient,
        decoder: AudioDecoder | None = None,
        *,
        chunks: Sequence[Chunk] = (),
        voice: VoiceName = VoiceName.KORE,
        soothing: bool = True,
        sample_rate: int = SAMPLE_RATE,
        channels: int = CHANNELS,
    ) -> None:
        """Initialize an empty cache scoped to the given chunks and voice.

        Args:
            client: Synthesis client used for cache misses
            decoder: Decoder for synthesized audio (defaults to AudioDecoder)
            chunks: Chunks of the current document
            voice: Voice of the current scope
            soothing: Style flag forwarded to the synthesis client
            sample_rate: Sample rate of synthesized audio
            channels: Channel count of synthesized audio
        """
        self.client = client
        self.decoder = decoder or AudioDecoder()
        self.sample_rate = sample_rate
        self.channels = channels
        self.chunks: list[Chunk] = list(chunks)
        self.voice = voice
        self.soothing = soothing

        self._entries: dict[int, CacheEntry] = {}
        self._in_flight: dict[int, asyncio.Task[AudioBuffer]] = {}
        self._epoch = 0

    def __len__(self) -> int:
        return len(self._entries)

    def __contains__(self, index: object) -> bool:
        return index in self._entries

    @property
    def in_flight(self) -> set[int]:
        """Indices currently being synthesized or decoded."""
        return set(self._in_flight)

    def get(self, index: int) -> AudioBuffer | None:
        """Return the decoded buffer for index, or None if not ready."""
        entry = self._entries.get(index)
        return entry.buffer if entry else None

    def ensure(self, index: int) -> "asyncio.Future[AudioBuffer]":
        """Make sure audio for a chunk is cached or on its way.

        Must be called from a running event loop. Callers that do not await
        the result need not handle its failure; the cache logs it.

        Args:
            index: Chunk index to fetch

        Returns:
            Awaitable resolving to the decoded buffer. Already completed on a
            cache hit; the shared in-flight task if the chunk is pending.

        Raises:
            IndexError: If index is outside the current chunk list
        """
        if not 0 <= index < len(self.chunks):
            raise IndexError(f"No chunk at index {index} (have {len(self.chunks)})")

        entry = self._entries.get(index)
        if entry is not None:
            logger.debug(f"Cache hit for chunk {index}")
            done: asyncio.Future[AudioBuffer] = (
                asyncio.get_running_loop().create_future()
            )
            done.set_result(entry.buffer)
            return done

        pending = self._in_flight.get(index)
        # A finished task may still be listed until its done-callback runs
        if pending is not None and not pending.done():
            logger.debug(f"Chunk {index} already in flight, attaching")
            return pending

        logger.debug(f"Cache miss for chunk {index}, starting synthesis")
        task = asyncio.create_task(
            self._fetch(index, self._epoch), name=f"prefetch-chunk-{index}"
        )
        self._in_flight[index] = task
        task.add_done_callback(functools.partial(self._on_fetch_done, index))
        return task

    async def _fetch(self, index: int, epoch: int) -> AudioBuffer:
        chunk = self.chunks[index]
        voice = self.voice
        try:
            audio_bytes = await self.client.synthesize(chunk.text, voice, self.soothing)
            buffer = await asyncio.to_thread(
                self.decoder.decode, audio_bytes, self.sample_rate, self.channels
            )
        except NarrationError:
            raise
        except ValueError as e:
            raise SynthesisError(f"Cannot synthesize chunk {index}: {e}", e) from e

        if epoch != self._epoch:
            logger.debug(f"Discarding chunk {index} fetched for a previous scope")
            return buffer

        self._entries[index] = CacheEntry(index=index, buffer=buffer, voice=voice)
        logger.debug(f"Cached chunk {index} ({buffer.duration:.2f}s)")
        return buffer

    def _on_fetch_done(self, index: int, task: "asyncio.Task[AudioBuffer]") -> None:
        if self._in_flight.get(index) is task:
            del self._in_flight[index]

        if task.cancelled():
            return
        error = task.exception()
        if isinstance(error, (SynthesisError, DecodeError)):
            logger.warning(f"Failed to prefetch chunk {index}: {error}")
        elif error is not None:
            logger.error(f"Unexpected error prefetching chunk {index}: {error!r}")

    def reset(
        self,
        *,
        chunks: Sequence[Chunk] | None = None,
        voice: VoiceName | None = None,
        soothing: bool | None = None,
    ) -> None:
        """Drop all entries and in-flight work, optionally rebinding the scope.

        Args:
            chunks: New document chunks, if the document changed
            voice: New voice, if the voice changed
            soothing: New style flag
        """
        self._epoch += 1
        in_flight = self._in_flight
        self._in_flight = {}
        for task in in_flight.values():
            task.cancel()
        dropped = len(self._entries)
        self._entries.clear()

        if chunks is not None:
            self.chunks = list(chunks)
        if voice is not None:
            self.voice = voice
        if soothing is not None:
            self.soothing = soothing

        logger.debug(
            f"Cache reset: dropped {dropped} entries, cancelled {len(in_flight)} "
            f"fetches (voice={self.voice.short_name}, chunks={len(self.chunks)})"
        )

    def discard_before(self, index: int) -> None:
        """Evict cached entries with an index lower than index."""
        stale = [i for i in self._entries if i < index]
        for i in stale:
            del self._entries[i]
        if stale:
            logger.debug(f"Evicted {len(stale)} entries behind chunk {index}")
