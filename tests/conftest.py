"""Pytest configuration and fixtures for narrator tests."""

import asyncio
import sys
from collections.abc import Awaitable, Callable
from pathlib import Path

import pytest

sys.path.insert(0, str(Path(__file__).parent.parent / "src"))

import narrator.config
from narrator.audio.decoder import AudioBuffer
from narrator.providers.base import TTSProvider

# 10 ms of 24 kHz mono 16-bit PCM
FAKE_PCM = b"\x10\x00" * 240


class FakeProvider(TTSProvider):
    """Provider that records calls and returns a fixed PCM payload.

    Set hold to park every request until release() is called; put a text in
    failures to make requests for it raise.
    """

    def __init__(self) -> None:
        self.calls: list[tuple[str, str]] = []
        self.failures: dict[str, Exception] = {}
        self.hold = False
        self._released = asyncio.Event()

    async def synthesize(self, text: str, voice: str) -> bytes:
        self.calls.append((text, voice))
        if self.hold:
            await self._released.wait()
        if text in self.failures:
            raise self.failures[text]
        return FAKE_PCM

    async def list_voices(self) -> list[dict]:
        return [{"id": "Kore", "name": "Kore", "provider": "fake"}]

    def release(self) -> None:
        self._released.set()

    def calls_for(self, text: str) -> list[tuple[str, str]]:
        return [call for call in self.calls if call[0] == text]


class FakeOutput:
    """Audio output whose playback finishes only when the test says so."""

    def __init__(self, auto_finish: bool = False) -> None:
        self.auto_finish = auto_finish
        self.played: list[AudioBuffer] = []
        self.stop_calls = 0
        self._pending: asyncio.Future[bool] | None = None

    async def play(self, buffer: AudioBuffer) -> bool:
        self.played.append(buffer)
        if self.auto_finish:
            await asyncio.sleep(0)
            return True
        self._pending = asyncio.get_running_loop().create_future()
        return await self._pending

    def finish(self) -> None:
        if self._pending is not None and not self._pending.done():
            self._pending.set_result(True)

    def stop(self) -> None:
        self.stop_calls += 1
        if self._pending is not None and not self._pending.done():
            self._pending.set_result(False)


class FakeClock:
    """Manually advanced monotonic clock."""

    def __init__(self, start: float = 100.0) -> None:
        self.now = start

    def __call__(self) -> float:
        return self.now

    def advance(self, seconds: float) -> None:
        self.now += seconds


class RecordingSink:
    """Stats sink remembering every report."""

    def __init__(self) -> None:
        self.reports: list[tuple[str, float]] = []

    def add_listening_seconds(self, user_id: str, seconds: float) -> None:
        self.reports.append((user_id, seconds))


async def _until(predicate: Callable[[], object], timeout: float = 2.0) -> None:
    loop = asyncio.get_running_loop()
    deadline = loop.time() + timeout
    while not predicate():
        if loop.time() > deadline:
            raise AssertionError("Condition not met before timeout")
        await asyncio.sleep(0.005)


@pytest.fixture(autouse=True)
def isolate_environment(monkeypatch, tmp_path) -> None:
    """Keep tests away from the real config, data directory and env overrides."""
    monkeypatch.setattr(narrator.config, "_cached_config", None)
    monkeypatch.setattr(
        "narrator.stats.storage.get_data_dir", lambda: tmp_path / "data"
    )
    for name in ("NARRATOR_PROVIDER", "NARRATOR_VOICE", "NARRATOR_USER"):
        monkeypatch.delenv(name, raising=False)


@pytest.fixture
def provider() -> FakeProvider:
    return FakeProvider()


@pytest.fixture
def output() -> FakeOutput:
    return FakeOutput()


@pytest.fixture
def clock() -> FakeClock:
    return FakeClock()


@pytest.fixture
def sink() -> RecordingSink:
    return RecordingSink()


@pytest.fixture
def until() -> Callable[..., Awaitable[None]]:
    """Poll a predicate until it holds, failing after a timeout."""
    return _until
