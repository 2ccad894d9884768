"""Pytest configuration and shared fixtures."""

import asyncio
import time

import pytest
import pytest_asyncio

from word_wizard.config import WordWizardConfig
from word_wizard.exceptions import StorageError
from word_wizard.models import (
    PROVENANCE_PROVIDER,
    AnalysisRequest,
    SaveResult,
    WordFamilyItem,
    WordRecord,
)
from word_wizard.orchestration import WordWizardEngine
from word_wizard.presenters import NullProgressCallback
from word_wizard.services import MemoryStore


@pytest.fixture
def test_config(tmp_path):
    """Provide a test configuration with temporary paths."""
    return WordWizardConfig(
        storage_path=tmp_path / "storage.json",
        notion_token="secret_test",
        notion_database_id="db-123",
        anki_deck_name="test_deck",
        anki_note_type="Basic",
        batch_concurrency=5,
    )


@pytest.fixture
def null_progress():
    """Provide a null progress callback for testing."""
    return NullProgressCallback()


@pytest.fixture
def make_record():
    """Factory fixture for creating WordRecord instances with sensible defaults."""

    def _make(
        term="resolve",
        definition="to settle or find a solution to a problem",
        phonetic="/rɪˈzɒlv/",
        examples=("We need to resolve this issue.", "The dispute was resolved."),
        synonyms=("settle", "solve"),
        antonyms=("complicate",),
        word_family=(WordFamilyItem(word="resolution", type="noun"),),
        topic="Problem Solving",
        domain="academic",
        level="B2",
        image_url=None,
        created_at=None,
        provenance=PROVENANCE_PROVIDER,
    ):
        return WordRecord(
            term=term,
            definition=definition,
            phonetic=phonetic,
            examples=tuple(examples),
            synonyms=frozenset(synonyms),
            antonyms=frozenset(antonyms),
            word_family=tuple(word_family),
            topic=topic,
            domain=domain,
            level=level,
            image_url=image_url,
            created_at=time.time() if created_at is None else created_at,
            provenance=provenance,
        )

    return _make


class FakeProvider:
    """AnalysisProvider double with per-term failures and gates.

    A held term blocks inside ``analyze`` until its gate is released, which
    lets tests overlap lookups deterministically.
    """

    name = "Fake Provider"

    def __init__(self):
        self.calls: list[AnalysisRequest] = []
        self.failures: dict[str, Exception] = {}
        self.gates: dict[str, asyncio.Event] = {}
        self.counter = 0

    def hold(self, term: str) -> asyncio.Event:
        gate = asyncio.Event()
        self.gates[term] = gate
        return gate

    def fail(self, term: str, error: Exception) -> None:
        self.failures[term] = error

    def calls_for(self, term: str) -> int:
        return sum(1 for request in self.calls if request.term == term)

    async def analyze(self, request: AnalysisRequest) -> WordRecord:
        self.calls.append(request)
        gate = self.gates.get(request.term)
        if gate is not None:
            await gate.wait()
        else:
            await asyncio.sleep(0)

        if request.term in self.failures:
            raise self.failures[request.term]

        self.counter += 1
        return WordRecord(
            term=request.term,
            definition=f"definition of {request.term} #{self.counter}",
            examples=("one", "two", "three", "four"),
            synonyms=frozenset({"alpha", "beta"}),
            level="B1",
            created_at=time.time(),
            context=request.context,
        )


@pytest.fixture
def fake_provider():
    """Provide a controllable analysis provider."""
    return FakeProvider()


class ManualHandle:
    def __init__(self, due: float, callback):
        self.due = due
        self.callback = callback
        self.cancelled = False

    def cancel(self) -> None:
        self.cancelled = True


class ManualScheduler:
    """Scheduler whose clock only moves when the test calls ``advance``."""

    def __init__(self):
        self.now = 0.0
        self.handles: list[ManualHandle] = []

    def call_later(self, delay: float, callback) -> ManualHandle:
        handle = ManualHandle(self.now + delay, callback)
        self.handles.append(handle)
        return handle

    @property
    def active(self) -> list[ManualHandle]:
        return [h for h in self.handles if not h.cancelled]

    def advance(self, seconds: float) -> int:
        """Move the clock and run callbacks that became due. Returns how many ran."""
        self.now += seconds
        due = [h for h in self.active if h.due <= self.now]
        for handle in due:
            self.handles.remove(handle)
            handle.callback()
        return len(due)


@pytest.fixture
def manual_scheduler():
    """Provide a scheduler driven explicitly by the test."""
    return ManualScheduler()


class FlakyStore(MemoryStore):
    """MemoryStore whose next ``fail_writes`` writes raise StorageError."""

    def __init__(self, initial=None):
        super().__init__(initial)
        self.fail_writes = 0
        self.writes = 0

    async def set(self, key, value):
        if self.fail_writes > 0:
            self.fail_writes -= 1
            raise StorageError("disk full")
        self.writes += 1
        await super().set(key, value)


@pytest.fixture
def memory_store():
    """Provide an in-memory store that can be told to fail writes."""
    return FlakyStore()


class FakeSaveTarget:
    """SaveTarget double that records every save."""

    def __init__(self, name, success=True, duplicate=False, error=None, raises=None):
        self.name = name
        self.success = success
        self.duplicate = duplicate
        self.error = error
        self.raises = raises
        self.connected = True
        self.saved = []

    def save_record(self, record, target_config=None):
        self.saved.append((record, target_config))
        if self.raises is not None:
            raise self.raises
        return SaveResult(
            target=self.name,
            success=self.success,
            identifier=f"{self.name}-{len(self.saved)}" if self.success else None,
            error=self.error,
            duplicate_detected=self.duplicate,
        )

    def check_connection(self):
        return self.connected


@pytest.fixture
def note_target():
    return FakeSaveTarget("notion")


@pytest.fixture
def flashcard_target():
    return FakeSaveTarget("anki")


@pytest_asyncio.fixture
async def engine(test_config, fake_provider, memory_store, manual_scheduler, note_target, flashcard_target):
    """Provide a started engine wired to fakes (free plan, 100 lookups)."""
    engine = WordWizardEngine(
        test_config,
        fake_provider,
        memory_store,
        note_target=note_target,
        flashcard_target=flashcard_target,
        scheduler=manual_scheduler,
    )
    await engine.start()
    return engine


class RecordingProgress:
    """A real ProgressCallback implementation that records all calls for assertion."""

    def __init__(self):
        self.starts = []
        self.progresses = []
        self.completes = 0
        self.errors = []

    def on_start(self, total: int, description: str) -> None:
        self.starts.append((total, description))

    def on_progress(self, current: int, item_description: str) -> None:
        self.progresses.append((current, item_description))

    def on_complete(self) -> None:
        self.completes += 1

    def on_error(self, item_description: str, error_message: str) -> None:
        self.errors.append((item_description, error_message))


@pytest.fixture
def recording_progress():
    """Provide a progress callback that records all calls for assertion."""
    return RecordingProgress()
