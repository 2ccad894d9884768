"""Tests for history_store module."""

import pytest

from word_wizard.exceptions import ValidationError
from word_wizard.models import HistoryEntry
from word_wizard.services import HistoryStore

DAY = 24 * 60 * 60
NOW = 1_700_000_000.0


class FakeClock:
    def __init__(self, now=NOW):
        self.now = now

    def __call__(self):
        return self.now


@pytest.fixture
def clock():
    return FakeClock()


@pytest.fixture
def store(clock):
    return HistoryStore(capacity=100, review_capacity=50, clock=clock)


class TestAdd:
    """Tests for HistoryStore.add."""

    def test_newest_first(self, store, make_record):
        store.add(make_record(term="alpha"))
        store.add(make_record(term="beta"))

        assert [e.term for e in store.entries] == ["beta", "alpha"]

    def test_same_term_keeps_single_entry_at_front(self, store, make_record):
        store.add(make_record(term="alpha"))
        store.add(make_record(term="beta"))
        store.add(make_record(term="alpha", definition="newer"))

        assert [e.term for e in store.entries] == ["alpha", "beta"]
        assert store.entries[0].record.definition == "newer"

    def test_readding_increments_lookup_count(self, store, make_record):
        store.add(make_record(term="alpha"))
        entry = store.add(make_record(term="alpha"))
        assert entry.lookup_count == 2

    def test_terms_are_case_sensitive(self, store, make_record):
        store.add(make_record(term="Polish"))
        store.add(make_record(term="polish"))
        assert len(store) == 2

    def test_readding_preserves_mastered_flag(self, store, make_record):
        store.add(make_record(term="alpha"))
        store.mark_learned("alpha")
        entry = store.add(make_record(term="alpha"))
        assert entry.mastered is True

    def test_refreshes_last_viewed(self, store, clock, make_record):
        store.add(make_record(term="alpha"))
        clock.now += 60
        entry = store.add(make_record(term="alpha"))
        assert entry.last_viewed == NOW + 60

    def test_101st_term_evicts_oldest(self, store, make_record):
        for i in range(100):
            store.add(make_record(term=f"word{i}"))

        store.add(make_record(term="word100"))

        assert len(store) == 100
        assert "word0" not in store
        assert "word1" in store
        assert store.entries[0].term == "word100"

    def test_readding_at_capacity_evicts_nothing(self, store, make_record):
        for i in range(100):
            store.add(make_record(term=f"word{i}"))

        store.add(make_record(term="word0"))

        assert len(store) == 100
        assert store.entries[0].term == "word0"
        assert store.entries[-1].term == "word1"


class TestReviewQueue:
    """Tests for the review queue and mark_learned."""

    def test_add_to_review_dedups(self, store, make_record):
        store.add_to_review(make_record(term="alpha"))
        store.add_to_review(make_record(term="beta"))
        store.add_to_review(make_record(term="alpha"))

        assert [r.term for r in store.review_queue] == ["alpha", "beta"]

    def test_review_queue_capacity(self, store, make_record):
        for i in range(51):
            store.add_to_review(make_record(term=f"word{i}"))

        assert len(store.review_queue) == 50
        assert store.review_queue[-1].term == "word1"

    def test_mark_learned_removes_from_queue(self, store, make_record):
        store.add(make_record(term="alpha"))
        store.add_to_review(make_record(term="alpha"))

        assert store.mark_learned("alpha") is True
        assert store.review_queue == ()
        assert store.get("alpha").mastered is True
        assert store.mastered_words == 1

    def test_mark_learned_twice_counts_once(self, store, make_record):
        store.add(make_record(term="alpha"))
        store.mark_learned("alpha")
        store.mark_learned("alpha")
        assert store.mastered_words == 1

    def test_mark_learned_unknown_term(self, store):
        assert store.mark_learned("missing") is False
        assert store.mastered_words == 0


class TestClearAndRestore:
    def test_clear_empties_history(self, store, make_record):
        store.add(make_record(term="alpha"))
        store.clear()
        assert len(store) == 0

    def test_restore_enforces_capacity_and_dedup(self, clock, make_record):
        store = HistoryStore(capacity=2, review_capacity=1, clock=clock)
        entries = [
            HistoryEntry(record=make_record(term="a")),
            HistoryEntry(record=make_record(term="a", definition="older")),
            HistoryEntry(record=make_record(term="b")),
            HistoryEntry(record=make_record(term="c")),
        ]
        store.restore(entries, [make_record(term="x"), make_record(term="y")], mastered_words=4)

        assert [e.term for e in store.entries] == ["a", "b"]
        assert store.entries[0].record.definition != "older"
        assert [r.term for r in store.review_queue] == ["x"]
        assert store.mastered_words == 4


class TestQuery:
    """Tests for HistoryStore.query."""

    @pytest.fixture
    def populated(self, store, make_record):
        store.add(make_record(term="cat", definition="a small animal", level="A1"))
        store.add(make_record(term="ubiquitous", definition="found everywhere", level="C1"))
        store.add(make_record(term="borrow", definition="take temporarily", level="B1"))
        store.add(make_record(term="cat", definition="a small animal", level="A1"))
        store.mark_learned("borrow")
        return store

    def test_default_is_recent_first(self, populated):
        assert [e.term for e in populated.query()] == ["cat", "borrow", "ubiquitous"]

    def test_search_matches_definition(self, populated):
        assert [e.term for e in populated.query(search="EVERYWHERE")] == ["ubiquitous"]

    def test_filter_mastered(self, populated):
        assert [e.term for e in populated.query(mastered=True)] == ["borrow"]

    def test_filter_difficulty(self, populated):
        assert [e.term for e in populated.query(difficulty="hard")] == ["ubiquitous"]
        assert [e.term for e in populated.query(difficulty="easy")] == ["cat"]

    def test_alphabetical(self, populated):
        assert [e.term for e in populated.query(sort="alphabetical")] == [
            "borrow",
            "cat",
            "ubiquitous",
        ]

    def test_frequency(self, populated):
        assert populated.query(sort="frequency")[0].term == "cat"

    def test_unknown_sort(self, populated):
        with pytest.raises(ValidationError):
            populated.query(sort="random")


class TestStats:
    """Tests for HistoryStore.stats."""

    def test_empty(self, store):
        stats = store.stats()
        assert stats.total_words == 0
        assert stats.current_streak == 0

    def test_streak_and_weekly_progress(self, store, clock, make_record):
        clock.now = NOW - 10 * DAY
        store.add(make_record(term="old"))
        clock.now = NOW - 2 * DAY
        store.add(make_record(term="two_days"))
        clock.now = NOW - DAY
        store.add(make_record(term="yesterday"))
        clock.now = NOW
        store.add(make_record(term="today"))

        stats = store.stats()

        assert stats.total_words == 4
        assert stats.weekly_progress == 3
        assert stats.current_streak == 3

    def test_streak_broken_without_lookup_today(self, store, clock, make_record):
        clock.now = NOW - DAY
        store.add(make_record(term="yesterday"))
        clock.now = NOW
        assert store.stats().current_streak == 0
