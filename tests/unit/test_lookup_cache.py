"""Tests for lookup_cache module."""

import pytest

from word_wizard.models import AnalysisRequest, LookupOptions
from word_wizard.services import LookupCache


class FakeClock:
    def __init__(self):
        self.now = 0.0

    def __call__(self):
        return self.now


@pytest.fixture
def clock():
    return FakeClock()


@pytest.fixture
def cache(clock):
    return LookupCache(capacity=2, ttl_seconds=100, clock=clock)


class TestLookupCache:
    """Tests for LookupCache get and put."""

    def test_miss_returns_none(self, cache):
        assert cache.get(AnalysisRequest(term="resolve")) is None

    def test_hit_returns_record(self, cache, make_record):
        record = make_record()
        cache.put(AnalysisRequest(term="resolve"), record)
        assert cache.get(AnalysisRequest(term="resolve")) is record

    def test_save_flags_ignored_in_key(self, cache, make_record):
        record = make_record()
        cache.put(AnalysisRequest(term="resolve"), record)

        request = AnalysisRequest(
            term="resolve",
            options=LookupOptions(save_to_note_service=True, save_to_flashcard_service=True),
        )
        assert cache.get(request) is record

    def test_context_is_part_of_key(self, cache, make_record):
        cache.put(AnalysisRequest(term="bank", context="river bank"), make_record(term="bank"))
        assert cache.get(AnalysisRequest(term="bank")) is None

    def test_expired_entry_dropped(self, cache, clock, make_record):
        cache.put(AnalysisRequest(term="resolve"), make_record())
        clock.now = 101

        assert cache.get(AnalysisRequest(term="resolve")) is None
        assert len(cache) == 0

    def test_least_recently_used_evicted(self, cache, make_record):
        cache.put(AnalysisRequest(term="a"), make_record(term="a"))
        cache.put(AnalysisRequest(term="b"), make_record(term="b"))
        cache.get(AnalysisRequest(term="a"))
        cache.put(AnalysisRequest(term="c"), make_record(term="c"))

        assert cache.get(AnalysisRequest(term="b")) is None
        assert cache.get(AnalysisRequest(term="a")) is not None
        assert len(cache) == 2

    def test_zero_ttl_disables(self, make_record):
        cache = LookupCache(ttl_seconds=0)
        cache.put(AnalysisRequest(term="resolve"), make_record())
        assert len(cache) == 0

    def test_clear(self, cache, make_record):
        cache.put(AnalysisRequest(term="resolve"), make_record())
        cache.clear()
        assert len(cache) == 0
