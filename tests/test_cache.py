"""
Tests for the per-viewer suggestion cache.
"""

from feedsuggest.cache import SuggestionCache
from feedsuggest.models import ScoredCandidate, User


def suggestions(*names):
    return [ScoredCandidate(User(f"0x{n}", n.title()), score=0.5) for n in names]


class TestSuggestionCache:

    def test_round_trip_within_ttl(self, clock):
        cache = SuggestionCache(ttl=300, clock=clock)
        cache.put("0xviewer", suggestions("ann", "ben"))

        clock.advance(299)
        cached = cache.get("0xviewer")

        assert [s.display_name for s in cached] == ["Ann", "Ben"]

    def test_miss_for_unknown_viewer(self, clock):
        cache = SuggestionCache(clock=clock)
        assert cache.get("0xnobody") is None

    def test_stale_entry_is_a_miss(self, clock):
        cache = SuggestionCache(ttl=300, clock=clock)
        cache.put("0xviewer", suggestions("ann"))

        clock.advance(300)

        assert cache.get("0xviewer") is None

    def test_keys_are_case_insensitive(self, clock):
        cache = SuggestionCache(clock=clock)
        cache.put("0xABCDEF", suggestions("ann"))
        assert cache.get("0xabcdef") is not None

    def test_put_overwrites(self, clock):
        cache = SuggestionCache(clock=clock)
        cache.put("0xviewer", suggestions("ann"))
        cache.put("0xviewer", suggestions("ben"))

        assert [s.display_name for s in cache.get("0xviewer")] == ["Ben"]
        assert len(cache) == 1

    def test_put_sweeps_stale_entries_of_other_viewers(self, clock):
        cache = SuggestionCache(ttl=60, clock=clock)
        cache.put("0xold", suggestions("ann"))
        clock.advance(120)

        cache.put("0xnew", suggestions("ben"))

        assert len(cache) == 1
        assert cache.get("0xnew") is not None

    def test_sweep_reports_removed(self, clock):
        cache = SuggestionCache(ttl=60, clock=clock)
        cache.put("0xa", suggestions("ann"))
        cache.put("0xb", suggestions("ben"))
        clock.advance(61)

        assert cache.sweep() == 2
        assert len(cache) == 0

    def test_returned_list_is_a_copy(self, clock):
        cache = SuggestionCache(clock=clock)
        cache.put("0xviewer", suggestions("ann", "ben"))

        cache.get("0xviewer").clear()

        assert len(cache.get("0xviewer")) == 2

    def test_invalidate_and_clear(self, clock):
        cache = SuggestionCache(clock=clock)
        cache.put("0xa", suggestions("ann"))
        cache.put("0xb", suggestions("ben"))

        cache.invalidate("0xA")
        assert cache.get("0xa") is None
        assert cache.get("0xb") is not None

        cache.clear()
        assert len(cache) == 0
