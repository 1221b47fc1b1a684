"""Unit tests for preference resolution."""

import pytest

from feed_service.domain import CategoryStats, ResolvedPreferences
from feed_service.infrastructure.redis import PreferenceCache
from feed_service.services.preference_resolver import (
    PreferenceResolver,
    parse_guest_preferences,
)
from feed_service.stores.preferences import InMemoryPreferenceStore
from shared.constants import MAX_GUEST_COUNT
from tests.factories import FailingPreferenceStore


class TestGuestPreferences:
    """Tests for guest-supplied preference JSON."""

    def test_weight_map(self) -> None:
        prefs = parse_guest_preferences('{"tech": 5.0, "home": 2}')
        assert prefs.weights == {"tech": 5.0, "home": 2.0}
        assert prefs.stats == {}

    def test_full_records(self) -> None:
        prefs = parse_guest_preferences('{"tech": {"score": 3, "likes": 4, "dislikes": 1}}')
        assert prefs.weights == {"tech": 3.0}
        assert prefs.stats["tech"] == CategoryStats(likes=4, dislikes=1)

    def test_counters_without_score(self) -> None:
        prefs = parse_guest_preferences('{"pets": {"likes": 2}}')
        assert prefs.weights == {}
        assert prefs.stats["pets"] == CategoryStats(likes=2, dislikes=0)

    @pytest.mark.parametrize("blob", [None, "", "not json", "[1, 2]", '"tech"', "{"])
    def test_malformed_yields_empty(self, blob) -> None:
        prefs = parse_guest_preferences(blob)
        assert prefs.weights == {}
        assert prefs.stats == {}

    def test_invalid_entries_dropped(self) -> None:
        prefs = parse_guest_preferences('{"tech": "high", "home": -1, "pets": true, "fashion": 2}')
        assert prefs.weights == {"fashion": 2.0}

    def test_defaults_for_missing_categories(self) -> None:
        prefs = parse_guest_preferences('{"tech": 5}')
        assert prefs.weight_for("home") == 1.0
        assert "home" not in prefs.stats

    def test_counts_must_be_integers(self) -> None:
        prefs = parse_guest_preferences('{"tech": {"likes": 1e11, "dislikes": 2.5}, "home": {"likes": 3}}')
        assert "tech" not in prefs.stats
        assert prefs.stats["home"] == CategoryStats(likes=3, dislikes=0)

    def test_huge_counts_are_capped(self) -> None:
        prefs = parse_guest_preferences('{"tech": {"likes": 100000000000, "dislikes": 7}}')
        assert prefs.stats["tech"] == CategoryStats(likes=MAX_GUEST_COUNT, dislikes=7)


class TestPreferenceResolver:
    """Tests for authenticated and guest resolution paths."""

    @pytest.mark.asyncio
    async def test_user_reads_store(self) -> None:
        store = InMemoryPreferenceStore()
        await store.set_weight("u1", "tech", 4.0)
        await store.record_feedback("u1", "tech", "like")
        await store.record_feedback("u1", "home", "dislike")

        prefs = await PreferenceResolver(store).resolve("u1")

        assert prefs.weights == {"tech": 4.0, "home": 1.0}
        assert prefs.stats["tech"] == CategoryStats(likes=1, dislikes=0)
        assert prefs.stats["home"] == CategoryStats(likes=0, dislikes=1)

    @pytest.mark.asyncio
    async def test_user_ignores_guest_blob(self) -> None:
        prefs = await PreferenceResolver(InMemoryPreferenceStore()).resolve(
            "u1", '{"tech": 9}'
        )
        assert prefs.weights == {}

    @pytest.mark.asyncio
    async def test_guest_uses_blob(self) -> None:
        prefs = await PreferenceResolver(InMemoryPreferenceStore()).resolve(None, '{"tech": 9}')
        assert prefs.weights == {"tech": 9.0}

    @pytest.mark.asyncio
    async def test_store_failure_degrades_to_empty(self) -> None:
        prefs = await PreferenceResolver(FailingPreferenceStore()).resolve("u1")
        assert prefs.weights == {}
        assert prefs.stats == {}

    @pytest.mark.asyncio
    async def test_disabled_cache_falls_through_to_store(self) -> None:
        store = InMemoryPreferenceStore()
        await store.set_weight("u1", "pets", 2.5)

        prefs = await PreferenceResolver(store, PreferenceCache(None)).resolve("u1")

        assert prefs.weights == {"pets": 2.5}


def test_preferences_round_trip_through_dict() -> None:
    prefs = ResolvedPreferences(
        weights={"tech": 2.0}, stats={"tech": CategoryStats(likes=3, dislikes=1)}
    )
    restored = ResolvedPreferences.from_dict(prefs.to_dict())
    assert restored == prefs
