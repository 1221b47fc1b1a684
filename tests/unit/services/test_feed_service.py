"""Unit tests for end-to-end feed building with in-memory stores."""

import numpy as np
import pytest

from feed_service.config import Settings
from feed_service.domain import FeedFilters
from feed_service.services.candidate_pool import CandidatePool, CatalogUnavailableError
from feed_service.services.catalog_bootstrap import CatalogBootstrapper
from feed_service.services.feed import FeedRequest, FeedService, build_composers
from feed_service.services.preference_resolver import PreferenceResolver
from feed_service.stores.catalog import InMemoryCatalogStore
from feed_service.stores.preferences import InMemoryPreferenceStore
from shared.categories import CATEGORIES
from tests.factories import FailingCatalogStore, FakeSearchClient, make_item


def seeded_catalog(rng: np.random.Generator, per_category: int = 60) -> InMemoryCatalogStore:
    items = []
    for category in CATEGORIES:
        for i in range(per_category):
            items.append(
                make_item(
                    f"{category.id}-{i}",
                    category.id,
                    price=float(rng.uniform(1, 500)),
                    rating=float(rng.uniform(0, 5)),
                    reviews=int(rng.integers(0, 5000)),
                )
            )
    return InMemoryCatalogStore(items)


def build_service(
    catalog, preferences, client=None, strategy="thompson", min_items=0
) -> FeedService:
    settings = Settings(_env_file=None, feed_composer=strategy)
    return FeedService(
        bootstrapper=CatalogBootstrapper(
            catalog, client or FakeSearchClient(), min_items=min_items
        ),
        candidate_pool=CandidatePool(catalog, preferences),
        resolver=PreferenceResolver(preferences),
        composers=build_composers(settings),
        default_strategy=strategy,
        default_size=50,
    )


@pytest.mark.parametrize("strategy", ["thompson", "spread"])
class TestFeedInvariants:
    """Every composed feed honours filters, exclusions and category spread."""

    @pytest.mark.asyncio
    async def test_filters_and_exclusions_hold(self, strategy: str) -> None:
        rng = np.random.default_rng(5)
        catalog = seeded_catalog(rng)
        preferences = InMemoryPreferenceStore()
        await preferences.add_rejection("u1", "tech-1")
        await preferences.add_wishlist_item("u1", make_item("home-2", "home"))
        await preferences.add_wishlist_item("u1", make_item("pets-3", "pets"))
        service = build_service(catalog, preferences, strategy=strategy)
        filters = FeedFilters(min_price=20, max_price=300, min_reviews=100, min_rating=1.5)

        for _ in range(20):
            result = await service.build_feed(
                FeedRequest(filters=filters, user_id="u1"), rng=rng
            )
            assert result.items
            for item in result.items:
                assert filters.matches(item)
                assert item.id not in {"tech-1", "home-2", "pets-3"}

    @pytest.mark.asyncio
    async def test_no_adjacent_categories(self, strategy: str) -> None:
        rng = np.random.default_rng(9)
        service = build_service(seeded_catalog(rng), InMemoryPreferenceStore(), strategy=strategy)

        for _ in range(20):
            result = await service.build_feed(FeedRequest(), rng=rng)
            assert len(result.items) == 50
            categories = [i.category for i in result.items]
            assert all(a != b for a, b in zip(categories, categories[1:]))

    @pytest.mark.asyncio
    async def test_guest_exclusions(self, strategy: str) -> None:
        rng = np.random.default_rng(2)
        service = build_service(seeded_catalog(rng, 5), InMemoryPreferenceStore(), strategy=strategy)
        excluded = {f"{c.id}-0" for c in CATEGORIES}

        result = await service.build_feed(
            FeedRequest(guest_exclude_ids=",".join(excluded), size=200), rng=rng
        )

        assert {i.id for i in result.items}.isdisjoint(excluded)
        assert len(result.items) == 4 * len(CATEGORIES)


class TestFeedService:
    @pytest.mark.asyncio
    async def test_empty_pool_returns_empty_feed(self, rng: np.random.Generator) -> None:
        service = build_service(seeded_catalog(rng, 5), InMemoryPreferenceStore())
        result = await service.build_feed(
            FeedRequest(filters=FeedFilters(min_price=9999, max_price=10000)), rng=rng
        )
        assert result.items == []
        assert result.candidates == 0

    @pytest.mark.asyncio
    async def test_bootstraps_empty_catalog(self, rng: np.random.Generator) -> None:
        catalog = InMemoryCatalogStore()
        client = FakeSearchClient(per_query=10)
        service = build_service(catalog, InMemoryPreferenceStore(), client, min_items=50)

        result = await service.build_feed(FeedRequest(), rng=rng)

        assert len(client.calls) == 3
        assert len(result.items) == 30
        assert result.bootstrap.inserted == 30

    @pytest.mark.asyncio
    async def test_strategy_override(self, rng: np.random.Generator) -> None:
        service = build_service(seeded_catalog(rng, 5), InMemoryPreferenceStore())
        result = await service.build_feed(FeedRequest(strategy="spread"), rng=rng)
        assert result.strategy == "spread"

    @pytest.mark.asyncio
    async def test_catalog_outage_raises(self, rng: np.random.Generator) -> None:
        service = build_service(FailingCatalogStore(), InMemoryPreferenceStore())
        with pytest.raises(CatalogUnavailableError):
            await service.build_feed(FeedRequest(), rng=rng)
