"""FastAPI dependencies wiring stores, clients and services per request."""

from dataclasses import dataclass
from typing import Annotated, AsyncGenerator

from fastapi import Depends, Header

from feed_service.config import Settings, get_settings
from feed_service.infrastructure.database.connection import get_db_session
from feed_service.infrastructure.redis import PreferenceCache, get_redis_client
from feed_service.infrastructure.upstream import UpstreamSearchClient, get_http_client
from feed_service.services.candidate_pool import CandidatePool
from feed_service.services.catalog_bootstrap import CatalogBootstrapper
from feed_service.services.feed import FeedService, build_composers
from feed_service.services.preference_resolver import PreferenceResolver
from feed_service.stores.catalog import CatalogStore, InMemoryCatalogStore, SqlCatalogStore
from feed_service.stores.preferences import (
    InMemoryPreferenceStore,
    PreferenceStore,
    SqlPreferenceStore,
)


@dataclass
class Stores:
    catalog: CatalogStore
    preferences: PreferenceStore


# Process-wide stores for storage_backend="memory"
_memory_catalog = InMemoryCatalogStore()
_memory_preferences = InMemoryPreferenceStore()


async def get_stores(
    settings: Settings = Depends(get_settings),
) -> AsyncGenerator[Stores, None]:
    """Catalog and preference stores for the configured backend."""
    if settings.storage_backend == "memory":
        yield Stores(catalog=_memory_catalog, preferences=_memory_preferences)
        return

    async with get_db_session() as session:
        yield Stores(
            catalog=SqlCatalogStore(session),
            preferences=SqlPreferenceStore(session),
        )


def get_search_client(
    settings: Settings = Depends(get_settings),
) -> UpstreamSearchClient:
    return UpstreamSearchClient(get_http_client(settings), domain=settings.upstream_domain)


async def get_preference_cache(
    settings: Settings = Depends(get_settings),
) -> PreferenceCache:
    client = await get_redis_client(settings)
    return PreferenceCache(client, ttl_seconds=settings.preference_cache_ttl)


def get_user_id(
    x_user_id: Annotated[str | None, Header(description="Authenticated user id")] = None,
) -> str | None:
    """User id resolved by the auth gateway; None for guests."""
    if x_user_id and x_user_id.strip():
        return x_user_id.strip()
    return None


def get_bootstrapper(
    stores: Stores = Depends(get_stores),
    search_client: UpstreamSearchClient = Depends(get_search_client),
    settings: Settings = Depends(get_settings),
) -> CatalogBootstrapper:
    return CatalogBootstrapper(
        stores.catalog,
        search_client,
        min_items=settings.catalog_min_items,
        max_refreshes=settings.max_refreshes_per_request,
    )


def get_feed_service(
    stores: Stores = Depends(get_stores),
    bootstrapper: CatalogBootstrapper = Depends(get_bootstrapper),
    cache: PreferenceCache = Depends(get_preference_cache),
    settings: Settings = Depends(get_settings),
) -> FeedService:
    return FeedService(
        bootstrapper=bootstrapper,
        candidate_pool=CandidatePool(
            stores.catalog, stores.preferences, limit=settings.candidate_pool_limit
        ),
        resolver=PreferenceResolver(stores.preferences, cache),
        composers=build_composers(settings),
        default_strategy=settings.feed_composer,
        default_size=settings.feed_size,
    )
