"""Catalog and preference storage."""

from feed_service.stores.catalog import (
    CatalogStore,
    InMemoryCatalogStore,
    SqlCatalogStore,
)
from feed_service.stores.preferences import (
    InMemoryPreferenceStore,
    PreferenceStore,
    SqlPreferenceStore,
)

__all__ = [
    "CatalogStore",
    "InMemoryCatalogStore",
    "SqlCatalogStore",
    "PreferenceStore",
    "InMemoryPreferenceStore",
    "SqlPreferenceStore",
]
