"""Catalog bootstrap service.

Keeps every category populated by lazily pulling listings from the upstream
search provider when a category's catalog falls below a floor.
"""

from dataclasses import dataclass, field
from typing import Protocol

import numpy as np
import structlog

from feed_service.domain import Item
from feed_service.infrastructure.upstream import UpstreamSearchError
from feed_service.stores.catalog import CatalogStore
from shared import constants
from shared.categories import CATEGORIES, Category

logger = structlog.get_logger()


class SearchClient(Protocol):
    async def search(self, query: str, page: int, category: str) -> list[Item]: ...


@dataclass
class BootstrapReport:
    """What one bootstrap pass did."""

    checked: list[str] = field(default_factory=list)
    refreshed: list[str] = field(default_factory=list)
    failed: list[str] = field(default_factory=list)
    fetched: int = 0
    inserted: int = 0

    @property
    def upstream_calls(self) -> int:
        return len(self.refreshed) + len(self.failed)

    def to_dict(self) -> dict:
        return {
            "checked": self.checked,
            "refreshed": self.refreshed,
            "failed": self.failed,
            "fetched": self.fetched,
            "inserted": self.inserted,
            "upstream_calls": self.upstream_calls,
        }


class CatalogBootstrapper:
    """Refreshes stale categories with a bounded number of upstream calls."""

    def __init__(
        self,
        catalog: CatalogStore,
        search_client: SearchClient,
        min_items: int = constants.CATALOG_MIN_ITEMS,
        max_refreshes: int = constants.MAX_REFRESHES_PER_REQUEST,
        categories: tuple[Category, ...] = CATEGORIES,
    ):
        self.catalog = catalog
        self.search_client = search_client
        self.min_items = min_items
        self.max_refreshes = max_refreshes
        self.categories = categories

    async def ensure_populated(
        self,
        force_category: str | None = None,
        rng: np.random.Generator | None = None,
    ) -> BootstrapReport:
        """
        Refresh stale categories for the current request.

        Categories are visited in random order. A category is stale when it
        holds fewer than ``min_items`` products or matches ``force_category``.
        Every attempted refresh counts toward ``max_refreshes``, successful
        or not, so worst-case upstream latency stays bounded.

        Args:
            force_category: Category id to refresh regardless of its count
            rng: Random generator for ordering, query and page choice

        Returns:
            Report of checked, refreshed and failed categories
        """
        rng = rng if rng is not None else np.random.default_rng()
        report = BootstrapReport()
        refreshes = 0

        order = rng.permutation(len(self.categories))
        for index in order:
            if refreshes >= self.max_refreshes:
                break

            category = self.categories[index]
            report.checked.append(category.id)

            try:
                count = await self.catalog.count(category.id)
            except Exception as e:
                logger.error(
                    "Catalog count failed, skipping category",
                    category=category.id,
                    error=str(e),
                )
                continue

            if count >= self.min_items and category.id != force_category:
                continue

            refreshes += 1
            await self._refresh_category(category, rng, report)

        if report.upstream_calls:
            logger.info("Catalog bootstrap finished", **report.to_dict())
        return report

    async def refresh_all(
        self,
        clear: bool = False,
        category_ids: list[str] | None = None,
        rng: np.random.Generator | None = None,
    ) -> BootstrapReport:
        """Refresh every category (or the given ones) ignoring staleness and the cap."""
        rng = rng if rng is not None else np.random.default_rng()
        report = BootstrapReport()

        if clear:
            removed = await self.catalog.clear()
            logger.info("Cleared catalog", removed=removed)

        for category in self.categories:
            if category_ids and category.id not in category_ids:
                continue
            report.checked.append(category.id)
            await self._refresh_category(category, rng, report)

        logger.info("Full catalog refresh finished", **report.to_dict())
        return report

    async def _refresh_category(
        self,
        category: Category,
        rng: np.random.Generator,
        report: BootstrapReport,
    ) -> None:
        """Fetch one page for a random query and store the results."""
        query = category.queries[int(rng.integers(len(category.queries)))]
        page = int(rng.integers(1, constants.UPSTREAM_MAX_PAGE + 1))
        logger.info("Refreshing category", category=category.id, query=query, page=page)

        try:
            items = await self.search_client.search(query, page, category.id)
        except UpstreamSearchError as e:
            logger.warning(
                "Upstream refresh failed", category=category.id, query=query, error=str(e)
            )
            report.failed.append(category.id)
            return

        if not items:
            logger.info("Upstream returned no items", category=category.id, query=query)
            report.refreshed.append(category.id)
            return

        try:
            inserted = await self.catalog.bulk_insert_ignore_duplicates(items)
        except Exception as e:
            logger.error(
                "Catalog insert failed", category=category.id, error=str(e)
            )
            report.failed.append(category.id)
            return

        report.refreshed.append(category.id)
        report.fetched += len(items)
        report.inserted += inserted
