"""Catalog store: the single source of truth for feed items."""

from typing import Protocol

import structlog
from sqlalchemy import bindparam, text
from sqlalchemy.ext.asyncio import AsyncSession

from feed_service.domain import FeedFilters, Item

logger = structlog.get_logger()


class CatalogStore(Protocol):
    """Persistent item table keyed by upstream id."""

    async def count(self, category: str) -> int: ...

    async def find(
        self, filters: FeedFilters, exclude_ids: set[str], limit: int
    ) -> list[Item]: ...

    async def bulk_insert_ignore_duplicates(self, items: list[Item]) -> int: ...

    async def clear(self) -> int: ...


class SqlCatalogStore:
    """Catalog backed by the feed.products table."""

    def __init__(self, session: AsyncSession):
        self.session = session

    async def count(self, category: str) -> int:
        query = text("SELECT COUNT(*) FROM feed.products WHERE category = :category")
        try:
            result = await self.session.execute(query, {"category": category})
        except Exception:
            # the session is shared by the whole request; callers may skip and continue
            await self.session.rollback()
            raise
        return result.scalar() or 0

    async def find(
        self, filters: FeedFilters, exclude_ids: set[str], limit: int
    ) -> list[Item]:
        """Fetch items passing the hard filters, newest first."""
        sql = """
            SELECT id, title, price, currency, image_url, link, category,
                   is_best_seller, rating, reviews
            FROM feed.products
            WHERE price BETWEEN :min_price AND :max_price
            AND reviews >= :min_reviews
            AND rating BETWEEN :min_rating AND :max_rating
        """
        params = {
            "min_price": filters.min_price,
            "max_price": filters.max_price,
            "min_reviews": filters.min_reviews,
            "min_rating": filters.min_rating,
            "max_rating": filters.max_rating,
            "limit": limit,
        }
        if exclude_ids:
            sql += " AND id NOT IN :exclude_ids"
            params["exclude_ids"] = list(exclude_ids)
        sql += " ORDER BY created_at DESC LIMIT :limit"

        query = text(sql)
        if exclude_ids:
            query = query.bindparams(bindparam("exclude_ids", expanding=True))

        result = await self.session.execute(query, params)
        return [
            Item(
                id=row.id,
                title=row.title,
                price=float(row.price),
                currency=row.currency,
                image_url=row.image_url,
                link=row.link,
                category=row.category,
                is_best_seller=bool(row.is_best_seller),
                rating=float(row.rating or 0.0),
                reviews=int(row.reviews or 0),
            )
            for row in result.fetchall()
        ]

    async def bulk_insert_ignore_duplicates(self, items: list[Item]) -> int:
        """Insert items, skipping ids that already exist. Returns rows inserted."""
        if not items:
            return 0

        query = text("""
            INSERT INTO feed.products
            (id, title, price, currency, image_url, link, category,
             is_best_seller, rating, reviews, created_at)
            VALUES
            (:id, :title, :price, :currency, :image_url, :link, :category,
             :is_best_seller, :rating, :reviews, NOW())
            ON CONFLICT (id) DO NOTHING
        """)
        try:
            result = await self.session.execute(
                query, [item.to_dict() for item in items]
            )
            await self.session.commit()
        except Exception:
            await self.session.rollback()
            raise

        inserted = max(result.rowcount or 0, 0)
        logger.debug("Inserted catalog items", offered=len(items), inserted=inserted)
        return inserted

    async def clear(self) -> int:
        result = await self.session.execute(text("DELETE FROM feed.products"))
        await self.session.commit()
        return result.rowcount or 0


class InMemoryCatalogStore:
    """Dict-backed catalog for local development and tests.

    Items keep their insertion order; ``find`` returns newest first to match
    the SQL store.
    """

    def __init__(self, items: list[Item] | None = None):
        self._items: dict[str, Item] = {}
        if items:
            for item in items:
                self._items.setdefault(item.id, item)

    async def count(self, category: str) -> int:
        return sum(1 for item in self._items.values() if item.category == category)

    async def find(
        self, filters: FeedFilters, exclude_ids: set[str], limit: int
    ) -> list[Item]:
        matches = [
            item
            for item in reversed(list(self._items.values()))
            if item.id not in exclude_ids and filters.matches(item)
        ]
        return matches[:limit]

    async def bulk_insert_ignore_duplicates(self, items: list[Item]) -> int:
        inserted = 0
        for item in items:
            if item.id not in self._items:
                self._items[item.id] = item
                inserted += 1
        return inserted

    async def clear(self) -> int:
        removed = len(self._items)
        self._items.clear()
        return removed
