"""Per-user preference, rejection and wishlist storage."""

from collections import defaultdict
from typing import Protocol

import structlog
from sqlalchemy import text
from sqlalchemy.ext.asyncio import AsyncSession

from feed_service.domain import CategoryStats, Item
from shared.constants import DEFAULT_CATEGORY_WEIGHT

logger = structlog.get_logger()


class PreferenceStore(Protocol):
    """Per-(user, category) weights and like/dislike counters."""

    async def get_weights(self, user_id: str) -> dict[str, float]: ...

    async def get_stats(self, user_id: str) -> dict[str, CategoryStats]: ...

    async def get_excluded_ids(self, user_id: str) -> set[str]: ...

    async def record_feedback(self, user_id: str, category: str, action: str) -> None: ...

    async def set_weight(self, user_id: str, category: str, weight: float) -> None: ...

    async def add_rejection(self, user_id: str, item_id: str) -> None: ...

    async def remove_rejection(self, user_id: str, item_id: str) -> bool: ...

    async def list_wishlist(self, user_id: str) -> list[Item]: ...

    async def add_wishlist_item(self, user_id: str, item: Item) -> None: ...

    async def remove_wishlist_item(self, user_id: str, item_id: str) -> bool: ...

    async def clear_wishlist(self, user_id: str) -> int: ...


class SqlPreferenceStore:
    """Preference store backed by the feed schema tables."""

    def __init__(self, session: AsyncSession):
        self.session = session

    async def get_weights(self, user_id: str) -> dict[str, float]:
        query = text("""
            SELECT category, score
            FROM feed.category_scores
            WHERE user_id = :user_id
        """)
        result = await self.session.execute(query, {"user_id": user_id})
        return {row.category: float(row.score) for row in result.fetchall()}

    async def get_stats(self, user_id: str) -> dict[str, CategoryStats]:
        query = text("""
            SELECT category, likes, dislikes
            FROM feed.category_scores
            WHERE user_id = :user_id
        """)
        result = await self.session.execute(query, {"user_id": user_id})
        return {
            row.category: CategoryStats(likes=row.likes, dislikes=row.dislikes)
            for row in result.fetchall()
        }

    async def get_excluded_ids(self, user_id: str) -> set[str]:
        """Rejected and wishlisted product ids for the user."""
        query = text("""
            SELECT product_id FROM feed.rejections WHERE user_id = :user_id
            UNION
            SELECT product_id FROM feed.wishlist_items WHERE user_id = :user_id
        """)
        result = await self.session.execute(query, {"user_id": user_id})
        return {row.product_id for row in result.fetchall()}

    async def record_feedback(self, user_id: str, category: str, action: str) -> None:
        """Increment the like or dislike counter, creating the row on first use."""
        likes = 1 if action == "like" else 0
        dislikes = 1 if action == "dislike" else 0
        query = text("""
            INSERT INTO feed.category_scores
            (user_id, category, score, likes, dislikes, updated_at)
            VALUES (:user_id, :category, :score, :likes, :dislikes, NOW())
            ON CONFLICT (user_id, category) DO UPDATE SET
                likes = feed.category_scores.likes + :likes,
                dislikes = feed.category_scores.dislikes + :dislikes,
                updated_at = NOW()
        """)
        await self.session.execute(
            query,
            {
                "user_id": user_id,
                "category": category,
                "score": DEFAULT_CATEGORY_WEIGHT,
                "likes": likes,
                "dislikes": dislikes,
            },
        )
        await self.session.commit()

    async def set_weight(self, user_id: str, category: str, weight: float) -> None:
        query = text("""
            INSERT INTO feed.category_scores
            (user_id, category, score, likes, dislikes, updated_at)
            VALUES (:user_id, :category, :score, 0, 0, NOW())
            ON CONFLICT (user_id, category) DO UPDATE SET
                score = :score,
                updated_at = NOW()
        """)
        await self.session.execute(
            query, {"user_id": user_id, "category": category, "score": weight}
        )
        await self.session.commit()

    async def add_rejection(self, user_id: str, item_id: str) -> None:
        query = text("""
            INSERT INTO feed.rejections (user_id, product_id, created_at)
            VALUES (:user_id, :product_id, NOW())
            ON CONFLICT (user_id, product_id) DO NOTHING
        """)
        await self.session.execute(query, {"user_id": user_id, "product_id": item_id})
        await self.session.commit()

    async def remove_rejection(self, user_id: str, item_id: str) -> bool:
        query = text("""
            DELETE FROM feed.rejections
            WHERE user_id = :user_id AND product_id = :product_id
        """)
        result = await self.session.execute(
            query, {"user_id": user_id, "product_id": item_id}
        )
        await self.session.commit()
        return (result.rowcount or 0) > 0

    async def list_wishlist(self, user_id: str) -> list[Item]:
        """Saved product snapshots, most recently saved first."""
        query = text("""
            SELECT product_id, title, price, currency, image_url, link, category,
                   is_best_seller, rating, reviews
            FROM feed.wishlist_items
            WHERE user_id = :user_id
            ORDER BY created_at DESC, id DESC
        """)
        result = await self.session.execute(query, {"user_id": user_id})
        return [
            Item(
                id=row.product_id,
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

    async def add_wishlist_item(self, user_id: str, item: Item) -> None:
        """Save a product snapshot; saving the same product twice keeps the first."""
        query = text("""
            INSERT INTO feed.wishlist_items
            (user_id, product_id, title, price, currency, image_url, link,
             category, is_best_seller, rating, reviews, created_at)
            VALUES
            (:user_id, :product_id, :title, :price, :currency, :image_url, :link,
             :category, :is_best_seller, :rating, :reviews, NOW())
            ON CONFLICT (user_id, product_id) DO NOTHING
        """)
        params = item.to_dict()
        params["product_id"] = params.pop("id")
        params["user_id"] = user_id
        await self.session.execute(query, params)
        await self.session.commit()

    async def remove_wishlist_item(self, user_id: str, item_id: str) -> bool:
        query = text("""
            DELETE FROM feed.wishlist_items
            WHERE user_id = :user_id AND product_id = :product_id
        """)
        result = await self.session.execute(
            query, {"user_id": user_id, "product_id": item_id}
        )
        await self.session.commit()
        return (result.rowcount or 0) > 0

    async def clear_wishlist(self, user_id: str) -> int:
        query = text("DELETE FROM feed.wishlist_items WHERE user_id = :user_id")
        result = await self.session.execute(query, {"user_id": user_id})
        await self.session.commit()
        return result.rowcount or 0


class InMemoryPreferenceStore:
    """Dict-backed preference store for local development and tests."""

    def __init__(self):
        self.weights: dict[str, dict[str, float]] = defaultdict(dict)
        self.stats: dict[str, dict[str, CategoryStats]] = defaultdict(dict)
        self.rejections: dict[str, set[str]] = defaultdict(set)
        # user id -> product id -> snapshot, in save order
        self.wishlist: dict[str, dict[str, Item]] = defaultdict(dict)

    async def get_weights(self, user_id: str) -> dict[str, float]:
        return dict(self.weights.get(user_id, {}))

    async def get_stats(self, user_id: str) -> dict[str, CategoryStats]:
        return {
            category: CategoryStats(s.likes, s.dislikes)
            for category, s in self.stats.get(user_id, {}).items()
        }

    async def get_excluded_ids(self, user_id: str) -> set[str]:
        return set(self.rejections.get(user_id, set())) | set(
            self.wishlist.get(user_id, {})
        )

    async def record_feedback(self, user_id: str, category: str, action: str) -> None:
        self.weights[user_id].setdefault(category, DEFAULT_CATEGORY_WEIGHT)
        stats = self.stats[user_id].setdefault(category, CategoryStats())
        if action == "like":
            stats.likes += 1
        elif action == "dislike":
            stats.dislikes += 1

    async def set_weight(self, user_id: str, category: str, weight: float) -> None:
        self.weights[user_id][category] = weight
        self.stats[user_id].setdefault(category, CategoryStats())

    async def add_rejection(self, user_id: str, item_id: str) -> None:
        self.rejections[user_id].add(item_id)

    async def remove_rejection(self, user_id: str, item_id: str) -> bool:
        if item_id in self.rejections.get(user_id, set()):
            self.rejections[user_id].discard(item_id)
            return True
        return False

    async def list_wishlist(self, user_id: str) -> list[Item]:
        return list(reversed(self.wishlist.get(user_id, {}).values()))

    async def add_wishlist_item(self, user_id: str, item: Item) -> None:
        self.wishlist[user_id].setdefault(item.id, item)

    async def remove_wishlist_item(self, user_id: str, item_id: str) -> bool:
        return self.wishlist.get(user_id, {}).pop(item_id, None) is not None

    async def clear_wishlist(self, user_id: str) -> int:
        removed = len(self.wishlist.get(user_id, {}))
        self.wishlist.pop(user_id, None)
        return removed
