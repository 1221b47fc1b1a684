"""Core value types shared by the stores, the upstream client and the composers."""

from dataclasses import asdict, dataclass, field
from typing import Any

from shared import constants


@dataclass(frozen=True)
class Item:
    """A catalog product as stored and served in the feed."""

    id: str
    title: str
    price: float
    category: str
    currency: str = "USD"
    image_url: str | None = None
    link: str | None = None
    is_best_seller: bool = False
    rating: float = 0.0
    reviews: int = 0

    def to_dict(self) -> dict[str, Any]:
        return asdict(self)


@dataclass(frozen=True)
class FeedFilters:
    """Hard filters every candidate must satisfy."""

    min_price: float = constants.DEFAULT_MIN_PRICE
    max_price: float = constants.DEFAULT_MAX_PRICE
    min_reviews: int = constants.DEFAULT_MIN_REVIEWS
    min_rating: float = constants.DEFAULT_MIN_RATING
    max_rating: float = constants.DEFAULT_MAX_RATING

    def matches(self, item: Item) -> bool:
        return (
            self.min_price <= item.price <= self.max_price
            and item.reviews >= self.min_reviews
            and self.min_rating <= item.rating <= self.max_rating
        )


@dataclass
class CategoryStats:
    """Observed like/dislike counts for one category."""

    likes: int = 0
    dislikes: int = 0


@dataclass
class ResolvedPreferences:
    """Per-category weights and like/dislike stats for one request."""

    weights: dict[str, float] = field(default_factory=dict)
    stats: dict[str, CategoryStats] = field(default_factory=dict)

    def weight_for(self, category: str) -> float:
        return self.weights.get(category, constants.DEFAULT_CATEGORY_WEIGHT)

    def to_dict(self) -> dict[str, Any]:
        return {
            "weights": self.weights,
            "stats": {k: asdict(v) for k, v in self.stats.items()},
        }

    @classmethod
    def from_dict(cls, data: dict[str, Any]) -> "ResolvedPreferences":
        return cls(
            weights={k: float(v) for k, v in data.get("weights", {}).items()},
            stats={
                k: CategoryStats(likes=int(v["likes"]), dislikes=int(v["dislikes"]))
                for k, v in data.get("stats", {}).items()
            },
        )
