"""Product feed API endpoints."""

from typing import Annotated, Literal

import structlog
from fastapi import APIRouter, Depends, HTTPException, Query
from pydantic import BaseModel, ConfigDict
from pydantic.alias_generators import to_camel

from feed_service.api.deps import get_feed_service, get_user_id
from feed_service.domain import FeedFilters, Item
from feed_service.services.candidate_pool import CatalogUnavailableError
from feed_service.services.feed import FeedRequest, FeedService
from shared import constants
from shared.categories import CATEGORIES, CATEGORY_IDS

logger = structlog.get_logger()

router = APIRouter()


class ProductOut(BaseModel):
    """A feed item as returned to the swipe client."""

    model_config = ConfigDict(alias_generator=to_camel, populate_by_name=True)

    id: str
    title: str
    price: float
    currency: str
    image_url: str | None = None
    link: str | None = None
    category: str
    is_best_seller: bool = False
    rating: float = 0.0
    reviews: int = 0

    @classmethod
    def from_item(cls, item: Item) -> "ProductOut":
        return cls(**item.to_dict())

    def to_item(self) -> Item:
        return Item(**self.model_dump())


class CategoryOut(BaseModel):
    id: str
    label: str


@router.get("/products", response_model=list[ProductOut])
async def get_product_feed(
    min_price: Annotated[float, Query(alias="minPrice", ge=0)] = constants.DEFAULT_MIN_PRICE,
    max_price: Annotated[float, Query(alias="maxPrice", ge=0)] = constants.DEFAULT_MAX_PRICE,
    min_reviews: Annotated[int, Query(alias="minReviews", ge=0)] = constants.DEFAULT_MIN_REVIEWS,
    min_rating: Annotated[float, Query(alias="minRating", ge=0, le=5)] = constants.DEFAULT_MIN_RATING,
    max_rating: Annotated[float, Query(alias="maxRating", ge=0, le=5)] = constants.DEFAULT_MAX_RATING,
    preferences: Annotated[
        str | None, Query(description="Guest preference JSON, ignored for signed-in users")
    ] = None,
    exclude_ids: Annotated[
        str | None,
        Query(alias="excludeIds", description="Comma-separated ids to skip (guests only)"),
    ] = None,
    refresh_category: Annotated[
        str | None, Query(alias="refreshCategory", description="Force a catalog refresh")
    ] = None,
    strategy: Annotated[Literal["thompson", "spread"] | None, Query()] = None,
    limit: Annotated[int | None, Query(ge=1, le=constants.MAX_FEED_SIZE)] = None,
    user_id: str | None = Depends(get_user_id),
    service: FeedService = Depends(get_feed_service),
) -> list[ProductOut]:
    """
    Get a personalized product feed.

    **Algorithm:**
    1. Top up stale categories from the upstream search provider (bounded)
    2. Query candidates passing the price/review/rating filters, minus
       rejected and saved items
    3. Resolve category weights and like/dislike stats
    4. Compose the feed (Thompson Sampling or score-and-spread)

    An empty list means nothing matched the filters.
    """
    if min_price > max_price:
        raise HTTPException(status_code=422, detail="minPrice must not exceed maxPrice")
    if min_rating > max_rating:
        raise HTTPException(status_code=422, detail="minRating must not exceed maxRating")
    if refresh_category is not None and refresh_category not in CATEGORY_IDS:
        logger.debug("Ignoring unknown refresh category", category=refresh_category)
        refresh_category = None

    request = FeedRequest(
        filters=FeedFilters(
            min_price=min_price,
            max_price=max_price,
            min_reviews=min_reviews,
            min_rating=min_rating,
            max_rating=max_rating,
        ),
        user_id=user_id,
        guest_preferences=None if user_id else preferences,
        guest_exclude_ids=None if user_id else exclude_ids,
        refresh_category=refresh_category,
        strategy=strategy,
        size=limit,
    )

    try:
        result = await service.build_feed(request)
    except CatalogUnavailableError:
        raise HTTPException(
            status_code=503,
            detail="Product feed is temporarily unavailable",
        )

    return [ProductOut.from_item(item) for item in result.items]


@router.get("/categories", response_model=list[CategoryOut])
async def list_categories() -> list[CategoryOut]:
    """List the category taxonomy used for preferences and filtering."""
    return [CategoryOut(id=c.id, label=c.label) for c in CATEGORIES]
