"""Preference, rejection and wishlist endpoints for signed-in users."""

from typing import Annotated

import structlog
from fastapi import APIRouter, Depends, HTTPException, Query
from pydantic import BaseModel, Field, field_validator, model_validator

from feed_service.api.deps import Stores, get_preference_cache, get_stores, get_user_id
from feed_service.api.v1.products import ProductOut
from feed_service.infrastructure.redis import PreferenceCache
from shared import constants
from shared.categories import CATEGORY_IDS

logger = structlog.get_logger()

router = APIRouter()


class PreferenceUpdate(BaseModel):
    """Either a swipe action or an explicit weight for one category."""

    category: str
    action: str | None = None
    score: float | None = Field(default=None, ge=0)

    @field_validator("action")
    @classmethod
    def validate_action(cls, v: str | None) -> str | None:
        if v is not None and v not in constants.FEEDBACK_ACTIONS:
            allowed = ", ".join(constants.FEEDBACK_ACTIONS)
            raise ValueError(f"action must be one of: {allowed}")
        return v

    @model_validator(mode="after")
    def require_action_or_score(self) -> "PreferenceUpdate":
        if self.action is None and self.score is None:
            raise ValueError("Provide an action or a score")
        return self


class RejectionCreate(BaseModel):
    item_id: str = Field(..., min_length=1)


class SuccessResponse(BaseModel):
    success: bool = True


class WishlistSaved(SuccessResponse):
    item: ProductOut


def require_user(user_id: str | None = Depends(get_user_id)) -> str:
    if not user_id:
        raise HTTPException(status_code=401, detail="Unauthorized")
    return user_id


@router.post("/preferences", response_model=SuccessResponse)
async def update_preference(
    body: PreferenceUpdate,
    user_id: str = Depends(require_user),
    stores: Stores = Depends(get_stores),
    cache: PreferenceCache = Depends(get_preference_cache),
) -> SuccessResponse:
    """
    Record a like/dislike or set the explicit weight for a category.

    Likes and dislikes feed the Thompson Sampling posteriors; the explicit
    score drives the weighted-scoring composer.
    """
    if body.category not in CATEGORY_IDS:
        raise HTTPException(status_code=400, detail=f"Unknown category: {body.category}")

    try:
        if body.action is not None:
            await stores.preferences.record_feedback(user_id, body.category, body.action)
        if body.score is not None:
            await stores.preferences.set_weight(user_id, body.category, body.score)
    except Exception as e:
        logger.error("Failed to store preference", user_id=user_id, error=str(e))
        raise HTTPException(status_code=500, detail="Database Error")

    await cache.invalidate(user_id)
    return SuccessResponse()


@router.post("/rejections", response_model=SuccessResponse)
async def reject_item(
    body: RejectionCreate,
    user_id: str = Depends(require_user),
    stores: Stores = Depends(get_stores),
) -> SuccessResponse:
    """Remember that the user passed on an item so it leaves their feed."""
    try:
        await stores.preferences.add_rejection(user_id, body.item_id)
    except Exception as e:
        logger.error("Failed to store rejection", user_id=user_id, error=str(e))
        raise HTTPException(status_code=500, detail="Database Error")
    return SuccessResponse()


@router.delete("/rejections/{item_id}", response_model=SuccessResponse)
async def undo_rejection(
    item_id: str,
    user_id: str = Depends(require_user),
    stores: Stores = Depends(get_stores),
) -> SuccessResponse:
    """Undo a pass; the item becomes eligible for the feed again."""
    try:
        removed = await stores.preferences.remove_rejection(user_id, item_id)
    except Exception as e:
        logger.error("Failed to remove rejection", user_id=user_id, error=str(e))
        raise HTTPException(status_code=500, detail="Database Error")

    if not removed:
        raise HTTPException(status_code=404, detail="Rejection not found")
    return SuccessResponse()


@router.get("/wishlist", response_model=list[ProductOut])
async def list_wishlist(
    user_id: str = Depends(require_user),
    stores: Stores = Depends(get_stores),
) -> list[ProductOut]:
    """Saved items, most recent first."""
    try:
        items = await stores.preferences.list_wishlist(user_id)
    except Exception as e:
        logger.error("Failed to fetch wishlist", user_id=user_id, error=str(e))
        raise HTTPException(status_code=500, detail="Database Error")
    return [ProductOut.from_item(item) for item in items]


@router.post("/wishlist", response_model=WishlistSaved)
async def save_wishlist_item(
    body: ProductOut,
    user_id: str = Depends(require_user),
    stores: Stores = Depends(get_stores),
) -> WishlistSaved:
    """
    Save an item to the wishlist.

    The product is stored as sent, so the saved entry survives catalog
    refreshes. Saving an item again keeps the original snapshot. Saved
    items no longer appear in the feed.
    """
    try:
        await stores.preferences.add_wishlist_item(user_id, body.to_item())
    except Exception as e:
        logger.error("Failed to save wishlist item", user_id=user_id, error=str(e))
        raise HTTPException(status_code=500, detail="Database Error")
    return WishlistSaved(item=body)


@router.delete("/wishlist", response_model=SuccessResponse)
async def clear_wishlist(
    clear: Annotated[bool, Query(description="Must be true to remove every item")] = False,
    user_id: str = Depends(require_user),
    stores: Stores = Depends(get_stores),
) -> SuccessResponse:
    """Remove every saved item."""
    if not clear:
        raise HTTPException(status_code=400, detail="Missing ID or clear flag")

    try:
        removed = await stores.preferences.clear_wishlist(user_id)
    except Exception as e:
        logger.error("Failed to clear wishlist", user_id=user_id, error=str(e))
        raise HTTPException(status_code=500, detail="Database Error")

    logger.info("Cleared wishlist", user_id=user_id, removed=removed)
    return SuccessResponse()


@router.delete("/wishlist/{item_id}", response_model=SuccessResponse)
async def remove_wishlist_item(
    item_id: str,
    user_id: str = Depends(require_user),
    stores: Stores = Depends(get_stores),
) -> SuccessResponse:
    """Remove one saved item; it becomes eligible for the feed again."""
    try:
        removed = await stores.preferences.remove_wishlist_item(user_id, item_id)
    except Exception as e:
        logger.error("Failed to remove wishlist item", user_id=user_id, error=str(e))
        raise HTTPException(status_code=500, detail="Database Error")

    if not removed:
        raise HTTPException(status_code=404, detail="Wishlist item not found")
    return SuccessResponse()
