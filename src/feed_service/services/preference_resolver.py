"""Resolves per-category weights and like/dislike stats for a request."""

from typing import Any

import orjson
import structlog

from feed_service.domain import CategoryStats, ResolvedPreferences
from feed_service.infrastructure.redis import PreferenceCache
from feed_service.stores.preferences import PreferenceStore
from shared import constants

logger = structlog.get_logger()


class PreferenceResolver:
    """Builds preference maps from the user's stored records or a guest blob."""

    def __init__(
        self,
        store: PreferenceStore | None = None,
        cache: PreferenceCache | None = None,
    ):
        self.store = store
        self.cache = cache

    async def resolve(
        self, user_id: str | None, guest_preferences: str | None = None
    ) -> ResolvedPreferences:
        """
        Resolve preferences for one request.

        Authenticated users are read from the store (through the cache when
        configured); the guest blob is ignored for them. Guests are parsed
        from the blob. Any failure yields empty maps, which callers treat as
        "all categories at default weight with no observations".
        """
        if user_id:
            return await self._resolve_user(user_id)
        return parse_guest_preferences(guest_preferences)

    async def _resolve_user(self, user_id: str) -> ResolvedPreferences:
        if self.cache:
            cached = await self.cache.get(user_id)
            if cached is not None:
                return cached

        if self.store is None:
            return ResolvedPreferences()

        try:
            weights = await self.store.get_weights(user_id)
            stats = await self.store.get_stats(user_id)
        except Exception as e:
            logger.warning(
                "Preference read failed, using defaults", user_id=user_id, error=str(e)
            )
            return ResolvedPreferences()

        preferences = ResolvedPreferences(weights=weights, stats=stats)
        if self.cache:
            await self.cache.set(user_id, preferences)
        return preferences


def parse_guest_preferences(blob: str | None) -> ResolvedPreferences:
    """Parse guest-supplied preferences.

    Accepts ``{"tech": 5.0}`` or ``{"tech": {"score": 5.0, "likes": 3,
    "dislikes": 1}}``. Invalid entries are dropped individually; invalid
    JSON yields empty maps. Counts must be integers and are capped at
    ``MAX_GUEST_COUNT``.
    """
    if not blob:
        return ResolvedPreferences()

    try:
        data = orjson.loads(blob)
    except orjson.JSONDecodeError:
        logger.debug("Ignoring malformed guest preferences")
        return ResolvedPreferences()

    if not isinstance(data, dict):
        return ResolvedPreferences()

    preferences = ResolvedPreferences()
    for category, value in data.items():
        if isinstance(value, dict):
            weight = _non_negative(value.get("score"), float)
            likes = _guest_count(value.get("likes"))
            dislikes = _guest_count(value.get("dislikes"))
            if weight is not None:
                preferences.weights[category] = weight
            if likes is not None or dislikes is not None:
                preferences.stats[category] = CategoryStats(
                    likes=likes or 0, dislikes=dislikes or 0
                )
        else:
            weight = _non_negative(value, float)
            if weight is not None:
                preferences.weights[category] = weight

    return preferences


def _non_negative(value: Any, cast: type) -> Any:
    # bool is an int subclass; true/false are not weights
    if isinstance(value, bool) or not isinstance(value, (int, float)):
        return None
    if value < 0 or value != value:
        return None
    return cast(value)


def _guest_count(value: Any) -> int | None:
    if isinstance(value, bool) or not isinstance(value, int) or value < 0:
        return None
    return min(value, constants.MAX_GUEST_COUNT)
