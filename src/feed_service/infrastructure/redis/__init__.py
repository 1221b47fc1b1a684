"""Redis-backed preference cache with graceful degradation."""

import orjson
import redis.asyncio as aioredis
import structlog

from feed_service.config import Settings, get_settings
from feed_service.domain import ResolvedPreferences

logger = structlog.get_logger()

_redis_client: aioredis.Redis | None = None
_redis_unavailable = False


async def get_redis_client(settings: Settings | None = None) -> aioredis.Redis | None:
    """Get or create the global async Redis client.

    A failed connection attempt disables caching for the rest of the
    process lifetime.
    """
    global _redis_client, _redis_unavailable
    settings = settings or get_settings()
    if not settings.redis_enabled or _redis_unavailable:
        return None
    if _redis_client is None:
        try:
            client = aioredis.from_url(
                settings.redis_url,
                decode_responses=False,
                socket_connect_timeout=2,
                socket_timeout=2,
            )
            await client.ping()
            _redis_client = client
            logger.info("Redis connection established")
        except Exception as e:
            logger.warning("Redis unavailable, preference caching disabled", error=str(e))
            _redis_unavailable = True
    return _redis_client


async def close_redis() -> None:
    """Close the Redis connection on shutdown."""
    global _redis_client
    if _redis_client:
        await _redis_client.aclose()
        _redis_client = None


class PreferenceCache:
    """Caches a user's resolved preference maps. No-ops without a client."""

    KEY_PREFIX = "feed_prefs"

    def __init__(self, client: aioredis.Redis | None, ttl_seconds: int = 60):
        self.client = client
        self.ttl_seconds = ttl_seconds

    def _key(self, user_id: str) -> str:
        return f"{self.KEY_PREFIX}:{user_id}"

    async def get(self, user_id: str) -> ResolvedPreferences | None:
        if not self.client:
            return None
        try:
            data = await self.client.get(self._key(user_id))
            if data:
                return ResolvedPreferences.from_dict(orjson.loads(data))
        except Exception as e:
            logger.warning("Preference cache read failed", user_id=user_id, error=str(e))
        return None

    async def set(self, user_id: str, preferences: ResolvedPreferences) -> None:
        if not self.client:
            return
        try:
            await self.client.set(
                self._key(user_id),
                orjson.dumps(preferences.to_dict()),
                ex=self.ttl_seconds,
            )
        except Exception as e:
            logger.warning("Preference cache write failed", user_id=user_id, error=str(e))

    async def invalidate(self, user_id: str) -> None:
        if not self.client:
            return
        try:
            await self.client.delete(self._key(user_id))
        except Exception as e:
            logger.warning("Preference cache invalidation failed", user_id=user_id, error=str(e))

    async def health_check(self) -> bool:
        if not self.client:
            return False
        try:
            return bool(await self.client.ping())
        except Exception:
            return False
