"""Candidate pool: hard-filtered, exclusion-aware catalog query."""

import structlog

from feed_service.domain import FeedFilters, Item
from feed_service.stores.catalog import CatalogStore
from feed_service.stores.preferences import PreferenceStore
from shared import constants

logger = structlog.get_logger()


class CatalogUnavailableError(Exception):
    """The catalog could not be queried, so no feed can be built."""


def parse_exclude_ids(raw: str | None) -> set[str]:
    """Parse a comma-separated guest exclusion list, dropping blanks."""
    if not raw:
        return set()
    return {part.strip() for part in raw.split(",") if part.strip()}


class CandidatePool:
    """Fetches the items a feed may be built from."""

    def __init__(
        self,
        catalog: CatalogStore,
        preferences: PreferenceStore | None = None,
        limit: int = constants.CANDIDATE_POOL_LIMIT,
    ):
        self.catalog = catalog
        self.preferences = preferences
        self.limit = limit

    async def resolve_exclusions(
        self, user_id: str | None, guest_exclude_ids: str | None = None
    ) -> set[str]:
        """Rejected and saved ids for a user, or the guest's own list.

        A store failure for an authenticated user yields an empty set; the
        client also drops swiped items locally, so a stale feed is tolerable.
        """
        if not user_id:
            return parse_exclude_ids(guest_exclude_ids)
        if self.preferences is None:
            return set()
        try:
            return await self.preferences.get_excluded_ids(user_id)
        except Exception as e:
            logger.warning("Exclusion lookup failed", user_id=user_id, error=str(e))
            return set()

    async def fetch(self, filters: FeedFilters, exclude_ids: set[str]) -> list[Item]:
        """
        Query candidates satisfying ``filters`` and not in ``exclude_ids``.

        Returns:
            Up to ``limit`` items; an empty list when nothing matches

        Raises:
            CatalogUnavailableError: if the catalog query fails
        """
        try:
            items = await self.catalog.find(filters, exclude_ids, self.limit)
        except Exception as e:
            logger.error("Candidate query failed", error=str(e))
            raise CatalogUnavailableError("catalog temporarily unavailable") from e

        # every candidate must pass the hard filters and exclusions
        items = [i for i in items if i.id not in exclude_ids and filters.matches(i)]
        logger.debug("Candidate pool built", candidates=len(items), excluded=len(exclude_ids))
        return items[: self.limit]
