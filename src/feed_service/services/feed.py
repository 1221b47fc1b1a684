"""Feed service: one request from bootstrap to ordered items."""

from dataclasses import dataclass, field
from typing import Literal

import numpy as np
import structlog

from feed_service.config import Settings
from feed_service.domain import FeedFilters, Item
from feed_service.services.candidate_pool import CandidatePool
from feed_service.services.catalog_bootstrap import BootstrapReport, CatalogBootstrapper
from feed_service.services.feed_composer import Composer, ThompsonSamplingComposer
from feed_service.services.preference_resolver import PreferenceResolver
from feed_service.services.sampling import get_beta_sampler
from feed_service.services.score_and_spread import ScoreAndSpreadComposer

logger = structlog.get_logger()

Strategy = Literal["thompson", "spread"]


def build_composers(settings: Settings) -> dict[str, Composer]:
    """Instantiate every composition strategy from settings."""
    return {
        "thompson": ThompsonSamplingComposer(
            discovery_interval=settings.discovery_interval,
            cap_window=settings.cap_window,
            cap_max_repeats=settings.cap_max_repeats,
            beta_sampler=get_beta_sampler(settings.beta_sampler),
        ),
        "spread": ScoreAndSpreadComposer(lookahead=settings.spread_lookahead),
    }


@dataclass
class FeedRequest:
    """Caller-supplied parameters for one feed build."""

    filters: FeedFilters = field(default_factory=FeedFilters)
    user_id: str | None = None
    guest_preferences: str | None = None
    guest_exclude_ids: str | None = None
    refresh_category: str | None = None
    strategy: Strategy | None = None
    size: int | None = None


@dataclass
class FeedResult:
    items: list[Item]
    strategy: str
    candidates: int
    bootstrap: BootstrapReport


class FeedService:
    """Bootstrap → candidates → preferences → composer."""

    def __init__(
        self,
        bootstrapper: CatalogBootstrapper,
        candidate_pool: CandidatePool,
        resolver: PreferenceResolver,
        composers: dict[str, Composer],
        default_strategy: Strategy = "thompson",
        default_size: int = 50,
    ):
        self.bootstrapper = bootstrapper
        self.candidate_pool = candidate_pool
        self.resolver = resolver
        self.composers = composers
        self.default_strategy = default_strategy
        self.default_size = default_size

    async def build_feed(
        self, request: FeedRequest, rng: np.random.Generator | None = None
    ) -> FeedResult:
        """
        Build one feed.

        Raises:
            CatalogUnavailableError: if the candidate query fails. Upstream
                and preference failures are absorbed.
        """
        rng = rng if rng is not None else np.random.default_rng()
        strategy = request.strategy or self.default_strategy
        composer = self.composers[strategy]
        size = request.size or self.default_size

        report = await self.bootstrapper.ensure_populated(
            force_category=request.refresh_category, rng=rng
        )

        exclude_ids = await self.candidate_pool.resolve_exclusions(
            request.user_id, request.guest_exclude_ids
        )
        candidates = await self.candidate_pool.fetch(request.filters, exclude_ids)
        if not candidates:
            logger.info("No candidates match filters", user_id=request.user_id)
            return FeedResult(items=[], strategy=strategy, candidates=0, bootstrap=report)

        preferences = await self.resolver.resolve(
            request.user_id, request.guest_preferences
        )
        items = composer.compose(candidates, preferences, size, rng)

        logger.info(
            "Feed built",
            user_id=request.user_id,
            strategy=strategy,
            candidates=len(candidates),
            returned=len(items),
        )
        return FeedResult(
            items=items, strategy=strategy, candidates=len(candidates), bootstrap=report
        )
