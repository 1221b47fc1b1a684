"""Thompson Sampling feed composer.

Builds a feed slot by slot. For each slot one category is chosen, and the
best remaining item of that category is placed:

* categories that appear ``cap_max_repeats`` times in the last
  ``cap_window`` slots are capped for the slot, as is the category placed in
  the previous slot;
* every ``discovery_interval``-th slot picks uniformly among the eligible
  categories;
* all other slots draw ``Beta(likes + 1, dislikes + 1)`` per eligible
  category and take the highest draw.

When no eligible category has items left the cap is relaxed first; the
previous category is reused only when it is the last one with items.
"""

from collections import Counter, deque
from typing import Protocol

import numpy as np
import structlog

from feed_service.domain import CategoryStats, Item, ResolvedPreferences
from feed_service.services.sampling import BetaSampler, sample_beta_numpy
from shared import constants

logger = structlog.get_logger()


class Composer(Protocol):
    """Orders a candidate pool into a feed."""

    name: str

    def compose(
        self,
        items: list[Item],
        preferences: ResolvedPreferences,
        size: int,
        rng: np.random.Generator | None = None,
    ) -> list[Item]: ...


def build_buckets(
    items: list[Item], rng: np.random.Generator
) -> dict[str, deque[Item]]:
    """Group items by category, best rated first with random jitter.

    Bucket order follows the first appearance of each category in ``items``.
    """
    grouped: dict[str, list[tuple[float, Item]]] = {}
    jitter = rng.random(len(items))
    for item, noise in zip(items, jitter):
        grouped.setdefault(item.category, []).append((item.rating + float(noise), item))

    return {
        category: deque(item for _, item in sorted(entries, key=lambda e: e[0], reverse=True))
        for category, entries in grouped.items()
    }


class ThompsonSamplingComposer:
    """Category-level bandit over Beta click-through posteriors."""

    name = "thompson"

    def __init__(
        self,
        discovery_interval: int = constants.DISCOVERY_INTERVAL,
        cap_window: int = constants.CAP_WINDOW,
        cap_max_repeats: int = constants.CAP_MAX_REPEATS,
        beta_sampler: BetaSampler = sample_beta_numpy,
    ):
        self.discovery_interval = discovery_interval
        self.cap_window = cap_window
        self.cap_max_repeats = cap_max_repeats
        self.beta_sampler = beta_sampler

    def compose(
        self,
        items: list[Item],
        preferences: ResolvedPreferences,
        size: int,
        rng: np.random.Generator | None = None,
    ) -> list[Item]:
        """
        Build a feed of at most ``size`` items.

        Args:
            items: Candidate pool (already filtered)
            preferences: Like/dislike stats per category
            size: Target feed length
            rng: Random generator; a fresh one per call when omitted

        Returns:
            Ordered feed, shorter than ``size`` if the pool runs out
        """
        rng = rng if rng is not None else np.random.default_rng()
        buckets = build_buckets(items, rng)
        feed: list[Item] = []

        for slot in range(size):
            available = [c for c, bucket in buckets.items() if bucket]
            if not available:
                break

            category = self.select_category(
                available,
                recent=[item.category for item in feed[-self.cap_window:]],
                stats=preferences.stats,
                discovery=self.is_discovery_slot(slot),
                rng=rng,
            )
            feed.append(buckets[category].popleft())

        logger.debug("Composed Thompson feed", size=len(feed), candidates=len(items))
        return feed

    def is_discovery_slot(self, slot: int) -> bool:
        return self.discovery_interval > 0 and slot % self.discovery_interval == 0

    def capped_categories(self, recent: list[str]) -> set[str]:
        """Categories at or over the repeat cap within the recent window."""
        counts = Counter(recent[-self.cap_window:])
        return {c for c, n in counts.items() if n >= self.cap_max_repeats}

    def select_category(
        self,
        available: list[str],
        recent: list[str],
        stats: dict[str, CategoryStats],
        discovery: bool,
        rng: np.random.Generator,
    ) -> str:
        """Pick the category for the next slot. ``available`` must be non-empty."""
        capped = self.capped_categories(recent)
        previous = recent[-1] if recent else None

        eligible = [c for c in available if c not in capped and c != previous]
        if discovery and eligible:
            return eligible[int(rng.integers(len(eligible)))]

        if not eligible:
            eligible = [c for c in available if c != previous] or available
        return self.thompson_choice(eligible, stats, rng)

    def thompson_choice(
        self,
        categories: list[str],
        stats: dict[str, CategoryStats],
        rng: np.random.Generator,
    ) -> str:
        """Category with the highest Beta posterior draw; first wins ties."""
        best_category = categories[0]
        best_sample = -1.0
        for category in categories:
            s = stats.get(category) or CategoryStats()
            sample = self.beta_sampler(s.likes + 1, s.dislikes + 1, rng)
            if sample > best_sample:
                best_category, best_sample = category, sample
        return best_category
