"""Weighted random scoring followed by a category spread sort."""

import math

import numpy as np
import structlog

from feed_service.domain import Item, ResolvedPreferences
from shared import constants

logger = structlog.get_logger()


def effective_weight(weight: float) -> float:
    """Log-dampened preference weight: ln(weight + e)."""
    return math.log(max(weight, 0.0) + math.e)


def score_items(
    items: list[Item],
    preferences: ResolvedPreferences,
    rng: np.random.Generator,
) -> list[tuple[float, Item]]:
    """Score each item as effective_weight * (U[0,1) + 0.5), highest first."""
    noise = rng.random(len(items)) + 0.5
    scored = [
        (effective_weight(preferences.weight_for(item.category)) * float(n), item)
        for item, n in zip(items, noise)
    ]
    scored.sort(key=lambda pair: pair[0], reverse=True)
    return scored


def spread_sort(
    ranked: list[Item], lookahead: int = constants.SPREAD_LOOKAHEAD
) -> list[Item]:
    """Reorder a ranked list so neighbours differ in category where possible.

    At each step the first of the next ``lookahead`` items whose category
    differs from the last placed item is taken; if all of them share it, the
    top remaining item is taken anyway.
    """
    remaining = list(ranked)
    result: list[Item] = []
    last_category: str | None = None

    while remaining:
        pick = 0
        for i, item in enumerate(remaining[:lookahead]):
            if item.category != last_category:
                pick = i
                break
        item = remaining.pop(pick)
        result.append(item)
        last_category = item.category

    return result


class ScoreAndSpreadComposer:
    """Stateless composer: noisy preference scoring plus spread sort."""

    name = "spread"

    def __init__(self, lookahead: int = constants.SPREAD_LOOKAHEAD):
        self.lookahead = lookahead

    def compose(
        self,
        items: list[Item],
        preferences: ResolvedPreferences,
        size: int | None = None,
        rng: np.random.Generator | None = None,
    ) -> list[Item]:
        """Rank and spread the whole pool; truncate to ``size`` when given."""
        rng = rng if rng is not None else np.random.default_rng()
        ranked = [item for _, item in score_items(items, preferences, rng)]
        feed = spread_sort(ranked, self.lookahead)
        logger.debug("Composed spread feed", size=len(feed))
        return feed if size is None else feed[:size]
