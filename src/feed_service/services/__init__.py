"""Business logic services."""

from feed_service.services.candidate_pool import CandidatePool, CatalogUnavailableError
from feed_service.services.catalog_bootstrap import BootstrapReport, CatalogBootstrapper
from feed_service.services.feed import FeedRequest, FeedResult, FeedService
from feed_service.services.feed_composer import Composer, ThompsonSamplingComposer
from feed_service.services.preference_resolver import PreferenceResolver
from feed_service.services.score_and_spread import ScoreAndSpreadComposer

__all__ = [
    "BootstrapReport",
    "CandidatePool",
    "CatalogBootstrapper",
    "CatalogUnavailableError",
    "Composer",
    "FeedRequest",
    "FeedResult",
    "FeedService",
    "PreferenceResolver",
    "ScoreAndSpreadComposer",
    "ThompsonSamplingComposer",
]
