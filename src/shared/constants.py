"""Shared constants across the application."""

# Catalog bootstrap
CATALOG_MIN_ITEMS = 50  # below this a category is stale
MAX_REFRESHES_PER_REQUEST = 3
UPSTREAM_MAX_PAGE = 3

# Candidate pool
CANDIDATE_POOL_LIMIT = 500
DEFAULT_MIN_PRICE = 0.0
DEFAULT_MAX_PRICE = 10000.0
DEFAULT_MIN_REVIEWS = 0
DEFAULT_MIN_RATING = 0.0
DEFAULT_MAX_RATING = 5.0

# Feed composition
DEFAULT_FEED_SIZE = 50
MAX_FEED_SIZE = 200
DISCOVERY_INTERVAL = 5  # every 5th slot is a discovery slot
CAP_WINDOW = 4
CAP_MAX_REPEATS = 2
SPREAD_LOOKAHEAD = 20

# Preference defaults
DEFAULT_CATEGORY_WEIGHT = 1.0
MAX_GUEST_COUNT = 10_000  # cap on guest-supplied like/dislike counts

# Feedback actions
FEEDBACK_ACTIONS = ("like", "dislike")
