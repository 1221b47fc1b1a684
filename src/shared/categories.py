"""Static category taxonomy used to bucket the catalog."""

from dataclasses import dataclass


@dataclass(frozen=True)
class Category:
    """A fixed taxonomy bucket with the upstream queries used to fill it."""

    id: str
    label: str
    queries: tuple[str, ...]


CATEGORIES: tuple[Category, ...] = (
    Category(
        "tech",
        "Tech & Gadgets",
        ("cool tech gadgets electronics", "innovative smart home gadgets", "funny office tech"),
    ),
    Category(
        "home",
        "Home & Living",
        ("unique home decor kitchen gadgets", "cozy aesthetic room decor", "smart kitchen appliances"),
    ),
    Category(
        "fashion",
        "Style & Accessories",
        ("trendy fashion accessories jewelry", "minimalist watches sunglasses", "unique leather goods"),
    ),
    Category(
        "wellness",
        "Self Care",
        ("wellness self care relaxation gifts", "spa gift sets meditation", "healthy lifestyle accessories"),
    ),
    Category(
        "hobbies",
        "Hobbies & Games",
        ("fun board games hobbies diy kits", "unique collectibles gaming gears", "outdoor adventure equipment"),
    ),
    Category(
        "workspace",
        "Workspace",
        ("aesthetic desk accessories office", "ergonomic workspace upgrades", "productivity tools and stationery"),
    ),
    Category(
        "outdoors",
        "Outdoors",
        ("camping gear outdoor essentials", "portable travel gadgets", "survival and exploration kits"),
    ),
    Category(
        "creative",
        "Creative",
        ("art supplies creative kits", "music gear instruments", "photography and vlog tools"),
    ),
    Category(
        "pets",
        "Pets",
        ("interesting pet gadgets toys", "high tech pet accessories", "unique pet lover gifts"),
    ),
)

CATEGORY_IDS: frozenset[str] = frozenset(c.id for c in CATEGORIES)

_BY_ID = {c.id: c for c in CATEGORIES}


def get_category(category_id: str) -> Category | None:
    """Look up a category by id."""
    return _BY_ID.get(category_id)
