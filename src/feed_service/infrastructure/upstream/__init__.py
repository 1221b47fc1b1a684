"""Upstream product search provider client."""

from typing import Any

import httpx
import structlog

from feed_service.config import Settings, get_settings
from feed_service.domain import Item

logger = structlog.get_logger()


class UpstreamSearchError(Exception):
    """The upstream provider failed or returned an unusable payload."""


def normalize_product(raw: dict[str, Any], category: str) -> Item | None:
    """Map one provider search result onto an Item.

    Returns None for records without an id. Missing numbers default to zero;
    ratings are clamped to [0, 5].
    """
    item_id = raw.get("asin")
    if not item_id:
        return None

    price_info = raw.get("price") or {}
    price = price_info.get("value") if isinstance(price_info, dict) else price_info

    return Item(
        id=str(item_id),
        title=str(raw.get("title") or ""),
        price=max(_to_float(price), 0.0),
        currency="USD",
        image_url=raw.get("mainImageUrl"),
        link=raw.get("url"),
        category=category,
        is_best_seller=bool(raw.get("isBestSeller") or False),
        rating=min(max(_to_float(raw.get("rating")), 0.0), 5.0),
        reviews=max(int(_to_float(raw.get("ratingsTotal"))), 0),
    )


def _to_float(value: Any) -> float:
    try:
        return float(value)
    except (TypeError, ValueError):
        return 0.0


class UpstreamSearchClient:
    """Thin async wrapper around the Amazon search endpoint."""

    SEARCH_PATH = "/api/amazon/search"

    def __init__(self, client: httpx.AsyncClient, domain: str = "US"):
        self.client = client
        self.domain = domain

    async def search(self, query: str, page: int, category: str) -> list[Item]:
        """Search upstream and return normalized items tagged with ``category``.

        Raises:
            UpstreamSearchError: on network errors, timeouts, non-2xx
                responses or a payload without a result list.
        """
        params = {"searchTerm": query, "page": page, "domain": self.domain}
        try:
            response = await self.client.get(self.SEARCH_PATH, params=params)
            response.raise_for_status()
            payload = response.json()
        except httpx.HTTPStatusError as e:
            raise UpstreamSearchError(
                f"upstream returned {e.response.status_code}"
            ) from e
        except httpx.HTTPError as e:
            raise UpstreamSearchError(f"upstream request failed: {e}") from e
        except ValueError as e:
            raise UpstreamSearchError("upstream returned invalid JSON") from e

        try:
            results = payload["data"]["amazonProductSearchResults"]["productResults"][
                "results"
            ]
        except (KeyError, TypeError) as e:
            raise UpstreamSearchError("upstream payload missing search results") from e
        if not isinstance(results, list):
            raise UpstreamSearchError("upstream search results are not a list")

        items = []
        for raw in results:
            if not isinstance(raw, dict):
                continue
            item = normalize_product(raw, category)
            if item is not None:
                items.append(item)

        logger.debug(
            "Upstream search completed",
            query=query,
            page=page,
            category=category,
            results=len(items),
        )
        return items


_http_client: httpx.AsyncClient | None = None


def get_http_client(settings: Settings | None = None) -> httpx.AsyncClient:
    """Get or create the shared upstream HTTP client."""
    global _http_client
    if _http_client is None:
        settings = settings or get_settings()
        _http_client = httpx.AsyncClient(
            base_url=settings.upstream_base_url,
            headers={
                "API-KEY": settings.upstream_api_key,
                "Content-Type": "application/json",
            },
            timeout=settings.upstream_timeout_seconds,
        )
    return _http_client


async def close_http_client() -> None:
    """Close the shared HTTP client on shutdown."""
    global _http_client
    if _http_client is not None:
        await _http_client.aclose()
        _http_client = None
