#!/usr/bin/env python3
"""CLI script to refresh the product catalog from the upstream search provider."""

import argparse
import asyncio
import sys
from pathlib import Path

# Add src to path
sys.path.insert(0, str(Path(__file__).parent.parent / "src"))

import structlog

from feed_service.config import get_settings
from feed_service.infrastructure.database.connection import dispose_engine, get_db_session
from feed_service.infrastructure.upstream import (
    UpstreamSearchClient,
    close_http_client,
    get_http_client,
)
from feed_service.services.catalog_bootstrap import CatalogBootstrapper
from feed_service.stores.catalog import SqlCatalogStore
from shared.categories import CATEGORY_IDS

logger = structlog.get_logger()


def parse_args() -> argparse.Namespace:
    parser = argparse.ArgumentParser(description=__doc__)
    parser.add_argument("--clear", action="store_true", help="Delete all products first")
    parser.add_argument(
        "--category",
        action="append",
        choices=sorted(CATEGORY_IDS),
        help="Only refresh this category (repeatable)",
    )
    return parser.parse_args()


async def main(clear: bool, categories: list[str] | None) -> None:
    """Refresh the selected categories into PostgreSQL."""
    settings = get_settings()
    search_client = UpstreamSearchClient(
        get_http_client(settings), domain=settings.upstream_domain
    )

    try:
        async with get_db_session() as session:
            bootstrapper = CatalogBootstrapper(SqlCatalogStore(session), search_client)
            report = await bootstrapper.refresh_all(clear=clear, category_ids=categories)
            logger.info("Catalog refresh completed", **report.to_dict())
    finally:
        await close_http_client()
        await dispose_engine()


if __name__ == "__main__":
    args = parse_args()
    asyncio.run(main(args.clear, args.category))
