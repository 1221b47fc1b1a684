"""Administrative catalog endpoints."""

from typing import Annotated, Any

import structlog
from fastapi import APIRouter, Depends, Header, HTTPException, Query

from feed_service.api.deps import get_bootstrapper
from feed_service.config import Settings, get_settings
from feed_service.services.catalog_bootstrap import CatalogBootstrapper
from shared.categories import CATEGORY_IDS

logger = structlog.get_logger()

router = APIRouter()


def require_admin(
    x_admin_key: Annotated[str | None, Header()] = None,
    settings: Settings = Depends(get_settings),
) -> None:
    """Reject the call unless the admin key matches, when one is configured."""
    if settings.admin_api_key and x_admin_key != settings.admin_api_key:
        raise HTTPException(status_code=403, detail="Forbidden")


@router.post("/refresh-catalog", dependencies=[Depends(require_admin)])
async def refresh_catalog(
    clear: Annotated[bool, Query(description="Delete all products first")] = False,
    category: Annotated[
        list[str] | None, Query(description="Limit the refresh to these categories")
    ] = None,
    bootstrapper: CatalogBootstrapper = Depends(get_bootstrapper),
) -> dict[str, Any]:
    """
    Refresh the catalog from the upstream search provider.

    Every selected category gets one upstream fetch regardless of how many
    products it already holds. Failed categories are reported, not raised.
    """
    if category:
        unknown = sorted(set(category) - CATEGORY_IDS)
        if unknown:
            raise HTTPException(
                status_code=400, detail=f"Unknown categories: {', '.join(unknown)}"
            )

    try:
        report = await bootstrapper.refresh_all(clear=clear, category_ids=category)
    except Exception as e:
        logger.error("Catalog refresh failed", error=str(e))
        raise HTTPException(status_code=500, detail="Refresh Failed")

    return {
        "success": True,
        "message": f"Catalog refreshed. Imported {report.inserted} new items.",
        "report": report.to_dict(),
    }
