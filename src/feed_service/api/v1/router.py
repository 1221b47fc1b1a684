"""API v1 router that aggregates all endpoint routers."""

from fastapi import APIRouter

from feed_service.api.v1 import admin, health, preferences, products

api_router = APIRouter()

api_router.include_router(
    health.router,
    tags=["Health"],
)

api_router.include_router(
    products.router,
    tags=["Feed"],
)

api_router.include_router(
    preferences.router,
    tags=["Preferences"],
)

api_router.include_router(
    admin.router,
    prefix="/admin",
    tags=["Admin"],
)
