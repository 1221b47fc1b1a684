"""Pytest configuration and fixtures."""

from typing import Any, AsyncGenerator

import numpy as np
import pytest
from fastapi.testclient import TestClient

from feed_service.api.deps import Stores, get_search_client, get_stores
from feed_service.config import Settings, get_settings
from feed_service.main import create_app
from feed_service.stores.catalog import InMemoryCatalogStore
from feed_service.stores.preferences import InMemoryPreferenceStore
from tests.factories import FakeSearchClient


@pytest.fixture
def rng() -> np.random.Generator:
    """Seeded generator for reproducible sampling."""
    return np.random.default_rng(42)


@pytest.fixture
def test_settings() -> Settings:
    """Get test settings with overrides."""
    return Settings(
        app_env="test",
        debug=True,
        storage_backend="memory",
        redis_enabled=False,
        catalog_min_items=0,
        admin_api_key="",
    )


@pytest.fixture
def catalog() -> InMemoryCatalogStore:
    return InMemoryCatalogStore()


@pytest.fixture
def preference_store() -> InMemoryPreferenceStore:
    return InMemoryPreferenceStore()


@pytest.fixture
def search_client() -> FakeSearchClient:
    return FakeSearchClient()


@pytest.fixture
def app(
    test_settings: Settings,
    catalog: InMemoryCatalogStore,
    preference_store: InMemoryPreferenceStore,
    search_client: FakeSearchClient,
) -> Any:
    """Create test application wired to in-memory stores."""

    def get_test_settings() -> Settings:
        return test_settings

    async def get_test_stores() -> AsyncGenerator[Stores, None]:
        yield Stores(catalog=catalog, preferences=preference_store)

    app = create_app()
    app.dependency_overrides[get_settings] = get_test_settings
    app.dependency_overrides[get_stores] = get_test_stores
    app.dependency_overrides[get_search_client] = lambda: search_client
    return app


@pytest.fixture
def client(app: Any) -> TestClient:
    """Create synchronous test client."""
    return TestClient(app)


@pytest.fixture
def sample_user_id() -> str:
    """Sample user ID for tests."""
    return "test-user-123"
