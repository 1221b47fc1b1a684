"""Tests for admin catalog endpoints."""

from typing import Any

from fastapi.testclient import TestClient

from feed_service.config import Settings, get_settings
from feed_service.stores.catalog import InMemoryCatalogStore
from tests.factories import FakeSearchClient, make_items


class TestRefreshCatalog:
    def test_refreshes_every_category(
        self,
        client: TestClient,
        catalog: InMemoryCatalogStore,
        search_client: FakeSearchClient,
    ) -> None:
        response = client.post("/api/v1/admin/refresh-catalog")

        assert response.status_code == 200
        data = response.json()
        assert data["success"] is True
        assert data["report"]["inserted"] == 90
        assert len(search_client.calls) == 9

    def test_selected_categories_with_clear(
        self,
        client: TestClient,
        catalog: InMemoryCatalogStore,
        search_client: FakeSearchClient,
    ) -> None:
        catalog._items.update({i.id: i for i in make_items("home", 5)})

        response = client.post(
            "/api/v1/admin/refresh-catalog",
            params=[("clear", "true"), ("category", "tech"), ("category", "pets")],
        )

        assert response.status_code == 200
        assert sorted(c for _, _, c in search_client.calls) == ["pets", "tech"]
        assert response.json()["report"]["refreshed"] == ["tech", "pets"]

    def test_unknown_category(self, client: TestClient) -> None:
        response = client.post("/api/v1/admin/refresh-catalog", params={"category": "gadgets"})
        assert response.status_code == 400

    def test_failed_categories_are_reported(self, app: Any) -> None:
        from feed_service.api.deps import get_search_client

        app.dependency_overrides[get_search_client] = lambda: FakeSearchClient(
            fail_categories=("tech",)
        )
        response = TestClient(app).post(
            "/api/v1/admin/refresh-catalog", params={"category": "tech"}
        )
        assert response.status_code == 200
        assert response.json()["report"]["failed"] == ["tech"]

    def test_admin_key_enforced(self, app: Any, test_settings: Settings) -> None:
        secured = test_settings.model_copy(update={"admin_api_key": "s3cret"})
        app.dependency_overrides[get_settings] = lambda: secured
        client = TestClient(app)

        assert client.post("/api/v1/admin/refresh-catalog").status_code == 403
        response = client.post(
            "/api/v1/admin/refresh-catalog", headers={"X-Admin-Key": "s3cret"}
        )
        assert response.status_code == 200
