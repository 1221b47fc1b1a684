"""Tests for preference, rejection and wishlist endpoints."""

from typing import Any

from fastapi.testclient import TestClient

from feed_service.api.deps import Stores, get_stores
from feed_service.stores.catalog import InMemoryCatalogStore
from feed_service.stores.preferences import InMemoryPreferenceStore
from tests.factories import FailingPreferenceStore, make_items


class TestPreferences:
    def test_requires_user(self, client: TestClient) -> None:
        response = client.post("/api/v1/preferences", json={"category": "tech", "action": "like"})
        assert response.status_code == 401

    def test_like_updates_stats(
        self,
        client: TestClient,
        preference_store: InMemoryPreferenceStore,
        sample_user_id: str,
    ) -> None:
        headers = {"X-User-Id": sample_user_id}
        for action in ["like", "like", "dislike"]:
            response = client.post(
                "/api/v1/preferences", json={"category": "tech", "action": action}, headers=headers
            )
            assert response.status_code == 200
            assert response.json() == {"success": True}

        stats = preference_store.stats[sample_user_id]["tech"]
        assert (stats.likes, stats.dislikes) == (2, 1)

    def test_explicit_score(
        self,
        client: TestClient,
        preference_store: InMemoryPreferenceStore,
        sample_user_id: str,
    ) -> None:
        response = client.post(
            "/api/v1/preferences",
            json={"category": "home", "score": 4.5},
            headers={"X-User-Id": sample_user_id},
        )
        assert response.status_code == 200
        assert preference_store.weights[sample_user_id]["home"] == 4.5

    def test_unknown_category(self, client: TestClient, sample_user_id: str) -> None:
        response = client.post(
            "/api/v1/preferences",
            json={"category": "gadgets", "action": "like"},
            headers={"X-User-Id": sample_user_id},
        )
        assert response.status_code == 400

    def test_requires_action_or_score(self, client: TestClient, sample_user_id: str) -> None:
        response = client.post(
            "/api/v1/preferences",
            json={"category": "tech"},
            headers={"X-User-Id": sample_user_id},
        )
        assert response.status_code == 422

    def test_negative_score_rejected(self, client: TestClient, sample_user_id: str) -> None:
        response = client.post(
            "/api/v1/preferences",
            json={"category": "tech", "score": -1},
            headers={"X-User-Id": sample_user_id},
        )
        assert response.status_code == 422

    def test_unknown_action_rejected(self, client: TestClient, sample_user_id: str) -> None:
        response = client.post(
            "/api/v1/preferences",
            json={"category": "tech", "action": "love"},
            headers={"X-User-Id": sample_user_id},
        )
        assert response.status_code == 422


class TestRejections:
    def test_reject_then_undo(
        self,
        client: TestClient,
        preference_store: InMemoryPreferenceStore,
        sample_user_id: str,
    ) -> None:
        headers = {"X-User-Id": sample_user_id}

        response = client.post("/api/v1/rejections", json={"item_id": "B0001"}, headers=headers)
        assert response.status_code == 200
        assert "B0001" in preference_store.rejections[sample_user_id]

        response = client.delete("/api/v1/rejections/B0001", headers=headers)
        assert response.status_code == 200
        assert "B0001" not in preference_store.rejections[sample_user_id]

    def test_undo_unknown_rejection(self, client: TestClient, sample_user_id: str) -> None:
        response = client.delete(
            "/api/v1/rejections/missing", headers={"X-User-Id": sample_user_id}
        )
        assert response.status_code == 404

    def test_reject_requires_user(self, client: TestClient) -> None:
        response = client.post("/api/v1/rejections", json={"item_id": "B0001"})
        assert response.status_code == 401

    def test_undo_during_outage(self, app: Any, sample_user_id: str) -> None:
        async def failing_stores():
            yield Stores(catalog=InMemoryCatalogStore(), preferences=FailingPreferenceStore())

        app.dependency_overrides[get_stores] = failing_stores
        response = TestClient(app).delete(
            "/api/v1/rejections/B0001", headers={"X-User-Id": sample_user_id}
        )

        assert response.status_code == 500
        assert response.json()["detail"] == "Database Error"


PRODUCT = {
    "id": "B0SAVED01",
    "title": "Desk Lamp",
    "price": 34.5,
    "currency": "USD",
    "imageUrl": "https://img.test/lamp.jpg",
    "link": "https://shop.test/lamp",
    "category": "home",
    "isBestSeller": False,
    "rating": 4.4,
    "reviews": 812,
}


class TestWishlist:
    def test_requires_user(self, client: TestClient) -> None:
        assert client.get("/api/v1/wishlist").status_code == 401
        assert client.post("/api/v1/wishlist", json=PRODUCT).status_code == 401

    def test_save_and_list(self, client: TestClient, sample_user_id: str) -> None:
        headers = {"X-User-Id": sample_user_id}

        response = client.post("/api/v1/wishlist", json=PRODUCT, headers=headers)
        assert response.status_code == 200
        assert response.json()["success"] is True
        assert response.json()["item"]["imageUrl"] == PRODUCT["imageUrl"]

        # saving again keeps a single entry
        client.post("/api/v1/wishlist", json=PRODUCT, headers=headers)
        response = client.get("/api/v1/wishlist", headers=headers)
        assert response.json() == [PRODUCT]

    def test_saved_item_leaves_feed(
        self,
        client: TestClient,
        catalog: InMemoryCatalogStore,
        sample_user_id: str,
    ) -> None:
        headers = {"X-User-Id": sample_user_id}
        catalog._items.update({i.id: i for i in make_items("home", 3)})

        client.post("/api/v1/wishlist", json={**PRODUCT, "id": "home-1"}, headers=headers)
        feed = client.get("/api/v1/products", headers=headers).json()
        assert sorted(p["id"] for p in feed) == ["home-0", "home-2"]

        assert client.delete("/api/v1/wishlist/home-1", headers=headers).status_code == 200
        feed = client.get("/api/v1/products", headers=headers).json()
        assert sorted(p["id"] for p in feed) == ["home-0", "home-1", "home-2"]

    def test_remove_unknown_item(self, client: TestClient, sample_user_id: str) -> None:
        response = client.delete("/api/v1/wishlist/missing", headers={"X-User-Id": sample_user_id})
        assert response.status_code == 404

    def test_clear(
        self,
        client: TestClient,
        preference_store: InMemoryPreferenceStore,
        sample_user_id: str,
    ) -> None:
        headers = {"X-User-Id": sample_user_id}
        for item_id in ["a", "b"]:
            client.post("/api/v1/wishlist", json={**PRODUCT, "id": item_id}, headers=headers)

        assert client.delete("/api/v1/wishlist", headers=headers).status_code == 400
        response = client.delete("/api/v1/wishlist", params={"clear": "true"}, headers=headers)
        assert response.status_code == 200
        assert preference_store.wishlist.get(sample_user_id, {}) == {}

    def test_save_during_outage(self, app: Any, sample_user_id: str) -> None:
        async def failing_stores():
            yield Stores(catalog=InMemoryCatalogStore(), preferences=FailingPreferenceStore())

        app.dependency_overrides[get_stores] = failing_stores
        response = TestClient(app).post(
            "/api/v1/wishlist", json=PRODUCT, headers={"X-User-Id": sample_user_id}
        )
        assert response.status_code == 500
