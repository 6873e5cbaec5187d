"""HTTP-level tests for the Fram API."""

from unittest.mock import AsyncMock, MagicMock

import pytest
from fastapi.testclient import TestClient

from app.api import deps
from app.core.exceptions import ChatNotConfiguredError, NutritionLookupError
from app.main import app
from app.schemas.chat_schema import ChatResponse
from app.services.product_service import ProductService

NUTRITION = {"foods": [{"foodNutrients": [
    {"nutrientId": 1008, "value": 41, "unitName": "KCAL"},
    {"nutrientId": 1003, "value": 0.9, "unitName": "G"},
]}]}


@pytest.fixture
def nutrition_client():
    client = MagicMock()
    client.search_foods = AsyncMock(return_value=NUTRITION)
    return client


@pytest.fixture
def client(test_settings, products_file, nutrition_client):
    app.dependency_overrides[deps.get_settings] = lambda: test_settings
    app.dependency_overrides[deps.get_product_service] = lambda: ProductService(products_file)
    app.dependency_overrides[deps.get_nutrition_client] = lambda: nutrition_client
    with TestClient(app) as test_client:
        yield test_client
    app.dependency_overrides.clear()


class TestCartEndpoints:
    def test_empty_cart(self, client):
        response = client.get("/api/cart")
        assert response.status_code == 200
        body = response.json()
        assert body["is_empty"] is True
        assert body["empty_message"] == "Your cart is empty"
        assert body["subtotal_text"] == "0 kr"

    def test_add_items_consolidates(self, client):
        client.post("/api/cart/items", json={"product_id": 1, "quantity": 2})
        response = client.post("/api/cart/items", json={"product_id": "1", "quantity": 3})

        assert response.status_code == 201
        body = response.json()
        assert len(body["items"]) == 1
        assert body["items"][0]["quantity"] == 5
        assert body["subtotal"] == 225
        assert body["badge_text"] == "5"

    def test_cart_persists_between_requests(self, client):
        client.post("/api/cart/items", json={"product_id": 1, "quantity": 2})
        client.post("/api/cart/items", json={"product_id": 2, "quantity": 3})

        body = client.get("/api/cart").json()
        assert [row["name"] for row in body["items"]] == ["Apples", "Carrots"]
        assert body["subtotal_text"] == "120 kr"

    def test_sessions_are_isolated(self, client):
        client.post("/api/cart/items", json={"product_id": 1}, headers={"X-Session-Id": "alice"})
        body = client.get("/api/cart", headers={"X-Session-Id": "bob"}).json()
        assert body["is_empty"] is True

    def test_clients_without_header_get_their_own_cart(self, client, test_settings):
        response = client.post("/api/cart/items", json={"product_id": 1, "quantity": 2})
        assert test_settings.SESSION_COOKIE_NAME in response.cookies

        with TestClient(app) as other_client:
            body = other_client.get("/api/cart").json()
            assert body["is_empty"] is True
            assert body["total_quantity"] == 0

        assert client.get("/api/cart").json()["total_quantity"] == 2

    def test_header_takes_precedence_over_cookie(self, client):
        client.post("/api/cart/items", json={"product_id": 1})
        body = client.get("/api/cart", headers={"X-Session-Id": "carol"}).json()
        assert body["is_empty"] is True

    def test_add_unknown_product(self, client):
        response = client.post("/api/cart/items", json={"product_id": 999})
        assert response.status_code == 404

    def test_add_invalid_quantity(self, client):
        response = client.post("/api/cart/items", json={"product_id": 1, "quantity": 0})
        assert response.status_code == 422

    def test_update_quantity_and_remove(self, client):
        client.post("/api/cart/items", json={"product_id": 1, "quantity": 2})
        client.post("/api/cart/items", json={"product_id": 2})

        body = client.put("/api/cart/items/1", json={"quantity": 4}).json()
        assert body["items"][0]["quantity"] == 4

        body = client.put("/api/cart/items/2", json={"quantity": 0}).json()
        assert [row["product_id"] for row in body["items"]] == ["1"]

        body = client.delete("/api/cart/items/1").json()
        assert body["is_empty"] is True

    def test_update_missing_line(self, client):
        response = client.put("/api/cart/items/1", json={"quantity": 2})
        assert response.status_code == 404

    def test_remove_missing_line_is_noop(self, client):
        client.post("/api/cart/items", json={"product_id": 1})
        response = client.delete("/api/cart/items/42")
        assert response.status_code == 200
        assert response.json()["total_quantity"] == 1

    def test_clear_and_summary(self, client):
        client.post("/api/cart/items", json={"product_id": 1, "quantity": 2})
        summary = client.get("/api/cart/summary").json()
        assert summary["subtotal_text"] == "90 kr"
        assert summary["delivery_fee_text"] == "49 kr"
        assert summary["total_text"] == "139 kr"

        assert client.delete("/api/cart").status_code == 204
        body = client.get("/api/cart").json()
        assert body["subtotal"] == 0
        assert body["total_quantity"] == 0


class TestProductEndpoints:
    def test_list_products(self, client):
        body = client.get("/api/products").json()
        assert [p["name"] for p in body["products"]] == ["Apples", "Carrots", "Radishes"]

    def test_popular_products(self, client):
        body = client.get("/api/products", params={"popular": "true"}).json()
        assert [p["name"] for p in body["products"]] == ["Apples", "Radishes"]

    def test_product_detail(self, client):
        assert client.get("/api/products/2").json()["name"] == "Carrots"
        assert client.get("/api/products/42").status_code == 404

    def test_product_nutrition_is_cached(self, client, nutrition_client):
        first = client.get("/api/products/2/nutrition")
        second = client.get("/api/products/2/nutrition")

        assert first.status_code == 200
        assert first.json() == second.json()
        assert first.json()["nutrients"] == [
            {"name": "Energy", "value": 41, "unit": "KCAL"},
            {"name": "Protein", "value": 0.9, "unit": "G"},
        ]
        assert first.json()["source"] == "USDA Food Data Central"
        nutrition_client.search_foods.assert_awaited_once_with("Carrots")

    def test_product_nutrition_refresh(self, client, nutrition_client):
        client.get("/api/products/2/nutrition")
        client.get("/api/products/2/nutrition", params={"refresh": "true"})
        assert nutrition_client.search_foods.await_count == 2

    def test_product_nutrition_basic_fallback(self, client, nutrition_client):
        nutrition_client.search_foods.side_effect = NutritionLookupError("down")
        body = client.get("/api/products/1/nutrition").json()
        assert body["fallback"] is True
        assert body["nutrients"][0] == {"name": "Energy", "value": 52, "unit": "kcal"}

    def test_product_nutrition_unavailable(self, client, nutrition_client):
        nutrition_client.search_foods.side_effect = NutritionLookupError("down")
        response = client.get("/api/products/3/nutrition")
        assert response.status_code == 503
        assert "nutrition" in response.json()["detail"]

    def test_clear_nutrition_cache(self, client, nutrition_client):
        client.get("/api/products/2/nutrition")
        assert client.delete("/api/nutrition/cache").status_code == 204
        client.get("/api/products/2/nutrition")
        assert nutrition_client.search_foods.await_count == 2


class TestNutritionPassthrough:
    def test_passthrough(self, client, nutrition_client):
        response = client.get("/api/nutrition/carrot")
        assert response.status_code == 200
        assert response.json() == NUTRITION
        nutrition_client.search_foods.assert_awaited_once_with("carrot")

    def test_upstream_failure(self, client, nutrition_client):
        nutrition_client.search_foods.side_effect = NutritionLookupError("503")
        response = client.get("/api/nutrition/carrot")
        assert response.status_code == 500
        assert response.json()["detail"] == "Failed to fetch nutrition data. Please try again later."


class TestChatEndpoint:
    def test_chat(self, client):
        chat_service = MagicMock()
        chat_service.ask = AsyncMock(return_value=ChatResponse(reply="Hei!", model="gpt-3.5-turbo"))
        app.dependency_overrides[deps.get_chat_service] = lambda: chat_service

        response = client.post("/api/chat", json={"message": "Hello"})

        assert response.status_code == 200
        assert response.json() == {"reply": "Hei!", "model": "gpt-3.5-turbo"}
        chat_service.ask.assert_awaited_once_with("Hello")

    def test_chat_not_configured(self, client):
        chat_service = MagicMock()
        chat_service.ask = AsyncMock(side_effect=ChatNotConfiguredError("API key not configured on server."))
        app.dependency_overrides[deps.get_chat_service] = lambda: chat_service

        response = client.post("/api/chat", json={"message": "Hello"})

        assert response.status_code == 500
        assert "API key" in response.json()["detail"]

    def test_chat_rejects_empty_message(self, client):
        assert client.post("/api/chat", json={"message": ""}).status_code == 422


def test_health(client):
    assert client.get("/health").status_code == 200
