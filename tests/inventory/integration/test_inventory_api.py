"""Integration tests for the Inventory API endpoints via TestClient."""

import threading
import time

import pytest
from fastapi import FastAPI
from fastapi.testclient import TestClient
from inventory.api import item_router, order_router, register_error_handlers, variant_router
from inventory.catalog.store import CatalogStore
from inventory.config import Settings
from inventory.domain import inventory


def _build_app():
    app = FastAPI()
    app.include_router(item_router)
    app.include_router(variant_router)
    app.include_router(order_router)
    register_error_handlers(app)
    return app


@pytest.fixture()
def client():
    return TestClient(_build_app())


def _create_item(client, **overrides):
    defaults = {
        "name": "Coffee Beans",
        "description": "250g medium roast coffee beans",
        "base_price": "150000.00",
        "stock_quantity": 20,
    }
    defaults.update(overrides)
    response = client.post("/api/items", json=defaults)
    assert response.status_code == 201
    return response.json()


def _create_variant(client, item_id, **overrides):
    defaults = {
        "item_id": item_id,
        "sku": "TSHIRT-BLACK-M",
        "name": "Black - M",
        "price": "110000",
        "stock_quantity": 5,
    }
    defaults.update(overrides)
    response = client.post("/api/variants", json=defaults)
    assert response.status_code == 201
    return response.json()


class TestItemAPI:
    def test_create_item(self, client):
        item = _create_item(client)
        assert item["name"] == "Coffee Beans"
        assert item["base_price"] == "150000.00"
        assert item["version"] == 0
        assert item["variants"] == []

    def test_get_item_includes_variants(self, client):
        item = _create_item(client, name="T-Shirt", base_price="100000", stock_quantity=10)
        _create_variant(client, item["id"])

        response = client.get(f"/api/items/{item['id']}")
        assert response.status_code == 200
        body = response.json()
        assert body["has_variants"] is True
        assert [v["sku"] for v in body["variants"]] == ["TSHIRT-BLACK-M"]

    def test_list_items(self, client):
        _create_item(client)
        _create_item(client, name="Laptop", base_price="12000000", stock_quantity=5)
        response = client.get("/api/items")
        assert response.status_code == 200
        assert [i["name"] for i in response.json()] == ["Coffee Beans", "Laptop"]

    def test_missing_item_is_404(self, client):
        response = client.get("/api/items/missing")
        assert response.status_code == 404
        assert response.json() == {"error": "NotFound", "message": "Item not found with id: missing"}

    def test_duplicate_name_is_409(self, client):
        _create_item(client)
        response = client.post("/api/items", json={"name": "Coffee Beans"})
        assert response.status_code == 409
        assert response.json()["error"] == "Duplicate"

    def test_negative_price_is_400(self, client):
        response = client.post("/api/items", json={"name": "Bad", "base_price": "-1"})
        assert response.status_code == 400
        assert response.json()["error"] == "InvalidArgument"

    def test_oversized_price_is_400(self, client):
        response = client.post("/api/items", json={"name": "Big", "base_price": "1e30", "stock_quantity": 1})
        assert response.status_code == 400
        assert response.json()["error"] == "InvalidArgument"
        assert client.get("/api/items").json() == []

    def test_too_many_decimal_places_is_400(self, client):
        response = client.post("/api/items", json={"name": "Bad", "base_price": "1.005"})
        assert response.status_code == 400

    def test_missing_name_is_400(self, client):
        response = client.post("/api/items", json={"base_price": "1"})
        assert response.status_code == 400
        assert response.json()["error"] == "InvalidArgument"

    def test_update_item(self, client):
        item = _create_item(client)
        response = client.put(
            f"/api/items/{item['id']}",
            json={"name": "Coffee Beans", "base_price": "160000", "stock_quantity": 25, "version": 0},
        )
        assert response.status_code == 200
        assert response.json()["base_price"] == "160000.00"
        assert response.json()["version"] == 1

    def test_update_with_stale_version_is_409(self, client):
        item = _create_item(client)
        client.put(f"/api/items/{item['id']}", json={"name": "Coffee Beans", "version": 0})
        response = client.put(f"/api/items/{item['id']}", json={"name": "Coffee Beans", "version": 0})
        assert response.status_code == 409
        assert response.json()["error"] == "ConcurrentModification"

    def test_delete_item(self, client):
        item = _create_item(client)
        assert client.delete(f"/api/items/{item['id']}").status_code == 204
        assert client.get(f"/api/items/{item['id']}").status_code == 404


class TestVariantAPI:
    def test_create_and_get_variant(self, client):
        item = _create_item(client, name="T-Shirt")
        variant = _create_variant(client, item["id"])

        response = client.get(f"/api/variants/{variant['id']}")
        assert response.status_code == 200
        assert response.json()["price"] == "110000.00"
        assert response.json()["item_id"] == item["id"]

    def test_create_variant_for_missing_item_is_404(self, client):
        response = client.post(
            "/api/variants", json={"item_id": "missing", "sku": "X", "name": "X", "price": "1"}
        )
        assert response.status_code == 404

    def test_list_variants_filtered_by_item(self, client):
        shirt = _create_item(client, name="T-Shirt")
        hoodie = _create_item(client, name="Hoodie")
        _create_variant(client, shirt["id"])
        _create_variant(client, hoodie["id"], sku="HOODIE-M")

        response = client.get("/api/variants", params={"item_id": hoodie["id"]})
        assert [v["sku"] for v in response.json()] == ["HOODIE-M"]
        assert len(client.get("/api/variants").json()) == 2

    def test_update_variant(self, client):
        item = _create_item(client, name="T-Shirt")
        variant = _create_variant(client, item["id"])
        response = client.put(
            f"/api/variants/{variant['id']}",
            json={"item_id": item["id"], "sku": "TSHIRT-BLACK-M", "name": "Black - M", "price": "99.99"},
        )
        assert response.status_code == 200
        assert response.json()["price"] == "99.99"

    def test_delete_ordered_variant_is_409(self, client):
        item = _create_item(client, name="T-Shirt")
        variant = _create_variant(client, item["id"])
        client.post(
            "/api/orders",
            json={"lines": [{"item_id": item["id"], "variant_id": variant["id"], "quantity": 1}]},
        )
        response = client.delete(f"/api/variants/{variant['id']}")
        assert response.status_code == 409
        assert response.json()["error"] == "ResourceInUse"


class TestOrderAPI:
    def test_create_order(self, client):
        item = _create_item(client)
        response = client.post("/api/orders", json={"lines": [{"item_id": item["id"], "quantity": 3}]})

        assert response.status_code == 201
        order = response.json()
        assert order["order_number"].startswith("ORD-")
        assert order["total_amount"] == "450000.00"
        assert order["lines"][0]["item_name"] == "Coffee Beans"
        assert order["lines"][0]["unit_price"] == "150000.00"
        assert order["lines"][0]["line_total"] == "450000.00"
        assert client.get(f"/api/items/{item['id']}").json()["stock_quantity"] == 17

    def test_get_and_list_orders(self, client):
        item = _create_item(client)
        created = client.post("/api/orders", json={"lines": [{"item_id": item["id"], "quantity": 1}]}).json()

        fetched = client.get(f"/api/orders/{created['id']}")
        assert fetched.status_code == 200
        assert fetched.json()["order_number"] == created["order_number"]
        assert [o["id"] for o in client.get("/api/orders").json()] == [created["id"]]

    def test_missing_order_is_404(self, client):
        response = client.get("/api/orders/missing")
        assert response.status_code == 404

    def test_insufficient_stock_is_400(self, client):
        item = _create_item(client, name="T-Shirt")
        variant = _create_variant(client, item["id"])
        response = client.post(
            "/api/orders",
            json={"lines": [{"item_id": item["id"], "variant_id": variant["id"], "quantity": 10}]},
        )
        assert response.status_code == 400
        assert response.json() == {
            "error": "InsufficientStock",
            "message": "Not enough stock for T-Shirt (Variant: Black - M). Available: 5, Requested: 10",
        }
        assert client.get(f"/api/variants/{variant['id']}").json()["stock_quantity"] == 5

    def test_duplicate_lines_are_400(self, client):
        item = _create_item(client)
        response = client.post(
            "/api/orders",
            json={"lines": [{"item_id": item["id"], "quantity": 1}, {"item_id": item["id"], "quantity": 2}]},
        )
        assert response.status_code == 400
        assert response.json()["error"] == "InvalidArgument"

    def test_empty_order_is_400(self, client):
        response = client.post("/api/orders", json={"lines": []})
        assert response.status_code == 400

    def test_zero_quantity_is_400(self, client):
        item = _create_item(client)
        response = client.post("/api/orders", json={"lines": [{"item_id": item["id"], "quantity": 0}]})
        assert response.status_code == 400

    @pytest.mark.parametrize("quantity", [True, 2.0, "2"])
    def test_non_integer_quantity_is_400(self, client, quantity):
        item = _create_item(client)
        response = client.post("/api/orders", json={"lines": [{"item_id": item["id"], "quantity": quantity}]})
        assert response.status_code == 400
        assert response.json() == {
            "error": "InvalidArgument",
            "message": f"Quantity must be a positive integer for item {item['id']}",
        }
        assert client.get(f"/api/items/{item['id']}").json()["stock_quantity"] == 20
        assert client.get("/api/orders").json() == []

    def test_unpriced_item_is_409(self, client):
        item = _create_item(client, name="Unpriced", base_price=None)
        response = client.post("/api/orders", json={"lines": [{"item_id": item["id"], "quantity": 1}]})
        assert response.status_code == 409
        assert response.json()["error"] == "InvalidState"


class TestStoreAvailability:
    def test_busy_store_is_503(self, client, monkeypatch):
        monkeypatch.setattr("inventory.catalog.store.settings", Settings(store_lock_timeout=0.01))
        CatalogStore._write_lock.acquire()
        try:
            response = client.post("/api/items", json={"name": "Tea"})
        finally:
            CatalogStore._write_lock.release()

        assert response.status_code == 503
        assert response.json()["error"] == "Unavailable"

    @pytest.mark.slow
    def test_reads_are_served_while_an_order_waits_for_the_lock(self):
        with TestClient(_build_app()) as client:
            item = _create_item(client)
            placed = {}

            def place_order():
                with inventory.domain_context():
                    placed["response"] = client.post(
                        "/api/orders", json={"lines": [{"item_id": item["id"], "quantity": 1}]}
                    )

            CatalogStore._write_lock.acquire()
            try:
                worker = threading.Thread(target=place_order)
                worker.start()
                worker.join(timeout=0.3)
                assert worker.is_alive()

                started = time.monotonic()
                response = client.get(f"/api/items/{item['id']}")
                elapsed = time.monotonic() - started
            finally:
                CatalogStore._write_lock.release()
            worker.join(timeout=10)

        assert response.status_code == 200
        assert elapsed < 1.0
        assert placed["response"].status_code == 201
        assert placed["response"].json()["total_amount"] == "150000.00"
