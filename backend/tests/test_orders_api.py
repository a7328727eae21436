"""
Tests for the /api/orders endpoints.
"""

import pytest
from sqlalchemy import text

from conftest import order_payload
from rest_api.repositories import ProductRepository
from shared.config.constants import OrderStatus


class TestCreateOrder:
    """POST /api/orders"""

    def test_create_order(self, client):
        response = client.post("/api/orders", json=order_payload(table_no=5))

        assert response.status_code == 201
        data = response.json()
        assert data["status"] == OrderStatus.PENDING
        assert data["table_no"] == 5
        assert data["total_cents"] == 3600
        assert data["items"][0]["name"] == "Truffle Burger"
        assert data["items"][0]["qty"] == 2

    def test_table_number_string_is_canonicalized(self, client):
        response = client.post("/api/orders", json=order_payload(table_no=" 07 "))

        assert response.status_code == 201
        assert response.json()["table_no"] == 7

    def test_named_table_kept_as_string(self, client):
        response = client.post("/api/orders", json=order_payload(table_no="Terrace"))

        assert response.json()["table_no"] == "Terrace"

    def test_empty_items_rejected(self, client):
        body = order_payload()
        body["items"] = []

        response = client.post("/api/orders", json=body)

        assert response.status_code == 422

    def test_zero_quantity_rejected(self, client):
        response = client.post("/api/orders", json=order_payload(qty=0))

        assert response.status_code == 422

    @pytest.mark.parametrize("table_no", [-1, "-1", " -7 "])
    def test_negative_table_rejected(self, client, table_no):
        response = client.post("/api/orders", json=order_payload(table_no=table_no))

        assert response.status_code == 422

    def test_blank_table_rejected(self, client):
        response = client.post("/api/orders", json=order_payload(table_no="  "))

        assert response.status_code == 422

    def test_non_json_body_rejected(self, client):
        response = client.post(
            "/api/orders",
            content="table_no=5",
            headers={"Content-Type": "text/plain"},
        )

        assert response.status_code == 415

    def test_create_marks_table_occupied(self, client):
        client.post("/api/orders", json=order_payload(table_no=12))

        status = client.get("/api/tables/status").json()

        assert 12 in status["occupied_tables"]


class TestReadOrders:
    """GET /api/orders"""

    def test_list_newest_first(self, client):
        first = client.post("/api/orders", json=order_payload(table_no=1)).json()
        second = client.post("/api/orders", json=order_payload(table_no=2)).json()

        ids = [order["id"] for order in client.get("/api/orders").json()]

        assert ids == [second["id"], first["id"]]

    def test_get_order(self, client):
        created = client.post("/api/orders", json=order_payload()).json()

        response = client.get(f"/api/orders/{created['id']}")

        assert response.status_code == 200
        assert response.json()["id"] == created["id"]

    def test_get_missing_order(self, client):
        response = client.get("/api/orders/999")

        assert response.status_code == 404
        assert response.json()["detail"] == "Order 999 not found"


class TestOrderStatus:
    """PUT /api/orders/{id}/status and POST /api/orders/{id}/advance"""

    def test_update_to_next_status(self, client):
        order = client.post("/api/orders", json=order_payload()).json()

        response = client.put(f"/api/orders/{order['id']}/status", json={"status": "Cooking"})

        assert response.status_code == 200
        assert response.json()["status"] == "Cooking"
        assert response.json()["updated_at"] is not None

    def test_skipping_a_status_is_rejected(self, client):
        order = client.post("/api/orders", json=order_payload()).json()

        response = client.put(f"/api/orders/{order['id']}/status", json={"status": "Completed"})

        assert response.status_code == 400
        assert client.get(f"/api/orders/{order['id']}").json()["status"] == "Pending"

    def test_unknown_status_is_rejected(self, client):
        order = client.post("/api/orders", json=order_payload()).json()

        response = client.put(f"/api/orders/{order['id']}/status", json={"status": "Eaten"})

        assert response.status_code == 422

    def test_advance_to_completed_then_conflict(self, client):
        order = client.post("/api/orders", json=order_payload()).json()
        url = f"/api/orders/{order['id']}/advance"

        statuses = [client.post(url).json()["status"] for _ in range(3)]
        response = client.post(url)

        assert statuses == ["Cooking", "Coming to Table", "Completed"]
        assert response.status_code == 409

    def test_completed_order_frees_table(self, client):
        order = client.post("/api/orders", json=order_payload(table_no=4)).json()
        for _ in range(3):
            client.post(f"/api/orders/{order['id']}/advance")

        status = client.get("/api/tables/status").json()

        assert 4 not in status["occupied_tables"]

    def test_status_update_on_missing_order(self, client):
        response = client.put("/api/orders/999/status", json={"status": "Cooking"})

        assert response.status_code == 404


class TestDeleteOrder:
    """DELETE /api/orders/{id}"""

    def test_delete_order(self, client):
        order = client.post("/api/orders", json=order_payload(table_no=9)).json()

        response = client.delete(f"/api/orders/{order['id']}")

        assert response.status_code == 200
        assert response.json() == {"order_id": order["id"], "deleted": True}
        assert client.get(f"/api/orders/{order['id']}").status_code == 404
        assert 9 not in client.get("/api/tables/status").json()["occupied_tables"]

    def test_delete_missing_order(self, client):
        assert client.delete("/api/orders/999").status_code == 404


@pytest.fixture
def enforce_foreign_keys(db_session):
    """SQLite only checks foreign keys when asked to, unlike PostgreSQL."""
    db_session.execute(text("PRAGMA foreign_keys=ON"))
    yield
    db_session.rollback()
    db_session.execute(text("PRAGMA foreign_keys=OFF"))


class TestOrderProductReferences:
    """Items that point at catalog products"""

    def test_known_product_accepted(self, client, seed_product, enforce_foreign_keys):
        payload = order_payload(table_no=4, unit_price_cents=1200)
        payload["items"][0]["product_id"] = seed_product.id

        response = client.post("/api/orders", json=payload)

        assert response.status_code == 201
        assert response.json()["items"][0]["product_id"] == seed_product.id

    def test_unknown_product_is_a_validation_error(self, client, enforce_foreign_keys):
        payload = order_payload(table_no=4)
        payload["items"][0]["product_id"] = 999

        response = client.post("/api/orders", json=payload)

        assert response.status_code == 400
        assert "999" in response.json()["detail"]
        assert client.get("/api/orders").json() == []
        assert client.get("/api/tables/status").json()["occupied_tables"] == []

    def test_foreign_key_violation_is_a_validation_error(self, client, monkeypatch, enforce_foreign_keys):
        """A product deleted between the lookup and the insert is still a 400."""
        monkeypatch.setattr(ProductRepository, "find_existing_ids", lambda self, ids: set(ids))
        payload = order_payload(table_no=4)
        payload["items"][0]["product_id"] = 999

        response = client.post("/api/orders", json=payload)

        assert response.status_code == 400
        assert client.get("/api/orders").json() == []
