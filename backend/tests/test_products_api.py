"""
Tests for the /api/products menu catalog.
"""


class TestListProducts:
    """GET /api/products"""

    def test_empty_catalog(self, client):
        response = client.get("/api/products")

        assert response.status_code == 200
        assert response.json() == []

    def test_available_only_hides_unavailable(self, client, seed_product):
        client.post("/api/products", json={
            "name": "Seasonal Tart",
            "price_cents": 900,
            "category": "Dessert",
            "is_available": False,
        })

        everything = client.get("/api/products").json()
        customer_menu = client.get("/api/products", params={"available_only": True}).json()

        assert {p["name"] for p in everything} == {"Caesar Salad", "Seasonal Tart"}
        assert [p["name"] for p in customer_menu] == ["Caesar Salad"]


class TestProductCrud:
    """POST / GET / PUT"""

    def test_create_product(self, client):
        response = client.post("/api/products", json={
            "name": "Wagyu Steak",
            "description": "A5 grade with roasted vegetables",
            "price_cents": 4500,
            "category": "Main",
        })

        assert response.status_code == 201
        body = response.json()
        assert body["id"] > 0
        assert body["price_cents"] == 4500
        assert body["is_available"] is True

    def test_get_product(self, client, seed_product):
        response = client.get(f"/api/products/{seed_product.id}")

        assert response.status_code == 200
        assert response.json()["name"] == "Caesar Salad"

    def test_get_missing_product(self, client):
        assert client.get("/api/products/999").status_code == 404

    def test_partial_update(self, client, seed_product):
        response = client.put(f"/api/products/{seed_product.id}", json={"price_cents": 1350})

        assert response.status_code == 200
        body = response.json()
        assert body["price_cents"] == 1350
        assert body["name"] == "Caesar Salad"
        assert body["category"] == "Starter"

    def test_negative_price_rejected(self, client):
        response = client.post("/api/products", json={"name": "Free Lunch", "price_cents": -1})

        assert response.status_code == 422

    def test_price_change_does_not_touch_existing_orders(self, client, seed_product):
        order = client.post("/api/orders", json={
            "table_no": 1,
            "items": [{"product_id": seed_product.id, "name": "Caesar Salad", "qty": 1, "unit_price_cents": 1200}],
            "total_cents": 1200,
        }).json()

        client.put(f"/api/products/{seed_product.id}", json={"price_cents": 2000})

        fetched = client.get(f"/api/orders/{order['id']}").json()
        assert fetched["items"][0]["unit_price_cents"] == 1200
        assert fetched["total_cents"] == 1200
