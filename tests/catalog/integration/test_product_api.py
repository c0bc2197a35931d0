"""HTTP tests for product management and SKU search."""

import pytest

ADMIN = {"X-User-Id": "admin-1", "X-User-Role": "ADMIN"}


@pytest.fixture()
def category(make_category):
    return make_category("Home Electrics")


def _create(client, **overrides):
    payload = {"title": "Desk Fan", "price": 120.0, "stock": 5, "default_color": "White"}
    payload.update(overrides)
    return client.post("/products", json=payload, headers=ADMIN)


class TestCreateProductEndpoint:
    def test_create(self, client, category):
        response = _create(
            client,
            category_id=category.id,
            variants=[{"color_name": "Black", "size": "XL", "sku": "IGNORED"}],
        )

        assert response.status_code == 201
        body = response.json()
        assert body["sku"].startswith("HE-")
        assert body["sku"].endswith("-WHITE-UNNAMED")
        assert body["variants"][0]["sku"].endswith("-BLACK-XL")
        assert body["all_skus"] == [body["sku"], body["variants"][0]["sku"]]
        assert body["stock_status"] == "IN_STOCK"

    def test_negative_price(self, client):
        response = _create(client, price=-1)
        assert response.status_code == 400
        assert "price" in response.json()["error"]

    def test_unknown_stock_status(self, client):
        response = _create(client, stock_status="SOLD")
        assert response.status_code == 400

    def test_unknown_category(self, client):
        response = _create(client, category_id="missing")
        assert response.status_code == 400
        assert "category_id" in response.json()["error"]


class TestProductDetailEndpoint:
    def test_detail(self, client):
        product = _create(client).json()
        response = client.get(f"/products/{product['id']}")
        assert response.status_code == 200
        assert response.json()["title"] == "Desk Fan"

    def test_unknown(self, client):
        assert client.get("/products/missing").status_code == 404


class TestUpdateProductEndpoint:
    def test_partial_update_regenerates_sku(self, client, category):
        product = _create(client, category_id=category.id).json()

        response = client.put(f"/products/{product['id']}", json={"default_color": "Black", "stock": 0}, headers=ADMIN)

        assert response.status_code == 200
        body = response.json()
        assert body["title"] == "Desk Fan"
        assert body["sku"].endswith("-BLACK-UNNAMED")
        assert body["stock_status"] == "OUT_OF_STOCK"

    def test_unknown(self, client):
        assert client.put("/products/missing", json={"title": "X"}, headers=ADMIN).status_code == 404


class TestSearchEndpoint:
    def test_exact_sku(self, client):
        product = _create(client).json()
        response = client.get("/products/search", params={"sku": product["sku"].lower()})
        assert response.status_code == 200
        assert [p["id"] for p in response.json()] == [product["id"]]

    def test_no_match(self, client):
        _create(client)
        assert client.get("/products/search", params={"sku": "XX"}).json() == []

    def test_sku_required(self, client):
        assert client.get("/products/search").status_code == 400


class TestProductWritesNeedAdmin:
    def test_anonymous_create_is_unauthorized(self, client):
        response = client.post("/products", json={"title": "Desk Fan", "price": 120.0})
        assert response.status_code == 401

    def test_customer_create_is_forbidden(self, client):
        response = client.post(
            "/products",
            json={"title": "Desk Fan", "price": 120.0},
            headers={"X-User-Id": "user-1", "X-User-Role": "USER"},
        )
        assert response.status_code == 403

    def test_customer_update_is_forbidden(self, client):
        product = _create(client).json()
        response = client.put(f"/products/{product['id']}", json={"price": 1.0}, headers={"X-User-Id": "user-1"})
        assert response.status_code == 403
        assert client.get(f"/products/{product['id']}").json()["price"] == 120.0
