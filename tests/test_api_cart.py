"""Tests for the cart HTTP endpoints."""


class TestCartEndpoints:
    def test_add_then_increment(self, client, customer, make_product, auth_headers):
        headers = auth_headers(customer)
        product = make_product(price="3.00", stock=10)

        created = client.post("/api/cart", json={"productId": product.id, "quantity": 2}, headers=headers)
        assert created.status_code == 201
        assert created.json()["data"]["item"]["quantity"] == 2

        updated = client.post("/api/cart", json={"productId": product.id, "quantity": 1}, headers=headers)
        assert updated.status_code == 200
        assert updated.json()["data"]["item"]["quantity"] == 3

        cart = client.get("/api/cart", headers=headers).json()["data"]["cart"]
        assert cart["totalItems"] == 3
        assert cart["itemCount"] == 1
        assert cart["totalAmount"] == 9.0

        count = client.get("/api/cart/count", headers=headers).json()["data"]
        assert count == {"totalItems": 3, "itemCount": 1}

    def test_add_over_stock(self, client, customer, make_product, auth_headers):
        product = make_product(stock=1)
        response = client.post(
            "/api/cart", json={"productId": product.id, "quantity": 2}, headers=auth_headers(customer),
        )
        assert response.status_code == 400
        assert response.json()["error"] == "InsufficientStock"

    def test_missing_field(self, client, customer, auth_headers):
        response = client.post("/api/cart", json={"quantity": 1}, headers=auth_headers(customer))
        assert response.status_code == 400
        body = response.json()
        assert body["error"] == "ValidationError"
        assert body["message"].startswith("Validation error: productId")

    def test_update_and_remove(self, client, customer, make_product, add_to_cart, auth_headers):
        headers = auth_headers(customer)
        line = add_to_cart(customer, make_product(name="Mug", stock=10), 1)

        response = client.put(f"/api/cart/{line.id}", json={"quantity": 4}, headers=headers)
        assert response.status_code == 200
        assert response.json()["data"]["item"]["quantity"] == 4

        response = client.delete(f"/api/cart/{line.id}", headers=headers)
        assert response.status_code == 200
        assert response.json()["message"] == "Mug removed from cart successfully"

        assert client.delete(f"/api/cart/{line.id}", headers=headers).status_code == 404

    def test_clear(self, client, customer, make_product, add_to_cart, auth_headers):
        headers = auth_headers(customer)
        add_to_cart(customer, make_product(), 1)

        assert client.delete("/api/cart", headers=headers).status_code == 200
        again = client.delete("/api/cart", headers=headers)
        assert again.status_code == 400
        assert again.json()["message"] == "Cart is already empty"

    def test_requires_token(self, client):
        assert client.get("/api/cart").status_code == 401
