"""Tests for the order HTTP endpoints."""

from fastapi.testclient import TestClient

from main import app
from modules.inventory.service import inventory_ledger


def checkout(client, headers, **body):
    body.setdefault("paymentMethod", "CREDIT_CARD")
    return client.post("/api/orders", json=body, headers=headers)


class TestCheckoutEndpoint:
    def test_created(self, client, db, customer, make_product, add_to_cart, auth_headers):
        product = make_product(name="Pen", price="2.50", stock=10)
        add_to_cart(customer, product, 4)

        response = checkout(client, auth_headers(customer), notes="Gift wrap")
        assert response.status_code == 201
        body = response.json()
        assert body["success"] is True
        assert body["message"] == "Order created successfully"

        order = body["data"]["order"]
        assert order["status"] == "PENDING"
        assert order["totalAmount"] == 10.0
        assert order["canCancel"] is True
        assert order["orderItems"][0]["productName"] == "Pen"
        assert order["orderItems"][0]["price"] == 2.5
        assert order["payments"][0]["status"] == "PENDING"
        assert inventory_ledger.get_stock(db, product.id) == 6

    def test_with_inline_address(self, client, customer, make_product, add_to_cart, auth_headers):
        add_to_cart(customer, make_product(), 1)
        response = checkout(client, auth_headers(customer), shippingAddress={
            "street": "1 Main St", "city": "Springfield", "state": "IL",
            "zipCode": "62701", "country": "US",
        })
        assert response.status_code == 201
        assert response.json()["data"]["order"]["shippingAddress"] == "1 Main St, Springfield, IL, 62701, US"

    def test_empty_cart(self, client, customer, auth_headers):
        response = checkout(client, auth_headers(customer))
        assert response.status_code == 400
        body = response.json()
        assert body == {"success": False, "message": "Cart is empty", "error": "EmptyCart"}

    def test_insufficient_stock(self, client, customer, make_product, add_to_cart, auth_headers):
        add_to_cart(customer, make_product(name="Lamp", stock=1), 2)
        response = checkout(client, auth_headers(customer))
        assert response.status_code == 400
        body = response.json()
        assert body["error"] == "InsufficientStock"
        assert "Lamp" in body["message"]

    def test_bad_payment_method(self, client, customer, make_product, add_to_cart, auth_headers):
        add_to_cart(customer, make_product(), 1)
        response = checkout(client, auth_headers(customer), paymentMethod="CASH")
        assert response.status_code == 400
        assert response.json()["error"] == "ValidationError"

    def test_requires_token(self, client):
        response = client.post("/api/orders", json={"paymentMethod": "CREDIT_CARD"})
        assert response.status_code == 401
        assert response.json()["error"] == "Unauthorized"

    def test_rejects_bad_token(self, client):
        response = client.post(
            "/api/orders", json={"paymentMethod": "CREDIT_CARD"},
            headers={"Authorization": "Bearer not-a-token"},
        )
        assert response.status_code == 401

    def test_inactive_user_is_unauthorized(self, client, make_user, auth_headers):
        ghost = make_user(is_active=False)
        assert checkout(client, auth_headers(ghost)).status_code == 401


class TestMyOrders:
    def test_list_and_detail(self, client, customer, make_product, add_to_cart, auth_headers):
        headers = auth_headers(customer)
        add_to_cart(customer, make_product(), 1)
        order_id = checkout(client, headers).json()["data"]["order"]["id"]

        listing = client.get("/api/orders/my-orders", headers=headers)
        assert listing.status_code == 200
        data = listing.json()["data"]
        assert [o["id"] for o in data["orders"]] == [order_id]
        assert data["pagination"]["totalItems"] == 1

        detail = client.get(f"/api/orders/{order_id}", headers=headers)
        assert detail.status_code == 200
        assert detail.json()["data"]["order"]["id"] == order_id

    def test_other_users_order_is_not_found(
        self, client, customer, make_user, make_product, add_to_cart, auth_headers,
    ):
        add_to_cart(customer, make_product(), 1)
        order_id = checkout(client, auth_headers(customer)).json()["data"]["order"]["id"]

        response = client.get(f"/api/orders/{order_id}", headers=auth_headers(make_user()))
        assert response.status_code == 404
        assert response.json()["error"] == "NotFound"

    def test_invalid_status_filter(self, client, customer, auth_headers):
        response = client.get("/api/orders/my-orders?status=LOST", headers=auth_headers(customer))
        assert response.status_code == 400

    def test_invalid_page(self, client, customer, auth_headers):
        response = client.get("/api/orders/my-orders?page=0", headers=auth_headers(customer))
        assert response.status_code == 400
        assert response.json()["error"] == "ValidationError"


class TestCancelEndpoint:
    def test_cancel(self, client, db, customer, make_product, add_to_cart, auth_headers):
        headers = auth_headers(customer)
        product = make_product(stock=5)
        add_to_cart(customer, product, 2)
        order_id = checkout(client, headers).json()["data"]["order"]["id"]

        response = client.patch(f"/api/orders/{order_id}/cancel", headers=headers)
        assert response.status_code == 200
        order = response.json()["data"]["order"]
        assert order["status"] == "CANCELLED"
        assert order["payments"][0]["status"] == "REFUNDED"
        assert inventory_ledger.get_stock(db, product.id) == 5

        again = client.patch(f"/api/orders/{order_id}/cancel", headers=headers)
        assert again.status_code == 400
        assert again.json()["error"] == "InvalidTransition"


class TestAdminOrders:
    def test_customer_is_forbidden(self, client, customer, auth_headers):
        response = client.get("/api/admin/orders", headers=auth_headers(customer))
        assert response.status_code == 403
        assert response.json()["error"] == "Forbidden"

    def test_list_all_and_update_status(
        self, client, admin, make_user, make_product, add_to_cart, auth_headers,
    ):
        buyer = make_user()
        add_to_cart(buyer, make_product(), 1)
        order_id = checkout(client, auth_headers(buyer)).json()["data"]["order"]["id"]

        listing = client.get("/api/admin/orders", headers=auth_headers(admin))
        assert listing.status_code == 200
        orders = listing.json()["data"]["orders"]
        assert orders[0]["user"]["email"] == buyer.email
        assert orders[0]["user"]["fullName"] == buyer.full_name

        response = client.patch(
            f"/api/admin/orders/{order_id}/status",
            json={"status": "SHIPPED"},
            headers=auth_headers(admin),
        )
        assert response.status_code == 200
        assert response.json()["data"]["order"]["status"] == "SHIPPED"

    def test_unknown_status(self, client, admin, auth_headers):
        response = client.patch(
            "/api/admin/orders/1/status", json={"status": "LOST"}, headers=auth_headers(admin),
        )
        assert response.status_code == 400


class TestEnvelope:
    def test_health(self, client):
        response = client.get("/health")
        assert response.status_code == 200
        assert response.json()["status"] == "ok"

    def test_unknown_route(self, client):
        response = client.get("/api/nowhere")
        assert response.status_code == 404
        assert response.json()["success"] is False

    def test_unexpected_error_is_hidden(self, db, customer, auth_headers, monkeypatch):
        def override_get_db():
            yield db

        from config.database import get_db
        from modules.order.query import order_query_service

        def explode(*args, **kwargs):
            raise RuntimeError("boom")

        monkeypatch.setattr(order_query_service, "list_orders", explode)
        app.dependency_overrides[get_db] = override_get_db
        try:
            client = TestClient(app, raise_server_exceptions=False)
            response = client.get("/api/orders/my-orders", headers=auth_headers(customer))
        finally:
            app.dependency_overrides.clear()

        assert response.status_code == 500
        assert response.json() == {
            "success": False, "message": "Internal server error", "error": "InternalError",
        }
