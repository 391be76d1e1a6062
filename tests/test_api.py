"""End-to-end tests through the FastAPI app."""

from uuid import uuid4

import pytest

from conftest import FakeImages, auth_header, make_product, make_user
from marketplace.api.routers import orders, products


@pytest.fixture()
def fake_images(app):
    fake = FakeImages()
    app.dependency_overrides[products.get_image_client] = lambda: fake
    yield fake
    app.dependency_overrides.clear()


class TestHealth:
    def test_health(self, client):
        response = client.get("/health")

        assert response.status_code == 200
        assert response.json() == {"status": "ok", "database": "ok"}


class TestUsersEndpoint:
    def test_register_and_read(self, client):
        response = client.post("/api/users", json={"name": "Ann", "email": "Ann@Example.com"})

        assert response.status_code == 201
        user = response.json()
        assert user["email"] == "ann@example.com"

        fetched = client.get(f"/api/users/{user['id']}")
        assert fetched.status_code == 200
        assert fetched.json()["name"] == "Ann"

    def test_duplicate_email(self, client):
        client.post("/api/users", json={"name": "Ann", "email": "ann@example.com"})

        response = client.post("/api/users", json={"name": "Other", "email": "ann@example.com"})

        assert response.status_code == 400
        assert response.json()["error"] == "conflict"

    def test_unknown_user(self, client):
        response = client.get(f"/api/users/{uuid4()}")

        assert response.status_code == 404
        assert response.json()["message"] == "User not found"

    def test_malformed_id_is_400(self, client):
        response = client.get("/api/users/not-a-uuid")

        assert response.status_code == 400
        assert response.json()["error"] == "validation_error"


class TestProductsEndpoint:
    def test_public_listing_in_camel_case(self, client, db, seller):
        make_product(db, seller, "Vintage Camera", price="150.00")
        make_product(db, seller, "Bicycle")

        response = client.get("/api/products", params={"search": "camera"})

        assert response.status_code == 200
        body = response.json()
        assert body["total"] == 1
        assert body["totalPages"] == 1
        assert body["currentPage"] == 1
        product = body["products"][0]
        assert product["price"] == 150.0
        assert product["sellerId"] == str(seller.id)
        assert product["seller"]["name"] == "Sam"

    def test_bad_paging_is_400(self, client):
        assert client.get("/api/products", params={"page": 0}).status_code == 400

    def test_get_by_id(self, client, db, seller):
        product = make_product(db, seller)

        response = client.get(f"/api/products/{product.id}")

        assert response.status_code == 200
        assert response.json()["id"] == str(product.id)

    def test_malformed_product_id(self, client):
        response = client.get("/api/products/xyz")

        assert response.status_code == 400
        assert response.json()["message"] == "Invalid product ID format"

    def test_create_with_images(self, client, seller, fake_images):
        response = client.post(
            "/api/products",
            data={
                "title": "Mountain Bike",
                "description": "Recently serviced",
                "category": "Sports & Outdoors",
                "price": "400",
                "condition": "Good",
                "location": "Denver, CO",
            },
            files=[
                ("images", ("a.jpg", b"one", "image/jpeg")),
                ("images", ("b.jpg", b"two", "image/jpeg")),
            ],
            headers=auth_header(seller),
        )

        assert response.status_code == 201
        body = response.json()
        assert body["status"] == "available"
        assert body["image"] == "https://img.test/1.jpg"
        assert [img["publicId"] for img in body["images"]] == ["img_1", "img_2"]

    def test_create_requires_auth(self, client, fake_images):
        response = client.post("/api/products", data={"title": "x"})

        assert response.status_code == 401
        assert response.json()["message"] == "User not authenticated"

    def test_create_rejects_bad_category(self, client, seller, fake_images):
        response = client.post(
            "/api/products",
            data={
                "title": "Rocket",
                "description": "Barely used",
                "category": "Spaceships",
                "price": "1",
                "condition": "Good",
                "location": "Mars",
            },
            headers=auth_header(seller),
        )

        assert response.status_code == 400
        assert response.json()["error"] == "validation_error"

    def test_update_by_stranger_is_403(self, client, db, seller, buyer, fake_images):
        product = make_product(db, seller)

        response = client.put(
            f"/api/products/{product.id}", data={"title": "Stolen"}, headers=auth_header(buyer)
        )

        assert response.status_code == 403

    def test_owner_update_and_delete(self, client, db, seller, fake_images):
        product = make_product(db, seller, price="10.00")

        updated = client.put(
            f"/api/products/{product.id}", data={"price": "12.5"}, headers=auth_header(seller)
        )
        deleted = client.delete(f"/api/products/{product.id}", headers=auth_header(seller))

        assert updated.status_code == 200
        assert updated.json()["price"] == 12.5
        assert deleted.json() == {"message": "Product deleted successfully"}
        assert client.get(f"/api/products/{product.id}").status_code == 404

    def test_direct_purchase_and_history(self, client, db, seller, buyer, fake_images):
        product = make_product(db, seller)

        response = client.post(
            "/api/products/purchase", json={"productId": str(product.id)}, headers=auth_header(buyer)
        )
        purchases = client.get("/api/products/user/purchases", headers=auth_header(buyer))
        listings = client.get("/api/products/user/my-products", headers=auth_header(seller))

        assert response.status_code == 200
        assert response.json()["product"]["status"] == "sold"
        assert [p["id"] for p in purchases.json()] == [str(product.id)]
        assert [p["id"] for p in listings.json()] == [str(product.id)]

    def test_self_purchase_is_400(self, client, db, seller, fake_images):
        product = make_product(db, seller)

        response = client.post(
            "/api/products/purchase", json={"productId": str(product.id)}, headers=auth_header(seller)
        )

        assert response.status_code == 400


class TestCartAndCheckoutEndpoints:
    def _fill(self, client, db, seller, buyer):
        a = make_product(db, seller, "A", price="10.00")
        b = make_product(db, seller, "B", price="5.00")
        client.post("/api/cart/add", json={"productId": str(a.id), "quantity": 2}, headers=auth_header(buyer))
        return client.post("/api/cart/add", json={"productId": str(b.id)}, headers=auth_header(buyer))

    def test_cart_requires_auth(self, client):
        assert client.get("/api/cart").status_code == 401

    def test_invalid_token(self, client):
        response = client.get("/api/cart", headers={"Authorization": "Bearer nope"})

        assert response.status_code == 401
        assert response.json()["message"] == "Invalid or expired token"

    def test_add_items(self, client, db, seller, buyer):
        response = self._fill(client, db, seller, buyer)

        assert response.status_code == 200
        cart = response.json()
        assert cart["totalAmount"] == 25.0
        assert cart["itemCount"] == 2
        assert cart["items"][0]["product"]["title"] == "A"

    def test_update_and_remove_line(self, client, db, seller, buyer):
        cart = self._fill(client, db, seller, buyer).json()
        line_a = cart["items"][0]["id"]

        updated = client.put(f"/api/cart/item/{line_a}", json={"quantity": 3}, headers=auth_header(buyer))
        removed = client.delete(f"/api/cart/item/{line_a}", headers=auth_header(buyer))

        assert updated.json()["totalAmount"] == 35.0
        assert removed.json()["totalAmount"] == 5.0
        assert removed.json()["itemCount"] == 1

    def test_zero_quantity_is_400(self, client, db, seller, buyer):
        product = make_product(db, seller)

        response = client.post(
            "/api/cart/add", json={"productId": str(product.id), "quantity": 0}, headers=auth_header(buyer)
        )

        assert response.status_code == 400

    def test_own_product_is_400(self, client, db, seller):
        product = make_product(db, seller)

        response = client.post("/api/cart/add", json={"productId": str(product.id)}, headers=auth_header(seller))

        assert response.status_code == 400
        assert response.json()["message"] == "Cannot add your own product to cart"

    def test_clear(self, client, db, seller, buyer):
        self._fill(client, db, seller, buyer)

        response = client.delete("/api/cart/clear", headers=auth_header(buyer))

        assert response.json()["items"] == []

    def test_checkout_empty_cart(self, client, buyer):
        response = client.post("/api/cart/checkout", json={}, headers=auth_header(buyer))

        assert response.status_code == 400
        assert response.json() == {"message": "Cart is empty", "error": "empty_cart"}

    def test_checkout_and_order_history(self, client, db, seller, buyer):
        self._fill(client, db, seller, buyer)

        response = client.post(
            "/api/cart/checkout",
            json={"shippingAddress": {"street": "1 Main St", "city": "Denver", "zipCode": "80202"}},
            headers=auth_header(buyer),
        )

        assert response.status_code == 201
        body = response.json()
        assert body["message"] == "Order created successfully"
        assert body["orderNumber"].startswith("ECO-")
        assert body["trackingNumber"].startswith("TRK")
        assert body["order"]["totalAmount"] == 25.0
        assert body["order"]["status"] == "confirmed"
        assert body["order"]["shippingAddress"]["zipCode"] == "80202"

        cart = client.get("/api/cart", headers=auth_header(buyer)).json()
        assert cart["items"] == []

        history = client.get("/api/cart/orders", headers=auth_header(buyer)).json()
        assert [o["orderNumber"] for o in history] == [body["orderNumber"]]

        order_id = body["order"]["id"]
        shipped = client.put(
            f"/api/cart/orders/{order_id}", json={"status": "shipped"}, headers=auth_header(buyer)
        )
        assert shipped.json()["status"] == "shipped"

    def test_checkout_without_body(self, client, db, seller, buyer):
        self._fill(client, db, seller, buyer)

        response = client.post("/api/cart/checkout", headers=auth_header(buyer))

        assert response.status_code == 201
        assert response.json()["order"]["shippingAddress"]["city"] is None

    def test_checkout_with_sold_product(self, client, db, seller, buyer):
        self._fill(client, db, seller, buyer)
        rival = make_user(db, "Rita")
        client.post("/api/cart/checkout", headers=auth_header(buyer))
        sold = make_product(db, seller, "Solo")
        client.post("/api/cart/add", json={"productId": str(sold.id)}, headers=auth_header(rival))
        client.post("/api/products/purchase", json={"productId": str(sold.id)}, headers=auth_header(buyer))

        response = client.post("/api/cart/checkout", headers=auth_header(rival))

        assert response.status_code == 400
        assert response.json()["error"] == "product_unavailable"
        assert "Solo" in response.json()["message"]

    def test_someone_elses_order_is_404(self, client, db, seller, buyer):
        self._fill(client, db, seller, buyer)
        order_id = client.post("/api/cart/checkout", headers=auth_header(buyer)).json()["order"]["id"]
        stranger = make_user(db, "Stan")

        response = client.get(f"/api/cart/orders/{order_id}", headers=auth_header(stranger))

        assert response.status_code == 404


class TestUnexpectedErrors:
    def test_internal_error_is_500_with_detail(self, app, client, buyer):
        class Exploding:
            def list_orders(self, user_id):
                raise RuntimeError("boom")

        app.dependency_overrides[orders.get_service] = lambda: Exploding()

        response = client.get("/api/cart/orders", headers=auth_header(buyer))

        assert response.status_code == 500
        assert response.json() == {"message": "Internal server error", "detail": "boom"}
