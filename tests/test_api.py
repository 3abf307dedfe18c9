from unittest.mock import patch

import requests

CHECKOUT = {
    "customerName": "Ada Lovelace",
    "customerEmail": "ada@example.com",
    "customerPhone": "555-0100",
    "address": "12 Analytical Row",
    "paymentMethod": "store",
}


class TestStorefront:
    def test_root(self, client):
        assert client.get("/").json()["status"] == "ok"

    def test_products_and_filters(self, client):
        assert len(client.get("/api/products").json()) == 3
        assert [p["id"] for p in client.get("/api/products", params={"category": "Electronics"}).json()] == ["2"]
        assert client.get("/api/products", params={"q": "shirt"}).json() == []
        assert client.get("/api/categories").json() == ["All", "Accessories", "Electronics", "Apparel"]

    def test_product_not_found(self, client):
        assert client.get("/api/products/999").status_code == 404

    def test_cart_flow(self, client):
        client.post("/api/cart/items", json={"product_id": "1"})
        client.post("/api/cart/items", json={"product_id": "1"})
        cart = client.post("/api/cart/items", json={"product_id": "3"}).json()
        assert cart["count"] == 3
        assert [i["quantity"] for i in cart["items"]] == [2, 1]

        cart = client.patch("/api/cart/items/1", json={"delta": -5}).json()
        assert cart["items"][0]["quantity"] == 1
        cart = client.delete("/api/cart/items/3").json()
        assert [i["id"] for i in cart["items"]] == ["1"]
        assert cart["total"] == 129.99

    def test_add_unknown_product(self, client):
        assert client.post("/api/cart/items", json={"product_id": "nope"}).status_code == 404

    def test_payment_details(self, client):
        client.post("/api/cart/items", json={"product_id": "3"})
        body = client.get("/api/checkout/payment").json()
        assert body["upi_url"] == "upi://pay?pa=yourname@okaxis&pn=AuraCommerce&am=35.00&cu=USD"
        assert body["qr_url"].startswith("https://api.qrserver.com/")


class TestCheckout:
    def test_places_order(self, client, state, store):
        client.post("/api/cart/items", json={"product_id": "3"})
        client.post("/api/cart/items", json={"product_id": "3"})
        with patch("notifications.requests.post") as post:
            res = client.post("/api/checkout", json=CHECKOUT)
        assert res.status_code == 200
        order = res.json()
        assert order["total"] == 70.0
        assert order["status"] == "pending"
        assert order["paymentMethod"] == "store"
        post.assert_not_called()
        assert client.get("/api/cart").json()["items"] == []
        assert store.load_orders()[0].id == order["id"]
        assert state.orders[0].id == order["id"]

    def test_notifications_run_in_background(self, client, state):
        state.update_settings({"email_webhook": "https://hooks.test/o"})
        client.post("/api/cart/items", json={"product_id": "1"})
        with patch("notifications.requests.post", side_effect=requests.ConnectionError()) as post:
            res = client.post("/api/checkout", json=CHECKOUT)
        assert res.status_code == 200
        assert post.call_args.args[0] == "https://hooks.test/o"
        assert post.call_args.kwargs["json"]["id"] == res.json()["id"]

    def test_empty_cart(self, client):
        res = client.post("/api/checkout", json=CHECKOUT)
        assert res.status_code == 400
        assert res.json()["detail"] == "Cart is empty"

    def test_missing_shipping_field(self, client, store):
        client.post("/api/cart/items", json={"product_id": "1"})
        res = client.post("/api/checkout", json={**CHECKOUT, "address": ""})
        assert res.status_code == 422
        assert store.load_orders() == []
        assert client.get("/api/cart").json()["count"] == 1


class TestAdmin:
    def test_login_rejected(self, client):
        res = client.post("/api/admin/login", json={"password": "wrong"})
        assert res.status_code == 401
        assert res.json()["detail"] == "Incorrect admin password. Please try again."

    def test_requires_token(self, client):
        assert client.get("/api/admin/orders").status_code == 401
        assert client.get("/api/admin/orders", headers={"X-Admin-Token": "forged"}).status_code == 401

    def test_logout_revokes_token(self, client, admin_headers):
        assert client.post("/api/admin/logout", headers=admin_headers).status_code == 200
        assert client.get("/api/admin/settings", headers=admin_headers).status_code == 401

    def test_product_crud(self, client, admin_headers, store):
        created = client.post(
            "/api/admin/products", headers=admin_headers, json={"name": "Lamp", "price": 20, "category": "Home", "stock": 3}
        ).json()
        assert client.get("/api/products").json()[0]["id"] == created["id"]

        updated = client.put(
            f"/api/admin/products/{created['id']}", headers=admin_headers, json={"name": "Desk Lamp", "price": 22, "category": "Home"}
        ).json()
        assert updated["id"] == created["id"]
        assert updated["image"] == created["image"]
        assert store.load_products()[0].name == "Desk Lamp"

        assert client.delete(f"/api/admin/products/{created['id']}", headers=admin_headers).status_code == 200
        assert [p.id for p in store.load_products()] == ["1", "2", "3"]
        assert client.delete("/api/admin/products/missing", headers=admin_headers).status_code == 404

    def test_orders_newest_first(self, client, admin_headers):
        ids = []
        for _ in range(2):
            client.post("/api/cart/items", json={"product_id": "2"})
            ids.append(client.post("/api/checkout", json=CHECKOUT).json()["id"])
        orders = client.get("/api/admin/orders", headers=admin_headers).json()
        assert [o["id"] for o in orders] == ids[::-1]

    def test_settings_update(self, client, admin_headers, store):
        res = client.put("/api/admin/settings", headers=admin_headers, json={"storeName": "Nova", "gpayId": "nova@upi"})
        assert res.json()["storeName"] == "Nova"
        saved = store.load_settings()
        assert saved.store_name == "Nova"
        assert saved.gpay_id == "nova@upi"
        assert saved.admin_password == "admin"

    def test_describe_requires_inputs(self, client, admin_headers):
        res = client.post("/api/admin/products/describe", headers=admin_headers, json={"name": "Lamp"})
        assert res.status_code == 400

    def test_describe(self, client, admin_headers):
        with patch("main.generate_description", return_value="Bright.") as gen:
            res = client.post("/api/admin/products/describe", headers=admin_headers, json={"name": "Lamp", "category": "Home"})
        assert res.json() == {"description": "Bright."}
        assert gen.call_args.args == ("Lamp", "Home")

    def test_webhook_test(self, client, admin_headers, state):
        assert client.post("/api/admin/webhook/test", headers=admin_headers).status_code == 400
        state.update_settings({"email_webhook": "https://hooks.test/o"})
        with patch("notifications.requests.post"):
            assert client.post("/api/admin/webhook/test", headers=admin_headers).json() == {"status": "success"}
        with patch("notifications.requests.post", side_effect=requests.ConnectionError()):
            assert client.post("/api/admin/webhook/test", headers=admin_headers).json() == {"status": "error"}
