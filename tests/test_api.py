"""End-to-end HTTP flows through the FastAPI app."""
from datetime import timedelta
from data.database.order_models import Order
from src.utils.clock import utcnow
from tests.helpers import auth, order_payload, product_payload


def _create_shirt(client, admin, clothing):
    response = client.post("/admin/products", json=product_payload(clothing.id), headers=auth(admin))
    assert response.status_code == 201, response.text
    return response.json()


def test_health_and_root(client):
    assert client.get("/").status_code == 200
    assert client.head("/health").status_code == 200


def test_missing_or_unknown_user_is_unauthorized(client):
    assert client.get("/user/products").status_code == 401
    assert client.get("/user/products", headers={"X-User-Id": "9999"}).status_code == 401


def test_admin_routes_require_admin_role(client, customer):
    response = client.get("/admin/orders", headers=auth(customer))
    assert response.status_code == 403
    assert response.json()["detail"] == "Role: user is not allowed to access this resource"


def test_clothing_product_scenario(client, admin, clothing):
    product = _create_shirt(client, admin, clothing)
    size = product["colors"][0]["sizes"][0]
    assert size["discountprice"] == 90
    assert size["discountper"] == "10%"
    assert product["stock"] == 10
    assert product["numReviews"] == 0
    assert product["category"] == clothing.id
    assert product["images"][0]["public_id"] == "products/general1"


def test_validation_errors_map_to_400(client, admin, clothing):
    payload = product_payload(clothing.id)
    payload["colors"][0]["sizes"] = []
    response = client.post("/admin/products", json=payload, headers=auth(admin))
    assert response.status_code == 400
    assert "size" in response.json()["detail"]


def test_duplicate_colors_map_to_400(client, admin, clothing):
    payload = product_payload(clothing.id)
    payload["colors"].append(dict(payload["colors"][0]))
    response = client.post("/admin/products", json=payload, headers=auth(admin))
    assert response.status_code == 400
    assert response.json()["detail"] == "Duplicate color detected. Please ensure each color is unique."


def test_order_scenario_reduces_stock(client, admin, customer, clothing, dispatcher):
    product = _create_shirt(client, admin, clothing)

    response = client.post("/user/orders", json=order_payload(product["id"]), headers=auth(customer))
    assert response.status_code == 201, response.text
    order = response.json()
    assert order["orderStatus"] == "processing"
    assert [item["quantity"] for item in order["orderItems"]] == [2, 3]
    assert order["canReturn"] is False
    assert dispatcher.types == ["order_confirmation"]

    product = client.get(f"/user/products/{product['id']}", headers=auth(customer)).json()
    assert product["stock"] == 5


def test_status_flow_and_return_request(client, admin, customer, clothing, dispatcher):
    product = _create_shirt(client, admin, clothing)
    order = client.post("/user/orders", json=order_payload(product["id"]), headers=auth(customer)).json()
    order_id = order["id"]

    assert client.put(f"/admin/orders/{order_id}/advance", headers=auth(admin)).json()["orderStatus"] == "shipped"
    delivered = client.put(f"/admin/orders/{order_id}/advance", headers=auth(admin)).json()
    assert delivered["orderStatus"] == "delivered"
    assert delivered["deliveredAt"] is not None
    assert delivered["canReturn"] is True

    response = client.put(f"/admin/orders/{order_id}/advance", headers=auth(admin))
    assert response.status_code == 400
    assert response.json()["detail"] == "Order already delivered"

    body = {"reason": "Wrong size", "description": "Too tight on the shoulders"}
    response = client.post(f"/user/orders/{order_id}/return", json=body, headers=auth(customer))
    assert response.status_code == 200
    assert response.json()["returnRequest"]["status"] == "pending"

    response = client.post(f"/user/orders/{order_id}/return", json=body, headers=auth(customer))
    assert response.status_code == 400

    approved = client.put(f"/admin/orders/{order_id}/status", json={"orderStatus": "return_approved"},
                          headers=auth(admin)).json()
    assert approved["orderStatus"] == "return_approved"
    assert approved["returnRequest"]["status"] == "approved"
    assert approved["returnRequest"]["processedBy"] == admin.id

    assert dispatcher.types == ["order_confirmation", "order_shipped", "order_delivered", "return_requested"]


def test_return_after_window_is_rejected(client, db, admin, customer, clothing):
    product = _create_shirt(client, admin, clothing)
    order_id = client.post("/user/orders", json=order_payload(product["id"]), headers=auth(customer)).json()["id"]
    client.put(f"/admin/orders/{order_id}/status", json={"orderStatus": "delivered"}, headers=auth(admin))

    order = db.query(Order).filter(Order.id == order_id).one()
    order.delivered_at = utcnow() - timedelta(days=8)
    db.commit()

    body = {"reason": "Changed my mind", "description": "No longer needed"}
    response = client.post(f"/user/orders/{order_id}/return", json=body, headers=auth(customer))
    assert response.status_code == 400
    assert "expired" in response.json()["detail"]

    response = client.post(f"/user/orders/{order_id}/replace", json=body, headers=auth(customer))
    assert response.status_code == 200
    assert response.json()["replaceRequest"]["status"] == "pending"


def test_other_users_cannot_see_or_request_on_order(client, admin, customer, other_customer, clothing):
    product = _create_shirt(client, admin, clothing)
    order_id = client.post("/user/orders", json=order_payload(product["id"]), headers=auth(customer)).json()["id"]

    assert client.get(f"/user/orders/{order_id}", headers=auth(other_customer)).status_code == 403
    assert client.get(f"/user/orders/{order_id}", headers=auth(admin)).status_code == 200
    response = client.post(f"/user/orders/{order_id}/return", json={"reason": "r", "description": "d"},
                           headers=auth(other_customer))
    assert response.status_code == 403


def test_my_orders_and_admin_list(client, admin, customer, other_customer, clothing):
    product = _create_shirt(client, admin, clothing)
    client.post("/user/orders", json=order_payload(product["id"]), headers=auth(customer))
    client.post("/user/orders", json=order_payload(product["id"], quantities=(1,)), headers=auth(other_customer))

    mine = client.get("/user/orders", headers=auth(customer)).json()
    assert mine["totalOrders"] == 1
    assert client.get("/admin/orders", headers=auth(admin)).json()["totalOrders"] == 2


def test_admin_can_delete_order(client, admin, customer, clothing):
    product = _create_shirt(client, admin, clothing)
    order_id = client.post("/user/orders", json=order_payload(product["id"]), headers=auth(customer)).json()["id"]
    assert client.delete(f"/admin/orders/{order_id}", headers=auth(admin)).json()["success"] is True
    assert client.get(f"/user/orders/{order_id}", headers=auth(customer)).status_code == 404


def test_review_once(client, admin, customer, clothing):
    product = _create_shirt(client, admin, clothing)
    url = f"/user/products/{product['id']}/reviews"
    response = client.put(url, json={"rating": 4, "comment": "Nice"}, headers=auth(customer))
    assert response.status_code == 200
    assert response.json()["numReviews"] == 1
    assert response.json()["reviews"][0]["user"] == customer.id

    response = client.put(url, json={"rating": 5}, headers=auth(customer))
    assert response.status_code == 400
    assert response.json()["detail"] == "Product Already Reviewed"


def test_payment_intent(client, customer, gateway):
    response = client.post("/user/orders/payments", json={"totalAmount": 19.99}, headers=auth(customer))
    assert response.status_code == 200
    assert response.json()["clientSecret"] == "pi_123_secret_abc"
    assert gateway.calls[0][0] == 1999

    response = client.post("/user/orders/payments", json={}, headers=auth(customer))
    assert response.status_code == 400


def test_product_search_and_top(client, admin, customer, clothing):
    _create_shirt(client, admin, clothing)
    result = client.get("/user/products", params={"keyword": "LINEN"}, headers=auth(customer)).json()
    assert result["total"] == 1
    assert client.get("/user/products", params={"keyword": "boots"}, headers=auth(customer)).json()["total"] == 0
    assert len(client.get("/user/products/top", headers=auth(customer)).json()) == 1


def test_variant_images_and_delete_product(client, admin, clothing, image_store):
    product = _create_shirt(client, admin, clothing)
    update = {
        "colors": [
            {"colorId": "white", "images": [], "sizes": [{"size": "M", "price": 100, "stock": 3}]},
            {"colorId": "black", "colorName": "Black", "images": ["https://cdn.test/products/black1"],
             "sizes": [{"size": "L", "price": 120, "stock": 4, "discountper": "20"}]},
        ]
    }
    response = client.put(f"/admin/products/{product['id']}/images", json=update, headers=auth(admin))
    assert response.status_code == 200, response.text
    body = response.json()
    assert body["stock"] == 7
    assert body["colors"][1]["sizes"][0]["discountprice"] == 100

    response = client.delete(f"/admin/products/{product['id']}", headers=auth(admin))
    assert response.json()["success"] is True
    assert "products/black1" in image_store.deleted


def test_image_upload_and_single_delete(client, admin, clothing, image_store):
    response = client.post(
        "/admin/products/images/upload",
        files={"file": ("shirt.png", b"bytes", "image/png")},
        data={"folder": "products/clothing/white"},
        headers=auth(admin),
    )
    assert response.status_code == 201
    assert response.json()["publicId"] == "products/clothing/white/img1"

    product = _create_shirt(client, admin, clothing)
    response = client.delete(
        f"/admin/products/{product['id']}/images",
        params={"image_url": "https://cdn.test/products/general1"},
        headers=auth(admin),
    )
    assert response.status_code == 200
    assert response.json()["images"] == []
    assert image_store.deleted == ["products/general1"]


def test_categories(client, admin):
    response = client.post("/admin/categories", json={"category": "Shoes", "subcategories": ["Boots"]},
                           headers=auth(admin))
    assert response.status_code == 201
    assert client.post("/admin/categories", json={"category": "Shoes"}, headers=auth(admin)).status_code == 409
    assert [c["category"] for c in client.get("/admin/categories", headers=auth(admin)).json()] == ["Shoes"]


def test_cart_flow(client, admin, customer, clothing):
    product = _create_shirt(client, admin, clothing)
    headers = auth(customer)

    cart = client.post("/user/cart", json={"product_id": product["id"], "size": "M", "color": "white"},
                       headers=headers).json()
    assert cart["total"] == 90
    cart = client.put(f"/user/cart/{product['id']}/increase", params={"size": "M", "color": "white"},
                      headers=headers).json()
    assert cart["items"][0]["quantity"] == 2

    client.put(f"/user/cart/{product['id']}/decrease", params={"size": "M", "color": "white"}, headers=headers)
    response = client.put(f"/user/cart/{product['id']}/decrease", params={"size": "M", "color": "white"},
                          headers=headers)
    assert response.status_code == 400
    assert response.json()["detail"] == "Minimum quantity is 1"

    assert client.delete(f"/user/cart/{product['id']}", headers=headers).json()["item_count"] == 0
    assert client.get("/user/cart", headers=headers).json()["item_count"] == 0


def test_notification_inbox(client, admin, customer, clothing):
    from src.main import app
    from src.services.notifications import DatabaseNotificationDispatcher

    app.state.notification_dispatcher = DatabaseNotificationDispatcher()
    product = _create_shirt(client, admin, clothing)
    client.post("/user/orders", json=order_payload(product["id"]), headers=auth(customer))

    inbox = client.get("/user/notifications", headers=auth(customer)).json()
    assert [n["type"] for n in inbox] == ["order_confirmation"]
    assert inbox[0]["isRead"] is False

    response = client.put(f"/user/notifications/{inbox[0]['id']}/read", headers=auth(customer))
    assert response.json()["isRead"] is True
    assert client.get("/user/notifications", params={"unread": True}, headers=auth(customer)).json() == []
