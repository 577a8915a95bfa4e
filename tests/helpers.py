"""Fakes and payload builders used across the test modules."""
from datetime import datetime, timezone

T0 = datetime(2024, 3, 1, 12, 0, 0, tzinfo=timezone.utc)


class FakeDispatcher:
    def __init__(self, fail: bool = False):
        self.fail = fail
        self.sent = []

    def notify(self, user_id, template_type, context):
        if self.fail:
            raise RuntimeError("push service down")
        self.sent.append((user_id, template_type, context))

    @property
    def types(self):
        return [template_type for _, template_type, _ in self.sent]


class FakeGateway:
    def __init__(self):
        self.calls = []

    def create_payment_intent(self, amount, currency, metadata=None):
        self.calls.append((amount, currency, metadata))
        return {"id": "pi_123", "client_secret": "pi_123_secret_abc"}


class FakeImageStore:
    base_url = "https://cdn.test"

    def __init__(self, fail_delete: bool = False):
        self.fail_delete = fail_delete
        self.uploaded = []
        self.deleted = []

    def upload(self, file, folder, filename=None):
        public_id = f"{folder}/img{len(self.uploaded) + 1}"
        self.uploaded.append(public_id)
        return {"url": f"{self.base_url}/{public_id}", "publicId": public_id}

    def delete(self, public_id):
        if self.fail_delete:
            raise OSError("storage unavailable")
        self.deleted.append(public_id)

    def public_id_for(self, url):
        prefix = f"{self.base_url}/"
        return url[len(prefix):] if url.startswith(prefix) else None


def product_payload(category_id, **overrides):
    """JSON body for a product with one white color and one size."""
    payload = {
        "name": "Linen Shirt",
        "description": "Breathable summer shirt",
        "price": 100,
        "stock": 0,
        "category": category_id,
        "subcategory": "Shirts",
        "images": [{"public_id": "products/general1", "url": "https://cdn.test/products/general1"}],
        "colors": [
            {
                "colorId": "white",
                "colorName": "White",
                "colorCode": "#FFFFFF",
                "images": ["https://cdn.test/products/white1"],
                "sizes": [{"size": "M", "price": 100, "stock": 10, "discountper": "10%"}],
            }
        ],
    }
    payload.update(overrides)
    return payload


def order_payload(product_id, quantities=(2, 3), payment_method="COD"):
    """Checkout body with one line per quantity, all for the same product."""
    items = [
        {"name": "Linen Shirt", "price": 90, "quantity": qty, "images": "https://cdn.test/products/white1",
         "product": product_id}
        for qty in quantities
    ]
    item_price = sum(90 * qty for qty in quantities)
    return {
        "shippingInfo": {"address": "12 Market St", "city": "Lagos", "country": "Nigeria", "phone": "0800"},
        "orderItems": items,
        "paymentMethod": payment_method,
        "itemPrice": item_price,
        "tax": 0,
        "shippingCharges": 5,
        "totalAmount": item_price + 5,
    }


def auth(user) -> dict:
    return {"X-User-Id": str(user.id)}
