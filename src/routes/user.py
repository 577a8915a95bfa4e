"""User routes: catalog browsing, reviews, orders, payments, cart and notifications."""
from fastapi import APIRouter, Depends, Query, status
from sqlalchemy.orm import Session
from typing import List, Optional
from pydantic import BaseModel, Field
from src.config import settings
from data.database.connection import get_db
from data.database.order_schema import (
    NotificationResponse, OrderCreate, OrderListResponse, OrderResponse,
    PaymentIntentRequest, PaymentIntentResponse, ServiceRequestCreate
)
from data.database.product_model import Product
from data.database.product_schema import ProductResponse, ReviewCreate
from src.routes.dependencies import get_current_user, get_notifier, get_payment_gateway
from src.services import catalog, notifications, orders, returns
from src.services.notifications import NotificationTrigger
from src.services.payments import create_order_payment
from src.services.users import UserRecord
from src.utils.cart import cart_manager
from src.utils.errors import ValidationError

router = APIRouter(prefix="/user", tags=["user"], dependencies=[Depends(get_current_user)])


# Product endpoints
class ProductListResponse(BaseModel):
    """Product list response model."""
    products: List[ProductResponse]
    total: int
    page: int
    page_size: int


@router.get("/products", response_model=ProductListResponse, summary="Get products with search")
def get_products(
    db: Session = Depends(get_db),
    keyword: Optional[str] = Query(None, description="Case-insensitive search on the product name"),
    category: Optional[int] = Query(None, description="Filter by category id"),
    page: int = Query(1, ge=1, description="Page number (1-indexed)"),
    page_size: int = Query(20, ge=1, le=100, description="Number of items per page")
):
    """
    Get products, newest first.

    Args:
        keyword: Name search
        category: Category id filter
        page: Page number (default: 1)
        page_size: Items per page (default: 20, max: 100)
    """
    products, total = catalog.list_products(db, keyword=keyword, category_id=category, page=page, page_size=page_size)
    return ProductListResponse(
        products=[ProductResponse.model_validate(product) for product in products],
        total=total,
        page=page,
        page_size=page_size
    )


@router.get("/products/top", response_model=List[ProductResponse], summary="Get top rated products")
def get_top_products(db: Session = Depends(get_db)):
    return catalog.top_products(db, limit=3)


@router.get("/products/{product_id}", response_model=ProductResponse, summary="Get product by ID")
def get_product(product_id: int, db: Session = Depends(get_db)):
    return catalog.get_product(db, product_id)


@router.put(
    "/products/{product_id}/reviews",
    response_model=ProductResponse,
    summary="Review a product",
    description="Add a review; each user can review a product once"
)
def create_review(
    product_id: int,
    review: ReviewCreate,
    db: Session = Depends(get_db),
    user: UserRecord = Depends(get_current_user)
):
    return catalog.submit_review(db, product_id, user, review.rating, review.comment)


# Order endpoints
@router.post(
    "/orders",
    response_model=OrderResponse,
    status_code=status.HTTP_201_CREATED,
    summary="Place an order",
    description="Create an order from the submitted items and totals, then update product stock"
)
def create_order(
    order: OrderCreate,
    db: Session = Depends(get_db),
    user: UserRecord = Depends(get_current_user),
    notifier: NotificationTrigger = Depends(get_notifier)
):
    created = orders.create_order(db, user.id, order, notifier=notifier)
    return orders.order_to_response(created)


@router.get("/orders", response_model=OrderListResponse, summary="Get user's orders")
def get_my_orders(db: Session = Depends(get_db), user: UserRecord = Depends(get_current_user)):
    """Get all orders placed by the current user, newest first."""
    my_orders = orders.list_user_orders(db, user.id)
    return OrderListResponse(
        total_orders=len(my_orders),
        orders=[orders.order_to_response(order) for order in my_orders]
    )


@router.post(
    "/orders/payments",
    response_model=PaymentIntentResponse,
    summary="Create a payment intent",
    description="Create a payment intent for an order total; the client confirms it with the returned secret"
)
def create_payment(
    request: PaymentIntentRequest,
    user: UserRecord = Depends(get_current_user),
    gateway=Depends(get_payment_gateway)
):
    return create_order_payment(gateway, request.total_amount, settings.payment_currency, user_id=user.id)


@router.get("/orders/{order_id}", response_model=OrderResponse, summary="Get order by ID")
def get_order(order_id: int, db: Session = Depends(get_db), user: UserRecord = Depends(get_current_user)):
    return orders.order_to_response(orders.get_order_for_user(db, order_id, user))


@router.post(
    "/orders/{order_id}/return",
    response_model=OrderResponse,
    summary="Request a return",
    description=f"Request a return within {settings.return_window_days} days of delivery"
)
def request_return(
    order_id: int,
    request: ServiceRequestCreate,
    db: Session = Depends(get_db),
    user: UserRecord = Depends(get_current_user),
    notifier: NotificationTrigger = Depends(get_notifier)
):
    order = returns.request_return(db, order_id, user.id, request.reason, request.description, notifier=notifier)
    return orders.order_to_response(order)


@router.post(
    "/orders/{order_id}/replace",
    response_model=OrderResponse,
    summary="Request a replacement",
    description=f"Request a replacement within {settings.replace_window_days} days of delivery"
)
def request_replace(
    order_id: int,
    request: ServiceRequestCreate,
    db: Session = Depends(get_db),
    user: UserRecord = Depends(get_current_user),
    notifier: NotificationTrigger = Depends(get_notifier)
):
    order = returns.request_replace(db, order_id, user.id, request.reason, request.description, notifier=notifier)
    return orders.order_to_response(order)


# Cart endpoints
class CartAddRequest(BaseModel):
    """Cart add request model."""
    product_id: int = Field(..., description="Product to add")
    quantity: int = Field(1, ge=1, description="Units to add")
    size: str = Field("", description="Size label, for clothing")
    color: str = Field("", description="Color id")


class CartItemResponse(BaseModel):
    """Cart item response model."""
    product_id: int
    name: str
    quantity: int
    price: float
    size: str
    color: str
    image: Optional[str] = None
    subtotal: float


class CartResponse(BaseModel):
    """Cart response model."""
    items: List[CartItemResponse]
    item_count: int
    total: float
    total_formatted: str


def _cart_response(user_id: int) -> CartResponse:
    summary = cart_manager.get_cart_summary(user_id)
    return CartResponse(
        items=[CartItemResponse(**item) for item in summary["items"]],
        item_count=summary["item_count"],
        total=summary["total"],
        total_formatted=summary["total_formatted"]
    )


def _check(result: dict):
    if not result["success"]:
        raise ValidationError(result["message"])


def _variant_price_and_image(product: Product, size: str, color: str):
    """Unit price and image for the chosen color/size, falling back to the product."""
    price = product.price
    image = product.images[0]["url"] if product.images else None
    chosen = next((c for c in product.colors if c.color_id == color), None)
    if chosen is not None:
        if chosen.images:
            image = chosen.images[0]
        entry = next((s for s in chosen.sizes if s.size == size), None)
        if entry is not None:
            price = entry.discount_price
    return price, image


@router.get("/cart", response_model=CartResponse, summary="Get user's cart")
def get_cart(user: UserRecord = Depends(get_current_user)):
    """
    Get the current user's shopping cart.

    Cart is maintained in-memory per user.
    """
    return _cart_response(user.id)


@router.post("/cart", response_model=CartResponse, summary="Add to cart")
def add_to_cart(
    item: CartAddRequest,
    db: Session = Depends(get_db),
    user: UserRecord = Depends(get_current_user)
):
    product = catalog.get_product(db, item.product_id)
    price, image = _variant_price_and_image(product, item.size, item.color)
    _check(cart_manager.add_to_cart(
        user_id=user.id,
        product_id=product.id,
        name=product.name,
        quantity=item.quantity,
        price=price,
        size=item.size,
        color=item.color,
        image=image
    ))
    return _cart_response(user.id)


@router.put("/cart/{product_id}/increase", response_model=CartResponse, summary="Increase item quantity")
def increase_cart_item(
    product_id: int,
    size: str = "",
    color: str = "",
    user: UserRecord = Depends(get_current_user)
):
    _check(cart_manager.increase_item(user.id, product_id, size=size, color=color))
    return _cart_response(user.id)


@router.put("/cart/{product_id}/decrease", response_model=CartResponse, summary="Decrease item quantity")
def decrease_cart_item(
    product_id: int,
    size: str = "",
    color: str = "",
    user: UserRecord = Depends(get_current_user)
):
    _check(cart_manager.decrease_item(user.id, product_id, size=size, color=color))
    return _cart_response(user.id)


@router.delete("/cart/{product_id}", response_model=CartResponse, summary="Remove item from cart")
def remove_cart_item(product_id: int, user: UserRecord = Depends(get_current_user)):
    _check(cart_manager.remove_from_cart(user.id, product_id))
    return _cart_response(user.id)


@router.delete("/cart", response_model=CartResponse, summary="Clear cart")
def clear_cart(user: UserRecord = Depends(get_current_user)):
    cart_manager.clear_cart(user.id)
    return _cart_response(user.id)


# Notification endpoints
@router.get("/notifications", response_model=List[NotificationResponse], summary="Get user's notifications")
def get_notifications(
    unread: bool = Query(False, description="Only unread notifications"),
    db: Session = Depends(get_db),
    user: UserRecord = Depends(get_current_user)
):
    return notifications.list_notifications(db, user.id, unread_only=unread)


@router.put(
    "/notifications/{notification_id}/read",
    response_model=NotificationResponse,
    summary="Mark a notification as read"
)
def mark_notification_read(
    notification_id: int,
    db: Session = Depends(get_db),
    user: UserRecord = Depends(get_current_user)
):
    return notifications.mark_notification_read(db, user.id, notification_id)
