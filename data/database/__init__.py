"""Database data layer package."""
from .connection import engine, SessionLocal, get_db, Base
from .user_model import User
from .product_model import Category, Product, ProductColor, ProductSize, ProductReview
from .order_models import Order, OrderItem, Notification, OrderStatus, RequestStatus, PaymentMethod

__all__ = [
    "engine",
    "SessionLocal",
    "get_db",
    "Base",
    "User",
    "Category",
    "Product",
    "ProductColor",
    "ProductSize",
    "ProductReview",
    "Order",
    "OrderItem",
    "Notification",
    "OrderStatus",
    "RequestStatus",
    "PaymentMethod"
]
