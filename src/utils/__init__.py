"""Utility functions for the application."""
from .clock import utcnow, as_utc
from .pricing import CLOTHING_CATEGORIES, is_clothing_category, compute_discount, discounted_price, total_size_stock

__all__ = [
    "utcnow",
    "as_utc",
    "CLOTHING_CATEGORIES",
    "is_clothing_category",
    "compute_discount",
    "discounted_price",
    "total_size_stock"
]
