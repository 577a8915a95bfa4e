"""Discount and stock rules for product variants."""
import math
from typing import Iterable, Optional, Union
from src.utils.errors import ValidationError

# Categories whose colors must carry size entries
CLOTHING_CATEGORIES = frozenset({
    "clothing",
    "clothes",
    "shoes",
    "accessories",
    "fashion",
    "apparel",
})


def is_clothing_category(category_name: Optional[str]) -> bool:
    """Check whether a category name belongs to the clothing-like set."""
    if not category_name:
        return False
    return category_name.strip().lower() in CLOTHING_CATEGORIES


def compute_discount(price: float, raw_discount: Union[str, float, None]) -> float:
    """
    Turn a raw discount into an amount off ``price``.

    Args:
        price: Price the discount applies to
        raw_discount: Percentage with a ``%`` suffix ("10%") or an absolute amount ("15")

    Returns:
        Discount amount, clamped to ``[0, price]``

    Raises:
        ValidationError: If the raw value is not a number or percentage
    """
    if raw_discount is None:
        return 0.0
    text = str(raw_discount).strip()
    if not text:
        return 0.0

    is_percent = text.endswith("%")
    number = text[:-1].strip() if is_percent else text
    try:
        value = float(number)
    except ValueError:
        raise ValidationError(f"Invalid discount value '{raw_discount}'")
    if not math.isfinite(value):
        raise ValidationError(f"Invalid discount value '{raw_discount}'")

    amount = price * value / 100 if is_percent else value
    return max(0.0, min(price, amount))


def discounted_price(price: float, raw_discount: Union[str, float, None]) -> float:
    """Price after discount; never below zero and never above ``price``."""
    if price <= 0:
        return 0.0
    result = round(price - compute_discount(price, raw_discount), 2)
    return max(0.0, min(price, result))


def total_size_stock(colors: Iterable) -> int:
    """Sum the stock of every size across every color."""
    return sum(int(size.stock or 0) for color in colors for size in color.sizes)
