"""Discount arithmetic and clothing category rules."""
import math
import pytest
from src.utils.errors import ValidationError
from src.utils.pricing import compute_discount, discounted_price, is_clothing_category, total_size_stock


@pytest.mark.parametrize("name", ["Clothing", "clothes", " SHOES ", "Accessories", "fashion", "Apparel"])
def test_clothing_like_categories(name):
    assert is_clothing_category(name)


@pytest.mark.parametrize("name", ["Electronics", "Home", "", None])
def test_other_categories_are_not_clothing(name):
    assert not is_clothing_category(name)


def test_percentage_discount():
    assert discounted_price(100, "10%") == 90


def test_absolute_discount():
    assert discounted_price(100, "15") == 85
    assert discounted_price(100, 15) == 85


def test_zero_and_empty_discount_keep_price():
    assert discounted_price(80, "0") == 80
    assert discounted_price(80, "") == 80
    assert discounted_price(80, None) == 80


def test_discount_larger_than_price_floors_at_zero():
    assert discounted_price(50, "80") == 0
    assert discounted_price(50, "150%") == 0


def test_negative_discount_never_raises_price():
    assert discounted_price(50, "-20") == 50
    assert discounted_price(50, "-10%") == 50


@pytest.mark.parametrize("price", [0.01, 1, 19.99, 100, 12345.67])
@pytest.mark.parametrize("raw", ["0", "1%", "33.3%", "99.99%", "100%", "0.5", "19.99", "1e9", "-5"])
def test_discounted_price_stays_within_bounds(price, raw):
    result = discounted_price(price, raw)
    assert 0 <= result <= price


@pytest.mark.parametrize("raw", ["abc", "10%%", "nan", "inf", "%"])
def test_invalid_discount_is_rejected(raw):
    with pytest.raises(ValidationError):
        compute_discount(100, raw)


def test_compute_discount_returns_amount_off():
    assert math.isclose(compute_discount(200, "12.5%"), 25)


class _Size:
    def __init__(self, stock):
        self.stock = stock


class _Color:
    def __init__(self, *stocks):
        self.sizes = [_Size(s) for s in stocks]


def test_total_size_stock_sums_every_color_and_size():
    assert total_size_stock([_Color(3, 4), _Color(5), _Color()]) == 12
