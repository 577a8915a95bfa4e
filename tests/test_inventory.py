"""Atomic stock decrements."""
from concurrent.futures import ThreadPoolExecutor
from data.database.connection import SessionLocal
from data.database.product_model import Product
from src.services.inventory import apply_order_stock, decrement_stock


def _stock(product_id):
    session = SessionLocal()
    try:
        return session.query(Product).filter(Product.id == product_id).one().stock
    finally:
        session.close()


def test_decrement_reduces_stock(db, shirt):
    assert decrement_stock(db, shirt.id, 4) is True
    assert _stock(shirt.id) == 6


def test_decrement_can_go_negative(db, shirt):
    decrement_stock(db, shirt.id, 15)
    assert _stock(shirt.id) == -5


def test_missing_product_is_reported_not_raised(db):
    assert decrement_stock(db, 999, 1) is False


def test_apply_order_stock_counts_matched_lines(db, shirt):
    class Line:
        def __init__(self, product_id, quantity):
            self.product_id = product_id
            self.quantity = quantity

    applied = apply_order_stock(db, [Line(shirt.id, 2), Line(999, 1), Line(shirt.id, 3)])
    assert applied == 2
    assert _stock(shirt.id) == 5


def test_concurrent_decrements_never_lose_updates(db, electronics):
    product = Product(
        name="Headphones", description="Wireless", price=50, stock=100,
        category_id=electronics.id, category_name="Electronics"
    )
    db.add(product)
    db.commit()
    product_id = product.id
    workers = 25

    def take_one(_):
        session = SessionLocal()
        try:
            return decrement_stock(session, product_id, 1)
        finally:
            session.close()

    with ThreadPoolExecutor(max_workers=8) as pool:
        results = list(pool.map(take_one, range(workers)))

    assert all(results)
    assert _stock(product_id) == 100 - workers
