"""Inventory adjustments applied when orders are placed."""
from typing import Iterable
from sqlalchemy import update
from sqlalchemy.exc import SQLAlchemyError
from sqlalchemy.orm import Session
from data.database.product_model import Product
from src.utils.errors import InternalError


def decrement_stock(db: Session, product_id: int, quantity: int) -> bool:
    """
    Decrement a product's stock in one UPDATE statement.

    The subtraction happens inside the database, so concurrent orders for the
    same product never lose an update. Stock is not checked first and can
    go negative.

    Args:
        db: Database session
        product_id: Product to adjust
        quantity: Units to take off

    Returns:
        True if a product row was updated, False if the product no longer exists

    Raises:
        InternalError: If the update fails
    """
    statement = (
        update(Product)
        .where(Product.id == product_id)
        .values(stock=Product.stock - quantity)
        .execution_options(synchronize_session=False)
    )
    try:
        result = db.execute(statement)
        db.commit()
    except SQLAlchemyError as e:
        db.rollback()
        print(f"[INVENTORY] Failed to decrement product {product_id} by {quantity}: {e}")
        raise InternalError("Failed to update product stock") from e

    if result.rowcount == 0:
        print(f"[INVENTORY] Product {product_id} not found, stock left unchanged")
        return False
    return True


def apply_order_stock(db: Session, items: Iterable) -> int:
    """
    Decrement stock once per order line.

    Each line is committed on its own; a failure part-way leaves the earlier
    lines applied.

    Returns:
        Number of lines that matched a product
    """
    applied = 0
    for item in items:
        if decrement_stock(db, item.product_id, item.quantity):
            applied += 1
    return applied
