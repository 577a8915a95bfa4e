"""Cart state management for users."""
from typing import Any, Dict, List, Optional
from dataclasses import dataclass
from collections import defaultdict
from src.config import settings


@dataclass
class CartItem:
    """Represents a product variant in the cart."""
    product_id: int
    name: str
    quantity: int
    price: float
    size: str = ""
    color: str = ""
    image: Optional[str] = None

    @property
    def subtotal(self) -> float:
        """Calculate subtotal for this cart item."""
        return float(self.price * self.quantity)

    def matches(self, product_id: int, size: str, color: str) -> bool:
        return self.product_id == product_id and self.size == size and self.color == color


class CartManager:
    """Manages shopping carts keyed by user id."""

    def __init__(self, max_item_quantity: int = 10):
        """
        Initialize cart manager with empty carts.

        Args:
            max_item_quantity: Upper bound enforced by increase_item
        """
        self.max_item_quantity = max_item_quantity
        # user_id -> List[CartItem]
        self._carts: Dict[int, List[CartItem]] = defaultdict(list)

    def add_to_cart(
        self,
        user_id: int,
        product_id: int,
        name: str,
        quantity: int,
        price: float,
        size: str = "",
        color: str = "",
        image: Optional[str] = None
    ) -> Dict[str, Any]:
        """
        Add a product variant to the cart.

        The same product in the same size and color increases the existing
        line; a different size or color becomes a new line.

        Returns:
            Dictionary with cart status and message
        """
        if quantity <= 0:
            return self._result(user_id, False, "Quantity must be greater than 0.")

        cart = self._carts[user_id]
        for item in cart:
            if item.matches(product_id, size, color):
                item.quantity += quantity
                return self._result(user_id, True, f"Updated {name} quantity to {item.quantity}")

        cart.append(CartItem(
            product_id=product_id,
            name=name,
            quantity=quantity,
            price=price,
            size=size,
            color=color,
            image=image
        ))
        return self._result(user_id, True, f"Added {quantity}x {name} to cart")

    def increase_item(self, user_id: int, product_id: int, size: str = "", color: str = "") -> Dict[str, Any]:
        """Increase a line's quantity by one, up to the configured maximum."""
        item = self._find(user_id, product_id, size, color)
        if item is None:
            return self._result(user_id, False, f"Product with ID {product_id} not found in cart.")
        if item.quantity >= self.max_item_quantity:
            return self._result(user_id, False, "Max quantity reached")
        item.quantity += 1
        return self._result(user_id, True, f"Updated {item.name} quantity to {item.quantity}")

    def decrease_item(self, user_id: int, product_id: int, size: str = "", color: str = "") -> Dict[str, Any]:
        """Decrease a line's quantity by one; the minimum is one."""
        item = self._find(user_id, product_id, size, color)
        if item is None:
            return self._result(user_id, False, f"Product with ID {product_id} not found in cart.")
        if item.quantity <= 1:
            return self._result(user_id, False, "Minimum quantity is 1")
        item.quantity -= 1
        return self._result(user_id, True, f"Updated {item.name} quantity to {item.quantity}")

    def remove_from_cart(self, user_id: int, product_id: int) -> Dict[str, Any]:
        """Remove every line of a product, whatever its size or color."""
        cart = self._carts.get(user_id, [])
        remaining = [item for item in cart if item.product_id != product_id]
        if len(remaining) == len(cart):
            return self._result(user_id, False, f"Product with ID {product_id} not found in cart.")
        self._carts[user_id] = remaining
        return self._result(user_id, True, "Item removed from cart")

    def get_cart(self, user_id: int) -> List[CartItem]:
        return self._carts.get(user_id, [])

    def get_cart_total(self, user_id: int) -> float:
        return sum(item.subtotal for item in self.get_cart(user_id))

    def clear_cart(self, user_id: int):
        if user_id in self._carts:
            self._carts[user_id] = []

    def get_cart_summary(self, user_id: int) -> Dict[str, Any]:
        """
        Get formatted cart summary.

        Args:
            user_id: Cart owner

        Returns:
            Dictionary with cart summary
        """
        cart = self.get_cart(user_id)
        total = self.get_cart_total(user_id)

        items = [
            {
                "product_id": item.product_id,
                "name": item.name,
                "quantity": item.quantity,
                "price": float(item.price),
                "size": item.size,
                "color": item.color,
                "image": item.image,
                "subtotal": float(item.subtotal)
            }
            for item in cart
        ]

        return {
            "items": items,
            "item_count": len(cart),
            "total": float(total),
            "total_formatted": f"${total:.2f}"
        }

    def _find(self, user_id: int, product_id: int, size: str, color: str) -> Optional[CartItem]:
        for item in self._carts.get(user_id, []):
            if item.matches(product_id, size, color):
                return item
        return None

    def _result(self, user_id: int, success: bool, message: str) -> Dict[str, Any]:
        return {
            "success": success,
            "message": message,
            "cart_total": self.get_cart_total(user_id),
            "item_count": len(self.get_cart(user_id))
        }


# Global cart manager instance
cart_manager = CartManager(max_item_quantity=settings.cart_max_item_quantity)
