# Overview: Point-of-sale cart with stock-bounded quantities.

"""
Cart

Holds CartItem snapshots for one checkout. The only invariant enforced
here is 0 < cartQuantity <= product.quantity at the time the line is added
or changed; stock is not re-checked when the sale is completed.
"""
from __future__ import annotations

from typing import Iterable

from ..models import CartItem, Product, money


class CartError(Exception):
    """Raised when a cart change would break the stock bound."""
    def __init__(self, message: str, details: dict | None = None):
        super().__init__(message)
        self.details = details or {}


class Cart:
    def __init__(self, items: Iterable[CartItem] | None = None):
        self._items: list[CartItem] = list(items or [])

    @property
    def items(self) -> list[CartItem]:
        return list(self._items)

    @property
    def is_empty(self) -> bool:
        return not self._items

    @property
    def subtotal(self) -> float:
        return money(sum(item.line_total for item in self._items))

    def find(self, product_id: str) -> CartItem | None:
        for item in self._items:
            if item.id == product_id:
                return item
        return None

    def add(self, product: Product, quantity: int = 1) -> CartItem:
        if quantity <= 0:
            raise CartError("Quantity must be at least 1", details={"product_id": product.id})

        existing = self.find(product.id)
        if existing is not None:
            new_quantity = existing.cart_quantity + quantity
            if new_quantity > product.quantity:
                raise CartError(
                    f'Cannot add {quantity} more of "{product.name}".',
                    details={
                        "product_id": product.id,
                        "requested_total": new_quantity,
                        "available": product.quantity,
                        "in_cart": existing.cart_quantity,
                    },
                )
            updated = existing.with_quantity(new_quantity)
            self._items = [updated if item.id == product.id else item for item in self._items]
            return updated

        if quantity > product.quantity:
            raise CartError(
                f'Cannot add {quantity} of "{product.name}". Only {product.quantity} is available in stock.',
                details={"product_id": product.id, "requested_total": quantity, "available": product.quantity},
            )
        item = CartItem.from_product(product, quantity)
        self._items.append(item)
        return item

    def set_quantity(self, product: Product, quantity: int) -> CartItem:
        existing = self.find(product.id)
        if existing is None:
            raise CartError(f"{product.id} is not in the cart", details={"product_id": product.id})
        if quantity <= 0 or quantity > product.quantity:
            raise CartError(
                f"Please enter a quantity between 1 and {product.quantity}.",
                details={"product_id": product.id, "requested_total": quantity, "available": product.quantity},
            )
        updated = existing.with_quantity(quantity)
        self._items = [updated if item.id == product.id else item for item in self._items]
        return updated

    def remove(self, product_id: str) -> None:
        self._items = [item for item in self._items if item.id != product_id]

    def clear(self) -> None:
        self._items = []

    def to_dict(self) -> dict:
        return {
            "items": [item.to_dict() for item in self._items],
            "subtotal": self.subtotal,
            "count": len(self._items),
        }

    @classmethod
    def from_lines(cls, products: Iterable[Product], lines: list[dict]) -> "Cart":
        """
        Build a cart from request lines [{"id": "P001", "quantity": 2}, ...]
        against live inventory. Repeated ids accumulate like repeated adds.
        """
        if not isinstance(lines, list):
            raise CartError("items must be a list")

        by_id = {p.id: p for p in products}
        cart = cls()
        for line in lines:
            if not isinstance(line, dict):
                raise CartError("Each item must be an object")
            product_id = line.get("id") or line.get("productId")
            quantity = line.get("quantity", line.get("cartQuantity", 1))
            if not product_id:
                raise CartError("Each item needs a product id")
            if isinstance(quantity, bool) or not isinstance(quantity, int):
                raise CartError("quantity must be an integer", details={"product_id": product_id})
            product = by_id.get(product_id)
            if product is None:
                raise CartError("Product not found!", details={"product_id": product_id})
            cart.add(product, quantity)
        return cart
