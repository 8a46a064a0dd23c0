"""
Shop entities.

Plain dataclasses persisted as JSON blobs. to_dict()/from_dict() use the
camelCase keys of the stored layout so existing data loads unchanged.

SNAPSHOTS: CartItem (and therefore Sale.items) copies every Product field
at the moment the item is added. Later product edits never reach back into
historical sales.
"""
from __future__ import annotations

from dataclasses import dataclass, field, replace
from typing import Optional


PAYMENT_CASH = "Cash"
PAYMENT_CARD = "Card"
PAYMENT_DUE = "Due"
PAYMENT_METHODS = (PAYMENT_CASH, PAYMENT_CARD, PAYMENT_DUE)

WALK_IN_CUSTOMER = "Walk-in Customer"


def money(value) -> float:
    """Round a monetary amount to cents."""
    return round(float(value), 2)


@dataclass
class Product:
    id: str
    name: str
    category: str
    purchase_price: float
    selling_price: float
    quantity: int
    date_added: str

    def to_dict(self) -> dict:
        return {
            "id": self.id,
            "name": self.name,
            "category": self.category,
            "purchasePrice": self.purchase_price,
            "sellingPrice": self.selling_price,
            "quantity": self.quantity,
            "dateAdded": self.date_added,
        }

    @classmethod
    def from_dict(cls, data: dict) -> "Product":
        return cls(
            id=str(data["id"]),
            name=str(data["name"]),
            category=str(data.get("category", "")),
            purchase_price=float(data["purchasePrice"]),
            selling_price=float(data["sellingPrice"]),
            quantity=int(data["quantity"]),
            date_added=str(data.get("dateAdded", "")),
        )

    @property
    def stock_value(self) -> float:
        return self.purchase_price * self.quantity


@dataclass
class CartItem:
    id: str
    name: str
    category: str
    purchase_price: float
    selling_price: float
    quantity: int
    date_added: str
    cart_quantity: int
    cost: float

    @classmethod
    def from_product(cls, product: Product, cart_quantity: int) -> "CartItem":
        return cls(
            id=product.id,
            name=product.name,
            category=product.category,
            purchase_price=product.purchase_price,
            selling_price=product.selling_price,
            quantity=product.quantity,
            date_added=product.date_added,
            cart_quantity=cart_quantity,
            cost=money(product.purchase_price * cart_quantity),
        )

    def with_quantity(self, cart_quantity: int) -> "CartItem":
        return replace(
            self,
            cart_quantity=cart_quantity,
            cost=money(self.purchase_price * cart_quantity),
        )

    @property
    def line_total(self) -> float:
        return self.selling_price * self.cart_quantity

    def to_dict(self) -> dict:
        return {
            "id": self.id,
            "name": self.name,
            "category": self.category,
            "purchasePrice": self.purchase_price,
            "sellingPrice": self.selling_price,
            "quantity": self.quantity,
            "dateAdded": self.date_added,
            "cartQuantity": self.cart_quantity,
            "cost": self.cost,
        }

    @classmethod
    def from_dict(cls, data: dict) -> "CartItem":
        purchase_price = float(data["purchasePrice"])
        cart_quantity = int(data["cartQuantity"])
        return cls(
            id=str(data["id"]),
            name=str(data["name"]),
            category=str(data.get("category", "")),
            purchase_price=purchase_price,
            selling_price=float(data["sellingPrice"]),
            quantity=int(data.get("quantity", 0)),
            date_added=str(data.get("dateAdded", "")),
            cart_quantity=cart_quantity,
            cost=float(data.get("cost", purchase_price * cart_quantity)),
        )


@dataclass
class Sale:
    id: str
    items: list[CartItem]
    total: float
    discount: float
    final_amount: float
    payment_method: str
    date: str
    customer_id: Optional[str] = None
    customer_name: Optional[str] = None

    @property
    def cogs(self) -> float:
        """Snapshotted purchase cost of every line in the sale."""
        return sum(item.purchase_price * item.cart_quantity for item in self.items)

    def to_dict(self) -> dict:
        data = {
            "id": self.id,
            "items": [item.to_dict() for item in self.items],
            "total": self.total,
            "discount": self.discount,
            "finalAmount": self.final_amount,
            "paymentMethod": self.payment_method,
            "date": self.date,
        }
        if self.customer_id is not None:
            data["customerId"] = self.customer_id
        if self.customer_name is not None:
            data["customerName"] = self.customer_name
        return data

    @classmethod
    def from_dict(cls, data: dict) -> "Sale":
        return cls(
            id=str(data["id"]),
            items=[CartItem.from_dict(item) for item in data.get("items", [])],
            total=float(data["total"]),
            discount=float(data.get("discount", 0)),
            final_amount=float(data["finalAmount"]),
            payment_method=str(data["paymentMethod"]),
            date=str(data["date"]),
            customer_id=data.get("customerId"),
            customer_name=data.get("customerName"),
        )


@dataclass
class Expense:
    id: str
    title: str
    category: str
    amount: float
    date: str

    def to_dict(self) -> dict:
        return {
            "id": self.id,
            "title": self.title,
            "category": self.category,
            "amount": self.amount,
            "date": self.date,
        }

    @classmethod
    def from_dict(cls, data: dict) -> "Expense":
        return cls(
            id=str(data["id"]),
            title=str(data["title"]),
            category=str(data.get("category", "")),
            amount=float(data["amount"]),
            date=str(data["date"]),
        )


@dataclass(frozen=True)
class Payment:
    """Immutable once created."""
    id: str
    date: str
    amount: float

    def to_dict(self) -> dict:
        return {"id": self.id, "date": self.date, "amount": self.amount}

    @classmethod
    def from_dict(cls, data: dict) -> "Payment":
        return cls(id=str(data["id"]), date=str(data["date"]), amount=float(data["amount"]))


@dataclass
class Customer:
    id: str
    name: str
    phone: str
    due_amount: float = 0.0
    payments: list[Payment] = field(default_factory=list)  # newest first

    def to_dict(self) -> dict:
        return {
            "id": self.id,
            "name": self.name,
            "phone": self.phone,
            "dueAmount": self.due_amount,
            "payments": [p.to_dict() for p in self.payments],
        }

    @classmethod
    def from_dict(cls, data: dict) -> "Customer":
        return cls(
            id=str(data["id"]),
            name=str(data["name"]),
            phone=str(data.get("phone", "")),
            due_amount=float(data.get("dueAmount", 0)),
            payments=[Payment.from_dict(p) for p in (data.get("payments") or [])],
        )
