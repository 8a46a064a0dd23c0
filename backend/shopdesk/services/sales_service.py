# Overview: Sale repository and the sale-completion command (sale record, stock decrement, customer due).

"""
Sale completion

complete_sale() is the single cross-collection operation:

1. create the Sale (next S### id, today's date, item snapshot,
   finalAmount = total - discount)
2. decrement each purchased product's quantity by cartQuantity; product
   ids that no longer exist are skipped
3. for a Due sale with a customer, add finalAmount to that customer's
   dueAmount

All three collections are written in one KeyValueStore.write_many call.
In-memory state changes only after that write succeeds, so a failed
commit leaves every repository untouched (all-or-nothing).

Stock is NOT re-validated here; the cart enforced it when lines were added.
"""
from __future__ import annotations

import copy
import logging
import math
from dataclasses import dataclass, field

from ..models import (
    CartItem,
    Customer,
    Product,
    Sale,
    PAYMENT_CASH,
    PAYMENT_DUE,
    PAYMENT_METHODS,
    WALK_IN_CUSTOMER,
    money,
)
from .repository import CollectionRepository
from .storage_service import SALES_KEY, KeyValueStore, StorageError


logger = logging.getLogger(__name__)


class SaleError(Exception):
    """Raised for sale operation errors."""
    def __init__(self, message: str, details: dict | None = None):
        super().__init__(message)
        self.details = details or {}


class SaleRepository(CollectionRepository[Sale]):
    prefix = "S"
    storage_key = SALES_KEY
    entity_name = "Sale"

    from_dict = staticmethod(Sale.from_dict)

    def build(self, record_id: str, data: dict) -> Sale:
        return Sale.from_dict({**data, "id": record_id, "date": self.today()})


@dataclass
class SaleCommand:
    items: list[CartItem]
    discount: float = 0.0
    payment_method: str = PAYMENT_CASH
    customer_id: str | None = None

    @property
    def subtotal(self) -> float:
        return money(sum(item.line_total for item in self.items))

    @property
    def final_amount(self) -> float:
        return money(self.subtotal - self.discount)


@dataclass
class SaleResult:
    sale: Sale
    products: list[Product] = field(default_factory=list)  # products whose stock changed
    customer: Customer | None = None  # customer whose due changed

    def to_dict(self) -> dict:
        return {
            "sale": self.sale.to_dict(),
            "products": [p.to_dict() for p in self.products],
            "customer": self.customer.to_dict() if self.customer else None,
        }


def _validate(command: SaleCommand, customers: CollectionRepository) -> Customer | None:
    if not command.items:
        raise SaleError("Cart is empty!")

    if command.payment_method not in PAYMENT_METHODS:
        raise SaleError(
            f"paymentMethod must be one of: {', '.join(PAYMENT_METHODS)}",
            details={"paymentMethod": command.payment_method},
        )

    if command.payment_method == PAYMENT_DUE and not command.customer_id:
        raise SaleError("Please select a customer for Due payments.")

    if not math.isfinite(command.discount) or command.discount < 0:
        raise SaleError("discount must be >= 0", details={"discount": command.discount})

    if not command.customer_id:
        return None

    customer = customers.get(command.customer_id)
    if customer is None:
        raise SaleError("Customer not found", details={"customerId": command.customer_id})
    return customer


def _decrement_stock(products: list[Product], items: list[CartItem]) -> tuple[list[Product], list[Product]]:
    staged = copy.deepcopy(products)
    index = {p.id: p for p in staged}
    touched: dict[str, Product] = {}
    for item in items:
        product = index.get(item.id)
        if product is None:
            logger.debug("Sale line %s has no matching product; stock left unchanged", item.id)
            continue
        product.quantity -= item.cart_quantity
        touched[product.id] = product
    return staged, list(touched.values())


def complete_sale(
    command: SaleCommand,
    *,
    store: KeyValueStore,
    sales: CollectionRepository,
    products: CollectionRepository,
    customers: CollectionRepository,
) -> SaleResult:
    """
    Record a sale and apply its stock and due-balance effects as one commit.

    Raises SaleError for invalid commands and when the commit fails.
    """
    customer = _validate(command, customers)

    sale_data = {
        "items": [item.to_dict() for item in command.items],
        "total": command.subtotal,
        "discount": money(command.discount),
        "finalAmount": command.final_amount,
        "paymentMethod": command.payment_method,
        "customerName": customer.name if customer else WALK_IN_CUSTOMER,
    }
    if customer is not None:
        sale_data["customerId"] = customer.id

    sale, staged_sales, allocation = sales.stage_add(sale_data)
    staged_products, touched_products = _decrement_stock(products.list(), sale.items)

    writes = {}
    writes.update(sales.writes_for(staged_sales))
    writes.update(products.writes_for(staged_products))
    writes.update(allocation.writes)

    staged_customers = None
    updated_customer = None
    if customer is not None and command.payment_method == PAYMENT_DUE:
        staged_customers = customers.list()
        for c in staged_customers:
            if c.id == customer.id:
                c.due_amount = money(c.due_amount + sale.final_amount)
                updated_customer = c
        writes.update(customers.writes_for(staged_customers))

    try:
        store.write_many(writes)
    except StorageError as exc:
        logger.error("Sale %s was not recorded: %s", sale.id, exc)
        raise SaleError("Failed to record sale", details={"sale_id": sale.id}) from exc

    sales.commit(staged_sales)
    sales.confirm(allocation)
    products.commit(staged_products)
    if staged_customers is not None:
        customers.commit(staged_customers)

    logger.info(
        "Sale %s completed: %s line(s), final %.2f, %s",
        sale.id, len(sale.items), sale.final_amount, sale.payment_method,
    )
    return SaleResult(
        sale=copy.deepcopy(sale),
        products=copy.deepcopy(touched_products),
        customer=copy.deepcopy(updated_customer),
    )
