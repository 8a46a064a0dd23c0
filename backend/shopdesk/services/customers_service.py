# Overview: Customer repository and due-balance lookups.

from __future__ import annotations

from ..models import Customer, money
from .repository import CollectionRepository
from .storage_service import CUSTOMERS_KEY


class CustomerRepository(CollectionRepository[Customer]):
    prefix = "C"
    storage_key = CUSTOMERS_KEY
    entity_name = "Customer"

    from_dict = staticmethod(Customer.from_dict)

    def build(self, record_id: str, data: dict) -> Customer:
        # A new customer starts with no payment history
        return Customer.from_dict({"dueAmount": 0, **data, "payments": [], "id": record_id})

    def apply_patch(self, customer_id: str, patch: dict) -> Customer:
        """Edit name/phone/dueAmount; the payment ledger is carried over untouched."""
        existing = self.require(customer_id)
        return self.update(Customer.from_dict({**existing.to_dict(), **patch, "id": existing.id}))


def search_customers(customers: list[Customer], term: str | None = None) -> list[Customer]:
    if not term:
        return list(customers)
    needle = term.lower()
    return [
        c for c in customers
        if needle in c.name.lower() or term in c.phone or needle in c.id.lower()
    ]


def total_due(customers: list[Customer]) -> float:
    return money(sum(c.due_amount for c in customers))
