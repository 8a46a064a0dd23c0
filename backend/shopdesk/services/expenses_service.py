# Overview: Expense repository and expense log filters.

from __future__ import annotations

from ..models import Expense, money
from .repository import CollectionRepository
from .storage_service import EXPENSES_KEY


class ExpenseRepository(CollectionRepository[Expense]):
    prefix = "E"
    storage_key = EXPENSES_KEY
    entity_name = "Expense"

    from_dict = staticmethod(Expense.from_dict)

    def build(self, record_id: str, data: dict) -> Expense:
        return Expense.from_dict({"date": self.today(), **data, "id": record_id})

    def apply_patch(self, expense_id: str, patch: dict) -> Expense:
        existing = self.require(expense_id)
        return self.update(Expense.from_dict({**existing.to_dict(), **patch, "id": existing.id}))


def search_expenses(expenses: list[Expense], *, term: str | None = None, category: str | None = None) -> list[Expense]:
    needle = (term or "").lower()
    return [
        e for e in expenses
        if needle in e.title.lower() and (not category or category == "All" or e.category == category)
    ]


def expense_categories(expenses: list[Expense]) -> list[str]:
    return sorted({e.category for e in expenses})


def total_amount(expenses: list[Expense]) -> float:
    return money(sum(e.amount for e in expenses))
