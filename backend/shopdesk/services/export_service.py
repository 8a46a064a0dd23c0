# Overview: CSV export of the sales and expenses inside a report range.

from __future__ import annotations

from ..models import Expense, Sale


CSV_HEADERS = ("Type", "Date", "ID", "Description", "Category", "Amount", "Payment Method")


def _quoted(value: str) -> str:
    # Description and Category are always quoted; embedded quotes are doubled
    return '"' + value.replace('"', '""') + '"'


def _unique_in_order(values) -> list[str]:
    seen: dict[str, None] = {}
    for v in values:
        seen.setdefault(v, None)
    return list(seen)


def sale_row(sale: Sale) -> list[str]:
    description = "; ".join(f"{item.name} x{item.cart_quantity}" for item in sale.items)
    category = "; ".join(_unique_in_order(item.category for item in sale.items))
    return [
        "Sale",
        sale.date,
        sale.id,
        _quoted(description),
        _quoted(category),
        f"{sale.final_amount:.2f}",
        sale.payment_method,
    ]


def expense_row(expense: Expense) -> list[str]:
    return [
        "Expense",
        expense.date,
        expense.id,
        _quoted(expense.title),
        _quoted(expense.category),
        f"{expense.amount:.2f}",
        "-",
    ]


def export_report_csv(sales: list[Sale], expenses: list[Expense]) -> str:
    """Sales rows first, then expense rows, in collection order."""
    rows = [",".join(CSV_HEADERS)]
    rows.extend(",".join(sale_row(s)) for s in sales)
    rows.extend(",".join(expense_row(e)) for e in expenses)
    return "\n".join(rows)


def export_filename(start: str, end: str) -> str:
    return f"Shop_Report_{start}_to_{end}.csv"
