# Overview: Read-side report aggregation over sales and expenses; stateless and recomputed on demand.

"""
Reporting

Every function here is pure: it takes entity lists and returns plain
dicts ready for JSON. Nothing is cached.

DATE RANGES: records carry canonical YYYY-MM-DD strings, so range filters
compare strings lexicographically and include both ends.

COGS uses the purchase price snapshotted on each sale line, never the
current product cost.
"""
from __future__ import annotations

import calendar
from collections import defaultdict
from datetime import date, timedelta
from typing import Iterable

from ..models import Expense, Product, Sale, money
from .products_service import LOW_STOCK_THRESHOLD, low_stock_products
from shopdesk.time_utils import parse_iso_date


PRESET_TODAY = "Today"
PRESET_YESTERDAY = "Yesterday"
PRESET_THIS_WEEK = "This Week"
PRESET_LAST_WEEK = "Last Week"
PRESET_THIS_MONTH = "This Month"
PRESET_LAST_MONTH = "Last Month"
PRESET_THIS_YEAR = "This Year"
PRESET_CUSTOM = "Custom"

PRESETS = (
    PRESET_TODAY,
    PRESET_YESTERDAY,
    PRESET_THIS_WEEK,
    PRESET_LAST_WEEK,
    PRESET_THIS_MONTH,
    PRESET_LAST_MONTH,
    PRESET_THIS_YEAR,
)

MONTH_LABELS = tuple(calendar.month_abbr[i] for i in range(1, 13))


class ReportError(Exception):
    """Raised when report generation fails."""
    pass


def _week_start(day: date) -> date:
    # Monday-start weeks
    return day - timedelta(days=day.weekday())


def preset_range(preset: str, today: date) -> tuple[str, str]:
    """Inclusive (start, end) ISO dates for a named preset relative to today."""
    start = end = today

    if preset == PRESET_TODAY:
        pass
    elif preset == PRESET_YESTERDAY:
        start = end = today - timedelta(days=1)
    elif preset == PRESET_THIS_WEEK:
        start = _week_start(today)
    elif preset == PRESET_LAST_WEEK:
        start = _week_start(today - timedelta(days=7))
        end = start + timedelta(days=6)
    elif preset == PRESET_THIS_MONTH:
        start = today.replace(day=1)
    elif preset == PRESET_LAST_MONTH:
        end = today.replace(day=1) - timedelta(days=1)
        start = end.replace(day=1)
    elif preset == PRESET_THIS_YEAR:
        start = today.replace(month=1, day=1)
    else:
        raise ReportError(f"preset must be one of: {', '.join(PRESETS)}")

    return start.isoformat(), end.isoformat()


def resolve_range(
    *,
    today: date,
    preset: str | None = None,
    start: str | None = None,
    end: str | None = None,
) -> tuple[str, str, str]:
    """
    Work out (start, end, preset) for a report request.

    Explicit dates switch the preset to Custom; a missing side falls back to
    the This Month default. With neither, the preset (default This Month)
    decides.
    """
    if start or end:
        default_start, default_end = preset_range(PRESET_THIS_MONTH, today)
        try:
            start_d = parse_iso_date(start) if start else None
            end_d = parse_iso_date(end) if end else None
        except ValueError:
            raise ReportError("start and end must be YYYY-MM-DD dates")
        return (
            start_d.isoformat() if start_d else default_start,
            end_d.isoformat() if end_d else default_end,
            PRESET_CUSTOM,
        )

    preset = preset or PRESET_THIS_MONTH
    range_start, range_end = preset_range(preset, today)
    return range_start, range_end, preset


def filter_by_date(records: Iterable, start: str, end: str) -> list:
    return [r for r in records if start <= r.date <= end]


def summary(sales: list[Sale], expenses: list[Expense]) -> dict:
    revenue = sum(s.final_amount for s in sales)
    cogs = sum(s.cogs for s in sales)
    expense_total = sum(e.amount for e in expenses)

    gross_profit = revenue - cogs
    margin = (gross_profit / revenue * 100) if revenue > 0 else 0.0
    net_profit = gross_profit - expense_total

    return {
        "totalRevenue": money(revenue),
        "totalCOGS": money(cogs),
        "totalExpenses": money(expense_total),
        "grossProfit": money(gross_profit),
        "grossProfitMargin": round(margin, 2),
        "netProfit": money(net_profit),
        "salesCount": len(sales),
        "expenseCount": len(expenses),
    }


def daily_series(sales: list[Sale], expenses: list[Expense]) -> list[dict]:
    """Sales vs expenses per day that has any activity, oldest first."""
    buckets: dict[str, dict] = {}

    def bucket(day: str) -> dict:
        if day not in buckets:
            buckets[day] = {"date": day, "sales": 0.0, "expenses": 0.0}
        return buckets[day]

    for s in sales:
        bucket(s.date)["sales"] += s.final_amount
    for e in expenses:
        bucket(e.date)["expenses"] += e.amount

    return [
        {"date": row["date"], "sales": money(row["sales"]), "expenses": money(row["expenses"])}
        for row in sorted(buckets.values(), key=lambda row: row["date"])
    ]


def category_breakdown(sales: list[Sale]) -> list[dict]:
    """Gross line sales (sellingPrice x cartQuantity) per item category, largest first."""
    totals: dict[str, float] = defaultdict(float)
    for s in sales:
        for item in s.items:
            totals[item.category] += item.selling_price * item.cart_quantity
    rows = [{"name": name, "value": money(value)} for name, value in totals.items()]
    return sorted(rows, key=lambda row: row["value"], reverse=True)


def monthly_series(sales: list[Sale], year: int) -> list[dict]:
    """Twelve month buckets of finalAmount for one calendar year, over all sales."""
    totals = [0.0] * 12
    for s in sales:
        try:
            day = parse_iso_date(s.date)
        except ValueError:
            continue
        if day is None or day.year != year:
            continue
        totals[day.month - 1] += s.final_amount
    return [{"month": MONTH_LABELS[i], "totalSales": money(totals[i])} for i in range(12)]


def sales_years(sales: list[Sale], current_year: int) -> list[int]:
    """Years that have sales, always including the current one, newest first."""
    years = {current_year}
    for s in sales:
        if len(s.date) >= 4 and s.date[:4].isdigit():
            years.add(int(s.date[:4]))
    return sorted(years, reverse=True)


def build_report(
    sales: list[Sale],
    expenses: list[Expense],
    *,
    start: str,
    end: str,
    preset: str = PRESET_CUSTOM,
) -> dict:
    if start > end:
        raise ReportError("start must be on or before end")

    filtered_sales = filter_by_date(sales, start, end)
    filtered_expenses = filter_by_date(expenses, start, end)

    return {
        "preset": preset,
        "start": start,
        "end": end,
        "summary": summary(filtered_sales, filtered_expenses),
        "daily": daily_series(filtered_sales, filtered_expenses),
        "categories": category_breakdown(filtered_sales),
    }


def dashboard(
    products: list[Product],
    sales: list[Sale],
    expenses: list[Expense],
    *,
    today: date,
    low_stock_threshold: int = LOW_STOCK_THRESHOLD,
) -> dict:
    today_s = today.isoformat()

    last_7_days = [(today - timedelta(days=offset)).isoformat() for offset in range(6, -1, -1)]
    chart = []
    for day in last_7_days:
        chart.append({
            "date": day,
            "sales": money(sum(s.final_amount for s in sales if s.date == day)),
            "expenses": money(sum(e.amount for e in expenses if e.date == day)),
        })

    low_stock = low_stock_products(products, low_stock_threshold)

    return {
        "today": today_s,
        "todaySales": money(sum(s.final_amount for s in sales if s.date == today_s)),
        "todayExpenses": money(sum(e.amount for e in expenses if e.date == today_s)),
        "totalStockValue": money(sum(p.stock_value for p in products)),
        "totalProfit": money(sum(s.final_amount - s.cogs for s in sales)),
        "productCount": len(products),
        "lowStockCount": len(low_stock),
        "lowStockItems": [p.to_dict() for p in low_stock[:5]],
        "last7Days": chart,
    }
