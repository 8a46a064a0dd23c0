# Overview: Process-wide shop container wiring the four repositories to one KeyValueStore.

"""
Shop

One Shop is built per application (lazily, inside an app context) with an
injected KeyValueStore and id strategy. Routes and CLI commands reach it
through get_shop(); tests construct Shop directly over an
InMemoryKeyValueStore.
"""
from __future__ import annotations

from datetime import date
from typing import Callable

from flask import current_app

from ..models import Customer, Payment, money
from .cart_service import Cart
from .customers_service import CustomerRepository
from .expenses_service import ExpenseRepository
from .identifier_service import STRATEGY_MAX_SUFFIX, make_allocator
from .payment_service import add_payment
from .products_service import LOW_STOCK_THRESHOLD, ProductRepository
from .sales_service import SaleCommand, SaleRepository, SaleResult, complete_sale
from .scanner_service import DEFAULT_COOLDOWN_SECONDS, ScanSession, cart_scan_session
from .storage_service import (
    COLLECTION_KEYS,
    COUNTERS_KEY,
    InMemoryKeyValueStore,
    KeyValueStore,
    SqlKeyValueStore,
)
from shopdesk.time_utils import epoch_millis


EXTENSION_KEY = "shopdesk.shop"


class Shop:
    def __init__(
        self,
        store: KeyValueStore,
        *,
        id_strategy: str = STRATEGY_MAX_SUFFIX,
        today: Callable[[], date] = date.today,
        clock: Callable[[], int] = epoch_millis,
        low_stock_threshold: int = LOW_STOCK_THRESHOLD,
        scan_cooldown: float = DEFAULT_COOLDOWN_SECONDS,
    ):
        self.store = store
        self.ids = make_allocator(id_strategy, store)
        self._today = today
        self.clock = clock
        self.low_stock_threshold = low_stock_threshold
        self.scan_cooldown = scan_cooldown

        def today_iso() -> str:
            return self._today().isoformat()

        self.products = ProductRepository(store, self.ids, today=today_iso)
        self.sales = SaleRepository(store, self.ids, today=today_iso)
        self.expenses = ExpenseRepository(store, self.ids, today=today_iso)
        self.customers = CustomerRepository(store, self.ids, today=today_iso)

    @property
    def id_strategy(self) -> str:
        return self.ids.strategy

    def today(self) -> date:
        return self._today()

    def complete_sale(self, command: SaleCommand) -> SaleResult:
        return complete_sale(
            command,
            store=self.store,
            sales=self.sales,
            products=self.products,
            customers=self.customers,
        )

    def add_customer_payment(self, customer_id: str, amount, date: str | None = None) -> tuple[Customer, Payment]:
        return add_payment(self.customers, customer_id, amount, date, clock=self.clock)

    def scan_session(self, cart: Cart, source, decoder, **kwargs) -> ScanSession:
        """Scanner feeding `cart` from the live product list."""
        kwargs.setdefault("cooldown", self.scan_cooldown)
        return cart_scan_session(cart, self.products.list, source, decoder, **kwargs)

    def reload(self) -> None:
        self.ids.reload()
        for repo in (self.products, self.sales, self.expenses, self.customers):
            repo.reload()

    def wipe(self) -> None:
        """Delete every stored collection and the id counters."""
        for key in (*COLLECTION_KEYS, COUNTERS_KEY):
            self.store.delete(key)
        self.reload()

    def stats(self) -> dict:
        customers = self.customers.list()
        return {
            "products": self.products.count(),
            "sales": self.sales.count(),
            "expenses": self.expenses.count(),
            "customers": len(customers),
            "totalDue": money(sum(c.due_amount for c in customers)),
            "idStrategy": self.id_strategy,
        }


def build_store(kind: str) -> KeyValueStore:
    if kind == "sql":
        return SqlKeyValueStore()
    if kind == "memory":
        return InMemoryKeyValueStore()
    raise ValueError(f"Unknown SHOP_STORAGE: {kind!r} (expected 'sql' or 'memory')")


def get_shop() -> Shop:
    """The application's Shop, built on first use."""
    shop = current_app.extensions.get(EXTENSION_KEY)
    if shop is None:
        shop = Shop(
            build_store(current_app.config["SHOP_STORAGE"]),
            id_strategy=current_app.config["ID_STRATEGY"],
            low_stock_threshold=current_app.config["LOW_STOCK_THRESHOLD"],
            scan_cooldown=current_app.config["SCAN_COOLDOWN_SECONDS"],
        )
        current_app.extensions[EXTENSION_KEY] = shop
    return shop


def set_shop(shop: Shop | None) -> None:
    """Install (or drop, with None) the application's Shop."""
    if shop is None:
        current_app.extensions.pop(EXTENSION_KEY, None)
    else:
        current_app.extensions[EXTENSION_KEY] = shop


def refresh_shop() -> None:
    """Re-read every collection so a request starts from the stored state (other workers, CLI commands)."""
    shop = current_app.extensions.get(EXTENSION_KEY)
    if shop is not None:
        shop.reload()
