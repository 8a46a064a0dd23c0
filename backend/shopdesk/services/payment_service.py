# Overview: Customer payment ledger; each recorded payment reduces the outstanding due.

"""
Customer Payment Ledger

- Payments are append-only and immutable; the newest is first in the list.
- Each payment subtracts its amount from dueAmount.
- Overpayment is allowed: dueAmount may go negative.
"""
from __future__ import annotations

import logging
from typing import Callable

from ..models import Customer, Payment, money
from ..validation import enforce_rules_payment, ValidationError
from .customers_service import CustomerRepository
from .identifier_service import payment_id
from shopdesk.time_utils import epoch_millis, parse_iso_date


logger = logging.getLogger(__name__)


def add_payment(
    customers: CustomerRepository,
    customer_id: str,
    amount,
    date: str | None = None,
    *,
    clock: Callable[[], int] = epoch_millis,
) -> tuple[Customer, Payment]:
    """
    Record a payment against a customer's due balance.

    Returns (updated_customer, payment).

    Raises:
        ValidationError: amount is not > 0 or date is not YYYY-MM-DD
        NotFoundError: unknown customer
    """
    value = money(enforce_rules_payment(amount))

    if date:
        try:
            payment_date = parse_iso_date(date).isoformat()
        except (ValueError, AttributeError):
            raise ValidationError("date must be a YYYY-MM-DD date")
    else:
        payment_date = customers.today()

    customer = customers.require(customer_id)
    payment = Payment(id=payment_id(clock), date=payment_date, amount=value)

    customer.due_amount = money(customer.due_amount - value)
    customer.payments = [payment, *customer.payments]
    updated = customers.update(customer)

    if updated.due_amount < 0:
        logger.info("Customer %s overpaid; due balance is now %.2f", customer_id, updated.due_amount)
    return updated, payment


def payment_history(customers: CustomerRepository, customer_id: str) -> list[Payment]:
    return list(customers.require(customer_id).payments)
