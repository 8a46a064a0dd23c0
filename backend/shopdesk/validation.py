from __future__ import annotations

import math
from dataclasses import dataclass
from typing import Any

from shopdesk.time_utils import parse_iso_date


# Maximum money value accepted on any amount field
MAX_AMOUNT = 9_999_999.99

TEXT = "text"
INTEGER = "integer"
NUMBER = "number"
DATE = "date"


class ValidationError(ValueError):
    """400-level input problem."""


class NotFoundError(LookupError):
    """404-level unknown record id."""


@dataclass(frozen=True)
class ModelValidationPolicy:
    """
    Central policy layer:
    - fields: wire key -> kind (TEXT, INTEGER, NUMBER, DATE); also the writable allowlist
    - required_on_create: keys required for POST
    - max_lengths: optional per-key limit for TEXT values
    """
    fields: dict[str, str]
    required_on_create: frozenset[str] = frozenset()
    max_lengths: dict[str, int] | None = None


PRODUCT_POLICY = ModelValidationPolicy(
    fields={
        "name": TEXT,
        "category": TEXT,
        "purchasePrice": NUMBER,
        "sellingPrice": NUMBER,
        "quantity": INTEGER,
        "dateAdded": DATE,
    },
    required_on_create=frozenset({"name", "category", "purchasePrice", "sellingPrice", "quantity"}),
    max_lengths={"name": 255, "category": 120},
)

EXPENSE_POLICY = ModelValidationPolicy(
    fields={"title": TEXT, "category": TEXT, "amount": NUMBER, "date": DATE},
    required_on_create=frozenset({"title", "category", "amount"}),
    max_lengths={"title": 255, "category": 120},
)

CUSTOMER_POLICY = ModelValidationPolicy(
    fields={"name": TEXT, "phone": TEXT, "dueAmount": NUMBER},
    required_on_create=frozenset({"name"}),
    max_lengths={"name": 255, "phone": 32},
)


def _coerce_value(key: str, kind: str, value: Any):
    # Integers - strict validation to reject floats and scientific notation
    if kind == INTEGER:
        # Already an int (but not bool which is a subclass of int)
        if isinstance(value, int) and not isinstance(value, bool):
            return value
        if isinstance(value, str):
            stripped = value.strip()
            if not stripped:
                raise ValidationError(f"{key} must be an integer")
            if 'e' in stripped.lower():
                raise ValidationError(f"{key} must be a plain integer (scientific notation not allowed)")
            if '.' in stripped:
                raise ValidationError(f"{key} must be an integer (no decimals)")
            try:
                return int(stripped)
            except ValueError:
                raise ValidationError(f"{key} must be an integer")
        if isinstance(value, float):
            if value.is_integer():
                return int(value)
            raise ValidationError(f"{key} must be an integer, not a decimal")
        raise ValidationError(f"{key} must be an integer")

    if kind == NUMBER:
        if isinstance(value, bool):
            raise ValidationError(f"{key} must be a number")
        if isinstance(value, (int, float)):
            number = float(value)
        elif isinstance(value, str):
            try:
                number = float(value.strip())
            except ValueError:
                raise ValidationError(f"{key} must be a number")
        else:
            raise ValidationError(f"{key} must be a number")
        # NaN and infinity compare False against every bound
        if not math.isfinite(number):
            raise ValidationError(f"{key} must be a finite number")
        return number

    # Dates are stored as canonical YYYY-MM-DD strings
    if kind == DATE:
        if not isinstance(value, str):
            raise ValidationError(f"{key} must be a YYYY-MM-DD date")
        try:
            parsed = parse_iso_date(value)
        except ValueError:
            raise ValidationError(f"{key} must be a YYYY-MM-DD date")
        if parsed is None:
            raise ValidationError(f"{key} must be a YYYY-MM-DD date")
        return parsed.isoformat()

    return str(value).strip()


def validate_payload(*, payload: dict, policy: ModelValidationPolicy, partial: bool) -> dict:
    """
    Validates + normalizes incoming JSON against a policy.
    Returns a cleaned dict with only allowed keys.

    partial=False: create semantics (enforce required_on_create)
    partial=True: update semantics (validate only provided keys)
    """
    if payload is None:
        payload = {}
    if not isinstance(payload, dict):
        raise ValidationError("Invalid JSON payload")

    if not partial:
        missing = sorted(f for f in policy.required_on_create if f not in payload)
        if missing:
            raise ValidationError(f"Missing required fields: {', '.join(missing)}")

    cleaned: dict = {}
    for k, raw in payload.items():
        if k == "id":
            # ids are assigned by the repository, never by the client
            continue
        if k not in policy.fields:
            raise ValidationError(f"Field not allowed: {k}")
        if raw is None:
            raise ValidationError(f"{k} cannot be null")

        kind = policy.fields[k]
        val = _coerce_value(k, kind, raw)

        if kind == TEXT:
            if k in policy.required_on_create and val == "":
                raise ValidationError(f"{k} cannot be blank")
            limit = (policy.max_lengths or {}).get(k)
            if limit and len(val) > limit:
                raise ValidationError(f"{k} exceeds max length {limit}")

        cleaned[k] = val

    return cleaned


def _check_amount(patch: dict, key: str, *, allow_negative: bool = False) -> None:
    if key not in patch:
        return
    amount = patch[key]
    if not allow_negative and amount < 0:
        raise ValidationError(f"{key} must be >= 0")
    if abs(amount) > MAX_AMOUNT:
        raise ValidationError(f"{key} cannot exceed {MAX_AMOUNT:,.2f}")


def enforce_rules_product(patch: dict) -> None:
    """
    Business rules that the field kinds alone do not capture.
    Keep these small and centralized.
    """
    _check_amount(patch, "purchasePrice")
    _check_amount(patch, "sellingPrice")
    if "quantity" in patch and patch["quantity"] < 0:
        raise ValidationError("quantity must be >= 0")


def enforce_rules_expense(patch: dict) -> None:
    _check_amount(patch, "amount")


def enforce_rules_customer(patch: dict) -> None:
    # dueAmount is signed: overpayment leaves a negative balance
    _check_amount(patch, "dueAmount", allow_negative=True)


def enforce_rules_payment(amount) -> float:
    """Payment amounts must be strictly positive numbers."""
    value = _coerce_value("amount", NUMBER, amount)
    if value <= 0:
        raise ValidationError("amount must be > 0")
    if value > MAX_AMOUNT:
        raise ValidationError(f"amount cannot exceed {MAX_AMOUNT:,.2f}")
    return value


def coerce_number(key: str, value: Any) -> float:
    """Public wrapper for ad-hoc numeric request fields."""
    return _coerce_value(key, NUMBER, value)
