# Overview: Flask API routes for expense logging.

from flask import Blueprint, request, current_app

from ..services.expenses_service import search_expenses, expense_categories, total_amount
from ..services.shop_service import get_shop
from ..validation import (
    EXPENSE_POLICY,
    validate_payload,
    enforce_rules_expense,
    ValidationError,
    NotFoundError,
)
from ..decorators import require_auth

expenses_bp = Blueprint("expenses", __name__, url_prefix="/api/expenses")


@expenses_bp.get("")
@require_auth
def list_expenses():
    """Query params: q (title substring), category ("All" disables)."""
    expenses = get_shop().expenses.list()
    items = search_expenses(expenses, term=request.args.get("q"), category=request.args.get("category"))
    return {
        "items": [e.to_dict() for e in items],
        "count": len(items),
        "total": total_amount(items),
        "categories": expense_categories(expenses),
    }


@expenses_bp.post("")
@require_auth
def create_expense_route():
    payload = request.get_json(silent=True) or {}

    try:
        patch = validate_payload(payload=payload, policy=EXPENSE_POLICY, partial=False)
        enforce_rules_expense(patch)
    except ValidationError as e:
        return {"error": str(e)}, 400

    try:
        created = get_shop().expenses.add(patch)
    except Exception:
        current_app.logger.exception("Failed to create expense")
        return {"error": "Internal server error"}, 500

    return created.to_dict(), 201


@expenses_bp.put("/<expense_id>")
@require_auth
def update_expense_route(expense_id: str):
    payload = request.get_json(silent=True) or {}

    try:
        patch = validate_payload(payload=payload, policy=EXPENSE_POLICY, partial=True)
        enforce_rules_expense(patch)
    except ValidationError as e:
        return {"error": str(e)}, 400

    try:
        updated = get_shop().expenses.apply_patch(expense_id, patch)
    except NotFoundError:
        return {"error": "Expense not found"}, 404
    except Exception:
        current_app.logger.exception("Failed to update expense")
        return {"error": "Internal server error"}, 500

    return updated.to_dict(), 200


@expenses_bp.delete("/<expense_id>")
@require_auth
def delete_expense_route(expense_id: str):
    try:
        get_shop().expenses.delete(expense_id)
    except NotFoundError:
        return {"error": "Expense not found"}, 404
    except Exception:
        current_app.logger.exception("Failed to delete expense")
        return {"error": "Internal server error"}, 500

    return {"ok": True}, 200
