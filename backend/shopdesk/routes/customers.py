# Overview: Flask API routes for customers and their due-payment ledger.

from flask import Blueprint, request, current_app

from ..services.customers_service import search_customers, total_due
from ..services.payment_service import payment_history
from ..services.shop_service import get_shop
from ..validation import (
    CUSTOMER_POLICY,
    validate_payload,
    enforce_rules_customer,
    ValidationError,
    NotFoundError,
)
from ..decorators import require_auth

customers_bp = Blueprint("customers", __name__, url_prefix="/api/customers")


@customers_bp.get("")
@require_auth
def list_customers():
    """Query params: q (name, phone or id)."""
    items = search_customers(get_shop().customers.list(), request.args.get("q"))
    return {
        "items": [c.to_dict() for c in items],
        "count": len(items),
        "totalDue": total_due(items),
    }


@customers_bp.get("/<customer_id>")
@require_auth
def get_customer_route(customer_id: str):
    customer = get_shop().customers.get(customer_id)
    if not customer:
        return {"error": "Customer not found"}, 404
    return customer.to_dict()


@customers_bp.post("")
@require_auth
def create_customer_route():
    payload = request.get_json(silent=True) or {}

    try:
        patch = validate_payload(payload=payload, policy=CUSTOMER_POLICY, partial=False)
        enforce_rules_customer(patch)
    except ValidationError as e:
        return {"error": str(e)}, 400

    try:
        created = get_shop().customers.add(patch)
    except Exception:
        current_app.logger.exception("Failed to create customer")
        return {"error": "Internal server error"}, 500

    return created.to_dict(), 201


@customers_bp.put("/<customer_id>")
@require_auth
def update_customer_route(customer_id: str):
    payload = request.get_json(silent=True) or {}

    try:
        patch = validate_payload(payload=payload, policy=CUSTOMER_POLICY, partial=True)
        enforce_rules_customer(patch)
    except ValidationError as e:
        return {"error": str(e)}, 400

    try:
        updated = get_shop().customers.apply_patch(customer_id, patch)
    except NotFoundError:
        return {"error": "Customer not found"}, 404
    except Exception:
        current_app.logger.exception("Failed to update customer")
        return {"error": "Internal server error"}, 500

    return updated.to_dict(), 200


@customers_bp.delete("/<customer_id>")
@require_auth
def delete_customer_route(customer_id: str):
    try:
        get_shop().customers.delete(customer_id)
    except NotFoundError:
        return {"error": "Customer not found"}, 404
    except Exception:
        current_app.logger.exception("Failed to delete customer")
        return {"error": "Internal server error"}, 500

    return {"ok": True}, 200


@customers_bp.post("/<customer_id>/payments")
@require_auth
def add_payment_route(customer_id: str):
    """
    Record a due payment.

    Body: {"amount": > 0, "date": "YYYY-MM-DD" (optional, default today)}
    """
    data = request.get_json(silent=True) or {}
    if "amount" not in data:
        return {"error": "amount required"}, 400

    try:
        customer, payment = get_shop().add_customer_payment(customer_id, data["amount"], data.get("date"))
    except ValidationError as e:
        return {"error": str(e)}, 400
    except NotFoundError:
        return {"error": "Customer not found"}, 404
    except Exception:
        current_app.logger.exception("Failed to record customer payment")
        return {"error": "Internal server error"}, 500

    return {"customer": customer.to_dict(), "payment": payment.to_dict()}, 201


@customers_bp.get("/<customer_id>/payments")
@require_auth
def list_payments_route(customer_id: str):
    try:
        payments = payment_history(get_shop().customers, customer_id)
    except NotFoundError:
        return {"error": "Customer not found"}, 404
    return {"items": [p.to_dict() for p in payments], "count": len(payments)}
