# Overview: Flask API routes for sales operations; parses input and returns JSON responses.

# backend/shopdesk/routes/sales.py
"""Point-of-sale routes: cart validation and sale completion."""

from flask import Blueprint, request, jsonify, current_app

from ..models import PAYMENT_CASH
from ..services.cart_service import Cart, CartError
from ..services.reporting_service import filter_by_date
from ..services.sales_service import SaleCommand, SaleError
from ..services.shop_service import get_shop
from ..validation import ValidationError, coerce_number
from ..decorators import require_auth


sales_bp = Blueprint("sales", __name__, url_prefix="/api/sales")


def _cart_from_request(data: dict) -> Cart:
    return Cart.from_lines(get_shop().products.list(), data.get("items") or [])


@sales_bp.get("")
@require_auth
def list_sales_route():
    """
    List sales in insertion order.

    Query params: start / end (YYYY-MM-DD, inclusive, both optional)
    """
    sales = get_shop().sales.list()
    start = request.args.get("start")
    end = request.args.get("end")
    if start or end:
        sales = filter_by_date(sales, start or "0000-00-00", end or "9999-12-31")
    return jsonify({"items": [s.to_dict() for s in sales], "count": len(sales)}), 200


@sales_bp.get("/<sale_id>")
@require_auth
def get_sale_route(sale_id: str):
    sale = get_shop().sales.get(sale_id)
    if not sale:
        return jsonify({"error": "Sale not found"}), 404
    return jsonify({"sale": sale.to_dict()}), 200


@sales_bp.post("/cart/validate")
@require_auth
def validate_cart_route():
    """
    Check cart lines against live stock and price them.

    Body: {"items": [{"id": "P001", "quantity": 2}, ...], "discount": 0}
    """
    data = request.get_json(silent=True) or {}
    try:
        cart = _cart_from_request(data)
        discount = coerce_number("discount", data.get("discount", 0))
    except CartError as e:
        return jsonify({"error": str(e), "details": e.details}), 400
    except ValidationError as e:
        return jsonify({"error": str(e)}), 400

    body = cart.to_dict()
    body["discount"] = discount
    body["finalAmount"] = round(cart.subtotal - discount, 2)
    return jsonify(body), 200


@sales_bp.post("")
@require_auth
def complete_sale_route():
    """
    Complete a sale: record it, decrement stock, and charge Due sales to the customer.

    Body:
    {
      "items": [{"id": "P001", "quantity": 2}, ...],
      "discount": 0,
      "paymentMethod": "Cash" | "Card" | "Due",
      "customerId": "C001"   (required for Due)
    }
    """
    data = request.get_json(silent=True) or {}
    try:
        cart = _cart_from_request(data)
        command = SaleCommand(
            items=cart.items,
            discount=coerce_number("discount", data.get("discount", 0)),
            payment_method=data.get("paymentMethod") or PAYMENT_CASH,
            customer_id=data.get("customerId") or None,
        )
        result = get_shop().complete_sale(command)
    except (CartError, SaleError) as e:
        return jsonify({"error": str(e), "details": e.details}), 400
    except ValidationError as e:
        return jsonify({"error": str(e)}), 400
    except Exception:
        current_app.logger.exception("Failed to complete sale")
        return jsonify({"error": "Internal server error"}), 500

    return jsonify(result.to_dict()), 201
