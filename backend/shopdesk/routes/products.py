# Overview: Flask API routes for products operations; parses input and returns JSON responses.

# backend/shopdesk/routes/products.py
"""
Product (inventory) routes.

SECURITY: All routes require authentication.
"""
from flask import Blueprint, request, current_app

from ..services.products_service import (
    search_products,
    product_categories,
    quick_search,
    find_by_exact_id,
)
from ..services.shop_service import get_shop
from ..validation import (
    PRODUCT_POLICY,
    validate_payload,
    enforce_rules_product,
    ValidationError,
    NotFoundError,
)
from ..decorators import require_auth

products_bp = Blueprint("products", __name__, url_prefix="/api/products")


@products_bp.get("")
@require_auth
def list_products():
    """
    List products with optional filters.

    Query params:
    - q: name or id substring (case-insensitive)
    - category: exact category, "All" disables
    - min_price / max_price: sellingPrice bounds
    - stock: All | In Stock | Low Stock | Out of Stock
    """
    shop = get_shop()
    try:
        items = search_products(
            shop.products.list(),
            term=request.args.get("q"),
            category=request.args.get("category"),
            min_price=request.args.get("min_price", type=float),
            max_price=request.args.get("max_price", type=float),
            stock=request.args.get("stock"),
            low_stock_threshold=shop.low_stock_threshold,
        )
    except ValidationError as e:
        return {"error": str(e)}, 400

    return {"items": [p.to_dict() for p in items], "count": len(items)}


@products_bp.get("/categories")
@require_auth
def list_categories():
    return {"items": product_categories(get_shop().products.list())}


@products_bp.get("/search")
@require_auth
def search_route():
    """Checkout search box: an exact id match first, else the first five matches."""
    term = (request.args.get("q") or "").strip()
    products = get_shop().products.list()
    exact = find_by_exact_id(products, term)
    return {
        "exact": exact.to_dict() if exact else None,
        "items": [p.to_dict() for p in quick_search(products, term)],
    }


@products_bp.get("/<product_id>")
@require_auth
def get_product_route(product_id: str):
    product = get_shop().products.get(product_id)
    if not product:
        return {"error": "Product not found"}, 404
    return product.to_dict()


@products_bp.post("")
@require_auth
def create_product_route():
    payload = request.get_json(silent=True) or {}

    try:
        patch = validate_payload(payload=payload, policy=PRODUCT_POLICY, partial=False)
        enforce_rules_product(patch)
    except ValidationError as e:
        return {"error": str(e)}, 400

    try:
        created = get_shop().products.add(patch)
    except Exception:
        current_app.logger.exception("Failed to create product")
        return {"error": "Internal server error"}, 500

    return created.to_dict(), 201


@products_bp.put("/<product_id>")
@require_auth
def update_product_route(product_id: str):
    """Full edit of a product; omitted fields keep their stored values."""
    payload = request.get_json(silent=True) or {}

    try:
        patch = validate_payload(payload=payload, policy=PRODUCT_POLICY, partial=True)
        enforce_rules_product(patch)
    except ValidationError as e:
        return {"error": str(e)}, 400

    try:
        updated = get_shop().products.apply_patch(product_id, patch)
    except NotFoundError:
        return {"error": "Product not found"}, 404
    except Exception:
        current_app.logger.exception("Failed to update product")
        return {"error": "Internal server error"}, 500

    return updated.to_dict(), 200


@products_bp.delete("/<product_id>")
@require_auth
def delete_product_route(product_id: str):
    try:
        get_shop().products.delete(product_id)
    except NotFoundError:
        return {"error": "Product not found"}, 404
    except Exception:
        current_app.logger.exception("Failed to delete product")
        return {"error": "Internal server error"}, 500

    return {"ok": True}, 200
