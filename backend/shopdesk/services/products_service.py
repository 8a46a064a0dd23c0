# Overview: Product repository plus the inventory search and filter helpers used by the API.

from __future__ import annotations

from ..models import Product
from ..validation import ValidationError
from .repository import CollectionRepository
from .storage_service import PRODUCTS_KEY


LOW_STOCK_THRESHOLD = 10

STOCK_ALL = "All"
STOCK_IN = "In Stock"
STOCK_LOW = "Low Stock"
STOCK_OUT = "Out of Stock"
STOCK_FILTERS = (STOCK_ALL, STOCK_IN, STOCK_LOW, STOCK_OUT)

CATEGORY_ALL = "All"


class ProductRepository(CollectionRepository[Product]):
    prefix = "P"
    storage_key = PRODUCTS_KEY
    entity_name = "Product"

    from_dict = staticmethod(Product.from_dict)

    def build(self, record_id: str, data: dict) -> Product:
        # dateAdded is always the creation day, whatever the client sent
        return Product.from_dict({**data, "id": record_id, "dateAdded": self.today()})

    def apply_patch(self, product_id: str, patch: dict) -> Product:
        """Merge validated fields over the stored product, then substitute it whole."""
        existing = self.require(product_id)
        merged = Product.from_dict({**existing.to_dict(), **patch, "id": existing.id})
        return self.update(merged)


def _matches_term(product: Product, term: str) -> bool:
    needle = term.lower()
    return needle in product.name.lower() or needle in product.id.lower()


def search_products(
    products: list[Product],
    *,
    term: str | None = None,
    category: str | None = None,
    min_price: float | None = None,
    max_price: float | None = None,
    stock: str | None = None,
    low_stock_threshold: int = LOW_STOCK_THRESHOLD,
) -> list[Product]:
    """
    Inventory view filter.

    - term: case-insensitive substring of name or id
    - category: exact match, "All" disables
    - min_price / max_price: inclusive bounds on sellingPrice
    - stock: one of STOCK_FILTERS
    """
    stock = stock or STOCK_ALL
    if stock not in STOCK_FILTERS:
        raise ValidationError(f"stock must be one of: {', '.join(STOCK_FILTERS)}")

    result = []
    for p in products:
        if term and not _matches_term(p, term):
            continue
        if category and category != CATEGORY_ALL and p.category != category:
            continue
        if min_price is not None and p.selling_price < min_price:
            continue
        if max_price is not None and p.selling_price > max_price:
            continue
        if stock == STOCK_LOW and p.quantity > low_stock_threshold:
            continue
        if stock == STOCK_OUT and p.quantity != 0:
            continue
        if stock == STOCK_IN and p.quantity <= 0:
            continue
        result.append(p)
    return result


def quick_search(products: list[Product], term: str, limit: int = 5) -> list[Product]:
    """Checkout search box: first few name/id matches."""
    if not term:
        return []
    return [p for p in products if _matches_term(p, term)][:limit]


def find_by_exact_id(products: list[Product], value: str) -> Product | None:
    """Case-insensitive exact id match (typed or scanned codes)."""
    wanted = value.strip().lower()
    if not wanted:
        return None
    for p in products:
        if p.id.lower() == wanted:
            return p
    return None


def product_categories(products: list[Product]) -> list[str]:
    return sorted({p.category for p in products})


def low_stock_products(products: list[Product], threshold: int = LOW_STOCK_THRESHOLD) -> list[Product]:
    return [p for p in products if p.quantity <= threshold]
