"""
Demo catalog service.

Offline stand-in for the commerce backend, used when mock data is enabled.
Serves products and orders from the bundled demo_catalog.json and applies
the same filters, sorting and pagination the storefront relies on.
"""

import copy
import json
import logging
from collections.abc import Callable, Sequence
from datetime import UTC, datetime
from decimal import Decimal
from functools import lru_cache
from pathlib import Path
from typing import Any

from fontstore.config import DEFAULT_ORDERS_PER_PAGE, DEFAULT_PAGE
from fontstore.models.license import LicenseTier, license_price
from fontstore.models.order import OrderRequest
from fontstore.services.catalog import (
    CatalogError,
    ProductNotFoundError,
    ProductQuery,
    parse_decimal,
    parse_timestamp,
)

logger = logging.getLogger(__name__)

DEMO_CATALOG_PATH = Path(__file__).parent.parent / "data" / "demo_catalog.json"

DEFAULT_DEMO_PER_PAGE = 10


class DemoCatalogError(Exception):
    """Raised when the demo catalog cannot be loaded."""

    pass


@lru_cache(maxsize=1)
def _load_demo_data() -> dict[str, Any]:
    """
    Load the bundled demo catalog.

    Cached after first load. Callers must copy before mutating.
    """
    if not DEMO_CATALOG_PATH.exists():
        raise DemoCatalogError(f"Demo catalog file not found: {DEMO_CATALOG_PATH}")

    with open(DEMO_CATALOG_PATH, encoding="utf-8") as f:
        data = json.load(f)

    if not data.get("products"):
        raise DemoCatalogError("Demo catalog contains no products")

    return data


def _price(product: dict[str, Any]) -> Decimal:
    return parse_decimal(product.get("price")) or Decimal("0")


def _sort_key(orderby: str) -> Callable[[dict[str, Any]], Any] | None:
    keys = {
        "title": lambda p: p.get("name", "").lower(),
        "price": _price,
        "date": lambda p: parse_timestamp(p.get("date_created")) or datetime.min,
        "popularity": lambda p: int(p.get("total_sales") or 0),
        "rating": lambda p: float(p.get("average_rating") or 0),
    }
    return keys.get(orderby)


def _paginate(items: list[dict[str, Any]], page: int, per_page: int) -> list[dict[str, Any]]:
    start = (max(page, 1) - 1) * per_page
    return items[start : start + per_page]


class DemoCatalog:
    """
    In-memory catalog with the CatalogClient interface.

    Each instance owns a private copy of the demo data, so orders created
    through one instance are visible only to it.
    """

    def __init__(self, data: dict[str, Any] | None = None):
        source = data if data is not None else _load_demo_data()
        self._products: list[dict[str, Any]] = copy.deepcopy(source.get("products", []))
        self._orders: list[dict[str, Any]] = copy.deepcopy(source.get("orders", []))

    def filter_products(self, query: ProductQuery) -> list[dict[str, Any]]:
        """Apply search, category, flag and price filters plus sorting (no pagination)."""
        products = list(self._products)

        if query.search:
            term = query.search.lower()
            products = [
                p
                for p in products
                if term in p.get("name", "").lower()
                or term in p.get("description", "").lower()
                or term in p.get("short_description", "").lower()
            ]

        if query.category:
            category = query.category.lower()
            products = [
                p
                for p in products
                if any(
                    c.get("slug") == query.category or c.get("name", "").lower() == category
                    for c in p.get("categories", [])
                )
            ]

        if query.featured:
            products = [p for p in products if p.get("featured")]

        if query.on_sale:
            products = [p for p in products if p.get("on_sale")]

        if query.min_price is not None:
            min_price = Decimal(str(query.min_price))
            products = [p for p in products if _price(p) >= min_price]

        if query.max_price is not None:
            max_price = Decimal(str(query.max_price))
            products = [p for p in products if _price(p) <= max_price]

        key = _sort_key(query.orderby) if query.orderby else None
        if key is not None:
            products = sorted(products, key=key, reverse=query.order == "desc")

        return products

    async def get_products(self, query: ProductQuery | None = None) -> list[dict[str, Any]]:
        query = query or ProductQuery()
        products = self.filter_products(query)
        return copy.deepcopy(
            _paginate(products, query.page or DEFAULT_PAGE, query.per_page or DEFAULT_DEMO_PER_PAGE)
        )

    async def get_product(self, product_id: int) -> dict[str, Any]:
        for product in self._products:
            if product["id"] == product_id:
                return copy.deepcopy(product)
        raise ProductNotFoundError(product_id)

    async def get_categories(self) -> list[dict[str, Any]]:
        categories: dict[int, dict[str, Any]] = {}
        for product in self._products:
            for category in product.get("categories", []):
                entry = categories.setdefault(category["id"], {**category, "count": 0})
                entry["count"] += 1
        return list(categories.values())

    async def get_tags(self) -> list[dict[str, Any]]:
        tags: dict[int, dict[str, Any]] = {}
        for product in self._products:
            for tag in product.get("tags", []):
                entry = tags.setdefault(tag["id"], {**tag, "count": 0})
                entry["count"] += 1
        return list(tags.values())

    async def search_products(
        self, search: str, query: ProductQuery | None = None
    ) -> list[dict[str, Any]]:
        query = copy.copy(query) if query else ProductQuery()
        query.search = search
        return await self.get_products(query)

    async def get_orders(
        self,
        page: int = DEFAULT_PAGE,
        per_page: int = DEFAULT_ORDERS_PER_PAGE,
        include: Sequence[int] | None = None,
    ) -> list[dict[str, Any]]:
        """Orders newest first, limited to `include` ids when given."""
        orders = self._orders
        if include is not None:
            wanted = set(include)
            orders = [o for o in orders if o["id"] in wanted]
        return copy.deepcopy(_paginate(orders, page, per_page))

    async def create_order(self, order: OrderRequest) -> dict[str, Any]:
        """
        Record a new order.

        Line totals honor the license meta sent with each line.

        Raises:
            CatalogError: If a line references an unknown product
        """
        by_id = {p["id"]: p for p in self._products}
        line_items: list[dict[str, Any]] = []
        total = Decimal("0")

        for index, item in enumerate(order.line_items, start=1):
            product = by_id.get(item.product_id)
            if product is None:
                raise CatalogError(f"Invalid product ID: {item.product_id}", status_code=400)

            unit = license_price(_price(product), LicenseTier(item.license or "personal"))
            line_total = unit * item.quantity
            total += line_total
            line_items.append(
                {
                    "id": index,
                    "name": product["name"],
                    "product_id": item.product_id,
                    "quantity": item.quantity,
                    "subtotal": f"{line_total:.2f}",
                    "total": f"{line_total:.2f}",
                    "price": float(unit),
                }
            )

        order_id = max((o["id"] for o in self._orders), default=0) + 1
        created = {
            "id": order_id,
            "number": str(order_id),
            "status": "processing",
            "currency": "USD",
            "date_created": datetime.now(UTC).replace(tzinfo=None).isoformat(timespec="seconds"),
            "total": f"{total:.2f}",
            "customer_note": "",
            "payment_method": order.payment_method,
            "payment_method_title": order.payment_method_title,
            "billing": order.billing.to_billing(),
            "shipping": order.shipping.to_shipping(),
            "line_items": line_items,
        }
        # Newest first, as the commerce backend lists orders
        self._orders.insert(0, created)
        logger.info("Demo catalog recorded order %d (%s)", order_id, created["total"])
        return copy.deepcopy(created)
