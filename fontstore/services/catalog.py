"""
Catalog service primitives.

Query parameters, errors, and conversion of commerce-backend JSON
(WooCommerce REST v3 shapes) into domain models. Both the live HTTP client
and the demo catalog implement the CatalogClient interface.
"""

import re
from collections.abc import Sequence
from dataclasses import asdict, dataclass
from datetime import datetime
from decimal import Decimal, InvalidOperation
from typing import Any, Literal, Protocol

from fontstore.config import DEFAULT_ORDERS_PER_PAGE, DEFAULT_PAGE
from fontstore.models.font import DEFAULT_FILE_FORMATS, Font
from fontstore.models.order import Address, Order, OrderLine, OrderRequest

DEFAULT_DESIGNER = "Creatype Studio"
DEFAULT_CATEGORY = "Font"

OrderBy = Literal["date", "id", "title", "price", "popularity", "rating"]
SortOrder = Literal["asc", "desc"]

_HTML_TAG = re.compile(r"<[^>]*>")


class CatalogError(Exception):
    """Raised when the commerce backend cannot satisfy a request."""

    def __init__(self, message: str, status_code: int | None = None) -> None:
        super().__init__(message)
        self.status_code = status_code


class ProductNotFoundError(CatalogError):
    """Raised when a product id does not exist in the catalog."""

    def __init__(self, product_id: int) -> None:
        super().__init__(f"Product with ID {product_id} not found", status_code=404)
        self.product_id = product_id


@dataclass
class ProductQuery:
    """Filter, sort and pagination parameters for product listings."""

    page: int | None = None
    per_page: int | None = None
    search: str | None = None
    category: str | None = None
    tag: str | None = None
    status: str | None = None
    type: str | None = None
    featured: bool | None = None
    on_sale: bool | None = None
    min_price: float | None = None
    max_price: float | None = None
    stock_status: str | None = None
    orderby: OrderBy | None = None
    order: SortOrder | None = None

    def to_params(self) -> dict[str, str]:
        """Query-string parameters, omitting unset values."""
        params: dict[str, str] = {}
        for key, value in asdict(self).items():
            if value is None:
                continue
            if isinstance(value, bool):
                params[key] = "true" if value else "false"
            else:
                params[key] = str(value)
        return params


class CatalogClient(Protocol):
    """Operations the storefront needs from the commerce backend."""

    async def get_products(self, query: ProductQuery | None = None) -> list[dict[str, Any]]: ...

    async def get_product(self, product_id: int) -> dict[str, Any]: ...

    async def get_categories(self) -> list[dict[str, Any]]: ...

    async def get_tags(self) -> list[dict[str, Any]]: ...

    async def search_products(
        self, search: str, query: ProductQuery | None = None
    ) -> list[dict[str, Any]]: ...

    async def get_orders(
        self,
        page: int = DEFAULT_PAGE,
        per_page: int = DEFAULT_ORDERS_PER_PAGE,
        include: Sequence[int] | None = None,
    ) -> list[dict[str, Any]]: ...

    async def create_order(self, order: OrderRequest) -> dict[str, Any]: ...


# --- Conversion ---


def parse_decimal(value: Any, default: Decimal | None = None) -> Decimal | None:
    """Parse a commerce price string ("29.00", "" or None). NaN and infinities give `default`."""
    if value is None or value == "":
        return default
    try:
        parsed = Decimal(str(value))
    except InvalidOperation:
        return default
    return parsed if parsed.is_finite() else default


def parse_timestamp(value: Any) -> datetime | None:
    if not value:
        return None
    try:
        return datetime.fromisoformat(str(value))
    except ValueError:
        return None


def strip_html(text: str) -> str:
    return _HTML_TAG.sub("", text or "").strip()


def font_from_product(product: dict[str, Any]) -> Font:
    """
    Convert a commerce product to a Font.

    The commerce backend has no font-specific fields, so the designer and
    file formats use storefront defaults.
    """
    price = parse_decimal(product.get("price")) or Decimal("0")
    regular = parse_decimal(product.get("regular_price"))
    categories = product.get("categories") or []
    images = product.get("images") or []

    try:
        rating = float(product.get("average_rating") or 0)
    except ValueError:
        rating = 0.0

    return Font(
        id=str(product["id"]),
        name=product.get("name", ""),
        category=categories[0]["name"] if categories else DEFAULT_CATEGORY,
        price=price,
        file_formats=DEFAULT_FILE_FORMATS,
        designer=DEFAULT_DESIGNER,
        description=strip_html(product.get("short_description", "")),
        tags=tuple(tag["name"] for tag in product.get("tags") or []),
        rating=rating,
        downloads=int(product.get("total_sales") or 0),
        slug=product.get("slug", ""),
        image_url=images[0]["src"] if images else None,
        regular_price=regular if regular is not None and regular > price else None,
        created_at=parse_timestamp(product.get("date_created")),
    )


def _address_from(data: dict[str, Any]) -> Address:
    return Address(
        first_name=data.get("first_name", ""),
        last_name=data.get("last_name", ""),
        address_1=data.get("address_1", ""),
        city=data.get("city", ""),
        postcode=data.get("postcode", ""),
        country=data.get("country", ""),
        state=data.get("state", ""),
        company=data.get("company", ""),
        address_2=data.get("address_2", ""),
        email=data.get("email", ""),
        phone=data.get("phone", ""),
    )


def order_from_payload(data: dict[str, Any]) -> Order:
    """Convert a commerce order to an Order."""
    return Order(
        id=int(data["id"]),
        number=str(data.get("number") or data["id"]),
        status=data.get("status", "pending"),
        currency=data.get("currency", "USD"),
        total=parse_decimal(data.get("total")) or Decimal("0"),
        created_at=parse_timestamp(data.get("date_created")),
        billing=_address_from(data.get("billing") or {}),
        line_items=[
            OrderLine(
                product_id=int(item.get("product_id") or 0),
                name=item.get("name", ""),
                quantity=int(item.get("quantity") or 0),
                total=parse_decimal(item.get("total")) or Decimal("0"),
            )
            for item in data.get("line_items") or []
        ],
        customer_note=data.get("customer_note", ""),
    )
