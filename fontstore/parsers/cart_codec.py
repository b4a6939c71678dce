"""
Cart serialization.

Encodes a cart into the versioned JSON document stored in the client's
storage slot, and decodes it back with strict shape checks.

Encoded form:
    {
        "version": 1,
        "lines": [
            {
                "productId": "1",
                "license": "commercial",
                "quantity": 2,
                "product": {"id": "1", "name": ..., "category": ..., "price": "29", ...}
            }
        ]
    }

Older clients stored a bare array of {"font": {...}, "license", "quantity"}
objects with numeric prices. That legacy form is migrated on decode.

INVARIANT: decode either returns a cart that satisfies every cart invariant
(quantity >= 1, one line per product/license pair) or raises CartDecodeError.
"""

import json
from collections.abc import Iterable
from datetime import datetime
from decimal import Decimal, InvalidOperation
from typing import Any

from fontstore.models.cart import CartLine
from fontstore.models.font import DEFAULT_FILE_FORMATS, Font
from fontstore.models.license import LicenseTier

CART_SCHEMA_VERSION = 1


class CartDecodeError(ValueError):
    """Raised when a stored cart cannot be decoded."""

    pass


# --- Encoding ---


def _encode_font(font: Font) -> dict[str, Any]:
    return {
        "id": font.id,
        "name": font.name,
        "category": font.category,
        "price": str(font.price),
        "fileFormats": list(font.file_formats),
        "designer": font.designer,
        "description": font.description,
        "tags": list(font.tags),
        "rating": font.rating,
        "downloads": font.downloads,
        "slug": font.slug,
        "imageUrl": font.image_url,
        "regularPrice": str(font.regular_price) if font.regular_price is not None else None,
        "createdAt": font.created_at.isoformat() if font.created_at else None,
    }


def encode_cart(lines: Iterable[CartLine]) -> str:
    """Serialize cart lines to the versioned JSON document."""
    document = {
        "version": CART_SCHEMA_VERSION,
        "lines": [
            {
                "productId": line.font.id,
                "license": line.license.value,
                "quantity": line.quantity,
                "product": _encode_font(line.font),
            }
            for line in lines
        ],
    }
    return json.dumps(document, separators=(",", ":"))


# --- Decoding ---


def _require_str(data: dict[str, Any], key: str, where: str) -> str:
    value = data.get(key)
    if not isinstance(value, str):
        raise CartDecodeError(f"{where}: '{key}' is missing or not a string")
    return value


def _optional_str(data: dict[str, Any], key: str, where: str) -> str | None:
    value = data.get(key)
    if value is not None and not isinstance(value, str):
        raise CartDecodeError(f"{where}: '{key}' must be a string")
    return value


def _decode_price(value: Any, where: str) -> Decimal:
    # bool is an int subclass; reject it explicitly
    if isinstance(value, bool) or not isinstance(value, (str, int, float)):
        raise CartDecodeError(f"{where}: price must be a decimal string or number")
    try:
        price = Decimal(str(value))
    except InvalidOperation as e:
        raise CartDecodeError(f"{where}: invalid price {value!r}") from e
    if not price.is_finite() or price < 0:
        raise CartDecodeError(f"{where}: invalid price {value!r}")
    return price


def _decode_strings(value: Any, where: str, field_name: str) -> tuple[str, ...]:
    if not isinstance(value, list) or not all(isinstance(v, str) for v in value):
        raise CartDecodeError(f"{where}: '{field_name}' must be a list of strings")
    return tuple(value)


def _decode_font(data: Any, where: str) -> Font:
    if not isinstance(data, dict):
        raise CartDecodeError(f"{where}: product must be an object")

    font_id = _require_str(data, "id", where)
    name = _require_str(data, "name", where)
    category = _require_str(data, "category", where)
    price = _decode_price(data.get("price"), where)

    formats = data.get("fileFormats")
    file_formats = (
        DEFAULT_FILE_FORMATS if formats is None else _decode_strings(formats, where, "fileFormats")
    )
    tags = data.get("tags")

    regular_price = data.get("regularPrice")
    created_at = data.get("createdAt")
    try:
        created = datetime.fromisoformat(created_at) if created_at else None
    except (TypeError, ValueError) as e:
        raise CartDecodeError(f"{where}: invalid createdAt {created_at!r}") from e

    rating = data.get("rating", 0.0)
    downloads = data.get("downloads", 0)
    if isinstance(rating, bool) or not isinstance(rating, (int, float)):
        raise CartDecodeError(f"{where}: 'rating' must be a number")
    if isinstance(downloads, bool) or not isinstance(downloads, int):
        raise CartDecodeError(f"{where}: 'downloads' must be an integer")

    return Font(
        id=font_id,
        name=name,
        category=category,
        price=price,
        file_formats=file_formats,
        designer=_optional_str(data, "designer", where) or "",
        description=_optional_str(data, "description", where) or "",
        tags=() if tags is None else _decode_strings(tags, where, "tags"),
        rating=float(rating),
        downloads=downloads,
        slug=_optional_str(data, "slug", where) or "",
        image_url=_optional_str(data, "imageUrl", where) or None,
        regular_price=_decode_price(regular_price, where) if regular_price is not None else None,
        created_at=created,
    )


def _decode_license(value: Any, where: str) -> LicenseTier:
    try:
        return LicenseTier(value)
    except ValueError as e:
        raise CartDecodeError(f"{where}: unknown license {value!r}") from e


def _decode_quantity(value: Any, where: str) -> int:
    if isinstance(value, bool) or not isinstance(value, int) or value < 1:
        raise CartDecodeError(f"{where}: quantity must be a positive integer, got {value!r}")
    return value


def _decode_line(data: Any, where: str) -> CartLine:
    if not isinstance(data, dict):
        raise CartDecodeError(f"{where}: line must be an object")

    product_id = _require_str(data, "productId", where)
    font = _decode_font(data.get("product"), where)
    if font.id != product_id:
        raise CartDecodeError(f"{where}: productId {product_id!r} does not match product")

    return CartLine(
        font=font,
        license=_decode_license(data.get("license"), where),
        quantity=_decode_quantity(data.get("quantity"), where),
    )


def _decode_legacy_line(data: Any, where: str) -> CartLine:
    if not isinstance(data, dict):
        raise CartDecodeError(f"{where}: line must be an object")

    return CartLine(
        font=_decode_font(data.get("font"), where),
        license=_decode_license(data.get("license"), where),
        quantity=_decode_quantity(data.get("quantity"), where),
    )


def decode_cart(blob: str) -> list[CartLine]:
    """
    Parse a stored cart.

    Args:
        blob: Raw value from the storage slot

    Returns:
        Cart lines in stored order.

    Raises:
        CartDecodeError: If the blob is not a valid cart document
    """
    try:
        document = json.loads(blob)
    except (TypeError, ValueError, RecursionError) as e:
        # RecursionError comes from deeply nested arrays
        raise CartDecodeError(f"Stored cart is not valid JSON: {e}") from e

    if isinstance(document, list):
        lines = [_decode_legacy_line(item, f"line {i}") for i, item in enumerate(document)]
    elif isinstance(document, dict):
        version = document.get("version")
        if version != CART_SCHEMA_VERSION:
            raise CartDecodeError(f"Unsupported cart version: {version!r}")
        raw_lines = document.get("lines")
        if not isinstance(raw_lines, list):
            raise CartDecodeError("Cart document has no 'lines' list")
        lines = [_decode_line(item, f"line {i}") for i, item in enumerate(raw_lines)]
    else:
        raise CartDecodeError("Stored cart must be an object or a list")

    seen: set[tuple[str, LicenseTier]] = set()
    for line in lines:
        pair = (line.product_id, line.license)
        if pair in seen:
            raise CartDecodeError(
                f"Duplicate line for product {line.product_id!r} ({line.license.value})"
            )
        seen.add(pair)

    return lines
