from fontstore.models.cart import CartLine
from fontstore.models.font import DEFAULT_FILE_FORMATS, Font
from fontstore.models.license import (
    LICENSE_MULTIPLIERS,
    LICENSE_OPTIONS,
    LicenseOption,
    LicenseTier,
    license_price,
)
from fontstore.models.order import (
    ORDER_STATUS_LABELS,
    Address,
    Order,
    OrderLine,
    OrderLineRequest,
    OrderRequest,
    order_status_label,
)

__all__ = [
    "Address",
    "CartLine",
    "DEFAULT_FILE_FORMATS",
    "Font",
    "LICENSE_MULTIPLIERS",
    "LICENSE_OPTIONS",
    "LicenseOption",
    "LicenseTier",
    "ORDER_STATUS_LABELS",
    "Order",
    "OrderLine",
    "OrderLineRequest",
    "OrderRequest",
    "license_price",
    "order_status_label",
]
