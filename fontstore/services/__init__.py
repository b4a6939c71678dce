"""
FontStore services.

Cart state management, client storage, and access to the commerce backend.
"""

from fontstore.services.cart_store import DEFAULT_CART_KEY, CartStore
from fontstore.services.catalog import (
    CatalogClient,
    CatalogError,
    ProductNotFoundError,
    ProductQuery,
    font_from_product,
    order_from_payload,
)
from fontstore.services.demo_catalog import DemoCatalog, DemoCatalogError
from fontstore.services.order_history import DEFAULT_ORDER_HISTORY_KEY, OrderHistory
from fontstore.services.storage import (
    ClientStorage,
    KeyValueStorage,
    MemoryStorage,
    StorageError,
    StorageQuotaExceededError,
)
from fontstore.services.woocommerce import WooCommerceClient

__all__ = [
    "CartStore",
    "CatalogClient",
    "CatalogError",
    "ClientStorage",
    "DEFAULT_CART_KEY",
    "DEFAULT_ORDER_HISTORY_KEY",
    "DemoCatalog",
    "DemoCatalogError",
    "KeyValueStorage",
    "MemoryStorage",
    "OrderHistory",
    "ProductNotFoundError",
    "ProductQuery",
    "StorageError",
    "StorageQuotaExceededError",
    "WooCommerceClient",
    "font_from_product",
    "order_from_payload",
]
