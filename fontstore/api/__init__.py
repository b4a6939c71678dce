from fontstore.api.cart import router as cart_router
from fontstore.api.checkout import router as checkout_router
from fontstore.api.health import router as health_router
from fontstore.api.orders import router as orders_router
from fontstore.api.products import router as products_router

__all__ = [
    "cart_router",
    "checkout_router",
    "health_router",
    "orders_router",
    "products_router",
]
