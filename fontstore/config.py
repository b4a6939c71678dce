from pydantic_settings import BaseSettings, SettingsConfigDict


class Settings(BaseSettings):
    """Application settings loaded from environment."""

    model_config = SettingsConfigDict(env_file=".env")

    app_name: str = "FontStore"
    debug: bool = False

    database_url: str = "sqlite+aiosqlite:///./fontstore.db"

    # Commerce backend (WooCommerce REST API v3)
    woocommerce_url: str = "https://creatypestudiobackend.local/"
    woocommerce_consumer_key: str = ""
    woocommerce_consumer_secret: str = ""
    catalog_timeout: float = 30.0

    # Serve the bundled demo catalog instead of calling the commerce backend
    use_mock_data: bool = False

    cart_storage_key: str = "font-store-cart"
    order_history_key: str = "font-store-orders"
    client_cookie_name: str = "fontstore_client"

    # Same order of magnitude as a browser's per-origin storage quota
    storage_quota_bytes: int = 5 * 1024 * 1024


settings = Settings()


# =============================================================================
# CATALOG DEFAULTS
# =============================================================================

DEFAULT_PAGE = 1

# Listing pages request 20 products, order history 10 orders
DEFAULT_PRODUCTS_PER_PAGE = 20
DEFAULT_ORDERS_PER_PAGE = 10
