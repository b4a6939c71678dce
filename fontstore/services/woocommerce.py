"""
WooCommerce REST API client.

Talks to the commerce backend at {base_url}/wp-json/wc/v3/ using HTTP Basic
auth with a consumer key/secret pair. All failures surface as CatalogError.
"""

import logging
from collections.abc import Sequence
from typing import Any

import httpx

from fontstore.config import DEFAULT_ORDERS_PER_PAGE, DEFAULT_PAGE, Settings
from fontstore.models.order import OrderRequest
from fontstore.services.catalog import CatalogError, ProductNotFoundError, ProductQuery

logger = logging.getLogger(__name__)

API_PREFIX = "/wp-json/wc/v3"


class WooCommerceClient:
    """
    Async client for the commerce backend.

    Args:
        base_url: Store URL (trailing slash optional)
        consumer_key: REST API consumer key
        consumer_secret: REST API consumer secret
        timeout: Request timeout in seconds
        client: Optional httpx client for connection reuse
    """

    def __init__(
        self,
        base_url: str,
        consumer_key: str,
        consumer_secret: str,
        *,
        timeout: float = 30.0,
        client: httpx.AsyncClient | None = None,
    ):
        self.base_url = base_url.rstrip("/")
        self._auth = httpx.BasicAuth(consumer_key, consumer_secret)
        self._timeout = timeout
        self._client = client

    @classmethod
    def from_settings(cls, settings: Settings) -> "WooCommerceClient":
        return cls(
            settings.woocommerce_url,
            settings.woocommerce_consumer_key,
            settings.woocommerce_consumer_secret,
            timeout=settings.catalog_timeout,
        )

    def endpoint_url(self, endpoint: str) -> str:
        return f"{self.base_url}{API_PREFIX}/{endpoint}"

    async def _request(
        self,
        method: str,
        endpoint: str,
        params: dict[str, str] | None = None,
        payload: dict[str, Any] | None = None,
    ) -> Any:
        url = self.endpoint_url(endpoint)
        logger.info("%s %s params=%s", method, url, params or {})

        try:
            if self._client is not None:
                response = await self._client.request(
                    method, url, params=params, json=payload, auth=self._auth
                )
            else:
                async with httpx.AsyncClient(timeout=self._timeout) as client:
                    response = await client.request(
                        method, url, params=params, json=payload, auth=self._auth
                    )
        except httpx.HTTPError as e:
            logger.error("Commerce API request failed: %s %s: %s", method, url, e)
            raise CatalogError(f"Commerce API request failed: {e}") from e

        if response.is_error:
            logger.error(
                "Commerce API error: %s %s -> %d %s",
                method,
                url,
                response.status_code,
                response.text,
            )
            raise CatalogError(
                f"Commerce API error: {response.status_code} - {response.text}",
                status_code=response.status_code,
            )

        try:
            return response.json()
        except ValueError as e:
            raise CatalogError(f"Commerce API returned invalid JSON from {endpoint}") from e

    async def get_products(self, query: ProductQuery | None = None) -> list[dict[str, Any]]:
        params = (query or ProductQuery()).to_params()
        return await self._request("GET", "products", params=params)

    async def get_product(self, product_id: int) -> dict[str, Any]:
        try:
            return await self._request("GET", f"products/{product_id}")
        except CatalogError as e:
            if e.status_code == 404:
                raise ProductNotFoundError(product_id) from e
            raise

    async def get_categories(self) -> list[dict[str, Any]]:
        return await self._request("GET", "products/categories")

    async def get_tags(self) -> list[dict[str, Any]]:
        return await self._request("GET", "products/tags")

    async def search_products(
        self, search: str, query: ProductQuery | None = None
    ) -> list[dict[str, Any]]:
        params = (query or ProductQuery()).to_params()
        params["search"] = search
        return await self._request("GET", "products", params=params)

    async def get_orders(
        self,
        page: int = DEFAULT_PAGE,
        per_page: int = DEFAULT_ORDERS_PER_PAGE,
        include: Sequence[int] | None = None,
    ) -> list[dict[str, Any]]:
        params = {"page": str(page), "per_page": str(per_page)}
        if include is not None:
            # An empty include filter is ignored by the API, which would list every order
            if not include:
                return []
            params["include"] = ",".join(str(order_id) for order_id in include)
        return await self._request("GET", "orders", params=params)

    async def create_order(self, order: OrderRequest) -> dict[str, Any]:
        created = await self._request("POST", "orders", payload=order.to_payload())
        logger.info("Created order %s", created.get("id"))
        return created
