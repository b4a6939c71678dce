"""
Shared FastAPI dependencies.

Each request gets the cart of the calling browser client. The client is
identified by a cookie; its storage slots are loaded before the endpoint
runs and changed slots are flushed once it returns.
"""

import logging
import re
import uuid
from collections.abc import AsyncGenerator
from functools import lru_cache
from typing import Annotated

from fastapi import Depends, Request, Response
from sqlalchemy.exc import SQLAlchemyError
from sqlalchemy.ext.asyncio import AsyncSession

from fontstore.config import settings
from fontstore.db.database import get_session
from fontstore.db.operations import flush_client_storage, load_client_storage
from fontstore.services.cart_store import CartStore
from fontstore.services.catalog import CatalogClient
from fontstore.services.demo_catalog import DemoCatalog
from fontstore.services.order_history import OrderHistory
from fontstore.services.storage import ClientStorage
from fontstore.services.woocommerce import WooCommerceClient

logger = logging.getLogger(__name__)

# One year, like a long-lived browser storage entry
CLIENT_COOKIE_MAX_AGE = 365 * 24 * 60 * 60

_CLIENT_ID_PATTERN = re.compile(r"^[A-Za-z0-9_-]{1,64}$")


def get_client_id(request: Request, response: Response) -> str:
    """
    Identify the browsing client.

    Reuses the client cookie when present and well-formed, otherwise issues
    a new random id.
    """
    client_id = request.cookies.get(settings.client_cookie_name)
    if client_id and _CLIENT_ID_PATTERN.match(client_id):
        return client_id

    client_id = uuid.uuid4().hex
    response.set_cookie(
        settings.client_cookie_name,
        client_id,
        max_age=CLIENT_COOKIE_MAX_AGE,
        httponly=True,
        samesite="lax",
    )
    return client_id


async def get_client_storage(
    client_id: Annotated[str, Depends(get_client_id)],
    session: Annotated[AsyncSession, Depends(get_session)],
) -> AsyncGenerator[ClientStorage, None]:
    """Storage slots of the calling client, flushed after a successful request."""
    storage = await load_client_storage(session, client_id, settings.storage_quota_bytes)
    yield storage

    try:
        await flush_client_storage(session, storage)
    except SQLAlchemyError as e:
        # Same contract as a failed local-storage write: the response stands
        logger.error("Failed to flush storage for client %s: %s", client_id, e)
        await session.rollback()


def get_cart_store(storage: Annotated[ClientStorage, Depends(get_client_storage)]) -> CartStore:
    return CartStore(storage, key=settings.cart_storage_key)


def get_order_history(
    storage: Annotated[ClientStorage, Depends(get_client_storage)],
) -> OrderHistory:
    return OrderHistory(storage, key=settings.order_history_key)


@lru_cache(maxsize=1)
def get_catalog() -> CatalogClient:
    """
    Catalog client for the process.

    The demo catalog when mock data is enabled, otherwise the commerce
    backend.
    """
    if settings.use_mock_data:
        logger.info("Using demo catalog (mock data enabled)")
        return DemoCatalog()
    return WooCommerceClient.from_settings(settings)


CartDep = Annotated[CartStore, Depends(get_cart_store)]
CatalogDep = Annotated[CatalogClient, Depends(get_catalog)]
OrderHistoryDep = Annotated[OrderHistory, Depends(get_order_history)]
