"""
Health check endpoints.

Liveness, and a readiness check that verifies cart storage is reachable.
The commerce backend is not checked; its outages degrade catalog pages but
the cart keeps working.
"""

import logging
from typing import Annotated, Literal

from fastapi import APIRouter, Depends, Response, status
from pydantic import BaseModel
from sqlalchemy import func, select
from sqlalchemy.exc import SQLAlchemyError
from sqlalchemy.ext.asyncio import AsyncSession

from fontstore.config import settings
from fontstore.db.database import get_session
from fontstore.models.db import StorageSlotDB

logger = logging.getLogger(__name__)

router = APIRouter(tags=["health"])

CatalogMode = Literal["demo", "woocommerce"]


class HealthResponse(BaseModel):
    """Health check response."""

    status: str
    storage: str | None = None
    catalog: CatalogMode | None = None


def _catalog_mode() -> CatalogMode:
    return "demo" if settings.use_mock_data else "woocommerce"


@router.get("/health", response_model=HealthResponse)
async def health() -> HealthResponse:
    """Liveness check. Does not check dependencies."""
    return HealthResponse(status="healthy")


@router.get(
    "/ready",
    response_model=HealthResponse,
    responses={503: {"model": HealthResponse}},
)
async def ready(
    response: Response,
    session: Annotated[AsyncSession, Depends(get_session)],
) -> HealthResponse:
    """
    Readiness check.

    Queries the storage table. Returns 503 if cart storage is unavailable.
    """
    try:
        await session.execute(select(func.count()).select_from(StorageSlotDB))
    except SQLAlchemyError as e:
        logger.warning("Readiness check failed: %s", e)
        response.status_code = status.HTTP_503_SERVICE_UNAVAILABLE
        return HealthResponse(status="not ready", storage="unavailable", catalog=_catalog_mode())

    return HealthResponse(status="ready", storage="connected", catalog=_catalog_mode())
