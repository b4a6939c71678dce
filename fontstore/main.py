import logging
from collections.abc import AsyncGenerator
from contextlib import asynccontextmanager
from importlib.metadata import version as pkg_version

from fastapi import FastAPI
from fastapi.middleware.cors import CORSMiddleware

from fontstore.api import (
    cart_router,
    checkout_router,
    health_router,
    orders_router,
    products_router,
)
from fontstore.config import settings
from fontstore.db.database import init_db

logger = logging.getLogger(__name__)


@asynccontextmanager
async def lifespan(_app: FastAPI) -> AsyncGenerator[None, None]:
    """Application lifespan handler for startup/shutdown."""
    await init_db()
    logger.info("%s started (mock catalog: %s)", settings.app_name, settings.use_mock_data)
    yield


app = FastAPI(
    title=settings.app_name,
    version=pkg_version("fontstore"),
    lifespan=lifespan,
)

app.include_router(cart_router)
app.include_router(checkout_router)
app.include_router(health_router)
app.include_router(orders_router)
app.include_router(products_router)

app.add_middleware(
    CORSMiddleware,
    allow_origins=["*"],  # Tighten in production
    allow_credentials=False,
    allow_methods=["*"],
    allow_headers=["*"],
)
