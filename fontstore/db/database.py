"""
Database engine and session management.

The storage table is written on nearly every request, while the purge job
may delete from it at the same time. On SQLite (the default backend) each
connection therefore waits on locks instead of failing immediately, and
file databases use write-ahead logging so readers do not block the writer.
"""

from collections.abc import AsyncGenerator
from typing import Any

from sqlalchemy import event
from sqlalchemy.engine import make_url
from sqlalchemy.exc import SQLAlchemyError
from sqlalchemy.ext.asyncio import (
    AsyncEngine,
    AsyncSession,
    async_sessionmaker,
    create_async_engine,
)

from fontstore.config import settings
from fontstore.models.db import Base

SQLITE_BUSY_TIMEOUT_MS = 5000


def is_sqlite(database_url: str) -> bool:
    return make_url(database_url).get_backend_name() == "sqlite"


def _configure_sqlite(dbapi_connection: Any, _connection_record: Any) -> None:
    cursor = dbapi_connection.cursor()
    cursor.execute(f"PRAGMA busy_timeout = {SQLITE_BUSY_TIMEOUT_MS}")
    # In-memory databases ignore this and stay in "memory" mode
    cursor.execute("PRAGMA journal_mode = WAL")
    cursor.close()


def create_engine_for(database_url: str, echo: bool = False) -> AsyncEngine:
    """
    Create the async engine for a database URL.

    Server databases get pre-ping so dropped pooled connections are
    replaced; SQLite connections get lock waiting and WAL instead.
    """
    if not is_sqlite(database_url):
        return create_async_engine(database_url, echo=echo, pool_pre_ping=True)

    sqlite_engine = create_async_engine(database_url, echo=echo)
    event.listen(sqlite_engine.sync_engine, "connect", _configure_sqlite)
    return sqlite_engine


engine = create_engine_for(settings.database_url, echo=settings.debug)

async_session_factory = async_sessionmaker(
    engine,
    class_=AsyncSession,
    expire_on_commit=False,
)


async def get_session() -> AsyncGenerator[AsyncSession, None]:
    """Request-scoped session: committed on success, rolled back on database errors."""
    async with async_session_factory() as session:
        try:
            yield session
            await session.commit()
        except SQLAlchemyError:
            await session.rollback()
            raise


async def init_db() -> None:
    """Create the storage tables if missing. Called at startup and by jobs."""
    async with engine.begin() as conn:
        await conn.run_sync(Base.metadata.create_all)
