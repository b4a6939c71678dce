from decimal import Decimal

import pytest
from httpx import ASGITransport, AsyncClient
from sqlalchemy.ext.asyncio import AsyncSession, async_sessionmaker, create_async_engine

from fontstore.api.dependencies import get_catalog
from fontstore.config import settings
from fontstore.db.database import get_session
from fontstore.main import app
from fontstore.models.db import Base
from fontstore.models.font import Font
from fontstore.services.demo_catalog import DemoCatalog
from fontstore.services.storage import MemoryStorage

TEST_CLIENT_ID = "test-client"


@pytest.fixture
def client_id() -> str:
    """Client id carried by the test client's cookie."""
    return TEST_CLIENT_ID


@pytest.fixture
def montserrat() -> Font:
    """Sans serif font priced at 29."""
    return Font(
        id="1",
        name="Montserrat Pro",
        category="Sans Serif",
        price=Decimal("29"),
        file_formats=("OTF", "TTF", "WOFF", "WOFF2"),
        designer="Juliet Martinez",
        tags=("modern", "clean"),
        rating=4.8,
        downloads=15234,
    )


@pytest.fixture
def elegant_script() -> Font:
    """Script font priced at 45."""
    return Font(
        id="2",
        name="Elegant Script",
        category="Script",
        price=Decimal("45"),
        file_formats=("OTF", "TTF", "WOFF"),
    )


@pytest.fixture
def ten_dollar_font() -> Font:
    return Font(id="7", name="Tenner", category="Display", price=Decimal("10"))


@pytest.fixture
def storage() -> MemoryStorage:
    return MemoryStorage()


@pytest.fixture
async def async_engine():
    """Create an in-memory SQLite engine for testing."""
    engine = create_async_engine("sqlite+aiosqlite:///:memory:", echo=False)
    async with engine.begin() as conn:
        await conn.run_sync(Base.metadata.create_all)
    yield engine
    async with engine.begin() as conn:
        await conn.run_sync(Base.metadata.drop_all)
    await engine.dispose()


@pytest.fixture
async def session(async_engine) -> AsyncSession:
    """Provide a database session for tests."""
    async_session = async_sessionmaker(async_engine, class_=AsyncSession, expire_on_commit=False)
    async with async_session() as session:
        yield session


@pytest.fixture
def demo_catalog() -> DemoCatalog:
    return DemoCatalog()


@pytest.fixture
async def client(async_engine, demo_catalog: DemoCatalog):
    """Async test client with test database and demo catalog."""
    async_session = async_sessionmaker(async_engine, class_=AsyncSession, expire_on_commit=False)

    async def override_get_session():
        async with async_session() as session:
            try:
                yield session
                await session.commit()
            except Exception:
                await session.rollback()
                raise

    app.dependency_overrides[get_session] = override_get_session
    app.dependency_overrides[get_catalog] = lambda: demo_catalog

    transport = ASGITransport(app=app)
    async with AsyncClient(
        transport=transport,
        base_url="http://test",
        cookies={settings.client_cookie_name: TEST_CLIENT_ID},
    ) as client:
        yield client

    app.dependency_overrides.clear()
