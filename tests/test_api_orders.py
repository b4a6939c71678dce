"""Tests for the order history endpoint."""

from unittest.mock import AsyncMock

import pytest
from httpx import AsyncClient
from sqlalchemy.ext.asyncio import AsyncSession

from fontstore.config import settings
from fontstore.db.operations import upsert_storage_slot
from fontstore.services.catalog import CatalogError
from fontstore.services.demo_catalog import DemoCatalog

CHECKOUT_DETAILS = {
    "email": "jane@example.com",
    "first_name": "Jane",
    "last_name": "Roe",
    "address": "1 High St",
    "city": "Srinagar",
    "postcode": "190001",
    "country": "IN",
    "phone": "+911234567891",
}


@pytest.fixture
async def placed_orders(session: AsyncSession, client_id: str) -> None:
    """Give the test client the two bundled demo orders."""
    await upsert_storage_slot(session, client_id, settings.order_history_key, "[81, 80]")
    await session.commit()


class TestListOrders:
    async def test_new_client_has_no_orders(
        self,
        client: AsyncClient,
        demo_catalog: DemoCatalog,
        monkeypatch: pytest.MonkeyPatch,
    ) -> None:
        get_orders = AsyncMock(return_value=[])
        monkeypatch.setattr(demo_catalog, "get_orders", get_orders)

        response = await client.get("/account/orders")

        assert response.status_code == 200
        assert response.json() == {"orders": [], "page": 1, "per_page": 10}
        get_orders.assert_not_called()

    @pytest.mark.usefixtures("placed_orders")
    async def test_lists_own_orders_newest_first(self, client: AsyncClient) -> None:
        response = await client.get("/account/orders")

        assert response.status_code == 200
        data = response.json()
        assert data["page"] == 1
        assert data["per_page"] == 10
        first, second = data["orders"]
        assert first["id"] == 81
        assert first["status_label"] == "Completed"
        assert first["billing_name"] == "John Doe"
        assert first["product_ids"] == [1]
        assert second["customer_note"] == "Please deliver after 5 PM"
        assert second["items"][0]["quantity"] == 2

    @pytest.mark.usefixtures("placed_orders")
    async def test_pagination(self, client: AsyncClient) -> None:
        response = await client.get("/account/orders", params={"page": 2, "per_page": 1})

        assert [o["id"] for o in response.json()["orders"]] == [80]

    async def test_hides_other_clients_orders(self, client: AsyncClient) -> None:
        await client.post("/cart/items", json={"product_id": 1})
        placed = await client.post("/checkout", json=CHECKOUT_DETAILS)
        order_id = placed.json()["order_id"]

        own = (await client.get("/account/orders")).json()["orders"]
        client.cookies.set(settings.client_cookie_name, "other-client")
        other = (await client.get("/account/orders")).json()["orders"]

        assert [o["id"] for o in own] == [order_id]
        assert other == []

    async def test_ignores_ids_missing_from_catalog(
        self, client: AsyncClient, session: AsyncSession, client_id: str
    ) -> None:
        await upsert_storage_slot(session, client_id, settings.order_history_key, "[999, 80]")
        await session.commit()

        response = await client.get("/account/orders")

        assert [o["id"] for o in response.json()["orders"]] == [80]

    async def test_corrupt_history_lists_nothing(
        self, client: AsyncClient, session: AsyncSession, client_id: str
    ) -> None:
        await upsert_storage_slot(session, client_id, settings.order_history_key, "{oops")
        await session.commit()

        response = await client.get("/account/orders")

        assert response.status_code == 200
        assert response.json()["orders"] == []

    async def test_per_page_bounds(self, client: AsyncClient) -> None:
        response = await client.get("/account/orders", params={"per_page": 500})

        assert response.status_code == 422

    @pytest.mark.usefixtures("placed_orders")
    async def test_catalog_failure(
        self,
        client: AsyncClient,
        demo_catalog: DemoCatalog,
        monkeypatch: pytest.MonkeyPatch,
    ) -> None:
        monkeypatch.setattr(demo_catalog, "get_orders", AsyncMock(side_effect=CatalogError("x")))

        response = await client.get("/account/orders")

        assert response.status_code == 502
        assert response.json()["detail"] == "Unable to load your orders. Please try again later."
