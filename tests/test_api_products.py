"""Tests for catalog API endpoints."""

from unittest.mock import AsyncMock

import pytest
from httpx import AsyncClient

from fontstore.services.catalog import CatalogError
from fontstore.services.demo_catalog import DemoCatalog


class TestListProducts:
    async def test_lists_fonts(self, client: AsyncClient) -> None:
        response = await client.get("/api/products")

        assert response.status_code == 200
        data = response.json()
        assert data["success"] is True
        assert data["total"] == 6
        assert data["params"] == {"page": "1", "per_page": "20"}
        first = data["data"][0]
        assert first["name"] == "Montserrat Pro"
        assert first["designer"] == "Creatype Studio"
        assert first["file_formats"] == ["OTF", "TTF", "WOFF"]
        assert {k: float(v) for k, v in first["license_prices"].items()} == {
            "personal": 29,
            "commercial": 58,
            "extended": 145,
        }

    async def test_filters_forwarded(self, client: AsyncClient) -> None:
        response = await client.get(
            "/api/products", params={"category": "display", "orderby": "price", "order": "desc"}
        )

        data = response.json()
        assert [f["id"] for f in data["data"]] == ["3", "5"]
        assert data["params"]["category"] == "display"
        assert data["params"]["orderby"] == "price"

    async def test_only_true_enables_flags(self, client: AsyncClient) -> None:
        off = await client.get("/api/products", params={"featured": "false"})
        on = await client.get("/api/products", params={"featured": "true"})

        assert off.json()["total"] == 6
        assert "featured" not in off.json()["params"]
        assert on.json()["total"] == 2
        assert on.json()["params"]["featured"] == "true"

    async def test_on_sale_fonts_show_regular_price(self, client: AsyncClient) -> None:
        response = await client.get("/api/products", params={"on_sale": "true"})

        fonts = response.json()["data"]
        assert [f["id"] for f in fonts] == ["2", "5"]
        assert all(f["on_sale"] for f in fonts)
        assert float(fonts[0]["regular_price"]) == 55

    async def test_invalid_orderby(self, client: AsyncClient) -> None:
        response = await client.get("/api/products", params={"orderby": "color"})

        assert response.status_code == 422

    async def test_catalog_failure(
        self,
        client: AsyncClient,
        demo_catalog: DemoCatalog,
        monkeypatch: pytest.MonkeyPatch,
    ) -> None:
        monkeypatch.setattr(
            demo_catalog, "get_products", AsyncMock(side_effect=CatalogError("Commerce down"))
        )

        response = await client.get("/api/products")

        assert response.status_code == 502
        assert response.json() == {"success": False, "error": "Commerce down", "data": []}


class TestGetProduct:
    async def test_get_product(self, client: AsyncClient) -> None:
        response = await client.get("/api/products/6")

        assert response.status_code == 200
        font = response.json()
        assert font["name"] == "Minimal Mono"
        assert font["category"] == "Monospace"
        assert font["description"] == "Clean monospace font for coding and technical documentation."

    async def test_not_found(self, client: AsyncClient) -> None:
        response = await client.get("/api/products/999")

        assert response.status_code == 404

    async def test_invalid_id(self, client: AsyncClient) -> None:
        response = await client.get("/api/products/0")

        assert response.status_code == 422


class TestReferenceData:
    async def test_categories(self, client: AsyncClient) -> None:
        response = await client.get("/api/categories")

        categories = {c["slug"]: c for c in response.json()}
        assert categories["display"]["count"] == 2
        assert categories["script"]["name"] == "Script"

    async def test_tags(self, client: AsyncClient) -> None:
        response = await client.get("/api/tags")

        assert any(t["slug"] == "calligraphy" for t in response.json())

    async def test_licenses(self, client: AsyncClient) -> None:
        response = await client.get("/api/licenses")

        assert response.json() == [
            {
                "value": "personal",
                "label": "Personal",
                "description": "For personal projects only",
                "multiplier": 1,
            },
            {
                "value": "commercial",
                "label": "Commercial",
                "description": "For commercial projects",
                "multiplier": 2,
            },
            {
                "value": "extended",
                "label": "Extended",
                "description": "For resale and mass distribution",
                "multiplier": 5,
            },
        ]

    async def test_categories_catalog_failure(
        self,
        client: AsyncClient,
        demo_catalog: DemoCatalog,
        monkeypatch: pytest.MonkeyPatch,
    ) -> None:
        monkeypatch.setattr(
            demo_catalog, "get_categories", AsyncMock(side_effect=CatalogError("down"))
        )

        response = await client.get("/api/categories")

        assert response.status_code == 502
