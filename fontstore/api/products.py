"""
Catalog API endpoints.

Product listings and details from the commerce backend, plus category,
tag and license reference data.
"""

from datetime import datetime
from decimal import Decimal
from typing import Annotated

from fastapi import APIRouter, HTTPException, Path, Query, status
from fastapi.responses import JSONResponse
from pydantic import BaseModel, Field

from fontstore.api.dependencies import CatalogDep
from fontstore.config import DEFAULT_PAGE, DEFAULT_PRODUCTS_PER_PAGE
from fontstore.models.font import Font
from fontstore.models.license import LICENSE_OPTIONS, license_price
from fontstore.services.catalog import (
    CatalogError,
    OrderBy,
    ProductNotFoundError,
    ProductQuery,
    SortOrder,
    font_from_product,
)

router = APIRouter(prefix="/api", tags=["catalog"])


class FontResponse(BaseModel):
    """A font as shown on listing and detail pages."""

    id: str
    name: str
    category: str
    price: Decimal = Field(..., description="Personal-license price")
    license_prices: dict[str, Decimal] = Field(
        default_factory=dict,
        description="Unit price for each license tier",
    )
    file_formats: list[str] = Field(default_factory=list)
    designer: str = ""
    description: str = ""
    tags: list[str] = Field(default_factory=list)
    rating: float = 0.0
    downloads: int = 0
    slug: str = ""
    image_url: str | None = None
    on_sale: bool = False
    regular_price: Decimal | None = None
    created_at: datetime | None = None

    @classmethod
    def from_font(cls, font: Font) -> "FontResponse":
        return cls(
            id=font.id,
            name=font.name,
            category=font.category,
            price=font.price,
            license_prices={
                option.tier.value: license_price(font.price, option.tier)
                for option in LICENSE_OPTIONS
            },
            file_formats=list(font.file_formats),
            designer=font.designer,
            description=font.description,
            tags=list(font.tags),
            rating=font.rating,
            downloads=font.downloads,
            slug=font.slug,
            image_url=font.image_url,
            on_sale=font.on_sale,
            regular_price=font.regular_price,
            created_at=font.created_at,
        )


class ProductListResponse(BaseModel):
    """Response model for product listings."""

    success: bool = True
    data: list[FontResponse] = Field(default_factory=list)
    total: int = 0
    params: dict[str, str] = Field(
        default_factory=dict,
        description="Query parameters forwarded to the catalog",
    )


class CategoryResponse(BaseModel):
    id: int
    name: str
    slug: str
    count: int = 0


class TagResponse(BaseModel):
    id: int
    name: str
    slug: str
    count: int = 0


class LicenseResponse(BaseModel):
    """A license tier and its pricing multiplier."""

    value: str
    label: str
    description: str
    multiplier: int


def _catalog_unavailable(e: CatalogError) -> HTTPException:
    return HTTPException(
        status_code=status.HTTP_502_BAD_GATEWAY,
        detail=f"Catalog service unavailable: {e}",
    )


@router.get("/products", response_model=ProductListResponse)
async def list_products(
    catalog: CatalogDep,
    page: Annotated[int, Query(ge=1)] = DEFAULT_PAGE,
    per_page: Annotated[int, Query(ge=1, le=100)] = DEFAULT_PRODUCTS_PER_PAGE,
    search: str | None = None,
    category: str | None = None,
    tag: str | None = None,
    product_status: Annotated[str | None, Query(alias="status")] = None,
    product_type: Annotated[str | None, Query(alias="type")] = None,
    featured: bool | None = None,
    on_sale: bool | None = None,
    min_price: Annotated[float | None, Query(ge=0)] = None,
    max_price: Annotated[float | None, Query(ge=0)] = None,
    stock_status: str | None = None,
    orderby: OrderBy | None = None,
    order: SortOrder | None = None,
) -> ProductListResponse | JSONResponse:
    """
    List fonts.

    Filters, sorting and pagination are forwarded to the catalog.
    Only `true` enables the featured/on_sale filters.
    """
    query = ProductQuery(
        page=page,
        per_page=per_page,
        search=search or None,
        category=category or None,
        tag=tag or None,
        status=product_status or None,
        type=product_type or None,
        featured=True if featured else None,
        on_sale=True if on_sale else None,
        min_price=min_price,
        max_price=max_price,
        stock_status=stock_status or None,
        orderby=orderby,
        order=order,
    )

    try:
        products = await catalog.get_products(query)
    except CatalogError as e:
        return JSONResponse(
            status_code=status.HTTP_502_BAD_GATEWAY,
            content={"success": False, "error": str(e), "data": []},
        )

    fonts = [FontResponse.from_font(font_from_product(p)) for p in products]
    return ProductListResponse(data=fonts, total=len(fonts), params=query.to_params())


@router.get("/products/{product_id}", response_model=FontResponse)
async def get_product(
    product_id: Annotated[int, Path(ge=1)],
    catalog: CatalogDep,
) -> FontResponse:
    """Get a single font by catalog id."""
    try:
        product = await catalog.get_product(product_id)
    except ProductNotFoundError as e:
        raise HTTPException(status_code=status.HTTP_404_NOT_FOUND, detail=str(e)) from e
    except CatalogError as e:
        raise _catalog_unavailable(e) from e

    return FontResponse.from_font(font_from_product(product))


@router.get("/categories", response_model=list[CategoryResponse])
async def list_categories(catalog: CatalogDep) -> list[CategoryResponse]:
    try:
        categories = await catalog.get_categories()
    except CatalogError as e:
        raise _catalog_unavailable(e) from e

    return [
        CategoryResponse(
            id=c["id"], name=c.get("name", ""), slug=c.get("slug", ""), count=c.get("count", 0)
        )
        for c in categories
    ]


@router.get("/tags", response_model=list[TagResponse])
async def list_tags(catalog: CatalogDep) -> list[TagResponse]:
    try:
        tags = await catalog.get_tags()
    except CatalogError as e:
        raise _catalog_unavailable(e) from e

    return [
        TagResponse(
            id=t["id"], name=t.get("name", ""), slug=t.get("slug", ""), count=t.get("count", 0)
        )
        for t in tags
    ]


@router.get("/licenses", response_model=list[LicenseResponse])
async def list_licenses() -> list[LicenseResponse]:
    """License tiers in display order."""
    return [
        LicenseResponse(
            value=option.tier.value,
            label=option.label,
            description=option.description,
            multiplier=option.multiplier,
        )
        for option in LICENSE_OPTIONS
    ]
