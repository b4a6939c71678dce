"""
Cart API endpoints.

Every endpoint operates on the calling client's cart. Mutations are
persisted to the client's storage as part of the request.
"""

from decimal import Decimal
from typing import Annotated

from fastapi import APIRouter, HTTPException, Path, status
from pydantic import BaseModel, Field

from fontstore.api.dependencies import CartDep, CatalogDep
from fontstore.models.cart import CartLine
from fontstore.models.license import LicenseTier
from fontstore.services.cart_store import CartStore
from fontstore.services.catalog import CatalogError, ProductNotFoundError, font_from_product

router = APIRouter(prefix="/cart", tags=["cart"])

ProductIdPath = Annotated[str, Path(min_length=1, max_length=64)]


class CartLineResponse(BaseModel):
    """One line of the cart with its derived prices."""

    product_id: str
    name: str
    category: str
    license: LicenseTier
    quantity: int
    base_price: Decimal
    unit_price: Decimal
    line_total: Decimal

    @classmethod
    def from_line(cls, line: CartLine) -> "CartLineResponse":
        return cls(
            product_id=line.product_id,
            name=line.font.name,
            category=line.font.category,
            license=line.license,
            quantity=line.quantity,
            base_price=line.font.price,
            unit_price=line.unit_price,
            line_total=line.line_total,
        )


class CartResponse(BaseModel):
    """Response model for cart state."""

    items: list[CartLineResponse] = Field(default_factory=list)
    total_price: Decimal = Decimal("0")
    total_items: int = Field(default=0, description="Units in the cart, not distinct lines")


class AddItemRequest(BaseModel):
    """Request model for adding a font to the cart."""

    product_id: int = Field(..., ge=1, description="Catalog id of the font")
    license: LicenseTier = Field(default=LicenseTier.PERSONAL)


class UpdateQuantityRequest(BaseModel):
    """Request model for setting a product's quantity."""

    quantity: int = Field(
        ...,
        description="New quantity for every license line of the product; 0 or less removes it",
    )


class InCartResponse(BaseModel):
    product_id: str
    in_cart: bool


def cart_response(cart: CartStore) -> CartResponse:
    return CartResponse(
        items=[CartLineResponse.from_line(line) for line in cart.lines],
        total_price=cart.get_total_price(),
        total_items=cart.get_total_items(),
    )


@router.get("", response_model=CartResponse)
async def get_cart(cart: CartDep) -> CartResponse:
    """Get the current cart with totals."""
    return cart_response(cart)


@router.post("/items", response_model=CartResponse)
async def add_cart_item(
    request: AddItemRequest,
    cart: CartDep,
    catalog: CatalogDep,
) -> CartResponse:
    """
    Add one unit of a font under a license.

    The font is looked up in the catalog and snapshotted into the cart;
    later catalog price changes do not affect the line.
    """
    try:
        product = await catalog.get_product(request.product_id)
    except ProductNotFoundError as e:
        raise HTTPException(status_code=status.HTTP_404_NOT_FOUND, detail=str(e)) from e
    except CatalogError as e:
        raise HTTPException(
            status_code=status.HTTP_502_BAD_GATEWAY,
            detail=f"Catalog service unavailable: {e}",
        ) from e

    cart.add_item(font_from_product(product), request.license)
    return cart_response(cart)


@router.get("/items/{product_id}", response_model=InCartResponse)
async def check_cart_item(product_id: ProductIdPath, cart: CartDep) -> InCartResponse:
    """Whether any license of a product is in the cart."""
    return InCartResponse(product_id=product_id, in_cart=cart.is_in_cart(product_id))


@router.patch("/items/{product_id}", response_model=CartResponse)
async def update_cart_item(
    product_id: ProductIdPath,
    request: UpdateQuantityRequest,
    cart: CartDep,
) -> CartResponse:
    """
    Set the quantity of a product.

    Applies to every license line of the product. A quantity of zero or
    less removes the product.
    """
    cart.update_quantity(product_id, request.quantity)
    return cart_response(cart)


@router.delete("/items/{product_id}", response_model=CartResponse)
async def remove_cart_item(product_id: ProductIdPath, cart: CartDep) -> CartResponse:
    """Remove a product (all license lines). Removing an absent product is a no-op."""
    cart.remove_item(product_id)
    return cart_response(cart)


@router.delete("", response_model=CartResponse)
async def clear_cart(cart: CartDep) -> CartResponse:
    """Empty the cart."""
    cart.clear_cart()
    return cart_response(cart)
