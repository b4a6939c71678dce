"""
Checkout API endpoint.

Turns the client's cart into a cash-on-delivery order in the commerce
backend. Payment, inventory and fulfillment are handled by the backend.
"""

import logging
from collections.abc import Iterable
from decimal import Decimal

from fastapi import APIRouter, HTTPException, status
from pydantic import BaseModel, Field

from fontstore.api.dependencies import CartDep, CatalogDep, OrderHistoryDep
from fontstore.models.cart import CartLine
from fontstore.models.order import Address, OrderLineRequest, OrderRequest
from fontstore.services.catalog import CatalogError, order_from_payload

logger = logging.getLogger(__name__)

router = APIRouter(tags=["checkout"])

DEFAULT_STATE = "JK"

# Field -> message, in form order
REQUIRED_FIELDS: dict[str, str] = {
    "email": "Email is required",
    "first_name": "First name is required",
    "last_name": "Last name is required",
    "address": "Address is required",
    "city": "City is required",
    "country": "Country is required",
    "postcode": "Zip code is required",
    "phone": "Phone number is required for COD",
}


class CheckoutRequest(BaseModel):
    """Billing details collected by the checkout form."""

    email: str = ""
    first_name: str = ""
    last_name: str = ""
    address: str = ""
    city: str = ""
    state: str = Field(default="", description=f"Defaults to {DEFAULT_STATE} when blank")
    postcode: str = ""
    country: str = ""
    phone: str = ""


class CheckoutResponse(BaseModel):
    """Response model for a placed order."""

    order_id: int
    order_number: str
    status: str
    product_ids: list[int] = Field(default_factory=list)
    total: Decimal = Field(..., description="Order total reported by the commerce backend")
    cart_total: Decimal = Field(..., description="Cart total at the time of checkout")


def validate_checkout(request: CheckoutRequest) -> dict[str, str]:
    """Return field -> message for every missing required field."""
    return {
        name: message
        for name, message in REQUIRED_FIELDS.items()
        if not getattr(request, name).strip()
    }


def build_order_request(lines: Iterable[CartLine], request: CheckoutRequest) -> OrderRequest:
    """
    Build the commerce order for a cart.

    Shipping uses the billing address. Each cart line becomes an order line
    carrying its license as line metadata.

    Raises:
        ValueError: If a cart line's product id is not a catalog id
    """
    address = Address(
        first_name=request.first_name.strip(),
        last_name=request.last_name.strip(),
        address_1=request.address.strip(),
        city=request.city.strip(),
        state=request.state.strip() or DEFAULT_STATE,
        postcode=request.postcode.strip(),
        country=request.country.strip(),
        email=request.email.strip(),
        phone=request.phone.strip(),
    )
    line_items = [
        OrderLineRequest(
            product_id=int(line.product_id),
            quantity=line.quantity,
            license=line.license.value,
        )
        for line in lines
    ]
    return OrderRequest(billing=address, shipping=address, line_items=line_items)


@router.post("/checkout", response_model=CheckoutResponse)
async def checkout(
    request: CheckoutRequest,
    cart: CartDep,
    catalog: CatalogDep,
    history: OrderHistoryDep,
) -> CheckoutResponse:
    """
    Place an order for the current cart.

    The cart is cleared only after the commerce backend accepts the order,
    and the order is added to the client's order history.
    """
    if len(cart) == 0:
        raise HTTPException(
            status_code=status.HTTP_400_BAD_REQUEST,
            detail="Cart is empty",
        )

    errors = validate_checkout(request)
    if errors:
        raise HTTPException(
            status_code=status.HTTP_400_BAD_REQUEST,
            detail={"message": "Invalid checkout details", "errors": errors},
        )

    try:
        order_request = build_order_request(cart.lines, request)
    except ValueError as e:
        raise HTTPException(
            status_code=status.HTTP_400_BAD_REQUEST,
            detail="Cart contains a product that is not in the catalog",
        ) from e

    try:
        created = await catalog.create_order(order_request)
    except CatalogError as e:
        logger.error("Order creation failed: %s", e)
        raise HTTPException(
            status_code=status.HTTP_502_BAD_GATEWAY,
            detail="Unable to place your order right now. Your cart has been kept.",
        ) from e

    order = order_from_payload(created)
    cart_total = cart.get_total_price()
    cart.clear_cart()
    history.record(order.id)
    logger.info("Order %d placed (%d items)", order.id, len(order.line_items))

    return CheckoutResponse(
        order_id=order.id,
        order_number=order.number,
        status=order.status,
        product_ids=order.product_ids(),
        total=order.total,
        cart_total=cart_total,
    )
