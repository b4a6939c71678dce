"""
Order history API endpoint.

A client sees only the orders it placed through checkout.
"""

from datetime import datetime
from decimal import Decimal
from typing import Annotated

from fastapi import APIRouter, HTTPException, Query, status
from pydantic import BaseModel, Field

from fontstore.api.dependencies import CatalogDep, OrderHistoryDep
from fontstore.config import DEFAULT_ORDERS_PER_PAGE, DEFAULT_PAGE
from fontstore.models.order import Order
from fontstore.services.catalog import CatalogError, order_from_payload

router = APIRouter(prefix="/account", tags=["orders"])


class OrderItemResponse(BaseModel):
    product_id: int
    name: str
    quantity: int
    total: Decimal


class OrderSummaryResponse(BaseModel):
    """An order as listed in the account's order history."""

    id: int
    number: str
    status: str
    status_label: str
    currency: str
    total: Decimal
    created_at: datetime | None = None
    billing_name: str = ""
    billing_email: str = ""
    customer_note: str = ""
    items: list[OrderItemResponse] = Field(default_factory=list)
    product_ids: list[int] = Field(default_factory=list)

    @classmethod
    def from_order(cls, order: Order) -> "OrderSummaryResponse":
        return cls(
            id=order.id,
            number=order.number,
            status=order.status,
            status_label=order.status_label,
            currency=order.currency,
            total=order.total,
            created_at=order.created_at,
            billing_name=f"{order.billing.first_name} {order.billing.last_name}".strip(),
            billing_email=order.billing.email,
            customer_note=order.customer_note,
            items=[
                OrderItemResponse(
                    product_id=line.product_id,
                    name=line.name,
                    quantity=line.quantity,
                    total=line.total,
                )
                for line in order.line_items
            ],
            product_ids=order.product_ids(),
        )


class OrderListResponse(BaseModel):
    orders: list[OrderSummaryResponse] = Field(default_factory=list)
    page: int = DEFAULT_PAGE
    per_page: int = DEFAULT_ORDERS_PER_PAGE


@router.get("/orders", response_model=OrderListResponse)
async def list_orders(
    catalog: CatalogDep,
    history: OrderHistoryDep,
    page: Annotated[int, Query(ge=1)] = DEFAULT_PAGE,
    per_page: Annotated[int, Query(ge=1, le=100)] = DEFAULT_ORDERS_PER_PAGE,
) -> OrderListResponse:
    """
    Orders placed by the calling client, newest first.

    Only orders recorded in the client's order history are requested, and
    anything else the backend returns is dropped.
    """
    if not history.order_ids:
        return OrderListResponse(page=page, per_page=per_page)

    try:
        payloads = await catalog.get_orders(
            page=page, per_page=per_page, include=list(history.order_ids)
        )
    except CatalogError as e:
        raise HTTPException(
            status_code=status.HTTP_502_BAD_GATEWAY,
            detail="Unable to load your orders. Please try again later.",
        ) from e

    orders = [order_from_payload(p) for p in payloads]
    return OrderListResponse(
        orders=[OrderSummaryResponse.from_order(o) for o in orders if o.id in history],
        page=page,
        per_page=per_page,
    )
