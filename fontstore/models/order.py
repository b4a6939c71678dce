from dataclasses import dataclass, field
from datetime import datetime
from decimal import Decimal
from typing import Any

# Order status -> user-facing label. Unknown statuses display as pending.
ORDER_STATUS_LABELS: dict[str, str] = {
    "pending": "Pending Payment",
    "processing": "Processing",
    "completed": "Completed",
    "cancelled": "Cancelled",
    "refunded": "Refunded",
    "failed": "Failed",
}


def order_status_label(status: str) -> str:
    """Display label for an order status."""
    return ORDER_STATUS_LABELS.get(status, ORDER_STATUS_LABELS["pending"])


@dataclass(frozen=True, slots=True)
class Address:
    """Billing or shipping contact."""

    first_name: str
    last_name: str
    address_1: str
    city: str
    postcode: str
    country: str
    state: str = ""
    company: str = ""
    address_2: str = ""
    email: str = ""
    phone: str = ""

    def to_billing(self) -> dict[str, str]:
        return {
            "first_name": self.first_name,
            "last_name": self.last_name,
            "address_1": self.address_1,
            "city": self.city,
            "state": self.state,
            "postcode": self.postcode,
            "country": self.country,
            "email": self.email,
            "phone": self.phone,
        }

    def to_shipping(self) -> dict[str, str]:
        """Shipping payload; carries no email or phone."""
        return {
            "first_name": self.first_name,
            "last_name": self.last_name,
            "address_1": self.address_1,
            "city": self.city,
            "state": self.state,
            "postcode": self.postcode,
            "country": self.country,
        }


@dataclass(frozen=True, slots=True)
class OrderLineRequest:
    """A line item to submit with a new order."""

    product_id: int
    quantity: int
    license: str | None = None

    def to_payload(self) -> dict[str, Any]:
        payload: dict[str, Any] = {"product_id": self.product_id, "quantity": self.quantity}
        if self.license:
            payload["meta_data"] = [{"key": "license", "value": self.license}]
        return payload


@dataclass
class OrderRequest:
    """
    Data required to create an order in the commerce backend.

    Payment is always collected on delivery; the storefront never handles
    payment details.
    """

    billing: Address
    shipping: Address
    line_items: list[OrderLineRequest] = field(default_factory=list)
    payment_method: str = "cod"
    payment_method_title: str = "Cash on Delivery"
    set_paid: bool = True

    def to_payload(self) -> dict[str, Any]:
        return {
            "payment_method": self.payment_method,
            "payment_method_title": self.payment_method_title,
            "set_paid": self.set_paid,
            "billing": self.billing.to_billing(),
            "shipping": self.shipping.to_shipping(),
            "line_items": [item.to_payload() for item in self.line_items],
        }


@dataclass(frozen=True, slots=True)
class OrderLine:
    """A line item of an existing order."""

    product_id: int
    name: str
    quantity: int
    total: Decimal


@dataclass
class Order:
    """An order as reported by the commerce backend."""

    id: int
    number: str
    status: str
    currency: str
    total: Decimal
    created_at: datetime | None
    billing: Address
    line_items: list[OrderLine] = field(default_factory=list)
    customer_note: str = ""

    @property
    def status_label(self) -> str:
        return order_status_label(self.status)

    def product_ids(self) -> list[int]:
        """Distinct product ids in this order, in line order."""
        seen: list[int] = []
        for line in self.line_items:
            if line.product_id and line.product_id not in seen:
                seen.append(line.product_id)
        return seen
