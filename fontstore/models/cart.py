from dataclasses import dataclass
from decimal import Decimal

from fontstore.models.font import Font
from fontstore.models.license import LicenseTier, license_price


@dataclass(frozen=True, slots=True)
class CartLine:
    """
    One (font, license, quantity) record in a cart.

    The font is a snapshot taken when the line was added. Pricing always
    uses that snapshot's base price, never a live catalog price.
    """

    font: Font
    license: LicenseTier
    quantity: int = 1

    @property
    def product_id(self) -> str:
        return self.font.id

    @property
    def unit_price(self) -> Decimal:
        """Price of one unit under this line's license."""
        return license_price(self.font.price, self.license)

    @property
    def line_total(self) -> Decimal:
        return self.unit_price * self.quantity

    def matches(self, product_id: str, license: LicenseTier) -> bool:
        """True if this line holds the given (product, license) pair."""
        return self.font.id == product_id and self.license == license
