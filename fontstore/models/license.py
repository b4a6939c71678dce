"""
License tiers and the license-tiered pricing rule.

A font's catalog price is its personal-license price. Other tiers are
priced as a fixed multiple of it.
"""

from dataclasses import dataclass
from decimal import Decimal
from enum import Enum


class LicenseTier(str, Enum):
    """Pricing classification applied to a font at purchase time."""

    PERSONAL = "personal"
    COMMERCIAL = "commercial"
    EXTENDED = "extended"


LICENSE_MULTIPLIERS: dict[LicenseTier, int] = {
    LicenseTier.PERSONAL: 1,
    LicenseTier.COMMERCIAL: 2,
    LicenseTier.EXTENDED: 5,
}


@dataclass(frozen=True, slots=True)
class LicenseOption:
    """Display metadata for a license tier."""

    tier: LicenseTier
    label: str
    description: str

    @property
    def multiplier(self) -> int:
        return LICENSE_MULTIPLIERS[self.tier]


LICENSE_OPTIONS: tuple[LicenseOption, ...] = (
    LicenseOption(LicenseTier.PERSONAL, "Personal", "For personal projects only"),
    LicenseOption(LicenseTier.COMMERCIAL, "Commercial", "For commercial projects"),
    LicenseOption(LicenseTier.EXTENDED, "Extended", "For resale and mass distribution"),
)


def license_price(base_price: Decimal, license: LicenseTier) -> Decimal:
    """
    Unit price of a font under a license tier.

    Args:
        base_price: Personal-license price captured from the catalog
        license: Tier being purchased

    Returns:
        base_price multiplied by the tier's multiplier.
    """
    return base_price * LICENSE_MULTIPLIERS[LicenseTier(license)]
