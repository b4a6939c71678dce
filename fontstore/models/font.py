from dataclasses import dataclass
from datetime import datetime
from decimal import Decimal

DEFAULT_FILE_FORMATS: tuple[str, ...] = ("OTF", "TTF", "WOFF")


@dataclass(frozen=True, slots=True)
class Font:
    """
    A font product as listed in the catalog.

    Attributes:
        id: Catalog identifier (commerce product id as a string)
        name: Display name
        category: Primary category (e.g., "Sans Serif", "Script")
        price: Personal-license price
        file_formats: Font file formats included in the download
        designer: Foundry or designer credit
        description: Plain-text short description
        tags: Tag names from the catalog
        rating: Average rating (0-5)
        downloads: Total sales count
        slug: URL slug in the catalog
        image_url: Preview image URL
        regular_price: Pre-sale price, only set when the font is on sale
        created_at: When the product was published
    """

    id: str
    name: str
    category: str
    price: Decimal
    file_formats: tuple[str, ...] = DEFAULT_FILE_FORMATS
    designer: str = ""
    description: str = ""
    tags: tuple[str, ...] = ()
    rating: float = 0.0
    downloads: int = 0
    slug: str = ""
    image_url: str | None = None
    regular_price: Decimal | None = None
    created_at: datetime | None = None

    @property
    def on_sale(self) -> bool:
        """True if the font is discounted from its regular price."""
        return self.regular_price is not None and self.regular_price > self.price
