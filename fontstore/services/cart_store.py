"""
Shopping cart state manager.

Owns the cart of one browsing client: applies mutations, derives totals
under the license-tiered pricing rule, and mirrors every change to the
client's key-value storage slot.

All operations are synchronous. The store never performs network I/O; its
only failure modes are storage read/parse errors (recovered to an empty
cart) and storage write errors (logged, in-memory state kept).

Removal and quantity updates are keyed by product id alone. If the same
font is in the cart under two licenses, removing or re-quantifying it
affects both lines.
"""

import logging
from dataclasses import replace
from decimal import Decimal

from fontstore.models.cart import CartLine
from fontstore.models.font import Font
from fontstore.models.license import LicenseTier
from fontstore.parsers.cart_codec import CartDecodeError, decode_cart, encode_cart
from fontstore.services.storage import KeyValueStorage, StorageError

logger = logging.getLogger(__name__)

DEFAULT_CART_KEY = "font-store-cart"


class CartStore:
    """
    A cart backed by a durable storage slot.

    The saved cart is restored on construction. A missing slot starts an
    empty cart; an unreadable or corrupt one is logged and also starts an
    empty cart.

    Args:
        storage: Client-scoped key-value storage
        key: Slot holding the serialized cart
    """

    def __init__(self, storage: KeyValueStorage, key: str = DEFAULT_CART_KEY):
        self._storage = storage
        self._key = key
        self._lines: list[CartLine] = self._restore()

    @property
    def key(self) -> str:
        return self._key

    @property
    def lines(self) -> tuple[CartLine, ...]:
        """Cart lines in display order (read-only view)."""
        return tuple(self._lines)

    def __len__(self) -> int:
        return len(self._lines)

    # --- Mutations ---

    def add_item(self, font: Font, license: LicenseTier | str) -> None:
        """
        Add one unit of a font under a license.

        Increments the existing (font, license) line, or appends a new line
        with quantity 1.

        Raises:
            ValueError: If license is not a known tier
        """
        tier = LicenseTier(license)

        for index, line in enumerate(self._lines):
            if line.matches(font.id, tier):
                self._lines[index] = replace(line, quantity=line.quantity + 1)
                break
        else:
            self._lines.append(CartLine(font=font, license=tier, quantity=1))

        self._persist()

    def remove_item(self, product_id: str) -> None:
        """Remove every line for a product, whatever its license. No-op if absent."""
        self._lines = [line for line in self._lines if line.product_id != product_id]
        self._persist()

    def update_quantity(self, product_id: str, quantity: int) -> None:
        """
        Set the quantity of every line for a product.

        A quantity of zero or less removes the product instead.

        Raises:
            TypeError: If quantity is not an integer
        """
        if isinstance(quantity, bool) or not isinstance(quantity, int):
            raise TypeError(f"Quantity must be an integer, got {type(quantity).__name__}")

        if quantity <= 0:
            self.remove_item(product_id)
            return

        self._lines = [
            replace(line, quantity=quantity) if line.product_id == product_id else line
            for line in self._lines
        ]
        self._persist()

    def clear_cart(self) -> None:
        """Empty the cart (e.g., after a successful checkout)."""
        self._lines = []
        self._persist()

    # --- Derived values ---

    def get_total_price(self) -> Decimal:
        """Sum of license price times quantity over all lines."""
        return sum((line.line_total for line in self._lines), Decimal("0"))

    def get_total_items(self) -> int:
        """Number of units in the cart (not distinct lines)."""
        return sum(line.quantity for line in self._lines)

    def is_in_cart(self, product_id: str) -> bool:
        return any(line.product_id == product_id for line in self._lines)

    # --- Persistence ---

    def _restore(self) -> list[CartLine]:
        try:
            blob = self._storage.load(self._key)
        except StorageError as e:
            logger.warning("Could not read saved cart '%s': %s", self._key, e)
            return []

        if blob is None:
            return []

        try:
            lines = decode_cart(blob)
        except CartDecodeError as e:
            logger.warning("Discarding corrupt saved cart '%s': %s", self._key, e)
            return []

        logger.debug("Restored cart '%s' with %d lines", self._key, len(lines))
        return lines

    def _persist(self) -> None:
        try:
            self._storage.save(self._key, encode_cart(self._lines))
        except StorageError as e:
            logger.error("Failed to save cart '%s': %s", self._key, e)
