"""Tests for the cart store."""

import json
import logging
from decimal import Decimal

import pytest

from fontstore.models.font import Font
from fontstore.models.license import LicenseTier
from fontstore.parsers.cart_codec import decode_cart
from fontstore.services.cart_store import DEFAULT_CART_KEY, CartStore
from fontstore.services.storage import MemoryStorage, StorageError


class UnreadableStorage:
    """Storage whose reads fail and whose writes are recorded."""

    def __init__(self) -> None:
        self.saved: dict[str, str] = {}

    def load(self, key: str) -> str | None:
        raise StorageError("disk unavailable")

    def save(self, key: str, blob: str) -> None:
        self.saved[key] = blob


class TestCartStoreInit:
    def test_starts_empty_without_saved_cart(self, storage: MemoryStorage) -> None:
        cart = CartStore(storage)

        assert cart.lines == ()
        assert cart.get_total_items() == 0
        assert cart.get_total_price() == Decimal("0")
        assert cart.key == DEFAULT_CART_KEY

    def test_restores_saved_cart(self, storage: MemoryStorage, montserrat: Font) -> None:
        first = CartStore(storage)
        first.add_item(montserrat, LicenseTier.COMMERCIAL)
        first.add_item(montserrat, LicenseTier.COMMERCIAL)

        second = CartStore(storage)

        assert len(second) == 1
        line = second.lines[0]
        assert line.font == montserrat
        assert line.license == LicenseTier.COMMERCIAL
        assert line.quantity == 2
        assert second.get_total_price() == first.get_total_price()

    def test_corrupt_cart_starts_empty(
        self, montserrat: Font, caplog: pytest.LogCaptureFixture
    ) -> None:
        storage = MemoryStorage({DEFAULT_CART_KEY: "{not json"})

        with caplog.at_level(logging.WARNING):
            cart = CartStore(storage)

        assert cart.lines == ()
        assert "corrupt" in caplog.text

        cart.add_item(montserrat, LicenseTier.PERSONAL)
        assert len(decode_cart(storage.load(DEFAULT_CART_KEY))) == 1

    def test_invalid_quantity_in_saved_cart_starts_empty(self) -> None:
        blob = json.dumps(
            {
                "version": 1,
                "lines": [
                    {
                        "productId": "1",
                        "license": "personal",
                        "quantity": 0,
                        "product": {"id": "1", "name": "A", "category": "B", "price": "1"},
                    }
                ],
            }
        )
        cart = CartStore(MemoryStorage({DEFAULT_CART_KEY: blob}))

        assert cart.lines == ()

    @pytest.mark.parametrize(
        "blob",
        ["[" * 100000, '{"version":1,"lines":' + "[" * 100000],
        ids=["bare", "in-document"],
    )
    def test_deeply_nested_cart_starts_empty(
        self, blob: str, montserrat: Font, caplog: pytest.LogCaptureFixture
    ) -> None:
        storage = MemoryStorage({DEFAULT_CART_KEY: blob})

        with caplog.at_level(logging.WARNING):
            cart = CartStore(storage)

        assert cart.lines == ()
        assert "corrupt" in caplog.text
        cart.add_item(montserrat, LicenseTier.PERSONAL)
        assert len(decode_cart(storage.load(DEFAULT_CART_KEY))) == 1

    def test_unreadable_storage_starts_empty(self, montserrat: Font) -> None:
        storage = UnreadableStorage()
        cart = CartStore(storage)

        assert cart.lines == ()
        cart.add_item(montserrat, LicenseTier.PERSONAL)
        assert DEFAULT_CART_KEY in storage.saved

    def test_custom_key(self, storage: MemoryStorage, montserrat: Font) -> None:
        cart = CartStore(storage, key="other-cart")
        cart.add_item(montserrat, LicenseTier.PERSONAL)

        assert "other-cart" in storage
        assert DEFAULT_CART_KEY not in storage

    def test_migrates_legacy_array(self) -> None:
        legacy = json.dumps(
            [
                {
                    "font": {
                        "id": "1",
                        "name": "Montserrat Pro",
                        "category": "Sans Serif",
                        "price": 29,
                        "fileFormats": ["OTF", "TTF"],
                        "designer": "Juliet Martinez",
                        "description": "",
                        "tags": [],
                        "rating": 4.8,
                        "downloads": 15234,
                    },
                    "license": "extended",
                    "quantity": 2,
                }
            ]
        )
        cart = CartStore(MemoryStorage({DEFAULT_CART_KEY: legacy}))

        assert cart.get_total_items() == 2
        assert cart.get_total_price() == Decimal("290")


class TestAddItem:
    def test_add_new_line(self, storage: MemoryStorage, montserrat: Font) -> None:
        cart = CartStore(storage)
        cart.add_item(montserrat, LicenseTier.PERSONAL)

        assert len(cart) == 1
        assert cart.lines[0].quantity == 1
        assert cart.is_in_cart("1")

    def test_add_same_pair_increments(self, storage: MemoryStorage, montserrat: Font) -> None:
        cart = CartStore(storage)
        cart.add_item(montserrat, LicenseTier.PERSONAL)
        cart.add_item(montserrat, LicenseTier.PERSONAL)

        assert len(cart) == 1
        assert cart.lines[0].quantity == 2

    def test_different_license_creates_separate_line(
        self, storage: MemoryStorage, montserrat: Font
    ) -> None:
        cart = CartStore(storage)
        cart.add_item(montserrat, LicenseTier.PERSONAL)
        cart.add_item(montserrat, LicenseTier.EXTENDED)

        assert len(cart) == 2
        assert [line.license for line in cart.lines] == [
            LicenseTier.PERSONAL,
            LicenseTier.EXTENDED,
        ]

    def test_accepts_license_value_string(self, storage: MemoryStorage, montserrat: Font) -> None:
        cart = CartStore(storage)
        cart.add_item(montserrat, "commercial")

        assert cart.lines[0].license == LicenseTier.COMMERCIAL

    def test_unknown_license_rejected(self, storage: MemoryStorage, montserrat: Font) -> None:
        cart = CartStore(storage)

        with pytest.raises(ValueError):
            cart.add_item(montserrat, "enterprise")

        assert cart.lines == ()
        assert DEFAULT_CART_KEY not in storage

    def test_add_persists(self, storage: MemoryStorage, montserrat: Font) -> None:
        cart = CartStore(storage)
        cart.add_item(montserrat, LicenseTier.PERSONAL)

        assert decode_cart(storage.load(DEFAULT_CART_KEY)) == list(cart.lines)

    def test_preserves_insertion_order(
        self, storage: MemoryStorage, montserrat: Font, elegant_script: Font
    ) -> None:
        cart = CartStore(storage)
        cart.add_item(elegant_script, LicenseTier.PERSONAL)
        cart.add_item(montserrat, LicenseTier.PERSONAL)
        cart.add_item(elegant_script, LicenseTier.PERSONAL)

        assert [line.product_id for line in cart.lines] == ["2", "1"]


class TestRemoveItem:
    def test_remove_drops_all_licenses(
        self, storage: MemoryStorage, montserrat: Font, elegant_script: Font
    ) -> None:
        cart = CartStore(storage)
        cart.add_item(montserrat, LicenseTier.PERSONAL)
        cart.add_item(montserrat, LicenseTier.COMMERCIAL)
        cart.add_item(elegant_script, LicenseTier.PERSONAL)

        cart.remove_item("1")

        assert [line.product_id for line in cart.lines] == ["2"]
        assert not cart.is_in_cart("1")

    def test_remove_missing_is_noop(self, storage: MemoryStorage, montserrat: Font) -> None:
        cart = CartStore(storage)
        cart.add_item(montserrat, LicenseTier.PERSONAL)

        cart.remove_item("999")

        assert len(cart) == 1

    def test_remove_persists(self, storage: MemoryStorage, montserrat: Font) -> None:
        cart = CartStore(storage)
        cart.add_item(montserrat, LicenseTier.PERSONAL)
        cart.remove_item("1")

        assert decode_cart(storage.load(DEFAULT_CART_KEY)) == []


class TestUpdateQuantity:
    def test_sets_quantity(self, storage: MemoryStorage, montserrat: Font) -> None:
        cart = CartStore(storage)
        cart.add_item(montserrat, LicenseTier.PERSONAL)

        cart.update_quantity("1", 4)

        assert cart.lines[0].quantity == 4
        assert cart.get_total_items() == 4

    def test_updates_every_license_line(self, storage: MemoryStorage, montserrat: Font) -> None:
        cart = CartStore(storage)
        cart.add_item(montserrat, LicenseTier.PERSONAL)
        cart.add_item(montserrat, LicenseTier.EXTENDED)

        cart.update_quantity("1", 3)

        assert [line.quantity for line in cart.lines] == [3, 3]

    @pytest.mark.parametrize("quantity", [0, -1])
    def test_non_positive_removes(
        self, storage: MemoryStorage, montserrat: Font, quantity: int
    ) -> None:
        cart = CartStore(storage)
        cart.add_item(montserrat, LicenseTier.PERSONAL)

        cart.update_quantity("1", quantity)

        assert cart.lines == ()

    @pytest.mark.parametrize("quantity", [2.5, "3", True])
    def test_non_integer_rejected(
        self, storage: MemoryStorage, montserrat: Font, quantity: object
    ) -> None:
        cart = CartStore(storage)
        cart.add_item(montserrat, LicenseTier.PERSONAL)

        with pytest.raises(TypeError):
            cart.update_quantity("1", quantity)  # type: ignore[arg-type]

        assert cart.lines[0].quantity == 1

    def test_missing_product_is_noop(self, storage: MemoryStorage, montserrat: Font) -> None:
        cart = CartStore(storage)
        cart.add_item(montserrat, LicenseTier.PERSONAL)

        cart.update_quantity("999", 5)

        assert cart.get_total_items() == 1


class TestClearCart:
    def test_clear_empties_and_persists(
        self, storage: MemoryStorage, montserrat: Font, elegant_script: Font
    ) -> None:
        cart = CartStore(storage)
        cart.add_item(montserrat, LicenseTier.PERSONAL)
        cart.add_item(elegant_script, LicenseTier.EXTENDED)

        cart.clear_cart()

        assert cart.lines == ()
        assert cart.get_total_price() == Decimal("0")
        assert CartStore(storage).lines == ()


class TestTotals:
    def test_commercial_line_total(self, storage: MemoryStorage, ten_dollar_font: Font) -> None:
        cart = CartStore(storage)
        cart.add_item(ten_dollar_font, LicenseTier.COMMERCIAL)
        cart.update_quantity("7", 3)

        assert cart.get_total_price() == Decimal("60")
        assert cart.get_total_items() == 3

    def test_mixed_licenses(
        self, storage: MemoryStorage, montserrat: Font, elegant_script: Font
    ) -> None:
        cart = CartStore(storage)
        cart.add_item(montserrat, LicenseTier.PERSONAL)  # 29
        cart.add_item(montserrat, LicenseTier.EXTENDED)  # 145
        cart.add_item(elegant_script, LicenseTier.COMMERCIAL)  # 90
        cart.add_item(elegant_script, LicenseTier.COMMERCIAL)  # 90

        assert cart.get_total_price() == Decimal("354")
        assert cart.get_total_items() == 4

    def test_decimal_prices_are_exact(self, storage: MemoryStorage) -> None:
        font = Font(id="9", name="Cents", category="Display", price=Decimal("0.10"))
        cart = CartStore(storage)
        for _ in range(3):
            cart.add_item(font, LicenseTier.PERSONAL)

        assert cart.get_total_price() == Decimal("0.30")


class TestPersistenceFailure:
    def test_quota_failure_keeps_memory_state(
        self, montserrat: Font, caplog: pytest.LogCaptureFixture
    ) -> None:
        storage = MemoryStorage(quota_bytes=10)
        cart = CartStore(storage)

        with caplog.at_level(logging.ERROR):
            cart.add_item(montserrat, LicenseTier.PERSONAL)

        assert cart.get_total_items() == 1
        assert DEFAULT_CART_KEY not in storage
        assert "Failed to save cart" in caplog.text

    def test_lines_view_is_read_only(self, storage: MemoryStorage, montserrat: Font) -> None:
        cart = CartStore(storage)
        cart.add_item(montserrat, LicenseTier.PERSONAL)

        lines = cart.lines
        assert isinstance(lines, tuple)
        cart.clear_cart()
        assert len(lines) == 1
