"""
Orders placed by one browsing client.

The commerce backend lists every order in the store. The storefront only
shows a client the orders it placed itself, so checkout records each new
order id in the client's storage next to the cart.
"""

import json
import logging

from fontstore.services.storage import KeyValueStorage, StorageError

logger = logging.getLogger(__name__)

DEFAULT_ORDER_HISTORY_KEY = "font-store-orders"


class OrderHistory:
    """
    Ids of the orders a client has placed, newest first.

    An unreadable or malformed slot is logged and treated as no orders.

    Args:
        storage: Client-scoped key-value storage
        key: Slot holding the JSON list of order ids
    """

    def __init__(self, storage: KeyValueStorage, key: str = DEFAULT_ORDER_HISTORY_KEY):
        self._storage = storage
        self._key = key
        self._order_ids: list[int] = self._restore()

    @property
    def order_ids(self) -> tuple[int, ...]:
        return tuple(self._order_ids)

    def __contains__(self, order_id: object) -> bool:
        return order_id in self._order_ids

    def record(self, order_id: int) -> None:
        """Remember a placed order. Recording the same id twice is a no-op."""
        if order_id in self._order_ids:
            return
        self._order_ids.insert(0, order_id)
        try:
            self._storage.save(self._key, json.dumps(self._order_ids))
        except StorageError as e:
            logger.error("Failed to save order history '%s': %s", self._key, e)

    def _restore(self) -> list[int]:
        try:
            blob = self._storage.load(self._key)
        except StorageError as e:
            logger.warning("Could not read order history '%s': %s", self._key, e)
            return []

        if blob is None:
            return []

        try:
            data = json.loads(blob)
        except (ValueError, RecursionError) as e:
            logger.warning("Discarding corrupt order history '%s': %s", self._key, e)
            return []

        if not isinstance(data, list) or not all(
            isinstance(i, int) and not isinstance(i, bool) and i > 0 for i in data
        ):
            logger.warning("Discarding malformed order history '%s'", self._key)
            return []

        return list(dict.fromkeys(data))
