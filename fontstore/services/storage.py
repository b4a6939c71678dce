"""
Client-scoped key-value storage.

A synchronous get/set-by-key facility holding serialized blobs, in the
manner of a browser's local storage. The cart store only ever talks to
this interface; where the bytes live is up to the implementation.

ClientStorage is the server-side realization: the slots belonging to one
browsing client are loaded from the database before a request, mutated
synchronously during it, and the changed keys are flushed afterwards
(see fontstore.db.operations).
"""

from typing import Protocol


class StorageError(Exception):
    """Raised when a storage slot cannot be read or written."""

    pass


class StorageQuotaExceededError(StorageError):
    """Raised when a write would exceed the per-slot quota."""

    def __init__(self, key: str, size: int, quota: int) -> None:
        self.key = key
        self.size = size
        self.quota = quota
        super().__init__(f"Value for '{key}' is {size} bytes, quota is {quota} bytes")


class KeyValueStorage(Protocol):
    """Synchronous durable key-value slot store."""

    def load(self, key: str) -> str | None:
        """Return the blob stored under key, or None if absent."""
        ...

    def save(self, key: str, blob: str) -> None:
        """Store blob under key. Raises StorageError on failure."""
        ...


class MemoryStorage:
    """
    Dict-backed storage.

    Args:
        items: Initial slot contents
        quota_bytes: Maximum UTF-8 size of a single value (None = unlimited)
    """

    def __init__(self, items: dict[str, str] | None = None, quota_bytes: int | None = None):
        self._items: dict[str, str] = dict(items or {})
        self.quota_bytes = quota_bytes

    def load(self, key: str) -> str | None:
        return self._items.get(key)

    def save(self, key: str, blob: str) -> None:
        if self.quota_bytes is not None:
            size = len(blob.encode("utf-8"))
            if size > self.quota_bytes:
                raise StorageQuotaExceededError(key, size, self.quota_bytes)
        self._items[key] = blob

    def remove(self, key: str) -> None:
        self._items.pop(key, None)

    def items(self) -> dict[str, str]:
        """Copy of all slots."""
        return dict(self._items)

    def __contains__(self, key: object) -> bool:
        return key in self._items

    def __len__(self) -> int:
        return len(self._items)


class ClientStorage(MemoryStorage):
    """
    The storage slots of a single browsing client.

    Tracks which keys were written since load so only those are flushed
    back to the database.
    """

    def __init__(
        self,
        client_id: str,
        items: dict[str, str] | None = None,
        quota_bytes: int | None = None,
    ):
        super().__init__(items, quota_bytes)
        self.client_id = client_id
        self._dirty: set[str] = set()

    def save(self, key: str, blob: str) -> None:
        super().save(key, blob)
        self._dirty.add(key)

    @property
    def dirty_keys(self) -> frozenset[str]:
        return frozenset(self._dirty)

    def mark_clean(self) -> None:
        """Forget pending writes (called after a successful flush)."""
        self._dirty.clear()
