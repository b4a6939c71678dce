"""
Database operations for client storage.

Loads a client's key-value slots into a ClientStorage buffer and writes
changed slots back.
"""

import logging
from datetime import UTC, datetime, timedelta

from sqlalchemy import delete, select
from sqlalchemy.ext.asyncio import AsyncSession

from fontstore.models.db import StorageSlotDB
from fontstore.services.storage import ClientStorage

logger = logging.getLogger(__name__)


async def get_storage_slots(session: AsyncSession, client_id: str) -> list[StorageSlotDB]:
    """Get all storage slots owned by a client."""
    result = await session.execute(
        select(StorageSlotDB).where(StorageSlotDB.client_id == client_id)
    )
    return list(result.scalars().all())


async def get_storage_slot(session: AsyncSession, client_id: str, key: str) -> StorageSlotDB | None:
    """Get one slot, or None if the client has never written that key."""
    result = await session.execute(
        select(StorageSlotDB).where(
            StorageSlotDB.client_id == client_id,
            StorageSlotDB.key == key,
        )
    )
    return result.scalar_one_or_none()


async def upsert_storage_slot(
    session: AsyncSession, client_id: str, key: str, value: str
) -> StorageSlotDB:
    """
    Insert or update a slot.

    If the client already has the key, replaces its value.
    Otherwise creates a new record.
    """
    existing = await get_storage_slot(session, client_id, key)

    if existing:
        existing.value = value
        await session.flush()
        return existing

    slot = StorageSlotDB(client_id=client_id, key=key, value=value)
    session.add(slot)
    await session.flush()
    return slot


async def load_client_storage(
    session: AsyncSession, client_id: str, quota_bytes: int | None = None
) -> ClientStorage:
    """Build a ClientStorage buffer holding every slot of a client."""
    slots = await get_storage_slots(session, client_id)
    return ClientStorage(
        client_id,
        items={slot.key: slot.value for slot in slots},
        quota_bytes=quota_bytes,
    )


async def flush_client_storage(session: AsyncSession, storage: ClientStorage) -> int:
    """
    Write the slots changed since load back to the database.

    Returns the number of slots written.
    """
    items = storage.items()
    written = 0
    for key in sorted(storage.dirty_keys):
        await upsert_storage_slot(session, storage.client_id, key, items[key])
        written += 1

    storage.mark_clean()
    if written:
        logger.debug("Flushed %d storage slots for client %s", written, storage.client_id)
    return written


async def delete_client_storage(session: AsyncSession, client_id: str) -> int:
    """
    Delete all slots of a client.

    Returns the number of deleted records.
    """
    result = await session.execute(delete(StorageSlotDB).where(StorageSlotDB.client_id == client_id))
    # rowcount is available on DELETE results; type stubs incomplete for async
    return int(result.rowcount)  # type: ignore[attr-defined]


async def purge_stale_storage(
    session: AsyncSession, older_than: timedelta, now: datetime | None = None
) -> int:
    """
    Delete slots not updated within `older_than`.

    Returns the number of deleted records.
    """
    cutoff = (now or datetime.now(UTC)) - older_than
    result = await session.execute(delete(StorageSlotDB).where(StorageSlotDB.updated_at < cutoff))
    return int(result.rowcount)  # type: ignore[attr-defined]
