from fontstore.db.database import get_session, init_db
from fontstore.db.operations import (
    delete_client_storage,
    flush_client_storage,
    get_storage_slot,
    get_storage_slots,
    load_client_storage,
    purge_stale_storage,
    upsert_storage_slot,
)

__all__ = [
    "delete_client_storage",
    "flush_client_storage",
    "get_session",
    "get_storage_slot",
    "get_storage_slots",
    "init_db",
    "load_client_storage",
    "purge_stale_storage",
    "upsert_storage_slot",
]
