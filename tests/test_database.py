"""Tests for engine setup."""

from pathlib import Path

import pytest

from fontstore.db.database import SQLITE_BUSY_TIMEOUT_MS, create_engine_for, is_sqlite


class TestEngineSetup:
    @pytest.mark.parametrize(
        ("url", "expected"),
        [
            ("sqlite+aiosqlite:///:memory:", True),
            ("sqlite+aiosqlite:///./fontstore.db", True),
            ("postgresql+asyncpg://user:pw@db/fontstore", False),
        ],
    )
    def test_is_sqlite(self, url: str, expected: bool) -> None:
        assert is_sqlite(url) is expected

    async def test_sqlite_connections_wait_on_locks(self) -> None:
        engine = create_engine_for("sqlite+aiosqlite:///:memory:")
        try:
            async with engine.connect() as conn:
                result = await conn.exec_driver_sql("PRAGMA busy_timeout")
                assert result.scalar() == SQLITE_BUSY_TIMEOUT_MS
        finally:
            await engine.dispose()

    async def test_sqlite_file_uses_wal(self, tmp_path: Path) -> None:
        engine = create_engine_for(f"sqlite+aiosqlite:///{tmp_path / 'store.db'}")
        try:
            async with engine.connect() as conn:
                result = await conn.exec_driver_sql("PRAGMA journal_mode")
                assert result.scalar() == "wal"
        finally:
            await engine.dispose()
