"""
Scheduled job to purge abandoned client storage.

Every visitor gets a storage slot for their cart; visitors who never come
back leave slots behind. Deletes slots not updated within a retention
window. Can be run as a standalone script or called from a scheduler.

Usage:
    python -m fontstore.jobs.purge_storage --days 30
"""

import argparse
import asyncio
import logging
from datetime import timedelta

from sqlalchemy.exc import SQLAlchemyError

from fontstore.db.database import async_session_factory, init_db
from fontstore.db.operations import purge_stale_storage

logger = logging.getLogger(__name__)

DEFAULT_RETENTION_DAYS = 30


async def run_purge(days: int = DEFAULT_RETENTION_DAYS) -> int:
    """
    Delete storage slots idle for more than `days` days.

    Returns:
        Number of slots deleted (0 if the database is unavailable)
    """
    if days < 1:
        raise ValueError(f"Retention must be at least 1 day, got {days}")

    logger.info("Purging storage slots idle for more than %d days...", days)

    try:
        async with async_session_factory() as session:
            deleted = await purge_stale_storage(session, timedelta(days=days))
            await session.commit()
    except SQLAlchemyError as e:
        logger.error("Storage purge failed: %s", e)
        return 0

    logger.info("Storage purge complete. Deleted %d slots", deleted)
    return deleted


async def _main(days: int) -> None:
    await init_db()
    await run_purge(days)


def main() -> None:
    """CLI entry point for running the purge."""
    parser = argparse.ArgumentParser(description="Purge stale client storage slots")
    parser.add_argument(
        "--days",
        type=int,
        default=DEFAULT_RETENTION_DAYS,
        help=f"Retention window in days (default: {DEFAULT_RETENTION_DAYS})",
    )
    args = parser.parse_args()

    logging.basicConfig(
        level=logging.INFO,
        format="%(asctime)s - %(name)s - %(levelname)s - %(message)s",
    )
    asyncio.run(_main(args.days))


if __name__ == "__main__":
    main()
