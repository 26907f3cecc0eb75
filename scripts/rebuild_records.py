"""Regenerate is_pr flags and personal_records rows from raw sets for every user.

Usage: python scripts/rebuild_records.py [--dry-run] [--user USER_ID]
"""
import argparse
import asyncio
import logging
import os
import sys
import uuid

# Add parent directory to path so we can import liftlog modules
sys.path.append(os.path.join(os.path.dirname(__file__), ".."))

from sqlalchemy import select  # noqa: E402

from liftlog.core.config import get_settings  # noqa: E402
from liftlog.core.logging import configure_logging  # noqa: E402
from liftlog.db.session import async_session_maker, engine  # noqa: E402
from liftlog.models.workout import Workout  # noqa: E402
from liftlog.services.record_store import rebuild_records, verify_records  # noqa: E402

logger = logging.getLogger("liftlog.scripts.rebuild_records")


async def main(dry_run: bool, only_user: uuid.UUID | None) -> None:
    async with async_session_maker() as session:
        if only_user is not None:
            user_ids = [only_user]
        else:
            user_ids = list((await session.execute(select(Workout.user_id).distinct())).scalars().all())
        logger.info("Checking %d user(s)%s", len(user_ids), " (dry run)" if dry_run else "")

        for user_id in user_ids:
            if dry_run:
                report = await verify_records(session, user_id)
                logger.info("%s: %d workouts, %d difference(s)", user_id, report.workouts_scanned, len(report.drift))
                continue
            rebuilt = await rebuild_records(session, user_id)
            logger.info(
                "%s: %d flags changed, %d records inserted, %d deleted",
                user_id,
                rebuilt.flags_changed,
                rebuilt.records_inserted,
                rebuilt.records_deleted,
            )
        if not dry_run:
            await session.commit()
    await engine.dispose()


if __name__ == "__main__":
    parser = argparse.ArgumentParser(description=__doc__.splitlines()[0])
    parser.add_argument("--dry-run", action="store_true", help="report differences without writing")
    parser.add_argument("--user", type=uuid.UUID, help="only this user id")
    args = parser.parse_args()
    configure_logging(get_settings().log_level)
    asyncio.run(main(args.dry_run, args.user))
