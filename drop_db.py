import asyncio
import os
import sys

from sqlalchemy import text

# Allow running from the repository root without installing
sys.path.append(os.getcwd())

import liftlog.models  # noqa: F401, E402 - registers every table on Base.metadata
from liftlog.db.base import Base  # noqa: E402
from liftlog.db.session import engine  # noqa: E402


async def drop_tables():
    print("Dropping all tables...")
    async with engine.begin() as conn:
        await conn.execute(text("DROP TABLE IF EXISTS alembic_version"))
        await conn.run_sync(Base.metadata.drop_all)
    print("Tables dropped.")
    await engine.dispose()


if __name__ == "__main__":
    asyncio.run(drop_tables())
