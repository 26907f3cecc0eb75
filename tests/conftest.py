"""
Point the app at a throwaway SQLite database before liftlog is imported:
the engine is created from settings at import time.
"""
import os
import tempfile
import uuid
from datetime import datetime, timedelta, timezone

_tmp_dir = tempfile.mkdtemp(prefix="liftlog-tests-")
os.environ["DATABASE_DSN"] = f"sqlite+aiosqlite:///{os.path.join(_tmp_dir, 'test.db')}"
os.environ["AUTO_CREATE_TABLES"] = "true"
os.environ.setdefault("LOG_LEVEL", "WARNING")

import pytest  # noqa: E402
from fastapi.testclient import TestClient  # noqa: E402

from liftlog.client import LiftlogClient  # noqa: E402
from liftlog.main import app  # noqa: E402

BASE_TIME = datetime(2024, 3, 1, 9, 0, tzinfo=timezone.utc)


def day(n: int) -> datetime:
    return BASE_TIME + timedelta(days=n)


def workout_json(start: datetime, *exercises: tuple[str, list]) -> dict:
    """Request body; each set is (weight, reps) or a dict of set fields."""
    return {
        "start_time": start.isoformat(),
        "exercises": [
            {
                "name": name,
                "sets": [s if isinstance(s, dict) else {"weight": s[0], "reps": s[1]} for s in sets],
            }
            for name, sets in exercises
        ],
    }


def pr_flags(body: dict) -> list[list[bool]]:
    return [[s["isPR"] for s in ex["sets"]] for ex in body["exercises"]]


@pytest.fixture(scope="session")
def client():
    with TestClient(app) as c:
        yield c


@pytest.fixture
def headers():
    """A fresh user per test keeps tests independent on the shared database."""
    return {"X-User-Id": str(uuid.uuid4())}


@pytest.fixture
def api(client, headers):
    return LiftlogClient(http=client, user_id=headers["X-User-Id"])
