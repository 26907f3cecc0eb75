"""Personal record endpoints: history, current bests, and Record Store maintenance."""

import uuid

from fastapi import APIRouter, Depends
from sqlalchemy.ext.asyncio import AsyncSession

from liftlog.api.deps import get_user_id
from liftlog.db.session import get_db
from liftlog.schemas.record import PersonalRecordRead, RebuildReport, VerifyReport
from liftlog.services.pr_detection import current_bests
from liftlog.services.record_store import list_records, rebuild_records, verify_records

router = APIRouter()


@router.get("", response_model=list[PersonalRecordRead])
async def list_all_records(
    exercise_name: str | None = None,
    db: AsyncSession = Depends(get_db),
    user_id: uuid.UUID = Depends(get_user_id),
):
    """Every PR row (one per PR set, superseded ones included), newest first."""
    return await list_records(db, user_id, exercise_name)


@router.get("/current", response_model=list[PersonalRecordRead])
async def list_current_records(
    exercise_name: str | None = None,
    db: AsyncSession = Depends(get_db),
    user_id: uuid.UUID = Depends(get_user_id),
):
    """The standing record per (exercise, weight): most reps, latest on ties."""
    return current_bests(await list_records(db, user_id, exercise_name))


@router.get("/verify", response_model=VerifyReport)
async def verify(
    db: AsyncSession = Depends(get_db),
    user_id: uuid.UUID = Depends(get_user_id),
):
    """Check stored PR flags and rows against a replay of the raw sets."""
    return await verify_records(db, user_id)


@router.post("/rebuild", response_model=RebuildReport)
async def rebuild(
    db: AsyncSession = Depends(get_db),
    user_id: uuid.UUID = Depends(get_user_id),
):
    """Regenerate every PR flag and row from the raw sets."""
    return await rebuild_records(db, user_id)


@router.get("/{exercise_name:path}", response_model=list[PersonalRecordRead])
async def list_exercise_records(
    exercise_name: str,
    db: AsyncSession = Depends(get_db),
    user_id: uuid.UUID = Depends(get_user_id),
):
    """
    PR rows for one exercise name, newest first. Unknown names return an empty list.

    "current" and "verify" resolve to the fixed routes above; look those names up
    with `GET /records?exercise_name=` instead.
    """
    return await list_records(db, user_id, exercise_name)
