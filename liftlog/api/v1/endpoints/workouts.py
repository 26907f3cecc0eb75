"""Workout endpoints: full-replace writes with server-side PR flags."""

from __future__ import annotations

import uuid
from datetime import datetime

from fastapi import APIRouter, Depends, Response
from sqlalchemy.ext.asyncio import AsyncSession

from liftlog.api.deps import get_user_id
from liftlog.core.constants import RECORDS_SYNCED_HEADER
from liftlog.core.exceptions import WorkoutNotFoundError
from liftlog.db.session import get_db
from liftlog.schemas.workout import PreviousSetsRead, SetRead, WorkoutCreate, WorkoutRead, WorkoutUpdate
from liftlog.services import history
from liftlog.services.workout_pipeline import delete_workout, submit_workout, workout_to_read

router = APIRouter()


@router.get("", response_model=list[WorkoutRead])
async def list_workouts(
    db: AsyncSession = Depends(get_db),
    user_id: uuid.UUID = Depends(get_user_id),
    skip: int = 0,
    limit: int = 50,
    from_date: datetime | None = None,
    to_date: datetime | None = None,
):
    """List workouts with exercises and sets, newest first, optionally filtered by date range."""
    workouts = await history.list_workouts(db, user_id, skip=skip, limit=limit, from_date=from_date, to_date=to_date)
    return [workout_to_read(w) for w in workouts]


@router.post("", response_model=WorkoutRead, status_code=201)
async def create_workout(
    payload: WorkoutCreate,
    response: Response,
    db: AsyncSession = Depends(get_db),
    user_id: uuid.UUID = Depends(get_user_id),
):
    """Log a workout. Every set comes back with isPR computed from earlier workouts."""
    result = await submit_workout(db, user_id, payload)
    response.headers[RECORDS_SYNCED_HEADER] = "true" if result.records_synced else "false"
    return workout_to_read(result.workout)


@router.get("/previous-sets/{exercise_name:path}", response_model=PreviousSetsRead)
async def get_previous_sets(
    exercise_name: str,
    before: datetime | None = None,
    exclude_workout_id: uuid.UUID | None = None,
    db: AsyncSession = Depends(get_db),
    user_id: uuid.UUID = Depends(get_user_id),
):
    """
    Returns the sets for this exercise from the most recent workout that included it.
    Use when adding a set to prefill "last time you did X". Pass exclude_workout_id
    (e.g. the workout being edited) to get the *previous* session instead of the current one.
    """
    found = await history.load_previous_sets(
        db, user_id, exercise_name, before=before, exclude_workout_id=exclude_workout_id
    )
    if found is None:
        return PreviousSetsRead(exercise_name=exercise_name, message="No previous session for this exercise.")
    workout, sets = found
    return PreviousSetsRead(
        exercise_name=exercise_name,
        workout_id=workout.id,
        start_time=workout.start_time,
        sets=[SetRead.model_validate(s) for s in sets],
    )


@router.get("/{workout_id}", response_model=WorkoutRead)
async def get_workout(
    workout_id: uuid.UUID,
    db: AsyncSession = Depends(get_db),
    user_id: uuid.UUID = Depends(get_user_id),
):
    """Get a workout with all exercises and sets."""
    workout = await history.load_workout(db, user_id, workout_id)
    if not workout:
        raise WorkoutNotFoundError(workout_id)
    return workout_to_read(workout)


@router.put("/{workout_id}", response_model=WorkoutRead)
async def update_workout(
    workout_id: uuid.UUID,
    payload: WorkoutUpdate,
    response: Response,
    db: AsyncSession = Depends(get_db),
    user_id: uuid.UUID = Depends(get_user_id),
):
    """Replace a workout's times and exercises. Send updated_at to detect concurrent edits (409)."""
    result = await submit_workout(db, user_id, payload, workout_id=workout_id)
    response.headers[RECORDS_SYNCED_HEADER] = "true" if result.records_synced else "false"
    return workout_to_read(result.workout)


@router.delete("/{workout_id}", status_code=204)
async def remove_workout(
    workout_id: uuid.UUID,
    db: AsyncSession = Depends(get_db),
    user_id: uuid.UUID = Depends(get_user_id),
):
    """Delete a workout, its sets and its personal records."""
    if not await delete_workout(db, user_id, workout_id):
        raise WorkoutNotFoundError(workout_id)
    return None
