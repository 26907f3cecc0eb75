"""Custom exercise CRUD endpoints."""

import logging
import uuid

from fastapi import APIRouter, Depends
from sqlalchemy import select
from sqlalchemy.ext.asyncio import AsyncSession

from liftlog.api.deps import get_user_id
from liftlog.core.exceptions import DuplicateExerciseError, ExerciseNotFoundError
from liftlog.db.session import get_db
from liftlog.models.exercise import CustomExercise
from liftlog.schemas.exercise import ExerciseCreate, ExerciseRead, ExerciseUpdate
from liftlog.services.workout_pipeline import rename_exercise_history

logger = logging.getLogger(__name__)
router = APIRouter()


async def _get_owned(db: AsyncSession, user_id: uuid.UUID, exercise_id: uuid.UUID) -> CustomExercise:
    result = await db.execute(
        select(CustomExercise).where(CustomExercise.id == exercise_id, CustomExercise.user_id == user_id)
    )
    exercise = result.scalar_one_or_none()
    if not exercise:
        raise ExerciseNotFoundError(exercise_id)
    return exercise


async def _ensure_name_free(db: AsyncSession, user_id: uuid.UUID, name: str) -> None:
    result = await db.execute(
        select(CustomExercise.id).where(CustomExercise.user_id == user_id, CustomExercise.name == name)
    )
    if result.first() is not None:
        raise DuplicateExerciseError(name)


@router.get("", response_model=list[ExerciseRead])
async def list_exercises(
    db: AsyncSession = Depends(get_db),
    user_id: uuid.UUID = Depends(get_user_id),
):
    """List the user's custom exercises by name."""
    result = await db.execute(
        select(CustomExercise).where(CustomExercise.user_id == user_id).order_by(CustomExercise.name)
    )
    return list(result.scalars().all())


@router.post("", response_model=ExerciseRead, status_code=201)
async def create_exercise(
    payload: ExerciseCreate,
    db: AsyncSession = Depends(get_db),
    user_id: uuid.UUID = Depends(get_user_id),
):
    """Create a custom exercise. Names are unique per user."""
    await _ensure_name_free(db, user_id, payload.name)
    exercise = CustomExercise(user_id=user_id, **payload.model_dump())
    db.add(exercise)
    await db.flush()
    await db.refresh(exercise)
    return exercise


@router.get("/{exercise_id}", response_model=ExerciseRead)
async def get_exercise(
    exercise_id: uuid.UUID,
    db: AsyncSession = Depends(get_db),
    user_id: uuid.UUID = Depends(get_user_id),
):
    """Get a single custom exercise."""
    return await _get_owned(db, user_id, exercise_id)


@router.put("/{exercise_id}", response_model=ExerciseRead)
async def update_exercise(
    exercise_id: uuid.UUID,
    payload: ExerciseUpdate,
    rename_history: bool = False,
    db: AsyncSession = Depends(get_db),
    user_id: uuid.UUID = Depends(get_user_id),
):
    """
    Update a custom exercise.

    A rename applies going forward only: past workouts and their PRs stay under
    the old name. Pass rename_history=true to also rewrite past workouts to the
    new name and rebuild the records of both names.
    """
    exercise = await _get_owned(db, user_id, exercise_id)
    old_name = exercise.name
    if payload.name != old_name:
        await _ensure_name_free(db, user_id, payload.name)
    for k, v in payload.model_dump().items():
        setattr(exercise, k, v)
    await db.flush()
    if rename_history and payload.name != old_name:
        await rename_exercise_history(db, user_id, old_name, payload.name)
    elif payload.name != old_name:
        logger.info("Exercise '%s' renamed to '%s'; history stays under the old name", old_name, payload.name)
    await db.refresh(exercise)
    return exercise


@router.delete("/{exercise_id}", status_code=204)
async def delete_exercise(
    exercise_id: uuid.UUID,
    db: AsyncSession = Depends(get_db),
    user_id: uuid.UUID = Depends(get_user_id),
):
    """Delete a custom exercise. Logged workouts keep their sets."""
    exercise = await _get_owned(db, user_id, exercise_id)
    await db.delete(exercise)
    return None
