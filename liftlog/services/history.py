"""Read side of PR detection: a user's earlier sets and workouts, keyed by exercise name."""

from __future__ import annotations

import uuid
from collections import defaultdict
from collections.abc import Collection
from datetime import datetime

from sqlalchemy import select
from sqlalchemy.ext.asyncio import AsyncSession
from sqlalchemy.orm import selectinload

from liftlog.db.base import as_utc
from liftlog.models.workout import Workout, WorkoutExercise, WorkoutSet
from liftlog.services.pr_detection import ExerciseSets, HistoricalSet, ReplayWorkout


def _with_sets():
    return selectinload(Workout.exercises).selectinload(WorkoutExercise.sets)


async def load_history(
    db: AsyncSession,
    user_id: uuid.UUID,
    exercise_names: Collection[str] | None,
    before: datetime,
    exclude_workout_id: uuid.UUID | None = None,
) -> dict[str, list[HistoricalSet]]:
    """
    Sets for these exercise names from the user's workouts that started strictly
    before `before` (every name when exercise_names is None). The workout being
    edited is excluded so it is never compared with its own stored copy. Names
    with no sets are simply absent.
    """
    if exercise_names is not None and not exercise_names:
        return {}
    stmt = (
        select(
            WorkoutExercise.exercise_name,
            WorkoutSet.weight,
            WorkoutSet.reps,
            WorkoutSet.completed,
            WorkoutSet.missed,
        )
        .join(WorkoutSet, WorkoutSet.workout_exercise_id == WorkoutExercise.id)
        .join(Workout, Workout.id == WorkoutExercise.workout_id)
        .where(Workout.user_id == user_id, Workout.start_time < before)
    )
    if exercise_names is not None:
        stmt = stmt.where(WorkoutExercise.exercise_name.in_(list(exercise_names)))
    if exclude_workout_id is not None:
        stmt = stmt.where(Workout.id != exclude_workout_id)
    result = await db.execute(stmt)

    history: dict[str, list[HistoricalSet]] = defaultdict(list)
    for name, weight, reps, completed, missed in result.all():
        history[name].append(HistoricalSet(weight=float(weight), reps=int(reps), completed=completed, missed=missed))
    return dict(history)


async def load_workout(db: AsyncSession, user_id: uuid.UUID, workout_id: uuid.UUID) -> Workout | None:
    """One workout with its exercises and sets, scoped to the owner."""
    result = await db.execute(
        select(Workout)
        .where(Workout.id == workout_id, Workout.user_id == user_id)
        .options(_with_sets())
        .execution_options(populate_existing=True)
    )
    return result.scalar_one_or_none()


async def list_workouts(
    db: AsyncSession,
    user_id: uuid.UUID,
    skip: int = 0,
    limit: int = 50,
    from_date: datetime | None = None,
    to_date: datetime | None = None,
) -> list[Workout]:
    """Workouts newest first, optionally filtered by start_time range."""
    stmt = select(Workout).where(Workout.user_id == user_id).options(_with_sets())
    if from_date:
        stmt = stmt.where(Workout.start_time >= from_date)
    if to_date:
        stmt = stmt.where(Workout.start_time <= to_date)
    stmt = stmt.order_by(Workout.start_time.desc(), Workout.created_at.desc()).offset(skip).limit(limit)
    result = await db.execute(stmt)
    return list(result.scalars().all())


async def load_user_workouts(
    db: AsyncSession,
    user_id: uuid.UUID,
    exercise_names: Collection[str] | None = None,
    since: datetime | None = None,
) -> list[Workout]:
    """Every workout of the user (or only those containing one of the names), oldest first.

    `since` keeps only workouts starting at or after it."""
    stmt = select(Workout).where(Workout.user_id == user_id)
    if since is not None:
        stmt = stmt.where(Workout.start_time >= since)
    if exercise_names is not None:
        containing = select(WorkoutExercise.workout_id).where(
            WorkoutExercise.exercise_name.in_(list(exercise_names))
        )
        stmt = stmt.where(Workout.id.in_(containing))
    stmt = stmt.options(_with_sets()).order_by(Workout.start_time).execution_options(populate_existing=True)
    result = await db.execute(stmt)
    return list(result.scalars().all())


def replay_view(
    workout: Workout,
    exercise_names: Collection[str] | None = None,
) -> tuple[ReplayWorkout, list[WorkoutExercise]]:
    """Adapt a stored workout for replay_history.

    Returns the replay input and the stored exercises it was built from, in the
    same order, so evaluation flags can be written back."""
    exercises = [
        ex for ex in workout.exercises if exercise_names is None or ex.exercise_name in exercise_names
    ]
    view = ReplayWorkout(
        id=workout.id,
        start_time=as_utc(workout.start_time),
        exercises=[ExerciseSets(name=ex.exercise_name, sets=list(ex.sets)) for ex in exercises],
    )
    return view, exercises


async def load_previous_sets(
    db: AsyncSession,
    user_id: uuid.UUID,
    exercise_name: str,
    before: datetime | None = None,
    exclude_workout_id: uuid.UUID | None = None,
) -> tuple[Workout, list[WorkoutSet]] | None:
    """
    Sets for this exercise from the most recent workout that included it.
    Pass before / exclude_workout_id (e.g. the current workout) to get the
    *previous* session instead of the current one.
    """
    stmt = (
        select(Workout)
        .join(WorkoutExercise, WorkoutExercise.workout_id == Workout.id)
        .where(Workout.user_id == user_id, WorkoutExercise.exercise_name == exercise_name)
        .options(_with_sets())
        .order_by(Workout.start_time.desc())
        .limit(1)
    )
    if before is not None:
        stmt = stmt.where(Workout.start_time < before)
    if exclude_workout_id is not None:
        stmt = stmt.where(Workout.id != exclude_workout_id)
    result = await db.execute(stmt)
    workout = result.scalars().first()
    if workout is None:
        return None
    sets = [s for ex in workout.exercises if ex.exercise_name == exercise_name for s in ex.sets]
    return workout, sets
