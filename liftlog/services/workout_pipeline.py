"""Workout write pipeline: evaluate PRs, persist the workout, reconcile the Record Store."""

from __future__ import annotations

import logging
import uuid
from dataclasses import dataclass

from sqlalchemy import delete, select, update
from sqlalchemy.exc import SQLAlchemyError
from sqlalchemy.ext.asyncio import AsyncSession

from liftlog.core.exceptions import WorkoutConflictError, WorkoutNotFoundError
from liftlog.db.base import as_utc, utcnow
from liftlog.models.exercise import CustomExercise
from liftlog.models.record import PersonalRecord
from liftlog.models.workout import Workout, WorkoutExercise, WorkoutSet
from liftlog.schemas.record import RebuildReport
from liftlog.schemas.workout import (
    SetRead,
    WorkoutCreate,
    WorkoutExerciseRead,
    WorkoutRead,
    WorkoutUpdate,
)
from liftlog.services.history import load_history, load_workout
from liftlog.services.pr_detection import WorkoutEvaluation, evaluate_workout
from liftlog.services.record_store import delete_workout_records, rebuild_records, replace_workout_records

logger = logging.getLogger(__name__)


@dataclass(slots=True)
class SubmitResult:
    workout: Workout
    evaluation: WorkoutEvaluation
    # False when the PersonalRecord rows could not be written; flags are still valid
    records_synced: bool = True
    reconciled: RebuildReport | None = None


def workout_to_read(workout: Workout) -> WorkoutRead:
    """Build the response model without touching lazy relationships."""
    return WorkoutRead(
        id=workout.id,
        user_id=workout.user_id,
        start_time=workout.start_time,
        end_time=workout.end_time,
        target_categories=workout.target_categories,
        created_at=workout.created_at,
        updated_at=workout.updated_at,
        exercises=[
            WorkoutExerciseRead(
                name=ex.exercise_name,
                completed=ex.completed,
                notes=ex.notes,
                sets=[SetRead.model_validate(s) for s in sorted(ex.sets, key=lambda s: s.position)],
            )
            for ex in sorted(workout.exercises, key=lambda e: e.position)
        ],
    )


def _build_exercises(payload: WorkoutCreate, evaluation: WorkoutEvaluation) -> list[WorkoutExercise]:
    return [
        WorkoutExercise(
            exercise_name=ex.name,
            position=i,
            completed=ex.completed,
            notes=ex.notes,
            sets=[
                WorkoutSet(
                    position=j,
                    weight=s.weight,
                    reps=s.reps,
                    note=s.note,
                    completed=s.completed,
                    missed=bool(s.missed),
                    is_pr=flag,
                )
                for j, (s, flag) in enumerate(zip(ex.sets, flags))
            ],
        )
        for i, (ex, flags) in enumerate(zip(payload.exercises, evaluation.flags))
    ]


async def submit_workout(
    db: AsyncSession,
    user_id: uuid.UUID,
    payload: WorkoutCreate | WorkoutUpdate,
    workout_id: uuid.UUID | None = None,
) -> SubmitResult:
    """
    Create a workout, or fully replace an existing one, with every set's is_pr computed.

    Each set is judged against eligible sets of the same exercise name from the
    user's strictly earlier workouts plus the sets before it in this workout.
    The workout's PersonalRecord rows are then replaced, and workouts from the
    earlier of its old and new start_time onwards that share an exercise name
    are re-evaluated so a back-dated or edited workout never leaves stale flags
    behind it.
    """
    existing: Workout | None = None
    affected_names = {ex.name for ex in payload.exercises}
    # workouts before this point cannot change
    since = payload.start_time
    if workout_id is not None:
        existing = await load_workout(db, user_id, workout_id)
        if existing is None:
            raise WorkoutNotFoundError(workout_id)
        expected_version = getattr(payload, "updated_at", None)
        if expected_version is not None and expected_version != as_utc(existing.updated_at):
            raise WorkoutConflictError(current=workout_to_read(existing))
        affected_names |= {ex.exercise_name for ex in existing.exercises}
        since = min(since, as_utc(existing.start_time))

    history = await load_history(
        db,
        user_id,
        {ex.name for ex in payload.exercises},
        before=payload.start_time,
        exclude_workout_id=workout_id,
    )
    evaluation = evaluate_workout(payload.exercises, history)

    target_categories = [g.value for g in payload.target_categories] if payload.target_categories else None
    if existing is None:
        workout = Workout(
            user_id=user_id,
            start_time=payload.start_time,
            end_time=payload.end_time,
            target_categories=target_categories,
            exercises=_build_exercises(payload, evaluation),
        )
        db.add(workout)
    else:
        workout = existing
        workout.start_time = payload.start_time
        workout.end_time = payload.end_time
        workout.target_categories = target_categories
        workout.updated_at = utcnow()
        workout.exercises = _build_exercises(payload, evaluation)
    await db.flush()

    logger.info(
        "%s workout %s for user %s: %d sets, %d PRs",
        "Created" if existing is None else "Replaced",
        workout.id,
        user_id,
        sum(len(row) for row in evaluation.flags),
        evaluation.pr_count,
    )

    result = SubmitResult(workout=workout, evaluation=evaluation)
    try:
        async with db.begin_nested():
            await replace_workout_records(db, user_id, workout.id, payload.start_time, evaluation.records)
            result.reconciled = await rebuild_records(db, user_id, affected_names, since=since)
    except SQLAlchemyError:
        logger.exception("Could not write personal records for workout %s", workout.id)
        result.records_synced = False
        result.workout = await load_workout(db, user_id, workout.id)
    return result


async def delete_workout(db: AsyncSession, user_id: uuid.UUID, workout_id: uuid.UUID) -> bool:
    """Delete a workout with its sets and records, then re-evaluate the workouts after it."""
    workout = await load_workout(db, user_id, workout_id)
    if workout is None:
        return False
    names = {ex.exercise_name for ex in workout.exercises}
    since = as_utc(workout.start_time)
    await delete_workout_records(db, workout.id)
    await db.delete(workout)
    await db.flush()
    report = await rebuild_records(db, user_id, names, since=since)
    logger.info("Deleted workout %s for user %s (%d later flags changed)", workout_id, user_id, report.flags_changed)
    return True


async def rename_exercise_history(
    db: AsyncSession,
    user_id: uuid.UUID,
    old_name: str,
    new_name: str,
) -> RebuildReport:
    """
    Rewrite past workouts from old_name to new_name and rebuild both names' records.

    Only runs when explicitly requested: by default a rename leaves history keyed
    by the old name, and a merge into an existing name changes its PRs.
    """
    users_workouts = select(Workout.id).where(Workout.user_id == user_id)
    await db.execute(
        update(WorkoutExercise)
        .where(WorkoutExercise.exercise_name == old_name, WorkoutExercise.workout_id.in_(users_workouts))
        .values(exercise_name=new_name)
        .execution_options(synchronize_session=False)
    )
    report = await rebuild_records(db, user_id, {old_name, new_name})
    logger.info("Renamed '%s' to '%s' in history for user %s", old_name, new_name, user_id)
    return report


async def clear_user_data(db: AsyncSession, user_id: uuid.UUID) -> None:
    """Delete every workout, set, record and custom exercise of the user."""
    users_workouts = select(Workout.id).where(Workout.user_id == user_id)
    users_exercises = select(WorkoutExercise.id).where(WorkoutExercise.workout_id.in_(users_workouts))
    await db.execute(delete(PersonalRecord).where(PersonalRecord.user_id == user_id))
    await db.execute(delete(WorkoutSet).where(WorkoutSet.workout_exercise_id.in_(users_exercises)))
    await db.execute(delete(WorkoutExercise).where(WorkoutExercise.workout_id.in_(users_workouts)))
    await db.execute(delete(Workout).where(Workout.user_id == user_id))
    await db.execute(delete(CustomExercise).where(CustomExercise.user_id == user_id))
    logger.info("Cleared all data for user %s", user_id)
