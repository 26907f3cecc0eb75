"""Record Store: PersonalRecord rows as a materialized view of the raw sets.

Rows are written per workout when it is submitted. Because every row is
derivable from the sets, the store can be checked (verify_records) and
regenerated (rebuild_records) at any time from raw data alone.
"""

from __future__ import annotations

import logging
import uuid
from collections.abc import Collection, Iterable
from dataclasses import dataclass
from datetime import datetime

from sqlalchemy import delete, select
from sqlalchemy.ext.asyncio import AsyncSession

from liftlog.db.base import as_utc
from liftlog.models.record import PersonalRecord
from liftlog.models.workout import Workout, WorkoutExercise
from liftlog.schemas.record import RebuildReport, RecordDrift, VerifyReport
from liftlog.services.history import load_history, load_user_workouts, replay_view
from liftlog.services.pr_detection import RecordCandidate, replay_history, weight_key

logger = logging.getLogger(__name__)

# (workout_id, exercise_name, set_index)
RecordKey = tuple[uuid.UUID, str, int]


async def replace_workout_records(
    db: AsyncSession,
    user_id: uuid.UUID,
    workout_id: uuid.UUID,
    achieved_at: datetime,
    candidates: Iterable[RecordCandidate],
) -> int:
    """Make the workout's rows match its PR sets exactly (delete, then insert)."""
    await delete_workout_records(db, workout_id)
    rows = [
        PersonalRecord(
            user_id=user_id,
            exercise_name=c.exercise_name,
            weight=c.weight,
            reps=c.reps,
            workout_id=workout_id,
            set_index=c.set_index,
            achieved_at=achieved_at,
        )
        for c in candidates
    ]
    db.add_all(rows)
    await db.flush()
    return len(rows)


async def delete_workout_records(db: AsyncSession, workout_id: uuid.UUID) -> None:
    await db.execute(delete(PersonalRecord).where(PersonalRecord.workout_id == workout_id))


async def list_records(
    db: AsyncSession,
    user_id: uuid.UUID,
    exercise_name: str | None = None,
) -> list[PersonalRecord]:
    """All record rows for the user (optionally one exercise), newest first."""
    stmt = select(PersonalRecord).where(PersonalRecord.user_id == user_id)
    if exercise_name is not None:
        stmt = stmt.where(PersonalRecord.exercise_name == exercise_name)
    stmt = stmt.order_by(PersonalRecord.achieved_at.desc(), PersonalRecord.set_index)
    result = await db.execute(stmt)
    return list(result.scalars().all())


@dataclass(slots=True)
class _ExpectedRecord:
    weight: float
    reps: int
    achieved_at: datetime


@dataclass(slots=True)
class _Replay:
    workouts: list[Workout]
    # (workout_id, stored exercise, set position, expected flag) for every replayed set
    flags: list[tuple[uuid.UUID, WorkoutExercise, int, bool]]
    expected: dict[RecordKey, _ExpectedRecord]


async def _replay(
    db: AsyncSession,
    user_id: uuid.UUID,
    exercise_names: Collection[str] | None,
    since: datetime | None = None,
) -> _Replay:
    workouts = await load_user_workouts(db, user_id, exercise_names, since=since)
    seed = await load_history(db, user_id, exercise_names, before=since) if since is not None else None
    views = []
    stored_exercises: dict[uuid.UUID, list[WorkoutExercise]] = {}
    for workout in workouts:
        view, exercises = replay_view(workout, exercise_names)
        views.append(view)
        stored_exercises[workout.id] = exercises

    evaluations = replay_history(views, seed)
    flags: list[tuple[uuid.UUID, WorkoutExercise, int, bool]] = []
    expected: dict[RecordKey, _ExpectedRecord] = {}
    for workout in workouts:
        evaluation = evaluations[workout.id]
        for exercise, row in zip(stored_exercises[workout.id], evaluation.flags):
            for position, flag in enumerate(row):
                flags.append((workout.id, exercise, position, flag))
        for c in evaluation.records:
            expected[(workout.id, c.exercise_name, c.set_index)] = _ExpectedRecord(
                weight=c.weight, reps=c.reps, achieved_at=as_utc(workout.start_time)
            )
    return _Replay(workouts=workouts, flags=flags, expected=expected)


def _matches(row: PersonalRecord, expected: _ExpectedRecord) -> bool:
    return (
        weight_key(row.weight) == expected.weight
        and row.reps == expected.reps
        and as_utc(row.achieved_at) == expected.achieved_at
    )


async def _stored_records(
    db: AsyncSession,
    user_id: uuid.UUID,
    exercise_names: Collection[str] | None,
    since: datetime | None = None,
) -> dict[RecordKey, PersonalRecord]:
    stmt = select(PersonalRecord).where(PersonalRecord.user_id == user_id)
    if since is not None:
        replayed = select(Workout.id).where(Workout.user_id == user_id, Workout.start_time >= since)
        stmt = stmt.where(PersonalRecord.workout_id.in_(replayed))
    if exercise_names is not None:
        stmt = stmt.where(PersonalRecord.exercise_name.in_(list(exercise_names)))
    result = await db.execute(stmt)
    return {(r.workout_id, r.exercise_name, r.set_index): r for r in result.scalars().all()}


async def verify_records(
    db: AsyncSession,
    user_id: uuid.UUID,
    exercise_names: Collection[str] | None = None,
) -> VerifyReport:
    """Compare stored flags and record rows with a replay of the raw sets. Writes nothing."""
    replay = await _replay(db, user_id, exercise_names)
    drift: list[RecordDrift] = []

    set_counters: dict[tuple[uuid.UUID, str], int] = {}
    for workout_id, exercise, position, flag in replay.flags:
        key = (workout_id, exercise.exercise_name)
        set_index = set_counters.get(key, 0)
        set_counters[key] = set_index + 1
        stored = exercise.sets[position].is_pr
        if stored != flag:
            drift.append(
                RecordDrift(
                    kind="flag",
                    workout_id=workout_id,
                    exercise_name=exercise.exercise_name,
                    set_index=set_index,
                    expected=flag,
                    stored=stored,
                )
            )

    stored_rows = await _stored_records(db, user_id, exercise_names)
    for key, expected in replay.expected.items():
        row = stored_rows.get(key)
        if row is None or not _matches(row, expected):
            drift.append(
                RecordDrift(
                    kind="missing_record",
                    workout_id=key[0],
                    exercise_name=key[1],
                    set_index=key[2],
                    expected=expected.reps,
                    stored=row.reps if row is not None else None,
                )
            )
    for key, row in stored_rows.items():
        if key not in replay.expected:
            drift.append(
                RecordDrift(
                    kind="stale_record",
                    workout_id=key[0],
                    exercise_name=key[1],
                    set_index=key[2],
                    stored=row.reps,
                )
            )

    return VerifyReport(consistent=not drift, workouts_scanned=len(replay.workouts), drift=drift)


async def rebuild_records(
    db: AsyncSession,
    user_id: uuid.UUID,
    exercise_names: Collection[str] | None = None,
    since: datetime | None = None,
) -> RebuildReport:
    """
    Regenerate PR state from raw sets: rewrite is_pr flags that differ from a
    full chronological replay, delete record rows that no longer hold and insert
    the missing ones. Limited to exercise_names when given. Idempotent.

    With `since`, only workouts starting at or after it are replayed and their
    rows touched; earlier sets just seed the running bests. Pass the earliest
    start_time a write changed.
    """
    names = set(exercise_names) if exercise_names is not None else None
    replay = await _replay(db, user_id, names, since)

    flags_changed = 0
    for _, exercise, position, flag in replay.flags:
        set_ = exercise.sets[position]
        if set_.is_pr != flag:
            set_.is_pr = flag
            flags_changed += 1

    stored_rows = await _stored_records(db, user_id, names, since)
    deleted = 0
    for key, row in stored_rows.items():
        expected = replay.expected.get(key)
        if expected is None or not _matches(row, expected):
            await db.delete(row)
            deleted += 1
    await db.flush()

    inserted = 0
    for key, expected in replay.expected.items():
        row = stored_rows.get(key)
        if row is not None and _matches(row, expected):
            continue
        workout_id, exercise_name, set_index = key
        db.add(
            PersonalRecord(
                user_id=user_id,
                exercise_name=exercise_name,
                weight=expected.weight,
                reps=expected.reps,
                workout_id=workout_id,
                set_index=set_index,
                achieved_at=expected.achieved_at,
            )
        )
        inserted += 1
    await db.flush()

    if flags_changed or inserted or deleted:
        logger.info(
            "Rebuilt PR state for user %s: %d flags changed, %d records inserted, %d deleted",
            user_id,
            flags_changed,
            inserted,
            deleted,
        )
    return RebuildReport(
        workouts_scanned=len(replay.workouts),
        flags_changed=flags_changed,
        records_inserted=inserted,
        records_deleted=deleted,
        exercise_names=sorted(names) if names is not None else None,
    )
