"""Workout, exercise-entry and set schemas."""

from __future__ import annotations

from datetime import datetime
from typing import Annotated
from uuid import UUID

from pydantic import AfterValidator, BaseModel, ConfigDict, Field, field_validator

from liftlog.core.constants import (
    MAX_EXERCISES_PER_WORKOUT,
    MAX_SET_REPS,
    MAX_SET_WEIGHT,
    MAX_SETS_PER_EXERCISE,
)
from liftlog.core.enums import MuscleGroup, to_muscle_group
from liftlog.db.base import as_utc

# Always tz-aware UTC, whether parsed from ISO strings, epoch numbers or SQLite rows
UtcDatetime = Annotated[datetime, AfterValidator(as_utc)]


class SetBase(BaseModel):
    # The JSON parser accepts NaN and Infinity literals; reject them here
    weight: float = Field(..., allow_inf_nan=False, ge=-MAX_SET_WEIGHT, le=MAX_SET_WEIGHT)
    reps: int = Field(..., ge=0, le=MAX_SET_REPS)
    note: str | None = Field(None, max_length=500)
    completed: bool | None = None  # absent = completed (legacy sets)
    missed: bool | None = None

    @field_validator("weight")
    @classmethod
    def _two_decimals(cls, v: float) -> float:
        return round(v, 2)


class SetCreate(SetBase):
    """Inbound set. Any isPR sent by a client is ignored; flags are derived."""


class SetRead(SetBase):
    model_config = ConfigDict(from_attributes=True, populate_by_name=True)
    is_pr: bool = Field(False, alias="isPR")


class WorkoutExerciseBase(BaseModel):
    name: str = Field(..., min_length=1, max_length=255)
    completed: bool = False
    notes: str | None = None


class WorkoutExerciseCreate(WorkoutExerciseBase):
    sets: list[SetCreate] = Field(default_factory=list, max_length=MAX_SETS_PER_EXERCISE)


class WorkoutExerciseRead(WorkoutExerciseBase):
    sets: list[SetRead] = []


class WorkoutBase(BaseModel):
    start_time: UtcDatetime
    end_time: UtcDatetime | None = None
    target_categories: list[MuscleGroup] | None = None

    @field_validator("target_categories", mode="before")
    @classmethod
    def _legacy_categories(cls, v):
        if v is None:
            return None
        groups: list[MuscleGroup] = []
        for item in v:
            group = to_muscle_group(item.value if isinstance(item, MuscleGroup) else str(item))
            if group not in groups:
                groups.append(group)
        return groups


class WorkoutCreate(WorkoutBase):
    exercises: list[WorkoutExerciseCreate] = Field(..., max_length=MAX_EXERCISES_PER_WORKOUT)


class WorkoutUpdate(WorkoutCreate):
    """Full replace of a workout. updated_at, when sent, must match the stored value."""

    updated_at: UtcDatetime | None = None


class WorkoutRead(WorkoutBase):
    id: UUID
    user_id: UUID
    exercises: list[WorkoutExerciseRead] = []
    created_at: UtcDatetime
    updated_at: UtcDatetime


class PreviousSetsRead(BaseModel):
    """Sets of an exercise from the most recent earlier workout that included it."""

    exercise_name: str
    workout_id: UUID | None = None
    start_time: UtcDatetime | None = None
    sets: list[SetRead] = []
    message: str | None = None
