"""Personal record schemas."""

from typing import Literal
from uuid import UUID

from pydantic import BaseModel, ConfigDict

from liftlog.schemas.workout import UtcDatetime


class PersonalRecordRead(BaseModel):
    model_config = ConfigDict(from_attributes=True)

    id: UUID
    user_id: UUID
    exercise_name: str
    weight: float
    reps: int
    workout_id: UUID
    set_index: int
    achieved_at: UtcDatetime


class RecordDrift(BaseModel):
    """One difference between stored PR state and a replay of the raw sets."""

    kind: Literal["flag", "missing_record", "stale_record"]
    workout_id: UUID
    exercise_name: str
    set_index: int
    expected: bool | int | None = None
    stored: bool | int | None = None


class VerifyReport(BaseModel):
    consistent: bool
    workouts_scanned: int
    drift: list[RecordDrift] = []


class RebuildReport(BaseModel):
    workouts_scanned: int
    flags_changed: int
    records_inserted: int
    records_deleted: int
    exercise_names: list[str] | None = None
