"""Custom exercise schemas."""

from uuid import UUID

from pydantic import BaseModel, ConfigDict, Field

from liftlog.core.enums import Category, MuscleGroup, Unit, WeightType
from liftlog.schemas.workout import UtcDatetime


class ExerciseBase(BaseModel):
    name: str = Field(..., min_length=1, max_length=255)
    type: WeightType
    category: Category
    muscle_group: MuscleGroup = MuscleGroup.OTHER
    unit: Unit


class ExerciseCreate(ExerciseBase):
    pass


class ExerciseUpdate(ExerciseBase):
    pass


class ExerciseRead(ExerciseBase):
    model_config = ConfigDict(from_attributes=True)
    id: UUID
    user_id: UUID
    created_at: UtcDatetime
