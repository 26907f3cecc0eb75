"""CustomExercise model - a user's own exercise definitions."""

from __future__ import annotations

import uuid
from datetime import datetime

from sqlalchemy import DateTime, Enum, String, UniqueConstraint, Uuid
from sqlalchemy.orm import Mapped, mapped_column

from liftlog.core.enums import Category, MuscleGroup, Unit, WeightType
from liftlog.db.base import Base, utcnow


class CustomExercise(Base):
    """Exercise definition with weight type, category and unit."""

    __tablename__ = "custom_exercises"
    __table_args__ = (UniqueConstraint("user_id", "name", name="uq_custom_exercises_user_name"),)

    id: Mapped[uuid.UUID] = mapped_column(Uuid, primary_key=True, default=uuid.uuid4)
    user_id: Mapped[uuid.UUID] = mapped_column(Uuid, nullable=False, index=True)
    name: Mapped[str] = mapped_column(String(255), nullable=False)
    type: Mapped[WeightType] = mapped_column(
        Enum(WeightType, values_callable=lambda e: [m.value for m in e]), nullable=False
    )
    category: Mapped[Category] = mapped_column(
        Enum(Category, values_callable=lambda e: [m.value for m in e]), nullable=False
    )
    muscle_group: Mapped[MuscleGroup] = mapped_column(
        Enum(MuscleGroup, values_callable=lambda e: [m.value for m in e]), default=MuscleGroup.OTHER, nullable=False
    )
    unit: Mapped[Unit] = mapped_column(Enum(Unit, values_callable=lambda e: [m.value for m in e]), nullable=False)
    created_at: Mapped[datetime] = mapped_column(DateTime(timezone=True), default=utcnow)
