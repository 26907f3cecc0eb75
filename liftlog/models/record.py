"""PersonalRecord model - materialized view of PR sets, rebuildable from raw sets."""

from __future__ import annotations

import uuid
from datetime import datetime

from sqlalchemy import DateTime, ForeignKey, Index, Integer, Numeric, String, UniqueConstraint, Uuid
from sqlalchemy.orm import Mapped, mapped_column, relationship

from liftlog.db.base import Base


class PersonalRecord(Base):
    """A set that beat every earlier eligible set at its weight when it was logged."""

    __tablename__ = "personal_records"
    __table_args__ = (
        UniqueConstraint("user_id", "exercise_name", "workout_id", "set_index", name="uq_personal_records_set"),
        Index("ix_personal_records_user_exercise", "user_id", "exercise_name"),
        Index("ix_personal_records_workout_id", "workout_id"),
    )

    id: Mapped[uuid.UUID] = mapped_column(Uuid, primary_key=True, default=uuid.uuid4)
    user_id: Mapped[uuid.UUID] = mapped_column(Uuid, nullable=False)
    exercise_name: Mapped[str] = mapped_column(String(255), nullable=False)
    weight: Mapped[float] = mapped_column(Numeric(8, 2, asdecimal=False), nullable=False)
    reps: Mapped[int] = mapped_column(Integer, nullable=False)
    workout_id: Mapped[uuid.UUID] = mapped_column(Uuid, ForeignKey("workouts.id", ondelete="CASCADE"), nullable=False)
    set_index: Mapped[int] = mapped_column(Integer, nullable=False)
    achieved_at: Mapped[datetime] = mapped_column(DateTime(timezone=True), nullable=False)

    workout: Mapped["Workout"] = relationship("Workout", back_populates="personal_records")
