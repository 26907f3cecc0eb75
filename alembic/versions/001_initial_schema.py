"""Initial schema: workouts, workout_exercises, workout_sets, personal_records, custom_exercises.

Revision ID: 001
Revises:
Create Date: 2026-10-18

"""
from typing import Sequence, Union

from alembic import op
import sqlalchemy as sa


revision: str = "001"
down_revision: Union[str, None] = None
branch_labels: Union[str, Sequence[str], None] = None
depends_on: Union[str, Sequence[str], None] = None


def upgrade() -> None:
    op.create_table(
        "workouts",
        sa.Column("id", sa.Uuid(), nullable=False),
        sa.Column("user_id", sa.Uuid(), nullable=False),
        sa.Column("start_time", sa.DateTime(timezone=True), nullable=False),
        sa.Column("end_time", sa.DateTime(timezone=True), nullable=True),
        sa.Column("target_categories", sa.JSON(), nullable=True),
        sa.Column("created_at", sa.DateTime(timezone=True), nullable=True),
        sa.Column("updated_at", sa.DateTime(timezone=True), nullable=True),
        sa.PrimaryKeyConstraint("id"),
    )
    op.create_index("ix_workouts_user_id_start_time", "workouts", ["user_id", "start_time"], unique=False)

    op.create_table(
        "workout_exercises",
        sa.Column("id", sa.Uuid(), nullable=False),
        sa.Column("workout_id", sa.Uuid(), nullable=False),
        sa.Column("exercise_name", sa.String(length=255), nullable=False),
        sa.Column("position", sa.Integer(), nullable=True),
        sa.Column("completed", sa.Boolean(), nullable=False),
        sa.Column("notes", sa.Text(), nullable=True),
        sa.ForeignKeyConstraint(["workout_id"], ["workouts.id"], ondelete="CASCADE"),
        sa.PrimaryKeyConstraint("id"),
    )
    op.create_index("ix_workout_exercises_workout_id", "workout_exercises", ["workout_id"], unique=False)
    op.create_index("ix_workout_exercises_exercise_name", "workout_exercises", ["exercise_name"], unique=False)

    op.create_table(
        "workout_sets",
        sa.Column("id", sa.Uuid(), nullable=False),
        sa.Column("workout_exercise_id", sa.Uuid(), nullable=False),
        sa.Column("position", sa.Integer(), nullable=True),
        sa.Column("weight", sa.Numeric(precision=8, scale=2), nullable=False),
        sa.Column("reps", sa.Integer(), nullable=False),
        sa.Column("note", sa.String(length=500), nullable=True),
        sa.Column("completed", sa.Boolean(), nullable=True),
        sa.Column("missed", sa.Boolean(), nullable=False),
        sa.Column("is_pr", sa.Boolean(), nullable=False),
        sa.ForeignKeyConstraint(["workout_exercise_id"], ["workout_exercises.id"], ondelete="CASCADE"),
        sa.PrimaryKeyConstraint("id"),
    )
    op.create_index("ix_workout_sets_workout_exercise_id", "workout_sets", ["workout_exercise_id"], unique=False)

    op.create_table(
        "personal_records",
        sa.Column("id", sa.Uuid(), nullable=False),
        sa.Column("user_id", sa.Uuid(), nullable=False),
        sa.Column("exercise_name", sa.String(length=255), nullable=False),
        sa.Column("weight", sa.Numeric(precision=8, scale=2), nullable=False),
        sa.Column("reps", sa.Integer(), nullable=False),
        sa.Column("workout_id", sa.Uuid(), nullable=False),
        sa.Column("set_index", sa.Integer(), nullable=False),
        sa.Column("achieved_at", sa.DateTime(timezone=True), nullable=False),
        sa.ForeignKeyConstraint(["workout_id"], ["workouts.id"], ondelete="CASCADE"),
        sa.PrimaryKeyConstraint("id"),
        sa.UniqueConstraint("user_id", "exercise_name", "workout_id", "set_index", name="uq_personal_records_set"),
    )
    op.create_index("ix_personal_records_user_exercise", "personal_records", ["user_id", "exercise_name"], unique=False)
    op.create_index("ix_personal_records_workout_id", "personal_records", ["workout_id"], unique=False)

    op.create_table(
        "custom_exercises",
        sa.Column("id", sa.Uuid(), nullable=False),
        sa.Column("user_id", sa.Uuid(), nullable=False),
        sa.Column("name", sa.String(length=255), nullable=False),
        sa.Column("type", sa.Enum("total", "/side", "+bar", "bodyweight", name="weighttype"), nullable=False),
        sa.Column(
            "category",
            sa.Enum(
                "Chest", "Shoulders", "Triceps", "Back", "Biceps", "Legs", "Core", "Cardio", "Other", name="category"
            ),
            nullable=False,
        ),
        sa.Column(
            "muscle_group",
            sa.Enum("Upper", "Lower", "Core", "Cardio", "Other", name="musclegroup"),
            nullable=False,
        ),
        sa.Column("unit", sa.Enum("lbs", "kg", name="unit"), nullable=False),
        sa.Column("created_at", sa.DateTime(timezone=True), nullable=True),
        sa.PrimaryKeyConstraint("id"),
        sa.UniqueConstraint("user_id", "name", name="uq_custom_exercises_user_name"),
    )
    op.create_index(op.f("ix_custom_exercises_user_id"), "custom_exercises", ["user_id"], unique=False)


def downgrade() -> None:
    op.drop_index(op.f("ix_custom_exercises_user_id"), table_name="custom_exercises")
    op.drop_table("custom_exercises")
    op.drop_index("ix_personal_records_workout_id", table_name="personal_records")
    op.drop_index("ix_personal_records_user_exercise", table_name="personal_records")
    op.drop_table("personal_records")
    op.drop_index("ix_workout_sets_workout_exercise_id", table_name="workout_sets")
    op.drop_table("workout_sets")
    op.drop_index("ix_workout_exercises_exercise_name", table_name="workout_exercises")
    op.drop_index("ix_workout_exercises_workout_id", table_name="workout_exercises")
    op.drop_table("workout_exercises")
    op.drop_index("ix_workouts_user_id_start_time", table_name="workouts")
    op.drop_table("workouts")
    for enum_name in ("unit", "musclegroup", "category", "weighttype"):
        sa.Enum(name=enum_name).drop(op.get_bind(), checkfirst=True)
