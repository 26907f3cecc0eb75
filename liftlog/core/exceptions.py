"""Domain errors raised by services and mapped to HTTP responses in main."""

from __future__ import annotations

from typing import Any


class LiftlogError(Exception):
    """Base class for errors with an HTTP status."""

    status_code = 400

    def __init__(self, detail: str, **extra: Any):
        super().__init__(detail)
        self.detail = detail
        self.extra = extra


class WorkoutNotFoundError(LiftlogError):
    status_code = 404

    def __init__(self, workout_id: Any):
        super().__init__("Workout not found", workout_id=str(workout_id))


class ExerciseNotFoundError(LiftlogError):
    status_code = 404

    def __init__(self, exercise_id: Any):
        super().__init__("Exercise not found", exercise_id=str(exercise_id))


class DuplicateExerciseError(LiftlogError):
    status_code = 409

    def __init__(self, name: str):
        super().__init__(f"Exercise '{name}' already exists", name=name)


class WorkoutConflictError(LiftlogError):
    """Raised when an update was based on a stale copy of the workout."""

    status_code = 409

    def __init__(self, current: Any):
        super().__init__("Workout was modified by another request", current=current)
