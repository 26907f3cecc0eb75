"""ORM models - import all so Base.metadata is complete for migrations."""

from liftlog.models.exercise import CustomExercise
from liftlog.models.record import PersonalRecord
from liftlog.models.workout import Workout, WorkoutExercise, WorkoutSet

__all__ = [
    "CustomExercise",
    "PersonalRecord",
    "Workout",
    "WorkoutExercise",
    "WorkoutSet",
]
