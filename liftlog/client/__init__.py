"""Client side: live PR evaluation while logging, and the HTTP API wrapper."""

from liftlog.client.api import LiftlogAPIError, LiftlogClient
from liftlog.client.live import LiveExercise, LiveSet, LiveWorkout, RecordEntry

__all__ = [
    "LiftlogAPIError",
    "LiftlogClient",
    "LiveExercise",
    "LiveSet",
    "LiveWorkout",
    "RecordEntry",
]
