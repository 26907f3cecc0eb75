"""In-progress workout state with live PR stars.

LiveWorkout owns everything a logging screen needs between saves: the history
snapshot it judges against, the workout being composed (or edited) and the
mutations the UI performs. Every change to a set recomputes the flags of all
sets with the same pr_detection functions the server runs on submit, so the
stars shown while logging are the ones the server will store.
"""

from __future__ import annotations

import uuid
from collections import defaultdict
from collections.abc import Iterable, Sequence
from dataclasses import dataclass, field
from datetime import datetime

from liftlog.core.enums import MuscleGroup
from liftlog.db.base import as_utc, utcnow
from liftlog.schemas.record import PersonalRecordRead
from liftlog.schemas.workout import (
    SetCreate,
    WorkoutCreate,
    WorkoutExerciseCreate,
    WorkoutRead,
    WorkoutUpdate,
)
from liftlog.services.pr_detection import (
    HistoricalSet,
    WorkoutEvaluation,
    current_bests,
    evaluate_workout,
    is_eligible,
    weight_key,
)


@dataclass
class LiveSet:
    weight: float
    reps: int
    note: str | None = None
    completed: bool | None = None
    missed: bool | None = None
    is_pr: bool = False


@dataclass
class LiveExercise:
    name: str
    sets: list[LiveSet] = field(default_factory=list)
    completed: bool = False
    notes: str | None = None


@dataclass(frozen=True)
class RecordEntry:
    """A stored or not-yet-saved PR, as shown in an exercise's PR table."""

    exercise_name: str
    weight: float
    reps: int
    achieved_at: datetime
    workout_id: uuid.UUID | None = None


class LiveWorkout:
    """The workout currently being logged or edited."""

    def __init__(
        self,
        history: Iterable[WorkoutRead] = (),
        start_time: datetime | None = None,
        editing_workout_id: uuid.UUID | None = None,
        exercises: Sequence[LiveExercise] = (),
        target_categories: Sequence[MuscleGroup] | None = None,
        updated_at: datetime | None = None,
    ):
        self.history: list[WorkoutRead] = list(history)
        self.start_time = as_utc(start_time) if start_time else utcnow()
        self.editing_workout_id = editing_workout_id
        self.exercises: list[LiveExercise] = list(exercises)
        self.target_categories = list(target_categories) if target_categories else None
        self.updated_at = updated_at
        self.recalculate()

    @classmethod
    def edit(cls, workout: WorkoutRead, history: Iterable[WorkoutRead]) -> LiveWorkout:
        """Open a saved workout for editing."""
        exercises = [
            LiveExercise(
                name=ex.name,
                completed=ex.completed,
                notes=ex.notes,
                sets=[
                    LiveSet(weight=s.weight, reps=s.reps, note=s.note, completed=s.completed, missed=s.missed)
                    for s in ex.sets
                ],
            )
            for ex in workout.exercises
        ]
        return cls(
            history=history,
            start_time=workout.start_time,
            editing_workout_id=workout.id,
            exercises=exercises,
            target_categories=workout.target_categories,
            updated_at=workout.updated_at,
        )

    # -- PR evaluation -----------------------------------------------------------

    def history_by_name(self) -> dict[str, list[HistoricalSet]]:
        """Sets from strictly earlier workouts, never the one being edited."""
        by_name: dict[str, list[HistoricalSet]] = defaultdict(list)
        for workout in self.history:
            if self.editing_workout_id is not None and workout.id == self.editing_workout_id:
                continue
            if workout.start_time >= self.start_time:
                continue
            for ex in workout.exercises:
                by_name[ex.name].extend(
                    HistoricalSet(weight=s.weight, reps=s.reps, completed=s.completed, missed=s.missed)
                    for s in ex.sets
                )
        return dict(by_name)

    def recalculate(self) -> WorkoutEvaluation:
        """Recompute every set's flag from scratch."""
        evaluation = evaluate_workout(self.exercises, self.history_by_name())
        for exercise, row in zip(self.exercises, evaluation.flags):
            for set_, flag in zip(exercise.sets, row):
                set_.is_pr = flag
        return evaluation

    def flags(self) -> list[list[bool]]:
        return [[s.is_pr for s in ex.sets] for ex in self.exercises]

    # -- exercises ---------------------------------------------------------------

    def add_exercise(self, name: str) -> LiveExercise:
        exercise = LiveExercise(name=name)
        self.exercises.append(exercise)
        return exercise

    def remove_exercise(self, index: int) -> None:
        del self.exercises[index]
        self.recalculate()

    def move_exercise(self, index: int, offset: int) -> None:
        """Swap with a neighbour; order changes which sets count as earlier."""
        target = index + offset
        if not 0 <= target < len(self.exercises):
            return
        self.exercises[index], self.exercises[target] = self.exercises[target], self.exercises[index]
        self.recalculate()

    def rename_exercise(self, old_name: str, new_name: str) -> int:
        """Follow a library rename in the current workout only; history keeps the old name."""
        renamed = 0
        for exercise in self.exercises:
            if exercise.name == old_name:
                exercise.name = new_name
                renamed += 1
        if renamed:
            self.recalculate()
        return renamed

    def toggle_exercise_completed(self, index: int) -> None:
        self.exercises[index].completed = not self.exercises[index].completed

    # -- sets --------------------------------------------------------------------

    def add_set(self, exercise_index: int, weight: float, reps: int, note: str | None = None) -> LiveSet:
        set_ = LiveSet(weight=weight, reps=reps, note=note or None)
        self.exercises[exercise_index].sets.append(set_)
        self.recalculate()
        return set_

    def update_set(
        self,
        exercise_index: int,
        set_index: int,
        weight: float | None = None,
        reps: int | None = None,
        note: str | None = None,
    ) -> LiveSet:
        set_ = self.exercises[exercise_index].sets[set_index]
        if weight is not None:
            set_.weight = weight
        if reps is not None:
            set_.reps = reps
        if note is not None:
            set_.note = note.strip() or None
        self.recalculate()
        return set_

    def remove_set(self, exercise_index: int, set_index: int) -> None:
        del self.exercises[exercise_index].sets[set_index]
        self.recalculate()

    def toggle_set_completed(self, exercise_index: int, set_index: int) -> None:
        # A set with no completed flag counts as completed, so the first toggle un-completes it
        set_ = self.exercises[exercise_index].sets[set_index]
        set_.completed = not (set_.completed is None or set_.completed)
        self.recalculate()

    def toggle_set_missed(self, exercise_index: int, set_index: int) -> None:
        set_ = self.exercises[exercise_index].sets[set_index]
        set_.missed = not set_.missed
        self.recalculate()

    # -- PR table ----------------------------------------------------------------

    def pr_history(self, exercise_name: str, records: Iterable[PersonalRecordRead]) -> list[RecordEntry]:
        """
        Best reps per weight for one exercise, heaviest first: stored records plus
        the PRs of this workout as it stands now, saved or not.

        Stored rows of the workout being edited are replaced by its live flags.
        """
        entries = [
            RecordEntry(
                exercise_name=r.exercise_name,
                weight=r.weight,
                reps=r.reps,
                achieved_at=r.achieved_at,
                workout_id=r.workout_id,
            )
            for r in records
            if r.exercise_name == exercise_name
            and (self.editing_workout_id is None or r.workout_id != self.editing_workout_id)
        ]
        for exercise in self.exercises:
            if exercise.name != exercise_name:
                continue
            entries.extend(
                RecordEntry(
                    exercise_name=exercise_name,
                    weight=weight_key(set_.weight),
                    reps=set_.reps,
                    achieved_at=self.start_time,
                    workout_id=self.editing_workout_id,
                )
                for set_ in exercise.sets
                if set_.is_pr and is_eligible(set_)
            )
        return sorted(current_bests(entries), key=lambda e: weight_key(e.weight), reverse=True)

    # -- saving ------------------------------------------------------------------

    def to_payload(self) -> WorkoutCreate | WorkoutUpdate:
        """The write request for this workout; isPR is left for the server to derive."""
        exercises = [
            WorkoutExerciseCreate(
                name=ex.name,
                completed=ex.completed,
                notes=ex.notes,
                sets=[
                    SetCreate(weight=s.weight, reps=s.reps, note=s.note, completed=s.completed, missed=s.missed)
                    for s in ex.sets
                ],
            )
            for ex in self.exercises
        ]
        if self.editing_workout_id is None:
            return WorkoutCreate(
                start_time=self.start_time,
                target_categories=self.target_categories,
                exercises=exercises,
            )
        return WorkoutUpdate(
            start_time=self.start_time,
            target_categories=self.target_categories,
            exercises=exercises,
            updated_at=self.updated_at,
        )
