"""PR detection: flag a set as PR if it beats the best reps ever done at its weight.

A set is a personal record when it has more reps than every eligible set at the
same weight for the same exercise name, counting sets from strictly earlier
workouts plus the sets logged before it in its own workout. A tie is not a PR.

Everything here is pure. The write pipeline and the live client both call these
functions so the server and an in-progress workout always agree on the flags.
"""

from __future__ import annotations

from collections import defaultdict
from collections.abc import Hashable, Iterable, Mapping, Sequence
from dataclasses import dataclass, field
from datetime import datetime
from itertools import groupby
from typing import Protocol, TypeVar


class SetLike(Protocol):
    weight: float
    reps: int
    completed: bool | None
    missed: bool | None


class ExerciseLike(Protocol):
    name: str
    sets: Sequence[SetLike]


class WorkoutLike(Protocol):
    id: Hashable
    start_time: datetime
    exercises: Sequence[ExerciseLike]


class RecordLike(Protocol):
    exercise_name: str
    weight: float
    reps: int
    achieved_at: datetime


R = TypeVar("R", bound=RecordLike)


@dataclass(frozen=True, slots=True)
class HistoricalSet:
    """A set from an earlier workout, as read from storage."""

    weight: float
    reps: int
    completed: bool | None = None
    missed: bool | None = None


@dataclass(frozen=True, slots=True)
class ExerciseSets:
    """Name + ordered sets; adapts stored exercises to ExerciseLike."""

    name: str
    sets: Sequence[SetLike]


@dataclass(frozen=True, slots=True)
class ReplayWorkout:
    id: Hashable
    start_time: datetime
    exercises: Sequence[ExerciseLike]


@dataclass(frozen=True, slots=True)
class RecordCandidate:
    """A PR set that should have a PersonalRecord row.

    set_index counts sets across every entry of the exercise name in the
    workout, so it stays unique when an exercise is logged twice."""

    exercise_name: str
    weight: float
    reps: int
    set_index: int
    exercise_position: int
    set_position: int


@dataclass(slots=True)
class WorkoutEvaluation:
    """Per-set flags (flags[exercise][set]) and the record rows they imply."""

    flags: list[list[bool]] = field(default_factory=list)
    records: list[RecordCandidate] = field(default_factory=list)

    @property
    def pr_count(self) -> int:
        return len(self.records)


def weight_key(weight: float) -> float:
    """Weights are stored with two decimals; compare them the same way."""
    return round(float(weight), 2)


def is_eligible(set_: SetLike) -> bool:
    """Missed sets never count; a set without a completed flag counts as completed."""
    if set_.missed is True:
        return False
    return set_.completed is None or set_.completed is True


def best_reps_at(sets: Iterable[SetLike], weight: float) -> int | None:
    """Max reps among eligible sets at this weight, or None if there are none."""
    key = weight_key(weight)
    best: int | None = None
    for s in sets:
        if not is_eligible(s) or weight_key(s.weight) != key:
            continue
        if best is None or s.reps > best:
            best = s.reps
    return best


def beats(reps: int, previous_best: int | None, current_workout_best: int | None) -> bool:
    thresholds = [r for r in (previous_best, current_workout_best) if r is not None]
    if not thresholds:
        return True
    return reps > max(thresholds)


def is_personal_record(
    weight: float,
    reps: int,
    history: Iterable[SetLike],
    earlier_in_workout: Iterable[SetLike],
) -> bool:
    """
    Decide one set against its history.

    history: sets of the same exercise from the user's strictly earlier workouts.
    earlier_in_workout: sets of the same exercise logged before this one today.
    The target set's own eligibility is the caller's concern.
    """
    return beats(reps, best_reps_at(history, weight), best_reps_at(earlier_in_workout, weight))


class BestRepsLedger:
    """Running best eligible reps per (exercise name, weight)."""

    def __init__(self) -> None:
        self._best: dict[str, dict[float, int]] = defaultdict(dict)

    @classmethod
    def from_history(cls, history: Mapping[str, Iterable[SetLike]]) -> BestRepsLedger:
        ledger = cls()
        for name, sets in history.items():
            for s in sets:
                ledger.add(name, s)
        return ledger

    def best(self, name: str, weight: float) -> int | None:
        by_weight = self._best.get(name)
        if by_weight is None:
            return None
        return by_weight.get(weight_key(weight))

    def add(self, name: str, set_: SetLike) -> None:
        if not is_eligible(set_):
            return
        by_weight = self._best[name]
        key = weight_key(set_.weight)
        if key not in by_weight or set_.reps > by_weight[key]:
            by_weight[key] = set_.reps

    def absorb(self, exercises: Iterable[ExerciseLike]) -> None:
        for exercise in exercises:
            for s in exercise.sets:
                self.add(exercise.name, s)


def _evaluate(exercises: Sequence[ExerciseLike], previous: BestRepsLedger) -> WorkoutEvaluation:
    current = BestRepsLedger()
    set_counters: dict[str, int] = defaultdict(int)
    evaluation = WorkoutEvaluation()
    for exercise_position, exercise in enumerate(exercises):
        row: list[bool] = []
        for set_position, s in enumerate(exercise.sets):
            set_index = set_counters[exercise.name]
            set_counters[exercise.name] += 1
            is_pr = is_eligible(s) and beats(
                s.reps,
                previous.best(exercise.name, s.weight),
                current.best(exercise.name, s.weight),
            )
            current.add(exercise.name, s)
            row.append(is_pr)
            if is_pr:
                evaluation.records.append(
                    RecordCandidate(
                        exercise_name=exercise.name,
                        weight=weight_key(s.weight),
                        reps=s.reps,
                        set_index=set_index,
                        exercise_position=exercise_position,
                        set_position=set_position,
                    )
                )
        evaluation.flags.append(row)
    return evaluation


def evaluate_workout(
    exercises: Sequence[ExerciseLike],
    history: Mapping[str, Iterable[SetLike]],
) -> WorkoutEvaluation:
    """
    Flag every set of a workout, left to right.

    history maps exercise name -> sets from strictly earlier workouts (the
    workout being edited must already be excluded). Earlier entries of the
    same exercise name in this workout count as in-workout history; different
    names never share state. Ineligible sets are always False.
    """
    return _evaluate(exercises, BestRepsLedger.from_history(history))


def replay_history(
    workouts: Iterable[WorkoutLike],
    history: Mapping[str, Iterable[SetLike]] | None = None,
) -> dict[Hashable, WorkoutEvaluation]:
    """
    Recompute every workout's flags from raw sets alone, in start_time order.

    Workouts that share a start_time are not history for each other, matching
    the strict "earlier" rule used when a single workout is submitted. `history`
    seeds the ledger with sets from before the first replayed workout, so a
    replay can start partway through a user's log.
    """
    ordered = sorted(workouts, key=lambda w: w.start_time)
    ledger = BestRepsLedger.from_history(history) if history else BestRepsLedger()
    results: dict[Hashable, WorkoutEvaluation] = {}
    for _, group in groupby(ordered, key=lambda w: w.start_time):
        same_time = list(group)
        for workout in same_time:
            results[workout.id] = _evaluate(workout.exercises, ledger)
        for workout in same_time:
            ledger.absorb(workout.exercises)
    return results


def current_bests(records: Iterable[R]) -> list[R]:
    """Collapse record rows to the current record per (exercise, weight).

    Highest reps wins; equal reps go to the latest achieved_at."""
    best: dict[tuple[str, float], R] = {}
    for record in records:
        key = (record.exercise_name, weight_key(record.weight))
        held = best.get(key)
        if (
            held is None
            or record.reps > held.reps
            or (record.reps == held.reps and record.achieved_at > held.achieved_at)
        ):
            best[key] = record
    return sorted(best.values(), key=lambda r: (r.exercise_name, weight_key(r.weight)))
