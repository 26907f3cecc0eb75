from dataclasses import dataclass
from datetime import datetime, timezone

from liftlog.services.pr_detection import (
    ExerciseSets,
    HistoricalSet,
    best_reps_at,
    current_bests,
    evaluate_workout,
    is_eligible,
    is_personal_record,
)


def sets(*pairs, **flags):
    return [HistoricalSet(weight=w, reps=r, **flags) for w, r in pairs]


def flags_for(reps, weight=100, history=None, name="Bench Press"):
    exercise = ExerciseSets(name=name, sets=sets(*[(weight, r) for r in reps], completed=True))
    return evaluate_workout([exercise], history or {}).flags[0]


def test_beats_history():
    history = {"Bench Press": sets((100, 8), completed=True)}
    assert flags_for([10], history=history) == [True]


def test_same_workout_sequences():
    assert flags_for([10, 12]) == [True, True]
    assert flags_for([10, 10]) == [True, False]
    assert flags_for([12, 10]) == [True, False]


def test_progressive_sets():
    assert flags_for([10, 11, 12, 11]) == [True, True, True, False]


def test_history_and_workout_combined():
    history = {"Bench Press": sets((100, 8), completed=True)}
    assert flags_for([9, 10], history=history) == [True, True]


def test_uncompleted_history_ignored():
    history = {
        "Bench Press": sets((100, 8), completed=True) + sets((100, 12), completed=False),
    }
    assert flags_for([10], history=history) == [True]


def test_tie_with_history_is_not_pr():
    history = {"Bench Press": sets((100, 10), completed=True)}
    assert flags_for([10], history=history) == [False]


def test_other_weights_do_not_count():
    history = {"Bench Press": sets((120, 15), completed=True)}
    assert flags_for([5], history=history) == [True]


def test_weights_compared_at_two_decimals():
    history = {"Bench Press": sets((100.004, 10), completed=True)}
    assert flags_for([10], weight=100.0, history=history) == [False]


def test_ineligible_sets_never_pr():
    exercise = ExerciseSets(
        name="Squat",
        sets=[
            HistoricalSet(weight=100, reps=20, missed=True),
            HistoricalSet(weight=100, reps=20, completed=False),
            HistoricalSet(weight=100, reps=5),
        ],
    )
    result = evaluate_workout([exercise], {})
    assert result.flags == [[False, False, True]]
    assert [(r.reps, r.set_index) for r in result.records] == [(5, 2)]


def test_missed_sets_do_not_raise_the_bar():
    exercise = ExerciseSets(
        name="Squat",
        sets=[HistoricalSet(weight=100, reps=12, completed=True, missed=True), HistoricalSet(weight=100, reps=8)],
    )
    assert evaluate_workout([exercise], {}).flags == [[False, True]]


def test_missing_completed_counts_as_completed():
    assert is_eligible(HistoricalSet(weight=50, reps=5))
    history = {"Row": sets((50, 10))}
    assert flags_for([10], weight=50, history=history, name="Row") == [False]
    assert flags_for([11], weight=50, history=history, name="Row") == [True]


def test_exercises_are_independent():
    history = {"Bench Press": sets((100, 10), completed=True)}
    result = evaluate_workout(
        [
            ExerciseSets(name="Bench Press", sets=sets((100, 10), completed=True)),
            ExerciseSets(name="Incline Press", sets=sets((100, 10), completed=True)),
        ],
        history,
    )
    assert result.flags == [[False], [True]]


def test_repeated_exercise_entry_shares_workout_history():
    result = evaluate_workout(
        [
            ExerciseSets(name="Curl", sets=sets((20, 12))),
            ExerciseSets(name="Row", sets=sets((20, 12))),
            ExerciseSets(name="Curl", sets=sets((20, 12), (20, 13))),
        ],
        {},
    )
    assert result.flags == [[True], [True], [False, True]]
    curl_indexes = [r.set_index for r in result.records if r.exercise_name == "Curl"]
    assert curl_indexes == [0, 2]


def test_is_personal_record_contract():
    assert is_personal_record(100, 8, [], [])
    assert not is_personal_record(100, 8, sets((100, 8)), [])
    assert not is_personal_record(100, 9, sets((100, 8)), sets((100, 9)))
    assert is_personal_record(100, 9, sets((100, 8), missed=True), sets((100, 12), completed=False))


def test_best_reps_at():
    history = sets((100, 8), (100, 6), (90, 12)) + sets((100, 15), missed=True)
    assert best_reps_at(history, 100) == 8
    assert best_reps_at(history, 80) is None


@dataclass
class Row:
    exercise_name: str
    weight: float
    reps: int
    achieved_at: datetime


def test_current_bests_prefers_reps_then_latest():
    early = datetime(2024, 1, 1, tzinfo=timezone.utc)
    late = datetime(2024, 2, 1, tzinfo=timezone.utc)
    rows = [
        Row("Bench Press", 100, 8, early),
        Row("Bench Press", 100, 10, early),
        Row("Bench Press", 100, 10, late),
        Row("Bench Press", 80, 12, early),
        Row("Squat", 100, 3, late),
    ]
    best = current_bests(rows)
    assert [(r.exercise_name, r.weight, r.reps, r.achieved_at) for r in best] == [
        ("Bench Press", 80, 12, early),
        ("Bench Press", 100, 10, late),
        ("Squat", 100, 3, late),
    ]
