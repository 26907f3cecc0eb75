from datetime import datetime, timedelta, timezone

from liftlog.services.pr_detection import ExerciseSets, HistoricalSet, ReplayWorkout, replay_history

T0 = datetime(2024, 1, 1, 8, tzinfo=timezone.utc)


def bench(workout_id, days, *reps, weight=100):
    return ReplayWorkout(
        id=workout_id,
        start_time=T0 + timedelta(days=days),
        exercises=[ExerciseSets(name="Bench Press", sets=[HistoricalSet(weight=weight, reps=r) for r in reps])],
    )


def test_replay_orders_by_start_time_not_input_order():
    later = bench("later", 2, 10)
    earlier = bench("earlier", 1, 8)
    results = replay_history([later, earlier])
    assert results["earlier"].flags == [[True]]
    assert results["later"].flags == [[True]]


def test_later_workout_is_never_history_for_earlier():
    results = replay_history([bench("b", 2, 12), bench("a", 1, 10)])
    assert results["a"].flags == [[True]]
    assert results["b"].flags == [[True]]

    results = replay_history([bench("b", 2, 8), bench("a", 1, 10)])
    assert results["a"].flags == [[True]]
    assert results["b"].flags == [[False]]


def test_equal_start_times_are_not_history_for_each_other():
    results = replay_history([bench("a", 1, 10), bench("b", 1, 10), bench("c", 2, 10)])
    assert results["a"].flags == [[True]]
    assert results["b"].flags == [[True]]
    assert results["c"].flags == [[False]]


def test_replay_is_deterministic():
    workouts = [bench("a", 1, 8), bench("b", 3, 9, 10, 10), bench("c", 2, 9)]
    first = replay_history(workouts)
    second = replay_history(list(reversed(workouts)))
    assert {k: v.flags for k, v in first.items()} == {k: v.flags for k, v in second.items()}
    assert first["c"].flags == [[True]]
    assert first["b"].flags == [[False, True, False]]


def test_seeded_replay_matches_full_replay():
    workouts = [bench("a", 1, 8), bench("b", 2, 9), bench("c", 3, 9, 10)]
    full = replay_history(workouts)
    seed = {"Bench Press": [HistoricalSet(weight=100, reps=8), HistoricalSet(weight=100, reps=9)]}
    partial = replay_history(workouts[2:], seed)
    assert list(partial) == ["c"]
    assert partial["c"].flags == full["c"].flags == [[False, True]]
