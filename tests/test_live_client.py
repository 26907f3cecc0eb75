from datetime import datetime, timezone

import pytest

from conftest import day
from liftlog.client import LiftlogAPIError, LiveWorkout
from liftlog.schemas.workout import WorkoutCreate


def seed(api, start, name, *pairs):
    payload = WorkoutCreate.model_validate(
        {"start_time": start, "exercises": [{"name": name, "sets": [{"weight": w, "reps": r} for w, r in pairs]}]}
    )
    return api.create_workout(payload)


def server_flags(workout):
    return [[s.is_pr for s in ex.sets] for ex in workout.exercises]


def test_live_flags_follow_every_mutation(api):
    seed(api, day(1), "Bench Press", (100, 8))
    live = api.start_workout(start_time=day(2))
    bench = live.exercises.index(live.add_exercise("Bench Press"))

    live.add_set(bench, 100, 9)
    live.add_set(bench, 100, 10)
    assert live.flags() == [[True, True]]

    live.update_set(bench, 1, reps=9)
    assert live.flags() == [[True, False]]

    live.toggle_set_missed(bench, 0)
    assert live.flags() == [[False, True]]

    live.toggle_set_missed(bench, 0)
    live.toggle_set_completed(bench, 0)
    assert live.exercises[bench].sets[0].completed is False
    assert live.flags() == [[False, True]]

    live.remove_set(bench, 0)
    assert live.flags() == [[True]]


def test_live_flags_match_server(api):
    seed(api, day(1), "Squat", (120, 5), (100, 8))
    live = api.start_workout(start_time=day(2))
    squat = live.exercises.index(live.add_exercise("Squat"))
    lunge = live.exercises.index(live.add_exercise("Lunge"))
    for weight, reps in [(120, 5), (120, 6), (100, 8), (100, 9), (120, 6)]:
        live.add_set(squat, weight, reps)
    live.add_set(lunge, 40, 10)
    live.add_set(lunge, 40, 10)

    saved = api.save(live)
    assert api.last_records_synced is True
    assert server_flags(saved) == live.flags()
    assert live.flags() == [[False, True, False, True, False], [True, False]]


def test_moving_exercises_changes_which_sets_come_first(api):
    live = LiveWorkout(start_time=day(1))
    first = live.add_exercise("Curl")
    second = live.add_exercise("Curl")
    live.add_set(0, 20, 10)
    live.add_set(1, 20, 12)
    assert live.flags() == [[True], [True]]

    live.move_exercise(0, 1)
    assert live.exercises == [second, first]
    assert live.flags() == [[True], [False]]


def test_rename_follows_current_workout_only(api):
    seed(api, day(1), "Bench", (100, 10))
    live = api.start_workout(start_time=day(2))
    live.add_exercise("Bench")
    live.add_set(0, 100, 10)
    assert live.flags() == [[False]]

    assert live.rename_exercise("Bench", "Flat Bench") == 1
    assert live.exercises[0].name == "Flat Bench"
    assert live.flags() == [[True]]


def test_editing_excludes_the_workout_itself(api):
    saved = seed(api, day(1), "Row", (60, 10), (60, 12))
    seed(api, day(3), "Row", (60, 11))

    live = api.edit_workout(saved.id)
    assert live.flags() == [[True, True]]

    live.update_set(0, 1, reps=10)
    updated = api.save(live)
    assert server_flags(updated) == live.flags() == [[True, False]]

    later = [w for w in api.all_workouts() if w.start_time == day(3)][0]
    assert server_flags(later) == [[True]]


def test_save_conflicts_on_stale_copy(api):
    saved = seed(api, day(1), "Row", (60, 10))
    first = api.edit_workout(saved.id)
    second = api.edit_workout(saved.id)

    first.add_set(0, 60, 11)
    api.save(first)

    second.add_set(0, 60, 9)
    with pytest.raises(LiftlogAPIError) as exc:
        api.save(second)
    assert exc.value.status_code == 409


def test_pr_history_merges_unsaved_prs(api):
    seed(api, day(1), "Dip", (0, 12), (25, 6))
    live = api.start_workout(start_time=day(2))
    live.add_exercise("Dip")
    live.add_set(0, 25, 8)
    live.add_set(0, 45, 3)
    live.add_set(0, 0, 10)

    table = live.pr_history("Dip", api.list_records("Dip"))
    assert [(e.weight, e.reps, e.workout_id) for e in table] == [
        (45, 3, None),
        (25, 8, None),
        (0, 12, table[2].workout_id),
    ]
    assert table[2].workout_id is not None


def test_previous_sets_and_records_through_client(api):
    seed(api, day(1), "Press", (40, 8))
    seed(api, day(2), "Press", (40, 9))
    previous = api.previous_sets("Press", before=day(2))
    assert [s.reps for s in previous.sets] == [8]
    assert [(r.weight, r.reps) for r in api.current_records("Press")] == [(40, 9)]
    assert api.verify_records().consistent
    assert api.rebuild_records().flags_changed == 0


def test_naive_start_time_is_treated_as_utc(api):
    seed(api, day(1), "Press", (40, 8))
    live = LiveWorkout(history=api.all_workouts(), start_time=datetime(2024, 3, 5, 9, 0))
    assert live.start_time == datetime(2024, 3, 5, 9, 0, tzinfo=timezone.utc)

    live.add_exercise("Press")
    live.add_set(0, 40, 8)
    live.add_set(0, 40, 9)
    assert live.flags() == [[False, True]]
