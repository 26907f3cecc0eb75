import uuid

from sqlalchemy import select, update

from conftest import day, workout_json
from liftlog.db import async_session_maker
from liftlog.models.workout import WorkoutExercise, WorkoutSet
from liftlog.schemas.workout import WorkoutUpdate
from liftlog.services.workout_pipeline import submit_workout

R = "/api/v1/records"


def log(client, headers, *workouts):
    ids = []
    for body in workouts:
        r = client.post("/api/v1/workouts", json=body, headers=headers)
        assert r.status_code == 201, r.text
        ids.append(r.json()["id"])
    return ids


def test_records_one_row_per_pr_set(client, headers):
    log(
        client,
        headers,
        workout_json(day(1), ("Bench Press", [(100, 8), (100, 8), (80, 12)])),
        workout_json(day(2), ("Bench Press", [(100, 10)])),
    )
    records = client.get(R, headers=headers).json()
    assert sorted((r["weight"], r["reps"]) for r in records) == [(80, 12), (100, 8), (100, 10)]
    assert records[0]["reps"] == 10  # newest first

    current = client.get(f"{R}/current", headers=headers).json()
    assert [(r["weight"], r["reps"]) for r in current] == [(80, 12), (100, 10)]


def test_records_by_exercise_name(client, headers):
    log(
        client,
        headers,
        workout_json(day(1), ("Bench Press", [(100, 8)]), ("Barbell Row", [(70, 10)])),
    )
    rows = client.get(f"{R}/Barbell Row", headers=headers).json()
    assert [(r["exercise_name"], r["reps"]) for r in rows] == [("Barbell Row", 10)]
    assert client.get(f"{R}/Nothing Logged", headers=headers).json() == []


def test_exercise_named_like_a_route_uses_query_param(client, headers):
    log(client, headers, workout_json(day(1), ("current", [(50, 10)]), ("verify", [(20, 15)])))
    for name, reps in [("current", 10), ("verify", 15)]:
        rows = client.get(R, params={"exercise_name": name}, headers=headers).json()
        assert [(r["exercise_name"], r["reps"]) for r in rows] == [(name, reps)]


def test_achieved_at_is_workout_start(client, headers):
    log(client, headers, workout_json(day(4), ("Dip", [(0, 15)])))
    (record,) = client.get(R, headers=headers).json()
    assert record["achieved_at"].startswith(day(4).strftime("%Y-%m-%dT%H:%M"))


def test_verify_reports_consistent_history(client, headers):
    log(
        client,
        headers,
        workout_json(day(3), ("Squat", [(120, 5), (120, 6)])),
        workout_json(day(1), ("Squat", [(120, 7)])),
        workout_json(day(2), ("Squat", [(120, 7), (120, 8)])),
    )
    report = client.get(f"{R}/verify", headers=headers).json()
    assert report == {"consistent": True, "workouts_scanned": 3, "drift": []}

    rebuilt = client.post(f"{R}/rebuild", headers=headers).json()
    assert rebuilt["flags_changed"] == 0
    assert rebuilt["records_inserted"] == 0
    assert rebuilt["records_deleted"] == 0


def test_rebuild_repairs_drift(client, headers):
    (workout_id,) = log(client, headers, workout_json(day(1), ("Squat", [(120, 5), (120, 6)])))
    exercise_ids = select(WorkoutExercise.id).where(WorkoutExercise.workout_id == uuid.UUID(workout_id))

    async def corrupt():
        async with async_session_maker() as session:
            await session.execute(
                update(WorkoutSet)
                .where(WorkoutSet.workout_exercise_id.in_(exercise_ids), WorkoutSet.reps == 6)
                .values(is_pr=False)
            )
            await session.commit()

    client.portal.call(corrupt)

    report = client.get(f"{R}/verify", headers=headers).json()
    assert report["consistent"] is False
    assert {d["kind"] for d in report["drift"]} == {"flag"}

    rebuilt = client.post(f"{R}/rebuild", headers=headers).json()
    assert rebuilt["flags_changed"] == 1
    assert client.get(f"{R}/verify", headers=headers).json()["consistent"] is True
    body = client.get(f"/api/v1/workouts/{workout_id}", headers=headers).json()
    assert [s["isPR"] for s in body["exercises"][0]["sets"]] == [True, True]


def test_deleting_workout_removes_its_records(client, headers):
    (workout_id,) = log(client, headers, workout_json(day(1), ("Curl", [(15, 12)])))
    assert len(client.get(R, headers=headers).json()) == 1
    client.delete(f"/api/v1/workouts/{workout_id}", headers=headers)
    assert client.get(R, headers=headers).json() == []


def test_edit_reconciles_only_from_earliest_changed_start(client, headers):
    user_id = uuid.UUID(headers["X-User-Id"])
    *_, latest = log(
        client,
        headers,
        workout_json(day(1), ("Squat", [(120, 5)])),
        workout_json(day(2), ("Squat", [(120, 6)])),
        workout_json(day(3), ("Squat", [(120, 7)])),
    )

    def edit(start, reps):
        async def run():
            payload = WorkoutUpdate.model_validate(workout_json(start, ("Squat", [(120, reps)])))
            async with async_session_maker() as session:
                result = await submit_workout(session, user_id, payload, workout_id=uuid.UUID(latest))
                await session.commit()
                return result.reconciled

        return client.portal.call(run)

    report = edit(day(3), 6)
    assert report.workouts_scanned == 1
    assert client.get(f"{R}/verify", headers=headers).json()["consistent"] is True
    body = client.get(f"/api/v1/workouts/{latest}", headers=headers).json()
    assert [s["isPR"] for s in body["exercises"][0]["sets"]] == [False]

    # moving it before the others re-evaluates them too
    report = edit(day(0), 8)
    assert report.workouts_scanned == 3
    assert report.flags_changed == 2
    assert client.get(f"{R}/verify", headers=headers).json()["consistent"] is True
    rows = client.get(R, params={"exercise_name": "Squat"}, headers=headers).json()
    assert [(r["workout_id"], r["reps"]) for r in rows] == [(latest, 8)]
