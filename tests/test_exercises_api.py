from conftest import day, pr_flags, workout_json

E = "/api/v1/exercises"


def exercise(name, **overrides):
    body = {"name": name, "type": "total", "category": "Chest", "unit": "lbs"}
    body.update(overrides)
    return body


def log(client, headers, body):
    r = client.post("/api/v1/workouts", json=body, headers=headers)
    assert r.status_code == 201, r.text
    return r.json()


def test_exercise_crud(client, headers):
    r = client.post(E, json=exercise("Cable Fly", type="/side", muscle_group="Upper"), headers=headers)
    assert r.status_code == 201
    created = r.json()
    assert created["type"] == "/side"

    assert [e["name"] for e in client.get(E, headers=headers).json()] == ["Cable Fly"]
    assert client.get(f"{E}/{created['id']}", headers=headers).json()["muscle_group"] == "Upper"

    r = client.put(f"{E}/{created['id']}", json=exercise("Cable Fly", unit="kg"), headers=headers)
    assert r.status_code == 200
    assert r.json()["unit"] == "kg"

    assert client.delete(f"{E}/{created['id']}", headers=headers).status_code == 204
    assert client.get(f"{E}/{created['id']}", headers=headers).status_code == 404


def test_duplicate_name_conflicts(client, headers):
    client.post(E, json=exercise("Hip Thrust", category="Legs"), headers=headers)
    r = client.post(E, json=exercise("Hip Thrust", category="Legs"), headers=headers)
    assert r.status_code == 409
    assert r.json()["name"] == "Hip Thrust"


def test_invalid_weight_type_rejected(client, headers):
    assert client.post(E, json=exercise("Odd Lift", type="per-arm"), headers=headers).status_code == 422


def test_rename_keeps_history_under_old_name(client, headers):
    created = client.post(E, json=exercise("Bench"), headers=headers).json()
    log(client, headers, workout_json(day(1), ("Bench", [(100, 10)])))

    r = client.put(f"{E}/{created['id']}", json=exercise("Flat Bench"), headers=headers)
    assert r.status_code == 200

    body = log(client, headers, workout_json(day(2), ("Flat Bench", [(100, 10)])))
    assert pr_flags(body) == [[True]]
    names = {rec["exercise_name"] for rec in client.get("/api/v1/records", headers=headers).json()}
    assert names == {"Bench", "Flat Bench"}


def test_rename_with_history_moves_sets_and_records(client, headers):
    created = client.post(E, json=exercise("Bench"), headers=headers).json()
    first = log(client, headers, workout_json(day(1), ("Bench", [(100, 10)])))

    r = client.put(
        f"{E}/{created['id']}",
        json=exercise("Flat Bench"),
        params={"rename_history": "true"},
        headers=headers,
    )
    assert r.status_code == 200

    moved = client.get(f"/api/v1/workouts/{first['id']}", headers=headers).json()
    assert moved["exercises"][0]["name"] == "Flat Bench"
    records = client.get("/api/v1/records", headers=headers).json()
    assert [rec["exercise_name"] for rec in records] == ["Flat Bench"]

    body = log(client, headers, workout_json(day(2), ("Flat Bench", [(100, 10)])))
    assert pr_flags(body) == [[False]]


def test_clear_data(client, headers):
    client.post(E, json=exercise("Pullover"), headers=headers)
    log(client, headers, workout_json(day(1), ("Pullover", [(40, 12)])))

    assert client.post("/api/v1/data/clear", headers=headers).json() == {"success": True}
    assert client.get(E, headers=headers).json() == []
    assert client.get("/api/v1/workouts", headers=headers).json() == []
    assert client.get("/api/v1/records", headers=headers).json() == []
