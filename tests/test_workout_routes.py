import pytest


@pytest.fixture
def leg_day():
    return {
        "title": "Leg day",
        "date": "2024-05-10T18:00:00",
        "duration": 60,
        "workout_type": "strength",
        "difficulty": "advanced",
        "total_calories_burned": 450,
        "exercises": [
            {"name": "Squat", "category": "strength", "sets": [{"reps": 5, "weight": 100}, {"reps": 5, "weight": 105}]},
            {"name": "Lunge", "category": "strength", "sets": [{"reps": 12}]},
        ],
    }


def create_workout(client, headers, body):
    response = client.post("/api/v1/workouts", json=body, headers=headers)
    assert response.status_code == 201, response.text
    return response.json()["data"]["workout"]


def test_create_workout(client, auth_headers, leg_day):
    workout = create_workout(client, auth_headers, leg_day)

    assert workout["total_exercises"] == 2
    assert workout["total_sets"] == 3
    assert workout["is_completed"] is False


def test_create_workout_defaults(client, auth_headers):
    workout = create_workout(client, auth_headers, {"title": "Quick jog"})
    assert workout["workout_type"] == "mixed"
    assert workout["difficulty"] == "intermediate"
    assert workout["total_calories_burned"] == 0
    assert workout["duration"] is None


def test_create_workout_rejects_bad_duration(client, auth_headers, leg_day):
    response = client.post("/api/v1/workouts", json={**leg_day, "duration": 2000}, headers=auth_headers)
    assert response.status_code == 400


def test_list_workouts(client, auth_headers, leg_day):
    create_workout(client, auth_headers, leg_day)
    create_workout(client, auth_headers, {**leg_day, "workout_type": "cardio", "date": "2024-05-11T07:00:00"})

    data = client.get("/api/v1/workouts", headers=auth_headers).json()["data"]
    assert [w["workout_type"] for w in data["workouts"]] == ["cardio", "strength"]
    assert data["pagination"]["total"] == 2

    data = client.get("/api/v1/workouts", params={"workout_type": "strength"}, headers=auth_headers).json()["data"]
    assert len(data["workouts"]) == 1


def test_update_and_delete_workout(client, auth_headers, other_headers, leg_day):
    workout = create_workout(client, auth_headers, leg_day)
    url = f"/api/v1/workouts/{workout['_id']}"

    response = client.put(url, json={"is_completed": True, "duration": 75}, headers=auth_headers)
    assert response.status_code == 200
    updated = response.json()["data"]["workout"]
    assert updated["is_completed"] is True
    assert updated["duration"] == 75
    assert updated["title"] == "Leg day"

    assert client.put(url, json={"duration": 10}, headers=other_headers).status_code == 404
    assert client.delete(url, headers=auth_headers).status_code == 200
    assert client.get(url, headers=auth_headers).status_code == 404


def test_update_workout_null_clears_duration_and_notes(client, auth_headers, leg_day):
    workout = create_workout(client, auth_headers, {**leg_day, "notes": "felt heavy"})

    response = client.put(
        f"/api/v1/workouts/{workout['_id']}",
        json={"duration": None, "notes": None, "workout_type": None},
        headers=auth_headers,
    )
    assert response.status_code == 200
    updated = response.json()["data"]["workout"]
    assert updated["duration"] is None
    assert updated["notes"] is None
    assert updated["workout_type"] == "strength"


def test_workout_stats(client, auth_headers, leg_day):
    create_workout(client, auth_headers, leg_day)
    create_workout(client, auth_headers, {**leg_day, "workout_type": "cardio", "duration": 30, "total_calories_burned": 250})
    create_workout(client, auth_headers, {"title": "Stretch", "workout_type": "flexibility", "date": "2023-01-01T00:00:00"})

    data = client.get("/api/v1/workouts/stats", params={"start_date": "2024-01-01T00:00:00"}, headers=auth_headers).json()["data"]
    assert data["overall"]["total_workouts"] == 2
    assert data["overall"]["total_duration"] == 90
    assert data["overall"]["avg_calories"] == 350
    assert {row["workout_type"] for row in data["by_type"]} == {"strength", "cardio"}
