"""Tests for the HTTP API."""

from datetime import date
from uuid import uuid4

from fastapi.testclient import TestClient

from fitcoach.api.app import create_app
from fitcoach.containers import AppContainer
from fitcoach.domain.nutrition import LoggedQuantity, MealSlot
from tests.conftest import (
    InMemoryCompletionRepository,
    InMemoryFoodLogRepository,
    InMemoryPhotoStorage,
    InMemoryWorkoutRepository,
    make_completion,
    make_food,
)

HEADERS = {"X-Api-Token": "api-token"}
DAY = date(2024, 5, 10)


def test_health_is_public(container: AppContainer) -> None:
    client = TestClient(create_app(container))

    response = client.get("/health")

    assert response.status_code == 200
    assert response.json() == {"status": "ok"}


def test_client_endpoints_require_token(container: AppContainer) -> None:
    client = TestClient(create_app(container))
    client_id = uuid4()

    missing = client.get(f"/clients/{client_id}/streak")
    wrong = client.get(f"/clients/{client_id}/streak", headers={"X-Api-Token": "x"})

    assert missing.status_code == 401
    assert wrong.status_code == 401


def test_foods_endpoint(container: AppContainer) -> None:
    client = TestClient(create_app(container))

    response = client.get("/foods", params={"query": "rice"})

    assert response.status_code == 200
    assert [food["name"] for food in response.json()["foods"]] == ["Brown rice"]


def test_day_nutrition_endpoint(
    container: AppContainer,
    food_log_repository: InMemoryFoodLogRepository,
    completion_repository: InMemoryCompletionRepository,
) -> None:
    client_id = uuid4()
    lunch_id = uuid4()
    food = make_food(serving_size=100, calories=412.6, protein_g=30.04, fat_g=10)
    food_log_repository.add(
        client_id,
        DAY,
        LoggedQuantity(
            food=food,
            quantity=100,
            unit="g",
            meal_slot=MealSlot.LUNCH,
            meal_id=lunch_id,
        ),
    )
    food_log_repository.add(
        client_id,
        DAY,
        LoggedQuantity(food=food, quantity=100, unit="g", meal_slot=MealSlot.DINNER),
    )
    completion_repository.add(make_completion(client_id, DAY, meal_id=lunch_id))
    client = TestClient(create_app(container))

    response = client.get(
        f"/clients/{client_id}/nutrition/{DAY.isoformat()}", headers=HEADERS
    )
    everything = client.get(
        f"/clients/{client_id}/nutrition/{DAY.isoformat()}",
        params={"completed_only": "false"},
        headers=HEADERS,
    )

    assert response.status_code == 200
    data = response.json()
    assert data["completed_slots"] == ["lunch"]
    assert data["completed_meal_ids"] == [str(lunch_id)]
    assert data["meals"]["breakfast"]["calories"] == 0
    assert data["meals"]["lunch"]["calories"] == 413
    assert data["consumed"]["protein_g"] == 30.0
    assert data["progress"]["calories"]["target"] == 2000
    assert data["progress"]["calories"]["is_over"] is False
    assert data["target_source"] == "default"
    assert everything.json()["consumed"]["calories"] == 825


def test_streak_endpoint(
    container: AppContainer, completion_repository: InMemoryCompletionRepository
) -> None:
    client_id = uuid4()
    completion_repository.add(make_completion(client_id, date(2020, 1, 1)))
    client = TestClient(create_app(container))

    response = client.get(f"/clients/{client_id}/streak", headers=HEADERS)

    assert response.status_code == 200
    assert response.json()["complete_days"] == 1
    assert response.json()["last_completed_on"] == "2020-01-01"


def test_dashboard_endpoint(container: AppContainer) -> None:
    client_id = uuid4()
    client = TestClient(create_app(container))

    empty = client.get(f"/clients/{client_id}/dashboard", headers=HEADERS)
    loaded = client.get(
        f"/clients/{client_id}/dashboard",
        params={"day": DAY.isoformat()},
        headers=HEADERS,
    )
    current = client.get(f"/clients/{client_id}/dashboard", headers=HEADERS)

    assert empty.json()["day"] is None
    assert empty.json()["nutrition"] is None
    assert loaded.json()["day"] == DAY.isoformat()
    assert loaded.json()["loading"] is False
    assert loaded.json()["nutrition"]["day"] == DAY.isoformat()
    assert current.json() == loaded.json()


def test_meal_completion_endpoint(
    container: AppContainer, photo_storage: InMemoryPhotoStorage
) -> None:
    client_id = uuid4()
    meal_id = uuid4()
    client = TestClient(create_app(container))
    url = f"/clients/{client_id}/meals/{meal_id}/completion"
    params = {"log_date": DAY.isoformat()}
    headers = {**HEADERS, "Content-Type": "image/png"}

    created = client.post(url, params=params, content=b"png-bytes", headers=headers)
    duplicate = client.post(url, params=params, content=b"png-bytes", headers=headers)

    assert created.status_code == 201
    body = created.json()
    assert body["meal_id"] == str(meal_id)
    assert body["log_date"] == DAY.isoformat()
    assert body["photo_url"].startswith("https://storage.example/")
    assert len(photo_storage.objects) == 1
    assert duplicate.status_code == 409


def test_meal_completion_rejects_bad_photo(container: AppContainer) -> None:
    client = TestClient(create_app(container))

    response = client.post(
        f"/clients/{uuid4()}/meals/{uuid4()}/completion",
        content=b"GIF89a",
        headers={**HEADERS, "Content-Type": "image/gif"},
    )

    assert response.status_code == 422


def test_delete_completion_endpoint(
    container: AppContainer, completion_repository: InMemoryCompletionRepository
) -> None:
    client_id = uuid4()
    record = make_completion(client_id, DAY)
    completion_repository.add(record)
    client = TestClient(create_app(container))

    deleted = client.delete(
        f"/clients/{client_id}/completions/{record.id}", headers=HEADERS
    )
    missing = client.delete(
        f"/clients/{client_id}/completions/{record.id}", headers=HEADERS
    )

    assert deleted.status_code == 204
    assert missing.status_code == 404


def test_delete_completion_of_another_client(
    container: AppContainer, completion_repository: InMemoryCompletionRepository
) -> None:
    record = make_completion(uuid4(), DAY)
    completion_repository.add(record)
    client = TestClient(create_app(container))

    response = client.delete(
        f"/clients/{uuid4()}/completions/{record.id}", headers=HEADERS
    )

    assert response.status_code == 404
    assert record.id in completion_repository.records


def test_adherence_endpoint(
    container: AppContainer, completion_repository: InMemoryCompletionRepository
) -> None:
    client_id = uuid4()
    completion_repository.add(make_completion(client_id, DAY))
    client = TestClient(create_app(container))

    response = client.get(
        f"/clients/{client_id}/adherence",
        params={"start": "2024-05-10", "end": "2024-05-11", "expected_per_day": 2},
        headers=HEADERS,
    )

    assert response.status_code == 200
    data = response.json()
    assert data["total_expected"] == 4
    assert data["adherence_rate"] == 25.0
    assert data["days"][0] == {"date": "2024-05-10", "logged": 1, "expected": 2}


def test_workout_endpoint(
    container: AppContainer, workout_repository: InMemoryWorkoutRepository
) -> None:
    template_id = uuid4()
    workout_repository.rows[template_id] = [
        {
            "exercise_id": str(uuid4()),
            "order_index": 0,
            "sets": 3,
            "reps": "8-10",
            "rest_seconds": 90,
            "notes": '{"type": "tabata", "rounds": 6}',
        }
    ]
    client = TestClient(create_app(container))

    response = client.get(f"/clients/{uuid4()}/workouts/{template_id}", headers=HEADERS)

    assert response.status_code == 200
    data = response.json()
    assert data["source"] == "template_exercises"
    assert data["exercises"][0]["composition"]["type"] == "tabata"
    assert data["exercises"][0]["composition"]["rounds"] == 6
