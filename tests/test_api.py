"""Tests for the FastAPI view-model endpoints."""

from collections.abc import Iterator

import pytest
from fastapi.testclient import TestClient

from nutriai.api.app import create_app
from nutriai.containers import AppContainer
from nutriai.errors import ApiError

from tests.conftest import NOW, FakeApiClient


@pytest.fixture
def client(container: AppContainer) -> Iterator[TestClient]:
    with TestClient(create_app(container)) as test_client:
        yield test_client


def test_health(client: TestClient) -> None:
    response = client.get("/health")

    assert response.status_code == 200
    assert response.json() == {"status": "ok"}


def test_nutrition_totals_from_items(client: TestClient) -> None:
    response = client.post(
        "/nutrition/totals",
        json={
            "items": [
                {"name": "Rice", "nutrition": {"calories": 130.04, "protein": "2.7g"}},
                {"name": "Egg", "calories": 70, "protein": 6, "fat": None},
            ]
        },
    )

    totals = response.json()
    assert totals["calories"] == 200.0
    assert totals["protein"] == 8.7
    assert totals["fat"] == 0


def test_nutrition_totals_from_meals(client: TestClient) -> None:
    response = client.post(
        "/nutrition/totals",
        json={"meals": [{"total_calories": 500}, {"total_calories": "250"}]},
    )

    assert response.json()["calories"] == 750


def test_allergen_score(client: TestClient) -> None:
    response = client.post(
        "/allergens/score",
        json={
            "allergens": [
                {"confidence": 0.5, "severity": "high"},
                {"confidence": "0.5", "severity": "low"},
            ]
        },
    )

    assert response.json() == {"safetyScore": 65, "color": "orange"}


def test_bmi(client: TestClient) -> None:
    response = client.get("/metrics/bmi", params={"height": "170", "weight": "65,5"})

    assert response.json() == {"bmi": 22.7, "category": "Normal"}


@pytest.mark.parametrize("height", ["0", "inf", "nan"])
def test_bmi_rejects_invalid_input(client: TestClient, height: str) -> None:
    response = client.get("/metrics/bmi", params={"height": height, "weight": "70"})

    assert response.status_code == 422


def test_portion_estimate_for_reference_object(client: TestClient) -> None:
    params = {"reference": "fork", "food": "pizza"}
    response = client.get("/portions/estimate", params=params)

    assert response.json() == {
        "weight": 160,
        "volume": 220,
        "confidence": 88,
        "macros": {
            "calories": 128,
            "protein": 8,
            "carbs": 19,
            "fat": 5,
            "sugar": 2,
            "sodium": 80,
            "fiber": 3,
        },
        "band": "high",
    }


def test_portion_estimate_defaults_unknown_inputs(client: TestClient) -> None:
    params = {"reference": "plate", "food": "soup"}
    response = client.get("/portions/estimate", params=params)

    body = response.json()
    assert (body["weight"], body["confidence"], body["band"]) == (150, 75, "medium")


def test_sleep_duration_wraps_midnight(client: TestClient) -> None:
    response = client.get(
        "/metrics/sleep-duration", params={"bed_time": "23:00", "wake_time": "06:30"}
    )

    assert response.json() == {"hours": 7.5}


def test_sleep_duration_rejects_garbage(client: TestClient) -> None:
    response = client.get(
        "/metrics/sleep-duration", params={"bed_time": "late", "wake_time": "06:30"}
    )

    assert response.status_code == 422


def test_micronutrient_progress(client: TestClient) -> None:
    samples = [
        {"day": "Mon", "date": f"2024-03-0{i + 1}", "nutrients": {"iron": 4}}
        for i in range(7)
    ]

    response = client.post(
        "/micronutrients/progress", json={"samples": samples, "nutrients": ["iron"]}
    )

    body = response.json()
    assert body["progress"] == [
        {"nutrient": "iron", "name": "Iron", "percentage": 50.0, "band": "low"}
    ]
    assert any(d["nutrient"] == "iron" for d in body["deficiencies"])


def test_normalize_shopping_list(client: TestClient) -> None:
    response = client.post(
        "/shopping-list/normalize",
        json={"shoppingList": {"Fruits": ["Apples", {"name": "Pears", "checked": 1}]}},
    )

    assert response.json() == [
        {
            "category": "Fruits",
            "items": [
                {"name": "Apples", "checked": False},
                {"name": "Pears", "checked": True},
            ],
        }
    ]


def test_normalize_malformed_shopping_list(client: TestClient) -> None:
    response = client.post("/shopping-list/normalize", json={"shoppingList": 42})

    assert response.json() == []


def test_reminder_lifecycle(client: TestClient) -> None:
    created = client.post("/reminders", json={"name": " Vitamin D ", "time": "08:00"})

    assert created.status_code == 201
    reminder = created.json()
    assert reminder == {
        "id": int(NOW.timestamp() * 1000),
        "name": "Vitamin D",
        "time": "08:00",
    }
    assert client.get("/reminders").json() == [reminder]

    deleted = client.delete(f"/reminders/{reminder['id']}")

    assert deleted.json() == {"status": "deleted"}
    assert client.get("/reminders").json() == []
    assert client.delete(f"/reminders/{reminder['id']}").status_code == 404


def test_reminder_validation(client: TestClient) -> None:
    blank = client.post("/reminders", json={"name": "  ", "time": "08:00"})
    malformed = client.post("/reminders", json={"name": "Iron", "time": "8am"})

    assert blank.status_code == 422
    assert malformed.status_code == 422


def test_gamification_falls_back_to_demo_data(
    client: TestClient, api: FakeApiClient
) -> None:
    api.respond("GET", "/api/gamification/stats", ApiError("down"))

    body = client.get("/gamification", params={"user_name": "Ada"}).json()

    assert body["simulated"] is True
    assert body["leaderboard"][-1]["name"] == "Ada"
    assert body["leaderboard"][-1]["is_current_user"] is True


def test_micronutrients_weekly(client: TestClient, api: FakeApiClient) -> None:
    sample = {"day": "Mon", "date": "2024-03-11", "nutrients": {"zinc": 11}}
    api.respond(
        "GET",
        "/api/advanced-nutrition/micronutrients/weekly-data",
        {"weeklyData": [sample]},
    )

    body = client.get("/micronutrients/weekly").json()

    assert body["weeklyData"] == [
        {"day": "Mon", "date": "2024-03-11", "nutrients": {"zinc": 11.0}}
    ]
    assert body["deficiencies"] == []
    assert body["simulated"] is False
