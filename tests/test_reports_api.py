"""Tests for the reports REST API."""

import base64
from uuid import uuid4

import pytest
from fastapi.testclient import TestClient

from slimfit.api.app import create_app
from slimfit.services.users import UserService
from tests.conftest import (
    TODAY,
    FakeAnalysisClient,
    FakeTelegramClient,
    FakeVisionClient,
    InMemoryReportRepository,
)

HEADERS = {"X-Api-Token": "api-token"}
BASE = "/users/123/reports"


@pytest.fixture
def client(container, user_service: UserService) -> TestClient:
    user_service.ensure_user(123, display_name="Olena")
    return TestClient(create_app(container))


def _create(client: TestClient, **body) -> dict:
    payload = {"report_date": TODAY.isoformat(), **body}
    response = client.post(BASE, json=payload, headers=HEADERS)
    assert response.status_code == 200
    return response.json()


def test_requires_api_token(client: TestClient) -> None:
    assert client.get(BASE).status_code == 401
    assert client.get(BASE, headers={"X-Api-Token": "wrong"}).status_code == 401


def test_unknown_user_is_not_found(client: TestClient) -> None:
    response = client.get("/users/999/reports", headers=HEADERS)

    assert response.status_code == 404
    assert response.json()["detail"] == "User not found"


def test_create_and_get_report(client: TestClient) -> None:
    created = _create(
        client,
        weight={"value": 80.5},
        meals=[{"type": "lunch", "calories": 700, "protein": 40}, {"calories": 300}],
    )

    assert created["weight"]["value"] == 80.5
    assert created["total_nutrition"]["calories"] == 1000
    assert created["total_nutrition"]["protein"] == 40

    response = client.get(f"{BASE}/{TODAY.isoformat()}", headers=HEADERS)

    assert response.status_code == 200
    assert response.json()["report_date"] == "2024-05-14"


def test_create_twice_merges_into_one_report(
    client: TestClient, report_repository: InMemoryReportRepository
) -> None:
    _create(client, weight={"value": 80}, steps={"count": 5000})
    merged = _create(client, steps={"count": 9000})

    assert merged["weight"]["value"] == 80
    assert merged["steps"]["count"] == 9000
    assert len(report_repository.reports) == 1


def test_create_rejects_invalid_values(client: TestClient) -> None:
    response = client.post(BASE, json={"weight": {"value": 500}}, headers=HEADERS)

    assert response.status_code == 422


def test_list_reports_with_range_and_paging(client: TestClient) -> None:
    for day in ("2024-05-10", "2024-05-12", "2024-05-14"):
        client.post(BASE, json={"report_date": day, "comments": day}, headers=HEADERS)

    response = client.get(
        BASE,
        params={"start": "2024-05-11", "end": "2024-05-14", "limit": 1, "offset": 1},
        headers=HEADERS,
    )

    body = response.json()
    assert [report["report_date"] for report in body["reports"]] == ["2024-05-12"]
    assert body["limit"] == 1
    assert body["offset"] == 1


def test_get_missing_report_is_not_found(client: TestClient) -> None:
    response = client.get(f"{BASE}/2024-01-01", headers=HEADERS)

    assert response.status_code == 404


def test_update_report(client: TestClient) -> None:
    _create(client, weight={"value": 80})

    response = client.put(
        f"{BASE}/{TODAY.isoformat()}", json={"comments": "rest day"}, headers=HEADERS
    )

    assert response.status_code == 200
    assert response.json()["comments"] == "rest day"
    assert response.json()["weight"]["value"] == 80


def test_update_missing_report_is_not_found(client: TestClient) -> None:
    response = client.put(f"{BASE}/2024-01-01", json={"comments": "x"}, headers=HEADERS)

    assert response.status_code == 404


def test_delete_report(client: TestClient) -> None:
    _create(client, comments="to delete")

    first = client.delete(f"{BASE}/{TODAY.isoformat()}", headers=HEADERS)
    second = client.delete(f"{BASE}/{TODAY.isoformat()}", headers=HEADERS)

    assert first.json() == {"status": "deleted"}
    assert second.status_code == 404


def test_add_and_remove_meal(client: TestClient) -> None:
    path = f"{BASE}/{TODAY.isoformat()}/meals"

    added = client.post(path, json={"type": "dinner", "calories": 650}, headers=HEADERS)
    assert added.status_code == 200
    meal_id = added.json()["meals"][0]["id"]
    assert added.json()["total_nutrition"]["calories"] == 650

    removed = client.delete(f"{path}/{meal_id}", headers=HEADERS)

    assert removed.json()["meals"] == []
    assert removed.json()["total_nutrition"]["calories"] == 0
    assert client.delete(f"{path}/{uuid4()}", headers=HEADERS).status_code == 404


def test_stats_summary(client: TestClient) -> None:
    client.post(
        BASE,
        json={"weight": {"value": 81}, "meals": [{"calories": 1900}]},
        headers=HEADERS,
    )

    response = client.get(f"{BASE}/stats/summary", params={"days": 7}, headers=HEADERS)

    assert response.status_code == 200
    body = response.json()
    assert body["days"] == 7
    assert body["total_reports"] == 1
    assert body["average_weight"] == 81
    assert body["average_calories"] == 1900


def test_create_stores_feedback_without_messaging(
    client: TestClient,
    report_repository: InMemoryReportRepository,
    telegram_client: FakeTelegramClient,
) -> None:
    created = _create(client, weight={"value": 80}, steps={"count": 9000})

    assert created["ai_feedback"] is None
    (stored,) = report_repository.reports.values()
    assert stored.ai_feedback.summary == "Solid day overall."
    assert telegram_client.messages == []


def test_create_survives_feedback_failure(
    client: TestClient,
    report_repository: InMemoryReportRepository,
    analysis_client: FakeAnalysisClient,
) -> None:
    analysis_client.error = RuntimeError("model offline")

    created = _create(client, weight={"value": 80})

    assert created["weight"]["value"] == 80
    (stored,) = report_repository.reports.values()
    assert stored.ai_feedback is None


def test_create_estimates_image_meals(
    client: TestClient, vision_client: FakeVisionClient
) -> None:
    created = _create(
        client,
        meals=[
            {
                "type": "lunch",
                "source": "image",
                "image_ref": "https://img.test/salmon.jpg",
            },
            {"type": "snack", "calories": 150},
        ],
    )

    assert vision_client.image_urls == ["https://img.test/salmon.jpg"]
    assert "lunch" in vision_client.prompts[0]
    lunch = created["meals"][0]
    assert lunch["name"] == "Grilled salmon with rice"
    assert lunch["calories"] == 620
    assert lunch["sodium"] == 480
    assert created["total_nutrition"]["calories"] == 770


def test_image_meal_keeps_values_when_estimate_fails(
    client: TestClient, vision_client: FakeVisionClient
) -> None:
    vision_client.error = RuntimeError("vision timeout")

    created = _create(
        client,
        meals=[
            {"source": "image", "image_ref": "https://img.test/a.jpg", "calories": 300}
        ],
    )

    assert created["meals"][0]["calories"] == 300
    assert created["total_nutrition"]["calories"] == 300


def test_add_meal_with_base64_image(
    client: TestClient, vision_client: FakeVisionClient
) -> None:
    image = base64.b64encode(b"\x89PNG\r\n\x1a\n0000").decode()

    added = client.post(
        f"{BASE}/{TODAY.isoformat()}/meals",
        json={"type": "dinner", "source": "image", "image_ref": image},
        headers=HEADERS,
    )

    assert added.status_code == 200
    assert vision_client.image_urls == [f"data:image/png;base64,{image}"]
    assert added.json()["total_nutrition"]["calories"] == 620


def test_replace_meals(client: TestClient) -> None:
    _create(client, meals=[{"calories": 100}, {"calories": 200}])
    path = f"{BASE}/{TODAY.isoformat()}/meals"

    response = client.put(
        path, json=[{"type": "breakfast", "calories": 450}], headers=HEADERS
    )

    assert response.status_code == 200
    assert [meal["calories"] for meal in response.json()["meals"]] == [450]
    assert response.json()["total_nutrition"]["calories"] == 450
    missing = client.put(f"{BASE}/2024-01-01/meals", json=[], headers=HEADERS)
    assert missing.status_code == 404
