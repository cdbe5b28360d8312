"""Tests for Telegram webhook handling."""

from fastapi.testclient import TestClient

from slimfit.api.app import create_app
from tests.conftest import (
    TODAY,
    FakeAnalysisClient,
    FakeTelegramClient,
    InMemoryReportRepository,
    InMemoryUserRepository,
)

CHAT_ID = 99


def _update(update_id: int, text: str | None = None, **message) -> dict:
    body: dict[str, object] = {
        "message_id": update_id,
        "date": 1700000000 + update_id,
        "chat": {"id": CHAT_ID, "type": "private"},
        "from": {
            "id": 123,
            "is_bot": False,
            "first_name": "Olena",
            "language_code": "en",
        },
        **message,
    }
    if text is not None:
        body["text"] = text
    return {"update_id": update_id, "message": body}


def _post_texts(client: TestClient, *texts: str) -> None:
    for index, text in enumerate(texts, start=1):
        response = client.post("/telegram/webhook", json=_update(index, text))
        assert response.status_code == 200


def test_webhook_start_creates_user_and_sends_message(
    container,
    user_repository: InMemoryUserRepository,
    telegram_client: FakeTelegramClient,
) -> None:
    client = TestClient(create_app(container))

    response = client.post("/telegram/webhook", json=_update(1, "/start"))

    assert response.status_code == 200
    assert response.json() == {"status": "ok"}
    user = user_repository.users["123"]
    assert user.display_name == "Olena"
    assert user.language == "en"
    chat_id, text = telegram_client.messages[0]
    assert chat_id == CHAT_ID
    assert text.startswith("Welcome to SlimFit, Olena!")


def test_webhook_full_report_attaches_feedback(
    container,
    report_repository: InMemoryReportRepository,
    analysis_client: FakeAnalysisClient,
    telegram_client: FakeTelegramClient,
) -> None:
    client = TestClient(create_app(container))

    _post_texts(client, "/report", "80", "8000", "7:30", "2000", "skip", "skip", "done")

    [report] = report_repository.reports.values()
    assert report.report_date == TODAY
    assert report.ai_feedback is not None
    assert report.ai_feedback.summary == "Solid day overall."
    assert len(analysis_client.calls) == 1
    texts = [text for _, text in telegram_client.messages]
    assert texts[-2] == "✅ Report saved!"
    assert texts[-1].startswith("📊 Analysis:")


def test_webhook_feedback_failure_keeps_report(
    container,
    report_repository: InMemoryReportRepository,
    analysis_client: FakeAnalysisClient,
    telegram_client: FakeTelegramClient,
) -> None:
    analysis_client.error = TimeoutError()
    client = TestClient(create_app(container))

    _post_texts(client, "/report", "80", "8000", "7:30", "2000", "skip", "skip", "done")

    [report] = report_repository.reports.values()
    assert report.ai_feedback is None
    assert telegram_client.messages[-1][1] == "✅ Report saved!"


def test_webhook_rejects_users_outside_allow_list(
    container,
    user_repository: InMemoryUserRepository,
    telegram_client: FakeTelegramClient,
) -> None:
    container.settings.telegram_allowed_user_ids = "1,2"
    client = TestClient(create_app(container))

    client.post("/telegram/webhook", json=_update(1, "/start"))

    assert user_repository.users == {}
    assert telegram_client.messages == [(CHAT_ID, "This bot is private.")]


def test_webhook_reports_errors_to_user(
    container,
    report_repository: InMemoryReportRepository,
    telegram_client: FakeTelegramClient,
) -> None:
    client = TestClient(create_app(container))
    _post_texts(client, "/report", "80", "8000", "7:30", "2000", "skip", "skip")
    report_repository.fail_upserts = True

    response = client.post("/telegram/webhook", json=_update(20, "done"))

    assert response.status_code == 200
    assert telegram_client.messages[-1][1] == (
        "❌ Something went wrong while processing your message"
    )


def test_webhook_error_includes_debug_detail_locally(
    container,
    report_repository: InMemoryReportRepository,
    telegram_client: FakeTelegramClient,
) -> None:
    container.settings.environment = "local"
    client = TestClient(create_app(container))
    _post_texts(client, "/report", "80", "8000", "7:30", "2000", "skip", "skip")
    report_repository.fail_upserts = True

    client.post("/telegram/webhook", json=_update(20, "done"))

    assert telegram_client.messages[-1][1].endswith(
        "(debug: RuntimeError: database unavailable)"
    )


def test_webhook_unknown_command(
    container, telegram_client: FakeTelegramClient
) -> None:
    client = TestClient(create_app(container))

    client.post("/telegram/webhook", json=_update(1, "/dance"))

    assert telegram_client.messages[-1][1].startswith("Unknown command.")


def test_webhook_photo_acknowledges_and_prompts_weight(
    container, telegram_client: FakeTelegramClient
) -> None:
    client = TestClient(create_app(container))
    photos = [
        {"file_id": "small", "file_unique_id": "s", "width": 64, "height": 64},
        {"file_id": "large", "file_unique_id": "l", "width": 256, "height": 256},
    ]

    response = client.post("/telegram/webhook", json=_update(1, photo=photos))

    assert response.status_code == 200
    texts = [text for _, text in telegram_client.messages]
    assert texts[0].startswith("I received your screenshot.")
    assert texts[1] == "Enter your weight in kg (for example: 75.5)"


def test_webhook_cancel_and_stats_commands(
    container, telegram_client: FakeTelegramClient
) -> None:
    client = TestClient(create_app(container))

    _post_texts(client, "/report", "/cancel", "/stats", "/help")

    texts = [text for _, text in telegram_client.messages]
    assert texts[1] == "Report cancelled."
    assert texts[2] == "No reports in the last 30 days yet."
    assert texts[3].startswith("📚 SlimFit Bot help")


def test_webhook_fatsecret_command_shows_diary(
    container, telegram_client: FakeTelegramClient
) -> None:
    client = TestClient(create_app(container))

    client.post("/telegram/webhook", json=_update(1, "/fatsecret"))

    texts = [text for _, text in telegram_client.messages]
    assert texts[0] == "🔍 Importing from FatSecret..."
    assert texts[1].startswith("📊 FatSecret food diary:")
    assert "🌞 Lunch" in texts[1]


def test_webhook_fatsecret_week_argument(
    container, telegram_client: FakeTelegramClient
) -> None:
    client = TestClient(create_app(container))

    client.post("/telegram/webhook", json=_update(1, "/fatsecret week"))

    texts = [text for _, text in telegram_client.messages]
    assert texts[0] == "🔍 Importing the week from FatSecret..."
    assert texts[1].startswith("📊 Weekly FatSecret summary:")


def test_webhook_ignores_updates_without_message(
    container, telegram_client: FakeTelegramClient
) -> None:
    client = TestClient(create_app(container))

    response = client.post("/telegram/webhook", json={"update_id": 5})

    assert response.status_code == 200
    assert telegram_client.messages == []


def test_startup_syncs_bot_commands(
    container, telegram_client: FakeTelegramClient
) -> None:
    with TestClient(create_app(container)) as client:
        assert client.get("/health").json() == {"status": "ok"}

    assert telegram_client.commands is not None
    assert telegram_client.commands[0]["command"] == "start"
    assert telegram_client.menu_button == {"type": "commands"}
