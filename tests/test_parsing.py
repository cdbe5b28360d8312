"""Tests for report field parsers."""

import pytest

from slimfit.domain.reports import Mood, TrainingType
from slimfit.services.parsing import ReportParser


@pytest.fixture
def parser() -> ReportParser:
    return ReportParser()


@pytest.mark.parametrize(
    ("text", "expected"),
    [("75.5", 75.5), ("75,5", 75.5), ("80", 80.0), ("20", 20.0), ("300", 300.0)],
)
def test_parse_weight_accepts_dot_and_comma(
    parser: ReportParser, text: str, expected: float
) -> None:
    weight = parser.parse_weight(text)

    assert weight is not None
    assert weight.value == expected
    assert weight.unit == "kg"


def test_parse_weight_accepts_unit_suffix(parser: ReportParser) -> None:
    assert parser.parse_weight("72,3 кг").value == 72.3
    assert parser.parse_weight("72.3kg").value == 72.3


@pytest.mark.parametrize("text", ["19.9", "300.1", "abc", "", "-70", "75.5.1"])
def test_parse_weight_rejects_invalid(parser: ReportParser, text: str) -> None:
    assert parser.parse_weight(text) is None


def test_parse_steps(parser: ReportParser) -> None:
    assert parser.parse_steps("8000").count == 8000
    assert parser.parse_steps("12 345").count == 12345
    assert parser.parse_steps("0").count == 0
    assert parser.parse_steps("100001") is None
    assert parser.parse_steps("-5") is None
    assert parser.parse_steps("8k") is None


@pytest.mark.parametrize(
    ("text", "expected"),
    [
        ("7:30", 7.5),
        ("8", 8.0),
        ("7.5", 7.5),
        ("6,5", 6.5),
        ("7 годин", 7.0),
        ("8 hours", 8.0),
        ("7.5h", 7.5),
    ],
)
def test_parse_sleep_forms(parser: ReportParser, text: str, expected: float) -> None:
    sleep = parser.parse_sleep(text)

    assert sleep is not None
    assert sleep.duration == pytest.approx(expected)


@pytest.mark.parametrize("text", ["7:75", "25", "a lot", "7 minutes"])
def test_parse_sleep_rejects_invalid(parser: ReportParser, text: str) -> None:
    assert parser.parse_sleep(text) is None


def test_parse_calories_bounds(parser: ReportParser) -> None:
    assert parser.parse_calories("2000") == 2000
    assert parser.parse_calories("1") == 1
    assert parser.parse_calories("0") is None
    assert parser.parse_calories("10001") is None
    assert parser.parse_calories("two thousand") is None


@pytest.mark.parametrize(
    ("text", "expected"),
    [
        ("2000 kcal", 2000),
        ("2000 ккал", 2000),
        ("1800kcal", 1800),
        ("2 000", 2000),
        ("1500 cal.", 1500),
    ],
)
def test_parse_calories_accepts_units(
    parser: ReportParser, text: str, expected: int
) -> None:
    assert parser.parse_calories(text) == expected


def test_parse_calories_rejects_unknown_unit(parser: ReportParser) -> None:
    assert parser.parse_calories("2000 kg") is None


def test_parse_training_matches_both_languages(parser: ReportParser) -> None:
    assert parser.parse_training("🏃 Біг").type is TrainingType.RUNNING
    assert parser.parse_training("Swimming").type is TrainingType.SWIMMING
    assert parser.parse_training("yoga") is None


def test_parse_training_defaults(parser: ReportParser) -> None:
    training = parser.parse_training("gym")

    assert training.duration == 30
    assert training.intensity == "medium"


def test_parse_mood(parser: ReportParser) -> None:
    assert parser.parse_mood("😢 Дуже погано").value is Mood.TERRIBLE
    assert parser.parse_mood("good").value is Mood.GOOD
    assert parser.parse_mood("meh") is None


def test_control_tokens(parser: ReportParser) -> None:
    assert parser.is_skip("❌ Пропустити")
    assert parser.is_skip("skip")
    assert parser.is_cancel("❌ Скасувати")
    assert parser.is_finish("✅ Завершити без коментарів")
    assert parser.is_diary_import("📱 Імпорт з FatSecret")
    assert not parser.is_skip("done")


def test_parse_report_multiline(parser: ReportParser) -> None:
    draft = parser.parse_report(
        "Вага: 80,2\nsteps: 9 500\nСон: 7:15\nкалорії: 1800\n"
        "mood: good\nunknown: 1\nКоментарі: легкий день"
    )

    assert draft.weight.value == 80.2
    assert draft.steps.count == 9500
    assert draft.sleep.duration == pytest.approx(7.25)
    assert draft.meals[0].calories == 1800
    assert draft.mood.value is Mood.GOOD
    assert draft.training is None
    assert draft.comments == "легкий день"


def test_parse_report_ignores_bad_values(parser: ReportParser) -> None:
    draft = parser.parse_report("weight: heavy\nsteps: 100")

    assert draft.weight is None
    assert draft.steps.count == 100
