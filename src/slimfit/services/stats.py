"""Statistics computed over stored daily reports."""

from collections import Counter
from dataclasses import dataclass
from datetime import date, timedelta
from uuid import UUID

from slimfit.domain.reports import DailyReport, Mood
from slimfit.domain.stats import ReportStats
from slimfit.services.reports import ReportRepository

MOOD_SCORES = {
    Mood.TERRIBLE: 1,
    Mood.BAD: 2,
    Mood.NEUTRAL: 3,
    Mood.GOOD: 4,
    Mood.EXCELLENT: 5,
}
WEIGHT_TREND_THRESHOLD_KG = 1.0
MAX_REPORTS = 1000


@dataclass
class StatsService:
    """Service for report statistics."""

    repository: ReportRepository

    def summary(
        self, user_id: UUID, days: int = 30, today: date | None = None
    ) -> ReportStats:
        """Summarize the reports of the last ``days`` days."""
        end = today or date.today()
        start = end - timedelta(days=days)
        reports = self.repository.list_reports(user_id, start, end, MAX_REPORTS, 0)
        return summarize(reports, start=start, end=end, days=days)


def summarize(
    reports: list[DailyReport], *, start: date, end: date, days: int
) -> ReportStats:
    """Compute averages and trends for a list of reports."""
    ordered = sorted(reports, key=lambda report: report.report_date)
    weights = [report.weight.value for report in ordered if report.weight]
    calories = [
        report.total_nutrition.calories
        for report in ordered
        if report.total_nutrition.calories > 0
    ]
    steps = [float(report.steps.count) for report in ordered if report.steps]
    sleep = [report.sleep.duration for report in ordered if report.sleep]
    moods = [float(MOOD_SCORES[report.mood.value]) for report in ordered if report.mood]
    meal_types = Counter(meal.type.value for report in ordered for meal in report.meals)
    most_common = meal_types.most_common(1)
    return ReportStats(
        start=start,
        end=end,
        days=days,
        total_reports=len(ordered),
        average_weight=_average(weights),
        average_calories=_average(calories),
        average_steps=_average(steps),
        average_sleep=_average(sleep),
        average_mood=_average(moods),
        weight_trend=_weight_trend(weights),
        most_common_meal_type=most_common[0][0] if most_common else None,
        total_meals=sum(meal_types.values()),
    )


def _average(values: list[float]) -> float:
    if not values:
        return 0.0
    return sum(values) / len(values)


def _weight_trend(weights: list[float]) -> str:
    """Compare the oldest and newest weights in chronological order."""
    if len(weights) < 2:  # noqa: PLR2004
        return "stable"
    difference = weights[-1] - weights[0]
    if difference > WEIGHT_TREND_THRESHOLD_KG:
        return "increasing"
    if difference < -WEIGHT_TREND_THRESHOLD_KG:
        return "decreasing"
    return "stable"
