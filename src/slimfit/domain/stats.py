"""Domain models for report statistics."""

from dataclasses import dataclass
from datetime import date


@dataclass(frozen=True)
class ReportStats:
    """Averages and trends across a range of daily reports."""

    start: date
    end: date
    days: int
    total_reports: int
    average_weight: float
    average_calories: float
    average_steps: float
    average_sleep: float
    average_mood: float
    weight_trend: str
    most_common_meal_type: str | None
    total_meals: int
