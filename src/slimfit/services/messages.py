"""Telegram message texts and reply keyboards."""

from datetime import date

from slimfit.domain.conversation import ConversationState
from slimfit.domain.reports import Meal, MealType, Mood, TrainingType
from slimfit.domain.stats import ReportStats
from slimfit.services import locales
from slimfit.services.aggregation import aggregate

REMOVE_KEYBOARD: dict[str, object] = {"remove_keyboard": True}


def _keyboard(rows: list[list[str]]) -> dict[str, object]:
    return {
        "keyboard": [[{"text": label} for label in row] for row in rows],
        "resize_keyboard": True,
        "one_time_keyboard": True,
    }


def _pairs(labels: list[str]) -> list[list[str]]:
    return [labels[index : index + 2] for index in range(0, len(labels), 2)]


def step_keyboard(step: ConversationState, language: str) -> dict[str, object]:
    """Return the reply keyboard shown with a step prompt."""
    cancel = locales.text(language, "button.cancel")
    if step is ConversationState.CALORIES:
        return _keyboard([[locales.text(language, "button.diary_import")], [cancel]])
    if step is ConversationState.TRAINING:
        labels = [
            locales.text(language, f"button.training.{kind.value}")
            for kind in TrainingType
        ]
        skip = locales.text(language, "button.skip")
        return _keyboard([*_pairs(labels), [skip], [cancel]])
    if step is ConversationState.MOOD:
        labels = [locales.text(language, f"button.mood.{mood.value}") for mood in Mood]
        skip = locales.text(language, "button.skip")
        return _keyboard([*_pairs(labels), [skip], [cancel]])
    if step is ConversationState.COMMENTS:
        return _keyboard([[locales.text(language, "button.finish")], [cancel]])
    return _keyboard([[cancel]])


def format_meals(meals: list[Meal], language: str, header_key: str = "diary_header") -> str:
    """Group meals by slot and append the day's totals."""
    lines = [locales.text(language, header_key)]
    for meal_type in MealType:
        group = [meal for meal in meals if meal.type is meal_type]
        if not group:
            continue
        lines.append("")
        lines.append(locales.text(language, f"meal.{meal_type.value}"))
        for meal in group:
            label = meal.name or locales.text(language, f"meal.{meal_type.value}")
            serving = f" ({meal.serving})" if meal.serving else ""
            lines.append(f"• {label}{serving}: {meal.calories:.0f}")
    totals = aggregate(meals)
    lines.append("")
    lines.append(
        locales.text(
            language,
            "diary_total",
            calories=totals.calories,
            protein=totals.protein,
            carbs=totals.carbs,
            fat=totals.fat,
        )
    )
    return "\n".join(lines)


def format_stats(stats: ReportStats, language: str) -> str:
    """Render a statistics summary."""
    if stats.total_reports == 0:
        return locales.text(language, "stats_empty", days=stats.days)
    meal_type = (
        locales.text(language, f"meal.{stats.most_common_meal_type}")
        if stats.most_common_meal_type
        else locales.text(language, "stats_no_meals")
    )
    return locales.text(
        language,
        "stats",
        days=stats.days,
        total_reports=stats.total_reports,
        average_weight=stats.average_weight,
        weight_trend=locales.text(language, f"trend.{stats.weight_trend}"),
        average_calories=stats.average_calories,
        average_steps=stats.average_steps,
        average_sleep=stats.average_sleep,
        average_mood=stats.average_mood,
        most_common_meal_type=meal_type,
        total_meals=stats.total_meals,
    )


def format_week(days: list[tuple[date, list[Meal]]], language: str) -> str:
    """Render per-day calories and the daily average over days with entries."""
    if not days:
        return locales.text(language, "diary_week_empty")
    lines = [locales.text(language, "diary_week_header"), ""]
    totals = []
    for day, meals in days:
        day_totals = aggregate(meals)
        totals.append(day_totals)
        lines.append(
            locales.text(
                language,
                "diary_week_day",
                day=day.strftime("%d.%m"),
                calories=day_totals.calories,
            )
        )
    count = len(totals)
    lines.append("")
    lines.append(
        locales.text(
            language,
            "diary_week_average",
            calories=sum(item.calories for item in totals) / count,
            protein=sum(item.protein for item in totals) / count,
            carbs=sum(item.carbs for item in totals) / count,
            fat=sum(item.fat for item in totals) / count,
        )
    )
    return "\n".join(lines)
