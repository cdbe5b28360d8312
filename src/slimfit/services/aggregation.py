"""Nutrition totals aggregation."""

from collections.abc import Iterable

from slimfit.domain.reports import DailyReport, Meal, NutritionTotals

MACRO_FIELDS = ("calories", "protein", "carbs", "fat", "fiber", "sugar", "sodium")


def aggregate(meals: Iterable[Meal]) -> NutritionTotals:
    """Sum every macro field across meals; missing values count as zero."""
    totals = dict.fromkeys(MACRO_FIELDS, 0.0)
    for meal in meals:
        for name in MACRO_FIELDS:
            value = getattr(meal, name, None)
            if isinstance(value, int | float):
                totals[name] += float(value)
    return NutritionTotals(**totals)


def with_meals(report: DailyReport, meals: list[Meal]) -> DailyReport:
    """Return a copy of the report with new meals and freshly summed totals."""
    return report.model_copy(
        update={"meals": list(meals), "total_nutrition": aggregate(meals)}
    )
