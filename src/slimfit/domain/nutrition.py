"""Nutrition diary domain models."""

from dataclasses import dataclass, field

from slimfit.domain.reports import Meal, MealType

_MEAL_SLOTS = {
    "breakfast": MealType.BREAKFAST,
    "lunch": MealType.LUNCH,
    "dinner": MealType.DINNER,
    "snack": MealType.SNACK,
    "snacks": MealType.SNACK,
    "other": MealType.OTHER,
}


@dataclass(frozen=True)
class DiaryEntry:
    """Normalized food entry from a nutrition diary or food search."""

    name: str
    serving: str
    quantity: float
    calories: float
    protein: float
    carbs: float
    fat: float
    fiber: float = 0.0
    sugar: float = 0.0
    sodium: float = 0.0
    meal: str | None = None
    brand: str | None = None

    def to_meal(self) -> Meal:
        """Convert the entry into a report meal tagged as a lookup result."""
        return Meal(
            type=_MEAL_SLOTS.get((self.meal or "other").lower(), MealType.OTHER),
            name=self.name,
            serving=self.serving,
            quantity=self.quantity,
            calories=self.calories,
            protein=self.protein,
            carbs=self.carbs,
            fat=self.fat,
            fiber=self.fiber,
            sugar=self.sugar,
            sodium=self.sodium,
            source="fatsecret",
        )


@dataclass(frozen=True)
class DiaryNutrition:
    """Entries returned by the diary gateway."""

    entries: list[DiaryEntry] = field(default_factory=list)

    def to_meals(self) -> list[Meal]:
        """Return the entries as report meals."""
        return [entry.to_meal() for entry in self.entries]
