"""Daily report models."""

from datetime import date, datetime
from enum import Enum
from typing import Literal
from uuid import UUID, uuid4

from pydantic import BaseModel, Field

EntrySource = Literal["manual", "garmin", "screenshot"]
MealSource = Literal["manual", "fatsecret", "image"]


class MealType(str, Enum):
    """Meal slot within a day."""

    BREAKFAST = "breakfast"
    LUNCH = "lunch"
    DINNER = "dinner"
    SNACK = "snack"
    OTHER = "other"


class TrainingType(str, Enum):
    """Supported training types."""

    RUNNING = "running"
    CYCLING = "cycling"
    GYM = "gym"
    SWIMMING = "swimming"
    WALKING = "walking"
    OTHER = "other"


class Mood(str, Enum):
    """Self-reported mood."""

    EXCELLENT = "excellent"
    GOOD = "good"
    NEUTRAL = "neutral"
    BAD = "bad"
    TERRIBLE = "terrible"


class WeightEntry(BaseModel):
    """Body weight in kilograms."""

    value: float = Field(ge=20, le=300)
    unit: Literal["kg"] = "kg"
    source: EntrySource = "manual"


class StepsEntry(BaseModel):
    """Daily step count."""

    count: int = Field(ge=0, le=100000)
    source: EntrySource = "manual"


class SleepEntry(BaseModel):
    """Sleep duration in hours."""

    duration: float = Field(ge=0, le=24)
    quality: Literal["poor", "fair", "good", "excellent"] = "fair"
    source: EntrySource = "manual"


class TrainingEntry(BaseModel):
    """Training session summary."""

    type: TrainingType
    duration: int = Field(default=30, ge=0, le=480)
    intensity: Literal["low", "medium", "high"] = "medium"
    source: EntrySource = "manual"


class MoodEntry(BaseModel):
    """Mood rating."""

    value: Mood


class Meal(BaseModel):
    """Single meal or food entry with macros."""

    id: UUID = Field(default_factory=uuid4)
    type: MealType = MealType.OTHER
    name: str | None = None
    serving: str | None = None
    quantity: float | None = Field(default=None, ge=0)
    calories: float = Field(default=0.0, ge=0)
    protein: float = Field(default=0.0, ge=0)
    carbs: float = Field(default=0.0, ge=0)
    fat: float = Field(default=0.0, ge=0)
    fiber: float = Field(default=0.0, ge=0)
    sugar: float = Field(default=0.0, ge=0)
    sodium: float = Field(default=0.0, ge=0)
    source: MealSource = "manual"
    image_ref: str | None = None


class NutritionTotals(BaseModel):
    """Summed macros across a report's meals."""

    calories: float = 0.0
    protein: float = 0.0
    carbs: float = 0.0
    fat: float = 0.0
    fiber: float = 0.0
    sugar: float = 0.0
    sodium: float = 0.0


class AiFeedback(BaseModel):
    """AI-generated feedback attached to a saved report."""

    summary: str
    recommendations: list[str] = Field(default_factory=list)
    health_score: int | None = Field(default=None, ge=0, le=100)
    goals: list[str] = Field(default_factory=list)
    warnings: list[str] = Field(default_factory=list)
    analyzed_at: datetime | None = None


class ReportDraft(BaseModel):
    """Partially collected report, built up one dialogue step at a time."""

    weight: WeightEntry | None = None
    steps: StepsEntry | None = None
    sleep: SleepEntry | None = None
    meals: list[Meal] | None = None
    training: TrainingEntry | None = None
    mood: MoodEntry | None = None
    comments: str | None = None

    def merge(self, update: "ReportDraft") -> "ReportDraft":
        """Return a new draft with the set fields of ``update`` applied."""
        values = {
            name: getattr(update, name)
            for name in type(self).model_fields
            if getattr(update, name) is not None
        }
        return self.model_copy(update=values)


class DailyReport(BaseModel):
    """Finalized daily report, unique per user and date."""

    user_id: UUID
    report_date: date
    weight: WeightEntry | None = None
    steps: StepsEntry | None = None
    sleep: SleepEntry | None = None
    training: TrainingEntry | None = None
    mood: MoodEntry | None = None
    meals: list[Meal] = Field(default_factory=list)
    total_nutrition: NutritionTotals = Field(default_factory=NutritionTotals)
    comments: str | None = None
    ai_feedback: AiFeedback | None = None
    created_at: datetime | None = None
    updated_at: datetime | None = None
