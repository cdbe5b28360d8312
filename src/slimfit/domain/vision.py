"""Models for meal photo estimates."""

from pydantic import BaseModel, Field


class MealEstimate(BaseModel):
    """Nutrition estimated from one meal photo."""

    name: str
    calories: float = Field(ge=0)
    protein: float = Field(ge=0)
    carbs: float = Field(ge=0)
    fat: float = Field(ge=0)
    fiber: float = Field(default=0.0, ge=0)
    sugar: float = Field(default=0.0, ge=0)
    sodium: float = Field(default=0.0, ge=0)
    confidence: float = Field(ge=0.0, le=1.0)
