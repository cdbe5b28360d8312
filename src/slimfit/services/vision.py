"""Meal photo analysis using LLM vision."""

import base64
import logging
from dataclasses import dataclass
from typing import Protocol

from slimfit.domain.reports import Meal
from slimfit.domain.vision import MealEstimate
from slimfit.services.aggregation import MACRO_FIELDS

MEAL_IMAGE_SCHEMA: dict[str, object] = {
    "type": "object",
    "properties": {
        "name": {"type": "string"},
        "calories": {"type": "number", "minimum": 0},
        "protein": {"type": "number", "minimum": 0},
        "carbs": {"type": "number", "minimum": 0},
        "fat": {"type": "number", "minimum": 0},
        "fiber": {"type": "number", "minimum": 0},
        "sugar": {"type": "number", "minimum": 0},
        "sodium": {"type": "number", "minimum": 0},
        "confidence": {"type": "number", "minimum": 0.0, "maximum": 1.0},
    },
    "required": [
        "name",
        "calories",
        "protein",
        "carbs",
        "fat",
        "fiber",
        "sugar",
        "sodium",
        "confidence",
    ],
    "additionalProperties": False,
}

_logger = logging.getLogger(__name__)


class VisionClient(Protocol):
    """Interface for LLM vision extraction."""

    async def extract(
        self,
        *,
        model: str,
        store: bool,
        image_url: str,
        schema: dict[str, object],
        prompt: str,
    ) -> dict[str, object]:
        """Return structured vision extraction data."""


@dataclass
class MealImageService:
    """Fill in the macros of meals logged from a photo."""

    client: VisionClient
    model: str
    store: bool
    enabled: bool = True

    async def estimate(self, meal: Meal) -> MealEstimate:
        """Estimate nutrition for the meal's image via the configured client."""
        if not meal.image_ref:
            raise ValueError("Meal has no image")
        prompt = (
            f"Identify the food in this {meal.type.value} photo and estimate the "
            "whole portion: calories (kcal), protein, carbs, fat, fiber and sugar "
            "in grams, sodium in milligrams, and your confidence (0-1)."
        )
        raw = await self.client.extract(
            model=self.model,
            store=self.store,
            image_url=_image_url(meal.image_ref),
            schema=MEAL_IMAGE_SCHEMA,
            prompt=prompt,
        )
        return MealEstimate.model_validate(raw)

    async def enrich_meals(self, meals: list[Meal]) -> list[Meal]:
        """Apply estimates to image meals; meals that fail keep their values."""
        if not self.enabled:
            return meals
        enriched: list[Meal] = []
        for meal in meals:
            if meal.source != "image" or not meal.image_ref:
                enriched.append(meal)
                continue
            try:
                estimate = await self.estimate(meal)
            except Exception:
                _logger.exception(
                    "Meal image analysis failed", extra={"meal_id": str(meal.id)}
                )
                enriched.append(meal)
                continue
            enriched.append(_apply(meal, estimate))
        return enriched


def _apply(meal: Meal, estimate: MealEstimate) -> Meal:
    """Overwrite macros with non-zero estimates; keep a name the user gave."""
    update: dict[str, object] = {
        name: getattr(estimate, name)
        for name in MACRO_FIELDS
        if getattr(estimate, name) > 0
    }
    if not meal.name:
        update["name"] = estimate.name
    return meal.model_copy(update=update)


def _image_url(image_ref: str) -> str:
    """Pass URLs through; treat anything else as base64 image bytes."""
    if image_ref.startswith(("data:", "http://", "https://")):
        return image_ref
    return _to_data_url(base64.b64decode(image_ref, validate=True))


def _to_data_url(image_bytes: bytes) -> str:
    """Convert bytes to a base64 data URL for image input."""
    mime_type = _detect_mime_type(image_bytes)
    encoded = base64.b64encode(image_bytes).decode("utf-8")
    return f"data:{mime_type};base64,{encoded}"


def _detect_mime_type(image_bytes: bytes) -> str:
    """Infer a basic image MIME type from file signatures."""
    if image_bytes.startswith(b"\xff\xd8\xff"):
        return "image/jpeg"
    if image_bytes.startswith(b"\x89PNG\r\n\x1a\n"):
        return "image/png"
    if image_bytes[:4] == b"RIFF" and image_bytes[8:12] == b"WEBP":
        return "image/webp"
    return "image/jpeg"
