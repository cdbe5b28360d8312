"""Tests for meal photo estimates."""

import asyncio

from slimfit.domain.reports import Meal, MealType
from slimfit.services.vision import MealImageService
from tests.conftest import FakeVisionClient

JPEG_BASE64 = "/9j/4AAQSkZJRg=="


def test_enrich_skips_meals_without_images(
    meal_image_service: MealImageService, vision_client: FakeVisionClient
) -> None:
    meals = [Meal(calories=200), Meal(source="image", calories=100)]

    result = asyncio.run(meal_image_service.enrich_meals(meals))

    assert result == meals
    assert vision_client.image_urls == []


def test_enrich_keeps_user_name_and_zero_estimates(
    meal_image_service: MealImageService, vision_client: FakeVisionClient
) -> None:
    vision_client.payload = {**vision_client.payload, "fiber": 0, "calories": 410}
    meal = Meal(
        type=MealType.BREAKFAST,
        name="Porridge",
        fiber=5,
        source="image",
        image_ref=JPEG_BASE64,
    )

    (result,) = asyncio.run(meal_image_service.enrich_meals([meal]))

    assert result.id == meal.id
    assert result.name == "Porridge"
    assert result.calories == 410
    assert result.fiber == 5
    assert vision_client.image_urls[0].startswith("data:image/jpeg;base64,")
    assert "breakfast" in vision_client.prompts[0]


def test_enrich_keeps_meal_with_invalid_image(
    meal_image_service: MealImageService, vision_client: FakeVisionClient
) -> None:
    meal = Meal(source="image", image_ref="not base64!", calories=90)

    result = asyncio.run(meal_image_service.enrich_meals([meal]))

    assert result == [meal]
    assert vision_client.image_urls == []


def test_invalid_estimate_keeps_meal(
    meal_image_service: MealImageService, vision_client: FakeVisionClient
) -> None:
    vision_client.payload = {"name": "Cake", "calories": -5}
    meal = Meal(source="image", image_ref="https://img.test/cake.jpg", calories=300)

    result = asyncio.run(meal_image_service.enrich_meals([meal]))

    assert result == [meal]


def test_disabled_service_returns_meals_unchanged(
    vision_client: FakeVisionClient,
) -> None:
    service = MealImageService(
        client=vision_client, model="gpt-4.1-mini", store=False, enabled=False
    )
    meal = Meal(source="image", image_ref="https://img.test/a.jpg")

    assert asyncio.run(service.enrich_meals([meal])) == [meal]
    assert vision_client.image_urls == []
