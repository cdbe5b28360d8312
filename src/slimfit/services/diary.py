"""Nutrition lookups backed by the FatSecret diary and food search."""

import asyncio
import logging
import re
from dataclasses import dataclass
from datetime import date
from typing import TYPE_CHECKING, Protocol

from slimfit.domain.models import UserRecord
from slimfit.domain.nutrition import DiaryEntry, DiaryNutrition
from slimfit.services.cache import Cache
from slimfit.services.users import UserService

if TYPE_CHECKING:
    from collections.abc import Awaitable, Callable

_ITEM_SPLIT_RE = re.compile(r"[,\n;]")
_QUANTITY_RE = re.compile(r"^(\d+(?:[.,]\d+)?)\s*(?:x|×|шт\.?|pcs)?\s+(.+)$", re.IGNORECASE)
MIN_ITEM_LENGTH = 3

_logger = logging.getLogger(__name__)


class DiaryError(Exception):
    """Raised when nutrition data cannot be obtained.

    ``reason`` is a short code (``unavailable``, ``empty`` or ``not_found``)
    used to pick the localized message.
    """

    def __init__(self, reason: str, message: str | None = None) -> None:
        super().__init__(message or reason)
        self.reason = reason


class FatSecretClient(Protocol):
    """Interface for FatSecret REST API interactions."""

    async def create_profile(self, user_key: str) -> dict[str, object]:
        """Create a FatSecret profile and return the raw payload."""

    async def get_food_entries(
        self, day: date, auth_token: str, auth_secret: str
    ) -> dict[str, object]:
        """Return the raw diary payload for one day."""

    async def search_foods(self, query: str, max_results: int = 10) -> dict[str, object]:
        """Search foods and return the raw payload."""

    async def get_food(self, food_id: str) -> dict[str, object]:
        """Fetch a food with its servings."""


@dataclass(frozen=True)
class FoodItem:
    """One item of a free-text food list."""

    name: str
    quantity: float = 1.0


@dataclass
class DiaryService:
    """Service for diary imports and food lookups with caching."""

    client: FatSecretClient
    user_service: UserService
    cache: Cache
    food_ttl_seconds: int = 86400
    retry_attempts: int = 1
    retry_delay_seconds: float = 0.3

    async def ensure_profile(self, user: UserRecord) -> UserRecord:
        """Create a FatSecret profile for the user when none is stored."""
        if user.has_fatsecret_profile:
            return user
        try:
            payload = await self.client.create_profile(user.telegram_user_id)
        except Exception as exc:
            _logger.exception(
                "FatSecret profile creation failed", extra={"user_id": str(user.id)}
            )
            raise DiaryError("unavailable", "FatSecret profile creation failed") from exc
        profile = payload.get("profile")
        if not isinstance(profile, dict):
            raise DiaryError("unavailable", "Invalid FatSecret profile response")
        token = profile.get("auth_token")
        secret = profile.get("auth_secret")
        if not token or not secret:
            raise DiaryError("unavailable", "FatSecret profile tokens missing")
        _logger.info("FatSecret profile created", extra={"user_id": str(user.id)})
        return self.user_service.store_fatsecret_tokens(user, str(token), str(secret))

    async def fetch_diary_nutrition(self, user: UserRecord, day: date) -> DiaryNutrition:
        """Return the user's FatSecret diary entries for a day."""
        profiled = await self.ensure_profile(user)
        try:
            payload = await self._call_with_retry(
                lambda: self.client.get_food_entries(
                    day,
                    str(profiled.fatsecret_auth_token),
                    str(profiled.fatsecret_auth_secret),
                ),
                action="food_entries.get",
            )
        except Exception as exc:
            _logger.exception(
                "FatSecret diary import failed",
                extra={"user_id": str(user.id), "day": day.isoformat()},
            )
            raise DiaryError("unavailable", "FatSecret diary request failed") from exc
        entries = [_diary_entry(row) for row in _as_list(payload, "food_entries", "food_entry")]
        if not entries:
            raise DiaryError("empty", f"No diary entries for {day.isoformat()}")
        return DiaryNutrition(entries=entries)

    async def lookup_foods(self, text: str) -> DiaryNutrition:
        """Resolve a free-text food list through FatSecret search."""
        items = split_food_items(text)
        entries: list[DiaryEntry] = []
        for item in items:
            try:
                unit = await self._lookup_unit(item.name)
            except Exception as exc:
                _logger.exception("FatSecret food lookup failed", extra={"query": item.name})
                raise DiaryError("unavailable", "FatSecret food lookup failed") from exc
            if unit is None:
                _logger.info("No FatSecret match", extra={"query": item.name})
                continue
            entries.append(_scaled(unit, item.quantity))
        if not entries:
            raise DiaryError("not_found", "No foods matched")
        return DiaryNutrition(entries=entries)

    async def _lookup_unit(self, name: str) -> DiaryEntry | None:
        """Return the first serving of the best match for one unit of food."""
        cache_key = f"fatsecret:food:{name.lower()}"
        cached = self.cache.get(cache_key)
        if isinstance(cached, DiaryEntry):
            return cached

        search = await self._call_with_retry(
            lambda: self.client.search_foods(name), action="foods.search"
        )
        foods = _as_list(search, "foods", "food")
        if not foods:
            return None
        food_id = str(foods[0].get("food_id", ""))
        if not food_id:
            return None
        details = await self._call_with_retry(
            lambda: self.client.get_food(food_id), action=f"food.get:{food_id}"
        )
        food = details.get("food")
        if not isinstance(food, dict):
            return None
        servings = _as_list(food, "servings", "serving")
        if not servings:
            return None
        serving = servings[0]
        unit = DiaryEntry(
            name=str(food.get("food_name") or name),
            serving=str(serving.get("serving_description") or ""),
            quantity=1.0,
            calories=_number(serving.get("calories")),
            protein=_number(serving.get("protein")),
            carbs=_number(serving.get("carbohydrate")),
            fat=_number(serving.get("fat")),
            fiber=_number(serving.get("fiber")),
            sugar=_number(serving.get("sugar")),
            sodium=_number(serving.get("sodium")),
            brand=str(food["brand_name"]) if food.get("brand_name") else None,
        )
        self.cache.set(cache_key, unit, ttl_seconds=self.food_ttl_seconds)
        return unit

    async def _call_with_retry(
        self, func: "Callable[[], Awaitable[dict[str, object]]]", *, action: str
    ) -> dict[str, object]:
        """Call an async function with a short retry."""
        attempt = 0
        while True:
            try:
                return await func()
            except Exception as exc:
                attempt += 1
                _logger.warning(
                    "FatSecret %s failed (attempt %s/%s): %s",
                    action,
                    attempt,
                    self.retry_attempts + 1,
                    exc,
                )
                if attempt > self.retry_attempts:
                    raise
                await asyncio.sleep(self.retry_delay_seconds)


def split_food_items(text: str) -> list[FoodItem]:
    """Split a food list on commas or new lines, reading leading quantities."""
    items: list[FoodItem] = []
    for chunk in _ITEM_SPLIT_RE.split(text):
        cleaned = " ".join(chunk.split())
        if len(cleaned) < MIN_ITEM_LENGTH:
            continue
        match = _QUANTITY_RE.match(cleaned)
        if match:
            quantity = float(match.group(1).replace(",", "."))
            if quantity > 0:
                items.append(FoodItem(name=match.group(2), quantity=quantity))
                continue
        items.append(FoodItem(name=cleaned))
    return items


def _as_list(payload: object, outer: str, inner: str) -> list[dict[str, object]]:
    """Unwrap FatSecret's single-object-or-list collections."""
    if not isinstance(payload, dict):
        return []
    container = payload.get(outer)
    if not isinstance(container, dict):
        return []
    value = container.get(inner)
    if isinstance(value, dict):
        return [value]
    if isinstance(value, list):
        return [row for row in value if isinstance(row, dict)]
    return []


def _number(value: object) -> float:
    """Parse FatSecret numeric strings; blanks and junk count as zero."""
    if value is None or value == "":
        return 0.0
    try:
        return max(float(str(value)), 0.0)
    except ValueError:
        return 0.0


def _diary_entry(row: dict[str, object]) -> DiaryEntry:
    return DiaryEntry(
        name=str(row.get("food_entry_name") or ""),
        serving=str(row.get("food_entry_description") or ""),
        quantity=_number(row.get("number_of_units")) or 1.0,
        calories=_number(row.get("calories")),
        protein=_number(row.get("protein")),
        carbs=_number(row.get("carbohydrate")),
        fat=_number(row.get("fat")),
        fiber=_number(row.get("fiber")),
        sugar=_number(row.get("sugar")),
        sodium=_number(row.get("sodium")),
        meal=str(row["meal"]) if row.get("meal") else None,
    )


def _scaled(unit: DiaryEntry, quantity: float) -> DiaryEntry:
    return DiaryEntry(
        name=unit.name,
        serving=unit.serving,
        quantity=quantity,
        calories=unit.calories * quantity,
        protein=unit.protein * quantity,
        carbs=unit.carbs * quantity,
        fat=unit.fat * quantity,
        fiber=unit.fiber * quantity,
        sugar=unit.sugar * quantity,
        sodium=unit.sodium * quantity,
        brand=unit.brand,
    )
