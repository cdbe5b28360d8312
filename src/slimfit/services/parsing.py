"""Free-text parsers for daily report fields.

Every parser returns a validated value or ``None``; ordinary malformed input
never raises.
"""

import logging
import re
from dataclasses import dataclass, field

from pydantic import ValidationError

from slimfit.domain.reports import (
    Meal,
    MealType,
    MoodEntry,
    ReportDraft,
    SleepEntry,
    StepsEntry,
    TrainingEntry,
    WeightEntry,
)
from slimfit.services import locales
from slimfit.services.locales import LocaleTable

MIN_CALORIES = 1
MAX_CALORIES = 10000
MINUTES_PER_HOUR = 60

_DECIMAL = r"(\d+(?:[.,]\d+)?)"
_CLOCK_RE = re.compile(r"^(\d{1,2}):(\d{2})$")
_DECIMAL_RE = re.compile(rf"^{_DECIMAL}$")
_INTEGER_RE = re.compile(r"^\d+$")

_logger = logging.getLogger(__name__)


def _to_float(raw: str) -> float:
    return float(raw.replace(",", "."))


@dataclass(frozen=True)
class ReportParser:
    """Parsers for each report field, driven by locale keyword tables."""

    training_types: LocaleTable = locales.TRAINING_TYPES
    moods: LocaleTable = locales.MOODS
    report_keys: LocaleTable = locales.REPORT_KEYS
    control_tokens: LocaleTable = locales.CONTROL_TOKENS
    hours_keywords: tuple[str, ...] = locales.HOURS_KEYWORDS
    weight_units: tuple[str, ...] = locales.WEIGHT_UNITS
    calorie_units: tuple[str, ...] = locales.CALORIE_UNITS
    _patterns: dict[str, re.Pattern[str]] = field(init=False, repr=False)

    def __post_init__(self) -> None:
        hours = "|".join(
            re.escape(word) for word in sorted(self.hours_keywords, key=len, reverse=True)
        )
        units = "|".join(re.escape(unit) for unit in self.weight_units)
        calorie_units = "|".join(
            re.escape(unit) for unit in sorted(self.calorie_units, key=len, reverse=True)
        )
        object.__setattr__(
            self,
            "_patterns",
            {
                "sleep_hours": re.compile(rf"^{_DECIMAL}\s*(?:{hours})\.?$"),
                "weight": re.compile(rf"^{_DECIMAL}\s*(?:{units})?\.?$"),
                "calories": re.compile(rf"^(\d+)(?:{calorie_units})?\.?$"),
            },
        )

    def parse_weight(self, text: str) -> WeightEntry | None:
        """Parse a weight in kilograms, e.g. ``75.5`` or ``75,5 кг``."""
        match = self._patterns["weight"].match(text.strip().lower())
        if not match:
            return None
        try:
            return WeightEntry(value=_to_float(match.group(1)))
        except ValidationError:
            return None

    def parse_steps(self, text: str) -> StepsEntry | None:
        """Parse a whole step count; spaces between digit groups are allowed."""
        cleaned = "".join(text.split())
        if not _INTEGER_RE.match(cleaned):
            return None
        try:
            return StepsEntry(count=int(cleaned))
        except ValidationError:
            return None

    def parse_sleep(self, text: str) -> SleepEntry | None:
        """Parse sleep as ``H:MM``, decimal hours, or hours with a keyword."""
        cleaned = " ".join(text.strip().lower().split())
        hours: float | None = None
        clock = _CLOCK_RE.match(cleaned)
        if clock:
            minutes = int(clock.group(2))
            if minutes >= MINUTES_PER_HOUR:
                return None
            hours = int(clock.group(1)) + minutes / MINUTES_PER_HOUR
        else:
            match = _DECIMAL_RE.match(cleaned) or self._patterns["sleep_hours"].match(
                cleaned
            )
            if match:
                hours = _to_float(match.group(1))
        if hours is None:
            return None
        try:
            return SleepEntry(duration=hours)
        except ValidationError:
            return None

    def parse_calories(self, text: str) -> int | None:
        """Parse a daily calorie count between 1 and 10000, e.g. ``2000 ккал``."""
        match = self._patterns["calories"].match("".join(text.lower().split()))
        if not match:
            return None
        value = int(match.group(1))
        if value < MIN_CALORIES or value > MAX_CALORIES:
            return None
        return value

    def parse_training(self, text: str) -> TrainingEntry | None:
        """Match a training type against the keyword table."""
        canonical = self.training_types.lookup(text)
        if canonical is None:
            return None
        try:
            return TrainingEntry(type=canonical)
        except ValidationError:
            return None

    def parse_mood(self, text: str) -> MoodEntry | None:
        """Match a mood against the keyword table."""
        canonical = self.moods.lookup(text)
        if canonical is None:
            return None
        try:
            return MoodEntry(value=canonical)
        except ValidationError:
            return None

    def calories_meal(self, calories: int) -> Meal:
        """Wrap a manually entered calorie count as a single meal."""
        return Meal(type=MealType.OTHER, calories=float(calories), source="manual")

    def parse_report(self, text: str) -> ReportDraft:
        """Parse a multi-line ``key: value`` report into a draft.

        Unknown keys and unparsable values are ignored.
        """
        values: dict[str, object] = {}
        for line in text.splitlines():
            key, sep, raw_value = line.partition(":")
            raw_value = raw_value.strip()
            if not sep or not key.strip() or not raw_value:
                continue
            field_name = self.report_keys.lookup(key)
            if field_name is None:
                _logger.debug("Ignoring unknown report key: %s", key.strip())
                continue
            parsed = self._parse_field(field_name, raw_value)
            if parsed is not None:
                values["meals" if field_name == "calories" else field_name] = parsed
        return ReportDraft(**values)

    def _parse_field(self, field_name: str, raw_value: str) -> object | None:
        if field_name == "weight":
            return self.parse_weight(raw_value)
        if field_name == "steps":
            return self.parse_steps(raw_value)
        if field_name == "sleep":
            return self.parse_sleep(raw_value)
        if field_name == "calories":
            calories = self.parse_calories(raw_value)
            return [self.calories_meal(calories)] if calories is not None else None
        if field_name == "training":
            return self.parse_training(raw_value)
        if field_name == "mood":
            return self.parse_mood(raw_value)
        if field_name == "comments":
            return raw_value
        return None

    def is_skip(self, text: str) -> bool:
        """Return true for an explicit skip token."""
        return self.control_tokens.matches(text, "skip")

    def is_cancel(self, text: str) -> bool:
        """Return true for an explicit cancel token."""
        return self.control_tokens.matches(text, "cancel")

    def is_finish(self, text: str) -> bool:
        """Return true for the finish-without-comments token."""
        return self.control_tokens.matches(text, "finish")

    def is_diary_import(self, text: str) -> bool:
        """Return true for the diary import button."""
        return self.control_tokens.matches(text, "diary_import")
