"""Command handlers for Telegram updates outside the report dialogue."""

import logging
from collections.abc import Callable
from dataclasses import dataclass
from datetime import date, timedelta

from slimfit.adapters.telegram_client import TelegramClient
from slimfit.domain.models import UserRecord
from slimfit.domain.reports import Meal
from slimfit.services import locales
from slimfit.services.diary import DiaryError, DiaryService
from slimfit.services.messages import (
    REMOVE_KEYBOARD,
    format_meals,
    format_stats,
    format_week,
)
from slimfit.services.stats import StatsService

STATS_DAYS = 30
WEEK_DAYS = 7

_logger = logging.getLogger(__name__)


@dataclass
class StartCommandHandler:
    """Handle the /start and /help commands."""

    telegram_client: TelegramClient

    async def handle(self, user: UserRecord, chat_id: int) -> None:
        """Send a welcome message."""
        await self.telegram_client.send_message(
            chat_id=chat_id,
            text=locales.text(user.language, "start", name=user.display_name),
            reply_markup=REMOVE_KEYBOARD,
        )

    async def help(self, user: UserRecord, chat_id: int) -> None:
        """Send the command reference."""
        await self.telegram_client.send_message(
            chat_id=chat_id, text=locales.text(user.language, "help")
        )


@dataclass
class StatsCommandHandler:
    """Handle the /stats command."""

    stats_service: StatsService
    telegram_client: TelegramClient
    days: int = STATS_DAYS

    async def handle(self, user: UserRecord, chat_id: int) -> None:
        """Send the summary of recent reports."""
        stats = self.stats_service.summary(user.id, days=self.days)
        await self.telegram_client.send_message(
            chat_id=chat_id, text=format_stats(stats, user.language)
        )


@dataclass
class FatSecretCommandHandler:
    """Handle /fatsecret: show a day's diary or a weekly summary without saving."""

    diary_service: DiaryService
    telegram_client: TelegramClient
    today: Callable[[], date] = date.today
    week_days: int = WEEK_DAYS

    async def handle(self, user: UserRecord, chat_id: int, argument: str = "") -> None:
        """Import the requested period: today (default), yesterday or week."""
        language = user.language
        period = locales.DIARY_PERIODS.lookup(argument) if argument.strip() else "today"
        if period is None:
            await self.telegram_client.send_message(
                chat_id=chat_id, text=locales.text(language, "diary_period_unknown")
            )
            return
        if period == "week":
            await self._send_week(user, chat_id)
            return
        day = self.today()
        if period == "yesterday":
            day -= timedelta(days=1)
        await self._send_day(user, chat_id, day)

    async def _send_day(self, user: UserRecord, chat_id: int, day: date) -> None:
        language = user.language
        await self.telegram_client.send_message(
            chat_id=chat_id, text=locales.text(language, "diary_importing")
        )
        try:
            nutrition = await self.diary_service.fetch_diary_nutrition(user, day)
        except DiaryError as exc:
            _logger.info(
                "Diary import unavailable",
                extra={"user_id": str(user.id), "reason": exc.reason, "day": str(day)},
            )
            if exc.reason == "empty" and day != self.today():
                reason = locales.text(
                    language, "diary_empty_day", day=day.strftime("%d.%m.%Y")
                )
            else:
                reason = locales.text(language, f"diary_error.{exc.reason}")
            await self.telegram_client.send_message(chat_id=chat_id, text="❌ " + reason)
            return
        await self.telegram_client.send_message(
            chat_id=chat_id, text=format_meals(nutrition.to_meals(), language)
        )

    async def _send_week(self, user: UserRecord, chat_id: int) -> None:
        language = user.language
        await self.telegram_client.send_message(
            chat_id=chat_id, text=locales.text(language, "diary_importing_week")
        )
        today = self.today()
        days: list[tuple[date, list[Meal]]] = []
        for offset in range(self.week_days):
            day = today - timedelta(days=offset)
            try:
                nutrition = await self.diary_service.fetch_diary_nutrition(user, day)
            except DiaryError as exc:
                if exc.reason == "empty":
                    continue
                _logger.info(
                    "Weekly diary import unavailable",
                    extra={"user_id": str(user.id), "reason": exc.reason},
                )
                await self.telegram_client.send_message(
                    chat_id=chat_id,
                    text="❌ " + locales.text(language, f"diary_error.{exc.reason}"),
                )
                return
            days.append((day, nutrition.to_meals()))
        await self.telegram_client.send_message(
            chat_id=chat_id, text=format_week(days, language)
        )
