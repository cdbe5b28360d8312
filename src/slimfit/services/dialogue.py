"""Per-message turn of the daily report dialogue.

A turn loads the user's conversation, applies the event through the pure
transition table, performs the remote lookups the table asks for, saves the
finished report, writes the conversation once and only then talks back to
the user. Any exception before the conversation write leaves the stored
state as it was.
"""

import logging
from collections.abc import Callable
from dataclasses import dataclass, field
from datetime import date

from slimfit.adapters.telegram_client import TelegramClient
from slimfit.domain.conversation import (
    Cancelled,
    ConversationEvent,
    ConversationState,
    DiaryImported,
    DiaryImportFailed,
    Effect,
    FinalizeReport,
    FoodLookupFailed,
    FoodsResolved,
    ImageAcknowledged,
    ImageInput,
    ImportDiary,
    LookupFailed,
    LookupFoods,
    NothingToCancel,
    NotInDialogue,
    NutritionAccepted,
    Prompt,
    Reprompt,
)
from slimfit.domain.models import UserRecord
from slimfit.domain.reports import DailyReport
from slimfit.services import locales
from slimfit.services.conversation import advance
from slimfit.services.diary import DiaryError, DiaryService
from slimfit.services.images import ImageInputHandler
from slimfit.services.messages import (
    REMOVE_KEYBOARD,
    format_meals,
    step_keyboard,
)
from slimfit.services.parsing import ReportParser
from slimfit.services.reports import ReportService
from slimfit.services.users import ConversationRepository

_logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class OutgoingMessage:
    """Text queued for the user during a turn."""

    text: str
    reply_markup: dict | None = None


@dataclass
class DialogueService:
    """Run report dialogue turns for one user at a time."""

    conversations: ConversationRepository
    report_service: ReportService
    diary_service: DiaryService
    image_handler: ImageInputHandler
    telegram_client: TelegramClient
    parser: ReportParser = field(default_factory=ReportParser)
    today: Callable[[], date] = date.today

    async def handle(
        self, user: UserRecord, chat_id: int, event: ConversationEvent
    ) -> DailyReport | None:
        """Process one event; return the report when the turn finished one."""
        before = self.conversations.load(user.id)
        if isinstance(event, ImageInput) and event.extracted is None:
            extracted = await self.image_handler.extract(event.file_id, before.state)
            event = ImageInput(file_id=event.file_id, extracted=extracted)

        transition = advance(before, event, self.parser)
        current = transition.conversation
        pending: list[Effect] = list(transition.effects)
        outgoing: list[OutgoingMessage] = []
        report: DailyReport | None = None
        while pending:
            effect = pending.pop(0)
            follow_up = await self._remote_event(user, chat_id, effect)
            if follow_up is not None:
                resumed = advance(current, follow_up, self.parser)
                current = resumed.conversation
                pending = [*resumed.effects, *pending]
                continue
            if isinstance(effect, FinalizeReport):
                report = self.report_service.submit_report(
                    user.id, self.today(), effect.draft
                )
            outgoing.append(self._render(effect, user.language))

        if current != before:
            self.conversations.save(user.id, current)
            _logger.info(
                "Conversation step %s -> %s",
                before.state.value,
                current.state.value,
                extra={"user_id": str(user.id)},
            )
        for message in outgoing:
            await self.telegram_client.send_message(
                chat_id=chat_id, text=message.text, reply_markup=message.reply_markup
            )
        return report

    async def _remote_event(
        self, user: UserRecord, chat_id: int, effect: Effect
    ) -> ConversationEvent | None:
        """Perform a remote lookup effect and return the resulting event."""
        if isinstance(effect, ImportDiary):
            await self.telegram_client.send_message(
                chat_id=chat_id, text=locales.text(user.language, "diary_importing")
            )
            try:
                nutrition = await self.diary_service.fetch_diary_nutrition(
                    user, self.today()
                )
            except DiaryError as exc:
                return DiaryImportFailed(reason=exc.reason)
            return DiaryImported(meals=nutrition.to_meals())
        if isinstance(effect, LookupFoods):
            await self.telegram_client.send_message(
                chat_id=chat_id, text=locales.text(user.language, "foods_looking_up")
            )
            try:
                nutrition = await self.diary_service.lookup_foods(effect.query)
            except DiaryError as exc:
                return FoodLookupFailed(reason=exc.reason)
            return FoodsResolved(meals=nutrition.to_meals())
        return None

    def _render(self, effect: Effect, language: str) -> OutgoingMessage:  # noqa: PLR0911
        if isinstance(effect, Prompt):
            return OutgoingMessage(
                locales.text(language, f"prompt.{effect.step.value}"),
                step_keyboard(effect.step, language),
            )
        if isinstance(effect, Reprompt):
            return OutgoingMessage(
                locales.text(language, f"reprompt.{effect.step.value}"),
                step_keyboard(effect.step, language),
            )
        if isinstance(effect, Cancelled):
            return OutgoingMessage(locales.text(language, "cancelled"), REMOVE_KEYBOARD)
        if isinstance(effect, NothingToCancel):
            return OutgoingMessage(locales.text(language, "nothing_to_cancel"))
        if isinstance(effect, ImageAcknowledged):
            return OutgoingMessage(locales.text(language, "image_received"))
        if isinstance(effect, NutritionAccepted):
            if effect.origin == "manual":
                calories = sum(meal.calories for meal in effect.meals)
                return OutgoingMessage(
                    locales.text(language, "calories_accepted", calories=calories)
                )
            return OutgoingMessage(format_meals(effect.meals, language))
        if isinstance(effect, LookupFailed):
            key = "diary_failed" if effect.origin == "diary" else "foods_failed"
            reason = locales.text(language, f"diary_error.{effect.reason}")
            return OutgoingMessage(
                locales.text(language, key, reason=reason),
                step_keyboard(ConversationState.CALORIES, language),
            )
        if isinstance(effect, FinalizeReport):
            return OutgoingMessage(locales.text(language, "report_saved"), REMOVE_KEYBOARD)
        if isinstance(effect, NotInDialogue):
            return OutgoingMessage(locales.text(language, "not_in_dialogue"))
        raise TypeError(f"Unsupported effect: {effect!r}")

