"""FastAPI application factory."""

import logging
from collections.abc import AsyncIterator
from contextlib import asynccontextmanager

from fastapi import BackgroundTasks, FastAPI, Request

from slimfit.api.reports import router as reports_router
from slimfit.api.telegram_models import (
    TelegramMessage,
    TelegramPhotoSize,
    TelegramUpdate,
)
from slimfit.app_logging import configure_logging
from slimfit.config import parse_allowed_user_ids
from slimfit.containers import AppContainer
from slimfit.domain.conversation import Cancel, ImageInput, StartReport, TextInput
from slimfit.domain.models import UserRecord
from slimfit.domain.reports import DailyReport
from slimfit.services import locales
from slimfit.telegram_commands import (
    CHAT_MENU_BUTTON,
    BotCommand,
    command_argument,
    telegram_commands,
)


def create_app(container: AppContainer) -> FastAPI:
    """Create a FastAPI app configured with dependencies."""
    configure_logging()
    logger = logging.getLogger(__name__)
    allowed_user_ids = parse_allowed_user_ids(
        container.settings.telegram_allowed_user_ids
    )

    @asynccontextmanager
    async def lifespan(app: FastAPI) -> AsyncIterator[None]:
        try:
            await app.state.container.telegram_client.set_my_commands(
                telegram_commands()
            )
            await app.state.container.telegram_client.set_chat_menu_button(
                CHAT_MENU_BUTTON
            )
        except Exception:
            logger.exception("Failed to sync Telegram bot commands")
        yield
        await app.state.container.close_resources()

    app = FastAPI(lifespan=lifespan)
    app.state.container = container

    app.include_router(reports_router)

    @app.get("/health")
    async def health() -> dict[str, str]:
        """Simple health check endpoint."""
        return {"status": "ok"}

    @app.post("/telegram/webhook")
    async def telegram_webhook(
        update: TelegramUpdate, request: Request, background_tasks: BackgroundTasks
    ) -> dict[str, str]:
        """Handle Telegram webhook updates."""
        state_container: AppContainer = request.app.state.container
        message = update.message
        if message is None:
            return {"status": "ok"}
        language = locales.resolve_language(
            message.from_user.language_code,
            state_container.settings.default_language,
        )
        if allowed_user_ids is not None and message.from_user.id not in allowed_user_ids:
            await state_container.telegram_client.send_message(
                chat_id=message.chat.id,
                text=locales.text(language, "not_authorized"),
            )
            return {"status": "ok"}

        try:
            user = state_container.user_service.ensure_user(
                message.from_user.id,
                display_name=message.from_user.display_name,
                language=language,
            )
            language = user.language
            report = await _dispatch(state_container, user, message)
        except Exception as exc:
            logger.exception(
                "Failed to handle Telegram update",
                extra={"update_id": update.update_id},
            )
            try:
                await state_container.telegram_client.send_message(
                    chat_id=message.chat.id,
                    text=_format_error(state_container, exc, language),
                )
            except Exception:
                logger.exception("Failed to send error message")
            return {"status": "ok"}

        if report is not None:
            background_tasks.add_task(
                state_container.feedback_service.enrich,
                user,
                report,
                message.chat.id,
            )
        return {"status": "ok"}

    return app


async def _dispatch(  # noqa: PLR0911
    container: AppContainer, user: UserRecord, message: TelegramMessage
) -> DailyReport | None:
    """Route a message to a command handler or the report dialogue."""
    chat_id = message.chat.id
    dialogue = container.dialogue_service
    if message.photo:
        photo = _select_largest_photo(message.photo)
        return await dialogue.handle(user, chat_id, ImageInput(file_id=photo.file_id))
    if message.text is None:
        return None

    command = BotCommand.parse(message.text)
    if command is BotCommand.START:
        await container.start_command_handler.handle(user, chat_id)
        return None
    if command is BotCommand.HELP:
        await container.start_command_handler.help(user, chat_id)
        return None
    if command is BotCommand.STATS:
        await container.stats_command_handler.handle(user, chat_id)
        return None
    if command is BotCommand.FATSECRET:
        await container.fatsecret_command_handler.handle(
            user, chat_id, command_argument(message.text)
        )
        return None
    if command is BotCommand.REPORT:
        return await dialogue.handle(user, chat_id, StartReport())
    if command is BotCommand.CANCEL:
        return await dialogue.handle(user, chat_id, Cancel())
    if message.text.startswith("/"):
        await container.telegram_client.send_message(
            chat_id=chat_id, text=locales.text(user.language, "unknown_command")
        )
        return None
    return await dialogue.handle(user, chat_id, TextInput(text=message.text))


def _select_largest_photo(photos: list[TelegramPhotoSize]) -> TelegramPhotoSize:
    """Select the largest photo size from the Telegram payload."""
    return max(photos, key=lambda photo: (photo.width * photo.height))


def _format_error(state_container: AppContainer, exc: Exception, language: str) -> str:
    """Return a user-facing error message with local debug info."""
    fallback = locales.text(language, "generic_error")
    if state_container.settings.environment == "local":
        detail = f"{type(exc).__name__}: {exc}".strip()
        if detail:
            return f"{fallback} (debug: {detail})"
    return fallback
