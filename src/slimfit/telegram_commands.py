"""Telegram bot command configuration."""

from dataclasses import dataclass
from enum import Enum


@dataclass(frozen=True)
class TelegramCommand:
    """Declarative bot command definition."""

    command: str
    description: str


class BotCommand(Enum):
    """Enum of bot commands (single source of truth)."""

    START = TelegramCommand("start", "Welcome and registration")
    REPORT = TelegramCommand("report", "Send today's report")
    FATSECRET = TelegramCommand("fatsecret", "FatSecret diary: today, yesterday or week")
    STATS = TelegramCommand("stats", "Averages for the last 30 days")
    CANCEL = TelegramCommand("cancel", "Cancel the report in progress")
    HELP = TelegramCommand("help", "Command reference")

    @classmethod
    def parse(cls, text: str) -> "BotCommand | None":
        """Match ``/command`` or ``/command@botname`` at the start of text."""
        if not text.startswith("/"):
            return None
        head = text.split(maxsplit=1)[0][1:].split("@", maxsplit=1)[0].lower()
        for entry in cls:
            if entry.value.command == head:
                return entry
        return None


def command_argument(text: str) -> str:
    """Return the text after the command word, e.g. ``week`` in ``/fatsecret week``."""
    parts = text.split(maxsplit=1)
    return parts[1].strip() if len(parts) > 1 else ""


def telegram_commands() -> list[dict[str, str]]:
    """Return commands formatted for Telegram API."""
    return [
        {"command": entry.value.command, "description": entry.value.description}
        for entry in BotCommand
    ]


CHAT_MENU_BUTTON: dict[str, object] = {"type": "commands"}
