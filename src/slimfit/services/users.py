"""User-related business logic."""

from dataclasses import dataclass, replace
from typing import Protocol
from uuid import UUID

from slimfit.domain.conversation import Conversation
from slimfit.domain.models import UserRecord


class UserRepository(Protocol):
    """Persistence interface for user data."""

    def get_by_telegram_id(self, telegram_user_id: str) -> UserRecord | None:
        """Return the user for a Telegram user id, if present."""

    def create_user(
        self, telegram_user_id: str, display_name: str, language: str
    ) -> UserRecord:
        """Create and return a new user record."""

    def touch_last_active(self, user_id: UUID) -> None:
        """Update the last active timestamp for the user."""

    def set_fatsecret_tokens(
        self, user_id: UUID, auth_token: str, auth_secret: str
    ) -> None:
        """Store FatSecret profile tokens for the user."""


class ConversationRepository(Protocol):
    """Persistence interface for per-user dialogue state."""

    def load(self, user_id: UUID) -> Conversation:
        """Return the stored conversation, or an idle one."""

    def save(self, user_id: UUID, conversation: Conversation) -> None:
        """Write state and draft in a single update."""


@dataclass
class UserService:
    """Application service for user lifecycle actions."""

    repository: UserRepository
    default_language: str = "uk"

    def ensure_user(
        self,
        telegram_user_id: int | str,
        display_name: str | None = None,
        language: str | None = None,
    ) -> UserRecord:
        """Ensure a user exists for the Telegram id and return it."""
        external_id = str(telegram_user_id)
        existing = self.repository.get_by_telegram_id(external_id)
        if existing:
            self.repository.touch_last_active(existing.id)
            return existing

        return self.repository.create_user(
            external_id,
            display_name=display_name or external_id,
            language=language or self.default_language,
        )

    def find_user(self, telegram_user_id: int | str) -> UserRecord | None:
        """Return the user for a Telegram id without creating one."""
        return self.repository.get_by_telegram_id(str(telegram_user_id))

    def store_fatsecret_tokens(
        self, user: UserRecord, auth_token: str, auth_secret: str
    ) -> UserRecord:
        """Persist FatSecret tokens and return the updated user."""
        self.repository.set_fatsecret_tokens(user.id, auth_token, auth_secret)
        return replace(
            user, fatsecret_auth_token=auth_token, fatsecret_auth_secret=auth_secret
        )
