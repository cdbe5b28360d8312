"""Domain models for SlimFit users."""

from dataclasses import dataclass
from uuid import UUID


@dataclass(frozen=True)
class UserRecord:
    """Represents a user stored in the database."""

    id: UUID
    telegram_user_id: str
    display_name: str
    language: str = "uk"
    fatsecret_auth_token: str | None = None
    fatsecret_auth_secret: str | None = None

    @property
    def has_fatsecret_profile(self) -> bool:
        """Return true when FatSecret profile tokens are stored."""
        return bool(self.fatsecret_auth_token and self.fatsecret_auth_secret)
