"""Supabase-backed user repository."""

from dataclasses import dataclass
from datetime import UTC, datetime
from uuid import UUID

from supabase import Client

from slimfit.domain.models import UserRecord
from slimfit.services.users import UserRepository

_USER_COLUMNS = (
    "id, telegram_user_id, display_name, language, "
    "fatsecret_auth_token, fatsecret_auth_secret"
)


def _to_user(row: dict[str, object]) -> UserRecord:
    return UserRecord(
        id=UUID(str(row["id"])),
        telegram_user_id=str(row["telegram_user_id"]),
        display_name=str(row.get("display_name") or row["telegram_user_id"]),
        language=str(row.get("language") or "uk"),
        fatsecret_auth_token=row.get("fatsecret_auth_token"),
        fatsecret_auth_secret=row.get("fatsecret_auth_secret"),
    )


@dataclass
class SupabaseUserRepository(UserRepository):
    """Supabase implementation for user persistence."""

    client: Client

    def get_by_telegram_id(self, telegram_user_id: str) -> UserRecord | None:
        """Return the user for a Telegram user id, if present."""
        response = (
            self.client.table("users")
            .select(_USER_COLUMNS)
            .eq("telegram_user_id", telegram_user_id)
            .limit(1)
            .execute()
        )
        if response.data:
            return _to_user(response.data[0])
        return None

    def create_user(
        self, telegram_user_id: str, display_name: str, language: str
    ) -> UserRecord:
        """Create a new user row in the idle dialogue state."""
        response = (
            self.client.table("users")
            .insert(
                {
                    "telegram_user_id": telegram_user_id,
                    "display_name": display_name,
                    "language": language,
                    "conversation_state": "idle",
                    "scratch_report": {},
                }
            )
            .execute()
        )
        if not response.data:
            raise RuntimeError("Failed to create user in Supabase")
        return _to_user(response.data[0])

    def touch_last_active(self, user_id: UUID) -> None:
        """Update the last_active_at timestamp for a user."""
        self.client.table("users").update(
            {"last_active_at": datetime.now(tz=UTC).isoformat()}
        ).eq("id", str(user_id)).execute()

    def set_fatsecret_tokens(
        self, user_id: UUID, auth_token: str, auth_secret: str
    ) -> None:
        """Store the FatSecret profile tokens on the user row."""
        self.client.table("users").update(
            {
                "fatsecret_auth_token": auth_token,
                "fatsecret_auth_secret": auth_secret,
            }
        ).eq("id", str(user_id)).execute()
