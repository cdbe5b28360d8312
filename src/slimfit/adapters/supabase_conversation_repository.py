"""Supabase-backed conversation state stored on the user row."""

import logging
from dataclasses import dataclass
from datetime import UTC, datetime
from uuid import UUID

from pydantic import ValidationError
from supabase import Client

from slimfit.domain.conversation import Conversation, ConversationState
from slimfit.domain.reports import ReportDraft
from slimfit.services.users import ConversationRepository

_logger = logging.getLogger(__name__)


@dataclass
class SupabaseConversationRepository(ConversationRepository):
    """Reads and writes ``conversation_state`` and ``scratch_report``."""

    client: Client

    def load(self, user_id: UUID) -> Conversation:
        """Return the stored conversation, falling back to idle."""
        response = (
            self.client.table("users")
            .select("conversation_state, scratch_report")
            .eq("id", str(user_id))
            .limit(1)
            .execute()
        )
        if not response.data:
            return Conversation()
        row = response.data[0]
        try:
            state = ConversationState(row.get("conversation_state") or "idle")
            draft = ReportDraft.model_validate(row.get("scratch_report") or {})
        except (ValueError, ValidationError):
            _logger.warning(
                "Discarding unreadable conversation state",
                extra={"user_id": str(user_id)},
            )
            return Conversation()
        return Conversation(state=state, draft=draft)

    def save(self, user_id: UUID, conversation: Conversation) -> None:
        """Persist state and draft together in one update."""
        self.client.table("users").update(
            {
                "conversation_state": conversation.state.value,
                "scratch_report": conversation.draft.model_dump(
                    mode="json", exclude_none=True
                ),
                "last_active_at": datetime.now(tz=UTC).isoformat(),
            }
        ).eq("id", str(user_id)).execute()
