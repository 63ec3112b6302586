"""Supabase repository for chat logs."""

from dataclasses import dataclass
from datetime import UTC, datetime
from uuid import UUID

from supabase import Client

from nourish.domain.chat import ChatExchange
from nourish.services.chat import ChatLogRepository


@dataclass
class SupabaseChatLogRepository(ChatLogRepository):
    """Supabase implementation for the ChatbotLogs table."""

    client: Client

    def create_exchange(self, exchange: ChatExchange) -> None:
        """Insert one chat exchange."""
        self.client.table("ChatbotLogs").insert(
            {
                "user_id": str(exchange.user_id),
                "message_user": exchange.message_user,
                "message_bot": exchange.message_bot,
                "context": exchange.therapy_style,
                "timestamp": datetime.now(tz=UTC).isoformat(),
            }
        ).execute()

    def list_recent(self, user_id: UUID, limit: int) -> list[ChatExchange]:
        """Return the latest exchanges, oldest first."""
        response = (
            self.client.table("ChatbotLogs")
            .select("message_user, message_bot, context, created_at")
            .eq("user_id", str(user_id))
            .order("created_at", desc=True)
            .limit(limit)
            .execute()
        )
        rows = list(reversed(response.data or []))
        return [
            ChatExchange(
                user_id=user_id,
                message_user=str(row.get("message_user") or ""),
                message_bot=str(row.get("message_bot") or ""),
                therapy_style=str(row.get("context") or ""),
                created_at=_parse_timestamp(row.get("created_at")),
            )
            for row in rows
        ]


def _parse_timestamp(value: object) -> datetime | None:
    if isinstance(value, str) and value:
        return datetime.fromisoformat(value)
    return None
