"""Domain models for companion chat."""

from dataclasses import dataclass
from datetime import datetime
from uuid import UUID


@dataclass(frozen=True)
class ChatExchange:
    """A user message and the companion's reply."""

    user_id: UUID
    message_user: str
    message_bot: str
    therapy_style: str
    created_at: datetime | None = None
