"""Companion chat service."""

import logging
from dataclasses import dataclass
from typing import Protocol
from uuid import UUID

from nourish.domain.chat import ChatExchange
from nourish.domain.profiles import DEFAULT_THERAPY_STYLE
from nourish.services.encouragement import EncouragementComposer
from nourish.services.metabolism import ProfileService

_logger = logging.getLogger(__name__)


class ChatLogRepository(Protocol):
    """Persistence interface for chat exchanges."""

    def create_exchange(self, exchange: ChatExchange) -> None:
        """Store one exchange."""

    def list_recent(self, user_id: UUID, limit: int) -> list[ChatExchange]:
        """Return recent exchanges, oldest first."""


@dataclass
class ChatService:
    """Answers chat messages in the user's chosen persona and logs them."""

    composer: EncouragementComposer
    profile_service: ProfileService
    repository: ChatLogRepository

    async def send_message(
        self, user_id: UUID, message: str, therapy_style: str | None = None
    ) -> ChatExchange:
        """Reply to a message and record the exchange."""
        style = therapy_style or self.therapy_style_for(user_id)
        reply = await self.composer.reply(style, message)
        exchange = ChatExchange(
            user_id=user_id,
            message_user=message,
            message_bot=reply,
            therapy_style=style,
        )
        try:
            self.repository.create_exchange(exchange)
        except Exception:
            _logger.exception("Failed to store chat exchange for user %s", user_id)
        return exchange

    def therapy_style_for(self, user_id: UUID) -> str:
        """Return the stored persona, or ACT when the profile cannot be read."""
        try:
            return self.profile_service.get_therapy_style(user_id)
        except Exception:
            _logger.exception("Failed to load therapy style for user %s", user_id)
            return DEFAULT_THERAPY_STYLE

    def list_history(self, user_id: UUID, limit: int = 50) -> list[ChatExchange]:
        return self.repository.list_recent(user_id, limit)
