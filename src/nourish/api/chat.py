"""Companion chat and encouragement endpoints."""

import logging
from uuid import UUID

from fastapi import APIRouter, Depends, HTTPException, Query, Request, status

from nourish.api.auth import current_user_id, get_container
from nourish.api.schemas import ChatIn, ChatOut, EncouragementOut

router = APIRouter(tags=["chat"])
_logger = logging.getLogger(__name__)


@router.post("/chat")
async def send_message(
    body: ChatIn, request: Request, user_id: UUID = Depends(current_user_id)
) -> ChatOut:
    """Reply in the user's persona; never fails on model errors."""
    exchange = await get_container(request).chat_service.send_message(
        user_id, body.message, therapy_style=body.therapy_style
    )
    return ChatOut.build(exchange)


@router.get("/chat/history")
async def chat_history(
    request: Request,
    limit: int = Query(default=50, ge=1, le=200),
    user_id: UUID = Depends(current_user_id),
) -> list[ChatOut]:
    try:
        history = get_container(request).chat_service.list_history(user_id, limit)
    except Exception as exc:
        _logger.exception(
            "Failed to load chat history", extra={"user_id": str(user_id)}
        )
        raise HTTPException(
            status_code=status.HTTP_502_BAD_GATEWAY,
            detail="Failed to load your conversation. Please try again.",
        ) from exc
    return [ChatOut.build(exchange) for exchange in history]


@router.get("/encouragement/daily")
async def daily_encouragement(
    request: Request, user_id: UUID = Depends(current_user_id)
) -> EncouragementOut:
    message = await get_container(request).composer.daily_encouragement()
    return EncouragementOut(message=message)
