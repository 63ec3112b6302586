"""Bearer token authentication for API routes."""

from __future__ import annotations

import logging
from datetime import date, datetime
from typing import TYPE_CHECKING
from uuid import UUID  # noqa: TC003
from zoneinfo import ZoneInfo

from fastapi import Header, HTTPException, Request, status

if TYPE_CHECKING:
    from nourish.containers import AppContainer

_logger = logging.getLogger(__name__)


def get_container(request: Request) -> AppContainer:
    """Return the container attached to the running app."""
    return request.app.state.container


async def current_user_id(
    request: Request, authorization: str | None = Header(default=None)
) -> UUID:
    """Resolve the bearer token to a user id or reject with 401."""
    scheme, _, token = (authorization or "").partition(" ")
    if scheme.lower() != "bearer" or not token.strip():
        raise HTTPException(
            status_code=status.HTTP_401_UNAUTHORIZED,
            detail="Missing bearer token",
        )
    try:
        return get_container(request).auth_client.get_user_id(token.strip())
    except Exception as exc:
        _logger.info("Rejected access token: %s", exc)
        raise HTTPException(
            status_code=status.HTTP_401_UNAUTHORIZED,
            detail=str(exc) or "Invalid session",
        ) from exc


def local_today(container: AppContainer) -> date:
    """Return the current calendar date in the configured timezone."""
    return local_now(container).date()


def local_now(container: AppContainer) -> datetime:
    return datetime.now(tz=ZoneInfo(container.settings.timezone))
