"""Profile, dashboard, statistics and weight endpoints."""

import logging
from datetime import timedelta
from uuid import UUID

from fastapi import APIRouter, Depends, HTTPException, Query, Request, status

from nourish.api.auth import current_user_id, get_container, local_today
from nourish.api.schemas import (
    DailyTotalsOut,
    DashboardOut,
    ProfileOut,
    ProfileUpdate,
    WeightEntryOut,
    WeightHistoryOut,
    WeightIn,
    WeightTrendOut,
)
from nourish.services.weight import get_trend

router = APIRouter(tags=["health"])
_logger = logging.getLogger(__name__)

STATS_FAILED = "We couldn't load your progress right now. Please try again."


@router.get("/profile")
async def get_profile(
    request: Request, user_id: UUID = Depends(current_user_id)
) -> ProfileOut:
    """Return the profile with metrics derived on this read."""
    try:
        view = get_container(request).profile_service.get_profile(user_id)
    except Exception as exc:
        _logger.exception("Failed to load profile", extra={"user_id": str(user_id)})
        raise HTTPException(
            status_code=status.HTTP_502_BAD_GATEWAY,
            detail="Failed to load profile. Please try again.",
        ) from exc
    if view is None:
        raise HTTPException(
            status_code=status.HTTP_404_NOT_FOUND, detail="Profile not found"
        )
    return ProfileOut.build(view)


@router.patch("/profile")
async def update_profile(
    body: ProfileUpdate, request: Request, user_id: UUID = Depends(current_user_id)
) -> ProfileOut:
    """Update profile fields and return refreshed metrics."""
    service = get_container(request).profile_service
    try:
        view = service.update_profile(user_id, body.model_dump(exclude_unset=True))
    except Exception as exc:
        _logger.exception("Failed to update profile", extra={"user_id": str(user_id)})
        raise HTTPException(
            status_code=status.HTTP_502_BAD_GATEWAY,
            detail="Failed to update profile. Please try again.",
        ) from exc
    if view is None:
        raise HTTPException(
            status_code=status.HTTP_404_NOT_FOUND, detail="Profile not found"
        )
    return ProfileOut.build(view)


@router.get("/dashboard")
async def dashboard(
    request: Request, user_id: UUID = Depends(current_user_id)
) -> DashboardOut:
    """Return meals today, streak and today's totals."""
    container = get_container(request)
    try:
        view = container.stats_service.get_dashboard(user_id, local_today(container))
    except Exception as exc:
        _logger.exception("Failed to load dashboard", extra={"user_id": str(user_id)})
        raise HTTPException(
            status_code=status.HTTP_502_BAD_GATEWAY, detail=STATS_FAILED
        ) from exc
    return DashboardOut.build(view)


@router.get("/stats/daily")
async def daily_totals(
    request: Request,
    days: int = Query(default=14, ge=1, le=90),
    user_id: UUID = Depends(current_user_id),
) -> list[DailyTotalsOut]:
    """Return per-day totals for the last `days` days including today."""
    container = get_container(request)
    end = local_today(container)
    start = end - timedelta(days=days - 1)
    try:
        totals = container.stats_service.get_daily_totals(user_id, start, end)
    except Exception as exc:
        _logger.exception(
            "Failed to load daily totals", extra={"user_id": str(user_id)}
        )
        raise HTTPException(
            status_code=status.HTTP_502_BAD_GATEWAY, detail=STATS_FAILED
        ) from exc
    return [DailyTotalsOut.build(day) for day in totals]


@router.post("/weight", status_code=status.HTTP_201_CREATED)
async def record_weight(
    body: WeightIn, request: Request, user_id: UUID = Depends(current_user_id)
) -> WeightEntryOut:
    """Record a weigh-in, replacing any entry for the same day."""
    container = get_container(request)
    try:
        entry = container.weight_service.record_weight(
            user_id, body.day or local_today(container), body.weight_kg
        )
    except ValueError as exc:
        raise HTTPException(
            status_code=status.HTTP_422_UNPROCESSABLE_ENTITY, detail=str(exc)
        ) from exc
    except Exception as exc:
        _logger.exception("Failed to record weight", extra={"user_id": str(user_id)})
        raise HTTPException(
            status_code=status.HTTP_502_BAD_GATEWAY,
            detail="Failed to record weight. Please try again.",
        ) from exc
    return WeightEntryOut.build(entry)


@router.get("/weight")
async def weight_history(
    request: Request,
    days: int = Query(default=28, ge=1, le=366),
    user_id: UUID = Depends(current_user_id),
) -> WeightHistoryOut:
    """Return weigh-ins from the last `days` days including today, and the trend."""
    container = get_container(request)
    end = local_today(container)
    start = end - timedelta(days=days - 1)
    try:
        entries = container.weight_service.list_entries(user_id, start, end)
    except Exception as exc:
        _logger.exception(
            "Failed to load weight history", extra={"user_id": str(user_id)}
        )
        raise HTTPException(
            status_code=status.HTTP_502_BAD_GATEWAY,
            detail="Failed to load weight history. Please try again.",
        ) from exc
    return WeightHistoryOut(
        entries=[WeightEntryOut.build(entry) for entry in entries],
        trend=WeightTrendOut.build(get_trend(entries)),
    )
