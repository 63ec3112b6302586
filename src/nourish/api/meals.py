"""Meal estimation, logging and ingredient search endpoints."""

import logging
from datetime import date
from uuid import UUID

from fastapi import APIRouter, Depends, HTTPException, Query, Request, status

from nourish.api.auth import current_user_id, get_container, local_now, local_today
from nourish.api.schemas import (
    DescribedMealCreate,
    EstimateRequest,
    EstimateResponse,
    IngredientMatchOut,
    MealCreate,
    MealOut,
    MealSavedOut,
    MealUpdate,
)
from nourish.domain.meals import MealDetail
from nourish.services.ingredients import scale_to_ingredient
from nourish.services.meals import MealValidationError, suggest_meal_type

router = APIRouter(tags=["meals"])
_logger = logging.getLogger(__name__)

SAVE_FAILED = "There was a problem saving your meal. Please try again."
LOAD_FAILED = "We couldn't load your meals right now. Please try again."


@router.post("/meals/estimate")
async def estimate_meal(
    body: EstimateRequest,
    request: Request,
    user_id: UUID = Depends(current_user_id),
) -> EstimateResponse:
    """Estimate calories and macros for a described meal."""
    container = get_container(request)
    estimate = await container.estimator.estimate(body.description)
    message = await container.composer.support_estimate(
        container.chat_service.therapy_style_for(user_id), body.description, estimate
    )
    return EstimateResponse.build(
        estimate, suggest_meal_type(local_now(container).hour), message
    )


@router.post("/meals", status_code=status.HTTP_201_CREATED)
async def create_meal(
    body: MealCreate,
    request: Request,
    user_id: UUID = Depends(current_user_id),
) -> MealSavedOut:
    """Log a meal built from ingredients."""
    container = get_container(request)
    try:
        detail = container.meal_log_service.save_meal(
            user_id=user_id,
            meal_type=body.meal_type,
            ingredients=[item.to_domain() for item in body.ingredients],
            day=body.day or local_today(container),
            name=body.name,
        )
    except MealValidationError as exc:
        raise HTTPException(
            status_code=status.HTTP_422_UNPROCESSABLE_ENTITY, detail=str(exc)
        ) from exc
    except Exception as exc:
        _logger.exception("Failed to save meal", extra={"user_id": str(user_id)})
        raise HTTPException(
            status_code=status.HTTP_502_BAD_GATEWAY, detail=SAVE_FAILED
        ) from exc
    return await _saved(request, detail)


@router.post("/meals/described", status_code=status.HTTP_201_CREATED)
async def create_described_meal(
    body: DescribedMealCreate,
    request: Request,
    user_id: UUID = Depends(current_user_id),
) -> MealSavedOut:
    """Log a described meal using the estimate the user confirmed."""
    container = get_container(request)
    try:
        detail = container.meal_log_service.save_described_meal(
            user_id=user_id,
            meal_type=body.meal_type,
            description=body.description,
            estimate=body.to_estimate(),
            day=body.day or local_today(container),
        )
    except MealValidationError as exc:
        raise HTTPException(
            status_code=status.HTTP_422_UNPROCESSABLE_ENTITY, detail=str(exc)
        ) from exc
    except Exception as exc:
        _logger.exception(
            "Failed to save described meal", extra={"user_id": str(user_id)}
        )
        raise HTTPException(
            status_code=status.HTTP_502_BAD_GATEWAY, detail=SAVE_FAILED
        ) from exc
    return await _saved(request, detail)


@router.get("/meals")
async def list_meals(
    request: Request,
    day: date | None = None,
    user_id: UUID = Depends(current_user_id),
) -> list[MealOut]:
    """Return the user's meals for a day, today by default."""
    container = get_container(request)
    try:
        details = container.meal_log_service.list_meals_for_day(
            user_id, day or local_today(container)
        )
    except Exception as exc:
        _logger.exception("Failed to list meals", extra={"user_id": str(user_id)})
        raise HTTPException(
            status_code=status.HTTP_502_BAD_GATEWAY, detail=LOAD_FAILED
        ) from exc
    return [MealOut.build(detail) for detail in details]


@router.get("/meals/{meal_id}")
async def get_meal(
    meal_id: int, request: Request, user_id: UUID = Depends(current_user_id)
) -> MealOut:
    try:
        detail = get_container(request).meal_log_service.get_meal(user_id, meal_id)
    except Exception as exc:
        _logger.exception("Failed to load meal", extra={"meal_id": meal_id})
        raise HTTPException(
            status_code=status.HTTP_502_BAD_GATEWAY, detail=LOAD_FAILED
        ) from exc
    if detail is None:
        raise HTTPException(status_code=status.HTTP_404_NOT_FOUND)
    return MealOut.build(detail)


@router.put("/meals/{meal_id}")
async def update_meal(
    meal_id: int,
    body: MealUpdate,
    request: Request,
    user_id: UUID = Depends(current_user_id),
) -> MealOut:
    """Replace a meal's type and ingredients."""
    container = get_container(request)
    try:
        detail = container.meal_log_service.update_meal(
            user_id=user_id,
            meal_id=meal_id,
            meal_type=body.meal_type,
            ingredients=[item.to_domain() for item in body.ingredients],
        )
    except MealValidationError as exc:
        raise HTTPException(
            status_code=status.HTTP_422_UNPROCESSABLE_ENTITY, detail=str(exc)
        ) from exc
    except Exception as exc:
        _logger.exception("Failed to update meal", extra={"meal_id": meal_id})
        raise HTTPException(
            status_code=status.HTTP_502_BAD_GATEWAY,
            detail="Failed to update meal. Please try again.",
        ) from exc
    if detail is None:
        raise HTTPException(status_code=status.HTTP_404_NOT_FOUND)
    return MealOut.build(detail)


@router.delete("/meals/{meal_id}", status_code=status.HTTP_204_NO_CONTENT)
async def delete_meal(
    meal_id: int, request: Request, user_id: UUID = Depends(current_user_id)
) -> None:
    try:
        deleted = get_container(request).meal_log_service.delete_meal(user_id, meal_id)
    except Exception as exc:
        _logger.exception("Failed to delete meal", extra={"meal_id": meal_id})
        raise HTTPException(
            status_code=status.HTTP_502_BAD_GATEWAY,
            detail="Failed to delete meal. Please try again.",
        ) from exc
    if not deleted:
        raise HTTPException(status_code=status.HTTP_404_NOT_FOUND)


@router.get("/ingredients/search")
async def search_ingredients(
    request: Request,
    query: str = Query(min_length=1),
    grams: float = Query(default=100, gt=0),
    limit: int = Query(default=5, ge=1, le=25),
    user_id: UUID = Depends(current_user_id),
) -> list[IngredientMatchOut]:
    """Search foods and scale each hit to the requested grams."""
    service = get_container(request).ingredient_search_service
    try:
        matches = await service.search(query, limit=limit)
    except Exception as exc:
        _logger.exception("Ingredient search failed", extra={"query": query})
        raise HTTPException(
            status_code=status.HTTP_502_BAD_GATEWAY,
            detail="Ingredient search is unavailable right now.",
        ) from exc
    return [
        IngredientMatchOut.build(match, scale_to_ingredient(match, grams))
        for match in matches
    ]


async def _saved(request: Request, detail: MealDetail) -> MealSavedOut:
    composer = get_container(request).composer
    message = await composer.celebrate_meal(detail.meal, detail.ingredients)
    return MealSavedOut(meal=MealOut.build(detail), encouragement=message)
