"""Structured ingredient search backed by USDA FoodData Central."""

import asyncio
import logging
from dataclasses import dataclass
from typing import TYPE_CHECKING

from nourish.adapters.fdc_client import FdcClient
from nourish.domain.ingredients import IngredientMatch
from nourish.domain.meals import MealIngredient
from nourish.services.cache import Cache

_NUTRIENT_FIELDS = {
    1008: "calories",
    1003: "protein",
    1005: "carbs",
    1004: "fats",
}

_logger = logging.getLogger(__name__)

if TYPE_CHECKING:
    from collections.abc import Awaitable, Callable


@dataclass
class IngredientSearchService:
    """Search foods and scale their per-100 g macros to a portion."""

    fdc_client: FdcClient
    cache: Cache
    ttl_seconds: int = 3600
    retry_attempts: int = 1
    retry_delay_seconds: float = 0.3

    async def search(self, query: str, limit: int = 5) -> list[IngredientMatch]:
        """Return foods matching the query with their macros."""
        cleaned = query.strip().lower()
        if not cleaned:
            return []
        cache_key = f"fdc:search:{cleaned}:{limit}"
        cached = self.cache.get(cache_key)
        if isinstance(cached, list):
            return cached

        payload = await self._call_with_retry(
            lambda: self.fdc_client.search_foods(cleaned, page_size=limit),
            action=f"search:{cleaned}",
        )
        matches = [_to_match(food) for food in payload.get("foods", [])[:limit]]
        self.cache.set(cache_key, matches, ttl_seconds=self.ttl_seconds)
        _logger.info("Ingredient search: query=%s results=%s", cleaned, len(matches))
        return matches

    async def _call_with_retry(
        self, func: "Callable[[], Awaitable[dict[str, object]]]", *, action: str
    ) -> dict[str, object]:
        attempt = 0
        while True:
            try:
                return await func()
            except Exception as exc:
                attempt += 1
                _logger.warning(
                    "FDC %s failed (attempt %s/%s, status=%s): %s",
                    action,
                    attempt,
                    self.retry_attempts + 1,
                    _status_code_from_exception(exc),
                    exc,
                )
                if attempt > self.retry_attempts:
                    raise
                await asyncio.sleep(self.retry_delay_seconds)


def scale_to_ingredient(match: IngredientMatch, grams: float) -> MealIngredient:
    """Build a meal ingredient line for a gram portion of a match."""
    factor = max(grams, 0.0) / 100.0
    return MealIngredient(
        name=match.description,
        quantity=f"{grams:g} g",
        calories=round(match.calories * factor, 1),
        protein=round(match.protein * factor, 1),
        carbs=round(match.carbs * factor, 1),
        fats=round(match.fats * factor, 1),
    )


def _to_match(food: dict[str, object]) -> IngredientMatch:
    macros = _extract_macros(food.get("foodNutrients") or [])
    return IngredientMatch(
        fdc_id=int(food["fdcId"]),
        description=str(food.get("description", "")),
        brand_name=food.get("brandName") or food.get("brandOwner"),
        data_type=food.get("dataType"),
        **macros,
    )


def _extract_macros(food_nutrients: list[dict[str, object]]) -> dict[str, float]:
    """Read calories and macros from either FDC nutrient layout."""
    values = dict.fromkeys(_NUTRIENT_FIELDS.values(), 0.0)
    for nutrient in food_nutrients:
        nutrient_info = nutrient.get("nutrient") or {}
        nutrient_id = nutrient.get("nutrientId") or nutrient_info.get("id")
        amount = nutrient.get("value", nutrient.get("amount"))
        field_name = _NUTRIENT_FIELDS.get(nutrient_id)
        if field_name and isinstance(amount, int | float):
            values[field_name] = float(amount)
    return values


def _status_code_from_exception(exc: Exception) -> str:
    response = getattr(exc, "response", None)
    status_code = getattr(response, "status_code", None)
    if isinstance(status_code, int):
        return str(status_code)
    return "n/a"
