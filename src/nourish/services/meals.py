"""Meal logging service."""

import logging
from dataclasses import dataclass
from datetime import date
from typing import Protocol
from uuid import UUID

from nourish.domain.meals import (
    MEAL_TYPES,
    Meal,
    MealDetail,
    MealIngredient,
    NutritionEstimate,
    sum_ingredients,
)

_logger = logging.getLogger(__name__)


class MealValidationError(ValueError):
    """Raised when a meal is rejected before any write."""


class MealRepository(Protocol):
    """Persistence interface for meals and their ingredients."""

    def create_meal(  # noqa: PLR0913
        self,
        user_id: UUID,
        day: date,
        meal_type: str,
        name: str | None,
        totals: NutritionEstimate,
    ) -> Meal:
        """Insert a meal row and return it."""

    def create_ingredients(
        self, meal_id: int, ingredients: list[MealIngredient]
    ) -> None:
        """Insert ingredient rows for a meal in one batch."""

    def get_meal(self, meal_id: int) -> Meal | None:
        """Return a meal by id."""

    def list_meals_for_day(self, user_id: UUID, day: date) -> list[Meal]:
        """Return a user's meals dated on a calendar day."""

    def list_ingredients(
        self, meal_ids: list[int]
    ) -> dict[int, list[MealIngredient]]:
        """Return ingredients grouped by meal id."""

    def update_meal(
        self, meal_id: int, meal_type: str, totals: NutritionEstimate
    ) -> None:
        """Update a meal's type and totals."""

    def delete_ingredients(self, meal_id: int) -> None:
        """Delete every ingredient of a meal."""

    def delete_meal(self, meal_id: int) -> None:
        """Delete a meal row."""


@dataclass
class MealLogService:
    """Validates, totals and persists meals."""

    repository: MealRepository

    def save_meal(
        self,
        user_id: UUID,
        meal_type: str | None,
        ingredients: list[MealIngredient],
        day: date,
        name: str | None = None,
    ) -> MealDetail:
        """Persist a meal built from ingredients.

        Totals are the ingredient sums. If the ingredient batch fails the meal
        row is deleted again before the error propagates.
        """
        resolved_type = _validate(meal_type, ingredients)
        totals = sum_ingredients(ingredients)
        meal = self.repository.create_meal(
            user_id=user_id,
            day=day,
            meal_type=resolved_type,
            name=name,
            totals=totals,
        )
        try:
            self.repository.create_ingredients(meal.id, ingredients)
        except Exception:
            _logger.warning("Ingredient insert failed, removing meal %s", meal.id)
            self.repository.delete_meal(meal.id)
            raise
        return MealDetail(meal=meal, ingredients=list(ingredients))

    def save_described_meal(
        self,
        user_id: UUID,
        meal_type: str | None,
        description: str,
        estimate: NutritionEstimate,
        day: date,
    ) -> MealDetail:
        """Persist a meal confirmed from a free-text estimate."""
        resolved_type = _validate_meal_type(meal_type)
        if not description.strip():
            raise MealValidationError("Please describe your meal.")
        meal = self.repository.create_meal(
            user_id=user_id,
            day=day,
            meal_type=resolved_type,
            name=description.strip(),
            totals=estimate,
        )
        return MealDetail(meal=meal, ingredients=[])

    def get_meal(self, user_id: UUID, meal_id: int) -> MealDetail | None:
        """Return a meal owned by the user, with ingredients."""
        meal = self.repository.get_meal(meal_id)
        if meal is None or meal.user_id != user_id:
            return None
        grouped = self.repository.list_ingredients([meal_id])
        return with_ingredient_totals(meal, grouped.get(meal_id, []))

    def list_meals_for_day(self, user_id: UUID, day: date) -> list[MealDetail]:
        """Return the user's meals for a day in meal-type order."""
        meals = self.repository.list_meals_for_day(user_id, day)
        grouped = self.repository.list_ingredients([meal.id for meal in meals])
        details = [
            with_ingredient_totals(meal, grouped.get(meal.id, [])) for meal in meals
        ]
        return sorted(details, key=lambda detail: _meal_type_rank(detail.meal))

    def update_meal(
        self,
        user_id: UUID,
        meal_id: int,
        meal_type: str | None,
        ingredients: list[MealIngredient],
    ) -> MealDetail | None:
        """Replace a meal's type and ingredients and recompute totals.

        If any write fails the previous type, totals and ingredients are
        written back before the error propagates.
        """
        resolved_type = _validate(meal_type, ingredients)
        previous = self.get_meal(user_id, meal_id)
        if previous is None:
            return None
        try:
            self._replace(meal_id, resolved_type, ingredients)
        except Exception:
            _logger.warning("Meal update failed, restoring meal %s", meal_id)
            self._restore(previous)
            raise
        return self.get_meal(user_id, meal_id)

    def delete_meal(self, user_id: UUID, meal_id: int) -> bool:
        """Delete a meal and its ingredients; False when not found."""
        if self.get_meal(user_id, meal_id) is None:
            return False
        self.repository.delete_ingredients(meal_id)
        self.repository.delete_meal(meal_id)
        return True

    def _replace(
        self, meal_id: int, meal_type: str, ingredients: list[MealIngredient]
    ) -> None:
        self.repository.update_meal(meal_id, meal_type, sum_ingredients(ingredients))
        self.repository.delete_ingredients(meal_id)
        self.repository.create_ingredients(meal_id, ingredients)

    def _restore(self, previous: MealDetail) -> None:
        meal = previous.meal
        try:
            self.repository.update_meal(
                meal.id,
                meal.meal_type,
                NutritionEstimate(
                    calories=meal.total_calories,
                    protein=meal.total_protein,
                    carbs=meal.total_carbs,
                    fats=meal.total_fat,
                ),
            )
            self.repository.delete_ingredients(meal.id)
            if previous.ingredients:
                self.repository.create_ingredients(meal.id, previous.ingredients)
        except Exception:
            _logger.exception("Failed to restore meal %s", meal.id)


def suggest_meal_type(hour: int) -> str:
    """Pick a meal type from the local hour of day."""
    if 4 <= hour < 11:  # noqa: PLR2004
        return "Breakfast"
    if 11 <= hour < 15:  # noqa: PLR2004
        return "Lunch"
    if 15 <= hour < 18:  # noqa: PLR2004
        return "Afternoon Snack"
    return "Dinner"


def _validate(meal_type: str | None, ingredients: list[MealIngredient]) -> str:
    resolved = _validate_meal_type(meal_type)
    if not ingredients:
        raise MealValidationError("Please add some ingredients to your meal first.")
    return resolved


def _validate_meal_type(meal_type: str | None) -> str:
    cleaned = (meal_type or "").strip()
    if not cleaned:
        raise MealValidationError("Please select a meal type.")
    return cleaned


def with_ingredient_totals(meal: Meal, ingredients: list[MealIngredient]) -> MealDetail:
    """Return the meal with totals recomputed from its ingredients."""
    if not ingredients:
        return MealDetail(meal=meal, ingredients=[])
    totals = sum_ingredients(ingredients)
    recomputed = Meal(
        id=meal.id,
        user_id=meal.user_id,
        date=meal.date,
        meal_type=meal.meal_type,
        name=meal.name,
        total_calories=totals.calories,
        total_protein=totals.protein,
        total_carbs=totals.carbs,
        total_fat=totals.fats,
    )
    return MealDetail(meal=recomputed, ingredients=ingredients)


def _meal_type_rank(meal: Meal) -> int:
    if meal.meal_type in MEAL_TYPES:
        return MEAL_TYPES.index(meal.meal_type)
    return len(MEAL_TYPES)
