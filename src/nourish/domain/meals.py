"""Domain models for meal logging."""

from dataclasses import dataclass
from datetime import date
from uuid import UUID

MEAL_TYPES = (
    "Breakfast",
    "Morning Snack",
    "Lunch",
    "Afternoon Snack",
    "Dinner",
    "Late Night Snack",
)


@dataclass(frozen=True)
class NutritionEstimate:
    """Transient calorie and macro estimate for a described meal."""

    calories: float
    protein: float
    carbs: float
    fats: float
    source: str = "model"

    @property
    def is_fallback(self) -> bool:
        """Return True when the estimate is the fixed fallback value."""
        return self.source == "fallback"


@dataclass(frozen=True)
class MealIngredient:
    """A single ingredient line of a meal."""

    name: str
    quantity: str
    calories: float
    protein: float
    carbs: float
    fats: float


@dataclass(frozen=True)
class Meal:
    """Meal row with aggregate totals."""

    id: int
    user_id: UUID
    date: date
    meal_type: str
    name: str | None
    total_calories: float
    total_protein: float
    total_carbs: float
    total_fat: float


@dataclass(frozen=True)
class MealDetail:
    """Meal with its ingredient lines."""

    meal: Meal
    ingredients: list[MealIngredient]


def sum_ingredients(ingredients: list[MealIngredient]) -> NutritionEstimate:
    """Return the summed macros of a list of ingredients."""
    return NutritionEstimate(
        calories=sum(item.calories for item in ingredients),
        protein=sum(item.protein for item in ingredients),
        carbs=sum(item.carbs for item in ingredients),
        fats=sum(item.fats for item in ingredients),
        source="ingredients",
    )
