"""Domain models for ingredient lookups."""

from dataclasses import dataclass


@dataclass(frozen=True)
class IngredientMatch:
    """A FoodData Central food with macros per 100 g."""

    fdc_id: int
    description: str
    brand_name: str | None
    data_type: str | None
    calories: float = 0.0
    protein: float = 0.0
    carbs: float = 0.0
    fats: float = 0.0
