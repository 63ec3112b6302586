"""Domain models for statistics."""

from dataclasses import dataclass
from datetime import date


@dataclass(frozen=True)
class DailyTotals:
    """Total macros logged on one calendar day."""

    day: date
    calories: float
    protein: float
    carbs: float
    fats: float
    meal_count: int = 0


@dataclass(frozen=True)
class Dashboard:
    """Home screen figures for a user."""

    today: DailyTotals
    streak: int
    daily_caloric_goal: int

    @property
    def meals_today(self) -> int:
        return self.today.meal_count
