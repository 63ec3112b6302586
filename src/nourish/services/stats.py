"""Streak and daily statistics for meal logs."""

from collections.abc import Iterable
from dataclasses import dataclass
from datetime import date, datetime, timedelta
from typing import Protocol
from uuid import UUID

from nourish.domain.meals import Meal, MealIngredient
from nourish.domain.stats import DailyTotals, Dashboard
from nourish.services.meals import with_ingredient_totals
from nourish.services.metabolism import ProfileService

MAX_STREAK_DAYS = 365


def calculate_streak(meal_dates: Iterable[date | str], today: date) -> int:
    """Count consecutive days with a logged meal, walking back from today."""
    logged = _to_date_set(meal_dates)
    streak = 0
    for offset in range(MAX_STREAK_DAYS):
        if today - timedelta(days=offset) not in logged:
            break
        streak += 1
    return streak


def _to_date_set(values: Iterable[date | str]) -> set[date]:
    days: set[date] = set()
    for value in values:
        if isinstance(value, datetime):
            days.add(value.date())
            continue
        if isinstance(value, date):
            days.add(value)
            continue
        try:
            days.add(date.fromisoformat(str(value)[:10]))
        except ValueError:
            continue
    return days


class StatsRepository(Protocol):
    """Read-only meal queries used for statistics."""

    def list_meal_dates(self, user_id: UUID) -> list[date]:
        """Return the date of every meal a user has logged."""

    def list_meals_between(self, user_id: UUID, start: date, end: date) -> list[Meal]:
        """Return meals dated within [start, end]."""

    def list_ingredients(
        self, meal_ids: list[int]
    ) -> dict[int, list[MealIngredient]]:
        """Return ingredients grouped by meal id."""


@dataclass
class StatsService:
    """Service computing dashboard figures from meal records."""

    repository: StatsRepository
    profile_service: ProfileService

    def get_streak(self, user_id: UUID, today: date) -> int:
        """Return the user's current logging streak."""
        return calculate_streak(self.repository.list_meal_dates(user_id), today)

    def get_dashboard(self, user_id: UUID, today: date) -> Dashboard:
        """Return today's totals, streak and caloric goal."""
        meals = self._meals_between(user_id, today, today)
        view = self.profile_service.get_profile(user_id)
        goal = view.metrics.daily_caloric_goal if view else 0
        return Dashboard(
            today=_aggregate_day(today, meals),
            streak=self.get_streak(user_id, today),
            daily_caloric_goal=goal,
        )

    def get_daily_totals(
        self, user_id: UUID, start: date, end: date
    ) -> list[DailyTotals]:
        """Return per-day totals for every day in [start, end]."""
        meals = self._meals_between(user_id, start, end)
        days = (end - start).days + 1
        return [
            _aggregate_day(start + timedelta(days=offset), meals)
            for offset in range(max(days, 0))
        ]

    def _meals_between(self, user_id: UUID, start: date, end: date) -> list[Meal]:
        """Return meals with totals recomputed from their ingredients."""
        meals = self.repository.list_meals_between(user_id, start, end)
        grouped = self.repository.list_ingredients([meal.id for meal in meals])
        return [
            with_ingredient_totals(meal, grouped.get(meal.id, [])).meal
            for meal in meals
        ]


def _aggregate_day(day: date, meals: list[Meal]) -> DailyTotals:
    total = DailyTotals(day=day, calories=0, protein=0, carbs=0, fats=0)
    for meal in meals:
        if meal.date != day:
            continue
        total = DailyTotals(
            day=day,
            calories=total.calories + meal.total_calories,
            protein=total.protein + meal.total_protein,
            carbs=total.carbs + meal.total_carbs,
            fats=total.fats + meal.total_fat,
            meal_count=total.meal_count + 1,
        )
    return total
