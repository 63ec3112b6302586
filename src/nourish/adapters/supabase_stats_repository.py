"""Supabase repository for meal statistics."""

from dataclasses import dataclass
from datetime import date
from uuid import UUID

from supabase import Client

from nourish.adapters.supabase_meal_repository import (
    MEAL_COLUMNS,
    SupabaseMealRepository,
    parse_meal,
)
from nourish.domain.meals import Meal, MealIngredient
from nourish.services.stats import StatsRepository


@dataclass
class SupabaseStatsRepository(StatsRepository):
    """Supabase implementation for streak and totals queries."""

    client: Client

    def list_meal_dates(self, user_id: UUID) -> list[date]:
        """Return every logged meal date for a user, newest first."""
        response = (
            self.client.table("Meals")
            .select("date")
            .eq("user_id", str(user_id))
            .order("date", desc=True)
            .execute()
        )
        return [
            date.fromisoformat(str(row["date"])[:10])
            for row in response.data or []
            if row.get("date")
        ]

    def list_meals_between(self, user_id: UUID, start: date, end: date) -> list[Meal]:
        """Return meals dated within [start, end]."""
        response = (
            self.client.table("Meals")
            .select(MEAL_COLUMNS)
            .eq("user_id", str(user_id))
            .gte("date", start.isoformat())
            .lte("date", end.isoformat())
            .order("date", desc=False)
            .execute()
        )
        return [parse_meal(row) for row in response.data or []]

    def list_ingredients(
        self, meal_ids: list[int]
    ) -> dict[int, list[MealIngredient]]:
        """Return ingredients grouped by meal id."""
        return SupabaseMealRepository(self.client).list_ingredients(meal_ids)
