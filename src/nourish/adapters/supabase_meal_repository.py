"""Supabase repository for meals and meal ingredients."""

from dataclasses import dataclass
from datetime import date
from uuid import UUID

from supabase import Client

from nourish.domain.meals import Meal, MealIngredient, NutritionEstimate
from nourish.services.meals import MealRepository

MEAL_COLUMNS = (
    "id, user_id, date, meal_type, name, total_calories, total_protein, "
    "total_carbs, total_fat"
)


@dataclass
class SupabaseMealRepository(MealRepository):
    """Supabase implementation for the Meals and MealIngredients tables."""

    client: Client

    def create_meal(  # noqa: PLR0913
        self,
        user_id: UUID,
        day: date,
        meal_type: str,
        name: str | None,
        totals: NutritionEstimate,
    ) -> Meal:
        """Insert a meal row and return it."""
        response = (
            self.client.table("Meals")
            .insert(
                {
                    "user_id": str(user_id),
                    "date": day.isoformat(),
                    "meal_type": meal_type,
                    "name": name,
                    "total_calories": totals.calories,
                    "total_protein": totals.protein,
                    "total_carbs": totals.carbs,
                    "total_fat": totals.fats,
                }
            )
            .execute()
        )
        if not response.data:
            raise RuntimeError("Failed to create meal")
        return parse_meal(response.data[0])

    def create_ingredients(
        self, meal_id: int, ingredients: list[MealIngredient]
    ) -> None:
        """Insert all ingredient rows in a single request."""
        payload = [
            {
                "meal_id": str(meal_id),
                "name": item.name,
                "quantity": item.quantity,
                "calories": item.calories,
                "protein": item.protein,
                "carbs": item.carbs,
                "fats": item.fats,
            }
            for item in ingredients
        ]
        if not payload:
            return
        response = self.client.table("MealIngredients").insert(payload).execute()
        if not response.data:
            raise RuntimeError(f"Failed to create ingredients for meal {meal_id}")

    def get_meal(self, meal_id: int) -> Meal | None:
        """Return a meal row by id."""
        response = (
            self.client.table("Meals")
            .select(MEAL_COLUMNS)
            .eq("id", meal_id)
            .limit(1)
            .execute()
        )
        if not response.data:
            return None
        return parse_meal(response.data[0])

    def list_meals_for_day(self, user_id: UUID, day: date) -> list[Meal]:
        """Return a user's meals on a day."""
        response = (
            self.client.table("Meals")
            .select(MEAL_COLUMNS)
            .eq("user_id", str(user_id))
            .eq("date", day.isoformat())
            .order("created_at", desc=False)
            .execute()
        )
        return [parse_meal(row) for row in response.data or []]

    def list_ingredients(
        self, meal_ids: list[int]
    ) -> dict[int, list[MealIngredient]]:
        """Return ingredients for several meals grouped by meal id."""
        if not meal_ids:
            return {}
        response = (
            self.client.table("MealIngredients")
            .select("meal_id, name, quantity, calories, protein, carbs, fats")
            .in_("meal_id", [str(meal_id) for meal_id in meal_ids])
            .order("id", desc=False)
            .execute()
        )
        grouped: dict[int, list[MealIngredient]] = {}
        for row in response.data or []:
            grouped.setdefault(int(row["meal_id"]), []).append(_parse_ingredient(row))
        return grouped

    def update_meal(
        self, meal_id: int, meal_type: str, totals: NutritionEstimate
    ) -> None:
        """Update a meal's type and totals."""
        self.client.table("Meals").update(
            {
                "meal_type": meal_type,
                "total_calories": totals.calories,
                "total_protein": totals.protein,
                "total_carbs": totals.carbs,
                "total_fat": totals.fats,
            }
        ).eq("id", meal_id).execute()

    def delete_ingredients(self, meal_id: int) -> None:
        """Delete all ingredients of a meal."""
        self.client.table("MealIngredients").delete().eq(
            "meal_id", str(meal_id)
        ).execute()

    def delete_meal(self, meal_id: int) -> None:
        """Delete a meal row."""
        self.client.table("Meals").delete().eq("id", meal_id).execute()


def parse_meal(row: dict[str, object]) -> Meal:
    """Build a Meal from a Meals row."""
    return Meal(
        id=int(row["id"]),
        user_id=UUID(str(row["user_id"])),
        date=date.fromisoformat(str(row["date"])[:10]),
        meal_type=str(row.get("meal_type") or ""),
        name=row.get("name"),
        total_calories=float(row.get("total_calories") or 0.0),
        total_protein=float(row.get("total_protein") or 0.0),
        total_carbs=float(row.get("total_carbs") or 0.0),
        total_fat=float(row.get("total_fat") or 0.0),
    )


def _parse_ingredient(row: dict[str, object]) -> MealIngredient:
    return MealIngredient(
        name=str(row.get("name") or ""),
        quantity=str(row.get("quantity") or ""),
        calories=float(row.get("calories") or 0.0),
        protein=float(row.get("protein") or 0.0),
        carbs=float(row.get("carbs") or 0.0),
        fats=float(row.get("fats") or 0.0),
    )
