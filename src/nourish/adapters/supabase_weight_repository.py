"""Supabase repository for weight tracking."""

from dataclasses import dataclass
from datetime import date
from uuid import UUID

from supabase import Client

from nourish.domain.weight import WeightEntry
from nourish.services.weight import WeightRepository


@dataclass
class SupabaseWeightRepository(WeightRepository):
    """Supabase implementation for the WeightTracking table."""

    client: Client

    def upsert_entry(self, entry: WeightEntry) -> None:
        """Insert or replace the entry for the user and date."""
        self.client.table("WeightTracking").upsert(
            {
                "user_id": str(entry.user_id),
                "date": entry.date.isoformat(),
                "weight_kg": entry.weight_kg,
            },
            on_conflict="user_id,date",
        ).execute()

    def list_entries(self, user_id: UUID, start: date, end: date) -> list[WeightEntry]:
        """Return entries in the date range, oldest first."""
        response = (
            self.client.table("WeightTracking")
            .select("user_id, date, weight_kg")
            .eq("user_id", str(user_id))
            .gte("date", start.isoformat())
            .lte("date", end.isoformat())
            .order("date", desc=False)
            .execute()
        )
        return [
            WeightEntry(
                user_id=user_id,
                date=date.fromisoformat(str(row["date"])[:10]),
                weight_kg=float(row.get("weight_kg") or 0.0),
            )
            for row in response.data or []
        ]
