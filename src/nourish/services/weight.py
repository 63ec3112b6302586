"""Weight tracking service."""

from dataclasses import dataclass
from datetime import date
from typing import Protocol
from uuid import UUID

from nourish.domain.weight import WeightEntry, WeightTrend


class WeightRepository(Protocol):
    """Persistence interface for weight entries."""

    def upsert_entry(self, entry: WeightEntry) -> None:
        """Insert or replace the entry for the user and date."""

    def list_entries(self, user_id: UUID, start: date, end: date) -> list[WeightEntry]:
        """Return entries dated within [start, end], oldest first."""


@dataclass
class WeightService:
    """Records weigh-ins and summarises the recent trend."""

    repository: WeightRepository

    def record_weight(self, user_id: UUID, day: date, weight_kg: float) -> WeightEntry:
        """Store today's weight, replacing any entry for the same day."""
        if weight_kg <= 0:
            raise ValueError("Weight must be a positive number of kilograms.")
        entry = WeightEntry(user_id=user_id, date=day, weight_kg=weight_kg)
        self.repository.upsert_entry(entry)
        return entry

    def list_entries(self, user_id: UUID, start: date, end: date) -> list[WeightEntry]:
        return self.repository.list_entries(user_id, start, end)


def get_trend(entries: list[WeightEntry]) -> WeightTrend | None:
    """Compare the two most recent entries."""
    if len(entries) < 2:  # noqa: PLR2004
        return None
    previous, latest = sorted(entries, key=lambda entry: entry.date)[-2:]
    change = round(latest.weight_kg - previous.weight_kg, 2)
    if change > 0:
        direction = "increasing"
    elif change < 0:
        direction = "decreasing"
    else:
        direction = "stable"
    return WeightTrend(change_kg=change, direction=direction)
