"""Weight tracking domain models."""

from dataclasses import dataclass
from datetime import date
from uuid import UUID


@dataclass(frozen=True)
class WeightEntry:
    """One weigh-in; at most one per user per day."""

    user_id: UUID
    date: date
    weight_kg: float


@dataclass(frozen=True)
class WeightTrend:
    change_kg: float
    direction: str
