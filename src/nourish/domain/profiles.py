"""Domain models for user profiles and derived metabolic metrics."""

from dataclasses import dataclass
from uuid import UUID

THERAPY_STYLES = ("ACT", "CBT", "DBT")
DEFAULT_THERAPY_STYLE = "ACT"


@dataclass(frozen=True)
class UserProfile:
    """Biometric and goal attributes for a user."""

    user_id: UUID
    username: str | None = None
    age: int | None = None
    height_cm: float | None = None
    weight_kg: float | None = None
    gender: str | None = None
    goal_weight_kg: float | None = None
    weekly_weight_gain_goal: float | None = None
    activity_level: str | None = None
    avg_steps_per_day: int | None = None
    therapy_style: str | None = None
    therapist_description: str | None = None
    fear_foods: tuple[str, ...] = ()
    bmr: int | None = None
    tdee: int | None = None
    daily_caloric_goal: int | None = None


@dataclass(frozen=True)
class MetabolicProfile:
    """Derived energy metrics, all in kcal per day."""

    bmr: int
    tdee: int
    daily_caloric_goal: int


@dataclass(frozen=True)
class ProfileView:
    """A stored profile paired with freshly derived metrics."""

    profile: UserProfile
    metrics: MetabolicProfile
