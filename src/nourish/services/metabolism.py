"""Metabolic calculations and profile service."""

import logging
import math
from dataclasses import dataclass, replace
from typing import Protocol
from uuid import UUID

from nourish.domain.profiles import (
    DEFAULT_THERAPY_STYLE,
    THERAPY_STYLES,
    MetabolicProfile,
    ProfileView,
    UserProfile,
)

_logger = logging.getLogger(__name__)

ACTIVITY_MULTIPLIERS = {
    "sedentary": 1.2,
    "lightly-active": 1.375,
    "moderately-active": 1.55,
    "very-active": 1.725,
    "extremely-active": 1.9,
}
DEFAULT_ACTIVITY_MULTIPLIER = 1.2
KCAL_PER_STEP = 0.03
KCAL_PER_KG = 7700
DAYS_PER_WEEK = 7

_EMPTY_METRICS = MetabolicProfile(bmr=0, tdee=0, daily_caloric_goal=0)


def calculate_bmr(profile: UserProfile) -> int:
    """Return Mifflin-St Jeor BMR, or 0 when inputs are missing.

    Implausible inputs that would give a negative value are clamped to 0.
    """
    if not (
        _is_positive(profile.age)
        and _is_positive(profile.height_cm)
        and _is_positive(profile.weight_kg)
    ):
        return 0
    base = 10 * profile.weight_kg + 6.25 * profile.height_cm - 5 * profile.age
    if profile.gender == "male":
        return max(round_half_up(base + 5), 0)
    if profile.gender == "female":
        return max(round_half_up(base - 161), 0)
    return 0


def calculate_tdee(bmr: int, activity_level: str | None, steps: int | None) -> int:
    """Return TDEE from BMR, activity multiplier and average steps."""
    if bmr <= 0:
        return 0
    multiplier = ACTIVITY_MULTIPLIERS.get(
        activity_level or "", DEFAULT_ACTIVITY_MULTIPLIER
    )
    tdee = bmr * multiplier
    # Applied at every activity level.
    if _is_positive(steps):
        tdee += steps * KCAL_PER_STEP
    return round_half_up(tdee)


def calculate_daily_caloric_goal(tdee: int, weekly_goal_kg: float | None) -> int:
    """Return TDEE adjusted by the surplus implied by a weekly weight goal."""
    if tdee <= 0:
        return 0
    if not weekly_goal_kg:
        return tdee
    daily_surplus = round_half_up(weekly_goal_kg * KCAL_PER_KG / DAYS_PER_WEEK)
    return round_half_up(tdee + daily_surplus)


def derive_metabolic_profile(profile: UserProfile) -> MetabolicProfile:
    """Derive BMR, TDEE and daily caloric goal from a profile."""
    bmr = calculate_bmr(profile)
    if bmr == 0:
        return _EMPTY_METRICS
    tdee = calculate_tdee(bmr, profile.activity_level, profile.avg_steps_per_day)
    return MetabolicProfile(
        bmr=bmr,
        tdee=tdee,
        daily_caloric_goal=calculate_daily_caloric_goal(
            tdee, profile.weekly_weight_gain_goal
        ),
    )


def round_half_up(value: float) -> int:
    """Round to the nearest integer with halves rounded up."""
    return math.floor(value + 0.5)


def _is_positive(value: float | None) -> bool:
    return isinstance(value, int | float) and not isinstance(value, bool) and value > 0


class ProfileRepository(Protocol):
    """Persistence interface for user profiles."""

    def get_profile(self, user_id: UUID) -> UserProfile | None:
        """Return the profile for a user, if present."""

    def update_profile(self, user_id: UUID, changes: dict[str, object]) -> None:
        """Write changed source fields."""

    def update_derived_fields(self, user_id: UUID, metrics: MetabolicProfile) -> None:
        """Write the cached bmr, tdee and daily caloric goal."""


@dataclass
class ProfileService:
    """Loads profiles and keeps their cached metrics fresh."""

    repository: ProfileRepository

    def get_profile(self, user_id: UUID) -> ProfileView | None:
        """Return the profile with metrics derived on this read."""
        profile = self.repository.get_profile(user_id)
        if profile is None:
            return None
        return self._refresh(profile)

    def update_profile(
        self, user_id: UUID, changes: dict[str, object]
    ) -> ProfileView | None:
        """Apply source-field changes and return the refreshed view."""
        if changes:
            self.repository.update_profile(user_id, changes)
        return self.get_profile(user_id)

    def get_therapy_style(self, user_id: UUID) -> str:
        """Return the user's therapy style, defaulting to ACT."""
        profile = self.repository.get_profile(user_id)
        if profile and profile.therapy_style in THERAPY_STYLES:
            return profile.therapy_style
        return DEFAULT_THERAPY_STYLE

    def _refresh(self, profile: UserProfile) -> ProfileView:
        metrics = derive_metabolic_profile(profile)
        cached = (profile.bmr, profile.tdee, profile.daily_caloric_goal)
        if cached != (metrics.bmr, metrics.tdee, metrics.daily_caloric_goal):
            _logger.info("Refreshing cached metrics for user %s", profile.user_id)
            self.repository.update_derived_fields(profile.user_id, metrics)
            profile = replace(
                profile,
                bmr=metrics.bmr,
                tdee=metrics.tdee,
                daily_caloric_goal=metrics.daily_caloric_goal,
            )
        return ProfileView(profile=profile, metrics=metrics)
