"""Supabase repository for user profiles."""

from dataclasses import dataclass
from uuid import UUID

from supabase import Client

from nourish.domain.profiles import MetabolicProfile, UserProfile
from nourish.services.metabolism import ProfileRepository

_PROFILE_COLUMNS = (
    "user_id, username, age, height_cm, weight_kg, gender, goal_weight_kg, "
    "weekly_weight_gain_goal, activity_level, avg_steps_per_day, therapy_style, "
    "therapist_description, fear_foods, bmr, tdee, daily_caloric_goal"
)


@dataclass
class SupabaseProfileRepository(ProfileRepository):
    """Supabase implementation for the Users table."""

    client: Client

    def get_profile(self, user_id: UUID) -> UserProfile | None:
        """Return the profile row for a user."""
        response = (
            self.client.table("Users")
            .select(_PROFILE_COLUMNS)
            .eq("user_id", str(user_id))
            .limit(1)
            .execute()
        )
        if not response.data:
            return None
        return _parse_profile(response.data[0])

    def update_profile(self, user_id: UUID, changes: dict[str, object]) -> None:
        """Write changed source fields."""
        self.client.table("Users").update(changes).eq(
            "user_id", str(user_id)
        ).execute()

    def update_derived_fields(self, user_id: UUID, metrics: MetabolicProfile) -> None:
        """Write the cached metabolic metrics."""
        self.client.table("Users").update(
            {
                "bmr": metrics.bmr,
                "tdee": metrics.tdee,
                "daily_caloric_goal": metrics.daily_caloric_goal,
            }
        ).eq("user_id", str(user_id)).execute()


def _parse_profile(row: dict[str, object]) -> UserProfile:
    return UserProfile(
        user_id=UUID(str(row["user_id"])),
        username=row.get("username"),
        age=_optional_int(row.get("age")),
        height_cm=_optional_float(row.get("height_cm")),
        weight_kg=_optional_float(row.get("weight_kg")),
        gender=row.get("gender"),
        goal_weight_kg=_optional_float(row.get("goal_weight_kg")),
        weekly_weight_gain_goal=_optional_float(row.get("weekly_weight_gain_goal")),
        activity_level=row.get("activity_level"),
        avg_steps_per_day=_optional_int(row.get("avg_steps_per_day")),
        therapy_style=row.get("therapy_style"),
        therapist_description=row.get("therapist_description"),
        fear_foods=_string_tuple(row.get("fear_foods")),
        bmr=_optional_int(row.get("bmr")),
        tdee=_optional_int(row.get("tdee")),
        daily_caloric_goal=_optional_int(row.get("daily_caloric_goal")),
    )


def _optional_int(value: object) -> int | None:
    if isinstance(value, int | float) and not isinstance(value, bool):
        return int(value)
    return None


def _optional_float(value: object) -> float | None:
    if isinstance(value, int | float) and not isinstance(value, bool):
        return float(value)
    return None


def _string_tuple(value: object) -> tuple[str, ...]:
    if not isinstance(value, list):
        return ()
    return tuple(item for item in value if isinstance(item, str) and item.strip())
