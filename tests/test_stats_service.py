"""Tests for streaks and daily statistics."""

from datetime import date, datetime, timedelta
from uuid import uuid4

from nourish.domain.meals import MealIngredient, NutritionEstimate
from nourish.domain.profiles import UserProfile
from nourish.services.meals import MealLogService
from nourish.services.metabolism import ProfileService
from nourish.services.stats import StatsService, calculate_streak
from tests.conftest import InMemoryMealRepository, InMemoryProfileRepository

TODAY = date(2024, 5, 10)


def _ingredient(calories: float = 300) -> MealIngredient:
    return MealIngredient(
        name="Oats", quantity="1 cup", calories=calories, protein=10, carbs=50, fats=6
    )


def test_streak_empty() -> None:
    assert calculate_streak([], TODAY) == 0


def test_streak_today_only() -> None:
    assert calculate_streak([TODAY], TODAY) == 1


def test_streak_stops_at_gap() -> None:
    dates = [TODAY, TODAY - timedelta(days=1), TODAY - timedelta(days=3)]
    assert calculate_streak(dates, TODAY) == 2


def test_streak_requires_a_meal_today() -> None:
    dates = [TODAY - timedelta(days=1), TODAY - timedelta(days=2)]
    assert calculate_streak(dates, TODAY) == 0


def test_streak_accepts_iso_strings_and_duplicates() -> None:
    dates = ["2024-05-10", "2024-05-10T08:30:00", datetime(2024, 5, 9, 12), "junk"]
    assert calculate_streak(dates, TODAY) == 2


def test_streak_is_capped_at_a_year() -> None:
    dates = [TODAY - timedelta(days=offset) for offset in range(400)]
    assert calculate_streak(dates, TODAY) == 365


def _stats_service() -> tuple[StatsService, MealLogService, UserProfile]:
    profile = UserProfile(
        user_id=uuid4(),
        gender="female",
        age=25,
        height_cm=165,
        weight_kg=55,
        activity_level="moderately-active",
        avg_steps_per_day=6000,
        weekly_weight_gain_goal=0.25,
    )
    meals = InMemoryMealRepository()
    profiles = ProfileService(
        InMemoryProfileRepository(profiles={profile.user_id: profile})
    )
    return (
        StatsService(repository=meals, profile_service=profiles),
        MealLogService(meals),
        profile,
    )


def test_dashboard_before_and_after_first_meal() -> None:
    stats, meal_log, profile = _stats_service()

    before = stats.get_dashboard(profile.user_id, TODAY)
    assert before.streak == 0
    assert before.meals_today == 0
    assert before.daily_caloric_goal == 2462

    meal_log.save_meal(profile.user_id, "Breakfast", [_ingredient()], TODAY)
    after = stats.get_dashboard(profile.user_id, TODAY)

    assert after.meals_today == 1
    assert after.streak == 1
    assert after.today.calories == 300


def test_daily_totals_fill_empty_days() -> None:
    stats, meal_log, profile = _stats_service()
    meal_log.save_meal(profile.user_id, "Lunch", [_ingredient(400)], TODAY)
    meal_log.save_meal(profile.user_id, "Dinner", [_ingredient(600)], TODAY)

    totals = stats.get_daily_totals(profile.user_id, TODAY - timedelta(days=2), TODAY)

    assert [day.day for day in totals] == [
        TODAY - timedelta(days=2),
        TODAY - timedelta(days=1),
        TODAY,
    ]
    assert totals[0].calories == 0
    assert totals[-1].calories == 1000
    assert totals[-1].meal_count == 2


def test_totals_follow_ingredients_over_stored_columns() -> None:
    stats, meal_log, profile = _stats_service()
    detail = meal_log.save_meal(profile.user_id, "Lunch", [_ingredient(100)], TODAY)
    meal_log.repository.ingredients[detail.meal.id] = [_ingredient(500)]

    dashboard = stats.get_dashboard(profile.user_id, TODAY)
    totals = stats.get_daily_totals(profile.user_id, TODAY, TODAY)

    assert detail.meal.total_calories == 100
    assert dashboard.today.calories == 500
    assert totals[-1].calories == 500


def test_described_meal_keeps_stored_totals_in_stats() -> None:
    stats, meal_log, profile = _stats_service()
    meal_log.save_described_meal(
        profile.user_id,
        "Dinner",
        "Pasta with pesto",
        NutritionEstimate(calories=720, protein=22, carbs=90, fats=28),
        TODAY,
    )

    assert stats.get_dashboard(profile.user_id, TODAY).today.calories == 720
