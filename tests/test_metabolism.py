"""Tests for metabolic calculations and the profile service."""

from uuid import uuid4

from nourish.domain.profiles import UserProfile
from nourish.services.metabolism import (
    ProfileService,
    calculate_bmr,
    calculate_daily_caloric_goal,
    calculate_tdee,
    derive_metabolic_profile,
    round_half_up,
)
from tests.conftest import InMemoryProfileRepository


def _profile(**overrides) -> UserProfile:  # type: ignore[no-untyped-def]
    values = {"age": 30, "height_cm": 175, "weight_kg": 70, "gender": "male"}
    values.update(overrides)
    return UserProfile(user_id=uuid4(), **values)


def test_bmr_male_and_female() -> None:
    assert calculate_bmr(_profile()) == 1649
    assert calculate_bmr(_profile(gender="female")) == 1483


def test_missing_or_invalid_gender_yields_zero_metrics() -> None:
    for gender in (None, "", "other"):
        metrics = derive_metabolic_profile(_profile(gender=gender))
        assert (metrics.bmr, metrics.tdee, metrics.daily_caloric_goal) == (0, 0, 0)


def test_missing_biometrics_yield_zero_bmr() -> None:
    assert calculate_bmr(_profile(age=None)) == 0
    assert calculate_bmr(_profile(height_cm=0)) == 0
    assert calculate_bmr(_profile(weight_kg=-3)) == 0


def test_implausible_biometrics_clamp_to_zero_metrics() -> None:
    for gender in ("male", "female"):
        profile = _profile(age=120, height_cm=50, weight_kg=1, gender=gender)
        metrics = derive_metabolic_profile(profile)
        assert calculate_bmr(profile) == 0
        assert (metrics.bmr, metrics.tdee, metrics.daily_caloric_goal) == (0, 0, 0)


def test_tdee_matches_formula() -> None:
    assert calculate_tdee(1649, "moderately-active", 8000) == round_half_up(
        1649 * 1.55 + 8000 * 0.03
    )
    assert calculate_tdee(1649, "sedentary", None) == round_half_up(1649 * 1.2)


def test_tdee_unknown_activity_level_uses_sedentary_multiplier() -> None:
    assert calculate_tdee(1500, None, 0) == 1800
    assert calculate_tdee(1500, "couch", 0) == 1800


def test_tdee_increases_with_steps() -> None:
    values = [calculate_tdee(1483, "lightly-active", steps) for steps in (0, 2000, 9000)]
    assert values == sorted(values)
    assert values[0] < values[-1]


def test_steps_apply_at_every_activity_level() -> None:
    without = calculate_tdee(1600, "extremely-active", 0)
    with_steps = calculate_tdee(1600, "extremely-active", 10000)
    assert with_steps - without == 300


def test_weight_loss_goal_is_below_tdee() -> None:
    assert calculate_daily_caloric_goal(2200, -0.5) < 2200
    assert calculate_daily_caloric_goal(2200, -0.5) == 1650


def test_no_weekly_goal_returns_tdee() -> None:
    assert calculate_daily_caloric_goal(2200, None) == 2200
    assert calculate_daily_caloric_goal(2200, 0) == 2200


def test_round_half_up() -> None:
    assert round_half_up(2.5) == 3
    assert round_half_up(1295.25) == 1295
    assert round_half_up(-0.5) == 0


def test_recovery_profile_metrics() -> None:
    metrics = derive_metabolic_profile(
        _profile(
            gender="female",
            age=25,
            height_cm=165,
            weight_kg=55,
            activity_level="moderately-active",
            avg_steps_per_day=6000,
            weekly_weight_gain_goal=0.25,
        )
    )

    assert metrics.bmr == 1295
    assert metrics.tdee == 2187
    assert metrics.daily_caloric_goal == 2462


def test_profile_service_refreshes_stale_cache_once() -> None:
    profile = _profile(bmr=1000, tdee=1200, daily_caloric_goal=1200)
    repository = InMemoryProfileRepository(profiles={profile.user_id: profile})
    service = ProfileService(repository)

    first = service.get_profile(profile.user_id)
    second = service.get_profile(profile.user_id)

    assert first is not None and second is not None
    assert first.metrics.bmr == 1649
    assert first.profile.bmr == 1649
    assert len(repository.derived_writes) == 1


def test_profile_service_update_recomputes_metrics() -> None:
    profile = _profile()
    repository = InMemoryProfileRepository(profiles={profile.user_id: profile})
    service = ProfileService(repository)

    view = service.update_profile(profile.user_id, {"weight_kg": 80})

    assert view is not None
    assert view.metrics.bmr == 1749
    assert repository.profiles[profile.user_id].bmr == 1749


def test_profile_service_unknown_user() -> None:
    service = ProfileService(InMemoryProfileRepository())
    assert service.get_profile(uuid4()) is None


def test_therapy_style_defaults_to_act() -> None:
    profile = _profile(therapy_style="CBT")
    repository = InMemoryProfileRepository(profiles={profile.user_id: profile})
    service = ProfileService(repository)

    assert service.get_therapy_style(profile.user_id) == "CBT"
    assert service.get_therapy_style(uuid4()) == "ACT"
