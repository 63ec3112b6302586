"""Shared test fixtures."""

import random
from dataclasses import dataclass, field, replace
from datetime import date
from itertools import count
from uuid import UUID, uuid4

import pytest

from nourish.adapters.fdc_client import FdcClient
from nourish.adapters.supabase_auth_client import AuthClient
from nourish.config import Settings
from nourish.containers import AppContainer
from nourish.domain.chat import ChatExchange
from nourish.domain.meals import Meal, MealIngredient, NutritionEstimate
from nourish.domain.profiles import MetabolicProfile, UserProfile
from nourish.domain.weight import WeightEntry
from nourish.services.cache import InMemoryCache
from nourish.services.chat import ChatLogRepository, ChatService
from nourish.services.encouragement import EncouragementComposer
from nourish.services.estimator import NutritionEstimator
from nourish.services.ingredients import IngredientSearchService
from nourish.services.llm import CompletionBackend, CompletionRequest, LlmGateway
from nourish.services.meals import MealLogService, MealRepository
from nourish.services.metabolism import ProfileRepository, ProfileService
from nourish.services.stats import StatsRepository, StatsService
from nourish.services.weight import WeightRepository, WeightService

TEST_TOKEN = "valid-token"


@dataclass
class FakeBackend(CompletionBackend):
    """Completion backend returning queued replies or raising errors."""

    name: str = "fake"
    replies: list[str | Exception] = field(default_factory=list)
    default: str | Exception = ""
    requests: list[CompletionRequest] = field(default_factory=list)

    async def complete(self, request: CompletionRequest) -> str:
        self.requests.append(request)
        reply = self.replies.pop(0) if self.replies else self.default
        if isinstance(reply, Exception):
            raise reply
        return reply


@dataclass
class InMemoryProfileRepository(ProfileRepository):
    """In-memory profile repository for tests."""

    profiles: dict[UUID, UserProfile] = field(default_factory=dict)
    derived_writes: list[MetabolicProfile] = field(default_factory=list)

    def get_profile(self, user_id: UUID) -> UserProfile | None:
        return self.profiles.get(user_id)

    def update_profile(self, user_id: UUID, changes: dict[str, object]) -> None:
        self.profiles[user_id] = replace(self.profiles[user_id], **changes)

    def update_derived_fields(self, user_id: UUID, metrics: MetabolicProfile) -> None:
        self.derived_writes.append(metrics)
        self.profiles[user_id] = replace(
            self.profiles[user_id],
            bmr=metrics.bmr,
            tdee=metrics.tdee,
            daily_caloric_goal=metrics.daily_caloric_goal,
        )


@dataclass
class InMemoryMealRepository(MealRepository, StatsRepository):
    """In-memory meal store serving both meal and stats queries."""

    meals: dict[int, Meal] = field(default_factory=dict)
    ingredients: dict[int, list[MealIngredient]] = field(default_factory=dict)
    failing_ingredient_inserts: int = 0
    deleted: list[int] = field(default_factory=list)
    _ids: count = field(default_factory=lambda: count(1))

    def create_meal(  # noqa: PLR0913
        self,
        user_id: UUID,
        day: date,
        meal_type: str,
        name: str | None,
        totals: NutritionEstimate,
    ) -> Meal:
        meal = Meal(
            id=next(self._ids),
            user_id=user_id,
            date=day,
            meal_type=meal_type,
            name=name,
            total_calories=totals.calories,
            total_protein=totals.protein,
            total_carbs=totals.carbs,
            total_fat=totals.fats,
        )
        self.meals[meal.id] = meal
        return meal

    def create_ingredients(
        self, meal_id: int, ingredients: list[MealIngredient]
    ) -> None:
        if self.failing_ingredient_inserts > 0:
            self.failing_ingredient_inserts -= 1
            raise RuntimeError("ingredient insert failed")
        self.ingredients.setdefault(meal_id, []).extend(ingredients)

    def get_meal(self, meal_id: int) -> Meal | None:
        return self.meals.get(meal_id)

    def list_meals_for_day(self, user_id: UUID, day: date) -> list[Meal]:
        return [
            meal
            for meal in self.meals.values()
            if meal.user_id == user_id and meal.date == day
        ]

    def list_ingredients(
        self, meal_ids: list[int]
    ) -> dict[int, list[MealIngredient]]:
        return {
            meal_id: list(self.ingredients[meal_id])
            for meal_id in meal_ids
            if meal_id in self.ingredients
        }

    def update_meal(
        self, meal_id: int, meal_type: str, totals: NutritionEstimate
    ) -> None:
        self.meals[meal_id] = replace(
            self.meals[meal_id],
            meal_type=meal_type,
            total_calories=totals.calories,
            total_protein=totals.protein,
            total_carbs=totals.carbs,
            total_fat=totals.fats,
        )

    def delete_ingredients(self, meal_id: int) -> None:
        self.ingredients.pop(meal_id, None)

    def delete_meal(self, meal_id: int) -> None:
        self.deleted.append(meal_id)
        self.meals.pop(meal_id, None)

    def list_meal_dates(self, user_id: UUID) -> list[date]:
        return [meal.date for meal in self.meals.values() if meal.user_id == user_id]

    def list_meals_between(self, user_id: UUID, start: date, end: date) -> list[Meal]:
        return [
            meal
            for meal in self.meals.values()
            if meal.user_id == user_id and start <= meal.date <= end
        ]


@dataclass
class InMemoryWeightRepository(WeightRepository):
    """In-memory weight repository keyed by user and date."""

    entries: dict[tuple[UUID, date], WeightEntry] = field(default_factory=dict)

    def upsert_entry(self, entry: WeightEntry) -> None:
        self.entries[(entry.user_id, entry.date)] = entry

    def list_entries(self, user_id: UUID, start: date, end: date) -> list[WeightEntry]:
        return sorted(
            (
                entry
                for (owner, day), entry in self.entries.items()
                if owner == user_id and start <= day <= end
            ),
            key=lambda entry: entry.date,
        )


@dataclass
class InMemoryChatLogRepository(ChatLogRepository):
    """In-memory chat log repository for tests."""

    exchanges: list[ChatExchange] = field(default_factory=list)
    fail: bool = False

    def create_exchange(self, exchange: ChatExchange) -> None:
        if self.fail:
            raise RuntimeError("insert failed")
        self.exchanges.append(exchange)

    def list_recent(self, user_id: UUID, limit: int) -> list[ChatExchange]:
        owned = [item for item in self.exchanges if item.user_id == user_id]
        return owned[-limit:]


@dataclass
class FakeFdcClient(FdcClient):
    """Fake FDC client with an in-memory search payload."""

    search_payload: dict[str, object] = field(
        default_factory=lambda: {
            "foods": [
                {
                    "fdcId": 171077,
                    "description": "Chicken breast, roasted",
                    "dataType": "SR Legacy",
                    "foodNutrients": [
                        {"nutrientId": 1008, "value": 165},
                        {"nutrientId": 1003, "value": 31},
                        {"nutrientId": 1004, "value": 3.6},
                        {"nutrientId": 1005, "value": 0},
                    ],
                }
            ]
        }
    )
    calls: list[str] = field(default_factory=list)

    async def search_foods(self, query: str, page_size: int = 10) -> dict[str, object]:
        self.calls.append(query)
        return self.search_payload


@dataclass
class FakeAuthClient(AuthClient):
    """Auth client accepting a fixed set of tokens."""

    tokens: dict[str, UUID] = field(default_factory=dict)

    def get_user_id(self, access_token: str) -> UUID:
        if access_token not in self.tokens:
            raise PermissionError("Invalid or expired session")
        return self.tokens[access_token]


@pytest.fixture
def settings() -> Settings:
    return Settings(
        supabase_url="https://example.supabase.co",
        supabase_service_key="header.payload.signature",
        openai_api_key="openai-key",
        fdc_api_key="fdc-key",
    )


@pytest.fixture
def user_id() -> UUID:
    return uuid4()


@pytest.fixture
def backend() -> FakeBackend:
    return FakeBackend()


@pytest.fixture
def container(settings: Settings, user_id: UUID, backend: FakeBackend) -> AppContainer:
    gateway = LlmGateway(backends=[backend], timeout_seconds=1.0)
    profile_service = ProfileService(
        InMemoryProfileRepository(
            profiles={
                user_id: UserProfile(
                    user_id=user_id,
                    username="sam",
                    age=30,
                    height_cm=175,
                    weight_kg=70,
                    gender="female",
                    activity_level="sedentary",
                )
            }
        )
    )
    meal_repository = InMemoryMealRepository()
    composer = EncouragementComposer(gateway, rng=random.Random(7))

    async def close_resources() -> None:
        return None

    return AppContainer(
        settings=settings,
        auth_client=FakeAuthClient(tokens={TEST_TOKEN: user_id}),
        profile_service=profile_service,
        estimator=NutritionEstimator(gateway),
        composer=composer,
        meal_log_service=MealLogService(meal_repository),
        ingredient_search_service=IngredientSearchService(
            fdc_client=FakeFdcClient(), cache=InMemoryCache()
        ),
        stats_service=StatsService(
            repository=meal_repository, profile_service=profile_service
        ),
        weight_service=WeightService(InMemoryWeightRepository()),
        chat_service=ChatService(
            composer=composer,
            profile_service=profile_service,
            repository=InMemoryChatLogRepository(),
        ),
        close_resources=close_resources,
    )
