"""Dependency container wiring for the application."""

from collections.abc import Awaitable, Callable
from dataclasses import dataclass

from openai import AsyncOpenAI
from supabase import create_client

from nourish.adapters.fdc_client import HttpxFdcClient
from nourish.adapters.openai_completion_client import OpenAICompletionClient
from nourish.adapters.supabase_auth_client import AuthClient, SupabaseAuthClient
from nourish.adapters.supabase_chat_log_repository import SupabaseChatLogRepository
from nourish.adapters.supabase_meal_repository import SupabaseMealRepository
from nourish.adapters.supabase_profile_repository import SupabaseProfileRepository
from nourish.adapters.supabase_stats_repository import SupabaseStatsRepository
from nourish.adapters.supabase_weight_repository import SupabaseWeightRepository
from nourish.config import Settings, parse_model_list
from nourish.services.cache import InMemoryCache
from nourish.services.chat import ChatService
from nourish.services.encouragement import EncouragementComposer
from nourish.services.estimator import NutritionEstimator
from nourish.services.ingredients import IngredientSearchService
from nourish.services.llm import LlmGateway
from nourish.services.meals import MealLogService
from nourish.services.metabolism import ProfileService
from nourish.services.stats import StatsService
from nourish.services.weight import WeightService


@dataclass
class AppContainer:
    """Holds application-wide dependencies."""

    settings: Settings
    auth_client: AuthClient
    profile_service: ProfileService
    estimator: NutritionEstimator
    composer: EncouragementComposer
    meal_log_service: MealLogService
    ingredient_search_service: IngredientSearchService
    stats_service: StatsService
    weight_service: WeightService
    chat_service: ChatService
    close_resources: Callable[[], Awaitable[None]]


def build_container(settings: Settings | None = None) -> AppContainer:
    """Create the default dependency container."""
    resolved_settings = settings or Settings()
    supabase_client = create_client(
        resolved_settings.supabase_url, resolved_settings.supabase_service_key
    )
    openai_client = AsyncOpenAI(
        api_key=resolved_settings.openai_api_key, max_retries=0
    )
    gateway = LlmGateway(
        backends=OpenAICompletionClient.for_models(
            client=openai_client,
            models=parse_model_list(resolved_settings.llm_models),
            timeout_seconds=resolved_settings.llm_timeout_seconds,
        ),
        timeout_seconds=resolved_settings.llm_timeout_seconds,
    )
    fdc_client = HttpxFdcClient.create(
        api_key=resolved_settings.fdc_api_key,
        base_url=resolved_settings.fdc_base_url,
    )
    profile_service = ProfileService(SupabaseProfileRepository(supabase_client))
    composer = EncouragementComposer(gateway)

    async def close_resources() -> None:
        await fdc_client.close()
        await openai_client.close()

    return AppContainer(
        settings=resolved_settings,
        auth_client=SupabaseAuthClient(supabase_client),
        profile_service=profile_service,
        estimator=NutritionEstimator(gateway),
        composer=composer,
        meal_log_service=MealLogService(SupabaseMealRepository(supabase_client)),
        ingredient_search_service=IngredientSearchService(
            fdc_client=fdc_client, cache=InMemoryCache()
        ),
        stats_service=StatsService(
            repository=SupabaseStatsRepository(supabase_client),
            profile_service=profile_service,
        ),
        weight_service=WeightService(SupabaseWeightRepository(supabase_client)),
        chat_service=ChatService(
            composer=composer,
            profile_service=profile_service,
            repository=SupabaseChatLogRepository(supabase_client),
        ),
        close_resources=close_resources,
    )
