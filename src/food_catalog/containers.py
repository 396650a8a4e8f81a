"""Dependency container wiring for the application."""

from collections.abc import Awaitable, Callable
from dataclasses import dataclass

from supabase import create_client

from food_catalog.adapters.gemini_client import HttpxGeminiClient
from food_catalog.adapters.supabase_health_profile_repository import (
    SupabaseHealthProfileRepository,
)
from food_catalog.adapters.supabase_search_history_repository import (
    SupabaseSearchHistoryRepository,
)
from food_catalog.adapters.supabase_user_profile_repository import (
    SupabaseUserProfileRepository,
)
from food_catalog.adapters.supabase_user_repository import SupabaseUserRepository
from food_catalog.config import Settings
from food_catalog.services.analysis import AnalysisService
from food_catalog.services.health_profiles import HealthProfileService
from food_catalog.services.search import SearchService
from food_catalog.services.user_profiles import UserProfileService
from food_catalog.services.users import UserService


@dataclass
class AppContainer:
    """Holds application-wide dependencies."""

    settings: Settings
    user_service: UserService
    user_profile_service: UserProfileService
    health_profile_service: HealthProfileService
    analysis_service: AnalysisService
    search_service: SearchService
    close_resources: Callable[[], Awaitable[None]]


def build_container(settings: Settings | None = None) -> AppContainer:
    """Create the default dependency container."""
    resolved_settings = settings or Settings()
    supabase_client = create_client(
        resolved_settings.supabase_url, resolved_settings.supabase_service_key
    )
    user_service = UserService(SupabaseUserRepository(supabase_client))
    user_profile_service = UserProfileService(
        SupabaseUserProfileRepository(supabase_client)
    )
    health_profile_service = HealthProfileService(
        SupabaseHealthProfileRepository(supabase_client)
    )
    gemini_client = HttpxGeminiClient.create(
        api_key=resolved_settings.gemini_api_key,
        base_url=resolved_settings.gemini_base_url,
        model=resolved_settings.gemini_model,
        timeout_seconds=resolved_settings.gemini_timeout_seconds,
    )
    analysis_service = AnalysisService(
        client=gemini_client,
        timeout_seconds=resolved_settings.gemini_timeout_seconds,
    )
    search_service = SearchService(
        analysis_service=analysis_service,
        health_profile_service=health_profile_service,
        repository=SupabaseSearchHistoryRepository(supabase_client),
    )

    async def close_resources() -> None:
        await gemini_client.close()

    return AppContainer(
        settings=resolved_settings,
        user_service=user_service,
        user_profile_service=user_profile_service,
        health_profile_service=health_profile_service,
        analysis_service=analysis_service,
        search_service=search_service,
        close_resources=close_resources,
    )
