"""Dependency container wiring for the application."""

from dataclasses import dataclass

from supabase import create_client

from fitcoach.adapters.supabase_completion_repository import (
    SupabaseCompletionRepository,
)
from fitcoach.adapters.supabase_food_repository import (
    SupabaseFoodLogRepository,
    SupabaseFoodRepository,
)
from fitcoach.adapters.supabase_photo_storage import SupabasePhotoStorage
from fitcoach.adapters.supabase_targets_repository import SupabaseTargetsRepository
from fitcoach.adapters.supabase_workout_repository import SupabaseWorkoutRepository
from fitcoach.config import Settings, parse_macro_targets
from fitcoach.services.cache import TtlCache
from fitcoach.services.completions import CompletionService
from fitcoach.services.dashboard import DashboardService
from fitcoach.services.foods import FoodLibraryService
from fitcoach.services.meals import MealLogService
from fitcoach.services.progress import ProgressService
from fitcoach.services.streaks import StreakService
from fitcoach.services.workouts import WorkoutTemplateService


@dataclass
class AppContainer:
    """Holds application-wide dependencies."""

    settings: Settings
    food_library_service: FoodLibraryService
    meal_log_service: MealLogService
    progress_service: ProgressService
    streak_service: StreakService
    completion_service: CompletionService
    dashboard_service: DashboardService
    workout_service: WorkoutTemplateService


def build_container(settings: Settings | None = None) -> AppContainer:
    """Create the default dependency container."""
    resolved_settings = settings or Settings()
    supabase_client = create_client(
        resolved_settings.supabase_url, resolved_settings.supabase_service_key
    )
    completion_repository = SupabaseCompletionRepository(supabase_client)
    food_library_service = FoodLibraryService(
        repository=SupabaseFoodRepository(supabase_client),
        cache=TtlCache(),
        ttl_seconds=resolved_settings.food_cache_ttl_seconds,
    )
    meal_log_service = MealLogService(SupabaseFoodLogRepository(supabase_client))
    progress_service = ProgressService(
        meal_log_service=meal_log_service,
        completion_repository=completion_repository,
        targets_repository=SupabaseTargetsRepository(supabase_client),
        default_targets=parse_macro_targets(resolved_settings.default_targets),
    )
    streak_service = StreakService(
        repository=completion_repository,
        timezone_name=resolved_settings.timezone,
        require_recent=resolved_settings.streak_requires_recent,
    )
    completion_service = CompletionService(
        repository=completion_repository,
        storage=SupabasePhotoStorage(
            supabase_client, bucket=resolved_settings.meal_photo_bucket
        ),
        max_photo_bytes=resolved_settings.max_photo_mb * 1024 * 1024,
    )
    return AppContainer(
        settings=resolved_settings,
        food_library_service=food_library_service,
        meal_log_service=meal_log_service,
        progress_service=progress_service,
        streak_service=streak_service,
        completion_service=completion_service,
        dashboard_service=DashboardService(
            progress_service=progress_service, streak_service=streak_service
        ),
        workout_service=WorkoutTemplateService(
            SupabaseWorkoutRepository(supabase_client)
        ),
    )
