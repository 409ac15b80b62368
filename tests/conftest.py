"""Shared test fixtures."""

from dataclasses import dataclass, field
from datetime import UTC, date, datetime
from uuid import UUID, uuid4

import pytest

from fitcoach.config import Settings, parse_macro_targets
from fitcoach.containers import AppContainer
from fitcoach.domain.completions import CompletionRecord
from fitcoach.domain.nutrition import FoodItem, LoggedQuantity
from fitcoach.services.cache import TtlCache
from fitcoach.services.completions import (
    CompletionRepository,
    CompletionService,
    PhotoStorage,
)
from fitcoach.services.dashboard import DashboardService
from fitcoach.services.foods import FoodLibraryService, FoodRepository
from fitcoach.services.meals import FoodLogRepository, MealLogService
from fitcoach.services.progress import ProgressService, TargetsRepository
from fitcoach.services.resolution import Found, LookupResult, NotFound
from fitcoach.services.streaks import StreakService
from fitcoach.services.workouts import (
    WorkoutTemplateRepository,
    WorkoutTemplateService,
)


def make_food(  # noqa: PLR0913
    name: str = "Chicken breast",
    serving_size: float = 100,
    calories: float = 165,
    protein_g: float = 31,
    carbs_g: float = 0,
    fat_g: float = 3.6,
    fiber_g: float = 0,
) -> FoodItem:
    return FoodItem(
        id=uuid4(),
        name=name,
        category="Protein",
        serving_size=serving_size,
        serving_unit="g",
        calories=calories,
        protein_g=protein_g,
        carbs_g=carbs_g,
        fat_g=fat_g,
        fiber_g=fiber_g,
        brand="USDA",
    )


def make_completion(
    client_id: UUID,
    log_date: date,
    meal_id: UUID | None = None,
) -> CompletionRecord:
    return CompletionRecord(
        id=uuid4(),
        client_id=client_id,
        meal_id=meal_id or uuid4(),
        log_date=log_date,
        completed_at=datetime(log_date.year, log_date.month, log_date.day, tzinfo=UTC),
    )


@dataclass
class InMemoryFoodRepository(FoodRepository):
    """In-memory food repository for tests."""

    foods: list[FoodItem] = field(default_factory=list)
    calls: int = 0

    def list_foods(self, limit: int) -> list[FoodItem]:
        self.calls += 1
        return sorted(self.foods, key=lambda food: food.name)[:limit]

    def search_foods(self, query: str, limit: int) -> list[FoodItem]:
        self.calls += 1
        matches = [food for food in self.foods if query.lower() in food.name.lower()]
        return sorted(matches, key=lambda food: food.name)[:limit]


@dataclass
class InMemoryFoodLogRepository(FoodLogRepository):
    """In-memory food log repository keyed by client and day."""

    logs: dict[tuple[UUID, date], list[LoggedQuantity]] = field(default_factory=dict)

    def add(self, client_id: UUID, day: date, item: LoggedQuantity) -> None:
        self.logs.setdefault((client_id, day), []).append(item)

    def list_logged_quantities(
        self, client_id: UUID, day: date
    ) -> list[LoggedQuantity]:
        return list(self.logs.get((client_id, day), []))


@dataclass
class InMemoryCompletionRepository(CompletionRepository):
    """In-memory completion repository for tests."""

    records: dict[UUID, CompletionRecord] = field(default_factory=dict)
    fail_on_create: bool = False
    create_error: Exception | None = None

    def add(self, record: CompletionRecord) -> None:
        self.records[record.id] = record

    def list_completions(
        self,
        client_id: UUID,
        start: date | None = None,
        end: date | None = None,
    ) -> list[CompletionRecord]:
        matches = [
            record
            for record in self.records.values()
            if record.client_id == client_id
            and (start is None or record.log_date >= start)
            and (end is None or record.log_date <= end)
        ]
        return sorted(matches, key=lambda record: record.log_date, reverse=True)

    def get_completion(
        self, client_id: UUID, meal_id: UUID, log_date: date
    ) -> CompletionRecord | None:
        for record in self.records.values():
            if (
                record.client_id == client_id
                and record.meal_id == meal_id
                and record.log_date == log_date
            ):
                return record
        return None

    def get_completion_by_id(self, completion_id: UUID) -> CompletionRecord | None:
        return self.records.get(completion_id)

    def create_completion(  # noqa: PLR0913
        self,
        client_id: UUID,
        meal_id: UUID,
        log_date: date,
        meal_option_id: UUID | None,
        photo_path: str | None,
        photo_url: str | None,
        notes: str | None,
    ) -> CompletionRecord:
        if self.fail_on_create:
            raise RuntimeError("Failed to create meal completion")
        if self.create_error is not None:
            raise self.create_error
        record = CompletionRecord(
            id=uuid4(),
            client_id=client_id,
            meal_id=meal_id,
            log_date=log_date,
            completed_at=datetime.now(tz=UTC),
            meal_option_id=meal_option_id,
            photo_path=photo_path,
            photo_url=photo_url,
            notes=notes,
        )
        self.records[record.id] = record
        return record

    def delete_completion(self, completion_id: UUID) -> None:
        self.records.pop(completion_id, None)


@dataclass
class InMemoryPhotoStorage(PhotoStorage):
    """In-memory photo storage for tests."""

    objects: dict[str, bytes] = field(default_factory=dict)
    fail_on_remove: bool = False

    def upload(self, path: str, content: bytes, content_type: str) -> str:
        self.objects[path] = content
        return f"https://storage.example/meal-photos/{path}"

    def remove(self, path: str) -> None:
        if self.fail_on_remove:
            raise RuntimeError("storage unavailable")
        self.objects.pop(path, None)


@dataclass
class InMemoryTargetsRepository(TargetsRepository):
    """Targets repository returning preset lookup results."""

    client_results: dict[UUID, LookupResult] = field(default_factory=dict)
    plan_results: dict[UUID, LookupResult] = field(default_factory=dict)

    def get_client_targets(self, client_id: UUID) -> LookupResult:
        return self.client_results.get(client_id, NotFound())

    def get_meal_plan_targets(self, client_id: UUID) -> LookupResult:
        return self.plan_results.get(client_id, NotFound())


@dataclass
class InMemoryWorkoutRepository(WorkoutTemplateRepository):
    """Workout repository with rows per template."""

    rows: dict[UUID, list[dict[str, object]]] = field(default_factory=dict)
    legacy_rows: dict[UUID, list[dict[str, object]]] = field(default_factory=dict)

    def list_template_exercises(self, template_id: UUID) -> LookupResult:
        if template_id in self.rows:
            return Found(self.rows[template_id])
        return NotFound()

    def list_legacy_exercises(self, template_id: UUID) -> LookupResult:
        if template_id in self.legacy_rows:
            return Found(self.legacy_rows[template_id])
        return NotFound()


@pytest.fixture
def settings() -> Settings:
    return Settings(
        supabase_url="https://example.supabase.co",
        supabase_service_key=(
            "eyJhbGciOiJIUzI1NiJ9.eyJyb2xlIjoic2VydmljZV9yb2xlIn0.signature"
        ),
        api_token="api-token",
    )


@pytest.fixture
def food_log_repository() -> InMemoryFoodLogRepository:
    return InMemoryFoodLogRepository()


@pytest.fixture
def completion_repository() -> InMemoryCompletionRepository:
    return InMemoryCompletionRepository()


@pytest.fixture
def photo_storage() -> InMemoryPhotoStorage:
    return InMemoryPhotoStorage()


@pytest.fixture
def targets_repository() -> InMemoryTargetsRepository:
    return InMemoryTargetsRepository()


@pytest.fixture
def workout_repository() -> InMemoryWorkoutRepository:
    return InMemoryWorkoutRepository()


@pytest.fixture
def container(  # noqa: PLR0913
    settings: Settings,
    food_log_repository: InMemoryFoodLogRepository,
    completion_repository: InMemoryCompletionRepository,
    photo_storage: InMemoryPhotoStorage,
    targets_repository: InMemoryTargetsRepository,
    workout_repository: InMemoryWorkoutRepository,
) -> AppContainer:
    meal_log_service = MealLogService(food_log_repository)
    progress_service = ProgressService(
        meal_log_service=meal_log_service,
        completion_repository=completion_repository,
        targets_repository=targets_repository,
        default_targets=parse_macro_targets(settings.default_targets),
    )
    streak_service = StreakService(
        repository=completion_repository, timezone_name=settings.timezone
    )
    return AppContainer(
        settings=settings,
        food_library_service=FoodLibraryService(
            repository=InMemoryFoodRepository(
                foods=[make_food(), make_food(name="Brown rice", calories=111)]
            ),
            cache=TtlCache(),
        ),
        meal_log_service=meal_log_service,
        progress_service=progress_service,
        streak_service=streak_service,
        completion_service=CompletionService(
            repository=completion_repository, storage=photo_storage
        ),
        dashboard_service=DashboardService(
            progress_service=progress_service, streak_service=streak_service
        ),
        workout_service=WorkoutTemplateService(workout_repository),
    )
