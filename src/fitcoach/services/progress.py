"""Daily progress against a target profile."""

from dataclasses import dataclass
from datetime import date
from typing import Protocol
from uuid import UUID

from fitcoach.domain.nutrition import (
    MACRO_FIELDS,
    DayNutrition,
    DayProgress,
    MacroProgress,
    MacroTargets,
    MacroTotals,
)
from fitcoach.services.completions import CompletionRepository
from fitcoach.services.meals import MealLogService
from fitcoach.services.resolution import LookupResult, Resolution, ResolutionChain


class TargetsRepository(Protocol):
    """Persistence interface for macro target profiles."""

    def get_client_targets(self, client_id: UUID) -> LookupResult:
        """Return targets set directly on the client."""

    def get_meal_plan_targets(self, client_id: UUID) -> LookupResult:
        """Return targets of the client's active meal plan."""


def reduce_macro(current: float, target: float) -> MacroProgress:
    """Compare one macro with its target."""
    if target == 0:
        return MacroProgress(
            current=current,
            target=target,
            percentage=0.0,
            ratio=0.0,
            is_over=current > 0,
        )
    ratio = current / target * 100
    return MacroProgress(
        current=current,
        target=target,
        percentage=min(max(ratio, 0.0), 100.0),
        ratio=ratio,
        is_over=current > target,
    )


def reduce_day_progress(consumed: MacroTotals, target: MacroTargets) -> DayProgress:
    """Return per-macro progress of consumed totals against targets."""
    by_macro = {
        macro: reduce_macro(consumed.value(macro), target.value(macro))
        for macro in MACRO_FIELDS
    }
    return DayProgress(consumed=consumed, target=target, by_macro=by_macro)


@dataclass
class ProgressService:
    """Builds the day view-model for a client."""

    meal_log_service: MealLogService
    completion_repository: CompletionRepository
    targets_repository: TargetsRepository
    default_targets: MacroTargets

    def resolve_targets(self, client_id: UUID) -> Resolution[MacroTargets]:
        """Resolve the client's target profile, falling back to defaults."""
        chain: ResolutionChain[UUID, MacroTargets] = ResolutionChain(
            strategies=[
                ("client", self.targets_repository.get_client_targets),
                ("meal_plan", self.targets_repository.get_meal_plan_targets),
            ],
            default=self.default_targets,
        )
        return chain.resolve(client_id)

    def get_day(
        self, client_id: UUID, day: date, completed_only: bool = True
    ) -> DayNutrition:
        """Return meals, completions and progress for a client's day."""
        meals = self.meal_log_service.get_day_meals(client_id, day)
        completions = self.completion_repository.list_completions(
            client_id, start=day, end=day
        )
        completed_meal_ids = frozenset(
            record.meal_id for record in completions if record.meal_id is not None
        )
        if completed_only:
            consumed = meals.meals_total(completed_meal_ids)
        else:
            consumed = meals.day_totals()
        targets = self.resolve_targets(client_id)
        target_profile = targets.value or self.default_targets
        return DayNutrition(
            day=day,
            meals=meals,
            completed_meal_ids=completed_meal_ids,
            progress=reduce_day_progress(consumed, target_profile),
            target_source=targets.source,
        )
