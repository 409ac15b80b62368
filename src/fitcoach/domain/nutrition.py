"""Nutrition domain models."""

from collections.abc import Collection
from dataclasses import dataclass, field
from datetime import date
from enum import Enum
from uuid import UUID

MACRO_FIELDS = ("calories", "protein_g", "carbs_g", "fat_g", "fiber_g")


class MealSlot(str, Enum):
    """Meal slot used to group logged foods."""

    BREAKFAST = "breakfast"
    LUNCH = "lunch"
    DINNER = "dinner"
    SNACK = "snack"


class InvalidReferenceData(ValueError):
    """Raised when a food item cannot be used for macro arithmetic."""

    def __init__(self, food_id: UUID, name: str, serving_size: float) -> None:
        super().__init__(
            f"Food {name!r} ({food_id}) has non-positive serving size {serving_size}"
        )
        self.food_id = food_id
        self.name = name
        self.serving_size = serving_size


@dataclass(frozen=True)
class FoodItem:
    """Reference nutrition data for one serving of a food."""

    id: UUID
    name: str
    category: str | None
    serving_size: float
    serving_unit: str
    calories: float
    protein_g: float
    carbs_g: float
    fat_g: float
    fiber_g: float
    brand: str | None = None


@dataclass(frozen=True)
class MacroTotals:
    """Calories and macronutrient grams."""

    calories: float = 0.0
    protein_g: float = 0.0
    carbs_g: float = 0.0
    fat_g: float = 0.0
    fiber_g: float = 0.0

    def __add__(self, other: "MacroTotals") -> "MacroTotals":
        return MacroTotals(
            calories=self.calories + other.calories,
            protein_g=self.protein_g + other.protein_g,
            carbs_g=self.carbs_g + other.carbs_g,
            fat_g=self.fat_g + other.fat_g,
            fiber_g=self.fiber_g + other.fiber_g,
        )

    def value(self, macro: str) -> float:
        """Return the value of a macro field by name."""
        if macro not in MACRO_FIELDS:
            raise KeyError(macro)
        return float(getattr(self, macro))


@dataclass(frozen=True)
class MacroTargets:
    """Per-day macro goals for a client or meal plan."""

    calories: float
    protein_g: float
    carbs_g: float
    fat_g: float
    fiber_g: float = 0.0

    def value(self, macro: str) -> float:
        """Return the target of a macro field by name."""
        if macro not in MACRO_FIELDS:
            raise KeyError(macro)
        return float(getattr(self, macro))


@dataclass(frozen=True)
class LoggedQuantity:
    """A quantity of a food logged into one meal slot on one day."""

    food: FoodItem
    quantity: float
    unit: str
    meal_slot: MealSlot
    meal_id: UUID | None = None


@dataclass(frozen=True)
class MealAggregation:
    """Per-slot and per-meal totals for one day plus the items left out of them."""

    totals: dict[MealSlot, MacroTotals]
    invalid_items: list[LoggedQuantity] = field(default_factory=list)
    meal_totals: dict[UUID, MacroTotals] = field(default_factory=dict)
    meal_slots: dict[UUID, MealSlot] = field(default_factory=dict)

    def day_totals(self) -> MacroTotals:
        """Sum the totals of all slots."""
        total = MacroTotals()
        for totals in self.totals.values():
            total = total + totals
        return total

    def meals_total(self, meal_ids: Collection[UUID]) -> MacroTotals:
        """Sum the totals of the given meals; unknown ids add nothing."""
        total = MacroTotals()
        for meal_id in meal_ids:
            total = total + self.meal_totals.get(meal_id, MacroTotals())
        return total


@dataclass(frozen=True)
class MacroProgress:
    """Progress of one macro against its target."""

    current: float
    target: float
    percentage: float
    ratio: float
    is_over: bool


@dataclass(frozen=True)
class DayProgress:
    """Consumed totals compared with a target profile."""

    consumed: MacroTotals
    target: MacroTargets
    by_macro: dict[str, MacroProgress]

    @property
    def percentage_by_macro(self) -> dict[str, float]:
        """Clamped percentages keyed by macro name."""
        return {macro: progress.percentage for macro, progress in self.by_macro.items()}

    def is_over_target(self, macro: str) -> bool:
        """Return True when the macro exceeds its target."""
        return self.by_macro[macro].is_over


@dataclass(frozen=True)
class DayNutrition:
    """View-model for a client's nutrition on one day."""

    day: date
    meals: MealAggregation
    completed_meal_ids: frozenset[UUID]
    progress: DayProgress
    target_source: str

    @property
    def completed_slots(self) -> frozenset[MealSlot]:
        """Slots holding at least one completed meal."""
        return frozenset(
            self.meals.meal_slots[meal_id]
            for meal_id in self.completed_meal_ids
            if meal_id in self.meals.meal_slots
        )
