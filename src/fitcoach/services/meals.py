"""Meal aggregation service."""

import logging
from collections.abc import Iterable
from dataclasses import dataclass
from datetime import date
from typing import Protocol
from uuid import UUID

from fitcoach.domain.nutrition import (
    InvalidReferenceData,
    LoggedQuantity,
    MacroTotals,
    MealAggregation,
    MealSlot,
)
from fitcoach.services.macros import compute_item_macros

_logger = logging.getLogger(__name__)


class FoodLogRepository(Protocol):
    """Persistence interface for logged food quantities."""

    def list_logged_quantities(
        self, client_id: UUID, day: date
    ) -> list[LoggedQuantity]:
        """Return the foods a client logged on a day."""


def aggregate_meals(items: Iterable[LoggedQuantity]) -> MealAggregation:
    """Group logged foods by meal slot and sum their macros.

    Every slot is present in the result. Items that belong to a logged meal are
    also summed per meal id. Items with invalid reference data are left out of
    the totals and returned separately.
    """
    totals = {slot: MacroTotals() for slot in MealSlot}
    meal_totals: dict[UUID, MacroTotals] = {}
    meal_slots: dict[UUID, MealSlot] = {}
    invalid: list[LoggedQuantity] = []
    for item in items:
        try:
            macros = compute_item_macros(item.food, item.quantity)
        except InvalidReferenceData:
            invalid.append(item)
            continue
        totals[item.meal_slot] = totals[item.meal_slot] + macros
        if item.meal_id is not None:
            meal_totals[item.meal_id] = (
                meal_totals.get(item.meal_id, MacroTotals()) + macros
            )
            meal_slots[item.meal_id] = item.meal_slot
    return MealAggregation(
        totals=totals,
        invalid_items=invalid,
        meal_totals=meal_totals,
        meal_slots=meal_slots,
    )


@dataclass
class MealLogService:
    """Service that loads a client's logged foods and aggregates them."""

    repository: FoodLogRepository

    def get_day_meals(self, client_id: UUID, day: date) -> MealAggregation:
        """Return per-slot totals for a client's day."""
        items = self.repository.list_logged_quantities(client_id, day)
        aggregation = aggregate_meals(items)
        for item in aggregation.invalid_items:
            _logger.warning(
                "Excluded food with invalid reference data: food_id=%s name=%s "
                "serving_size=%s client_id=%s day=%s",
                item.food.id,
                item.food.name,
                item.food.serving_size,
                client_id,
                day.isoformat(),
            )
        return aggregation
