"""Supabase repositories for foods and logged food quantities."""

import logging
from dataclasses import dataclass
from datetime import date
from uuid import UUID

from supabase import Client

from fitcoach.domain.nutrition import FoodItem, LoggedQuantity, MealSlot
from fitcoach.services.foods import FoodRepository
from fitcoach.services.meals import FoodLogRepository

_logger = logging.getLogger(__name__)

_FOOD_COLUMNS = (
    "id, name, brand, category, serving_size, serving_unit, "
    "calories_per_serving, protein, carbs, fat, fiber"
)


@dataclass
class SupabaseFoodRepository(FoodRepository):
    """Supabase implementation for food reference data."""

    client: Client

    def list_foods(self, limit: int) -> list[FoodItem]:
        """Return foods ordered by name."""
        response = (
            self.client.table("foods")
            .select(_FOOD_COLUMNS)
            .order("name", desc=False)
            .limit(limit)
            .execute()
        )
        return [parse_food(row) for row in response.data or []]

    def search_foods(self, query: str, limit: int) -> list[FoodItem]:
        """Return foods whose name contains the query."""
        response = (
            self.client.table("foods")
            .select(_FOOD_COLUMNS)
            .ilike("name", f"%{query}%")
            .order("name", desc=False)
            .limit(limit)
            .execute()
        )
        return [parse_food(row) for row in response.data or []]


@dataclass
class SupabaseFoodLogRepository(FoodLogRepository):
    """Reads meal logs with their food items."""

    client: Client

    def list_logged_quantities(
        self, client_id: UUID, day: date
    ) -> list[LoggedQuantity]:
        """Return the logged foods of a client's day."""
        response = (
            self.client.table("meal_logs")
            .select(
                "id, meal_type, "
                f"meal_food_items(quantity, unit, foods({_FOOD_COLUMNS}))"
            )
            .eq("client_id", str(client_id))
            .eq("logged_at", day.isoformat())
            .execute()
        )
        quantities: list[LoggedQuantity] = []
        for meal in response.data or []:
            try:
                slot = MealSlot(str(meal.get("meal_type")))
            except ValueError:
                _logger.warning(
                    "Skipping meal log with unknown meal_type=%s id=%s",
                    meal.get("meal_type"),
                    meal.get("id"),
                )
                continue
            meal_id = UUID(meal["id"]) if meal.get("id") else None
            for item in meal.get("meal_food_items") or []:
                food_row = item.get("foods")
                if not food_row:
                    continue
                quantities.append(
                    LoggedQuantity(
                        food=parse_food(food_row),
                        quantity=float(item.get("quantity") or 0.0),
                        unit=str(
                            item.get("unit") or food_row.get("serving_unit") or "g"
                        ),
                        meal_slot=slot,
                        meal_id=meal_id,
                    )
                )
        return quantities


def parse_food(row: dict[str, object]) -> FoodItem:
    """Build a FoodItem from a ``foods`` row."""
    return FoodItem(
        id=UUID(str(row["id"])),
        name=str(row.get("name", "")),
        brand=row.get("brand"),
        category=row.get("category"),
        serving_size=float(row.get("serving_size") or 0.0),
        serving_unit=str(row.get("serving_unit") or "g"),
        calories=float(row.get("calories_per_serving") or 0.0),
        protein_g=float(row.get("protein") or 0.0),
        carbs_g=float(row.get("carbs") or 0.0),
        fat_g=float(row.get("fat") or 0.0),
        fiber_g=float(row.get("fiber") or 0.0),
    )
