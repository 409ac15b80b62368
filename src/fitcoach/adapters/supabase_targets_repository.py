"""Supabase lookups for macro target profiles."""

from dataclasses import dataclass
from uuid import UUID

from supabase import Client, PostgrestAPIError

from fitcoach.adapters.supabase_errors import classify_api_error
from fitcoach.domain.nutrition import MacroTargets
from fitcoach.services.progress import TargetsRepository
from fitcoach.services.resolution import Found, LookupResult, NotFound


@dataclass
class SupabaseTargetsRepository(TargetsRepository):
    """Reads client and meal-plan targets."""

    client: Client

    def get_client_targets(self, client_id: UUID) -> LookupResult:
        """Return targets from ``client_nutrition_targets``."""
        try:
            response = (
                self.client.table("client_nutrition_targets")
                .select("calories, protein_g, carbs_g, fat_g, fiber_g")
                .eq("client_id", str(client_id))
                .limit(1)
                .execute()
            )
        except PostgrestAPIError as exc:
            return classify_api_error(exc)
        if not response.data:
            return NotFound(reason="no client targets")
        row = response.data[0]
        if row.get("calories") is None:
            return NotFound(reason="client targets incomplete")
        return Found(
            MacroTargets(
                calories=float(row["calories"]),
                protein_g=float(row.get("protein_g") or 0.0),
                carbs_g=float(row.get("carbs_g") or 0.0),
                fat_g=float(row.get("fat_g") or 0.0),
                fiber_g=float(row.get("fiber_g") or 0.0),
            )
        )

    def get_meal_plan_targets(self, client_id: UUID) -> LookupResult:
        """Return targets of the client's active meal plan assignment."""
        try:
            response = (
                self.client.table("meal_plan_assignments")
                .select(
                    "meal_plans(target_calories, target_protein, target_carbs, "
                    "target_fat, target_fiber)"
                )
                .eq("client_id", str(client_id))
                .eq("is_active", True)
                .order("created_at", desc=True)
                .limit(1)
                .execute()
            )
        except PostgrestAPIError as exc:
            return classify_api_error(exc)
        if not response.data:
            return NotFound(reason="no active meal plan")
        plan = response.data[0].get("meal_plans") or {}
        if plan.get("target_calories") is None:
            return NotFound(reason="meal plan has no calorie target")
        return Found(
            MacroTargets(
                calories=float(plan["target_calories"]),
                protein_g=float(plan.get("target_protein") or 0.0),
                carbs_g=float(plan.get("target_carbs") or 0.0),
                fat_g=float(plan.get("target_fat") or 0.0),
                fiber_g=float(plan.get("target_fiber") or 0.0),
            )
        )
