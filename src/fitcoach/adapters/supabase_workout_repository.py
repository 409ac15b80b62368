"""Supabase lookups for workout template exercises."""

import json
from dataclasses import dataclass
from uuid import UUID

from supabase import Client, PostgrestAPIError

from fitcoach.adapters.supabase_errors import classify_api_error
from fitcoach.services.resolution import Failed, Found, LookupResult, NotFound
from fitcoach.services.workouts import WorkoutTemplateRepository


@dataclass
class SupabaseWorkoutRepository(WorkoutTemplateRepository):
    """Reads template exercises from normalised rows or the legacy column."""

    client: Client

    def list_template_exercises(self, template_id: UUID) -> LookupResult:
        """Return rows of ``workout_template_exercises``."""
        try:
            response = (
                self.client.table("workout_template_exercises")
                .select("exercise_id, order_index, sets, reps, rest_seconds, notes")
                .eq("template_id", str(template_id))
                .order("order_index", desc=False)
                .execute()
            )
        except PostgrestAPIError as exc:
            return classify_api_error(exc)
        if not response.data:
            return NotFound(reason="no template exercise rows")
        return Found(list(response.data))

    def list_legacy_exercises(self, template_id: UUID) -> LookupResult:
        """Return the inline ``exercises`` JSON of ``workout_templates``."""
        try:
            response = (
                self.client.table("workout_templates")
                .select("exercises")
                .eq("id", str(template_id))
                .limit(1)
                .execute()
            )
        except PostgrestAPIError as exc:
            return classify_api_error(exc)
        if not response.data:
            return NotFound(reason="template not found")
        exercises = response.data[0].get("exercises")
        if isinstance(exercises, str):
            try:
                exercises = json.loads(exercises)
            except ValueError as exc:
                return Failed(error=exc, code=None)
        if not isinstance(exercises, list) or not exercises:
            return NotFound(reason="template has no inline exercises")
        return Found([row for row in exercises if isinstance(row, dict)])
