"""Supabase repository for meal completion records."""

from dataclasses import dataclass
from datetime import date, datetime
from uuid import UUID

from supabase import Client, PostgrestAPIError

from fitcoach.adapters.supabase_errors import UNIQUE_VIOLATION_CODES
from fitcoach.domain.completions import CompletionRecord
from fitcoach.services.completions import CompletionRepository, DuplicateCompletion

_COLUMNS = (
    "id, client_id, meal_id, meal_option_id, log_date, "
    "photo_path, photo_url, notes, created_at"
)


@dataclass
class SupabaseCompletionRepository(CompletionRepository):
    """Supabase implementation backed by ``meal_photo_logs``."""

    client: Client

    def list_completions(
        self,
        client_id: UUID,
        start: date | None = None,
        end: date | None = None,
    ) -> list[CompletionRecord]:
        """Return completions newest first."""
        query = (
            self.client.table("meal_photo_logs")
            .select(_COLUMNS)
            .eq("client_id", str(client_id))
        )
        if start is not None:
            query = query.gte("log_date", start.isoformat())
        if end is not None:
            query = query.lte("log_date", end.isoformat())
        response = (
            query.order("log_date", desc=True).order("created_at", desc=True).execute()
        )
        return [_parse_row(row) for row in response.data or []]

    def get_completion(
        self, client_id: UUID, meal_id: UUID, log_date: date
    ) -> CompletionRecord | None:
        """Return the completion for a meal on a day."""
        response = (
            self.client.table("meal_photo_logs")
            .select(_COLUMNS)
            .eq("client_id", str(client_id))
            .eq("meal_id", str(meal_id))
            .eq("log_date", log_date.isoformat())
            .limit(1)
            .execute()
        )
        if not response.data:
            return None
        return _parse_row(response.data[0])

    def get_completion_by_id(self, completion_id: UUID) -> CompletionRecord | None:
        """Return a completion by id."""
        response = (
            self.client.table("meal_photo_logs")
            .select(_COLUMNS)
            .eq("id", str(completion_id))
            .limit(1)
            .execute()
        )
        if not response.data:
            return None
        return _parse_row(response.data[0])

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
        """Insert a completion row and return it."""
        payload = {
            "client_id": str(client_id),
            "meal_id": str(meal_id),
            "meal_option_id": str(meal_option_id) if meal_option_id else None,
            "log_date": log_date.isoformat(),
            "photo_path": photo_path,
            "photo_url": photo_url,
            "notes": notes,
        }
        try:
            response = self.client.table("meal_photo_logs").insert(payload).execute()
        except PostgrestAPIError as exc:
            if exc.code in UNIQUE_VIOLATION_CODES:
                raise DuplicateCompletion() from exc
            raise
        if not response.data:
            raise RuntimeError("Failed to create meal completion")
        return _parse_row(response.data[0])

    def delete_completion(self, completion_id: UUID) -> None:
        """Delete a completion row."""
        self.client.table("meal_photo_logs").delete().eq(
            "id", str(completion_id)
        ).execute()


def _parse_row(row: dict[str, object]) -> CompletionRecord:
    created_raw = row.get("created_at")
    completed_at = (
        datetime.fromisoformat(created_raw)
        if isinstance(created_raw, str) and created_raw
        else None
    )
    return CompletionRecord(
        id=UUID(str(row["id"])),
        client_id=UUID(str(row["client_id"])),
        meal_id=UUID(str(row["meal_id"])) if row.get("meal_id") else None,
        log_date=date.fromisoformat(str(row["log_date"])),
        completed_at=completed_at,
        meal_option_id=(
            UUID(str(row["meal_option_id"])) if row.get("meal_option_id") else None
        ),
        photo_path=row.get("photo_path"),
        photo_url=row.get("photo_url"),
        notes=row.get("notes"),
    )

