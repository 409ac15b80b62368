"""Classification of PostgREST errors into lookup results."""

from supabase import PostgrestAPIError

from fitcoach.services.resolution import Failed, NotFound

# Single-row request matched nothing.
NO_ROWS_CODES = frozenset({"PGRST116"})
# Relation or embedded relationship is not exposed by the schema.
MISSING_RELATION_CODES = frozenset({"42P01", "PGRST200", "PGRST205"})
# Unique constraint violated by an insert.
UNIQUE_VIOLATION_CODES = frozenset({"23505"})


def classify_api_error(exc: PostgrestAPIError) -> NotFound | Failed:
    """Map an API error to NotFound when it means "nothing here"."""
    code = getattr(exc, "code", None)
    if code in NO_ROWS_CODES:
        return NotFound(reason="no rows")
    if code in MISSING_RELATION_CODES:
        return NotFound(reason=f"relation unavailable ({code})")
    return Failed(error=exc, code=code)
