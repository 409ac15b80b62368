"""Domain models for meal completions and streaks."""

from dataclasses import dataclass
from datetime import date, datetime
from uuid import UUID


@dataclass(frozen=True)
class CompletionRecord:
    """Marks a meal as done by a client on a calendar day."""

    id: UUID
    client_id: UUID
    meal_id: UUID | None
    log_date: date
    completed_at: datetime | None = None
    meal_option_id: UUID | None = None
    photo_path: str | None = None
    photo_url: str | None = None
    notes: str | None = None


@dataclass(frozen=True)
class PhotoUpload:
    """Raw photo content sent with a completion."""

    filename: str
    content_type: str
    content: bytes


@dataclass(frozen=True)
class StreakState:
    """Derived streak counters."""

    current_streak: int
    complete_days: int
    longest_streak: int = 0
    last_completed_on: date | None = None


@dataclass(frozen=True)
class AdherenceDay:
    """Logged versus expected meals for one day."""

    day: date
    logged: int
    expected: int


@dataclass(frozen=True)
class AdherenceReport:
    """Meal adherence over a date range."""

    total_expected: int
    total_logged: int
    adherence_rate: float
    days: list[AdherenceDay]
