"""Screen view-model state and the events that change it."""

from dataclasses import dataclass
from datetime import date
from uuid import UUID

from fitcoach.domain.completions import StreakState
from fitcoach.domain.nutrition import DayNutrition


@dataclass(frozen=True)
class DayViewState:
    """Everything the client day screen shows."""

    client_id: UUID
    day: date | None = None
    request_id: int = 0
    loading: bool = False
    nutrition: DayNutrition | None = None
    streak: StreakState | None = None
    error: str | None = None


@dataclass(frozen=True)
class DayRequested:
    request_id: int
    day: date


@dataclass(frozen=True)
class DayLoaded:
    request_id: int
    nutrition: DayNutrition
    streak: StreakState


@dataclass(frozen=True)
class DayLoadFailed:
    request_id: int
    message: str


ViewEvent = DayRequested | DayLoaded | DayLoadFailed
