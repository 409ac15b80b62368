"""Streak counting over completion records."""

from collections.abc import Iterable
from dataclasses import dataclass
from datetime import date, datetime, timedelta
from uuid import UUID
from zoneinfo import ZoneInfo

from fitcoach.domain.completions import CompletionRecord, StreakState
from fitcoach.services.completions import CompletionRepository

_ONE_DAY = timedelta(days=1)


def compute_streak(
    dates: Iterable[date], today: date, require_recent: bool = False
) -> StreakState:
    """Fold completion dates into streak counters.

    Dates after ``today`` count toward ``complete_days`` but never toward a
    streak. With ``require_recent`` the current streak is 0 unless the most
    recent counted date is today or yesterday.
    """
    distinct = sorted(set(dates), reverse=True)
    if not distinct:
        return StreakState(current_streak=0, complete_days=0)

    past = [day for day in distinct if day <= today]
    current = 0
    previous: date | None = None
    for day in past:
        if previous is not None and day != previous - _ONE_DAY:
            break
        current += 1
        previous = day
    if require_recent and past and past[0] < today - _ONE_DAY:
        current = 0

    longest = 0
    run = 0
    previous = None
    for day in past:
        run = run + 1 if previous is not None and day == previous - _ONE_DAY else 1
        longest = max(longest, run)
        previous = day

    return StreakState(
        current_streak=current,
        complete_days=len(distinct),
        longest_streak=longest,
        last_completed_on=past[0] if past else None,
    )


def completion_dates(records: Iterable[CompletionRecord]) -> list[date]:
    """Reduce completion records to their calendar dates."""
    return [record.log_date for record in records]


@dataclass
class StreakService:
    """Computes a client's completion streak."""

    repository: CompletionRepository
    timezone_name: str = "UTC"
    require_recent: bool = False

    def get_streak(self, client_id: UUID, today: date | None = None) -> StreakState:
        """Return streak counters as of today in the configured time zone."""
        resolved_today = today or datetime.now(tz=ZoneInfo(self.timezone_name)).date()
        records = self.repository.list_completions(client_id)
        return compute_streak(
            completion_dates(records),
            resolved_today,
            require_recent=self.require_recent,
        )
