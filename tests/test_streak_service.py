"""Tests for streak counting."""

from datetime import date, timedelta
from uuid import uuid4

from fitcoach.domain.completions import StreakState
from fitcoach.services.streaks import StreakService, compute_streak
from tests.conftest import InMemoryCompletionRepository, make_completion

TODAY = date(2024, 5, 10)


def _days_ago(*offsets: int) -> list[date]:
    return [TODAY - timedelta(days=offset) for offset in offsets]


def test_streak_stops_at_gap() -> None:
    state = compute_streak(_days_ago(0, 1, 2, 4), TODAY)

    assert state.current_streak == 3
    assert state.complete_days == 4
    assert state.last_completed_on == TODAY


def test_streak_empty() -> None:
    assert compute_streak([], TODAY) == StreakState(current_streak=0, complete_days=0)


def test_streak_counts_duplicate_dates_once() -> None:
    state = compute_streak(_days_ago(0, 0, 1, 1), TODAY)

    assert state.current_streak == 2
    assert state.complete_days == 2


def test_future_dates_count_as_days_but_not_streak() -> None:
    state = compute_streak([TODAY + timedelta(days=1), *_days_ago(0, 1)], TODAY)

    assert state.current_streak == 2
    assert state.complete_days == 3
    assert state.last_completed_on == TODAY


def test_streak_runs_from_most_recent_completion() -> None:
    state = compute_streak(_days_ago(5, 6, 7), TODAY)

    assert state.current_streak == 3
    assert compute_streak(_days_ago(5, 6, 7), TODAY, require_recent=True) == (
        StreakState(
            current_streak=0,
            complete_days=3,
            longest_streak=3,
            last_completed_on=TODAY - timedelta(days=5),
        )
    )


def test_require_recent_accepts_yesterday() -> None:
    state = compute_streak(_days_ago(1, 2), TODAY, require_recent=True)
    assert state.current_streak == 2


def test_longest_streak() -> None:
    state = compute_streak(_days_ago(0, 3, 4, 5, 6, 9), TODAY)

    assert state.current_streak == 1
    assert state.longest_streak == 4


def test_streak_service_reads_all_completions() -> None:
    repository = InMemoryCompletionRepository()
    client_id = uuid4()
    for day in _days_ago(0, 1, 3):
        repository.add(make_completion(client_id, day))
    repository.add(make_completion(uuid4(), TODAY - timedelta(days=2)))

    state = StreakService(repository).get_streak(client_id, today=TODAY)

    assert state.current_streak == 2
    assert state.complete_days == 3
