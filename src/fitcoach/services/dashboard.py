"""Client day screen state with stale-response protection."""

import asyncio
import itertools
import logging
from collections import OrderedDict
from dataclasses import dataclass, field, replace
from datetime import date
from uuid import UUID

from fitcoach.domain.views import (
    DayLoaded,
    DayLoadFailed,
    DayRequested,
    DayViewState,
    ViewEvent,
)
from fitcoach.services.progress import ProgressService
from fitcoach.services.streaks import StreakService

_logger = logging.getLogger(__name__)


def reduce_view(state: DayViewState, event: ViewEvent) -> DayViewState:
    """Apply an event to the screen state.

    Only the latest issued request may change loaded data; responses carrying
    any other request id leave the state untouched.
    """
    if isinstance(event, DayRequested):
        if event.request_id <= state.request_id:
            return state
        return replace(
            state,
            day=event.day,
            request_id=event.request_id,
            loading=True,
            nutrition=None,
            error=None,
        )
    if event.request_id != state.request_id:
        return state
    if isinstance(event, DayLoaded):
        return replace(
            state,
            loading=False,
            nutrition=event.nutrition,
            streak=event.streak,
            error=None,
        )
    return replace(state, loading=False, error=event.message)


@dataclass
class RequestSequencer:
    """Issues monotonically increasing request ids."""

    _counter: "itertools.count[int]" = field(
        default_factory=lambda: itertools.count(1)
    )

    def issue(self) -> int:
        return next(self._counter)


@dataclass
class DashboardService:
    """Keeps one day-view state per client and loads data into it.

    At most `max_states` clients are kept; the least recently used state is
    dropped first and that client starts again from an empty screen.
    """

    progress_service: ProgressService
    streak_service: StreakService
    sequencer: RequestSequencer = field(default_factory=RequestSequencer)
    max_states: int = 1000
    _states: "OrderedDict[UUID, DayViewState]" = field(default_factory=OrderedDict)

    def current(self, client_id: UUID) -> DayViewState:
        """Return the client's current screen state."""
        return self._states.get(client_id) or DayViewState(client_id=client_id)

    def dispatch(self, client_id: UUID, event: ViewEvent) -> DayViewState:
        """Reduce an event into the client's state and store the result."""
        state = reduce_view(self.current(client_id), event)
        self._states[client_id] = state
        self._states.move_to_end(client_id)
        while len(self._states) > self.max_states:
            self._states.popitem(last=False)
        return state

    async def select_day(self, client_id: UUID, day: date) -> DayViewState:
        """Switch the client's screen to a day and load it."""
        request_id = self.sequencer.issue()
        self.dispatch(client_id, DayRequested(request_id=request_id, day=day))
        try:
            nutrition, streak = await asyncio.gather(
                asyncio.to_thread(self.progress_service.get_day, client_id, day),
                asyncio.to_thread(self.streak_service.get_streak, client_id),
            )
        except Exception as exc:
            _logger.warning(
                "Day load failed: client_id=%s day=%s request_id=%s",
                client_id,
                day.isoformat(),
                request_id,
                exc_info=True,
            )
            return self.dispatch(
                client_id, DayLoadFailed(request_id=request_id, message=str(exc))
            )
        state = self.dispatch(
            client_id,
            DayLoaded(request_id=request_id, nutrition=nutrition, streak=streak),
        )
        if state.request_id != request_id:
            _logger.info(
                "Discarded stale day response: client_id=%s day=%s request_id=%s",
                client_id,
                day.isoformat(),
                request_id,
            )
        return state
