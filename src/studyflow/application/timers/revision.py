"""Fixed-budget countdown that ends a whole multi-card review session."""

from studyflow.domain.constants import REVISION_MAX_SECONDS, REVISION_MIN_SECONDS
from studyflow.domain.errors import InvalidStateError
from studyflow.domain.timers.models import EventKind, TimerEvent, TimerMode, TimerStatus

from .base import TimerMachine


def clamp_budget(seconds: int) -> int:
    """Clamp a revision budget to [30s, 60min]. Out-of-range values are not errors."""
    return max(REVISION_MIN_SECONDS, min(REVISION_MAX_SECONDS, int(seconds)))


class RevisionCountdown(TimerMachine):
    """
    IDLE (setup) -> RUNNING -> TIMED_OUT | COMPLETED.

    Runs continuously once started; there is no pause. Reaching zero times
    out the entire session, not just the current card.
    """

    initial_mode = TimerMode.REVISION_COUNTDOWN

    @property
    def remaining_seconds(self) -> int:
        return self._state.remaining_seconds

    @property
    def budget_seconds(self) -> int:
        return self._state.budget_seconds or 0

    @property
    def elapsed_seconds(self) -> int:
        return self.budget_seconds - self._state.remaining_seconds

    def start(self, budget_seconds: int) -> None:
        self._require_idle("start")
        budget = clamp_budget(budget_seconds)
        if budget != budget_seconds:
            self.logger.debug(f"Revision budget {budget_seconds}s clamped to {budget}s")
        self._state.budget_seconds = budget
        self._state.remaining_seconds = budget
        self._set_status(TimerStatus.RUNNING)

    def pause(self) -> None:
        # Revision sessions are not pauseable
        return None

    def resume(self) -> None:
        return None

    def _advance(self) -> None:
        if self._state.remaining_seconds > 0:
            self._state.remaining_seconds -= 1
        if self._state.remaining_seconds == 0:
            self._finish(TimerStatus.TIMED_OUT, EventKind.TIMED_OUT)

    def complete_all_cards(self) -> None:
        """The card queue ran out before the deadline."""
        if self._status is TimerStatus.IDLE:
            raise InvalidStateError("RevisionCountdown has not been started")
        if self._status.is_terminal():
            return
        self._finish(TimerStatus.COMPLETED, EventKind.COMPLETED)

    def _finish(self, status: TimerStatus, kind: EventKind) -> None:
        self._set_status(status)
        self.logger.info(f"Revision session {status.value} after {self.elapsed_seconds}s")
        self._emit(TimerEvent(kind=kind, mode=self._state.mode, seconds=self.elapsed_seconds))
