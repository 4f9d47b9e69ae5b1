from studyflow.domain.errors import InvalidStateError
from studyflow.domain.timers.models import EventKind, TimerEvent, TimerMode, TimerStatus

from .base import TimerMachine


class PlainTimer(TimerMachine):
    """Count-up study timer: IDLE -> RUNNING <-> PAUSED -> STOPPED."""

    initial_mode = TimerMode.PLAIN_COUNT_UP

    @property
    def elapsed_seconds(self) -> int:
        return self._state.elapsed_seconds

    def start(self) -> None:
        if self._status is TimerStatus.STOPPED:
            raise InvalidStateError("PlainTimer is stopped; reset() before starting again")
        self._require_idle("start")
        self._state.elapsed_seconds = 0
        self._set_status(TimerStatus.RUNNING)

    def _advance(self) -> None:
        self._state.elapsed_seconds += 1

    def stop(self) -> int:
        """
        End the session and return its duration in seconds.

        Stopping an idle or already stopped timer changes nothing.
        """
        if not self._status.is_active():
            return self._state.elapsed_seconds
        self._set_status(TimerStatus.STOPPED)
        self._emit(
            TimerEvent(
                kind=EventKind.STOPPED,
                mode=self._state.mode,
                seconds=self._state.elapsed_seconds,
            )
        )
        return self._state.elapsed_seconds
