"""Pomodoro focus/break cycle."""

from studyflow.domain.constants import BREAK_DURATION_SECONDS, FOCUS_DURATION_SECONDS
from studyflow.domain.errors import InvalidStateError
from studyflow.domain.timers.models import EventKind, TimerEvent, TimerMode, TimerStatus

from .base import TimerMachine


class PomodoroTimer(TimerMachine):
    """
    Alternates focus and break countdowns until stopped.

    A phase boundary is crossed when the countdown is at zero, either on tick
    entry or right after the decrement, so a phase of N seconds ends on its
    N-th tick and the clock never goes below zero. Exactly one transition
    happens per tick.

    Completing a focus phase emits FOCUS_COMPLETED (the caller records it as a
    study session) followed by PHASE_CHANGED. Completing a break emits only
    PHASE_CHANGED.
    """

    initial_mode = TimerMode.POMODORO_FOCUS

    def __init__(
        self,
        focus_seconds: int = FOCUS_DURATION_SECONDS,
        break_seconds: int = BREAK_DURATION_SECONDS,
    ):
        if focus_seconds <= 0 or break_seconds <= 0:
            raise ValueError("Pomodoro durations must be positive")
        super().__init__()
        self.focus_seconds = focus_seconds
        self.break_seconds = break_seconds

    @property
    def phase(self) -> TimerMode:
        return self._state.mode

    @property
    def remaining_seconds(self) -> int:
        return self._state.remaining_seconds

    @property
    def cycle_count(self) -> int:
        return self._state.cycle_count

    @property
    def focus_elapsed_seconds(self) -> int:
        """Seconds spent in the current focus phase (0 during a break)."""
        if self._state.mode is not TimerMode.POMODORO_FOCUS:
            return 0
        return self.focus_seconds - self._state.remaining_seconds

    def start(self) -> None:
        if self._status is TimerStatus.STOPPED:
            raise InvalidStateError("PomodoroTimer is stopped; reset() before starting again")
        self._require_idle("start")
        self._enter_phase(TimerMode.POMODORO_FOCUS)
        self._state.cycle_count = 0
        self._set_status(TimerStatus.RUNNING)
        self._emit(
            TimerEvent(
                kind=EventKind.PHASE_CHANGED,
                mode=TimerMode.POMODORO_FOCUS,
                seconds=self.focus_seconds,
            )
        )

    def _enter_phase(self, mode: TimerMode) -> None:
        budget = self.focus_seconds if mode is TimerMode.POMODORO_FOCUS else self.break_seconds
        self._state.mode = mode
        self._state.budget_seconds = budget
        self._state.remaining_seconds = budget

    def _advance(self) -> None:
        if self._state.remaining_seconds > 0:
            self._state.remaining_seconds -= 1
        if self._state.remaining_seconds == 0:
            self._complete_phase()

    def _complete_phase(self) -> None:
        if self._state.mode is TimerMode.POMODORO_FOCUS:
            self._state.cycle_count += 1
            self._emit(
                TimerEvent(
                    kind=EventKind.FOCUS_COMPLETED,
                    mode=TimerMode.POMODORO_FOCUS,
                    seconds=self.focus_seconds,
                    cycle_count=self._state.cycle_count,
                )
            )
            next_mode = TimerMode.POMODORO_BREAK
        else:
            next_mode = TimerMode.POMODORO_FOCUS

        self._enter_phase(next_mode)
        self.logger.info(f"Pomodoro phase -> {next_mode.value} (cycles={self._state.cycle_count})")
        self._emit(
            TimerEvent(
                kind=EventKind.PHASE_CHANGED,
                mode=next_mode,
                seconds=self._state.remaining_seconds,
                cycle_count=self._state.cycle_count,
            )
        )

    def stop(self) -> int:
        """
        End the cycle. Returns the seconds spent in an unfinished focus phase,
        which the caller may record as a partial session.
        """
        if not self._status.is_active():
            return 0
        partial = self.focus_elapsed_seconds
        self._set_status(TimerStatus.STOPPED)
        self._emit(
            TimerEvent(
                kind=EventKind.STOPPED,
                mode=self._state.mode,
                seconds=partial,
                cycle_count=self._state.cycle_count,
            )
        )
        return partial
