"""
Shared plumbing for the session timing machines.

Each machine owns exactly one TimerState and advances it one simulated second
per tick. Ticks delivered while not running are ignored; missed ticks are
never caught up.
"""

import logging
from collections.abc import Callable
from dataclasses import replace

from studyflow.domain.errors import InvalidStateError
from studyflow.domain.timers.models import TimerEvent, TimerMode, TimerState, TimerStatus

TimerListener = Callable[[TimerEvent], None]


class TimerMachine:
    """Base class: status bookkeeping, listeners, and the tick guard."""

    initial_mode: TimerMode

    def __init__(self) -> None:
        self.logger = logging.getLogger(self.__class__.__module__)
        self._listeners: list[TimerListener] = []
        self._status = TimerStatus.IDLE
        self._state = TimerState(mode=self.initial_mode)

    # -- observation ---------------------------------------------------------

    @property
    def status(self) -> TimerStatus:
        return self._status

    @property
    def state(self) -> TimerState:
        """Live state. Use snapshot() for a copy safe to hand out."""
        return self._state

    def snapshot(self) -> TimerState:
        return replace(self._state)

    def add_listener(self, listener: TimerListener) -> None:
        self._listeners.append(listener)

    def remove_listener(self, listener: TimerListener) -> None:
        if listener in self._listeners:
            self._listeners.remove(listener)

    def _emit(self, event: TimerEvent) -> None:
        self.logger.debug(f"{self.__class__.__name__} event: {event.kind.value}")
        for listener in list(self._listeners):
            listener(event)

    # -- transitions ---------------------------------------------------------

    def _require_idle(self, action: str) -> None:
        if self._status is not TimerStatus.IDLE:
            raise InvalidStateError(
                f"Cannot {action} {self.__class__.__name__}: status is {self._status.value}"
            )

    def _set_status(self, status: TimerStatus) -> None:
        self._status = status
        self._state.is_running = status is TimerStatus.RUNNING

    def tick(self) -> None:
        """Advance one second. A no-op unless running."""
        if self._status is not TimerStatus.RUNNING or not self._state.is_running:
            return
        self._advance()

    def _advance(self) -> None:
        raise NotImplementedError

    def pause(self) -> None:
        if self._status is TimerStatus.RUNNING:
            self._set_status(TimerStatus.PAUSED)

    def resume(self) -> None:
        if self._status is TimerStatus.PAUSED:
            self._set_status(TimerStatus.RUNNING)

    def reset(self) -> None:
        """Discard the current session and return to the initial state."""
        self._status = TimerStatus.IDLE
        self._state = TimerState(mode=self.initial_mode)
