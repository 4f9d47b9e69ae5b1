"""
Domain models for session timing.

Pure data: the state machines that mutate these live in the application layer.
"""

from dataclasses import dataclass
from enum import Enum


class TimerMode(str, Enum):
    PLAIN_COUNT_UP = "plain"
    POMODORO_FOCUS = "focus"
    POMODORO_BREAK = "break"
    REVISION_COUNTDOWN = "revision"


class TimerStatus(str, Enum):
    """
    Lifecycle status shared by all three machines.

    Plain:     IDLE -> RUNNING <-> PAUSED -> STOPPED
    Pomodoro:  IDLE -> RUNNING (focus/break alternate) <-> PAUSED -> STOPPED
    Revision:  IDLE (setup) -> RUNNING -> TIMED_OUT | COMPLETED
    """

    IDLE = "idle"
    RUNNING = "running"
    PAUSED = "paused"
    STOPPED = "stopped"
    TIMED_OUT = "timed_out"
    COMPLETED = "completed"

    def is_active(self) -> bool:
        """Check if the machine holds a live session."""
        return self in (TimerStatus.RUNNING, TimerStatus.PAUSED)

    def is_terminal(self) -> bool:
        return self in (TimerStatus.STOPPED, TimerStatus.TIMED_OUT, TimerStatus.COMPLETED)


@dataclass
class TimerState:
    """
    Mutable state of one active timing machine.

    Attributes:
        mode: Which machine/phase this state belongs to.
        elapsed_seconds: Count-up clock (plain timer).
        remaining_seconds: Countdown clock (pomodoro and revision).
        is_running: When False, ticks must not advance the clock.
        budget_seconds: Configured duration of the current phase or session.
        cycle_count: Completed focus -> break transitions (pomodoro only).
    """

    mode: TimerMode
    elapsed_seconds: int = 0
    remaining_seconds: int = 0
    is_running: bool = False
    budget_seconds: int | None = None
    cycle_count: int = 0


class EventKind(str, Enum):
    FOCUS_COMPLETED = "focus_completed"
    PHASE_CHANGED = "phase_changed"
    TIMED_OUT = "timed_out"
    COMPLETED = "completed"
    STOPPED = "stopped"


@dataclass(frozen=True)
class TimerEvent:
    """
    Observable transition emitted by a timing machine.

    Attributes:
        kind: What happened.
        mode: Mode after the transition.
        seconds: Duration attached to the event (focus length, phase length,
            or elapsed time at stop).
        cycle_count: Pomodoro cycles completed so far.
    """

    kind: EventKind
    mode: TimerMode
    seconds: int = 0
    cycle_count: int = 0
