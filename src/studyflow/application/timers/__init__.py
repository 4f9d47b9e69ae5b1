# Application Timers Package
from .base import TimerListener, TimerMachine
from .plain import PlainTimer
from .pomodoro import PomodoroTimer
from .revision import RevisionCountdown, clamp_budget

__all__ = [
    "TimerMachine",
    "TimerListener",
    "PlainTimer",
    "PomodoroTimer",
    "RevisionCountdown",
    "clamp_budget",
]
