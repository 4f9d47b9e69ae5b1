# Domain Timers Package
from .models import EventKind, TimerEvent, TimerMode, TimerState, TimerStatus

__all__ = ["TimerMode", "TimerStatus", "TimerState", "TimerEvent", "EventKind"]
