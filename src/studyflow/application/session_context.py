"""
Session context: owns the single active study timer and the log of
completed study sessions.

Replaces module-level tracker singletons with an object that is created,
passed to whoever needs it, and disposed explicitly.
"""

import logging
from collections.abc import Callable
from dataclasses import dataclass
from datetime import date
from typing import Literal

from studyflow.application.config import AppConfig
from studyflow.application.timers.base import TimerListener, TimerMachine
from studyflow.application.timers.plain import PlainTimer
from studyflow.application.timers.pomodoro import PomodoroTimer
from studyflow.domain.errors import InvalidStateError
from studyflow.domain.timers.models import EventKind, TimerEvent

logger = logging.getLogger(__name__)

ConflictPolicy = Literal["error", "stop", "pause"]


@dataclass(frozen=True)
class StudySessionRecord:
    """A finished block of study time, ready to be persisted by the caller."""

    subject: str
    topic: str
    seconds: int
    source: Literal["timer", "pomodoro"]
    day: date
    breaks: int = 0
    notes: str = ""


class SessionLog:
    """Append-only collection of StudySessionRecord for analytics."""

    def __init__(self) -> None:
        self.records: list[StudySessionRecord] = []

    def add(self, record: StudySessionRecord) -> None:
        self.records.append(record)

    def sessions_on(self, day: date) -> list[StudySessionRecord]:
        return [r for r in self.records if r.day == day]

    def total_seconds(self, day: date | None = None) -> int:
        records = self.records if day is None else self.sessions_on(day)
        return sum(r.seconds for r in records)

    def clear(self) -> None:
        self.records.clear()


@dataclass
class ActiveSession:
    subject: str
    topic: str
    timer: TimerMachine
    listener: TimerListener | None = None

    @property
    def source(self) -> Literal["timer", "pomodoro"]:
        return "pomodoro" if isinstance(self.timer, PomodoroTimer) else "timer"


class SessionContext:
    """
    Holds at most one active timer and records what it produces.

    Starting a second session while one is active is a conflict. The caller
    picks the resolution with `on_conflict`:
        - "error": raise InvalidStateError (default)
        - "stop":  stop and record the current session, then start the new one
        - "pause": pause the current session and park it, then start the new one
    """

    def __init__(
        self,
        config: AppConfig | None = None,
        log: SessionLog | None = None,
        notifier: Callable[[TimerEvent], None] | None = None,
        clock: Callable[[], date] = date.today,
    ):
        self.config = config or AppConfig()
        self.log = log or SessionLog()
        self.notifier = notifier
        self._clock = clock
        self._active: ActiveSession | None = None
        self.parked: list[ActiveSession] = []
        self._disposed = False

    @classmethod
    def create(cls, config: AppConfig | None = None, **kwargs) -> "SessionContext":
        return cls(config, **kwargs)

    def __enter__(self) -> "SessionContext":
        return self

    def __exit__(self, *exc) -> None:
        self.dispose()

    # -- queries ---------------------------------------------------------

    @property
    def active(self) -> ActiveSession | None:
        return self._active

    @property
    def timer(self) -> TimerMachine | None:
        return self._active.timer if self._active else None

    # -- control ---------------------------------------------------------

    def start_plain(
        self, subject: str, topic: str = "", on_conflict: ConflictPolicy = "error"
    ) -> PlainTimer:
        timer = PlainTimer()
        self._begin(subject, topic, timer, on_conflict)
        timer.start()
        return timer

    def start_pomodoro(
        self, subject: str, topic: str = "", on_conflict: ConflictPolicy = "error"
    ) -> PomodoroTimer:
        timer = PomodoroTimer(self.config.focus_seconds, self.config.break_seconds)
        session = self._begin(subject, topic, timer, on_conflict)

        def on_event(event: TimerEvent) -> None:
            if event.kind is EventKind.FOCUS_COMPLETED:
                self._record(session, event.seconds, breaks=event.cycle_count)
            elif event.kind is EventKind.PHASE_CHANGED and self.notifier:
                self.notifier(event)

        session.listener = on_event
        timer.add_listener(on_event)
        timer.start()
        return timer

    def _begin(
        self, subject: str, topic: str, timer: TimerMachine, on_conflict: ConflictPolicy
    ) -> ActiveSession:
        if self._disposed:
            raise InvalidStateError("SessionContext has been disposed")

        current = self._active
        if current is not None and current.timer.status.is_active():
            if on_conflict == "stop":
                self.stop()
            elif on_conflict == "pause":
                current.timer.pause()
                self.parked.append(current)
                logger.info(f"Parked session for {current.subject!r}")
            else:
                raise InvalidStateError(
                    f"A session for {current.subject!r} is already active; "
                    "stop or pause it before starting another"
                )

        self._active = ActiveSession(subject=subject, topic=topic, timer=timer)
        logger.info(f"Started {self._active.source} session for {subject!r}")
        return self._active

    def tick(self) -> None:
        if self._active is not None:
            self._active.timer.tick()

    def pause(self) -> None:
        if self._active is not None:
            self._active.timer.pause()

    def resume(self) -> None:
        if self._active is not None:
            self._active.timer.resume()

    def resume_parked(self, index: int = -1) -> TimerMachine:
        """Bring a parked session back as the active one."""
        if self._active is not None and self._active.timer.status.is_active():
            raise InvalidStateError("Stop or pause the active session first")
        session = self.parked.pop(index)
        self._active = session
        session.timer.resume()
        return session.timer

    def stop(self) -> StudySessionRecord | None:
        """
        Stop the active session and record it.

        Returns the record written to the log, or None when nothing was
        recorded (no session, or zero seconds of study).
        """
        session = self._active
        if session is None:
            return None
        self._active = None
        return self._finish(session)

    def _finish(self, session: ActiveSession) -> StudySessionRecord | None:
        timer = session.timer
        if isinstance(timer, PomodoroTimer):
            # Completed focus phases were recorded as they fired
            partial = timer.stop()
            record = self._record(session, partial, breaks=timer.cycle_count)
        elif isinstance(timer, PlainTimer):
            record = self._record(session, timer.stop())
        else:
            record = None
        if session.listener is not None:
            timer.remove_listener(session.listener)
        return record

    def _record(
        self, session: ActiveSession, seconds: int, breaks: int = 0
    ) -> StudySessionRecord | None:
        if seconds <= 0:
            return None
        record = StudySessionRecord(
            subject=session.subject,
            topic=session.topic,
            seconds=seconds,
            source=session.source,
            day=self._clock(),
            breaks=breaks,
            notes="Pomodoro Focus Session" if session.source == "pomodoro" else "",
        )
        self.log.add(record)
        logger.info(f"Recorded {seconds}s of {session.source} study for {session.subject!r}")
        return record

    def dispose(self) -> None:
        """Stop and record the active and parked sessions. Idempotent."""
        if self._disposed:
            return
        self.stop()
        while self.parked:
            self._finish(self.parked.pop())
        self._disposed = True
