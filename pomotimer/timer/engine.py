"""Countdown state machine for pomotimer.

States
------
IDLE      Nothing counting down in this process.
RUNNING   Minute countdown in progress, one tick per minute.
ENDED     Countdown finished (or ``end()`` was called directly).

Transitions
-----------
IDLE → RUNNING      (start)
RUNNING → RUNNING   (tick, minutes left ≥ 1)
RUNNING → ENDED     (tick reaching 0)
Any → ENDED         (end, also run directly by ``pomo --complete``)

Every external call made during a transition is a named *step*.  What
happens when a step fails is looked up in ``FAILURE_POLICY`` rather than
decided at the call site; the outcome of each step is kept in
``last_results``.

The ``QTimer`` only decides *when* a tick happens.  ``advance()`` does the
work, so tests drive the machine by calling it directly.
"""

from __future__ import annotations

import logging
from dataclasses import dataclass
from enum import Enum
from typing import Callable, Optional

from PyQt6.QtCore import QObject, QTimer, pyqtSignal

from ..audio.alert import CompletionAlert
from ..errors import AlertError, SignalingError, StorageError
from ..presence.base import PresenceSignaler
from ..settings import SessionStore


# ── enums ─────────────────────────────────────────────────────────────────


class TimerState(Enum):
    IDLE = "idle"
    RUNNING = "running"
    ENDED = "ended"


class Policy(Enum):
    PROPAGATE = "propagate"
    SWALLOW = "swallow"


# ── constants ─────────────────────────────────────────────────────────────

TICK_INTERVAL_MS = 60 * 1000
DEFAULT_MINUTES = 25

RUNNING_EMOJI = ":tomato:"
FREE_EMOJI = ":pickle_rick:"
FREE_STATUS = "free"

FAILURE_POLICY: dict[str, Policy] = {
    # alerts are best-effort
    "notify": Policy.SWALLOW,
    "play_sound": Policy.SWALLOW,
    # start + tick
    "status": Policy.PROPAGATE,
    "presence": Policy.PROPAGATE,
    "snooze": Policy.PROPAGATE,
    # end
    "end_status": Policy.PROPAGATE,
    "end_presence": Policy.PROPAGATE,
    "end_snooze": Policy.SWALLOW,  # snooze may have expired or never started
}


def status_message(minutes: int) -> str:
    return f"free in {minutes} mins"


@dataclass(frozen=True)
class StepResult:
    """Outcome of one external call made during a transition."""
    step: str
    ok: bool
    reason: str = ""


# ── engine ────────────────────────────────────────────────────────────────


class TimerEngine(QObject):
    """Minute countdown that mirrors its progress to a presence service.

    Signals
    -------
    tick(remaining_minutes: int)
        Emitted after every tick's decrement.
    state_changed(new_state: TimerState)
        Emitted on every state transition.
    tick_failed(error: PomoError)
        Emitted when a scheduled tick aborts on a propagated failure.
    finished(ok: bool)
        Emitted once the countdown can no longer continue: ``True`` after
        a completed ``end()``, ``False`` when the final tick failed or the
        session file could not be read or written mid-countdown.
    """

    tick = pyqtSignal(int)
    state_changed = pyqtSignal(object)
    tick_failed = pyqtSignal(object)
    finished = pyqtSignal(bool)

    def __init__(
        self,
        store: SessionStore,
        signaler: PresenceSignaler,
        alert: CompletionAlert,
        parent: QObject | None = None,
        *,
        interval_ms: int = TICK_INTERVAL_MS,
        logger: Optional[logging.Logger] = None,
    ) -> None:
        super().__init__(parent)

        self._store = store
        self._signaler = signaler
        self._alert = alert
        self._logger = logger or logging.getLogger("pomotimer.timer")

        self._state: TimerState = TimerState.IDLE
        self._remaining: int = 0
        self._results: list[StepResult] = []

        self._qt_timer = QTimer(self)
        self._qt_timer.setInterval(interval_ms)
        self._qt_timer.timeout.connect(self._on_timeout)

    # ══════════════════════════════════════════════════════════════════
    #  PUBLIC PROPERTIES
    # ══════════════════════════════════════════════════════════════════

    @property
    def state(self) -> TimerState:
        return self._state

    @property
    def remaining(self) -> int:
        """Minutes left, as last decremented in memory."""
        return self._remaining

    @property
    def is_scheduled(self) -> bool:
        """True while the recurring tick is armed."""
        return self._qt_timer.isActive()

    @property
    def interval_ms(self) -> int:
        return self._qt_timer.interval()

    @property
    def last_results(self) -> tuple[StepResult, ...]:
        """Step outcomes of the most recent transition."""
        return tuple(self._results)

    # ══════════════════════════════════════════════════════════════════
    #  TRANSITIONS
    # ══════════════════════════════════════════════════════════════════

    def start(self, minutes: int) -> None:
        """Begin a countdown of *minutes*.  Only valid from IDLE."""
        if self._state != TimerState.IDLE:
            return
        if minutes < 1:
            raise ValueError("minutes must be a positive integer")

        self._results = []
        self._store.merge(remaining_minutes=minutes)
        self._remaining = minutes
        self._step("status", self._signaler.set_status, status_message(minutes), RUNNING_EMOJI)
        self._step("presence", self._signaler.set_presence, "away")
        self._step("snooze", self._signaler.set_snooze, minutes)

        self._logger.info("Pomodoro started: %s mins", minutes)
        self._set_state(TimerState.RUNNING)
        self._qt_timer.start()

    def advance(self) -> None:
        """Run one tick.  Ignored unless RUNNING."""
        if self._state != TimerState.RUNNING:
            return

        self._results = []
        self._remaining -= 1
        self._logger.info("timer: %s", self._remaining)
        self.tick.emit(max(0, self._remaining))

        if self._remaining < 1:
            self._remaining = 0
            self._qt_timer.stop()
            self._finish()
            return

        self._store.merge(remaining_minutes=self._remaining)
        self._step("status", self._signaler.set_status,
                   status_message(self._remaining), RUNNING_EMOJI)

    def end(self) -> None:
        """Alert the user and reset the presence service to available.

        Safe to call at any time and any number of times.
        """
        self._qt_timer.stop()
        self._results = []
        self._finish()

    # ══════════════════════════════════════════════════════════════════
    #  INTERNAL
    # ══════════════════════════════════════════════════════════════════

    def _finish(self) -> None:
        self._logger.info("stopping")
        self._step("notify", self._alert.notify)
        self._step("play_sound", self._alert.play_sound)
        self._step("end_status", self._signaler.set_status, FREE_STATUS, FREE_EMOJI)
        self._step("end_presence", self._signaler.set_presence, "active")
        self._step("end_snooze", self._signaler.set_snooze, 0)
        self._store.merge(remaining_minutes=0)

        self._remaining = 0
        self._set_state(TimerState.ENDED)
        self.finished.emit(True)

    def _step(self, name: str, call: Callable[..., None], *args) -> StepResult:
        try:
            call(*args)
        except (SignalingError, AlertError) as error:
            result = StepResult(name, ok=False, reason=str(error))
            self._results.append(result)
            if FAILURE_POLICY[name] is Policy.PROPAGATE:
                raise
            self._logger.warning("Ignoring failed %s step: %s", name, error)
            return result

        result = StepResult(name, ok=True)
        self._results.append(result)
        return result

    def _on_timeout(self) -> None:
        # Raising out of a Qt slot would abort the process.  A lost session
        # file ends the run at once; a failed signal only ends it when it
        # was the final tick.
        try:
            self.advance()
        except StorageError as error:
            self._qt_timer.stop()
            self._logger.error("Countdown aborted: %s", error)
            self.tick_failed.emit(error)
            self.finished.emit(False)
        except SignalingError as error:
            self._logger.error("Tick failed: %s", error)
            self.tick_failed.emit(error)
            if not self._qt_timer.isActive():
                self.finished.emit(False)

    def _set_state(self, new_state: TimerState) -> None:
        self._state = new_state
        self.state_changed.emit(new_state)
