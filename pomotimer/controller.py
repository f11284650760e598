"""Operation dispatch for one ``pomo`` invocation.

Three mutually exclusive modes:

- ``initialize(token)``  store the presence-service token, nothing else
- ``complete()``         run the end sequence for the current session
- ``start_countdown()``  begin a new countdown (the default)

``complete`` and ``start_countdown`` refuse to do anything while the token
is still the "add your token here" placeholder.
"""

from __future__ import annotations

import logging
import re
from typing import Callable, Optional

from .audio.alert import CompletionAlert, DesktopAlert
from .errors import ConfigurationError, ValidationError
from .presence.base import PresenceSignaler
from .presence.slack import SlackCliSignaler
from .settings import SessionRecord, SessionStore
from .timer.engine import DEFAULT_MINUTES, TICK_INTERVAL_MS, TimerEngine

_INTEGER = re.compile(r"[+-]?[0-9]+")


def parse_minutes(raw: str | int) -> int:
    """Strict non-negative integer, whitespace allowed around it."""
    text = str(raw).strip()
    if not _INTEGER.fullmatch(text):
        raise ValidationError(
            f'argument "minutes" must be a number, you passed: {raw}'
        )
    minutes = int(text)
    if minutes < 0:
        raise ValidationError(
            f'argument "minutes" must not be negative, you passed: {raw}'
        )
    return minutes


class SessionController:
    """Runs one operation mode against an explicit :class:`SessionStore`."""

    def __init__(
        self,
        store: SessionStore,
        *,
        signaler_factory: Callable[[str], PresenceSignaler] = SlackCliSignaler,
        alert: Optional[CompletionAlert] = None,
        tick_interval_ms: int = TICK_INTERVAL_MS,
        logger: Optional[logging.Logger] = None,
    ) -> None:
        self._store = store
        self._signaler_factory = signaler_factory
        self._alert = alert or DesktopAlert()
        self._tick_interval_ms = tick_interval_ms
        self._logger = logger or logging.getLogger("pomotimer.controller")

    @property
    def store(self) -> SessionStore:
        return self._store

    def initialize(self, token: str) -> SessionRecord:
        if not token or not token.strip():
            raise ValidationError("the --init token must not be empty")
        record = self._store.merge(credential_token=token.strip())
        self._logger.info("Config written to %s", self._store.path)
        return record

    def complete(self) -> TimerEngine:
        engine = self._build_engine(self._configured_record())
        engine.end()
        return engine

    def start_countdown(self, minutes: str | int = str(DEFAULT_MINUTES)) -> TimerEngine:
        """Start the countdown and return the engine.

        The caller owns the event loop; the engine emits ``finished`` when
        the countdown is over.  ``0`` minutes ends straight away.
        """
        mins = parse_minutes(minutes)
        engine = self._build_engine(self._configured_record())
        if mins == 0:
            engine.end()
        else:
            engine.start(mins)
        return engine

    def _configured_record(self) -> SessionRecord:
        record = self._store.load()
        if not record.is_configured:
            raise ConfigurationError(
                "tokens have not been set up correctly\n"
                "please use `--init` flag.\n"
                "see `--help` for details"
            )
        return record

    def _build_engine(self, record: SessionRecord) -> TimerEngine:
        return TimerEngine(
            self._store,
            self._signaler_factory(record.credential_token),
            self._alert,
            interval_ms=self._tick_interval_ms,
        )
