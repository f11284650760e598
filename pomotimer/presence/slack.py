"""Presence adapter that shells out to the ``slack`` command-line client.

The token travels in the ``SLACK_CLI_TOKEN`` environment variable; the
commands are::

    slack status edit --text <message> --emoji <emoji>
    slack presence active|away
    slack snooze start --minutes <n>
    slack snooze end
"""

from __future__ import annotations

import logging
import os
import subprocess
from pathlib import Path
from typing import Callable, Optional, Sequence

from ..errors import SignalingError
from .base import PRESENCE_STATES, PresenceState

TOKEN_ENV_VAR = "SLACK_CLI_TOKEN"


class SlackCliSignaler:
    """:class:`~pomotimer.presence.PresenceSignaler` backed by ``slack``."""

    def __init__(
        self,
        token: str,
        *,
        executable: str = "slack",
        cwd: Optional[Path] = None,
        runner: Callable[..., subprocess.CompletedProcess] = subprocess.run,
        logger: Optional[logging.Logger] = None,
    ):
        self._token = token
        self._executable = executable
        self._cwd = cwd or Path.home()
        self._runner = runner
        self._logger = logger or logging.getLogger("pomotimer.presence")

    def set_status(self, message: str, emoji: str) -> None:
        self._run(["status", "edit", "--text", message, "--emoji", emoji])

    def set_presence(self, state: PresenceState) -> None:
        if state not in PRESENCE_STATES:
            raise ValueError(f"presence must be one of {PRESENCE_STATES}, got {state!r}")
        self._run(["presence", state])

    def set_snooze(self, minutes: int) -> None:
        if minutes < 0:
            raise ValueError("snooze minutes must be zero or positive")
        if minutes == 0:
            self._run(["snooze", "end"])
        else:
            self._run(["snooze", "start", "--minutes", str(minutes)])

    def _run(self, args: Sequence[str]) -> None:
        command = [self._executable, *args]
        self._logger.debug("Running presence command: %s", " ".join(command))
        env = {**os.environ, TOKEN_ENV_VAR: self._token}
        try:
            self._runner(
                command,
                env=env,
                cwd=str(self._cwd),
                capture_output=True,
                text=True,
                check=True,
            )
        except subprocess.CalledProcessError as error:
            detail = (error.stderr or "").strip() or f"exit status {error.returncode}"
            raise SignalingError(f"`{' '.join(command)}` failed: {detail}") from error
        except OSError as error:
            raise SignalingError(f"`{' '.join(command)}` could not run: {error}") from error
