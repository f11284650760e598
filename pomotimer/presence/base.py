"""The capability the timer needs from a presence service."""

from __future__ import annotations

from typing import Literal, Protocol

PresenceState = Literal["active", "away"]
PRESENCE_STATES: tuple[str, ...] = ("active", "away")


class PresenceSignaler(Protocol):
    """Status, presence and snooze controls for one authenticated user.

    Every operation is idempotent and raises
    :class:`~pomotimer.errors.SignalingError` when the service call fails.
    """

    def set_status(self, message: str, emoji: str) -> None: ...

    def set_presence(self, state: PresenceState) -> None: ...

    def set_snooze(self, minutes: int) -> None:
        """Start a snooze of *minutes*; ``0`` ends the current snooze."""
        ...
