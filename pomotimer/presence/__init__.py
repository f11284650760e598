"""Presence service package."""

from .base import PRESENCE_STATES, PresenceSignaler
from .slack import SlackCliSignaler, TOKEN_ENV_VAR

__all__ = [
    "PRESENCE_STATES",
    "PresenceSignaler",
    "SlackCliSignaler",
    "TOKEN_ENV_VAR",
]
