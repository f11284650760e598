"""Error taxonomy for pomotimer.

Everything raised on purpose derives from :class:`PomoError` so the CLI can
map each kind to a message and an exit status.
"""

from __future__ import annotations


class PomoError(Exception):
    """Base class for pomotimer errors."""


class ConfigurationError(PomoError):
    """Raised when the credential token has not been set up."""


class ValidationError(PomoError):
    """Raised when a command-line value cannot be used."""


class StorageError(PomoError):
    """Raised when the session file exists but cannot be read or written."""


class SignalingError(PomoError):
    """Raised when a presence-service command fails."""


class AlertError(PomoError):
    """Raised when a desktop notification or sound cannot be delivered."""
