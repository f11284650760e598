"""Session record with JSON persistence.

The record is stored at:
    ~/.pomo-timer.json          (override with $POMO_TIMER_CONFIG)

Usage::

    store = SessionStore()
    record = store.load()
    store.merge(remaining_minutes=12)

``merge`` is the only write path: it re-reads the file, overlays the given
fields and writes the whole record back, so a single-field update never
erases the other field.  On disk the record is a flat object:

    {"credentialToken": "...", "remainingMinutes": 0}
"""

from __future__ import annotations

import json
import os
from dataclasses import dataclass, asdict, fields, replace
from pathlib import Path

from .errors import StorageError


CONFIG_FILENAME = ".pomo-timer.json"
CONFIG_ENV_VAR = "POMO_TIMER_CONFIG"
UNSET_TOKEN = "add your token here"


@dataclass(frozen=True)
class SessionRecord:
    """The persisted state shared between invocations."""

    credential_token: str = UNSET_TOKEN
    remaining_minutes: int = 0         # 0 → no active countdown

    @property
    def is_configured(self) -> bool:
        return self.credential_token != UNSET_TOKEN


_FIELD_NAMES = frozenset(f.name for f in fields(SessionRecord))

# dataclass field → key in the JSON file
FIELD_KEYS: dict[str, str] = {
    "credential_token": "credentialToken",
    "remaining_minutes": "remainingMinutes",
}


def resolve_config_path(path: str | os.PathLike | None = None) -> Path:
    """Explicit path, else ``$POMO_TIMER_CONFIG``, else ``~/.pomo-timer.json``."""
    raw = path or os.getenv(CONFIG_ENV_VAR) or Path.home() / CONFIG_FILENAME
    return Path(raw).expanduser()


class SessionStore:
    """Reads and merge-writes the single :class:`SessionRecord` on disk."""

    def __init__(self, path: str | os.PathLike | None = None) -> None:
        self._path = resolve_config_path(path)

    @property
    def path(self) -> Path:
        return self._path

    def load(self) -> SessionRecord:
        """Read the record, falling back to defaults when the file is absent.

        Nothing is written here; a missing file stays missing until the
        first :meth:`merge`.
        """
        return self._record_from(self._read_document())

    def merge(self, **changes) -> SessionRecord:
        """Overlay *changes* on the stored record and persist the result.

        Keys in the file that are not part of the record are written back
        untouched.
        """
        unknown = set(changes) - _FIELD_NAMES
        if unknown:
            raise TypeError(f"Unknown session fields: {', '.join(sorted(unknown))}")

        document = self._read_document()
        merged = _validated(replace(self._record_from(document), **changes), self._path)
        self._write({**document, **_to_document(merged)})
        return merged

    def _read_document(self) -> dict:
        try:
            text = self._path.read_text(encoding="utf-8")
        except FileNotFoundError:
            return {}
        except OSError as error:
            raise StorageError(f"Cannot read {self._path}: {error}") from error

        try:
            data = json.loads(text)
        except json.JSONDecodeError as error:
            raise StorageError(f"Malformed JSON in {self._path}: {error}") from error

        if not isinstance(data, dict):
            raise StorageError(f"Expected a JSON object in {self._path}")
        return data

    def _record_from(self, document: dict) -> SessionRecord:
        # Only use keys that map to a dataclass field
        known = {
            name: document[key]
            for name, key in FIELD_KEYS.items()
            if key in document
        }
        return _validated(SessionRecord(**known), self._path)

    def _write(self, document: dict) -> None:
        try:
            self._path.parent.mkdir(parents=True, exist_ok=True)
            self._path.write_text(
                json.dumps(document, indent=2) + "\n",
                encoding="utf-8",
            )
        except OSError as error:
            raise StorageError(f"Cannot write {self._path}: {error}") from error


def _to_document(record: SessionRecord) -> dict:
    return {FIELD_KEYS[name]: value for name, value in asdict(record).items()}


def _validated(record: SessionRecord, path: Path) -> SessionRecord:
    if not isinstance(record.credential_token, str):
        raise StorageError(f"{FIELD_KEYS['credential_token']} in {path} must be a string")
    minutes = record.remaining_minutes
    # bool is an int subclass; reject it explicitly
    if isinstance(minutes, bool) or not isinstance(minutes, int) or minutes < 0:
        raise StorageError(
            f"{FIELD_KEYS['remaining_minutes']} in {path} must be a non-negative integer"
        )
    return record
