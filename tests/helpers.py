"""Shared test helpers for pomotimer."""

import subprocess

from PyQt6.QtCore import QObject, QTimer, pyqtSignal
from PyQt6.QtMultimedia import QSoundEffect

from pomotimer.errors import AlertError, SignalingError


class SignalCollector:
    """Utility to capture pyqtSignal emissions into a list."""

    def __init__(self):
        self.items: list = []

    def slot(self, *args):
        self.items.append(args if len(args) > 1 else args[0] if args else None)

    def __call__(self, *args):
        self.slot(*args)

    def __len__(self):
        return len(self.items)

    def __getitem__(self, idx):
        return self.items[idx]

    @property
    def last(self):
        return self.items[-1] if self.items else None


class RecordingSignaler:
    """PresenceSignaler fake.  ``fail`` holds call tuples that should raise."""

    def __init__(self):
        self.calls: list[tuple] = []
        self.fail: set[tuple] = set()
        self.token = None

    def _record(self, call):
        self.calls.append(call)
        if call in self.fail:
            raise SignalingError(f"{call} failed")

    def set_status(self, message, emoji):
        self._record(("status", message, emoji))

    def set_presence(self, state):
        self._record(("presence", state))

    def set_snooze(self, minutes):
        self._record(("snooze", minutes))


class RecordingAlert:
    def __init__(self, *, fail: bool = False):
        self.calls: list[str] = []
        self.fail = fail

    def notify(self):
        self.calls.append("notify")
        if self.fail:
            raise AlertError("no notifier")

    def play_sound(self):
        self.calls.append("play_sound")
        if self.fail:
            raise AlertError("no player")


class FakeRunner:
    """Stand-in for ``subprocess.run`` that records commands.

    ``returncodes`` maps the first differing argument (e.g. ``"snooze"``)
    or the executable to the exit status to report.
    """

    def __init__(self, returncodes=None, missing=()):
        self.commands: list[list[str]] = []
        self.kwargs: list[dict] = []
        self.returncodes = returncodes or {}
        self.missing = set(missing)

    def __call__(self, command, **kwargs):
        self.commands.append(list(command))
        self.kwargs.append(kwargs)
        if command[0] in self.missing:
            raise FileNotFoundError(2, "No such file or directory", command[0])
        code = next(
            (self.returncodes[a] for a in command if a in self.returncodes), 0
        )
        if code and kwargs.get("check"):
            raise subprocess.CalledProcessError(code, command, output="", stderr="boom")
        return subprocess.CompletedProcess(command, code, stdout="", stderr="")


class FakeSoundEffect(QObject):
    """QSoundEffect stand-in that "plays" on the next event loop pass.

    ``fail`` reports an Error status instead of playing; ``hang`` starts
    playing and never stops.
    """

    playingChanged = pyqtSignal()
    statusChanged = pyqtSignal()

    def __init__(self, *, fail=False, hang=False):
        super().__init__()
        self.fail = fail
        self.hang = hang
        self.source = None
        self.volume = None
        self.play_count = 0
        self.stopped = False
        self._playing = False
        self._status = QSoundEffect.Status.Null

    def setSource(self, url):
        self.source = url.toLocalFile()
        self._status = QSoundEffect.Status.Ready

    def setVolume(self, volume):
        self.volume = volume

    def isPlaying(self):
        return self._playing

    def status(self):
        return self._status

    def play(self):
        self.play_count += 1
        QTimer.singleShot(0, self._run)

    def stop(self):
        self.stopped = True
        self._playing = False

    def _run(self):
        if self.fail:
            self._status = QSoundEffect.Status.Error
            self.statusChanged.emit()
            return
        self._set_playing(True)
        if not self.hang:
            self._set_playing(False)

    def _set_playing(self, playing):
        self._playing = playing
        self.playingChanged.emit()


def run_ticks(engine, count: int) -> None:
    """Feed *count* synthetic ticks instead of waiting on the QTimer."""
    for _ in range(count):
        engine.advance()
