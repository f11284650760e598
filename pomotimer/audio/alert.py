"""Desktop notification and completion sound.

Both calls are best-effort: any failure is raised as
:class:`~pomotimer.errors.AlertError` and the timer engine drops it.
"""

from __future__ import annotations

import logging
import subprocess
import sys
from pathlib import Path
from typing import Callable, Optional, Protocol, Sequence

from PyQt6.QtCore import QCoreApplication, QEventLoop, QTimer, QUrl
from PyQt6.QtMultimedia import QSoundEffect

from ..errors import AlertError
from .sounds import ensure_sound

NOTIFICATION_TITLE = "pomo"
NOTIFICATION_TEXT = "Timer Done!"

DEFAULT_VOLUME = 0.7  # 0.0–1.0
PLAYBACK_TIMEOUT_MS = 10 * 1000


class CompletionAlert(Protocol):
    def notify(self) -> None: ...

    def play_sound(self) -> None: ...


class DesktopAlert:
    """Notification via ``osascript``/``notify-send``, sound via QSoundEffect.

    ``play_sound`` blocks on a local event loop until the chime has played,
    so the caller may exit straight after it returns.  A Qt application
    must exist before it is called.
    """

    def __init__(
        self,
        *,
        sound_path: Optional[Path] = None,
        sounds_dir: Optional[Path] = None,
        runner: Callable[..., subprocess.CompletedProcess] = subprocess.run,
        platform: str = sys.platform,
        effect_factory: Callable[[], QSoundEffect] = QSoundEffect,
        volume: float = DEFAULT_VOLUME,
        timeout_ms: int = PLAYBACK_TIMEOUT_MS,
        logger: Optional[logging.Logger] = None,
    ) -> None:
        self._sound_path = sound_path
        self._sounds_dir = sounds_dir
        self._runner = runner
        self._is_mac = platform == "darwin"
        self._effect_factory = effect_factory
        self._volume = volume
        self._timeout_ms = timeout_ms
        self._logger = logger or logging.getLogger("pomotimer.alert")

    def notify(self) -> None:
        if self._is_mac:
            script = (
                f'display notification "{NOTIFICATION_TEXT}" '
                f'with title "{NOTIFICATION_TITLE}"'
            )
            self._run(["osascript", "-e", script])
        else:
            self._run(["notify-send", NOTIFICATION_TITLE, NOTIFICATION_TEXT])

    def play_sound(self) -> None:
        if QCoreApplication.instance() is None:
            raise AlertError("Cannot play sound without a Qt application")

        try:
            path = self._sound_path or ensure_sound(sounds_dir=self._sounds_dir)
        except OSError as error:
            raise AlertError(f"Cannot prepare completion sound: {error}") from error

        effect = self._effect_factory()
        loop = QEventLoop()

        def on_playing_changed() -> None:
            if not effect.isPlaying():
                loop.quit()

        def on_status_changed() -> None:
            if effect.status() == QSoundEffect.Status.Error:
                loop.quit()

        effect.playingChanged.connect(on_playing_changed)
        effect.statusChanged.connect(on_status_changed)

        guard = QTimer()
        guard.setSingleShot(True)
        guard.timeout.connect(loop.quit)

        self._logger.debug("Playing %s", path)
        effect.setSource(QUrl.fromLocalFile(str(path)))
        effect.setVolume(self._volume)
        effect.play()

        guard.start(self._timeout_ms)
        if effect.status() != QSoundEffect.Status.Error:
            loop.exec()
        timed_out = not guard.isActive()
        guard.stop()

        if effect.status() == QSoundEffect.Status.Error:
            raise AlertError(f"Cannot play {path}")
        if timed_out:
            effect.stop()
            raise AlertError(f"Playback of {path} did not finish in {self._timeout_ms} ms")

    def _run(self, command: Sequence[str]) -> None:
        self._logger.debug("Running alert command: %s", " ".join(command))
        try:
            self._runner(list(command), capture_output=True, check=True)
        except subprocess.CalledProcessError as error:
            raise AlertError(f"`{command[0]}` exited with status {error.returncode}") from error
        except OSError as error:
            raise AlertError(f"`{command[0]}` could not run: {error}") from error
