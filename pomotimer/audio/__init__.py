"""Audio and desktop alert package."""

from .alert import CompletionAlert, DesktopAlert
from .sounds import COMPLETION_SOUND, SOUNDS_DIR, ensure_sound, sound_path

__all__ = [
    "CompletionAlert",
    "DesktopAlert",
    "COMPLETION_SOUND",
    "SOUNDS_DIR",
    "ensure_sound",
    "sound_path",
]
