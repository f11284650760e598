"""Completion chime synthesis with numpy.

The chime is generated once as a WAV file using sine-wave synthesis with
an ADSR envelope, then cached so later runs just play the file.

Sound names
-----------
- ``session_complete`` — bright arpeggio (C5→E5→G5→C6) with a held top note
"""

from __future__ import annotations

import io
import wave
from pathlib import Path
from typing import Callable

import numpy as np


# ── paths ────────────────────────────────────────────────────────────────

CACHE_DIR = Path.home() / ".cache" / "pomo-timer"
SOUNDS_DIR = CACHE_DIR / "sounds"
COMPLETION_SOUND = "session_complete"

SAMPLE_RATE = 44100


# ═══════════════════════════════════════════════════════════════════════════
#  WAV SYNTHESIS HELPERS
# ═══════════════════════════════════════════════════════════════════════════


def _make_envelope(
    length: int,
    attack: int = 200,
    decay: int = 400,
    sustain_level: float = 0.7,
    release: int = 800,
) -> np.ndarray:
    """ADSR envelope (all durations in samples)."""
    env = np.full(length, sustain_level, dtype=np.float64)
    a = min(attack, length)
    if a > 0:
        env[:a] = np.linspace(0.0, 1.0, a)
    d_end = min(a + decay, length)
    if d_end > a:
        env[a:d_end] = np.linspace(1.0, sustain_level, d_end - a)
    r_start = max(length - release, d_end)
    if r_start < length:
        env[r_start:] = np.linspace(sustain_level, 0.0, length - r_start)
    return env


def _sine(freq: float, duration_s: float) -> np.ndarray:
    """Pure sine wave at *freq* Hz for *duration_s* seconds."""
    t = np.linspace(0, duration_s, int(SAMPLE_RATE * duration_s), endpoint=False)
    return np.sin(2 * np.pi * freq * t)


def _to_wav_bytes(samples: np.ndarray) -> bytes:
    """Convert a float64 array (-1..1) to 16-bit mono PCM WAV bytes."""
    int_samples = (np.clip(samples, -1.0, 1.0) * 32767).astype(np.int16)

    buf = io.BytesIO()
    with wave.open(buf, "wb") as wf:
        wf.setnchannels(1)
        wf.setsampwidth(2)
        wf.setframerate(SAMPLE_RATE)
        wf.writeframes(int_samples.tobytes())
    return buf.getvalue()


# ═══════════════════════════════════════════════════════════════════════════
#  SOUND GENERATORS
# ═══════════════════════════════════════════════════════════════════════════


def _generate_completion() -> bytes:
    """Timer done: short rising arpeggio, last note rings out."""
    notes = [523.25, 659.25, 783.99, 1046.50]  # C5, E5, G5, C6
    gap = np.zeros(int(SAMPLE_RATE * 0.02))
    parts: list[np.ndarray] = []
    for freq in notes[:-1]:
        tone = _sine(freq, 0.10) * 0.5
        parts.append(tone * _make_envelope(len(tone), attack=60, decay=150,
                                           sustain_level=0.3, release=200))
        parts.append(gap)

    top = _sine(notes[-1], 0.45) * 0.5 + _sine(notes[-1] * 2, 0.45) * 0.08
    parts.append(top * _make_envelope(len(top), attack=80, decay=300,
                                      sustain_level=0.5, release=int(SAMPLE_RATE * 0.25)))
    return _to_wav_bytes(np.concatenate(parts))


_GENERATORS: dict[str, Callable[[], bytes]] = {
    COMPLETION_SOUND: _generate_completion,
}


def sound_path(name: str = COMPLETION_SOUND, *, sounds_dir: Path | None = None) -> Path:
    return (sounds_dir or SOUNDS_DIR) / f"{name}.wav"


def ensure_sound(name: str = COMPLETION_SOUND, *, sounds_dir: Path | None = None) -> Path:
    """Generate the WAV for *name* if it is not cached yet; return its path."""
    try:
        generate = _GENERATORS[name]
    except KeyError:
        raise ValueError(f"Unknown sound: {name!r}") from None

    path = sound_path(name, sounds_dir=sounds_dir)
    if not path.exists():
        path.parent.mkdir(parents=True, exist_ok=True)
        path.write_bytes(generate())
    return path
