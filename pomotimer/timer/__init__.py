"""Timer package."""

from .engine import (
    TimerEngine,
    TimerState,
    Policy,
    StepResult,
    FAILURE_POLICY,
    TICK_INTERVAL_MS,
    DEFAULT_MINUTES,
    RUNNING_EMOJI,
    FREE_EMOJI,
    FREE_STATUS,
    status_message,
)

__all__ = [
    "TimerEngine",
    "TimerState",
    "Policy",
    "StepResult",
    "FAILURE_POLICY",
    "TICK_INTERVAL_MS",
    "DEFAULT_MINUTES",
    "RUNNING_EMOJI",
    "FREE_EMOJI",
    "FREE_STATUS",
    "status_message",
]
