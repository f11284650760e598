"""
``pomo`` command: start a pomodoro timer and mirror it to Slack.

    pomo [MINUTES]          start a countdown (default 25)
    pomo --init TOKEN       store the Slack token
    pomo --complete         end the current session now
"""

import logging
import signal
import sys
from typing import Optional

import typer
from PyQt6.QtCore import QCoreApplication

from pomotimer.controller import SessionController
from pomotimer.errors import (
    ConfigurationError,
    SignalingError,
    StorageError,
    ValidationError,
)
from pomotimer.settings import SessionStore
from pomotimer.timer.engine import DEFAULT_MINUTES, TimerEngine, TimerState

TOKEN_HELP = (
    "where init is your slack token from "
    "https://api.slack.com/custom-integrations/legacy-tokens"
)

app = typer.Typer(add_completion=False, help="start a pomodoro timer")


def setup_logging(level: int = logging.INFO) -> logging.Logger:
    """Configure logging for the CLI."""
    logging.basicConfig(
        level=level,
        format="%(asctime)s [%(levelname)s] %(name)s: %(message)s",
        datefmt="%Y-%m-%d %H:%M:%S",
    )
    return logging.getLogger("pomotimer")


def build_controller() -> SessionController:
    return SessionController(SessionStore())


def get_application() -> QCoreApplication:
    """The process-wide Qt application; timers and sound effects need one."""
    return QCoreApplication.instance() or QCoreApplication(sys.argv[:1])


def run_event_loop(qapp: QCoreApplication, engine: TimerEngine) -> bool:
    """Block until the engine finishes.  Returns its success flag."""
    if engine.state == TimerState.ENDED:
        return True

    outcome = {"ok": True}

    def on_finished(ok: bool) -> None:
        outcome["ok"] = ok
        qapp.quit()

    engine.finished.connect(on_finished)
    # Python signal handlers never run while Qt's loop holds the thread.
    previous = signal.signal(signal.SIGINT, signal.SIG_DFL)
    try:
        qapp.exec()
    finally:
        if previous is not None:
            signal.signal(signal.SIGINT, previous)
    return outcome["ok"]


@app.command()
def pomo(
    minutes: str = typer.Argument(
        str(DEFAULT_MINUTES), help="number of minutes for pomodoro timer"
    ),
    init: Optional[str] = typer.Option(None, "--init", "-i", help=TOKEN_HELP),
    complete: bool = typer.Option(
        False, "--complete", "-c", help="end the current pomodoro now"
    ),
    verbose: bool = typer.Option(
        False, "--verbose", "-v", help="Enable verbose logging (DEBUG level)"
    ),
):
    """Start a pomodoro timer."""
    logger = setup_logging(logging.DEBUG if verbose else logging.INFO)
    controller = build_controller()

    try:
        if init is not None:
            controller.initialize(init)
            typer.echo(f"✓ config created at {controller.store.path}")
            return

        # sound effects need the app even when nothing counts down
        qapp = get_application()
        if complete:
            controller.complete()
            return

        typer.echo("starting new pomo timer")
        engine = controller.start_countdown(minutes)
        if not run_event_loop(qapp, engine):
            raise typer.Exit(code=1)

    except ConfigurationError as error:
        typer.echo(str(error))
        raise typer.Exit(code=1)
    except ValidationError as error:
        typer.echo(str(error), err=True)
        raise typer.Exit(code=2)
    except (StorageError, SignalingError) as error:
        logger.error("%s", error)
        typer.echo(f"❌ {error}", err=True)
        raise typer.Exit(code=1)


def main() -> None:
    app()


if __name__ == "__main__":
    main()
