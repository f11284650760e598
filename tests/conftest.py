"""Shared pytest fixtures for pomotimer tests."""

import sys
import pytest

from PyQt6.QtCore import QCoreApplication

from pomotimer.controller import SessionController
from pomotimer.settings import CONFIG_ENV_VAR, SessionStore
from pomotimer.timer.engine import TimerEngine

from helpers import RecordingAlert, RecordingSignaler


@pytest.fixture(scope="session")
def qapp():
    """A single QCoreApplication shared across the entire test run."""
    app = QCoreApplication.instance() or QCoreApplication(sys.argv[:1])
    yield app


@pytest.fixture(autouse=True)
def isolated_config(tmp_path, monkeypatch):
    """Point the default config location at a throwaway file."""
    path = tmp_path / "pomo-timer.json"
    monkeypatch.setenv(CONFIG_ENV_VAR, str(path))
    yield path


@pytest.fixture
def store(isolated_config):
    return SessionStore(isolated_config)


@pytest.fixture
def configured_store(store):
    """Store with a token already set up."""
    store.merge(credential_token="xoxp-test")
    return store


@pytest.fixture
def signaler():
    return RecordingSignaler()


@pytest.fixture
def alert():
    return RecordingAlert()


@pytest.fixture
def engine(qapp, configured_store, signaler, alert):
    """Fresh TimerEngine on recording fakes."""
    return TimerEngine(configured_store, signaler, alert)


@pytest.fixture
def controller(qapp, store, signaler, alert):
    """Controller whose signaler factory records the token it was given."""
    def factory(token):
        signaler.token = token
        return signaler

    return SessionController(store, signaler_factory=factory, alert=alert)
