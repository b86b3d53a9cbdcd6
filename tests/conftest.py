"""Shared test fixtures."""

import tempfile
from pathlib import Path

import pytest

from simple_daemon import DaemonConfig, Process, SimpleDaemon

from helpers import FakeExec, RecordingNotifier


@pytest.fixture
def temp_dir():
    """Create a temporary directory for tests."""
    with tempfile.TemporaryDirectory() as d:
        yield Path(d)


@pytest.fixture
def config():
    """Daemon configuration with short delays and bound."""
    return DaemonConfig(
        shutdown_timeout=0.2,
        reload_delay=0.01,
        restart_delay=0.01,
        shutdown_delay=0.01,
        notify_enabled=False,
        process_title=None,
    )


@pytest.fixture
def fake_exec():
    return FakeExec()


@pytest.fixture
def test_process(fake_exec):
    """Process control that never replaces the test runner."""
    return Process(
        argv=["/usr/bin/python3", "app.py", "--verbose"],
        environ={"_": "/usr/bin/python3", "APP_ENV": "test"},
        execve=fake_exec,
        getcwd=lambda: "/srv/app",
    )


@pytest.fixture
def notifier():
    return RecordingNotifier()


@pytest.fixture
def events():
    """Shared start/stop event log for RecordingComponents."""
    return []


@pytest.fixture
def daemon(config, test_process, notifier):
    return SimpleDaemon(config=config, process=test_process, notifier=notifier)
