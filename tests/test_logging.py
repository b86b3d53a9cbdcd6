"""Tests for logging setup."""

import json

import pytest
import structlog

from simple_daemon.contracts import LoggerAwareMixin
from simple_daemon.logging import configure_logging, null_logger


@pytest.fixture(autouse=True)
def reset_structlog():
    yield
    structlog.reset_defaults()


class TestConfigureLogging:
    """Test structlog configuration."""

    def test_json_output(self, capsys):
        """JSON format emits one object per line with level and timestamp."""
        configure_logging("INFO", "json")

        structlog.get_logger("test").info("component_started", component="Worker")

        line = capsys.readouterr().err.strip().splitlines()[-1]
        entry = json.loads(line)
        assert entry["event"] == "component_started"
        assert entry["component"] == "Worker"
        assert entry["level"] == "info"
        assert "timestamp" in entry

    def test_level_filtering(self, capsys):
        """Events below the configured level are dropped."""
        configure_logging("WARNING", "json")

        logger = structlog.get_logger("test")
        logger.info("hidden")
        logger.warning("shown")

        err = capsys.readouterr().err
        assert "hidden" not in err
        assert "shown" in err

    def test_unknown_level_defaults_to_info(self, capsys):
        """An unknown level name falls back to INFO."""
        configure_logging("CHATTY", "json")

        logger = structlog.get_logger("test")
        logger.debug("hidden")
        logger.info("shown")

        err = capsys.readouterr().err
        assert "hidden" not in err
        assert "shown" in err


class TestNullLogger:
    """Test the no-op sink."""

    def test_discards_everything(self, capsys):
        """Nothing reaches the output."""
        logger = null_logger()

        logger.info("anything", key="value")
        logger.error("still_nothing")
        logger.critical("even_this")
        logger.bind(component="x").warning("nope")

        captured = capsys.readouterr()
        assert captured.out == ""
        assert captured.err == ""

    def test_mixin_default(self):
        """LoggerAwareMixin starts with a working no-op logger."""

        class Component(LoggerAwareMixin):
            pass

        component = Component()
        component.logger.info("ignored")

        sentinel = object()
        component.set_logger(sentinel)
        assert component.logger is sentinel

    def test_discards_with_logging_configured(self, capsys):
        """Stays silent even when the process logs everything to stderr."""
        configure_logging("DEBUG", "json")
        logger = null_logger()

        logger.debug("quiet")
        logger.critical("still_quiet")

        assert capsys.readouterr().err == ""
