"""Tests for process-wide logging setup."""

import json

import pytest
import structlog

from liftcore.db.exercise_repository import ExerciseRepository
from liftcore.logging_setup import configure_logging, is_configured, reset_logging


@pytest.fixture(autouse=True)
def clean_logging():
    reset_logging()
    yield
    reset_logging()


class TestConfigureLogging:
    def test_configures_once(self):
        assert configure_logging() is True
        assert configure_logging() is False
        assert is_configured()

    def test_force_reconfigures(self):
        configure_logging()
        assert configure_logging(level="DEBUG", force=True) is True

    def test_unknown_level_rejected(self):
        with pytest.raises(ValueError):
            configure_logging(level="LOUD")

    def test_json_output(self, capsys):
        configure_logging(level="INFO", json_output=True)

        structlog.get_logger("liftcore.test").info("exercises.added", exercise_id="t1")

        line = capsys.readouterr().err.strip().splitlines()[-1]
        event = json.loads(line)
        assert event["event"] == "exercises.added"
        assert event["exercise_id"] == "t1"
        assert event["level"] == "info"
        assert "timestamp" in event

    def test_level_filters_lower_events(self, capsys):
        configure_logging(level="WARNING", json_output=True)

        structlog.get_logger("liftcore.test").info("ignored")
        structlog.get_logger("liftcore.test").warning("kept")

        err = capsys.readouterr().err
        assert "ignored" not in err
        assert "kept" in err

    def test_opening_repository_does_not_configure(self):
        ExerciseRepository.open(":memory:").close()
        assert not is_configured()
