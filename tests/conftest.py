"""Shared fixtures for liftcore tests."""

from pathlib import Path
from typing import Generator

import pytest

from liftcore.config.app_config import CONFIG_ENV, DB_PATH_ENV, clear_config_cache
from liftcore.core.exercise import Exercise
from liftcore.db.exercise_repository import ExerciseRepository


@pytest.fixture(autouse=True)
def isolated_config(monkeypatch, tmp_path) -> Generator[None, None, None]:
    """Keep tests away from any real config file or env overrides."""
    monkeypatch.setenv(CONFIG_ENV, str(tmp_path / "missing-config.yaml"))
    monkeypatch.delenv(DB_PATH_ENV, raising=False)
    clear_config_cache()
    yield
    clear_config_cache()


@pytest.fixture
def db_path(tmp_path) -> Path:
    """Path to a not-yet-created database file."""
    return tmp_path / "data" / "exercises.db"


@pytest.fixture
def repo() -> Generator[ExerciseRepository, None, None]:
    """In-memory repository, closed after the test."""
    repository = ExerciseRepository.open(":memory:")
    yield repository
    repository.close()


@pytest.fixture
def file_repo(db_path) -> Generator[ExerciseRepository, None, None]:
    """File-backed repository, closed after the test."""
    repository = ExerciseRepository.open(db_path, pool_size=4, acquire_timeout=5.0)
    yield repository
    repository.close()


@pytest.fixture
def squat() -> Exercise:
    return Exercise(
        id="t1",
        name="Squat",
        description="Compound leg exercise",
        muscle_groups=["Quadriceps", "Glutes"],
        equipment_needed="Barbell",
        difficulty_level=6,
    )


@pytest.fixture
def push_up() -> Exercise:
    return Exercise(
        id="t2",
        name="Push-up",
        description="Basic bodyweight exercise",
        muscle_groups=["Chest", "Triceps"],
        difficulty_level=3,
    )
