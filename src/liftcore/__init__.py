"""liftcore - local persistence core for an exercise catalog.

Stores exercise records in SQLite behind a thread-safe connection pool,
for embedding in a host application.

Example usage:
    from liftcore import Exercise, create_in_memory_repository

    repo = create_in_memory_repository()
    repo.add_exercise(Exercise(name="Squat", muscle_groups=["Quadriceps"], difficulty_level=6))
    repo.list_exercises()
"""

from __future__ import annotations

from pathlib import Path

from liftcore.config.app_config import load_app_config
from liftcore.core.exercise import Exercise
from liftcore.db.database import IN_MEMORY
from liftcore.db.exercise_repository import ExerciseRepository
from liftcore.errors import (
    DatabaseError,
    DuplicateExerciseError,
    ExerciseNotFoundError,
    ExerciseValidationError,
    InvalidInputError,
    PoolError,
    PoolTimeoutError,
    StorageError,
)
from liftcore.logging_setup import configure_logging

__version__ = "0.1.0"


def create_exercise_repository(db_path: str | Path | None = None) -> ExerciseRepository:
    """Open a repository at db_path, or at the configured default path.

    Pool size and timeouts come from the application config.
    """
    storage = load_app_config().storage
    return ExerciseRepository.open(
        db_path if db_path is not None else storage.db_path,
        pool_size=storage.pool_size,
        acquire_timeout=storage.acquire_timeout,
        busy_timeout=storage.busy_timeout,
    )


def create_in_memory_repository() -> ExerciseRepository:
    """Open a private, non-durable in-memory repository."""
    return create_exercise_repository(IN_MEMORY)


__all__ = [
    "__version__",
    "IN_MEMORY",
    "DatabaseError",
    "DuplicateExerciseError",
    "Exercise",
    "ExerciseNotFoundError",
    "ExerciseRepository",
    "ExerciseValidationError",
    "InvalidInputError",
    "PoolError",
    "PoolTimeoutError",
    "StorageError",
    "configure_logging",
    "create_exercise_repository",
    "create_in_memory_repository",
]
