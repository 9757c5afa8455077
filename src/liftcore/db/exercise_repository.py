"""Repository for the exercises table.

Provides CRUD operations over a pooled SQLite store. Every operation
borrows one connection for a single implicit transaction and hands it
back before returning, so one repository can be shared by any number of
threads.

muscle_groups is stored as a JSON array string and decoded on read.
"""

from __future__ import annotations

import json
import sqlite3
from contextlib import AbstractContextManager
from pathlib import Path
from typing import Any

import structlog

from liftcore.core.exercise import Exercise
from liftcore.db.database import (
    DEFAULT_ACQUIRE_TIMEOUT,
    DEFAULT_BUSY_TIMEOUT,
    DEFAULT_POOL_SIZE,
    IN_MEMORY,
    ConnectionPool,
    init_schema,
)
from liftcore.errors import (
    DatabaseError,
    DuplicateExerciseError,
    ExerciseNotFoundError,
    PoolError,
)

logger = structlog.get_logger(__name__)

_COLUMNS = "id, name, description, muscle_groups, equipment_needed, difficulty_level"


class ExerciseRepository:
    """Shared handle over a pool of connections to one exercise store.

    Handles are cheap to clone: clone() returns a new handle on the same
    pool without opening connections. Each handle must be closed once
    (directly or through ``with``); the pool shuts down when the last
    handle sharing it is closed.

    Usage:
        repo = ExerciseRepository.open("exercises.db")
        repo.add_exercise(Exercise(name="Squat", muscle_groups=["Glutes"], difficulty_level=6))
        for exercise in repo.list_exercises():
            ...
        repo.close()
    """

    def __init__(self, pool: ConnectionPool) -> None:
        self._pool = pool
        self._closed = False

    @classmethod
    def open(
        cls,
        location: str | Path = IN_MEMORY,
        *,
        pool_size: int = DEFAULT_POOL_SIZE,
        acquire_timeout: float = DEFAULT_ACQUIRE_TIMEOUT,
        busy_timeout: float = DEFAULT_BUSY_TIMEOUT,
    ) -> ExerciseRepository:
        """Open a repository, creating the exercises table if absent.

        Args:
            location: Database file path, or IN_MEMORY for a private
                ephemeral store
            pool_size: Maximum number of pooled connections
            acquire_timeout: Seconds to wait for a free connection
            busy_timeout: Seconds SQLite waits on a locked database file

        Raises:
            PoolError: If the store can't be opened
            DatabaseError: If the schema can't be created
        """
        try:
            pool = ConnectionPool(
                location,
                max_size=pool_size,
                acquire_timeout=acquire_timeout,
                busy_timeout=busy_timeout,
            )
        except OSError as e:
            raise PoolError(f"failed to prepare '{location}': {e}") from e

        try:
            init_schema(pool)
        except Exception:
            pool.close()
            raise

        logger.info(
            "exercise_repository.opened",
            location=pool.location,
            pool_size=pool.max_size,
        )
        return cls(pool)

    @property
    def location(self) -> str:
        return self._pool.location

    @property
    def closed(self) -> bool:
        return self._closed

    def clone(self) -> ExerciseRepository:
        """Return another handle sharing this repository's pool."""
        if self._closed:
            raise PoolError("repository handle is closed")
        self._pool.retain()
        return ExerciseRepository(self._pool)

    def close(self) -> None:
        """Release this handle. Closing twice is a no-op."""
        if self._closed:
            return
        self._closed = True
        self._pool.release()

    def __enter__(self) -> ExerciseRepository:
        return self

    def __exit__(self, *args: Any) -> None:
        self.close()

    def _connection(self) -> AbstractContextManager[sqlite3.Connection]:
        if self._closed:
            raise PoolError("repository handle is closed")
        return self._pool.connection()

    # =========================================================================
    # CRUD
    # =========================================================================

    def add_exercise(self, exercise: Exercise) -> None:
        """Insert a new exercise.

        The record is stored as given; call exercise.validate() first to
        enforce the catalog rules.

        Raises:
            DuplicateExerciseError: If the id already exists
            DatabaseError: If encoding or the insert fails
            PoolError: If no connection can be acquired
        """
        logger.debug("exercises.adding", exercise_id=exercise.id, name=exercise.name)

        try:
            muscle_groups_json = json.dumps(
                list(exercise.muscle_groups), ensure_ascii=False, separators=(",", ":")
            )
        except (TypeError, ValueError) as e:
            logger.error("exercises.encode_failed", exercise_id=exercise.id, error=str(e))
            raise DatabaseError(f"failed to serialize muscle groups: {e}") from e

        try:
            with self._connection() as conn:
                conn.execute(
                    f"INSERT INTO exercises ({_COLUMNS}) VALUES (?, ?, ?, ?, ?, ?)",
                    (
                        exercise.id,
                        exercise.name,
                        exercise.description,
                        muscle_groups_json,
                        exercise.equipment_needed,
                        exercise.difficulty_level,
                    ),
                )
        except sqlite3.IntegrityError as e:
            if _is_primary_key_violation(e):
                logger.warning("exercises.duplicate_id", exercise_id=exercise.id)
                raise DuplicateExerciseError(exercise.id) from e
            logger.error("exercises.insert_failed", exercise_id=exercise.id, error=str(e))
            raise DatabaseError(f"failed to insert exercise: {e}") from e
        except (sqlite3.Error, UnicodeEncodeError) as e:
            logger.error("exercises.insert_failed", exercise_id=exercise.id, error=str(e))
            raise DatabaseError(f"failed to insert exercise: {e}") from e

        logger.info("exercises.added", exercise_id=exercise.id, name=exercise.name)

    def get_exercise(self, exercise_id: str) -> Exercise:
        """Get an exercise by id.

        Raises:
            ExerciseNotFoundError: If no exercise has this id
            DatabaseError: If the query fails or the row is corrupt
            PoolError: If no connection can be acquired
        """
        try:
            with self._connection() as conn:
                row = conn.execute(
                    f"SELECT {_COLUMNS} FROM exercises WHERE id = ?",
                    (exercise_id,),
                ).fetchone()
        except (sqlite3.Error, UnicodeEncodeError) as e:
            logger.error("exercises.query_failed", exercise_id=exercise_id, error=str(e))
            raise DatabaseError(f"failed to query exercise: {e}") from e

        if row is None:
            logger.info("exercises.not_found", exercise_id=exercise_id)
            raise ExerciseNotFoundError(exercise_id)

        exercise = _row_to_exercise(row)
        logger.debug("exercises.retrieved", exercise_id=exercise_id, name=exercise.name)
        return exercise

    def list_exercises(self) -> list[Exercise]:
        """Get all exercises sorted by name.

        Returns:
            Every stored exercise, empty list for an empty store

        Raises:
            DatabaseError: If the query fails or a row is corrupt
            PoolError: If no connection can be acquired
        """
        try:
            with self._connection() as conn:
                rows = conn.execute(
                    f"SELECT {_COLUMNS} FROM exercises ORDER BY name"
                ).fetchall()
        except (sqlite3.Error, UnicodeEncodeError) as e:
            logger.error("exercises.list_failed", error=str(e))
            raise DatabaseError(f"failed to query exercises: {e}") from e

        exercises = [_row_to_exercise(row) for row in rows]
        logger.debug("exercises.listed", count=len(exercises))
        return exercises

    def delete_exercise(self, exercise_id: str) -> bool:
        """Delete an exercise by id.

        Returns:
            True if deleted, False if not found

        Raises:
            DatabaseError: If the delete fails
            PoolError: If no connection can be acquired
        """
        try:
            with self._connection() as conn:
                cursor = conn.execute(
                    "DELETE FROM exercises WHERE id = ?", (exercise_id,)
                )
        except (sqlite3.Error, UnicodeEncodeError) as e:
            logger.error("exercises.delete_failed", exercise_id=exercise_id, error=str(e))
            raise DatabaseError(f"failed to delete exercise: {e}") from e

        deleted = cursor.rowcount > 0
        if deleted:
            logger.info("exercises.deleted", exercise_id=exercise_id)
        else:
            logger.warning("exercises.delete_missing", exercise_id=exercise_id)

        return deleted


def _is_primary_key_violation(error: sqlite3.IntegrityError) -> bool:
    """Tell a duplicate id apart from other constraint failures."""
    return "UNIQUE constraint failed: exercises.id" in str(error)


def _row_to_exercise(row: sqlite3.Row) -> Exercise:
    """Convert database row to Exercise.

    Raises:
        DatabaseError: If muscle_groups isn't a JSON array of strings or
            difficulty_level isn't an integer
    """
    try:
        muscle_groups = json.loads(row["muscle_groups"])
    except (TypeError, ValueError) as e:
        logger.error("exercises.decode_failed", exercise_id=row["id"], error=str(e))
        raise DatabaseError(
            f"invalid muscle_groups for exercise '{row['id']}': {e}"
        ) from e

    if not isinstance(muscle_groups, list) or not all(
        isinstance(group, str) for group in muscle_groups
    ):
        logger.error("exercises.decode_failed", exercise_id=row["id"], error="not a string array")
        raise DatabaseError(
            f"invalid muscle_groups for exercise '{row['id']}': expected a JSON array of strings"
        )

    # INTEGER affinity keeps non-numeric text as text
    difficulty_level = row["difficulty_level"]
    if not isinstance(difficulty_level, int):
        logger.error(
            "exercises.decode_failed",
            exercise_id=row["id"],
            error=f"difficulty_level is {type(difficulty_level).__name__}",
        )
        raise DatabaseError(
            f"invalid difficulty_level for exercise '{row['id']}': {difficulty_level!r}"
        )

    return Exercise(
        id=row["id"],
        name=row["name"],
        description=row["description"],
        muscle_groups=muscle_groups,
        equipment_needed=row["equipment_needed"],
        difficulty_level=difficulty_level,
    )
