"""Error taxonomy for the exercise catalog.

Every failure raised by the repository derives from StorageError, so
callers can catch the whole family with one clause and branch on the
concrete kind:

- DatabaseError: SQLite failures and muscle_groups (de)serialization
- ExerciseNotFoundError: point lookup found no row
- InvalidInputError: a record failed a pre-storage validation rule
- PoolError: a connection could not be acquired
"""

from __future__ import annotations


class StorageError(Exception):
    """Base exception for exercise storage errors."""

    def __init__(self, message: str):
        self.message = message
        super().__init__(message)


class DatabaseError(StorageError):
    """Raised when the storage engine or the field encoding fails."""

    def __init__(self, message: str):
        super().__init__(f"Database error: {message}")


class DuplicateExerciseError(DatabaseError):
    """Raised when an exercise id already exists in the table."""

    def __init__(self, exercise_id: str):
        self.exercise_id = exercise_id
        super().__init__(f"exercise with id '{exercise_id}' already exists")


class ExerciseNotFoundError(StorageError):
    """Raised when no exercise matches the requested id."""

    def __init__(self, exercise_id: str):
        self.exercise_id = exercise_id
        super().__init__(f"Exercise not found with id: {exercise_id}")


class InvalidInputError(StorageError):
    """Raised when input fails a validation rule."""

    def __init__(self, message: str):
        super().__init__(f"Invalid input: {message}")


class ExerciseValidationError(InvalidInputError):
    """Raised by Exercise.validate() with the rule that failed."""

    def __init__(self, rule: str):
        self.rule = rule
        super().__init__(rule)


class PoolError(StorageError):
    """Raised when a pooled connection cannot be acquired."""

    def __init__(self, message: str):
        super().__init__(f"Connection pool error: {message}")


class PoolTimeoutError(PoolError):
    """Raised when every connection stayed busy for the whole timeout."""

    def __init__(self, timeout: float):
        self.timeout = timeout
        super().__init__(f"no connection available after {timeout:g}s")
