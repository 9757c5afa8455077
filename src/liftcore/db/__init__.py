"""Database module for SQLite persistence.

Provides:
- Bounded, thread-safe connection pool and schema initialization
- ExerciseRepository with CRUD operations for the exercises table
"""

from liftcore.db.database import IN_MEMORY, ConnectionPool, init_schema
from liftcore.db.exercise_repository import ExerciseRepository

__all__ = ["IN_MEMORY", "ConnectionPool", "ExerciseRepository", "init_schema"]
