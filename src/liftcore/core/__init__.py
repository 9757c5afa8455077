"""Core domain model for the exercise catalog."""

from liftcore.core.exercise import (
    MAX_DIFFICULTY,
    MIN_DIFFICULTY,
    Exercise,
    clamp_difficulty,
    generate_exercise_id,
)

__all__ = [
    "MAX_DIFFICULTY",
    "MIN_DIFFICULTY",
    "Exercise",
    "clamp_difficulty",
    "generate_exercise_id",
]
