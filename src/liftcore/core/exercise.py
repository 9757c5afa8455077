"""Exercise record model.

Responsibilities:
- Construct exercise records (id generation, difficulty clamping)
- Validate records on demand (name, muscle groups, difficulty range)
- Derived read-only queries used by hosts (difficulty tier, equipment)

Construction never rejects input: out-of-range difficulty is clamped and
an empty muscle group list only logs a warning. validate() is the strict
check and is left to the caller.
"""

from __future__ import annotations

import uuid
from dataclasses import dataclass
from typing import Any

import structlog

from liftcore.errors import ExerciseValidationError

logger = structlog.get_logger(__name__)

MIN_DIFFICULTY = 1
MAX_DIFFICULTY = 10

# Two levels per band over the 1-10 scale
DIFFICULTY_BANDS = (
    (2, "Very Easy"),
    (4, "Easy"),
    (6, "Moderate"),
    (8, "Hard"),
    (10, "Very Hard"),
)


def generate_exercise_id() -> str:
    """Generate a UUID v4 in its 36-character canonical form."""
    return str(uuid.uuid4())


def clamp_difficulty(level: int) -> int:
    """Clamp a difficulty level into [MIN_DIFFICULTY, MAX_DIFFICULTY]."""
    return max(MIN_DIFFICULTY, min(MAX_DIFFICULTY, int(level)))


@dataclass
class Exercise:
    """An exercise in the catalog.

    Attributes:
        name: Human-readable name (must be non-blank to validate)
        muscle_groups: Targeted muscle groups, order preserved in storage
        difficulty_level: 1-10, clamped on construction
        description: Optional free text
        equipment_needed: Optional equipment; None means bodyweight
        id: Unique identifier, generated when omitted
    """

    name: str
    muscle_groups: list[str]
    difficulty_level: int
    description: str | None = None
    equipment_needed: str | None = None
    id: str | None = None

    def __post_init__(self) -> None:
        if self.id is None:
            self.id = generate_exercise_id()
            logger.debug("exercise.id_generated", name=self.name, exercise_id=self.id)

        # Own copy so callers can't mutate the record through their list
        self.muscle_groups = list(self.muscle_groups)

        clamped = clamp_difficulty(self.difficulty_level)
        if clamped != self.difficulty_level:
            logger.warning(
                "exercise.difficulty_clamped",
                name=self.name,
                requested=self.difficulty_level,
                clamped=clamped,
            )
        self.difficulty_level = clamped

        if not self.muscle_groups:
            logger.warning("exercise.no_muscle_groups", name=self.name)

        logger.debug(
            "exercise.created",
            exercise_id=self.id,
            name=self.name,
            difficulty=self.difficulty_level,
            bodyweight=not self.requires_equipment,
        )

    @classmethod
    def create(
        cls,
        name: str,
        muscle_groups: list[str],
        difficulty_level: int,
        description: str | None = None,
        equipment_needed: str | None = None,
        exercise_id: str | None = None,
    ) -> Exercise:
        """Create an exercise, generating a UUID when no id is given."""
        return cls(
            name=name,
            muscle_groups=muscle_groups,
            difficulty_level=difficulty_level,
            description=description,
            equipment_needed=equipment_needed,
            id=exercise_id,
        )

    def validate(self) -> None:
        """Check the record against the catalog rules.

        Rules are checked in order and the first failure is reported.

        Raises:
            ExerciseValidationError: If the name is blank, no muscle group
                is targeted, or the difficulty is outside 1-10
        """
        error: str | None = None
        if not self.name.strip():
            error = "Exercise name cannot be empty"
        elif not self.muscle_groups:
            error = "Exercise must target at least one muscle group"
        elif not MIN_DIFFICULTY <= self.difficulty_level <= MAX_DIFFICULTY:
            error = (
                f"Difficulty level must be between {MIN_DIFFICULTY} and "
                f"{MAX_DIFFICULTY}, got {self.difficulty_level}"
            )

        if error is not None:
            logger.warning("exercise.validation_failed", exercise_id=self.id, error=error)
            raise ExerciseValidationError(error)

    @property
    def is_valid(self) -> bool:
        """True if validate() would pass."""
        try:
            self.validate()
        except ExerciseValidationError:
            return False
        return True

    @property
    def difficulty_description(self) -> str:
        """Human-readable difficulty tier."""
        if self.difficulty_level >= MIN_DIFFICULTY:
            for upper, label in DIFFICULTY_BANDS:
                if self.difficulty_level <= upper:
                    return label
        return "Unknown"

    @property
    def requires_equipment(self) -> bool:
        """Whether the exercise needs equipment."""
        return self.equipment_needed is not None

    @property
    def muscle_group_count(self) -> int:
        """Number of muscle groups targeted."""
        return len(self.muscle_groups)

    def to_dict(self) -> dict[str, Any]:
        """Convert to dictionary for JSON serialization."""
        return {
            "id": self.id,
            "name": self.name,
            "description": self.description,
            "muscle_groups": list(self.muscle_groups),
            "equipment_needed": self.equipment_needed,
            "difficulty_level": self.difficulty_level,
        }

    @classmethod
    def from_dict(cls, data: dict[str, Any]) -> Exercise:
        """Build an exercise from its dictionary form."""
        return cls(
            name=data["name"],
            muscle_groups=data.get("muscle_groups", []),
            difficulty_level=data["difficulty_level"],
            description=data.get("description"),
            equipment_needed=data.get("equipment_needed"),
            id=data.get("id"),
        )
