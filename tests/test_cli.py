"""Tests for the liftcore command-line interface."""

import json

import pytest
from typer.testing import CliRunner

from liftcore.cli.commands import app
from liftcore.db.exercise_repository import ExerciseRepository
from liftcore.logging_setup import reset_logging


runner = CliRunner()


@pytest.fixture(autouse=True)
def clean_logging():
    yield
    reset_logging()


@pytest.fixture
def db(db_path) -> str:
    return str(db_path)


def _add(db: str, *args: str):
    return runner.invoke(app, ["add", *args, "--db", db])


class TestAdd:
    def test_add_stores_exercise(self, db):
        result = _add(
            db,
            "Bench Press",
            "-m", "Chest",
            "-m", "Triceps",
            "-d", "6",
            "--equipment", "Barbell",
            "--id", "ex1",
        )

        assert result.exit_code == 0, result.output
        assert "Added" in result.stdout

        with ExerciseRepository.open(db) as repo:
            exercise = repo.get_exercise("ex1")
        assert exercise.muscle_groups == ["Chest", "Triceps"]
        assert exercise.equipment_needed == "Barbell"
        assert exercise.difficulty_level == 6

    def test_add_clamps_difficulty(self, db):
        result = _add(db, "Snatch", "-m", "Full Body", "-d", "15", "--id", "s1")
        assert result.exit_code == 0, result.output

        with ExerciseRepository.open(db) as repo:
            assert repo.get_exercise("s1").difficulty_level == 10

    def test_add_rejects_invalid_exercise(self, db):
        """Missing muscle groups fail validation."""
        result = _add(db, "Plank", "--id", "p1")

        assert result.exit_code == 1
        assert "at least one muscle group" in result.stdout

        with ExerciseRepository.open(db) as repo:
            assert repo.list_exercises() == []

    def test_add_no_validate_stores_anyway(self, db):
        result = _add(db, "Plank", "--id", "p1", "--no-validate")

        assert result.exit_code == 0, result.output
        with ExerciseRepository.open(db) as repo:
            assert repo.get_exercise("p1").muscle_groups == []

    def test_add_duplicate_fails(self, db):
        assert _add(db, "Squat", "-m", "Glutes", "--id", "dup").exit_code == 0

        result = _add(db, "Squat again", "-m", "Glutes", "--id", "dup")
        assert result.exit_code == 1
        assert "already exists" in result.stdout


class TestShow:
    def test_show_json(self, db):
        _add(db, "Squat", "-m", "Quadriceps", "-m", "Glutes", "-d", "6", "--id", "t1")

        result = runner.invoke(app, ["show", "t1", "--db", db, "--json"])

        assert result.exit_code == 0, result.output
        data = json.loads(result.stdout.strip().splitlines()[-1])
        assert data == {
            "id": "t1",
            "name": "Squat",
            "description": None,
            "muscle_groups": ["Quadriceps", "Glutes"],
            "equipment_needed": None,
            "difficulty_level": 6,
        }

    def test_show_text(self, db):
        _add(db, "Squat", "-m", "Glutes", "-d", "6", "--id", "t1")

        result = runner.invoke(app, ["show", "t1", "--db", db])

        assert result.exit_code == 0, result.output
        assert "Squat" in result.stdout
        assert "Moderate" in result.stdout
        assert "bodyweight" in result.stdout

    def test_show_missing_exits_1(self, db):
        result = runner.invoke(app, ["show", "ghost", "--db", db])

        assert result.exit_code == 1
        assert "not found" in result.stdout


class TestList:
    def test_list_empty(self, db):
        result = runner.invoke(app, ["list", "--db", db])

        assert result.exit_code == 0, result.output
        assert "No exercises stored" in result.stdout

    def test_list_json_sorted_by_name(self, db):
        for name in ("Squat", "Push-up", "Deadlift"):
            _add(db, name, "-m", "Full Body")

        result = runner.invoke(app, ["list", "--db", db, "--json"])

        assert result.exit_code == 0, result.output
        data = json.loads(result.stdout.strip().splitlines()[-1])
        assert [e["name"] for e in data] == ["Deadlift", "Push-up", "Squat"]

    def test_list_table(self, db):
        _add(db, "Deadlift", "-m", "Back", "-d", "9", "--id", "d1")

        result = runner.invoke(app, ["list", "--db", db])

        assert result.exit_code == 0, result.output
        assert "Deadlift" in result.stdout
        assert "Very Hard" in result.stdout


class TestDelete:
    def test_delete_existing(self, db):
        _add(db, "Squat", "-m", "Glutes", "--id", "t1")

        result = runner.invoke(app, ["delete", "t1", "--db", db])

        assert result.exit_code == 0, result.output
        assert "Deleted" in result.stdout

    def test_delete_missing_is_not_an_error(self, db):
        result = runner.invoke(app, ["delete", "ghost", "--db", db])

        assert result.exit_code == 0, result.output
        assert "No exercise with id ghost" in result.stdout
