"""CLI commands for the exercise catalog.

Commands:
- add: Create, validate and store an exercise
- show: Print one exercise
- list: Print every exercise sorted by name
- delete: Remove an exercise
"""

import json
from typing import NoReturn, Optional

import typer
from rich.console import Console
from rich.table import Table

from liftcore import create_exercise_repository
from liftcore.config.app_config import load_app_config
from liftcore.core.exercise import Exercise
from liftcore.errors import (
    ExerciseNotFoundError,
    ExerciseValidationError,
    StorageError,
)
from liftcore.logging_setup import configure_logging

app = typer.Typer(
    name="liftcore",
    help="Manage a local exercise catalog.",
    no_args_is_help=True,
)

console = Console()

DB_OPTION_HELP = "Database file (defaults to the configured path)"


@app.callback()
def main() -> None:
    """Manage a local exercise catalog."""
    config = load_app_config()
    configure_logging(level=config.logging.level, json_output=config.logging.json)


def _fail(message: str) -> NoReturn:
    console.print(f"[red]✗ {message}[/red]")
    raise typer.Exit(code=1)


@app.command()
def add(
    name: str = typer.Argument(..., help="Exercise name"),
    muscle: Optional[list[str]] = typer.Option(
        None, "--muscle", "-m", help="Targeted muscle group (repeatable)"
    ),
    difficulty: int = typer.Option(5, "--difficulty", "-d", help="Difficulty 1-10 (clamped)"),
    description: Optional[str] = typer.Option(None, "--description", help="Description"),
    equipment: Optional[str] = typer.Option(None, "--equipment", "-e", help="Equipment needed"),
    exercise_id: Optional[str] = typer.Option(None, "--id", help="Explicit id (UUID if omitted)"),
    db: Optional[str] = typer.Option(None, "--db", help=DB_OPTION_HELP),
    no_validate: bool = typer.Option(False, "--no-validate", help="Store without validating"),
) -> None:
    """Add an exercise to the catalog."""
    exercise = Exercise.create(
        name=name,
        muscle_groups=muscle or [],
        difficulty_level=difficulty,
        description=description,
        equipment_needed=equipment,
        exercise_id=exercise_id,
    )

    if not no_validate:
        try:
            exercise.validate()
        except ExerciseValidationError as e:
            _fail(e.rule)

    try:
        with create_exercise_repository(db) as repo:
            repo.add_exercise(exercise)
    except StorageError as e:
        _fail(str(e))

    console.print(f"[green]✓ Added[/green] {exercise.name} [dim]({exercise.id})[/dim]")


@app.command()
def show(
    exercise_id: str = typer.Argument(..., help="Exercise id"),
    db: Optional[str] = typer.Option(None, "--db", help=DB_OPTION_HELP),
    as_json: bool = typer.Option(False, "--json", help="Print as JSON"),
) -> None:
    """Show one exercise."""
    try:
        with create_exercise_repository(db) as repo:
            exercise = repo.get_exercise(exercise_id)
    except ExerciseNotFoundError:
        _fail(f"Exercise not found: {exercise_id}")
    except StorageError as e:
        _fail(str(e))

    if as_json:
        typer.echo(json.dumps(exercise.to_dict(), ensure_ascii=False))
        return

    console.print(f"\n[bold]{exercise.name}[/bold] [dim]({exercise.id})[/dim]")
    if exercise.description:
        console.print(f"  {exercise.description}")
    console.print(f"  [dim]muscles:[/dim]    {', '.join(exercise.muscle_groups) or '-'}")
    console.print(f"  [dim]equipment:[/dim]  {exercise.equipment_needed or 'bodyweight'}")
    console.print(
        f"  [dim]difficulty:[/dim] {exercise.difficulty_level}/10 "
        f"({exercise.difficulty_description})"
    )


@app.command(name="list")
def list_exercises(
    db: Optional[str] = typer.Option(None, "--db", help=DB_OPTION_HELP),
    as_json: bool = typer.Option(False, "--json", help="Print as JSON"),
) -> None:
    """List all exercises sorted by name."""
    try:
        with create_exercise_repository(db) as repo:
            exercises = repo.list_exercises()
    except StorageError as e:
        _fail(str(e))

    if as_json:
        typer.echo(json.dumps([e.to_dict() for e in exercises], ensure_ascii=False))
        return

    if not exercises:
        console.print("[yellow]No exercises stored[/yellow]")
        console.print("  Use: liftcore add <name> -m <muscle>")
        return

    table = Table(title=f"Exercises ({len(exercises)})")
    table.add_column("ID", style="dim")
    table.add_column("Name", style="bold")
    table.add_column("Muscles")
    table.add_column("Equipment")
    table.add_column("Difficulty", justify="right")

    for exercise in exercises:
        table.add_row(
            exercise.id,
            exercise.name,
            ", ".join(exercise.muscle_groups),
            exercise.equipment_needed or "-",
            f"{exercise.difficulty_level} ({exercise.difficulty_description})",
        )

    console.print(table)


@app.command()
def delete(
    exercise_id: str = typer.Argument(..., help="Exercise id"),
    db: Optional[str] = typer.Option(None, "--db", help=DB_OPTION_HELP),
) -> None:
    """Delete an exercise. Missing ids are reported but not an error."""
    try:
        with create_exercise_repository(db) as repo:
            deleted = repo.delete_exercise(exercise_id)
    except StorageError as e:
        _fail(str(e))

    if deleted:
        console.print(f"[green]✓ Deleted[/green] {exercise_id}")
    else:
        console.print(f"[yellow]No exercise with id {exercise_id}[/yellow]")


if __name__ == "__main__":
    app()
