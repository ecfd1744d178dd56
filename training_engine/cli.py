"""
Command-line interface for the training engine.

Provides commands for:
- Muscle freshness (recovery map)
- Session generation
- Exercise substitution at another location
- Goal projection
- 1RM estimation and plate loading
"""

import json
import logging
from datetime import datetime, timezone
from pathlib import Path
from typing import Any, List, Optional

import typer
from pydantic import TypeAdapter
from rich import box
from rich.console import Console
from rich.logging import RichHandler
from rich.markup import escape
from rich.table import Table

from training_engine.config import DEFAULT_CONFIG, EngineConfig, load_config
from training_engine.fatigue import compute_freshness, recovery_status
from training_engine.generator import SessionGenerator
from training_engine.plates import calculate_plates
from training_engine.projection import compare_to_actual, project_goal
from training_engine.schemas import (
    Athlete,
    ExerciseDefinition,
    GeneratedSession,
    GoalObservation,
    GoalSpec,
    Location,
    LoggedSet,
    MuscleGroup,
    TrainingSession,
    to_utc_naive,
)
from training_engine.strength import estimate_1rm
from training_engine.substitution import adapt_prescription, find_substitute

# Initialize Typer app and Rich console
app = typer.Typer(
    help="Adaptive training load and progression engine - freshness, sessions and goals"
)
console = Console()

DEFAULT_CATALOG = Path("models/exercise_catalog.json")


class _State:
    config: EngineConfig = DEFAULT_CONFIG


state = _State()


# ===== LOADING HELPERS =====


def _read_json(path: Path, what: str) -> Any:
    try:
        with open(path) as f:
            return json.load(f)
    except Exception as e:
        console.print(f"[red]✗ Failed to load {what}: {escape(str(e))}[/red]")
        raise typer.Exit(1)


def _load(path: Path, model: Any, what: str) -> Any:
    """Read a JSON file and validate it against a pydantic type."""
    data = _read_json(path, what)
    try:
        return TypeAdapter(model).validate_python(data)
    except Exception as e:
        console.print(f"[red]✗ Invalid {what}: {escape(str(e))}[/red]")
        raise typer.Exit(1)


def _load_history(path: Optional[Path]) -> List[TrainingSession]:
    if path is None:
        return []
    return _load(path, List[TrainingSession], "history")


def _parse_now(now: Optional[str]) -> datetime:
    """Parse --now (ISO 8601, "Z" or offsets allowed) to naive UTC; default is the current time."""
    if not now:
        return to_utc_naive(datetime.now(timezone.utc))
    try:
        return to_utc_naive(TypeAdapter(datetime).validate_python(now))
    except ValueError:
        console.print(f"[red]✗ Invalid --now timestamp: {now}[/red]")
        raise typer.Exit(1)


# ===== DISPLAY HELPER FUNCTIONS =====


def _freshness_color(score: float) -> str:
    if score >= 80:
        return "green"
    if score >= 65:
        return "yellow"
    if score >= 45:
        return "orange3"
    return "red"


def _display_freshness(freshness: dict, only_fatigued: bool = False):
    """
    Display per-muscle freshness with color-coded recovery bands.

    Args:
        freshness: Mapping of muscle group to freshness score
        only_fatigued: If True, hides fully recovered muscles
    """
    table = Table(title="Muscle Freshness", box=box.ROUNDED)
    table.add_column("Muscle", style="cyan")
    table.add_column("Freshness", justify="right")
    table.add_column("Status")

    for muscle, score in sorted(freshness.items(), key=lambda item: item[1]):
        if only_fatigued and score >= 100:
            continue
        color = _freshness_color(score)
        name = muscle.value.replace("_", " ").title()
        table.add_row(name, f"[{color}]{score:.1f}[/{color}]", recovery_status(score))

    console.print(table)


def _display_session(session: GeneratedSession, show_decisions: bool = False):
    """
    Display a generated session.

    Args:
        session: Generator output
        show_decisions: If True, also prints the decision log
    """
    if not session.exercises:
        console.print("[yellow]No eligible exercises for this location and target.[/yellow]")
        return

    table = Table(title="Generated Session", box=box.ROUNDED)
    table.add_column("#", justify="right")
    table.add_column("Exercise", style="cyan")
    table.add_column("Tier")
    table.add_column("Sets x Reps", justify="center")
    table.add_column("Weight", justify="right", style="yellow")

    for index, exercise in enumerate(session.exercises, start=1):
        weight = f"{exercise.weight:g}" if exercise.weight > 0 else "-"
        table.add_row(
            str(index),
            exercise.exercise_id,
            exercise.tier.value,
            f"{exercise.sets} x {exercise.reps}",
            weight,
        )
    console.print(table)

    if show_decisions:
        console.print("\n[bold]Decisions:[/bold]")
        for decision in session.decisions:
            console.print(f"  • [cyan]{decision.decision_point}[/cyan]: {decision.outcome}")
            console.print(f"    {decision.reasoning}", style="dim")


# ===== CLI COMMANDS =====


@app.callback()
def main(
    verbose: bool = typer.Option(False, "--verbose", "-v", help="Enable debug logging"),
    config: Optional[Path] = typer.Option(
        None, "--config", "-c", help="Path to engine configuration JSON file"
    ),
):
    """
    Configure logging and engine constants for all commands.
    """
    logging.basicConfig(
        level=logging.DEBUG if verbose else logging.INFO,
        format="%(message)s",
        handlers=[RichHandler(console=console, show_path=False)],
        force=True,
    )
    if config is not None:
        try:
            state.config = load_config(config)
        except (FileNotFoundError, ValueError) as e:
            console.print(f"[red]✗ {escape(str(e))}[/red]")
            raise typer.Exit(1)
    else:
        state.config = DEFAULT_CONFIG


@app.command()
def freshness(
    athlete: Path = typer.Option(..., "--athlete", "-a", help="Athlete JSON file", exists=True),
    history: Optional[Path] = typer.Option(
        None, "--history", "-h", help="Training history JSON file", exists=True
    ),
    catalog: Path = typer.Option(DEFAULT_CATALOG, "--catalog", help="Exercise catalog JSON file"),
    now: Optional[str] = typer.Option(None, "--now", help="Evaluation time (ISO 8601)"),
    fatigued_only: bool = typer.Option(False, "--fatigued", help="Only show fatigued muscles"),
):
    """
    Show the recovery state of every muscle group.
    """
    exercises = _load(catalog, List[ExerciseDefinition], "catalog")
    profile = _load(athlete, Athlete, "athlete")
    sessions = _load_history(history)

    result = compute_freshness(sessions, exercises, profile, _parse_now(now), state.config)
    _display_freshness(result, only_fatigued=fatigued_only)


@app.command()
def generate(
    muscles: List[MuscleGroup] = typer.Option(
        ..., "--muscle", "-m", help="Target muscle group (repeatable)"
    ),
    location: Path = typer.Option(..., "--location", "-l", help="Location JSON file", exists=True),
    athlete: Path = typer.Option(..., "--athlete", "-a", help="Athlete JSON file", exists=True),
    history: Optional[Path] = typer.Option(
        None, "--history", "-h", help="Training history JSON file", exists=True
    ),
    catalog: Path = typer.Option(DEFAULT_CATALOG, "--catalog", help="Exercise catalog JSON file"),
    count: int = typer.Option(5, "--count", "-n", min=1, help="Number of exercises"),
    now: Optional[str] = typer.Option(None, "--now", help="Generation time (ISO 8601)"),
    show_decisions: bool = typer.Option(
        False, "--decisions/--no-decisions", help="Print the decision log"
    ),
    output: Optional[Path] = typer.Option(
        None, "--output", "-o", help="Save the generated session to a JSON file"
    ),
):
    """
    Generate a workout for the target muscles at a location.
    """
    exercises = _load(catalog, List[ExerciseDefinition], "catalog")
    profile = _load(athlete, Athlete, "athlete")
    place = _load(location, Location, "location")
    sessions = _load_history(history)

    generator = SessionGenerator(exercises, state.config)
    session = generator.generate(muscles, place, profile, sessions, count, _parse_now(now))
    _display_session(session, show_decisions=show_decisions)

    if output is not None:
        with open(output, "w") as f:
            json.dump(session.model_dump(mode="json"), f, indent=2)
        console.print(f"\n✓ Session saved: [cyan]{output}[/cyan]")


@app.command()
def substitute(
    exercise_id: str = typer.Argument(..., help="Exercise to replace"),
    location: Path = typer.Option(..., "--location", "-l", help="Location JSON file", exists=True),
    catalog: Path = typer.Option(DEFAULT_CATALOG, "--catalog", help="Exercise catalog JSON file"),
    sets: int = typer.Option(3, "--sets", "-s", min=1, help="Prescribed sets"),
    reps: int = typer.Option(10, "--reps", "-r", min=0, help="Prescribed reps"),
    weight: float = typer.Option(0.0, "--weight", "-w", min=0.0, help="Prescribed weight"),
):
    """
    Find a replacement exercise at another location and rescale the prescription.
    """
    exercises = _load(catalog, List[ExerciseDefinition], "catalog")
    place = _load(location, Location, "location")

    current = next((e for e in exercises if e.id == exercise_id), None)
    if current is None:
        console.print(f"[red]✗ Exercise not found in catalog: {exercise_id}[/red]")
        raise typer.Exit(1)

    replacement = find_substitute(current, place, exercises)
    if replacement.id == current.id:
        console.print(f"[yellow]No substitute at {place.name or place.id}; keep {current.id}.[/yellow]")
        return

    adapted = adapt_prescription(
        [LoggedSet(reps=reps, weight=weight) for _ in range(sets)], current, replacement, state.config
    )
    console.print(
        f"\n✓ [cyan]{current.id}[/cyan] → [green]{replacement.id}[/green] "
        f"(difficulty {current.difficulty_multiplier:g} → {replacement.difficulty_multiplier:g})"
    )
    console.print(f"  {sets} x {reps} @ {weight:g}  →  {len(adapted)} x {adapted[0].reps} @ {adapted[0].weight:g}\n")


@app.command()
def project(
    goal: Path = typer.Option(..., "--goal", "-g", help="Goal JSON file", exists=True),
    actual: Optional[float] = typer.Option(None, "--actual", help="Current measured value"),
    observations: Optional[Path] = typer.Option(
        None, "--observations", help="Observations JSON file (deadline-less goals)", exists=True
    ),
    now: Optional[str] = typer.Option(None, "--now", help="Evaluation time (ISO 8601)"),
):
    """
    Project where a goal should be today and compare with the current value.
    """
    spec = _load(goal, GoalSpec, "goal")
    points = _load(observations, List[GoalObservation], "observations") if observations else []

    projection = project_goal(spec, _parse_now(now), points, state.config)

    if projection.expected_value is None:
        if projection.forecast_value is not None:
            console.print(
                f"\nTrend: {projection.trend_per_day:+.3f} {projection.unit}/day → "
                f"[bold]{projection.forecast_value:g} {projection.unit}[/bold] "
                f"by {projection.forecast_at:%Y-%m-%d}\n"
            )
        else:
            console.print("[yellow]Not enough observations to estimate a trend.[/yellow]")
        return

    console.print(
        f"\nExpected today: [bold]{projection.expected_value:g} {projection.unit}[/bold] "
        f"({projection.progress_ratio:.0%} of the way)"
    )
    if projection.expected_reps is not None:
        console.print(f"Expected reps: {projection.expected_reps:g}")

    if actual is not None:
        status = compare_to_actual(projection, actual)
        color = "red" if status.behind_schedule else "green"
        verdict = "behind schedule" if status.behind_schedule else "on or ahead of schedule"
        console.print(f"Difference: [{color}]{status.status_diff:+g} ({verdict})[/{color}]")
    console.print()


@app.command()
def one_rep_max(
    weight: float = typer.Argument(..., min=0.0, help="Weight lifted"),
    reps: int = typer.Argument(..., min=0, help="Reps completed"),
):
    """
    Estimate a one-rep max (Epley).
    """
    console.print(f"Estimated 1RM: [bold green]{estimate_1rm(weight, reps):g}[/bold green]")


@app.command()
def plates(
    total: float = typer.Argument(..., min=0.0, help="Total barbell weight"),
    bar: float = typer.Option(20.0, "--bar", "-b", min=0.0, help="Bar weight"),
):
    """
    Show the plates to load on each side of the bar.
    """
    loading = calculate_plates(total, bar)
    if not loading:
        console.print("[yellow]Empty bar.[/yellow]")
        return
    per_side = ", ".join(f"{p.count} x {p.weight:g}" for p in loading)
    console.print(f"Per side: [bold]{per_side}[/bold]")


if __name__ == "__main__":
    app()
