"""
CLI view formatters using Rich for pretty console output.

Handles table formatting and display of plans, live sessions and history.
"""

from rich.console import Console
from rich.table import Table

from ..core.ascii_plot import create_series_plot
from ..core.models import (
    ActiveSession,
    ExerciseKind,
    HistoryEntry,
    Plan,
    RestTimerState,
    SeriesPoint,
    SessionSummary,
    SetValue,
)
from ..io.images import blob_size_bytes

console = Console()

_KIND_LABELS = {
    ExerciseKind.CALISTHENICS: "[blue]Calisthenics[/blue]",
    ExerciseKind.WEIGHT: "[green]Weight[/green]",
}


def format_time(seconds: int) -> str:
    """Format seconds as m:ss (minutes are not wrapped into hours)."""
    minutes, secs = divmod(max(0, int(seconds)), 60)
    return f"{minutes}:{secs:02d}"


def _fmt_value(value: SetValue) -> str:
    if isinstance(value, float):
        return f"{value:g}"
    return str(value) if value != "" else "-"


def format_plans_table(plans: list[Plan]) -> Table:
    """
    Create a Rich table listing plans.

    Args:
        plans: Plans in stored order

    Returns:
        Rich Table object
    """
    table = Table(title="Workout Plans")

    table.add_column("#", justify="right", style="dim", width=3)
    table.add_column("Name", style="bold cyan")
    table.add_column("Exercises", justify="right")
    table.add_column("Calisthenics", justify="right", style="blue")
    table.add_column("Weight", justify="right", style="green")
    table.add_column("ID", style="dim")

    for i, plan in enumerate(plans, 1):
        table.add_row(
            str(i),
            plan.name,
            str(len(plan.exercises)),
            str(plan.calisthenics_count),
            str(plan.weight_count),
            plan.id[:8],
        )

    return table


def print_plans(plans: list[Plan]) -> None:
    if not plans:
        console.print("[yellow]No plans yet. Create one with 'plan-create'.[/yellow]")
        return
    console.print(format_plans_table(plans))


def print_plan(plan: Plan) -> None:
    """Print one plan with its exercises."""
    if not plan.exercises:
        console.print(f"[bold]{plan.name}[/bold]: [yellow]no exercises yet.[/yellow]")
        return

    table = Table(title=plan.name)

    table.add_column("#", justify="right", style="dim", width=3)
    table.add_column("Exercise", style="bold")
    table.add_column("Type")
    table.add_column("Sets", justify="right")
    table.add_column("Reps", justify="right")
    table.add_column("Weight (kg)", justify="right")

    for i, ex in enumerate(plan.exercises, 1):
        table.add_row(
            str(i),
            ex.name,
            _KIND_LABELS[ex.kind],
            str(ex.target_sets),
            str(ex.target_reps),
            _fmt_value(ex.target_weight) if ex.target_weight else "-",
        )

    console.print(table)


def print_session(
    session: ActiveSession,
    elapsed_seconds: int,
    rest: RestTimerState | None = None,
) -> None:
    """
    Print the live session: one table per exercise, sets addressed as E.S.

    Args:
        session: Live session
        elapsed_seconds: Time since start
        rest: Rest timer state, shown when a countdown is running
    """
    header = f"[bold cyan]{session.plan_name}[/bold cyan]  ⏱ {format_time(elapsed_seconds)}"
    if rest is not None and rest.active:
        header += f"  [magenta]rest {format_time(rest.time_left)}[/magenta]"
    console.print()
    console.print(header)

    for e_idx, ex in enumerate(session.exercises, 1):
        done = sum(1 for s in ex.sets_data if s.completed)
        table = Table(title=f"{e_idx}. {ex.name} ({done}/{len(ex.sets_data)})", title_justify="left")
        table.add_column("Set", justify="right", style="dim")
        table.add_column("kg", justify="right")
        table.add_column("Reps", justify="right")
        table.add_column("Done", justify="center")

        for s in ex.sets_data:
            table.add_row(
                f"{e_idx}.{s.set_number}",
                _fmt_value(s.weight),
                _fmt_value(s.reps),
                "[green]✔[/green]" if s.completed else "[dim]○[/dim]",
                style="dim" if s.completed else None,
            )
        console.print(table)


def print_summary(summary: SessionSummary, elapsed_seconds: int) -> None:
    """Print the end-of-workout summary."""
    console.print()
    console.print("[bold green]Workout complete![/bold green]")
    console.print(f"  Duration: [bold]{format_time(elapsed_seconds)}[/bold]")
    console.print(f"  Sets:     [bold]{summary}[/bold]")


def format_history_table(entries: list[HistoryEntry]) -> Table:
    """
    Create a Rich table displaying the history log.

    Args:
        entries: Entries, newest first

    Returns:
        Rich Table object
    """
    table = Table(title="Workout History")

    table.add_column("#", justify="right", style="dim", width=3)
    table.add_column("Date", style="cyan")
    table.add_column("Plan", style="bold")
    table.add_column("Duration", justify="right")
    table.add_column("Sets", justify="right")
    table.add_column("BW(kg)", justify="right")
    table.add_column("Photo", justify="right")

    for i, entry in enumerate(entries, 1):
        table.add_row(
            str(i),
            entry.date.astimezone().strftime("%Y-%m-%d %H:%M"),
            entry.plan_name,
            format_time(entry.duration_seconds),
            str(entry.summary),
            f"{entry.body_weight:.1f}" if entry.body_weight is not None else "-",
            f"{blob_size_bytes(entry.image) // 1024} KB" if entry.image else "-",
        )

    return table


def print_history(entries: list[HistoryEntry]) -> None:
    if not entries:
        console.print("[yellow]No workouts logged yet.[/yellow]")
        return
    console.print(format_history_table(entries))


def print_series_plot(points: list[SeriesPoint], title: str, unit: str = "kg") -> None:
    """Print an ASCII progress chart, or a hint when there is too little data."""
    if len(points) < 2:
        console.print(f"[yellow]{title}: not enough data yet (need at least 2 sessions).[/yellow]")
        return
    console.print(create_series_plot(points, title=title, unit=unit), markup=False, highlight=False)


def print_success(message: str) -> None:
    """Print a success message."""
    console.print(f"[green]{message}[/green]")


def print_error(message: str) -> None:
    """Print an error message."""
    console.print(f"[red]Error: {message}[/red]")


def print_warning(message: str) -> None:
    """Print a warning message."""
    console.print(f"[yellow]Warning: {message}[/yellow]")


def print_info(message: str) -> None:
    """Print an info message."""
    console.print(f"[blue]{message}[/blue]")


def confirm_action(message: str) -> bool:
    """
    Prompt user for confirmation.

    Args:
        message: Confirmation message

    Returns:
        True if confirmed, False otherwise
    """
    response = console.input(f"{message} \\[y/N]: ")
    return response.strip().lower() in ("y", "yes")
