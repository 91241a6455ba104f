"""Shared Typer app object, shared option types, and store utilities."""

import logging
from pathlib import Path
from typing import Annotated, Optional

import typer

from ..core.models import Plan
from ..io.history_store import HistoryStore
from ..io.kv_store import JsonKeyValueStore, get_default_data_dir
from ..io.plan_store import PlanStore
from . import views

# Shared --data-dir option type used across all commands
DataDirOption = Annotated[
    Optional[Path],
    typer.Option("--data-dir", "-d", help="Directory holding plans.json and history.json"),
]

app = typer.Typer(
    name="hybrid-fit",
    help="Workout tracker for calisthenics and weight training: plans, live sessions, history, progress.",
    no_args_is_help=True,
)


@app.callback()
def main_callback(
    verbose: Annotated[
        bool,
        typer.Option("--verbose", "-v", help="Show debug logging"),
    ] = False,
) -> None:
    """
    Plan workouts, run them set by set, and follow your progress.
    """
    logging.basicConfig(
        level=logging.DEBUG if verbose else logging.WARNING,
        format="%(levelname)s %(name)s: %(message)s",
    )


def get_kv(data_dir: Path | None) -> JsonKeyValueStore:
    """Get the key-value store from a directory or the default location."""
    return JsonKeyValueStore(data_dir if data_dir is not None else get_default_data_dir())


def get_plan_store(data_dir: Path | None) -> PlanStore:
    return PlanStore(get_kv(data_dir))


def get_history_store(data_dir: Path | None) -> HistoryStore:
    return HistoryStore(get_kv(data_dir))


def resolve_plan(store: PlanStore, ref: str) -> Plan:
    """
    Find a plan by its 1-based number in the 'plans' list, or by id prefix.

    Prints an error and exits when nothing matches.
    """
    plans = store.list()
    if ref.isdigit():
        number = int(ref)
        if 1 <= number <= len(plans):
            return plans[number - 1]
        views.print_error(f"Enter a plan number between 1 and {len(plans)}")
        raise typer.Exit(1)

    matches = [p for p in plans if p.id.startswith(ref)]
    if len(matches) == 1:
        return matches[0]
    if not matches:
        views.print_error(f"No plan matches {ref!r}. Run 'plans' to see plan numbers.")
    else:
        views.print_error(f"{ref!r} matches {len(matches)} plans; use a longer id.")
    raise typer.Exit(1)
