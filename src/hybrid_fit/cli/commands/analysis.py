"""Analysis commands: history, progress."""

import json
from typing import Annotated, Optional

import typer

from ...core.progress import ProgressAggregator
from ...io.serializers import ValidationError, history_entry_to_dict
from .. import views
from ..app import DataDirOption, app, get_history_store


@app.command("history")
def show_history(
    limit: Annotated[
        Optional[int],
        typer.Option("--limit", "-l", help="Limit number of workouts to show"),
    ] = None,
    json_out: Annotated[
        bool,
        typer.Option("--json", "-j", help="Output as JSON for machine processing"),
    ] = False,
    data_dir: DataDirOption = None,
) -> None:
    """
    Display finished workouts, newest first.
    """
    store = get_history_store(data_dir)
    try:
        entries = store.list()
    except ValidationError as e:
        views.print_error(str(e))
        raise typer.Exit(1)

    if limit is not None:
        entries = entries[:limit]

    if json_out:
        records = []
        for entry in entries:
            record = history_entry_to_dict(entry)
            record["image"] = entry.image is not None  # photos are too large for a listing
            records.append(record)
        print(json.dumps(records, indent=2, ensure_ascii=False))
        return

    views.print_history(entries)


@app.command()
def progress(
    exercise: Annotated[
        Optional[str],
        typer.Option("--exercise", "-e", help="Exercise to chart (default: first alphabetically)"),
    ] = None,
    json_out: Annotated[
        bool,
        typer.Option("--json", "-j", help="Output as JSON for machine processing"),
    ] = False,
    data_dir: DataDirOption = None,
) -> None:
    """
    Chart body weight and per-exercise max load over time.
    """
    aggregator = ProgressAggregator(get_history_store(data_dir))
    try:
        names = aggregator.exercise_names()
        body_weight = aggregator.body_weight_series()
    except ValidationError as e:
        views.print_error(str(e))
        raise typer.Exit(1)

    if exercise is not None and exercise not in names:
        views.print_error(f"No exercise named {exercise!r} in history.")
        if names:
            views.print_info("Known exercises: " + ", ".join(names))
        raise typer.Exit(1)

    selected = exercise if exercise is not None else (names[0] if names else None)
    max_load = aggregator.exercise_max_load_series(selected) if selected else []

    if json_out:
        print(json.dumps({
            "exercises": names,
            "body_weight": [{"date": p.date.isoformat(), "value": p.value} for p in body_weight],
            "exercise": selected,
            "max_load": [{"date": p.date.isoformat(), "value": p.value} for p in max_load],
        }, indent=2, ensure_ascii=False))
        return

    views.print_series_plot(body_weight, "Body weight")
    views.console.print()
    if selected is None:
        views.print_info("No exercises logged yet.")
        return
    views.print_series_plot(max_load, f"Max load: {selected}")
