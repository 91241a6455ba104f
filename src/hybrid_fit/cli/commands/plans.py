"""Plan commands: plans, plan-show, plan-create, plan-rename, plan-add-exercise, plan-remove-exercise, plan-delete."""

from typing import Annotated, Optional

import typer

from ...io.serializers import ValidationError, parse_exercise_spec
from .. import views
from ..app import DataDirOption, app, get_plan_store, resolve_plan

PlanRef = Annotated[str, typer.Argument(help="Plan number (see 'plans') or id prefix")]


@app.command("plans")
def list_plans(data_dir: DataDirOption = None) -> None:
    """
    List all workout plans.
    """
    store = get_plan_store(data_dir)
    try:
        plans = store.list()
    except ValidationError as e:
        views.print_error(str(e))
        raise typer.Exit(1)
    views.print_plans(plans)


@app.command("plan-show")
def plan_show(ref: PlanRef, data_dir: DataDirOption = None) -> None:
    """
    Show the exercises of one plan.
    """
    store = get_plan_store(data_dir)
    views.print_plan(resolve_plan(store, ref))


@app.command("plan-create")
def plan_create(
    name: Annotated[str, typer.Argument(help="Plan name")],
    exercises: Annotated[
        Optional[list[str]],
        typer.Option(
            "--exercise", "-x",
            help="Exercise as Name:kind:SETSxREPS@KG, e.g. 'Bankdrücken:weight:3x8@80' (repeatable)",
        ),
    ] = None,
    data_dir: DataDirOption = None,
) -> None:
    """
    Create a new plan.
    """
    store = get_plan_store(data_dir)
    try:
        specs = [parse_exercise_spec(s) for s in exercises or []]
        plan = store.create(name, specs)
    except ValidationError as e:
        views.print_error(str(e))
        raise typer.Exit(1)

    views.print_success(f"Created plan '{plan.name}' with {len(plan.exercises)} exercise(s).")
    views.print_plan(plan)


@app.command("plan-rename")
def plan_rename(
    ref: PlanRef,
    name: Annotated[str, typer.Argument(help="New plan name")],
    data_dir: DataDirOption = None,
) -> None:
    """
    Rename a plan.
    """
    store = get_plan_store(data_dir)
    plan = resolve_plan(store, ref)
    try:
        updated = store.update(plan.id, {"name": name})
    except ValidationError as e:
        views.print_error(str(e))
        raise typer.Exit(1)
    if updated is not None:
        views.print_success(f"Renamed '{plan.name}' to '{updated.name}'.")


@app.command("plan-add-exercise")
def plan_add_exercise(
    ref: PlanRef,
    spec: Annotated[str, typer.Argument(help="Exercise as Name:kind:SETSxREPS@KG")],
    data_dir: DataDirOption = None,
) -> None:
    """
    Append an exercise to a plan.
    """
    store = get_plan_store(data_dir)
    plan = resolve_plan(store, ref)
    try:
        exercise = store.add_exercise(plan.id, **parse_exercise_spec(spec))
    except ValidationError as e:
        views.print_error(str(e))
        raise typer.Exit(1)
    if exercise is not None:
        views.print_success(f"Added '{exercise.name}' to '{plan.name}'.")


@app.command("plan-remove-exercise")
def plan_remove_exercise(
    ref: PlanRef,
    index: Annotated[int, typer.Argument(help="Exercise number (see 'plan-show')")],
    data_dir: DataDirOption = None,
) -> None:
    """
    Remove an exercise from a plan.
    """
    store = get_plan_store(data_dir)
    plan = resolve_plan(store, ref)
    if index < 1 or index > len(plan.exercises):
        views.print_error(f"Enter an exercise number between 1 and {len(plan.exercises)}")
        raise typer.Exit(1)

    target = plan.exercises[index - 1]
    store.remove_exercise(plan.id, target.id)
    views.print_success(f"Removed '{target.name}' from '{plan.name}'.")


@app.command("plan-delete")
def plan_delete(
    ref: PlanRef,
    force: Annotated[
        bool,
        typer.Option("--force", "-f", help="Skip confirmation prompt"),
    ] = False,
    data_dir: DataDirOption = None,
) -> None:
    """
    Delete a plan. This cannot be undone.
    """
    store = get_plan_store(data_dir)
    plan = resolve_plan(store, ref)

    if store.delete(plan.id, confirm=None if force else views.confirm_action):
        views.print_success(f"Deleted plan '{plan.name}'.")
    else:
        views.print_info("Cancelled.")
