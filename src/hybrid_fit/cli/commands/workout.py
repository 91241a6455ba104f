"""Workout command: start (interactive live session) and its helpers."""

import time
from typing import Annotated

import typer

from ...core.engine.config_loader import Settings, load_settings
from ...core.models import SetRecord
from ...core.parsing import normalize_number, parse_optional_number
from ...core.rest_timer import RestTimer
from ...core.session import SessionEngine, SessionStateError
from ...core.ticker import schedule_periodic
from ...io.images import read_blob
from .. import views
from ..app import DataDirOption, app, get_history_store, get_plan_store, resolve_plan

_HELP = """\
  [cyan]d E.S[/cyan]              toggle set done             e.g. [green]d 1.2[/green]
  [cyan]w E.S VALUE|+|-|±N[/cyan] set or step the weight      e.g. [green]w 2.1 82.5[/green]  [green]w 2.1 +[/green]
  [cyan]r E.S VALUE|+|-|±N[/cyan] set or step the reps        e.g. [green]r 1.3 -2[/green]
  [cyan]rest \\[SECONDS][/cyan]     start a rest countdown      ([cyan]+[/cyan] / [cyan]-[/cyan] adjust, [cyan]skip[/cyan] ends it, [cyan]wait[/cyan] blocks)
  [cyan]photo PATH[/cyan]         attach a progress photo
  [cyan]show[/cyan]               redraw the session
  [cyan]finish[/cyan]             save the workout to history
  [cyan]quit[/cyan]               abandon the workout (nothing is saved)
"""


def _resolve_set(engine: SessionEngine, address: str) -> tuple[str, SetRecord] | None:
    """Map an 'E.S' address (1-based exercise and set numbers) to ids."""
    session = engine.session
    e_str, _, s_str = address.partition(".")
    if session is None or not e_str.isdigit() or not s_str.isdigit():
        views.print_error(f"Address sets as E.S, e.g. 1.2 (got {address!r})")
        return None
    e_idx, s_idx = int(e_str), int(s_str)
    if not 1 <= e_idx <= len(session.exercises):
        views.print_error(f"No exercise {e_idx}")
        return None
    exercise = session.exercises[e_idx - 1]
    if not 1 <= s_idx <= len(exercise.sets_data):
        views.print_error(f"{exercise.name} has no set {s_idx}")
        return None
    return exercise.id, exercise.sets_data[s_idx - 1]


def _edit_value(
    engine: SessionEngine,
    field: str,
    args: list[str],
    step: float,
) -> None:
    """Handle 'w'/'r': '+'/'-' step, '+N'/'-N' adjust, anything else replaces."""
    if len(args) != 2:
        views.print_error(f"Usage: {field[0]} E.S VALUE|+|-|+N|-N")
        return
    target = _resolve_set(engine, args[0])
    if target is None:
        return
    exercise_id, record = target
    arg = args[1]

    if arg in ("+", "-"):
        engine.adjust_value(exercise_id, record.id, field, step if arg == "+" else -step)
    elif arg[0] in "+-":
        delta = parse_optional_number(arg)
        if delta is None:
            views.print_error(f"Not a number: {arg}")
            return
        engine.adjust_value(exercise_id, record.id, field, delta)
    else:
        value = parse_optional_number(arg)
        engine.update_set(exercise_id, record.id, field, normalize_number(value) if value is not None else arg)

    shown = f"{record.weight} kg" if field == "weight" else f"{record.reps} reps"
    views.console.print(f"  Set {args[0]} {field}: {shown}")


def _wait_for_rest(timer: RestTimer) -> None:
    """Block until the countdown ends; Ctrl-C skips it."""
    try:
        with views.console.status("") as status:
            while timer.active:
                status.update(f"Rest {views.format_time(timer.time_left)}  (Ctrl-C to skip)")
                time.sleep(0.2)
    except KeyboardInterrupt:
        timer.skip()
    views.print_info("Rest over.")


def _attach_photo(engine: SessionEngine, path: str) -> None:
    try:
        blob = read_blob(path)
    except (OSError, ValueError) as e:
        views.print_error(str(e))
        return
    if engine.attach_image(blob):
        views.print_success("Photo attached.")


def _prompt(engine: SessionEngine, timer: RestTimer) -> str:
    text = f"[{views.format_time(engine.elapsed())}]"
    if timer.active:
        text += f" rest {views.format_time(timer.time_left)}"
    return text + " > "


def run_session(engine: SessionEngine, timer: RestTimer, settings: Settings) -> bool:
    """
    Drive a live session from console input until it is finished or abandoned.

    Returns:
        True if the session was finished, False if it was abandoned
    """
    session = engine.session
    if session is None:
        raise SessionStateError("No active session to run")
    views.print_session(session, engine.elapsed())
    views.console.print(_HELP)

    while True:
        try:
            raw = views.console.input(_prompt(engine, timer)).strip()
        except EOFError:
            engine.abandon()
            timer.skip()
            views.print_warning("Input closed; workout abandoned.")
            return False

        if not raw:
            continue
        cmd, *args = raw.split()
        cmd = cmd.lower()

        if cmd in ("d", "done"):
            if len(args) != 1:
                views.print_error("Usage: d E.S")
                continue
            target = _resolve_set(engine, args[0])
            if target is not None:
                engine.toggle_complete(target[0], target[1].id)
                state = "done" if target[1].completed else "not done"
                views.console.print(f"  Set {args[0]} {state} ({engine.summarize()})")
        elif cmd in ("w", "weight"):
            _edit_value(engine, "weight", args, settings.weight_step_kg)
        elif cmd in ("r", "reps"):
            _edit_value(engine, "reps", args, settings.reps_step)
        elif cmd == "rest":
            seconds = int(args[0]) if args and args[0].isdigit() else settings.rest_default_seconds
            if seconds <= 0:
                views.print_error("Rest must be at least 1 second")
                continue
            timer.start(seconds)
            views.print_info(f"Rest {views.format_time(seconds)} started.")
        elif cmd in ("+", "-", "skip", "wait") and not timer.active:
            views.print_info("No rest running.")
        elif cmd == "+":
            timer.extend(settings.rest_extend_seconds)
            views.print_info(f"Rest extended, {views.format_time(timer.time_left)} left.")
        elif cmd == "-":
            timer.reduce(settings.rest_reduce_seconds)
            views.print_info(f"Rest shortened, {views.format_time(timer.time_left)} left.")
        elif cmd == "skip":
            timer.skip()
            views.print_info("Rest skipped.")
        elif cmd == "wait":
            _wait_for_rest(timer)
        elif cmd == "photo":
            if not args:
                views.print_error("Usage: photo PATH")
                continue
            _attach_photo(engine, " ".join(args))
        elif cmd in ("s", "show"):
            views.print_session(session, engine.elapsed(), timer.state)
        elif cmd in ("h", "help", "?"):
            views.console.print(_HELP)
        elif cmd in ("f", "finish"):
            return True
        elif cmd in ("q", "quit"):
            if engine.abandon(confirm=views.confirm_action):
                timer.skip()
                views.print_info("Workout abandoned. Nothing was saved.")
                return False
        else:
            views.print_error(f"Unknown command: {cmd}. Type 'help'.")


@app.command()
def start(
    ref: Annotated[str, typer.Argument(help="Plan number (see 'plans') or id prefix")],
    data_dir: DataDirOption = None,
) -> None:
    """
    Start a workout from a plan and track it set by set.
    """
    plan = resolve_plan(get_plan_store(data_dir), ref)
    if not plan.exercises:
        views.print_error(f"Plan '{plan.name}' has no exercises.")
        raise typer.Exit(1)

    settings = load_settings()
    engine = SessionEngine()
    timer = RestTimer(scheduler=schedule_periodic)
    engine.start(plan)

    if not run_session(engine, timer, settings):
        raise typer.Exit(0)

    timer.skip()
    views.print_summary(engine.summarize(), engine.elapsed())
    raw_bw = views.console.input("Body weight in kg (Enter to skip): ")
    entry = engine.finish(body_weight=raw_bw)

    get_history_store(data_dir).append(entry)
    views.print_success(f"Saved '{entry.plan_name}' to history ({entry.summary} sets).")
