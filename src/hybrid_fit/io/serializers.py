"""
JSON serialization for hybrid-fit data models.

Handles conversion between dataclasses and JSON-compatible dicts, and the
compact exercise notation accepted on the command line.
"""

import re
from datetime import datetime
from typing import Any

from ..core.config import DEFAULT_TARGET_SETS
from ..core.models import (
    ExerciseDef,
    ExerciseKind,
    HistoryEntry,
    HistoryExercise,
    LoggedSet,
    Plan,
    SetValue,
)
from ..core.parsing import parse_number, parse_optional_number


class ValidationError(Exception):
    """Raised when data validation fails."""

    pass


# Compact target notation: "3x8", "3 x 8 @ 80", "4x12@+10kg"
_TARGETS_RE = re.compile(
    r"^(\d+)\s*[xX×]\s*(\d+)\s*(?:@\s*\+?(\d+(?:[.,]\d+)?)\s*(?:kg)?)?$"
)

_KIND_ALIASES = {
    "calisthenics": ExerciseKind.CALISTHENICS,
    "c": ExerciseKind.CALISTHENICS,
    "bw": ExerciseKind.CALISTHENICS,
    "weight": ExerciseKind.WEIGHT,
    "w": ExerciseKind.WEIGHT,
}


# =============================================================================
# VALIDATION
# =============================================================================


def validate_name(name: Any, what: str = "Plan") -> str:
    """
    Validate a plan or exercise name.

    Args:
        name: Name to validate
        what: Label for the error message

    Returns:
        The stripped name

    Raises:
        ValidationError: If the name is blank
    """
    if not isinstance(name, str) or not name.strip():
        raise ValidationError(f"{what} name must not be empty.")
    return name.strip()


def parse_kind(value: Any) -> ExerciseKind:
    """
    Parse an exercise kind tag.

    Raises:
        ValidationError: If the tag is neither calisthenics nor weight
    """
    if isinstance(value, ExerciseKind):
        return value
    kind = _KIND_ALIASES.get(str(value).strip().lower())
    if kind is None:
        raise ValidationError(
            f"Invalid exercise kind: {value!r}. Must be 'calisthenics' or 'weight'."
        )
    return kind


def parse_exercise_spec(spec: str) -> dict[str, Any]:
    """
    Parse a compact exercise string used on the command line.

    Formats:
        Bankdrücken:weight:3x8@80   name, kind, sets x reps @ weight
        Dips:3x12@10                kind defaults to calisthenics
        Muscle Ups                  name only, default targets

    Args:
        spec: Exercise string

    Returns:
        Keyword arguments for PlanStore.add_exercise()

    Raises:
        ValidationError: If the string cannot be parsed
    """
    parts = [p.strip() for p in spec.split(":")]
    fields: dict[str, Any] = {"name": validate_name(parts[0], "Exercise")}

    for part in parts[1:]:
        if not part:
            continue
        if part.lower() in _KIND_ALIASES:
            fields["kind"] = _KIND_ALIASES[part.lower()]
            continue
        match = _TARGETS_RE.match(part)
        if match is None:
            raise ValidationError(
                f"Cannot parse {part!r} in {spec!r}. Expected e.g. 'Bankdrücken:weight:3x8@80'."
            )
        fields["target_sets"] = int(match.group(1))
        fields["target_reps"] = int(match.group(2))
        if match.group(3) is not None:
            fields["target_weight"] = parse_number(match.group(3))

    return fields


# =============================================================================
# PLANS
# =============================================================================


def exercise_def_to_dict(exercise: ExerciseDef) -> dict[str, Any]:
    """Convert ExerciseDef to JSON-compatible dict."""
    return {
        "id": exercise.id,
        "name": exercise.name,
        "kind": exercise.kind.value,
        "target_sets": exercise.target_sets,
        "target_reps": exercise.target_reps,
        "target_weight": exercise.target_weight,
    }


def dict_to_exercise_def(data: dict[str, Any]) -> ExerciseDef:
    """
    Convert dict to ExerciseDef.

    Raises:
        ValidationError: If required fields are missing or invalid
    """
    if "id" not in data:
        raise ValidationError(f"Exercise without id: {data!r}")
    return ExerciseDef(
        id=str(data["id"]),
        name=validate_name(data.get("name"), "Exercise"),
        kind=parse_kind(data.get("kind", data.get("type", "calisthenics"))),
        target_sets=data.get("target_sets", data.get("sets", DEFAULT_TARGET_SETS)),
        target_reps=data.get("target_reps", data.get("reps", "")),
        target_weight=parse_number(data.get("target_weight", data.get("weight"))),
    )


def plan_to_dict(plan: Plan) -> dict[str, Any]:
    """Convert Plan to JSON-compatible dict."""
    return {
        "id": plan.id,
        "name": plan.name,
        "exercises": [exercise_def_to_dict(e) for e in plan.exercises],
    }


def dict_to_plan(data: dict[str, Any]) -> Plan:
    """
    Convert dict to Plan.

    Raises:
        ValidationError: If data is invalid
    """
    if "id" not in data:
        raise ValidationError(f"Plan without id: {data!r}")
    return Plan(
        id=str(data["id"]),
        name=validate_name(data.get("name")),
        exercises=[dict_to_exercise_def(e) for e in data.get("exercises", [])],
    )


# =============================================================================
# HISTORY
# =============================================================================


def _logged_set_to_dict(s: LoggedSet) -> dict[str, Any]:
    return {
        "id": s.id,
        "set_number": s.set_number,
        "reps": s.reps,
        "weight": s.weight,
        "completed": s.completed,
    }


def _dict_to_logged_set(data: dict[str, Any]) -> LoggedSet:
    reps: SetValue = data.get("reps", 0)
    weight: SetValue = data.get("weight", 0)
    return LoggedSet(
        id=data.get("id", 0),
        set_number=int(data.get("set_number", data.get("setNumber", 0))),
        reps=reps,
        weight=weight,
        completed=bool(data.get("completed", True)),
    )


def history_entry_to_dict(entry: HistoryEntry) -> dict[str, Any]:
    """
    Convert HistoryEntry to JSON-compatible dict.

    Args:
        entry: HistoryEntry to convert

    Returns:
        Dict representation with an ISO 8601 date
    """
    return {
        "id": entry.id,
        "date": entry.date.isoformat(),
        "plan_name": entry.plan_name,
        "duration_seconds": entry.duration_seconds,
        "sets_completed": entry.sets_completed,
        "total_sets": entry.total_sets,
        "body_weight": entry.body_weight,
        "image": entry.image,
        "exercises": [
            {
                "name": ex.name,
                "kind": ex.kind.value,
                "sets_data": [_logged_set_to_dict(s) for s in ex.sets_data],
            }
            for ex in entry.exercises
        ],
    }


def _parse_date(value: Any) -> datetime:
    if not isinstance(value, str):
        raise ValidationError(f"Invalid date: {value!r}")
    try:
        # Python < 3.11 does not accept the trailing "Z" of JS toISOString()
        return datetime.fromisoformat(value.replace("Z", "+00:00"))
    except ValueError as e:
        raise ValidationError(f"Invalid date: {value}") from e


def dict_to_history_entry(data: dict[str, Any]) -> HistoryEntry:
    """
    Convert dict to HistoryEntry.

    Also reads the old camelCase export format, where the set counts were
    stored as a single "done/total" string ("setsCompleted": "2/9") and
    durations as "duration".

    Args:
        data: Dict representation

    Returns:
        HistoryEntry instance

    Raises:
        ValidationError: If data is invalid
    """
    try:
        sets_completed = data.get("sets_completed", data.get("setsCompleted", 0))
        total_sets = data.get("total_sets")
        if isinstance(sets_completed, str) and "/" in sets_completed:
            done, _, total = sets_completed.partition("/")
            sets_completed, total_sets = done, total
        if total_sets is None:
            total_sets = sets_completed

        exercises = tuple(
            HistoryExercise(
                name=str(ex.get("name", "")),
                kind=parse_kind(ex.get("kind", ex.get("type", "calisthenics"))),
                sets_data=tuple(
                    _dict_to_logged_set(s) for s in ex.get("sets_data", ex.get("setsData")) or []
                ),
            )
            for ex in data.get("exercises") or []
        )

        return HistoryEntry(
            id=str(data["id"]),
            date=_parse_date(data.get("date")),
            plan_name=str(data.get("plan_name", data.get("planName", ""))),
            duration_seconds=int(data.get("duration_seconds", data.get("duration", 0))),
            sets_completed=int(sets_completed),
            total_sets=int(total_sets),
            body_weight=parse_optional_number(data.get("body_weight", data.get("bodyWeight"))),
            image=data.get("image"),
            exercises=exercises,
        )
    except (AttributeError, KeyError, TypeError, ValueError) as e:
        raise ValidationError(f"Invalid history entry: {e}") from e
