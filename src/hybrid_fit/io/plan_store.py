"""
Durable storage for workout plans.

Plans are kept as one ordered JSON list under the "plans" key of a
key-value store.
"""

from __future__ import annotations

import logging
import uuid
from collections.abc import Callable, Iterable
from dataclasses import replace
from typing import Any, Protocol

from ..core.config import DEFAULT_PLANS, PLANS_KEY
from ..core.models import ExerciseDef, ExerciseKind, Plan
from ..core.parsing import parse_number
from .serializers import (
    ValidationError,
    dict_to_plan,
    parse_kind,
    plan_to_dict,
    validate_name,
)

logger = logging.getLogger(__name__)


class KeyValueStore(Protocol):
    """The persistence collaborator: a plain get/set service."""

    def get(self, key: str) -> Any | None: ...

    def set(self, key: str, value: Any) -> None: ...


ConfirmFn = Callable[[str], bool]

_PATCHABLE_FIELDS = ("name", "exercises")


def new_id() -> str:
    """Return a new unique record id."""
    return uuid.uuid4().hex


def make_exercise(
    name: str,
    kind: ExerciseKind | str = ExerciseKind.CALISTHENICS,
    target_sets: int | str = 3,
    target_reps: int | str = 10,
    target_weight: float | str = 0.0,
) -> ExerciseDef:
    """
    Build a validated ExerciseDef with a fresh id.

    Raises:
        ValidationError: If the name is blank or the kind is unknown
    """
    return ExerciseDef(
        id=new_id(),
        name=validate_name(name, "Exercise"),
        kind=parse_kind(kind),
        target_sets=target_sets,
        target_reps=target_reps,
        target_weight=parse_number(target_weight),
    )


def _coerce_exercise(exercise: ExerciseDef | dict[str, Any]) -> ExerciseDef:
    if isinstance(exercise, ExerciseDef):
        validate_name(exercise.name, "Exercise")
        return exercise if exercise.id else replace(exercise, id=new_id())
    fields = {k: v for k, v in exercise.items() if k != "id"}
    made = make_exercise(**fields)
    return replace(made, id=str(exercise["id"])) if exercise.get("id") else made


class PlanStore:
    """
    Owns the collection of plan definitions.

    Names are validated when a plan is saved; a failed validation writes
    nothing. Unknown plan ids are ignored.
    """

    def __init__(self, kv: KeyValueStore, key: str = PLANS_KEY):
        """
        Initialize the plan store.

        Args:
            kv: Key-value persistence service
            key: Key of the plans collection
        """
        self.kv = kv
        self.key = key

    def list(self) -> list[Plan]:
        """
        Load all plans in their stored order.

        Seeds the default plans the first time the collection is read.

        Raises:
            ValidationError: If a stored plan record is invalid
        """
        raw = self.kv.get(self.key)
        if raw is None:
            seeded = [self._seed_plan(data) for data in DEFAULT_PLANS]
            self._save(seeded)
            logger.info("Seeded %d default plan(s)", len(seeded))
            return seeded

        plans: list[Plan] = []
        for index, data in enumerate(raw):
            try:
                plans.append(dict_to_plan(data))
            except ValidationError as e:
                raise ValidationError(f"Error parsing plan #{index + 1}: {e}") from e
        return plans

    def get(self, plan_id: str) -> Plan | None:
        """Return the plan with *plan_id*, or None."""
        for plan in self.list():
            if plan.id == plan_id:
                return plan
        return None

    def create(
        self,
        name: str,
        exercises: Iterable[ExerciseDef | dict[str, Any]] = (),
    ) -> Plan:
        """
        Create and store a new plan.

        Args:
            name: Plan name, must not be blank
            exercises: ExerciseDefs or dicts of make_exercise() keyword arguments

        Returns:
            The stored plan

        Raises:
            ValidationError: If the plan name or an exercise name is blank
        """
        plan = Plan(
            id=new_id(),
            name=validate_name(name),
            exercises=[_coerce_exercise(e) for e in exercises],
        )
        plans = self.list()
        plans.append(plan)
        self._save(plans)
        logger.info("Created plan %r (%s)", plan.name, plan.id)
        return plan

    def update(self, plan_id: str, patch: dict[str, Any]) -> Plan | None:
        """
        Replace fields of an existing plan.

        Args:
            plan_id: Plan to update
            patch: New values for "name" and/or "exercises"

        Returns:
            The updated plan, or None if plan_id is unknown

        Raises:
            ValidationError: If the resulting name is blank
            ValueError: If the patch names a field that cannot be changed
        """
        unknown = set(patch) - set(_PATCHABLE_FIELDS)
        if unknown:
            raise ValueError(f"Cannot patch plan fields: {', '.join(sorted(unknown))}")

        plans = self.list()
        for i, plan in enumerate(plans):
            if plan.id != plan_id:
                continue
            changes: dict[str, Any] = {}
            if "name" in patch:
                changes["name"] = validate_name(patch["name"])
            if "exercises" in patch:
                changes["exercises"] = [_coerce_exercise(e) for e in patch["exercises"]]
            plans[i] = replace(plan, **changes)
            self._save(plans)
            logger.info("Updated plan %r (%s)", plans[i].name, plan_id)
            return plans[i]

        logger.warning("Update ignored, no plan with id %s", plan_id)
        return None

    def delete(self, plan_id: str, confirm: ConfirmFn | None = None) -> bool:
        """
        Delete a plan. Irreversible.

        Args:
            plan_id: Plan to delete
            confirm: Optional confirmation prompt; declining leaves the plan in place

        Returns:
            True if a plan was deleted
        """
        plans = self.list()
        target = next((p for p in plans if p.id == plan_id), None)
        if target is None:
            logger.warning("Delete ignored, no plan with id %s", plan_id)
            return False
        if confirm is not None and not confirm(f"Delete plan '{target.name}'?"):
            return False

        self._save([p for p in plans if p.id != plan_id])
        logger.info("Deleted plan %r (%s)", target.name, plan_id)
        return True

    def add_exercise(self, plan_id: str, **fields: Any) -> ExerciseDef | None:
        """
        Append an exercise to a plan.

        Args:
            plan_id: Plan to extend
            **fields: make_exercise() keyword arguments

        Returns:
            The new exercise, or None if plan_id is unknown

        Raises:
            ValidationError: If the exercise name is blank
        """
        exercise = make_exercise(**fields)
        plan = self.get(plan_id)
        if plan is None:
            logger.warning("Add exercise ignored, no plan with id %s", plan_id)
            return None
        self.update(plan_id, {"exercises": [*plan.exercises, exercise]})
        return exercise

    def remove_exercise(self, plan_id: str, exercise_id: str) -> bool:
        """Remove an exercise from a plan; returns True if something was removed."""
        plan = self.get(plan_id)
        if plan is None:
            return False
        remaining = [e for e in plan.exercises if e.id != exercise_id]
        if len(remaining) == len(plan.exercises):
            return False
        self.update(plan_id, {"exercises": remaining})
        return True

    def _seed_plan(self, data: dict[str, Any]) -> Plan:
        return Plan(
            id=new_id(),
            name=data["name"],
            exercises=[make_exercise(**e) for e in data["exercises"]],
        )

    def _save(self, plans: list[Plan]) -> None:
        self.kv.set(self.key, [plan_to_dict(p) for p in plans])
