"""
Live workout session engine.

SessionEngine expands a Plan into an ActiveSession, applies per-set edits
while the session runs, and turns the finished session into a HistoryEntry.

State machine:
    IDLE --start()--> ACTIVE --finish()--> FINISHED
                        |
                        +--abandon()--> IDLE

Set edits are only applied while ACTIVE. Edits that reference an exercise
or set that does not exist are ignored.
"""

import itertools
import logging
import uuid
from collections.abc import Callable
from datetime import datetime, timezone
from enum import Enum
from typing import Any

from .models import (
    ActiveExercise,
    ActiveSession,
    HistoryEntry,
    HistoryExercise,
    LoggedSet,
    Plan,
    SessionSummary,
    SetRecord,
    SetValue,
)
from .parsing import normalize_number, parse_number, parse_optional_number, parse_target_sets
from .ticker import PeriodicTask, Scheduler

logger = logging.getLogger(__name__)

Clock = Callable[[], datetime]
ConfirmFn = Callable[[str], bool]

_SET_FIELDS = ("reps", "weight", "completed")
_NUMERIC_FIELDS = ("reps", "weight")


class SessionState(str, Enum):
    IDLE = "idle"
    ACTIVE = "active"
    FINISHED = "finished"


class SessionStateError(RuntimeError):
    """Raised when an operation is not allowed in the engine's current state."""

    pass


class NotFoundError(LookupError):
    """An exercise or set id did not resolve. Never leaves the engine."""

    pass


def utc_now() -> datetime:
    return datetime.now(timezone.utc)


class SessionEngine:
    """
    Runs one workout session at a time.

    Elapsed time is always computed as now() - started_at. The optional
    periodic refresh only reports that value to on_elapsed (e.g. to redraw
    a clock) and is never used to count time.
    """

    def __init__(
        self,
        clock: Clock = utc_now,
        scheduler: Scheduler | None = None,
        on_elapsed: Callable[[int], None] | None = None,
    ):
        """
        Initialize an idle engine.

        Args:
            clock: Returns the current time
            scheduler: Periodic scheduler for the elapsed-time refresh, or None
            on_elapsed: Receives elapsed seconds on every refresh
        """
        self.clock = clock
        self.on_elapsed = on_elapsed
        self._state = SessionState.IDLE
        self._session: ActiveSession | None = None
        self._duration: int = 0  # frozen at finish()
        self._set_ids = itertools.count(1)
        self._refresh = (
            PeriodicTask(self._emit_elapsed, scheduler) if scheduler is not None else None
        )

    @property
    def state(self) -> SessionState:
        return self._state

    @property
    def session(self) -> ActiveSession | None:
        """The current session; after finish() it stays readable until the next start()."""
        return self._session

    # ------------------------------------------------------------------
    # Lifecycle
    # ------------------------------------------------------------------

    def start(self, plan: Plan) -> ActiveSession:
        """
        Expand a plan into a live session.

        Each exercise gets parse_target_sets(target_sets) set records,
        numbered from 1 and seeded with the exercise's target reps and weight.

        Args:
            plan: Plan to run; it is copied, later plan edits do not leak in

        Returns:
            The new ActiveSession

        Raises:
            SessionStateError: If a session is already active
        """
        if self._state is SessionState.ACTIVE:
            raise SessionStateError("A session is already active. Finish or abandon it first.")

        exercises = []
        for exercise in plan.exercises:
            n_sets = parse_target_sets(exercise.target_sets)
            weight = normalize_number(parse_number(exercise.target_weight))
            exercises.append(
                ActiveExercise(
                    id=exercise.id,
                    name=exercise.name,
                    kind=exercise.kind,
                    sets_data=[
                        SetRecord(
                            id=next(self._set_ids),
                            set_number=number,
                            reps=exercise.target_reps,
                            weight=weight,
                        )
                        for number in range(1, n_sets + 1)
                    ],
                )
            )

        self._session = ActiveSession(
            plan_name=plan.name,
            started_at=self.clock(),
            exercises=exercises,
        )
        self._duration = 0
        self._state = SessionState.ACTIVE
        if self._refresh is not None:
            self._refresh.start()

        logger.info("Started session %r with %d sets", plan.name, self.summarize().total_sets)
        return self._session

    def finish(self, body_weight: Any = None, image: str | None = None) -> HistoryEntry:
        """
        End the session and build its history record.

        Only completed sets are kept in the record. The record is not
        stored; pass it to HistoryStore.append().

        Args:
            body_weight: Body weight as number or text; blank/unparseable is dropped
            image: Progress photo data URL; defaults to the attached image

        Returns:
            The HistoryEntry for this session

        Raises:
            SessionStateError: If no session is active
        """
        session = self._require_active("finish")
        duration = self.elapsed()
        summary = self.summarize()

        entry = HistoryEntry(
            id=uuid.uuid4().hex,
            date=self.clock(),
            plan_name=session.plan_name,
            duration_seconds=duration,
            sets_completed=summary.sets_completed,
            total_sets=summary.total_sets,
            body_weight=parse_optional_number(body_weight),
            image=image if image is not None else session.image,
            exercises=tuple(
                HistoryExercise(
                    name=exercise.name,
                    kind=exercise.kind,
                    sets_data=tuple(
                        LoggedSet(id=s.id, set_number=s.set_number, reps=s.reps, weight=s.weight)
                        for s in exercise.sets_data
                        if s.completed
                    ),
                )
                for exercise in session.exercises
            ),
        )

        self._duration = duration
        self._state = SessionState.FINISHED
        self._stop_refresh()
        logger.info("Finished session %r: %s sets in %ds", session.plan_name, summary, duration)
        return entry

    def abandon(self, confirm: ConfirmFn | None = None) -> bool:
        """
        Discard the session without a history record.

        Args:
            confirm: Optional confirmation prompt; declining keeps the session running

        Returns:
            True if the session was discarded

        Raises:
            SessionStateError: If no session is active
        """
        session = self._require_active("abandon")
        if confirm is not None and not confirm("Abandon this workout? Progress will be lost."):
            return False

        self._stop_refresh()
        self._session = None
        self._duration = 0
        self._state = SessionState.IDLE
        logger.info("Abandoned session %r", session.plan_name)
        return True

    # ------------------------------------------------------------------
    # Set edits
    # ------------------------------------------------------------------

    def update_set(self, exercise_id: str, set_id: int, field: str, value: SetValue | bool) -> bool:
        """
        Replace one field of a set record.

        Args:
            exercise_id: ActiveExercise id
            set_id: SetRecord id
            field: "reps", "weight" or "completed"
            value: New value, stored as given; "completed" only accepts a bool

        Returns:
            True if the edit was applied

        Raises:
            ValueError: If field is not a set field, or "completed" gets a non-bool
        """
        if field not in _SET_FIELDS:
            raise ValueError(f"Unknown set field {field!r}. Must be one of {_SET_FIELDS}")
        if field == "completed" and not isinstance(value, bool):
            raise ValueError(f"completed must be True or False, got {value!r}")
        record = self._resolve(exercise_id, set_id)
        if record is None:
            return False
        setattr(record, field, value)
        return True

    def toggle_complete(self, exercise_id: str, set_id: int) -> bool:
        """Flip a set's completed flag. Returns True if applied."""
        record = self._resolve(exercise_id, set_id)
        if record is None:
            return False
        record.completed = not record.completed
        return True

    def adjust_value(self, exercise_id: str, set_id: int, field: str, delta: float) -> bool:
        """
        Step a numeric set field up or down, never below 0.

        Non-numeric current values count as 0.

        Args:
            exercise_id: ActiveExercise id
            set_id: SetRecord id
            field: "reps" or "weight"
            delta: Amount to add (negative to subtract)

        Returns:
            True if the edit was applied

        Raises:
            ValueError: If field is not numeric
        """
        if field not in _NUMERIC_FIELDS:
            raise ValueError(f"Cannot adjust {field!r}. Must be one of {_NUMERIC_FIELDS}")
        record = self._resolve(exercise_id, set_id)
        if record is None:
            return False
        current = parse_number(getattr(record, field))
        setattr(record, field, normalize_number(round(max(0.0, current + delta), 4)))
        return True

    def attach_image(self, blob: str) -> bool:
        """
        Completion callback for progress-photo encoding.

        Applied only while the session is still active; otherwise dropped.
        """
        if self._state is not SessionState.ACTIVE or self._session is None:
            logger.debug("Dropping image for inactive session")
            return False
        self._session.image = blob
        return True

    # ------------------------------------------------------------------
    # Queries
    # ------------------------------------------------------------------

    def elapsed(self) -> int:
        """Whole seconds since start; frozen once finished, 0 when idle."""
        if self._state is SessionState.ACTIVE and self._session is not None:
            delta = self.clock() - self._session.started_at
            return max(0, int(delta.total_seconds()))
        return self._duration

    def summarize(self) -> SessionSummary:
        """Count completed and total sets across all exercises."""
        if self._session is None:
            return SessionSummary(0, 0)
        total = sum(len(e.sets_data) for e in self._session.exercises)
        done = sum(1 for e in self._session.exercises for s in e.sets_data if s.completed)
        return SessionSummary(sets_completed=done, total_sets=total)

    # ------------------------------------------------------------------
    # Internals
    # ------------------------------------------------------------------

    def _find_set(self, exercise_id: str, set_id: int) -> SetRecord:
        session = self._require_active("edit sets")
        for exercise in session.exercises:
            if exercise.id != exercise_id:
                continue
            for record in exercise.sets_data:
                if record.id == set_id:
                    return record
        raise NotFoundError(f"No set {set_id} in exercise {exercise_id}")

    def _resolve(self, exercise_id: str, set_id: int) -> SetRecord | None:
        """Return the addressed set, or None if edits are not possible."""
        if self._state is not SessionState.ACTIVE:
            logger.debug("Ignoring set edit while %s", self._state.value)
            return None
        try:
            return self._find_set(exercise_id, set_id)
        except NotFoundError as e:
            logger.debug("Ignoring set edit: %s", e)
            return None

    def _require_active(self, action: str) -> ActiveSession:
        if self._state is not SessionState.ACTIVE or self._session is None:
            raise SessionStateError(f"Cannot {action}: no active session")
        return self._session

    def _emit_elapsed(self) -> None:
        if self.on_elapsed is not None and self._state is SessionState.ACTIVE:
            self.on_elapsed(self.elapsed())

    def _stop_refresh(self) -> None:
        if self._refresh is not None:
            self._refresh.stop()
