"""
Data models for hybrid-fit.

All core dataclasses representing plans, live sessions, the rest timer and
the archived history. Live-session records are mutable; everything that ends
up in the history log is frozen.
"""

from dataclasses import dataclass, field
from datetime import datetime
from enum import Enum

# Reps/weight as typed by the user: numbers, or raw text from an input field.
# Arithmetic always goes through parsing.parse_number().
SetValue = int | float | str


class ExerciseKind(str, Enum):
    """Two-way exercise type tag."""

    CALISTHENICS = "calisthenics"
    WEIGHT = "weight"


@dataclass
class ExerciseDef:
    """
    One exercise inside a plan, with its targets.

    target_sets is kept as entered; SessionEngine.start() parses it and
    falls back to DEFAULT_TARGET_SETS when it is not a positive integer.
    """

    id: str
    name: str
    kind: ExerciseKind = ExerciseKind.CALISTHENICS
    target_sets: int | str = 3
    target_reps: int | str = 10
    target_weight: float = 0.0


@dataclass
class Plan:
    """A named, reusable template of exercises."""

    id: str
    name: str
    exercises: list[ExerciseDef] = field(default_factory=list)

    @property
    def calisthenics_count(self) -> int:
        return sum(1 for e in self.exercises if e.kind == ExerciseKind.CALISTHENICS)

    @property
    def weight_count(self) -> int:
        return sum(1 for e in self.exercises if e.kind == ExerciseKind.WEIGHT)


@dataclass
class SetRecord:
    """A single set inside a live session."""

    id: int
    set_number: int  # 1-based, contiguous within its exercise
    reps: SetValue
    weight: SetValue
    completed: bool = False


@dataclass
class ActiveExercise:
    """An exercise expanded into its set records for a live session."""

    id: str
    name: str
    kind: ExerciseKind
    sets_data: list[SetRecord] = field(default_factory=list)


@dataclass
class ActiveSession:
    """
    The live, in-memory execution of a plan.

    Never persisted on its own; it either becomes a HistoryEntry or is
    discarded.
    """

    plan_name: str
    started_at: datetime
    exercises: list[ActiveExercise] = field(default_factory=list)
    image: str | None = None  # progress photo, set by SessionEngine.attach_image()


@dataclass(frozen=True)
class SessionSummary:
    """Completed vs. total set counts of a session."""

    sets_completed: int
    total_sets: int

    def __str__(self) -> str:
        return f"{self.sets_completed}/{self.total_sets}"


@dataclass(frozen=True)
class RestTimerState:
    """Snapshot of the rest countdown."""

    active: bool = False
    time_left: int = 0
    initial: int = 90


@dataclass(frozen=True)
class LoggedSet:
    """A completed set as archived in the history log."""

    id: int
    set_number: int
    reps: SetValue
    weight: SetValue
    completed: bool = True


@dataclass(frozen=True)
class HistoryExercise:
    """One exercise of a finished session; only completed sets are kept."""

    name: str
    kind: ExerciseKind
    sets_data: tuple[LoggedSet, ...] = ()


@dataclass(frozen=True)
class HistoryEntry:
    """
    Immutable archival record of one finished session.
    """

    id: str
    date: datetime
    plan_name: str
    duration_seconds: int
    sets_completed: int
    total_sets: int
    body_weight: float | None = None
    image: str | None = None  # inline data URL
    exercises: tuple[HistoryExercise, ...] = ()

    def __post_init__(self) -> None:
        """Validate entry data."""
        if self.duration_seconds < 0:
            raise ValueError("duration_seconds must be non-negative")
        if not 0 <= self.sets_completed <= self.total_sets:
            raise ValueError(
                f"sets_completed ({self.sets_completed}) must be between 0 and "
                f"total_sets ({self.total_sets})"
            )

    @property
    def summary(self) -> SessionSummary:
        return SessionSummary(self.sets_completed, self.total_sets)


@dataclass(frozen=True)
class SeriesPoint:
    """One point of a progress series."""

    date: datetime
    value: float
