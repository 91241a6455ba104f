"""
Progress series derived from the history log.

All functions are pure: they take the history (in any order, usually the
store's newest-first order) and return chronologically ascending series.
"""

from __future__ import annotations

from collections.abc import Iterable
from typing import TYPE_CHECKING

from .models import HistoryEntry, HistoryExercise, SeriesPoint
from .parsing import parse_number, parse_optional_number

if TYPE_CHECKING:
    from ..io.history_store import HistoryStore


def _chronological(points: list[SeriesPoint]) -> list[SeriesPoint]:
    # sorted() is stable, so same-timestamp entries keep their input order
    return sorted(points, key=lambda p: p.date)


def body_weight_series(history: Iterable[HistoryEntry]) -> list[SeriesPoint]:
    """
    Body weight over time.

    Entries without a (parseable) body weight are skipped.

    Args:
        history: History entries

    Returns:
        Points sorted oldest first
    """
    points = []
    for entry in history:
        value = parse_optional_number(entry.body_weight)
        if value is not None:
            points.append(SeriesPoint(date=entry.date, value=value))
    return _chronological(points)


def exercise_names(history: Iterable[HistoryEntry]) -> list[str]:
    """Distinct exercise names found anywhere in the history, sorted."""
    return sorted({ex.name for entry in history for ex in entry.exercises})


def _find_exercise(entry: HistoryEntry, name: str) -> HistoryExercise | None:
    return next((ex for ex in entry.exercises if ex.name == name), None)


def exercise_max_load(entry: HistoryEntry, name: str) -> float:
    """
    Heaviest completed set of *name* in one session.

    Returns:
        Max weight, or 0.0 if the exercise is absent or has no completed sets
    """
    exercise = _find_exercise(entry, name)
    if exercise is None:
        return 0.0
    weights = [parse_number(s.weight) for s in exercise.sets_data if s.completed]
    return max(weights, default=0.0)


def exercise_max_load_series(history: Iterable[HistoryEntry], name: str) -> list[SeriesPoint]:
    """
    Per-session max load of one exercise over time.

    Sessions where the exercise is missing, has no completed sets or only
    weightless sets (max 0) are left out.

    Args:
        history: History entries
        name: Exercise name (exact match)

    Returns:
        Points sorted oldest first
    """
    points = []
    for entry in history:
        value = exercise_max_load(entry, name)
        if value > 0:
            points.append(SeriesPoint(date=entry.date, value=value))
    return _chronological(points)


class ProgressAggregator:
    """Read-only view of a HistoryStore; every call re-reads the store."""

    def __init__(self, store: HistoryStore):
        self.store = store

    def body_weight_series(self) -> list[SeriesPoint]:
        return body_weight_series(self.store.list())

    def exercise_names(self) -> list[str]:
        return exercise_names(self.store.list())

    def exercise_max_load_series(self, name: str) -> list[SeriesPoint]:
        return exercise_max_load_series(self.store.list(), name)
