"""Shared fixtures: a controllable clock, a hand-driven scheduler and stores."""

from datetime import datetime, timedelta, timezone

import pytest

from hybrid_fit.core.models import ExerciseDef, ExerciseKind, Plan
from hybrid_fit.io.history_store import HistoryStore
from hybrid_fit.io.kv_store import JsonKeyValueStore
from hybrid_fit.io.plan_store import PlanStore


class FakeClock:
    """Callable clock that only moves when told to."""

    def __init__(self, start: datetime | None = None):
        self.now = start or datetime(2026, 3, 2, 18, 0, tzinfo=timezone.utc)

    def __call__(self) -> datetime:
        return self.now

    def advance(self, seconds: float) -> None:
        self.now += timedelta(seconds=seconds)


class ManualScheduler:
    """Scheduler whose periodic callbacks run only when fire() is called."""

    def __init__(self):
        self.tasks: dict[int, tuple[float, object]] = {}
        self._next = 0

    def __call__(self, interval, callback):
        task_id = self._next
        self._next += 1
        self.tasks[task_id] = (interval, callback)
        return lambda: self.tasks.pop(task_id, None)

    @property
    def active(self) -> int:
        return len(self.tasks)

    def fire(self, times: int = 1) -> None:
        for _ in range(times):
            for _, callback in list(self.tasks.values()):
                callback()


@pytest.fixture
def clock() -> FakeClock:
    return FakeClock()


@pytest.fixture
def scheduler() -> ManualScheduler:
    return ManualScheduler()


@pytest.fixture
def kv(tmp_path) -> JsonKeyValueStore:
    return JsonKeyValueStore(tmp_path)


@pytest.fixture
def plan_store(kv) -> PlanStore:
    return PlanStore(kv)


@pytest.fixture
def history_store(kv) -> HistoryStore:
    return HistoryStore(kv)


@pytest.fixture
def upper_body_plan() -> Plan:
    """Three exercises, three sets each: 9 sets in total."""
    return Plan(
        id="plan-1",
        name="Oberkörper Hybrid",
        exercises=[
            ExerciseDef(id="ex-mu", name="Muscle Ups", kind=ExerciseKind.CALISTHENICS,
                        target_sets="3", target_reps="5", target_weight=0),
            ExerciseDef(id="ex-bench", name="Bankdrücken", kind=ExerciseKind.WEIGHT,
                        target_sets="3", target_reps="8", target_weight=80),
            ExerciseDef(id="ex-dips", name="Dips", kind=ExerciseKind.CALISTHENICS,
                        target_sets="3", target_reps="12", target_weight=10),
        ],
    )
