"""
Unit tests for the live session engine.

Covers plan expansion, set edits, elapsed time, summaries and the
finish/abandon transitions.
"""

import pytest

from hybrid_fit.core.models import ExerciseDef, Plan
from hybrid_fit.core.session import SessionEngine, SessionState, SessionStateError

# ---------------------------------------------------------------------------
# Shared helpers
# ---------------------------------------------------------------------------


def _plan(*exercises: ExerciseDef, name: str = "Test") -> Plan:
    return Plan(id="p", name=name, exercises=list(exercises))


def _ex(ex_id: str = "e1", sets="3", reps="8", weight=0.0) -> ExerciseDef:
    return ExerciseDef(id=ex_id, name=ex_id, target_sets=sets, target_reps=reps, target_weight=weight)


def _first_set(engine: SessionEngine, ex_index: int = 0, set_index: int = 0):
    exercise = engine.session.exercises[ex_index]
    return exercise.id, exercise.sets_data[set_index]


# ---------------------------------------------------------------------------
# start()
# ---------------------------------------------------------------------------


class TestStart:

    def test_target_sets_string_expands_to_numbered_sets(self, clock):
        engine = SessionEngine(clock=clock)
        session = engine.start(_plan(_ex(sets="3")))

        sets = session.exercises[0].sets_data
        assert [s.set_number for s in sets] == [1, 2, 3]
        assert all(s.completed is False for s in sets)
        assert engine.state is SessionState.ACTIVE

    @pytest.mark.parametrize("raw", ["abc", "", "0", "-2", None])
    def test_unusable_target_sets_fall_back_to_three(self, clock, raw):
        engine = SessionEngine(clock=clock)
        session = engine.start(_plan(_ex(sets=raw)))
        assert len(session.exercises[0].sets_data) == 3

    def test_leading_integer_is_used(self, clock):
        engine = SessionEngine(clock=clock)
        session = engine.start(_plan(_ex(sets="5 sets")))
        assert len(session.exercises[0].sets_data) == 5

    def test_sets_seeded_with_targets(self, clock):
        engine = SessionEngine(clock=clock)
        session = engine.start(_plan(_ex(reps="8", weight=80.0)))
        first = session.exercises[0].sets_data[0]
        assert first.reps == "8"
        assert first.weight == 80

    def test_set_ids_unique_across_exercises(self, clock, upper_body_plan):
        engine = SessionEngine(clock=clock)
        session = engine.start(upper_body_plan)
        ids = [s.id for ex in session.exercises for s in ex.sets_data]
        assert len(ids) == len(set(ids)) == 9

    def test_plan_is_copied(self, clock):
        plan = _plan(_ex(sets="2"))
        engine = SessionEngine(clock=clock)
        session = engine.start(plan)
        plan.exercises.append(_ex("late"))
        assert len(session.exercises) == 1

    def test_start_while_active_raises(self, clock, upper_body_plan):
        engine = SessionEngine(clock=clock)
        engine.start(upper_body_plan)
        with pytest.raises(SessionStateError):
            engine.start(upper_body_plan)

    def test_start_again_after_finish(self, clock, upper_body_plan):
        engine = SessionEngine(clock=clock)
        engine.start(upper_body_plan)
        engine.finish()
        engine.start(upper_body_plan)
        assert engine.state is SessionState.ACTIVE
        assert engine.summarize().sets_completed == 0


# ---------------------------------------------------------------------------
# Set edits
# ---------------------------------------------------------------------------


class TestSetEdits:

    def test_update_set_replaces_field(self, clock):
        engine = SessionEngine(clock=clock)
        engine.start(_plan(_ex()))
        ex_id, record = _first_set(engine)

        assert engine.update_set(ex_id, record.id, "reps", "10")
        assert record.reps == "10"

    def test_update_unknown_ids_is_noop(self, clock):
        engine = SessionEngine(clock=clock)
        engine.start(_plan(_ex()))
        ex_id, record = _first_set(engine)

        assert engine.update_set("missing", record.id, "reps", 99) is False
        assert engine.update_set(ex_id, 10_000, "reps", 99) is False
        assert record.reps == "8"

    def test_update_unknown_field_raises(self, clock):
        engine = SessionEngine(clock=clock)
        engine.start(_plan(_ex()))
        ex_id, record = _first_set(engine)
        with pytest.raises(ValueError):
            engine.update_set(ex_id, record.id, "set_number", 7)

    def test_update_completed_takes_bool_only(self, clock):
        engine = SessionEngine(clock=clock)
        engine.start(_plan(_ex()))
        ex_id, record = _first_set(engine)

        assert engine.update_set(ex_id, record.id, "completed", True)
        assert record.completed is True
        with pytest.raises(ValueError):
            engine.update_set(ex_id, record.id, "completed", "false")
        assert record.completed is True

    def test_toggle_twice_restores(self, clock):
        engine = SessionEngine(clock=clock)
        engine.start(_plan(_ex()))
        ex_id, record = _first_set(engine)

        engine.toggle_complete(ex_id, record.id)
        assert record.completed is True
        engine.toggle_complete(ex_id, record.id)
        assert record.completed is False

    def test_adjust_weight_never_negative(self, clock):
        engine = SessionEngine(clock=clock)
        engine.start(_plan(_ex(weight=0)))
        ex_id, record = _first_set(engine)

        for _ in range(10):
            engine.adjust_value(ex_id, record.id, "weight", -1.25)
        assert record.weight == 0

    def test_adjust_steps_weight(self, clock):
        engine = SessionEngine(clock=clock)
        engine.start(_plan(_ex(weight=80)))
        ex_id, record = _first_set(engine)

        engine.adjust_value(ex_id, record.id, "weight", 1.25)
        engine.adjust_value(ex_id, record.id, "weight", 1.25)
        assert record.weight == 82.5

    def test_adjust_non_numeric_counts_as_zero(self, clock):
        engine = SessionEngine(clock=clock)
        engine.start(_plan(_ex(reps="AMRAP")))
        ex_id, record = _first_set(engine)

        engine.adjust_value(ex_id, record.id, "reps", 1)
        assert record.reps == 1

    def test_adjust_completed_raises(self, clock):
        engine = SessionEngine(clock=clock)
        engine.start(_plan(_ex()))
        ex_id, record = _first_set(engine)
        with pytest.raises(ValueError):
            engine.adjust_value(ex_id, record.id, "completed", 1)

    def test_edits_ignored_after_finish(self, clock):
        engine = SessionEngine(clock=clock)
        engine.start(_plan(_ex()))
        ex_id, record = _first_set(engine)
        engine.finish()

        assert engine.toggle_complete(ex_id, record.id) is False
        assert record.completed is False


# ---------------------------------------------------------------------------
# Elapsed time and summary
# ---------------------------------------------------------------------------


class TestElapsedAndSummary:

    def test_elapsed_from_wall_clock(self, clock):
        engine = SessionEngine(clock=clock)
        assert engine.elapsed() == 0
        engine.start(_plan(_ex()))
        clock.advance(125.7)
        assert engine.elapsed() == 125

    def test_elapsed_ignores_missed_refresh_ticks(self, clock, scheduler):
        seen = []
        engine = SessionEngine(clock=clock, scheduler=scheduler, on_elapsed=seen.append)
        engine.start(_plan(_ex()))

        clock.advance(10)
        scheduler.fire()  # only one refresh for ten seconds
        assert seen == [10]
        assert engine.elapsed() == 10

    def test_elapsed_frozen_after_finish(self, clock):
        engine = SessionEngine(clock=clock)
        engine.start(_plan(_ex()))
        clock.advance(60)
        engine.finish()
        clock.advance(600)
        assert engine.elapsed() == 60

    def test_summary_two_of_nine(self, clock, upper_body_plan):
        engine = SessionEngine(clock=clock)
        session = engine.start(upper_body_plan)
        bench = session.exercises[1]
        engine.toggle_complete(bench.id, bench.sets_data[0].id)
        engine.toggle_complete(bench.id, bench.sets_data[1].id)

        summary = engine.summarize()
        assert (summary.sets_completed, summary.total_sets) == (2, 9)


# ---------------------------------------------------------------------------
# finish() / abandon()
# ---------------------------------------------------------------------------


class TestFinish:

    def test_entry_counts_and_completed_sets_only(self, clock, upper_body_plan):
        engine = SessionEngine(clock=clock)
        session = engine.start(upper_body_plan)
        bench = session.exercises[1]
        engine.toggle_complete(bench.id, bench.sets_data[0].id)
        engine.adjust_value(bench.id, bench.sets_data[1].id, "weight", 2.5)
        engine.toggle_complete(bench.id, bench.sets_data[1].id)
        clock.advance(1800)

        entry = engine.finish(body_weight="82,5")

        assert entry.sets_completed == 2
        assert entry.total_sets == 9
        assert entry.duration_seconds == 1800
        assert entry.body_weight == 82.5
        assert entry.plan_name == "Oberkörper Hybrid"
        assert [len(ex.sets_data) for ex in entry.exercises] == [0, 2, 0]
        assert [s.weight for s in entry.exercises[1].sets_data] == [80, 82.5]
        assert engine.state is SessionState.FINISHED

    def test_blank_body_weight_is_none(self, clock):
        engine = SessionEngine(clock=clock)
        engine.start(_plan(_ex()))
        assert engine.finish(body_weight="  ").body_weight is None

    def test_finish_when_idle_raises(self, clock):
        with pytest.raises(SessionStateError):
            SessionEngine(clock=clock).finish()

    def test_finish_stops_refresh(self, clock, scheduler):
        engine = SessionEngine(clock=clock, scheduler=scheduler)
        engine.start(_plan(_ex()))
        assert scheduler.active == 1
        engine.finish()
        assert scheduler.active == 0

    def test_attached_image_used_by_default(self, clock):
        engine = SessionEngine(clock=clock)
        engine.start(_plan(_ex()))
        assert engine.attach_image("data:image/png;base64,AAAA")
        assert engine.finish().image == "data:image/png;base64,AAAA"

    def test_late_image_is_dropped(self, clock):
        engine = SessionEngine(clock=clock)
        engine.start(_plan(_ex()))
        engine.finish()
        assert engine.attach_image("data:image/png;base64,AAAA") is False


class TestAbandon:

    def test_abandon_returns_to_idle(self, clock, scheduler, upper_body_plan, history_store):
        engine = SessionEngine(clock=clock, scheduler=scheduler)
        engine.start(upper_body_plan)

        assert engine.abandon(confirm=lambda prompt: True)
        assert engine.state is SessionState.IDLE
        assert engine.session is None
        assert scheduler.active == 0
        assert history_store.list() == []

    def test_declined_confirmation_keeps_session(self, clock, upper_body_plan):
        engine = SessionEngine(clock=clock)
        engine.start(upper_body_plan)

        assert engine.abandon(confirm=lambda prompt: False) is False
        assert engine.state is SessionState.ACTIVE

    def test_abandon_when_idle_raises(self, clock):
        with pytest.raises(SessionStateError):
            SessionEngine(clock=clock).abandon()

    def test_abandon_leaves_rest_timer_alone(self, clock, scheduler, upper_body_plan):
        from hybrid_fit.core.rest_timer import RestTimer

        engine = SessionEngine(clock=clock, scheduler=scheduler)
        timer = RestTimer(scheduler=scheduler)
        engine.start(upper_body_plan)
        timer.start(90)
        assert scheduler.active == 2

        engine.abandon()
        assert scheduler.active == 1
        assert timer.active
