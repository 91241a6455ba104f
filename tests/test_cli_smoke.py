"""
Minimal smoke tests for hybrid-fit CLI.

Tests basic functionality:
- App runs without errors
- Default plan is seeded
- Plans can be created and deleted
- A workout can be run, finished and logged
- Progress is shown
"""

import json
import tempfile
from pathlib import Path

import pytest
from typer.testing import CliRunner

from hybrid_fit.cli.commands.workout import run_session
from hybrid_fit.cli.main import app
from hybrid_fit.core.engine.config_loader import Settings
from hybrid_fit.core.rest_timer import RestTimer
from hybrid_fit.core.session import SessionEngine, SessionStateError


runner = CliRunner()


@pytest.fixture
def temp_data_dir():
    """Create a temporary directory for test files."""
    with tempfile.TemporaryDirectory() as tmpdir:
        yield Path(tmpdir)


def _history(data_dir: Path) -> list:
    result = runner.invoke(app, ["history", "--json", "--data-dir", str(data_dir)])
    assert result.exit_code == 0
    return json.loads(result.stdout)


class TestCLISmoke:
    """Basic smoke tests for CLI commands."""

    def test_app_help(self):
        """Test that app runs and shows help."""
        result = runner.invoke(app, ["--help"])
        assert result.exit_code == 0
        assert "plan-create" in result.output
        assert "start" in result.output

    def test_plans_seeds_default(self, temp_data_dir):
        """Test first listing creates the default plan."""
        result = runner.invoke(app, ["plans", "--data-dir", str(temp_data_dir)])

        assert result.exit_code == 0
        assert "Oberkörper Hybrid" in result.output
        assert (temp_data_dir / "plans.json").exists()

    def test_plan_create(self, temp_data_dir):
        """Test plan-create stores exercises."""
        result = runner.invoke(app, [
            "plan-create", "Push",
            "--exercise", "Bankdrücken:weight:3x8@80",
            "--exercise", "Dips:3x12",
            "--data-dir", str(temp_data_dir),
        ])

        assert result.exit_code == 0
        assert "Created plan 'Push' with 2 exercise(s)." in result.output

        plans = json.loads((temp_data_dir / "plans.json").read_text(encoding="utf-8"))
        assert [p["name"] for p in plans] == ["Oberkörper Hybrid", "Push"]

    def test_plan_create_blank_name_fails(self, temp_data_dir):
        """Test a blank plan name is rejected."""
        result = runner.invoke(app, ["plan-create", "  ", "--data-dir", str(temp_data_dir)])

        assert result.exit_code == 1
        assert "must not be empty" in result.output

    def test_plan_delete_confirmed(self, temp_data_dir):
        """Test plan-delete removes the plan after 'y'."""
        result = runner.invoke(
            app, ["plan-delete", "1", "--data-dir", str(temp_data_dir)], input="y\n"
        )

        assert result.exit_code == 0
        assert "Deleted plan 'Oberkörper Hybrid'." in result.output
        assert json.loads((temp_data_dir / "plans.json").read_text(encoding="utf-8")) == []

    def test_plan_delete_declined(self, temp_data_dir):
        """Test plan-delete keeps the plan after 'n'."""
        result = runner.invoke(
            app, ["plan-delete", "1", "--data-dir", str(temp_data_dir)], input="n\n"
        )

        assert result.exit_code == 0
        assert "Cancelled." in result.output
        plans = json.loads((temp_data_dir / "plans.json").read_text(encoding="utf-8"))
        assert len(plans) == 1

    def test_unknown_plan_ref(self, temp_data_dir):
        """Test an out-of-range plan number exits with an error."""
        result = runner.invoke(app, ["plan-show", "7", "--data-dir", str(temp_data_dir)])
        assert result.exit_code == 1

    def test_workout_is_logged(self, temp_data_dir):
        """Test start, two sets done, finish and body weight end up in history."""
        result = runner.invoke(
            app,
            ["start", "1", "--data-dir", str(temp_data_dir)],
            input="d 2.1\nd 2.2\nw 2.2 +\nfinish\n82,5\n",
        )

        assert result.exit_code == 0
        assert "Workout complete!" in result.output
        assert "Saved 'Oberkörper Hybrid' to history (2/9 sets)." in result.output

        history = _history(temp_data_dir)
        assert len(history) == 1
        assert history[0]["sets_completed"] == 2
        assert history[0]["total_sets"] == 9
        assert history[0]["body_weight"] == 82.5
        assert history[0]["image"] is False

        bench = history[0]["exercises"][1]
        assert [s["weight"] for s in bench["sets_data"]] == [80, 81.25]

    def test_rest_controls_and_photo(self, temp_data_dir):
        """Test rest countdown commands and photo attachment during a workout."""
        photo = temp_data_dir / "progress.png"
        photo.write_bytes(b"\x89PNG\r\n")

        result = runner.invoke(
            app,
            ["start", "1", "--data-dir", str(temp_data_dir)],
            input=(
                "skip\n"
                "rest 100\n+\n-\nskip\n"
                "wait\n"
                "rest 1\nwait\n"
                f"photo {photo}\n"
                "d 1.1\nfinish\n\n"
            ),
        )

        assert result.exit_code == 0
        assert result.output.count("No rest running.") == 2
        assert "Rest 1:40 started." in result.output
        assert "Rest extended" in result.output
        assert "Rest shortened" in result.output
        assert "Rest skipped." in result.output
        assert "Rest over." in result.output
        assert "Photo attached." in result.output

        history = _history(temp_data_dir)
        assert history[0]["image"] is True
        assert history[0]["body_weight"] is None

    def test_photo_rejects_non_image(self, temp_data_dir):
        """Test a non-image file is not attached."""
        notes = temp_data_dir / "notes.txt"
        notes.write_text("hi")

        result = runner.invoke(
            app,
            ["start", "1", "--data-dir", str(temp_data_dir)],
            input=f"photo {notes}\nfinish\n\n",
        )

        assert result.exit_code == 0
        assert "Not an image file" in result.output
        assert _history(temp_data_dir)[0]["image"] is False

    def test_edit_echo_names_changed_field(self, temp_data_dir):
        """Test weight and reps edits echo the field that changed."""
        result = runner.invoke(
            app,
            ["start", "1", "--data-dir", str(temp_data_dir)],
            input="w 2.2 +\nr 1.1 -2\nquit\ny\n",
        )

        assert result.exit_code == 0
        assert "Set 2.2 weight: 81.25 kg" in result.output
        assert "Set 1.1 reps: 3 reps" in result.output

    def test_quit_logs_nothing(self, temp_data_dir):
        """Test abandoning a workout leaves history empty."""
        result = runner.invoke(
            app,
            ["start", "1", "--data-dir", str(temp_data_dir)],
            input="d 1.1\nquit\ny\n",
        )

        assert result.exit_code == 0
        assert "Nothing was saved" in result.output
        assert _history(temp_data_dir) == []

    def test_closed_input_abandons(self, temp_data_dir):
        """Test end of input abandons the workout."""
        result = runner.invoke(
            app, ["start", "1", "--data-dir", str(temp_data_dir)], input="d 1.1\n"
        )

        assert result.exit_code == 0
        assert _history(temp_data_dir) == []

    def test_progress_shows_charts(self, temp_data_dir):
        """Test progress runs after two logged workouts."""
        for bw in ("83", "82"):
            runner.invoke(
                app,
                ["start", "1", "--data-dir", str(temp_data_dir)],
                input=f"d 2.1\nfinish\n{bw}\n",
            )

        result = runner.invoke(app, ["progress", "--data-dir", str(temp_data_dir)])
        assert result.exit_code == 0
        assert "Body weight" in result.output

        result = runner.invoke(app, ["progress", "--json", "--data-dir", str(temp_data_dir)])
        data = json.loads(result.stdout)
        assert data["exercises"] == ["Bankdrücken", "Dips", "Muscle Ups"]
        assert data["exercise"] == "Bankdrücken"
        assert [p["value"] for p in data["body_weight"]] == [83, 82]
        assert [p["value"] for p in data["max_load"]] == [80, 80]

    def test_progress_unknown_exercise(self, temp_data_dir):
        """Test progress rejects an exercise that was never logged."""
        result = runner.invoke(
            app, ["progress", "--exercise", "Squat", "--data-dir", str(temp_data_dir)]
        )
        assert result.exit_code == 1

    def test_corrupt_history_reports_error(self, temp_data_dir):
        """Test history and progress exit cleanly on a damaged record."""
        (temp_data_dir / "history.json").write_text(json.dumps([{
            "id": "x",
            "date": "2026-03-02T18:00:00+00:00",
            "exercises": [{"name": "Dips", "setsData": [{"setNumber": "abc"}]}],
        }]), encoding="utf-8")

        for command in ("history", "progress"):
            result = runner.invoke(app, [command, "--data-dir", str(temp_data_dir)])
            assert result.exit_code == 1
            assert "history entry #1" in result.output


class TestRunSession:
    """The interactive loop needs a running session."""

    def test_idle_engine_rejected(self):
        with pytest.raises(SessionStateError):
            run_session(SessionEngine(), RestTimer(), Settings())
