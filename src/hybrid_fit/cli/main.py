"""
CLI entry point using Typer.

Provides commands for workout tracking:
- plans / plan-*: Manage workout plans
- start: Run a plan as a live session
- history: Show finished workouts
- progress: Chart body weight and max load
"""

from .app import app
from .commands import analysis, plans, workout  # noqa: F401  (registers commands)


def main() -> None:
    app()


if __name__ == "__main__":
    main()
