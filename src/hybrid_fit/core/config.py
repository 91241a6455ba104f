"""
Configuration constants for hybrid-fit.

All adjustable defaults are centralized here. User overrides for the rest
timer live in ~/.hybrid-fit/settings.yaml (see engine/config_loader.py).
"""

from typing import Final

# =============================================================================
# SESSION EXPANSION
# =============================================================================

DEFAULT_TARGET_SETS: Final[int] = 3  # Used when target_sets is unparseable or <= 0

# =============================================================================
# LIVE SESSION CONTROLS
# =============================================================================

WEIGHT_STEP_KG: Final[float] = 1.25  # +/- buttons on the weight column
REPS_STEP: Final[int] = 1  # +/- buttons on the reps column

# =============================================================================
# REST TIMER
# =============================================================================

DEFAULT_REST_SECONDS: Final[int] = 90
REST_EXTEND_SECONDS: Final[int] = 30  # "+30s"
REST_REDUCE_SECONDS: Final[int] = 10  # "-10s"

# Both periodic tasks (elapsed refresh, rest tick) run on this interval
TICK_INTERVAL_SECONDS: Final[float] = 1.0

# =============================================================================
# STORAGE
# =============================================================================

PLANS_KEY: Final[str] = "plans"
HISTORY_KEY: Final[str] = "history"
DATA_DIR_ENV: Final[str] = "HYBRID_FIT_HOME"
DATA_DIR_NAME: Final[str] = ".hybrid-fit"

# Seeded on first launch when no plans collection exists yet
DEFAULT_PLANS: Final[list[dict]] = [
    {
        "name": "Oberkörper Hybrid",
        "exercises": [
            {"name": "Muscle Ups", "kind": "calisthenics", "target_sets": "3", "target_reps": "5", "target_weight": 0},
            {"name": "Bankdrücken", "kind": "weight", "target_sets": "3", "target_reps": "8", "target_weight": 80},
            {"name": "Dips", "kind": "calisthenics", "target_sets": "3", "target_reps": "12", "target_weight": 10},
        ],
    },
]
