"""
Constants for plan generation.

These are DEFAULTS that can be overridden by config (plan_rules.yaml).
They exist here for type safety and documentation, and are what
ConfigService falls back to when no YAML tables are found.
"""

from enum import Enum
from typing import Dict, List


class Distance(str, Enum):
    """Goal race distances."""
    FIVE_K = "5k"
    TEN_K = "10k"
    HALF_MARATHON = "half_marathon"
    MARATHON = "marathon"


class Phase(str, Enum):
    """Training phases, in the only order a plan may move through them."""
    RECOVERY = "recovery"
    BASE = "base"
    BUILD = "build"
    PEAK = "peak"
    TAPER = "taper"


class Aggressiveness(str, Enum):
    CONSERVATIVE = "conservative"
    MODERATE = "moderate"
    AGGRESSIVE = "aggressive"


class WorkoutType(str, Enum):
    """Day-level workout types used by the window expander."""
    REST = "rest"
    EASY = "easy"
    RECOVERY = "recovery"
    LONG_RUN = "long_run"
    TEMPO = "tempo"
    INTERVAL = "interval"
    RACE_PACE = "race_pace"
    FARTLEK = "fartlek"
    STRIDES = "strides"


class PaceKey(str, Enum):
    """Named paces in an athlete's pace table."""
    EASY = "easy"
    MARATHON = "marathon"
    THRESHOLD = "threshold"
    INTERVAL = "interval"
    REPETITION = "repetition"


WEEKDAY_NAMES: List[str] = [
    "Monday", "Tuesday", "Wednesday", "Thursday", "Friday", "Saturday", "Sunday",
]

# Distances without their own table use this one
DEFAULT_DISTANCE = Distance.HALF_MARATHON

MIN_PLAN_WEEKS = 8

# Phase distribution (fractions of total weeks).
# Non-base fractions are floored unless rounding says otherwise; base absorbs the remainder.
PHASE_DISTRIBUTIONS: Dict[str, Dict[str, Dict]] = {
    Distance.FIVE_K.value: {
        "base": {
            "fraction": 0.30,
            "focus": "Aerobic development",
            "description": "Building aerobic base with easy miles and strides",
        },
        "build": {
            "fraction": 0.40,
            "focus": "Speed and VO2max",
            "description": "Introducing track workouts and tempo runs",
        },
        "peak": {
            "fraction": 0.20,
            "focus": "Race pace specificity",
            "description": "Sharpening with race pace work",
        },
        "taper": {
            "fraction": 0.10,
            "rounding": "ceil",
            "focus": "Freshening",
            "description": "Reducing volume while maintaining intensity",
        },
    },
    Distance.HALF_MARATHON.value: {
        "base": {
            "fraction": 0.35,
            "focus": "Aerobic foundation",
            "description": "Building weekly mileage and long run endurance",
        },
        "build": {
            "fraction": 0.35,
            "focus": "Lactate threshold",
            "description": "Tempo runs and sustained efforts",
        },
        "peak": {
            "fraction": 0.20,
            "focus": "Race simulation",
            "description": "Race pace long runs and dress rehearsals",
        },
        "taper": {
            "weeks": 2,
            "focus": "Peak performance",
            "description": "Maintaining fitness while ensuring freshness",
        },
    },
    Distance.MARATHON.value: {
        "base": {
            "fraction": 0.40,
            "focus": "Aerobic capacity",
            "description": "High volume easy running and medium-long runs",
        },
        "build": {
            "fraction": 0.35,
            "focus": "Marathon pace & threshold",
            "description": "Long runs with MP segments, tempo work",
        },
        "peak": {
            "fraction": 0.15,
            "focus": "Race readiness",
            "description": "Longest runs, race pace confidence",
        },
        "taper": {
            "weeks": 3,
            "focus": "Supercompensation",
            "description": "Gradual reduction to peak on race day",
        },
    },
}

# Only inserted by plan regeneration after an injury
RECOVERY_PHASE = {
    "focus": "Return to running",
    "description": "Reduced volume and easy effort while the injury settles",
    "volume_factor": 0.6,
}

# Volume progression
BASE_TARGET_OF_PEAK = 0.8
PEAK_FLOOR = 0.95
PEAK_UNDULATION = 0.05

# Taper volume as a fraction of peak, one entry per taper week
TAPER_FACTORS: Dict[str, List[float]] = {
    Distance.FIVE_K.value: [0.8, 0.6, 0.4],
    Distance.HALF_MARATHON.value: [0.7, 0.5],
    Distance.MARATHON.value: [0.7, 0.5, 0.3],
}

CUTBACK_RULES = {
    "frequency": 4,
    "factor": 0.7,
}

LONG_RUN_FRACTION: Dict[str, float] = {
    Distance.MARATHON.value: 0.30,
    "default": 0.25,
}
LONG_RUN_BAND = (0.20, 0.30)

# Default peak mileage when the caller gives none, relative to current mileage
PEAK_MULTIPLIERS: Dict[str, float] = {
    Aggressiveness.CONSERVATIVE.value: 1.2,
    Aggressiveness.MODERATE.value: 1.3,
    Aggressiveness.AGGRESSIVE.value: 1.4,
}

# Quality subtypes per phase: (first quality day, second quality day)
QUALITY_WORKOUTS: Dict[str, List[str]] = {
    Phase.BASE.value: [WorkoutType.TEMPO.value, WorkoutType.FARTLEK.value],
    Phase.BUILD.value: [WorkoutType.TEMPO.value, WorkoutType.INTERVAL.value],
    Phase.PEAK.value: [WorkoutType.RACE_PACE.value, WorkoutType.INTERVAL.value],
    Phase.TAPER.value: [WorkoutType.RACE_PACE.value, WorkoutType.STRIDES.value],
    Phase.RECOVERY.value: [WorkoutType.RECOVERY.value, WorkoutType.RECOVERY.value],
}

QUALITY_DAY_FALLBACKS = ["Tuesday", "Thursday", "Wednesday"]

# Share of the week's total miles per workout type (long_run uses the weekly long run)
DAILY_ALLOCATION: Dict[str, float] = {
    WorkoutType.TEMPO.value: 0.15,
    WorkoutType.INTERVAL.value: 0.12,
    WorkoutType.RACE_PACE.value: 0.12,
    WorkoutType.FARTLEK.value: 0.10,
    WorkoutType.EASY.value: 0.08,
    WorkoutType.RECOVERY.value: 0.06,
}

# Duration estimate, minutes per mile
MINUTES_PER_MILE: Dict[str, float] = {
    WorkoutType.EASY.value: 9,
    WorkoutType.TEMPO.value: 7.5,
    WorkoutType.INTERVAL.value: 7,
    WorkoutType.LONG_RUN.value: 9.5,
    WorkoutType.RECOVERY.value: 10,
    WorkoutType.RACE_PACE.value: 8,
    "default": 9,
}
WARMUP_COOLDOWN_MINUTES = 20

# Fatigue-driven pace slowdowns (sec/mile); first matching rule wins
PACE_ADJUSTMENTS = {
    "tsb_rules": [
        {"below": -20, "seconds": 10},
        {"below": -10, "seconds": 5},
    ],
    "phase_extra": {
        Phase.BASE.value: {"threshold": 5, "interval": 5},
    },
}

# Workout-level selection limits
LEVEL_LIMITS = {
    "beginner_max_vdot": 50,
    "advanced_min_vdot": 45,
}
RECENT_WORKOUT_LOOKBACK = 7

# Performance adjustment
STRUGGLE_LOOKBACK = 5
STRUGGLE_THRESHOLD = 2
STRUGGLE_TYPES = [WorkoutType.INTERVAL.value, WorkoutType.TEMPO.value]

# Regeneration policy
MISSED_WEEKS_LIMIT = 2
FITNESS_DEVIATION_LIMIT = 0.3
MISSED_WEEKS_PEAK_FACTOR = 0.9
INJURY_RECOVERY_WEEKS = 2
