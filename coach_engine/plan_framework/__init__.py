# Plan Generation Framework
#
# Two layers of planning for one athlete and one goal race:
# - Master plan: periodized phases and weekly volume targets, built once
# - Detailed window: concrete daily workouts for the next 2-3 weeks,
#   recomputed on demand from the master plan, profile and recent history
#
# Coefficients live in config/plan_rules.yaml, templates in
# config/workout_library.yaml; both are loaded once per process.

from .config import ConfigService
from .phase_builder import PhaseBuilder
from .volume_progression import WeeklyTargetCalculator
from .generator import MasterPlanGenerator
from .regeneration import (
    RegenerationDecision,
    RegenerationState,
    RegenerationTrigger,
    evaluate_regeneration,
)
from .workout_library import WorkoutLibrary, WorkoutTemplate, load_workout_library
from .workout_selector import WorkoutSelector
from .pace_engine import PaceAdjuster
from .week_structure import plan_week_structure, select_quality_days
from .window_expander import WindowExpander, calculate_daily_mileage
from .performance_adjuster import PerformanceAdjuster
from .models import (
    DetailedWorkout,
    MasterPlan,
    MasterPlanRequest,
    PaceTable,
    PlanPreferences,
    RecentHistory,
    TrainingPhase,
    UserProfile,
    WeeklyTarget,
)
from .constants import Aggressiveness, Distance, Phase, WorkoutType

__all__ = [
    # Core services
    'ConfigService',

    # Master plan layer
    'PhaseBuilder',
    'WeeklyTargetCalculator',
    'MasterPlanGenerator',
    'RegenerationDecision',
    'RegenerationState',
    'RegenerationTrigger',
    'evaluate_regeneration',

    # Detailed window layer
    'WorkoutLibrary',
    'WorkoutTemplate',
    'load_workout_library',
    'WorkoutSelector',
    'PaceAdjuster',
    'plan_week_structure',
    'select_quality_days',
    'WindowExpander',
    'calculate_daily_mileage',
    'PerformanceAdjuster',

    # Models
    'DetailedWorkout',
    'MasterPlan',
    'MasterPlanRequest',
    'PaceTable',
    'PlanPreferences',
    'RecentHistory',
    'TrainingPhase',
    'UserProfile',
    'WeeklyTarget',

    # Constants
    'Aggressiveness',
    'Distance',
    'Phase',
    'WorkoutType',
]
