"""
Pytest configuration and fixtures

Shared athletes, histories and plans for the engine tests.
Everything is built in memory; ConfigService is restored after tests
that override rule values.
"""
import pytest
from datetime import date, timedelta

from coach_engine.plan_framework import (
    ConfigService,
    MasterPlanGenerator,
    MasterPlanRequest,
    PaceTable,
    PlanPreferences,
    RecentHistory,
    UserProfile,
)
from coach_engine.plan_framework.workout_library import build_workout_library

# Monday
PLAN_START = date(2025, 1, 6)
# Exactly 16 weeks after PLAN_START (also a Monday)
RACE_DATE = PLAN_START + timedelta(weeks=16)


@pytest.fixture(autouse=True)
def restore_config():
    """Undo ConfigService.set()/reload() overrides made by a test."""
    original_dir = ConfigService._config_dir
    yield
    ConfigService._config_dir = original_dir
    ConfigService._config = None


@pytest.fixture
def pace_table():
    return PaceTable(
        easy="9:00",
        marathon="8:00",
        threshold="7:15",
        interval="6:40",
        repetition="6:10",
    )


@pytest.fixture
def profile(pace_table):
    """Intermediate athlete with the default week layout."""
    return UserProfile(
        vdot=48,
        paces=pace_table,
        current_mileage=30,
    )


@pytest.fixture
def history():
    """Fresh athlete, no logged workouts."""
    return RecentHistory(ctl=40, atl=38, tsb=2)


@pytest.fixture
def marathon_request():
    """Marathon in 16 weeks, 30 -> 45 miles/week."""
    return MasterPlanRequest(
        profile_id=1,
        goal_race_id=10,
        goal_race_date=RACE_DATE,
        goal_race_distance="marathon",
        current_vdot=48,
        current_weekly_mileage=30,
        peak_mileage_target=45,
        preferences=PlanPreferences(aggressiveness="moderate"),
    )


@pytest.fixture
def marathon_plan(marathon_request):
    return MasterPlanGenerator().create_master_plan(marathon_request, today=PLAN_START)


@pytest.fixture
def small_library():
    """Two templates per quality type, easy and long run covered."""
    return build_workout_library({
        "version": "test",
        "workouts": {
            "easy": [
                {"name": "Easy A", "description": "Easy in {phase}", "structure": "easy",
                 "specific_type": "easy_a"},
            ],
            "long_run": [
                {"name": "Long A", "description": "Long", "structure": "long",
                 "main_set": "{miles} miles at {easy}", "specific_type": "long_a"},
            ],
            "tempo": [
                {"name": "Tempo A", "description": "Tempo for VDOT {vdot}", "structure": "20 min T",
                 "main_set": "20 min at {threshold}", "specific_type": "tempo_a"},
                {"name": "Tempo B", "description": "Cruise", "structure": "3 x 1 mi T",
                 "main_set": "3 x 1 mile at {threshold}", "specific_type": "tempo_b",
                 "level": "advanced"},
            ],
            "interval": [
                {"name": "Intervals A", "description": "VO2", "structure": "5 x 1k",
                 "main_set": "5 x 1000m at {interval}", "specific_type": "intervals_a",
                 "level": "beginner"},
                {"name": "Intervals B", "description": "VO2", "structure": "4 x 1 mi",
                 "main_set": "4 x 1 mile at {interval}", "specific_type": "intervals_b",
                 "phases": ["build", "peak"]},
            ],
        },
    })
