"""
Week Structure Tests

Rest, long-run and quality day placement.
"""

from datetime import date

import pytest

from coach_engine.plan_framework import (
    Phase,
    UserProfile,
    WeeklyTarget,
    plan_week_structure,
    select_quality_days,
)
from coach_engine.plan_framework.constants import WEEKDAY_NAMES


def week(quality_sessions=2, phase=Phase.BUILD):
    return WeeklyTarget(
        week_number=1,
        week_start_date=date(2025, 1, 6),
        total_miles=40,
        long_run_miles=10,
        quality_sessions=quality_sessions,
        cutback_week=False,
        phase=phase,
    )


class TestPlanWeekStructure:

    def test_default_week(self, profile):
        structure = plan_week_structure(week(), profile, Phase.BUILD)
        assert structure == {
            "Monday": "easy",
            "Tuesday": "tempo",
            "Wednesday": "easy",
            "Thursday": "interval",
            "Friday": "easy",
            "Saturday": "long_run",
            "Sunday": "rest",
        }

    def test_every_day_assigned(self, profile):
        structure = plan_week_structure(week(), profile, Phase.PEAK)
        assert set(structure) == set(WEEKDAY_NAMES)

    @pytest.mark.parametrize("phase,expected", [
        (Phase.BASE, ("tempo", "fartlek")),
        (Phase.BUILD, ("tempo", "interval")),
        (Phase.PEAK, ("race_pace", "interval")),
        (Phase.TAPER, ("race_pace", "strides")),
        (Phase.RECOVERY, ("recovery", "recovery")),
    ])
    def test_quality_types_by_phase(self, profile, phase, expected):
        structure = plan_week_structure(week(2, phase), profile, phase)
        assert (structure["Tuesday"], structure["Thursday"]) == expected

    def test_single_quality_session_uses_first_day(self, profile):
        structure = plan_week_structure(week(1, Phase.BASE), profile, Phase.BASE)
        assert structure["Tuesday"] == "tempo"
        assert structure["Thursday"] == "easy"
        assert "fartlek" not in structure.values()

    def test_rest_day_wins_over_long_run_day(self, pace_table):
        profile = UserProfile(
            vdot=45, paces=pace_table,
            rest_days=["Saturday", "Sunday"], long_run_day="Saturday",
        )
        structure = plan_week_structure(week(), profile, Phase.BUILD)
        assert structure["Saturday"] == "rest"
        assert structure["Sunday"] == "rest"
        assert structure["Friday"] == "long_run", "Long run moves to the latest open day"
        assert list(structure.values()).count("long_run") == 1

    def test_rest_day_wins_over_preferred_quality_day(self, pace_table):
        profile = UserProfile(
            vdot=45, paces=pace_table,
            preferred_days=["Tuesday", "Friday"], rest_days=["Tuesday"], long_run_day="Sunday",
        )
        structure = plan_week_structure(week(), profile, Phase.BUILD)
        assert structure["Tuesday"] == "rest"
        assert structure["Friday"] == "tempo"
        assert structure["Thursday"] == "interval"

    def test_day_names_are_normalized(self, pace_table):
        profile = UserProfile(
            vdot=45, paces=pace_table,
            preferred_days=["wednesday"], rest_days=["monday"], long_run_day="sunday",
        )
        structure = plan_week_structure(week(), profile, Phase.BUILD)
        assert structure["Monday"] == "rest"
        assert structure["Wednesday"] == "tempo"
        assert structure["Tuesday"] == "interval"
        assert structure["Sunday"] == "long_run"


class TestSelectQualityDays:

    def test_fallback_order_without_preferences(self):
        assert select_quality_days([], occupied=[], count=2) == ["Tuesday", "Thursday"]

    def test_no_duplicates(self):
        days = select_quality_days(["Thursday"], occupied=["Tuesday"], count=2)
        assert days == ["Thursday", "Wednesday"]

    def test_occupied_days_skipped(self):
        days = select_quality_days(["Saturday", "Tuesday"], occupied=["Saturday", "Sunday"], count=2)
        assert days == ["Tuesday", "Thursday"]

    def test_may_return_fewer_when_week_is_full(self):
        days = select_quality_days([], occupied=["Tuesday", "Thursday", "Wednesday"], count=2)
        assert days == []
