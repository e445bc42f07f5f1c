"""
Pace Engine Tests

Fatigue and phase adjustments on the athlete's pace table.
"""

import pytest

from coach_engine.plan_framework import PaceAdjuster, Phase
from coach_engine.plan_framework.pace_engine import adjust_pace, format_pace, pace_to_seconds


class TestPaceArithmetic:

    def test_parse_and_format(self):
        assert pace_to_seconds("7:15") == 435
        assert format_pace(435) == "7:15"
        assert format_pace(600) == "10:00"
        assert format_pace(545) == "9:05"

    def test_adjust_crosses_minute(self):
        assert adjust_pace("6:55", 10) == "7:05"
        assert adjust_pace("7:05", -10) == "6:55"


class TestPaceAdjuster:

    @pytest.mark.parametrize("tsb,seconds", [
        (5, 0),
        (-10, 0),
        (-10.5, 5),
        (-20, 5),
        (-21, 10),
        (-40, 10),
    ])
    def test_fatigue_slows_every_pace(self, pace_table, tsb, seconds):
        paces = PaceAdjuster().target_paces(pace_table, tsb, Phase.BUILD)
        for key, original in pace_table.as_dict().items():
            assert pace_to_seconds(paces[key]) - pace_to_seconds(original) == seconds, (
                f"tsb={tsb}: {key} {original} -> {paces[key]}, expected +{seconds}s"
            )

    def test_base_phase_eases_threshold_and_interval(self, pace_table):
        paces = PaceAdjuster().target_paces(pace_table, 0, Phase.BASE)
        assert paces["threshold"] == "7:20"
        assert paces["interval"] == "6:45"
        assert paces["easy"] == "9:00"
        assert paces["marathon"] == "8:00"

    def test_base_phase_stacks_with_fatigue(self, pace_table):
        paces = PaceAdjuster().target_paces(pace_table, -25, Phase.BASE)
        assert paces["threshold"] == "7:30"
        assert paces["easy"] == "9:10"

    def test_taper_adds_nothing(self, pace_table):
        paces = PaceAdjuster().target_paces(pace_table, 0, Phase.TAPER)
        assert paces == pace_table.as_dict()

    def test_input_not_modified(self):
        table = {"easy": "9:00", "threshold": "7:15"}
        PaceAdjuster().target_paces(table, -30, Phase.BASE)
        assert table == {"easy": "9:00", "threshold": "7:15"}
