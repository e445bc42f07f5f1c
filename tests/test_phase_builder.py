"""
Phase Builder Tests

Phase allocation per distance, plan-length validation and the date tiling
of the resulting phases.
"""

import pytest
from datetime import date, timedelta

from coach_engine.core.exceptions import InsufficientPlanDurationError
from coach_engine.plan_framework import PhaseBuilder, Phase
from coach_engine.plan_framework.phase_builder import start_of_week, weeks_between

from tests.conftest import PLAN_START


class TestWeekAllocation:
    """Phase week counts per distance."""

    @pytest.mark.parametrize("distance", ["5k", "10k", "half_marathon", "marathon"])
    @pytest.mark.parametrize("total_weeks", [8, 9, 12, 16, 18, 24, 30])
    def test_phase_weeks_sum_to_total(self, distance, total_weeks):
        """Base absorbs the remainder, so phases always add up to the plan."""
        allocation = PhaseBuilder().allocate_weeks(distance, total_weeks)
        total = sum(weeks for _, weeks in allocation)
        assert total == total_weeks, (
            f"{distance} {total_weeks}w: phases sum to {total} ({allocation})"
        )

    def test_marathon_16_weeks(self):
        allocation = dict(PhaseBuilder().allocate_weeks("marathon", 16))
        assert allocation == {
            Phase.BASE: 6,
            Phase.BUILD: 5,
            Phase.PEAK: 2,
            Phase.TAPER: 3,
        }

    def test_half_marathon_uses_fixed_two_week_taper(self):
        allocation = dict(PhaseBuilder().allocate_weeks("half_marathon", 20))
        assert allocation[Phase.TAPER] == 2
        assert allocation[Phase.BUILD] == 7
        assert allocation[Phase.PEAK] == 4
        assert allocation[Phase.BASE] == 7

    def test_5k_taper_rounds_up(self):
        """10% of 8 weeks is 0.8; the 5k taper still gets a full week."""
        allocation = dict(PhaseBuilder().allocate_weeks("5k", 8))
        assert allocation[Phase.TAPER] == 1
        assert allocation[Phase.BUILD] == 3
        assert allocation[Phase.PEAK] == 1
        assert allocation[Phase.BASE] == 3

    def test_unknown_distance_uses_half_marathon_table(self):
        builder = PhaseBuilder()
        for distance in ("10k", "ultra", ""):
            assert builder.allocate_weeks(distance, 20) == builder.allocate_weeks("half_marathon", 20), (
                f"'{distance}' should fall back to the half marathon split"
            )

    def test_recovery_weeks_come_first(self):
        allocation = PhaseBuilder().allocate_weeks("marathon", 12, recovery_weeks=2)
        assert allocation[0] == (Phase.RECOVERY, 2)
        assert sum(weeks for _, weeks in allocation) == 12


class TestPlanDuration:
    """Minimum plan length."""

    def test_fewer_than_eight_weeks_raises(self):
        with pytest.raises(InsufficientPlanDurationError) as exc_info:
            PhaseBuilder().build_phases(
                plan_start=PLAN_START,
                race_date=PLAN_START + timedelta(weeks=7, days=6),
                distance="marathon",
            )
        error = exc_info.value
        assert error.error_code == "INSUFFICIENT_PLAN_DURATION"
        assert error.total_weeks == 7
        assert error.minimum_weeks == 8
        assert "at least 8 weeks" in error.detail

    def test_exactly_eight_weeks_is_accepted(self):
        phases = PhaseBuilder().build_phases(
            plan_start=PLAN_START,
            race_date=PLAN_START + timedelta(weeks=8),
            distance="5k",
        )
        assert sum(p.weeks for p in phases) == 8

    def test_race_before_plan_start_raises(self):
        with pytest.raises(InsufficientPlanDurationError):
            PhaseBuilder().build_phases(
                plan_start=PLAN_START,
                race_date=PLAN_START - timedelta(days=1),
                distance="half_marathon",
            )


class TestPhaseDates:
    """Phases tile [plan_start, race_date] without gaps or overlap."""

    @pytest.mark.parametrize("race_offset_days", [16 * 7, 16 * 7 + 2, 20 * 7 + 6])
    def test_phases_are_contiguous(self, race_offset_days):
        race_date = PLAN_START + timedelta(days=race_offset_days)
        phases = PhaseBuilder().build_phases(PLAN_START, race_date, "marathon")

        assert phases[0].start_date == PLAN_START
        assert phases[-1].end_date == race_date, "Last phase should run through race day"
        for prev, nxt in zip(phases, phases[1:]):
            assert nxt.start_date == prev.end_date + timedelta(days=1), (
                f"{prev.name.value} ends {prev.end_date}, {nxt.name.value} starts {nxt.start_date}"
            )

    def test_phase_order(self):
        phases = PhaseBuilder().build_phases(PLAN_START, PLAN_START + timedelta(weeks=16), "marathon")
        assert [p.name for p in phases] == [Phase.BASE, Phase.BUILD, Phase.PEAK, Phase.TAPER]

    def test_phase_focus_from_table(self):
        phases = PhaseBuilder().build_phases(PLAN_START, PLAN_START + timedelta(weeks=16), "marathon")
        assert phases[0].focus == "Aerobic capacity"
        assert phases[-1].focus == "Supercompensation"

    def test_boundary_date_belongs_to_one_phase(self, marathon_plan):
        boundary = marathon_plan.phases[1].start_date
        owners = [p.name for p in marathon_plan.phases if p.contains(boundary)]
        assert owners == [Phase.BUILD]
        assert marathon_plan.get_phase_for_date(boundary).name == Phase.BUILD
        assert marathon_plan.get_phase_for_date(boundary - timedelta(days=1)).name == Phase.BASE


class TestDateHelpers:

    def test_start_of_week_is_monday(self):
        assert start_of_week(date(2025, 1, 8)) == date(2025, 1, 6)
        assert start_of_week(date(2025, 1, 12)) == date(2025, 1, 6)
        assert start_of_week(date(2025, 1, 6)) == date(2025, 1, 6)

    def test_weeks_between_truncates(self):
        assert weeks_between(PLAN_START, PLAN_START + timedelta(days=13)) == 1
        assert weeks_between(PLAN_START, PLAN_START + timedelta(days=14)) == 2
