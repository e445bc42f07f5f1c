"""
Master Plan Generator

Orchestrates the planning components:
- PhaseBuilder for the periodized phase sequence
- WeeklyTargetCalculator for week-by-week volume
- The regeneration helper that rebuilds a plan from the current week

Usage:
    generator = MasterPlanGenerator()
    plan = generator.create_master_plan(request)

    decision = evaluate_regeneration(plan, state)
    if decision.needs_update:
        plan = generator.regenerate_master_plan(plan, request, decision)
"""

import logging
import uuid
from datetime import date, datetime, timezone
from typing import Optional

from coach_engine.core.logging import log_fields

from .config import ConfigService
from .constants import (
    FITNESS_DEVIATION_LIMIT,
    INJURY_RECOVERY_WEEKS,
    MISSED_WEEKS_PEAK_FACTOR,
)
from .models import MasterPlan, MasterPlanRequest
from .phase_builder import PhaseBuilder, start_of_week
from .regeneration import RegenerationDecision, RegenerationTrigger
from .volume_progression import WeeklyTargetCalculator

logger = logging.getLogger(__name__)


def plan_name(distance: str, race_date: date) -> str:
    """e.g. "marathon Training Plan - Apr 27, 2025"."""
    return f"{distance} Training Plan - {race_date.strftime('%b')} {race_date.day}, {race_date.year}"


class MasterPlanGenerator:
    """
    Builds the long-horizon skeleton of a training plan.

    The plan holds phases and weekly targets only; day-level workouts come
    from WindowExpander, a few weeks at a time.
    """

    def __init__(self):
        self.phase_builder = PhaseBuilder()
        self.target_calculator = WeeklyTargetCalculator()

    def create_master_plan(
        self,
        request: MasterPlanRequest,
        today: Optional[date] = None,
    ) -> MasterPlan:
        """
        Create a master plan for one athlete and one goal race.

        Args:
            request: Goal race, current fitness and preferences
            today: Reference date; the plan starts on the Monday of its week

        Returns:
            A new MasterPlan

        Raises:
            InsufficientPlanDurationError: fewer than 8 weeks until race day
        """
        return self._build(
            request,
            today=today,
            current_mileage=request.current_weekly_mileage,
            peak_mileage=self.default_peak_mileage(request),
        )

    def regenerate_master_plan(
        self,
        previous: MasterPlan,
        request: MasterPlanRequest,
        decision: RegenerationDecision,
        today: Optional[date] = None,
    ) -> MasterPlan:
        """
        Rebuild a plan from the current week with revised parameters.

        - missed weeks: peak target lowered by 10%
        - injury: 2-week recovery phase ahead of base
        - fitness deviation: peak scaled by the observed ratio (clamped to
          +/-30%), progression restarts from the observed mileage

        The previous plan is left untouched; the new one supersedes it.
        """
        current_mileage = request.current_weekly_mileage
        peak_mileage = self.default_peak_mileage(request)
        recovery_weeks = 0

        if RegenerationTrigger.MISSED_WEEKS in decision.triggers:
            peak_mileage *= MISSED_WEEKS_PEAK_FACTOR

        if RegenerationTrigger.INJURY in decision.triggers:
            recovery_weeks = INJURY_RECOVERY_WEEKS

        if (
            RegenerationTrigger.FITNESS_DEVIATION in decision.triggers
            and decision.fitness_change is not None
        ):
            change = max(-FITNESS_DEVIATION_LIMIT, min(FITNESS_DEVIATION_LIMIT, decision.fitness_change))
            peak_mileage *= 1 + change
            current_mileage = previous.phases[0].weekly_mileage_target * (1 + decision.fitness_change)

        logger.info(
            f"Regenerating plan {previous.id}: {decision.reason} "
            f"(peak={peak_mileage:.1f}, current={current_mileage:.1f}, recovery_weeks={recovery_weeks})",
            extra=log_fields(plan_id=previous.id, profile_id=previous.profile_id),
        )

        return self._build(
            request,
            today=today,
            current_mileage=current_mileage,
            peak_mileage=peak_mileage,
            recovery_weeks=recovery_weeks,
            supersedes_id=previous.id,
        )

    @staticmethod
    def default_peak_mileage(request: MasterPlanRequest) -> float:
        """Explicit peak target, else current mileage scaled by aggressiveness."""
        if request.peak_mileage_target:
            return float(request.peak_mileage_target)
        multiplier = ConfigService.get_peak_multiplier(request.preferences.aggressiveness.value)
        return request.current_weekly_mileage * multiplier

    def _build(
        self,
        request: MasterPlanRequest,
        today: Optional[date],
        current_mileage: float,
        peak_mileage: float,
        recovery_weeks: int = 0,
        supersedes_id: Optional[uuid.UUID] = None,
    ) -> MasterPlan:
        today = today or date.today()
        plan_start = start_of_week(today)
        race_date = request.goal_race_date
        distance = request.goal_race_distance

        phases = self.phase_builder.build_phases(
            plan_start=plan_start,
            race_date=race_date,
            distance=distance,
            aggressiveness=request.preferences.aggressiveness.value,
            recovery_weeks=recovery_weeks,
        )

        weekly_targets = self.target_calculator.calculate(
            phases=phases,
            current_mileage=current_mileage,
            peak_mileage=peak_mileage,
            distance=distance,
        )
        phases = self.target_calculator.annotate_phases(phases, weekly_targets)

        plan = MasterPlan(
            id=uuid.uuid4(),
            profile_id=request.profile_id,
            goal_race_id=request.goal_race_id,
            name=plan_name(distance, race_date),
            race_distance=distance,
            start_date=plan_start,
            end_date=race_date,
            phases=phases,
            weekly_targets=weekly_targets,
            created_at=datetime.now(timezone.utc),
            supersedes_id=supersedes_id,
        )

        logger.info(
            f"Created master plan {plan.id} '{plan.name}': {len(phases)} phases, "
            f"{plan.total_weeks} weeks, peak {peak_mileage:.1f} mi/wk",
            extra=log_fields(plan_id=plan.id, profile_id=plan.profile_id, supersedes_id=supersedes_id),
        )
        return plan
