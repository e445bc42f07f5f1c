"""
Phase Builder

Constructs the periodized phase sequence based on:
- Goal distance (per-distance fraction tables)
- Weeks available between plan start and race day

Usage:
    builder = PhaseBuilder()
    phases = builder.build_phases(
        plan_start=date(2025, 1, 6),
        race_date=date(2025, 4, 27),
        distance="marathon",
    )
"""

import logging
import math
from datetime import date, timedelta
from typing import Any, Dict, List

from coach_engine.core.exceptions import InsufficientPlanDurationError

from .config import ConfigService
from .constants import Aggressiveness, Phase
from .models import TrainingPhase

logger = logging.getLogger(__name__)

PHASE_ORDER = [Phase.BASE, Phase.BUILD, Phase.PEAK, Phase.TAPER]


def weeks_between(start: date, end: date) -> int:
    """Whole weeks from start to end, truncated."""
    return (end - start).days // 7


def start_of_week(day: date) -> date:
    """Monday of the week containing `day`."""
    return day - timedelta(days=day.weekday())


class PhaseBuilder:
    """
    Split the weeks before race day into base → build → peak → taper.

    Fractions come from the per-distance table; every non-base phase is
    floored (or rounded up / fixed where the table says so) and base
    absorbs whatever is left, so phase weeks always sum to the plan length.
    """

    def build_phases(
        self,
        plan_start: date,
        race_date: date,
        distance: str,
        aggressiveness: str = Aggressiveness.MODERATE.value,
        recovery_weeks: int = 0,
    ) -> List[TrainingPhase]:
        """
        Build phase structure for a plan.

        Args:
            plan_start: Monday the plan starts on
            race_date: Goal race day (last day of the final phase)
            distance: Goal race distance; unknown values use the half marathon table
            aggressiveness: Accepted for the planner contract; the phase split
                            itself does not depend on it
            recovery_weeks: Weeks of recovery placed ahead of base. Only plan
                            regeneration after an injury asks for these.

        Returns:
            Ordered, contiguous list of TrainingPhase objects

        Raises:
            InsufficientPlanDurationError: fewer than the minimum plan weeks
        """
        total_weeks = weeks_between(plan_start, race_date)
        minimum = ConfigService.get_min_plan_weeks()
        if total_weeks < minimum:
            raise InsufficientPlanDurationError(total_weeks, minimum)

        week_counts = self.allocate_weeks(distance, total_weeks, recovery_weeks)
        table = ConfigService.get_phase_distribution(distance)
        recovery_config = ConfigService.get_recovery_phase()

        phases: List[TrainingPhase] = []
        current = plan_start
        for phase_name, weeks in week_counts:
            if weeks <= 0:
                continue
            config = recovery_config if phase_name == Phase.RECOVERY else table[phase_name.value]
            end = current + timedelta(weeks=weeks) - timedelta(days=1)
            phases.append(TrainingPhase(
                name=phase_name,
                start_date=current,
                end_date=end,
                weeks=weeks,
                focus=config.get("focus", ""),
                description=config.get("description"),
            ))
            current = end + timedelta(days=1)

        # Last phase runs through race day, even when the race is mid-week
        phases[-1].end_date = race_date

        logger.debug(
            f"Built {len(phases)} phases for {distance} over {total_weeks} weeks: "
            + ", ".join(f"{p.name.value}={p.weeks}" for p in phases)
        )
        return phases

    def allocate_weeks(
        self,
        distance: str,
        total_weeks: int,
        recovery_weeks: int = 0,
    ) -> List[tuple]:
        """
        Week count per phase, in order, summing to total_weeks.

        Returns:
            List of (Phase, weeks) tuples
        """
        table = ConfigService.get_phase_distribution(distance)
        recovery_weeks = max(0, min(recovery_weeks, total_weeks))
        available = total_weeks - recovery_weeks

        counts: Dict[Phase, int] = {}
        for phase_name in PHASE_ORDER[1:]:
            counts[phase_name] = self._phase_weeks(table.get(phase_name.value, {}), available)

        counts[Phase.BASE] = available - sum(counts.values())
        if counts[Phase.BASE] < 0:
            # Fixed taper on a very short remaining block: trim from the back
            # of the sequence until base is no longer negative
            for phase_name in (Phase.PEAK, Phase.BUILD, Phase.TAPER):
                deficit = -counts[Phase.BASE]
                if deficit <= 0:
                    break
                taken = min(deficit, counts[phase_name])
                counts[phase_name] -= taken
                counts[Phase.BASE] += taken

        allocation = [(Phase.RECOVERY, recovery_weeks)] if recovery_weeks else []
        allocation.extend((phase_name, counts[phase_name]) for phase_name in PHASE_ORDER)
        return allocation

    @staticmethod
    def _phase_weeks(config: Dict[str, Any], total_weeks: int) -> int:
        if "weeks" in config:
            return int(config["weeks"])
        raw = total_weeks * float(config.get("fraction", 0))
        # Guard against float noise (0.35 * 20 = 7.000000000000001)
        raw = round(raw, 9)
        if config.get("rounding") == "ceil":
            return math.ceil(raw)
        return math.floor(raw)
