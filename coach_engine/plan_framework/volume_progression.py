"""
Weekly Volume Progression

Turns a phase sequence plus current/peak mileage into one WeeklyTarget per
plan week: total miles, long run, quality session count and cutback flag.

Progression by phase (progress = week_in_phase / phase_weeks):
- base:     linear from the entry mileage to 80% of peak
- build:    linear from 80% of peak to peak
- peak:     peak * (0.95 + 0.05 * sin(pi * progress))
- taper:    peak * taper_factor[week_in_phase], clamped to the last factor
- recovery: entry mileage * recovery volume factor
"""

import logging
import math
from dataclasses import replace
from datetime import timedelta
from decimal import Decimal, ROUND_HALF_UP
from typing import List

from .config import ConfigService
from .constants import (
    BASE_TARGET_OF_PEAK,
    PEAK_FLOOR,
    PEAK_UNDULATION,
    Phase,
)
from .models import TrainingPhase, WeeklyTarget

logger = logging.getLogger(__name__)

# Phases whose volume is already reduced; no extra cutback on top
NO_CUTBACK_PHASES = {Phase.TAPER, Phase.RECOVERY}


def round_miles(value: float) -> int:
    """Round half up to whole miles (13.5 -> 14, never banker's rounding)."""
    # round(…, 9) first: 45 * 0.3 is 13.499999999999998 in binary floating point
    return int(Decimal(repr(round(value, 9))).quantize(Decimal("1"), rounding=ROUND_HALF_UP))


class WeeklyTargetCalculator:
    """Compute weekly mileage targets with progression, cutbacks and taper."""

    def calculate(
        self,
        phases: List[TrainingPhase],
        current_mileage: float,
        peak_mileage: float,
        distance: str,
    ) -> List[WeeklyTarget]:
        """
        Build the week-by-week targets for a phase sequence.

        Args:
            phases: Ordered phases from PhaseBuilder
            current_mileage: Athlete's current weekly mileage
            peak_mileage: Weekly mileage the plan peaks at
            distance: Goal race distance (taper factors, long run share)

        Returns:
            WeeklyTarget list, week_number 1..N
        """
        cutback = ConfigService.get_cutback_rules()
        taper_factors = ConfigService.get_taper_factors(distance)
        long_run_fraction = ConfigService.get_long_run_fraction(distance)
        recovery_factor = float(ConfigService.get_recovery_phase().get("volume_factor", 0.6))

        targets: List[WeeklyTarget] = []
        week_number = 1
        # Trend mileage carried across phase boundaries
        running_mileage = float(current_mileage)

        for phase in phases:
            entry_mileage = running_mileage
            for week_in_phase in range(phase.weeks):
                progress = week_in_phase / phase.weeks

                raw = self._week_mileage(
                    phase.name,
                    week_in_phase,
                    progress,
                    entry_mileage,
                    peak_mileage,
                    taper_factors,
                    recovery_factor,
                )

                is_cutback = (
                    week_number % cutback["frequency"] == 0
                    and phase.name not in NO_CUTBACK_PHASES
                )
                total = round_miles(raw * cutback["factor"]) if is_cutback else raw

                targets.append(WeeklyTarget(
                    week_number=week_number,
                    week_start_date=phase.start_date + timedelta(weeks=week_in_phase),
                    total_miles=total,
                    long_run_miles=self.long_run_miles(total, long_run_fraction),
                    quality_sessions=self.quality_sessions(phase.name),
                    cutback_week=is_cutback,
                    notes=self._week_notes(phase.name, week_in_phase, phase.weeks, is_cutback),
                    phase=phase.name,
                ))

                running_mileage = raw
                week_number += 1

        logger.debug(
            f"Weekly targets for {distance}: "
            + ", ".join(str(t.total_miles) for t in targets)
        )
        return targets

    def annotate_phases(
        self,
        phases: List[TrainingPhase],
        targets: List[WeeklyTarget],
    ) -> List[TrainingPhase]:
        """Copy of phases with weekly_mileage_target set to each phase's highest week."""
        annotated = []
        for phase in phases:
            weeks = [t.total_miles for t in targets if t.phase == phase.name]
            annotated.append(replace(phase, weekly_mileage_target=max(weeks) if weeks else 0))
        return annotated

    @staticmethod
    def _week_mileage(
        phase: Phase,
        week_in_phase: int,
        progress: float,
        entry_mileage: float,
        peak_mileage: float,
        taper_factors: tuple,
        recovery_factor: float,
    ) -> int:
        if phase == Phase.BASE:
            # Gradual build from current to 80% of peak
            base_target = peak_mileage * BASE_TARGET_OF_PEAK
            return round_miles(entry_mileage + (base_target - entry_mileage) * progress)

        if phase == Phase.BUILD:
            build_start = peak_mileage * BASE_TARGET_OF_PEAK
            return round_miles(build_start + (peak_mileage - build_start) * progress)

        if phase == Phase.PEAK:
            # Hold peak with slight undulation
            return round_miles(
                peak_mileage * (PEAK_FLOOR + math.sin(progress * math.pi) * PEAK_UNDULATION)
            )

        if phase == Phase.TAPER:
            factor = taper_factors[min(week_in_phase, len(taper_factors) - 1)]
            return round_miles(peak_mileage * factor)

        if phase == Phase.RECOVERY:
            return round_miles(entry_mileage * recovery_factor)

        return round_miles(entry_mileage)

    @staticmethod
    def long_run_miles(total_miles: float, fraction: float) -> float:
        """
        Long run as a share of the week, kept inside the 20-30% band.

        Whole miles when rounding stays in the band, otherwise the band edge
        to 0.1 mile (small weeks, e.g. 6 * 0.25 = 1.5 -> 2 would be 33%).
        """
        if total_miles <= 0:
            return 0
        low, high = ConfigService.get_long_run_band()
        # round(…, 9) keeps 45 * 0.3 at 13.5 rather than 13.499999999999998
        ceiling = round(total_miles * high, 9)
        floor = round(total_miles * low, 9)
        miles: float = round_miles(total_miles * fraction)
        if miles > ceiling:
            miles = math.floor(round(ceiling * 10, 6)) / 10
        elif miles < floor:
            miles = math.ceil(round(floor * 10, 6)) / 10
        return miles

    @staticmethod
    def quality_sessions(phase: Phase) -> int:
        if phase in (Phase.BASE, Phase.TAPER, Phase.RECOVERY):
            return 1
        return 2

    @staticmethod
    def _week_notes(
        phase: Phase,
        week_in_phase: int,
        phase_weeks: int,
        is_cutback: bool,
    ) -> str:
        if is_cutback:
            return "Recovery week - reduced volume"
        if phase == Phase.BASE and week_in_phase == 0:
            return "First week of base building - run by feel"
        if phase == Phase.PEAK and week_in_phase == phase_weeks - 1:
            return "Last hard week before taper"
        if phase == Phase.TAPER and week_in_phase == 0:
            return "Taper begins - maintain intensity, reduce volume"
        if phase == Phase.RECOVERY and week_in_phase == 0:
            return "Easing back in - stop if symptoms return"
        return ""
