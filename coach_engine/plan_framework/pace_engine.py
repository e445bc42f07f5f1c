"""
Pace Engine

Adjusts an athlete's VDOT pace table for the day's context:
- Accumulated fatigue (TSB) slows every pace
- Base phase keeps threshold and interval work a touch easier

Usage:
    adjuster = PaceAdjuster()
    paces = adjuster.target_paces(profile.paces, history.tsb, Phase.BUILD)
    paces["threshold"]  # "7:05"
"""

from typing import Dict

from .config import ConfigService
from .constants import Phase


def pace_to_seconds(pace: str) -> int:
    """Parse "m:ss" (per mile) into seconds."""
    minutes, seconds = pace.split(":")
    return int(minutes) * 60 + int(seconds)


def format_pace(seconds_per_mile: int) -> str:
    """Format pace as m:ss."""
    minutes = seconds_per_mile // 60
    seconds = seconds_per_mile % 60
    return f"{minutes}:{seconds:02d}"


def adjust_pace(pace: str, seconds_per_mile: int) -> str:
    """Slow (positive) or quicken (negative) a pace string."""
    return format_pace(pace_to_seconds(pace) + seconds_per_mile)


class PaceAdjuster:
    """
    Turn the profile's pace table into the day's target paces.

    Rules come from plan_rules.pace_adjustments:
    - tsb_rules: first rule whose `below` is above the TSB applies to every pace
    - phase_extra: per-phase seconds added to named paces
    """

    def target_paces(
        self,
        paces,
        tsb: float,
        phase: Phase,
    ) -> Dict[str, str]:
        """
        Args:
            paces: PaceTable or a dict of pace name -> "m:ss"
            tsb: Training Stress Balance from recent history
            phase: Current training phase

        Returns:
            New dict of pace name -> "m:ss"; the input is not modified
        """
        adjusted = dict(paces.as_dict() if hasattr(paces, "as_dict") else paces)
        rules = ConfigService.get_pace_adjustments()

        fatigue_seconds = self.fatigue_adjustment(tsb, rules.get("tsb_rules", []))
        if fatigue_seconds:
            adjusted = {key: adjust_pace(value, fatigue_seconds) for key, value in adjusted.items()}

        phase_key = phase.value if isinstance(phase, Phase) else str(phase)
        for key, seconds in rules.get("phase_extra", {}).get(phase_key, {}).items():
            if key in adjusted:
                adjusted[key] = adjust_pace(adjusted[key], int(seconds))

        return adjusted

    @staticmethod
    def fatigue_adjustment(tsb: float, tsb_rules) -> int:
        """Seconds per mile to add for the current TSB (0 when fresh enough)."""
        for rule in tsb_rules:
            if tsb < rule["below"]:
                return int(rule["seconds"])
        return 0
