"""
Week Structure

Assigns a workout type to each day name of a plan week:
rest days, the long run, one or two quality days, and easy running
everywhere else.
"""

import logging
from typing import Dict, List

from .config import ConfigService
from .constants import WEEKDAY_NAMES, Phase, WorkoutType
from .models import UserProfile, WeeklyTarget

logger = logging.getLogger(__name__)


def select_quality_days(
    preferred_days: List[str],
    occupied: List[str],
    count: int,
) -> List[str]:
    """
    Pick up to `count` quality days.

    Preferred days come first (minus rest/long-run days); the list is topped
    up from the fallback order (Tuesday, Thursday, Wednesday) without
    repeating a day.
    """
    days: List[str] = []
    for day in list(preferred_days) + ConfigService.get_quality_day_fallbacks():
        if len(days) >= count:
            break
        if day in occupied or day in days:
            continue
        days.append(day)
    return days


def plan_week_structure(
    week: WeeklyTarget,
    profile: UserProfile,
    phase: Phase,
) -> Dict[str, str]:
    """
    Map every day name (Monday..Sunday) to a workout type for one week.

    Rest days always stay rest. When the long-run day is also a rest day,
    the long run moves to the latest non-rest day of the week.
    """
    rest_days = list(profile.rest_days)
    structure: Dict[str, str] = {day: WorkoutType.REST.value for day in rest_days}

    long_run_day = profile.long_run_day
    if long_run_day in rest_days:
        open_days = [d for d in WEEKDAY_NAMES if d not in rest_days]
        if open_days:
            logger.debug(f"Long run day {long_run_day} is a rest day, moving to {open_days[-1]}")
            long_run_day = open_days[-1]
        else:
            long_run_day = None
    if long_run_day:
        structure[long_run_day] = WorkoutType.LONG_RUN.value

    phase_key = phase.value if isinstance(phase, Phase) else str(phase)
    quality_types = ConfigService.get_quality_workouts(phase_key)
    quality_days = select_quality_days(
        profile.preferred_days,
        occupied=list(structure.keys()),
        count=min(week.quality_sessions, len(quality_types)),
    )
    for day, workout_type in zip(quality_days, quality_types):
        structure[day] = workout_type

    for day in WEEKDAY_NAMES:
        structure.setdefault(day, WorkoutType.EASY.value)

    return structure
