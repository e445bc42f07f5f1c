"""
Performance Adjuster

Softens hard sessions in a freshly expanded window when the athlete has
been struggling: two or more "struggled" verdicts in the last five logged
workouts add a conservative note and an easier alternative to every
interval and tempo workout.
"""

import logging
from dataclasses import replace
from typing import List

from .constants import STRUGGLE_LOOKBACK, STRUGGLE_THRESHOLD, STRUGGLE_TYPES
from .models import DetailedWorkout, RecentHistory

logger = logging.getLogger(__name__)

STRUGGLE_NOTE = "Recent struggles noted - start conservative and build into the workout"
STRUGGLE_ALTERNATIVE = "Easy run + strides if not feeling it"


class PerformanceAdjuster:

    def is_struggling(self, history: RecentHistory) -> bool:
        recent = history.most_recent(STRUGGLE_LOOKBACK)
        return sum(1 for w in recent if w.verdict == "struggled") >= STRUGGLE_THRESHOLD

    def apply(
        self,
        workouts: List[DetailedWorkout],
        history: RecentHistory,
    ) -> List[DetailedWorkout]:
        """Return adjusted copies; the input workouts are left as they were."""
        if not self.is_struggling(history):
            return list(workouts)

        adjusted = []
        for workout in workouts:
            if workout.workout_type in STRUGGLE_TYPES:
                notes = f"{workout.coach_notes}. {STRUGGLE_NOTE}" if workout.coach_notes else STRUGGLE_NOTE
                workout = replace(
                    workout,
                    coach_notes=notes,
                    alternatives=[STRUGGLE_ALTERNATIVE] + list(workout.alternatives),
                )
            adjusted.append(workout)

        logger.info("Recent struggles detected, softened interval/tempo sessions")
        return adjusted
