"""
Workout Template Selector

Picks one template for a day's workout type.

Filters, in order:
1. Level: beginner templates are skipped for VDOT > 50, advanced for VDOT < 45
2. Phase: templates that name phases must include the current one
3. Variance: drop templates whose specific_type was logged in the last
   seven workouts (easy runs don't count)

When variance empties the pool the phase-filtered set is used; when the
phase filter already left nothing, the type's full list is used.
"""

import logging
import random
from typing import List, Optional

from .config import ConfigService
from .constants import RECENT_WORKOUT_LOOKBACK, Phase, WorkoutType
from .models import RecentHistory, UserProfile
from .workout_library import WorkoutLibrary, WorkoutTemplate

logger = logging.getLogger(__name__)


class WorkoutSelector:
    """
    Template selector with an injectable random source.

    deterministic=True always takes the candidate with the lowest name,
    which keeps snapshot-style tests stable without seeding.
    """

    def __init__(
        self,
        library: WorkoutLibrary,
        rng: Optional[random.Random] = None,
        deterministic: bool = False,
    ):
        self.library = library
        self.deterministic = deterministic
        self._random = rng or random.Random()

    def seed_random(self, seed: int):
        """Seed the random generator for reproducible selection."""
        self._random = random.Random(seed)

    def select(
        self,
        workout_type: str,
        profile: UserProfile,
        phase: Phase,
        history: RecentHistory,
        rng: Optional[random.Random] = None,
    ) -> WorkoutTemplate:
        """
        Select a template for a workout type.

        Args:
            workout_type: Day-level type (tempo, interval, long_run, ...)
            profile: Athlete profile (VDOT drives the level filter)
            phase: Current training phase
            history: Recent workouts for repeat avoidance
            rng: Random source for this call (defaults to the selector's own)

        Returns:
            The chosen WorkoutTemplate
        """
        templates = self.library.get_workouts(workout_type)

        appropriate = [
            t for t in templates
            if self._level_ok(t, profile.vdot) and t.applies_to_phase(phase)
        ]

        recent_types = self.recent_types(history)
        novel = [t for t in appropriate if t.specific_type not in recent_types]

        if novel:
            candidates = novel
        elif appropriate:
            logger.debug(f"All {workout_type} templates used recently, allowing repeats")
            candidates = appropriate
        else:
            logger.debug(f"No {workout_type} template fits level/phase, using full list")
            candidates = list(templates)

        if self.deterministic:
            return min(candidates, key=lambda t: t.name)
        return (rng or self._random).choice(candidates)

    @staticmethod
    def recent_types(history: RecentHistory) -> List[str]:
        """Workout types from the most recent logged workouts, easy runs excluded."""
        return [
            w.type for w in history.most_recent(RECENT_WORKOUT_LOOKBACK)
            if w.type != WorkoutType.EASY.value
        ]

    @staticmethod
    def _level_ok(template: WorkoutTemplate, vdot: float) -> bool:
        limits = ConfigService.get_level_limits()
        if template.level == "beginner" and vdot > limits["beginner_max_vdot"]:
            return False
        if template.level == "advanced" and vdot < limits["advanced_min_vdot"]:
            return False
        return True
