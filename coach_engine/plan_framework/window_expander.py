"""
Window Expander

Turns the next 2-3 weeks of a master plan into concrete daily workouts:
- Day structure from the athlete's rest, long-run and preferred days
- One template per day from WorkoutSelector
- Daily miles from the week's target, paces adjusted for fatigue and phase
- Coach notes, alternatives and weather tips per workout

The window is recomputed on every request; nothing here is persisted.

Usage:
    expander = WindowExpander(seed=42)
    workouts = expander.expand_window(plan, profile, history, date.today())
"""

import logging
import random
from datetime import date, timedelta
from typing import Dict, List, Optional, Tuple

from coach_engine.core.config import settings
from coach_engine.core.logging import log_fields

from .config import ConfigService
from .constants import WEEKDAY_NAMES, Phase, WorkoutType
from .models import DetailedWorkout, MasterPlan, RecentHistory, UserProfile, WeeklyTarget
from .pace_engine import PaceAdjuster
from .performance_adjuster import PerformanceAdjuster
from .volume_progression import round_miles
from .week_structure import plan_week_structure
from .workout_library import WorkoutLibrary, load_workout_library
from .workout_selector import WorkoutSelector

logger = logging.getLogger(__name__)

ALLOWED_WINDOW_WEEKS = (2, 3)

WORKOUT_PURPOSES: Dict[str, str] = {
    WorkoutType.EASY.value: "Aerobic development and recovery",
    WorkoutType.TEMPO.value: "Lactate threshold improvement",
    WorkoutType.INTERVAL.value: "VO2max and speed development",
    WorkoutType.LONG_RUN.value: "Endurance and mental toughness",
    WorkoutType.RECOVERY.value: "Active recovery and blood flow",
    WorkoutType.RACE_PACE.value: "Race pace familiarity and confidence",
}

WEATHER_CONSIDERATIONS: Dict[str, str] = {
    WorkoutType.TEMPO.value: "Add 5-10 sec/mile in heat, 5 sec/mile in strong wind",
    WorkoutType.INTERVAL.value: "Move indoors if conditions are extreme",
    WorkoutType.LONG_RUN.value: "Start earlier in summer, carry hydration",
    WorkoutType.EASY.value: "Perfect for any weather - adjust pace as needed",
}
HEAT_NOTE = "Heat hits you hard - run early or late on hot days and slow down without guilt"

DEFAULT_ALTERNATIVES = ["Easy run", "Cross-training"]
REST_ALTERNATIVES = ["30 min easy bike", "20 min swim", "Yoga session"]


def format_number(value: float) -> str:
    """52.0 -> "52", 13.5 -> "13.5"."""
    return f"{value:g}"


def calculate_daily_mileage(
    workout_type: str,
    week: WeeklyTarget,
) -> Tuple[float, Dict[str, float]]:
    """
    Miles for one day of a week, plus the whole per-type distribution.

    long_run takes the week's long run; other types take their share of the
    weekly total, rounded to whole miles. Unknown types get the easy share.
    """
    distribution: Dict[str, float] = {WorkoutType.LONG_RUN.value: week.long_run_miles}
    for key, share in ConfigService.get_daily_allocation().items():
        distribution[key] = round_miles(week.total_miles * share)

    miles = distribution.get(workout_type, distribution[WorkoutType.EASY.value])
    return miles, distribution


def estimate_duration(miles: float, workout_type: str) -> int:
    """Minutes: miles at the type's typical pace, plus warmup/cooldown for anything but easy."""
    base = miles * ConfigService.get_minutes_per_mile(workout_type)
    extra = 0 if workout_type == WorkoutType.EASY.value else ConfigService.get_warmup_cooldown_minutes()
    return round_miles(base + extra)


class WindowExpander:
    """
    Expand a master plan window into DetailedWorkout objects.

    Pass `seed` (or set TEMPLATE_SELECTION_SEED) to make template choice
    repeatable: each call draws from its own Random(seed), so expanding the
    same window twice gives the same workouts, also from parallel threads.
    """

    def __init__(
        self,
        library: Optional[WorkoutLibrary] = None,
        selector: Optional[WorkoutSelector] = None,
        pace_adjuster: Optional[PaceAdjuster] = None,
        performance_adjuster: Optional[PerformanceAdjuster] = None,
        seed: Optional[int] = None,
        deterministic: bool = False,
    ):
        self.library = library or load_workout_library()
        self.selector = selector or WorkoutSelector(self.library, deterministic=deterministic)
        self.pace_adjuster = pace_adjuster or PaceAdjuster()
        self.performance_adjuster = performance_adjuster or PerformanceAdjuster()
        self.seed = seed if seed is not None else settings.TEMPLATE_SELECTION_SEED

    def expand_window(
        self,
        master_plan: MasterPlan,
        profile: UserProfile,
        history: RecentHistory,
        current_date: date,
        window_weeks: Optional[int] = None,
    ) -> List[DetailedWorkout]:
        """
        Build daily workouts for plan weeks starting in the window.

        Args:
            master_plan: Plan to expand
            profile: Athlete profile (paces, days, comfort levels)
            history: Recent workouts and training load
            current_date: First day of the window
            window_weeks: 2 or 3 (defaults to DEFAULT_WINDOW_WEEKS)

        Returns:
            Seven workouts per selected week, in date order

        Raises:
            ValueError: window_weeks outside 2..3
        """
        if window_weeks is None:
            window_weeks = settings.DEFAULT_WINDOW_WEEKS
        if window_weeks not in ALLOWED_WINDOW_WEEKS:
            raise ValueError(f"window_weeks must be 2 or 3, got {window_weeks}")

        rng = random.Random(self.seed) if self.seed is not None else None

        window_end = current_date + timedelta(weeks=window_weeks)
        weeks = [
            t for t in master_plan.weekly_targets
            if current_date <= t.week_start_date < window_end
        ]

        workouts: List[DetailedWorkout] = []
        for week in weeks:
            phase = master_plan.get_phase_for_date(week.week_start_date).name
            structure = plan_week_structure(week, profile, phase)

            for offset in range(7):
                day = week.week_start_date + timedelta(days=offset)
                day_name = WEEKDAY_NAMES[day.weekday()]
                workout_type = structure[day_name]

                if workout_type == WorkoutType.REST.value:
                    workouts.append(self.create_rest_day(day, day_name))
                else:
                    workouts.append(self.create_workout(
                        day, day_name, workout_type, week, phase, profile, history, rng=rng,
                    ))

        logger.info(
            f"Expanded {len(weeks)} weeks ({len(workouts)} workouts) of plan {master_plan.id} "
            f"from {current_date.isoformat()}",
            extra=log_fields(plan_id=master_plan.id, profile_id=master_plan.profile_id),
        )
        return self.performance_adjuster.apply(workouts, history)

    def create_workout(
        self,
        day: date,
        day_name: str,
        workout_type: str,
        week: WeeklyTarget,
        phase: Phase,
        profile: UserProfile,
        history: RecentHistory,
        rng: Optional[random.Random] = None,
    ) -> DetailedWorkout:
        template = self.selector.select(workout_type, profile, phase, history, rng=rng)
        miles, _distribution = calculate_daily_mileage(workout_type, week)
        paces = self.pace_adjuster.target_paces(profile.paces, history.tsb, phase)

        context = dict(paces)
        context.update(
            phase=phase.value,
            vdot=format_number(profile.vdot),
            miles=format_number(miles),
        )

        return DetailedWorkout(
            date=day,
            day_of_week=day_name,
            workout_type=workout_type,
            name=template.name,
            description=template.render_description(context),
            structure=template.structure,
            warmup=template.render_warmup(context),
            main_set=template.render_main_set(context),
            cooldown=template.render_cooldown(context),
            target_paces=paces,
            estimated_minutes=estimate_duration(miles, workout_type),
            total_miles=miles,
            purpose=template.purpose or WORKOUT_PURPOSES.get(workout_type, "General fitness"),
            coach_notes=self.coach_notes(workout_type, history, profile, phase),
            alternatives=self.alternatives(workout_type, miles),
            weather_considerations=self.weather_considerations(workout_type, profile),
        )

    @staticmethod
    def create_rest_day(day: date, day_name: str) -> DetailedWorkout:
        return DetailedWorkout(
            date=day,
            day_of_week=day_name,
            workout_type=WorkoutType.REST.value,
            name="Rest Day",
            description="Complete rest or light cross-training",
            structure="No running",
            warmup="",
            main_set="",
            cooldown="",
            target_paces={},
            estimated_minutes=0,
            total_miles=0,
            purpose="Recovery and adaptation",
            coach_notes="Listen to your body. Light yoga or walking is fine if you feel good.",
            alternatives=list(REST_ALTERNATIVES),
        )

    @staticmethod
    def coach_notes(
        workout_type: str,
        history: RecentHistory,
        profile: UserProfile,
        phase: Phase,
    ) -> str:
        notes = []

        if history.tsb < -15:
            notes.append("You're carrying fatigue - OK to dial back the pace if needed")

        if phase == Phase.BASE and workout_type == WorkoutType.TEMPO.value:
            notes.append("Keep the effort controlled - this is about time at threshold, not speed")

        comfort = profile.comfort_levels
        if workout_type == WorkoutType.INTERVAL.value and comfort and comfort.track == "intimidated":
            notes.append("You can do this workout on the road if the track feels intimidating")

        if profile.injury_history and workout_type in (
            WorkoutType.LONG_RUN.value,
            WorkoutType.INTERVAL.value,
        ):
            notes.append(
                f"Mind your history ({', '.join(profile.injury_history)}) - "
                "stop if anything flares up"
            )

        return ". ".join(notes)

    @staticmethod
    def alternatives(workout_type: str, miles: float) -> List[str]:
        if workout_type == WorkoutType.TEMPO.value:
            return [
                f"{format_number(miles)} miles progression run",
                f"{round_miles(miles * 0.8)} miles at tempo + strides",
                "Fartlek with similar time at threshold",
            ]
        if workout_type == WorkoutType.INTERVAL.value:
            return [
                "Tempo run if legs feel heavy",
                "Hill repeats for similar stimulus",
                "Fartlek with hard/easy segments",
            ]
        if workout_type == WorkoutType.LONG_RUN.value:
            return [
                f"{round_miles(miles * 0.8)} miles if time constrained",
                "Split into AM/PM if needed",
                "Trail run for softer surface",
            ]
        return list(DEFAULT_ALTERNATIVES)

    @staticmethod
    def weather_considerations(workout_type: str, profile: UserProfile) -> Optional[str]:
        parts = []
        if workout_type in WEATHER_CONSIDERATIONS:
            parts.append(WEATHER_CONSIDERATIONS[workout_type])
        if profile.comfort_levels and profile.comfort_levels.heat == "struggle":
            parts.append(HEAT_NOTE)
        return ". ".join(parts) or None
