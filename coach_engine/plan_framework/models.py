"""
Engine value objects.

Inputs (athlete profile, recent history, plan request) are pydantic models
validated at the boundary; the engine trusts them afterwards.
Outputs (phases, weekly targets, master plan, detailed workouts) are plain
dataclasses with to_dict() for whoever persists or renders them.
"""

from dataclasses import dataclass, field
from datetime import date, datetime
from typing import Any, Dict, List, Optional, Union
from uuid import UUID

from pydantic import BaseModel, ConfigDict, Field, field_validator

from .constants import Aggressiveness, Phase, WEEKDAY_NAMES

PACE_PATTERN = r"^\d{1,2}:[0-5]\d$"


def _normalize_day(value: str) -> str:
    day = str(value).strip().capitalize()
    if day not in WEEKDAY_NAMES:
        raise ValueError(f"Unknown day name: {value!r}")
    return day


# =============================================================================
# INPUTS
# =============================================================================

class PaceTable(BaseModel):
    """Training paces as m:ss per mile, anchored to the athlete's VDOT."""
    model_config = ConfigDict(frozen=True)

    easy: str = Field(..., pattern=PACE_PATTERN)
    marathon: str = Field(..., pattern=PACE_PATTERN)
    threshold: str = Field(..., pattern=PACE_PATTERN)
    interval: str = Field(..., pattern=PACE_PATTERN)
    repetition: str = Field(..., pattern=PACE_PATTERN)

    def as_dict(self) -> Dict[str, str]:
        return self.model_dump()


class ComfortLevels(BaseModel):
    model_config = ConfigDict(frozen=True)

    hills: Optional[str] = Field(default=None, pattern=r"^(avoid|moderate|love)$")
    heat: Optional[str] = Field(default=None, pattern=r"^(struggle|manage|thrive)$")
    track: Optional[str] = Field(default=None, pattern=r"^(intimidated|comfortable|love)$")


class UserProfile(BaseModel):
    """Athlete snapshot the window expander works from."""
    model_config = ConfigDict(frozen=True)

    vdot: float = Field(..., gt=0)
    paces: PaceTable
    preferred_days: List[str] = Field(default_factory=lambda: ["Tuesday", "Thursday"])
    rest_days: List[str] = Field(default_factory=lambda: ["Sunday"])
    long_run_day: str = "Saturday"
    current_mileage: float = Field(default=0.0, ge=0)
    injury_history: List[str] = Field(default_factory=list)
    comfort_levels: Optional[ComfortLevels] = None

    @field_validator("preferred_days", "rest_days")
    @classmethod
    def validate_days(cls, v):
        days = []
        for day in v:
            day = _normalize_day(day)
            if day not in days:
                days.append(day)
        return days

    @field_validator("long_run_day")
    @classmethod
    def validate_long_run_day(cls, v):
        return _normalize_day(v)


class HistoryWorkout(BaseModel):
    """A logged workout from recent training."""
    model_config = ConfigDict(frozen=True)

    date: date
    type: str
    distance: float = Field(default=0.0, ge=0)
    avg_pace: Optional[str] = None
    verdict: Optional[str] = None
    rpe: Optional[int] = Field(default=None, ge=1, le=10)


class Assessment(BaseModel):
    """Daily readiness check-in."""
    model_config = ConfigDict(frozen=True)

    date: date
    sleep: int = Field(..., ge=1, le=10)
    stress: int = Field(..., ge=1, le=10)
    soreness: int = Field(..., ge=1, le=10)
    motivation: int = Field(..., ge=1, le=10)


class RecentHistory(BaseModel):
    """Recent training plus chronic/acute load and their balance."""
    model_config = ConfigDict(frozen=True)

    workouts: List[HistoryWorkout] = Field(default_factory=list)
    assessments: List[Assessment] = Field(default_factory=list)
    ctl: float = 0.0  # Chronic Training Load
    atl: float = 0.0  # Acute Training Load
    tsb: float = 0.0  # Training Stress Balance

    def most_recent(self, count: int) -> List[HistoryWorkout]:
        """The last `count` workouts in date order (oldest first)."""
        ordered = sorted(self.workouts, key=lambda w: w.date)
        return ordered[-count:] if count > 0 else []


class PlanPreferences(BaseModel):
    """
    Plan-level preferences.

    Only aggressiveness shapes the master plan. injury_history, preferred_days
    and rest_days are accepted so callers can send their stored preferences
    unchanged; day layout and injury notes come from UserProfile when a
    window is expanded.
    """
    aggressiveness: Aggressiveness = Aggressiveness.MODERATE
    injury_history: List[str] = Field(default_factory=list)
    preferred_days: List[str] = Field(default_factory=list)
    rest_days: List[str] = Field(default_factory=list)


class MasterPlanRequest(BaseModel):
    """
    Everything needed to build a master plan for one goal race.

    current_vdot is validated but does not change the skeleton: volume is
    driven by mileage, and paces come from UserProfile at expansion time.
    """

    profile_id: Union[int, str, UUID]
    goal_race_id: Union[int, str, UUID]
    goal_race_date: date
    goal_race_distance: str
    current_vdot: float = Field(..., gt=0)
    current_weekly_mileage: float = Field(..., ge=0)
    peak_mileage_target: Optional[float] = Field(default=None, gt=0)
    preferences: PlanPreferences = Field(default_factory=PlanPreferences)


# =============================================================================
# OUTPUTS
# =============================================================================

@dataclass
class TrainingPhase:
    """A single training phase. end_date is inclusive."""
    name: Phase
    start_date: date
    end_date: date
    weeks: int
    focus: str
    weekly_mileage_target: float = 0
    description: Optional[str] = None

    def contains(self, day: date) -> bool:
        return self.start_date <= day <= self.end_date

    def to_dict(self) -> Dict[str, Any]:
        return {
            "name": self.name.value,
            "start_date": self.start_date.isoformat(),
            "end_date": self.end_date.isoformat(),
            "weeks": self.weeks,
            "weekly_mileage_target": self.weekly_mileage_target,
            "focus": self.focus,
            "description": self.description,
        }


@dataclass
class WeeklyTarget:
    """Volume and intensity targets for one plan week."""
    week_number: int  # 1-indexed
    week_start_date: date
    total_miles: float
    long_run_miles: float
    quality_sessions: int  # 1 or 2
    cutback_week: bool
    notes: str = ""
    phase: Optional[Phase] = None

    def to_dict(self) -> Dict[str, Any]:
        return {
            "week_number": self.week_number,
            "week_start_date": self.week_start_date.isoformat(),
            "total_miles": self.total_miles,
            "long_run_miles": self.long_run_miles,
            "quality_sessions": self.quality_sessions,
            "cutback_week": self.cutback_week,
            "notes": self.notes,
            "phase": self.phase.value if self.phase else None,
        }


@dataclass
class MasterPlan:
    """Periodized skeleton for one athlete and one goal race."""
    id: UUID
    profile_id: Union[int, str, UUID]
    goal_race_id: Union[int, str, UUID]
    name: str
    race_distance: str
    start_date: date
    end_date: date
    phases: List[TrainingPhase]
    weekly_targets: List[WeeklyTarget]
    created_at: datetime
    supersedes_id: Optional[UUID] = None

    @property
    def total_weeks(self) -> int:
        return len(self.weekly_targets)

    def get_week(self, week_number: int) -> Optional[WeeklyTarget]:
        """Get the target for a specific week."""
        for target in self.weekly_targets:
            if target.week_number == week_number:
                return target
        return None

    def get_phase_for_date(self, day: date) -> TrainingPhase:
        """Phase covering a date; days outside the plan map to the first phase."""
        for phase in self.phases:
            if phase.contains(day):
                return phase
        return self.phases[0]

    def to_dict(self) -> Dict[str, Any]:
        """Convert to dictionary for JSON serialization."""
        return {
            "id": str(self.id),
            "profile_id": str(self.profile_id),
            "goal_race_id": str(self.goal_race_id),
            "name": self.name,
            "race_distance": self.race_distance,
            "start_date": self.start_date.isoformat(),
            "end_date": self.end_date.isoformat(),
            "phases": [p.to_dict() for p in self.phases],
            "weekly_targets": [w.to_dict() for w in self.weekly_targets],
            "created_at": self.created_at.isoformat(),
            "supersedes_id": str(self.supersedes_id) if self.supersedes_id else None,
        }


@dataclass
class DetailedWorkout:
    """A single prescribed day. Recomputed on every window request."""
    date: date
    day_of_week: str
    workout_type: str
    name: str
    description: str
    structure: str
    warmup: str
    main_set: str
    cooldown: str
    target_paces: Dict[str, str]
    estimated_minutes: int
    total_miles: float
    purpose: str
    coach_notes: str
    alternatives: List[str] = field(default_factory=list)
    weather_considerations: Optional[str] = None

    def to_dict(self) -> Dict[str, Any]:
        return {
            "date": self.date.isoformat(),
            "day_of_week": self.day_of_week,
            "workout_type": self.workout_type,
            "name": self.name,
            "description": self.description,
            "structure": self.structure,
            "warmup": self.warmup,
            "main_set": self.main_set,
            "cooldown": self.cooldown,
            "target_paces": dict(self.target_paces),
            "estimated_minutes": self.estimated_minutes,
            "total_miles": self.total_miles,
            "purpose": self.purpose,
            "coach_notes": self.coach_notes,
            "alternatives": list(self.alternatives),
            "weather_considerations": self.weather_considerations,
        }
