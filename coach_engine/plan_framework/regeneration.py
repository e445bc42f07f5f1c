"""
Regeneration Policy

Decides whether a master plan has drifted far enough from reality to be
rebuilt. The decision is pure: callers own persistence and scheduling and
pass the decision to MasterPlanGenerator.regenerate_master_plan().
"""

import logging
from dataclasses import dataclass, field
from enum import Enum
from typing import Any, Dict, List, Optional

from pydantic import BaseModel, Field

from coach_engine.core.logging import log_fields

from .constants import FITNESS_DEVIATION_LIMIT, MISSED_WEEKS_LIMIT
from .models import HistoryWorkout, MasterPlan

logger = logging.getLogger(__name__)


class RegenerationTrigger(str, Enum):
    MISSED_WEEKS = "missed_weeks"
    INJURY = "injury"
    FITNESS_DEVIATION = "fitness_deviation"


class RegenerationState(BaseModel):
    """
    Where the athlete actually is, compared against the plan.

    recent_workouts is accepted for callers that send their full state; the
    decision reads only current_fitness, injuries and missed_weeks.
    """

    recent_workouts: List[HistoryWorkout] = Field(default_factory=list)
    current_fitness: float = Field(default=0.0, ge=0)  # Current weekly mileage
    injuries: List[str] = Field(default_factory=list)
    missed_weeks: int = Field(default=0, ge=0)


@dataclass
class RegenerationDecision:
    needs_update: bool
    reason: str
    suggested_changes: List[str] = field(default_factory=list)
    triggers: List[RegenerationTrigger] = field(default_factory=list)
    # (current - planned) / planned; None when no comparison was possible
    fitness_change: Optional[float] = None

    def to_dict(self) -> Dict[str, Any]:
        return {
            "needs_update": self.needs_update,
            "reason": self.reason,
            "suggested_changes": list(self.suggested_changes),
            "triggers": [t.value for t in self.triggers],
            "fitness_change": self.fitness_change,
        }


def evaluate_regeneration(
    master_plan: MasterPlan,
    state: RegenerationState,
) -> RegenerationDecision:
    """
    Check a plan against the athlete's current state.

    Rules, checked in order (the reason reported is the last rule that fired):
    - more than 2 missed weeks
    - any active injury
    - current weekly mileage more than 30% away from the first phase's target

    Returns:
        RegenerationDecision; needs_update is False when no rule fired
    """
    suggested: List[str] = []
    triggers: List[RegenerationTrigger] = []
    reason = ""

    if state.missed_weeks > MISSED_WEEKS_LIMIT:
        triggers.append(RegenerationTrigger.MISSED_WEEKS)
        reason = "Significant training interruption"
        suggested.append("Adjust timeline to account for missed training")
        suggested.append("Consider reducing peak mileage target")

    if state.injuries:
        triggers.append(RegenerationTrigger.INJURY)
        reason = "Active injury requires plan modification"
        suggested.append("Add recovery phase")
        suggested.append("Modify workout types to avoid aggravation")

    fitness_change = None
    baseline = master_plan.phases[0].weekly_mileage_target if master_plan.phases else 0
    if baseline:
        fitness_change = (state.current_fitness - baseline) / baseline
        if abs(fitness_change) > FITNESS_DEVIATION_LIMIT:
            triggers.append(RegenerationTrigger.FITNESS_DEVIATION)
            if fitness_change > 0:
                reason = "Fitness improving faster than expected"
                suggested.append("Increase targets")
            else:
                reason = "Fitness not progressing as planned"
                suggested.append("Reduce targets")

    decision = RegenerationDecision(
        needs_update=bool(triggers),
        reason=reason,
        suggested_changes=suggested,
        triggers=triggers,
        fitness_change=fitness_change,
    )
    if decision.needs_update:
        logger.info(
            f"Plan {master_plan.id} needs regeneration: {reason} "
            f"(triggers={[t.value for t in triggers]})",
            extra=log_fields(plan_id=master_plan.id, profile_id=master_plan.profile_id),
        )
    return decision
