"""
Workout Template Schema and Loader

Defines the schema for workout templates and provides loading/validation.
Templates live in workout_library.yaml (loaded through ConfigService) so
coaches can edit them without touching code.

Template text may contain named slots such as {threshold} or {miles}.
Slots are checked against a fixed vocabulary when the library is loaded,
so a typo fails at startup instead of leaking "{treshold}" to an athlete.
"""

import logging
import string
from pathlib import Path
from typing import Any, Dict, List, Mapping, Optional

import yaml
from pydantic import BaseModel, ConfigDict, Field, ValidationError, field_validator

from coach_engine.core.exceptions import TemplateLibraryError

from .config import ConfigService
from .constants import PaceKey, Phase, WorkoutType

logger = logging.getLogger(__name__)

# Slots a template may reference: every pace plus workout context
CONTEXT_SLOTS = ("phase", "vdot", "miles")
ALLOWED_SLOTS = frozenset([p.value for p in PaceKey] + list(CONTEXT_SLOTS))

DEFAULT_WARMUP = "10-15 min easy jog + dynamic stretches"
DEFAULT_COOLDOWN = "10 min easy jog + static stretches"

_formatter = string.Formatter()


# =============================================================================
# SLOT FORMATTER
# =============================================================================

def template_slots(text: str) -> List[str]:
    """
    Slot names referenced by a template string, in order of appearance.

    Raises:
        ValueError: positional/attribute/indexed slots, format specs, unknown names
    """
    slots = []
    try:
        parsed = list(_formatter.parse(text))
    except ValueError as e:
        raise ValueError(f"Malformed template text {text!r}: {e}") from e

    for _literal, name, format_spec, conversion in parsed:
        if name is None:
            continue
        if not name or not name.isidentifier():
            raise ValueError(f"Invalid slot {{{name}}} in {text!r}")
        if format_spec or conversion:
            raise ValueError(f"Slot {{{name}}} in {text!r} must not carry a format spec")
        if name not in ALLOWED_SLOTS:
            raise ValueError(
                f"Unknown slot {{{name}}} in {text!r}; allowed: {sorted(ALLOWED_SLOTS)}"
            )
        slots.append(name)
    return slots


def render_template(text: str, context: Mapping[str, Any]) -> str:
    """
    Fill a template string's slots from context.

    Only literal text and known slot values are emitted; nothing in the
    template can reach attributes or items of the context values.
    """
    parts = []
    for literal, name, _format_spec, _conversion in _formatter.parse(text):
        parts.append(literal)
        if name is None:
            continue
        if name not in ALLOWED_SLOTS:
            raise TemplateLibraryError(f"Unknown slot {{{name}}} in {text!r}")
        if name not in context:
            raise TemplateLibraryError(f"No value for slot {{{name}}} in {text!r}")
        parts.append(str(context[name]))
    return "".join(parts)


# =============================================================================
# SCHEMA
# =============================================================================

class WorkoutTemplate(BaseModel):
    """
    Single workout template definition.

    Filters used by WorkoutSelector:
    - level: beginner / intermediate / advanced (None = any athlete)
    - phases: phases the template fits (empty = any phase)
    - specific_type: variant key matched against recent history types
    """
    model_config = ConfigDict(frozen=True)

    name: str = Field(..., min_length=1)
    description: str = Field(..., description="Athlete-facing text; {phase}, {vdot} and pace slots allowed")
    structure: str = Field(..., description="Short structure, e.g. '3 x 1 mile @ T, 2 min jog'")
    warmup: Optional[str] = None
    main_set: Optional[str] = Field(default=None, description="Main set with pace slots, e.g. '4 miles @ {threshold}'")
    cooldown: Optional[str] = None
    purpose: Optional[str] = None
    level: Optional[str] = Field(default=None, pattern=r"^(beginner|intermediate|advanced)$")
    phases: List[Phase] = Field(default_factory=list)
    specific_type: Optional[str] = None

    @field_validator("description", "structure", "warmup", "main_set", "cooldown")
    @classmethod
    def validate_slots(cls, v):
        if v is not None:
            template_slots(v)
        return v

    def applies_to_phase(self, phase: Phase) -> bool:
        return not self.phases or phase in self.phases

    def render_description(self, context: Mapping[str, Any]) -> str:
        return render_template(self.description, context)

    def render_main_set(self, context: Mapping[str, Any]) -> str:
        """Main set with paces filled in, or a plain mileage prescription."""
        if self.main_set:
            return render_template(self.main_set, context)
        return f"{context['miles']} miles at target pace"

    def render_warmup(self, context: Mapping[str, Any]) -> str:
        return render_template(self.warmup, context) if self.warmup else DEFAULT_WARMUP

    def render_cooldown(self, context: Mapping[str, Any]) -> str:
        return render_template(self.cooldown, context) if self.cooldown else DEFAULT_COOLDOWN


class WorkoutLibrary(BaseModel):
    """
    Complete template library, keyed by workout type.
    Validated as a unit at load time.
    """
    model_config = ConfigDict(frozen=True)

    version: str = Field(..., description="Library version for change tracking")
    workouts: Dict[str, List[WorkoutTemplate]]

    @field_validator("workouts")
    @classmethod
    def validate_easy_present(cls, v):
        if not v.get(WorkoutType.EASY.value):
            raise ValueError("Library must define at least one 'easy' workout (fallback list)")
        return v

    @field_validator("workouts")
    @classmethod
    def validate_non_empty_lists(cls, v):
        empty = [k for k, templates in v.items() if not templates]
        if empty:
            raise ValueError(f"Workout types with no templates: {empty}")
        return v

    def get_workouts(self, workout_type: str) -> List[WorkoutTemplate]:
        """Templates for a workout type; unknown types use the easy list."""
        templates = self.workouts.get(workout_type)
        if templates is None:
            logger.debug(f"No templates for '{workout_type}', using easy")
            return self.workouts[WorkoutType.EASY.value]
        return templates


# =============================================================================
# LOADER
# =============================================================================

_cached_library: Optional[WorkoutLibrary] = None


def build_workout_library(data: Dict[str, Any]) -> WorkoutLibrary:
    """
    Validate raw library data.

    Raises:
        TemplateLibraryError: data fails schema or slot validation
    """
    if not isinstance(data, dict):
        raise TemplateLibraryError("Workout library must be a mapping")
    try:
        return WorkoutLibrary(**data)
    except ValidationError as e:
        raise TemplateLibraryError(f"Invalid workout library: {e}") from e


def load_workout_library(
    path: Optional[Path] = None,
    force_reload: bool = False
) -> WorkoutLibrary:
    """
    Load and validate the template library.

    Caches the loaded library for the life of the process.

    Args:
        path: Explicit YAML file; defaults to the ConfigService copy of
              workout_library.yaml
        force_reload: Force reload even if cached

    Returns:
        Validated WorkoutLibrary

    Raises:
        TemplateLibraryError: library missing or invalid
    """
    global _cached_library

    if _cached_library is not None and not force_reload and path is None:
        return _cached_library

    if path is not None:
        path = Path(path)
        if not path.exists():
            raise TemplateLibraryError(f"Workout library not found: {path}")
        logger.info(f"Loading workout library from {path}")
        try:
            with open(path, "r", encoding="utf-8") as f:
                data = yaml.safe_load(f)
        except yaml.YAMLError as e:
            raise TemplateLibraryError(f"Workout library is not valid YAML: {e}") from e
    else:
        data = ConfigService.get("workout_library")
        if data is None:
            raise TemplateLibraryError("workout_library.yaml not found in the config directory")

    library = build_workout_library(data)
    count = sum(len(t) for t in library.workouts.values())
    logger.info(f"Loaded {count} workout templates, version {library.version}")

    if path is None:
        _cached_library = library
    return library
