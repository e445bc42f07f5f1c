"""
Configuration Service

Loads the engine's rule tables from YAML files.
Allows changing coefficients (phase fractions, taper factors, daily
allocation) without code changes.

Usage:
    # Get the phase split for a distance (unknown distances resolve to half marathon)
    table = ConfigService.get_phase_distribution("marathon")

    # Get a raw value
    factor = ConfigService.get("plan_rules.cutback.factor")

    # Reload config without restart
    ConfigService.reload()
"""

import copy
import yaml
import logging
from typing import Any, Optional, Dict, List, Tuple
from pathlib import Path
from functools import reduce

from coach_engine.core.config import settings

logger = logging.getLogger(__name__)


class ConfigService:
    """
    Load and cache configuration from YAML files.

    Values handed out by the typed accessors are copies (or tuples), so the
    cached tables stay read-only for every caller.
    """

    _config: Optional[Dict[str, Any]] = None
    _config_dir: Path = (
        Path(settings.PLAN_CONFIG_DIR) if settings.PLAN_CONFIG_DIR
        else Path(__file__).parent.parent / "config"
    )

    CONFIG_FILES = [
        "plan_rules.yaml",
        "workout_library.yaml",
    ]

    @classmethod
    def get(cls, key: str = None, default: Any = None) -> Any:
        """
        Get configuration value.

        Args:
            key: Dot-separated key (e.g., "plan_rules.cutback.factor")
            default: Default value if key not found

        Returns:
            Configuration value or entire config if no key provided
        """
        if cls._config is None:
            cls._load()

        if key is None:
            return cls._config

        try:
            keys = key.split(".")
            value = reduce(lambda d, k: d[k], keys, cls._config)
            return value
        except (KeyError, TypeError):
            return default

    @classmethod
    def reload(cls, config_dir: Optional[Path] = None):
        """Reload configuration from files."""
        if config_dir is not None:
            cls._config_dir = Path(config_dir)
        cls._load()
        logger.info("Configuration reloaded")

    @classmethod
    def _load(cls):
        """Load all configuration files, publishing the result in one assignment."""
        config: Dict[str, Any] = {}

        for filename in cls.CONFIG_FILES:
            filepath = cls._config_dir / filename
            if filepath.exists():
                try:
                    with open(filepath, 'r', encoding='utf-8') as f:
                        data = yaml.safe_load(f)
                except yaml.YAMLError as e:
                    logger.error(f"Error loading {filename}: {e}")
                    continue
                if data:
                    # Merge into config, using filename (without extension) as namespace
                    namespace = filename.rsplit('.', 1)[0]
                    config[namespace] = data
                    logger.debug(f"Loaded config: {filename}")
            else:
                logger.debug(f"Config file not found: {filepath}")

        # Also load defaults from constants if no rule table was found
        if "plan_rules" not in config:
            config["plan_rules"] = cls._load_defaults()

        cls._config = config

    @classmethod
    def _load_defaults(cls) -> Dict[str, Any]:
        """Build the default rule tables from constants."""
        from .constants import (
            PHASE_DISTRIBUTIONS,
            RECOVERY_PHASE,
            TAPER_FACTORS,
            CUTBACK_RULES,
            LONG_RUN_FRACTION,
            LONG_RUN_BAND,
            PEAK_MULTIPLIERS,
            QUALITY_WORKOUTS,
            QUALITY_DAY_FALLBACKS,
            DAILY_ALLOCATION,
            MINUTES_PER_MILE,
            WARMUP_COOLDOWN_MINUTES,
            PACE_ADJUSTMENTS,
            LEVEL_LIMITS,
            MIN_PLAN_WEEKS,
            DEFAULT_DISTANCE,
        )

        rules = {
            "version": "defaults",
            "min_plan_weeks": MIN_PLAN_WEEKS,
            "default_distance": DEFAULT_DISTANCE.value,
            "phase_distributions": copy.deepcopy(PHASE_DISTRIBUTIONS),
            "recovery_phase": dict(RECOVERY_PHASE),
            "taper_factors": copy.deepcopy(TAPER_FACTORS),
            "cutback": dict(CUTBACK_RULES),
            "long_run": {
                "fraction": dict(LONG_RUN_FRACTION),
                "band": list(LONG_RUN_BAND),
            },
            "peak_multipliers": dict(PEAK_MULTIPLIERS),
            "quality_workouts": copy.deepcopy(QUALITY_WORKOUTS),
            "quality_day_fallbacks": list(QUALITY_DAY_FALLBACKS),
            "daily_allocation": dict(DAILY_ALLOCATION),
            "minutes_per_mile": dict(MINUTES_PER_MILE),
            "warmup_cooldown_minutes": WARMUP_COOLDOWN_MINUTES,
            "pace_adjustments": copy.deepcopy(PACE_ADJUSTMENTS),
            "level_limits": dict(LEVEL_LIMITS),
        }

        logger.info("Loaded default plan rules from constants")
        return rules

    @classmethod
    def set(cls, key: str, value: Any):
        """
        Set a configuration value (in memory only).
        Useful for testing.
        """
        if cls._config is None:
            cls._load()

        keys = key.split(".")
        d = cls._config
        for k in keys[:-1]:
            if k not in d:
                d[k] = {}
            d = d[k]
        d[keys[-1]] = value

    @classmethod
    def resolve_distance(cls, distance: str) -> str:
        """
        Map a race distance onto a key that has its own rule tables.

        Distances without a phase table (10k, ultras, typos) silently use
        the default table (half marathon). This is the single place that
        policy lives.
        """
        tables = cls.get("plan_rules.phase_distributions", {})
        key = (distance or "").strip().lower()
        if key in tables:
            return key
        fallback = cls.get("plan_rules.default_distance", "half_marathon")
        logger.info(f"No phase table for distance '{distance}', using '{fallback}'")
        return fallback

    @classmethod
    def get_min_plan_weeks(cls) -> int:
        return int(cls.get("plan_rules.min_plan_weeks", 8))

    @classmethod
    def get_phase_distribution(cls, distance: str) -> Dict[str, Dict[str, Any]]:
        """Phase table for a distance, ordered base → build → peak → taper."""
        key = cls.resolve_distance(distance)
        return copy.deepcopy(cls.get(f"plan_rules.phase_distributions.{key}", {}))

    @classmethod
    def get_recovery_phase(cls) -> Dict[str, Any]:
        return dict(cls.get("plan_rules.recovery_phase", {}))

    @classmethod
    def get_taper_factors(cls, distance: str) -> Tuple[float, ...]:
        key = cls.resolve_distance(distance)
        return tuple(cls.get(f"plan_rules.taper_factors.{key}", [0.7, 0.5]))

    @classmethod
    def get_cutback_rules(cls) -> Dict[str, Any]:
        """Cutback frequency (weeks) and volume factor."""
        return dict(cls.get("plan_rules.cutback", {
            "frequency": 4,
            "factor": 0.7
        }))

    @classmethod
    def get_long_run_fraction(cls, distance: str) -> float:
        fractions = cls.get("plan_rules.long_run.fraction", {})
        key = cls.resolve_distance(distance)
        return float(fractions.get(key, fractions.get("default", 0.25)))

    @classmethod
    def get_long_run_band(cls) -> Tuple[float, float]:
        low, high = cls.get("plan_rules.long_run.band", [0.20, 0.30])
        return float(low), float(high)

    @classmethod
    def get_peak_multiplier(cls, aggressiveness: str) -> float:
        multipliers = cls.get("plan_rules.peak_multipliers", {})
        return float(multipliers.get(aggressiveness, multipliers.get("moderate", 1.3)))

    @classmethod
    def get_quality_workouts(cls, phase: str) -> Tuple[str, str]:
        """First and second quality-day workout types for a phase."""
        table = cls.get("plan_rules.quality_workouts", {})
        first, second = table.get(phase, ["tempo", "interval"])
        return first, second

    @classmethod
    def get_quality_day_fallbacks(cls) -> List[str]:
        return list(cls.get("plan_rules.quality_day_fallbacks", ["Tuesday", "Thursday", "Wednesday"]))

    @classmethod
    def get_daily_allocation(cls) -> Dict[str, float]:
        return dict(cls.get("plan_rules.daily_allocation", {}))

    @classmethod
    def get_minutes_per_mile(cls, workout_type: str) -> float:
        table = cls.get("plan_rules.minutes_per_mile", {})
        return float(table.get(workout_type, table.get("default", 9)))

    @classmethod
    def get_warmup_cooldown_minutes(cls) -> int:
        return int(cls.get("plan_rules.warmup_cooldown_minutes", 20))

    @classmethod
    def get_pace_adjustments(cls) -> Dict[str, Any]:
        return copy.deepcopy(cls.get("plan_rules.pace_adjustments", {}))

    @classmethod
    def get_level_limits(cls) -> Dict[str, float]:
        return dict(cls.get("plan_rules.level_limits", {
            "beginner_max_vdot": 50,
            "advanced_min_vdot": 45
        }))
