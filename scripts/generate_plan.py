#!/usr/bin/env python3
"""
Plan Generator - Builds a master plan and its current workout window

Usage:
    python scripts/generate_plan.py athlete.yaml
    python scripts/generate_plan.py athlete.json --today 2025-01-08 --window-weeks 2 --seed 7

The input file (YAML or JSON) holds three sections:
    request:  MasterPlanRequest fields (goal race, current mileage, preferences)
    profile:  UserProfile fields (vdot, paces, days, comfort levels)
    history:  RecentHistory fields (optional)

Output is JSON on stdout: {"master_plan": {...}, "window": [...]}
"""

import argparse
import json
import logging
import sys
from datetime import date
from pathlib import Path

import yaml
from pydantic import ValidationError

from coach_engine.core.config import settings
from coach_engine.core.exceptions import PlanEngineError
from coach_engine.core.logging import setup_logging
from coach_engine.plan_framework import (
    MasterPlanGenerator,
    MasterPlanRequest,
    RecentHistory,
    UserProfile,
    WindowExpander,
)

logger = logging.getLogger(__name__)


def load_input(path: Path) -> dict:
    """Load the athlete input file (JSON or YAML, by extension)"""
    if not path.exists():
        raise FileNotFoundError(f"Input file not found: {path}")

    with open(path, "r", encoding="utf-8") as f:
        if path.suffix.lower() == ".json":
            return json.load(f)
        return yaml.safe_load(f) or {}


def main(argv=None) -> int:
    parser = argparse.ArgumentParser(description="Generate a master plan and detailed workout window")
    parser.add_argument("input", help="YAML or JSON file with request/profile/history sections")
    parser.add_argument("--today", type=date.fromisoformat, help="Reference date (YYYY-MM-DD), default today")
    parser.add_argument("--window-weeks", type=int, default=settings.DEFAULT_WINDOW_WEEKS, choices=[2, 3])
    parser.add_argument("--seed", type=int, help="Seed for template selection")
    parser.add_argument("--plan-only", action="store_true", help="Skip window expansion")
    parser.add_argument("--indent", type=int, default=2)
    parser.add_argument(
        "--log-level",
        choices=["DEBUG", "INFO", "WARNING", "ERROR"],
        help="Override LOG_LEVEL for this run",
    )

    args = parser.parse_args(argv)
    setup_logging(level=args.log_level)

    try:
        data = load_input(Path(args.input))
        request = MasterPlanRequest(**data["request"])
        profile = UserProfile(**data["profile"]) if not args.plan_only else None
        history = RecentHistory(**(data.get("history") or {}))
    except (FileNotFoundError, KeyError, ValidationError, yaml.YAMLError, json.JSONDecodeError) as e:
        logger.error(f"Invalid input: {e}")
        return 2

    today = args.today or date.today()

    try:
        plan = MasterPlanGenerator().create_master_plan(request, today=today)
        output = {"master_plan": plan.to_dict()}

        if not args.plan_only:
            expander = WindowExpander(seed=args.seed)
            window = expander.expand_window(plan, profile, history, today, args.window_weeks)
            output["window"] = [w.to_dict() for w in window]
    except PlanEngineError as e:
        logger.error(f"{e.error_code}: {e.detail}")
        return 1

    json.dump(output, sys.stdout, indent=args.indent)
    sys.stdout.write("\n")
    return 0


if __name__ == "__main__":
    sys.exit(main())
