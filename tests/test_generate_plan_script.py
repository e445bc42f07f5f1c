"""
CLI Tests

Runs scripts/generate_plan.py in-process against a temporary input file.
"""

import importlib.util
import json
import logging
from pathlib import Path

import pytest
import yaml

SCRIPT = Path(__file__).resolve().parents[1] / "scripts" / "generate_plan.py"


@pytest.fixture
def cli():
    loader_spec = importlib.util.spec_from_file_location("generate_plan", SCRIPT)
    module = importlib.util.module_from_spec(loader_spec)
    loader_spec.loader.exec_module(module)

    root = logging.getLogger()
    handlers, level = list(root.handlers), root.level
    yield module
    root.handlers[:] = handlers
    root.setLevel(level)


@pytest.fixture
def athlete_file(tmp_path):
    data = {
        "request": {
            "profile_id": 7,
            "goal_race_id": 3,
            "goal_race_date": "2025-04-28",
            "goal_race_distance": "half_marathon",
            "current_vdot": 46,
            "current_weekly_mileage": 25,
        },
        "profile": {
            "vdot": 46,
            "paces": {
                "easy": "9:20",
                "marathon": "8:15",
                "threshold": "7:30",
                "interval": "6:55",
                "repetition": "6:25",
            },
            "rest_days": ["Friday"],
            "long_run_day": "Sunday",
        },
        "history": {"tsb": -5},
    }
    path = tmp_path / "athlete.yaml"
    path.write_text(yaml.safe_dump(data))
    return path


class TestGeneratePlanScript:

    def test_plan_and_window(self, cli, athlete_file, capsys):
        code = cli.main([str(athlete_file), "--today", "2025-01-06", "--window-weeks", "2", "--seed", "1"])
        assert code == 0
        output = json.loads(capsys.readouterr().out)
        assert output["master_plan"]["name"] == "half_marathon Training Plan - Apr 28, 2025"
        assert len(output["window"]) == 14
        fridays = [w for w in output["window"] if w["day_of_week"] == "Friday"]
        assert all(w["workout_type"] == "rest" for w in fridays)

    def test_plan_only(self, cli, athlete_file, capsys):
        code = cli.main([str(athlete_file), "--today", "2025-01-06", "--plan-only"])
        assert code == 0
        output = json.loads(capsys.readouterr().out)
        assert "window" not in output
        assert len(output["master_plan"]["weekly_targets"]) == 16

    def test_too_short_plan_exits_with_error(self, cli, athlete_file, capsys):
        code = cli.main([str(athlete_file), "--today", "2025-03-31"])
        assert code == 1
        assert capsys.readouterr().out == ""

    def test_missing_file(self, cli, tmp_path):
        assert cli.main([str(tmp_path / "missing.yaml")]) == 2
