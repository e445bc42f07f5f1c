"""
Performance Adjuster Tests
"""

from datetime import date, timedelta

from coach_engine.plan_framework import DetailedWorkout, PerformanceAdjuster, RecentHistory
from coach_engine.plan_framework.models import HistoryWorkout
from coach_engine.plan_framework.performance_adjuster import STRUGGLE_ALTERNATIVE, STRUGGLE_NOTE


def workout(workout_type, coach_notes="", alternatives=None):
    return DetailedWorkout(
        date=date(2025, 2, 4),
        day_of_week="Tuesday",
        workout_type=workout_type,
        name=workout_type.title(),
        description="",
        structure="",
        warmup="",
        main_set="",
        cooldown="",
        target_paces={},
        estimated_minutes=40,
        total_miles=5,
        purpose="",
        coach_notes=coach_notes,
        alternatives=alternatives if alternatives is not None else ["Easy run", "Cross-training"],
    )


def history_with_verdicts(*verdicts):
    start = date(2025, 1, 20)
    return RecentHistory(workouts=[
        HistoryWorkout(date=start + timedelta(days=i), type="easy", verdict=v)
        for i, v in enumerate(verdicts)
    ])


class TestStruggleDetection:

    def test_two_struggles_in_last_five(self):
        history = history_with_verdicts("great", "struggled", "fine", "struggled", "fine")
        assert PerformanceAdjuster().is_struggling(history)

    def test_one_struggle_is_not_enough(self):
        history = history_with_verdicts("struggled", "fine", "fine")
        assert not PerformanceAdjuster().is_struggling(history)

    def test_older_struggles_ignored(self):
        history = history_with_verdicts("struggled", "struggled", "fine", "fine", "fine", "fine", "fine")
        assert not PerformanceAdjuster().is_struggling(history)

    def test_missing_verdicts(self):
        history = history_with_verdicts(None, None, "struggled")
        assert not PerformanceAdjuster().is_struggling(history)


class TestApply:

    def test_interval_and_tempo_adjusted(self):
        history = history_with_verdicts("struggled", "struggled")
        workouts = [
            workout("interval", coach_notes="Road is fine"),
            workout("tempo"),
            workout("easy"),
        ]
        adjusted = PerformanceAdjuster().apply(workouts, history)

        assert adjusted[0].coach_notes == f"Road is fine. {STRUGGLE_NOTE}"
        assert adjusted[0].alternatives[0] == STRUGGLE_ALTERNATIVE
        assert adjusted[0].alternatives[1:] == ["Easy run", "Cross-training"]

        assert adjusted[1].coach_notes == STRUGGLE_NOTE
        assert adjusted[2].coach_notes == ""
        assert adjusted[2].alternatives == ["Easy run", "Cross-training"]

    def test_inputs_not_mutated(self):
        history = history_with_verdicts("struggled", "struggled")
        original = workout("tempo", coach_notes="Stay smooth")
        PerformanceAdjuster().apply([original], history)
        assert original.coach_notes == "Stay smooth"
        assert original.alternatives == ["Easy run", "Cross-training"]

    def test_no_struggles_no_changes(self):
        history = history_with_verdicts("fine", "great")
        workouts = [workout("interval"), workout("tempo")]
        adjusted = PerformanceAdjuster().apply(workouts, history)
        assert [w.to_dict() for w in adjusted] == [w.to_dict() for w in workouts]
