"""
Custom exception classes.

Provides a consistent error shape (detail + error_code) across the engine.
"""
from typing import Optional


class PlanEngineError(Exception):
    """Base engine exception with consistent structure."""

    def __init__(self, detail: str, error_code: Optional[str] = None):
        super().__init__(detail)
        self.detail = detail
        self.error_code = error_code or "PLAN_ENGINE_ERROR"


class InsufficientPlanDurationError(PlanEngineError):
    """Not enough weeks between plan start and race day to periodize."""

    def __init__(self, total_weeks: int, minimum_weeks: int = 8):
        super().__init__(
            detail=(
                "Not enough time to create a proper training plan. "
                f"Need at least {minimum_weeks} weeks, have {total_weeks}."
            ),
            error_code="INSUFFICIENT_PLAN_DURATION"
        )
        self.total_weeks = total_weeks
        self.minimum_weeks = minimum_weeks


class TemplateLibraryError(PlanEngineError):
    """Workout template library could not be loaded or failed validation."""

    def __init__(self, detail: str):
        super().__init__(detail=detail, error_code="TEMPLATE_LIBRARY_INVALID")
