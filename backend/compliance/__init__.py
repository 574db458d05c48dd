"""Labor law compliance module for home-care shifts (IDCC 3239)."""

from .types import (
    Absence,
    ComplianceResult,
    ComplianceRules,
    ComplianceSummary,
    Contract,
    GuardSegment,
    QuickValidation,
    RuleCode,
    Shift,
    ShiftType,
    SlotSuggestion,
    ValidationContext,
    ValidationOutcome,
    ViolationSeverity,
)
from .engine import ComplianceEngine
from .validators import (
    BaseValidator,
    OverlapValidator,
    DailyRestValidator,
    DailyHoursValidator,
    WeeklyHoursValidator,
    WeeklyRestValidator,
    BreakValidator,
    AbsenceConflictValidator,
    effective_hours,
    recommended_break_minutes,
)
from .guard_validators import (
    NightPresenceDurationValidator,
    ConsecutiveNightsValidator,
    GuardAmplitudeValidator,
    Guard24hValidator,
)
from .holidays import is_public_holiday, is_sunday

__all__ = [
    "Absence",
    "ComplianceResult",
    "ComplianceRules",
    "ComplianceSummary",
    "Contract",
    "GuardSegment",
    "QuickValidation",
    "RuleCode",
    "Shift",
    "ShiftType",
    "SlotSuggestion",
    "ValidationContext",
    "ValidationOutcome",
    "ViolationSeverity",
    "ComplianceEngine",
    "BaseValidator",
    "OverlapValidator",
    "DailyRestValidator",
    "DailyHoursValidator",
    "WeeklyHoursValidator",
    "WeeklyRestValidator",
    "BreakValidator",
    "AbsenceConflictValidator",
    "NightPresenceDurationValidator",
    "ConsecutiveNightsValidator",
    "GuardAmplitudeValidator",
    "Guard24hValidator",
    "effective_hours",
    "recommended_break_minutes",
    "is_public_holiday",
    "is_sunday",
]
