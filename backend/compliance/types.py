"""Type definitions for the compliance module."""

from dataclasses import dataclass, field
from datetime import date, datetime
from enum import Enum
from fractions import Fraction
from typing import Any, Optional

from errors import UnknownShiftTypeError
from utils.time import shift_start_datetime, shift_end_datetime


class ShiftType(str, Enum):
    """Kinds of shift covered by the collective agreement."""
    EFFECTIVE = "effective"
    PRESENCE_DAY = "presence_day"  # Responsible presence, day
    PRESENCE_NIGHT = "presence_night"  # Responsible presence, night
    GUARD_24H = "guard_24h"  # 24h cycle split into typed segments

    @classmethod
    def parse(cls, value) -> "ShiftType":
        """Read a shift type, defaulting to effective work when empty."""
        if isinstance(value, cls):
            return value
        if not value:
            return cls.EFFECTIVE
        try:
            return cls(value)
        except ValueError:
            raise UnknownShiftTypeError(f"Unknown shift type: {value!r}") from None

    @property
    def is_presence(self) -> bool:
        return self in (ShiftType.PRESENCE_DAY, ShiftType.PRESENCE_NIGHT)


SEGMENT_TYPES = (ShiftType.EFFECTIVE, ShiftType.PRESENCE_DAY, ShiftType.PRESENCE_NIGHT)


class RuleCode(str, Enum):
    """Stable codes of compliance rules."""
    SHIFT_OVERLAP = "SHIFT_OVERLAP"
    DAILY_REST = "DAILY_REST"
    DAILY_MAX_HOURS = "DAILY_MAX_HOURS"
    WEEKLY_MAX_HOURS = "WEEKLY_MAX_HOURS"
    WEEKLY_REST = "WEEKLY_REST"
    MANDATORY_BREAK = "MANDATORY_BREAK"
    ABSENCE_CONFLICT = "ABSENCE_CONFLICT"
    NIGHT_PRESENCE_MAX_DURATION = "NIGHT_PRESENCE_MAX_DURATION"
    CONSECUTIVE_NIGHTS_MAX = "CONSECUTIVE_NIGHTS_MAX"
    GUARD_MAX_AMPLITUDE = "GUARD_MAX_AMPLITUDE"
    GUARD_24H_EFFECTIVE_MAX = "GUARD_24H_EFFECTIVE_MAX"


RULE_DESCRIPTIONS: dict[RuleCode, str] = {
    RuleCode.SHIFT_OVERLAP: "One shift at a time per employee",
    RuleCode.DAILY_REST: "Minimum daily rest of 11 consecutive hours (Art. L3131-1 Labor Code)",
    RuleCode.DAILY_MAX_HOURS: "Maximum of 10 hours of work per day (Art. L3121-18 Labor Code)",
    RuleCode.WEEKLY_MAX_HOURS: "Maximum of 48 hours of work per week (Art. L3121-20 Labor Code)",
    RuleCode.WEEKLY_REST: "Minimum weekly rest of 35 consecutive hours (Art. L3132-2 Labor Code)",
    RuleCode.MANDATORY_BREAK: "20 min break required after 6 hours of work (Art. L3121-16 Labor Code)",
    RuleCode.ABSENCE_CONFLICT: "No shift during an approved absence",
    RuleCode.NIGHT_PRESENCE_MAX_DURATION: "Night responsible presence limited to 12 consecutive hours (Art. 148 IDCC 3239)",
    RuleCode.CONSECUTIVE_NIGHTS_MAX: "At most 5 consecutive nights of responsible presence (Art. 148 IDCC 3239)",
    RuleCode.GUARD_MAX_AMPLITUDE: "Effective work plus responsible presence may not span more than 24 hours (IDCC 3239)",
    RuleCode.GUARD_24H_EFFECTIVE_MAX: "At most 12 hours of effective work within a 24h guard (Art. L3121-18, Art. 148 IDCC 3239)",
}


class ViolationSeverity(str, Enum):
    """Severity levels for rule outcomes."""
    ERROR = "error"  # Blocks creation of the shift
    WARNING = "warning"  # Flags but allows the shift


@dataclass(frozen=True)
class ComplianceRules:
    """Legal thresholds of the collective agreement.

    Immutable so one instance can be shared by every validation; build a
    new one (see config.load_compliance_rules) to change a threshold.
    """
    # Rest
    min_daily_rest_hours: float = 11.0
    min_weekly_rest_hours: float = 35.0

    # Working time
    max_daily_hours: float = 10.0
    max_weekly_hours: float = 48.0
    weekly_hours_warning: float = 44.0
    presence_day_weight: Fraction = Fraction(2, 3)

    # Breaks
    break_required_after_minutes: int = 6 * 60
    min_break_minutes: int = 20

    # Responsible presence and guards
    max_night_presence_hours: float = 12.0
    max_consecutive_nights: int = 5
    max_guard_amplitude_hours: float = 24.0
    max_chain_gap_hours: float = 2.0  # Policy choice, pending legal review
    guard_max_effective_hours: float = 12.0
    guard_night_segment_warning_hours: float = 12.0

    # Summary recommendations
    low_daily_budget_hours: float = 2.0
    low_weekly_budget_hours: float = 8.0


@dataclass(frozen=True)
class GuardSegment:
    """One typed slice of a 24h guard; it ends where the next one starts."""
    start_time: str  # HH:MM
    segment_type: ShiftType = ShiftType.EFFECTIVE
    break_minutes: int = 0

    def __post_init__(self):
        segment_type = ShiftType.parse(self.segment_type)
        if segment_type not in SEGMENT_TYPES:
            raise UnknownShiftTypeError(f"Guard segments cannot be of type {segment_type.value}")
        object.__setattr__(self, "segment_type", segment_type)


@dataclass
class Shift:
    """A half-open work interval [start_time, end_time) on a calendar date."""
    employee_id: str
    date: date
    start_time: str  # HH:MM
    end_time: str  # HH:MM, at or before start_time wraps past midnight
    break_minutes: int = 0
    shift_type: ShiftType = ShiftType.EFFECTIVE
    contract_id: Optional[str] = None
    id: Optional[str] = None  # None for a shift not created yet
    has_night_action: bool = False
    night_interventions_count: int = 0
    guard_segments: list[GuardSegment] = field(default_factory=list)

    def __post_init__(self):
        self.shift_type = ShiftType.parse(self.shift_type)
        if isinstance(self.date, datetime):
            self.date = self.date.date()

    @property
    def start_datetime(self) -> datetime:
        return shift_start_datetime(self.date, self.start_time)

    @property
    def end_datetime(self) -> datetime:
        return shift_end_datetime(self.date, self.start_time, self.end_time)

    @property
    def is_presence(self) -> bool:
        return self.shift_type.is_presence

    def is_same_as(self, other: "Shift") -> bool:
        """True when other is the stored version of this shift being edited."""
        return self.id is not None and other.id == self.id


@dataclass(frozen=True)
class Contract:
    """Contract terms needed for pay and overtime."""
    weekly_hours: float
    hourly_rate: float
    id: Optional[str] = None


@dataclass(frozen=True)
class Absence:
    """An absence over an inclusive range of days."""
    employee_id: str
    absence_type: str
    start_date: date
    end_date: date
    status: str = "pending"
    id: Optional[str] = None

    @property
    def is_approved(self) -> bool:
        return self.status == "approved"

    def covers(self, day: date) -> bool:
        return self.start_date <= day <= self.end_date


@dataclass
class ValidationOutcome:
    """Result of one rule; details carry the numbers used in the decision."""
    valid: bool
    code: RuleCode
    rule: str
    message: Optional[str] = None
    details: dict[str, Any] = field(default_factory=dict)
    severity: ViolationSeverity = ViolationSeverity.ERROR

    @classmethod
    def ok(cls, code: RuleCode, message: Optional[str] = None, **details) -> "ValidationOutcome":
        """A passing outcome; a message turns it into a non-blocking warning."""
        return cls(
            valid=True,
            code=code,
            rule=RULE_DESCRIPTIONS[code],
            message=message,
            details=details,
            severity=ViolationSeverity.WARNING if message else ViolationSeverity.ERROR,
        )

    @classmethod
    def fail(
        cls,
        code: RuleCode,
        message: str,
        severity: ViolationSeverity = ViolationSeverity.ERROR,
        **details,
    ) -> "ValidationOutcome":
        return cls(
            valid=False,
            code=code,
            rule=RULE_DESCRIPTIONS[code],
            message=message,
            details=details,
            severity=severity,
        )

    @property
    def is_warning(self) -> bool:
        """A message that must be surfaced without blocking the shift."""
        if not self.message:
            return False
        return self.valid or self.severity == ViolationSeverity.WARNING

    def to_dict(self) -> dict:
        """Convert to dictionary for API response."""
        return {
            "valid": self.valid,
            "code": self.code.value,
            "rule": self.rule,
            "message": self.message,
            "details": self.details,
            "severity": self.severity.value,
        }


@dataclass
class ComplianceIssue:
    """An error or warning reported to the caller."""
    code: RuleCode
    message: str
    rule: str
    blocking: bool
    details: dict[str, Any] = field(default_factory=dict)

    def to_dict(self) -> dict:
        """Convert to dictionary for API response."""
        return {
            "code": self.code.value,
            "message": self.message,
            "rule": self.rule,
            "blocking": self.blocking,
            "details": self.details,
        }


@dataclass
class ValidationContext:
    """Existing data a candidate shift is checked against."""
    rules: ComplianceRules
    shifts: list[Shift] = field(default_factory=list)
    absences: list[Absence] = field(default_factory=list)

    def others(self, candidate: Shift) -> list[Shift]:
        """Shifts of the candidate's employee, without the candidate itself."""
        return [
            s for s in self.shifts
            if s.employee_id == candidate.employee_id and not candidate.is_same_as(s)
        ]


@dataclass
class ComplianceResult:
    """Result of a full validation."""
    errors: list[ComplianceIssue] = field(default_factory=list)
    warnings: list[ComplianceIssue] = field(default_factory=list)
    outcomes: list[ValidationOutcome] = field(default_factory=list)

    @property
    def valid(self) -> bool:
        return not self.errors

    def add_outcome(self, outcome: ValidationOutcome, blocking: bool = True) -> None:
        """Record a rule outcome, filing its message as error or warning."""
        self.outcomes.append(outcome)
        if not outcome.message:
            return

        if not outcome.valid and blocking and outcome.severity == ViolationSeverity.ERROR:
            self.errors.append(ComplianceIssue(
                code=outcome.code,
                message=outcome.message,
                rule=outcome.rule,
                blocking=True,
                details=outcome.details,
            ))
        elif not outcome.valid or outcome.is_warning:
            self.warnings.append(ComplianceIssue(
                code=outcome.code,
                message=outcome.message,
                rule=outcome.rule,
                blocking=False,
                details=outcome.details,
            ))

    @property
    def error_codes(self) -> list[RuleCode]:
        return [e.code for e in self.errors]

    @property
    def warning_codes(self) -> list[RuleCode]:
        return [w.code for w in self.warnings]

    def to_dict(self) -> dict:
        """Convert to dictionary for API response."""
        return {
            "valid": self.valid,
            "errors": [e.to_dict() for e in self.errors],
            "warnings": [w.to_dict() for w in self.warnings],
        }


@dataclass
class QuickValidation:
    """Fast answer to "can I create this shift?"."""
    can_create: bool
    blocking_errors: list[str] = field(default_factory=list)


@dataclass
class RestPeriod:
    start: datetime
    end: datetime
    hours: float


@dataclass
class WeeklyRestStatus:
    longest_rest: float
    is_compliant: bool
    rest_periods: list[RestPeriod] = field(default_factory=list)


@dataclass
class ComplianceSummary:
    """Remaining budgets and weekly rest for an employee around a date."""
    remaining_daily_hours: float
    remaining_weekly_hours: float
    weekly_rest_status: WeeklyRestStatus
    recommendations: list[str] = field(default_factory=list)


@dataclass
class SlotSuggestion:
    """A corrected time window proposed after a failed validation."""
    date: date
    start_time: str
    end_time: str
    reason: str

    def to_dict(self) -> dict:
        return {
            "date": self.date.isoformat(),
            "start_time": self.start_time,
            "end_time": self.end_time,
            "reason": self.reason,
        }
