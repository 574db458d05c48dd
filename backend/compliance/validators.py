"""Compliance validators for working time and rest rules."""

from abc import ABC, abstractmethod
from datetime import date, datetime, time, timedelta
from fractions import Fraction
from typing import Optional

from errors import UnknownShiftTypeError
from utils.rounding import round1
from utils.time import (
    hours_between,
    minutes_to_time,
    shift_duration_minutes,
    shifts_overlap,
    week_end,
    week_start,
)

from .segments import guard_effective_minutes
from .types import (
    Absence,
    ComplianceRules,
    RestPeriod,
    RuleCode,
    Shift,
    ShiftType,
    ValidationContext,
    ValidationOutcome,
    ViolationSeverity,
    WeeklyRestStatus,
)


ABSENCE_TYPE_LABELS = {
    "sick": "sick leave",
    "vacation": "paid leave",
    "training": "training",
    "unavailable": "unavailability",
    "emergency": "emergency absence",
    "family_event": "family event",
}


def effective_minutes(shift: Shift, rules: ComplianceRules) -> Fraction:
    """
    Minutes of a shift that count as working time.

    Effective work counts fully, day presence at its conversion weight,
    night presence not at all, and a guard by its effective segments.
    """
    shift_type = shift.shift_type
    if shift_type == ShiftType.EFFECTIVE:
        minutes = shift_duration_minutes(shift.start_time, shift.end_time, shift.break_minutes)
        return Fraction(max(0, minutes))
    elif shift_type == ShiftType.PRESENCE_DAY:
        minutes = shift_duration_minutes(shift.start_time, shift.end_time, shift.break_minutes)
        return max(0, minutes) * Fraction(rules.presence_day_weight)
    elif shift_type == ShiftType.PRESENCE_NIGHT:
        return Fraction(0)
    elif shift_type == ShiftType.GUARD_24H:
        if not shift.guard_segments:
            # Stored guards from before segments existed count as a whole
            minutes = shift_duration_minutes(shift.start_time, shift.end_time, shift.break_minutes)
            return Fraction(max(0, minutes))
        return Fraction(guard_effective_minutes(shift))
    else:
        raise UnknownShiftTypeError(f"Unknown shift type: {shift_type}")


def effective_hours(shift: Shift, rules: ComplianceRules) -> float:
    """Working-time hours of a shift (see effective_minutes)."""
    return float(effective_minutes(shift, rules) / 60)


def total_effective_hours(shifts: list[Shift], rules: ComplianceRules) -> Fraction:
    """Exact sum of working-time hours."""
    return sum((effective_minutes(s, rules) for s in shifts), Fraction(0)) / 60


def find_previous_shift(candidate: Shift, shifts: list[Shift]) -> Optional[Shift]:
    """Latest shift of the same employee ending at or before the candidate starts."""
    start = candidate.start_datetime
    previous = [
        s for s in shifts
        if s.employee_id == candidate.employee_id
        and not candidate.is_same_as(s)
        and s.end_datetime <= start
    ]
    if not previous:
        return None
    return max(previous, key=lambda s: s.end_datetime)


def find_next_shift(candidate: Shift, shifts: list[Shift]) -> Optional[Shift]:
    """Earliest shift of the same employee starting at or after the candidate ends."""
    end = candidate.end_datetime
    following = [
        s for s in shifts
        if s.employee_id == candidate.employee_id
        and not candidate.is_same_as(s)
        and s.start_datetime >= end
    ]
    if not following:
        return None
    return min(following, key=lambda s: s.start_datetime)


def find_overlapping_shifts(candidate: Shift, shifts: list[Shift]) -> list[Shift]:
    """Shifts of the same employee sharing time with the candidate."""
    return [
        s for s in shifts
        if s.employee_id == candidate.employee_id
        and not candidate.is_same_as(s)
        and shifts_overlap(candidate, s)
    ]


def remaining_daily_hours(
    employee_id: str,
    day: date,
    shifts: list[Shift],
    rules: ComplianceRules,
) -> float:
    """Hours still available on a calendar day, never negative."""
    day_shifts = [s for s in shifts if s.employee_id == employee_id and s.date == day]
    used = total_effective_hours(day_shifts, rules)
    return float(max(Fraction(0), Fraction(rules.max_daily_hours) - used))


def remaining_weekly_hours(
    employee_id: str,
    day: date,
    shifts: list[Shift],
    rules: ComplianceRules,
) -> float:
    """Hours still available in the week containing day, never negative."""
    monday = week_start(day)
    week_shifts = [
        s for s in shifts
        if s.employee_id == employee_id and week_start(s.date) == monday
    ]
    used = total_effective_hours(week_shifts, rules)
    return float(max(Fraction(0), Fraction(rules.max_weekly_hours) - used))


def rest_window(day: date) -> tuple[datetime, datetime]:
    """Week containing day, widened by one day on each side."""
    window_start = datetime.combine(week_start(day) - timedelta(days=1), time(0, 0))
    window_end = datetime.combine(week_end(day) + timedelta(days=2), time(0, 0))
    return window_start, window_end


def rest_periods(shifts: list[Shift], window_start: datetime, window_end: datetime) -> list[RestPeriod]:
    """Uninterrupted rest spans between shifts inside the window."""
    periods = []
    cursor = window_start
    for shift in sorted(shifts, key=lambda s: s.start_datetime):
        start = shift.start_datetime
        if start > cursor:
            periods.append(RestPeriod(start=cursor, end=start, hours=hours_between(cursor, start)))
        cursor = max(cursor, shift.end_datetime)
    if window_end > cursor:
        periods.append(RestPeriod(start=cursor, end=window_end, hours=hours_between(cursor, window_end)))
    return periods


def _shifts_in_rest_window(day: date, shifts: list[Shift]) -> list[Shift]:
    first_day = week_start(day) - timedelta(days=1)
    last_day = week_end(day) + timedelta(days=1)
    return [s for s in shifts if first_day <= s.date <= last_day]


def weekly_rest_status(
    employee_id: str,
    day: date,
    shifts: list[Shift],
    rules: ComplianceRules,
) -> WeeklyRestStatus:
    """Rest spans of an employee around the week containing day."""
    window_start, window_end = rest_window(day)
    relevant = _shifts_in_rest_window(
        day, [s for s in shifts if s.employee_id == employee_id]
    )
    periods = rest_periods(relevant, window_start, window_end)
    longest = max((p.hours for p in periods), default=0.0)
    return WeeklyRestStatus(
        longest_rest=longest,
        is_compliant=longest >= rules.min_weekly_rest_hours,
        rest_periods=periods,
    )


def recommended_break_minutes(duration_minutes: int) -> int:
    """Break advised for a shift of the given length."""
    if duration_minutes <= 4 * 60:
        return 0
    elif duration_minutes <= 6 * 60:
        return 15
    elif duration_minutes <= 8 * 60:
        return 20
    elif duration_minutes <= 10 * 60:
        return 30
    return 45


class BaseValidator(ABC):
    """Base class for compliance validators."""

    code: RuleCode

    @abstractmethod
    def validate(self, shift: Shift, context: ValidationContext) -> ValidationOutcome:
        """Check the candidate shift against the context."""
        pass


class OverlapValidator(BaseValidator):
    """Validates that an employee never works two shifts at once."""

    code = RuleCode.SHIFT_OVERLAP

    def validate(self, shift: Shift, context: ValidationContext) -> ValidationOutcome:
        for existing in context.others(shift):
            if shifts_overlap(shift, existing):
                return ValidationOutcome.fail(
                    self.code,
                    f"Overlaps an existing shift on {existing.date.isoformat()} "
                    f"from {existing.start_time} to {existing.end_time}",
                    conflicting_shift_id=existing.id,
                    conflicting_shift_date=existing.date.isoformat(),
                    conflicting_shift_start=existing.start_time,
                    conflicting_shift_end=existing.end_time,
                )
        return ValidationOutcome.ok(self.code)


class DailyRestValidator(BaseValidator):
    """Validates minimum rest between consecutive shifts."""

    code = RuleCode.DAILY_REST

    def validate(self, shift: Shift, context: ValidationContext) -> ValidationOutcome:
        previous = find_previous_shift(shift, context.others(shift))
        return self.check_pair(shift, previous, context.rules)

    def validate_both_ways(self, shift: Shift, context: ValidationContext) -> list[ValidationOutcome]:
        """Check rest after the previous shift and before the next one."""
        others = context.others(shift)
        outcomes = [self.check_pair(shift, find_previous_shift(shift, others), context.rules)]

        following = find_next_shift(shift, others)
        if following:
            reverse = self.check_pair(following, shift, context.rules)
            if not reverse.valid:
                reverse.message = (
                    f"Rest before the next shift ({following.date.isoformat()} at "
                    f"{following.start_time}) would be insufficient."
                )
                outcomes.append(reverse)
        return outcomes

    def check_pair(
        self,
        shift: Shift,
        previous: Optional[Shift],
        rules: ComplianceRules,
    ) -> ValidationOutcome:
        """Rest between previous (which ends first) and shift."""
        if previous is None:
            return ValidationOutcome.ok(self.code)

        # Responsible presence is not continuous work, so no 11h rest around it
        if shift.is_presence or previous.is_presence:
            return ValidationOutcome.ok(self.code, presence_exemption=True)

        previous_end = previous.end_datetime
        rest_hours = hours_between(previous_end, shift.start_datetime)

        if rest_hours < rules.min_daily_rest_hours:
            earliest = previous_end + timedelta(hours=rules.min_daily_rest_hours)
            return ValidationOutcome.fail(
                self.code,
                f"Insufficient daily rest: {rest_hours:.1f}h instead of the "
                f"{rules.min_daily_rest_hours:g}h minimum. The shift cannot start "
                f"before {earliest:%Y-%m-%d %H:%M}.",
                rest_hours=round1(rest_hours),
                minimum_required=rules.min_daily_rest_hours,
                previous_shift_end=previous_end.isoformat(),
                suggested_start_time=minutes_to_time(earliest.hour * 60 + earliest.minute),
                suggested_start_date=earliest.isoformat(),
            )

        return ValidationOutcome.ok(self.code, rest_hours=round1(rest_hours))


class DailyHoursValidator(BaseValidator):
    """Validates the maximum working time per calendar day."""

    code = RuleCode.DAILY_MAX_HOURS

    def validate(self, shift: Shift, context: ValidationContext) -> ValidationOutcome:
        rules = context.rules
        day_shifts = [s for s in context.others(shift) if s.date == shift.date]

        existing_hours = total_effective_hours(day_shifts, rules)
        new_hours = effective_minutes(shift, rules) / 60
        total_hours = existing_hours + new_hours

        if total_hours > Fraction(rules.max_daily_hours):
            return ValidationOutcome.fail(
                self.code,
                f"Maximum daily working time exceeded: {float(total_hours):.1f}h "
                f"instead of {rules.max_daily_hours:g}h maximum.",
                date=shift.date.isoformat(),
                total_hours=round1(float(total_hours)),
                existing_hours=round1(float(existing_hours)),
                new_shift_hours=round1(float(new_hours)),
                maximum_allowed=rules.max_daily_hours,
                excess_hours=round1(float(total_hours) - rules.max_daily_hours),
            )

        return ValidationOutcome.ok(
            self.code,
            total_hours=round1(float(total_hours)),
            remaining_hours=round1(rules.max_daily_hours - float(total_hours)),
        )


class WeeklyHoursValidator(BaseValidator):
    """Validates the maximum working time per week, warning near the limit."""

    code = RuleCode.WEEKLY_MAX_HOURS

    def validate(self, shift: Shift, context: ValidationContext) -> ValidationOutcome:
        rules = context.rules
        monday = week_start(shift.date)
        week_shifts = [s for s in context.others(shift) if week_start(s.date) == monday]

        existing_hours = total_effective_hours(week_shifts, rules)
        new_hours = effective_minutes(shift, rules) / 60
        total_hours = existing_hours + new_hours
        total = float(total_hours)

        details = {
            "total_hours": round1(total),
            "existing_hours": round1(float(existing_hours)),
            "new_shift_hours": round1(float(new_hours)),
            "maximum_allowed": rules.max_weekly_hours,
            "week_start": monday.isoformat(),
            "week_end": week_end(shift.date).isoformat(),
        }

        if total_hours > Fraction(rules.max_weekly_hours):
            return ValidationOutcome.fail(
                self.code,
                f"Maximum weekly working time exceeded: {total:.1f}h instead of "
                f"{rules.max_weekly_hours:g}h maximum.",
                **details,
            )

        details["remaining_hours"] = round1(rules.max_weekly_hours - total)

        if total_hours >= Fraction(rules.weekly_hours_warning):
            return ValidationOutcome.ok(
                self.code,
                f"Warning: {total:.1f}h this week (recommended maximum: "
                f"{rules.weekly_hours_warning:g}h).",
                warning_threshold=rules.weekly_hours_warning,
                **details,
            )

        return ValidationOutcome.ok(self.code, **details)


class WeeklyRestValidator(BaseValidator):
    """Validates that one uninterrupted weekly rest span is long enough."""

    code = RuleCode.WEEKLY_REST

    def validate(self, shift: Shift, context: ValidationContext) -> ValidationOutcome:
        rules = context.rules
        window_start, window_end = rest_window(shift.date)
        relevant = _shifts_in_rest_window(shift.date, context.others(shift)) + [shift]

        periods = rest_periods(relevant, window_start, window_end)
        longest = max((p.hours for p in periods), default=0.0)

        if longest < rules.min_weekly_rest_hours:
            return ValidationOutcome.fail(
                self.code,
                f"Insufficient weekly rest: {longest:.1f}h instead of the "
                f"{rules.min_weekly_rest_hours:g}h minimum.",
                longest_rest_hours=round1(longest),
                minimum_required=rules.min_weekly_rest_hours,
                week_start=week_start(shift.date).isoformat(),
                week_end=week_end(shift.date).isoformat(),
            )

        return ValidationOutcome.ok(self.code, longest_rest_hours=round1(longest))


class BreakValidator(BaseValidator):
    """Validates the break required on long shifts (warning only)."""

    code = RuleCode.MANDATORY_BREAK

    def validate(self, shift: Shift, context: ValidationContext) -> ValidationOutcome:
        rules = context.rules

        # Guards carry their breaks per segment
        if shift.shift_type == ShiftType.GUARD_24H:
            return ValidationOutcome.ok(self.code)

        # Span without the break: the break is what is being checked
        duration = shift_duration_minutes(shift.start_time, shift.end_time, 0)
        break_minutes = shift.break_minutes or 0
        required = duration > rules.break_required_after_minutes

        if required and break_minutes < rules.min_break_minutes:
            return ValidationOutcome.fail(
                self.code,
                f"Insufficient break: {break_minutes} min for a {duration / 60:.1f}h shift. "
                f"A {rules.min_break_minutes} min break is required beyond "
                f"{rules.break_required_after_minutes / 60:g}h of work.",
                severity=ViolationSeverity.WARNING,
                shift_duration_minutes=duration,
                shift_duration_hours=round1(duration / 60),
                break_minutes=break_minutes,
                minimum_break_required=rules.min_break_minutes,
            )

        return ValidationOutcome.ok(
            self.code,
            shift_duration_minutes=duration,
            break_minutes=break_minutes,
            break_required=required,
        )


class AbsenceConflictValidator(BaseValidator):
    """Validates that no shift falls within an approved absence."""

    code = RuleCode.ABSENCE_CONFLICT

    def validate(self, shift: Shift, context: ValidationContext) -> ValidationOutcome:
        conflict = self.find_conflict(shift, context.absences)
        if conflict is None:
            return ValidationOutcome.ok(self.code)

        label = ABSENCE_TYPE_LABELS.get(conflict.absence_type, conflict.absence_type)
        if conflict.start_date == conflict.end_date:
            period = f"on {conflict.start_date.isoformat()}"
        else:
            period = f"from {conflict.start_date.isoformat()} to {conflict.end_date.isoformat()}"

        return ValidationOutcome.fail(
            self.code,
            f"The employee is absent ({label}) {period}.",
            conflicting_absence_id=conflict.id,
            absence_type=conflict.absence_type,
            absence_start_date=conflict.start_date.isoformat(),
            absence_end_date=conflict.end_date.isoformat(),
        )

    @staticmethod
    def find_conflict(shift: Shift, absences: list[Absence]) -> Optional[Absence]:
        for absence in absences:
            if absence.employee_id != shift.employee_id:
                continue
            if absence.is_approved and absence.covers(shift.date):
                return absence
        return None
