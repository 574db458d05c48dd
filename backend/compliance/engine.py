"""Compliance validation engine that orchestrates all validators."""

import logging
from datetime import date
from typing import Iterable, Optional

from .guard_validators import (
    ConsecutiveNightsValidator,
    Guard24hValidator,
    GuardAmplitudeValidator,
    NightPresenceDurationValidator,
)
from .suggestions import suggest_alternatives
from .types import (
    Absence,
    ComplianceResult,
    ComplianceRules,
    ComplianceSummary,
    QuickValidation,
    Shift,
    SlotSuggestion,
    ValidationContext,
)
from .validators import (
    AbsenceConflictValidator,
    BaseValidator,
    BreakValidator,
    DailyHoursValidator,
    DailyRestValidator,
    OverlapValidator,
    WeeklyHoursValidator,
    WeeklyRestValidator,
    remaining_daily_hours,
    remaining_weekly_hours,
    weekly_rest_status,
)


class ComplianceEngine:
    """
    Main engine for running compliance validation.

    Runs every rule against a candidate shift and files the outcomes as
    blocking errors or warnings. The engine holds no state beyond its
    rules, so one instance can serve every request.
    """

    def __init__(self, rules: Optional[ComplianceRules] = None):
        """Initialize with all validators, in reporting order."""
        self.rules = rules or ComplianceRules()
        self.overlap = OverlapValidator()
        self.daily_rest = DailyRestValidator()
        self.daily_hours = DailyHoursValidator()
        self.weekly_hours = WeeklyHoursValidator()
        self.validators: list[BaseValidator] = [
            WeeklyRestValidator(),
            BreakValidator(),
            AbsenceConflictValidator(),
            NightPresenceDurationValidator(),
            ConsecutiveNightsValidator(),
            GuardAmplitudeValidator(),
            Guard24hValidator(),
        ]

    def build_context(
        self,
        shifts: Iterable[Shift] = (),
        absences: Iterable[Absence] = (),
    ) -> ValidationContext:
        return ValidationContext(rules=self.rules, shifts=list(shifts), absences=list(absences))

    def validate_shift(
        self,
        shift: Shift,
        existing_shifts: Iterable[Shift] = (),
        absences: Iterable[Absence] = (),
    ) -> ComplianceResult:
        """
        Run all compliance validations for a candidate shift.

        Args:
            shift: The shift to create or the edited version of a stored one
            existing_shifts: Shifts already stored (any employee)
            absences: Absences already stored (any employee)

        Returns:
            ComplianceResult with errors, warnings and every rule outcome
        """
        context = self.build_context(existing_shifts, absences)
        result = ComplianceResult()

        result.add_outcome(self.overlap.validate(shift, context))
        for outcome in self.daily_rest.validate_both_ways(shift, context):
            result.add_outcome(outcome)
        result.add_outcome(self.daily_hours.validate(shift, context))
        result.add_outcome(self.weekly_hours.validate(shift, context))

        for validator in self.validators:
            result.add_outcome(validator.validate(shift, context))

        if result.valid:
            logging.debug(
                f"Shift for {shift.employee_id} on {shift.date.isoformat()} is compliant "
                f"({len(result.warnings)} warning(s))"
            )
        else:
            logging.info(
                f"Shift for {shift.employee_id} on {shift.date.isoformat()} rejected: "
                f"{', '.join(code.value for code in result.error_codes)}"
            )
        return result

    def quick_validate(self, shift: Shift, existing_shifts: Iterable[Shift] = ()) -> QuickValidation:
        """Fast check limited to overlap, backward daily rest and hour caps."""
        context = self.build_context(existing_shifts)
        outcomes = [
            self.overlap.validate(shift, context),
            self.daily_rest.validate(shift, context),
            self.daily_hours.validate(shift, context),
            self.weekly_hours.validate(shift, context),
        ]
        blocking_errors = [o.message for o in outcomes if not o.valid and o.message]
        return QuickValidation(can_create=not blocking_errors, blocking_errors=blocking_errors)

    def compliance_summary(
        self,
        employee_id: str,
        day: date,
        existing_shifts: Iterable[Shift] = (),
    ) -> ComplianceSummary:
        """Remaining hour budgets and weekly rest of an employee around a day."""
        shifts = list(existing_shifts)
        daily = remaining_daily_hours(employee_id, day, shifts, self.rules)
        weekly = remaining_weekly_hours(employee_id, day, shifts, self.rules)
        rest_status = weekly_rest_status(employee_id, day, shifts, self.rules)

        recommendations = []
        if daily <= self.rules.low_daily_budget_hours:
            recommendations.append(f"Warning: only {daily:.1f}h available today.")
        if weekly <= self.rules.low_weekly_budget_hours:
            recommendations.append(f"Warning: only {weekly:.1f}h available this week.")
        if not rest_status.is_compliant:
            recommendations.append(
                f"Insufficient weekly rest: {rest_status.longest_rest:.1f}h "
                f"(minimum {self.rules.min_weekly_rest_hours:g}h)."
            )

        return ComplianceSummary(
            remaining_daily_hours=daily,
            remaining_weekly_hours=weekly,
            weekly_rest_status=rest_status,
            recommendations=recommendations,
        )

    def suggest_alternatives(
        self,
        shift: Shift,
        existing_shifts: Iterable[Shift] = (),
        result: Optional[ComplianceResult] = None,
    ) -> list[SlotSuggestion]:
        """Corrected slots for a failed candidate; validates first when no result is given."""
        shifts = list(existing_shifts)
        if result is None:
            result = self.validate_shift(shift, shifts)
        return suggest_alternatives(shift, self.build_context(shifts), result)
