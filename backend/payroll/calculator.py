"""Gross pay of a single shift with every premium of the collective agreement."""

import logging
from fractions import Fraction
from typing import Iterable, Optional

from compliance.holidays import is_public_holiday, is_sunday
from compliance.segments import segment_spans
from compliance.types import ComplianceRules, Contract, Shift, ShiftType
from errors import UnknownShiftTypeError
from utils.rounding import exact, money, round2
from utils.time import night_minutes_in_span, shift_duration_minutes, time_to_minutes

from .overtime import overtime_premium, shift_overtime
from .types import ComputedPay, MonthlyEstimate, OvertimeSplit, PayLine, PayRates


def _net_hours(shift: Shift) -> Fraction:
    minutes = shift_duration_minutes(shift.start_time, shift.end_time, shift.break_minutes)
    return Fraction(max(0, minutes), 60)


def _night_minutes(shift: Shift) -> int:
    """Night-window minutes over the real span of the shift, a 24h one included."""
    start = time_to_minutes(shift.start_time)
    end = start + shift_duration_minutes(shift.start_time, shift.end_time, 0)
    return night_minutes_in_span(start, end)


def _night_premium_minutes(shift: Shift) -> int:
    """
    Minutes on which the night premium is paid.

    Effective work and night presence earn it only with an action during
    the night window. A guard earns it over the night part of its
    effective segments, capped by each segment's net minutes.
    """
    if shift.shift_type == ShiftType.GUARD_24H:
        minutes = 0
        for span in segment_spans(shift):
            if span.segment_type != ShiftType.EFFECTIVE:
                continue
            in_night = night_minutes_in_span(span.start_minute, span.start_minute + span.duration_minutes)
            minutes += min(in_night, span.net_minutes)
        return minutes

    if shift.shift_type in (ShiftType.EFFECTIVE, ShiftType.PRESENCE_NIGHT) and shift.has_night_action:
        return _night_minutes(shift)
    return 0


def night_premium_hours(shift: Shift) -> float:
    """Hours on which the night premium is paid."""
    return _night_premium_minutes(shift) / 60


def _night_premium(shift: Shift, rate: float, rates: PayRates) -> float:
    return money(Fraction(_night_premium_minutes(shift), 60), rate, rates.night)


def _calendar_premiums(
    base: float,
    shift: Shift,
    habitual_holiday_work: bool,
    rates: PayRates,
) -> tuple[float, float]:
    """Sunday and holiday premiums on a base amount."""
    sunday = money(base, rates.sunday) if is_sunday(shift.date) else 0.0
    holiday = 0.0
    if is_public_holiday(shift.date):
        rate = rates.holiday_habitual if habitual_holiday_work else rates.holiday_exceptional
        holiday = money(base, rate)
    return sunday, holiday


def _night_presence_ratio(shift: Shift, rates: PayRates) -> float:
    if shift.night_interventions_count >= rates.requalification_interventions:
        return 1.0
    return rates.presence_night_ratio


def calculate_shift_pay(
    shift: Shift,
    contract: Contract,
    existing_shifts: Iterable[Shift] = (),
    habitual_holiday_work: bool = False,
    rates: Optional[PayRates] = None,
    rules: Optional[ComplianceRules] = None,
    overtime: Optional[OvertimeSplit] = None,
) -> ComputedPay:
    """
    Compute the gross pay of one shift.

    Args:
        shift: The shift worked
        contract: Contract giving the hourly rate and weekly hours
        existing_shifts: Other shifts, used to find the hours worked earlier that week
        habitual_holiday_work: Holiday is part of the usual schedule (lower premium)
        rates: Premium rates, legal defaults when omitted
        rules: Thresholds and the day presence weight, shared with overtime
        overtime: Overtime already attributed to this shift, skips the lookup

    Returns:
        ComputedPay with each line rounded to cents

    Raises:
        MissingGuardSegmentsError: For a guard_24h shift without segments
    """
    rates = rates or PayRates()
    rules = rules or ComplianceRules()
    rate = contract.hourly_rate
    pay = ComputedPay()

    shift_type = shift.shift_type
    if shift_type in (ShiftType.EFFECTIVE, ShiftType.GUARD_24H):
        if overtime is None:
            overtime = shift_overtime(shift, existing_shifts, contract, rules, rates)

    if shift_type == ShiftType.EFFECTIVE:
        pay.base_pay = money(_net_hours(shift), rate)
        pay.sunday_majoration, pay.holiday_majoration = _calendar_premiums(
            pay.base_pay, shift, habitual_holiday_work, rates
        )
        # Mere presence in the night window earns no premium
        pay.night_majoration = _night_premium(shift, rate, rates)
        pay.overtime_majoration = overtime_premium(overtime, rate, rates)

    elif shift_type == ShiftType.PRESENCE_DAY:
        pay.presence_responsible_pay = money(_net_hours(shift), rules.presence_day_weight, rate)
        pay.sunday_majoration, pay.holiday_majoration = _calendar_premiums(
            pay.presence_responsible_pay, shift, habitual_holiday_work, rates
        )

    elif shift_type == ShiftType.PRESENCE_NIGHT:
        ratio = _night_presence_ratio(shift, rates)
        pay.night_presence_allowance = money(_net_hours(shift), rate, ratio)
        pay.night_majoration = _night_premium(shift, rate, rates)

    elif shift_type == ShiftType.GUARD_24H:
        _guard_pay(pay, shift, rate, habitual_holiday_work, rates, rules)
        pay.overtime_majoration = overtime_premium(overtime, rate, rates)

    else:
        raise UnknownShiftTypeError(f"Unknown shift type: {shift_type}")

    pay.total_pay = round2(
        pay.base_pay
        + pay.sunday_majoration
        + pay.holiday_majoration
        + pay.night_majoration
        + pay.overtime_majoration
        + pay.presence_responsible_pay
        + pay.night_presence_allowance
    )
    logging.debug(f"Pay for shift {shift.id or '<new>'} ({shift_type.value}): {pay.total_pay:.2f}")
    return pay


def _guard_pay(
    pay: ComputedPay,
    shift: Shift,
    rate: float,
    habitual_holiday_work: bool,
    rates: PayRates,
    rules: ComplianceRules,
) -> None:
    """Fill the lines of a 24h guard from its segments."""
    effective_minutes = 0
    presence_day_minutes = 0
    presence_night_minutes = 0

    for span in segment_spans(shift):
        if span.segment_type == ShiftType.EFFECTIVE:
            effective_minutes += span.net_minutes
        elif span.segment_type == ShiftType.PRESENCE_DAY:
            presence_day_minutes += span.net_minutes
        elif span.segment_type == ShiftType.PRESENCE_NIGHT:
            presence_night_minutes += span.net_minutes

    pay.base_pay = money(Fraction(effective_minutes, 60), rate)
    pay.sunday_majoration, pay.holiday_majoration = _calendar_premiums(
        pay.base_pay, shift, habitual_holiday_work, rates
    )
    pay.night_majoration = _night_premium(shift, rate, rates)

    pay.presence_responsible_pay = money(Fraction(presence_day_minutes, 60), rules.presence_day_weight, rate)

    ratio = _night_presence_ratio(shift, rates)
    pay.night_presence_allowance = money(Fraction(presence_night_minutes, 60), rate, ratio)


def pay_breakdown(pay: ComputedPay, rates: Optional[PayRates] = None) -> list[PayLine]:
    """Non-zero lines of a computed pay, for display."""
    rates = rates or PayRates()
    lines = [PayLine(label="Base pay", amount=pay.base_pay)]

    if pay.sunday_majoration > 0:
        lines.append(PayLine("Sunday premium", pay.sunday_majoration, money(rates.sunday, 100)))
    if pay.holiday_majoration > 0:
        base = pay.base_pay or pay.presence_responsible_pay
        percentage = round2(exact(pay.holiday_majoration) / exact(base) * 100) if base else None
        lines.append(PayLine("Public holiday premium", pay.holiday_majoration, percentage))
    if pay.night_majoration > 0:
        lines.append(PayLine("Night hours premium", pay.night_majoration, money(rates.night, 100)))
    if pay.overtime_majoration > 0:
        lines.append(PayLine("Overtime premium", pay.overtime_majoration))
    if pay.presence_responsible_pay > 0:
        lines.append(PayLine("Day responsible presence (2/3)", pay.presence_responsible_pay))
    if pay.night_presence_allowance > 0:
        lines.append(PayLine("Night presence allowance", pay.night_presence_allowance))

    return lines


def monthly_estimate(
    weekly_hours: float,
    hourly_rate: float,
    average_sundays: float = 0,
    average_night_hours: float = 0,
    rates: Optional[PayRates] = None,
) -> MonthlyEstimate:
    """Rough monthly gross and employer cost of a contract."""
    rates = rates or PayRates()
    weeks = exact(rates.weeks_per_month)
    weekly_hours, hourly_rate = exact(weekly_hours), exact(hourly_rate)

    base_salary = weekly_hours * weeks * hourly_rate
    sunday = exact(average_sundays) * weekly_hours / 7 * hourly_rate * exact(rates.sunday) * weeks
    night = exact(average_night_hours) * hourly_rate * exact(rates.night) * weeks
    majorations = sunday + night
    total = base_salary + majorations

    return MonthlyEstimate(
        base_salary=round2(base_salary),
        estimated_majorations=round2(majorations),
        total_estimate=round2(total),
        employer_cost=money(total, rates.employer_cost_factor),
    )
