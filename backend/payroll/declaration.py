"""Monthly declaration: hours by category and gross pay of one employee."""

import logging
from dataclasses import asdict
from typing import Iterable, Optional

import pandas as pd

from compliance.holidays import is_public_holiday, is_sunday
from compliance.types import ComplianceRules, Contract, Shift, ShiftType
from compliance.validators import effective_hours
from utils.rounding import round2
from utils.time import shift_duration_minutes

from .calculator import calculate_shift_pay, night_premium_hours
from .overtime import attribute_overtime
from .types import EmployeeDeclaration, PayRates, ShiftPayDetail

PAY_FIELDS = (
    "base_pay",
    "sunday_majoration",
    "holiday_majoration",
    "night_majoration",
    "overtime_majoration",
    "presence_responsible_pay",
    "night_presence_allowance",
)

# Shift types whose pay carries the overtime premium
OVERTIME_TYPES = (ShiftType.EFFECTIVE, ShiftType.GUARD_24H)


def build_employee_declaration(
    employee_id: str,
    contract: Contract,
    shifts: Iterable[Shift],
    habitual_holiday_work: bool = False,
    rates: Optional[PayRates] = None,
    rules: Optional[ComplianceRules] = None,
) -> EmployeeDeclaration:
    """
    Aggregate one employee's shifts over a period into a declaration.

    Overtime is attributed by folding the shifts week by week, so the
    period should start on a Monday or include the earlier shifts of its
    first week.

    Args:
        employee_id: Employee whose shifts are declared
        contract: Contract giving the hourly rate and weekly hours
        shifts: Shifts of the period, other employees are ignored
        habitual_holiday_work: Holidays are part of the usual schedule
        rates: Premium rates
        rules: Thresholds used to weight hours

    Returns:
        EmployeeDeclaration with hour and pay totals and one row per shift
    """
    rates = rates or PayRates()
    rules = rules or ComplianceRules()
    own = [s for s in shifts if s.employee_id == employee_id]

    declaration = EmployeeDeclaration(employee_id=employee_id)
    for shift, split in attribute_overtime(own, contract, rules, rates):
        pay = calculate_shift_pay(
            shift,
            contract,
            habitual_holiday_work=habitual_holiday_work,
            rates=rates,
            rules=rules,
            overtime=split,
        )
        hours = effective_hours(shift, rules)
        night_hours = night_premium_hours(shift)
        overtime_hours = split.total_hours if shift.shift_type in OVERTIME_TYPES else 0.0
        sunday = is_sunday(shift.date)
        holiday = is_public_holiday(shift.date)

        declaration.total_hours += hours
        if sunday:
            declaration.sunday_hours += hours
        if holiday:
            declaration.holiday_hours += hours
        declaration.night_hours += night_hours
        declaration.overtime_hours += overtime_hours

        if shift.shift_type.is_presence:
            raw = max(0, shift_duration_minutes(shift.start_time, shift.end_time, shift.break_minutes)) / 60
            if shift.shift_type == ShiftType.PRESENCE_DAY:
                declaration.presence_day_hours += raw
            else:
                declaration.presence_night_hours += raw

        for name in PAY_FIELDS:
            setattr(declaration, name, round2(getattr(declaration, name) + getattr(pay, name)))
        declaration.total_gross_pay = round2(declaration.total_gross_pay + pay.total_pay)

        declaration.shifts.append(ShiftPayDetail(
            shift_id=shift.id,
            date=shift.date.isoformat(),
            start_time=shift.start_time,
            end_time=shift.end_time,
            shift_type=shift.shift_type.value,
            effective_hours=round2(hours),
            night_hours=round2(night_hours),
            is_sunday=sunday,
            is_holiday=holiday,
            overtime_hours=round2(overtime_hours),
            pay=pay.total_pay,
        ))

    # Sunday, holiday and overtime hours are declared on their own lines
    declaration.normal_hours = max(
        0.0,
        declaration.total_hours - declaration.sunday_hours
        - declaration.holiday_hours - declaration.overtime_hours,
    )
    for name in (
        "total_hours", "normal_hours", "sunday_hours", "holiday_hours",
        "night_hours", "overtime_hours", "presence_day_hours", "presence_night_hours",
    ):
        setattr(declaration, name, round2(getattr(declaration, name)))
    declaration.shifts_count = len(declaration.shifts)

    logging.info(
        f"Declaration for {employee_id}: {declaration.shifts_count} shift(s), "
        f"{declaration.total_hours:.2f}h, gross {declaration.total_gross_pay:.2f}"
    )
    return declaration


def declaration_frame(declaration: EmployeeDeclaration) -> pd.DataFrame:
    """One row per declared shift, for the export layer."""
    columns = list(ShiftPayDetail.__dataclass_fields__)
    df = pd.DataFrame([asdict(detail) for detail in declaration.shifts], columns=columns)
    df.insert(0, "employee_id", declaration.employee_id)
    return df
