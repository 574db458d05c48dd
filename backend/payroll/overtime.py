"""
Overtime attribution across the shifts of a week.

Overtime depends on what was already worked that week, so shifts are
folded in chronological order while carrying the running total of hours.
Each shift receives the overtime it adds on top of the contract hours,
split into the tier paid at 25% (first 8 overtime hours of the week) and
the tier paid at 50% (beyond).
"""

import logging
from fractions import Fraction
from itertools import groupby
from typing import Iterable, Optional

from compliance.types import ComplianceRules, Contract, Shift
from compliance.validators import effective_minutes
from utils.rounding import exact, money, round2
from utils.time import week_start

from .types import OvertimeSplit, PayRates


def overtime_split(
    hours_before,
    shift_hours,
    threshold,
    tier1_hours=8,
) -> OvertimeSplit:
    """
    Overtime added by a shift given the hours already worked that week.

    Args:
        hours_before: Weighted hours worked in the week before the shift
        shift_hours: Weighted hours of the shift
        threshold: Contract weekly hours
        tier1_hours: Overtime hours of the week paid at the first tier

    Returns:
        OvertimeSplit with the tier 1 and tier 2 hours of this shift
    """
    before = exact(hours_before)
    after = before + exact(shift_hours)
    threshold = exact(threshold)
    tier1_cap = exact(tier1_hours)

    overtime_before = max(Fraction(0), before - threshold)
    overtime_after = max(Fraction(0), after - threshold)

    tier1 = min(tier1_cap, overtime_after) - min(tier1_cap, overtime_before)
    tier2 = max(Fraction(0), overtime_after - tier1_cap) - max(Fraction(0), overtime_before - tier1_cap)
    return OvertimeSplit(tier1_hours=tier1, tier2_hours=tier2)


def attribute_overtime(
    shifts: Iterable[Shift],
    contract: Contract,
    rules: Optional[ComplianceRules] = None,
    rates: Optional[PayRates] = None,
) -> list[tuple[Shift, OvertimeSplit]]:
    """
    Fold one employee's shifts week by week and attribute overtime to each.

    Returns:
        (shift, split) pairs in chronological order
    """
    rules = rules or ComplianceRules()
    rates = rates or PayRates()

    ordered = sorted(shifts, key=lambda s: s.start_datetime)
    attributed = []
    for monday, week_shifts in groupby(ordered, key=lambda s: week_start(s.date)):
        running = Fraction(0)
        for shift in week_shifts:
            hours = effective_minutes(shift, rules) / 60
            split = overtime_split(running, hours, contract.weekly_hours, rates.overtime_tier1_hours)
            running += hours
            attributed.append((shift, split))
        logging.debug(f"Week of {monday.isoformat()}: {float(running):.2f}h worked")
    return attributed


def shift_overtime(
    shift: Shift,
    existing_shifts: Iterable[Shift],
    contract: Contract,
    rules: Optional[ComplianceRules] = None,
    rates: Optional[PayRates] = None,
) -> OvertimeSplit:
    """Overtime of one shift given the same employee's earlier shifts of its week."""
    rules = rules or ComplianceRules()
    rates = rates or PayRates()

    monday = week_start(shift.date)
    start = shift.start_datetime
    earlier = [
        s for s in existing_shifts
        if s.employee_id == shift.employee_id
        and not shift.is_same_as(s)
        and week_start(s.date) == monday
        and s.start_datetime < start
    ]
    hours_before = sum((effective_minutes(s, rules) for s in earlier), Fraction(0)) / 60
    hours = effective_minutes(shift, rules) / 60
    return overtime_split(hours_before, hours, contract.weekly_hours, rates.overtime_tier1_hours)


def overtime_premium(split: OvertimeSplit, hourly_rate: float, rates: Optional[PayRates] = None) -> float:
    """Premium owed for an overtime split, each tier rounded to cents."""
    rates = rates or PayRates()
    tier1 = money(split.tier1_hours, hourly_rate, rates.overtime_tier1)
    tier2 = money(split.tier2_hours, hourly_rate, rates.overtime_tier2)
    return round2(tier1 + tier2)
