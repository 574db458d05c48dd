"""Pay, overtime and social contributions for home-care shifts."""

from .types import (
    ComputedPay,
    ContributionLine,
    ContributionSchedule,
    ContributionsResult,
    EmployeeDeclaration,
    OvertimeSplit,
    PayRates,
)
from .calculator import calculate_shift_pay, monthly_estimate, night_premium_hours, pay_breakdown
from .overtime import attribute_overtime, overtime_premium, overtime_split, shift_overtime
from .contributions import calculate_contributions
from .declaration import build_employee_declaration, declaration_frame
from .pch import PchFundingMode, coverage_ratio, pch_envelope, remaining_charge

__all__ = [
    "ComputedPay",
    "ContributionLine",
    "ContributionSchedule",
    "ContributionsResult",
    "EmployeeDeclaration",
    "OvertimeSplit",
    "PayRates",
    "calculate_shift_pay",
    "monthly_estimate",
    "night_premium_hours",
    "pay_breakdown",
    "attribute_overtime",
    "overtime_premium",
    "overtime_split",
    "shift_overtime",
    "calculate_contributions",
    "build_employee_declaration",
    "declaration_frame",
    "PchFundingMode",
    "coverage_ratio",
    "pch_envelope",
    "remaining_charge",
]
