"""Type definitions for the payroll module."""

from dataclasses import dataclass, field, fields
from fractions import Fraction
from typing import Optional


@dataclass(frozen=True)
class PayRates:
    """Premium rates and presence ratios of the collective agreement."""
    sunday: float = 0.30
    holiday_habitual: float = 0.60  # Holiday in the employee's usual schedule
    holiday_exceptional: float = 1.00
    night: float = 0.20  # Only with an action during the night window
    overtime_tier1: float = 0.25
    overtime_tier2: float = 0.50
    overtime_tier1_hours: float = 8.0

    # Day presence is weighted by ComplianceRules.presence_day_weight
    presence_night_ratio: float = 0.25
    requalification_interventions: int = 4  # Night interventions paying the block as work

    # Monthly estimate
    weeks_per_month: float = 4.33
    employer_cost_factor: float = 1.42


@dataclass(frozen=True)
class ContributionSchedule:
    """Social contribution rates for direct employment, 2025 schedule."""
    pass_monthly: float = 3925.0  # Monthly social security ceiling
    smic_monthly: float = 1801.80  # Monthly gross minimum wage, 35h/week
    csg_base_ratio: float = 0.9825

    # Employee
    csg_deductible: float = 0.068
    csg_non_deductible: float = 0.024
    crds: float = 0.005
    employee_old_age_capped: float = 0.069
    employee_pension_t1: float = 0.0315

    # Employer
    sickness_reduced: float = 0.07
    sickness_full: float = 0.13
    sickness_threshold_smic: float = 2.5
    employer_old_age_capped: float = 0.0855
    employer_old_age_uncapped: float = 0.019
    family_reduced: float = 0.0345
    family_full: float = 0.0525
    family_threshold_smic: float = 3.5
    work_accident: float = 0.005
    unemployment: float = 0.0405
    fnal: float = 0.001
    csa: float = 0.003
    employer_pension_t1: float = 0.0472


@dataclass
class ComputedPay:
    """Gross pay of one shift, split by line. Every amount is rounded to cents."""
    base_pay: float = 0.0
    sunday_majoration: float = 0.0
    holiday_majoration: float = 0.0
    night_majoration: float = 0.0
    overtime_majoration: float = 0.0
    presence_responsible_pay: float = 0.0
    night_presence_allowance: float = 0.0
    total_pay: float = 0.0

    def to_dict(self) -> dict:
        return {f.name: getattr(self, f.name) for f in fields(self)}


@dataclass
class PayLine:
    """One displayable line of a pay breakdown."""
    label: str
    amount: float
    percentage: Optional[float] = None


@dataclass
class MonthlyEstimate:
    base_salary: float
    estimated_majorations: float
    total_estimate: float
    employer_cost: float


@dataclass
class OvertimeSplit:
    """Overtime hours attributed to one shift, by premium tier."""
    tier1_hours: Fraction = Fraction(0)
    tier2_hours: Fraction = Fraction(0)

    @property
    def total_hours(self) -> Fraction:
        return self.tier1_hours + self.tier2_hours


@dataclass
class ContributionLine:
    label: str
    base: float
    rate: float
    amount: float
    is_employer: bool
    exempted: bool = False

    def to_dict(self) -> dict:
        return {
            "label": self.label,
            "base": self.base,
            "rate": self.rate,
            "amount": self.amount,
            "is_employer": self.is_employer,
            "exempted": self.exempted,
        }


@dataclass
class ContributionsResult:
    """Employee and employer contributions for a monthly gross pay."""
    gross_pay: float
    employee_contributions: list[ContributionLine]
    total_employee_deductions: float
    employer_contributions: list[ContributionLine]
    total_employer_contributions: float
    taxable_income: float
    withholding_amount: float
    net_pay: float
    pass_monthly: float
    smic_monthly: float
    withholding_rate: float = 0.0
    exempt_employer_social_security: bool = False

    def to_dict(self) -> dict:
        return {
            "gross_pay": self.gross_pay,
            "employee_contributions": [c.to_dict() for c in self.employee_contributions],
            "total_employee_deductions": self.total_employee_deductions,
            "employer_contributions": [c.to_dict() for c in self.employer_contributions],
            "total_employer_contributions": self.total_employer_contributions,
            "taxable_income": self.taxable_income,
            "withholding_amount": self.withholding_amount,
            "net_pay": self.net_pay,
            "pass_monthly": self.pass_monthly,
            "smic_monthly": self.smic_monthly,
            "withholding_rate": self.withholding_rate,
            "exempt_employer_social_security": self.exempt_employer_social_security,
        }


@dataclass
class ShiftPayDetail:
    """One shift's row in a monthly declaration."""
    shift_id: Optional[str]
    date: str
    start_time: str
    end_time: str
    shift_type: str
    effective_hours: float
    night_hours: float
    is_sunday: bool
    is_holiday: bool
    overtime_hours: float
    pay: float


@dataclass
class EmployeeDeclaration:
    """Hours by category and gross pay of one employee over a period."""
    employee_id: str
    total_hours: float = 0.0
    normal_hours: float = 0.0
    sunday_hours: float = 0.0
    holiday_hours: float = 0.0
    night_hours: float = 0.0
    overtime_hours: float = 0.0
    presence_day_hours: float = 0.0
    presence_night_hours: float = 0.0
    base_pay: float = 0.0
    sunday_majoration: float = 0.0
    holiday_majoration: float = 0.0
    night_majoration: float = 0.0
    overtime_majoration: float = 0.0
    presence_responsible_pay: float = 0.0
    night_presence_allowance: float = 0.0
    total_gross_pay: float = 0.0
    shifts_count: int = 0
    shifts: list[ShiftPayDetail] = field(default_factory=list)
