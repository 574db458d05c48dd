"""
Social contributions for home-care direct employment.

Indicative 2025 rates. The employer exemption (disabled or elderly
employers under the social security code) zeroes the four core social
security employer lines; work accident, unemployment, housing, solidarity
and supplementary pension stay due.
"""

import logging
from typing import Optional

from utils.rounding import money, round2

from .types import ContributionLine, ContributionSchedule, ContributionsResult

CSG_DEDUCTIBLE = "CSG (deductible)"
CSG_NON_DEDUCTIBLE = "CSG (non-deductible)"
CRDS = "CRDS"


def _line(label: str, base: float, rate: float, employer: bool, exempted: bool = False) -> ContributionLine:
    return ContributionLine(
        label=label,
        base=base,
        rate=rate,
        amount=0.0 if exempted else money(base, rate),
        is_employer=employer,
        exempted=exempted,
    )


def calculate_contributions(
    gross_pay: float,
    withholding_rate: float = 0.0,
    exempt_employer_social_security: bool = False,
    schedule: Optional[ContributionSchedule] = None,
) -> ContributionsResult:
    """
    Compute employee and employer contributions, taxable and net pay.

    Args:
        gross_pay: Monthly gross pay in euros
        withholding_rate: Income tax withholding rate, 0 to 1
        exempt_employer_social_security: Employer qualifies for the exemption
        schedule: Contribution rates, 2025 schedule when omitted

    Returns:
        ContributionsResult with every amount rounded to cents
    """
    schedule = schedule or ContributionSchedule()
    smic = schedule.smic_monthly

    csg_base = money(gross_pay, schedule.csg_base_ratio)
    capped_base = min(gross_pay, schedule.pass_monthly)

    employee = [
        _line(CSG_DEDUCTIBLE, csg_base, schedule.csg_deductible, False),
        _line(CSG_NON_DEDUCTIBLE, csg_base, schedule.csg_non_deductible, False),
        _line(CRDS, csg_base, schedule.crds, False),
        _line("Old-age insurance (capped)", capped_base, schedule.employee_old_age_capped, False),
        _line("AGIRC-ARRCO supplementary pension T1", capped_base, schedule.employee_pension_t1, False),
    ]

    if gross_pay <= schedule.sickness_threshold_smic * smic:
        sickness_rate = schedule.sickness_reduced
    else:
        sickness_rate = schedule.sickness_full
    if gross_pay <= schedule.family_threshold_smic * smic:
        family_rate = schedule.family_reduced
    else:
        family_rate = schedule.family_full

    exempt = exempt_employer_social_security
    employer = [
        _line("Sickness / maternity / disability / death", gross_pay, sickness_rate, True, exempt),
        _line("Old-age insurance (capped)", capped_base, schedule.employer_old_age_capped, True, exempt),
        _line("Old-age insurance (uncapped)", gross_pay, schedule.employer_old_age_uncapped, True, exempt),
        _line("Family allowances", gross_pay, family_rate, True, exempt),
        _line("Work accident (average rate)", gross_pay, schedule.work_accident, True),
        _line("Unemployment insurance", gross_pay, schedule.unemployment, True),
        _line("FNAL housing contribution", gross_pay, schedule.fnal, True),
        _line("CSA autonomy solidarity contribution", gross_pay, schedule.csa, True),
        _line("AGIRC-ARRCO supplementary pension T1", capped_base, schedule.employer_pension_t1, True),
    ]

    total_employee = round2(sum(line.amount for line in employee))
    total_employer = round2(sum(line.amount for line in employer))

    # Non-deductible CSG and CRDS stay in the taxable base
    csg_non_deductible = employee[1].amount
    crds = employee[2].amount
    deductible = round2(total_employee - csg_non_deductible - crds)
    taxable = round2(gross_pay - deductible)
    withholding = money(taxable, withholding_rate)
    net = round2(taxable - csg_non_deductible - crds - withholding)

    logging.debug(f"Contributions on {gross_pay:.2f}: employee {total_employee:.2f}, employer {total_employer:.2f}")

    return ContributionsResult(
        gross_pay=round2(gross_pay),
        employee_contributions=employee,
        total_employee_deductions=total_employee,
        employer_contributions=employer,
        total_employer_contributions=total_employer,
        taxable_income=taxable,
        withholding_amount=withholding,
        net_pay=net,
        pass_monthly=schedule.pass_monthly,
        smic_monthly=smic,
        withholding_rate=withholding_rate,
        exempt_employer_social_security=exempt,
    )
