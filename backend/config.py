import os
from dataclasses import fields
from fractions import Fraction

from dotenv import load_dotenv

from compliance.types import ComplianceRules
from payroll.types import ContributionSchedule, PayRates

load_dotenv()

COMPLIANCE_PREFIX = "COMPLIANCE_"
PAY_PREFIX = "PAY_"
CONTRIBUTION_PREFIX = "CONTRIB_"


def _parse(raw: str, default):
    if isinstance(default, Fraction):
        return Fraction(raw.strip())
    if isinstance(default, bool):
        return raw.strip().lower() in ("1", "true", "yes")
    if isinstance(default, int):
        return int(raw)
    return float(raw)


def _load(cls, prefix: str):
    """Build a frozen settings struct, overriding defaults from the environment."""
    overrides = {}
    invalid = []
    for f in fields(cls):
        name = f"{prefix}{f.name.upper()}"
        raw = os.getenv(name)
        if raw is None or raw == "":
            continue
        try:
            overrides[f.name] = _parse(raw, f.default)
        except (ValueError, ZeroDivisionError):
            invalid.append(f"{name}={raw!r}")

    if invalid:
        raise RuntimeError(
            f"Invalid {cls.__name__} environment overrides: {', '.join(invalid)}. "
            "Please fix these in your .env file."
        )
    return cls(**overrides)


def load_compliance_rules() -> ComplianceRules:
    return _load(ComplianceRules, COMPLIANCE_PREFIX)


def load_pay_rates() -> PayRates:
    return _load(PayRates, PAY_PREFIX)


def load_contribution_schedule() -> ContributionSchedule:
    return _load(ContributionSchedule, CONTRIBUTION_PREFIX)
