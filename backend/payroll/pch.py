"""PCH disability benefit: monthly envelope and remaining charge for the employer."""

from enum import Enum

from utils.rounding import money, round2


class PchFundingMode(str, Enum):
    """How the assistance funded by the PCH is provided."""
    DIRECT_EMPLOYMENT = "direct_employment"
    AGENCY_MANDATE = "agency_mandate"
    SERVICE_PROVIDER = "service_provider"
    FAMILY_CAREGIVER = "family_caregiver"
    FAMILY_CAREGIVER_STOPPED_WORK = "family_caregiver_stopped_work"


# Element 1 hourly tariffs in euros, in force on 2026-01-01
PCH_TARIFFS_2026: dict[PchFundingMode, float] = {
    PchFundingMode.DIRECT_EMPLOYMENT: 19.34,
    PchFundingMode.AGENCY_MANDATE: 21.27,
    PchFundingMode.SERVICE_PROVIDER: 25.00,
    PchFundingMode.FAMILY_CAREGIVER: 4.78,
    PchFundingMode.FAMILY_CAREGIVER_STOPPED_WORK: 7.16,
}


def pch_hourly_rate(mode) -> float:
    return PCH_TARIFFS_2026[PchFundingMode(mode)]


def pch_envelope(monthly_hours: float, mode) -> float:
    """Monthly amount granted for the given hours."""
    return money(max(0.0, monthly_hours), pch_hourly_rate(mode))


def remaining_charge(consumed: float, envelope: float) -> float:
    """Part of the month's cost not covered by the envelope, never negative."""
    return round2(max(0.0, consumed - envelope))


def coverage_ratio(consumed: float, envelope: float) -> float:
    """Share of the envelope used, clipped to 1; 0 without an envelope."""
    if envelope <= 0:
        return 0.0
    return min(consumed / envelope, 1.0)
