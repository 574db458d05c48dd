import pytest
from datetime import date

from compliance.engine import ComplianceEngine
from compliance.types import (
    Absence,
    ComplianceRules,
    Contract,
    GuardSegment,
    Shift,
    ShiftType,
    ValidationContext,
)


@pytest.fixture
def default_rules():
    """Legal thresholds of the collective agreement."""
    return ComplianceRules()


@pytest.fixture
def engine(default_rules):
    return ComplianceEngine(default_rules)


@pytest.fixture
def contract():
    """35h contract at 15 euros an hour."""
    return Contract(weekly_hours=35.0, hourly_rate=15.0, id="contract-1")


@pytest.fixture
def make_shift():
    """Factory to create Shift objects. Dates accept ISO strings."""
    def _make_shift(
        date_str: str,
        start_time: str,
        end_time: str,
        employee: str = "emp-1",
        break_minutes: int = 0,
        shift_type: ShiftType = ShiftType.EFFECTIVE,
        id: str = None,
        segments: list[tuple] = None,
        **kwargs
    ) -> Shift:
        return Shift(
            employee_id=employee,
            date=date.fromisoformat(date_str),
            start_time=start_time,
            end_time=end_time,
            break_minutes=break_minutes,
            shift_type=shift_type,
            id=id,
            guard_segments=[GuardSegment(*segment) for segment in segments or []],
            **kwargs
        )
    return _make_shift


@pytest.fixture
def make_context(default_rules):
    """Factory to create ValidationContext objects."""
    def _make_context(
        shifts: list[Shift] = None,
        absences: list[Absence] = None,
        rules: ComplianceRules = None,
    ) -> ValidationContext:
        return ValidationContext(
            rules=rules or default_rules,
            shifts=shifts or [],
            absences=absences or [],
        )
    return _make_context
