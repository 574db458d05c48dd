from datetime import date

from pydantic import BaseModel, Field, field_validator, model_validator

from compliance.segments import segment_spans
from compliance.types import Absence, Contract, GuardSegment, SEGMENT_TYPES, Shift, ShiftType
from payroll.contributions import calculate_contributions
from payroll.types import ContributionSchedule, ContributionsResult
from utils.time import minutes_to_time, time_to_minutes


def _clock(value: str) -> str:
    # Raises InvalidTimeError, a ValueError, reported as a validation error
    return minutes_to_time(time_to_minutes(value))


class GuardSegmentIn(BaseModel):
    start_time: str
    segment_type: ShiftType = ShiftType.EFFECTIVE
    break_minutes: int = Field(default=0, ge=0)

    @field_validator("start_time")
    @classmethod
    def check_start_time(cls, v: str) -> str:
        return _clock(v)

    @field_validator("segment_type")
    @classmethod
    def check_segment_type(cls, v: ShiftType) -> ShiftType:
        if v not in SEGMENT_TYPES:
            raise ValueError(f"A guard segment cannot be of type {v.value}")
        return v

    def to_domain(self) -> GuardSegment:
        return GuardSegment(
            start_time=self.start_time,
            segment_type=self.segment_type,
            break_minutes=self.break_minutes,
        )


class ShiftIn(BaseModel):
    """Raw shift fields as entered in the scheduling UI."""
    employee_id: str = Field(min_length=1)
    date: date
    start_time: str
    end_time: str
    break_minutes: int = Field(default=0, ge=0)
    shift_type: ShiftType = ShiftType.EFFECTIVE
    contract_id: str | None = None
    id: str | None = None
    has_night_action: bool = False
    night_interventions_count: int = Field(default=0, ge=0)
    guard_segments: list[GuardSegmentIn] = []

    @field_validator("start_time", "end_time")
    @classmethod
    def check_time(cls, v: str) -> str:
        return _clock(v)

    @model_validator(mode="after")
    def check_shape(self) -> "ShiftIn":
        if self.shift_type == ShiftType.GUARD_24H:
            if not self.guard_segments:
                raise ValueError("A 24h guard needs at least one segment")
            # Raises InvalidGuardSegmentsError when the segments do not tile 24h
            segment_spans(self.to_domain())
        elif self.start_time == self.end_time:
            # Equal times mean 24h, only meaningful for a guard
            raise ValueError("End time must differ from start time")
        return self

    def to_domain(self) -> Shift:
        return Shift(
            employee_id=self.employee_id,
            date=self.date,
            start_time=self.start_time,
            end_time=self.end_time,
            break_minutes=self.break_minutes,
            shift_type=self.shift_type,
            contract_id=self.contract_id,
            id=self.id,
            has_night_action=self.has_night_action,
            night_interventions_count=self.night_interventions_count,
            guard_segments=[s.to_domain() for s in self.guard_segments],
        )


class ContractIn(BaseModel):
    weekly_hours: float = Field(gt=0)
    hourly_rate: float = Field(gt=0)
    id: str | None = None

    def to_domain(self) -> Contract:
        return Contract(weekly_hours=self.weekly_hours, hourly_rate=self.hourly_rate, id=self.id)


class AbsenceIn(BaseModel):
    employee_id: str = Field(min_length=1)
    absence_type: str
    start_date: date
    end_date: date
    status: str = "pending"  # "pending", "approved", "rejected"
    id: str | None = None

    @model_validator(mode="after")
    def check_range(self) -> "AbsenceIn":
        if self.end_date < self.start_date:
            raise ValueError("Absence end date is before its start date")
        return self

    def to_domain(self) -> Absence:
        return Absence(
            employee_id=self.employee_id,
            absence_type=self.absence_type,
            start_date=self.start_date,
            end_date=self.end_date,
            status=self.status,
            id=self.id,
        )


class ContributionsRequest(BaseModel):
    gross_pay: float = Field(ge=0)
    withholding_rate: float = Field(default=0.0, ge=0, le=1)
    exempt_employer_social_security: bool = False

    def calculate(self, schedule: ContributionSchedule | None = None) -> ContributionsResult:
        return calculate_contributions(
            self.gross_pay,
            withholding_rate=self.withholding_rate,
            exempt_employer_social_security=self.exempt_employer_social_security,
            schedule=schedule,
        )
