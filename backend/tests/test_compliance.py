"""Unit tests for compliance validators.

Tests overlap, daily and weekly rest, daily and weekly hour caps,
the mandatory break and absence conflicts.
"""

import pytest
from datetime import date, timedelta
from fractions import Fraction

from compliance.types import (
    Absence,
    ComplianceRules,
    RuleCode,
    ShiftType,
    ViolationSeverity,
)
from compliance.validators import (
    AbsenceConflictValidator,
    BreakValidator,
    DailyHoursValidator,
    DailyRestValidator,
    OverlapValidator,
    WeeklyHoursValidator,
    WeeklyRestValidator,
    effective_hours,
    effective_minutes,
    find_next_shift,
    find_previous_shift,
    recommended_break_minutes,
    remaining_daily_hours,
    remaining_weekly_hours,
    weekly_rest_status,
)
from errors import UnknownShiftTypeError

MONDAY = date(2025, 3, 10)


def _day(offset: int) -> str:
    return (MONDAY + timedelta(days=offset)).isoformat()


# ============================================================================
# Effective hours
# ============================================================================


class TestEffectiveHours:

    def test_effective_counts_fully(self, make_shift, default_rules):
        shift = make_shift(_day(0), "08:00", "16:00", break_minutes=30)
        assert effective_hours(shift, default_rules) == 7.5

    def test_presence_day_counts_two_thirds(self, make_shift, default_rules):
        shift = make_shift(_day(0), "08:00", "23:00", shift_type=ShiftType.PRESENCE_DAY)
        assert effective_minutes(shift, default_rules) == Fraction(600)

    def test_presence_night_counts_nothing(self, make_shift, default_rules):
        shift = make_shift(_day(0), "21:00", "07:00", shift_type=ShiftType.PRESENCE_NIGHT)
        assert effective_hours(shift, default_rules) == 0

    def test_guard_counts_effective_segments(self, make_shift, default_rules):
        shift = make_shift(
            _day(0), "08:00", "08:00",
            shift_type=ShiftType.GUARD_24H,
            segments=[
                ("08:00", ShiftType.EFFECTIVE, 30),
                ("14:00", ShiftType.PRESENCE_DAY),
                ("20:00", ShiftType.EFFECTIVE),
                ("22:00", ShiftType.PRESENCE_NIGHT),
            ],
        )
        # 5.5h net + 2h
        assert effective_hours(shift, default_rules) == 7.5

    def test_stored_guard_without_segments_falls_back_to_duration(self, make_shift, default_rules):
        shift = make_shift(_day(0), "08:00", "20:00", shift_type=ShiftType.GUARD_24H)
        assert effective_hours(shift, default_rules) == 12

    def test_unknown_type_is_rejected(self, make_shift):
        with pytest.raises(UnknownShiftTypeError):
            make_shift(_day(0), "08:00", "12:00", shift_type="on_call")

    def test_empty_type_defaults_to_effective(self, make_shift):
        assert make_shift(_day(0), "08:00", "12:00", shift_type="").shift_type == ShiftType.EFFECTIVE


# ============================================================================
# Overlap
# ============================================================================


class TestOverlapValidator:

    def test_overlapping_shift_is_rejected(self, make_shift, make_context):
        existing = make_shift(_day(0), "08:00", "12:00", id="s1")
        candidate = make_shift(_day(0), "11:00", "15:00")

        outcome = OverlapValidator().validate(candidate, make_context([existing]))

        assert not outcome.valid
        assert outcome.code == RuleCode.SHIFT_OVERLAP
        assert outcome.details["conflicting_shift_id"] == "s1"
        assert outcome.details["conflicting_shift_start"] == "08:00"

    def test_back_to_back_is_accepted(self, make_shift, make_context):
        existing = make_shift(_day(0), "08:00", "12:00", id="s1")
        candidate = make_shift(_day(0), "12:00", "16:00")
        assert OverlapValidator().validate(candidate, make_context([existing])).valid

    def test_edited_shift_does_not_conflict_with_itself(self, make_shift, make_context):
        stored = make_shift(_day(0), "08:00", "12:00", id="s1")
        edited = make_shift(_day(0), "09:00", "13:00", id="s1")
        assert OverlapValidator().validate(edited, make_context([stored])).valid

    def test_other_employees_are_ignored(self, make_shift, make_context):
        other = make_shift(_day(0), "08:00", "12:00", employee="emp-2")
        candidate = make_shift(_day(0), "09:00", "11:00")
        assert OverlapValidator().validate(candidate, make_context([other])).valid

    def test_previous_night_shift_overlaps_morning(self, make_shift, make_context):
        night = make_shift(_day(0), "22:00", "07:00")
        morning = make_shift(_day(1), "06:00", "10:00")
        assert not OverlapValidator().validate(morning, make_context([night])).valid


# ============================================================================
# Daily rest
# ============================================================================


class TestDailyRestValidator:

    def test_short_rest_is_rejected(self, make_shift, make_context):
        previous = make_shift(_day(0), "14:00", "22:00")
        candidate = make_shift(_day(1), "07:00", "12:00")

        outcome = DailyRestValidator().validate(candidate, make_context([previous]))

        assert not outcome.valid
        assert outcome.details["rest_hours"] == 9.0
        assert outcome.details["minimum_required"] == 11
        assert outcome.details["suggested_start_time"] == "09:00"

    def test_exactly_eleven_hours_is_enough(self, make_shift, make_context):
        previous = make_shift(_day(0), "14:00", "22:00")
        candidate = make_shift(_day(1), "09:00", "12:00")
        assert DailyRestValidator().validate(candidate, make_context([previous])).valid

    def test_rest_after_a_wrapping_shift(self, make_shift, make_context):
        previous = make_shift(_day(0), "22:00", "06:00")
        candidate = make_shift(_day(1), "14:00", "18:00")

        outcome = DailyRestValidator().validate(candidate, make_context([previous]))

        assert not outcome.valid
        assert outcome.details["rest_hours"] == 8.0

    def test_presence_is_exempt(self, make_shift, make_context):
        night = make_shift(_day(0), "21:00", "07:00", shift_type=ShiftType.PRESENCE_NIGHT)
        candidate = make_shift(_day(1), "08:00", "12:00")
        assert DailyRestValidator().validate(candidate, make_context([night])).valid

    def test_no_previous_shift(self, make_shift, make_context):
        assert DailyRestValidator().validate(make_shift(_day(0), "08:00", "12:00"), make_context()).valid

    def test_forward_check_is_relabelled(self, make_shift, make_context):
        following = make_shift(_day(1), "07:00", "12:00", id="next")
        candidate = make_shift(_day(0), "14:00", "22:00")

        outcomes = DailyRestValidator().validate_both_ways(candidate, make_context([following]))

        assert len(outcomes) == 2
        assert outcomes[0].valid
        assert not outcomes[1].valid
        assert outcomes[1].message.startswith("Rest before the next shift")

    def test_previous_and_next_lookup(self, make_shift):
        first = make_shift(_day(0), "08:00", "12:00", id="a")
        second = make_shift(_day(2), "08:00", "12:00", id="b")
        candidate = make_shift(_day(1), "08:00", "12:00")

        assert find_previous_shift(candidate, [first, second]) is first
        assert find_next_shift(candidate, [first, second]) is second


# ============================================================================
# Daily and weekly hours
# ============================================================================


class TestDailyHoursValidator:

    def test_over_ten_hours_is_rejected(self, make_shift, make_context):
        morning = make_shift(_day(0), "08:00", "14:00")
        candidate = make_shift(_day(0), "15:00", "20:00")

        outcome = DailyHoursValidator().validate(candidate, make_context([morning]))

        assert not outcome.valid
        assert outcome.details["total_hours"] == 11.0
        assert outcome.details["existing_hours"] == 6.0
        assert outcome.details["excess_hours"] == 1.0

    def test_fifteen_hours_of_day_presence_is_exactly_ten(self, make_shift, make_context):
        candidate = make_shift(_day(0), "08:00", "23:00", shift_type=ShiftType.PRESENCE_DAY)
        outcome = DailyHoursValidator().validate(candidate, make_context())
        assert outcome.valid
        assert outcome.details["remaining_hours"] == 0

    def test_night_presence_does_not_count(self, make_shift, make_context):
        day_work = make_shift(_day(0), "08:00", "16:00")
        night = make_shift(_day(0), "21:00", "07:00", shift_type=ShiftType.PRESENCE_NIGHT)
        assert DailyHoursValidator().validate(night, make_context([day_work])).valid


class TestWeeklyHoursValidator:

    @pytest.fixture
    def forty_hours(self, make_shift):
        return [make_shift(_day(i), "08:00", "16:00", id=f"w{i}") for i in range(5)]

    def test_under_warning_threshold(self, make_shift, make_context):
        existing = [make_shift(_day(i), "08:00", "16:00") for i in range(4)]
        outcome = WeeklyHoursValidator().validate(make_shift(_day(4), "08:00", "12:00"), make_context(existing))
        assert outcome.valid
        assert outcome.message is None

    def test_warning_between_44_and_48(self, make_shift, make_context, forty_hours):
        outcome = WeeklyHoursValidator().validate(make_shift(_day(5), "08:00", "12:00"), make_context(forty_hours))
        assert outcome.valid
        assert outcome.is_warning
        assert outcome.details["total_hours"] == 44.0

    def test_exactly_48_is_a_warning(self, make_shift, make_context, forty_hours):
        outcome = WeeklyHoursValidator().validate(make_shift(_day(5), "08:00", "16:00"), make_context(forty_hours))
        assert outcome.valid
        assert outcome.is_warning

    def test_over_48_is_rejected(self, make_shift, make_context, forty_hours):
        outcome = WeeklyHoursValidator().validate(make_shift(_day(5), "08:00", "17:00"), make_context(forty_hours))
        assert not outcome.valid
        assert outcome.details["total_hours"] == 49.0
        assert outcome.details["maximum_allowed"] == 48

    def test_previous_week_is_ignored(self, make_shift, make_context, forty_hours):
        candidate = make_shift((MONDAY + timedelta(days=7)).isoformat(), "08:00", "17:00")
        outcome = WeeklyHoursValidator().validate(candidate, make_context(forty_hours))
        assert outcome.valid
        assert outcome.details["total_hours"] == 9.0

    def test_adding_a_shift_never_lowers_the_total(self, make_shift, make_context):
        shifts = []
        last_total = 0
        for i, (start, end) in enumerate([("08:00", "12:00"), ("13:00", "14:00"), ("22:00", "02:00")]):
            outcome = WeeklyHoursValidator().validate(make_shift(_day(i), start, end), make_context(shifts))
            assert outcome.details["total_hours"] >= last_total
            last_total = outcome.details["total_hours"]
            shifts.append(make_shift(_day(i), start, end))

    def test_remaining_weekly_hours(self, make_shift, default_rules, forty_hours):
        assert remaining_weekly_hours("emp-1", MONDAY, forty_hours, default_rules) == 8
        heavy = forty_hours + [make_shift(_day(5), "06:00", "16:00"), make_shift(_day(6), "06:00", "16:00")]
        assert remaining_weekly_hours("emp-1", MONDAY, heavy, default_rules) == 0

    def test_remaining_daily_hours(self, make_shift, default_rules):
        shifts = [make_shift(_day(0), "08:00", "14:30")]
        assert remaining_daily_hours("emp-1", MONDAY, shifts, default_rules) == 3.5
        assert remaining_daily_hours("emp-2", MONDAY, shifts, default_rules) == 10


# ============================================================================
# Weekly rest
# ============================================================================


class TestWeeklyRestValidator:

    def test_daily_shifts_without_a_long_rest_are_rejected(self, make_shift, make_context):
        # Sunday before the week through Monday after it
        existing = [make_shift(_day(i), "08:00", "16:00") for i in range(-1, 8) if i != 2]
        candidate = make_shift(_day(2), "08:00", "16:00")

        outcome = WeeklyRestValidator().validate(candidate, make_context(existing))

        assert not outcome.valid
        assert outcome.details["longest_rest_hours"] == 16.0
        assert outcome.details["minimum_required"] == 35

    def test_a_free_saturday_gives_enough_rest(self, make_shift, make_context):
        existing = [make_shift(_day(i), "08:00", "16:00") for i in range(-1, 8) if i not in (2, 5)]
        candidate = make_shift(_day(2), "08:00", "16:00")

        outcome = WeeklyRestValidator().validate(candidate, make_context(existing))

        assert outcome.valid
        assert outcome.details["longest_rest_hours"] == 40.0

    def test_rest_status(self, make_shift, default_rules):
        shifts = [make_shift(_day(i), "08:00", "16:00") for i in range(5)]
        status = weekly_rest_status("emp-1", MONDAY, shifts, default_rules)
        # Friday 16:00 to the Tuesday 00:00 closing the window
        assert status.longest_rest == 80
        assert status.is_compliant
        assert len(status.rest_periods) == 6


# ============================================================================
# Break
# ============================================================================


class TestBreakValidator:

    def test_long_shift_without_break_is_a_warning(self, make_shift, make_context):
        outcome = BreakValidator().validate(make_shift(_day(0), "08:00", "15:00"), make_context())

        assert not outcome.valid
        assert outcome.severity == ViolationSeverity.WARNING
        assert outcome.details["shift_duration_minutes"] == 420
        assert outcome.details["minimum_break_required"] == 20

    def test_twenty_minutes_is_enough(self, make_shift, make_context):
        shift = make_shift(_day(0), "08:00", "15:00", break_minutes=20)
        assert BreakValidator().validate(shift, make_context()).valid

    def test_exactly_six_hours_needs_no_break(self, make_shift, make_context):
        assert BreakValidator().validate(make_shift(_day(0), "08:00", "14:00"), make_context()).valid

    def test_guard_is_skipped(self, make_shift, make_context):
        guard = make_shift(
            _day(0), "08:00", "08:00",
            shift_type=ShiftType.GUARD_24H,
            segments=[("08:00", ShiftType.EFFECTIVE)],
        )
        assert BreakValidator().validate(guard, make_context()).valid

    @pytest.mark.parametrize("minutes,expected", [
        (240, 0), (300, 15), (360, 15), (420, 20), (540, 30), (600, 30), (660, 45),
    ])
    def test_recommended_break(self, minutes, expected):
        assert recommended_break_minutes(minutes) == expected


# ============================================================================
# Absence conflict
# ============================================================================


class TestAbsenceConflictValidator:

    @pytest.fixture
    def vacation(self):
        return Absence(
            employee_id="emp-1",
            absence_type="vacation",
            start_date=date(2025, 3, 10),
            end_date=date(2025, 3, 14),
            status="approved",
            id="abs-1",
        )

    def test_shift_during_approved_absence_is_rejected(self, make_shift, make_context, vacation):
        outcome = AbsenceConflictValidator().validate(make_shift(_day(4), "08:00", "12:00"), make_context(absences=[vacation]))

        assert not outcome.valid
        assert outcome.details["conflicting_absence_id"] == "abs-1"
        assert "paid leave" in outcome.message

    def test_pending_absence_does_not_block(self, make_shift, make_context, vacation):
        pending = Absence(**{**vacation.__dict__, "status": "pending"})
        assert AbsenceConflictValidator().validate(make_shift(_day(1), "08:00", "12:00"), make_context(absences=[pending])).valid

    def test_day_after_absence_is_free(self, make_shift, make_context, vacation):
        assert AbsenceConflictValidator().validate(make_shift(_day(5), "08:00", "12:00"), make_context(absences=[vacation])).valid

    def test_other_employee_absence_is_ignored(self, make_shift, make_context, vacation):
        shift = make_shift(_day(1), "08:00", "12:00", employee="emp-2")
        assert AbsenceConflictValidator().validate(shift, make_context(absences=[vacation])).valid


class TestRulesAreConfigurable:

    def test_custom_daily_cap(self, make_shift, make_context):
        rules = ComplianceRules(max_daily_hours=8.0)
        outcome = DailyHoursValidator().validate(make_shift(_day(0), "08:00", "17:00"), make_context(rules=rules))
        assert not outcome.valid
        assert outcome.details["maximum_allowed"] == 8
