import pytest
from datetime import date, datetime, time
from types import SimpleNamespace

from errors import InvalidTimeError, MalformedShiftError
from utils.rounding import round1, round2, round_half_up
from utils.time import (
    hours_between,
    minutes_to_time,
    night_intersection_hours,
    shift_duration_minutes,
    shift_end_datetime,
    shift_start_datetime,
    shifts_overlap,
    time_to_minutes,
    week_end,
    week_start,
)


def _span(day: str, start: str, end: str):
    return SimpleNamespace(date=date.fromisoformat(day), start_time=start, end_time=end)


class TestClockConversion:

    def test_hh_mm(self):
        assert time_to_minutes("00:00") == 0
        assert time_to_minutes("08:30") == 510
        assert time_to_minutes("23:59") == 1439

    def test_seconds_are_ignored(self):
        assert time_to_minutes("21:15:45") == 21 * 60 + 15

    def test_accepts_time_objects(self):
        assert time_to_minutes(time(6, 45)) == 405

    @pytest.mark.parametrize("value", ["", "8h30", "24:00", "12:60", "ab:cd", None])
    def test_invalid_values_raise(self, value):
        with pytest.raises(InvalidTimeError):
            time_to_minutes(value)

    def test_invalid_time_is_a_malformed_input_error(self):
        with pytest.raises(MalformedShiftError):
            time_to_minutes("25:00")
        with pytest.raises(ValueError):
            time_to_minutes("25:00")

    def test_minutes_to_time_wraps(self):
        assert minutes_to_time(510) == "08:30"
        assert minutes_to_time(1440 + 75) == "01:15"


class TestShiftDuration:

    @pytest.mark.parametrize("start", ["00:00", "07:30", "12:00", "21:00", "23:59"])
    def test_equal_start_and_end_is_24h(self, start):
        assert shift_duration_minutes(start, start, 0) == 1440

    def test_same_day(self):
        assert shift_duration_minutes("08:00", "12:30") == 270

    def test_wraps_past_midnight(self):
        assert shift_duration_minutes("22:00", "06:00") == (360 + 1440) - 1320

    def test_break_is_subtracted(self):
        assert shift_duration_minutes("08:00", "16:00", 30) == 450


class TestNightIntersection:

    def test_day_shift_has_no_night(self):
        assert night_intersection_hours("08:00", "16:00") == 0

    def test_full_night(self):
        assert night_intersection_hours("21:00", "06:00") == 9

    def test_evening_overlap(self):
        assert night_intersection_hours("18:00", "23:00") == 2

    def test_early_morning_overlap(self):
        assert night_intersection_hours("04:00", "10:00") == 2

    def test_zero_duration_has_no_night(self):
        assert night_intersection_hours("22:00", "22:00") == 0

    def test_across_midnight_into_next_evening(self):
        # 20:00 -> 19:00 next day: 21-06 only
        assert night_intersection_hours("20:00", "19:00") == 9

    @pytest.mark.parametrize("start,middle,end", [
        ("18:00", "23:30", "07:00"),
        ("22:00", "01:00", "05:00"),
        ("05:00", "06:00", "22:00"),
        ("20:15", "02:45", "09:10"),
    ])
    def test_additive_over_partition(self, start, middle, end):
        whole = night_intersection_hours(start, end)
        parts = night_intersection_hours(start, middle) + night_intersection_hours(middle, end)
        assert whole == pytest.approx(parts)

    def test_matches_minute_by_minute_count(self):
        for start, end in [("19:10", "03:20"), ("00:00", "23:00"), ("05:59", "21:01")]:
            s = time_to_minutes(start)
            e = time_to_minutes(end)
            if e <= s:
                e += 1440
            count = sum(1 for m in range(s, e) if m % 1440 >= 1260 or m % 1440 < 360)
            assert night_intersection_hours(start, end) == pytest.approx(count / 60)


class TestWeekBounds:

    def test_monday_start_sunday_end(self):
        wednesday = date(2025, 3, 12)
        assert week_start(wednesday) == date(2025, 3, 10)
        assert week_end(wednesday) == date(2025, 3, 16)

    def test_monday_and_sunday_are_their_own_bounds(self):
        assert week_start(date(2025, 3, 10)) == date(2025, 3, 10)
        assert week_end(date(2025, 3, 16)) == date(2025, 3, 16)
        assert week_start(date(2025, 3, 16)) == date(2025, 3, 10)


class TestDatetimes:

    def test_end_on_next_day_when_wrapping(self):
        day = date(2025, 3, 10)
        assert shift_start_datetime(day, "22:00") == datetime(2025, 3, 10, 22, 0)
        assert shift_end_datetime(day, "22:00", "06:00") == datetime(2025, 3, 11, 6, 0)

    def test_equal_times_end_next_day(self):
        assert shift_end_datetime(date(2025, 3, 10), "08:00", "08:00") == datetime(2025, 3, 11, 8, 0)

    def test_hours_between(self):
        assert hours_between(datetime(2025, 3, 10, 20), datetime(2025, 3, 11, 7)) == 11


class TestShiftsOverlap:

    def test_overlap_is_symmetric(self):
        a = _span("2025-03-10", "08:00", "12:00")
        b = _span("2025-03-10", "11:00", "15:00")
        assert shifts_overlap(a, b) and shifts_overlap(b, a)

    def test_back_to_back_does_not_overlap(self):
        a = _span("2025-03-10", "08:00", "12:00")
        b = _span("2025-03-10", "12:00", "16:00")
        assert not shifts_overlap(a, b)
        assert not shifts_overlap(b, a)

    def test_night_shift_overlaps_next_morning(self):
        night = _span("2025-03-10", "22:00", "07:00")
        morning = _span("2025-03-11", "06:30", "10:00")
        assert shifts_overlap(night, morning)

    def test_different_days_do_not_overlap(self):
        a = _span("2025-03-10", "08:00", "12:00")
        b = _span("2025-03-11", "08:00", "12:00")
        assert not shifts_overlap(a, b)


class TestRounding:

    def test_half_up_at_two_places(self):
        assert round2(2.675) == 2.68
        assert round2(0.125) == 0.13
        assert round2(-1.005) == -1.01

    def test_one_place(self):
        assert round1(9.25) == 9.3

    def test_repeatable(self):
        assert round_half_up(1234.5678) == round_half_up(1234.5678) == 1234.57
