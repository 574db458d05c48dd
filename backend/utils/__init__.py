"""Shared helpers: time arithmetic, rounding and logging setup."""

from .time import (
    MINUTES_PER_DAY,
    time_to_minutes,
    minutes_to_time,
    shift_duration_minutes,
    night_intersection_hours,
    night_minutes_in_span,
    week_start,
    week_end,
    shift_start_datetime,
    shift_end_datetime,
    hours_between,
    shifts_overlap,
)
from .rounding import exact, money, round_half_up, round1, round2
from .log import setup_logging

__all__ = [
    "MINUTES_PER_DAY",
    "time_to_minutes",
    "minutes_to_time",
    "shift_duration_minutes",
    "night_intersection_hours",
    "night_minutes_in_span",
    "week_start",
    "week_end",
    "shift_start_datetime",
    "shift_end_datetime",
    "hours_between",
    "shifts_overlap",
    "exact",
    "money",
    "round_half_up",
    "round1",
    "round2",
    "setup_logging",
]
