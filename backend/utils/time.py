"""Time arithmetic for shifts: clock strings, durations, night hours, weeks."""

import re
from datetime import date, datetime, time, timedelta

from dateutil.relativedelta import relativedelta, MO, SU

from errors import InvalidTimeError

MINUTES_PER_DAY = 24 * 60
NIGHT_START_MINUTES = 21 * 60
NIGHT_END_MINUTES = 6 * 60

# Night window [21:00, 06:00) laid over two consecutive days (48h timeline).
# A shift starts within day one and lasts at most 24h, so it always fits.
NIGHT_WINDOWS = (
    (0, NIGHT_END_MINUTES),
    (NIGHT_START_MINUTES, MINUTES_PER_DAY),
    (MINUTES_PER_DAY, MINUTES_PER_DAY + NIGHT_END_MINUTES),
    (MINUTES_PER_DAY + NIGHT_START_MINUTES, 2 * MINUTES_PER_DAY),
)

_CLOCK_PATTERN = re.compile(r"^(\d{1,2}):(\d{2})(?::(\d{2}))?$")


def time_to_minutes(value) -> int:
    """
    Convert a clock value to minutes since midnight.

    Accepts "HH:MM", "HH:MM:SS" (seconds are ignored) or a datetime.time.

    Raises:
        InvalidTimeError: If the value cannot be read as a clock time
    """
    if isinstance(value, time):
        return value.hour * 60 + value.minute

    if not isinstance(value, str):
        raise InvalidTimeError(f"Expected a HH:MM string, got {value!r}")

    match = _CLOCK_PATTERN.match(value.strip())
    if not match:
        raise InvalidTimeError(f"Invalid time {value!r}, expected HH:MM")

    hours = int(match.group(1))
    minutes = int(match.group(2))
    seconds = int(match.group(3) or 0)
    if hours > 23 or minutes > 59 or seconds > 59:
        raise InvalidTimeError(f"Time out of range: {value!r}")

    return hours * 60 + minutes


def minutes_to_time(minutes: int) -> str:
    """Convert minutes since midnight to "HH:MM", wrapping past 24h."""
    minutes = int(minutes) % MINUTES_PER_DAY
    return f"{minutes // 60:02d}:{minutes % 60:02d}"


def shift_duration_minutes(start_time, end_time, break_minutes: int = 0) -> int:
    """
    Duration of a shift in minutes, minus its break.

    An end at or before the start wraps past midnight, so equal start and
    end means exactly 24h.
    """
    start = time_to_minutes(start_time)
    end = time_to_minutes(end_time)
    if end <= start:
        end += MINUTES_PER_DAY
    return end - start - (break_minutes or 0)


def night_minutes_in_span(start_minute: int, end_minute: int) -> int:
    """Minutes of [start_minute, end_minute) inside the night windows."""
    total = 0
    for window_start, window_end in NIGHT_WINDOWS:
        overlap = min(end_minute, window_end) - max(start_minute, window_start)
        if overlap > 0:
            total += overlap
    return total


def night_intersection_hours(start_time, end_time) -> float:
    """
    Hours of [start_time, end_time) falling in the night window 21:00-06:00.

    Equal start and end counts as an empty interval here (0 night hours).
    """
    start = time_to_minutes(start_time)
    end = time_to_minutes(end_time)
    if start == end:
        return 0.0
    if end < start:
        end += MINUTES_PER_DAY
    return night_minutes_in_span(start, end) / 60


def week_start(day: date) -> date:
    """Monday of the week containing day."""
    return day + relativedelta(weekday=MO(-1))


def week_end(day: date) -> date:
    """Sunday of the week containing day."""
    return day + relativedelta(weekday=SU(+1))


def shift_start_datetime(shift_date: date, start_time) -> datetime:
    """Start of a shift as a naive datetime."""
    minutes = time_to_minutes(start_time)
    return datetime.combine(shift_date, time(minutes // 60, minutes % 60))


def shift_end_datetime(shift_date: date, start_time, end_time) -> datetime:
    """Real end of a shift, on the next day when it wraps past midnight."""
    start = time_to_minutes(start_time)
    end = time_to_minutes(end_time)
    end_dt = datetime.combine(shift_date, time(end // 60, end % 60))
    if end <= start:
        end_dt += timedelta(days=1)
    return end_dt


def hours_between(start: datetime, end: datetime) -> float:
    """Signed number of hours from start to end."""
    return (end - start).total_seconds() / 3600


def shifts_overlap(first, second) -> bool:
    """
    True when two shifts share at least one minute.

    Both arguments need date, start_time and end_time attributes. Shifts
    that touch end-to-start do not overlap.
    """
    first_start = shift_start_datetime(first.date, first.start_time)
    first_end = shift_end_datetime(first.date, first.start_time, first.end_time)
    second_start = shift_start_datetime(second.date, second.start_time)
    second_end = shift_end_datetime(second.date, second.start_time, second.end_time)
    return first_start < second_end and second_start < first_end
