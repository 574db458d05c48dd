"""French public holidays used for pay premiums."""

from datetime import date, timedelta
from functools import lru_cache

from dateutil.easter import easter

# (month, day) of the fixed public holidays
FIXED_HOLIDAYS = (
    (1, 1),    # New Year's Day
    (5, 1),    # Labour Day
    (5, 8),    # Victory in Europe Day
    (7, 14),   # Bastille Day
    (8, 15),   # Assumption
    (11, 1),   # All Saints' Day
    (11, 11),  # Armistice Day
    (12, 25),  # Christmas
)


@lru_cache(maxsize=64)
def public_holidays(year: int) -> frozenset[date]:
    """All public holidays of a year, movable feasts included."""
    easter_sunday = easter(year)
    movable = (
        easter_sunday,
        easter_sunday + timedelta(days=1),   # Easter Monday
        easter_sunday + timedelta(days=39),  # Ascension
        easter_sunday + timedelta(days=50),  # Whit Monday
    )
    fixed = (date(year, month, day) for month, day in FIXED_HOLIDAYS)
    return frozenset((*fixed, *movable))


def is_public_holiday(day: date) -> bool:
    return day in public_holidays(day.year)


def is_sunday(day: date) -> bool:
    return day.weekday() == 6
