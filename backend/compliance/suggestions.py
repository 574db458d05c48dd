"""Alternative time slots for a shift that failed validation."""

import logging
from datetime import timedelta

from utils.time import minutes_to_time, shift_duration_minutes

from .types import ComplianceResult, RuleCode, Shift, SlotSuggestion, ValidationContext
from .validators import find_overlapping_shifts, find_previous_shift

MAX_SUGGESTIONS = 3


def _slot(start, duration_minutes: int, reason: str) -> SlotSuggestion:
    end = start + timedelta(minutes=duration_minutes)
    return SlotSuggestion(
        date=start.date(),
        start_time=minutes_to_time(start.hour * 60 + start.minute),
        end_time=minutes_to_time(end.hour * 60 + end.minute),
        reason=reason,
    )


def suggest_alternatives(
    shift: Shift,
    context: ValidationContext,
    result: ComplianceResult,
) -> list[SlotSuggestion]:
    """
    Propose up to three corrected slots keeping the candidate's duration.

    A daily rest error moves the start to the previous shift's end plus the
    minimum rest; an overlap moves it to the end of each conflicting shift.

    Args:
        shift: The candidate shift that was validated
        context: The rules and existing shifts used for the validation
        result: The validation result for the candidate

    Returns:
        Suggested slots, empty when the candidate is valid
    """
    if result.valid:
        return []

    others = context.others(shift)
    duration = shift_duration_minutes(shift.start_time, shift.end_time, 0)
    suggestions: list[SlotSuggestion] = []
    seen = set()

    def add(suggestion: SlotSuggestion) -> None:
        key = (suggestion.date, suggestion.start_time)
        if key not in seen:
            seen.add(key)
            suggestions.append(suggestion)

    for error in result.errors:
        if error.code == RuleCode.DAILY_REST:
            previous = find_previous_shift(shift, others)
            if previous:
                earliest = previous.end_datetime + timedelta(hours=context.rules.min_daily_rest_hours)
                add(_slot(
                    earliest,
                    duration,
                    f"Respects the {context.rules.min_daily_rest_hours:g}h daily rest",
                ))

        elif error.code == RuleCode.SHIFT_OVERLAP:
            for conflicting in find_overlapping_shifts(shift, others):
                add(_slot(
                    conflicting.end_datetime,
                    duration,
                    f"After the shift ending at {conflicting.end_time}",
                ))

    logging.debug(f"Suggested {len(suggestions[:MAX_SUGGESTIONS])} slot(s) for employee {shift.employee_id}")
    return suggestions[:MAX_SUGGESTIONS]
