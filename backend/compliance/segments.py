"""Segment arithmetic for 24h guards."""

from dataclasses import dataclass

from errors import InvalidGuardSegmentsError, MissingGuardSegmentsError
from utils.time import MINUTES_PER_DAY, shift_duration_minutes, time_to_minutes

from .types import GuardSegment, Shift, ShiftType


@dataclass(frozen=True)
class SegmentSpan:
    """A guard segment with its inferred end resolved."""
    segment: GuardSegment
    end_time: str
    start_minute: int  # Minutes since midnight of the segment start
    duration_minutes: int
    net_minutes: int  # Duration minus the segment's own break, floored at 0

    @property
    def segment_type(self) -> ShiftType:
        return self.segment.segment_type


def segment_spans(shift: Shift) -> list[SegmentSpan]:
    """
    Resolve each segment's end for a guard_24h shift.

    Segment i ends where segment i+1 starts; the last one ends at the
    shift's own start time, closing the 24h cycle.

    Raises:
        MissingGuardSegmentsError: If the shift has no segments
        InvalidGuardSegmentsError: If the first segment does not start with
            the shift, or the starts are out of order, so the spans do not
            add up to 24h
    """
    segments = shift.guard_segments
    if not segments:
        raise MissingGuardSegmentsError(
            f"guard_24h shift on {shift.date.isoformat()} for {shift.employee_id} has no segments"
        )

    spans = []
    for i, segment in enumerate(segments):
        if i + 1 < len(segments):
            end_time = segments[i + 1].start_time
        else:
            end_time = shift.start_time
        duration = shift_duration_minutes(segment.start_time, end_time, 0)
        spans.append(SegmentSpan(
            segment=segment,
            end_time=end_time,
            start_minute=time_to_minutes(segment.start_time),
            duration_minutes=duration,
            net_minutes=max(0, duration - (segment.break_minutes or 0)),
        ))

    total = sum(span.duration_minutes for span in spans)
    if total != MINUTES_PER_DAY:
        starts = ", ".join(s.start_time for s in segments)
        raise InvalidGuardSegmentsError(
            f"guard_24h shift on {shift.date.isoformat()} starting at {shift.start_time} "
            f"has segments [{starts}] covering {total} minutes instead of {MINUTES_PER_DAY}"
        )
    return spans


def guard_effective_minutes(shift: Shift) -> int:
    """Net minutes of the effective-work segments of a guard."""
    return sum(
        span.net_minutes for span in segment_spans(shift)
        if span.segment_type == ShiftType.EFFECTIVE
    )
