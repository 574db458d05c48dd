"""Validators for responsible presence and 24h guard duty."""

from datetime import timedelta

from utils.rounding import round1
from utils.time import hours_between, shift_duration_minutes

from .segments import segment_spans
from .types import (
    RuleCode,
    Shift,
    ShiftType,
    ValidationContext,
    ValidationOutcome,
)
from .validators import BaseValidator


def count_consecutive_nights(shift: Shift, context: ValidationContext) -> int:
    """
    Length of the run of night-presence days containing the candidate.

    Expands backward then forward from the candidate's date through the
    dates already holding a presence_night shift.
    """
    night_dates = {
        s.date for s in context.others(shift)
        if s.shift_type == ShiftType.PRESENCE_NIGHT
    }
    night_dates.add(shift.date)

    count = 1
    day = shift.date - timedelta(days=1)
    while day in night_dates:
        count += 1
        day -= timedelta(days=1)

    day = shift.date + timedelta(days=1)
    while day in night_dates:
        count += 1
        day += timedelta(days=1)

    return count


class NightPresenceDurationValidator(BaseValidator):
    """Validates the maximum length of a night presence block."""

    code = RuleCode.NIGHT_PRESENCE_MAX_DURATION

    def validate(self, shift: Shift, context: ValidationContext) -> ValidationOutcome:
        if shift.shift_type != ShiftType.PRESENCE_NIGHT:
            return ValidationOutcome.ok(self.code)

        rules = context.rules
        duration_hours = shift_duration_minutes(
            shift.start_time, shift.end_time, shift.break_minutes
        ) / 60

        if duration_hours > rules.max_night_presence_hours:
            return ValidationOutcome.fail(
                self.code,
                f"Night presence too long: {duration_hours:.1f}h instead of "
                f"{rules.max_night_presence_hours:g}h maximum.",
                duration_hours=round1(duration_hours),
                maximum_allowed=rules.max_night_presence_hours,
                excess_hours=round1(duration_hours - rules.max_night_presence_hours),
            )

        return ValidationOutcome.ok(self.code, duration_hours=round1(duration_hours))


class ConsecutiveNightsValidator(BaseValidator):
    """Validates the maximum run of consecutive night presences."""

    code = RuleCode.CONSECUTIVE_NIGHTS_MAX

    def validate(self, shift: Shift, context: ValidationContext) -> ValidationOutcome:
        if shift.shift_type != ShiftType.PRESENCE_NIGHT:
            return ValidationOutcome.ok(self.code)

        maximum = context.rules.max_consecutive_nights
        count = count_consecutive_nights(shift, context)

        if count > maximum:
            return ValidationOutcome.fail(
                self.code,
                f"Too many consecutive nights: {count} nights of presence "
                f"(maximum {maximum}).",
                consecutive_nights=count,
                maximum_allowed=maximum,
                new_shift_date=shift.date.isoformat(),
            )

        return ValidationOutcome.ok(
            self.code,
            consecutive_nights=count,
            remaining_nights=maximum - count,
        )


class GuardAmplitudeValidator(BaseValidator):
    """
    Validates the end-to-end span of chained presence and work.

    Two shifts chain when the gap between them is at most the configured
    chain gap and at least one of them is a responsible presence.
    """

    code = RuleCode.GUARD_MAX_AMPLITUDE

    def validate(self, shift: Shift, context: ValidationContext) -> ValidationOutcome:
        rules = context.rules
        chain = self.chain_of(shift, context)

        if len(chain) > 1:
            chain_start = chain[0].start_datetime
            chain_end = max(s.end_datetime for s in chain)
            amplitude = hours_between(chain_start, chain_end)

            if amplitude > rules.max_guard_amplitude_hours:
                return ValidationOutcome.fail(
                    self.code,
                    f"Guard amplitude exceeded: {amplitude:.1f}h of chained work and "
                    f"presence instead of {rules.max_guard_amplitude_hours:g}h maximum.",
                    amplitude=round1(amplitude),
                    maximum_allowed=rules.max_guard_amplitude_hours,
                    chain_length=len(chain),
                )

        return ValidationOutcome.ok(self.code, chain_length=len(chain))

    @staticmethod
    def chain_of(shift: Shift, context: ValidationContext) -> list[Shift]:
        """The chain of shifts, sorted by start, that contains the candidate."""
        max_gap = context.rules.max_chain_gap_hours
        ordered = sorted(context.others(shift) + [shift], key=lambda s: s.start_datetime)

        current = [ordered[0]]
        chain_end = ordered[0].end_datetime
        for item in ordered[1:]:
            previous = current[-1]
            gap = hours_between(chain_end, item.start_datetime)
            if gap <= max_gap and (previous.is_presence or item.is_presence):
                current.append(item)
                chain_end = max(chain_end, item.end_datetime)
                continue
            if any(s is shift for s in current):
                return current
            current = [item]
            chain_end = item.end_datetime
        return current


class Guard24hValidator(BaseValidator):
    """Validates the internal caps of one 24h guard."""

    code = RuleCode.GUARD_24H_EFFECTIVE_MAX

    def validate(self, shift: Shift, context: ValidationContext) -> ValidationOutcome:
        if shift.shift_type != ShiftType.GUARD_24H:
            return ValidationOutcome.ok(self.code)

        rules = context.rules
        # Raises MissingGuardSegmentsError: a guard without segments is malformed
        spans = segment_spans(shift)

        effective_minutes = sum(
            span.net_minutes for span in spans
            if span.segment_type == ShiftType.EFFECTIVE
        )
        max_night_minutes = max(
            (span.duration_minutes for span in spans
             if span.segment_type == ShiftType.PRESENCE_NIGHT),
            default=0,
        )
        effective_hours = effective_minutes / 60
        max_night_hours = max_night_minutes / 60

        if effective_hours > rules.guard_max_effective_hours:
            return ValidationOutcome.fail(
                self.code,
                f"Too much effective work in the guard: {effective_hours:.1f}h "
                f"instead of {rules.guard_max_effective_hours:g}h maximum.",
                total_effective_hours=round1(effective_hours),
                maximum_allowed=rules.guard_max_effective_hours,
            )

        if max_night_hours > rules.guard_night_segment_warning_hours:
            return ValidationOutcome.ok(
                self.code,
                f"Night presence segment of {max_night_hours:.1f}h exceeds "
                f"{rules.guard_night_segment_warning_hours:g}h.",
                total_effective_hours=round1(effective_hours),
                max_night_segment_hours=round1(max_night_hours),
            )

        return ValidationOutcome.ok(
            self.code,
            total_effective_hours=round1(effective_hours),
            segment_count=len(spans),
        )
