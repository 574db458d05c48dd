"""Exceptions for malformed engine input.

Compliance failures are never raised: rules always return a
ValidationOutcome. The errors below mean the caller handed over data the
engine cannot interpret, which is a caller bug and not a legal violation.
"""


class MalformedShiftError(ValueError):
    """Base class for shift data the engine cannot interpret."""


class InvalidTimeError(MalformedShiftError):
    """Raised when a clock string is not HH:MM or HH:MM:SS."""


class MissingGuardSegmentsError(MalformedShiftError):
    """Raised when a guard_24h shift carries no segments."""


class UnknownShiftTypeError(MalformedShiftError):
    """Raised when a shift or segment type is outside the known variants."""


class InvalidGuardSegmentsError(MalformedShiftError):
    """Raised when guard segments do not tile the 24h cycle from the shift start."""
