"""
Domain-specific exception hierarchy for the interview scheduling engine.
"""


class SchedulingError(Exception):
    """Base class for all application-level errors."""


class TimeParseError(SchedulingError, ValueError):
    """Raised when a wall-clock time string cannot be normalized."""


class InvalidDurationError(SchedulingError, ValueError):
    """Raised when a booking asks for a duration the policy does not offer."""


class SlotUnavailableError(SchedulingError):
    """Raised when a slot is taken or outside office hours at booking time."""


class ConfigurationError(SchedulingError):
    """Raised when configuration cannot be loaded or is inconsistent."""


class DraftValidationError(SchedulingError, ValueError):
    """Raised when feedback is submitted before it is complete."""
