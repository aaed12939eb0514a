class CalworldError(Exception):
    """Base error."""

class ConfigurationError(CalworldError):
    """Raised when a calendar definition is malformed or self-contradictory."""

class DomainError(CalworldError, LookupError):
    """A caller named a moon or zone the calendar does not define."""

class InputError(CalworldError, ValueError):
    """Out-of-range input at an engine boundary, e.g. a negative day count."""
