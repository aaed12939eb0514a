"""calworld public API.

Keep this surface small: users should mostly interact with functions re-exported here.
"""

# Initialize registry on import
from . import api_init as _api_init  # noqa: F401

from .api import (
    list_calendars,
    calendar_info,
    get_calendar,
    make_engine,
    register_calendar,
    load_calendar,
    to_components,
    to_time,
    from_display,
    is_leap_year,
    days_in_year,
    days_in_month,
    day_info,
    weekday,
    season,
    era,
    cycles,
    formatting_parts,
    moon_phase,
    moon_phases,
    next_full_moon,
    sun_times,
    darkness,
    weather,
    forecast,
)
from .core.errors import CalworldError, ConfigurationError, DomainError, InputError
from .core.types import DayInfo, TimeComponents
from .engines.calendar import CalendarEngine
from .model import CalendarDefinition

__all__ = [
    "list_calendars",
    "calendar_info",
    "get_calendar",
    "make_engine",
    "register_calendar",
    "load_calendar",
    "to_components",
    "to_time",
    "from_display",
    "is_leap_year",
    "days_in_year",
    "days_in_month",
    "day_info",
    "weekday",
    "season",
    "era",
    "cycles",
    "formatting_parts",
    "moon_phase",
    "moon_phases",
    "next_full_moon",
    "sun_times",
    "darkness",
    "weather",
    "forecast",
    "CalendarEngine",
    "CalendarDefinition",
    "DayInfo",
    "TimeComponents",
    "CalworldError",
    "ConfigurationError",
    "DomainError",
    "InputError",
]
