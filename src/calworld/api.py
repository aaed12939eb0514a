from __future__ import annotations

from dataclasses import replace
from pathlib import Path
from typing import Any, Dict, List, Mapping, Optional, Sequence, Tuple, Union

from .attributes import standard as _standard  # noqa: F401  (registers attributes)
from .attributes.registry import compute_attributes
from .core.engine import CalendarRegistry
from .core.types import (
    CycleInfo,
    DayInfo,
    EraInfo,
    MoonPhaseInfo,
    SeasonRef,
    SunTimes,
    TimeComponents,
    WeatherResult,
    WeekdayInfo,
)
from .engines.calendar import CalendarEngine, MoonArg, ZoneArg
from .engines.clock import FormattingParts
from .engines.weather import ForecastDay, PresetCatalog
from .loader import load_definition, load_definition_file
from .model import CalendarDefinition

CalendarArg = Union[str, CalendarDefinition, CalendarEngine]
When = Union[int, TimeComponents]

_registry: Optional[CalendarRegistry] = None

def set_registry(reg: CalendarRegistry) -> None:
    global _registry
    _registry = reg

def _reg() -> CalendarRegistry:
    if _registry is None:
        raise RuntimeError("Calendar registry not initialized")
    return _registry

def _engine(calendar: CalendarArg) -> CalendarEngine:
    if isinstance(calendar, CalendarEngine):
        return calendar
    if isinstance(calendar, CalendarDefinition):
        return CalendarEngine(calendar)
    return _reg().get(calendar)

# ============================================================
# Registry
# ============================================================

def list_calendars() -> List[str]:
    return _reg().list()

def calendar_info(calendar: CalendarArg = "gregorian") -> Dict[str, Any]:
    return _engine(calendar).info()

def get_calendar(name: str) -> CalendarEngine:
    return _reg().get(name)

def make_engine(definition: CalendarDefinition) -> CalendarEngine:
    return CalendarEngine(definition)

def register_calendar(name: str, calendar: Union[CalendarDefinition, CalendarEngine], *,
                      overwrite: bool = False) -> CalendarEngine:
    eng = _engine(calendar)
    _reg().register(name, eng, overwrite=overwrite)
    return eng

def load_calendar(src: Union[str, Path, Mapping[str, Any]], *, register: bool = False,
                  overwrite: bool = False) -> CalendarEngine:
    """
    Builds an engine from a raw definition dict or a JSON file path.

    With ``register=True`` the engine is also added to the registry under its id.
    """
    if isinstance(src, Mapping):
        definition = load_definition(src)
    else:
        definition = load_definition_file(src)
    eng = CalendarEngine(definition)
    if register:
        _reg().register(definition.id, eng, overwrite=overwrite)
    return eng

# ============================================================
# Conversion
# ============================================================

def to_components(t: int, *, calendar: CalendarArg = "gregorian") -> TimeComponents:
    return _engine(calendar).to_components(t)

def to_time(c: TimeComponents, *, calendar: CalendarArg = "gregorian") -> int:
    return _engine(calendar).to_time(c)

def from_display(year: int, month: int = 1, day: int = 1, hour: int = 0, minute: int = 0, second: int = 0,
                 *, calendar: CalendarArg = "gregorian") -> int:
    """Scalar time from a display year and 1-based month/day."""
    eng = _engine(calendar)
    return eng.to_time(eng.from_display(year, month, day, hour, minute, second))

def is_leap_year(year: int, *, calendar: CalendarArg = "gregorian") -> bool:
    """Leap test on a display year."""
    return _engine(calendar).leap.is_leap_display(year)

def days_in_year(year: int, *, calendar: CalendarArg = "gregorian") -> int:
    eng = _engine(calendar)
    return eng.days_in_year(eng.converter.internal_year(year))

def days_in_month(year: int, month: int, *, calendar: CalendarArg = "gregorian") -> int:
    """Days in a 1-based month of a display year."""
    eng = _engine(calendar)
    return eng.days_in_month(month - 1, eng.converter.internal_year(year))

# ============================================================
# Day facts
# ============================================================

def day_info(
    t: int,
    *,
    calendar: CalendarArg = "gregorian",
    zone: ZoneArg = None,
    attributes: Sequence[str] = (),
) -> DayInfo:
    info = _engine(calendar).describe(t, zone=zone)
    if attributes:
        attrs = compute_attributes(info, attributes)
        info = replace(info, attributes=attrs)
    return info

def weekday(when: When, *, calendar: CalendarArg = "gregorian") -> WeekdayInfo:
    return _engine(calendar).weekday(when)

def season(when: When, *, calendar: CalendarArg = "gregorian") -> Optional[SeasonRef]:
    return _engine(calendar).season(when)

def era(when: When, *, calendar: CalendarArg = "gregorian") -> Optional[EraInfo]:
    return _engine(calendar).era(when)

def cycles(when: When, *, calendar: CalendarArg = "gregorian") -> Tuple[CycleInfo, ...]:
    return _engine(calendar).cycles(when)

def formatting_parts(when: When, *, calendar: CalendarArg = "gregorian") -> FormattingParts:
    return _engine(calendar).formatting_parts(when)

# ============================================================
# Moons, sun, weather
# ============================================================

def moon_phase(when: When, moon: MoonArg = 0, *, calendar: CalendarArg = "gregorian") -> Optional[MoonPhaseInfo]:
    return _engine(calendar).moon_phase(when, moon)

def moon_phases(when: When, *, calendar: CalendarArg = "gregorian") -> Tuple[MoonPhaseInfo, ...]:
    return _engine(calendar).moon_phases(when)

def next_full_moon(when: When, moon: MoonArg = 0, *, calendar: CalendarArg = "gregorian",
                   max_days: int = 1000) -> Optional[TimeComponents]:
    return _engine(calendar).next_full_moon(when, moon, max_days)

def sun_times(when: When, *, calendar: CalendarArg = "gregorian", zone: ZoneArg = None) -> SunTimes:
    return _engine(calendar).sun_times(when, zone)

def darkness(when: When, *, calendar: CalendarArg = "gregorian", zone: ZoneArg = None,
             weather_penalty: float = 0.0) -> float:
    return _engine(calendar).darkness(when, zone, weather_penalty)

def weather(when: When, *, calendar: CalendarArg = "gregorian", zone: ZoneArg = None,
            seed: Optional[int] = None, catalog: Optional[PresetCatalog] = None) -> WeatherResult:
    return _engine(calendar).weather(when, zone=zone, seed=seed, catalog=catalog)

def forecast(when: When, days: int = 7, *, calendar: CalendarArg = "gregorian", zone: ZoneArg = None,
             catalog: Optional[PresetCatalog] = None) -> List[ForecastDay]:
    return _engine(calendar).forecast(when, days, zone=zone, catalog=catalog)
