"""
calworld.engines.clock
----------------------
Clock-face facts: 12-hour conversion, canonical hours and the raw parts an
external formatter substitutes into its templates.
"""

from __future__ import annotations

from dataclasses import asdict, dataclass
from typing import TYPE_CHECKING, Any, Dict, Optional, Tuple

from ..core.types import TimeComponents
from ..model import CalendarDefinition, CanonicalHour

if TYPE_CHECKING:
    from .calendar import CalendarEngine


def canonical_hour(definition: CalendarDefinition, hour: int) -> Optional[CanonicalHour]:
    """
    Canonical hour containing ``hour``.

    Ranges are half-open ``[start, end)`` and may wrap midnight; an hour equal
    to some ``end_hour`` matches that entry when no range contains it.
    """
    hours = definition.canonical_hours.values_list()
    for ch in hours:
        if ch.start_hour <= ch.end_hour:
            if ch.start_hour <= hour < ch.end_hour:
                return ch
        elif hour >= ch.start_hour or hour < ch.end_hour:
            return ch
    for ch in hours:
        if hour == ch.end_hour:
            return ch
    return None


def hour12(definition: CalendarDefinition, hour: int) -> Tuple[int, bool]:
    """(12-hour value, is_pm) on a clock split at ``floor(hours_per_day / 2)``."""
    midday = definition.hours_per_day // 2
    if hour == 0:
        h = midday
    elif hour > midday:
        h = hour - midday
    else:
        h = hour
    return h, hour >= midday


def meridiem(definition: CalendarDefinition, hour: int) -> Tuple[str, str]:
    """(full, abbreviated) meridiem labels for ``hour``."""
    _, is_pm = hour12(definition, hour)
    notation = definition.am_pm
    full = (notation.pm or "PM") if is_pm else (notation.am or "AM")
    abbr = (notation.pm_abbr if is_pm else notation.am_abbr) or full
    return full, abbr


@dataclass(frozen=True)
class FormattingParts:
    year: int
    year_padded: str
    month: Optional[int]
    month_name: str
    month_abbr: str
    day: Optional[int]
    day_of_year: int
    weekday_index: int
    weekday_name: str
    weekday_abbr: str
    hour: int
    minute: int
    second: int
    hour12: int
    meridiem: str
    meridiem_abbr: str
    week_of_year: int
    week_of_month: int
    week_name: str = ""
    week_abbr: str = ""
    canonical_hour: str = ""
    canonical_hour_abbr: str = ""
    era_name: str = ""
    era_abbr: str = ""
    era_year: Optional[int] = None
    season_name: str = ""
    season_abbr: str = ""
    season_index: Optional[int] = None
    festival_name: str = ""

    def as_tokens(self) -> Dict[str, Any]:
        return asdict(self)


def formatting_parts(engine: "CalendarEngine", c: TimeComponents) -> FormattingParts:
    d = engine.definition
    conv = engine.converter

    display_year = conv.display_year(c.year)
    day_of_year = conv.day_of_year(c) + 1

    # 1. Month and day; intercalary days and non-counting festivals have no month number
    festival = engine.festivals.find_festival(c)
    months = d.months_list
    month_def = None if d.is_monthless or not 0 <= c.month < len(months) else months[c.month]
    off_cycle = (festival is not None and not festival.counts_for_weekday) or (
        month_def is not None and month_def.is_intercalary)

    if off_cycle:
        label = festival.name if festival is not None else month_def.name
        month_no, month_name, month_abbr, day_no = None, label, label[:3], None
    elif month_def is None:
        month_no, month_name, month_abbr, day_no = None, "", "", day_of_year
    else:
        month_no = month_def.ordinal or c.month + 1
        month_name = month_def.name
        month_abbr = month_def.abbreviation or month_def.name[:3]
        day_no = c.day_of_month + 1

    # 2. Weekday and weeks
    wd = engine.weekday(c)
    week = engine.weekdays.current_week(c)

    # 3. Time of day
    h12, _ = hour12(d, c.hour)
    full, abbr = meridiem(d, c.hour)
    ch = canonical_hour(d, c.hour)

    # 4. Era and season
    era = engine.eras.era_for_display_year(display_year)
    season = engine.season(c)

    return FormattingParts(
        year=display_year,
        year_padded=str(display_year).zfill(4),
        month=month_no,
        month_name=month_name,
        month_abbr=month_abbr,
        day=day_no,
        day_of_year=day_of_year,
        weekday_index=wd.index,
        weekday_name=wd.name,
        weekday_abbr=wd.abbreviation or wd.name[:3],
        hour=c.hour,
        minute=c.minute,
        second=c.second,
        hour12=h12,
        meridiem=full,
        meridiem_abbr=abbr,
        week_of_year=engine.weekdays.week_of_year(c),
        week_of_month=engine.weekdays.week_of_month(c),
        week_name=week.name if week else "",
        week_abbr=(week.abbreviation or week.name[:3]) if week else "",
        canonical_hour=ch.name if ch else "",
        canonical_hour_abbr=ch.abbreviation if ch else "",
        era_name=era.name if era else "",
        era_abbr=(era.abbreviation or era.name[:2]) if era else "",
        era_year=era.year_in_era if era else None,
        season_name=season.name if season else "",
        season_abbr=(season.abbreviation or season.name[:3]) if season else "",
        season_index=season.index if season else None,
        festival_name=festival.name if festival else "",
    )
