"""
calworld.model
--------------
Pure data definitions for a fictional calendar.

Everything here is a frozen dataclass: the core only ever reads a definition.
Callers derive variants with ``CalendarDefinition.tweak(**changes)``.
Collections are ``OrderedMap`` so both positional (month 3) and keyed
("temperate") lookups see the same order.
"""

from __future__ import annotations

from dataclasses import dataclass, field, replace
from typing import List, Literal, Optional, Tuple, Union

from .core.types import OrderedMap
from .engines._num import round_half_up


# ============================================================
# Leap year rules
# ============================================================

@dataclass(frozen=True)
class NoLeapRule:
    pass

@dataclass(frozen=True)
class SimpleLeapRule:
    interval: int
    start: int = 0

@dataclass(frozen=True)
class GregorianLeapRule:
    start: int = 0

@dataclass(frozen=True)
class CustomLeapRule:
    pattern: str
    start: int = 0

LeapYearRule = Union[NoLeapRule, SimpleLeapRule, GregorianLeapRule, CustomLeapRule]


# ============================================================
# Months, weekdays, weeks, hours
# ============================================================

@dataclass(frozen=True)
class WeekdayDefinition:
    name: str
    abbreviation: str = ""
    is_rest_day: bool = False


@dataclass(frozen=True)
class MonthDefinition:
    """
    One month of the year.

    ``leap_days`` replaces ``days`` in leap years only. Intercalary months
    (``type="intercalary"``) do not advance the weekday cycle.
    ``starting_weekday`` pins the weekday of day 0 of this month.
    """
    name: str
    days: int
    ordinal: int = 0
    abbreviation: str = ""
    leap_days: Optional[int] = None
    type: Literal["standard", "intercalary"] = "standard"
    starting_weekday: Optional[int] = None
    weekdays: OrderedMap[str, WeekdayDefinition] = field(default_factory=OrderedMap)

    @property
    def is_intercalary(self) -> bool:
        return self.type == "intercalary"

    def length(self, is_leap: bool) -> int:
        if is_leap and self.leap_days is not None:
            return self.leap_days
        return self.days


@dataclass(frozen=True)
class NamedWeek:
    name: str
    abbreviation: str = ""
    week_number: Optional[int] = None


@dataclass(frozen=True)
class WeekConfig:
    enabled: bool = False
    type: Literal["year-based", "month-based"] = "year-based"
    repeat: bool = False
    names: Tuple[NamedWeek, ...] = ()


@dataclass(frozen=True)
class CanonicalHour:
    name: str
    start_hour: int
    end_hour: int
    abbreviation: str = ""


@dataclass(frozen=True)
class MeridiemNotation:
    am: str = "AM"
    pm: str = "PM"
    am_abbr: str = "AM"
    pm_abbr: str = "PM"


# ============================================================
# Festivals
# ============================================================

@dataclass(frozen=True)
class FestivalDefinition:
    """
    A named day (or run of days).

    Located by ``day_of_year`` when set, else by ``(month, day)``; all three
    are 1-based. Festivals with ``counts_for_weekday=False`` are skipped by
    the weekday count.
    """
    name: str
    month: Optional[int] = None
    day: Optional[int] = None
    day_of_year: Optional[int] = None
    duration: int = 1
    leap_duration: Optional[int] = None
    leap_year_only: bool = False
    counts_for_weekday: bool = True

    def length(self, is_leap: bool) -> int:
        if is_leap and self.leap_duration is not None:
            return self.leap_duration
        return self.duration


# ============================================================
# Moons
# ============================================================

@dataclass(frozen=True)
class MoonPhase:
    name: str
    start: Optional[float] = None
    end: Optional[float] = None
    rising: Optional[str] = None
    fading: Optional[str] = None

    @property
    def has_range(self) -> bool:
        return self.start is not None and self.end is not None


DEFAULT_MOON_PHASES: Tuple[MoonPhase, ...] = (
    MoonPhase("New Moon", 0.0, 0.125),
    MoonPhase("Waxing Crescent", 0.125, 0.25),
    MoonPhase("First Quarter", 0.25, 0.375),
    MoonPhase("Waxing Gibbous", 0.375, 0.5),
    MoonPhase("Full Moon", 0.5, 0.625),
    MoonPhase("Waning Gibbous", 0.625, 0.75),
    MoonPhase("Last Quarter", 0.75, 0.875),
    MoonPhase("Waning Crescent", 0.875, 1.0),
)


@dataclass(frozen=True)
class ReferenceDate:
    """Internal year, 0-based month, 1-based day."""
    year: int = 0
    month: int = 0
    day: int = 1


@dataclass(frozen=True)
class MoonDefinition:
    name: str
    cycle_length: float
    cycle_day_adjust: float = 0.0
    reference_phase: int = 0
    reference_date: ReferenceDate = ReferenceDate()
    phases: Tuple[MoonPhase, ...] = DEFAULT_MOON_PHASES


# ============================================================
# Seasons & climate
# ============================================================

@dataclass(frozen=True)
class TemperatureRange:
    min: Optional[float] = None
    max: Optional[float] = None

    @property
    def is_set(self) -> bool:
        return self.min is not None or self.max is not None


@dataclass(frozen=True)
class ClimatePreset:
    id: str
    chance: float = 0.0


@dataclass(frozen=True)
class ClimateProfile:
    temperatures: Optional[TemperatureRange] = None
    presets: Tuple[ClimatePreset, ...] = ()


@dataclass(frozen=True)
class SeasonDefinition:
    """
    Dated seasons use ``month_start/day_start .. month_end/day_end`` (1-based)
    or ``day_start .. day_end`` as 0-based day-of-year bounds when no months
    are given. Periodic seasons use ``duration`` and the calendar's shared
    ``season_offset``.
    """
    name: str
    abbreviation: str = ""
    month_start: Optional[int] = None
    day_start: Optional[int] = None
    month_end: Optional[int] = None
    day_end: Optional[int] = None
    duration: Optional[int] = None
    climate: Optional[ClimateProfile] = None


@dataclass(frozen=True)
class ZonePreset:
    id: str
    enabled: bool = False
    chance: float = 0.0
    temp_min: Optional[float] = None
    temp_max: Optional[float] = None


@dataclass(frozen=True)
class SeasonOverride:
    temperatures: Optional[TemperatureRange] = None
    presets: Tuple[ClimatePreset, ...] = ()


@dataclass(frozen=True)
class ClimateZone:
    id: str
    name: str = ""
    latitude: Optional[float] = None
    shortest_day: Optional[float] = None
    longest_day: Optional[float] = None
    brightness_multiplier: float = 1.0
    temperatures: OrderedMap[str, TemperatureRange] = field(default_factory=OrderedMap)
    presets: OrderedMap[str, ZonePreset] = field(default_factory=OrderedMap)
    season_overrides: OrderedMap[str, SeasonOverride] = field(default_factory=OrderedMap)


# ============================================================
# Eras & cycles
# ============================================================

@dataclass(frozen=True)
class EraDefinition:
    name: str
    start_year: int
    abbreviation: str = ""
    end_year: Optional[int] = None


CycleBasis = Literal["year", "eraYear", "month", "monthDay", "day", "yearDay"]
CYCLE_BASES: Tuple[str, ...] = ("year", "eraYear", "month", "monthDay", "day", "yearDay")


@dataclass(frozen=True)
class CycleDefinition:
    name: str
    length: int = 12
    offset: int = 0
    based_on: CycleBasis = "month"
    stages: Tuple[str, ...] = ()


# ============================================================
# Daylight
# ============================================================

@dataclass(frozen=True)
class DaylightConfig:
    enabled: bool = False
    shortest_day: float = 8.0
    longest_day: float = 16.0
    winter_solstice: Optional[int] = None
    summer_solstice: Optional[int] = None

    def winter_day(self, days_per_year: int) -> int:
        if self.winter_solstice is not None:
            return self.winter_solstice
        return round_half_up(days_per_year * 0.97)

    def summer_day(self, days_per_year: int) -> int:
        if self.summer_solstice is not None:
            return self.summer_solstice
        return round_half_up(days_per_year * 0.47)


# ============================================================
# Calendar
# ============================================================

@dataclass(frozen=True)
class CalendarDefinition:
    id: str
    name: str = ""
    months: OrderedMap[str, MonthDefinition] = field(default_factory=OrderedMap)
    weekdays: OrderedMap[str, WeekdayDefinition] = field(default_factory=OrderedMap)
    hours_per_day: int = 24
    minutes_per_hour: int = 60
    seconds_per_minute: int = 60
    days_per_year: Optional[int] = None
    year_zero: int = 0
    year_zero_exists: bool = True
    first_weekday: int = 0
    leap_year: LeapYearRule = NoLeapRule()
    season_mode: Literal["dated", "periodic"] = "dated"
    season_offset: int = 0
    seasons: OrderedMap[str, SeasonDefinition] = field(default_factory=OrderedMap)
    moons: OrderedMap[str, MoonDefinition] = field(default_factory=OrderedMap)
    eras: OrderedMap[str, EraDefinition] = field(default_factory=OrderedMap)
    cycles: OrderedMap[str, CycleDefinition] = field(default_factory=OrderedMap)
    cycle_format: str = ""
    festivals: OrderedMap[str, FestivalDefinition] = field(default_factory=OrderedMap)
    canonical_hours: OrderedMap[str, CanonicalHour] = field(default_factory=OrderedMap)
    weeks: WeekConfig = WeekConfig()
    climate_zones: OrderedMap[str, ClimateZone] = field(default_factory=OrderedMap)
    active_zone: Optional[str] = None
    daylight: DaylightConfig = DaylightConfig()
    am_pm: MeridiemNotation = MeridiemNotation()
    epoch_offset: int = 0

    # ---------------------------------------------------------
    # Derived values
    # ---------------------------------------------------------
    @property
    def months_list(self) -> Tuple[MonthDefinition, ...]:
        return self.months.values_list()

    @property
    def weekday_count(self) -> int:
        return len(self.weekdays) or 7

    @property
    def seconds_per_hour(self) -> int:
        return self.minutes_per_hour * self.seconds_per_minute

    @property
    def seconds_per_day(self) -> int:
        return self.hours_per_day * self.seconds_per_hour

    @property
    def is_monthless(self) -> bool:
        months = self.months_list
        if not months:
            return True
        return len(months) == 1 and not months[0].name

    @property
    def nominal_days_per_year(self) -> int:
        """Days in a common year; used by the daylight curve."""
        if self.days_per_year is not None:
            return self.days_per_year
        if self.is_monthless:
            return 365
        return sum(m.days for m in self.months_list)

    def zone(self, zone_id: Optional[str] = None) -> Optional[ClimateZone]:
        """Zone by id, else the active zone, else the first zone."""
        if zone_id is not None:
            return self.climate_zones.get(zone_id)
        if self.active_zone is not None and self.active_zone in self.climate_zones:
            return self.climate_zones[self.active_zone]
        return self.climate_zones.at(0) if self.climate_zones else None

    def tweak(self, **changes) -> "CalendarDefinition":
        return replace(self, **changes)

    # ---------------------------------------------------------
    # Validation
    # ---------------------------------------------------------
    def validate(self) -> List[str]:
        """
        Reports every configuration problem without raising.

        Returns:
            List[str]: Validation error messages. Empty if valid.
        """
        errors: List[str] = []

        for unit, value in (("hours_per_day", self.hours_per_day),
                            ("minutes_per_hour", self.minutes_per_hour),
                            ("seconds_per_minute", self.seconds_per_minute)):
            if value < 1:
                errors.append(f"{unit} must be >= 1, got {value}")

        for key, month in self.months.items():
            if month.days < 0:
                errors.append(f"Month '{month.name or key}' has invalid days count: {month.days}")
            if month.leap_days is not None and month.leap_days < 0:
                errors.append(f"Month '{month.name or key}' has invalid leap days: {month.leap_days}")
            if month.starting_weekday is not None and month.starting_weekday < 0:
                errors.append(f"Month '{month.name or key}' has negative starting weekday")

        if not self.is_monthless and sum(m.days for m in self.months_list) <= 0:
            errors.append("Calendar year has no days.")
        if self.is_monthless and self.days_per_year is not None and self.days_per_year < 1:
            errors.append(f"days_per_year must be >= 1, got {self.days_per_year}")

        rule = self.leap_year
        if isinstance(rule, SimpleLeapRule) and rule.interval < 1:
            errors.append(f"Leap interval must be >= 1, got {rule.interval}")

        for key, moon in self.moons.items():
            if not moon.cycle_length > 0:
                errors.append(f"Moon '{moon.name or key}' has non-positive cycle length: {moon.cycle_length}")
            if not moon.phases:
                errors.append(f"Moon '{moon.name or key}' has no phases.")
            elif not 0 <= moon.reference_phase < len(moon.phases):
                errors.append(f"Moon '{moon.name or key}' reference phase out of range: {moon.reference_phase}")

        for key, cycle in self.cycles.items():
            if cycle.length < 1:
                errors.append(f"Cycle '{cycle.name or key}' has invalid length: {cycle.length}")
            if cycle.based_on not in CYCLE_BASES:
                errors.append(f"Cycle '{cycle.name or key}' has unknown basis: {cycle.based_on}")

        if self.season_mode == "dated":
            for key, season in self.seasons.items():
                dated = season.month_start is not None and season.month_end is not None
                by_day = season.day_start is not None and season.day_end is not None
                if not (dated or by_day):
                    errors.append(f"Season '{season.name or key}' has no valid date range.")

        for key, festival in self.festivals.items():
            if festival.day_of_year is None and (festival.month is None or festival.day is None):
                errors.append(f"Festival '{festival.name or key}' has no date.")
            if festival.duration < 1:
                errors.append(f"Festival '{festival.name or key}' has invalid duration: {festival.duration}")

        return errors
