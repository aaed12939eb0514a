"""
calworld.engines.calendar
-------------------------
The Orchestrator. Binds every resolver to one CalendarDefinition so callers
can ask date questions without wiring converters and ledgers themselves.
"""

from __future__ import annotations

import logging
from typing import Any, Dict, List, Optional, Sequence, Tuple, Union

from ..core.errors import DomainError, InputError
from ..core.types import (
    CycleInfo,
    DayInfo,
    EraInfo,
    MoonPhaseInfo,
    SeasonRef,
    SunTimes,
    TimeComponents,
    WeekdayInfo,
    WeekInfo,
)
from ..model import CalendarDefinition, ClimateZone, MoonDefinition
from . import weather as wx
from .clock import FormattingParts, canonical_hour, formatting_parts
from .cycle import CycleResolver
from .daylight import DaylightModel, adjusted_darkness
from .era import EraResolver
from .festivals import FestivalLedger
from .leap import LeapYearEvaluator, describe_rule
from .moon import MoonPhaseEngine
from .season import SeasonResolver
from .time import TimeConverter
from .weekday import WeekdayResolver

logger = logging.getLogger(__name__)

ZoneArg = Union[str, ClimateZone, None]
MoonArg = Union[int, str, MoonDefinition]


class CalendarEngine:
    def __init__(self, definition: CalendarDefinition):
        self.definition = definition
        self.leap = LeapYearEvaluator(definition)
        self.converter = TimeConverter(definition, self.leap)
        self.festivals = FestivalLedger(self.converter)
        self.weekdays = WeekdayResolver(self.converter, self.festivals)
        self.moons = MoonPhaseEngine(self.converter)
        self.seasons = SeasonResolver(self.converter)
        self.eras = EraResolver(definition)
        self.cycles_resolver = CycleResolver(self.converter, self.eras)
        self.daylight = DaylightModel(self.converter)
        logger.debug("Engine %r bound (%d months, %d moons, %d zones)",
                     definition.id, len(definition.months), len(definition.moons), len(definition.climate_zones))

    @property
    def id(self) -> str:
        return self.definition.id

    def info(self) -> Dict[str, Any]:
        d = self.definition
        return {
            "id": d.id,
            "name": d.name,
            "months": len(d.months),
            "monthless": d.is_monthless,
            "weekdays": d.weekday_count,
            "day": [d.hours_per_day, d.minutes_per_hour, d.seconds_per_minute],
            "year_zero": d.year_zero,
            "leap": describe_rule(d.leap_year),
            "moons": list(d.moons),
            "seasons": list(d.seasons),
            "zones": list(d.climate_zones),
        }

    # ---------------------------------------------------------
    # Helpers
    # ---------------------------------------------------------
    def _c(self, when: Union[int, TimeComponents]) -> TimeComponents:
        return when if isinstance(when, TimeComponents) else self.converter.time_to_components(when)

    def _zone(self, zone: ZoneArg) -> Optional[ClimateZone]:
        if isinstance(zone, ClimateZone):
            return zone
        if zone is not None and zone not in self.definition.climate_zones:
            raise DomainError(f"Calendar '{self.id}' has no climate zone '{zone}'")
        return self.definition.zone(zone)

    def _moon(self, moon: MoonArg) -> MoonDefinition:
        if isinstance(moon, MoonDefinition):
            return moon
        moons = self.definition.moons
        if isinstance(moon, int):
            if not -len(moons) <= moon < len(moons):
                raise DomainError(f"Calendar '{self.id}' has no moon #{moon}")
            return moons.at(moon)
        if moon not in moons:
            raise DomainError(f"Calendar '{self.id}' has no moon '{moon}'")
        return moons[moon]

    # ---------------------------------------------------------
    # Conversion
    # ---------------------------------------------------------
    def is_leap_year(self, year: int) -> bool:
        return self.converter.is_leap(year)

    def days_in_year(self, year: int) -> int:
        return self.converter.days_in_year(year)

    def days_in_month(self, month: int, year: int) -> int:
        return self.converter.days_in_month(month, year)

    def to_components(self, t: int) -> TimeComponents:
        return self.converter.time_to_components(t)

    def to_time(self, c: TimeComponents) -> int:
        return self.converter.components_to_time(c)

    def from_display(self, year: int, month: int = 1, day: int = 1,
                     hour: int = 0, minute: int = 0, second: int = 0) -> TimeComponents:
        """Components from a display year and 1-based month/day."""
        return TimeComponents(self.converter.internal_year(year), month - 1, day - 1, hour, minute, second)

    # ---------------------------------------------------------
    # Derived facts
    # ---------------------------------------------------------
    def weekday(self, when: Union[int, TimeComponents]) -> WeekdayInfo:
        return self.weekdays.weekday_for(self._c(when))

    def current_week(self, when: Union[int, TimeComponents]) -> Optional[WeekInfo]:
        return self.weekdays.current_week(self._c(when))

    def season(self, when: Union[int, TimeComponents]) -> Optional[SeasonRef]:
        return self.seasons.season(self._c(when))

    def era(self, when: Union[int, TimeComponents]) -> Optional[EraInfo]:
        return self.eras.era(self._c(when).year)

    def cycles(self, when: Union[int, TimeComponents]) -> Tuple[CycleInfo, ...]:
        return self.cycles_resolver.cycles(self._c(when))

    def cycle_text(self, when: Union[int, TimeComponents]) -> str:
        return self.cycles_resolver.text(self._c(when))

    def canonical_hour(self, when: Union[int, TimeComponents]):
        return canonical_hour(self.definition, self._c(when).hour)

    def formatting_parts(self, when: Union[int, TimeComponents]) -> FormattingParts:
        return formatting_parts(self, self._c(when))

    # ---------------------------------------------------------
    # Moons
    # ---------------------------------------------------------
    def moon_phase(self, when: Union[int, TimeComponents], moon: MoonArg = 0) -> Optional[MoonPhaseInfo]:
        return self.moons.phase(self._moon(moon), self._c(when))

    def moon_phases(self, when: Union[int, TimeComponents]) -> Tuple[MoonPhaseInfo, ...]:
        return self.moons.phases(self._c(when))

    def next_full_moon(self, when: Union[int, TimeComponents], moon: MoonArg = 0,
                       max_days: int = 1000) -> Optional[TimeComponents]:
        start = self.converter.components_to_days(self._c(when))
        day = self.moons.next_full_moon(self._moon(moon), start, max_days)
        return None if day is None else self.converter.days_to_components(day)

    def next_convergence(self, when: Union[int, TimeComponents], moons: Optional[Sequence[MoonArg]] = None,
                         max_days: int = 1000) -> Optional[TimeComponents]:
        defs = [self._moon(m) for m in moons] if moons is not None else list(self.definition.moons.values())
        start = self.converter.components_to_days(self._c(when))
        day = self.moons.next_convergence(defs, start, max_days)
        return None if day is None else self.converter.days_to_components(day)

    def convergences_in_range(self, start: Union[int, TimeComponents], end: Union[int, TimeComponents],
                              moons: Optional[Sequence[MoonArg]] = None) -> List[TimeComponents]:
        defs = [self._moon(m) for m in moons] if moons is not None else list(self.definition.moons.values())
        first = self.converter.components_to_days(self._c(start))
        last = self.converter.components_to_days(self._c(end))
        return [self.converter.days_to_components(d) for d in self.moons.convergences_in_range(defs, first, last)]

    # ---------------------------------------------------------
    # Sun and light
    # ---------------------------------------------------------
    def sun_times(self, when: Union[int, TimeComponents], zone: ZoneArg = None) -> SunTimes:
        return self.daylight.sun_times(self._c(when), self._zone(zone))

    def darkness(self, when: Union[int, TimeComponents], zone: ZoneArg = None,
                 weather_penalty: float = 0.0) -> float:
        z = self._zone(zone)
        base = self.daylight.darkness(self._c(when), z)
        return adjusted_darkness(base, z.brightness_multiplier if z else 1.0, weather_penalty)

    # ---------------------------------------------------------
    # Weather
    # ---------------------------------------------------------
    def weather_seed(self, c: TimeComponents) -> int:
        return wx.date_seed(self.converter.display_year(c.year), c.month, c.day_of_month + 1)

    def weather(self, when: Union[int, TimeComponents], zone: ZoneArg = None,
                seed: Optional[int] = None, random: bool = False,
                catalog: Optional[wx.PresetCatalog] = None):
        """
        Weather for a date. Seeded from the date unless ``seed`` is given;
        ``random=True`` draws from the unseeded generator instead.
        """
        c = self._c(when)
        season = self.seasons.season_definition(c)
        if seed is None and not random:
            seed = self.weather_seed(c)
        return wx.generate(
            season.climate if season else None,
            self._zone(zone),
            season.name if season else None,
            seed,
            catalog,
        )

    def forecast(self, when: Union[int, TimeComponents], days: int = 7, zone: ZoneArg = None,
                 catalog: Optional[wx.PresetCatalog] = None) -> List[wx.ForecastDay]:
        if days < 0:
            raise InputError(f"Forecast length must be non-negative, got {days}")
        c = self._c(when)
        conv = self.converter

        def step(year: int, month: int, day: int) -> Tuple[int, int, int]:
            nxt = conv.add_days(TimeComponents(conv.internal_year(year), month, day - 1), 1)
            return conv.display_year(nxt.year), nxt.month, nxt.day_of_month + 1

        def season_for(year: int, month: int, day: int):
            return self.seasons.season_definition(TimeComponents(conv.internal_year(year), month, day - 1))

        return wx.forecast(
            conv.display_year(c.year), c.month, c.day_of_month + 1, days,
            zone=self._zone(zone),
            season_for_date=season_for,
            catalog=catalog,
            next_date=step,
        )

    # ---------------------------------------------------------
    # Snapshot
    # ---------------------------------------------------------
    def describe(self, t: int, zone: ZoneArg = None) -> DayInfo:
        c = self.converter.time_to_components(t)
        ch = canonical_hour(self.definition, c.hour)
        return DayInfo(
            calendar_id=self.definition.id,
            time=t,
            components=c,
            display_year=self.converter.display_year(c.year),
            day_of_year=self.converter.day_of_year(c),
            is_leap_year=self.converter.is_leap(c.year),
            weekday=self.weekdays.weekday_for(c) if self.definition.weekdays else None,
            season=self.seasons.season(c),
            era=self.eras.era(c.year),
            cycles=self.cycles_resolver.cycles(c),
            moons=self.moons.phases(c),
            festival=self.festivals.find_festival(c),
            canonical_hour=ch.name if ch else None,
            sun=self.daylight.sun_times(c, self._zone(zone)),
        )
