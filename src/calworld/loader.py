"""
calworld.loader
---------------
Builds a CalendarDefinition from plain data (dicts or a JSON file).

Both the nested exchange layout (``months.values``, ``days.hoursPerDay``,
``years.yearZero``, ``weather.zones`` ...) and a flat snake_case layout are
accepted. Collections given as lists are re-keyed into ordered maps here,
once, so the engines only ever see fully defaulted immutable definitions.
"""

from __future__ import annotations

import json
import logging
from dataclasses import replace
from pathlib import Path
from typing import Any, Callable, List, Mapping, Optional, Tuple, TypeVar, Union

from .core.errors import ConfigurationError
from .core.types import OrderedMap
from .model import (
    CanonicalHour,
    CalendarDefinition,
    ClimatePreset,
    ClimateProfile,
    ClimateZone,
    CustomLeapRule,
    CycleDefinition,
    DaylightConfig,
    DEFAULT_MOON_PHASES,
    EraDefinition,
    FestivalDefinition,
    GregorianLeapRule,
    LeapYearRule,
    MeridiemNotation,
    MonthDefinition,
    MoonDefinition,
    MoonPhase,
    NamedWeek,
    NoLeapRule,
    ReferenceDate,
    SeasonDefinition,
    SeasonOverride,
    SimpleLeapRule,
    TemperatureRange,
    WeekConfig,
    WeekdayDefinition,
    ZonePreset,
)

logger = logging.getLogger(__name__)

T = TypeVar("T")
Data = Mapping[str, Any]

_MISSING = object()


def _get(src: Optional[Data], *keys: str, default: Any = None) -> Any:
    """First key present with a non-None value."""
    if not src:
        return default
    for k in keys:
        v = src.get(k, _MISSING)
        if v is not _MISSING and v is not None:
            return v
    return default


def _items(raw: Any) -> List[Tuple[Optional[str], Any]]:
    """(key, value) pairs from a list or a keyed mapping; list entries have no key yet."""
    if raw is None:
        return []
    if isinstance(raw, Mapping):
        return [(str(k), v) for k, v in raw.items()]
    if isinstance(raw, (list, tuple)):
        return [(None, v) for v in raw]
    raise ConfigurationError(f"Expected a list or mapping, got {type(raw).__name__}")


def migrate(raw: Any, build: Callable[[Any], T], *, prefix: str) -> OrderedMap[str, T]:
    """
    Re-keys a list (or mapping) into an OrderedMap.

    List entries are keyed by their ``id`` when they carry one, else by
    ``<prefix>-<position>``.
    """
    pairs = []
    for i, (key, value) in enumerate(_items(raw)):
        if key is None:
            key = str(_get(value, "id", default=f"{prefix}-{i}")) if isinstance(value, Mapping) else f"{prefix}-{i}"
        pairs.append((key, build(value)))
    try:
        return OrderedMap(pairs)
    except KeyError as e:
        raise ConfigurationError(str(e)) from e


def _values(raw: Any) -> List[Any]:
    return [v for _, v in _items(raw)]


def _int(v: Any, what: str) -> int:
    try:
        return int(v)
    except (TypeError, ValueError) as e:
        raise ConfigurationError(f"{what}: expected an integer, got {v!r}") from e


def _opt_int(v: Any, what: str) -> Optional[int]:
    return None if v is None else _int(v, what)


def _opt_float(v: Any) -> Optional[float]:
    return None if v is None else float(v)


# ============================================================
# Element builders
# ============================================================

def _weekday(d: Data) -> WeekdayDefinition:
    return WeekdayDefinition(
        name=str(_get(d, "name", default="")),
        abbreviation=str(_get(d, "abbreviation", default="")),
        is_rest_day=bool(_get(d, "is_rest_day", "isRestDay", default=False)),
    )


def _months(raw: Any) -> OrderedMap[str, MonthDefinition]:
    """Months in order; a missing ordinal defaults to the 1-based position."""
    months = migrate(raw, _month, prefix="month")
    return OrderedMap(
        (key, m if m.ordinal else replace(m, ordinal=i + 1))
        for i, (key, m) in enumerate(months.items())
    )


def _month(d: Data) -> MonthDefinition:
    name = str(_get(d, "name", default=""))
    return MonthDefinition(
        name=name,
        days=_int(_get(d, "days", default=0), f"month {name!r} days"),
        ordinal=_int(_get(d, "ordinal", default=0), f"month {name!r} ordinal"),
        abbreviation=str(_get(d, "abbreviation", default="")),
        leap_days=_opt_int(_get(d, "leap_days", "leapDays"), f"month {name!r} leap days"),
        type="intercalary" if _get(d, "type") == "intercalary" else "standard",
        starting_weekday=_opt_int(_get(d, "starting_weekday", "startingWeekday"), f"month {name!r} starting weekday"),
        weekdays=migrate(_get(d, "weekdays"), _weekday, prefix="weekday"),
    )


def _festival(d: Data) -> FestivalDefinition:
    name = str(_get(d, "name", default=""))
    return FestivalDefinition(
        name=name,
        month=_opt_int(_get(d, "month"), f"festival {name!r} month"),
        day=_opt_int(_get(d, "day"), f"festival {name!r} day"),
        day_of_year=_opt_int(_get(d, "day_of_year", "dayOfYear"), f"festival {name!r} day of year"),
        duration=_int(_get(d, "duration", default=1), f"festival {name!r} duration"),
        leap_duration=_opt_int(_get(d, "leap_duration", "leapDuration"), f"festival {name!r} leap duration"),
        leap_year_only=bool(_get(d, "leap_year_only", "leapYearOnly", default=False)),
        counts_for_weekday=bool(_get(d, "counts_for_weekday", "countsForWeekday", default=True)),
    )


def _phase(d: Data) -> MoonPhase:
    return MoonPhase(
        name=str(_get(d, "name", default="")),
        start=_opt_float(_get(d, "start")),
        end=_opt_float(_get(d, "end")),
        rising=_get(d, "rising") or None,
        fading=_get(d, "fading") or None,
    )


def _moon(d: Data) -> MoonDefinition:
    ref = _get(d, "reference_date", "referenceDate", default={})
    phases = tuple(_phase(p) for p in _values(_get(d, "phases")))
    return MoonDefinition(
        name=str(_get(d, "name", default="")),
        cycle_length=float(_get(d, "cycle_length", "cycleLength", default=0)),
        cycle_day_adjust=float(_get(d, "cycle_day_adjust", "cycleDayAdjust", default=0)),
        reference_phase=_int(_get(d, "reference_phase", "referencePhase", default=0), "moon reference phase"),
        reference_date=ReferenceDate(
            year=_int(_get(ref, "year", default=0), "moon reference year"),
            month=_int(_get(ref, "month", default=0), "moon reference month"),
            day=_int(_get(ref, "day", default=1), "moon reference day"),
        ),
        phases=phases or DEFAULT_MOON_PHASES,
    )


def _temps(d: Optional[Data]) -> Optional[TemperatureRange]:
    if not d:
        return None
    return TemperatureRange(_opt_float(_get(d, "min")), _opt_float(_get(d, "max")))


def _climate_presets(raw: Any) -> Tuple[ClimatePreset, ...]:
    out = []
    for key, v in _items(raw):
        if isinstance(v, Mapping):
            out.append(ClimatePreset(str(_get(v, "id", default=key or "")), float(_get(v, "chance", default=0))))
        else:
            # {"rain": 3} shorthand
            out.append(ClimatePreset(str(key), float(v)))
    return tuple(out)


def _season(d: Data) -> SeasonDefinition:
    name = str(_get(d, "name", default=""))
    climate = _get(d, "climate")
    return SeasonDefinition(
        name=name,
        abbreviation=str(_get(d, "abbreviation", default="")),
        month_start=_opt_int(_get(d, "month_start", "monthStart"), f"season {name!r} month start"),
        day_start=_opt_int(_get(d, "day_start", "dayStart"), f"season {name!r} day start"),
        month_end=_opt_int(_get(d, "month_end", "monthEnd"), f"season {name!r} month end"),
        day_end=_opt_int(_get(d, "day_end", "dayEnd"), f"season {name!r} day end"),
        duration=_opt_int(_get(d, "duration"), f"season {name!r} duration"),
        climate=ClimateProfile(
            temperatures=_temps(_get(climate, "temperatures")),
            presets=_climate_presets(_get(climate, "presets")),
        ) if climate else None,
    )


def _era(d: Data) -> EraDefinition:
    name = str(_get(d, "name", default=""))
    return EraDefinition(
        name=name,
        start_year=_int(_get(d, "start_year", "startYear", default=0), f"era {name!r} start year"),
        abbreviation=str(_get(d, "abbreviation", default="")),
        end_year=_opt_int(_get(d, "end_year", "endYear"), f"era {name!r} end year"),
    )


def _cycle(d: Data) -> CycleDefinition:
    name = str(_get(d, "name", default=""))
    stages = tuple(
        str(_get(s, "name", default="")) if isinstance(s, Mapping) else str(s)
        for s in _values(_get(d, "stages", "entries"))
    )
    return CycleDefinition(
        name=name,
        length=_int(_get(d, "length", default=12), f"cycle {name!r} length"),
        offset=_int(_get(d, "offset", default=0), f"cycle {name!r} offset"),
        based_on=_get(d, "based_on", "basedOn", default="month"),
        stages=stages,
    )


def _canonical_hour(d: Data) -> CanonicalHour:
    return CanonicalHour(
        name=str(_get(d, "name", default="")),
        start_hour=_int(_get(d, "start_hour", "startHour", default=0), "canonical hour start"),
        end_hour=_int(_get(d, "end_hour", "endHour", default=0), "canonical hour end"),
        abbreviation=str(_get(d, "abbreviation", default="")),
    )


def _zone_preset(d: Data) -> ZonePreset:
    return ZonePreset(
        id=str(_get(d, "id", default="")),
        enabled=bool(_get(d, "enabled", default=False)),
        chance=float(_get(d, "chance", default=0)),
        temp_min=_opt_float(_get(d, "temp_min", "tempMin")),
        temp_max=_opt_float(_get(d, "temp_max", "tempMax")),
    )


def _zone(d: Data) -> ClimateZone:
    temps = _get(d, "temperatures", default={}) or {}
    overrides = _get(d, "season_overrides", "seasonOverrides", default={}) or {}
    return ClimateZone(
        id=str(_get(d, "id", default="")),
        name=str(_get(d, "name", default="")),
        latitude=_opt_float(_get(d, "latitude")),
        shortest_day=_opt_float(_get(d, "shortest_day", "shortestDay")),
        longest_day=_opt_float(_get(d, "longest_day", "longestDay")),
        brightness_multiplier=float(_get(d, "brightness_multiplier", "brightnessMultiplier", default=1.0)),
        temperatures=OrderedMap((str(k), _temps(v) or TemperatureRange()) for k, v in temps.items()),
        presets=migrate(_get(d, "presets"), _zone_preset, prefix="preset"),
        season_overrides=OrderedMap(
            (str(k), SeasonOverride(_temps(_get(v, "temperatures")), _climate_presets(_get(v, "presets"))))
            for k, v in overrides.items()
        ),
    )


def _leap_rule(src: Data) -> LeapYearRule:
    cfg = _get(src, "leap_year", "leapYearConfig")
    if cfg is None:
        legacy = _get(_get(src, "years"), "leapYear")
        if legacy and _get(legacy, "leapInterval"):
            return SimpleLeapRule(
                _int(_get(legacy, "leapInterval"), "leap interval"),
                _int(_get(legacy, "leapStart", default=0), "leap start"),
            )
        return NoLeapRule()

    rule = _get(cfg, "rule", default="none")
    start = _int(_get(cfg, "start", default=0), "leap start")
    if rule == "none":
        return NoLeapRule()
    if rule == "simple":
        return SimpleLeapRule(_int(_get(cfg, "interval", default=0), "leap interval"), start)
    if rule == "gregorian":
        return GregorianLeapRule(start)
    if rule == "custom":
        return CustomLeapRule(str(_get(cfg, "pattern", default="")), start)
    raise ConfigurationError(f"Unknown leap year rule '{rule}'")


def _weeks(d: Optional[Data]) -> WeekConfig:
    if not d:
        return WeekConfig()
    names = []
    for w in _values(_get(d, "names")):
        names.append(NamedWeek(
            name=str(_get(w, "name", default="")),
            abbreviation=str(_get(w, "abbreviation", default="")),
            week_number=_opt_int(_get(w, "week_number", "weekNumber"), "week number"),
        ))
    return WeekConfig(
        enabled=bool(_get(d, "enabled", default=False)),
        type="month-based" if _get(d, "type") == "month-based" else "year-based",
        repeat=bool(_get(d, "repeat", default=False)),
        names=tuple(names),
    )


def _daylight(d: Optional[Data]) -> DaylightConfig:
    if not d:
        return DaylightConfig()
    return DaylightConfig(
        enabled=bool(_get(d, "enabled", default=False)),
        shortest_day=float(_get(d, "shortest_day", "shortestDay", default=8)),
        longest_day=float(_get(d, "longest_day", "longestDay", default=16)),
        winter_solstice=_opt_int(_get(d, "winter_solstice", "winterSolstice"), "winter solstice"),
        summer_solstice=_opt_int(_get(d, "summer_solstice", "summerSolstice"), "summer solstice"),
    )


def _am_pm(d: Optional[Data]) -> MeridiemNotation:
    if not d:
        return MeridiemNotation()
    return MeridiemNotation(
        am=str(_get(d, "am", default="AM")),
        pm=str(_get(d, "pm", default="PM")),
        am_abbr=str(_get(d, "am_abbr", "amAbbr", default="AM")),
        pm_abbr=str(_get(d, "pm_abbr", "pmAbbr", default="PM")),
    )


# ============================================================
# Public entry points
# ============================================================

def _collection(src: Data, flat: str, nested: str, inner: str = "values") -> Any:
    """Flat ``src[flat]`` list/map, or the ``values`` of a nested block."""
    raw = src.get(flat) if flat != nested else None
    if raw is not None:
        return raw
    block = src.get(nested)
    if isinstance(block, Mapping) and inner in block:
        return block[inner]
    return block


def build_definition(src: Data) -> CalendarDefinition:
    """Translates plain data without validating it."""
    if not isinstance(src, Mapping):
        raise ConfigurationError(f"Calendar definition must be a mapping, got {type(src).__name__}")

    days = _get(src, "days", default={}) if isinstance(src.get("days"), Mapping) else {}
    years = _get(src, "years", default={}) or {}
    seasons = src.get("seasons")
    seasons_block = seasons if isinstance(seasons, Mapping) and "values" in seasons else {}
    weather = _get(src, "weather", default={}) or {}
    metadata = _get(src, "metadata", default={}) or {}

    months_raw = _collection(src, "months", "months")
    weekdays_raw = src.get("weekdays")
    if weekdays_raw is None:
        weekdays_raw = _get(days, "values")

    seasons_raw = _collection(src, "seasons", "seasons")
    zones_raw = src.get("climate_zones")
    if zones_raw is None:
        zones_raw = _get(weather, "zones")

    definition = CalendarDefinition(
        id=str(_get(src, "id", default=_get(metadata, "id", default="custom"))),
        name=str(_get(src, "name", default="")),
        months=_months(months_raw),
        weekdays=migrate(weekdays_raw, _weekday, prefix="weekday"),
        hours_per_day=_int(_get(src, "hours_per_day", default=_get(days, "hoursPerDay", default=24)), "hours per day"),
        minutes_per_hour=_int(_get(src, "minutes_per_hour", default=_get(days, "minutesPerHour", default=60)), "minutes per hour"),
        seconds_per_minute=_int(_get(src, "seconds_per_minute", default=_get(days, "secondsPerMinute", default=60)), "seconds per minute"),
        days_per_year=_opt_int(_get(src, "days_per_year", default=_get(days, "daysPerYear")), "days per year"),
        year_zero=_int(_get(src, "year_zero", default=_get(years, "yearZero", default=0)), "year zero"),
        year_zero_exists=bool(_get(src, "year_zero_exists", default=True)),
        first_weekday=_int(_get(src, "first_weekday", default=_get(years, "firstWeekday", default=0)), "first weekday"),
        leap_year=_leap_rule(src),
        season_mode="periodic" if _get(src, "season_mode", default=_get(seasons_block, "type")) == "periodic" else "dated",
        season_offset=_int(_get(src, "season_offset", default=_get(seasons_block, "offset", default=0)), "season offset"),
        seasons=migrate(seasons_raw, _season, prefix="season"),
        moons=migrate(src.get("moons"), _moon, prefix="moon"),
        eras=migrate(src.get("eras"), _era, prefix="era"),
        cycles=migrate(src.get("cycles"), _cycle, prefix="cycle"),
        cycle_format=str(_get(src, "cycle_format", "cycleFormat", default="")),
        festivals=migrate(src.get("festivals"), _festival, prefix="festival"),
        canonical_hours=migrate(_get(src, "canonical_hours", "canonicalHours"), _canonical_hour, prefix="hour"),
        weeks=_weeks(src.get("weeks")),
        climate_zones=migrate(zones_raw, _zone, prefix="zone"),
        active_zone=_get(src, "active_zone", default=_get(weather, "activeZone")),
        daylight=_daylight(src.get("daylight")),
        am_pm=_am_pm(_get(src, "am_pm", "amPmNotation")),
        epoch_offset=_int(_get(src, "epoch_offset", default=0), "epoch offset"),
    )
    return definition


def validate(definition: CalendarDefinition) -> List[str]:
    return definition.validate()


def load_definition(src: Data) -> CalendarDefinition:
    """Builds and validates; raises ConfigurationError listing every problem."""
    definition = build_definition(src)
    errors = definition.validate()
    if errors:
        raise ConfigurationError(f"Invalid calendar '{definition.id}': " + "; ".join(errors))
    logger.debug("Loaded calendar %r (%d months, %d moons)", definition.id, len(definition.months), len(definition.moons))
    return definition


def load_definition_file(path: Union[str, Path]) -> CalendarDefinition:
    p = Path(path)
    try:
        data = json.loads(p.read_text(encoding="utf-8"))
    except json.JSONDecodeError as e:
        raise ConfigurationError(f"{p}: not valid JSON ({e})") from e
    return load_definition(data)
