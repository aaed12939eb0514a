from __future__ import annotations

from typing import Dict, Iterable, Tuple

from ..core.types import OrderedMap
from ..model import (
    CalendarDefinition,
    CanonicalHour,
    ClimatePreset,
    ClimateProfile,
    ClimateZone,
    CycleDefinition,
    DaylightConfig,
    EraDefinition,
    FestivalDefinition,
    GregorianLeapRule,
    MonthDefinition,
    MoonDefinition,
    ReferenceDate,
    SeasonDefinition,
    SeasonOverride,
    SimpleLeapRule,
    TemperatureRange,
    WeekdayDefinition,
    ZonePreset,
)


def _keyed(pairs: Iterable[Tuple[str, object]]) -> OrderedMap:
    return OrderedMap(list(pairs))


def _months(rows) -> OrderedMap:
    out = []
    for i, row in enumerate(rows):
        name, days = row[0], row[1]
        extra = row[2] if len(row) > 2 else {}
        out.append((name.lower().replace(" ", "-"), MonthDefinition(name=name, days=days, ordinal=i + 1, **extra)))
    return _keyed(out)


def _weekdays(names, rest=()) -> OrderedMap:
    return _keyed((n.lower(), WeekdayDefinition(n, n[:3], n in rest)) for n in names)


# ============================================================
# SIMPLE: 12 x 30 days, one leap day every fourth year
# ============================================================

SIMPLE = CalendarDefinition(
    id="simple",
    name="Simple Twelve",
    months=_months([(f"Month {i}", 30) for i in range(1, 12)] + [("Month 12", 30, {"leap_days": 31})]),
    weekdays=_weekdays(["Oneday", "Twoday", "Threeday", "Fourday", "Fiveday", "Sixday", "Sevenday"], rest=("Sevenday",)),
    leap_year=SimpleLeapRule(interval=4, start=0),
    moons=_keyed([("moon", MoonDefinition(name="Moon", cycle_length=29))]),
)


# ============================================================
# GREGORIAN (proleptic, astronomical year numbering)
# ============================================================

_TEMPERATE = ClimateZone(
    id="temperate",
    name="Temperate",
    latitude=45.0,
    temperatures=_keyed([
        ("Spring", TemperatureRange(6, 18)),
        ("Summer", TemperatureRange(16, 30)),
        ("Autumn", TemperatureRange(5, 17)),
        ("Winter", TemperatureRange(-6, 6)),
        ("_default", TemperatureRange(8, 20)),
    ]),
    presets=_keyed([
        ("clear", ZonePreset("clear", enabled=True, chance=4)),
        ("partly-cloudy", ZonePreset("partly-cloudy", enabled=True, chance=4)),
        ("overcast", ZonePreset("overcast", enabled=True, chance=3)),
        ("rain", ZonePreset("rain", enabled=True, chance=3, temp_max=18)),
        ("fog", ZonePreset("fog", enabled=True, chance=1)),
        ("snow", ZonePreset("snow", enabled=False, chance=0, temp_max=1)),
    ]),
    season_overrides=_keyed([
        ("Winter", SeasonOverride(presets=(
            ClimatePreset("clear", 3), ClimatePreset("overcast", 4),
            ClimatePreset("snow", 3), ClimatePreset("fog", 0),
        ))),
    ]),
)

GREGORIAN = CalendarDefinition(
    id="gregorian",
    name="Gregorian",
    months=_months([
        ("January", 31), ("February", 28, {"leap_days": 29}), ("March", 31), ("April", 30),
        ("May", 31), ("June", 30), ("July", 31), ("August", 31),
        ("September", 30), ("October", 31), ("November", 30), ("December", 31),
    ]),
    weekdays=_weekdays(["Sunday", "Monday", "Tuesday", "Wednesday", "Thursday", "Friday", "Saturday"],
                       rest=("Saturday", "Sunday")),
    # 1 January of year 0 (proleptic) was a Saturday
    first_weekday=6,
    leap_year=GregorianLeapRule(),
    seasons=_keyed([
        ("spring", SeasonDefinition("Spring", "Spr", month_start=3, day_start=20, month_end=6, day_end=20)),
        ("summer", SeasonDefinition("Summer", "Sum", month_start=6, day_start=21, month_end=9, day_end=21)),
        ("autumn", SeasonDefinition("Autumn", "Aut", month_start=9, day_start=22, month_end=12, day_end=20)),
        ("winter", SeasonDefinition("Winter", "Win", month_start=12, day_start=21, month_end=3, day_end=19,
                                    climate=ClimateProfile(TemperatureRange(-8, 4)))),
    ]),
    moons=_keyed([
        # New moon of 6 January 2000
        ("luna", MoonDefinition(name="Luna", cycle_length=29.530588, reference_date=ReferenceDate(2000, 0, 6))),
    ]),
    festivals=_keyed([
        ("new-year", FestivalDefinition("New Year's Day", month=1, day=1)),
        ("midsummer", FestivalDefinition("Midsummer", month=6, day=24)),
    ]),
    eras=_keyed([("ce", EraDefinition("Common Era", 1, "CE"))]),
    cycles=_keyed([
        ("zodiac", CycleDefinition(
            name="Zodiac", length=12, offset=8, based_on="year",
            stages=("Rat", "Ox", "Tiger", "Rabbit", "Dragon", "Snake",
                    "Horse", "Goat", "Monkey", "Rooster", "Dog", "Pig"),
        )),
    ]),
    cycle_format="Year of the [1]",
    climate_zones=_keyed([("temperate", _TEMPERATE)]),
    active_zone="temperate",
    daylight=DaylightConfig(enabled=True, shortest_day=8.5, longest_day=15.5, winter_solstice=354, summer_solstice=171),
)


# ============================================================
# HARPTOS: 12 x 30 days, five feast days, Shieldmeet every fourth year
# ============================================================

def _feast(name: str, leap_only: bool = False) -> Tuple:
    if leap_only:
        return (name, 0, {"leap_days": 1, "type": "intercalary"})
    return (name, 1, {"type": "intercalary"})


HARPTOS = CalendarDefinition(
    id="harptos",
    name="Calendar of Harptos",
    months=_months([
        ("Hammer", 30), _feast("Midwinter"), ("Alturiak", 30), ("Ches", 30), ("Tarsakh", 30),
        _feast("Greengrass"), ("Mirtul", 30), ("Kythorn", 30), ("Flamerule", 30),
        _feast("Midsummer"), _feast("Shieldmeet", leap_only=True), ("Eleasis", 30), ("Eleint", 30),
        _feast("Highharvestide"), ("Marpenoth", 30), ("Uktar", 30), _feast("Feast of the Moon"),
        ("Nightal", 30),
    ]),
    weekdays=_weekdays([
        "First-day", "Second-day", "Third-day", "Fourth-day", "Fifth-day",
        "Sixth-day", "Seventh-day", "Eighth-day", "Ninth-day", "Tenth-day",
    ], rest=("Tenth-day",)),
    leap_year=SimpleLeapRule(interval=4, start=0),
    seasons=_keyed([
        ("winter", SeasonDefinition("Winter", month_start=17, month_end=3)),
        ("spring", SeasonDefinition("Spring", month_start=4, month_end=7)),
        ("summer", SeasonDefinition("Summer", month_start=8, month_end=12)),
        ("autumn", SeasonDefinition("Autumn", month_start=13, month_end=16)),
    ]),
    moons=_keyed([
        # Full on 1 Hammer 1372 DR
        ("selune", MoonDefinition(name="Selûne", cycle_length=30.4375, reference_phase=4,
                                  reference_date=ReferenceDate(1372, 0, 1))),
    ]),
    eras=_keyed([("dr", EraDefinition("Dalereckoning", 1, "DR"))]),
    canonical_hours=_keyed([
        ("night", CanonicalHour("Night", 21, 5)),
        ("dawn", CanonicalHour("Dawn", 5, 7)),
        ("morning", CanonicalHour("Morning", 7, 12)),
        ("highsun", CanonicalHour("Highsun", 12, 14)),
        ("afternoon", CanonicalHour("Afternoon", 14, 18)),
        ("dusk", CanonicalHour("Dusk", 18, 21)),
    ]),
    daylight=DaylightConfig(enabled=True),
)


ALL_SPECS: Dict[str, CalendarDefinition] = {
    "simple": SIMPLE,
    "gregorian": GREGORIAN,
    "harptos": HARPTOS,
}


def like(name: str) -> CalendarDefinition:
    """Reference definition to derive from with ``.tweak(...)``."""
    if name not in ALL_SPECS:
        raise KeyError(f"Unknown base calendar '{name}'. Available: {sorted(ALL_SPECS)}")
    return ALL_SPECS[name]
