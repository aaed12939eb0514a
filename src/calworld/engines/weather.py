"""
calworld.engines.weather
------------------------
Procedural weather from layered climate tables.

The probability table is built from the season's presets, then the zone's
per-season override (chance 0 deletes an entry), else the zone's own enabled
presets. A seeded mulberry32 stream makes a date's weather reproducible.
"""

from __future__ import annotations

import logging
import random
from dataclasses import dataclass
from typing import Callable, Dict, List, Mapping, Optional, Protocol, Sequence, Tuple

from ..core.types import WeatherResult
from ..model import ClimateProfile, ClimateZone, SeasonDefinition, TemperatureRange
from ._num import round_half_up

logger = logging.getLogger(__name__)

DEFAULT_TEMP_MIN = 10
DEFAULT_TEMP_MAX = 22
DEFAULT_PRESET = "clear"
DEFAULT_INERTIA = 0.3

_U32 = 0xFFFFFFFF

RandomFn = Callable[[], float]


# ============================================================
# Presets
# ============================================================

@dataclass(frozen=True)
class WeatherPreset:
    id: str
    label: str = ""
    category: str = "standard"
    temp_min: Optional[float] = None
    temp_max: Optional[float] = None
    darkness_penalty: float = 0.0


class PresetCatalog(Protocol):
    def get(self, preset_id: str) -> Optional[WeatherPreset]: ...


class DictPresetCatalog:
    def __init__(self, presets: Sequence[WeatherPreset] = ()):
        self._presets: Dict[str, WeatherPreset] = {p.id: p for p in presets}

    def get(self, preset_id: str) -> Optional[WeatherPreset]:
        return self._presets.get(preset_id)

    def by_category(self, category: str) -> List[WeatherPreset]:
        return [p for p in self._presets.values() if p.category == category]

    def __len__(self) -> int:
        return len(self._presets)


# ============================================================
# Randomness
# ============================================================

def _imul(a: int, b: int) -> int:
    return (a * b) & _U32


def mulberry32(seed: int) -> RandomFn:
    """32-bit mulberry32 stream; returns floats in [0, 1)."""
    state = seed & _U32

    def rand() -> float:
        nonlocal state
        state = (state + 0x6D2B79F5) & _U32
        t = _imul(state ^ (state >> 15), state | 1)
        t ^= (t + _imul(t ^ (t >> 7), t | 61)) & _U32
        return ((t ^ (t >> 14)) & _U32) / 4294967296

    return rand


def date_seed(year: int, month: int, day: int) -> int:
    return year * 10000 + month * 100 + day


def weighted_select(weights: Mapping[str, float], rng: RandomFn = random.random) -> Optional[str]:
    entries = list(weights.items())
    if not entries:
        return None
    total = sum(w for _, w in entries)
    if total <= 0:
        return entries[0][0]
    roll = rng() * total
    for preset_id, w in entries:
        roll -= w
        if roll <= 0:
            return preset_id
    return entries[-1][0]


# ============================================================
# Climate merge
# ============================================================

def _range_or_default(t: TemperatureRange) -> TemperatureRange:
    return TemperatureRange(
        DEFAULT_TEMP_MIN if t.min is None else t.min,
        DEFAULT_TEMP_MAX if t.max is None else t.max,
    )


def season_override(zone: Optional[ClimateZone], season: Optional[str]):
    if zone is None or not season:
        return None
    return zone.season_overrides.get(season)


def merge_climate(
    season_climate: Optional[ClimateProfile],
    zone: Optional[ClimateZone] = None,
    season: Optional[str] = None,
) -> Tuple[Dict[str, float], TemperatureRange]:
    """(probabilities, temperature range) before the empty-table guard."""
    override = season_override(zone, season)
    probabilities: Dict[str, float] = {}

    if season_climate is not None:
        for p in season_climate.presets:
            if p.chance > 0:
                probabilities[p.id] = p.chance

    if override is not None and override.presets:
        for p in override.presets:
            if p.chance == 0:
                probabilities.pop(p.id, None)
            elif p.chance > 0:
                probabilities[p.id] = p.chance
    elif zone is not None:
        for zp in zone.presets.values():
            if zp.enabled and zp.chance > 0:
                probabilities[zp.id] = zp.chance

    temps = TemperatureRange(DEFAULT_TEMP_MIN, DEFAULT_TEMP_MAX)
    if override is not None and override.temperatures is not None and override.temperatures.is_set:
        temps = _range_or_default(override.temperatures)
    elif season_climate is not None and season_climate.temperatures is not None and season_climate.temperatures.is_set:
        temps = _range_or_default(season_climate.temperatures)
    elif zone is not None and zone.temperatures:
        if season and season in zone.temperatures:
            temps = _range_or_default(zone.temperatures[season])
        elif "_default" in zone.temperatures:
            temps = _range_or_default(zone.temperatures["_default"])

    return probabilities, temps


def weather_table(
    season_climate: Optional[ClimateProfile],
    zone: Optional[ClimateZone] = None,
    season: Optional[str] = None,
) -> Dict[str, float]:
    """Final selection table; never empty."""
    probabilities, _ = merge_climate(season_climate, zone, season)
    if not probabilities:
        probabilities[DEFAULT_PRESET] = 1
    return probabilities


def temperature_for_season(zone: Optional[ClimateZone], season: Optional[str]) -> TemperatureRange:
    """Zone temperature bucket by case-insensitive season name, then ``_default``."""
    if zone is not None and zone.temperatures:
        if season:
            wanted = season.lower()
            for key, t in zone.temperatures.items():
                if key.lower() == wanted:
                    return _range_or_default(t)
        if "_default" in zone.temperatures:
            return _range_or_default(zone.temperatures["_default"])
    return TemperatureRange(DEFAULT_TEMP_MIN, DEFAULT_TEMP_MAX)


def apply_inertia(current: Optional[str], probabilities: Mapping[str, float],
                  inertia: float = DEFAULT_INERTIA) -> Dict[str, float]:
    """Shifts weight towards the current weather so day-to-day changes are smoother."""
    adjusted = dict(probabilities)
    if not current or not adjusted.get(current):
        return adjusted
    current_weight = adjusted[current]
    others = sum(adjusted.values()) - current_weight
    if others > 0:
        adjusted[current] = current_weight + others * inertia
        for k in adjusted:
            if k != current:
                adjusted[k] *= 1 - inertia
    return adjusted


# ============================================================
# Generation
# ============================================================

def generate(
    season_climate: Optional[ClimateProfile] = None,
    zone: Optional[ClimateZone] = None,
    season: Optional[str] = None,
    seed: Optional[int] = None,
    catalog: Optional[PresetCatalog] = None,
) -> WeatherResult:
    rng: RandomFn = mulberry32(seed) if seed is not None else random.random

    probabilities, temps = merge_climate(season_climate, zone, season)
    if not probabilities:
        logger.debug("Empty weather table for season %r, using %r", season, DEFAULT_PRESET)
        probabilities[DEFAULT_PRESET] = 1

    preset_id = weighted_select(probabilities, rng) or DEFAULT_PRESET

    lo, hi = temps.min, temps.max
    if zone is not None:
        zp = zone.presets.get(preset_id)
        if zp is None:
            zp = next((p for p in zone.presets.values() if p.id == preset_id), None)
        if zp is not None and zp.enabled:
            if zp.temp_min is not None:
                lo = zp.temp_min
            if zp.temp_max is not None:
                hi = zp.temp_max

    temperature = round_half_up(lo + rng() * (hi - lo))
    preset = catalog.get(preset_id) if catalog is not None else None
    return WeatherResult(preset_id=preset_id, temperature=temperature, preset=preset)


def generate_for_date(
    year: int,
    month: int,
    day: int,
    season_climate: Optional[ClimateProfile] = None,
    zone: Optional[ClimateZone] = None,
    season: Optional[str] = None,
    catalog: Optional[PresetCatalog] = None,
) -> WeatherResult:
    return generate(season_climate, zone, season, date_seed(year, month, day), catalog)


@dataclass(frozen=True)
class ForecastDay:
    year: int
    month: int
    day: int
    weather: WeatherResult


def _next_day(year: int, month: int, day: int) -> Tuple[int, int, int]:
    return year, month, day + 1


def forecast(
    start_year: int,
    start_month: int,
    start_day: int,
    days: int = 7,
    zone: Optional[ClimateZone] = None,
    season: Optional[str] = None,
    season_for_date: Optional[Callable[[int, int, int], Optional[SeasonDefinition]]] = None,
    catalog: Optional[PresetCatalog] = None,
    next_date: Callable[[int, int, int], Tuple[int, int, int]] = _next_day,
) -> List[ForecastDay]:
    """
    Weather for ``days`` consecutive dates, each seeded from its own date.

    ``next_date`` steps to the following date; the default only bumps the day
    number, so pass a calendar-aware stepper to cross month ends.
    """
    out: List[ForecastDay] = []
    y, m, d = start_year, start_month, start_day
    for _ in range(days):
        s = season_for_date(y, m, d) if season_for_date is not None else None
        name = s.name if s is not None else season
        climate = s.climate if s is not None else None
        out.append(ForecastDay(y, m, d, generate_for_date(y, m, d, climate, zone, name, catalog)))
        y, m, d = next_date(y, m, d)
    return out
