from __future__ import annotations
from dataclasses import dataclass
from typing import Any, Dict, Generic, Iterable, Iterator, Mapping, Optional, Tuple, TypeVar, Union

K = TypeVar("K")
V = TypeVar("V")


class OrderedMap(Mapping[K, V], Generic[K, V]):
    """
    Immutable mapping with stable insertion order and unique keys.

    Every keyed collection of a calendar definition (months, seasons, moons, ...)
    is one of these, so positional lookups (month index 3) and keyed lookups
    (zone "temperate") read the same data.
    """

    __slots__ = ("_data", "_keys")

    def __init__(self, items: Union[Mapping[K, V], Iterable[Tuple[K, V]], None] = None):
        data: Dict[K, V] = {}
        pairs = items.items() if isinstance(items, Mapping) else (items or ())
        for k, v in pairs:
            if k in data:
                raise KeyError(f"Duplicate key {k!r} in ordered map")
            data[k] = v
        self._data = data
        self._keys = tuple(data)

    def __getitem__(self, key: K) -> V:
        return self._data[key]

    def __iter__(self) -> Iterator[K]:
        return iter(self._keys)

    def __len__(self) -> int:
        return len(self._keys)

    def __hash__(self) -> int:
        return hash(tuple(self._data.items()))

    def __repr__(self) -> str:
        return f"OrderedMap({self._data!r})"

    def at(self, index: int) -> V:
        """Value at a position (negative indices allowed)."""
        return self._data[self._keys[index]]

    def key_at(self, index: int) -> K:
        return self._keys[index]

    def index_of(self, key: K) -> int:
        return self._keys.index(key)

    def values_list(self) -> Tuple[V, ...]:
        return tuple(self._data[k] for k in self._keys)


def ordered(items: Union[Mapping[Any, V], Iterable[V], None], *, key: str = "id") -> OrderedMap[str, V]:
    """
    Builds an OrderedMap from either a mapping or a plain sequence.

    Sequences are keyed by each item's ``key`` attribute when present, else by position.
    """
    if items is None:
        return OrderedMap()
    if isinstance(items, OrderedMap):
        return items
    if isinstance(items, Mapping):
        return OrderedMap(items)
    pairs = []
    for i, item in enumerate(items):
        k = getattr(item, key, None)
        pairs.append((str(k) if k is not None else str(i), item))
    return OrderedMap(pairs)


@dataclass(frozen=True)
class TimeComponents:
    """Structured instant. Year, month and day are 0-based internal values."""
    year: int
    month: int
    day_of_month: int
    hour: int = 0
    minute: int = 0
    second: int = 0


@dataclass(frozen=True)
class WeekdayInfo:
    index: int
    name: str
    abbreviation: str = ""
    is_rest_day: bool = False


@dataclass(frozen=True)
class WeekInfo:
    number: int
    name: str = ""
    abbreviation: str = ""
    type: str = "year-based"


@dataclass(frozen=True)
class MoonPhaseInfo:
    moon: str
    phase_index: int
    name: str
    sub_phase: str
    sub_phase_kind: str  # "rising" | "peak" | "fading"
    position: float
    day_in_cycle: int
    day_within_phase: int = 0
    phase_duration: int = 1


@dataclass(frozen=True)
class SeasonRef:
    index: int
    key: str
    name: str
    abbreviation: str = ""


@dataclass(frozen=True)
class EraInfo:
    name: str
    abbreviation: str
    year_in_era: int


@dataclass(frozen=True)
class CycleInfo:
    cycle_name: str
    stage_name: str
    stage_index: int
    cycle_number: int


@dataclass(frozen=True)
class SunTimes:
    """Hours on the calendar's own clock. Midnight may exceed hours_per_day."""
    sunrise: float
    sunset: float
    solar_midday: float
    solar_midnight: float
    daylight_hours: float


@dataclass(frozen=True)
class WeatherResult:
    preset_id: str
    temperature: int
    preset: Optional[Any] = None  # WeatherPreset when a catalog resolved it


@dataclass(frozen=True)
class FestivalRef:
    key: str
    name: str
    counts_for_weekday: bool = True


@dataclass(frozen=True)
class DayInfo:
    calendar_id: str
    time: int
    components: TimeComponents
    display_year: int
    day_of_year: int
    is_leap_year: bool
    weekday: Optional[WeekdayInfo]
    season: Optional[SeasonRef] = None
    era: Optional[EraInfo] = None
    cycles: Tuple[CycleInfo, ...] = ()
    moons: Tuple[MoonPhaseInfo, ...] = ()
    festival: Optional[FestivalRef] = None
    canonical_hour: Optional[str] = None
    sun: Optional[SunTimes] = None
    attributes: Optional[Dict[str, Any]] = None
