from __future__ import annotations
from dataclasses import dataclass, field
from typing import Any, Dict, List, Protocol

from ..model import CalendarDefinition
from .types import DayInfo, TimeComponents


class CalendarProtocol(Protocol):
    definition: CalendarDefinition

    def info(self) -> Dict[str, Any]: ...
    def to_components(self, t: int) -> TimeComponents: ...
    def to_time(self, c: TimeComponents) -> int: ...
    def describe(self, t: int) -> DayInfo: ...


@dataclass
class CalendarRegistry:
    _calendars: Dict[str, CalendarProtocol] = field(default_factory=dict)

    def get(self, name: str) -> CalendarProtocol:
        if name not in self._calendars:
            raise KeyError(f"Unknown calendar '{name}'. Available: {sorted(self._calendars)}")
        return self._calendars[name]

    def list(self) -> List[str]:
        return sorted(self._calendars.keys())

    def register(self, name: str, calendar: CalendarProtocol, *, overwrite: bool = False) -> None:
        if (not overwrite) and (name in self._calendars):
            raise KeyError(f"Calendar '{name}' already exists. Use overwrite=True to replace.")
        self._calendars[name] = calendar

    def __contains__(self, name: str) -> bool:
        return name in self._calendars
