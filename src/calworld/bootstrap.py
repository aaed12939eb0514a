from __future__ import annotations
from calworld.core.engine import CalendarRegistry
from calworld.engines.specs import ALL_SPECS
from calworld.engines.calendar import CalendarEngine

def build_registry() -> CalendarRegistry:
    calendars = {}
    for name, spec in ALL_SPECS.items():
        calendars[name] = CalendarEngine(spec)
    return CalendarRegistry(calendars)
