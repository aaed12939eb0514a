from __future__ import annotations
from typing import Any, Dict

from .registry import register_attribute

def weekday(info) -> Dict[str, Any]:
    w = info.weekday
    if w is None:
        return {"weekday": None, "weekday_name": None, "rest_day": False}
    return {"weekday": w.index, "weekday_name": w.name, "rest_day": w.is_rest_day}

def season(info) -> Dict[str, Any]:
    s = info.season
    return {"season": s.name if s else None, "season_index": s.index if s else None}

def era(info) -> Dict[str, Any]:
    e = info.era
    if e is None:
        return {"era": None, "era_abbreviation": None, "year_in_era": None}
    return {"era": e.name, "era_abbreviation": e.abbreviation, "year_in_era": e.year_in_era}

def cycles(info) -> Dict[str, Any]:
    return {"cycles": {c.cycle_name: c.stage_name for c in info.cycles}}

def moons(info) -> Dict[str, Any]:
    return {
        "moons": {
            m.moon: {"phase": m.name, "sub_phase": m.sub_phase, "position": m.position}
            for m in info.moons
        }
    }

def festival(info) -> Dict[str, Any]:
    f = info.festival
    return {"festival": f.name if f else None}

def daylight(info) -> Dict[str, Any]:
    s = info.sun
    if s is None:
        return {"daylight_hours": None, "sunrise": None, "sunset": None}
    return {"daylight_hours": s.daylight_hours, "sunrise": s.sunrise, "sunset": s.sunset}

register_attribute("weekday", weekday)
register_attribute("season", season)
register_attribute("era", era)
register_attribute("cycles", cycles)
register_attribute("moons", moons)
register_attribute("festival", festival)
register_attribute("daylight", daylight)
