from __future__ import annotations

import argparse
from typing import Optional, Tuple

import calworld
from calworld.engines.calendar import CalendarEngine


def add_calendar_args(p: argparse.ArgumentParser, default: str = "gregorian") -> None:
    p.add_argument("--calendar", default=default, help="registered calendar name")
    p.add_argument("--file", default=None, help="JSON calendar definition (overrides --calendar)")


def resolve_calendar(name: str, path: Optional[str] = None) -> CalendarEngine:
    if path:
        return calworld.load_calendar(path)
    return calworld.get_calendar(name)


def parse_display_date(s: str) -> Tuple[int, int, int]:
    """'YYYY-MM-DD' with 1-based month/day; the year may be negative ('-45-03-01')."""
    neg = s.startswith("-")
    parts = (s[1:] if neg else s).split("-")
    if len(parts) != 3:
        raise ValueError(f"Expected YEAR-MM-DD, got {s!r}")
    y, m, d = (int(x) for x in parts)
    return (-y if neg else y), m, d
