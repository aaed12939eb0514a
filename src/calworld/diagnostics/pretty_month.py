from __future__ import annotations

import argparse
from typing import List, Optional

from calworld.core.types import TimeComponents
from calworld.engines.calendar import CalendarEngine

from ._common import add_calendar_args, resolve_calendar


def render_month(eng: CalendarEngine, year: int, month: int) -> str:
    """Text grid for a display year and 1-based month."""
    conv = eng.converter
    d = eng.definition
    y = conv.internal_year(year)
    m = month - 1
    n = conv.days_in_month(m, y)
    md = d.months.at(m) if d.months else None
    title = f"{md.name if md and md.name else f'Month {month}'} {year}"

    wdays = eng.weekdays.weekdays_for_month(m)
    width = max([3] + [len(w.abbreviation or w.name[:3]) for w in wdays])
    lines = [title]

    if md is not None and md.is_intercalary:
        for day in range(n):
            c = TimeComponents(y, m, day)
            lines.append(f"  {day + 1:>2}  {eng.weekday(c).name}")
        return "\n".join(lines)

    lines.append(" ".join((w.abbreviation or w.name[:3]).rjust(width) for w in wdays))
    cols = len(wdays) or 7
    row: List[str] = []
    for day in range(n):
        c = TimeComponents(y, m, day)
        if eng.festivals.is_non_weekday_festival(c):
            lines.append(f"{'*':>{width}} {eng.festivals.find_festival(c).name}")
            continue
        wd = eng.weekday(c).index
        if not row:
            row = [" " * width] * wd
        row.append(str(day + 1).rjust(width))
        if wd == cols - 1:
            lines.append(" ".join(row))
            row = []
    if row:
        lines.append(" ".join(row))
    return "\n".join(lines)


def main(argv: Optional[List[str]] = None) -> int:
    p = argparse.ArgumentParser(description="Print month grids of a calendar.")
    add_calendar_args(p)
    p.add_argument("year", type=int, help="display year")
    p.add_argument("month", type=int, nargs="?", default=None, help="1-based month (default: whole year)")
    args = p.parse_args(argv)

    eng = resolve_calendar(args.calendar, args.file)
    y = eng.converter.internal_year(args.year)
    months = [args.month] if args.month else range(1, eng.converter.month_count() + 1)
    for month in months:
        if eng.converter.days_in_month(month - 1, y) == 0:
            continue
        print(render_month(eng, args.year, month))
        print()
    return 0


if __name__ == "__main__":
    raise SystemExit(main())
