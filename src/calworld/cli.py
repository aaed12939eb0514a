from __future__ import annotations

import argparse
import importlib
import inspect
import logging
import re
import sys

from calworld.core.types import TimeComponents
from calworld.engines.calendar import CalendarEngine


_DATE_RE = re.compile(r"^-?\d+-\d{1,2}-\d{1,2}$")


def _setup_logging(verbose: int) -> None:
    level = logging.WARNING
    if verbose == 1:
        level = logging.INFO
    elif verbose >= 2:
        level = logging.DEBUG
    logging.basicConfig(level=level, format="%(levelname)s %(name)s: %(message)s")


def _common_args(p: argparse.ArgumentParser) -> None:
    p.add_argument("--calendar", default="gregorian", help="registered calendar name")
    p.add_argument("--file", default=None, help="JSON calendar definition (overrides --calendar)")
    p.add_argument("-v", "--verbose", action="count", default=0)


def _engine(args) -> CalendarEngine:
    import calworld

    _setup_logging(args.verbose)
    if args.file:
        return calworld.load_calendar(args.file)
    return calworld.get_calendar(args.calendar)


def _parse_when(eng: CalendarEngine, s: str) -> TimeComponents:
    """Scalar seconds, or a display date YEAR-MM-DD (1-based month/day)."""
    from calworld.diagnostics._common import parse_display_date

    if _DATE_RE.match(s):
        y, m, d = parse_display_date(s)
        return eng.from_display(y, m, d)
    return eng.to_components(int(s))


def _run_module_main(modpath: str, argv: list[str]) -> int:
    """
    Import module and run its main().

    Supports:
      - main(argv: list[str] | None = None) -> int|None
      - main() -> int|None
    """
    mod = importlib.import_module(modpath)
    if not hasattr(mod, "main"):
        raise SystemExit(f"Module {modpath} has no main()")
    fn = getattr(mod, "main")

    sig = inspect.signature(fn)
    if len(sig.parameters) == 0:
        rv = fn()
    else:
        rv = fn(argv)
    return int(rv or 0)


def _fmt_date(eng: CalendarEngine, c: TimeComponents) -> str:
    conv = eng.converter
    months = eng.definition.months
    month = months.at(c.month).name if months and c.month < len(months) else str(c.month + 1)
    return (f"{conv.display_year(c.year)} {month} {c.day_of_month + 1} "
            f"{c.hour:02d}:{c.minute:02d}:{c.second:02d}")


# ============================================================
# Commands
# ============================================================

def cmd_date(argv: list[str]) -> int:
    import calworld

    p = argparse.ArgumentParser(prog="calworld date", description="Scalar time -> date and derived facts")
    p.add_argument("when", help="seconds, or YEAR-MM-DD")
    p.add_argument("--zone", default=None)
    p.add_argument("--attr", action="append", default=[], help="attribute name (repeatable)")
    _common_args(p)
    args = p.parse_args(argv)

    eng = _engine(args)
    t = eng.to_time(_parse_when(eng, args.when))
    info = calworld.day_info(t, calendar=eng, zone=args.zone, attributes=tuple(args.attr))

    print(_fmt_date(eng, info.components))
    if info.weekday is not None:
        print(f"  weekday   : {info.weekday.name} ({info.weekday.index})")
    print(f"  day/year  : {info.day_of_year + 1}{' (leap year)' if info.is_leap_year else ''}")
    if info.festival:
        print(f"  festival  : {info.festival.name}")
    if info.season:
        print(f"  season    : {info.season.name}")
    if info.era:
        print(f"  era       : {info.era.year_in_era} {info.era.abbreviation or info.era.name}")
    for cy in info.cycles:
        print(f"  cycle     : {cy.cycle_name} = {cy.stage_name}")
    for m in info.moons:
        print(f"  moon      : {m.moon} {m.name} ({m.sub_phase})")
    if info.canonical_hour:
        print(f"  hour      : {info.canonical_hour}")
    if info.attributes:
        for k, v in info.attributes.items():
            print(f"  {k:<10}: {v}")
    return 0


def cmd_time(argv: list[str]) -> int:
    p = argparse.ArgumentParser(prog="calworld time", description="Date -> scalar time (seconds)")
    p.add_argument("date", help="YEAR-MM-DD (display year, 1-based month/day)")
    p.add_argument("--hour", type=int, default=0)
    p.add_argument("--minute", type=int, default=0)
    p.add_argument("--second", type=int, default=0)
    _common_args(p)
    args = p.parse_args(argv)

    from calworld.diagnostics._common import parse_display_date

    eng = _engine(args)
    y, m, d = parse_display_date(args.date)
    print(eng.to_time(eng.from_display(y, m, d, args.hour, args.minute, args.second)))
    return 0


def cmd_moon(argv: list[str]) -> int:
    p = argparse.ArgumentParser(prog="calworld moon", description="Moon phases on a date")
    p.add_argument("when", help="seconds, or YEAR-MM-DD")
    p.add_argument("--next-full", action="store_true", help="also search the next full moon of each moon")
    p.add_argument("--convergence", action="store_true", help="also search the next day all moons are full")
    _common_args(p)
    args = p.parse_args(argv)

    eng = _engine(args)
    c = _parse_when(eng, args.when)
    for i, m in enumerate(eng.moon_phases(c)):
        print(f"{m.moon}: {m.name} ({m.sub_phase}), day {m.day_in_cycle} of cycle, position {m.position:.3f}")
        if args.next_full:
            nxt = eng.next_full_moon(c, i)
            print(f"  next full: {_fmt_date(eng, nxt) if nxt else 'none within search window'}")
    if args.convergence:
        nxt = eng.next_convergence(c)
        print(f"convergence: {_fmt_date(eng, nxt) if nxt else 'none within search window'}")
    return 0


def cmd_sun(argv: list[str]) -> int:
    p = argparse.ArgumentParser(prog="calworld sun", description="Sunrise, sunset and darkness")
    p.add_argument("when", help="seconds, or YEAR-MM-DD")
    p.add_argument("--zone", default=None)
    _common_args(p)
    args = p.parse_args(argv)

    eng = _engine(args)
    c = _parse_when(eng, args.when)
    s = eng.sun_times(c, args.zone)
    print(f"sunrise  = {s.sunrise:.3f}")
    print(f"sunset   = {s.sunset:.3f}")
    print(f"midday   = {s.solar_midday:.3f}")
    print(f"midnight = {s.solar_midnight:.3f}")
    print(f"daylight = {s.daylight_hours:.3f} h")
    print(f"darkness = {eng.darkness(c, args.zone):.3f}")
    return 0


def cmd_weather(argv: list[str]) -> int:
    p = argparse.ArgumentParser(prog="calworld weather", description="Deterministic weather for a date")
    p.add_argument("when", help="seconds, or YEAR-MM-DD")
    p.add_argument("--zone", default=None)
    p.add_argument("--seed", type=int, default=None, help="override the date seed")
    p.add_argument("--days", type=int, default=1, help="forecast length")
    _common_args(p)
    args = p.parse_args(argv)

    eng = _engine(args)
    c = _parse_when(eng, args.when)
    if args.days <= 1:
        w = eng.weather(c, zone=args.zone, seed=args.seed)
        print(f"{w.preset_id} {w.temperature}")
        return 0
    for day in eng.forecast(c, args.days, zone=args.zone):
        print(f"{day.year}-{day.month + 1:02d}-{day.day:02d} {day.weather.preset_id} {day.weather.temperature}")
    return 0


def cmd_leap(argv: list[str]) -> int:
    import calworld

    p = argparse.ArgumentParser(prog="calworld leap", description="Leap-year status of display years")
    p.add_argument("years", type=int, nargs="+")
    _common_args(p)
    args = p.parse_args(argv)

    eng = _engine(args)
    for y in args.years:
        leap = calworld.is_leap_year(y, calendar=eng)
        print(f"{y}: {'leap' if leap else 'common'} ({calworld.days_in_year(y, calendar=eng)} days)")
    return 0


def cmd_list(argv: list[str]) -> int:
    import calworld

    p = argparse.ArgumentParser(prog="calworld list", description="Registered calendars")
    p.add_argument("-v", "--verbose", action="count", default=0)
    args = p.parse_args(argv)
    _setup_logging(args.verbose)

    for name in calworld.list_calendars():
        info = calworld.calendar_info(name)
        print(f"{name:<12} {info['name']}  ({info['months']} months, {info['weekdays']}-day week, "
              f"leap: {info['leap']['rule']})")
    return 0


def main(argv: list[str] | None = None) -> int:
    if argv is None:
        argv = sys.argv[1:]

    p = argparse.ArgumentParser(prog="calworld", description="Fictional calendar toolkit CLI.")
    sub = p.add_subparsers(dest="cmd", required=True)

    sub.add_parser("date", help="Scalar time -> date and derived facts")
    sub.add_parser("time", help="Date -> scalar time")
    sub.add_parser("moon", help="Moon phases, next full moon, convergences")
    sub.add_parser("sun", help="Sunrise, sunset and darkness")
    sub.add_parser("weather", help="Deterministic weather and forecasts")
    sub.add_parser("leap", help="Leap-year status")
    sub.add_parser("list", help="List registered calendars")

    p_diag = sub.add_parser("diag", help="Diagnostics tools")
    p_diag.add_argument(
        "tool",
        choices=["pretty-month", "round-trip", "daylight-curve", "weather-odds"],
        help="Which diagnostic to run",
    )

    p_design = sub.add_parser("design", help="Calendar design tools")
    p_design.add_argument("tool", choices=["latitude-fit"], help="Which design tool to run")

    args, rest = p.parse_known_args(argv)

    commands = {
        "date": cmd_date,
        "time": cmd_time,
        "moon": cmd_moon,
        "sun": cmd_sun,
        "weather": cmd_weather,
        "leap": cmd_leap,
        "list": cmd_list,
    }
    if args.cmd in commands:
        return commands[args.cmd](rest)

    if args.cmd == "diag":
        tool_map = {
            "pretty-month": "calworld.diagnostics.pretty_month",
            "round-trip": "calworld.diagnostics.round_trip",
            "daylight-curve": "calworld.diagnostics.daylight_curve",
            "weather-odds": "calworld.diagnostics.weather_odds",
        }
        return _run_module_main(tool_map[args.tool], rest)

    if args.cmd == "design":
        tool_map = {
            "latitude-fit": "calworld.design.latitude_fit",
        }
        return _run_module_main(tool_map[args.tool], rest)

    raise RuntimeError("unreachable")


if __name__ == "__main__":
    raise SystemExit(main())
