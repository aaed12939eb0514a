# design/latitude_fit.py

from __future__ import annotations

import argparse
from typing import List, Optional, Tuple

from calworld.engines._num import round_half_up
from calworld.engines.daylight import AXIAL_TILT_DEG, daylight_from_latitude


def _need_numpy():
    try:
        import numpy as np
        return np
    except ImportError as e:
        raise RuntimeError('Need numpy. Install: pip install "calworld[design]"') from e


def _need_scipy():
    try:
        import scipy.optimize as opt
        return opt
    except ImportError as e:
        raise RuntimeError('Need scipy. Install: pip install "calworld[design]"') from e


POLAR_CIRCLE_DEG = 90.0 - AXIAL_TILT_DEG


def longest_day(latitude: float, hours_per_day: float = 24, days_per_year: int = 365) -> float:
    peak = round_half_up(days_per_year * 0.47)
    return daylight_from_latitude(latitude, peak, days_per_year, hours_per_day, summer_solstice=peak)


def latitude_for_longest_day(
    target_hours: float,
    hours_per_day: float = 24,
    days_per_year: int = 365,
    xtol: float = 1e-10,
) -> float:
    """
    Latitude (degrees north) whose summer-solstice daylight equals ``target_hours``.

    Only targets strictly between half a day and a full day have a solution
    below the polar circle.
    """
    if not (hours_per_day / 2 < target_hours < hours_per_day):
        raise ValueError(f"target must lie in ({hours_per_day / 2}, {hours_per_day}), got {target_hours}")
    opt = _need_scipy()

    def f(lat: float) -> float:
        return longest_day(lat, hours_per_day, days_per_year) - target_hours

    return float(opt.brentq(f, 0.0, POLAR_CIRCLE_DEG, xtol=xtol))


def daylight_table(
    latitudes, hours_per_day: float = 24, days_per_year: int = 365
) -> Tuple["object", "object"]:
    """(longest, shortest) day lengths for an array of latitudes."""
    np = _need_numpy()
    lats = np.asarray(latitudes, dtype=float)
    longest = np.array([longest_day(float(x), hours_per_day, days_per_year) for x in lats])
    return longest, hours_per_day - longest


def main(argv: Optional[List[str]] = None) -> int:
    p = argparse.ArgumentParser(description="Fit a climate zone latitude to a target longest day.")
    p.add_argument("--longest", type=float, default=None, help="target longest-day hours")
    p.add_argument("--hours-per-day", type=float, default=24)
    p.add_argument("--days-per-year", type=int, default=365)
    p.add_argument("--step", type=float, default=5.0, help="latitude step for the table")
    args = p.parse_args(argv)

    if args.longest is not None:
        lat = latitude_for_longest_day(args.longest, args.hours_per_day, args.days_per_year)
        print(f"latitude = {lat:.6f} deg  (longest {args.longest:g} h, "
              f"shortest {args.hours_per_day - args.longest:g} h)")
        return 0

    np = _need_numpy()
    lats = np.arange(0.0, 90.0 + 1e-9, args.step)
    longest, shortest = daylight_table(lats, args.hours_per_day, args.days_per_year)
    print(f"{'lat':>6} {'longest':>9} {'shortest':>9}")
    for lat, lo, sh in zip(lats, longest, shortest):
        print(f"{lat:6.1f} {lo:9.3f} {sh:9.3f}")
    return 0


if __name__ == "__main__":
    raise SystemExit(main())
