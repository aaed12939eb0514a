#!/usr/bin/env python3
from __future__ import annotations

import argparse
from typing import List, Optional, Tuple

from calworld.engines.calendar import CalendarEngine

from ._common import add_calendar_args, resolve_calendar


def _need_numpy():
    try:
        import numpy as np
        return np
    except ImportError as e:
        raise RuntimeError('Need numpy. Install: pip install "calworld[diagnostics]"') from e


def _need_matplotlib():
    try:
        import matplotlib.pyplot as plt
        return plt
    except ImportError as e:
        raise RuntimeError('Need matplotlib. Install: pip install "calworld[diagnostics]"') from e


def build_series(np, eng: CalendarEngine, year: int, zone: Optional[str] = None
                 ) -> Tuple["np.ndarray", "np.ndarray", "np.ndarray"]:
    """(day of year, sunrise, sunset) for every day of a display year."""
    conv = eng.converter
    y = conv.internal_year(year)
    n = conv.days_in_year(y)
    start = conv.components_to_days(eng.from_display(year))

    doy = np.arange(n, dtype=int)
    rise = np.empty(n, dtype=float)
    sets = np.empty(n, dtype=float)
    for i in range(n):
        s = eng.sun_times(conv.days_to_components(start + i), zone)
        rise[i] = s.sunrise
        sets[i] = s.sunset
    return doy, rise, sets


def main(argv: Optional[List[str]] = None) -> int:
    p = argparse.ArgumentParser(description="Sunrise/sunset curve over one year.")
    add_calendar_args(p)
    p.add_argument("--year", type=int, default=2000, help="display year")
    p.add_argument("--zone", default=None)
    p.add_argument("--outbase", default="daylight_curve", help="Output base name (writes .png)")
    args = p.parse_args(argv)

    np = _need_numpy()
    plt = _need_matplotlib()

    eng = resolve_calendar(args.calendar, args.file)
    doy, rise, sets = build_series(np, eng, args.year, args.zone)
    hours = sets - rise
    hpd = eng.definition.hours_per_day

    print(f"{eng.id} {args.year}: shortest {hours.min():.2f} h (day {int(doy[hours.argmin()])}), "
          f"longest {hours.max():.2f} h (day {int(doy[hours.argmax()])})")

    fig, ax = plt.subplots(figsize=(9.2, 4.4), constrained_layout=True)
    ax.set_axisbelow(True)
    ax.grid(True, which="major", color="0.88", linewidth=0.7)
    ax.fill_between(doy, rise, sets, color="gold", alpha=0.35, label="daylight")
    ax.plot(doy, rise, color="tab:orange", linewidth=1.2, label="sunrise")
    ax.plot(doy, sets, color="tab:purple", linewidth=1.2, label="sunset")
    ax.set_xlim(0, len(doy) - 1)
    ax.set_ylim(0, hpd)
    ax.set_xlabel("Day of year (0-based)")
    ax.set_ylabel(f"Hour (of {hpd})")
    ax.set_title(f"Daylight: {eng.definition.name or eng.id}, year {args.year}")
    ax.legend(loc="center left", bbox_to_anchor=(1.02, 0.5), frameon=False)

    fig.savefig(args.outbase + ".png", dpi=200)
    print(f"Saved: {args.outbase}.png")
    return 0


if __name__ == "__main__":
    raise SystemExit(main())
