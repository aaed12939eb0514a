#!/usr/bin/env python3
from __future__ import annotations

import argparse
from typing import Dict, List, Optional, Tuple

from calworld.engines import weather as wx
from calworld.engines.calendar import CalendarEngine

from ._common import add_calendar_args, parse_display_date, resolve_calendar


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


def sample_odds(np, eng: CalendarEngine, year: int, month: int, day: int, n: int,
                zone: Optional[str] = None) -> Tuple[List[str], "np.ndarray", "np.ndarray", "np.ndarray"]:
    """
    Expected vs observed preset frequencies for one date over seeds 0..n-1.

    Returns (preset ids, expected, observed, temperatures).
    """
    c = eng.from_display(year, month, day)
    season = eng.seasons.season_definition(c)
    z = eng.definition.zone(zone)
    climate = season.climate if season else None
    name = season.name if season else None

    table: Dict[str, float] = wx.weather_table(climate, z, name)
    ids = list(table)
    expected = np.array([table[k] for k in ids], dtype=float)
    expected /= expected.sum()

    picks = []
    temps = np.empty(n, dtype=float)
    for seed in range(n):
        r = wx.generate(climate, z, name, seed)
        picks.append(r.preset_id)
        temps[seed] = r.temperature

    observed = np.array([picks.count(k) for k in ids], dtype=float) / max(n, 1)
    return ids, expected, observed, temps


def main(argv: Optional[List[str]] = None) -> int:
    p = argparse.ArgumentParser(description="Observed vs expected weather preset odds for one date.")
    add_calendar_args(p)
    p.add_argument("--date", default="2000-01-15", help="display date YYYY-MM-DD (1-based month/day)")
    p.add_argument("--zone", default=None)
    p.add_argument("--n", type=int, default=5000, help="number of seeds")
    p.add_argument("--plot", default=None, help="output base name; writes a .png bar chart")
    args = p.parse_args(argv)

    np = _need_numpy()
    eng = resolve_calendar(args.calendar, args.file)
    y, m, d = parse_display_date(args.date)

    ids, expected, observed, temps = sample_odds(np, eng, y, m, d, args.n, args.zone)

    print(f"{'preset':<16} {'expected':>9} {'observed':>9}")
    for k, e, o in zip(ids, expected, observed):
        print(f"{k:<16} {e:9.4f} {o:9.4f}")
    print(f"max |diff| = {np.max(np.abs(expected - observed)):.4f}")
    print(f"temperature: mean {temps.mean():.2f}, min {temps.min():.0f}, max {temps.max():.0f}")

    if args.plot:
        plt = _need_matplotlib()
        fig, ax = plt.subplots(figsize=(7.5, 4.0), constrained_layout=True)
        x = np.arange(len(ids))
        ax.bar(x - 0.2, expected, width=0.4, label="expected", color="0.6")
        ax.bar(x + 0.2, observed, width=0.4, label="observed", color="tab:blue")
        ax.set_xticks(x)
        ax.set_xticklabels(ids, rotation=30, ha="right")
        ax.set_ylabel("probability")
        ax.set_title(f"Weather odds: {eng.id} {args.date}")
        ax.legend(frameon=False)
        fig.savefig(args.plot + ".png", dpi=200)
        print(f"Saved: {args.plot}.png")
    return 0


if __name__ == "__main__":
    raise SystemExit(main())
