from __future__ import annotations

import argparse
import random
from typing import List, Optional

from calworld.engines.calendar import CalendarEngine

from ._common import add_calendar_args, resolve_calendar


def roundtrip_test(
    eng: CalendarEngine,
    N: int,
    start_year: int,
    end_year: int,
    seed: int,
    *,
    max_failures: int,
) -> int:
    """
    Random scalar times across [start_year, end_year] (display years).

    Checks time -> components -> time, and that the day number used by the
    moon searches is the floor of time over day length.
    """
    rng = random.Random(seed)
    conv = eng.converter
    spd = eng.definition.seconds_per_day
    lo = conv.components_to_time(eng.from_display(start_year))
    hi = conv.components_to_time(eng.from_display(end_year + 1))
    failures = 0

    for _ in range(N):
        t = rng.randint(lo, hi - 1)
        c = conv.time_to_components(t)
        back = conv.components_to_time(c)
        if back != t:
            failures += 1
            print("\nFAIL (time)")
            print("calendar:", eng.id)
            print("t:", t, "components:", c, "back:", back)
        elif conv.components_to_days(c) != t // spd:
            failures += 1
            print("\nFAIL (days)")
            print("calendar:", eng.id)
            print("components:", c, "days:", conv.components_to_days(c), "floor:", t // spd)
        if failures >= max_failures:
            return failures

    return failures


def main(argv: Optional[List[str]] = None) -> int:
    p = argparse.ArgumentParser(description="Round-trip check of time <-> components.")
    add_calendar_args(p)
    p.add_argument("--n", type=int, default=20000)
    p.add_argument("--start", type=int, default=-400, help="first display year")
    p.add_argument("--end", type=int, default=2400, help="last display year")
    p.add_argument("--seed", type=int, default=1)
    p.add_argument("--max-failures", type=int, default=10)
    args = p.parse_args(argv)

    eng = resolve_calendar(args.calendar, args.file)
    failures = roundtrip_test(eng, args.n, args.start, args.end, args.seed, max_failures=args.max_failures)
    print(f"{eng.id}: {args.n} samples, {failures} failures")
    return 0 if failures == 0 else 1


if __name__ == "__main__":
    raise SystemExit(main())
