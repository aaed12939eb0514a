"""
calworld.engines.moon
---------------------
Moon phases from a day count.

The core entry point is ``moon_phase(moon, days)`` where ``days`` is the
number of days since the moon's reference date. ``MoonPhaseEngine`` binds a
TimeConverter so callers can pass TimeComponents instead, and adds the
full-moon and convergence searches.
"""

from __future__ import annotations

import logging
import math
from typing import List, Optional, Sequence, Tuple

from ..core.types import MoonPhaseInfo, TimeComponents
from ..model import MoonDefinition, MoonPhase
from ._num import round_half_up
from .time import TimeConverter

logger = logging.getLogger(__name__)

FULL_START = 0.5
FULL_END = 0.625
CONVERGENCE_SKIP_DAYS = 5
MAX_RANGE_ITERATIONS = 10000


def phase_distribution(cycle_length: float, num_phases: int = 8) -> List[float]:
    """
    Days per phase when phases carry no explicit ranges.

    With eight phases, new (0) and full (4) get ``floor(L/8)`` days each and
    the other six share the rest, extra days going to the earliest ones.
    """
    if num_phases != 8:
        base = math.floor(cycle_length / num_phases)
        remainder = cycle_length % num_phases
        return [base + (1 if i < remainder else 0) for i in range(num_phases)]

    primary = math.floor(cycle_length / 8)
    remaining = cycle_length - primary * 2
    secondary = math.floor(remaining / 6)
    extra = remaining % 6

    out: List[float] = []
    assigned = 0
    for i in range(8):
        if i in (0, 4):
            out.append(primary)
        else:
            out.append(secondary + (1 if assigned < extra else 0))
            assigned += 1
    return out


def sub_phase(phase: MoonPhase, day_within_phase: float, phase_duration: float) -> Tuple[str, str]:
    """(text, kind) where kind is 'rising', 'peak' or 'fading'."""
    if phase_duration <= 1:
        return phase.name, "peak"
    third = phase_duration / 3
    if day_within_phase < third:
        return phase.rising or phase.name, "rising"
    if day_within_phase >= phase_duration - third:
        return phase.fading or phase.name, "fading"
    return phase.name, "peak"


def _finite(x: float) -> bool:
    return isinstance(x, (int, float)) and math.isfinite(x)


def moon_phase(moon: MoonDefinition, days: float) -> Optional[MoonPhaseInfo]:
    phases = moon.phases
    if not phases:
        return None

    length = moon.cycle_length
    if not _finite(days) or not _finite(length) or length <= 0:
        logger.debug("Moon %r: non-finite input (days=%r, cycle=%r), using first phase", moon.name, days, length)
        first = phases[0]
        return MoonPhaseInfo(moon.name, 0, first.name, first.name, "peak", 0.0, 0)

    ref = phases[moon.reference_phase] if 0 <= moon.reference_phase < len(phases) else None
    phase_offset = ((ref.start if ref is not None and ref.start is not None else 0.0)) * length
    adjust = moon.cycle_day_adjust if _finite(moon.cycle_day_adjust) else 0.0

    raw = (days % length) + phase_offset + adjust
    into_cycle = raw % length
    position = into_cycle / length
    day_index = math.floor(into_cycle)

    index, within, duration = 0, 0, 1
    if phases[0].has_range:
        total = round_half_up(length)
        for i, p in enumerate(phases):
            start_day = round_half_up((p.start or 0.0) * length)
            end_day = round_half_up((p.end if p.end is not None else 1.0) * length)
            if end_day > start_day:
                hit = start_day <= day_index < end_day
            else:
                hit = day_index >= start_day or day_index < end_day
            if hit:
                index = i
                span = end_day - start_day if end_day > start_day else total - start_day + end_day
                duration = max(1, span)
                within = day_index - start_day if day_index >= start_day else day_index + total - start_day
                break
    else:
        cumulative = 0
        for i, span in enumerate(phase_distribution(length, len(phases))):
            if day_index < cumulative + span:
                index, within, duration = i, day_index - cumulative, span
                break
            cumulative += span

    matched = phases[index]
    text, kind = sub_phase(matched, within, duration)
    return MoonPhaseInfo(
        moon=moon.name,
        phase_index=index,
        name=matched.name,
        sub_phase=text,
        sub_phase_kind=kind,
        position=position,
        day_in_cycle=day_index,
        day_within_phase=within,
        phase_duration=duration,
    )


def phase_position(moon: MoonDefinition, days: float) -> float:
    """Raw position in [0, 1) ignoring the reference phase and day adjustment."""
    length = moon.cycle_length
    if not _finite(days) or not _finite(length) or length <= 0:
        return 0.0
    return (days % length) / length


def is_full(moon: MoonDefinition, days: float) -> bool:
    return FULL_START <= phase_position(moon, days) < FULL_END


class MoonPhaseEngine:
    def __init__(self, converter: TimeConverter):
        self.converter = converter
        self.definition = converter.definition

    def reference_day(self, moon: MoonDefinition) -> int:
        ref = moon.reference_date
        return self.converter.components_to_days(TimeComponents(ref.year, ref.month, ref.day - 1))

    def days_since_reference(self, moon: MoonDefinition, c: TimeComponents) -> int:
        return self.converter.components_to_days(c) - self.reference_day(moon)

    def phase(self, moon: MoonDefinition, c: TimeComponents) -> Optional[MoonPhaseInfo]:
        return moon_phase(moon, self.days_since_reference(moon, c))

    def phases(self, c: TimeComponents) -> Tuple[MoonPhaseInfo, ...]:
        out = (self.phase(m, c) for m in self.definition.moons.values())
        return tuple(p for p in out if p is not None)

    # ---------------------------------------------------------
    # Searches (day numbers in, day numbers out)
    # ---------------------------------------------------------
    def _full_on(self, moon: MoonDefinition, day: int) -> bool:
        return is_full(moon, day - self.reference_day(moon))

    def next_full_moon(self, moon: MoonDefinition, start_day: int, max_days: int = 1000) -> Optional[int]:
        for day in range(start_day, start_day + max_days):
            if self._full_on(moon, day):
                return day
        return None

    def next_convergence(self, moons: Sequence[MoonDefinition], start_day: int,
                         max_days: int = 1000) -> Optional[int]:
        """First day on or after ``start_day`` when every moon is full."""
        if not moons:
            return None
        if len(moons) == 1:
            return self.next_full_moon(moons[0], start_day, max_days)
        for day in range(start_day, start_day + max_days):
            if all(self._full_on(m, day) for m in moons):
                return day
        return None

    def convergences_in_range(self, moons: Sequence[MoonDefinition], start_day: int, end_day: int) -> List[int]:
        if not moons:
            return []
        hits: List[int] = []
        day = start_day
        budget = MAX_RANGE_ITERATIONS
        while day <= end_day and budget > 0:
            budget -= 1
            if all(self._full_on(m, day) for m in moons):
                hits.append(day)
                day += CONVERGENCE_SKIP_DAYS
            else:
                day += 1
        return hits
