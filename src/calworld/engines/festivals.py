"""
calworld.engines.festivals
--------------------------
Festival lookup and "non-counting" day accounting.

Festival days flagged ``counts_for_weekday=False`` and every day of an
intercalary month are skipped by the weekday cycle. Counts are split into
whole prior years (per-year constants for leap and common years, computed
once) and the partial current year.
"""

from __future__ import annotations

from typing import Optional, Tuple

from ..core.types import FestivalRef, TimeComponents
from ..model import FestivalDefinition
from .time import TimeConverter


class FestivalLedger:
    def __init__(self, converter: TimeConverter):
        self.converter = converter
        definition = converter.definition
        self._festivals: Tuple[Tuple[str, FestivalDefinition], ...] = tuple(definition.festivals.items())
        self._months = definition.months_list

        self._festival_days = (
            self._festivals_in_year(False),
            self._festivals_in_year(True),
        )
        self._intercalary_days = (
            sum(m.days for m in self._months if m.is_intercalary),
            sum(m.leap_days if m.leap_days is not None else m.days
                for m in self._months if m.is_intercalary),
        )

    # ---------------------------------------------------------
    # Festival lookup
    # ---------------------------------------------------------
    def festival_start(self, festival: FestivalDefinition, year: int) -> Optional[int]:
        """1-based day of year the festival starts on, or None when undated."""
        if festival.day_of_year is not None:
            return festival.day_of_year
        if festival.month is not None and festival.day is not None:
            return self.converter.day_of_year_from_month_day(festival.month - 1, festival.day - 1, year) + 1
        return None

    def find_festival(self, c: TimeComponents) -> Optional[FestivalRef]:
        is_leap = self.converter.is_leap(c.year)
        current = self.converter.day_of_year(c) + 1
        for key, f in self._festivals:
            if f.leap_year_only and not is_leap:
                continue
            start = self.festival_start(f, c.year)
            if start is None:
                continue
            if start <= current < start + f.length(is_leap):
                return FestivalRef(key=key, name=f.name, counts_for_weekday=f.counts_for_weekday)
        return None

    def is_festival_day(self, c: TimeComponents) -> bool:
        return self.find_festival(c) is not None

    def is_non_weekday_festival(self, c: TimeComponents) -> bool:
        ref = self.find_festival(c)
        return ref is not None and not ref.counts_for_weekday

    # ---------------------------------------------------------
    # Non-counting festival days
    # ---------------------------------------------------------
    def non_weekday_festivals_before(self, c: TimeComponents) -> int:
        """Non-counting festival days earlier in the same year."""
        is_leap = self.converter.is_leap(c.year)
        current = self.converter.day_of_year(c) + 1
        count = 0
        for _, f in self._festivals:
            if f.counts_for_weekday:
                continue
            if f.leap_year_only and not is_leap:
                continue
            start = self.festival_start(f, c.year)
            if start is None:
                continue
            duration = f.length(is_leap)
            if start + duration <= current:
                count += duration
            elif start < current:
                count += current - start
        return count

    def non_counting_in_month_before(self, c: TimeComponents) -> int:
        """Non-counting days between the first of ``c``'s month and ``c``."""
        if 0 <= c.month < len(self._months) and self._months[c.month].is_intercalary:
            return c.day_of_month
        is_leap = self.converter.is_leap(c.year)
        first = self.converter.day_of_year_from_month_day(c.month, 0, c.year) + 1
        current = first + c.day_of_month
        count = 0
        for _, f in self._festivals:
            if f.counts_for_weekday:
                continue
            if f.leap_year_only and not is_leap:
                continue
            start = self.festival_start(f, c.year)
            if start is None:
                continue
            lo = max(start, first)
            hi = min(start + f.length(is_leap), current)
            if hi > lo:
                count += hi - lo
        return count

    def _festivals_in_year(self, is_leap: bool) -> int:
        count = 0
        for _, f in self._festivals:
            if f.counts_for_weekday:
                continue
            if f.leap_year_only and not is_leap:
                continue
            count += f.length(is_leap)
        return count

    def non_weekday_festivals_in_year(self, is_leap: bool = False) -> int:
        return self._festival_days[1 if is_leap else 0]

    def non_weekday_festivals_before_year(self, year: int) -> int:
        if not self._festivals:
            return 0
        return self._before_year(year, *self._festival_days)

    # ---------------------------------------------------------
    # Intercalary days
    # ---------------------------------------------------------
    def intercalary_days_before(self, c: TimeComponents) -> int:
        if not self._months:
            return 0
        is_leap = self.converter.is_leap(c.year)
        count = sum(m.length(is_leap) for m in self._months[:c.month] if m.is_intercalary)
        if 0 <= c.month < len(self._months) and self._months[c.month].is_intercalary:
            count += c.day_of_month
        return count

    def intercalary_days_in_year(self, is_leap: bool = False) -> int:
        return self._intercalary_days[1 if is_leap else 0]

    def intercalary_days_before_year(self, year: int) -> int:
        if not self._months:
            return 0
        return self._before_year(year, *self._intercalary_days)

    def _before_year(self, year: int, common: int, leap: int) -> int:
        """Signed total over years [0, year) or, for negative years, [year, -1]."""
        if year == 0 or (common == 0 and leap == 0):
            return 0
        if year > 0:
            leap_years = sum(1 for y in range(year) if self.converter.is_leap(y))
            return (year - leap_years) * common + leap_years * leap
        leap_years = sum(1 for y in range(-1, year - 1, -1) if self.converter.is_leap(y))
        return -((-year - leap_years) * common + leap_years * leap)

    def non_counting_before(self, c: TimeComponents) -> int:
        """Every non-counting day between the epoch and ``c``, signed."""
        return (
            self.non_weekday_festivals_before_year(c.year)
            + self.non_weekday_festivals_before(c)
            + self.intercalary_days_before_year(c.year)
            + self.intercalary_days_before(c)
        )
