"""
calworld.engines.weekday
------------------------
Weekday index and week numbers.

Two modes for the weekday index:
  (a) the month pins ``starting_weekday``: count within the month only;
  (b) otherwise: count every day since the epoch, minus non-counting days.
"""

from __future__ import annotations

from typing import Optional, Tuple

from ..core.types import TimeComponents, WeekdayInfo, WeekInfo
from ..model import NamedWeek, WeekdayDefinition
from .festivals import FestivalLedger
from .time import TimeConverter


class WeekdayResolver:
    def __init__(self, converter: TimeConverter, ledger: Optional[FestivalLedger] = None):
        self.converter = converter
        self.ledger = ledger or FestivalLedger(converter)
        self.definition = converter.definition
        self.days_in_week = self.definition.weekday_count

    def _days_before_year(self, year: int) -> int:
        if year > 0:
            return sum(self.converter.days_in_year(y) for y in range(year))
        if year < 0:
            return -sum(self.converter.days_in_year(y) for y in range(-1, year - 1, -1))
        return 0

    def weekday_index(self, c: TimeComponents) -> int:
        n = self.days_in_week
        months = self.definition.months_list
        month = months[c.month] if 0 <= c.month < len(months) else None

        if month is not None and month.starting_weekday is not None:
            non_counting = self.ledger.non_counting_in_month_before(c)
            return (month.starting_weekday + c.day_of_month - non_counting) % n

        total_days = self._days_before_year(c.year) + self.converter.day_of_year(c)
        counting = total_days - self.ledger.non_counting_before(c)
        return (counting + self.definition.first_weekday) % n

    def weekdays_for_month(self, month: int) -> Tuple[WeekdayDefinition, ...]:
        months = self.definition.months_list
        if 0 <= month < len(months) and months[month].weekdays:
            return months[month].weekdays.values_list()
        return self.definition.weekdays.values_list()

    def weekday_for(self, c: TimeComponents) -> WeekdayInfo:
        index = self.weekday_index(c)
        names = self.weekdays_for_month(c.month)
        if index < len(names):
            wd = names[index]
            return WeekdayInfo(index, wd.name, wd.abbreviation, wd.is_rest_day)
        return WeekdayInfo(index, "")

    # ---------------------------------------------------------
    # Weeks
    # ---------------------------------------------------------
    def week_of_year(self, c: TimeComponents) -> int:
        return self.converter.day_of_year(c) // self.days_in_week + 1

    def week_of_month(self, c: TimeComponents) -> int:
        return c.day_of_month // self.days_in_week + 1

    def current_week(self, c: TimeComponents) -> Optional[WeekInfo]:
        """Named week for ``c``; None when the calendar names no weeks."""
        cfg = self.definition.weeks
        names = cfg.names
        if not names:
            return None

        if cfg.type == "month-based":
            number = self.week_of_month(c)
            week: Optional[NamedWeek] = names[(number - 1) % len(names)]
        else:
            number = self.week_of_year(c)
            week = next((w for w in names if w.week_number == number), None)
            if week is None and cfg.repeat:
                ordered = sorted(names, key=lambda w: w.week_number or 0)
                week = ordered[(number - (ordered[0].week_number or 0)) % len(ordered)]

        if week is None:
            return WeekInfo(number, type=cfg.type)
        return WeekInfo(number, week.name, week.abbreviation, cfg.type)
