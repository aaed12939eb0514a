"""
calworld.engines.time
---------------------
Scalar seconds <-> TimeComponents for non-uniform calendars.

Years are walked one at a time so every year gets its own leap decision.
"""

from __future__ import annotations

import math
from typing import Optional, Union

from ..core.errors import ConfigurationError
from ..core.types import TimeComponents
from ..model import CalendarDefinition
from .leap import LeapYearEvaluator

Number = Union[int, float]


class TimeConverter:
    def __init__(self, definition: CalendarDefinition, leap: Optional[LeapYearEvaluator] = None):
        self.definition = definition
        self.leap = leap or LeapYearEvaluator(definition)
        self._months = definition.months_list
        self._monthless = definition.is_monthless

        self.seconds_per_minute = definition.seconds_per_minute
        self.seconds_per_hour = definition.seconds_per_hour
        self.seconds_per_day = definition.seconds_per_day

    # ---------------------------------------------------------
    # Lengths
    # ---------------------------------------------------------
    def is_leap(self, year: int) -> bool:
        return self.leap.is_leap(year)

    def month_count(self) -> int:
        return 1 if self._monthless else len(self._months)

    def days_in_month(self, month: int, year: int) -> int:
        if self._monthless:
            return self.days_in_year(year) if month == 0 else 0
        if not 0 <= month < len(self._months):
            return 0
        return self._months[month].length(self.is_leap(year))

    def days_in_year(self, year: int) -> int:
        leap = self.is_leap(year)
        if self._monthless:
            return self.definition.nominal_days_per_year + (1 if leap else 0)
        return sum(m.length(leap) for m in self._months)

    def _year_length(self, year: int) -> int:
        n = self.days_in_year(year)
        if n <= 0:
            raise ConfigurationError(f"Calendar '{self.definition.id}' has a zero-length year {year}")
        return n

    def day_of_year_from_month_day(self, month: int, day_of_month: int, year: int) -> int:
        """0-based day of year for a 0-based month and day."""
        return sum(self.days_in_month(m, year) for m in range(month)) + day_of_month

    def day_of_year(self, c: TimeComponents) -> int:
        return self.day_of_year_from_month_day(c.month, c.day_of_month, c.year)

    def display_year(self, year: int) -> int:
        return year + self.definition.year_zero

    def internal_year(self, display_year: int) -> int:
        return display_year - self.definition.year_zero

    # ---------------------------------------------------------
    # Conversions
    # ---------------------------------------------------------
    def time_to_components(self, t: Number) -> TimeComponents:
        total = int(math.floor(t)) + self.definition.epoch_offset
        spd = self.seconds_per_day

        days, rem = divmod(total, spd)
        hour, rem = divmod(rem, self.seconds_per_hour)
        minute, second = divmod(rem, self.seconds_per_minute)

        # 1. Whole years
        year = 0
        if days >= 0:
            while days >= self._year_length(year):
                days -= self._year_length(year)
                year += 1
        else:
            while days < 0:
                year -= 1
                days += self._year_length(year)

        # 2. Months within the year
        month = 0
        for m in range(self.month_count()):
            dim = self.days_in_month(m, year)
            if days < dim:
                month = m
                break
            days -= dim
        else:
            month = max(0, self.month_count() - 1)

        return TimeComponents(year, month, days, hour, minute, second)

    def components_to_time(self, c: TimeComponents) -> int:
        days = 0
        if c.year >= 0:
            for y in range(c.year):
                days += self.days_in_year(y)
        else:
            for y in range(-1, c.year - 1, -1):
                days -= self.days_in_year(y)

        for m in range(c.month):
            days += self.days_in_month(m, c.year)
        days += c.day_of_month

        seconds = (
            days * self.seconds_per_day
            + c.hour * self.seconds_per_hour
            + c.minute * self.seconds_per_minute
            + c.second
        )
        return seconds - self.definition.epoch_offset

    def components_to_days(self, c: TimeComponents) -> int:
        """Absolute day number of ``c`` (floor of seconds over day length)."""
        return self.components_to_time(c) // self.seconds_per_day

    def days_to_components(self, day_number: int) -> TimeComponents:
        return self.time_to_components(day_number * self.seconds_per_day)

    def add_days(self, c: TimeComponents, n: int) -> TimeComponents:
        return self.time_to_components(self.components_to_time(c) + n * self.seconds_per_day)

    def hours_of_day(self, c: TimeComponents) -> float:
        """Decimal hour on the calendar's own clock."""
        minutes = c.minute + c.second / self.definition.seconds_per_minute
        return c.hour + minutes / self.definition.minutes_per_hour
