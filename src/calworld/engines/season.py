"""
calworld.engines.season
-----------------------
Which season a date falls in.

Dated seasons match (month, day) ranges or explicit day-of-year ranges; both
may wrap the year boundary. Periodic seasons are laid end to end from a
shared offset. The first match wins and the first season is the fallback.
"""

from __future__ import annotations

import logging
from typing import Optional, Tuple

from ..core.types import SeasonRef, TimeComponents
from ..model import SeasonDefinition
from .time import TimeConverter

logger = logging.getLogger(__name__)


def _in_wrapping_range(x: int, start: int, end: int) -> bool:
    """Inclusive range test; ``start > end`` spans the year boundary."""
    if start <= end:
        return start <= x <= end
    return x >= start or x <= end


class SeasonResolver:
    def __init__(self, converter: TimeConverter):
        self.converter = converter
        self.definition = converter.definition
        self._seasons: Tuple[Tuple[str, SeasonDefinition], ...] = tuple(self.definition.seasons.items())

    def periodic_bounds(self, index: int, total_days: Optional[int] = None) -> Tuple[int, int]:
        """0-based inclusive (day_start, day_end) of a periodic season."""
        n = len(self._seasons)
        if not 0 <= index < n:
            return 0, 0
        if total_days is None:
            total_days = self.converter.days_in_year(1)
        if total_days <= 0:
            return 0, 0

        equal_share = total_days // n
        start = self.definition.season_offset
        for _, s in self._seasons[:index]:
            start += s.duration if s.duration is not None else equal_share
        start %= total_days

        own = self._seasons[index][1].duration
        duration = own if own is not None else equal_share
        return start, (start + duration - 1) % total_days

    def _matches_dated(self, season: SeasonDefinition, c: TimeComponents, day_of_year: int) -> bool:
        if season.month_start is not None and season.month_end is not None:
            month = c.month + 1
            day = c.day_of_month + 1
            start_day = season.day_start if season.day_start is not None else 1
            if season.day_end is not None:
                end_day = season.day_end
            else:
                months = self.definition.months_list
                idx = season.month_end - 1
                end_day = months[idx].days if 0 <= idx < len(months) else 30

            if season.month_start == season.month_end and start_day <= end_day:
                return month == season.month_start and start_day <= day <= end_day
            if season.month_start <= season.month_end:
                if season.month_start < month < season.month_end:
                    return True
            elif month > season.month_start or month < season.month_end:
                return True
            if month == season.month_start and day >= start_day:
                return True
            if month == season.month_end and day <= end_day:
                return True
            return False

        if season.day_start is not None and season.day_end is not None:
            return _in_wrapping_range(day_of_year, season.day_start, season.day_end)
        return False

    def season_index(self, c: TimeComponents) -> Optional[int]:
        if not self._seasons:
            return None
        day_of_year = self.converter.day_of_year(c)

        if self.definition.season_mode == "periodic":
            total = self.converter.days_in_year(c.year)
            for i in range(len(self._seasons)):
                start, end = self.periodic_bounds(i, total)
                if _in_wrapping_range(day_of_year, start, end):
                    return i
        else:
            for i, (_, s) in enumerate(self._seasons):
                if self._matches_dated(s, c, day_of_year):
                    return i

        logger.debug("No season covers year=%s day=%s, falling back to first season", c.year, day_of_year)
        return 0

    def season_definition(self, c: TimeComponents) -> Optional[SeasonDefinition]:
        i = self.season_index(c)
        return None if i is None else self._seasons[i][1]

    def season(self, c: TimeComponents) -> Optional[SeasonRef]:
        i = self.season_index(c)
        if i is None:
            return None
        key, s = self._seasons[i]
        return SeasonRef(index=i, key=key, name=s.name, abbreviation=s.abbreviation)
