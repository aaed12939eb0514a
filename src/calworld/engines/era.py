from __future__ import annotations

import logging
from typing import Optional, Tuple

from ..core.types import EraInfo
from ..model import CalendarDefinition, EraDefinition

logger = logging.getLogger(__name__)


class EraResolver:
    """Finds the latest-starting era covering a display year."""

    def __init__(self, definition: CalendarDefinition):
        self.definition = definition
        self._eras: Tuple[EraDefinition, ...] = definition.eras.values_list()
        self._by_start = tuple(sorted(self._eras, key=lambda e: e.start_year, reverse=True))

    def era_for_display_year(self, display_year: int) -> Optional[EraInfo]:
        if not self._eras:
            return None
        for era in self._by_start:
            if display_year >= era.start_year and (era.end_year is None or display_year <= era.end_year):
                return EraInfo(era.name, era.abbreviation, display_year - era.start_year + 1)

        logger.debug("No era covers year %s, falling back to %r", display_year, self._eras[0].name)
        first = self._eras[0]
        return EraInfo(first.name, first.abbreviation, display_year)

    def era(self, year: int) -> Optional[EraInfo]:
        """Era for an internal year."""
        return self.era_for_display_year(year + self.definition.year_zero)

    def era_year(self, display_year: int) -> int:
        """Year within the matching era, or the display year when none matches."""
        for era in self._by_start:
            if display_year >= era.start_year and (era.end_year is None or display_year <= era.end_year):
                return display_year - era.start_year + 1
        return display_year
