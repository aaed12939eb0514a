"""
calworld.engines.cycle
----------------------
Named repeating cycles (zodiacs, elemental years, market weeks, ...).

Each cycle reads one "epoch value" from the date, selected by ``based_on``,
adds its offset and indexes its stages modulo their count.
"""

from __future__ import annotations

import re
from typing import Dict, List, Mapping, Optional, Tuple

from ..core.types import CycleInfo, TimeComponents
from ..model import CycleDefinition
from .era import EraResolver
from .time import TimeConverter

_TOKEN = re.compile(r"\[(\d+)\]")


def stage_of(cycle: CycleDefinition, epoch_value: int) -> Optional[CycleInfo]:
    if not cycle.stages:
        return None
    adjusted = epoch_value + cycle.offset
    index = adjusted % len(cycle.stages)
    number = max(1, adjusted // max(1, cycle.length) + 1)
    return CycleInfo(cycle.name, cycle.stages[index], index, number)


def cycle_text(fmt: str, values: Mapping[int, str]) -> str:
    """Replaces ``[n]`` with the stage name of the n-th cycle (1-based)."""
    if not fmt:
        return ""
    return _TOKEN.sub(lambda m: values.get(int(m.group(1)), m.group(0)), fmt)


class CycleResolver:
    def __init__(self, converter: TimeConverter, eras: Optional[EraResolver] = None):
        self.converter = converter
        self.definition = converter.definition
        self.eras = eras or EraResolver(self.definition)
        self._cycles: Tuple[CycleDefinition, ...] = self.definition.cycles.values_list()

    def epoch_values(self, c: TimeComponents) -> Dict[str, int]:
        display_year = self.converter.display_year(c.year)
        return {
            "year": display_year,
            "eraYear": self.eras.era_year(display_year),
            "month": c.month,
            "monthDay": c.day_of_month,
            "day": self.converter.components_to_days(c),
            "yearDay": self.converter.day_of_year(c),
        }

    def _resolved(self, c: TimeComponents) -> List[Tuple[int, CycleInfo]]:
        values = self.epoch_values(c)
        out = []
        for i, cycle in enumerate(self._cycles):
            info = stage_of(cycle, values.get(cycle.based_on, 0))
            if info is not None:
                out.append((i + 1, info))
        return out

    def cycles(self, c: TimeComponents) -> Tuple[CycleInfo, ...]:
        return tuple(info for _, info in self._resolved(c))

    def cycle_number(self, index: int, c: TimeComponents) -> int:
        """1-based cycle count of the index-th cycle; 1 for unknown cycles."""
        if not 0 <= index < len(self._cycles):
            return 1
        cycle = self._cycles[index]
        adjusted = self.epoch_values(c).get(cycle.based_on, 0) + cycle.offset
        return max(1, adjusted // max(1, cycle.length) + 1)

    def text(self, c: TimeComponents) -> str:
        names = {pos: info.stage_name for pos, info in self._resolved(c)}
        return cycle_text(self.definition.cycle_format, names)
