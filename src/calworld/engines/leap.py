"""
calworld.engines.leap
---------------------
Leap-year rules as interval voting.

A rule parses into a list of intervals. Every interval that divides the
(offset-shifted) year votes: +1 for an allowing interval, -1 for a vetoing
one (``!``). The year is leap iff the votes sum to a positive number, so
``"400,!100,4"`` reproduces the Gregorian rule.
"""

from __future__ import annotations

import logging
from dataclasses import dataclass
from typing import Any, Dict, List, Optional, Sequence

from ..model import (
    CalendarDefinition,
    CustomLeapRule,
    GregorianLeapRule,
    LeapYearRule,
    NoLeapRule,
    SimpleLeapRule,
)

logger = logging.getLogger(__name__)

GREGORIAN_PATTERN = "400,!100,4"


@dataclass(frozen=True)
class Interval:
    n: int
    subtracts: bool = False
    offset: int = 0


def parse_interval(token: str, offset: int = 0) -> Interval:
    token = token.strip()
    ignores_offset = "+" in token
    subtracts = "!" in token
    digits = token.replace("!", "").replace("+", "").strip()
    try:
        n = int(digits)
    except ValueError:
        logger.debug("Unparseable leap interval token %r, using 1", token)
        n = 1
    n = max(1, n or 1)

    if n == 1 or ignores_offset:
        norm = 0
    else:
        norm = (n + offset) % n
    return Interval(n=n, subtracts=subtracts, offset=norm)


def parse_pattern(pattern: str, offset: int = 0) -> List[Interval]:
    return [parse_interval(tok, offset) for tok in pattern.split(",") if tok.strip()]


def vote(interval: Interval, year: int, year_zero_exists: bool = True) -> int:
    mod = year - interval.offset
    if not year_zero_exists and year < 0:
        mod += 1
    if mod % interval.n == 0:
        return -1 if interval.subtracts else 1
    return 0


def intersects_year(intervals: Sequence[Interval], year: int, year_zero_exists: bool = True) -> bool:
    if not intervals:
        return False
    return sum(vote(iv, year, year_zero_exists) for iv in intervals) > 0


def rule_intervals(rule: Optional[LeapYearRule]) -> List[Interval]:
    """Intervals a rule votes with. Rules that never leap give an empty list."""
    if rule is None or isinstance(rule, NoLeapRule):
        return []
    if isinstance(rule, SimpleLeapRule):
        if not rule.interval or rule.interval <= 0:
            return []
        return [parse_interval(str(rule.interval), rule.start)]
    if isinstance(rule, GregorianLeapRule):
        return parse_pattern(GREGORIAN_PATTERN, rule.start)
    if isinstance(rule, CustomLeapRule):
        if not rule.pattern:
            return []
        return parse_pattern(rule.pattern, rule.start)
    raise TypeError(f"Unknown leap rule type: {type(rule).__name__}")


def is_leap_year(rule: Optional[LeapYearRule], display_year: int, year_zero_exists: bool = True) -> bool:
    return intersects_year(rule_intervals(rule), display_year, year_zero_exists)


def describe_rule(rule: Optional[LeapYearRule]) -> Dict[str, Any]:
    """Structured description of a rule; rendering is left to the caller."""
    if rule is None or isinstance(rule, NoLeapRule):
        return {"rule": "none"}
    if isinstance(rule, SimpleLeapRule):
        return {"rule": "simple", "interval": rule.interval, "start": rule.start}
    if isinstance(rule, GregorianLeapRule):
        return {"rule": "gregorian", "start": rule.start, "pattern": GREGORIAN_PATTERN}
    return {"rule": "custom", "pattern": rule.pattern, "start": rule.start}


class LeapYearEvaluator:
    """Leap test bound to one definition, evaluated on display years."""

    def __init__(self, definition: CalendarDefinition):
        self.definition = definition
        self._intervals = rule_intervals(definition.leap_year)

    def is_leap_display(self, display_year: int) -> bool:
        return intersects_year(self._intervals, display_year, self.definition.year_zero_exists)

    def is_leap(self, year: int) -> bool:
        """Leap test for an internal (0-based) year."""
        return self.is_leap_display(year + self.definition.year_zero)
