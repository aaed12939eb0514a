# tests/conftest.py

import pytest

from calworld.core.types import OrderedMap
from calworld.model import CalendarDefinition, MonthDefinition, WeekdayDefinition


def make_calendar(month_days=(30,) * 12, weekdays=7, **changes) -> CalendarDefinition:
    months = OrderedMap((f"m{i}", MonthDefinition(f"Month {i + 1}", d, ordinal=i + 1)) for i, d in enumerate(month_days))
    days = OrderedMap((f"d{i}", WeekdayDefinition(f"Day {i + 1}", f"D{i + 1}")) for i in range(weekdays))
    return CalendarDefinition(id=changes.pop("id", "test"), months=months, weekdays=days, **changes)


@pytest.fixture
def twelve_thirty() -> CalendarDefinition:
    """12 months of 30 days, 7-day week, no leap years."""
    return make_calendar()
