# tests/test_weekday.py

from calworld.core.types import OrderedMap, TimeComponents
from calworld.engines.calendar import CalendarEngine
from calworld.engines.festivals import FestivalLedger
from calworld.engines.specs import GREGORIAN, HARPTOS
from calworld.engines.time import TimeConverter
from calworld.engines.weekday import WeekdayResolver
from calworld.model import FestivalDefinition, MonthDefinition, NamedWeek, SimpleLeapRule, WeekConfig

from conftest import make_calendar


def _resolver(definition):
    return WeekdayResolver(TimeConverter(definition))


def test_plain_count(twelve_thirty):
    wr = _resolver(twelve_thirty)
    assert wr.weekday_index(TimeComponents(0, 0, 0)) == 0
    assert wr.weekday_index(TimeComponents(0, 1, 0)) == 30 % 7
    assert wr.weekday_index(TimeComponents(1, 0, 0)) == 360 % 7
    assert wr.weekday_index(TimeComponents(-1, 11, 29)) == 6


def test_first_weekday_shifts_epoch():
    wr = _resolver(make_calendar(first_weekday=3))
    assert wr.weekday_index(TimeComponents(0, 0, 0)) == 3
    assert wr.weekday_for(TimeComponents(0, 0, 1)).name == "Day 5"


def test_non_counting_festival_is_skipped():
    festivals = OrderedMap([("rest", FestivalDefinition("Rest", day_of_year=100, counts_for_weekday=False))])
    wr = _resolver(make_calendar(festivals=festivals))
    # 0-based days of year 98, 99 (festival), 100, 101
    days = [TimeComponents(0, 3, 8), TimeComponents(0, 3, 9), TimeComponents(0, 3, 10), TimeComponents(0, 3, 11)]
    assert [wr.weekday_index(c) for c in days] == [0, 1, 1, 2]


def test_non_counting_festival_carries_into_next_year():
    festivals = OrderedMap([("rest", FestivalDefinition("Rest", day_of_year=100, counts_for_weekday=False))])
    wr = _resolver(make_calendar(festivals=festivals))
    last = wr.weekday_index(TimeComponents(0, 11, 29))
    first = wr.weekday_index(TimeComponents(1, 0, 0))
    assert first == (last + 1) % 7


def test_intercalary_month_does_not_advance():
    definition = make_calendar(month_days=(30, 5, 30))
    months = OrderedMap([
        ("a", definition.months.at(0)),
        ("gap", MonthDefinition("Gap", 5, type="intercalary")),
        ("b", definition.months.at(2)),
    ])
    wr = _resolver(definition.tweak(months=months))
    end_of_a = wr.weekday_index(TimeComponents(0, 0, 29))
    assert wr.weekday_index(TimeComponents(0, 2, 0)) == (end_of_a + 1) % 7


def test_month_pinned_starting_weekday():
    definition = make_calendar(month_days=(30, 30))
    months = OrderedMap([
        ("a", definition.months.at(0)),
        ("b", MonthDefinition("Pinned", 30, starting_weekday=3)),
    ])
    wr = _resolver(definition.tweak(months=months))
    assert wr.weekday_index(TimeComponents(0, 1, 0)) == 3
    assert wr.weekday_index(TimeComponents(0, 1, 5)) == 1
    # negative years stay in range
    assert 0 <= wr.weekday_index(TimeComponents(-7, 1, 2)) < 7


def test_gregorian_known_weekdays():
    eng = CalendarEngine(GREGORIAN)
    assert eng.weekday(eng.from_display(2000, 1, 1)).name == "Saturday"
    assert eng.weekday(eng.from_display(1970, 1, 1)).name == "Thursday"
    assert eng.weekday(eng.from_display(2024, 7, 4)).name == "Thursday"
    assert eng.weekday(eng.from_display(1, 1, 1)).name == "Monday"


def test_harptos_months_start_on_first_day():
    eng = CalendarEngine(HARPTOS)
    for year in (1372, 1373):
        y = eng.converter.internal_year(year)
        for m, month in enumerate(eng.definition.months_list):
            if month.is_intercalary:
                continue
            assert eng.weekday(TimeComponents(y, m, 0)).name == "First-day"
            assert eng.weekday(TimeComponents(y, m, 29)).name == "Tenth-day"


def test_ledger_counts_intercalary_days():
    ledger = FestivalLedger(TimeConverter(HARPTOS))
    assert ledger.intercalary_days_in_year(False) == 5
    assert ledger.intercalary_days_in_year(True) == 6
    # Midwinter day itself is not yet counted
    assert ledger.intercalary_days_before(TimeComponents(1372, 1, 0)) == 0
    assert ledger.intercalary_days_before(TimeComponents(1372, 2, 0)) == 1


def test_find_festival_duration_and_leap_only():
    festivals = OrderedMap([
        ("fair", FestivalDefinition("Fair", month=2, day=10, duration=3)),
        ("leap", FestivalDefinition("Leap Feast", day_of_year=1, leap_year_only=True)),
    ])

    ledger = FestivalLedger(TimeConverter(make_calendar(festivals=festivals, leap_year=SimpleLeapRule(4))))
    assert ledger.find_festival(TimeComponents(1, 1, 9)).name == "Fair"
    assert ledger.find_festival(TimeComponents(1, 1, 11)).name == "Fair"
    assert ledger.find_festival(TimeComponents(1, 1, 12)) is None
    assert ledger.find_festival(TimeComponents(4, 0, 0)).name == "Leap Feast"
    assert ledger.find_festival(TimeComponents(1, 0, 0)) is None


def test_week_numbers(twelve_thirty):
    wr = _resolver(twelve_thirty)
    assert wr.week_of_year(TimeComponents(0, 0, 6)) == 1
    assert wr.week_of_year(TimeComponents(0, 0, 7)) == 2
    assert wr.week_of_month(TimeComponents(0, 1, 14)) == 3
    assert wr.current_week(TimeComponents(0, 0, 0)) is None


def test_named_weeks_month_based(twelve_thirty):
    weeks = WeekConfig(enabled=True, type="month-based", names=(NamedWeek("First"), NamedWeek("Second")))
    wr = _resolver(twelve_thirty.tweak(weeks=weeks))
    assert wr.current_week(TimeComponents(0, 0, 0)).name == "First"
    assert wr.current_week(TimeComponents(0, 0, 8)).name == "Second"


def test_year_totals_are_signed():
    festivals = OrderedMap([("rest", FestivalDefinition("Rest", day_of_year=100, counts_for_weekday=False))])
    ledger = FestivalLedger(TimeConverter(make_calendar(festivals=festivals)))
    assert ledger.non_weekday_festivals_in_year() == 1
    assert ledger.non_weekday_festivals_before_year(3) == 3
    assert ledger.non_weekday_festivals_before_year(-2) == -2
    assert ledger.non_weekday_festivals_before_year(0) == 0

    harptos = FestivalLedger(TimeConverter(HARPTOS))
    # years 0..3 hold one leap year (0)
    assert harptos.intercalary_days_before_year(4) == 3 * 5 + 6
    assert harptos.intercalary_days_before_year(-4) == -(3 * 5 + 6)


def test_pinned_month_ignores_earlier_non_counting_days():
    definition = make_calendar(month_days=(30, 30))
    months = OrderedMap([
        ("a", definition.months.at(0)),
        ("b", MonthDefinition("Pinned", 30, starting_weekday=3)),
    ])
    festivals = OrderedMap([
        ("before", FestivalDefinition("Before", month=1, day=6, counts_for_weekday=False)),
        ("inside", FestivalDefinition("Inside", month=2, day=11, counts_for_weekday=False)),
    ])
    wr = _resolver(definition.tweak(months=months, festivals=festivals))
    assert wr.weekday_index(TimeComponents(0, 1, 0)) == 3
    assert wr.weekday_index(TimeComponents(0, 1, 9)) == (3 + 9) % 7
    # the festival on day 11 of the pinned month holds the count back
    assert wr.weekday_index(TimeComponents(0, 1, 10)) == (3 + 10) % 7
    assert wr.weekday_index(TimeComponents(0, 1, 11)) == (3 + 10) % 7


def test_in_month_count_covers_intercalary_months():
    definition = make_calendar(month_days=(30, 5, 30))
    months = OrderedMap([
        ("a", definition.months.at(0)),
        ("gap", MonthDefinition("Gap", 5, type="intercalary")),
        ("b", definition.months.at(2)),
    ])
    ledger = FestivalLedger(TimeConverter(definition.tweak(months=months)))
    assert ledger.non_counting_in_month_before(TimeComponents(0, 1, 3)) == 3
    assert ledger.non_counting_in_month_before(TimeComponents(0, 2, 4)) == 0
