# tests/test_leap.py

import pytest

from calworld.engines import leap
from calworld.model import CustomLeapRule, GregorianLeapRule, NoLeapRule, SimpleLeapRule


@pytest.mark.parametrize("year,expected", [(2000, True), (1900, False), (2004, True), (2001, False), (0, True)])
def test_gregorian_rule(year, expected):
    assert leap.is_leap_year(GregorianLeapRule(), year) is expected


def test_custom_pattern_matches_gregorian():
    custom = CustomLeapRule("400,!100,4")
    for y in range(-800, 2401):
        assert leap.is_leap_year(custom, y) == leap.is_leap_year(GregorianLeapRule(), y)


def test_simple_rule_with_start():
    rule = SimpleLeapRule(interval=4, start=1)
    assert [y for y in range(12) if leap.is_leap_year(rule, y)] == [1, 5, 9]


def test_interval_one_ignores_offset():
    rule = SimpleLeapRule(interval=1, start=3)
    assert all(leap.is_leap_year(rule, y) for y in range(-5, 5))


def test_no_leap():
    assert not leap.is_leap_year(NoLeapRule(), 4)
    assert not leap.is_leap_year(None, 4)
    assert not leap.is_leap_year(SimpleLeapRule(interval=0), 4)


def test_no_year_zero_shifts_negative_years():
    rule = SimpleLeapRule(interval=4)
    assert not leap.is_leap_year(rule, -1, year_zero_exists=True)
    assert leap.is_leap_year(rule, -1, year_zero_exists=False)
    assert leap.is_leap_year(rule, 4, year_zero_exists=False)


def test_parse_interval_tokens():
    assert leap.parse_interval("!100") == leap.Interval(100, True, 0)
    assert leap.parse_interval("4", offset=1) == leap.Interval(4, False, 1)
    assert leap.parse_interval("+4", offset=1) == leap.Interval(4, False, 0)
    # unparseable tokens fall back to 1
    assert leap.parse_interval("abc").n == 1


def test_describe_rule():
    assert leap.describe_rule(NoLeapRule()) == {"rule": "none"}
    assert leap.describe_rule(SimpleLeapRule(4, 2))["interval"] == 4
    assert leap.describe_rule(GregorianLeapRule())["pattern"] == leap.GREGORIAN_PATTERN


def test_unknown_rule_type():
    with pytest.raises(TypeError):
        leap.rule_intervals(object())
