# tests/test_season_era_cycle.py

import pytest

from calworld.core.types import OrderedMap, TimeComponents
from calworld.engines import cycle as cy
from calworld.engines.calendar import CalendarEngine
from calworld.engines.era import EraResolver
from calworld.engines.season import SeasonResolver
from calworld.engines.specs import GREGORIAN, HARPTOS
from calworld.engines.time import TimeConverter
from calworld.model import CycleDefinition, EraDefinition, SeasonDefinition

from conftest import make_calendar


@pytest.mark.parametrize("month,day,season", [
    (1, 1, "Winter"),
    (3, 19, "Winter"),
    (3, 20, "Spring"),
    (6, 20, "Spring"),
    (7, 1, "Summer"),
    (12, 20, "Autumn"),
    (12, 21, "Winter"),
])
def test_gregorian_dated_seasons(month, day, season):
    eng = CalendarEngine(GREGORIAN)
    assert eng.season(eng.from_display(2001, month, day)).name == season


def test_harptos_month_ranges_wrap():
    eng = CalendarEngine(HARPTOS)
    assert eng.season(eng.from_display(1372, 18, 10)).name == "Winter"
    assert eng.season(eng.from_display(1372, 2, 1)).name == "Winter"
    assert eng.season(eng.from_display(1372, 4, 1)).name == "Spring"
    assert eng.season(eng.from_display(1372, 13, 30)).name == "Autumn"


def _periodic(offset=0, durations=(None, None, None, None)):
    seasons = OrderedMap((f"s{i}", SeasonDefinition(f"S{i}", duration=d)) for i, d in enumerate(durations))
    return SeasonResolver(TimeConverter(make_calendar(seasons=seasons, season_mode="periodic", season_offset=offset)))


def test_periodic_equal_shares():
    sr = _periodic()
    assert sr.season(TimeComponents(0, 0, 0)).name == "S0"
    assert sr.season(TimeComponents(0, 2, 29)).name == "S0"
    assert sr.season(TimeComponents(0, 3, 0)).name == "S1"
    assert sr.season(TimeComponents(0, 11, 29)).name == "S3"


def test_periodic_offset_wraps_year():
    sr = _periodic(offset=350)
    assert sr.periodic_bounds(0) == (350, 79)
    assert sr.season(TimeComponents(0, 0, 0)).name == "S0"
    assert sr.season(TimeComponents(0, 2, 20)).name == "S1"


def test_periodic_explicit_durations():
    sr = _periodic(durations=(10, None, None, None))
    assert sr.periodic_bounds(0) == (0, 9)
    assert sr.periodic_bounds(1) == (10, 99)


def test_day_of_year_seasons_and_fallback():
    seasons = OrderedMap([
        ("wet", SeasonDefinition("Wet", day_start=300, day_end=59)),
        ("dry", SeasonDefinition("Dry", day_start=60, day_end=199)),
    ])
    sr = SeasonResolver(TimeConverter(make_calendar(seasons=seasons)))
    assert sr.season(TimeComponents(0, 0, 5)).name == "Wet"
    assert sr.season(TimeComponents(0, 11, 0)).name == "Wet"
    assert sr.season(TimeComponents(0, 3, 0)).name == "Dry"
    # nothing covers day 250: first season
    assert sr.season(TimeComponents(0, 8, 10)).index == 0


def test_no_seasons():
    sr = SeasonResolver(TimeConverter(make_calendar()))
    assert sr.season(TimeComponents(0, 0, 0)) is None


def test_era_resolution():
    eras = OrderedMap([
        ("old", EraDefinition("Old Reckoning", 1, "OR", end_year=99)),
        ("new", EraDefinition("New Reckoning", 100, "NR")),
    ])
    er = EraResolver(make_calendar(eras=eras))
    assert er.era_for_display_year(150).name == "New Reckoning"
    assert er.era_for_display_year(150).year_in_era == 51
    assert er.era_for_display_year(50).year_in_era == 50
    fallback = er.era_for_display_year(-5)
    assert fallback.name == "Old Reckoning"
    assert fallback.year_in_era == -5
    assert er.era_year(100) == 1


def test_era_uses_display_year():
    eras = OrderedMap([("dr", EraDefinition("Dalereckoning", 1, "DR"))])
    er = EraResolver(make_calendar(eras=eras, year_zero=1000))
    assert er.era(372).year_in_era == 1372


def test_zodiac_cycle():
    eng = CalendarEngine(GREGORIAN)
    rat = eng.cycles(eng.from_display(2020, 6, 1))[0]
    assert rat.stage_name == "Rat"
    assert rat.cycle_number == 2028 // 12 + 1
    assert eng.cycles(eng.from_display(2021, 6, 1))[0].stage_name == "Ox"
    assert eng.cycle_text(eng.from_display(2024, 6, 1)) == "Year of the Dragon"


def test_stage_of_negative_epoch():
    c = CycleDefinition("Six", length=6, stages=tuple("ABCDEF"), based_on="day")
    info = cy.stage_of(c, -1)
    assert info.stage_name == "F"
    assert info.cycle_number == 1
    assert cy.stage_of(CycleDefinition("Empty"), 3) is None


def test_cycle_text_keeps_unknown_tokens():
    assert cy.cycle_text("[1] and [2]", {1: "Rat"}) == "Rat and [2]"
    assert cy.cycle_text("", {1: "Rat"}) == ""


def test_day_based_cycle_counts_absolute_days(twelve_thirty):
    cycles = OrderedMap([("market", CycleDefinition("Market", length=3, based_on="day", stages=("A", "B", "C")))])
    resolver = cy.CycleResolver(TimeConverter(twelve_thirty.tweak(cycles=cycles)))
    assert resolver.cycles(TimeComponents(1, 0, 0))[0].stage_name == "A"
    assert resolver.cycles(TimeComponents(1, 0, 1))[0].stage_name == "B"
    assert resolver.cycle_number(0, TimeComponents(0, 0, 7)) == 3
    assert resolver.cycle_number(5, TimeComponents(0, 0, 7)) == 1


def test_seasons_sharing_one_month():
    seasons = OrderedMap([
        ("early", SeasonDefinition("Early", month_start=3, day_start=1, month_end=3, day_end=15)),
        ("late", SeasonDefinition("Late", month_start=3, day_start=16, month_end=3, day_end=30)),
        ("rest", SeasonDefinition("Rest", month_start=4, day_start=1, month_end=2, day_end=30)),
    ])
    sr = SeasonResolver(TimeConverter(make_calendar(seasons=seasons)))
    assert sr.season(TimeComponents(0, 2, 14)).name == "Early"
    assert sr.season(TimeComponents(0, 2, 15)).name == "Late"
    assert sr.season(TimeComponents(0, 2, 19)).name == "Late"
    assert sr.season(TimeComponents(0, 2, 29)).name == "Late"
    assert sr.season(TimeComponents(0, 3, 0)).name == "Rest"
    assert sr.season(TimeComponents(0, 1, 29)).name == "Rest"
