# tests/test_api.py

import json

import pytest

import calworld as cw
from calworld import api
from calworld.bootstrap import build_registry
from calworld.core.types import TimeComponents
from calworld.engines.specs import like

from conftest import make_calendar

Y2K = 63113904000


@pytest.fixture(autouse=True)
def fresh_registry():
    api.set_registry(build_registry())
    yield
    api.set_registry(build_registry())


def test_builtin_calendars():
    assert cw.list_calendars() == ["gregorian", "harptos", "simple"]
    assert cw.calendar_info("harptos")["months"] == 18
    assert cw.calendar_info()["leap"] == cw.calendar_info("gregorian")["leap"]
    with pytest.raises(KeyError, match="Unknown calendar"):
        cw.get_calendar("julian")


def test_unset_registry():
    api.set_registry(None)
    with pytest.raises(RuntimeError):
        cw.list_calendars()


def test_display_conversions():
    assert cw.from_display(2000, 1, 1) == Y2K
    assert cw.to_components(Y2K) == TimeComponents(2000, 0, 0)
    assert cw.to_time(TimeComponents(2000, 0, 0)) == Y2K
    assert cw.is_leap_year(2000)
    assert not cw.is_leap_year(1900)
    assert cw.days_in_year(2024) == 366
    assert cw.days_in_month(2000, 2) == 29
    assert cw.days_in_month(2001, 2) == 28
    assert cw.to_components(86400 * 361, calendar="simple") == TimeComponents(1, 0, 0)


def test_day_info_snapshot():
    info = cw.day_info(Y2K + 3600 * 10)
    assert info.calendar_id == "gregorian"
    assert info.display_year == 2000
    assert info.day_of_year == 0
    assert info.is_leap_year
    assert info.weekday.name == "Saturday"
    assert info.season.name == "Winter"
    assert info.festival.name == "New Year's Day"
    assert info.attributes is None


def test_day_info_attributes():
    info = cw.day_info(Y2K, attributes=["weekday", "era", "cycles", "festival"])
    assert info.attributes["weekday_name"] == "Saturday"
    assert info.attributes["rest_day"] is True
    assert info.attributes["year_in_era"] == 2000
    assert info.attributes["cycles"] == {"Zodiac": "Dragon"}
    assert info.attributes["festival"] == "New Year's Day"
    with pytest.raises(KeyError, match="Unknown attribute"):
        cw.day_info(Y2K, attributes=["horoscope"])


def test_day_facts():
    assert cw.weekday(Y2K).name == "Saturday"
    assert cw.season(Y2K).name == "Winter"
    assert cw.era(Y2K).abbreviation == "CE"
    assert cw.cycles(Y2K)[0].stage_name == "Dragon"
    assert cw.formatting_parts(Y2K).month_name == "January"


def test_moon_sun_and_weather():
    assert cw.moon_phase(cw.from_display(2000, 1, 6)).name == "New Moon"
    assert cw.moon_phase(cw.from_display(2000, 1, 6), "luna") == cw.moon_phases(cw.from_display(2000, 1, 6))[0]
    full = cw.next_full_moon(cw.from_display(2000, 1, 6))
    assert full is not None
    assert cw.moon_phase(full).name == "Full Moon"
    sun = cw.sun_times(Y2K)
    assert sun.daylight_hours < 12
    assert 0.0 <= cw.darkness(Y2K) <= 1.0
    assert cw.weather(Y2K) == cw.weather(Y2K)
    assert len(cw.forecast(Y2K, 5)) == 5


def test_register_calendar():
    eng = cw.register_calendar("test", make_calendar())
    assert cw.get_calendar("test") is eng
    assert "test" in cw.list_calendars()
    with pytest.raises(KeyError, match="already exists"):
        cw.register_calendar("test", make_calendar())
    replacement = cw.register_calendar("test", make_calendar(first_weekday=2), overwrite=True)
    assert cw.get_calendar("test") is replacement


def test_definition_as_calendar_argument():
    definition = like("gregorian").tweak(first_weekday=0)
    assert cw.weekday(Y2K, calendar=definition).name == "Sunday"
    assert cw.weekday(Y2K, calendar=cw.make_engine(definition)).name == "Sunday"


def test_like_and_tweak():
    with pytest.raises(KeyError, match="Unknown base calendar"):
        like("julian")
    shifted = like("simple").tweak(year_zero=1000)
    assert shifted.year_zero == 1000
    assert like("simple").year_zero == 0


def test_load_calendar(tmp_path):
    src = {"id": "tiny", "months": [{"name": "Only", "days": 10}], "weekdays": [{"name": "A"}, {"name": "B"}]}
    eng = cw.load_calendar(src, register=True)
    assert cw.get_calendar("tiny") is eng
    assert cw.weekday(10 * 86400 + 86400, calendar="tiny").name == "B"

    path = tmp_path / "tiny.json"
    path.write_text(json.dumps(src), encoding="utf-8")
    assert cw.load_calendar(path).definition.id == "tiny"
    with pytest.raises(KeyError):
        cw.load_calendar(path, register=True)
    with pytest.raises(cw.ConfigurationError):
        cw.load_calendar({"moons": [{"name": "Bad", "cycleLength": -1}]})


def test_unknown_moon_or_zone_and_bad_forecast():
    with pytest.raises(cw.DomainError, match="no moon 'phobos'"):
        cw.moon_phase(Y2K, "phobos")
    with pytest.raises(cw.DomainError):
        cw.next_full_moon(Y2K, 3)
    with pytest.raises(cw.DomainError, match="no climate zone 'arctic'"):
        cw.sun_times(Y2K, zone="arctic")
    with pytest.raises(cw.InputError):
        cw.forecast(Y2K, -1)
    assert cw.forecast(Y2K, 0) == []
