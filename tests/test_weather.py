# tests/test_weather.py

import pytest

from calworld.core.types import OrderedMap
from calworld.engines import weather as wx
from calworld.engines.calendar import CalendarEngine
from calworld.engines.specs import GREGORIAN
from calworld.model import (
    ClimatePreset,
    ClimateProfile,
    ClimateZone,
    SeasonOverride,
    TemperatureRange,
    ZonePreset,
)


def test_mulberry32_is_reproducible():
    a, b = wx.mulberry32(20240515), wx.mulberry32(20240515)
    first = [a() for _ in range(50)]
    assert first == [b() for _ in range(50)]
    assert all(0.0 <= x < 1.0 for x in first)
    assert len(set(first)) > 45
    assert wx.mulberry32(1)() != wx.mulberry32(2)()


def test_mulberry32_accepts_large_and_negative_seeds():
    rng = wx.mulberry32(-5)
    assert 0.0 <= rng() < 1.0
    assert wx.mulberry32(2**32 + 7)() == wx.mulberry32(7)()


def test_date_seed():
    assert wx.date_seed(2024, 5, 15) == 20240515
    assert wx.date_seed(1372, 0, 1) == 13720001


def test_weighted_select():
    weights = {"a": 1, "b": 3}
    assert wx.weighted_select(weights, lambda: 0.0) == "a"
    assert wx.weighted_select(weights, lambda: 0.3) == "b"
    assert wx.weighted_select(weights, lambda: 0.999) == "b"
    assert wx.weighted_select({}, lambda: 0.5) is None
    assert wx.weighted_select({"x": 0, "y": 0}, lambda: 0.5) == "x"


def test_no_climate_defaults_to_clear():
    result = wx.generate(seed=7)
    assert result.preset_id == "clear"
    assert 10 <= result.temperature <= 22
    assert result.preset is None


def test_empty_table_guard():
    assert wx.weather_table(None) == {"clear": 1}
    assert wx.weather_table(ClimateProfile(presets=(ClimatePreset("rain", 0),))) == {"clear": 1}


def test_season_override_deletes_and_replaces():
    climate = ClimateProfile(presets=(ClimatePreset("rain", 3), ClimatePreset("clear", 2)))
    zone = ClimateZone("z", season_overrides=OrderedMap([
        ("Spring", SeasonOverride(presets=(ClimatePreset("rain", 0), ClimatePreset("fog", 1)))),
    ]))
    assert wx.weather_table(climate, zone, "Spring") == {"clear": 2, "fog": 1}
    # other seasons fall through to the zone's own presets, of which there are none
    assert wx.weather_table(climate, zone, "Summer") == {"rain": 3, "clear": 2}


def test_zone_presets_need_enabled():
    zone = ClimateZone("z", presets=OrderedMap([
        ("snow", ZonePreset("snow", enabled=False, chance=5)),
        ("hail", ZonePreset("hail", enabled=True, chance=1)),
    ]))
    assert wx.weather_table(None, zone) == {"hail": 1}


def test_temperature_precedence():
    zone = ClimateZone("z", temperatures=OrderedMap([
        ("Winter", TemperatureRange(-8, 4)),
        ("_default", TemperatureRange(5, 15)),
    ]), season_overrides=OrderedMap([
        ("Storm", SeasonOverride(temperatures=TemperatureRange(min=-20))),
    ]))
    _, temps = wx.merge_climate(None, zone, "Winter")
    assert temps == TemperatureRange(-8, 4)
    _, temps = wx.merge_climate(None, zone, "Summer")
    assert temps == TemperatureRange(5, 15)
    _, temps = wx.merge_climate(ClimateProfile(TemperatureRange(20, 30)), zone, "Winter")
    assert temps == TemperatureRange(20, 30)
    _, temps = wx.merge_climate(ClimateProfile(TemperatureRange(20, 30)), zone, "Storm")
    assert temps == TemperatureRange(-20, 22)


def test_temperature_for_season_ignores_case():
    zone = ClimateZone("z", temperatures=OrderedMap([("Winter", TemperatureRange(-8, 4))]))
    assert wx.temperature_for_season(zone, "winter") == TemperatureRange(-8, 4)
    assert wx.temperature_for_season(zone, "summer") == TemperatureRange(10, 22)
    assert wx.temperature_for_season(None, None) == TemperatureRange(10, 22)


def test_zone_preset_temperature_override():
    zone = ClimateZone("z", presets=OrderedMap([
        ("snow", ZonePreset("snow", enabled=True, chance=1, temp_min=-10, temp_max=-5)),
    ]))
    for seed in range(20):
        result = wx.generate(zone=zone, seed=seed)
        assert result.preset_id == "snow"
        assert -10 <= result.temperature <= -5


def test_apply_inertia():
    adjusted = wx.apply_inertia("a", {"a": 1, "b": 1})
    assert adjusted == pytest.approx({"a": 1.3, "b": 0.7})
    assert wx.apply_inertia(None, {"a": 1}) == {"a": 1}
    assert wx.apply_inertia("missing", {"a": 1}) == {"a": 1}


def test_catalog_resolves_preset():
    catalog = wx.DictPresetCatalog([
        wx.WeatherPreset("clear", "Clear Skies"),
        wx.WeatherPreset("storm", "Storm", category="severe", darkness_penalty=0.3),
    ])
    assert len(catalog) == 2
    assert [p.id for p in catalog.by_category("severe")] == ["storm"]
    assert wx.generate(seed=1, catalog=catalog).preset.label == "Clear Skies"


def test_date_weather_is_reproducible():
    eng = CalendarEngine(GREGORIAN)
    c = eng.from_display(2001, 7, 14, 15)
    assert eng.weather(c) == eng.weather(c)
    assert eng.weather(c) == eng.weather(eng.from_display(2001, 7, 14, 3))
    assert eng.weather(c).preset_id in wx.weather_table(None, eng.definition.zone(), "Summer")


def test_engine_forecast_crosses_month_end():
    eng = CalendarEngine(GREGORIAN)
    days = eng.forecast(eng.from_display(2001, 1, 30), days=3)
    assert [(f.year, f.month, f.day) for f in days] == [(2001, 0, 30), (2001, 0, 31), (2001, 1, 1)]
    for f in days:
        assert f.weather == eng.weather(eng.from_display(f.year, f.month + 1, f.day))


def test_module_forecast_default_stepper():
    days = wx.forecast(2001, 0, 30, 3)
    assert [(f.year, f.month, f.day) for f in days] == [(2001, 0, 30), (2001, 0, 31), (2001, 0, 32)]
    assert days[0].weather == wx.generate_for_date(2001, 0, 30)
