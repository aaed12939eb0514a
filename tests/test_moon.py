# tests/test_moon.py

import pytest

from calworld.core.types import OrderedMap, TimeComponents
from calworld.engines import moon as mp
from calworld.engines.calendar import CalendarEngine
from calworld.engines.specs import HARPTOS, SIMPLE
from calworld.model import MoonDefinition, MoonPhase

MOON29 = MoonDefinition("Moon", 29)


def test_new_moon_on_reference_day():
    info = mp.moon_phase(MOON29, 0)
    assert info.name == "New Moon"
    assert info.phase_index == 0
    assert info.position == 0.0
    assert info.sub_phase_kind == "rising"


@pytest.mark.parametrize("day,name", [
    (3, "New Moon"),
    (4, "Waxing Crescent"),
    (14, "Waxing Gibbous"),
    (15, "Full Moon"),
    (17, "Full Moon"),
    (18, "Waning Gibbous"),
    (28, "Waning Crescent"),
    (29, "New Moon"),
])
def test_phase_boundaries(day, name):
    assert mp.moon_phase(MOON29, day).name == name


def test_negative_days_wrap():
    assert mp.moon_phase(MOON29, -1).name == "Waning Crescent"
    assert mp.moon_phase(MOON29, -29).name == "New Moon"


def test_reference_phase_and_adjust():
    full_at_ref = MoonDefinition("Moon", 30, reference_phase=4)
    assert mp.moon_phase(full_at_ref, 0).name == "Full Moon"
    shifted = MoonDefinition("Moon", 29, cycle_day_adjust=15)
    assert mp.moon_phase(shifted, 0).name == "Full Moon"


def test_non_finite_input_falls_back_to_first_phase():
    assert mp.moon_phase(MOON29, float("nan")).name == "New Moon"
    assert mp.moon_phase(MoonDefinition("Bad", 0), 5).name == "New Moon"
    assert mp.moon_phase(MoonDefinition("None", 29, phases=()), 5) is None


def test_phase_distribution():
    assert mp.phase_distribution(29) == [3, 4, 4, 4, 3, 4, 4, 3]
    assert sum(mp.phase_distribution(29)) == 29
    assert mp.phase_distribution(10, 4) == [3, 3, 2, 2]


def test_phases_without_ranges_use_distribution():
    phases = tuple(MoonPhase(f"P{i}") for i in range(8))
    m = MoonDefinition("Plain", 29, phases=phases)
    assert mp.moon_phase(m, 0).name == "P0"
    assert mp.moon_phase(m, 3).name == "P1"
    assert mp.moon_phase(m, 28).name == "P7"


def test_sub_phase_thirds():
    p = MoonPhase("Full", rising="Waxing Full", fading="Waning Full")
    assert mp.sub_phase(p, 0, 3) == ("Waxing Full", "rising")
    assert mp.sub_phase(p, 1, 3) == ("Full", "peak")
    assert mp.sub_phase(p, 2, 3) == ("Waning Full", "fading")
    assert mp.sub_phase(p, 0, 1) == ("Full", "peak")


def test_is_full_window():
    assert [d for d in range(29) if mp.is_full(MOON29, d)] == [15, 16, 17, 18]


def test_engine_phase_from_components():
    eng = CalendarEngine(SIMPLE)
    assert eng.moon_phase(TimeComponents(0, 0, 15)).name == "Full Moon"
    assert eng.moon_phase(TimeComponents(0, 0, 0), "moon").name == "New Moon"
    assert len(eng.moon_phases(TimeComponents(0, 0, 0))) == 1


def test_harptos_reference_is_full():
    eng = CalendarEngine(HARPTOS)
    assert eng.moon_phase(eng.from_display(1372, 1, 1)).name == "Full Moon"


def test_next_full_moon():
    eng = CalendarEngine(SIMPLE)
    assert eng.next_full_moon(TimeComponents(0, 0, 0)) == TimeComponents(0, 0, 15)
    assert eng.next_full_moon(TimeComponents(0, 0, 16)) == TimeComponents(0, 0, 16)
    assert eng.next_full_moon(TimeComponents(0, 0, 19), max_days=5) is None


def test_convergences():
    two = OrderedMap([("a", MoonDefinition("A", 29)), ("b", MoonDefinition("B", 29))])
    eng = CalendarEngine(SIMPLE.tweak(moons=two))
    assert eng.next_convergence(TimeComponents(0, 0, 0)) == TimeComponents(0, 0, 15)
    hits = eng.convergences_in_range(TimeComponents(0, 0, 0), TimeComponents(0, 2, 0))
    assert hits == [TimeComponents(0, 0, 15), TimeComponents(0, 1, 14)]


def test_no_convergence_within_window():
    engine = mp.MoonPhaseEngine(CalendarEngine(SIMPLE).converter)
    moons = [MoonDefinition("A", 10), MoonDefinition("B", 20)]
    assert engine.next_convergence(moons, 0, max_days=200) is None
    assert engine.next_convergence([], 0) is None
