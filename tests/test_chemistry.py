"""Tests for band chemistry clamping, resolutions, modifiers and drift."""
from __future__ import annotations

import pytest

from drama_engine.catalog import DramaCatalog, get_catalog
from drama_engine.chemistry import (
    ChemistryResolver,
    apply_delta,
    calculate_modifiers,
    clamp_state,
    weekly_drift,
)
from drama_engine.config import Settings
from drama_engine.models import AXES, AxisDelta, BandChemistryState, ResolutionType
from drama_engine.rng import ScriptedRandom


def _extreme_catalog() -> DramaCatalog:
    return DramaCatalog.from_dict(
        presets={
            "meltdown": {"delta": {axis: -1000 for axis in AXES}},
            "euphoria": {"delta": {axis: 1000 for axis in AXES}},
            "spat": {
                "delta": {
                    "chemistry_level": -5,
                    "romantic_tension": 15,
                    "creative_alignment": 0,
                    "conflict_index": 10,
                }
            },
        },
        social={},
        outlets=[{"name": "Local Wire"}],
        resolutions={
            "apologized": {
                "chemistry_level": 5,
                "romantic_tension": -5,
                "creative_alignment": 0,
                "conflict_index": -10,
            }
        },
    )


@pytest.fixture
def resolver() -> ChemistryResolver:
    return ChemistryResolver(get_catalog())


@pytest.mark.parametrize("preset_key", ["meltdown", "euphoria"])
@pytest.mark.parametrize(
    "start",
    [
        BandChemistryState(),
        BandChemistryState(0, 0, 0, 0),
        BandChemistryState(100, 100, 100, 100),
    ],
)
def test_extreme_presets_stay_in_bounds(preset_key, start):
    catalog = _extreme_catalog()
    state = ChemistryResolver(catalog).apply_preset(start, catalog.preset(preset_key))

    for value in state.as_dict().values():
        assert 0 <= value <= 100


def test_extreme_deltas_saturate():
    catalog = _extreme_catalog()
    resolver = ChemistryResolver(catalog)

    low = resolver.apply_preset(BandChemistryState(), catalog.preset("meltdown"))
    high = resolver.apply_preset(BandChemistryState(), catalog.preset("euphoria"))

    assert low == BandChemistryState(0, 0, 0, 0)
    assert high == BandChemistryState(100, 100, 100, 100)


def test_out_of_range_state_is_clamped_before_applying():
    state = apply_delta(BandChemistryState(150, -20, 50, 10), AxisDelta())

    assert state == BandChemistryState(100, 0, 50, 10)


def test_clamp_state_returns_new_instance():
    state = BandChemistryState(50, 20, 50, 10)
    clamped = clamp_state(state)

    assert clamped == state
    assert clamped is not state


def test_resolutions_move_conflict_in_opposite_directions(resolver):
    """Ignoring a fight makes it worse; apologising calms it."""
    state = BandChemistryState(conflict_index=50)

    ignored = resolver.apply_resolution(state, "ignored")
    apologized = resolver.apply_resolution(state, ResolutionType.APOLOGIZED)

    assert ignored.conflict_index > 50
    assert apologized.conflict_index < 50
    assert ignored.conflict_index == 55
    assert apologized.conflict_index == 40


def test_unknown_resolution_is_a_noop(resolver):
    state = BandChemistryState(40, 30, 60, 20)

    assert resolver.apply_resolution(state, "shrugged") == state


def test_band_drama_round_trip():
    catalog = _extreme_catalog()
    resolver = ChemistryResolver(catalog)
    start = BandChemistryState(50, 20, 60, 10)

    fired = resolver.apply_preset(start, catalog.preset("spat"))
    assert fired == BandChemistryState(45, 35, 60, 20)

    resolved = resolver.apply_resolution(fired, "apologized")
    assert resolved == BandChemistryState(50, 30, 60, 10)


def test_modifiers_for_default_state_draw_nothing():
    rng = ScriptedRandom([])
    modifiers = calculate_modifiers(BandChemistryState(), rng)

    assert rng.draws == 0
    assert modifiers.song_quality_modifier == pytest.approx(1.01)
    assert modifiers.performance_rating_modifier == pytest.approx(1.008)
    assert modifiers.member_leave_risk == 3
    assert modifiers.drama_event_chance == 2
    assert modifiers.rehearsal_efficiency == pytest.approx(1.03)
    assert modifiers.fan_perception == 1


def test_romantic_tension_makes_performance_volatile():
    state = BandChemistryState(50, 60, 50, 10)

    penalised = calculate_modifiers(state, ScriptedRandom([0.5]))
    sparked = calculate_modifiers(state, ScriptedRandom([0.2]))

    assert penalised.performance_rating_modifier == pytest.approx(0.908, abs=1e-3)
    assert sparked.performance_rating_modifier == pytest.approx(1.088, abs=1e-3)


def test_modifiers_respect_ranges():
    worst = calculate_modifiers(BandChemistryState(0, 100, 0, 100), ScriptedRandom([0.9]))
    best = calculate_modifiers(BandChemistryState(100, 0, 100, 0))

    assert worst.song_quality_modifier == pytest.approx(0.6)
    assert worst.performance_rating_modifier == pytest.approx(0.5)
    assert worst.member_leave_risk == 75
    assert worst.fan_perception == -25
    assert best.rehearsal_efficiency == pytest.approx(1.5)
    assert best.drama_event_chance == 2


def test_weekly_drift_heals_default_state():
    drifted = weekly_drift(BandChemistryState(), Settings.from_dict({}))

    assert drifted == BandChemistryState(50, 18, 50, 7)


def test_weekly_drift_alignment_settles_on_target():
    settings = Settings.from_dict({})

    assert weekly_drift(BandChemistryState(creative_alignment=49), settings).creative_alignment == 50
    assert weekly_drift(BandChemistryState(creative_alignment=30), settings).creative_alignment == 32
    assert weekly_drift(BandChemistryState(creative_alignment=80), settings).creative_alignment == 79


def test_weekly_drift_high_conflict_erodes_chemistry():
    drifted = weekly_drift(BandChemistryState(50, 1, 50, 60), Settings.from_dict({}))

    assert drifted == BandChemistryState(48, 0, 50, 57)
