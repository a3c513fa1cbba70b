"""Tests for trigger evaluation and the event roller."""
from __future__ import annotations

import logging

import pytest

from drama_engine.catalog import DramaCatalog, get_catalog
from drama_engine.models import BandChemistryState, DramaCandidate, DramaTriggerSource
from drama_engine.rng import ScriptedRandom
from drama_engine.triggers import EventRoller, TriggerEvaluator


@pytest.fixture
def evaluator() -> TriggerEvaluator:
    return TriggerEvaluator(get_catalog())


def test_breakup_on_calm_band_only_offers_the_breakup(evaluator):
    candidates = evaluator.evaluate(BandChemistryState(), DramaTriggerSource.ROMANTIC_BREAKUP)

    assert candidates == [DramaCandidate("romantic_breakup", pytest.approx(0.9))]


def test_thresholds_unlock_more_presets(evaluator):
    state = BandChemistryState(chemistry_level=40, romantic_tension=45, conflict_index=55)
    keys = [c.preset_key for c in evaluator.evaluate(state, "romantic_breakup")]

    assert keys == ["romantic_breakup", "member_threat_leave", "rivalry_eruption"]


def test_weekly_check_probability_scales_with_conflict(evaluator):
    state = BandChemistryState(conflict_index=80)
    candidates = evaluator.evaluate(state, DramaTriggerSource.WEEKLY_CHECK)

    assert [c.preset_key for c in candidates] == ["member_threat_leave"]
    assert candidates[0].probability == pytest.approx(0.16)


def test_thresholds_are_strict(evaluator):
    state = BandChemistryState(conflict_index=60)

    assert evaluator.evaluate(state, DramaTriggerSource.WEEKLY_CHECK) == []


def test_out_of_range_state_is_clamped(evaluator):
    state = BandChemistryState(conflict_index=500)
    candidates = evaluator.evaluate(state, DramaTriggerSource.WEEKLY_CHECK)

    assert candidates[0].probability == pytest.approx(0.2)


def test_unknown_source_raises(evaluator):
    with pytest.raises(ValueError):
        evaluator.evaluate(BandChemistryState(), "band_karaoke")


def test_source_without_rules_yields_no_candidates():
    catalog = DramaCatalog.from_dict(presets={}, social={}, outlets=[{"name": "Local Wire"}])

    assert TriggerEvaluator(catalog).evaluate(BandChemistryState(), "rehearsal") == []


def test_probabilities_are_capped_at_one():
    catalog = DramaCatalog.from_dict(
        presets={"spat": {}},
        social={},
        outlets=[{"name": "Local Wire"}],
        triggers={"rivalry": [{"preset": "spat", "weight": 90, "scale": {"axis": "conflict_index", "factor": 1}}]},
    )
    state = BandChemistryState(conflict_index=50)

    assert TriggerEvaluator(catalog).evaluate(state, "rivalry")[0].probability == 1.0


def test_roller_never_exceeds_max_events():
    candidates = [DramaCandidate(f"preset_{idx}", 1.0) for idx in range(5)]
    rng = ScriptedRandom([0.99] * 5)

    fired = EventRoller(rng).roll(candidates, max_events=2)

    assert fired == ["preset_0", "preset_1"]
    assert rng.draws == 2


def test_roller_uses_default_cap():
    candidates = [DramaCandidate(f"preset_{idx}", 1.0) for idx in range(4)]

    assert len(EventRoller(ScriptedRandom([0.0] * 4), default_max_events=3).roll(candidates)) == 3


def test_roller_zero_cap_draws_nothing():
    rng = ScriptedRandom([])

    assert EventRoller(rng).roll([DramaCandidate("spat", 1.0)], max_events=0) == []
    assert rng.draws == 0


def test_roller_skips_failed_rolls_in_order():
    candidates = [
        DramaCandidate("first", 0.3),
        DramaCandidate("second", 0.0),
        DramaCandidate("third", 0.8),
    ]
    rng = ScriptedRandom([0.5, 0.0, 0.79])

    assert EventRoller(rng).roll(candidates) == ["third"]
    assert rng.draws == 3


def test_roller_logs_fired_events(caplog):
    caplog.set_level(logging.DEBUG, logger="drama_engine.triggers")

    EventRoller(ScriptedRandom([0.1])).roll([DramaCandidate("spat", 0.5)])

    assert "spat" in caplog.text
