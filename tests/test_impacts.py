"""Tests for drama impacts and streaming multiplier composition."""
from __future__ import annotations

from datetime import datetime, timedelta, timezone

import pytest

from drama_engine.catalog import get_catalog
from drama_engine.config import Settings
from drama_engine.impacts import (
    ImpactCalculator,
    active_streaming_multiplier,
    hashtag_name,
    is_effect_active,
    render_hashtag,
)
from drama_engine.models import EntityRef, SocialDramaEvent, SocialDramaSeverity
from drama_engine.rng import ScriptedRandom

NOW = datetime(2024, 5, 1, tzinfo=timezone.utc)


def _event(multiplier: float, **overrides) -> SocialDramaEvent:
    fields = dict(
        id=f"event-{multiplier}",
        primary=EntityRef.player("player-1", "Nova Vex"),
        category="diss_track",
        severity=SocialDramaSeverity.MODERATE,
        headline="Headline",
        description="Body",
        fan_loyalty_change=0,
        streaming_multiplier=multiplier,
        chart_boost=0,
        fame_change=0,
        effect_duration_days=7,
        effects_expire_at=NOW + timedelta(days=7),
        created_at=NOW,
    )
    fields.update(overrides)
    return SocialDramaEvent(**fields)


@pytest.fixture
def calculator_preset():
    return get_catalog().social_preset("public_breakup")


def test_multipliers_compound():
    assert active_streaming_multiplier([_event(1.2), _event(0.8)]) == pytest.approx(0.96)


def test_no_active_events_is_neutral():
    assert active_streaming_multiplier([]) == 1.0
    assert active_streaming_multiplier([_event(2.0, resolved=True)]) == 1.0
    assert active_streaming_multiplier([_event(2.0, effects_active=False)]) == 1.0


def test_expired_events_count_unless_expiry_is_respected():
    stale = _event(1.5, effects_expire_at=NOW - timedelta(days=1))
    fresh = _event(1.2)

    assert active_streaming_multiplier([stale, fresh], now=NOW) == pytest.approx(1.8)
    assert active_streaming_multiplier(
        [stale, fresh], now=NOW, respect_expiry=True
    ) == pytest.approx(1.2)


def test_expiry_boundary_is_inclusive():
    event = _event(1.5, effects_expire_at=NOW)

    assert is_effect_active(event, now=NOW, respect_expiry=True) is False
    assert is_effect_active(event, now=NOW - timedelta(seconds=1), respect_expiry=True) is True


def test_viral_drama_is_amplified(calculator_preset):
    rng = ScriptedRandom([0.5, 0.5, 0.5, 0.5, 0.1, 0.5])
    calculator = ImpactCalculator(Settings.from_dict({}), rng)

    impacts = calculator.calculate(calculator_preset, 0, primary_name="Nova Vex")

    assert rng.draws == 6
    assert impacts.went_viral is True
    assert impacts.viral_score == 80
    assert impacts.fan_loyalty_change == -15
    assert impacts.chart_boost == 15
    assert impacts.fame_change == 188
    assert impacts.streaming_multiplier == pytest.approx(1.95)
    assert impacts.hashtag == "NovaVexBreakup"


def test_quiet_drama_keeps_base_impacts(calculator_preset):
    rng = ScriptedRandom([0.5, 0.5, 0.5, 0.5, 0.9, 0.5])
    calculator = ImpactCalculator(Settings.from_dict({}), rng)

    impacts = calculator.calculate(calculator_preset, 0)

    assert impacts.went_viral is False
    assert impacts.viral_score == 15
    assert impacts.fan_loyalty_change == -10
    assert impacts.streaming_multiplier == pytest.approx(1.5)
    assert impacts.chart_boost == 10
    assert impacts.fame_change == 125


def test_fame_raises_viral_chance_up_to_cap(calculator_preset):
    calculator = ImpactCalculator(Settings.from_dict({}), ScriptedRandom([]))

    assert calculator.viral_chance(calculator_preset, 0) == pytest.approx(45)
    assert calculator.viral_chance(calculator_preset, 999) == pytest.approx(57)
    assert calculator.viral_chance(calculator_preset, 10**9) == pytest.approx(65)


def test_famous_entities_score_higher_when_viral(calculator_preset):
    rng = ScriptedRandom([0.5, 0.5, 0.5, 0.5, 0.1, 0.5])
    calculator = ImpactCalculator(Settings.from_dict({}), rng)

    impacts = calculator.calculate(calculator_preset, 999)

    assert impacts.viral_score == 86


def test_hashtags():
    assert hashtag_name("nova vex") == "NovaVex"
    assert render_hashtag("{primary}vs{secondary}", "Nova Vex", "Rhett") == "NovaVexvsRhett"
    assert render_hashtag("", "Nova Vex") is None
    assert render_hashtag("Free{primary}", "DJ K-9") == "FreeDJK9"
