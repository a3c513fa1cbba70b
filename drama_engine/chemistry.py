"""Four-axis band chemistry: clamping, preset and resolution application, modifiers."""

from __future__ import annotations

import logging
from typing import Optional

from .catalog import DramaCatalog
from .config import Settings
from .models import (
    AXES,
    AXIS_MAX,
    AXIS_MIN,
    AxisDelta,
    BandChemistryModifiers,
    BandChemistryState,
    DramaPreset,
)
from .rng import RandomSource, round_half_up

logger = logging.getLogger(__name__)


def clamp(value: float, lower: float, upper: float) -> float:
    return max(lower, min(upper, value))


def clamp_axis(value: float) -> int:
    return int(clamp(round_half_up(value), AXIS_MIN, AXIS_MAX))


def clamp_state(state: BandChemistryState) -> BandChemistryState:
    """Return ``state`` with every axis forced into [0, 100]."""

    return BandChemistryState(**{axis: clamp_axis(getattr(state, axis)) for axis in AXES})


def apply_delta(state: BandChemistryState, delta: AxisDelta) -> BandChemistryState:
    base = clamp_state(state)
    return BandChemistryState(
        **{axis: clamp_axis(getattr(base, axis) + getattr(delta, axis)) for axis in AXES}
    )


class ChemistryResolver:
    """Applies fired presets and later resolutions to a chemistry state."""

    def __init__(self, catalog: DramaCatalog) -> None:
        self._catalog = catalog

    def apply_preset(self, state: BandChemistryState, preset: DramaPreset) -> BandChemistryState:
        return apply_delta(state, preset.delta)

    def apply_resolution(self, state: BandChemistryState, resolution_type: str) -> BandChemistryState:
        delta = self._catalog.resolution(resolution_type)
        if delta is None:
            logger.debug("Unknown resolution type %s; state left unchanged", resolution_type)
            delta = AxisDelta()
        return apply_delta(state, delta)


def calculate_modifiers(
    state: BandChemistryState, rng: Optional[RandomSource] = None
) -> BandChemistryModifiers:
    """Derive gameplay multipliers from the four axes.

    Romantic tension above 50 makes live performances volatile: one draw from
    ``rng`` decides between a -0.1 penalty (60%) and a +0.08 spark. Without a
    random source the penalty is assumed.
    """

    state = clamp_state(state)
    chemistry = state.chemistry_level
    tension = state.romantic_tension
    alignment = state.creative_alignment
    conflict = state.conflict_index

    song_quality = clamp(
        0.7 + alignment / 200 + chemistry / 500 - conflict / 500 - tension / 1000,
        0.6,
        1.5,
    )

    volatility = 0.0
    if tension > 50:
        roll = rng() if rng is not None else 1.0
        volatility = -0.1 if roll > 0.4 else 0.08
    performance = clamp(
        0.6 + chemistry / 150 - conflict / 400 + alignment / 500 + volatility,
        0.5,
        1.5,
    )

    leave_risk = clamp(
        conflict * 0.4 + tension * 0.2 - chemistry * 0.3 - alignment * 0.1 + 15,
        0,
        80,
    )
    drama_chance = clamp(2 + conflict * 0.35 + tension * 0.2 - chemistry * 0.15, 2, 60)
    rehearsal = clamp(0.6 + chemistry / 200 + alignment / 250 - conflict / 500, 0.5, 1.5)
    fan_perception = clamp(chemistry / 5 - conflict / 5 - tension / 10 - 5, -25, 25)

    return BandChemistryModifiers(
        song_quality_modifier=round(song_quality, 3),
        performance_rating_modifier=round(performance, 3),
        member_leave_risk=round_half_up(leave_risk),
        drama_event_chance=round_half_up(drama_chance),
        rehearsal_efficiency=round(rehearsal, 3),
        fan_perception=round_half_up(fan_perception),
    )


def weekly_drift(state: BandChemistryState, settings: Settings) -> BandChemistryState:
    """Natural weekly healing: conflict and tension fade, alignment settles."""

    state = clamp_state(state)
    target = settings.drift_alignment_target
    alignment = state.creative_alignment
    if alignment < target:
        alignment = min(target, alignment + settings.drift_alignment_rise)
    elif alignment > target:
        alignment = max(target, alignment - settings.drift_alignment_fall)

    chemistry = state.chemistry_level
    if state.conflict_index > settings.drift_erosion_threshold:
        chemistry -= settings.drift_chemistry_erosion

    return clamp_state(
        BandChemistryState(
            chemistry_level=chemistry,
            romantic_tension=state.romantic_tension - settings.drift_tension_decay,
            creative_alignment=alignment,
            conflict_index=state.conflict_index - settings.drift_conflict_decay,
        )
    )


__all__ = [
    "ChemistryResolver",
    "apply_delta",
    "calculate_modifiers",
    "clamp",
    "clamp_axis",
    "clamp_state",
    "weekly_drift",
]
