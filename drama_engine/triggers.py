"""Drama trigger evaluation and event rolling."""

from __future__ import annotations

import logging
from typing import List, Sequence

from .catalog import DramaCatalog
from .chemistry import clamp, clamp_state
from .models import BandChemistryState, DramaCandidate, DramaTriggerSource
from .rng import RandomSource

logger = logging.getLogger(__name__)

DEFAULT_MAX_EVENTS = 2


def _as_source(source: DramaTriggerSource | str) -> DramaTriggerSource:
    if isinstance(source, DramaTriggerSource):
        return source
    try:
        return DramaTriggerSource(source)
    except ValueError:
        raise ValueError(f"Unknown drama trigger source: {source}") from None


class TriggerEvaluator:
    """Turns a chemistry state and trigger source into weighted candidates."""

    def __init__(self, catalog: DramaCatalog) -> None:
        self._catalog = catalog

    def evaluate(
        self, state: BandChemistryState, source: DramaTriggerSource | str
    ) -> List[DramaCandidate]:
        source = _as_source(source)
        state = clamp_state(state)
        candidates: List[DramaCandidate] = []
        for rule in self._catalog.rules_for(source):
            if not rule.matches(state):
                continue
            probability = clamp(rule.percent_chance(state) / 100.0, 0.0, 1.0)
            candidates.append(DramaCandidate(preset_key=rule.preset_key, probability=probability))
        return candidates


class EventRoller:
    """Independent Bernoulli trials over candidates, capped at ``max_events`` successes."""

    def __init__(self, rng: RandomSource, default_max_events: int = DEFAULT_MAX_EVENTS) -> None:
        self._rng = rng
        self._default_max = default_max_events

    def roll(
        self, candidates: Sequence[DramaCandidate], max_events: int | None = None
    ) -> List[str]:
        limit = self._default_max if max_events is None else max_events
        fired: List[str] = []
        for candidate in candidates:
            # Remaining candidates are skipped, not rolled.
            if len(fired) >= limit:
                break
            if self._rng() < candidate.probability:
                fired.append(candidate.preset_key)
        if fired:
            logger.debug("Drama events fired: %s", ", ".join(fired))
        return fired


__all__ = ["DEFAULT_MAX_EVENTS", "EventRoller", "TriggerEvaluator"]
