"""Drama engine facade: the entry points gameplay code calls.

The engine is constructed with its catalog, settings and random source and
holds no entity state between calls. Every operation takes a snapshot and
returns new records; persisting them (and guarding concurrent read-modify-write
on the same band) is the caller's job.
"""

from __future__ import annotations

import logging
from dataclasses import replace
from datetime import datetime, timedelta
from typing import Iterable, List, Optional, Sequence, Tuple

from .catalog import DramaCatalog, get_catalog
from .chemistry import ChemistryResolver, calculate_modifiers, clamp_state, weekly_drift
from .config import Settings, get_settings
from .impacts import ImpactCalculator
from .impacts import active_streaming_multiplier as compose_multipliers
from .media import ArticleGenerator, Clock, IdFactory, OutletSelector, as_severity, new_id, utc_now
from .models import (
    AlreadyResolvedError,
    BandChemistryModifiers,
    BandChemistryState,
    BandDramaEvent,
    BandDramaOutcome,
    DramaCandidate,
    DramaTriggerSource,
    EntityRef,
    SocialDramaEvent,
    SocialDramaResult,
    SocialDramaSeverity,
)
from .press_tone import ToneLibrary, get_tone_library
from .rng import DeterministicRNG, RandomSource
from .triggers import EventRoller, TriggerEvaluator

logger = logging.getLogger(__name__)


class DramaEngine:
    """Band chemistry and social drama simulation over injected configuration."""

    def __init__(
        self,
        catalog: DramaCatalog | None = None,
        settings: Settings | None = None,
        rng: RandomSource | None = None,
        *,
        tones: ToneLibrary | None = None,
        clock: Clock = utc_now,
        id_factory: IdFactory = new_id,
    ) -> None:
        self.catalog = catalog or get_catalog()
        self.settings = settings or get_settings()
        self._rng: RandomSource = rng or DeterministicRNG(int(clock().timestamp() * 1000))
        self._clock = clock
        self._id_factory = id_factory
        self._evaluator = TriggerEvaluator(self.catalog)
        self._roller = EventRoller(self._rng, self.settings.max_events)
        self._resolver = ChemistryResolver(self.catalog)
        self._selector = OutletSelector(self.catalog.outlets, self.settings, self._rng)
        self._articles = ArticleGenerator(
            tones or get_tone_library(),
            self.settings,
            self._rng,
            clock=clock,
            id_factory=id_factory,
        )
        self._impacts = ImpactCalculator(self.settings, self._rng)

    # Band chemistry -------------------------------------------------------

    def default_state(self) -> BandChemistryState:
        return self.settings.default_state

    def evaluate_drama_triggers(
        self, state: BandChemistryState, source: DramaTriggerSource | str
    ) -> List[DramaCandidate]:
        return self._evaluator.evaluate(state, source)

    def roll_drama_events(
        self, candidates: Sequence[DramaCandidate], max_events: int | None = None
    ) -> List[str]:
        return self._roller.roll(candidates, max_events)

    def apply_drama_preset(self, state: BandChemistryState, preset_key: str) -> BandChemistryState:
        return self._resolver.apply_preset(state, self.catalog.preset(preset_key))

    def apply_resolution(self, state: BandChemistryState, resolution_type: str) -> BandChemistryState:
        return self._resolver.apply_resolution(state, resolution_type)

    def band_modifiers(self, state: BandChemistryState) -> BandChemistryModifiers:
        return calculate_modifiers(state, self._rng)

    def weekly_drift(self, state: BandChemistryState) -> BandChemistryState:
        return weekly_drift(state, self.settings)

    def create_band_drama_event(
        self,
        band_id: str,
        preset_key: str,
        *,
        instigator_id: Optional[str] = None,
        target_id: Optional[str] = None,
        source: Optional[DramaTriggerSource] = None,
    ) -> BandDramaEvent:
        """Record a fired preset, snapshotting its deltas."""

        preset = self.catalog.preset(preset_key)
        metadata = {"source": source.value} if source is not None else {}
        return BandDramaEvent(
            id=self._id_factory(),
            band_id=band_id,
            preset_key=preset.key,
            drama_type=preset.drama_type,
            severity=preset.severity,
            chemistry_change=preset.delta.chemistry_level,
            romantic_tension_change=preset.delta.romantic_tension,
            creative_alignment_change=preset.delta.creative_alignment,
            conflict_index_change=preset.delta.conflict_index,
            member_leave_risk=preset.member_leave_risk,
            instigator_member_id=instigator_id,
            target_member_id=target_id,
            description=preset.description,
            public_knowledge=preset.is_public,
            metadata=metadata,
            created_at=self._clock(),
        )

    def trigger_band_drama(
        self,
        band_id: str,
        state: BandChemistryState,
        source: DramaTriggerSource | str,
        *,
        instigator_id: Optional[str] = None,
        target_id: Optional[str] = None,
        max_events: int | None = None,
    ) -> BandDramaOutcome:
        """Evaluate, roll and apply drama for one gameplay action."""

        candidates = self.evaluate_drama_triggers(state, source)
        fired = self.roll_drama_events(candidates, max_events)
        source_enum = DramaTriggerSource(source)
        events: List[BandDramaEvent] = []
        for preset_key in fired:
            state = self.apply_drama_preset(state, preset_key)
            events.append(
                self.create_band_drama_event(
                    band_id,
                    preset_key,
                    instigator_id=instigator_id,
                    target_id=target_id,
                    source=source_enum,
                )
            )
        if events:
            logger.info(
                "Band %s: %s triggered %d drama event(s)", band_id, source_enum.value, len(events)
            )
        return BandDramaOutcome(state=clamp_state(state), events=events)

    def resolve_band_drama(
        self,
        state: BandChemistryState,
        event: BandDramaEvent,
        resolution_type: str,
    ) -> Tuple[BandChemistryState, BandDramaEvent]:
        if event.resolved:
            raise AlreadyResolvedError(f"Band drama {event.id} is already resolved")
        key = getattr(resolution_type, "value", resolution_type)
        new_state = self.apply_resolution(state, resolution_type)
        resolved = replace(
            event, resolved=True, resolution_type=str(key), resolved_at=self._clock()
        )
        return new_state, resolved

    # Social drama ---------------------------------------------------------

    def generate_social_drama(
        self,
        category: str,
        primary: EntityRef,
        secondary: Optional[EntityRef] = None,
        fame: Optional[float] = 0,
        severity_override: SocialDramaSeverity | str | None = None,
    ) -> SocialDramaResult:
        preset = self.catalog.social_preset(category)
        fame = fame or 0
        severity = (
            as_severity(severity_override)
            if severity_override is not None
            else preset.default_severity
        )
        secondary_name = secondary.name if secondary else None
        impacts = self._impacts.calculate(
            preset, fame, primary_name=primary.name, secondary_name=secondary_name
        )
        headline, description = self._articles.render(preset, primary.name, secondary_name)
        created_at = self._clock()
        event = SocialDramaEvent(
            id=self._id_factory(),
            primary=primary,
            secondary=secondary,
            category=preset.category,
            severity=severity,
            headline=headline,
            description=description,
            reputation_impact=list(preset.reputation_impact),
            fan_loyalty_change=impacts.fan_loyalty_change,
            streaming_multiplier=impacts.streaming_multiplier,
            chart_boost=impacts.chart_boost,
            fame_change=impacts.fame_change,
            effect_duration_days=preset.effect_duration_days,
            effects_expire_at=created_at + timedelta(days=preset.effect_duration_days),
            went_viral=impacts.went_viral,
            viral_score=impacts.viral_score,
            hashtag=impacts.hashtag,
            metadata={"emotional_presets": list(preset.emotional_presets)},
            created_at=created_at,
        )

        mentioned = [primary.id] + ([secondary.id] if secondary else [])
        outlets = self._selector.select(fame, severity)
        articles = [
            self._articles.generate(
                preset,
                primary.name,
                secondary_name,
                outlet,
                severity=severity,
                drama_event_id=event.id,
                mentioned_entity_ids=mentioned,
            )
            for outlet in outlets
        ]
        logger.debug(
            "Generated %s drama for %s with %d article(s)",
            preset.category,
            primary.id,
            len(articles),
        )
        return SocialDramaResult(
            event=event,
            articles=articles,
            impacts=impacts,
            band_trigger_source=preset.band_trigger_source,
        )

    def publicize_band_drama(
        self, event: BandDramaEvent, band: EntityRef, fame: float = 0
    ) -> Optional[SocialDramaResult]:
        """Media coverage for a public band drama, or ``None`` for private ones.

        The covered copy of ``event`` is returned on ``result.band_event``; the
        caller's record is left untouched.
        """

        preset = self.catalog.preset(event.preset_key)
        if not preset.is_public or not preset.social_category:
            return None
        result = self.generate_social_drama(preset.social_category, band, fame=fame)
        result.event.metadata["band_drama_event_id"] = event.id
        result.band_event = replace(event, media_coverage=True, public_knowledge=True)
        return result

    def resolve_social_drama(self, event: SocialDramaEvent) -> SocialDramaEvent:
        if event.resolved:
            raise AlreadyResolvedError(f"Social drama {event.id} is already resolved")
        return replace(event, resolved=True, effects_active=False, resolved_at=self._clock())

    def active_streaming_multiplier(
        self, events: Iterable[SocialDramaEvent], now: Optional[datetime] = None
    ) -> float:
        respect_expiry = self.settings.respect_expiry
        if respect_expiry and now is None:
            now = self._clock()
        return compose_multipliers(events, now=now, respect_expiry=respect_expiry)


_DEFAULT_ENGINE: Optional[DramaEngine] = None


def get_engine() -> DramaEngine:
    """Engine over the packaged catalog and settings, built on first use."""

    global _DEFAULT_ENGINE
    if _DEFAULT_ENGINE is None:
        _DEFAULT_ENGINE = DramaEngine()
    return _DEFAULT_ENGINE


def evaluate_drama_triggers(
    state: BandChemistryState, source: DramaTriggerSource | str
) -> List[DramaCandidate]:
    return get_engine().evaluate_drama_triggers(state, source)


def roll_drama_events(
    candidates: Sequence[DramaCandidate], max_events: int | None = None
) -> List[str]:
    return get_engine().roll_drama_events(candidates, max_events)


def apply_drama_preset(state: BandChemistryState, preset_key: str) -> BandChemistryState:
    return get_engine().apply_drama_preset(state, preset_key)


def apply_resolution(state: BandChemistryState, resolution_type: str) -> BandChemistryState:
    return get_engine().apply_resolution(state, resolution_type)


def generate_social_drama(
    category: str,
    primary: EntityRef,
    secondary: Optional[EntityRef] = None,
    fame: float = 0,
    severity_override: SocialDramaSeverity | str | None = None,
) -> SocialDramaResult:
    return get_engine().generate_social_drama(
        category, primary, secondary, fame=fame, severity_override=severity_override
    )


def active_streaming_multiplier(
    events: Iterable[SocialDramaEvent], now: Optional[datetime] = None
) -> float:
    return get_engine().active_streaming_multiplier(events, now)


__all__ = [
    "DramaEngine",
    "active_streaming_multiplier",
    "apply_drama_preset",
    "apply_resolution",
    "evaluate_drama_triggers",
    "generate_social_drama",
    "get_engine",
    "roll_drama_events",
]
