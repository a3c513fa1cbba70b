"""Media coverage: which outlets pick up a story and what they print."""

from __future__ import annotations

import logging
import uuid
from datetime import datetime, timezone
from typing import Callable, Dict, List, Optional, Sequence, Tuple

from .config import Settings
from .models import (
    GeneratedMediaArticle,
    OutletProfile,
    SocialDramaPreset,
    SocialDramaSeverity,
)
from .press_tone import ToneLibrary
from .rng import RandomSource, random_in_range, random_item

logger = logging.getLogger(__name__)

Clock = Callable[[], datetime]
IdFactory = Callable[[], str]

_CONTROVERSY_SCORE_BANDS: Dict[SocialDramaSeverity, Tuple[int, int]] = {
    SocialDramaSeverity.MINOR: (10, 30),
    SocialDramaSeverity.MODERATE: (30, 55),
    SocialDramaSeverity.MAJOR: (55, 80),
    SocialDramaSeverity.EXPLOSIVE: (80, 100),
}
_POSITIVE_SENTIMENT = (20, 60)
_NEGATIVE_SENTIMENT = (-80, -10)


def utc_now() -> datetime:
    return datetime.now(timezone.utc)


def new_id() -> str:
    return str(uuid.uuid4())


def as_severity(severity: SocialDramaSeverity | str) -> SocialDramaSeverity:
    if isinstance(severity, SocialDramaSeverity):
        return severity
    try:
        return SocialDramaSeverity(severity)
    except ValueError:
        raise ValueError(f"Unknown drama severity: {severity}") from None


def render_template(template: str, primary: str, secondary: str) -> str:
    return template.replace("{primary}", primary).replace("{secondary}", secondary)


class OutletSelector:
    """Chooses the subset of the outlet roster that covers a story."""

    def __init__(
        self,
        outlets: Sequence[OutletProfile],
        settings: Settings,
        rng: RandomSource,
    ) -> None:
        if not outlets:
            raise ValueError("OutletSelector needs at least one outlet")
        self._outlets = tuple(outlets)
        self._settings = settings
        self._rng = rng

    def controversy_level(self, severity: SocialDramaSeverity | str) -> int:
        return self._settings.controversy_levels.get(as_severity(severity), 0)

    @property
    def fallback(self) -> OutletProfile:
        """The outlet forced in when nobody else covers a story."""

        name = self._settings.fallback_outlet
        if name:
            for outlet in self._outlets:
                if outlet.name == name:
                    return outlet
            logger.warning("Fallback outlet %s not in roster; using lowest threshold", name)
        return min(self._outlets, key=lambda outlet: outlet.fame_threshold)

    def select(
        self,
        fame: float,
        severity: SocialDramaSeverity | str,
        controversy_level: float | None = None,
    ) -> List[OutletProfile]:
        severity = as_severity(severity)
        if controversy_level is None:
            controversy_level = self.controversy_level(severity)
        multiplier = self._settings.severity_multipliers.get(severity, 1.0)
        fame = max(0.0, fame)
        selected: List[OutletProfile] = []
        for outlet in self._outlets:
            if fame < outlet.fame_threshold:
                continue
            chance = (
                self._settings.base_coverage_chance
                + (controversy_level * outlet.controversy_bias / 100.0) * multiplier
            )
            if self._rng() * 100 < chance:
                selected.append(outlet)
        if not selected:
            fallback = self.fallback
            logger.debug("No outlet picked up the story; forcing %s", fallback.name)
            selected.append(fallback)
        return selected


class ArticleGenerator:
    """Renders one article per covering outlet from a category's template pools."""

    def __init__(
        self,
        tones: ToneLibrary,
        settings: Settings,
        rng: RandomSource,
        *,
        clock: Clock = utc_now,
        id_factory: IdFactory = new_id,
    ) -> None:
        self._tones = tones
        self._settings = settings
        self._rng = rng
        self._clock = clock
        self._id_factory = id_factory

    def render(
        self,
        preset: SocialDramaPreset,
        primary_name: str,
        secondary_name: Optional[str],
    ) -> Tuple[str, str]:
        """Headline and body drawn uniformly from the preset's pools."""

        secondary = secondary_name or self._settings.unnamed_party
        headline = render_template(random_item(preset.headlines, self._rng), primary_name, secondary)
        body = render_template(random_item(preset.body_templates, self._rng), primary_name, secondary)
        return headline, body

    def generate(
        self,
        preset: SocialDramaPreset,
        primary_name: str,
        secondary_name: Optional[str],
        outlet: OutletProfile,
        *,
        severity: SocialDramaSeverity | str | None = None,
        drama_event_id: Optional[str] = None,
        mentioned_entity_ids: Sequence[str] = (),
    ) -> GeneratedMediaArticle:
        severity = as_severity(severity) if severity is not None else preset.default_severity
        headline, body = self.render(preset, primary_name, secondary_name)
        subheadline = self._tones.subheadline(outlet.tone, self._rng)
        low, high = _CONTROVERSY_SCORE_BANDS[severity]
        controversy_score = random_in_range(low, high, self._rng)
        sentiment_band = (
            _POSITIVE_SENTIMENT if preset.fan_loyalty_change.min >= 0 else _NEGATIVE_SENTIMENT
        )
        sentiment_score = random_in_range(*sentiment_band, self._rng)

        names = [primary_name]
        if secondary_name:
            names.append(secondary_name)
        return GeneratedMediaArticle(
            id=self._id_factory(),
            drama_event_id=drama_event_id,
            outlet_name=outlet.name,
            outlet_tone=outlet.tone,
            headline=headline,
            subheadline=subheadline,
            body_text=body,
            tags=[preset.category, severity.value, outlet.tone.value],
            mentioned_entity_ids=list(mentioned_entity_ids),
            mentioned_entity_names=names,
            sentiment_score=sentiment_score,
            controversy_score=controversy_score,
            is_breaking=severity is SocialDramaSeverity.EXPLOSIVE,
            featured=severity in (SocialDramaSeverity.MAJOR, SocialDramaSeverity.EXPLOSIVE),
            created_at=self._clock(),
        )


__all__ = [
    "ArticleGenerator",
    "Clock",
    "IdFactory",
    "OutletSelector",
    "as_severity",
    "new_id",
    "render_template",
    "utc_now",
]
