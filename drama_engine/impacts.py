"""Numeric gameplay impacts of public drama and their aggregation."""

from __future__ import annotations

import logging
import math
import re
from datetime import datetime
from typing import Iterable, Optional

from .chemistry import clamp
from .config import Settings
from .models import DramaImpacts, SocialDramaEvent, SocialDramaPreset
from .rng import RandomSource, random_between, random_in_range, round_half_up

logger = logging.getLogger(__name__)

_WORD = re.compile(r"[0-9A-Za-z]+")


def hashtag_name(name: Optional[str]) -> str:
    """Squeeze a display name into CamelCase hashtag form."""

    if not name:
        return ""
    return "".join(word[:1].upper() + word[1:] for word in _WORD.findall(name))


def render_hashtag(
    template: str, primary_name: Optional[str], secondary_name: Optional[str] = None
) -> Optional[str]:
    tag = template.replace("{primary}", hashtag_name(primary_name)).replace(
        "{secondary}", hashtag_name(secondary_name)
    )
    tag = "".join(_WORD.findall(tag))
    return tag or None


class ImpactCalculator:
    """Derives fan, streaming, chart, fame and virality effects for a drama."""

    def __init__(self, settings: Settings, rng: RandomSource) -> None:
        self._settings = settings
        self._rng = rng

    def viral_chance(self, preset: SocialDramaPreset, fame: float) -> float:
        """Percent chance of going viral; grows with each decade of fame."""

        decades = math.log10(1.0 + max(0.0, fame))
        bonus = min(self._settings.fame_chance_cap, self._settings.fame_chance_per_decade * decades)
        return clamp(preset.viral_chance + bonus, 0.0, 100.0)

    def calculate(
        self,
        preset: SocialDramaPreset,
        fame: float = 0,
        *,
        primary_name: Optional[str] = None,
        secondary_name: Optional[str] = None,
    ) -> DramaImpacts:
        settings = self._settings
        fame = fame if fame and fame > 0 else 0.0

        fan_loyalty = random_in_range(
            preset.fan_loyalty_change.min, preset.fan_loyalty_change.max, self._rng
        )
        streaming = round(
            random_between(
                preset.streaming_multiplier.min, preset.streaming_multiplier.max, self._rng
            ),
            2,
        )
        chart_boost = random_in_range(preset.chart_boost.min, preset.chart_boost.max, self._rng)
        fame_change = random_in_range(preset.fame_change.min, preset.fame_change.max, self._rng)

        went_viral = self._rng() * 100 < self.viral_chance(preset, fame)
        if went_viral:
            low, high = settings.viral_score_range
            decades = math.log10(1.0 + fame)
            bonus = min(settings.fame_score_cap, settings.fame_score_per_decade * decades)
            viral_score = int(clamp(random_in_range(low, high, self._rng) + round_half_up(bonus), 0, 100))
            boost = settings.viral_impact_multiplier
            fan_loyalty = round_half_up(fan_loyalty * boost)
            chart_boost = round_half_up(chart_boost * boost)
            fame_change = round_half_up(fame_change * boost)
            streaming = round(streaming * settings.viral_streaming_multiplier, 2)
            logger.debug("%s went viral with score %d", preset.category, viral_score)
        else:
            low, high = settings.quiet_score_range
            viral_score = random_in_range(low, high, self._rng)

        return DramaImpacts(
            fan_loyalty_change=fan_loyalty,
            streaming_multiplier=streaming,
            chart_boost=chart_boost,
            fame_change=fame_change,
            went_viral=went_viral,
            viral_score=viral_score,
            hashtag=render_hashtag(preset.hashtag_template, primary_name, secondary_name),
        )


def is_effect_active(
    event: SocialDramaEvent, *, now: Optional[datetime] = None, respect_expiry: bool = False
) -> bool:
    if not event.effects_active or event.resolved:
        return False
    if respect_expiry and now is not None and event.is_expired(now):
        return False
    return True


def active_streaming_multiplier(
    events: Iterable[SocialDramaEvent],
    *,
    now: Optional[datetime] = None,
    respect_expiry: bool = False,
) -> float:
    """Compose the streaming multipliers of every active event.

    Multipliers compound: two simultaneous scandals multiply, they are never
    averaged. Expiry is only consulted when ``respect_expiry`` is set.
    """

    multiplier = 1.0
    for event in events:
        if is_effect_active(event, now=now, respect_expiry=respect_expiry):
            multiplier *= event.streaming_multiplier
    return multiplier


__all__ = [
    "ImpactCalculator",
    "active_streaming_multiplier",
    "hashtag_name",
    "is_effect_active",
    "render_hashtag",
]
