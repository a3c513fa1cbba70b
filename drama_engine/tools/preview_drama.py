"""Render a seeded drama preview for tuning the catalogs."""
from __future__ import annotations

import argparse
import logging
from datetime import datetime, timezone
from itertools import count
from typing import List, Sequence

from ..engine import DramaEngine
from ..models import BandChemistryState, DramaTriggerSource, EntityRef, SocialDramaResult
from ..rng import DeterministicRNG

SAMPLE_PRIMARY = EntityRef.player("player-1", "Nova Vex")
SAMPLE_SECONDARY = EntityRef.npc("npc-7", "Rhett Calloway")
_PREVIEW_TIME = datetime(2024, 1, 1, tzinfo=timezone.utc)


def _engine(seed: int) -> DramaEngine:
    ids = count(1)
    return DramaEngine(
        rng=DeterministicRNG(seed),
        clock=lambda: _PREVIEW_TIME,
        id_factory=lambda: f"preview-{next(ids)}",
    )


def preview_social(result: SocialDramaResult) -> List[str]:
    event = result.event
    impacts = result.impacts
    lines = [
        f"== {event.category} ({event.severity.value}) ==",
        event.headline,
        event.description,
        (
            f"fans {impacts.fan_loyalty_change:+d} | streaming x{impacts.streaming_multiplier:.2f}"
            f" | chart +{impacts.chart_boost} | fame {impacts.fame_change:+d}"
        ),
        f"viral: {'yes' if impacts.went_viral else 'no'} (score {impacts.viral_score})",
    ]
    if impacts.hashtag:
        lines.append(f"#{impacts.hashtag}")
    if result.band_trigger_source:
        lines.append(f"band trigger: {result.band_trigger_source.value}")
    for article in result.articles:
        lines.append(f"-- {article.outlet_name} [{article.outlet_tone.value}] --")
        lines.append(article.headline)
        if article.subheadline:
            lines.append(article.subheadline)
        lines.append(
            f"controversy {article.controversy_score}, sentiment {article.sentiment_score}"
        )
    return lines


def preview_band(engine: DramaEngine, source: str, state: BandChemistryState) -> List[str]:
    lines = [f"== {source} on {state.as_dict()} =="]
    for candidate in engine.evaluate_drama_triggers(state, source):
        lines.append(f"  candidate {candidate.preset_key}: {candidate.probability:.0%}")
    outcome = engine.trigger_band_drama("preview-band", state, source)
    if not outcome.events:
        lines.append("No drama fired.")
    for event in outcome.events:
        lines.append(f"fired {event.preset_key} ({event.severity.value}): {event.description}")
    lines.append(f"resulting state: {outcome.state.as_dict()}")
    return lines


def main(argv: Sequence[str] | None = None) -> int:
    parser = argparse.ArgumentParser(description="Preview seeded drama output")
    parser.add_argument("--seed", type=int, default=1, help="Random seed for the preview")
    parser.add_argument("--category", help="Social drama category to render")
    parser.add_argument("--fame", type=float, default=0, help="Fame of the primary entity")
    parser.add_argument("--severity", help="Override the category's default severity")
    parser.add_argument(
        "--band-source",
        choices=[source.value for source in DramaTriggerSource],
        help="Roll band drama for this trigger source instead",
    )
    parser.add_argument("--verbose", action="store_true", help="Enable debug logging")

    args = parser.parse_args(argv)
    logging.basicConfig(level=logging.DEBUG if args.verbose else logging.WARNING)
    engine = _engine(args.seed)

    if args.band_source:
        lines = preview_band(engine, args.band_source, engine.default_state())
    elif args.category:
        if args.category not in engine.catalog.social_presets:
            print(
                f"Unknown category '{args.category}'. "
                f"Available: {', '.join(sorted(engine.catalog.social_presets))}"
            )
            return 1
        result = engine.generate_social_drama(
            args.category,
            SAMPLE_PRIMARY,
            SAMPLE_SECONDARY,
            fame=args.fame,
            severity_override=args.severity,
        )
        lines = preview_social(result)
    else:
        parser.error("one of --category or --band-source is required")

    for line in lines:
        print(line)
    return 0


if __name__ == "__main__":  # pragma: no cover
    raise SystemExit(main())
