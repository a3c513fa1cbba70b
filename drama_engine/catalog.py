"""Static drama catalogs: band presets, trigger rules, resolutions, categories and outlets."""

from __future__ import annotations

import logging
from dataclasses import dataclass, field
from pathlib import Path
from typing import Any, Dict, List, Mapping, Optional, Sequence, Tuple

import yaml

from .config import data_path
from .models import (
    AXES,
    AxisDelta,
    BandChemistryState,
    BandDramaSeverity,
    DramaPreset,
    DramaTriggerSource,
    OutletProfile,
    OutletTone,
    ReputationImpact,
    SocialDramaPreset,
    SocialDramaSeverity,
    ValueRange,
)

logger = logging.getLogger(__name__)

PRESETS_FILE = "drama_presets.yaml"
SOCIAL_FILE = "social_drama.yaml"
OUTLETS_FILE = "media_outlets.yaml"
RESOLUTIONS_FILE = "resolutions.yaml"


class CatalogError(ValueError):
    """Raised when catalog data is malformed or a lookup cannot be satisfied."""


class UnknownPresetError(CatalogError, KeyError):
    """Raised for a preset key or drama category the catalog does not define."""

    def __str__(self) -> str:
        return str(self.args[0]) if self.args else ""


@dataclass(frozen=True)
class AxisCondition:
    axis: str
    above: Optional[float] = None
    below: Optional[float] = None

    def holds(self, state: BandChemistryState) -> bool:
        value = getattr(state, self.axis)
        if self.above is not None and not value > self.above:
            return False
        if self.below is not None and not value < self.below:
            return False
        return True


@dataclass(frozen=True)
class TriggerRule:
    """One candidate preset for a trigger source."""

    preset_key: str
    weight: float
    conditions: Tuple[AxisCondition, ...] = ()
    scale_axis: Optional[str] = None
    scale_factor: float = 0.0

    def matches(self, state: BandChemistryState) -> bool:
        return all(condition.holds(state) for condition in self.conditions)

    def percent_chance(self, state: BandChemistryState) -> float:
        chance = self.weight
        if self.scale_axis:
            chance += getattr(state, self.scale_axis) * self.scale_factor
        return chance


def _load_yaml_resource(path: Path, filename: str) -> Dict[str, Any]:
    resource = path / filename
    if not resource.exists():
        raise CatalogError(f"Catalog file not found: {resource}")
    with resource.open("r", encoding="utf-8") as handle:
        return yaml.safe_load(handle) or {}


def _require_axis(axis: str, context: str) -> str:
    if axis not in AXES:
        raise CatalogError(f"{context}: unknown axis '{axis}'")
    return axis


def _value_range(raw: Any, context: str) -> ValueRange:
    if not isinstance(raw, Mapping) or "min" not in raw or "max" not in raw:
        raise CatalogError(f"{context} must be a mapping with min and max")
    low, high = float(raw["min"]), float(raw["max"])
    if low > high:
        raise CatalogError(f"{context}: min {low} exceeds max {high}")
    return ValueRange(low, high)


def _parse_presets(raw: Mapping[str, Any]) -> Dict[str, DramaPreset]:
    presets: Dict[str, DramaPreset] = {}
    for key, entry in raw.items():
        if not isinstance(entry, Mapping):
            raise CatalogError(f"presets.{key} must be a mapping")
        delta_cfg = entry.get("delta", {}) or {}
        for axis in delta_cfg:
            _require_axis(axis, f"presets.{key}.delta")
        try:
            severity = BandDramaSeverity(entry.get("severity", "moderate"))
        except ValueError as exc:
            raise CatalogError(f"presets.{key}: {exc}") from exc
        presets[str(key)] = DramaPreset(
            key=str(key),
            drama_type=str(entry.get("type", key)),
            label=str(entry.get("label", key)),
            severity=severity,
            delta=AxisDelta.from_dict(delta_cfg),
            member_leave_risk=float(entry.get("member_leave_risk", 0.0)),
            is_public=bool(entry.get("public", False)),
            description=str(entry.get("description", "")),
            social_category=entry.get("social_category"),
        )
    return presets


def _parse_rule(entry: Any, context: str) -> TriggerRule:
    if not isinstance(entry, Mapping):
        raise CatalogError(f"{context} must be a mapping")
    if "preset" not in entry:
        raise CatalogError(f"{context} is missing 'preset'")
    when = entry.get("when") or {}
    if not isinstance(when, Mapping):
        raise CatalogError(f"{context}.when must be a mapping of axis bounds")
    conditions: List[AxisCondition] = []
    for axis, bounds in when.items():
        _require_axis(axis, context)
        bounds = bounds or {}
        if not isinstance(bounds, Mapping):
            raise CatalogError(f"{context}.when.{axis} must be a mapping with above or below")
        conditions.append(
            AxisCondition(axis=axis, above=bounds.get("above"), below=bounds.get("below"))
        )
    scale = entry.get("scale") or {}
    if not isinstance(scale, Mapping):
        raise CatalogError(f"{context}.scale must be a mapping with axis and factor")
    scale_axis = scale.get("axis")
    if scale_axis:
        _require_axis(scale_axis, context)
    return TriggerRule(
        preset_key=str(entry["preset"]),
        weight=float(entry.get("weight", 0)),
        conditions=tuple(conditions),
        scale_axis=scale_axis,
        scale_factor=float(scale.get("factor", 0.0)),
    )


def _parse_triggers(
    raw: Mapping[str, Any], presets: Mapping[str, DramaPreset]
) -> Dict[DramaTriggerSource, Tuple[TriggerRule, ...]]:
    rules: Dict[DramaTriggerSource, Tuple[TriggerRule, ...]] = {}
    for source_key, entries in raw.items():
        try:
            source = DramaTriggerSource(source_key)
        except ValueError:
            logger.warning("Skipping trigger rules for unknown source %s", source_key)
            continue
        parsed = []
        for idx, entry in enumerate(entries or []):
            rule = _parse_rule(entry, f"triggers.{source_key}[{idx}]")
            if rule.preset_key not in presets:
                raise CatalogError(
                    f"triggers.{source_key}[{idx}] references unknown preset '{rule.preset_key}'"
                )
            parsed.append(rule)
        rules[source] = tuple(parsed)
    return rules


def _parse_reputation(raw: Any, context: str) -> Tuple[ReputationImpact, ...]:
    impacts: List[ReputationImpact] = []
    for idx, item in enumerate(raw or []):
        try:
            impacts.append(ReputationImpact(axis=str(item["axis"]), change=int(item["change"])))
        except (KeyError, TypeError, ValueError) as exc:
            raise CatalogError(f"{context}[{idx}] is invalid: {exc}") from exc
    return tuple(impacts)


def _parse_social(raw: Mapping[str, Any]) -> Dict[str, SocialDramaPreset]:
    categories: Dict[str, SocialDramaPreset] = {}
    for category, entry in raw.items():
        ctx = f"categories.{category}"
        if not isinstance(entry, Mapping):
            raise CatalogError(f"{ctx} must be a mapping")
        headlines = tuple(str(item) for item in entry.get("headlines") or [] if item)
        bodies = tuple(str(item) for item in entry.get("bodies") or [] if item)
        if not headlines or not bodies:
            raise CatalogError(f"{ctx} needs at least one headline and one body template")
        try:
            severity = SocialDramaSeverity(entry.get("severity", "moderate"))
        except ValueError as exc:
            raise CatalogError(f"{ctx}: {exc}") from exc
        trigger = entry.get("band_trigger")
        if trigger and trigger not in {source.value for source in DramaTriggerSource}:
            raise CatalogError(f"{ctx}: unknown band_trigger '{trigger}'")
        categories[str(category)] = SocialDramaPreset(
            category=str(category),
            label=str(entry.get("label", category)),
            default_severity=severity,
            headlines=headlines,
            body_templates=bodies,
            reputation_impact=_parse_reputation(entry.get("reputation"), f"{ctx}.reputation"),
            fan_loyalty_change=_value_range(entry.get("fan_loyalty"), f"{ctx}.fan_loyalty"),
            streaming_multiplier=_value_range(
                entry.get("streaming_multiplier"), f"{ctx}.streaming_multiplier"
            ),
            chart_boost=_value_range(entry.get("chart_boost"), f"{ctx}.chart_boost"),
            fame_change=_value_range(entry.get("fame_change"), f"{ctx}.fame_change"),
            effect_duration_days=int(entry.get("duration_days", 7)),
            viral_chance=float(entry.get("viral_chance", 0)),
            emotional_presets=tuple(entry.get("emotional_presets") or ()),
            band_trigger_source=DramaTriggerSource(trigger) if trigger else None,
            hashtag_template=str(entry.get("hashtag") or ""),
        )
    return categories


def _parse_outlets(raw: Sequence[Any]) -> List[OutletProfile]:
    outlets: List[OutletProfile] = []
    for idx, entry in enumerate(raw):
        try:
            outlets.append(
                OutletProfile(
                    name=str(entry["name"]),
                    tone=OutletTone(entry.get("tone", "neutral")),
                    fame_threshold=float(entry.get("fame_threshold", 0)),
                    controversy_bias=float(entry.get("controversy_bias", 0)),
                )
            )
        except (KeyError, TypeError, ValueError) as exc:
            raise CatalogError(f"outlets[{idx}] is invalid: {exc}") from exc
    return outlets


@dataclass(frozen=True)
class DramaCatalog:
    """Immutable bundle of every static table the engine reads."""

    presets: Mapping[str, DramaPreset]
    triggers: Mapping[DramaTriggerSource, Tuple[TriggerRule, ...]]
    resolutions: Mapping[str, AxisDelta]
    social_presets: Mapping[str, SocialDramaPreset]
    outlets: Tuple[OutletProfile, ...]
    feed_filters: Mapping[str, Tuple[str, ...]] = field(default_factory=dict)

    @staticmethod
    def from_dict(
        *,
        presets: Mapping[str, Any],
        social: Mapping[str, Any],
        outlets: Sequence[Any],
        resolutions: Mapping[str, Any] | None = None,
        triggers: Mapping[str, Any] | None = None,
        feed_filters: Mapping[str, Sequence[str]] | None = None,
    ) -> "DramaCatalog":
        parsed_presets = _parse_presets(presets)
        parsed_social = _parse_social(social)
        parsed_outlets = _parse_outlets(outlets)
        if not parsed_outlets:
            raise CatalogError("outlets must list at least one media outlet")
        for preset in parsed_presets.values():
            if preset.social_category and preset.social_category not in parsed_social:
                raise CatalogError(
                    f"presets.{preset.key} references unknown category '{preset.social_category}'"
                )
        parsed_resolutions: Dict[str, AxisDelta] = {}
        for name, delta in (resolutions or {}).items():
            for axis in delta or {}:
                _require_axis(axis, f"resolutions.{name}")
            parsed_resolutions[str(name)] = AxisDelta.from_dict(delta)
        return DramaCatalog(
            presets=parsed_presets,
            triggers=_parse_triggers(triggers or {}, parsed_presets),
            resolutions=parsed_resolutions,
            social_presets=parsed_social,
            outlets=tuple(parsed_outlets),
            feed_filters={
                str(tab): tuple(categories) for tab, categories in (feed_filters or {}).items()
            },
        )

    @staticmethod
    def load(path: Path | None = None) -> "DramaCatalog":
        """Build the catalog from the YAML files under ``path``."""

        root = path or data_path()
        band = _load_yaml_resource(root, PRESETS_FILE)
        social = _load_yaml_resource(root, SOCIAL_FILE)
        outlets = _load_yaml_resource(root, OUTLETS_FILE)
        resolutions = _load_yaml_resource(root, RESOLUTIONS_FILE)
        catalog = DramaCatalog.from_dict(
            presets=band.get("presets", {}),
            triggers=band.get("triggers", {}),
            social=social.get("categories", {}),
            feed_filters=social.get("feed_filters", {}),
            outlets=outlets.get("outlets", []),
            resolutions=resolutions.get("resolutions", {}),
        )
        logger.info(
            "Loaded drama catalog from %s: %d presets, %d categories, %d outlets",
            root,
            len(catalog.presets),
            len(catalog.social_presets),
            len(catalog.outlets),
        )
        return catalog

    def preset(self, key: str) -> DramaPreset:
        try:
            return self.presets[key]
        except KeyError:
            raise UnknownPresetError(f"Unknown drama preset '{key}'") from None

    def social_preset(self, category: str) -> SocialDramaPreset:
        try:
            return self.social_presets[category]
        except KeyError:
            raise UnknownPresetError(f"Unknown social drama category '{category}'") from None

    def rules_for(self, source: DramaTriggerSource) -> Tuple[TriggerRule, ...]:
        return self.triggers.get(source, ())

    def resolution(self, resolution_type: str) -> Optional[AxisDelta]:
        """Deltas for a resolution type, or ``None`` when the type is unknown."""

        key = getattr(resolution_type, "value", resolution_type)
        return self.resolutions.get(str(key))

    def outlet(self, name: str) -> Optional[OutletProfile]:
        for outlet in self.outlets:
            if outlet.name == name:
                return outlet
        return None


_DEFAULT_CATALOG: Optional[DramaCatalog] = None


def get_catalog() -> DramaCatalog:
    """Packaged catalog, loaded once."""

    global _DEFAULT_CATALOG
    if _DEFAULT_CATALOG is None:
        _DEFAULT_CATALOG = DramaCatalog.load()
    return _DEFAULT_CATALOG


__all__ = [
    "AxisCondition",
    "CatalogError",
    "DramaCatalog",
    "TriggerRule",
    "UnknownPresetError",
    "get_catalog",
]
