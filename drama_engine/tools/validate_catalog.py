"""Validate drama catalog YAML files for structure and required fields."""
from __future__ import annotations

import argparse
import sys
from numbers import Real
from pathlib import Path
from typing import Any, Callable, Dict, List, Sequence

import yaml

from ..config import DEFAULT_DATA_PATH
from ..models import AXES, BandDramaSeverity, DramaTriggerSource, OutletTone, SocialDramaSeverity

DEFAULT_FILES = [
    DEFAULT_DATA_PATH / "drama_presets.yaml",
    DEFAULT_DATA_PATH / "social_drama.yaml",
    DEFAULT_DATA_PATH / "media_outlets.yaml",
    DEFAULT_DATA_PATH / "resolutions.yaml",
    DEFAULT_DATA_PATH / "outlet_tones.yaml",
]

_RANGE_FIELDS = ("fan_loyalty", "streaming_multiplier", "chart_boost", "fame_change")


def _load_yaml(path: Path) -> Any:
    try:
        with path.open("r", encoding="utf-8") as handle:
            return yaml.safe_load(handle)
    except (OSError, yaml.YAMLError) as exc:
        raise ValueError(f"Failed to load {path}: {exc}") from exc


def _ensure_non_empty_list(value: Any, path: Path, context: str) -> List[str]:
    errors: List[str] = []
    if not isinstance(value, list) or not value:
        errors.append(f"{path}: {context} must be a non-empty list")
        return errors
    for idx, element in enumerate(value):
        if not isinstance(element, str) or not element.strip():
            errors.append(f"{path}: {context}[{idx}] must be a non-empty string")
    return errors


def _ensure_number(value: Any, path: Path, context: str) -> List[str]:
    if isinstance(value, bool) or not isinstance(value, Real):
        return [f"{path}: {context} must be numeric"]
    return []


def _ensure_range(value: Any, path: Path, context: str) -> List[str]:
    if not isinstance(value, dict) or "min" not in value or "max" not in value:
        return [f"{path}: {context} must be a mapping with min and max"]
    errors = _ensure_number(value["min"], path, f"{context}.min")
    errors.extend(_ensure_number(value["max"], path, f"{context}.max"))
    if not errors and value["min"] > value["max"]:
        errors.append(f"{path}: {context}.min must not exceed max")
    return errors


def _ensure_delta(value: Any, path: Path, context: str) -> List[str]:
    if not isinstance(value, dict):
        return [f"{path}: {context} must be a mapping"]
    errors: List[str] = []
    for axis, change in value.items():
        if axis not in AXES:
            errors.append(f"{path}: {context} has unknown axis '{axis}'")
            continue
        errors.extend(_ensure_number(change, path, f"{context}.{axis}"))
    return errors


def validate_drama_presets(path: Path, data: Any) -> List[str]:
    if not isinstance(data, dict) or not isinstance(data.get("presets"), dict):
        return [f"{path}: top-level 'presets' mapping is required"]

    errors: List[str] = []
    presets = data["presets"]
    severities = {severity.value for severity in BandDramaSeverity}
    for key, entry in presets.items():
        context = f"presets.{key}"
        if not isinstance(entry, dict):
            errors.append(f"{path}: {context} must be a mapping")
            continue
        if entry.get("severity") not in severities:
            errors.append(f"{path}: {context}.severity must be one of {sorted(severities)}")
        errors.extend(_ensure_delta(entry.get("delta", {}), path, f"{context}.delta"))
        errors.extend(
            _ensure_number(entry.get("member_leave_risk", 0), path, f"{context}.member_leave_risk")
        )
        if entry.get("social_category") and not entry.get("public"):
            errors.append(f"{path}: {context} has a social_category but is not public")

    triggers = data.get("triggers", {})
    if not isinstance(triggers, dict):
        return errors + [f"{path}: 'triggers' must be a mapping"]
    sources = {source.value for source in DramaTriggerSource}
    for source, rules in triggers.items():
        if source not in sources:
            errors.append(f"{path}: triggers.{source} is not a known trigger source")
        if not isinstance(rules, list):
            errors.append(f"{path}: triggers.{source} must be a list")
            continue
        for idx, rule in enumerate(rules):
            context = f"triggers.{source}[{idx}]"
            if not isinstance(rule, dict):
                errors.append(f"{path}: {context} must be a mapping")
                continue
            if rule.get("preset") not in presets:
                errors.append(f"{path}: {context} references unknown preset '{rule.get('preset')}'")
            errors.extend(_ensure_number(rule.get("weight", 0), path, f"{context}.weight"))
            for axis in (rule.get("when") or {}):
                if axis not in AXES:
                    errors.append(f"{path}: {context}.when has unknown axis '{axis}'")
            scale = rule.get("scale")
            if scale is not None and (not isinstance(scale, dict) or scale.get("axis") not in AXES):
                errors.append(f"{path}: {context}.scale needs a known axis")
    return errors


def validate_social_drama(path: Path, data: Any) -> List[str]:
    if not isinstance(data, dict) or not isinstance(data.get("categories"), dict):
        return [f"{path}: top-level 'categories' mapping is required"]

    errors: List[str] = []
    categories = data["categories"]
    severities = {severity.value for severity in SocialDramaSeverity}
    sources = {source.value for source in DramaTriggerSource}
    for category, entry in categories.items():
        context = f"categories.{category}"
        if not isinstance(entry, dict):
            errors.append(f"{path}: {context} must be a mapping")
            continue
        if entry.get("severity") not in severities:
            errors.append(f"{path}: {context}.severity must be one of {sorted(severities)}")
        errors.extend(_ensure_non_empty_list(entry.get("headlines"), path, f"{context}.headlines"))
        errors.extend(_ensure_non_empty_list(entry.get("bodies"), path, f"{context}.bodies"))
        for field in _RANGE_FIELDS:
            errors.extend(_ensure_range(entry.get(field), path, f"{context}.{field}"))
        errors.extend(
            _ensure_number(entry.get("duration_days"), path, f"{context}.duration_days")
        )
        errors.extend(_ensure_number(entry.get("viral_chance"), path, f"{context}.viral_chance"))
        trigger = entry.get("band_trigger")
        if trigger is not None and trigger not in sources:
            errors.append(f"{path}: {context}.band_trigger '{trigger}' is not a trigger source")

    for tab, members in (data.get("feed_filters") or {}).items():
        for category in members or []:
            if category not in categories:
                errors.append(f"{path}: feed_filters.{tab} references unknown category '{category}'")
    return errors


def validate_media_outlets(path: Path, data: Any) -> List[str]:
    outlets = data.get("outlets") if isinstance(data, dict) else None
    if not isinstance(outlets, list) or not outlets:
        return [f"{path}: top-level 'outlets' must be a non-empty list"]

    errors: List[str] = []
    tones = {tone.value for tone in OutletTone}
    for idx, outlet in enumerate(outlets):
        context = f"outlets[{idx}]"
        if not isinstance(outlet, dict):
            errors.append(f"{path}: {context} must be a mapping")
            continue
        if not isinstance(outlet.get("name"), str) or not outlet["name"].strip():
            errors.append(f"{path}: {context}.name must be a non-empty string")
        if outlet.get("tone") not in tones:
            errors.append(f"{path}: {context}.tone must be one of {sorted(tones)}")
        errors.extend(_ensure_number(outlet.get("fame_threshold"), path, f"{context}.fame_threshold"))
        errors.extend(
            _ensure_number(outlet.get("controversy_bias"), path, f"{context}.controversy_bias")
        )
    return errors


def validate_resolutions(path: Path, data: Any) -> List[str]:
    resolutions = data.get("resolutions") if isinstance(data, dict) else None
    if not isinstance(resolutions, dict) or not resolutions:
        return [f"{path}: top-level 'resolutions' mapping is required"]
    errors: List[str] = []
    for name, delta in resolutions.items():
        errors.extend(_ensure_delta(delta, path, f"resolutions.{name}"))
    return errors


def validate_outlet_tones(path: Path, data: Any) -> List[str]:
    tones = data.get("tones") if isinstance(data, dict) else None
    if not isinstance(tones, dict):
        return [f"{path}: top-level 'tones' mapping is required"]
    errors: List[str] = []
    if OutletTone.NEUTRAL.value not in tones:
        errors.append(f"{path}: tones.neutral is required as the fallback pool")
    for tone, entry in tones.items():
        if tone not in {item.value for item in OutletTone}:
            errors.append(f"{path}: tones.{tone} is not a known outlet tone")
            continue
        subheadlines = entry.get("subheadlines") if isinstance(entry, dict) else None
        errors.extend(_ensure_non_empty_list(subheadlines, path, f"tones.{tone}.subheadlines"))
    return errors


VALIDATORS: Dict[str, Callable[[Path, Any], List[str]]] = {
    "drama_presets.yaml": validate_drama_presets,
    "social_drama.yaml": validate_social_drama,
    "media_outlets.yaml": validate_media_outlets,
    "resolutions.yaml": validate_resolutions,
    "outlet_tones.yaml": validate_outlet_tones,
}


def validate_file(path: Path) -> List[str]:
    validator = VALIDATORS.get(path.name)
    if validator is None:
        return [f"{path}: no validator registered for this file"]
    try:
        data = _load_yaml(path)
    except ValueError as exc:
        return [str(exc)]
    return validator(path, data)


def validate_files(paths: Sequence[Path]) -> List[str]:
    errors: List[str] = []
    for path in paths:
        resolved = path if path.is_absolute() else Path.cwd() / path
        if not resolved.exists():
            errors.append(f"{path}: file not found")
            continue
        errors.extend(validate_file(resolved))
    return errors


def main(argv: Sequence[str] | None = None) -> int:
    parser = argparse.ArgumentParser(
        description="Validate drama catalog YAML files for structure and required fields."
    )
    parser.add_argument(
        "paths",
        nargs="*",
        type=Path,
        help="Specific YAML files to validate (defaults to the packaged catalogs)",
    )

    args = parser.parse_args(argv)
    targets: List[Path] = list(args.paths) if args.paths else list(DEFAULT_FILES)

    errors = validate_files(targets)
    if errors:
        for message in errors:
            print(message, file=sys.stderr)
        return 1

    print("Catalog validation passed for", len(targets), "file(s).")
    return 0


if __name__ == "__main__":  # pragma: no cover
    raise SystemExit(main())
