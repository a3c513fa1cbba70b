"""Configuration loading utilities for the drama engine."""
from __future__ import annotations

import logging
import os
from dataclasses import dataclass
from pathlib import Path
from typing import Any, Dict

import yaml

from .models import BandChemistryState, SocialDramaSeverity

logger = logging.getLogger(__name__)

DEFAULT_DATA_PATH = Path(__file__).parent / "data"
DEFAULT_SETTINGS_PATH = DEFAULT_DATA_PATH / "settings.yaml"
_SETTINGS_ENV = "DRAMA_ENGINE_SETTINGS"
_DATA_ENV = "DRAMA_ENGINE_DATA"

_DEFAULT_CONTROVERSY = {"minor": 20, "moderate": 45, "major": 70, "explosive": 90}
_DEFAULT_SEVERITY_MULTIPLIERS = {"minor": 0.5, "moderate": 1.0, "major": 1.5, "explosive": 2.0}


def data_path() -> Path:
    """Directory holding the YAML catalogs, honouring ``DRAMA_ENGINE_DATA``."""

    override = os.getenv(_DATA_ENV)
    return Path(override) if override else DEFAULT_DATA_PATH


@dataclass(frozen=True)
class Settings:
    """Typed view over the settings YAML file."""

    default_state: BandChemistryState
    max_events: int
    drift_conflict_decay: int
    drift_tension_decay: int
    drift_alignment_target: int
    drift_alignment_rise: int
    drift_alignment_fall: int
    drift_erosion_threshold: int
    drift_chemistry_erosion: int
    controversy_levels: Dict[SocialDramaSeverity, int]
    severity_multipliers: Dict[SocialDramaSeverity, float]
    base_coverage_chance: float
    fallback_outlet: str | None
    unnamed_party: str
    viral_impact_multiplier: float
    viral_streaming_multiplier: float
    viral_score_range: tuple[int, int]
    quiet_score_range: tuple[int, int]
    fame_chance_per_decade: float
    fame_chance_cap: float
    fame_score_per_decade: float
    fame_score_cap: float
    respect_expiry: bool

    @staticmethod
    def from_dict(data: Dict[str, Any] | None) -> "Settings":
        data = data or {}
        chemistry = data.get("chemistry", {})
        state_cfg = chemistry.get("default_state", {})
        drift = chemistry.get("weekly_drift", {})
        media = data.get("media", {})
        controversy_cfg = {**_DEFAULT_CONTROVERSY, **media.get("controversy_levels", {})}
        multiplier_cfg = {
            **_DEFAULT_SEVERITY_MULTIPLIERS,
            **media.get("severity_multipliers", {}),
        }
        virality = data.get("virality", {})
        viral_score = virality.get("viral_score", {})
        quiet_score = virality.get("quiet_score", {})
        effects = data.get("effects", {})
        return Settings(
            default_state=BandChemistryState(
                chemistry_level=int(state_cfg.get("chemistry_level", 50)),
                romantic_tension=int(state_cfg.get("romantic_tension", 20)),
                creative_alignment=int(state_cfg.get("creative_alignment", 50)),
                conflict_index=int(state_cfg.get("conflict_index", 10)),
            ),
            max_events=int(chemistry.get("max_events", 2)),
            drift_conflict_decay=int(drift.get("conflict_decay", 3)),
            drift_tension_decay=int(drift.get("tension_decay", 2)),
            drift_alignment_target=int(drift.get("alignment_target", 50)),
            drift_alignment_rise=int(drift.get("alignment_rise", 2)),
            drift_alignment_fall=int(drift.get("alignment_fall", 1)),
            drift_erosion_threshold=int(drift.get("erosion_threshold", 50)),
            drift_chemistry_erosion=int(drift.get("chemistry_erosion", 2)),
            controversy_levels={
                SocialDramaSeverity(key): int(value) for key, value in controversy_cfg.items()
            },
            severity_multipliers={
                SocialDramaSeverity(key): float(value) for key, value in multiplier_cfg.items()
            },
            base_coverage_chance=float(media.get("base_coverage_chance", 30)),
            fallback_outlet=media.get("fallback_outlet"),
            unnamed_party=str(media.get("unnamed_party", "an unnamed party")),
            viral_impact_multiplier=float(virality.get("impact_multiplier", 1.5)),
            viral_streaming_multiplier=float(virality.get("streaming_multiplier", 1.3)),
            viral_score_range=(int(viral_score.get("min", 60)), int(viral_score.get("max", 100))),
            quiet_score_range=(int(quiet_score.get("min", 0)), int(quiet_score.get("max", 30))),
            fame_chance_per_decade=float(virality.get("fame_chance_per_decade", 4)),
            fame_chance_cap=float(virality.get("fame_chance_cap", 20)),
            fame_score_per_decade=float(virality.get("fame_score_per_decade", 2)),
            fame_score_cap=float(virality.get("fame_score_cap", 10)),
            respect_expiry=bool(effects.get("respect_expiry", False)),
        )


class SettingsLoader:
    """Loads and caches settings from YAML configuration files."""

    def __init__(self, path: Path | None = None) -> None:
        override = os.getenv(_SETTINGS_ENV)
        self._path = path or (Path(override) if override else DEFAULT_SETTINGS_PATH)
        self._cache: Settings | None = None

    @property
    def path(self) -> Path:
        return self._path

    def load(self, force: bool = False) -> Settings:
        if self._cache is not None and not force:
            return self._cache
        with self._path.open("r", encoding="utf-8") as fh:
            data = yaml.safe_load(fh)
        self._cache = Settings.from_dict(data)
        logger.info("Loaded drama engine settings from %s", self._path)
        return self._cache


def get_settings() -> Settings:
    """Convenience accessor for default settings."""

    return SettingsLoader().load()


__all__ = ["Settings", "SettingsLoader", "data_path", "get_settings"]
