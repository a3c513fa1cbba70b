"""Band chemistry and social drama simulation for a music-career game."""

from .catalog import CatalogError, DramaCatalog, UnknownPresetError, get_catalog
from .config import Settings, SettingsLoader, get_settings
from .engine import (
    DramaEngine,
    active_streaming_multiplier,
    apply_drama_preset,
    apply_resolution,
    evaluate_drama_triggers,
    generate_social_drama,
    get_engine,
    roll_drama_events,
)
from .models import (
    AlreadyResolvedError,
    BandChemistryState,
    BandDramaEvent,
    DramaTriggerSource,
    EntityRef,
    GeneratedMediaArticle,
    ResolutionType,
    SocialDramaEvent,
    SocialDramaResult,
    SocialDramaSeverity,
)
from .rng import DeterministicRNG, ScriptedRandom

__all__ = [
    "AlreadyResolvedError",
    "BandChemistryState",
    "BandDramaEvent",
    "CatalogError",
    "DeterministicRNG",
    "DramaCatalog",
    "DramaEngine",
    "DramaTriggerSource",
    "EntityRef",
    "GeneratedMediaArticle",
    "ResolutionType",
    "ScriptedRandom",
    "Settings",
    "SettingsLoader",
    "SocialDramaEvent",
    "SocialDramaResult",
    "SocialDramaSeverity",
    "UnknownPresetError",
    "active_streaming_multiplier",
    "apply_drama_preset",
    "apply_resolution",
    "evaluate_drama_triggers",
    "generate_social_drama",
    "get_catalog",
    "get_engine",
    "get_settings",
    "roll_drama_events",
]
