"""Core data models for the drama engine."""
from __future__ import annotations

from dataclasses import dataclass, field
from datetime import datetime, timezone
from enum import Enum
from typing import Dict, List, Optional, Tuple

AXES: Tuple[str, ...] = (
    "chemistry_level",
    "romantic_tension",
    "creative_alignment",
    "conflict_index",
)
AXIS_MIN = 0
AXIS_MAX = 100


class AlreadyResolvedError(ValueError):
    """Raised when a drama event that was already resolved is resolved again."""


class BandDramaSeverity(str, Enum):
    MINOR = "minor"
    MODERATE = "moderate"
    MAJOR = "major"
    CRITICAL = "critical"


class SocialDramaSeverity(str, Enum):
    MINOR = "minor"
    MODERATE = "moderate"
    MAJOR = "major"
    EXPLOSIVE = "explosive"


class DramaTriggerSource(str, Enum):
    ROMANTIC_BREAKUP = "romantic_breakup"
    RIVALRY = "rivalry"
    CREATIVE_DISAGREEMENT = "creative_disagreement"
    PUBLIC_SCANDAL = "public_scandal"
    WEEKLY_CHECK = "weekly_check"
    GIG_OUTCOME = "gig_outcome"
    SONGWRITING_SESSION = "songwriting_session"
    REHEARSAL = "rehearsal"
    ROYALTY_DISPUTE = "royalty_dispute"


class ResolutionType(str, Enum):
    APOLOGIZED = "apologized"
    BAND_VOTE = "band_vote"
    LEADER_DECISION = "leader_decision"
    IGNORED = "ignored"
    ESCALATED = "escalated"


class EntityKind(str, Enum):
    PLAYER = "player"
    NPC = "npc"
    BAND = "band"


class OutletTone(str, Enum):
    TABLOID = "tabloid"
    SERIOUS = "serious"
    GOSSIP = "gossip"
    SUPPORTIVE = "supportive"
    NEUTRAL = "neutral"


@dataclass(frozen=True)
class BandChemistryState:
    chemistry_level: int = 50
    romantic_tension: int = 20
    creative_alignment: int = 50
    conflict_index: int = 10

    def as_dict(self) -> Dict[str, int]:
        return {axis: getattr(self, axis) for axis in AXES}


@dataclass(frozen=True)
class AxisDelta:
    chemistry_level: int = 0
    romantic_tension: int = 0
    creative_alignment: int = 0
    conflict_index: int = 0

    @staticmethod
    def from_dict(data: Optional[Dict[str, object]]) -> "AxisDelta":
        data = data or {}
        return AxisDelta(**{axis: int(data.get(axis, 0) or 0) for axis in AXES})

    def as_dict(self) -> Dict[str, int]:
        return {axis: getattr(self, axis) for axis in AXES}

    def is_empty(self) -> bool:
        return not any(self.as_dict().values())


@dataclass(frozen=True)
class BandChemistryModifiers:
    song_quality_modifier: float
    performance_rating_modifier: float
    member_leave_risk: int
    drama_event_chance: int
    rehearsal_efficiency: float
    fan_perception: int


@dataclass(frozen=True)
class DramaPreset:
    """Catalog entry for a band-internal drama type."""

    key: str
    drama_type: str
    label: str
    severity: BandDramaSeverity
    delta: AxisDelta
    member_leave_risk: float
    is_public: bool
    description: str
    social_category: Optional[str] = None


@dataclass(frozen=True)
class DramaCandidate:
    preset_key: str
    probability: float


@dataclass
class BandDramaEvent:
    id: str
    band_id: str
    preset_key: str
    drama_type: str
    severity: BandDramaSeverity
    chemistry_change: int
    romantic_tension_change: int
    creative_alignment_change: int
    conflict_index_change: int
    member_leave_risk: float
    instigator_member_id: Optional[str] = None
    target_member_id: Optional[str] = None
    resolved: bool = False
    resolution_type: Optional[str] = None
    resolved_at: Optional[datetime] = None
    description: Optional[str] = None
    public_knowledge: bool = False
    media_coverage: bool = False
    metadata: Dict[str, object] = field(default_factory=dict)
    created_at: datetime = field(default_factory=lambda: datetime.now(timezone.utc))

    @property
    def delta(self) -> AxisDelta:
        return AxisDelta(
            chemistry_level=self.chemistry_change,
            romantic_tension=self.romantic_tension_change,
            creative_alignment=self.creative_alignment_change,
            conflict_index=self.conflict_index_change,
        )


@dataclass
class BandDramaOutcome:
    state: BandChemistryState
    events: List[BandDramaEvent] = field(default_factory=list)


@dataclass(frozen=True)
class EntityRef:
    """A drama participant: the kind tag travels with its id and display name."""

    kind: EntityKind
    id: str
    name: str

    @staticmethod
    def player(entity_id: str, name: str) -> "EntityRef":
        return EntityRef(EntityKind.PLAYER, entity_id, name)

    @staticmethod
    def npc(entity_id: str, name: str) -> "EntityRef":
        return EntityRef(EntityKind.NPC, entity_id, name)

    @staticmethod
    def band(entity_id: str, name: str) -> "EntityRef":
        return EntityRef(EntityKind.BAND, entity_id, name)


@dataclass(frozen=True)
class OutletProfile:
    name: str
    tone: OutletTone
    fame_threshold: float
    controversy_bias: float


@dataclass(frozen=True)
class ValueRange:
    min: float
    max: float


@dataclass(frozen=True)
class ReputationImpact:
    axis: str
    change: int


@dataclass(frozen=True)
class SocialDramaPreset:
    """Catalog entry for a public drama category."""

    category: str
    label: str
    default_severity: SocialDramaSeverity
    headlines: Tuple[str, ...]
    body_templates: Tuple[str, ...]
    reputation_impact: Tuple[ReputationImpact, ...]
    fan_loyalty_change: ValueRange
    streaming_multiplier: ValueRange
    chart_boost: ValueRange
    fame_change: ValueRange
    effect_duration_days: int
    viral_chance: float
    emotional_presets: Tuple[str, ...] = ()
    band_trigger_source: Optional[DramaTriggerSource] = None
    hashtag_template: str = ""


@dataclass(frozen=True)
class DramaImpacts:
    fan_loyalty_change: int
    streaming_multiplier: float
    chart_boost: int
    fame_change: int
    went_viral: bool
    viral_score: int
    hashtag: Optional[str] = None


@dataclass
class SocialDramaEvent:
    id: str
    primary: EntityRef
    category: str
    severity: SocialDramaSeverity
    headline: str
    description: str
    fan_loyalty_change: int
    streaming_multiplier: float
    chart_boost: int
    fame_change: int
    effect_duration_days: int
    effects_expire_at: datetime
    secondary: Optional[EntityRef] = None
    reputation_impact: List[ReputationImpact] = field(default_factory=list)
    effects_active: bool = True
    went_viral: bool = False
    viral_score: int = 0
    hashtag: Optional[str] = None
    resolved: bool = False
    resolved_at: Optional[datetime] = None
    metadata: Dict[str, object] = field(default_factory=dict)
    created_at: datetime = field(default_factory=lambda: datetime.now(timezone.utc))

    @property
    def reputation_delta(self) -> int:
        return sum(impact.change for impact in self.reputation_impact)

    def is_expired(self, now: datetime) -> bool:
        return now >= self.effects_expire_at


@dataclass
class GeneratedMediaArticle:
    id: str
    drama_event_id: Optional[str]
    outlet_name: str
    outlet_tone: OutletTone
    headline: str
    body_text: str
    subheadline: Optional[str] = None
    source_type: str = "drama"
    tags: List[str] = field(default_factory=list)
    mentioned_entity_ids: List[str] = field(default_factory=list)
    mentioned_entity_names: List[str] = field(default_factory=list)
    sentiment_score: int = 0
    controversy_score: int = 0
    is_published: bool = True
    is_breaking: bool = False
    featured: bool = False
    created_at: datetime = field(default_factory=lambda: datetime.now(timezone.utc))


@dataclass
class SocialDramaResult:
    event: SocialDramaEvent
    articles: List[GeneratedMediaArticle]
    impacts: DramaImpacts
    band_trigger_source: Optional[DramaTriggerSource] = None
    band_event: Optional[BandDramaEvent] = None


__all__ = [
    "AXES",
    "AXIS_MAX",
    "AXIS_MIN",
    "AlreadyResolvedError",
    "AxisDelta",
    "BandChemistryModifiers",
    "BandChemistryState",
    "BandDramaEvent",
    "BandDramaOutcome",
    "BandDramaSeverity",
    "DramaCandidate",
    "DramaImpacts",
    "DramaPreset",
    "DramaTriggerSource",
    "EntityKind",
    "EntityRef",
    "GeneratedMediaArticle",
    "OutletProfile",
    "OutletTone",
    "ReputationImpact",
    "ResolutionType",
    "SocialDramaEvent",
    "SocialDramaPreset",
    "SocialDramaResult",
    "SocialDramaSeverity",
    "ValueRange",
]
