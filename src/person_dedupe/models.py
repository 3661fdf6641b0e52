from __future__ import annotations

from dataclasses import dataclass, field
from datetime import datetime
from enum import StrEnum
from typing import Any

RecordKey = tuple[str, str]


class SourceKind(StrEnum):
    LEAD = "Lead"
    CONTACT = "Contact"


class SignalName(StrEnum):
    EXACT_EMAIL = "exact_email"
    DOMAIN_NAME = "domain_name"
    PHONE_NAME = "phone_name"


class SignalStrength(StrEnum):
    EXACT = "Exact"
    STRONG = "Strong"
    WEAK = "Weak"


class ConfidenceTier(StrEnum):
    CRITICAL = "Critical"
    HIGH = "High"
    MEDIUM = "Medium"
    LOW = "Low"
    NONE = "None"

    @property
    def rank(self) -> int:
        """Severity order, 0 is the most confident tier."""
        return _TIER_ORDER.index(self)

    @property
    def estimate(self) -> float:
        return _TIER_ESTIMATES[self]


_TIER_ORDER = [
    ConfidenceTier.CRITICAL,
    ConfidenceTier.HIGH,
    ConfidenceTier.MEDIUM,
    ConfidenceTier.LOW,
    ConfidenceTier.NONE,
]
_TIER_ESTIMATES = {
    ConfidenceTier.CRITICAL: 0.99,
    ConfidenceTier.HIGH: 0.85,
    ConfidenceTier.MEDIUM: 0.65,
    ConfidenceTier.LOW: 0.40,
    ConfidenceTier.NONE: 0.0,
}


class MergeAction(StrEnum):
    AUTO_MERGE_CANDIDATE = "AutoMergeCandidate"
    MANUAL_REVIEW_PRIORITY = "ManualReviewPriority"
    INVESTIGATION_QUEUE = "InvestigationQueue"
    IGNORE = "Ignore"


@dataclass(frozen=True, slots=True)
class PersonRecord:
    """One Lead or Contact row as handed over by the record store."""

    record_id: str
    source_kind: SourceKind
    first_name: str | None = None
    last_name: str | None = None
    email: str | None = None
    phone: str | None = None
    company: str | None = None
    created_at: datetime | None = None

    @property
    def key(self) -> RecordKey:
        return (self.source_kind.value, self.record_id)


@dataclass(frozen=True, slots=True)
class NormalizedRecord:
    """Comparison keys derived from a PersonRecord for a single run."""

    source_id: str
    source_kind: SourceKind
    first_name_key: str = ""
    first_name_full: str = ""
    last_name_key: str = ""
    email_normalized: str = ""
    email_domain: str = ""
    email_is_alias: bool = False
    phone_digits: str = ""
    created_at: datetime | None = None
    notes: tuple[str, ...] = ()

    @property
    def key(self) -> RecordKey:
        return (self.source_kind.value, self.source_id)

    @property
    def has_contact_point(self) -> bool:
        return bool(self.email_normalized or self.phone_digits)


@dataclass(frozen=True, slots=True)
class CandidatePair:
    """Unordered pair of normalized records; build with `CandidatePair.of`."""

    left: NormalizedRecord
    right: NormalizedRecord

    def __post_init__(self) -> None:
        if self.left.key == self.right.key:
            raise ValueError(f"candidate pair needs two distinct records, got {self.left.key} twice")

    @classmethod
    def of(cls, a: NormalizedRecord, b: NormalizedRecord) -> "CandidatePair":
        if b.key < a.key:
            a, b = b, a
        return cls(left=a, right=b)

    @property
    def key(self) -> tuple[RecordKey, RecordKey]:
        return (self.left.key, self.right.key)


@dataclass(frozen=True, slots=True)
class MatchSignal:
    name: SignalName
    matched: bool
    strength: SignalStrength


@dataclass(frozen=True, slots=True)
class CorporateFlag:
    value: str
    distinct_person_count: int
    is_corporate: bool


@dataclass(frozen=True, slots=True)
class ScoredPair:
    pair: CandidatePair
    signals: tuple[MatchSignal, ...]
    tier: ConfidenceTier
    reason: str

    @property
    def confidence(self) -> float:
        return self.tier.estimate


@dataclass(frozen=True, slots=True)
class MergeRecommendation:
    """Advisory merge action for one scored pair. Nothing is merged."""

    scored: ScoredPair
    action: MergeAction
    survivor_key: RecordKey
    retired_key: RecordKey
    rank: int = 0

    @property
    def tier(self) -> ConfidenceTier:
        return self.scored.tier

    @property
    def reason(self) -> str:
        return self.scored.reason

    def to_dict(self) -> dict[str, Any]:
        left, right = self.scored.pair.left, self.scored.pair.right
        return {
            "rank": self.rank,
            "left": {"id": left.source_id, "kind": left.source_kind.value},
            "right": {"id": right.source_id, "kind": right.source_kind.value},
            "tier": self.tier.value,
            "confidence": self.scored.confidence,
            "reason": self.reason,
            "signals": [
                {"name": signal.name.value, "strength": signal.strength.value}
                for signal in self.scored.signals
            ],
            "action": self.action.value,
            "survivor": {"id": self.survivor_key[1], "kind": self.survivor_key[0]},
            "retired": {"id": self.retired_key[1], "kind": self.retired_key[0]},
        }


@dataclass(frozen=True, slots=True)
class Summary:
    """Read-only counts for the reporting layer."""

    record_count: int = 0
    candidate_count: int = 0
    recommendation_count: int = 0
    by_tier: dict[str, int] = field(default_factory=dict)
    by_reason: dict[str, int] = field(default_factory=dict)
    by_action: dict[str, int] = field(default_factory=dict)
    excluded_records: dict[str, int] = field(default_factory=dict)
    corporate_phones: int = 0
    corporate_emails: int = 0

    def to_dict(self) -> dict[str, Any]:
        return {
            "record_count": self.record_count,
            "candidate_count": self.candidate_count,
            "recommendation_count": self.recommendation_count,
            "by_tier": dict(self.by_tier),
            "by_reason": dict(self.by_reason),
            "by_action": dict(self.by_action),
            "excluded_records": dict(self.excluded_records),
            "corporate_phones": self.corporate_phones,
            "corporate_emails": self.corporate_emails,
        }


@dataclass(frozen=True, slots=True)
class DuplicateCluster:
    """Connected group of records linked by recommendations at or above a tier."""

    cluster_id: str
    record_keys: tuple[RecordKey, ...]
    tier: ConfidenceTier

    def to_dict(self) -> dict[str, Any]:
        return {
            "cluster_id": self.cluster_id,
            "records": [{"id": record_id, "kind": kind} for kind, record_id in self.record_keys],
            "tier": self.tier.value,
        }


@dataclass(frozen=True, slots=True)
class ResolutionResult:
    recommendations: tuple[MergeRecommendation, ...]
    summary: Summary
    clusters: tuple[DuplicateCluster, ...] = ()

    def to_dict(self) -> dict[str, Any]:
        return {
            "recommendations": [rec.to_dict() for rec in self.recommendations],
            "summary": self.summary.to_dict(),
            "clusters": [cluster.to_dict() for cluster in self.clusters],
        }
