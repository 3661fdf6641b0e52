from __future__ import annotations

from collections.abc import Sequence
from datetime import datetime

from person_dedupe.models import (
    ConfidenceTier,
    MergeAction,
    MergeRecommendation,
    NormalizedRecord,
    ScoredPair,
    SourceKind,
)

TIER_ACTIONS: dict[ConfidenceTier, MergeAction] = {
    ConfidenceTier.CRITICAL: MergeAction.AUTO_MERGE_CANDIDATE,
    ConfidenceTier.HIGH: MergeAction.MANUAL_REVIEW_PRIORITY,
    ConfidenceTier.MEDIUM: MergeAction.INVESTIGATION_QUEUE,
    ConfidenceTier.LOW: MergeAction.IGNORE,
    ConfidenceTier.NONE: MergeAction.IGNORE,
}

_SOURCE_PRECEDENCE = {SourceKind.CONTACT: 0, SourceKind.LEAD: 1}


class MergeRecommender:
    """Maps scored pairs to ranked, advisory merge actions.

    Ranking is by tier severity, then by pair key, so identical input always
    gives identical output.
    """

    def recommend(self, scored_pairs: Sequence[ScoredPair]) -> list[MergeRecommendation]:
        ordered = sorted(scored_pairs, key=lambda scored: (scored.tier.rank, scored.pair.key))
        recommendations: list[MergeRecommendation] = []
        for scored in ordered:
            action = TIER_ACTIONS[scored.tier]
            survivor, retired = choose_survivor(scored.pair.left, scored.pair.right)
            recommendations.append(
                MergeRecommendation(
                    scored=scored,
                    action=action,
                    survivor_key=survivor.key,
                    retired_key=retired.key,
                    rank=len(recommendations) + 1,
                )
            )
        return recommendations


def choose_survivor(
    a: NormalizedRecord,
    b: NormalizedRecord,
) -> tuple[NormalizedRecord, NormalizedRecord]:
    """Contact beats Lead, then the latest creation time, then the lower id."""
    survivor = min((a, b), key=_survivor_order)
    retired = b if survivor is a else a
    return survivor, retired


def _survivor_order(record: NormalizedRecord) -> tuple[int, int, float, str]:
    created = record.created_at
    missing = 1 if created is None else 0
    newest_first = -_epoch(created) if created is not None else 0.0
    return (_SOURCE_PRECEDENCE[record.source_kind], missing, newest_first, record.source_id)


def _epoch(value: datetime) -> float:
    # created_at is naive UTC after normalization
    return (value - datetime(1970, 1, 1)).total_seconds()
