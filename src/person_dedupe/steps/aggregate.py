from __future__ import annotations

from collections import Counter, defaultdict
from collections.abc import Sequence

from person_dedupe.models import (
    ConfidenceTier,
    DuplicateCluster,
    MergeAction,
    MergeRecommendation,
    NormalizedRecord,
    RecordKey,
    Summary,
)
from person_dedupe.steps.corporate import CorporateIndex


def summarize(
    recommendations: Sequence[MergeRecommendation],
    normalized: Sequence[NormalizedRecord] = (),
    corporate: CorporateIndex | None = None,
    candidate_count: int = 0,
) -> Summary:
    """Count recommendations by tier, reason and action.

    With the normalized population it also reports why records dropped out
    of matching (malformed email, test address, no contact point, ...).
    """
    by_tier = {tier.value: 0 for tier in ConfidenceTier}
    by_action = {action.value: 0 for action in MergeAction}
    by_reason: Counter[str] = Counter()
    for rec in recommendations:
        by_tier[rec.tier.value] += 1
        by_action[rec.action.value] += 1
        by_reason[rec.reason] += 1

    excluded: Counter[str] = Counter(note for record in normalized for note in record.notes)

    return Summary(
        record_count=len(normalized),
        candidate_count=candidate_count,
        recommendation_count=len(recommendations),
        by_tier=by_tier,
        by_reason=dict(sorted(by_reason.items())),
        by_action=by_action,
        excluded_records=dict(sorted(excluded.items())),
        corporate_phones=corporate.corporate_phone_count if corporate else 0,
        corporate_emails=corporate.corporate_email_count if corporate else 0,
    )


def cluster_recommendations(
    recommendations: Sequence[MergeRecommendation],
    min_tier: ConfidenceTier = ConfidenceTier.HIGH,
) -> list[DuplicateCluster]:
    """Group records connected by recommendations at or above ``min_tier``.

    Pairs stay independent unless a caller asks for this: A-B and B-C do not
    say anything direct about A-C. A cluster's tier is its weakest link.
    """
    uf = _UnionFind()
    weakest: dict[RecordKey, ConfidenceTier] = {}
    linked = [rec for rec in recommendations if rec.tier.rank <= min_tier.rank]

    for rec in linked:
        left, right = rec.scored.pair.key
        uf.union(left, right)

    for rec in linked:
        root = uf.find(rec.scored.pair.key[0])
        current = weakest.get(root)
        if current is None or rec.tier.rank > current.rank:
            weakest[root] = rec.tier

    clusters: list[DuplicateCluster] = []
    for root, members in uf.groups().items():
        if len(members) < 2:
            continue
        ordered = tuple(sorted(members))
        clusters.append(
            DuplicateCluster(
                cluster_id=f"cluster_{ordered[0][0]}_{ordered[0][1]}",
                record_keys=ordered,
                tier=weakest[root],
            )
        )
    return sorted(clusters, key=lambda c: c.record_keys[0])


class _UnionFind:
    def __init__(self) -> None:
        self._parent: dict[RecordKey, RecordKey] = {}

    def find(self, item: RecordKey) -> RecordKey:
        if item not in self._parent:
            self._parent[item] = item
            return item
        if self._parent[item] != item:
            self._parent[item] = self.find(self._parent[item])
        return self._parent[item]

    def union(self, left: RecordKey, right: RecordKey) -> None:
        root_left = self.find(left)
        root_right = self.find(right)
        if root_left != root_right:
            self._parent[root_right] = root_left

    def groups(self) -> dict[RecordKey, list[RecordKey]]:
        grouped: dict[RecordKey, list[RecordKey]] = defaultdict(list)
        for item in list(self._parent):
            grouped[self.find(item)].append(item)
        return grouped
