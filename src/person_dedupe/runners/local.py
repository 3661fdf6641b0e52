from __future__ import annotations

from collections.abc import Iterable, Mapping, Sequence
from typing import Any

import structlog

from person_dedupe.config import ResolutionConfig
from person_dedupe.interfaces import CandidateGenerator, Matcher, Normalizer, Recommender, Scorer
from person_dedupe.models import (
    CandidatePair,
    ConfidenceTier,
    PersonRecord,
    ResolutionResult,
    ScoredPair,
)
from person_dedupe.steps.aggregate import cluster_recommendations, summarize
from person_dedupe.steps.blocking import BlockingCandidateGenerator
from person_dedupe.steps.corporate import CorporateContactDetector
from person_dedupe.steps.matcher import PairMatcher
from person_dedupe.steps.normalize import RecordNormalizer
from person_dedupe.steps.recommend import MergeRecommender
from person_dedupe.steps.scoring import ConfidenceScorer

logger = structlog.get_logger(__name__)


class LocalResolutionPipeline:
    """Single-process engine: normalize, detect, block, match, score, recommend.

    Configuration is validated here, before any record is seen. Each ``run``
    is a pure function of its inputs; nothing is kept between runs.
    """

    def __init__(
        self,
        config: ResolutionConfig | Mapping[str, Any] | None = None,
        *,
        normalizer: Normalizer | None = None,
        candidate_generator: CandidateGenerator | None = None,
        scorer: Scorer | None = None,
        recommender: Recommender | None = None,
        cluster_min_tier: ConfidenceTier | None = None,
    ) -> None:
        self._config = ResolutionConfig.coerce(config)
        self._normalizer = normalizer or RecordNormalizer(self._config)
        self._detector = CorporateContactDetector(self._config)
        self._generator = candidate_generator or BlockingCandidateGenerator(self._config)
        self._scorer = scorer or ConfidenceScorer()
        self._recommender = recommender or MergeRecommender()
        self._cluster_min_tier = cluster_min_tier

    @property
    def config(self) -> ResolutionConfig:
        return self._config

    def run(
        self,
        leads: Sequence[PersonRecord],
        contacts: Sequence[PersonRecord],
    ) -> ResolutionResult:
        records = [*leads, *contacts]
        logger.info("Resolution run started", leads=len(leads), contacts=len(contacts))

        normalized = [self._normalizer.normalize(record) for record in records]
        corporate = self._detector.detect(normalized)
        matcher = PairMatcher(corporate, self._config)

        scored, candidate_count = score_candidates(
            self._generator.generate(normalized, corporate), matcher, self._scorer
        )
        recommendations = self._recommender.recommend(scored)
        summary = summarize(recommendations, normalized, corporate, candidate_count)
        clusters = (
            cluster_recommendations(recommendations, self._cluster_min_tier)
            if self._cluster_min_tier is not None
            else []
        )

        logger.info(
            "Resolution run finished",
            candidates=candidate_count,
            recommendations=len(recommendations),
            corporate_phones=summary.corporate_phones,
        )
        return ResolutionResult(
            recommendations=tuple(recommendations),
            summary=summary,
            clusters=tuple(clusters),
        )


ResolutionEngine = LocalResolutionPipeline


def score_candidates(
    pairs: Iterable[CandidatePair],
    matcher: Matcher,
    scorer: Scorer,
) -> tuple[list[ScoredPair], int]:
    """Score each pair and drop the ones no signal supports."""
    scored: list[ScoredPair] = []
    candidate_count = 0
    for pair in pairs:
        candidate_count += 1
        result = scorer.score(pair, matcher.match(pair))
        if result.tier == ConfidenceTier.NONE:
            logger.debug("Candidate without matching signal", pair=pair.key)
            continue
        scored.append(result)
    return scored, candidate_count
