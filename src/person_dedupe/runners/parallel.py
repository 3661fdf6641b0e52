from __future__ import annotations

from collections.abc import Mapping, Sequence
from concurrent.futures import Executor, ProcessPoolExecutor, ThreadPoolExecutor
from typing import Any, Literal

import structlog

from person_dedupe.config import ResolutionConfig
from person_dedupe.models import ConfidenceTier, PersonRecord, ResolutionResult, ScoredPair
from person_dedupe.runners.local import score_candidates
from person_dedupe.steps.aggregate import cluster_recommendations, summarize
from person_dedupe.steps.blocking import Block, BlockingCandidateGenerator
from person_dedupe.steps.corporate import CorporateContactDetector, CorporateIndex
from person_dedupe.steps.matcher import PairMatcher
from person_dedupe.steps.normalize import RecordNormalizer
from person_dedupe.steps.recommend import MergeRecommender
from person_dedupe.steps.scoring import ConfidenceScorer

logger = structlog.get_logger(__name__)

ExecutorKind = Literal["thread", "process"]


class ParallelResolutionPipeline:
    """Same stages as the local pipeline, spread over a worker pool.

    Normalization is a parallel map. Corporate detection waits for all of it
    (the only barrier) and its frozen index is then shared read-only. Blocks
    are disjoint units of work, scored in batches by the workers. The final
    ordering is applied after the pool is done, so results match the local
    pipeline exactly.

    The "process" executor needs picklable normalizer transforms.
    """

    def __init__(
        self,
        config: ResolutionConfig | Mapping[str, Any] | None = None,
        *,
        max_workers: int = 4,
        executor: ExecutorKind = "thread",
        normalize_chunk_size: int = 1000,
        cluster_min_tier: ConfidenceTier | None = None,
    ) -> None:
        if max_workers < 1:
            raise ValueError("max_workers must be at least 1")
        self._config = ResolutionConfig.coerce(config)
        self._max_workers = max_workers
        self._executor_kind = executor
        self._chunk_size = normalize_chunk_size
        self._normalizer = RecordNormalizer(self._config)
        self._detector = CorporateContactDetector(self._config)
        self._generator = BlockingCandidateGenerator(self._config)
        self._recommender = MergeRecommender()
        self._cluster_min_tier = cluster_min_tier

    def run(
        self,
        leads: Sequence[PersonRecord],
        contacts: Sequence[PersonRecord],
    ) -> ResolutionResult:
        records = [*leads, *contacts]
        logger.info(
            "Parallel resolution run started",
            leads=len(leads),
            contacts=len(contacts),
            workers=self._max_workers,
            executor=self._executor_kind,
        )

        with self._make_executor() as pool:
            normalized = list(pool.map(self._normalizer.normalize, records, chunksize=self._chunk_size))
            corporate = self._detector.detect(normalized)
            blocks = self._generator.build_blocks(normalized, corporate)
            futures = [
                pool.submit(_score_blocks, batch, corporate, self._config)
                for batch in _batches(blocks, self._max_workers * 4)
            ]
            results = [future.result() for future in futures]

        scored = [pair for batch_scored, _ in results for pair in batch_scored]
        candidate_count = sum(count for _, count in results)
        recommendations = self._recommender.recommend(scored)
        summary = summarize(recommendations, normalized, corporate, candidate_count)
        clusters = (
            cluster_recommendations(recommendations, self._cluster_min_tier)
            if self._cluster_min_tier is not None
            else []
        )

        logger.info(
            "Parallel resolution run finished",
            blocks=len(blocks),
            candidates=candidate_count,
            recommendations=len(recommendations),
        )
        return ResolutionResult(
            recommendations=tuple(recommendations),
            summary=summary,
            clusters=tuple(clusters),
        )

    def _make_executor(self) -> Executor:
        if self._executor_kind == "process":
            return ProcessPoolExecutor(max_workers=self._max_workers)
        return ThreadPoolExecutor(max_workers=self._max_workers)


def _score_blocks(
    blocks: Sequence[Block],
    corporate: CorporateIndex,
    config: ResolutionConfig,
) -> tuple[list[ScoredPair], int]:
    generator = BlockingCandidateGenerator(config)
    matcher = PairMatcher(corporate, config)
    pairs = (pair for block in blocks for pair in generator.pairs_in_block(block, corporate))
    return score_candidates(pairs, matcher, ConfidenceScorer())


def _batches(blocks: Sequence[Block], count: int) -> list[list[Block]]:
    batches: list[list[Block]] = [[] for _ in range(max(1, count))]
    for i, block in enumerate(blocks):
        batches[i % len(batches)].append(block)
    return [batch for batch in batches if batch]
