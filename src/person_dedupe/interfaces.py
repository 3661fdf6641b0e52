from __future__ import annotations

from typing import Iterator, Protocol, Sequence

from person_dedupe.models import (
    CandidatePair,
    MatchSignal,
    MergeRecommendation,
    NormalizedRecord,
    PersonRecord,
    ResolutionResult,
    ScoredPair,
)
from person_dedupe.steps.corporate import CorporateIndex


class RecordSource(Protocol):
    """Record-store collaborator: hands over the current Leads and Contacts."""

    def load(self) -> tuple[Sequence[PersonRecord], Sequence[PersonRecord]]:
        ...


class Normalizer(Protocol):
    """Step 1: derive comparison keys from raw records."""

    def normalize(self, record: PersonRecord) -> NormalizedRecord:
        ...


class CandidateGenerator(Protocol):
    """Step 2: block records and yield each candidate pair once."""

    def generate(
        self,
        records: Sequence[NormalizedRecord],
        corporate: CorporateIndex | None = None,
    ) -> Iterator[CandidatePair]:
        ...


class Matcher(Protocol):
    """Step 3: evaluate every signal for one pair."""

    def match(self, pair: CandidatePair) -> list[MatchSignal]:
        ...


class Scorer(Protocol):
    """Step 4: map matched signals to a confidence tier."""

    def score(self, pair: CandidatePair, signals: Sequence[MatchSignal]) -> ScoredPair:
        ...


class Recommender(Protocol):
    """Step 5: turn scored pairs into ranked merge recommendations."""

    def recommend(self, scored_pairs: Sequence[ScoredPair]) -> list[MergeRecommendation]:
        ...


class ResolutionPipeline(Protocol):
    """Unified pipeline interface for local or parallel execution."""

    def run(
        self,
        leads: Sequence[PersonRecord],
        contacts: Sequence[PersonRecord],
    ) -> ResolutionResult:
        ...
