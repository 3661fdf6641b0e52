from __future__ import annotations

from collections.abc import Sequence

from person_dedupe.config import ResolutionConfig
from person_dedupe.models import CandidatePair, MatchSignal
from person_dedupe.steps.corporate import CorporateIndex
from person_dedupe.steps.signals import SIGNAL_EXTRACTORS, SignalExtractor


class PairMatcher:
    """Runs every signal extractor over a pair, without short-circuiting.

    The corporate index must be complete before the matcher is built; it is
    only read here, so one matcher can serve many threads.
    """

    def __init__(
        self,
        corporate: CorporateIndex,
        config: ResolutionConfig | None = None,
        extractors: Sequence[SignalExtractor] = SIGNAL_EXTRACTORS,
    ) -> None:
        self._corporate = corporate
        self._config = config or ResolutionConfig()
        self._extractors = tuple(extractors)

    def match(self, pair: CandidatePair) -> list[MatchSignal]:
        return [extract(pair, self._corporate, self._config) for extract in self._extractors]
