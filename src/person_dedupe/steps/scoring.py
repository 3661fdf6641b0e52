from __future__ import annotations

from collections.abc import Sequence

from person_dedupe.models import (
    CandidatePair,
    ConfidenceTier,
    MatchSignal,
    ScoredPair,
    SignalName,
    SignalStrength,
)

EXACT_EMAIL_REASON = "Exact Email Match"
DOMAIN_NAME_REASON = "Domain + Name Match"
PHONE_NAME_REASON = "Phone + Name Match"
PHONE_FUZZY_NAME_REASON = "Phone + Fuzzy Name Match"
NO_SIGNAL_REASON = "No Signal Matched"


class ConfidenceScorer:
    """Priority scorer: the strongest matched signal alone decides the tier.

    Signals do not add up. Guards run in fixed order and the first one that
    applies wins, so an exact email match is always Critical.
    """

    def score(self, pair: CandidatePair, signals: Sequence[MatchSignal]) -> ScoredPair:
        matched = tuple(signal for signal in signals if signal.matched)
        by_name = {signal.name: signal for signal in matched}

        if SignalName.EXACT_EMAIL in by_name:
            tier, reason = ConfidenceTier.CRITICAL, EXACT_EMAIL_REASON
        elif SignalName.DOMAIN_NAME in by_name:
            tier, reason = ConfidenceTier.HIGH, DOMAIN_NAME_REASON
        elif SignalName.PHONE_NAME in by_name:
            if by_name[SignalName.PHONE_NAME].strength == SignalStrength.WEAK:
                tier, reason = ConfidenceTier.MEDIUM, PHONE_FUZZY_NAME_REASON
            else:
                tier, reason = ConfidenceTier.MEDIUM, PHONE_NAME_REASON
        else:
            tier, reason = ConfidenceTier.NONE, NO_SIGNAL_REASON

        return ScoredPair(pair=pair, signals=matched, tier=tier, reason=reason)
