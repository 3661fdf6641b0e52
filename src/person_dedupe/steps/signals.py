"""Independent match signals, one per comparison dimension.

Each extractor looks at a single candidate pair and returns a MatchSignal,
matched or not. Every comparison is symmetric in the two records.

Name rules are asymmetric on purpose: last names must be equal in full,
first names only on their configured prefix (nicknames, initials).
"""

from __future__ import annotations

from collections.abc import Callable

from person_dedupe.config import ResolutionConfig
from person_dedupe.models import (
    CandidatePair,
    MatchSignal,
    NormalizedRecord,
    SignalName,
    SignalStrength,
)
from person_dedupe.steps.corporate import CorporateIndex

SignalExtractor = Callable[[CandidatePair, CorporateIndex, ResolutionConfig], MatchSignal]


def exact_email(pair: CandidatePair, corporate: CorporateIndex, config: ResolutionConfig) -> MatchSignal:
    email = pair.left.email_normalized
    matched = bool(email) and email == pair.right.email_normalized
    if matched and corporate.is_corporate_email(email):
        matched = False
    return MatchSignal(SignalName.EXACT_EMAIL, matched, SignalStrength.EXACT)


def domain_name(pair: CandidatePair, corporate: CorporateIndex, config: ResolutionConfig) -> MatchSignal:
    left, right = pair.left, pair.right
    matched = (
        bool(left.email_domain)
        and left.email_domain == right.email_domain
        and names_match(left, right)
    )
    return MatchSignal(SignalName.DOMAIN_NAME, matched, SignalStrength.STRONG)


def phone_name(pair: CandidatePair, corporate: CorporateIndex, config: ResolutionConfig) -> MatchSignal:
    left, right = pair.left, pair.right
    matched = (
        bool(left.phone_digits)
        and left.phone_digits == right.phone_digits
        and not corporate.is_corporate_phone(left.phone_digits)
        and names_match(left, right)
    )
    strength = SignalStrength.STRONG
    if matched and left.first_name_full != right.first_name_full:
        strength = SignalStrength.WEAK
    return MatchSignal(SignalName.PHONE_NAME, matched, strength)


def names_match(left: NormalizedRecord, right: NormalizedRecord) -> bool:
    """Full last-name equality plus first-name prefix equality; blanks never match."""
    return (
        bool(left.last_name_key)
        and bool(left.first_name_key)
        and left.last_name_key == right.last_name_key
        and left.first_name_key == right.first_name_key
    )


SIGNAL_EXTRACTORS: tuple[SignalExtractor, ...] = (exact_email, domain_name, phone_name)
