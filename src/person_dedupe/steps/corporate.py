from __future__ import annotations

from collections import defaultdict
from collections.abc import Callable, Mapping, Sequence
from dataclasses import dataclass, field
from types import MappingProxyType

import structlog

from person_dedupe.config import ResolutionConfig
from person_dedupe.models import CorporateFlag, NormalizedRecord, RecordKey

logger = structlog.get_logger(__name__)


@dataclass(frozen=True)
class CorporateIndex:
    """Frozen lookup of shared contact points, built once per run."""

    phones: Mapping[str, CorporateFlag] = field(default_factory=dict)
    emails: Mapping[str, CorporateFlag] = field(default_factory=dict)

    def __post_init__(self) -> None:
        object.__setattr__(self, "phones", MappingProxyType(dict(self.phones)))
        object.__setattr__(self, "emails", MappingProxyType(dict(self.emails)))

    def __reduce__(self):
        # mappingproxy does not pickle; process pools get plain dicts back.
        return (CorporateIndex, (dict(self.phones), dict(self.emails)))

    def is_corporate_phone(self, digits: str) -> bool:
        flag = self.phones.get(digits)
        return flag is not None and flag.is_corporate

    def is_corporate_email(self, email: str) -> bool:
        flag = self.emails.get(email)
        return flag is not None and flag.is_corporate

    @property
    def corporate_phone_count(self) -> int:
        return sum(1 for flag in self.phones.values() if flag.is_corporate)

    @property
    def corporate_email_count(self) -> int:
        return sum(1 for flag in self.emails.values() if flag.is_corporate)


class CorporateContactDetector:
    """Flags phone numbers (and optionally emails) shared by many distinct people.

    A switchboard or department line is not a personal identifier, so a phone
    match on one of these must not count as evidence. Detection needs the
    whole population: run it to completion before matching starts.
    """

    def __init__(self, config: ResolutionConfig | None = None) -> None:
        self._config = config or ResolutionConfig()

    def detect(self, records: Sequence[NormalizedRecord]) -> CorporateIndex:
        phones = _flag_shared(
            records,
            value_of=lambda record: record.phone_digits,
            threshold=self._config.corporate_phone_threshold,
        )
        emails: Mapping[str, CorporateFlag] = {}
        if self._config.flag_corporate_emails:
            emails = _flag_shared(
                records,
                value_of=lambda record: record.email_normalized,
                threshold=self._config.corporate_email_threshold,
            )

        index = CorporateIndex(phones=phones, emails=emails)
        logger.debug(
            "Corporate contact points detected",
            phones_seen=len(phones),
            corporate_phones=index.corporate_phone_count,
            corporate_emails=index.corporate_email_count,
        )
        return index


def _flag_shared(
    records: Sequence[NormalizedRecord],
    value_of: Callable[[NormalizedRecord], str],
    threshold: int,
) -> Mapping[str, CorporateFlag]:
    people: dict[str, set[RecordKey]] = defaultdict(set)
    for record in records:
        value = value_of(record)
        if value:
            people[value].add(record.key)

    flags = {
        value: CorporateFlag(
            value=value,
            distinct_person_count=len(keys),
            is_corporate=len(keys) >= threshold,
        )
        for value, keys in people.items()
    }
    return flags
