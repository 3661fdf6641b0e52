from __future__ import annotations

import re
from collections.abc import Callable, Sequence
from datetime import datetime, timezone

from person_dedupe.config import ResolutionConfig
from person_dedupe.models import NormalizedRecord, PersonRecord

MALFORMED_EMAIL = "Malformed Email"
TEST_EMAIL = "Test/Placeholder Email"
EMAIL_ALIAS = "Email Alias"
MALFORMED_PHONE = "Malformed Phone"
NO_CONTACT_POINT = "No Email Or Phone"

_NON_DIGITS = re.compile(r"\D")

FieldTransform = Callable[[str], str]


class RecordNormalizer:
    """Canonicalizes raw person fields into comparison keys.

    ``transforms`` optionally pre-processes raw field values (keyed by
    PersonRecord attribute name) before the standard rules run, e.g. to strip
    a country prefix from phone numbers.
    """

    def __init__(
        self,
        config: ResolutionConfig | None = None,
        transforms: dict[str, FieldTransform] | None = None,
    ) -> None:
        self._config = config or ResolutionConfig()
        self._transforms = transforms or {}

    def normalize(self, record: PersonRecord) -> NormalizedRecord:
        notes: list[str] = []

        first = self._field(record, "first_name")
        last = self._field(record, "last_name")
        email, domain, is_alias = self._email(self._field(record, "email"), notes)
        phone = self._phone(self._field(record, "phone"), notes)
        if not email and not phone:
            notes.append(NO_CONTACT_POINT)

        return NormalizedRecord(
            source_id=record.record_id,
            source_kind=record.source_kind,
            first_name_key=name_key(first, self._config.name_prefix_length),
            first_name_full=first.upper(),
            last_name_key=last.upper(),
            email_normalized=email,
            email_domain=domain,
            email_is_alias=is_alias,
            phone_digits=phone,
            created_at=_as_utc(record.created_at),
            notes=tuple(notes),
        )

    def normalize_all(self, records: Sequence[PersonRecord]) -> list[NormalizedRecord]:
        return [self.normalize(record) for record in records]

    def _field(self, record: PersonRecord, name: str) -> str:
        value = getattr(record, name)
        if value is None:
            return ""
        text = str(value)
        transform = self._transforms.get(name)
        if transform is not None:
            text = transform(text)
        return text.strip()

    def _email(self, raw: str, notes: list[str]) -> tuple[str, str, bool]:
        if not raw:
            return "", "", False
        email = raw.lower()
        if not is_valid_email(email):
            notes.append(MALFORMED_EMAIL)
            return "", "", False
        if any(pattern in email for pattern in self._config.test_email_patterns):
            notes.append(TEST_EMAIL)
            return "", "", False

        local, domain = email.split("@")
        is_alias = "+" in local
        if is_alias and self._config.exclude_email_aliases:
            notes.append(EMAIL_ALIAS)
            return "", "", True
        return email, domain, is_alias

    def _phone(self, raw: str, notes: list[str]) -> str:
        if not raw:
            return ""
        digits = phone_digits(raw)
        if not digits:
            notes.append(MALFORMED_PHONE)
        return digits


def name_key(name: str, prefix_length: int) -> str:
    """Upper-cased prefix; names shorter than the prefix are used whole."""
    return name.strip()[:prefix_length].upper()


def phone_digits(phone: str) -> str:
    return _NON_DIGITS.sub("", phone)


def is_valid_email(email: str) -> bool:
    if email.count("@") != 1:
        return False
    return "." in email.split("@")[1]


def _as_utc(value: datetime | None) -> datetime | None:
    # Naive timestamps are taken as UTC so survivor ordering never depends on the host clock.
    if value is None or value.tzinfo is None:
        return value
    return value.astimezone(timezone.utc).replace(tzinfo=None)
