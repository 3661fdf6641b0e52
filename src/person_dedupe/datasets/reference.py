from __future__ import annotations

import random
from dataclasses import replace
from datetime import datetime, timedelta

from person_dedupe.models import PersonRecord, SourceKind

_FIRST_NAMES = [
    "Dominique",
    "Joseph",
    "Alex",
    "Sofia",
    "Maya",
    "Daniel",
    "Emma",
    "Christopher",
    "Olivia",
    "Noah",
]
_NICKNAMES = {
    "Dominique": "Dom",
    "Joseph": "Joe",
    "Alex": "Alexander",
    "Daniel": "Dan",
    "Christopher": "Chris",
}
_LAST_NAMES = [
    "Smith",
    "Johnson",
    "Brown",
    "Taylor",
    "Wilson",
    "Davies",
    "Martin",
    "Thomas",
]
_COMPANIES = {
    "Acme": "acme.com",
    "Globex": "globex.io",
    "Initech": "initech.com",
    "Umbrella": "umbrella.co.uk",
    "Hooli": "hooli.com",
}
_EPOCH = datetime(2024, 1, 1)


class ReferenceDatasetGenerator:
    """Generate synthetic Leads and Contacts (with intentional dupes) for tests and benchmarks.

    Duplicates follow the patterns the engine looks for: a second record with
    the same email, a colleague-style address on the same domain, or the same
    phone written differently. A few switchboard numbers are shared by whole
    teams, and some rows carry placeholder or malformed emails.
    """

    def __init__(self, seed: int = 7) -> None:
        self._rng = random.Random(seed)

    def generate(
        self,
        size: int,
        duplicate_rate: float = 0.15,
        switchboard_teams: int = 2,
    ) -> tuple[list[PersonRecord], list[PersonRecord]]:
        if size <= 0:
            return [], []

        unique_count = int(size * (1.0 - duplicate_rate))
        unique_count = max(1, min(unique_count, size))

        people = [self._person(i) for i in range(unique_count)]
        self._assign_switchboards(people, switchboard_teams)

        records = list(people)
        while len(records) < size:
            source = self._rng.choice(people)
            records.append(self._duplicate(source, len(records)))

        self._rng.shuffle(records)
        leads = [record for record in records if record.source_kind == SourceKind.LEAD]
        contacts = [record for record in records if record.source_kind == SourceKind.CONTACT]
        return leads, contacts

    def _person(self, idx: int) -> PersonRecord:
        first_name = self._rng.choice(_FIRST_NAMES)
        last_name = self._rng.choice(_LAST_NAMES)
        company = self._rng.choice(sorted(_COMPANIES))
        kind = self._rng.choice([SourceKind.LEAD, SourceKind.CONTACT])

        email = f"{first_name[0]}{last_name}{idx % 97}@{_COMPANIES[company]}".lower()
        roll = self._rng.random()
        if roll < 0.02:
            email = f"{first_name}.{last_name}@example.com".lower()
        elif roll < 0.04:
            email = f"{first_name}.{last_name}".lower()

        return PersonRecord(
            record_id=_record_id(kind, idx),
            source_kind=kind,
            first_name=first_name,
            last_name=last_name,
            email=email,
            phone=f"555{idx % 10000000:07d}",
            company=company,
            created_at=_EPOCH + timedelta(days=idx % 365),
        )

    def _assign_switchboards(self, people: list[PersonRecord], teams: int) -> None:
        for team in range(teams):
            switchboard = f"+1 (800) 555-{team:04d}"
            start = team * 6
            for i in range(start, min(start + 6, len(people))):
                people[i] = replace(people[i], phone=switchboard)

    def _duplicate(self, source: PersonRecord, idx: int) -> PersonRecord:
        kind = SourceKind.CONTACT if source.source_kind == SourceKind.LEAD else SourceKind.LEAD
        mutation = self._rng.choice(["email", "domain", "phone", "alias"])
        first_name = source.first_name or ""
        email = source.email
        phone = source.phone

        if mutation == "email":
            first_name = _NICKNAMES.get(first_name, first_name.upper())
        elif mutation == "domain" and email and "@" in email:
            domain = email.split("@", maxsplit=1)[1]
            email = f"{first_name}.{source.last_name}@{domain}".lower()
        elif mutation == "phone":
            email = f"{first_name}{idx}@personal-mail.net".lower()
            phone = _reformat_phone(phone or "")
        elif mutation == "alias" and email and "@" in email:
            local, domain = email.split("@", maxsplit=1)
            email = f"{local}+{self._rng.choice(['crm', 'events', 'vip'])}@{domain}"

        return PersonRecord(
            record_id=_record_id(kind, idx),
            source_kind=kind,
            first_name=first_name,
            last_name=source.last_name,
            email=email,
            phone=phone,
            company=source.company,
            created_at=_EPOCH + timedelta(days=idx % 365),
        )


def _record_id(kind: SourceKind, idx: int) -> str:
    prefix = "00Q" if kind == SourceKind.LEAD else "003"
    return f"{prefix}{idx:07d}"


def _reformat_phone(phone: str) -> str:
    digits = "".join(ch for ch in phone if ch.isdigit())
    if len(digits) != 10:
        return phone
    return f"({digits[:3]}) {digits[3:6]}-{digits[6:]}"
