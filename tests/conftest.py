from __future__ import annotations

from collections.abc import Callable

import pytest

from person_dedupe.config import ResolutionConfig
from person_dedupe.log import configure_logging
from person_dedupe.models import NormalizedRecord, PersonRecord, SourceKind
from person_dedupe.steps.normalize import RecordNormalizer


def make_lead(record_id: str, **fields: object) -> PersonRecord:
    return PersonRecord(record_id=record_id, source_kind=SourceKind.LEAD, **fields)


def make_contact(record_id: str, **fields: object) -> PersonRecord:
    return PersonRecord(record_id=record_id, source_kind=SourceKind.CONTACT, **fields)


@pytest.fixture
def config() -> ResolutionConfig:
    return ResolutionConfig()


@pytest.fixture
def normalize(config: ResolutionConfig) -> Callable[[PersonRecord], NormalizedRecord]:
    return RecordNormalizer(config).normalize


@pytest.fixture
def lead() -> Callable[..., PersonRecord]:
    return make_lead


@pytest.fixture
def contact() -> Callable[..., PersonRecord]:
    return make_contact


@pytest.fixture(autouse=True)
def quiet_logging() -> None:
    configure_logging(level="WARNING", fmt="text")
