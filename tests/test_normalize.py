from datetime import datetime, timedelta, timezone

import pytest

from person_dedupe.config import ResolutionConfig
from person_dedupe.steps.normalize import (
    EMAIL_ALIAS,
    MALFORMED_EMAIL,
    MALFORMED_PHONE,
    NO_CONTACT_POINT,
    TEST_EMAIL,
    RecordNormalizer,
    name_key,
    phone_digits,
)


def test_normalize_builds_comparison_keys(lead, normalize) -> None:
    record = lead(
        "L1",
        first_name="  Joseph ",
        last_name="Smith",
        email="  JSmith@Acme.COM ",
        phone="+1 (555) 123-4567",
    )

    normalized = normalize(record)

    assert normalized.source_id == "L1"
    assert normalized.first_name_key == "JOS"
    assert normalized.first_name_full == "JOSEPH"
    assert normalized.last_name_key == "SMITH"
    assert normalized.email_normalized == "jsmith@acme.com"
    assert normalized.email_domain == "acme.com"
    assert normalized.email_is_alias is False
    assert normalized.phone_digits == "15551234567"
    assert normalized.notes == ()


def test_normalize_leaves_source_record_untouched(lead, normalize) -> None:
    record = lead("L1", first_name="Joe", email="JOE@ACME.COM")
    normalize(record)
    assert record.email == "JOE@ACME.COM"
    assert record.first_name == "Joe"


@pytest.mark.parametrize(
    "email",
    ["not-an-email", "two@@acme.com", "a@b@acme.com", "joe@localhost", ""],
)
def test_malformed_email_is_absent_not_an_error(lead, normalize, email: str) -> None:
    normalized = normalize(lead("L1", email=email, phone="5551234567"))

    assert normalized.email_normalized == ""
    assert normalized.email_domain == ""
    if email:
        assert MALFORMED_EMAIL in normalized.notes


@pytest.mark.parametrize("email", ["a@test.example.com", "joe@example.org", "JOE@Example.com"])
def test_placeholder_email_is_absent(lead, normalize, email: str) -> None:
    normalized = normalize(lead("L1", email=email))

    assert normalized.email_normalized == ""
    assert TEST_EMAIL in normalized.notes
    assert NO_CONTACT_POINT in normalized.notes


def test_alias_email_is_absent_and_flagged(lead, normalize) -> None:
    normalized = normalize(lead("L1", email="joe+crm@acme.com"))

    assert normalized.email_normalized == ""
    assert normalized.email_domain == ""
    assert normalized.email_is_alias is True
    assert EMAIL_ALIAS in normalized.notes


def test_alias_note_only_when_alias_exclusion_enabled(lead) -> None:
    normalizer = RecordNormalizer(ResolutionConfig(exclude_email_aliases=False))
    normalized = normalizer.normalize(lead("L1", email="joe+crm@acme.com"))

    assert normalized.email_is_alias is True
    assert normalized.email_normalized == "joe+crm@acme.com"
    assert EMAIL_ALIAS not in normalized.notes


def test_phone_without_digits_is_absent(lead, normalize) -> None:
    normalized = normalize(lead("L1", phone="n/a", email="joe@acme.com"))

    assert normalized.phone_digits == ""
    assert MALFORMED_PHONE in normalized.notes


def test_record_without_any_field_normalizes(lead, normalize) -> None:
    normalized = normalize(lead("L1"))

    assert normalized.first_name_key == ""
    assert normalized.last_name_key == ""
    assert not normalized.has_contact_point
    assert normalized.notes == (NO_CONTACT_POINT,)


@pytest.mark.parametrize(
    ("name", "length", "expected"),
    [
        ("Joseph", 3, "JOS"),
        ("Joe", 3, "JOE"),
        ("Jo", 3, "JO"),
        ("joe", 3, "JOE"),
        ("Christopher", 5, "CHRIS"),
        ("", 3, ""),
    ],
)
def test_name_key_prefix(name: str, length: int, expected: str) -> None:
    assert name_key(name, length) == expected


def test_prefix_length_is_configurable(lead) -> None:
    normalizer = RecordNormalizer(ResolutionConfig(name_prefix_length=1))
    assert normalizer.normalize(lead("L1", first_name="Joseph")).first_name_key == "J"


def test_phone_digits_strips_formatting() -> None:
    assert phone_digits("(555) 123-4567 ext. 9") == "55512345679"


def test_field_transforms_run_before_rules(lead) -> None:
    normalizer = RecordNormalizer(transforms={"phone": lambda value: value.removeprefix("+44")})
    assert normalizer.normalize(lead("L1", phone="+44 20 7946 0000")).phone_digits == "2079460000"


def test_aware_timestamps_become_naive_utc(lead, normalize) -> None:
    created = datetime(2024, 3, 1, 12, 0, tzinfo=timezone(timedelta(hours=2)))
    normalized = normalize(lead("L1", created_at=created))
    assert normalized.created_at == datetime(2024, 3, 1, 10, 0)
