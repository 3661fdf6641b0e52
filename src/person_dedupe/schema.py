from __future__ import annotations

from dataclasses import dataclass
from datetime import datetime
from enum import StrEnum
from typing import Mapping, Sequence

from person_dedupe.models import PersonRecord, SourceKind


class FieldTag(StrEnum):
    RECORD_ID = "RECORD_ID"
    FIRST_NAME = "FIRST_NAME"
    LAST_NAME = "LAST_NAME"
    EMAIL = "EMAIL"
    PHONE = "PHONE"
    COMPANY = "COMPANY"
    CREATED_AT = "CREATED_AT"


@dataclass(frozen=True)
class RecordSchema:
    """Maps source-system columns to stable semantic tags."""

    tag_to_columns: Mapping[FieldTag, tuple[str, ...]]

    @classmethod
    def from_mapping(cls, mapping: Mapping[FieldTag, Sequence[str]]) -> "RecordSchema":
        frozen = {tag: tuple(columns) for tag, columns in mapping.items()}
        return cls(tag_to_columns=frozen)

    def columns_for(self, tag: FieldTag) -> tuple[str, ...]:
        return self.tag_to_columns.get(tag, ())

    def values_for(self, attributes: Mapping[str, object], tag: FieldTag) -> list[str]:
        values: list[str] = []
        for column in self.columns_for(tag):
            value = attributes.get(column)
            if value is None:
                continue
            text = str(value).strip()
            if text:
                values.append(text)
        return values

    def first_value(self, attributes: Mapping[str, object], tag: FieldTag) -> str | None:
        """First non-blank value among the tag's columns, in column order."""
        values = self.values_for(attributes, tag)
        return values[0] if values else None

    def to_person(self, attributes: Mapping[str, object], source_kind: SourceKind) -> PersonRecord | None:
        record_id = self.first_value(attributes, FieldTag.RECORD_ID)
        if record_id is None:
            return None
        return PersonRecord(
            record_id=record_id,
            source_kind=source_kind,
            first_name=self.first_value(attributes, FieldTag.FIRST_NAME),
            last_name=self.first_value(attributes, FieldTag.LAST_NAME),
            email=self.first_value(attributes, FieldTag.EMAIL),
            phone=self.first_value(attributes, FieldTag.PHONE),
            company=self.first_value(attributes, FieldTag.COMPANY),
            created_at=_parse_timestamp(self.first_value(attributes, FieldTag.CREATED_AT)),
        )


def _parse_timestamp(value: str | None) -> datetime | None:
    if not value:
        return None
    try:
        return datetime.fromisoformat(value.replace("Z", "+00:00"))
    except ValueError:
        return None

