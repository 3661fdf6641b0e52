from __future__ import annotations

import csv
from collections.abc import Sequence
from pathlib import Path

import structlog

from person_dedupe.datasets.profiles import CRM_COLUMNS, CRM_SCHEMA
from person_dedupe.errors import RecordSourceError
from person_dedupe.models import PersonRecord, SourceKind
from person_dedupe.schema import FieldTag, RecordSchema

logger = structlog.get_logger(__name__)


class CsvRecordSource:
    """Reads one Lead export and one Contact export from CSV files."""

    def __init__(self, leads_path: Path, contacts_path: Path, schema: RecordSchema = CRM_SCHEMA) -> None:
        self.leads_path = leads_path
        self.contacts_path = contacts_path
        self._schema = schema

    def load(self) -> tuple[Sequence[PersonRecord], Sequence[PersonRecord]]:
        leads = read_records_csv(self.leads_path, SourceKind.LEAD, self._schema)
        contacts = read_records_csv(self.contacts_path, SourceKind.CONTACT, self._schema)
        return leads, contacts


def read_records_csv(path: Path, source_kind: SourceKind, schema: RecordSchema = CRM_SCHEMA) -> list[PersonRecord]:
    records: list[PersonRecord] = []
    skipped = 0
    with path.open("r", newline="", encoding="utf-8") as handle:
        reader = csv.DictReader(handle)
        id_columns = schema.columns_for(FieldTag.RECORD_ID)
        if not any(column in (reader.fieldnames or ()) for column in id_columns):
            raise RecordSourceError(f"{path}: no id column, expected one of {', '.join(id_columns)}")
        for row in reader:
            record = schema.to_person(row, source_kind)
            if record is None:
                skipped += 1
                continue
            records.append(record)

    if skipped:
        logger.warning("Rows without id skipped", path=str(path), skipped=skipped)
    return records


def write_records_csv(path: Path, records: Sequence[PersonRecord]) -> None:
    with path.open("w", newline="", encoding="utf-8") as handle:
        writer = csv.DictWriter(handle, fieldnames=CRM_COLUMNS)
        writer.writeheader()
        for record in records:
            writer.writerow(
                {
                    "Id": record.record_id,
                    "FirstName": record.first_name or "",
                    "LastName": record.last_name or "",
                    "Email": record.email or "",
                    "Phone": record.phone or "",
                    "Company": record.company or "",
                    "CreatedDate": record.created_at.isoformat() if record.created_at else "",
                }
            )
