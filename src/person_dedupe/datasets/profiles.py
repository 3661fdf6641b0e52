from __future__ import annotations

from person_dedupe.schema import FieldTag, RecordSchema

# Column layout shared by the CRM Lead and Contact exports.
CRM_COLUMNS = [
    "Id",
    "FirstName",
    "LastName",
    "Email",
    "Phone",
    "Company",
    "CreatedDate",
]


CRM_SCHEMA = RecordSchema.from_mapping(
    {
        FieldTag.RECORD_ID: ["Id", "RECORD_ID"],
        FieldTag.FIRST_NAME: ["FirstName", "FIRST_NAME"],
        FieldTag.LAST_NAME: ["LastName", "LAST_NAME"],
        FieldTag.EMAIL: ["Email", "EMAIL"],
        FieldTag.PHONE: ["Phone", "MobilePhone", "PHONE"],
        FieldTag.COMPANY: ["Company", "AccountName", "COMPANY"],
        FieldTag.CREATED_AT: ["CreatedDate", "CREATED_AT"],
    }
)
