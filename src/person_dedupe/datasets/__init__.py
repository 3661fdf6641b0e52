from person_dedupe.datasets.profiles import CRM_COLUMNS, CRM_SCHEMA
from person_dedupe.datasets.reference import ReferenceDatasetGenerator

__all__ = ["CRM_COLUMNS", "CRM_SCHEMA", "ReferenceDatasetGenerator"]
