from __future__ import annotations


class PersonDedupeError(Exception):
    """Base class for errors raised by this package."""


class ConfigurationError(PersonDedupeError, ValueError):
    """Invalid engine configuration. Raised before any record is processed."""


class RecordSourceError(PersonDedupeError):
    """A record source could not be turned into PersonRecords."""
