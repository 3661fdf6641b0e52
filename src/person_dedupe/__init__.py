"""Lead/Contact identity resolution: blocking, signal matching and merge recommendations."""

from person_dedupe.config import ResolutionConfig
from person_dedupe.errors import ConfigurationError, PersonDedupeError, RecordSourceError
from person_dedupe.models import (
    ConfidenceTier,
    MergeAction,
    MergeRecommendation,
    PersonRecord,
    ResolutionResult,
    SourceKind,
    Summary,
)
from person_dedupe.runners import LocalResolutionPipeline, ParallelResolutionPipeline, ResolutionEngine

__all__ = [
    "ConfidenceTier",
    "ConfigurationError",
    "LocalResolutionPipeline",
    "MergeAction",
    "MergeRecommendation",
    "ParallelResolutionPipeline",
    "PersonDedupeError",
    "PersonRecord",
    "RecordSourceError",
    "ResolutionConfig",
    "ResolutionEngine",
    "ResolutionResult",
    "SourceKind",
    "Summary",
]
