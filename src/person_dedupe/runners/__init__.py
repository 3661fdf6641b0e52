from person_dedupe.runners.local import LocalResolutionPipeline, ResolutionEngine
from person_dedupe.runners.parallel import ParallelResolutionPipeline

__all__ = ["LocalResolutionPipeline", "ParallelResolutionPipeline", "ResolutionEngine"]
