from person_dedupe.steps.aggregate import cluster_recommendations, summarize
from person_dedupe.steps.blocking import BlockingCandidateGenerator
from person_dedupe.steps.corporate import CorporateContactDetector, CorporateIndex
from person_dedupe.steps.matcher import PairMatcher
from person_dedupe.steps.normalize import RecordNormalizer
from person_dedupe.steps.recommend import MergeRecommender
from person_dedupe.steps.scoring import ConfidenceScorer

__all__ = [
    "BlockingCandidateGenerator",
    "ConfidenceScorer",
    "CorporateContactDetector",
    "CorporateIndex",
    "MergeRecommender",
    "PairMatcher",
    "RecordNormalizer",
    "cluster_recommendations",
    "summarize",
]
