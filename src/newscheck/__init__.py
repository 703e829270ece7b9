from .detector import NewsDetector, build_detector, has_usable_fact_check
from .emotional import EmotionalAnalyzer
from .fact_check import FactCheckClient, score_claims
from .heuristics import HeuristicScorer
from .history import HistoryStore
from .models import (
    AnalysisResult,
    EmotionalAnalysisResult,
    FactCheckClaim,
    FactCheckResult,
    SourceCredibilityResult,
)
from .source_credibility import SourceCredibilityAnalyzer

__all__ = [
    "AnalysisResult",
    "EmotionalAnalysisResult",
    "EmotionalAnalyzer",
    "FactCheckClaim",
    "FactCheckClient",
    "FactCheckResult",
    "HeuristicScorer",
    "HistoryStore",
    "NewsDetector",
    "SourceCredibilityAnalyzer",
    "SourceCredibilityResult",
    "build_detector",
    "has_usable_fact_check",
    "score_claims",
]
