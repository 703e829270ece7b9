from datetime import datetime
from typing import Literal

from pydantic import BaseModel, ConfigDict, Field

Verdict = Literal["fake", "verified", "uncertain"]
ManipulationLevel = Literal["low", "medium", "high"]
SourceReputation = Literal["trusted", "satire", "unreliable", "mixed", "unknown"]
OverallReputation = Literal["trusted", "mixed", "untrusted", "unknown"]


class _Record(BaseModel):
    model_config = ConfigDict(frozen=True)


class LexiconResult(_Record):
    score: int = Field(..., ge=0, le=100)
    reasons: tuple[str, ...] = ()


class EmotionalTrigger(_Record):
    category: str
    words: tuple[str, ...] = ()
    intensity: int = Field(..., ge=0, le=100)


class EmotionalAnalysisResult(_Record):
    score: int = Field(..., ge=0, le=100)
    triggers: tuple[EmotionalTrigger, ...] = ()
    dominant_emotion: str | None = None
    manipulation_level: ManipulationLevel = "low"


class SourceInfo(_Record):
    domain: str
    reputation: SourceReputation
    category: str | None = None


class SourceCredibilityResult(_Record):
    score: int = Field(..., ge=0, le=100)
    found_sources: tuple[SourceInfo, ...] = ()
    overall_reputation: OverallReputation = "unknown"
    factors: tuple[str, ...] = ()


class FactCheckClaim(_Record):
    text: str = ""
    claimant: str | None = None
    claim_date: str | None = None
    rating: str = "Unknown"
    rating_value: int | None = Field(default=None, ge=0, le=100)
    url: str = ""
    publisher: str = "Unknown"
    review_date: str | None = None


class FactCheckResult(_Record):
    available: bool
    claims: tuple[FactCheckClaim, ...] = ()
    error: str | None = None


class AnalysisResult(_Record):
    id: str
    text: str
    verdict: Verdict
    confidence: int = Field(..., ge=0, le=100)
    score: float = Field(..., ge=0.0, le=100.0)
    reasons: tuple[str, ...] = ()
    timestamp: datetime
    heuristic: LexiconResult | None = None
    emotional_analysis: EmotionalAnalysisResult | None = None
    source_credibility: SourceCredibilityResult | None = None
    fact_check_results: FactCheckResult | None = None
