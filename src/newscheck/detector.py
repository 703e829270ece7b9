from __future__ import annotations

import asyncio
import logging
import random
import uuid
from dataclasses import dataclass, field
from datetime import datetime, timezone
from typing import Callable, Protocol

from .config import Settings, get_settings
from .data_loader import load_lexicons
from .emotional import EmotionalAnalyzer
from .fact_check import FactCheckClient, score_claims
from .heuristics import POSITIVE_MARKER, HeuristicScorer
from .models import AnalysisResult, FactCheckResult, Verdict
from .source_credibility import SourceCredibilityAnalyzer
from .utils import clamp_score, round_half_up

logger = logging.getLogger(__name__)

FAKE_THRESHOLD = 50.0
VERIFIED_THRESHOLD = 25.0

FAKE_FALLBACK_REASON = "Multiple indicators suggest unreliable content"
VERIFIED_FALLBACK_REASON = "Content appears to follow journalistic standards"
UNCERTAIN_REASON = "Unable to determine authenticity with high confidence"


class RandomSource(Protocol):
    def uniform(self, a: float, b: float) -> float: ...


@dataclass(frozen=True)
class ScoreWeights:
    heuristic: float
    emotional: float
    source: float
    fact_check: float = 0.0

    def __post_init__(self) -> None:
        total = self.heuristic + self.emotional + self.source + self.fact_check
        if total <= 0:
            raise ValueError("ScoreWeights sum must be positive")

    def as_dict(self) -> dict[str, float]:
        return {
            "heuristic": self.heuristic,
            "emotional": self.emotional,
            "source": self.source,
            "fact_check": self.fact_check,
        }


WITH_FACT_CHECK = ScoreWeights(heuristic=0.20, emotional=0.20, source=0.30, fact_check=0.30)
WITHOUT_FACT_CHECK = ScoreWeights(heuristic=0.30, emotional=0.30, source=0.40)


def has_usable_fact_check(result: FactCheckResult | None) -> bool:
    """Fact-check weighting only applies when at least one claim came back."""
    return result is not None and len(result.claims) > 0


def derive_verdict(score: float) -> Verdict:
    if score >= FAKE_THRESHOLD:
        return "fake"
    if score <= VERIFIED_THRESHOLD:
        return "verified"
    return "uncertain"


def compute_confidence(verdict: Verdict, score: float) -> int:
    if verdict == "uncertain":
        return 50
    return min(100, round_half_up(abs(50 - score) * 2))


def _utcnow() -> datetime:
    return datetime.now(timezone.utc)


def _new_id() -> str:
    return uuid.uuid4().hex


@dataclass
class NewsDetector:
    heuristic_scorer: HeuristicScorer = field(default_factory=HeuristicScorer)
    emotional_analyzer: EmotionalAnalyzer = field(default_factory=EmotionalAnalyzer)
    source_analyzer: SourceCredibilityAnalyzer = field(default_factory=SourceCredibilityAnalyzer)
    fact_checker: FactCheckClient | None = None
    with_fact_check: ScoreWeights = WITH_FACT_CHECK
    without_fact_check: ScoreWeights = WITHOUT_FACT_CHECK
    jitter: float = 5.0
    rng: RandomSource = field(default_factory=random.Random)
    clock: Callable[[], datetime] = _utcnow
    id_factory: Callable[[], str] = _new_id
    delay: float = 0.0

    async def analyze(self, text: str) -> AnalysisResult:
        text = text or ""
        if self.delay > 0:
            await asyncio.sleep(self.delay)

        heuristic = self.heuristic_scorer.score(text)
        reasons = list(heuristic.reasons)

        emotional = self.emotional_analyzer.analyze(text)
        if emotional.triggers and emotional.manipulation_level != "low":
            reasons.append(f"Emotional manipulation detected ({emotional.manipulation_level} level)")

        source = self.source_analyzer.analyze(text)
        for factor in source.factors:
            if factor not in reasons:
                reasons.append(factor)

        fact_check = await self._run_fact_check(text)
        usable = has_usable_fact_check(fact_check)
        if usable:
            top_claim = fact_check.claims[0]
            reasons.append(f'Related claim fact-checked by {top_claim.publisher}: "{top_claim.rating}"')

        components = {
            "heuristic": clamp_score(heuristic.score),
            "emotional": clamp_score(emotional.score),
            "source": clamp_score(source.score),
            "fact_check": clamp_score(score_claims(fact_check)) if usable else 0.0,
        }
        weights = self.select_weights(fact_check)
        score = self._combine_components(components, weights)
        score = clamp_score(score + self._draw_jitter())

        verdict = derive_verdict(score)
        self._append_fallback_reason(verdict, reasons)

        result = AnalysisResult(
            id=self.id_factory(),
            text=text,
            verdict=verdict,
            confidence=compute_confidence(verdict, score),
            score=round(score, 2),
            reasons=tuple(reasons),
            timestamp=self.clock(),
            heuristic=heuristic,
            emotional_analysis=emotional,
            source_credibility=source,
            fact_check_results=fact_check,
        )
        logger.info(
            "[%s] verdict=%s score=%.1f confidence=%d fact_check=%s",
            result.id,
            result.verdict,
            score,
            result.confidence,
            usable,
        )
        return result

    def select_weights(self, fact_check: FactCheckResult | None) -> ScoreWeights:
        return self.with_fact_check if has_usable_fact_check(fact_check) else self.without_fact_check

    async def _run_fact_check(self, text: str) -> FactCheckResult | None:
        if self.fact_checker is None or not self.fact_checker.is_available():
            return None
        try:
            return await self.fact_checker.query_claims(text)
        except Exception:
            logger.exception("Fact check failed, scoring without it")
            return None

    @staticmethod
    def _combine_components(components: dict[str, float], weights: ScoreWeights) -> float:
        total = 0.0
        for key, weight in weights.as_dict().items():
            if weight:
                total += components.get(key, 0.0) * weight
        return total

    def _draw_jitter(self) -> float:
        if self.jitter <= 0:
            return 0.0
        return self.rng.uniform(-self.jitter, self.jitter)

    @staticmethod
    def _append_fallback_reason(verdict: Verdict, reasons: list[str]) -> None:
        if verdict == "fake":
            if not reasons:
                reasons.append(FAKE_FALLBACK_REASON)
        elif verdict == "verified":
            if not [reason for reason in reasons if POSITIVE_MARKER not in reason]:
                reasons.append(VERIFIED_FALLBACK_REASON)
        else:
            reasons.append(UNCERTAIN_REASON)


def build_detector(settings: Settings | None = None, **overrides) -> NewsDetector:
    """Wire a detector from settings; keyword overrides replace individual collaborators."""
    settings = settings or get_settings()
    options = {
        "fact_checker": FactCheckClient(settings=settings),
        "jitter": settings.score_jitter,
        "delay": settings.analysis_delay,
    }
    if settings.data_dir:
        lexicons = load_lexicons(settings.data_dir)
        options["heuristic_scorer"] = HeuristicScorer(lexicons)
        options["emotional_analyzer"] = EmotionalAnalyzer(lexicons)
        options["source_analyzer"] = SourceCredibilityAnalyzer(lexicons)
    options.update(overrides)
    return NewsDetector(**options)
