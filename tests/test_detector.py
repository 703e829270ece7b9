import json
from datetime import datetime, timezone

import httpx
import pytest

from newscheck.config import Settings
from newscheck.detector import (
    UNCERTAIN_REASON,
    VERIFIED_FALLBACK_REASON,
    WITH_FACT_CHECK,
    WITHOUT_FACT_CHECK,
    NewsDetector,
    ScoreWeights,
    build_detector,
    compute_confidence,
    derive_verdict,
    has_usable_fact_check,
)
from newscheck.fact_check import FactCheckClient
from newscheck.models import FactCheckClaim, FactCheckResult

FAKE_TEXT = "BREAKING: Scientists SHOCKING discovery!!! You won't believe what happens next!"
VERIFIED_TEXT = (
    "According to a new study published in Nature, researchers at MIT found correlation "
    "between diet and longevity. See https://nature.com/article123 for details."
)
FIXED_TIME = datetime(2024, 5, 1, 12, 0, tzinfo=timezone.utc)


class StubFactChecker:
    def __init__(self, result=None, error=None, available=True):
        self.result = result
        self.error = error
        self.available = available
        self.calls = 0

    def is_available(self):
        return self.available

    async def query_claims(self, text):
        self.calls += 1
        if self.error:
            raise self.error
        return self.result


def _detector(zero_jitter, **kwargs):
    return NewsDetector(rng=zero_jitter, clock=lambda: FIXED_TIME, **kwargs)


def test_verdict_thresholds():
    assert derive_verdict(100) == "fake"
    assert derive_verdict(50) == "fake"
    assert derive_verdict(49.99) == "uncertain"
    assert derive_verdict(25.01) == "uncertain"
    assert derive_verdict(25) == "verified"
    assert derive_verdict(0) == "verified"


def test_confidence():
    assert compute_confidence("uncertain", 40) == 50
    assert compute_confidence("fake", 59.7) == 19
    assert compute_confidence("verified", 12) == 76
    assert compute_confidence("fake", 100) == 100
    assert compute_confidence("verified", 0) == 100


def test_has_usable_fact_check():
    assert not has_usable_fact_check(None)
    assert not has_usable_fact_check(FactCheckResult(available=False))
    assert not has_usable_fact_check(FactCheckResult(available=True, error="boom"))
    assert has_usable_fact_check(FactCheckResult(available=True, claims=(FactCheckClaim(),)))


def test_weights_must_be_positive():
    with pytest.raises(ValueError):
        ScoreWeights(heuristic=0, emotional=0, source=0)


@pytest.mark.asyncio
async def test_sensational_headline_is_fake(zero_jitter):
    result = await _detector(zero_jitter).analyze(FAKE_TEXT)
    # 0.3*80 + 0.3*39 + 0.4*60
    assert result.score == pytest.approx(59.7)
    assert result.verdict == "fake"
    assert result.confidence == 19
    assert result.heuristic.score == 80
    assert result.emotional_analysis.score == 39
    assert result.source_credibility.score == 60
    assert result.fact_check_results is None
    assert result.reasons == (
        'Sensationalist language detected: "shocking", "you won\'t believe"',
        "Excessive punctuation suggests emotional manipulation",
        "Multiple ALL CAPS words indicate sensationalism",
        "Emotional manipulation detected (medium level)",
        "No external sources or links detected",
    )
    assert result.timestamp == FIXED_TIME


@pytest.mark.asyncio
async def test_sourced_study_is_verified(zero_jitter):
    result = await _detector(zero_jitter).analyze(VERIFIED_TEXT)
    assert result.score == pytest.approx(12.0)
    assert result.verdict == "verified"
    assert result.confidence == 76
    assert result.reasons == (
        "Contains source attribution (positive indicator)",
        "Contains external links for verification",
        "References 1 trusted source(s): nature.com",
    )


@pytest.mark.asyncio
async def test_uncertain_always_adds_low_confidence_reason(zero_jitter):
    # heuristic 0, emotional 0, source 60 -> 24, nudged into the uncertain band
    detector = NewsDetector(rng=_Jitter(3.0), clock=lambda: FIXED_TIME)
    result = await detector.analyze("A plain report about the weather in the valley this weekend.")
    assert result.score == pytest.approx(27.0)
    assert result.verdict == "uncertain"
    assert result.confidence == 50
    assert result.reasons[-1] == UNCERTAIN_REASON


@pytest.mark.asyncio
async def test_verified_with_only_positive_reasons_gets_fallback(zero_jitter):
    text = "The survey data indicates steady growth in regional employment, figures from example.org show."
    result = await _detector(zero_jitter).analyze(text)
    assert result.score == pytest.approx(20.0)
    assert result.verdict == "verified"
    assert result.confidence == 60
    assert result.reasons == ("Contains source attribution (positive indicator)", VERIFIED_FALLBACK_REASON)


@pytest.mark.asyncio
async def test_jitter_is_bounded_and_clamped():
    detector = NewsDetector(rng=_Jitter(-5.0), clock=lambda: FIXED_TIME)
    result = await detector.analyze(VERIFIED_TEXT)
    assert result.score == pytest.approx(7.0)

    detector = NewsDetector(jitter=0, rng=_Jitter(5.0), clock=lambda: FIXED_TIME)
    result = await detector.analyze(VERIFIED_TEXT)
    assert result.score == pytest.approx(12.0)


@pytest.mark.asyncio
async def test_analysis_is_idempotent_with_fixed_collaborators(zero_jitter):
    claims = FactCheckResult(
        available=True,
        claims=(FactCheckClaim(rating="False", rating_value=90, publisher="Snopes"),),
    )
    detector = _detector(zero_jitter, fact_checker=StubFactChecker(result=claims))
    first = await detector.analyze(FAKE_TEXT)
    second = await detector.analyze(FAKE_TEXT)
    assert first.id != second.id
    assert (first.verdict, first.confidence, first.reasons) == (second.verdict, second.confidence, second.reasons)


@pytest.mark.asyncio
async def test_fact_check_claims_switch_weighting(zero_jitter):
    claims = FactCheckResult(
        available=True,
        claims=(
            FactCheckClaim(rating="False", rating_value=90, publisher="Snopes"),
            FactCheckClaim(rating="Pants on Fire", rating_value=90, publisher="PolitiFact"),
        ),
    )
    checker = StubFactChecker(result=claims)
    detector = _detector(zero_jitter, fact_checker=checker)
    assert detector.select_weights(claims) is WITH_FACT_CHECK

    result = await detector.analyze(FAKE_TEXT)
    # 0.2*80 + 0.2*39 + 0.3*60 + 0.3*90
    assert result.score == pytest.approx(68.8)
    assert result.verdict == "fake"
    assert result.reasons[-1] == 'Related claim fact-checked by Snopes: "False"'
    assert result.fact_check_results == claims


@pytest.mark.asyncio
async def test_empty_fact_check_uses_heuristic_weighting(zero_jitter):
    empty = FactCheckResult(available=True, error="API error: 500")
    detector = _detector(zero_jitter, fact_checker=StubFactChecker(result=empty))
    assert detector.select_weights(empty) is WITHOUT_FACT_CHECK

    result = await detector.analyze(FAKE_TEXT)
    assert result.score == pytest.approx(59.7)
    assert result.fact_check_results == empty
    assert not any("fact-checked" in reason for reason in result.reasons)


@pytest.mark.asyncio
async def test_fact_check_exception_is_absorbed(zero_jitter):
    checker = StubFactChecker(error=RuntimeError("timeout"))
    result = await _detector(zero_jitter, fact_checker=checker).analyze(FAKE_TEXT)
    assert checker.calls == 1
    assert result.verdict == "fake"
    assert result.score == pytest.approx(59.7)
    assert result.fact_check_results is None


@pytest.mark.asyncio
async def test_unavailable_fact_checker_is_not_called(zero_jitter):
    checker = StubFactChecker(available=False)
    await _detector(zero_jitter, fact_checker=checker).analyze(FAKE_TEXT)
    assert checker.calls == 0


@pytest.mark.asyncio
async def test_http_fact_checker_end_to_end(settings, zero_jitter):
    payload = {
        "claims": [
            {
                "text": "Scientists made a shocking discovery",
                "claimReview": [{"publisher": {"name": "Full Fact"}, "textualRating": "True"}],
            }
        ]
    }
    client = FactCheckClient(
        settings=settings,
        transport=httpx.MockTransport(lambda request: httpx.Response(200, json=payload)),
    )
    result = await _detector(zero_jitter, fact_checker=client).analyze(FAKE_TEXT)
    # 0.2*80 + 0.2*39 + 0.3*60 + 0.3*10
    assert result.score == pytest.approx(44.8)
    assert result.verdict == "uncertain"
    assert result.reasons[-2:] == ('Related claim fact-checked by Full Fact: "True"', UNCERTAIN_REASON)


@pytest.mark.asyncio
async def test_empty_text_returns_well_formed_result(zero_jitter):
    result = await _detector(zero_jitter).analyze("")
    # 0.3*10 + 0 + 0.4*60
    assert result.score == pytest.approx(27.0)
    assert result.verdict == "uncertain"
    assert result.text == ""


def test_build_detector_reads_settings(settings):
    detector = build_detector(settings)
    assert detector.jitter == 0
    assert detector.fact_checker.is_available()


def test_build_detector_loads_lexicons_from_data_dir(tmp_path):
    (tmp_path / "sensationalism.json").write_text(
        json.dumps({"sensationalist_words": ["zebra"], "credibility_phrases": []}),
        encoding="utf-8",
    )
    detector = build_detector(Settings(_env_file=None, data_dir=str(tmp_path), score_jitter=0))

    result = detector.heuristic_scorer.score("A zebra walked into the newsroom and sat down quietly at a desk.")
    assert result.reasons == ('Sensationalist language detected: "zebra"',)
    assert result.score == 15
    # the custom directory has no emotion or domain files
    assert detector.emotional_analyzer.analyze("terrifying outrageous news").score == 0
    assert detector.source_analyzer.classify_domain("reuters.com").reputation == "unknown"


class _Jitter:
    def __init__(self, value):
        self.value = value

    def uniform(self, a, b):
        return max(a, min(b, self.value))


@pytest.mark.asyncio
@pytest.mark.parametrize(
    "text",
    [
        "",
        "!!!!!!!!!!",
        "SHOCKING " * 50,
        "see https://infowars.com https://naturalnews.com https://theonion.com via newspunch.com",
        "According to reuters.com and https://apnews.com plus www.bbc.co.uk, research shows progress.",
        "ok",
    ],
)
async def test_scores_stay_in_range(zero_jitter, text):
    result = await _detector(zero_jitter).analyze(text)
    for score in (
        result.heuristic.score,
        result.emotional_analysis.score,
        result.source_credibility.score,
        result.score,
        result.confidence,
    ):
        assert 0 <= score <= 100
    assert len(result.reasons) == len(set(result.reasons))
