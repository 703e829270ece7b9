"""
Google Fact Check Tools integration.
Optional: without an API key the client reports itself unavailable and the
detector scores with heuristics only.
"""

from __future__ import annotations

import logging
import re
from typing import Any

import httpx

from .cache import TTLCache
from .config import Settings, get_settings
from .models import FactCheckClaim, FactCheckResult
from .utils import round_half_up

logger = logging.getLogger(__name__)

NEUTRAL_SCORE = 50
MAX_QUERY_LENGTH = 200
MIN_SENTENCE_LENGTH = 20

_FIRST_SENTENCE = re.compile(r"^[^.!?]+[.!?]")


class FactCheckError(RuntimeError):
    """Raised when the claim search API cannot be queried or parsed."""


def normalize_rating(textual_rating: str) -> int | None:
    """Map a publisher's textual rating onto 0-100 (higher = more false)."""
    rating = (textual_rating or "").lower().replace("-", " ")

    if "true" in rating and not any(word in rating for word in ("false", "partly", "mostly", "largely", "half")):
        return 10
    if "mostly true" in rating or "largely true" in rating:
        return 25

    if any(word in rating for word in ("half true", "mixture", "mixed", "partly", "partially")):
        return 50

    if "mostly false" in rating or "largely false" in rating:
        return 75
    if any(word in rating for word in ("false", "fake", "pants on fire", "incorrect")):
        return 90

    if "misleading" in rating or "out of context" in rating:
        return 70
    if "unproven" in rating or "unverified" in rating:
        return 50
    if "satire" in rating:
        return 85
    return None


def extract_search_query(text: str) -> str:
    """First sentence when it is long enough to search on, else the leading characters."""
    text = text or ""
    match = _FIRST_SENTENCE.match(text)
    if match and len(match.group(0)) >= MIN_SENTENCE_LENGTH:
        return match.group(0)[:MAX_QUERY_LENGTH]
    return text[:MAX_QUERY_LENGTH]


def score_claims(result: FactCheckResult | None) -> int:
    """Average normalized rating of the claims, neutral when nothing is rated."""
    if result is None or not result.available or not result.claims:
        return NEUTRAL_SCORE
    values = [claim.rating_value for claim in result.claims if claim.rating_value is not None]
    if not values:
        return NEUTRAL_SCORE
    return round_half_up(sum(values) / len(values))


class FactCheckClient:
    def __init__(
        self,
        *,
        settings: Settings | None = None,
        api_key: str | None = None,
        cache: TTLCache[FactCheckResult] | None = None,
        transport: httpx.AsyncBaseTransport | None = None,
    ) -> None:
        self._settings = settings or get_settings()
        self._api_key = api_key if api_key is not None else self._settings.fact_check_api_key
        self._endpoint = self._settings.fact_check_api_url
        self._language = self._settings.fact_check_language
        self._page_size = self._settings.fact_check_page_size
        self._timeout = self._settings.fact_check_timeout
        self._cache = cache if cache is not None else TTLCache(self._settings.fact_check_cache_ttl)
        self._transport = transport

    def is_available(self) -> bool:
        return bool(self._api_key and self._api_key.strip())

    async def query_claims(self, text: str) -> FactCheckResult:
        if not self.is_available():
            return FactCheckResult(available=False, error="Fact check API key not configured")

        query = extract_search_query(text)
        cache_key = query.lower().strip()
        cached = self._cache.get(cache_key)
        if cached is not None:
            logger.debug("Fact check cache hit: %s", cache_key[:50])
            return cached

        try:
            payload = await self._search(query)
            claims = self._parse_claims(payload)
        except FactCheckError as exc:
            logger.warning("Fact check API error: %s", exc)
            return FactCheckResult(available=True, error=str(exc))

        result = FactCheckResult(available=True, claims=claims)
        self._cache.set(cache_key, result)
        return result

    async def _search(self, query: str) -> dict[str, Any]:
        params = {
            "query": query,
            "key": self._api_key,
            "languageCode": self._language,
            "pageSize": str(self._page_size),
        }
        async with httpx.AsyncClient(timeout=self._timeout, transport=self._transport) as client:
            try:
                response = await client.get(self._endpoint, params=params)
            except httpx.HTTPError as exc:
                raise FactCheckError(f"Request failed: {exc}") from exc

        if not response.is_success:
            raise FactCheckError(self._error_message(response))
        try:
            payload = response.json()
        except ValueError as exc:
            raise FactCheckError("Invalid JSON in fact check response") from exc
        if not isinstance(payload, dict):
            raise FactCheckError("Unexpected fact check response shape")
        return payload

    @staticmethod
    def _error_message(response: httpx.Response) -> str:
        try:
            data = response.json()
        except ValueError:
            data = {}
        error = data.get("error") if isinstance(data, dict) else None
        if isinstance(error, dict) and error.get("message"):
            return str(error["message"])
        return f"API error: {response.status_code}"

    def _parse_claims(self, payload: dict[str, Any]) -> tuple[FactCheckClaim, ...]:
        raw_claims = payload.get("claims") or []
        if not isinstance(raw_claims, list):
            raise FactCheckError("Unexpected claims field in fact check response")

        claims: list[FactCheckClaim] = []
        for claim_data in raw_claims[: self._page_size]:
            if not isinstance(claim_data, dict):
                continue
            reviews = claim_data.get("claimReview")
            review = reviews[0] if isinstance(reviews, list) and reviews and isinstance(reviews[0], dict) else {}
            publisher = review.get("publisher")
            if not isinstance(publisher, dict):
                publisher = {}
            rating = str(review.get("textualRating") or "Unknown")
            claims.append(
                FactCheckClaim(
                    text=claim_data.get("text") or "",
                    claimant=claim_data.get("claimant"),
                    claim_date=claim_data.get("claimDate"),
                    rating=rating,
                    rating_value=normalize_rating(rating),
                    url=review.get("url") or "",
                    publisher=publisher.get("name") or "Unknown",
                    review_date=review.get("reviewDate"),
                )
            )
        return tuple(claims)
