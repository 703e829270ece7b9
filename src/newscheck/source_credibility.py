from __future__ import annotations

import re

from .data_loader import Lexicons, default_lexicons
from .models import OverallReputation, SourceCredibilityResult, SourceInfo
from .utils import clamp_score, round_half_up

_HOST = r"([a-zA-Z0-9][-a-zA-Z0-9]*(?:\.[a-zA-Z0-9][-a-zA-Z0-9]*)+)"

GOVERNMENT_SUFFIXES = (".gov", ".gov.uk", ".gov.au")


class SourceCredibilityAnalyzer:
    """Extract referenced domains and score how credible they are (higher = less credible)."""

    URL_PATTERN = re.compile(r"https?://(?:www\.)?" + _HOST, re.I)
    WWW_PATTERN = re.compile(r"www\." + _HOST, re.I)
    MENTION_PATTERN = re.compile(
        r"(?:from|via|source:|according to|reported by)\s+([a-zA-Z0-9][-a-zA-Z0-9]*\.[a-zA-Z]{2,})",
        re.I,
    )
    ATTRIBUTION_PATTERN = re.compile(r"according to|sources say|reports indicate|experts claim", re.I)

    def __init__(self, lexicons: Lexicons | None = None) -> None:
        self._lexicons = lexicons or default_lexicons()

    def extract_domains(self, text: str) -> list[str]:
        domains: list[str] = []
        for pattern in (self.URL_PATTERN, self.WWW_PATTERN, self.MENTION_PATTERN):
            for match in pattern.finditer(text or ""):
                domain = match.group(1).lower()
                if domain not in domains:
                    domains.append(domain)
        return domains

    def classify_domain(self, domain: str) -> SourceInfo:
        domain = domain.lower()
        lexicons = self._lexicons
        if domain in lexicons.trusted_sources:
            return SourceInfo(domain=domain, reputation="trusted", category=lexicons.trusted_sources[domain])
        if domain in lexicons.satire_sources:
            return SourceInfo(domain=domain, reputation="satire", category=lexicons.satire_sources[domain])
        if domain in lexicons.unreliable_sources:
            return SourceInfo(domain=domain, reputation="unreliable", category=lexicons.unreliable_sources[domain])

        if domain.endswith(".edu"):
            return SourceInfo(domain=domain, reputation="trusted", category="Educational Institution")
        if domain.endswith(GOVERNMENT_SUFFIXES):
            return SourceInfo(domain=domain, reputation="trusted", category="Government Source")

        for trusted_domain, category in lexicons.trusted_sources.items():
            if domain.endswith("." + trusted_domain):
                return SourceInfo(domain=domain, reputation="trusted", category=category)

        for pattern in lexicons.suspicious_patterns:
            if pattern.search(domain):
                return SourceInfo(domain=domain, reputation="mixed", category="Suspicious Domain Pattern")

        return SourceInfo(domain=domain, reputation="unknown", category="Unknown Source")

    def analyze(self, text: str) -> SourceCredibilityResult:
        text = text or ""
        sources = [self.classify_domain(domain) for domain in self.extract_domains(text)]
        factors: list[str] = []
        score = 50.0

        trusted = self._domains_with(sources, "trusted")
        satire = self._domains_with(sources, "satire")
        unreliable = self._domains_with(sources, "unreliable")
        mixed = self._domains_with(sources, "mixed")

        if trusted:
            score -= len(trusted) * 20
            factors.append(f"References {len(trusted)} trusted source(s): {', '.join(trusted)}")
        if satire:
            score += len(satire) * 30
            factors.append(f"Contains satire source(s): {', '.join(satire)}")
        if unreliable:
            score += len(unreliable) * 40
            factors.append(f"Contains known unreliable source(s): {', '.join(unreliable)}")
        if mixed:
            score += len(mixed) * 15
            factors.append(f"Contains suspicious domain pattern(s): {', '.join(mixed)}")

        if not sources:
            score += 10
            factors.append("No external sources or links detected")

        if self.ATTRIBUTION_PATTERN.search(text) and not trusted:
            score += 15
            factors.append("Contains attribution language but no verifiable sources")

        score = round_half_up(clamp_score(score))
        return SourceCredibilityResult(
            score=score,
            found_sources=tuple(sources),
            overall_reputation=self._overall_reputation(score, sources, trusted, unreliable),
            factors=tuple(factors),
        )

    @staticmethod
    def _domains_with(sources: list[SourceInfo], reputation: str) -> list[str]:
        return [source.domain for source in sources if source.reputation == reputation]

    @staticmethod
    def _overall_reputation(
        score: int,
        sources: list[SourceInfo],
        trusted: list[str],
        unreliable: list[str],
    ) -> OverallReputation:
        if unreliable or score >= 70:
            return "untrusted"
        if trusted and score < 30:
            return "trusted"
        if not sources:
            return "unknown"
        return "mixed"
