from __future__ import annotations

import re

from .data_loader import Lexicons, default_lexicons
from .models import LexiconResult
from .utils import clamp_score, round_half_up

POSITIVE_MARKER = "positive"


class HeuristicScorer:
    """Keyword, punctuation and formatting heuristics over raw text."""

    ALL_CAPS_PATTERN = re.compile(r"\b[A-Z]{4,}\b")
    SHORT_TEXT_LENGTH = 50

    def __init__(self, lexicons: Lexicons | None = None) -> None:
        self._lexicons = lexicons or default_lexicons()

    def score(self, text: str) -> LexiconResult:
        text = text or ""
        lower_text = text.lower()
        reasons: list[str] = []
        score = 0.0

        found = [word for word in self._lexicons.sensationalist_words if word in lower_text]
        if found:
            score += len(found) * 15
            quoted = '", "'.join(found[:2])
            reasons.append(f'Sensationalist language detected: "{quoted}"')

        if text.count("!") > 2 or text.count("?") > 3:
            score += 20
            reasons.append("Excessive punctuation suggests emotional manipulation")

        if len(self.ALL_CAPS_PATTERN.findall(text)) > 1:
            score += 15
            reasons.append("Multiple ALL CAPS words indicate sensationalism")

        if any(phrase in lower_text for phrase in self._lexicons.credibility_phrases):
            score -= 20
            reasons.append(f"Contains source attribution ({POSITIVE_MARKER} indicator)")

        if len(text) < self.SHORT_TEXT_LENGTH:
            score += 10
            reasons.append("Very short content lacks context")

        if "http" in text or "www" in text:
            score -= 10
            reasons.append("Contains external links for verification")

        return LexiconResult(score=round_half_up(clamp_score(score)), reasons=tuple(reasons))
