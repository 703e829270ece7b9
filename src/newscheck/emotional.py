"""
Emotional manipulation analysis.

Scores text against weighted emotion lexicons plus punctuation and
capitalization signals. Higher scores mean more manipulative language.
"""

from __future__ import annotations

import re

from .data_loader import Lexicons, default_lexicons
from .models import EmotionalAnalysisResult, EmotionalTrigger, ManipulationLevel
from .utils import clamp_score, round_half_up

_CAMEL_BOUNDARY = re.compile(r"([A-Z])")


def format_category(key: str) -> str:
    """Render ``clickBait`` style keys as ``Click Bait``."""
    if not key:
        return key
    return key[0].upper() + _CAMEL_BOUNDARY.sub(r" \1", key[1:])


def manipulation_level(score: float) -> ManipulationLevel:
    if score < 25:
        return "low"
    if score < 55:
        return "medium"
    return "high"


class EmotionalAnalyzer:
    EXCLAMATION_PATTERN = re.compile(r"!+")
    CAPS_WORD_PATTERN = re.compile(r"\b[A-Z]{3,}\b")

    CATEGORY_SCALE = 8
    TRIGGER_SCALE = 20

    def __init__(self, lexicons: Lexicons | None = None) -> None:
        self._lexicons = lexicons or default_lexicons()

    def analyze(self, text: str) -> EmotionalAnalysisResult:
        text = text or ""
        lower_text = text.lower()
        triggers: list[EmotionalTrigger] = []
        total = 0.0
        max_intensity = 0.0
        dominant: str | None = None

        for category in self._lexicons.emotion_categories:
            found = tuple(word for word in category.words if word in lower_text)
            if not found:
                continue
            intensity = len(found) * category.weight
            total += intensity * self.CATEGORY_SCALE
            triggers.append(
                EmotionalTrigger(
                    category=format_category(category.key),
                    words=found,
                    intensity=min(100, round_half_up(intensity * self.TRIGGER_SCALE)),
                )
            )
            # strict comparison keeps the first category on ties
            if intensity > max_intensity:
                max_intensity = intensity
                dominant = category.key

        exclamation_count = len(self.EXCLAMATION_PATTERN.findall(text))
        if exclamation_count > 2:
            total += exclamation_count * 5
            triggers.append(
                EmotionalTrigger(
                    category="Excessive Punctuation",
                    words=(f"{exclamation_count} exclamation marks",),
                    intensity=min(100, exclamation_count * 15),
                )
            )

        caps_count = len(self.CAPS_WORD_PATTERN.findall(text))
        if caps_count > 2:
            total += caps_count * 4
            triggers.append(
                EmotionalTrigger(
                    category="Capitalization",
                    words=(f"{caps_count} ALL CAPS words",),
                    intensity=min(100, caps_count * 12),
                )
            )

        score = round_half_up(clamp_score(total))
        return EmotionalAnalysisResult(
            score=score,
            triggers=tuple(triggers),
            dominant_emotion=format_category(dominant) if dominant else None,
            manipulation_level=manipulation_level(score),
        )
