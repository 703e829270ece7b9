"""
Dataset loader and regex compiler for the static lexicons.
"""

from __future__ import annotations

import json
import logging
import re
from dataclasses import dataclass, field
from functools import lru_cache
from pathlib import Path
from types import MappingProxyType
from typing import Any, Mapping

logger = logging.getLogger(__name__)

DEFAULT_DATA_DIR = Path(__file__).resolve().parent / "data"


@dataclass(frozen=True)
class EmotionCategory:
    key: str
    weight: float
    words: tuple[str, ...]


@dataclass(frozen=True)
class Lexicons:
    sensationalist_words: tuple[str, ...] = ()
    credibility_phrases: tuple[str, ...] = ()
    emotion_categories: tuple[EmotionCategory, ...] = ()
    trusted_sources: Mapping[str, str] = field(default_factory=dict)
    satire_sources: Mapping[str, str] = field(default_factory=dict)
    unreliable_sources: Mapping[str, str] = field(default_factory=dict)
    suspicious_patterns: tuple[re.Pattern, ...] = ()


def load_json(path: Path) -> Any:
    """Load a JSON file with UTF-8 encoding."""
    with path.open("r", encoding="utf-8") as f:
        return json.load(f)


def _compile_patterns(values: Any) -> tuple[re.Pattern, ...]:
    """Compile case-insensitive patterns, skipping the invalid ones."""
    compiled: list[re.Pattern] = []
    if not isinstance(values, list):
        return ()
    for item in values:
        if not isinstance(item, str):
            continue
        try:
            compiled.append(re.compile(item, re.I))
        except re.error as exc:
            logger.warning("Skip invalid pattern %s: %s", item, exc)
    return tuple(compiled)


def _lower_words(values: Any) -> tuple[str, ...]:
    if not isinstance(values, list):
        return ()
    return tuple(str(value).lower() for value in values if value)


def _domain_table(values: Any) -> Mapping[str, str]:
    if not isinstance(values, dict):
        return MappingProxyType({})
    return MappingProxyType({str(domain).lower(): str(label) for domain, label in values.items()})


def _emotion_categories(values: Any) -> tuple[EmotionCategory, ...]:
    categories: list[EmotionCategory] = []
    for entry in values or []:
        key = entry.get("key")
        if not key:
            continue
        categories.append(
            EmotionCategory(
                key=key,
                weight=float(entry.get("weight", 1.0)),
                words=_lower_words(entry.get("words")),
            )
        )
    return tuple(categories)


def load_lexicons(data_dir: str | Path | None = None) -> Lexicons:
    """
    Load every lexicon file from ``data_dir`` (the packaged data by default).
    Missing files produce empty tables rather than failing.
    """
    base = Path(data_dir) if data_dir else DEFAULT_DATA_DIR
    raw: dict[str, Any] = {}
    for name in ("sensationalism", "emotional_lexicon", "source_reputation"):
        path = base / f"{name}.json"
        if not path.exists():
            logger.warning("Lexicon file missing: %s", path)
            continue
        payload = load_json(path)
        if isinstance(payload, dict):
            raw.update(payload)

    lexicons = Lexicons(
        sensationalist_words=_lower_words(raw.get("sensationalist_words")),
        credibility_phrases=_lower_words(raw.get("credibility_phrases")),
        emotion_categories=_emotion_categories(raw.get("categories")),
        trusted_sources=_domain_table(raw.get("trusted_sources")),
        satire_sources=_domain_table(raw.get("satire_sources")),
        unreliable_sources=_domain_table(raw.get("unreliable_sources")),
        suspicious_patterns=_compile_patterns(raw.get("suspicious_patterns")),
    )
    logger.info(
        "Loaded lexicons from %s: %d emotion categories, %d trusted, %d satire, %d unreliable domains",
        base,
        len(lexicons.emotion_categories),
        len(lexicons.trusted_sources),
        len(lexicons.satire_sources),
        len(lexicons.unreliable_sources),
    )
    return lexicons


@lru_cache(1)
def default_lexicons() -> Lexicons:
    return load_lexicons()
