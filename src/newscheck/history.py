from __future__ import annotations

import json
import logging
import threading
from pathlib import Path

from pydantic import TypeAdapter, ValidationError

from .models import AnalysisResult

logger = logging.getLogger(__name__)

DEFAULT_LIMIT = 10

_RESULTS = TypeAdapter(list[AnalysisResult])


class HistoryStore:
    """Most-recent-first list of analysis results, truncated to ``limit``."""

    def __init__(self, *, limit: int = DEFAULT_LIMIT, path: str | Path | None = None) -> None:
        if limit <= 0:
            raise ValueError("History limit must be positive")
        self._limit = limit
        self._path = Path(path) if path else None
        self._items: list[AnalysisResult] = []
        self._lock = threading.Lock()

    @property
    def limit(self) -> int:
        return self._limit

    def add(self, result: AnalysisResult) -> None:
        with self._lock:
            self._items = [result, *self._items][: self._limit]
        self.save()

    def items(self) -> list[AnalysisResult]:
        with self._lock:
            return list(self._items)

    def get(self, result_id: str) -> AnalysisResult | None:
        with self._lock:
            return next((item for item in self._items if item.id == result_id), None)

    def clear(self) -> None:
        with self._lock:
            self._items = []
        if self._path and self._path.exists():
            self._path.unlink()

    def __len__(self) -> int:
        with self._lock:
            return len(self._items)

    def load(self) -> None:
        """Replace the in-memory list with the persisted one, if any."""
        if not self._path or not self._path.exists():
            return
        try:
            raw = self._path.read_text(encoding="utf-8")
            items = _RESULTS.validate_json(raw)
        except (OSError, ValidationError, ValueError) as exc:
            logger.warning("Ignoring unreadable history file %s: %s", self._path, exc)
            return
        with self._lock:
            self._items = items[: self._limit]
        logger.info("Loaded %d history entries from %s", len(self._items), self._path)

    def save(self) -> None:
        if not self._path:
            return
        with self._lock:
            payload = _RESULTS.dump_python(self._items, mode="json")
        try:
            self._path.parent.mkdir(parents=True, exist_ok=True)
            self._path.write_text(json.dumps(payload, ensure_ascii=False, indent=2), encoding="utf-8")
        except OSError as exc:
            logger.error("Failed to persist history to %s: %s", self._path, exc)
