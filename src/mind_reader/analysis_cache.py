import time
from typing import Dict, Optional, Tuple

from loguru import logger

from mind_reader.models import AIAnalysis


class AnalysisCache:
    """In-memory cache of predictions keyed by pattern hash."""

    def __init__(self, ttl_seconds: int = 5 * 60):
        self.ttl_seconds = int(ttl_seconds)
        self._entries: Dict[str, Tuple[float, AIAnalysis]] = {}

    def _is_expired(self, stored_at: float) -> bool:
        if self.ttl_seconds <= 0:
            return False
        return time.time() - stored_at > self.ttl_seconds

    def cleanup(self) -> None:
        """Drop every expired entry; runs on each put."""
        dead = [k for k, (stored_at, _) in self._entries.items() if self._is_expired(stored_at)]
        for k in dead:
            del self._entries[k]

    def get(self, pattern_hash: str) -> Optional[AIAnalysis]:
        entry = self._entries.get(pattern_hash)
        if entry is None:
            return None
        stored_at, analysis = entry
        if self._is_expired(stored_at):
            del self._entries[pattern_hash]
            return None
        logger.debug(f"Cache hit: {pattern_hash}")
        return analysis

    def put(self, pattern_hash: str, analysis: AIAnalysis) -> None:
        self.cleanup()
        self._entries[pattern_hash] = (time.time(), analysis)

    def clear(self) -> None:
        self._entries.clear()

    def __len__(self):
        return len(self._entries)
