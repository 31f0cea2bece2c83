"""
In-memory TTL cache for single-item evaluation results.

Keys carry everything a result depends on: the operation, the text, the
context, the safety config snapshot and the guideline. After update_config()
the new snapshot produces new keys, so an entry computed under the old
config is never served again. Entries expire after ttl_seconds; the oldest
entry is dropped once max_entries is reached.
"""
import hashlib
import json
import logging
import time
from typing import Any, Callable, Dict, Hashable, Optional, Tuple

from brand_compliance.models import BrandGuideline
from brand_safety.config import SafetyConfig

logger = logging.getLogger(__name__)

DEFAULT_TTL_SECONDS = 3600
DEFAULT_MAX_ENTRIES = 1024

CacheKey = Tuple[Hashable, ...]


def fingerprint(config: SafetyConfig, guideline: Optional[BrandGuideline]) -> str:
    """Stable digest of a config snapshot plus guideline (None when absent)."""
    payload = {
        "config": config.to_dict(),
        "guideline": guideline.model_dump(mode="json") if guideline is not None else None,
    }
    raw = json.dumps(payload, sort_keys=True)
    return hashlib.sha256(raw.encode()).hexdigest()


class ResultCache:
    def __init__(
        self,
        ttl_seconds: float = DEFAULT_TTL_SECONDS,
        max_entries: int = DEFAULT_MAX_ENTRIES,
        clock: Callable[[], float] = time.monotonic,
    ):
        if ttl_seconds <= 0:
            raise ValueError(f"ttl_seconds must be positive, got {ttl_seconds}")
        if max_entries < 1:
            raise ValueError(f"max_entries must be at least 1, got {max_entries}")
        self.ttl_seconds = ttl_seconds
        self.max_entries = max_entries
        self._clock = clock
        # key -> (expires_at, result); dicts keep insertion order, oldest first
        self._entries: Dict[CacheKey, Tuple[float, Any]] = {}
        self.hits = 0
        self.misses = 0

    @staticmethod
    def key(
        operation: str,
        text: str,
        context: Optional[str],
        config: SafetyConfig,
        guideline: Optional[BrandGuideline],
        *extra: Hashable,
    ) -> CacheKey:
        return (operation, text, context, fingerprint(config, guideline)) + extra

    def get(self, key: CacheKey) -> Optional[Any]:
        entry = self._entries.get(key)
        if entry is None:
            self.misses += 1
            return None
        expires_at, result = entry
        if expires_at <= self._clock():
            del self._entries[key]
            self.misses += 1
            return None
        self.hits += 1
        return result

    def set(self, key: CacheKey, result: Any) -> None:
        self._entries.pop(key, None)
        while len(self._entries) >= self.max_entries:
            self._entries.pop(next(iter(self._entries)))
        self._entries[key] = (self._clock() + self.ttl_seconds, result)

    def purge_expired(self) -> int:
        """Drop expired entries; returns how many were removed."""
        now = self._clock()
        expired = [key for key, (expires_at, _) in self._entries.items() if expires_at <= now]
        for key in expired:
            del self._entries[key]
        if expired:
            logger.info(f"Purged {len(expired)} expired evaluation results")
        return len(expired)

    def clear(self) -> None:
        self._entries.clear()

    def __len__(self) -> int:
        return len(self._entries)
