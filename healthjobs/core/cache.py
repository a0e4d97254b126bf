import json
import logging
import time
from dataclasses import dataclass
from typing import Any, Callable, Dict, Iterator, Mapping, Optional

logger = logging.getLogger(__name__)


@dataclass
class CacheEntry:
    value: Any
    timestamp: float
    ttl: float


class ResponseCache:
    """
    TTL-bounded key/value cache shared by the source adapters.

    Expired entries are swept lazily before every read. Once the entry count
    exceeds max_entries the oldest *inserted* entry is evicted (FIFO, not
    LRU): re-reading a key does not refresh its position.
    """

    def __init__(
        self,
        max_entries: int = 50,
        ttl: float = 600.0,
        clock: Callable[[], float] = time.monotonic,
    ):
        self.max_entries = max_entries
        self.ttl = ttl
        self._clock = clock
        self._entries: Dict[str, CacheEntry] = {}

    @staticmethod
    def make_key(source: str, params: Mapping[str, Any]) -> str:
        """
        Stable key for a query against one source. The source discriminator
        prefixes the serialized params so two sources never collide.
        """
        return f"{source}:{json.dumps(dict(params), sort_keys=True, default=str)}"

    def _is_valid(self, entry: CacheEntry) -> bool:
        return self._clock() - entry.timestamp < entry.ttl

    def sweep_expired(self) -> int:
        """Drop every entry whose age reached its ttl. Returns the count dropped."""
        expired = [key for key, entry in self._entries.items() if not self._is_valid(entry)]
        for key in expired:
            del self._entries[key]
        if expired:
            logger.debug(f"Swept {len(expired)} expired cache entries")
        return len(expired)

    def get(self, key: str) -> Optional[Any]:
        """Return the cached value, or None on a miss."""
        self.sweep_expired()
        entry = self._entries.get(key)
        if entry is None or not self._is_valid(entry):
            return None
        return entry.value

    def set(self, key: str, value: Any, ttl: Optional[float] = None) -> None:
        self._entries[key] = CacheEntry(
            value=value,
            timestamp=self._clock(),
            ttl=self.ttl if ttl is None else ttl,
        )
        if len(self._entries) > self.max_entries:
            oldest = next(iter(self._entries))
            del self._entries[oldest]
            logger.debug(f"Cache full, evicted oldest entry: {oldest}")

    def valid_items(self, source: str) -> Iterator[Any]:
        """Values of the still-valid entries cached for one source."""
        self.sweep_expired()
        prefix = f"{source}:"
        for key, entry in list(self._entries.items()):
            if key.startswith(prefix) and self._is_valid(entry):
                yield entry.value

    def __contains__(self, key: str) -> bool:
        return key in self._entries

    def __len__(self) -> int:
        return len(self._entries)
