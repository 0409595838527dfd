# sdk/cache.py
# Per-product inventory cache with a fixed time-to-live.

import logging
import time
from typing import Callable, Dict, Optional

from .models import InventoryRecord

logger = logging.getLogger(__name__)

INVENTORY_TTL_MS = 5 * 60 * 1000


def _now_ms() -> int:
    return int(time.time() * 1000)


class CacheEntry:
    """A cached inventory record and the epoch-ms time it was stored."""

    def __init__(self, data: InventoryRecord, timestamp: int):
        self.data = data
        self.timestamp = timestamp

    def is_fresh(self, now: int, ttl_ms: int) -> bool:
        return now - self.timestamp < ttl_ms


class InventoryCache:
    """
    In-memory map of product id -> CacheEntry.

    An entry is valid while ``now - timestamp < ttl_ms``. Expired entries
    are dropped lazily, on the next lookup of their key.

    Args:
        ttl_ms: entry lifetime in milliseconds (5 minutes by default)
        clock: zero-argument callable returning the current epoch-ms time
    """

    def __init__(self, ttl_ms: int = INVENTORY_TTL_MS, clock: Callable[[], int] = _now_ms):
        self._entries: Dict[str, CacheEntry] = {}
        self.ttl_ms = ttl_ms
        self.clock = clock

    def get(self, product_id: str) -> Optional[InventoryRecord]:
        entry = self._entries.get(product_id)
        if entry is None:
            logger.debug("inventory cache miss: %s", product_id)
            return None
        if not entry.is_fresh(self.clock(), self.ttl_ms):
            logger.debug("inventory cache expired: %s", product_id)
            del self._entries[product_id]
            return None
        logger.debug("inventory cache hit: %s", product_id)
        return entry.data

    def is_fresh(self, product_id: str) -> bool:
        entry = self._entries.get(product_id)
        return entry is not None and entry.is_fresh(self.clock(), self.ttl_ms)

    def set(self, product_id: str, data: InventoryRecord) -> None:
        self._entries[product_id] = CacheEntry(data, self.clock())

    def delete(self, product_id: str) -> bool:
        return self._entries.pop(product_id, None) is not None

    def clear(self) -> None:
        self._entries.clear()

    def __len__(self):
        return len(self._entries)

    def __contains__(self, product_id: str) -> bool:
        return self.is_fresh(product_id)
