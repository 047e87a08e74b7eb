"""In-process cache store with TTL.

Used when Redis is disabled and in tests. Values are JSON round-tripped
on write so cached data has the same shape as with Redis.
"""

from __future__ import annotations

import json
import logging
import time
from typing import Any

logger = logging.getLogger(__name__)


class MemoryCacheService:
    """Dict-backed cache with per-key expiry (monotonic clock)."""

    def __init__(self) -> None:
        self._data: dict[str, tuple[float, str]] = {}

    async def get(self, key: str) -> Any | None:
        item = self._data.get(key)
        if item is None:
            logger.debug("Cache MISS: %s", key)
            return None
        expires_at, serialized = item
        if expires_at <= time.monotonic():
            del self._data[key]
            logger.debug("Cache EXPIRED: %s", key)
            return None
        logger.debug("Cache HIT: %s", key)
        return json.loads(serialized)

    async def set(self, key: str, value: Any, ttl: int = 300) -> bool:
        self._data[key] = (time.monotonic() + ttl, json.dumps(value))
        logger.debug("Cache SET: %s (TTL: %ss)", key, ttl)
        return True

    async def delete(self, key: str) -> bool:
        deleted = self._data.pop(key, None) is not None
        logger.debug("Cache DELETE: %s", key)
        return deleted
