"""Cache: backing stores for the permission cache entry and key builders.

CacheService (Redis) is used when settings.redis_enabled is true;
MemoryCacheService otherwise (single-process deployments and tests).
"""

from warden.core.config import Settings
from warden.infrastructure.cache.keys import permissions_key
from warden.infrastructure.cache.memory_cache import MemoryCacheService
from warden.infrastructure.cache.redis_cache import CacheService


def build_cache_store(settings: Settings) -> CacheService | MemoryCacheService:
    """Return the backing store selected by settings (not yet connected)."""
    if settings.redis_enabled:
        return CacheService(settings=settings)
    return MemoryCacheService()


__all__ = [
    "CacheService",
    "MemoryCacheService",
    "build_cache_store",
    "permissions_key",
]
