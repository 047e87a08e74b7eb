"""Redis-based backing store for the permission cache entry.

Provides async Redis get/set/delete with TTL and JSON serialization.
Unlike a best-effort cache, failures raise CacheStoreUnavailableException:
a permission check must not mistake an unreachable Redis for an empty one.
"""

from __future__ import annotations

import json
import logging
from collections.abc import Awaitable, Callable
from typing import Any, TypeVar

import redis.asyncio as redis

from warden.core.config import Settings, get_settings
from warden.domain.exceptions import CacheStoreUnavailableException

logger = logging.getLogger(__name__)

T = TypeVar("T")


class CacheService:
    """Async Redis cache store with TTL support.

    Uses warden.core.config for connection settings. Call connect() at
    startup and disconnect() at shutdown.
    """

    def __init__(
        self,
        redis_client: redis.Redis | None = None,
        settings: Settings | None = None,
    ) -> None:
        """Initialize cache service.

        Args:
            redis_client: Optional Redis client for testing or DI.
            settings: Optional settings; defaults to get_settings().
        """
        self.redis = redis_client
        self.settings = settings or get_settings()
        self._connected = redis_client is not None

    async def connect(self) -> None:
        """Establish Redis connection. Call on app startup."""
        if self.redis is not None:
            return
        try:
            self.redis = redis.Redis(
                host=self.settings.redis_host,
                port=self.settings.redis_port,
                db=self.settings.redis_db,
                password=(
                    self.settings.redis_password.get_secret_value()
                    if self.settings.redis_password
                    else None
                ),
                decode_responses=True,
                socket_connect_timeout=self.settings.redis_socket_timeout,
                socket_timeout=self.settings.redis_socket_timeout,
                socket_keepalive=True,
            )
            await self.redis.ping()
            self._connected = True
            logger.info(
                "Redis cache connected: %s:%s",
                self.settings.redis_host,
                self.settings.redis_port,
            )
        except (redis.ConnectionError, redis.TimeoutError) as e:
            logger.warning(
                "Redis connection failed: %s. Permission checks will fail until it is reachable.",
                e,
            )
            self._connected = False
            self.redis = None

    async def disconnect(self) -> None:
        """Close Redis connection. Call on app shutdown."""
        if self.redis:
            await self.redis.aclose()
            self.redis = None
            self._connected = False
            logger.info("Redis cache disconnected")

    async def _reconnect(self) -> bool:
        """Attempt to reconnect after disconnect. Returns True if reconnected."""
        if self.redis is not None:
            try:
                await self.redis.aclose()
            except redis.RedisError:
                logger.debug("Ignoring error while closing stale Redis client")
        self.redis = None
        self._connected = False
        await self.connect()
        return self._connected

    def is_available(self) -> bool:
        """Return True if Redis is connected and usable."""
        return self._connected and self.redis is not None

    async def _execute(
        self, op: str, key: str, call: Callable[[redis.Redis], Awaitable[T]]
    ) -> T:
        """Run call against Redis, reconnecting once on connection loss."""
        if not self.is_available() and not await self._reconnect():
            raise CacheStoreUnavailableException(f"redis not connected ({op} {key})")
        try:
            return await call(self.redis)
        except (redis.ConnectionError, redis.TimeoutError):
            if await self._reconnect():
                try:
                    return await call(self.redis)
                except redis.RedisError as e:
                    logger.exception("Cache %s error for key %s after reconnect", op, key)
                    raise CacheStoreUnavailableException(str(e)) from e
            logger.warning("Cache %s unavailable for key %s (Redis disconnected)", op, key)
            raise CacheStoreUnavailableException(
                f"redis disconnected ({op} {key})"
            ) from None
        except redis.RedisError as e:
            logger.exception("Cache %s error for key %s", op, key)
            raise CacheStoreUnavailableException(str(e)) from e

    async def get(self, key: str) -> Any | None:
        """Return cached value (JSON-deserialized) or None if missing.

        Raises:
            CacheStoreUnavailableException: If Redis cannot be reached.
        """
        value = await self._execute("get", key, lambda r: r.get(key))
        if value is None:
            logger.debug("Cache MISS: %s", key)
            return None
        logger.debug("Cache HIT: %s", key)
        return json.loads(value)

    async def set(self, key: str, value: Any, ttl: int = 300) -> bool:
        """Store value (JSON-serialized) with TTL in seconds."""
        serialized = json.dumps(value)
        await self._execute("set", key, lambda r: r.setex(key, ttl, serialized))
        logger.debug("Cache SET: %s (TTL: %ss)", key, ttl)
        return True

    async def delete(self, key: str) -> bool:
        """Remove key. Returns True if a key was deleted."""
        deleted = await self._execute("delete", key, lambda r: r.delete(key))
        logger.debug("Cache DELETE: %s", key)
        return bool(deleted)
