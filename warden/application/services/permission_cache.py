"""Permission cache: load, compact, store, hydrate, and query role/permission data.

One cache entry under a fixed process-wide key holds every permission with
its roles. The entry is built from the durable store on a miss, compacted
with AliasCodec, written to the backing store with a TTL, and hydrated into
an immutable PermissionGraph kept in process memory until forget().

Staleness: the in-process view expires after the same TTL as the backing
entry, so writes that do not go through RoleService (or another caller of
forget(), possibly in another worker) are observed once the TTL expires.
Callers needing strict consistency must call forget() after their writes.
"""

from __future__ import annotations

import asyncio
import time
from collections.abc import Awaitable, Mapping
from types import MappingProxyType
from typing import Any, TypeVar

from warden.application.interfaces.services import ICacheStore, IPermissionStore
from warden.application.services.alias_codec import AliasCodec
from warden.core import team_context
from warden.core.constants import (
    PERMISSION_ALIAS_ALPHABET,
    ROLE_ALIAS_ALPHABET,
    ROLES_RELATION_ALIAS,
    ROLES_RELATION_FIELD,
)
from warden.core.logging import get_logger
from warden.domain.entities import PermissionEntity, PermissionGraph, RoleEntity
from warden.domain.enums import CacheState
from warden.domain.exceptions import (
    CacheStoreUnavailableException,
    PermissionStoreUnavailableException,
    StaleCacheFormat,
    StoreUnavailableException,
)
from warden.shared.utils.comparison import loosely_equal

logger = get_logger(__name__)

T = TypeVar("T")

DEFAULT_TTL = 24 * 60 * 60


def _matches(obj: Any, filters: Mapping[str, Any] | None) -> bool:
    if not filters:
        return True
    return all(
        loosely_equal(getattr(obj, attr, None), value)
        for attr, value in filters.items()
    )


class PermissionCache:
    """Process-wide permission cache with single-flight loading.

    Construct once at startup and share by reference. Concurrent callers
    during a load wait on one in-flight load; the hydrated view is swapped
    in as a whole, so readers see the previous view or the new one.
    """

    def __init__(
        self,
        permission_store: IPermissionStore,
        cache_store: ICacheStore,
        *,
        cache_key: str,
        ttl: float = DEFAULT_TTL,
        timeout: float | None = None,
    ) -> None:
        self._permission_store = permission_store
        self._cache_store = cache_store
        self.cache_key = cache_key
        self.ttl = ttl
        self.timeout = timeout
        self._graph: PermissionGraph | None = None
        self._loaded_at = 0.0
        self._generation = 0
        self._loading = False
        self._lock = asyncio.Lock()

    def _current_graph(self) -> PermissionGraph | None:
        """Return the hydrated view unless it is older than ttl."""
        graph = self._graph
        if graph is not None and time.monotonic() - self._loaded_at >= self.ttl:
            logger.debug("Permission cache view expired: %s", self.cache_key)
            self._graph = None
            return None
        return graph

    @property
    def state(self) -> CacheState:
        if self._current_graph() is not None:
            return CacheState.HYDRATED
        if self._loading:
            return CacheState.LOADING
        return CacheState.EMPTY

    # ---- Team scope (plumbing only; never applied here) ----

    def set_team_id(self, team_id: Any) -> None:
        """Set the team scope for role queries in the current context."""
        team_context.set_team_id(team_id)

    def get_team_id(self) -> int | str | None:
        """Return the team scope for the current context, if any."""
        return team_context.get_team_id()

    # ---- Queries ----

    async def get_graph(self) -> PermissionGraph:
        """Return the hydrated view, loading it first when the slot is empty or expired.

        Raises:
            StoreUnavailableException: If the backing or durable store fails
                or times out. Nothing is cached; the next call retries.
        """
        graph = self._current_graph()
        if graph is not None:
            return graph
        async with self._lock:
            graph = self._current_graph()
            if graph is not None:
                return graph
            return await self._load()

    async def get_permissions(
        self,
        filters: Mapping[str, Any] | None = None,
        only_one: bool = False,
    ) -> list[PermissionEntity]:
        """Return cached permissions whose attributes loosely equal every filter value.

        Args:
            filters: Attribute -> value pairs (e.g. {"name": "posts.edit", "guard_name": "web"}).
            only_one: Return at most the first match in load order.

        Returns:
            Matching permissions; empty list when nothing matches.
        """
        graph = await self.get_graph()
        matches = (p for p in graph.permissions if _matches(p, filters))
        if only_one:
            first = next(matches, None)
            return [first] if first is not None else []
        return list(matches)

    async def get_roles(
        self, filters: Mapping[str, Any] | None = None
    ) -> list[RoleEntity]:
        """Return cached roles (attached to at least one permission) matching filters."""
        graph = await self.get_graph()
        return [r for r in graph.roles.values() if _matches(r, filters)]

    # ---- Invalidation ----

    async def forget(self) -> bool:
        """Drop the hydrated view and evict the backing store entry.

        The next query reloads from the durable store even if the TTL has
        not expired. Waits for an in-flight load so its backing store write
        cannot land after the eviction.

        Returns:
            True if the backing store removed the entry.
        """
        # Readers stop using the old view right away.
        self.clear_class_permissions()
        async with self._lock:
            self.clear_class_permissions()
            deleted = await self._call(
                self._cache_store.delete(self.cache_key),
                CacheStoreUnavailableException,
            )
        logger.info("Permission cache forgotten: %s", self.cache_key)
        return bool(deleted)

    def clear_class_permissions(self) -> None:
        """Drop only the in-process view (e.g. at worker start-up)."""
        self._generation += 1
        self._graph = None

    # ---- Load path ----

    async def _call(
        self, awaitable: Awaitable[T], error: type[StoreUnavailableException]
    ) -> T:
        try:
            return await asyncio.wait_for(awaitable, timeout=self.timeout)
        except asyncio.TimeoutError:
            raise error(f"timed out after {self.timeout}s") from None

    async def _load(self) -> PermissionGraph:
        generation = self._generation
        self._loading = True
        try:
            entry = await self._fetch_entry(generation)
            graph = self._hydrate(entry)
        except StoreUnavailableException:
            logger.exception("Permission cache load failed: %s", self.cache_key)
            raise
        finally:
            self._loading = False
        if generation == self._generation:
            self._graph = graph
            self._loaded_at = time.monotonic()
        else:
            logger.debug("Permission cache invalidated during load; not publishing")
        logger.info(
            "Permission cache hydrated: %s permissions, %s roles",
            len(graph.permissions),
            len(graph.roles),
        )
        return graph

    async def _fetch_entry(self, generation: int) -> dict[str, Any]:
        entry = await self._call(
            self._cache_store.get(self.cache_key), CacheStoreUnavailableException
        )
        if entry is not None:
            try:
                self._check_format(entry)
                return entry
            except StaleCacheFormat as exc:
                logger.warning("%s; forcing reload", exc.message)
                await self._call(
                    self._cache_store.delete(self.cache_key),
                    CacheStoreUnavailableException,
                )
        entry = await self._serialize_for_cache()
        # A forget() during the durable query must not be undone by this write.
        if generation == self._generation:
            await self._call(
                self._cache_store.set(self.cache_key, entry, self.ttl),
                CacheStoreUnavailableException,
            )
        return entry

    def _check_format(self, entry: Any) -> None:
        if not isinstance(entry, dict) or "alias" not in entry:
            raise StaleCacheFormat(self.cache_key)
        if (entry.get("permissions") or entry.get("roles")) and not entry["alias"]:
            raise StaleCacheFormat(self.cache_key)

    async def _serialize_for_cache(self) -> dict[str, Any]:
        """Query the durable store and build the compact cache entry."""
        records = await self._call(
            self._permission_store.fetch_permissions_with_roles(),
            PermissionStoreUnavailableException,
        )
        codec = AliasCodec()
        cached_roles: dict[Any, dict[str, Any]] = {}
        permissions: list[dict[str, Any]] = []

        for record in records:
            fields = {k: v for k, v in record.items() if k != ROLES_RELATION_FIELD}
            if not codec:
                codec.assign_aliases(fields, PERMISSION_ALIAS_ALPHABET)
            item = codec.encode(fields)
            roles = record.get(ROLES_RELATION_FIELD) or []
            if roles:
                if not codec.has_alias(ROLES_RELATION_FIELD):
                    codec.reserve(ROLES_RELATION_FIELD, ROLES_RELATION_ALIAS)
                    codec.assign_aliases(roles[0], ROLE_ALIAS_ALPHABET)
                role_ids = []
                for role in roles:
                    if role["id"] not in cached_roles:
                        cached_roles[role["id"]] = codec.encode(role)
                    role_ids.append(role["id"])
                item[ROLES_RELATION_ALIAS] = role_ids
            permissions.append(item)

        logger.debug(
            "Serialized %s permissions and %s roles for cache",
            len(permissions),
            len(cached_roles),
        )
        return {
            "alias": codec.inverse(),
            "permissions": permissions,
            "roles": list(cached_roles.values()),
        }

    @staticmethod
    def _hydrate(entry: dict[str, Any]) -> PermissionGraph:
        """Decode roles into the arena, then permissions referencing it by id."""
        inverse = entry["alias"]
        roles: dict[Any, RoleEntity] = {}
        for item in entry.get("roles") or []:
            role = RoleEntity.from_record(AliasCodec.decode(item, inverse))
            roles.setdefault(role.id, role)

        permissions = tuple(
            PermissionEntity.from_record(
                AliasCodec.decode(
                    {k: v for k, v in item.items() if k != ROLES_RELATION_ALIAS},
                    inverse,
                ),
                role_ids=item.get(ROLES_RELATION_ALIAS) or (),
            )
            for item in entry.get("permissions") or []
        )
        return PermissionGraph(permissions=permissions, roles=MappingProxyType(roles))
