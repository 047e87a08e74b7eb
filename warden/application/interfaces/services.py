"""Service interfaces (ports) for the application layer.

Protocols define contracts for the backing cache store, the durable
permission store, and before-policies (DIP).
"""

from __future__ import annotations

from typing import TYPE_CHECKING, Any, Protocol

if TYPE_CHECKING:
    from warden.application.dtos.principal import Principal
    from warden.domain.enums import PolicyDecision


class ICacheStore(Protocol):
    """Key-value backing store for the serialized permission entry.

    Failures must raise CacheStoreUnavailableException rather than look
    like a miss, so authorization never fails open.
    """

    async def get(self, key: str) -> Any:
        """Return cached value or None when the key is missing or expired."""

    async def set(self, key: str, value: Any, ttl: int) -> bool:
        """Store value with TTL in seconds. Returns True on success."""

    async def delete(self, key: str) -> bool:
        """Remove key. Returns True if something was deleted."""


class IPermissionStore(Protocol):
    """Durable store bulk read used to (re)populate the permission cache."""

    async def fetch_permissions_with_roles(self) -> list[dict[str, Any]]:
        """Return every permission as a field mapping plus a "roles" list of role mappings."""


class IAuthorizationPolicy(Protocol):
    """Before-policy evaluated ahead of wildcard matching (e.g. super-admin bypass)."""

    def evaluate(self, principal: Principal, permission: str) -> PolicyDecision:
        """Return ALLOW, DENY, or DEFER for this principal and requested permission."""
