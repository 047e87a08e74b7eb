"""Role application service: administrative role/permission writes.

Every successful write invalidates the permission cache so the next check
reloads from the durable store. Invalidation runs inside the caller's unit
of work: when writes are committed later, call PermissionCache.forget()
again after commit, or a reload between the two may cache pre-commit data
until the TTL expires.
"""

from __future__ import annotations

from collections.abc import Iterable

from warden.application.dtos.permission import PermissionResult
from warden.application.dtos.role import RoleResult
from warden.application.interfaces.repositories import (
    IPermissionRepository,
    IRoleRepository,
)
from warden.application.services.authorization_service import (
    normalize_permission_names,
)
from warden.application.services.permission_cache import PermissionCache
from warden.core.logging import get_logger
from warden.domain.exceptions import (
    PermissionAlreadyExistsException,
    PermissionNotFoundException,
    RoleAlreadyExistsException,
    RoleNotFoundException,
)
from warden.domain.wildcard import WildcardPermission

logger = get_logger(__name__)


class RoleService:
    """Create roles and permissions and manage role-permission assignments."""

    def __init__(
        self,
        role_repo: IRoleRepository,
        permission_repo: IPermissionRepository,
        permission_cache: PermissionCache,
    ) -> None:
        self._role_repo = role_repo
        self._permission_repo = permission_repo
        self._permission_cache = permission_cache

    async def create_role(
        self, name: str, guard_name: str, team_id: int | None = None
    ) -> RoleResult:
        """Create a role. Raises RoleAlreadyExistsException if the name is taken."""
        if await self._role_repo.get_by_name(name, guard_name, team_id):
            raise RoleAlreadyExistsException(name, guard_name)
        role = await self._role_repo.create_role(name, guard_name, team_id)
        await self._permission_cache.forget()
        return role

    async def find_or_create_role(
        self, name: str, guard_name: str, team_id: int | None = None
    ) -> RoleResult:
        """Return the existing role or create it (was_recently_created=True)."""
        existing = await self._role_repo.get_by_name(name, guard_name, team_id)
        if existing:
            return existing
        return await self.create_role(name, guard_name, team_id)

    async def create_permission(self, name: str, guard_name: str) -> PermissionResult:
        """Create a permission after validating its wildcard syntax.

        Raises:
            PermissionFormatException: If name is not a valid permission string.
            PermissionAlreadyExistsException: If the name exists for the guard.
        """
        WildcardPermission(name)
        if await self._permission_repo.get_by_name(name, guard_name):
            raise PermissionAlreadyExistsException(name, guard_name)
        permission = await self._permission_repo.create_permission(name, guard_name)
        await self._permission_cache.forget()
        return permission

    async def find_or_create_permission(
        self, name: str, guard_name: str
    ) -> PermissionResult:
        """Return the existing permission or create it."""
        existing = await self._permission_repo.get_by_name(name, guard_name)
        if existing:
            return existing
        return await self.create_permission(name, guard_name)

    async def _get_role(self, role_id: int) -> RoleResult:
        role = await self._role_repo.get_by_id(role_id)
        if role is None:
            raise RoleNotFoundException(role_id)
        return role

    async def _resolve_permissions(
        self, names: Iterable[str], guard_name: str
    ) -> list[PermissionResult]:
        resolved = []
        for name in names:
            permission = await self._permission_repo.get_by_name(name, guard_name)
            if permission is None:
                raise PermissionNotFoundException(name, guard_name)
            resolved.append(permission)
        return resolved

    async def give_permission_to(
        self, role_id: int, permissions: str | Iterable[str]
    ) -> list[PermissionResult]:
        """Attach permissions (by name, in the role's guard) to a role.

        All names are resolved before anything is written.

        Raises:
            RoleNotFoundException: If the role does not exist.
            PermissionNotFoundException: If any name has no permission record.
        """
        role = await self._get_role(role_id)
        resolved = await self._resolve_permissions(
            normalize_permission_names(permissions), role.guard_name
        )
        attached = False
        for permission in resolved:
            if await self._role_repo.attach_permission(role.id, permission.id):
                attached = True
        if attached:
            await self._permission_cache.forget()
        return resolved

    async def revoke_permission_to(
        self, role_id: int, permissions: str | Iterable[str]
    ) -> list[PermissionResult]:
        """Detach permissions (by name) from a role. Unknown names raise PermissionNotFoundException."""
        role = await self._get_role(role_id)
        resolved = await self._resolve_permissions(
            normalize_permission_names(permissions), role.guard_name
        )
        detached = False
        for permission in resolved:
            if await self._role_repo.detach_permission(role.id, permission.id):
                detached = True
        if detached:
            await self._permission_cache.forget()
        return resolved

    async def create_role_with_permissions(
        self,
        name: str,
        guard_name: str,
        permissions: str | Iterable[str] | None = None,
        team_id: int | None = None,
    ) -> RoleResult:
        """Find or create a role and give it permissions, creating missing ones.

        permissions may be a "|"-separated string ("posts.edit|posts.delete").
        """
        role = await self.find_or_create_role(name, guard_name, team_id)
        names = normalize_permission_names(permissions or ())
        for permission_name in names:
            await self.find_or_create_permission(permission_name, guard_name)
        if names:
            await self.give_permission_to(role.id, names)
        logger.info(
            "Role `%s` %s",
            role.name,
            "created" if role.was_recently_created else "updated",
        )
        return role
