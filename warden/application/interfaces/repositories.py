"""Repository interfaces (ports) for administrative role/permission writes."""

from __future__ import annotations

from typing import TYPE_CHECKING, Protocol

if TYPE_CHECKING:
    from warden.application.dtos.permission import PermissionResult
    from warden.application.dtos.role import RoleResult


class IRoleRepository(Protocol):
    """Role persistence used by RoleService."""

    async def get_by_id(self, role_id: int) -> RoleResult | None:
        """Return role by id or None."""

    async def get_by_name(
        self, name: str, guard_name: str, team_id: int | None = None
    ) -> RoleResult | None:
        """Return role by (name, guard_name, team_id) or None."""

    async def create_role(
        self, name: str, guard_name: str, team_id: int | None = None
    ) -> RoleResult:
        """Insert a role and return it."""

    async def attach_permission(self, role_id: int, permission_id: int) -> bool:
        """Link permission to role. Returns False if already linked."""

    async def detach_permission(self, role_id: int, permission_id: int) -> bool:
        """Unlink permission from role. Returns False if not linked."""


class IPermissionRepository(Protocol):
    """Permission persistence used by RoleService."""

    async def get_by_name(self, name: str, guard_name: str) -> PermissionResult | None:
        """Return permission by (name, guard_name) or None."""

    async def create_permission(self, name: str, guard_name: str) -> PermissionResult:
        """Insert a permission and return it."""
