"""Role repository: roles and role-permission assignments."""

from __future__ import annotations

from sqlalchemy import delete, insert, select
from sqlalchemy.exc import IntegrityError
from sqlalchemy.ext.asyncio import AsyncSession

from warden.application.dtos.role import RoleResult
from warden.infrastructure.persistence.models import Role, role_has_permissions


def _to_result(role: Role, *, was_recently_created: bool = False) -> RoleResult:
    return RoleResult(
        id=role.id,
        name=role.name,
        guard_name=role.guard_name,
        team_id=role.team_id,
        was_recently_created=was_recently_created,
    )


class RoleRepository:
    """Role table and role_has_permissions link rows. Caller owns the transaction."""

    def __init__(self, db: AsyncSession) -> None:
        self.db = db

    async def get_by_id(self, role_id: int) -> RoleResult | None:
        role = await self.db.get(Role, role_id)
        return _to_result(role) if role else None

    async def get_by_name(
        self, name: str, guard_name: str, team_id: int | None = None
    ) -> RoleResult | None:
        team_clause = Role.team_id.is_(None) if team_id is None else Role.team_id == team_id
        result = await self.db.execute(
            select(Role).where(
                Role.name == name,
                Role.guard_name == guard_name,
                team_clause,
            )
        )
        role = result.scalar_one_or_none()
        return _to_result(role) if role else None

    async def create_role(
        self, name: str, guard_name: str, team_id: int | None = None
    ) -> RoleResult:
        role = Role(name=name, guard_name=guard_name, team_id=team_id)
        self.db.add(role)
        await self.db.flush()
        await self.db.refresh(role)
        return _to_result(role, was_recently_created=True)

    async def _is_attached(self, role_id: int, permission_id: int) -> bool:
        result = await self.db.execute(
            select(role_has_permissions.c.role_id).where(
                role_has_permissions.c.role_id == role_id,
                role_has_permissions.c.permission_id == permission_id,
            )
        )
        return result.first() is not None

    async def attach_permission(self, role_id: int, permission_id: int) -> bool:
        """Link permission to role. Returns False if already linked."""
        if await self._is_attached(role_id, permission_id):
            return False
        try:
            # Savepoint so a lost insert race leaves the outer transaction usable.
            async with self.db.begin_nested():
                await self.db.execute(
                    insert(role_has_permissions).values(
                        role_id=role_id, permission_id=permission_id
                    )
                )
        except IntegrityError:
            return False
        return True

    async def detach_permission(self, role_id: int, permission_id: int) -> bool:
        """Unlink permission from role. Returns False if not linked."""
        if not await self._is_attached(role_id, permission_id):
            return False
        await self.db.execute(
            delete(role_has_permissions).where(
                role_has_permissions.c.role_id == role_id,
                role_has_permissions.c.permission_id == permission_id,
            )
        )
        return True
