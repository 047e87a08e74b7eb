"""Permission repository: lookup and create by (name, guard_name)."""

from __future__ import annotations

from sqlalchemy import select
from sqlalchemy.ext.asyncio import AsyncSession

from warden.application.dtos.permission import PermissionResult
from warden.infrastructure.persistence.models import Permission


def _to_result(permission: Permission) -> PermissionResult:
    return PermissionResult(
        id=permission.id,
        name=permission.name,
        guard_name=permission.guard_name,
    )


class PermissionRepository:
    """Permission table. Caller owns the transaction."""

    def __init__(self, db: AsyncSession) -> None:
        self.db = db

    async def get_by_name(self, name: str, guard_name: str) -> PermissionResult | None:
        result = await self.db.execute(
            select(Permission).where(
                Permission.name == name,
                Permission.guard_name == guard_name,
            )
        )
        permission = result.scalar_one_or_none()
        return _to_result(permission) if permission else None

    async def create_permission(self, name: str, guard_name: str) -> PermissionResult:
        permission = Permission(name=name, guard_name=guard_name)
        self.db.add(permission)
        await self.db.flush()
        await self.db.refresh(permission)
        return _to_result(permission)
