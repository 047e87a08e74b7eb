"""Domain entities: permission, role, and the hydrated permission graph."""

from warden.domain.entities.permission import PermissionEntity, PermissionGraph
from warden.domain.entities.role import RoleEntity

__all__ = ["PermissionEntity", "PermissionGraph", "RoleEntity"]
