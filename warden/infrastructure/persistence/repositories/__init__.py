"""Persistence repositories. Re-exports for dependency injection."""

from warden.infrastructure.persistence.repositories.permission_repo import (
    PermissionRepository,
)
from warden.infrastructure.persistence.repositories.permission_store import (
    SqlPermissionStore,
)
from warden.infrastructure.persistence.repositories.role_repo import RoleRepository

__all__ = ["PermissionRepository", "RoleRepository", "SqlPermissionStore"]
