"""Application DTOs."""

from warden.application.dtos.permission import PermissionResult
from warden.application.dtos.principal import AuthorizationResult, Principal
from warden.application.dtos.role import RoleResult

__all__ = ["AuthorizationResult", "PermissionResult", "Principal", "RoleResult"]
