"""Application layer: interfaces, DTOs, and services.

Depends only on domain, core, and protocol definitions (DIP).
Infrastructure implements the interfaces (cache stores, repositories).
"""

from warden.application.dtos import AuthorizationResult, Principal
from warden.application.interfaces import (
    IAuthorizationPolicy,
    ICacheStore,
    IPermissionRepository,
    IPermissionStore,
    IRoleRepository,
)
from warden.application.services import (
    AliasCodec,
    AuthorizationService,
    PermissionCache,
    RoleService,
)

__all__ = [
    "AliasCodec",
    "AuthorizationResult",
    "AuthorizationService",
    "IAuthorizationPolicy",
    "ICacheStore",
    "IPermissionRepository",
    "IPermissionStore",
    "IRoleRepository",
    "PermissionCache",
    "Principal",
    "RoleService",
]
