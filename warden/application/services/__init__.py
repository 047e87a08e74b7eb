"""Application services: alias codec, permission cache, authorization, roles."""

from warden.application.services.alias_codec import AliasCodec
from warden.application.services.authorization_service import (
    AuthorizationService,
    normalize_permission_names,
)
from warden.application.services.permission_cache import PermissionCache
from warden.application.services.policies import (
    BannedPrincipalPolicy,
    SuperAdminPolicy,
    default_policies,
    evaluate_policies,
)
from warden.application.services.role_service import RoleService

__all__ = [
    "AliasCodec",
    "AuthorizationService",
    "BannedPrincipalPolicy",
    "PermissionCache",
    "RoleService",
    "SuperAdminPolicy",
    "default_policies",
    "evaluate_policies",
    "normalize_permission_names",
]
