"""Domain layer: entities, wildcard permissions, enums, and exceptions.

No dependencies on infrastructure or presentation. Used by application
and infrastructure layers.
"""

from warden.domain.entities import PermissionEntity, PermissionGraph, RoleEntity
from warden.domain.enums import AuthorizationOutcome, CacheState, PolicyDecision
from warden.domain.exceptions import (
    AuthenticationException,
    AuthorizationException,
    CacheStoreUnavailableException,
    DatabaseNotConfiguredException,
    PermissionAlreadyExistsException,
    PermissionFormatException,
    PermissionNotFoundException,
    PermissionStoreUnavailableException,
    RoleAlreadyExistsException,
    RoleNotFoundException,
    StaleCacheFormat,
    StoreUnavailableException,
    WardenException,
)
from warden.domain.wildcard import WildcardPermission

__all__ = [
    # Entities
    "PermissionEntity",
    "PermissionGraph",
    "RoleEntity",
    "WildcardPermission",
    # Enums
    "AuthorizationOutcome",
    "CacheState",
    "PolicyDecision",
    # Exceptions
    "AuthenticationException",
    "AuthorizationException",
    "CacheStoreUnavailableException",
    "DatabaseNotConfiguredException",
    "PermissionAlreadyExistsException",
    "PermissionFormatException",
    "PermissionNotFoundException",
    "PermissionStoreUnavailableException",
    "RoleAlreadyExistsException",
    "RoleNotFoundException",
    "StaleCacheFormat",
    "StoreUnavailableException",
    "WardenException",
]
