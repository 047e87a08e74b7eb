"""FastAPI boundary: dependency factories for permission checks."""

from warden.api.dependencies import (
    get_authorization_service,
    get_current_principal,
    get_permission_cache,
    require_permission,
)

__all__ = [
    "get_authorization_service",
    "get_current_principal",
    "get_permission_cache",
    "require_permission",
]
