"""Permission dependencies (composition root for route protection).

Usage in a host app:

    @router.get("/posts", dependencies=[Depends(require_permission("posts.view|posts.*"))])

The host supplies the principal: either set request.state.principal in its
auth middleware, or override get_current_principal via
app.dependency_overrides.
"""

from __future__ import annotations

from collections.abc import Iterable
from typing import Annotated

from fastapi import Depends, Request

from warden.application.dtos.principal import Principal
from warden.application.services.authorization_service import AuthorizationService
from warden.application.services.permission_cache import PermissionCache
from warden.domain.exceptions import AuthenticationException


def get_permission_cache(request: Request) -> PermissionCache:
    """PermissionCache built in the lifespan (app.state.permission_cache)."""
    return request.app.state.permission_cache


def get_authorization_service(request: Request) -> AuthorizationService:
    """AuthorizationService built in the lifespan (app.state.authorization_service)."""
    return request.app.state.authorization_service


async def get_current_principal(request: Request) -> Principal | None:
    """Principal set by the host's auth layer on request.state; None for guests."""
    return getattr(request.state, "principal", None)


def require_permission(
    permissions: str | Iterable[str],
    guard_name: str | None = None,
    *,
    require_all: bool = False,
):
    """Dependency factory: 401 for guests, 403 unless the principal holds the permissions.

    Args:
        permissions: Names or "a|b" string; any one suffices unless require_all.
        guard_name: Guard the principal must be authenticated under.
        require_all: Require every name (AND) instead of any (OR).
    """
    names = permissions if isinstance(permissions, str) else list(permissions)

    async def _require(
        principal: Annotated[Principal | None, Depends(get_current_principal)],
        auth_svc: Annotated[AuthorizationService, Depends(get_authorization_service)],
    ) -> Principal:
        if require_all:
            await auth_svc.require_all_permissions(principal, names, guard_name)
        else:
            await auth_svc.require_any_permission(principal, names, guard_name)
        if principal is None:
            raise AuthenticationException()
        return principal

    return _require
