"""Authorization service: permission checks against the cached permission graph."""

from __future__ import annotations

from collections.abc import Iterable, Sequence

from warden.application.dtos.principal import AuthorizationResult, Principal
from warden.application.interfaces.services import IAuthorizationPolicy
from warden.application.services.permission_cache import PermissionCache
from warden.application.services.policies import evaluate_policies
from warden.core import team_context
from warden.core.constants import PERMISSION_LIST_SEP
from warden.core.logging import get_logger
from warden.domain.entities import PermissionEntity, PermissionGraph
from warden.domain.enums import AuthorizationOutcome, PolicyDecision
from warden.domain.exceptions import AuthenticationException, AuthorizationException
from warden.domain.wildcard import WildcardPermission

logger = get_logger(__name__)


def normalize_permission_names(permissions: str | Iterable[str]) -> tuple[str, ...]:
    """Accept "a|b" or an iterable of names; strip whitespace and drop empties."""
    if isinstance(permissions, str):
        permissions = permissions.split(PERMISSION_LIST_SEP)
    return tuple(name.strip() for name in permissions if name and name.strip())


class AuthorizationService:
    """Answers single and multi-permission checks (OR / AND) for a principal.

    A permission is granted when a before-policy allows it, or when any
    permission held by the principal (directly or through a role) of the
    same guard wildcard-implies it. Store failures propagate, so checks
    never fail open.
    """

    def __init__(
        self,
        permission_cache: PermissionCache,
        policies: Sequence[IAuthorizationPolicy] = (),
        *,
        teams_enabled: bool = False,
    ) -> None:
        self.permission_cache = permission_cache
        self.policies = list(policies)
        self.teams_enabled = teams_enabled

    def _scoped_role_ids(
        self, principal: Principal, graph: PermissionGraph
    ) -> set[int | str]:
        """Principal's role ids, restricted to the current team scope when teams are on."""
        if not self.teams_enabled:
            return set(principal.role_ids)
        team_id = team_context.get_team_id()
        scoped = set()
        for role_id in principal.role_ids:
            role = graph.roles.get(role_id)
            if role is None or role.in_team_scope(team_id):
                scoped.add(role_id)
        return scoped

    async def granted_permissions(
        self, principal: Principal, guard_name: str | None = None
    ) -> list[PermissionEntity]:
        """Return permissions of guard_name held directly or through the principal's roles."""
        guard = guard_name or principal.guard_name
        graph = await self.permission_cache.get_graph()
        role_ids = self._scoped_role_ids(principal, graph)
        return [
            p
            for p in graph.permissions
            if p.guard_name == guard
            and (p.id in principal.permission_ids or role_ids.intersection(p.role_ids))
        ]

    async def granted_permission_names(
        self, principal: Principal, guard_name: str | None = None
    ) -> list[str]:
        """Names of granted_permissions, in load order."""
        return [p.name for p in await self.granted_permissions(principal, guard_name)]

    def _is_granted(
        self,
        principal: Principal,
        name: str,
        granted: list[PermissionEntity],
    ) -> bool:
        decision = evaluate_policies(self.policies, principal, name)
        if decision is PolicyDecision.ALLOW:
            return True
        if decision is PolicyDecision.DENY:
            return False
        requested = WildcardPermission(name)
        return any(p.wildcard.implies(requested) for p in granted)

    async def has_any_permission(
        self,
        principal: Principal | None,
        permissions: str | Iterable[str],
        guard_name: str | None = None,
    ) -> AuthorizationResult:
        """Return GRANTED on the first requested name the principal holds (OR).

        Unauthenticated principals get UNAUTHENTICATED before any matching.

        Raises:
            PermissionFormatException: If a requested name is malformed.
            StoreUnavailableException: If the permission cache cannot load.
        """
        names = normalize_permission_names(permissions)
        if principal is None or not principal.authenticated_for(guard_name):
            return AuthorizationResult(AuthorizationOutcome.UNAUTHENTICATED, names)

        granted = await self.granted_permissions(principal, guard_name)
        for name in names:
            if self._is_granted(principal, name, granted):
                return AuthorizationResult(
                    AuthorizationOutcome.GRANTED, names, (name,)
                )
        logger.debug(
            "Permission denied for principal %s: %s", principal.id, ", ".join(names)
        )
        return AuthorizationResult(AuthorizationOutcome.DENIED, names)

    async def has_all_permissions(
        self,
        principal: Principal | None,
        permissions: str | Iterable[str],
        guard_name: str | None = None,
    ) -> AuthorizationResult:
        """Return GRANTED only when every requested name is held (AND).

        An empty request is DENIED rather than vacuously granted.
        """
        names = normalize_permission_names(permissions)
        if principal is None or not principal.authenticated_for(guard_name):
            return AuthorizationResult(AuthorizationOutcome.UNAUTHENTICATED, names)

        granted = await self.granted_permissions(principal, guard_name)
        matched = tuple(n for n in names if self._is_granted(principal, n, granted))
        if names and len(matched) == len(names):
            return AuthorizationResult(AuthorizationOutcome.GRANTED, names, matched)
        return AuthorizationResult(AuthorizationOutcome.DENIED, names, matched)

    async def check_permission(
        self,
        principal: Principal | None,
        permission: str,
        guard_name: str | None = None,
    ) -> bool:
        """Return True if principal holds permission."""
        result = await self.has_any_permission(principal, [permission], guard_name)
        return result.granted

    @staticmethod
    def _raise_for(result: AuthorizationResult) -> AuthorizationResult:
        if result.outcome is AuthorizationOutcome.UNAUTHENTICATED:
            raise AuthenticationException()
        if result.outcome is AuthorizationOutcome.DENIED:
            raise AuthorizationException(permissions=list(result.checked))
        return result

    async def require_any_permission(
        self,
        principal: Principal | None,
        permissions: str | Iterable[str],
        guard_name: str | None = None,
    ) -> AuthorizationResult:
        """Raise AuthenticationException or AuthorizationException unless any name is held."""
        return self._raise_for(
            await self.has_any_permission(principal, permissions, guard_name)
        )

    async def require_all_permissions(
        self,
        principal: Principal | None,
        permissions: str | Iterable[str],
        guard_name: str | None = None,
    ) -> AuthorizationResult:
        """Raise AuthenticationException or AuthorizationException unless every name is held."""
        return self._raise_for(
            await self.has_all_permissions(principal, permissions, guard_name)
        )
