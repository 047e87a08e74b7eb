"""Before-policies evaluated ahead of wildcard matching.

Each policy answers ALLOW, DENY, or DEFER; AuthorizationService takes the
first non-DEFER answer and only falls through to permission matching when
every policy defers.
"""

from __future__ import annotations

from collections.abc import Iterable

from warden.application.dtos.principal import Principal
from warden.application.interfaces.services import IAuthorizationPolicy
from warden.domain.enums import PolicyDecision


class SuperAdminPolicy:
    """Allow every permission to principals holding one of the given role names."""

    def __init__(self, role_names: Iterable[str]) -> None:
        self.role_names = frozenset(role_names)

    def evaluate(self, principal: Principal, permission: str) -> PolicyDecision:
        if self.role_names.intersection(principal.role_names):
            return PolicyDecision.ALLOW
        return PolicyDecision.DEFER


class BannedPrincipalPolicy:
    """Deny every permission to banned principals."""

    def evaluate(self, principal: Principal, permission: str) -> PolicyDecision:
        if principal.is_banned:
            return PolicyDecision.DENY
        return PolicyDecision.DEFER


def evaluate_policies(
    policies: Iterable[IAuthorizationPolicy], principal: Principal, permission: str
) -> PolicyDecision:
    """Return the first non-DEFER decision, or DEFER when every policy defers."""
    for policy in policies:
        decision = policy.evaluate(principal, permission)
        if decision is not PolicyDecision.DEFER:
            return decision
    return PolicyDecision.DEFER


def default_policies(super_admin_roles: Iterable[str] = ()) -> list[IAuthorizationPolicy]:
    """Super-admin bypass first, then the banned check (super admins are never denied)."""
    policies: list[IAuthorizationPolicy] = []
    role_names = list(super_admin_roles)
    if role_names:
        policies.append(SuperAdminPolicy(role_names))
    policies.append(BannedPrincipalPolicy())
    return policies
