"""DTOs for authorization checks (no dependency on ORM or web framework)."""

from __future__ import annotations

from dataclasses import dataclass, field

from warden.domain.enums import AuthorizationOutcome


@dataclass(frozen=True)
class Principal:
    """Authenticated subject as resolved by the host application.

    role_ids (and their names, role_names) are the roles assigned to the
    principal; permission_ids are permissions granted directly.
    guard_name is the authentication context the principal logged in under.
    """

    id: int | str
    guard_name: str = "web"
    role_ids: frozenset[int | str] = field(default_factory=frozenset)
    role_names: frozenset[str] = field(default_factory=frozenset)
    permission_ids: frozenset[int | str] = field(default_factory=frozenset)
    is_authenticated: bool = True
    is_banned: bool = False

    def authenticated_for(self, guard_name: str | None) -> bool:
        """Return True if authenticated under guard_name (any guard when None)."""
        if not self.is_authenticated:
            return False
        return guard_name is None or guard_name == self.guard_name


@dataclass(frozen=True)
class AuthorizationResult:
    """Outcome of has_any_permission / has_all_permissions.

    checked lists the requested names (diagnostics, not for end users);
    matched holds the requested names that were granted.
    """

    outcome: AuthorizationOutcome
    checked: tuple[str, ...] = ()
    matched: tuple[str, ...] = ()

    @property
    def granted(self) -> bool:
        return self.outcome is AuthorizationOutcome.GRANTED

    def __bool__(self) -> bool:
        return self.granted
