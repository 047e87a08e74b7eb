"""DTOs for role use cases (no dependency on ORM)."""

from dataclasses import dataclass


@dataclass(frozen=True)
class RoleResult:
    """Role read-model (result of get_by_id, get_by_name, create_role)."""

    id: int
    name: str
    guard_name: str
    team_id: int | None = None
    was_recently_created: bool = False
