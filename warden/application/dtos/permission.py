"""DTOs for permission use cases (no dependency on ORM)."""

from dataclasses import dataclass


@dataclass(frozen=True)
class PermissionResult:
    """Permission read-model (result of get_by_name, create_permission)."""

    id: int
    name: str
    guard_name: str
