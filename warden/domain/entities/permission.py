"""Permission domain entity and the hydrated permission graph.

PermissionGraph is the in-process view the permission cache publishes:
permissions in load order plus an arena of roles keyed by id. Permissions
hold role ids only, so two permissions sharing a role resolve to the same
RoleEntity instance.
"""

from __future__ import annotations

from collections.abc import Iterable, Mapping
from dataclasses import dataclass, field
from functools import cached_property
from typing import Any, ClassVar

from warden.domain.entities.role import RoleEntity
from warden.domain.wildcard import WildcardPermission


@dataclass(frozen=True)
class PermissionEntity:
    """Permission with the ids of the roles it is attached to."""

    FIELDS: ClassVar[tuple[str, ...]] = ("id", "name", "guard_name")

    id: int | str
    name: str
    guard_name: str
    role_ids: tuple[int | str, ...] = ()

    @classmethod
    def from_record(
        cls, record: dict[str, Any], role_ids: Iterable[int | str] = ()
    ) -> PermissionEntity:
        """Build from a decoded cache record; unrecognized keys are dropped."""
        return cls(
            **{k: record[k] for k in cls.FIELDS if k in record},
            role_ids=tuple(role_ids),
        )

    @cached_property
    def wildcard(self) -> WildcardPermission:
        """Parsed form of name (lazily, once per hydrated instance)."""
        return WildcardPermission(self.name)


@dataclass(frozen=True)
class PermissionGraph:
    """Immutable hydrated view: permissions in load order and the role arena."""

    permissions: tuple[PermissionEntity, ...] = ()
    roles: Mapping[int | str, RoleEntity] = field(default_factory=dict)

    def roles_of(self, permission: PermissionEntity) -> list[RoleEntity]:
        """Resolve a permission's role ids against the arena (shared instances)."""
        return [self.roles[rid] for rid in permission.role_ids if rid in self.roles]
