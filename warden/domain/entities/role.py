"""Role domain entity (hydrated from the permission cache)."""

from __future__ import annotations

from dataclasses import dataclass
from typing import Any, ClassVar

from warden.shared.utils.comparison import loosely_equal


@dataclass(frozen=True)
class RoleEntity:
    """Role as seen by authorization checks. team_id None means a global role."""

    FIELDS: ClassVar[tuple[str, ...]] = ("id", "name", "guard_name", "team_id")

    id: int | str
    name: str
    guard_name: str
    team_id: int | str | None = None

    @classmethod
    def from_record(cls, record: dict[str, Any]) -> RoleEntity:
        """Build from a decoded cache record; unrecognized keys are dropped."""
        return cls(**{k: record[k] for k in cls.FIELDS if k in record})

    def in_team_scope(self, team_id: int | str | None) -> bool:
        """Return True if no scope is set, the role is global, or it belongs to team_id.

        "5" matches 5.
        """
        return team_id is None or self.team_id is None or loosely_equal(self.team_id, team_id)
