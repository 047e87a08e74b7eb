"""Role ORM model. Roles are scoped by guard and, optionally, by team."""

from __future__ import annotations

from typing import TYPE_CHECKING

from sqlalchemy import Integer, String, UniqueConstraint
from sqlalchemy.orm import Mapped, mapped_column, relationship

from warden.infrastructure.persistence.database import Base
from warden.infrastructure.persistence.models.mixins import IntIdMixin, TimestampMixin
from warden.infrastructure.persistence.models.permission import role_has_permissions

if TYPE_CHECKING:
    from warden.infrastructure.persistence.models.permission import Permission


class Role(IntIdMixin, TimestampMixin, Base):
    """Role. Table: roles. Unique (name, guard_name, team_id); team_id None is global."""

    __tablename__ = "roles"

    name: Mapped[str] = mapped_column(String(125), nullable=False)
    guard_name: Mapped[str] = mapped_column(String(125), nullable=False)
    team_id: Mapped[int | None] = mapped_column(Integer, nullable=True, index=True)

    permissions: Mapped[list[Permission]] = relationship(
        secondary=role_has_permissions, back_populates="roles"
    )

    __table_args__ = (
        UniqueConstraint("name", "guard_name", "team_id", name="uq_roles_name_guard_team"),
    )
