"""Permission ORM model and the role_has_permissions link table (RBAC)."""

from __future__ import annotations

from typing import TYPE_CHECKING

from sqlalchemy import Column, ForeignKey, Integer, String, Table, UniqueConstraint
from sqlalchemy.orm import Mapped, mapped_column, relationship

from warden.infrastructure.persistence.database import Base
from warden.infrastructure.persistence.models.mixins import IntIdMixin, TimestampMixin

if TYPE_CHECKING:
    from warden.infrastructure.persistence.models.role import Role

role_has_permissions = Table(
    "role_has_permissions",
    Base.metadata,
    Column(
        "permission_id",
        Integer,
        ForeignKey("permissions.id", ondelete="CASCADE"),
        primary_key=True,
    ),
    Column(
        "role_id",
        Integer,
        ForeignKey("roles.id", ondelete="CASCADE"),
        primary_key=True,
    ),
)


class Permission(IntIdMixin, TimestampMixin, Base):
    """Permission. Table: permissions. Unique (name, guard_name). Name is a wildcard pattern."""

    __tablename__ = "permissions"

    name: Mapped[str] = mapped_column(String(125), nullable=False)
    guard_name: Mapped[str] = mapped_column(String(125), nullable=False)

    roles: Mapped[list[Role]] = relationship(
        secondary=role_has_permissions, back_populates="permissions"
    )

    __table_args__ = (
        UniqueConstraint("name", "guard_name", name="uq_permissions_name_guard"),
    )
