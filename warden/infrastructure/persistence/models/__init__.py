"""ORM models. Import order matters: permission defines the link table used by role."""

from warden.infrastructure.persistence.models.permission import (
    Permission,
    role_has_permissions,
)
from warden.infrastructure.persistence.models.role import Role

__all__ = ["Permission", "Role", "role_has_permissions"]
