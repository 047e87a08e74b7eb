"""Durable permission store: bulk read of every permission with its roles.

Implements IPermissionStore for the permission cache load path. Each call
opens its own session, since the cache is shared across requests.
"""

from __future__ import annotations

import logging
from typing import Any

from sqlalchemy import inspect, select
from sqlalchemy.exc import SQLAlchemyError
from sqlalchemy.ext.asyncio import AsyncSession, async_sessionmaker
from sqlalchemy.orm import selectinload

from warden.domain.exceptions import PermissionStoreUnavailableException
from warden.infrastructure.persistence.models import Permission

logger = logging.getLogger(__name__)


def model_to_record(obj: Any) -> dict[str, Any]:
    """Return column attributes of an ORM instance as a plain dict."""
    return {attr.key: getattr(obj, attr.key) for attr in inspect(obj).mapper.column_attrs}


class SqlPermissionStore:
    """Reads permissions (ordered by id) with their roles (ordered by id)."""

    def __init__(self, session_factory: async_sessionmaker[AsyncSession]) -> None:
        self._session_factory = session_factory

    async def fetch_permissions_with_roles(self) -> list[dict[str, Any]]:
        """Return [{**permission_columns, "roles": [role_columns, ...]}, ...].

        Raises:
            PermissionStoreUnavailableException: On any database error.
        """
        try:
            async with self._session_factory() as session:
                result = await session.execute(
                    select(Permission)
                    .options(selectinload(Permission.roles))
                    .order_by(Permission.id)
                )
                permissions = result.scalars().all()
                return [
                    {
                        **model_to_record(permission),
                        "roles": [
                            model_to_record(role)
                            for role in sorted(permission.roles, key=lambda r: r.id)
                        ],
                    }
                    for permission in permissions
                ]
        except SQLAlchemyError as e:
            logger.exception("Permission store query failed")
            raise PermissionStoreUnavailableException(str(e)) from e
