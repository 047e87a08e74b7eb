"""Pytest configuration and fixtures for warden.

Unit tests use an in-memory durable store fake and MemoryCacheService.
Integration tests use SQLAlchemy against a temporary sqlite+aiosqlite file.
"""

import asyncio
from typing import Any

import pytest

from warden.application.services.permission_cache import PermissionCache
from warden.core.config import get_settings
from warden.infrastructure.cache import MemoryCacheService, permissions_key
from warden.infrastructure.persistence import database
from warden.infrastructure.persistence.database import Base
from warden.infrastructure.persistence.models import (
    Permission,
    Role,
    role_has_permissions,
)

CACHE_KEY = permissions_key("test")


class FakePermissionStore:
    """IPermissionStore double: returns a copy of records and counts queries.

    Set delay to hold each query open (for concurrency tests) and error to
    make the next queries raise.
    """

    def __init__(self, records: list[dict[str, Any]] | None = None) -> None:
        self.records = records if records is not None else []
        self.calls = 0
        self.delay = 0.0
        self.error: Exception | None = None

    async def fetch_permissions_with_roles(self) -> list[dict[str, Any]]:
        self.calls += 1
        if self.delay:
            await asyncio.sleep(self.delay)
        if self.error is not None:
            raise self.error
        return [
            {**r, "roles": [dict(role) for role in r.get("roles", [])]}
            for r in self.records
        ]


def role_record(
    role_id: int, name: str, guard_name: str = "web", team_id: Any = None
) -> dict[str, Any]:
    return {
        "id": role_id,
        "name": name,
        "guard_name": guard_name,
        "team_id": team_id,
        "created_at": "2025-01-15T12:00:00Z",
        "updated_at": "2025-01-15T12:00:00Z",
    }


def permission_record(
    permission_id: int,
    name: str,
    guard_name: str = "web",
    roles: list[dict[str, Any]] | None = None,
) -> dict[str, Any]:
    return {
        "id": permission_id,
        "name": name,
        "guard_name": guard_name,
        "created_at": "2025-01-15T12:00:00Z",
        "updated_at": "2025-01-15T12:00:00Z",
        "roles": roles or [],
    }


@pytest.fixture
def editor_role() -> dict[str, Any]:
    return role_record(1, "editor")


@pytest.fixture
def admin_role() -> dict[str, Any]:
    return role_record(2, "admin")


@pytest.fixture
def permission_store(editor_role, admin_role) -> FakePermissionStore:
    """Seeded store: editor holds posts.edit and posts.view; admin holds posts.* and users.*."""
    return FakePermissionStore(
        [
            permission_record(1, "posts.edit", roles=[editor_role]),
            permission_record(2, "posts.view", roles=[editor_role]),
            permission_record(3, "posts.*", roles=[admin_role]),
            permission_record(4, "users.*", roles=[admin_role]),
            permission_record(5, "reports.export", guard_name="api"),
        ]
    )


@pytest.fixture
def cache_store() -> MemoryCacheService:
    return MemoryCacheService()


@pytest.fixture
def permission_cache(
    permission_store: FakePermissionStore, cache_store: MemoryCacheService
) -> PermissionCache:
    return PermissionCache(
        permission_store,
        cache_store,
        cache_key=CACHE_KEY,
        ttl=60,
        timeout=1.0,
    )


@pytest.fixture
async def sqlite_session_factory(tmp_path, monkeypatch: pytest.MonkeyPatch):
    """Session factory bound to a fresh sqlite database with all tables created."""
    monkeypatch.setenv("WARDEN_REDIS_ENABLED", "false")
    get_settings.cache_clear()
    engine = database.configure_engine(f"sqlite+aiosqlite:///{tmp_path / 'warden.db'}")
    async with engine.begin() as conn:
        await conn.run_sync(
            Base.metadata.create_all,
            tables=[Role.__table__, Permission.__table__, role_has_permissions],
        )
    yield database.get_session_factory()
    await database.dispose_engine()
    get_settings.cache_clear()
