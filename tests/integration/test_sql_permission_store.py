"""Role/permission writes through RoleService against sqlite, read back through the cache."""

from unittest.mock import AsyncMock

import pytest

from warden.application.dtos import Principal
from warden.application.services import (
    AuthorizationService,
    PermissionCache,
    RoleService,
)
from warden.domain.enums import CacheState
from warden.domain.exceptions import (
    PermissionAlreadyExistsException,
    PermissionFormatException,
    PermissionNotFoundException,
    RoleAlreadyExistsException,
    RoleNotFoundException,
)
from warden.infrastructure.cache import MemoryCacheService, permissions_key
from warden.infrastructure.persistence.repositories import (
    PermissionRepository,
    RoleRepository,
    SqlPermissionStore,
)


@pytest.fixture
def permission_cache(sqlite_session_factory) -> PermissionCache:
    return PermissionCache(
        SqlPermissionStore(sqlite_session_factory),
        MemoryCacheService(),
        cache_key=permissions_key("it"),
        timeout=5.0,
    )


async def _create_role(session_factory, cache, name, permissions, guard_name="web"):
    async with session_factory() as session:
        async with session.begin():
            service = RoleService(
                RoleRepository(session), PermissionRepository(session), cache
            )
            role = await service.create_role_with_permissions(name, guard_name, permissions)
    await cache.forget()
    return role


async def test_fetch_permissions_with_roles(sqlite_session_factory, permission_cache) -> None:
    await _create_role(sqlite_session_factory, permission_cache, "editor", "posts.edit|posts.view")
    await _create_role(sqlite_session_factory, permission_cache, "admin", ["posts.*", "posts.edit"])

    records = await SqlPermissionStore(sqlite_session_factory).fetch_permissions_with_roles()
    assert [r["name"] for r in records] == ["posts.edit", "posts.view", "posts.*"]
    assert [role["name"] for role in records[0]["roles"]] == ["editor", "admin"]
    assert "created_at" in records[0]


async def test_cache_hydrates_from_database(sqlite_session_factory, permission_cache) -> None:
    role = await _create_role(
        sqlite_session_factory, permission_cache, "editor", "posts.edit|posts.view"
    )
    assert role.was_recently_created

    found = await permission_cache.get_permissions({"name": "posts.view"})
    assert len(found) == 1
    graph = await permission_cache.get_graph()
    assert [r.name for r in graph.roles_of(found[0])] == ["editor"]


async def test_grant_and_revoke_visible_after_forget(
    sqlite_session_factory, permission_cache
) -> None:
    role = await _create_role(sqlite_session_factory, permission_cache, "editor", "posts.edit")
    service = AuthorizationService(permission_cache)
    principal = Principal(id=1, role_ids=frozenset({role.id}))
    assert await service.check_permission(principal, "posts.edit")

    async with sqlite_session_factory() as session:
        async with session.begin():
            roles = RoleService(
                RoleRepository(session), PermissionRepository(session), permission_cache
            )
            await roles.revoke_permission_to(role.id, "posts.edit")
    await permission_cache.forget()

    assert not await service.check_permission(principal, "posts.edit")


async def test_existing_role_is_updated(sqlite_session_factory, permission_cache) -> None:
    first = await _create_role(sqlite_session_factory, permission_cache, "editor", "posts.edit")
    second = await _create_role(sqlite_session_factory, permission_cache, "editor", "posts.view")
    assert second.id == first.id
    assert not second.was_recently_created
    names = [p.name for p in await permission_cache.get_permissions()]
    assert names == ["posts.edit", "posts.view"]


async def test_role_already_exists(sqlite_session_factory, permission_cache) -> None:
    await _create_role(sqlite_session_factory, permission_cache, "editor", None)
    async with sqlite_session_factory() as session:
        service = RoleService(
            RoleRepository(session), PermissionRepository(session), permission_cache
        )
        with pytest.raises(RoleAlreadyExistsException):
            await service.create_role("editor", "web")
        # Same name under another guard is a different role.
        other = await service.create_role("editor", "api")
        assert other.guard_name == "api"


async def test_permission_errors(sqlite_session_factory, permission_cache) -> None:
    role = await _create_role(sqlite_session_factory, permission_cache, "editor", "posts.edit")
    async with sqlite_session_factory() as session:
        service = RoleService(
            RoleRepository(session), PermissionRepository(session), permission_cache
        )
        with pytest.raises(PermissionNotFoundException):
            await service.give_permission_to(role.id, "posts.delete")
        with pytest.raises(RoleNotFoundException):
            await service.give_permission_to(999, "posts.edit")
        with pytest.raises(PermissionAlreadyExistsException):
            await service.create_permission("posts.edit", "web")
        with pytest.raises(PermissionFormatException):
            await service.create_permission("posts..edit", "web")


async def test_give_existing_permission_does_not_forget(
    sqlite_session_factory, permission_cache
) -> None:
    role = await _create_role(sqlite_session_factory, permission_cache, "editor", "posts.edit")
    await permission_cache.get_graph()
    async with sqlite_session_factory() as session:
        service = RoleService(
            RoleRepository(session), PermissionRepository(session), permission_cache
        )
        await service.give_permission_to(role.id, "posts.edit")
    assert permission_cache.state is CacheState.HYDRATED


async def test_duplicate_link_keeps_transaction_usable(
    sqlite_session_factory, permission_cache, monkeypatch: pytest.MonkeyPatch
) -> None:
    async with sqlite_session_factory() as session:
        async with session.begin():
            role_repo = RoleRepository(session)
            permission_repo = PermissionRepository(session)
            service = RoleService(role_repo, permission_repo, permission_cache)
            role = await service.create_role_with_permissions("editor", "web", "posts.edit")
            permission = await permission_repo.get_by_name("posts.edit", "web")

            # Lose the race: the existence check misses a link another writer added.
            monkeypatch.setattr(role_repo, "_is_attached", AsyncMock(return_value=False))
            assert not await role_repo.attach_permission(role.id, permission.id)
            assert (await role_repo.get_by_id(role.id)).name == "editor"
    await permission_cache.forget()

    found = await permission_cache.get_permissions({"name": "posts.edit"})
    graph = await permission_cache.get_graph()
    assert [r.name for r in graph.roles_of(found[0])] == ["editor"]
