"""Route protection through require_permission, the exception handlers and team middleware."""

from typing import Annotated
from unittest.mock import AsyncMock

import pytest
from fastapi import Depends, FastAPI, Request
from httpx import ASGITransport, AsyncClient

from tests.conftest import CACHE_KEY, FakePermissionStore, permission_record, role_record
from warden.api import get_current_principal, require_permission
from warden.application.dtos import Principal
from warden.application.services import (
    AuthorizationService,
    PermissionCache,
    default_policies,
)
from warden.core.config import get_settings
from warden.core.exception_handlers import register_exception_handlers
from warden.core.lifespan import create_lifespan
from warden.core.middleware import TeamContextMiddleware
from warden.core.team_context import get_team_id
from warden.domain.exceptions import (
    AuthenticationException,
    PermissionStoreUnavailableException,
)
from warden.infrastructure.cache import MemoryCacheService

PRINCIPALS = {
    "editor": Principal(id=1, role_ids=frozenset({1}), role_names=frozenset({"editor"})),
    "admin": Principal(id=2, role_ids=frozenset({2}), role_names=frozenset({"admin"})),
    "root": Principal(id=3, role_names=frozenset({"super-admin"})),
}


def _principal_from_header(request: Request) -> Principal | None:
    return PRINCIPALS.get(request.headers.get("X-Test-User", ""))


@pytest.fixture
def app(permission_cache) -> FastAPI:
    app = FastAPI()
    register_exception_handlers(app)
    app.add_middleware(TeamContextMiddleware)
    app.state.permission_cache = permission_cache
    app.state.authorization_service = AuthorizationService(
        permission_cache, default_policies(["super-admin"])
    )
    app.dependency_overrides[get_current_principal] = _principal_from_header

    @app.get("/posts/{post_id}/edit")
    async def edit_post(
        post_id: int,
        principal: Annotated[Principal, Depends(require_permission("posts.edit|posts.*"))],
    ) -> dict:
        return {"post_id": post_id, "principal": principal.id}

    @app.get(
        "/users",
        dependencies=[
            Depends(require_permission(["users.view", "reports.view"], require_all=True))
        ],
    )
    async def list_users() -> dict:
        return {"users": []}

    @app.get("/team", dependencies=[Depends(require_permission("posts.view"))])
    async def current_team() -> dict:
        return {"team_id": get_team_id()}

    return app


@pytest.fixture
async def client(app: FastAPI):
    transport = ASGITransport(app=app)
    async with AsyncClient(transport=transport, base_url="http://test") as ac:
        yield ac


async def test_granted(client: AsyncClient) -> None:
    response = await client.get("/posts/5/edit", headers={"X-Test-User": "editor"})
    assert response.status_code == 200
    assert response.json() == {"post_id": 5, "principal": 1}


async def test_guest_gets_401(client: AsyncClient) -> None:
    response = await client.get("/posts/5/edit")
    assert response.status_code == 401
    data = response.json()
    assert data["error"] == "AUTHENTICATION_ERROR"
    assert data["message"] == "User is not logged in."


async def test_forbidden_hides_checked_permissions(client: AsyncClient) -> None:
    response = await client.get("/users", headers={"X-Test-User": "editor"})
    assert response.status_code == 403
    data = response.json()
    assert data["error"] == "PERMISSION_DENIED"
    assert data["details"] == {}


async def test_require_all(client: AsyncClient) -> None:
    response = await client.get("/users", headers={"X-Test-User": "admin"})
    assert response.status_code == 403

    response = await client.get("/users", headers={"X-Test-User": "root"})
    assert response.status_code == 200


async def test_store_outage_gets_503(client: AsyncClient, permission_store) -> None:
    permission_store.error = PermissionStoreUnavailableException("connection refused")
    response = await client.get("/posts/5/edit", headers={"X-Test-User": "editor"})
    assert response.status_code == 503
    assert response.json()["error"] == "STORE_UNAVAILABLE"


async def test_team_header_sets_context(client: AsyncClient) -> None:
    response = await client.get(
        "/team", headers={"X-Test-User": "editor", "X-Team-ID": "7"}
    )
    assert response.status_code == 200
    assert response.json() == {"team_id": "7"}

    response = await client.get("/team", headers={"X-Test-User": "editor"})
    assert response.json() == {"team_id": None}


async def test_lifespan_wires_state(monkeypatch: pytest.MonkeyPatch, tmp_path) -> None:
    monkeypatch.setenv("WARDEN_REDIS_ENABLED", "false")
    monkeypatch.setenv("WARDEN_DATABASE_URL", f"sqlite+aiosqlite:///{tmp_path / 'app.db'}")
    monkeypatch.setenv("WARDEN_SUPER_ADMIN_ROLES", "super-admin")
    get_settings.cache_clear()
    app = FastAPI()
    try:
        async with create_lifespan(app):
            assert isinstance(app.state.cache, MemoryCacheService)
            assert app.state.permission_cache.cache_key == "warden:permissions"
            assert app.state.authorization_service.permission_cache is app.state.permission_cache
    finally:
        get_settings.cache_clear()


async def test_team_role_without_team_header(app: FastAPI, client: AsyncClient) -> None:
    store = FakePermissionStore(
        [permission_record(1, "posts.edit", roles=[role_record(1, "editor", team_id=7)])]
    )
    cache = PermissionCache(store, MemoryCacheService(), cache_key=CACHE_KEY)
    app.state.authorization_service = AuthorizationService(cache, teams_enabled=True)

    response = await client.get("/posts/5/edit", headers={"X-Test-User": "editor"})
    assert response.status_code == 200

    response = await client.get(
        "/posts/5/edit", headers={"X-Test-User": "editor", "X-Team-ID": "7"}
    )
    assert response.status_code == 200

    response = await client.get(
        "/posts/5/edit", headers={"X-Test-User": "editor", "X-Team-ID": "8"}
    )
    assert response.status_code == 403


async def test_dependency_rejects_missing_principal() -> None:
    auth_svc = AsyncMock(spec=AuthorizationService)
    dependency = require_permission("posts.edit")
    with pytest.raises(AuthenticationException):
        await dependency(principal=None, auth_svc=auth_svc)
    auth_svc.require_any_permission.assert_awaited_once_with(None, "posts.edit", None)
