"""Tests for domain entities (RoleEntity, PermissionEntity, PermissionGraph) and enums."""

import pytest

from warden.domain.entities import PermissionEntity, PermissionGraph, RoleEntity
from warden.domain.enums import AuthorizationOutcome, CacheState, PolicyDecision
from warden.domain.exceptions import PermissionFormatException


class TestEnums:
    def test_member_values(self) -> None:
        assert AuthorizationOutcome.GRANTED.value == "granted"
        assert AuthorizationOutcome.UNAUTHENTICATED == "unauthenticated"
        assert PolicyDecision.DEFER.value == "defer"
        assert [s.value for s in CacheState] == ["empty", "loading", "hydrated"]


class TestRoleEntity:
    def test_from_record_drops_unknown_keys(self) -> None:
        role = RoleEntity.from_record(
            {"id": 1, "name": "editor", "guard_name": "web", "color": "red"}
        )
        assert role == RoleEntity(id=1, name="editor", guard_name="web")

    @pytest.mark.parametrize(
        ("role_team", "scope", "expected"),
        [
            (None, None, True),
            (None, 5, True),
            (5, None, True),
            (5, 5, True),
            (5, "5", True),
            (5, 6, False),
        ],
    )
    def test_in_team_scope(self, role_team, scope, expected) -> None:
        role = RoleEntity(id=1, name="editor", guard_name="web", team_id=role_team)
        assert role.in_team_scope(scope) is expected


class TestPermissionEntity:
    def test_from_record(self) -> None:
        permission = PermissionEntity.from_record(
            {"id": 3, "name": "posts.*", "guard_name": "web", "extra": 1}, role_ids=[1, 2]
        )
        assert permission.role_ids == (1, 2)
        assert permission.name == "posts.*"

    def test_wildcard_parsed_once(self) -> None:
        permission = PermissionEntity(id=1, name="posts.*", guard_name="web")
        assert permission.wildcard is permission.wildcard
        assert permission.wildcard.implies("posts.edit")

    def test_malformed_name_raises_on_use(self) -> None:
        permission = PermissionEntity(id=1, name="posts..edit", guard_name="web")
        with pytest.raises(PermissionFormatException):
            permission.wildcard


class TestPermissionGraph:
    @pytest.fixture
    def graph(self) -> PermissionGraph:
        editor = RoleEntity(id=1, name="editor", guard_name="web")
        admin = RoleEntity(id=2, name="admin", guard_name="web")
        return PermissionGraph(
            permissions=(
                PermissionEntity(id=1, name="posts.edit", guard_name="web", role_ids=(1, 2)),
                PermissionEntity(id=2, name="users.*", guard_name="web", role_ids=(2,)),
                PermissionEntity(id=3, name="orphan", guard_name="web", role_ids=(9,)),
            ),
            roles={1: editor, 2: admin},
        )

    def test_roles_of_skips_unknown_ids(self, graph) -> None:
        assert graph.roles_of(graph.permissions[2]) == []
        assert [r.name for r in graph.roles_of(graph.permissions[0])] == ["editor", "admin"]
