"""Wildcard permission parsing and implication.

Permission strings are dot-separated parts, each part a comma-separated
set of subparts; "*" as a subpart satisfies the whole position:

    "posts.*"           implies "posts.edit"
    "posts.edit,delete" implies "posts.edit" but not "posts.view"
    "posts"             implies "posts.edit" (shorter grant covers the rest)
"""

from __future__ import annotations

from warden.domain.exceptions import PermissionFormatException

WILDCARD_TOKEN = "*"
PART_DELIMITER = "."
SUBPART_DELIMITER = ","


class WildcardPermission:
    """Parsed permission pattern. Validation runs on construction.

    Raises:
        PermissionFormatException: If the string is empty or has an empty
            part or subpart (e.g. "a..b", "a,,b", "a.").
    """

    __slots__ = ("permission", "parts")

    def __init__(self, permission: str) -> None:
        self.permission = permission
        self.parts: tuple[frozenset[str], ...] = self._parse(permission)

    @staticmethod
    def _parse(permission: str) -> tuple[frozenset[str], ...]:
        if not permission:
            raise PermissionFormatException(permission)
        parts: list[frozenset[str]] = []
        for part in permission.split(PART_DELIMITER):
            subparts = part.split(SUBPART_DELIMITER)
            if "" in subparts:
                raise PermissionFormatException(permission)
            parts.append(frozenset(subparts))
        return tuple(parts)

    def implies(self, permission: str | WildcardPermission) -> bool:
        """Return True if this (granted) pattern covers the requested permission.

        Args:
            permission: Requested permission, as a string or parsed instance.

        Raises:
            PermissionFormatException: Only when a malformed string is passed.
        """
        if isinstance(permission, str):
            permission = WildcardPermission(permission)

        i = 0
        for other_part in permission.parts:
            if i >= len(self.parts):
                return True
            part = self.parts[i]
            if WILDCARD_TOKEN not in part and not other_part <= part:
                return False
            i += 1

        for part in self.parts[i:]:
            if WILDCARD_TOKEN not in part:
                return False
        return True

    def __eq__(self, other: object) -> bool:
        if not isinstance(other, WildcardPermission):
            return NotImplemented
        return self.parts == other.parts

    def __hash__(self) -> int:
        return hash(self.parts)

    def __repr__(self) -> str:
        return f"WildcardPermission({self.permission!r})"

    def __str__(self) -> str:
        return self.permission
