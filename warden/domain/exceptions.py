"""Domain exceptions for the authorization engine.

Defines the error taxonomy shared by the cache, the wildcard matcher and
the administrative services. Presentation maps them to HTTP responses in
warden.core.exception_handlers using error_code.
"""

from typing import Any


class WardenException(Exception):
    """Base exception for all engine errors.

    Attributes:
        message: Human-readable error description.
        error_code: Machine-readable error code.
        details: Additional error context (e.g. permission, guard_name).
    """

    def __init__(
        self,
        message: str,
        error_code: str | None = None,
        details: dict[str, Any] | None = None,
    ) -> None:
        """Initialize the exception.

        Args:
            message: Human-readable error description.
            error_code: Optional machine-readable code; defaults to class name.
            details: Optional dict of extra context.
        """
        self.message = message
        self.error_code = error_code or self.__class__.__name__
        self.details = details or {}
        super().__init__(self.message)

    def to_dict(self) -> dict[str, Any]:
        """Return a JSON-serializable representation for API responses."""
        return {
            "error": self.error_code,
            "message": self.message,
            "details": self.details,
        }


class PermissionFormatException(WardenException):
    """Raised when a wildcard permission string is malformed (empty part or subpart)."""

    def __init__(self, permission: str) -> None:
        super().__init__(
            f"Wildcard permission `{permission}` is not properly formatted.",
            "INVALID_PERMISSION_FORMAT",
            {"permission": permission},
        )


class PermissionNotFoundException(WardenException):
    """Raised when a referenced permission has no backing record."""

    def __init__(self, name: str, guard_name: str = "") -> None:
        super().__init__(
            f"There is no permission named `{name}` for guard `{guard_name}`.",
            "PERMISSION_NOT_FOUND",
            {"name": name, "guard_name": guard_name},
        )


class RoleNotFoundException(WardenException):
    """Raised when a referenced role has no backing record."""

    def __init__(self, role: str | int, guard_name: str = "") -> None:
        super().__init__(
            f"There is no role `{role}` for guard `{guard_name}`.",
            "ROLE_NOT_FOUND",
            {"role": role, "guard_name": guard_name},
        )


class RoleAlreadyExistsException(WardenException):
    """Raised when creating a role whose name already exists for the guard."""

    def __init__(self, name: str, guard_name: str) -> None:
        super().__init__(
            f"A role `{name}` already exists for guard `{guard_name}`.",
            "ROLE_ALREADY_EXISTS",
            {"name": name, "guard_name": guard_name},
        )


class PermissionAlreadyExistsException(WardenException):
    """Raised when creating a permission whose name already exists for the guard."""

    def __init__(self, name: str, guard_name: str) -> None:
        super().__init__(
            f"A permission `{name}` already exists for guard `{guard_name}`.",
            "PERMISSION_ALREADY_EXISTS",
            {"name": name, "guard_name": guard_name},
        )


class StoreUnavailableException(WardenException):
    """Base for backing cache or durable store failures (fail closed)."""

    def __init__(self, store: str, reason: str) -> None:
        super().__init__(
            f"{store} store unavailable: {reason}",
            "STORE_UNAVAILABLE",
            {"store": store, "reason": reason},
        )


class CacheStoreUnavailableException(StoreUnavailableException):
    """Backing cache store (Redis or memory) call failed or timed out."""

    def __init__(self, reason: str) -> None:
        super().__init__("cache", reason)


class PermissionStoreUnavailableException(StoreUnavailableException):
    """Durable permission store query failed or timed out."""

    def __init__(self, reason: str) -> None:
        super().__init__("permission", reason)


class DatabaseNotConfiguredException(WardenException):
    """Raised when a SQL-backed operation runs without a database URL."""

    def __init__(self) -> None:
        super().__init__(
            message="This operation requires a SQL database that is not configured.",
            error_code="SERVICE_UNAVAILABLE",
        )


class StaleCacheFormat(WardenException):
    """Cached entry lacks the alias table. Handled internally by a forced reload."""

    def __init__(self, key: str) -> None:
        super().__init__(
            f"Cached permission entry {key!r} has no alias table",
            "STALE_CACHE_FORMAT",
            {"key": key},
        )


class AuthenticationException(WardenException):
    """Raised when the principal is not authenticated for the requested guard."""

    def __init__(self, message: str = "User is not logged in.") -> None:
        super().__init__(message, "AUTHENTICATION_ERROR")


class AuthorizationException(WardenException):
    """Raised when an authenticated principal lacks every checked permission.

    details["permissions"] lists the names that were checked (diagnostics).
    """

    def __init__(
        self,
        permissions: list[str] | None = None,
        message: str = "User does not have the right permissions.",
    ) -> None:
        details: dict[str, Any] = {}
        if permissions:
            details["permissions"] = list(permissions)
        super().__init__(message, "PERMISSION_DENIED", details)
