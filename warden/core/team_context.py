"""Team context for tenant-scoped role queries.

Middleware or the host application sets the current team id in this
context variable; callers building role queries read it back. The
permission cache never filters by it on its own.
"""

from contextvars import ContextVar
from typing import Any

# Current team ID for the request (None means global roles only).
current_team_id: ContextVar[int | str | None] = ContextVar(
    "current_team_id", default=None
)


def set_team_id(team_id: Any) -> None:
    """Set the current team ID for this context.

    Accepts a raw id or any object exposing an ``id`` attribute (e.g. a
    team model), in which case its id is stored.
    """
    if team_id is not None and not isinstance(team_id, (int, str)):
        team_id = getattr(team_id, "id")
    current_team_id.set(team_id)


def get_team_id() -> int | str | None:
    """Return the current team ID if set."""
    return current_team_id.get()
