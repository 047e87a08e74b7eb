"""Team context middleware.

Sets the current team id in context from the team header (settings
team_header_name, default X-Team-ID) so role queries and team-scoped
permission checks see it.
"""

from __future__ import annotations

from typing import Callable

from starlette.middleware.base import BaseHTTPMiddleware
from starlette.requests import Request
from starlette.responses import Response

from warden.core.config import get_settings
from warden.core.team_context import set_team_id


def TeamContextMiddleware(app: Callable) -> Callable:
    """Set team context from the request header before the route runs."""

    class _Middleware(BaseHTTPMiddleware):
        async def dispatch(self, request: Request, call_next: Callable) -> Response:
            team_id = request.headers.get(get_settings().team_header_name) or None
            set_team_id(team_id)
            try:
                return await call_next(request)
            finally:
                set_team_id(None)

    return _Middleware(app)
