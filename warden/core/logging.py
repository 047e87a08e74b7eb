"""Logging configuration for the engine.

Records carry the current team scope (team_id, "-" when unset) so
permission denials and cache reloads can be traced per team.
"""

import logging
import sys

from warden.core.config import get_settings
from warden.core.team_context import get_team_id

LOG_FORMAT = "%(asctime)s - %(name)s - %(levelname)s - [team=%(team_id)s] %(message)s"


class TeamContextFilter(logging.Filter):
    """Attach the team id of the current context to every record."""

    def filter(self, record: logging.LogRecord) -> bool:
        team_id = get_team_id()
        record.team_id = "-" if team_id is None else team_id
        return True


def setup_logging(level: int | None = None) -> None:
    """Configure process-wide logging for the warden loggers.

    Level defaults to DEBUG when settings.debug is True, otherwise INFO.
    Output goes to stdout. Calling it again does not add a second handler.
    """
    if level is None:
        level = logging.DEBUG if get_settings().debug else logging.INFO
    root = logging.getLogger("warden")
    root.setLevel(level)
    if any(getattr(h, "_warden", False) for h in root.handlers):
        return
    handler = logging.StreamHandler(sys.stdout)
    handler.setFormatter(logging.Formatter(LOG_FORMAT))
    handler.addFilter(TeamContextFilter())
    handler._warden = True  # type: ignore[attr-defined]
    root.addHandler(handler)


def get_logger(name: str) -> logging.Logger:
    """Return a logger for the given module name.

    Args:
        name: Usually __name__ of the calling module.

    Returns:
        Logger instance.
    """
    return logging.getLogger(name)
