"""Core: config, constants, logging, and request-scoped team context.

Single place for settings and shared constants.
"""

from warden.core.config import Settings, get_settings

__all__ = ["Settings", "get_settings"]
