"""warden: cached role/permission authorization with wildcard matching."""

__version__ = "1.0.0"
