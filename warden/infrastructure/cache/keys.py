"""Cache key builders. Single place for key format.

Key components must not contain CACHE_KEY_SEP to avoid ambiguous or
colliding keys.
"""

from warden.core.constants import CACHE_KEY_SEP, CACHE_SUFFIX_PERMISSIONS


def _validate_key_component(value: str, name: str) -> None:
    """Raise ValueError if value is empty or contains the cache key separator."""
    if not value:
        raise ValueError(f"Cache key component {name!r} must be non-empty")
    if CACHE_KEY_SEP in value:
        raise ValueError(
            f"Cache key component {name!r} must not contain separator {CACHE_KEY_SEP!r}"
        )


def permissions_key(prefix: str) -> str:
    """Cache key for the single process-wide permission entry."""
    _validate_key_component(prefix, "prefix")
    return f"{prefix}{CACHE_KEY_SEP}{CACHE_SUFFIX_PERMISSIONS}"
