"""Domain enumerations for the authorization engine."""

from enum import Enum


class AuthorizationOutcome(str, Enum):
    """Result of a permission check.

    UNAUTHENTICATED is reported before any matching so callers can tell
    "log in" apart from "forbidden".
    """

    GRANTED = "granted"
    DENIED = "denied"
    UNAUTHENTICATED = "unauthenticated"


class PolicyDecision(str, Enum):
    """Tri-state answer of a before-policy evaluated ahead of wildcard matching."""

    ALLOW = "allow"
    DENY = "deny"
    DEFER = "defer"


class CacheState(str, Enum):
    """Lifecycle of the process-local hydrated permission view."""

    EMPTY = "empty"
    LOADING = "loading"
    HYDRATED = "hydrated"
