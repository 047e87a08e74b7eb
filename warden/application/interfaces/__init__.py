"""Application interfaces (ports): repository and service protocols.

Define contracts for infrastructure implementations (DIP).
No runtime imports from warden.infrastructure or warden.api.
"""

from warden.application.interfaces.repositories import (
    IPermissionRepository,
    IRoleRepository,
)
from warden.application.interfaces.services import (
    IAuthorizationPolicy,
    ICacheStore,
    IPermissionStore,
)

__all__ = [
    "IAuthorizationPolicy",
    "ICacheStore",
    "IPermissionRepository",
    "IPermissionStore",
    "IRoleRepository",
]
