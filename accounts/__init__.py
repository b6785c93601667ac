#Expose the accounts pieces:
#User / Role models
#role -> capability checks
#AuthService (hosted auth provider wrapper)

from .models import User, Role
from .policy import (
    Capability,
    ROLE_CAPABILITIES,
    capabilities_for,
    has_capability,
    has_role,
    has_any_role,
    require_auth,
)
from .service import AuthService

__all__ = [
    "User",
    "Role",
    "Capability",
    "ROLE_CAPABILITIES",
    "capabilities_for",
    "has_capability",
    "has_role",
    "has_any_role",
    "require_auth",
    "AuthService",
]
