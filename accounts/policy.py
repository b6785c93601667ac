"""
Purpose: Role -> capability table for the admin dashboard.
What it does:

Maps each staff role to what it may do:

ADMIN    -> everything
MANAGER  -> packages, customers, reports
OPERATOR -> view / create / update packages
AGENT    -> view / create packages, manage customers
VIEWER   -> view packages, customers and reports

Rule: Static data plus pure lookups. No session state, no store calls.
"""

from __future__ import annotations

from enum import Enum
from typing import Dict, FrozenSet, Iterable, Optional

from .models import Role, User


class Capability(str, Enum):
    PACKAGES_VIEW = "packages:view"
    PACKAGES_CREATE = "packages:create"
    PACKAGES_UPDATE = "packages:update"
    PACKAGES_DELETE = "packages:delete"
    CUSTOMERS_VIEW = "customers:view"
    CUSTOMERS_MANAGE = "customers:manage"
    REPORTS_VIEW = "reports:view"
    USERS_MANAGE = "users:manage"
    SETTINGS_MANAGE = "settings:manage"


ROLE_CAPABILITIES: Dict[Role, FrozenSet[Capability]] = {
    Role.ADMIN: frozenset(Capability),
    Role.MANAGER: frozenset({
        Capability.PACKAGES_VIEW,
        Capability.PACKAGES_CREATE,
        Capability.PACKAGES_UPDATE,
        Capability.PACKAGES_DELETE,
        Capability.CUSTOMERS_VIEW,
        Capability.CUSTOMERS_MANAGE,
        Capability.REPORTS_VIEW,
    }),
    Role.OPERATOR: frozenset({
        Capability.PACKAGES_VIEW,
        Capability.PACKAGES_CREATE,
        Capability.PACKAGES_UPDATE,
    }),
    Role.AGENT: frozenset({
        Capability.PACKAGES_VIEW,
        Capability.PACKAGES_CREATE,
        Capability.CUSTOMERS_VIEW,
        Capability.CUSTOMERS_MANAGE,
    }),
    Role.VIEWER: frozenset({
        Capability.PACKAGES_VIEW,
        Capability.CUSTOMERS_VIEW,
        Capability.REPORTS_VIEW,
    }),
    Role.USER: frozenset(),
}


def _role_of(user: User) -> Optional[Role]:
    try:
        return Role((user.role or "").lower())
    except ValueError:
        return None


def capabilities_for(user: Optional[User]) -> FrozenSet[Capability]:
    if user is None:
        return frozenset()
    role = _role_of(user)
    if role is None:
        # unknown roles get nothing rather than an error
        return frozenset()
    return ROLE_CAPABILITIES[role]


def has_capability(user: Optional[User], capability: str) -> bool:
    try:
        wanted = Capability(capability)
    except ValueError:
        return False
    return wanted in capabilities_for(user)


def has_role(user: Optional[User], role: str) -> bool:
    if user is None:
        return False
    wanted = role.value if isinstance(role, Role) else str(role)
    return (user.role or "").lower() == wanted.lower()


def has_any_role(user: Optional[User], roles: Iterable[str]) -> bool:
    return any(has_role(user, role) for role in roles)


def require_auth(user: Optional[User], required_role: Optional[str] = None) -> bool:
    """
    Signed in, and holding required_role when one is given.
    """
    if user is None:
        return False
    if required_role and not has_role(user, required_role):
        return False
    return True
