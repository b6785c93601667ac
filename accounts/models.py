"""
Purpose: Core data models for the accounts domain.
What it does:
Defines the signed-in User and the staff roles without relying on Django ORM
constraints (identities live in the hosted auth provider, roles in the profiles table).
"""

from __future__ import annotations

from dataclasses import dataclass
from enum import Enum
from typing import Any, Dict, Optional


class Role(str, Enum):
    """
    Staff roles stored in profiles.role. Anyone without a profile role is a plain USER.
    """
    ADMIN = "admin"
    MANAGER = "manager"
    OPERATOR = "operator"
    AGENT = "agent"
    VIEWER = "viewer"
    USER = "user"


@dataclass(frozen=True)
class User:
    """
    The authenticated user as the rest of the app sees it.
    """
    id: str
    email: str
    first_name: Optional[str] = None
    last_name: Optional[str] = None
    role: str = Role.USER.value

    @property
    def is_authenticated(self) -> bool:
        # read by DRF permission classes
        return True

    @property
    def display_name(self) -> str:
        name = " ".join(part for part in (self.first_name, self.last_name) if part)
        return name or self.email

    @classmethod
    def from_auth(cls, auth_user: Dict[str, Any], profile: Optional[Dict[str, Any]] = None) -> User:
        """
        Merge the auth provider's user object with the profiles row.
        Profile values win, user_metadata is the fallback.
        """
        profile = profile or {}
        metadata = auth_user.get("user_metadata") or {}
        role = (profile.get("role") or Role.USER.value).lower()
        return cls(
            id=auth_user["id"],
            email=auth_user.get("email") or "",
            first_name=profile.get("first_name") or metadata.get("first_name"),
            last_name=profile.get("last_name") or metadata.get("last_name"),
            role=role,
        )
