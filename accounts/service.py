"""
Purpose: Sign-in / sign-up / session lookups through the hosted auth provider.
What it does:
Wraps the store client's auth endpoints and merges the auth user with its
profiles row into a User. get_current_user() is what the API layer calls to
resolve a bearer token.
"""

from __future__ import annotations

import logging
from typing import Any, Dict, Optional

from store.client import StoreClient
from store.errors import AuthError, NotFoundError, StoreError, log_error

from .models import User

logger = logging.getLogger(__name__)

PROFILES = "profiles"


class AuthService:

    def __init__(self, client: StoreClient):
        self.client = client

    def sign_up(self, email: str, password: str, user_data: Optional[Dict[str, Any]] = None) -> Dict[str, Any]:
        try:
            data = self.client.sign_up(email, password, user_data)
        except StoreError as e:
            log_error(e, "Sign up")
            raise
        # with email confirmation on, the provider returns the bare user and no session
        if data and "access_token" in data:
            return {"user": data.get("user"), "session": data}
        return {"user": data, "session": None}

    def sign_in(self, email: str, password: str) -> Dict[str, Any]:
        """
        Returns:
            {"user": User, "session": {access_token, refresh_token, ...}}
        """
        try:
            session = self.client.sign_in(email, password)
        except StoreError as e:
            log_error(e, "Sign in")
            raise
        user = self._with_profile(session.get("user") or {}, session.get("access_token"))
        return {"user": user, "session": session}

    def sign_out(self, access_token: str) -> bool:
        try:
            self.client.sign_out(access_token)
        except StoreError as e:
            log_error(e, "Sign out")
            raise
        return True

    def _with_profile(self, auth_user: Dict[str, Any], access_token: Optional[str]) -> User:
        profile = None
        try:
            profile = self.client.with_access_token(access_token).select(
                PROFILES, filters={"id": auth_user["id"]}, single=True
            )
        except NotFoundError:
            #no profile row yet, user_metadata fills in the names
            pass
        return User.from_auth(auth_user, profile)

    def get_current_user(self, access_token: Optional[str]) -> Optional[User]:
        """
        Resolve an access token into a User, or None when the token is
        missing, expired or rejected.

        Raises:
            NetworkError (and any other store failure) when the provider
            could not answer, so an outage is not mistaken for a bad token.
        """
        if not access_token:
            return None
        try:
            auth_user = self.client.get_user(access_token)
            if not auth_user:
                return None
            return self._with_profile(auth_user, access_token)
        except (AuthError, NotFoundError) as e:
            log_error(e, "Get current user")
            return None
        except StoreError as e:
            log_error(e, "Get current user")
            raise

    def is_authenticated(self, access_token: Optional[str]) -> bool:
        return self.get_current_user(access_token) is not None

    def update_profile(self, access_token: str, user_id: str, updates: Dict[str, Any]) -> Dict[str, Any]:
        allowed = {k: v for k, v in updates.items() if k in ("first_name", "last_name", "role")}
        try:
            return self.client.with_access_token(access_token).update(
                PROFILES, allowed, {"id": user_id}, single=True
            )
        except StoreError as e:
            log_error(e, "Update profile")
            raise

    def reset_password(self, email: str, redirect_to: Optional[str] = None) -> bool:
        try:
            self.client.reset_password(email, redirect_to)
        except StoreError as e:
            log_error(e, "Reset password")
            raise
        return True

    def update_password(self, access_token: str, new_password: str) -> bool:
        try:
            self.client.update_user(access_token, {"password": new_password})
        except StoreError as e:
            log_error(e, "Update password")
            raise
        return True
