# backend/linguawise/auth.py
"""
Authentication Utility Functions

This module wraps the Supabase identity provider.

Functions:
- get_current_user(): FastAPI dependency that extracts and verifies the
  authenticated user from a JWT in the Authorization header.
- get_token_from_header(): Extracts the raw JWT token.

Classes:
- AuthService: sign up, sign in (password or federated id token),
  password reset email and display name updates. Provider failures are
  raised as AuthError with the provider's own message, which is safe to
  show to the user.

The only thing the rest of the backend needs from a user is its id,
which scopes every store query.
"""

import logging
from typing import Any, Dict, Optional

from fastapi import HTTPException, Request, status
from supabase import Client

from linguawise.db.repository import SupabaseStore
from linguawise.errors import AuthError

logger = logging.getLogger(__name__)


def get_token_from_header(request: Request) -> str:
    """Extract raw JWT from Authorization header"""
    auth_header = request.headers.get("Authorization")
    # Validate the presence and format of the Authorization header
    if not auth_header or not auth_header.startswith("Bearer "):
        raise HTTPException(
            status_code=status.HTTP_401_UNAUTHORIZED,
            detail="Missing or invalid Authorization header",
        )
    return auth_header.split(" ", 1)[1]


def get_current_user(request: Request):
    """
    Extract and verify the currently authenticated user from the Authorization header.

    Steps:
    1. Extract the bearer token from the request headers.
    2. Use Supabase Auth (from app.state) to verify the token and retrieve the user.
    3. Return the authenticated user object if valid; otherwise, raise an HTTP error.

    Raises:
        HTTPException (401): If the token is missing, invalid, or user authentication fails.
    """
    token = get_token_from_header(request)
    supabase: Client = request.app.state.supabase

    try:
        user = supabase.auth.get_user(token).user
    except Exception as e:
        raise HTTPException(
            status_code=status.HTTP_401_UNAUTHORIZED,
            detail=f"Invalid token: {str(e)}",
        )

    if not user:
        raise HTTPException(
            status_code=status.HTTP_401_UNAUTHORIZED,
            detail="Invalid token",
        )
    return user


def _provider_message(e: Exception) -> str:
    return getattr(e, "message", None) or str(e)


def _session_payload(response) -> Dict[str, Any]:
    session = getattr(response, "session", None)
    return {
        "user_id": response.user.id,
        "access_token": getattr(session, "access_token", None),
        "refresh_token": getattr(session, "refresh_token", None),
    }


class AuthService:
    """Account operations against Supabase Auth."""

    def __init__(self, supabase: Client, store: SupabaseStore):
        self.supabase = supabase
        self.store = store

    def sign_up(self, email: str, password: str, display_name: str,
                origin: Optional[str] = None) -> Dict[str, Any]:
        """
        Create an account, store the display name in the user metadata and
        give the new user the default settings.
        """
        options: Dict[str, Any] = {"data": {"full_name": display_name}}
        if origin:
            options["email_redirect_to"] = f"{origin}/"

        try:
            response = self.supabase.auth.sign_up({
                "email": email,
                "password": password,
                "options": options,
            })
        except Exception as e:
            raise AuthError(_provider_message(e)) from e

        if not response or not response.user:
            raise AuthError("Failed to create user.")

        self.store.ensure_settings(response.user.id)
        logger.info("Created account %s", response.user.id)
        return _session_payload(response)

    def sign_in(self, email: str, password: str) -> Dict[str, Any]:
        try:
            response = self.supabase.auth.sign_in_with_password({"email": email, "password": password})
        except Exception as e:
            raise AuthError(_provider_message(e)) from e
        return _session_payload(response)

    def sign_in_with_id_token(self, provider: str, token: str) -> Dict[str, Any]:
        """Federated sign in; first-time users get default settings."""
        try:
            response = self.supabase.auth.sign_in_with_id_token({"provider": provider, "token": token})
        except Exception as e:
            raise AuthError(_provider_message(e)) from e

        self.store.ensure_settings(response.user.id)
        return _session_payload(response)

    def send_password_reset(self, email: str, redirect_to: Optional[str] = None) -> None:
        options = {"redirect_to": redirect_to} if redirect_to else {}
        try:
            self.supabase.auth.reset_password_for_email(email, options)
        except Exception as e:
            raise AuthError(_provider_message(e)) from e

    def update_display_name(self, user_id: str, display_name: str) -> None:
        if not display_name.strip():
            raise AuthError("Name cannot be empty.")
        try:
            self.supabase.auth.admin.update_user_by_id(
                user_id,
                {"user_metadata": {"full_name": display_name}},
            )
        except Exception as e:
            raise AuthError(_provider_message(e)) from e
