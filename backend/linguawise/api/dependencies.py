# backend/linguawise/api/dependencies.py
"""
FastAPI dependencies that hand the shared clients to the routes.

The clients are built once by the application lifespan and live on
app.state; routes never import them directly.
"""

from fastapi import Depends, Request

from linguawise.auth import AuthService, get_current_user
from linguawise.core.genai_client import GeminiClient
from linguawise.db.repository import SupabaseStore


def get_store(request: Request) -> SupabaseStore:
    return request.app.state.store


def get_genai_client(request: Request) -> GeminiClient:
    return request.app.state.genai


def get_auth_service(request: Request) -> AuthService:
    return AuthService(request.app.state.supabase, request.app.state.store)


def get_current_user_id(current_user=Depends(get_current_user)) -> str:
    """The opaque id used to scope every store query."""
    return str(current_user.id)
