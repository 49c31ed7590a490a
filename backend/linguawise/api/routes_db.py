# backend/linguawise/api/routes_db.py
"""
This module defines the FastAPI router for account and record operations.

It includes FastAPI endpoints that interact with Supabase for:
- Account management (signup, signin, federated signin, password reset, profile)
- User settings (get, merge-update)
- Translation history (list, search, delete one, clear all)
- Favorites and the personal dictionary
- Dashboard statistics derived from the history

All record routes:
- Depend on user authentication via get_current_user_id
- Scope every read and write to the authenticated user's id
- Convert store failures into a generic error (details go to the log)

Handlers are plain `def` functions because the Supabase client is
synchronous; FastAPI runs them in its threadpool, off the event loop.
"""

import logging
from typing import List, Optional

from fastapi import APIRouter, Depends, status

from linguawise.api.dependencies import get_auth_service, get_current_user_id, get_store
from linguawise.api.errors import http_error
from linguawise.auth import AuthService
from linguawise.core.language_codes import language_label
from linguawise.core.statistics import aggregate
from linguawise.core.view_state import DashboardState
from linguawise.db.repository import SupabaseStore
from linguawise.errors import LinguaWiseError, ValidationError
from linguawise.models import (
    DictionaryEntry,
    DictionaryEntryPayload,
    Favorite,
    FavoriteCreatePayload,
    IdTokenSigninRequest,
    PasswordResetRequest,
    ProfileUpdateRequest,
    SigninRequest,
    SignupRequest,
    TranslationHistoryItem,
    UsageStatistics,
    UserSettings,
    UserSettingsUpdate,
)

logger = logging.getLogger(__name__)

# Initialize router for all record-related API endpoints
router = APIRouter()


# Accounts
@router.post("/signup")
def signup(request: SignupRequest, auth: AuthService = Depends(get_auth_service)):
    """
    Register a new user account.

    Creates the user in Supabase Auth (display name kept in the user
    metadata) and stores the default settings for the new account.

    Returns:
    - dict: "user_id" plus session tokens when the provider issues them
      immediately (they are None when email confirmation is required).

    Raises:
    - HTTPException(400): The provider rejected the signup; message shown verbatim.
    """
    try:
        return auth.sign_up(request.email, request.password, request.display_name, request.origin)
    except LinguaWiseError as e:
        raise http_error(e)


@router.post("/signin")
def signin(request: SigninRequest, auth: AuthService = Depends(get_auth_service)):
    """Email/password sign in. Returns the session tokens."""
    try:
        return auth.sign_in(request.email, request.password)
    except LinguaWiseError as e:
        raise http_error(e, auth_status=status.HTTP_401_UNAUTHORIZED)


@router.post("/signin/id-token")
def signin_with_id_token(request: IdTokenSigninRequest, auth: AuthService = Depends(get_auth_service)):
    """Federated sign in with a provider id token (e.g. Google)."""
    try:
        return auth.sign_in_with_id_token(request.provider, request.token)
    except LinguaWiseError as e:
        raise http_error(e, auth_status=status.HTTP_401_UNAUTHORIZED)


@router.post("/password-reset")
def password_reset(request: PasswordResetRequest, auth: AuthService = Depends(get_auth_service)):
    """Send a password reset email."""
    try:
        auth.send_password_reset(request.email, request.redirect_to)
    except LinguaWiseError as e:
        raise http_error(e)
    return {"message": "Password reset email sent"}


@router.put("/profile")
def update_profile(
    profile_data: ProfileUpdateRequest,
    user_id: str = Depends(get_current_user_id),
    auth: AuthService = Depends(get_auth_service),
):
    """Update the authenticated user's display name."""
    try:
        auth.update_display_name(user_id, profile_data.display_name)
    except LinguaWiseError as e:
        raise http_error(e)
    return {"message": "Profile updated successfully"}


# Settings
@router.get("/settings", response_model=UserSettings)
def get_settings(user_id: str = Depends(get_current_user_id), store: SupabaseStore = Depends(get_store)):
    try:
        return store.get_settings(user_id)
    except LinguaWiseError as e:
        raise http_error(e)


@router.put("/settings", response_model=UserSettings)
def update_settings(
    payload: UserSettingsUpdate,
    user_id: str = Depends(get_current_user_id),
    store: SupabaseStore = Depends(get_store),
):
    """Merge the provided fields into the user's settings."""
    try:
        return store.upsert_settings(user_id, payload.model_dump(exclude_none=True))
    except LinguaWiseError as e:
        raise http_error(e)


# History
@router.get("/history", response_model=List[TranslationHistoryItem])
def list_history(
    search: Optional[str] = None,
    user_id: str = Depends(get_current_user_id),
    store: SupabaseStore = Depends(get_store),
):
    """History items for the user, newest first; `search` filters on either text."""
    try:
        return store.list_history(user_id, search)
    except LinguaWiseError as e:
        raise http_error(e)


@router.delete("/history")
def clear_history(user_id: str = Depends(get_current_user_id), store: SupabaseStore = Depends(get_store)):
    try:
        deleted = store.clear_history(user_id)
    except LinguaWiseError as e:
        raise http_error(e)
    return {"message": "Translation history has been cleared.", "deleted": deleted}


@router.delete("/history/{item_id}")
def delete_history_item(
    item_id: str,
    user_id: str = Depends(get_current_user_id),
    store: SupabaseStore = Depends(get_store),
):
    try:
        store.delete_history(user_id, item_id)
    except LinguaWiseError as e:
        raise http_error(e)
    return {"message": "History item deleted successfully"}


# Favorites
@router.get("/favorites", response_model=List[Favorite])
def list_favorites(user_id: str = Depends(get_current_user_id), store: SupabaseStore = Depends(get_store)):
    try:
        return store.list_favorites(user_id)
    except LinguaWiseError as e:
        raise http_error(e)


@router.post("/favorites", response_model=Favorite, status_code=status.HTTP_201_CREATED)
def create_favorite(
    payload: FavoriteCreatePayload,
    user_id: str = Depends(get_current_user_id),
    store: SupabaseStore = Depends(get_store),
):
    """
    Favorite a translation.

    Either pass `history_id` to favorite a saved history item, or pass the
    fields of a completed result (original/translated text, languages, tone).
    """
    try:
        if payload.history_id:
            favorite = Favorite.from_history(store.get_history(user_id, payload.history_id))
        else:
            fields = payload.model_dump(exclude={"history_id"})
            for name, value in fields.items():
                if not value:
                    raise ValidationError(name, f"{name} is required.")
            item = TranslationHistoryItem(id="", user_id=user_id, timestamp="", **fields)
            favorite = Favorite.from_history(item)
        return store.add_favorite(favorite)
    except LinguaWiseError as e:
        raise http_error(e)


@router.delete("/favorites/{favorite_id}")
def delete_favorite(
    favorite_id: str,
    user_id: str = Depends(get_current_user_id),
    store: SupabaseStore = Depends(get_store),
):
    try:
        store.delete_favorite(user_id, favorite_id)
    except LinguaWiseError as e:
        raise http_error(e)
    return {"message": "Favorite deleted successfully"}


# Personal dictionary
@router.get("/dictionary", response_model=List[DictionaryEntry])
def list_dictionary(
    search: Optional[str] = None,
    user_id: str = Depends(get_current_user_id),
    store: SupabaseStore = Depends(get_store),
):
    try:
        return store.list_dictionary(user_id, search)
    except LinguaWiseError as e:
        raise http_error(e)


@router.post("/dictionary", response_model=DictionaryEntry, status_code=status.HTTP_201_CREATED)
def add_dictionary_entry(
    payload: DictionaryEntryPayload,
    user_id: str = Depends(get_current_user_id),
    store: SupabaseStore = Depends(get_store),
):
    """
    Add a term to the personal dictionary.

    Term, translation and language are required; the language code is
    stored as its display label.
    """
    try:
        if not payload.term.strip() or not payload.translation.strip() or not payload.language:
            raise ValidationError("term", "Term, Translation, and Language are required.")
        entry = DictionaryEntry(
            user_id=user_id,
            term=payload.term,
            translation=payload.translation,
            context=payload.context,
            language=language_label(payload.language),
        )
        return store.add_dictionary_entry(entry)
    except LinguaWiseError as e:
        raise http_error(e)


@router.delete("/dictionary/{entry_id}")
def delete_dictionary_entry(
    entry_id: str,
    user_id: str = Depends(get_current_user_id),
    store: SupabaseStore = Depends(get_store),
):
    try:
        store.delete_dictionary_entry(user_id, entry_id)
    except LinguaWiseError as e:
        raise http_error(e)
    return {"message": "Dictionary entry deleted successfully"}


# Dashboard
@router.get("/statistics", response_model=UsageStatistics)
def get_statistics(user_id: str = Depends(get_current_user_id), store: SupabaseStore = Depends(get_store)):
    """Usage statistics computed from the user's whole history."""
    try:
        return aggregate(store.list_history(user_id))
    except LinguaWiseError as e:
        raise http_error(e)


@router.get("/dashboard")
def get_dashboard(
    user_id: str = Depends(get_current_user_id),
    store: SupabaseStore = Depends(get_store),
):
    """Everything the dashboard tabs display, in one request."""
    try:
        state = DashboardState(store, user_id).load()
        settings = store.get_settings(user_id)
    except LinguaWiseError as e:
        raise http_error(e)

    return {
        "statistics": state.statistics(),
        "history": state.history.items,
        "favorites": state.favorites.items,
        "dictionary": state.dictionary.items,
        "settings": settings,
    }
