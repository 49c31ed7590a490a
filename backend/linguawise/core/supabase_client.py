# backend/linguawise/core/supabase_client.py
"""
Supabase Client Initialization

This module builds the Supabase client used for the record tables and for
authentication. The client is created by the application lifespan from
the loaded Settings and shared through app.state, not at import time.
"""

from supabase import Client, create_client

from linguawise.config import Settings


def create_supabase(settings: Settings) -> Client:
    """
    Create a Supabase client from the project URL and service key.

    Raises:
        RuntimeError: if either credential is missing.
    """
    if not settings.supabase_url or not settings.supabase_key:
        raise RuntimeError("SUPABASE_URL and SUPABASE_SERVICE_KEY must be set")
    return create_client(settings.supabase_url, settings.supabase_key)
