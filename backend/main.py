# backend/main.py
"""
Main entry point for the FastAPI backend application.

This file builds the FastAPI app: it loads the settings, configures
logging and CORS, and mounts the HTTP routes under "/api".

The Supabase client and the generative-language client are created in
the application lifespan, kept on app.state for the request dependencies,
and the HTTP client is closed on shutdown. Tests pass their own clients
to create_app() instead.

Run with:
    uvicorn main:app --port 10000
"""

import logging
from contextlib import asynccontextmanager
from typing import Optional

from fastapi import FastAPI
from fastapi.middleware.cors import CORSMiddleware

from linguawise.api.routes import router as api_router
from linguawise.config import Settings, configure_logging, load_settings
from linguawise.core.genai_client import GeminiClient
from linguawise.core.supabase_client import create_supabase
from linguawise.db.repository import SupabaseStore

logger = logging.getLogger(__name__)


def create_app(settings: Optional[Settings] = None, supabase=None, genai=None) -> FastAPI:
    """Build the application. Missing clients are created at startup."""
    settings = settings or load_settings()
    configure_logging(settings.log_level)

    @asynccontextmanager
    async def lifespan(app: FastAPI):
        client = supabase if supabase is not None else create_supabase(settings)
        app.state.supabase = client
        app.state.store = SupabaseStore(client)
        app.state.genai = genai if genai is not None else GeminiClient(settings)
        logger.info("LinguaWise backend started")
        try:
            yield
        finally:
            # Only close what this app created
            if genai is None:
                await app.state.genai.aclose()
            logger.info("LinguaWise backend stopped")

    app = FastAPI(title="LinguaWise", lifespan=lifespan)

    # CORS setup
    # Allows the browser front end to call this backend
    app.add_middleware(
        CORSMiddleware,
        allow_origins=settings.cors_origins,   # Domains allowed to make cross-origin requests
        allow_credentials=True,                 # Allow cookies and authorization headers
        allow_methods=["*"],
        allow_headers=["*"],
    )

    # HTTP routes
    app.include_router(api_router, prefix="/api")
    return app


app = create_app()
