# backend/linguawise/api/routes.py
"""
Main API routing configuration for the backend.

This file acts as the central router aggregator, combining the sub-routers
into one router mounted under "/api":
   - routes_db: accounts, settings, history, favorites, dictionary, statistics.
   - routes_actions: translation, speech synthesis, grammar check, catalogues.
"""

from fastapi import APIRouter

from .routes_actions import router as actions_router
from .routes_db import router as db_router

# Initialize the main API router
router = APIRouter()

# Include database-related routes
router.include_router(db_router)

# Include action-related routes
router.include_router(actions_router)
