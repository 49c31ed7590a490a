# backend/linguawise/api/routes_actions.py
"""
This module defines the FastAPI routes that call the generative-language backend.

It provides endpoints for:
- Supported languages and tones
- Translation (translated text + alternatives + cultural notes)
- Speech synthesis of a translated text
- Grammar check of a translated text
"""

import logging

from fastapi import APIRouter, Depends
from fastapi.concurrency import run_in_threadpool

from linguawise.api.dependencies import get_current_user_id, get_genai_client, get_store
from linguawise.api.errors import http_error
from linguawise.core.genai_client import GeminiClient
from linguawise.core.language_codes import SUPPORTED_LANGUAGES, TONE_OPTIONS
from linguawise.core.orchestrator import check_grammar, parse_request, synthesize_speech, translate_text
from linguawise.db.repository import SupabaseStore
from linguawise.errors import LinguaWiseError, PersistenceError
from linguawise.models import (
    GrammarCheckRequest,
    GrammarCheckResult,
    SpeechRequest,
    SpeechResult,
    TranslateForm,
    TranslateResponse,
)

logger = logging.getLogger(__name__)
router = APIRouter() # FastAPI Router Instance


@router.get("/languages")
async def get_languages():
    """
    FastAPI endpoint: GET /languages
    Returns the languages offered by the translator as [{"code", "label"}].
    """
    return SUPPORTED_LANGUAGES


@router.get("/tones")
async def get_tones():
    """FastAPI endpoint: GET /tones"""
    return TONE_OPTIONS


@router.post("/translate", response_model=TranslateResponse)
async def translate(
    form: TranslateForm,
    user_id: str = Depends(get_current_user_id),
    client: GeminiClient = Depends(get_genai_client),
    store: SupabaseStore = Depends(get_store),
):
    """
    FastAPI Endpoint: POST /translate

    Steps:
    1. Validate the form fields (422 with the offending field if invalid).
    2. Run the translate and suggest calls concurrently and merge them.
    3. Save a history item if the user has history saving enabled.

    Returns:
        TranslateResponse: translated text, alternatives, cultural notes and
        the id of the saved history item (None if not saved).

    Raises:
        HTTPException(422): Invalid or missing form field.
        HTTPException(502): Generative backend failed or returned no text.
    """
    try:
        request = parse_request(form.model_dump())
        result = await translate_text(client, request)
    except LinguaWiseError as e:
        raise http_error(e)

    # The translation stands even if history cannot be saved
    history_id = None
    try:
        settings = await run_in_threadpool(store.get_settings, user_id)
        if settings.save_history:
            saved = await run_in_threadpool(store.add_history, user_id, request, result)
            history_id = saved.id
    except PersistenceError as e:
        logger.warning("History not saved for user %s: %s", user_id, e)

    return TranslateResponse(**result.model_dump(), history_id=history_id)


@router.post("/speech", response_model=SpeechResult)
async def speech(
    req: SpeechRequest,
    user_id: str = Depends(get_current_user_id),
    client: GeminiClient = Depends(get_genai_client),
):
    """
    FastAPI Endpoint: POST /speech

    Converts a translated text into spoken audio.

    Returns:
        SpeechResult: {"media": "data:audio/wav;base64,..."}

    Raises:
        HTTPException(502): No text given or no audio produced.
    """
    try:
        return await synthesize_speech(client, req.text)
    except LinguaWiseError as e:
        raise http_error(e)


@router.post("/grammar-check", response_model=GrammarCheckResult)
async def grammar_check(
    req: GrammarCheckRequest,
    user_id: str = Depends(get_current_user_id),
    client: GeminiClient = Depends(get_genai_client),
):
    """FastAPI Endpoint: POST /grammar-check"""
    try:
        return await check_grammar(client, req.text, req.source_lang, req.target_lang)
    except LinguaWiseError as e:
        raise http_error(e)
