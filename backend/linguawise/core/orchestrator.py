# backend/linguawise/core/orchestrator.py
"""
Translation Orchestrator

Turns one translate form submission into one consolidated result.

Workflow:
    1. Validate the raw form fields into an immutable TranslationRequest
    2. Fire the translate and suggest calls concurrently
    3. Wait for both; the first failure fails the whole operation
    4. Merge translated text with alternatives and cultural notes

The orchestrator never persists anything. Saving history or favorites is
left to the caller.

Speech synthesis and grammar check live here too: they are single calls
against the same backend with the same error policy.
"""

import asyncio
import logging
from typing import Any, Mapping, Protocol

from pydantic import ValidationError as PydanticValidationError

from linguawise.core.language_codes import is_supported
from linguawise.errors import (
    GENERIC_GRAMMAR_ERROR,
    GENERIC_SPEECH_ERROR,
    GENERIC_TRANSLATION_ERROR,
    BackendCallError,
    SynthesisError,
    TranslationEmptyError,
    ValidationError,
)
from linguawise.models import (
    MAX_CHARACTERS,
    TONES,
    GrammarCheckResult,
    SpeechResult,
    TranslationRequest,
    TranslationResult,
)

logger = logging.getLogger(__name__)

REQUIRED_FIELDS = ("original_text", "source_lang", "target_lang", "tone")


class GenerativeBackend(Protocol):
    async def translate(self, text: str, source_lang: str, target_lang: str,
                        tone: str, tone_preference: str = ...) -> Mapping[str, Any]: ...

    async def suggest(self, text: str, source_lang: str, target_lang: str,
                      tone: str) -> Mapping[str, Any]: ...

    async def check_grammar(self, text: str, source_lang: str,
                            target_lang: str) -> Mapping[str, Any]: ...

    async def synthesize_speech(self, text: str) -> Mapping[str, Any]: ...


def parse_request(raw: Mapping[str, Any]) -> TranslationRequest:
    """
    Validate raw form fields into a TranslationRequest.

    Raises:
        ValidationError: naming the first offending field.
    """
    for name in REQUIRED_FIELDS:
        value = raw.get(name)
        if value is None or (isinstance(value, str) and not value.strip()):
            message = "Text is required." if name == "original_text" else f"{name} is required."
            raise ValidationError(name, message)
        if not isinstance(value, str):
            raise ValidationError(name, f"{name} must be a string.")

    for name in ("source_lang", "target_lang"):
        if not is_supported(raw[name]):
            raise ValidationError(name, f"Unsupported language: {raw[name]}.")

    if len(raw["original_text"]) > MAX_CHARACTERS:
        raise ValidationError("original_text", f"Text must be at most {MAX_CHARACTERS} characters.")

    if raw["tone"] not in TONES:
        raise ValidationError("tone", f"Tone must be one of: {', '.join(TONES)}.")

    try:
        return TranslationRequest(**{name: raw[name] for name in REQUIRED_FIELDS})
    except PydanticValidationError as e:
        first = e.errors()[0]
        field = str(first["loc"][0]) if first.get("loc") else "form"
        raise ValidationError(field, "Invalid input data.") from e


async def translate_text(client: GenerativeBackend,
                         request: TranslationRequest,
                         tone_preference: str = "neutral") -> TranslationResult:
    """
    Run translate and suggest concurrently and merge their answers.

    Raises:
        TranslationEmptyError: translate returned no text.
        BackendCallError: either call raised; the cause is logged.
    """
    try:
        translation, suggestions = await asyncio.gather(
            client.translate(
                request.original_text,
                request.source_lang,
                request.target_lang,
                request.tone,
                tone_preference,
            ),
            client.suggest(
                request.original_text,
                request.source_lang,
                request.target_lang,
                request.tone,
            ),
        )
    except Exception as e:
        logger.exception("Translation failed for %s -> %s", request.source_lang, request.target_lang)
        raise BackendCallError(GENERIC_TRANSLATION_ERROR) from e

    translated_text = (translation or {}).get("translatedText")
    if not translated_text:
        logger.error("Translate call returned no text for %s -> %s", request.source_lang, request.target_lang)
        raise TranslationEmptyError(GENERIC_TRANSLATION_ERROR)

    suggestions = suggestions or {}
    return TranslationResult(
        translated_text=translated_text,
        alternatives=list(suggestions.get("alternatives") or []),
        cultural_notes=suggestions.get("culturalNotes") or "",
    )


async def synthesize_speech(client: GenerativeBackend, text: str) -> SpeechResult:
    """Speak the translated text. Raises SynthesisError on any failure."""
    if not text or not text.strip():
        raise SynthesisError("No text provided for speech synthesis.")

    try:
        response = await client.synthesize_speech(text)
    except Exception as e:
        logger.exception("Speech synthesis failed")
        raise SynthesisError(GENERIC_SPEECH_ERROR) from e

    media = (response or {}).get("media")
    if not media:
        raise SynthesisError(GENERIC_SPEECH_ERROR)
    return SpeechResult(media=media)


async def check_grammar(client: GenerativeBackend, text: str,
                        source_lang: str, target_lang: str) -> GrammarCheckResult:
    if not text or not text.strip():
        raise ValidationError("text", "Text is required.")

    try:
        response = await client.check_grammar(text, source_lang, target_lang)
    except Exception as e:
        logger.exception("Grammar check failed")
        raise BackendCallError(GENERIC_GRAMMAR_ERROR) from e

    response = response or {}
    return GrammarCheckResult(
        corrected_text=response.get("correctedText") or text,
        suggestions=list(response.get("suggestions") or []),
    )
