# backend/linguawise/errors.py
"""
Domain exceptions raised by the core services and the store.

Routes catch these and turn them into HTTPException responses, so the
core never has to know about HTTP status codes.
"""

GENERIC_TRANSLATION_ERROR = "An unexpected error occurred during translation."
GENERIC_SPEECH_ERROR = "An unexpected error occurred during speech synthesis."
GENERIC_GRAMMAR_ERROR = "An unexpected error occurred during grammar check."
GENERIC_PERSISTENCE_ERROR = "Failed to update your data. Please try again."


class LinguaWiseError(Exception):
    """Base class for every error raised by this package."""

    def __init__(self, message: str):
        super().__init__(message)
        self.message = message


class ValidationError(LinguaWiseError):
    """A request field is missing or malformed. The request is never sent."""

    def __init__(self, field: str, message: str):
        super().__init__(message)
        self.field = field


class BackendCallError(LinguaWiseError):
    """The generative-language backend failed (network or remote error)."""


class TranslationEmptyError(BackendCallError):
    """The translate call succeeded but returned no usable text."""


class SynthesisError(BackendCallError):
    """Speech synthesis had no text to speak or got no audio back."""


class PersistenceError(LinguaWiseError):
    """A store read/write/delete failed."""


class RecordNotFoundError(PersistenceError):
    """The record does not exist or belongs to another user."""


class AuthError(LinguaWiseError):
    """Identity provider rejected the operation. Message is user-facing."""
