# backend/linguawise/models.py
"""
Pydantic Schemas for API Request and Response Validation.

This module defines the data models shared by the routes, the core
services and the store. It includes schemas for:

- Translation requests and merged translation results
- Speech synthesis and grammar check payloads
- Persisted records (history items, favorites, dictionary entries)
- User settings and authentication payloads
- Dashboard statistics

Value objects passed between the core functions (requests, results,
records) are frozen so that nothing downstream can mutate them.
"""

import re
from datetime import datetime, timedelta, timezone
from typing import List, Literal, Optional

from pydantic import BaseModel, ConfigDict, EmailStr

Tone = Literal["formal", "informal", "technical", "casual"]
TONES = ("formal", "informal", "technical", "casual")

MAX_CHARACTERS = 5000


def utc_now_iso() -> str:
    """Current instant as an ISO-8601 string in UTC."""
    return datetime.now(timezone.utc).isoformat()


_FRACTION = re.compile(r"\.(\d+)")


def parse_timestamp(value: Optional[str]) -> Optional[datetime]:
    """
    Parse an ISO-8601 instant as stored by Postgres; None if unparseable.

    Accepts a 'Z' suffix and fractional seconds of any length (Postgres
    drops trailing zeros, e.g. ".12345").
    """
    if not value:
        return None
    text = value.strip().replace("Z", "+00:00")
    text = _FRACTION.sub(lambda m: "." + m.group(1)[:6].ljust(6, "0"), text, count=1)
    try:
        return datetime.fromisoformat(text)
    except ValueError:
        return None


# Translation
class TranslateForm(BaseModel):
    """Raw translate form fields. Validated by the orchestrator, not here."""
    original_text: Optional[str] = None
    source_lang: Optional[str] = None
    target_lang: Optional[str] = None
    tone: Optional[str] = None

class TranslationRequest(BaseModel):
    """Validated, immutable input to a single orchestration call."""
    model_config = ConfigDict(frozen=True)

    original_text: str
    source_lang: str
    target_lang: str
    tone: Tone

class TranslationResult(BaseModel):
    """Translated text merged with alternatives and cultural notes."""
    model_config = ConfigDict(frozen=True)

    translated_text: str
    alternatives: List[str] = []
    cultural_notes: str = ""

class TranslateResponse(TranslationResult):
    """Translation result plus the id of the saved history item, if any."""
    history_id: Optional[str] = None

class SpeechRequest(BaseModel):
    text: str = ""

class SpeechResult(BaseModel):
    """Encoded audio as a data URI (data:audio/wav;base64,...)."""
    media: str

class GrammarCheckRequest(BaseModel):
    text: str = ""
    source_lang: str
    target_lang: str

class GrammarCheckResult(BaseModel):
    corrected_text: str
    suggestions: List[str] = []


# Persisted records
class TranslationHistoryItem(BaseModel):
    model_config = ConfigDict(frozen=True)

    id: str
    user_id: str
    original_text: str
    translated_text: str
    source_lang: str
    target_lang: str
    tone: str
    timestamp: str

class Favorite(BaseModel):
    model_config = ConfigDict(frozen=True)

    id: Optional[str] = None
    user_id: str
    original_text: str
    translated_text: str
    source_lang: str
    target_lang: str
    tone: str
    favorited_at: str

    @classmethod
    def from_history(cls, item: TranslationHistoryItem, favorited_at: Optional[datetime] = None) -> "Favorite":
        """
        Build a favorite carrying the same text, languages and tone as a
        history item. The favorited_at instant always differs from the
        history timestamp.
        """
        moment = favorited_at or datetime.now(timezone.utc)
        if moment == parse_timestamp(item.timestamp):
            moment += timedelta(microseconds=1)
        return cls(
            user_id=item.user_id,
            original_text=item.original_text,
            translated_text=item.translated_text,
            source_lang=item.source_lang,
            target_lang=item.target_lang,
            tone=item.tone,
            favorited_at=moment.isoformat(),
        )

class FavoriteCreatePayload(BaseModel):
    """Favorite either an existing history item or a completed result."""
    history_id: Optional[str] = None
    original_text: Optional[str] = None
    translated_text: Optional[str] = None
    source_lang: Optional[str] = None
    target_lang: Optional[str] = None
    tone: Optional[Tone] = None

class DictionaryEntry(BaseModel):
    model_config = ConfigDict(frozen=True)

    id: Optional[str] = None
    user_id: str
    term: str
    translation: str
    context: str = ""
    language: str

class DictionaryEntryPayload(BaseModel):
    """Request body for adding a term to the personal dictionary."""
    term: str = ""
    translation: str = ""
    context: str = ""
    language: str = ""

class UserSettings(BaseModel):
    """Per-user preferences. Defaults are the values given to new accounts."""
    native_language: str = "en"
    default_target_language: str = "es"
    default_tone: Tone = "formal"
    save_history: bool = True

class UserSettingsUpdate(BaseModel):
    """Partial settings update; unset fields keep their stored value."""
    native_language: Optional[str] = None
    default_target_language: Optional[str] = None
    default_tone: Optional[Tone] = None
    save_history: Optional[bool] = None


# Authentication
class SignupRequest(BaseModel):
    email: EmailStr
    password: str
    display_name: str
    origin: Optional[str] = None

class SigninRequest(BaseModel):
    email: EmailStr
    password: str

class IdTokenSigninRequest(BaseModel):
    """Federated sign in with an id token issued by the provider (e.g. Google)."""
    provider: str = "google"
    token: str

class PasswordResetRequest(BaseModel):
    email: EmailStr
    redirect_to: Optional[str] = None

class ProfileUpdateRequest(BaseModel):
    display_name: str


# Dashboard statistics
class LanguageCount(BaseModel):
    name: str
    count: int

class MonthlyWords(BaseModel):
    name: str
    year: int
    words: int

class UsageStatistics(BaseModel):
    total_translations: int = 0
    words_translated: int = 0
    favorite_language: Optional[str] = None
    top_languages: List[LanguageCount] = []
    monthly_words: List[MonthlyWords] = []
