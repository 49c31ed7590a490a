# backend/linguawise/config.py
"""
Application configuration.

Reads credentials and tuning values from environment variables (a local
.env file is loaded first) into an immutable Settings object. The object
is built once by the application factory and handed to the clients that
need it.
"""

import logging
import os
from dataclasses import dataclass, field
from typing import List, Optional

from dotenv import load_dotenv

DEFAULT_GEMINI_API_URL = "https://generativelanguage.googleapis.com/v1beta"
DEFAULT_GEMINI_MODEL = "gemini-2.0-flash"
DEFAULT_GEMINI_TTS_MODEL = "gemini-2.5-flash-preview-tts"
DEFAULT_GEMINI_TTS_VOICE = "Algenib"

DEFAULT_CORS_ORIGINS = ["https://localhost:3000"]


@dataclass(frozen=True)
class Settings:
    supabase_url: Optional[str] = None
    supabase_key: Optional[str] = None
    gemini_api_key: Optional[str] = None
    gemini_api_url: str = DEFAULT_GEMINI_API_URL
    gemini_model: str = DEFAULT_GEMINI_MODEL
    gemini_tts_model: str = DEFAULT_GEMINI_TTS_MODEL
    gemini_tts_voice: str = DEFAULT_GEMINI_TTS_VOICE
    genai_timeout_seconds: float = 60.0
    cors_origins: List[str] = field(default_factory=lambda: list(DEFAULT_CORS_ORIGINS))
    log_level: str = "INFO"


def _split_origins(value: Optional[str]) -> List[str]:
    if not value:
        return list(DEFAULT_CORS_ORIGINS)
    return [origin.strip() for origin in value.split(",") if origin.strip()]


def load_settings() -> Settings:
    """Load settings from the environment (and .env if present)."""
    load_dotenv()

    return Settings(
        supabase_url=os.environ.get("SUPABASE_URL"),
        supabase_key=os.environ.get("SUPABASE_SERVICE_KEY"),
        gemini_api_key=os.environ.get("GEMINI_API_KEY"),
        gemini_api_url=os.environ.get("GEMINI_API_URL", DEFAULT_GEMINI_API_URL).rstrip("/"),
        gemini_model=os.environ.get("GEMINI_MODEL", DEFAULT_GEMINI_MODEL),
        gemini_tts_model=os.environ.get("GEMINI_TTS_MODEL", DEFAULT_GEMINI_TTS_MODEL),
        gemini_tts_voice=os.environ.get("GEMINI_TTS_VOICE", DEFAULT_GEMINI_TTS_VOICE),
        genai_timeout_seconds=float(os.environ.get("GENAI_TIMEOUT_SECONDS", "60")),
        cors_origins=_split_origins(os.environ.get("CORS_ORIGINS")),
        log_level=os.environ.get("LOG_LEVEL", "INFO").upper(),
    )


def configure_logging(level: str = "INFO") -> None:
    """Set up root logging once for the process."""
    logging.basicConfig(
        level=getattr(logging, level, logging.INFO),
        format="%(asctime)s %(levelname)s [%(name)s] %(message)s",
    )
