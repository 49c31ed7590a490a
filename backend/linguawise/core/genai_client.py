# backend/linguawise/core/genai_client.py
"""
Generative-Language Client (Gemini REST API)

Thin asynchronous wrapper around the Gemini `generateContent` endpoint.
It knows how to phrase each request and how to pull the payload out of
the response, but it does not judge the result: empty or partial answers
are returned as-is and the orchestrator decides what counts as a failure.

Operations:
- translate(): translated text in the requested tone
- suggest(): alternative translations, contextual suggestions, cultural notes
- check_grammar(): corrected text plus suggestions
- synthesize_speech(): spoken audio as a WAV data URI
"""

import base64
import io
import json
import logging
import wave
from typing import Any, Dict, Optional

import httpx

from linguawise.config import Settings
from linguawise.core.language_codes import language_label

logger = logging.getLogger(__name__)

# Gemini TTS returns raw 16-bit mono PCM at 24 kHz
PCM_SAMPLE_RATE = 24000
PCM_SAMPLE_WIDTH = 2
PCM_CHANNELS = 1

TRANSLATE_SCHEMA = {
    "type": "OBJECT",
    "properties": {"translatedText": {"type": "STRING"}},
    "required": ["translatedText"],
}

SUGGEST_SCHEMA = {
    "type": "OBJECT",
    "properties": {
        "suggestions": {"type": "ARRAY", "items": {"type": "STRING"}},
        "alternatives": {"type": "ARRAY", "items": {"type": "STRING"}},
        "culturalNotes": {"type": "STRING"},
    },
    "required": ["alternatives", "culturalNotes"],
}

GRAMMAR_SCHEMA = {
    "type": "OBJECT",
    "properties": {
        "correctedText": {"type": "STRING"},
        "suggestions": {"type": "ARRAY", "items": {"type": "STRING"}},
    },
    "required": ["correctedText"],
}


def pcm_to_wav(pcm: bytes,
               sample_rate: int = PCM_SAMPLE_RATE,
               sample_width: int = PCM_SAMPLE_WIDTH,
               channels: int = PCM_CHANNELS) -> bytes:
    """Wrap raw PCM frames in a WAV container."""
    buffer = io.BytesIO()
    with wave.open(buffer, "wb") as wav_file:
        wav_file.setnchannels(channels)
        wav_file.setsampwidth(sample_width)
        wav_file.setframerate(sample_rate)
        wav_file.writeframes(pcm)
    return buffer.getvalue()


class GeminiClient:
    """
    Client for the hosted generative-language API.

    The underlying httpx.AsyncClient is created by the application
    lifespan (or passed in by tests) and closed with aclose().
    """

    def __init__(self, settings: Settings, http_client: Optional[httpx.AsyncClient] = None):
        self.settings = settings
        self._http = http_client or httpx.AsyncClient(timeout=settings.genai_timeout_seconds)

    async def aclose(self):
        await self._http.aclose()

    async def _generate(self, model: str, body: Dict[str, Any]) -> Dict[str, Any]:
        # 1. Send POST request to the model's generateContent endpoint
        response = await self._http.post(
            f"{self.settings.gemini_api_url}/models/{model}:generateContent",
            headers={"x-goog-api-key": self.settings.gemini_api_key or ""},
            json=body,
        )
        response.raise_for_status()
        return response.json()

    @staticmethod
    def _first_part(data: Dict[str, Any]) -> Dict[str, Any]:
        """Return the first content part of the first candidate, or {}."""
        candidates = data.get("candidates") or []
        if not candidates:
            return {}
        parts = (candidates[0].get("content") or {}).get("parts") or []
        return parts[0] if parts else {}

    async def _generate_json(self, prompt: str, schema: Dict[str, Any]) -> Dict[str, Any]:
        data = await self._generate(
            self.settings.gemini_model,
            {
                "contents": [{"role": "user", "parts": [{"text": prompt}]}],
                "generationConfig": {
                    "responseMimeType": "application/json",
                    "responseSchema": schema,
                },
            },
        )
        text = self._first_part(data).get("text")
        if not text:
            return {}
        parsed = json.loads(text)
        return parsed if isinstance(parsed, dict) else {}

    async def translate(self, text: str, source_lang: str, target_lang: str,
                        tone: str, tone_preference: str = "neutral") -> Dict[str, Any]:
        prompt = (
            "You are a highly skilled translator who keeps the intended tone of a text.\n\n"
            f"Translate the following text from {language_label(source_lang)} to "
            f"{language_label(target_lang)}. Use a {tone} tone, in line with the user's "
            f"general tone preference of {tone_preference}.\n\n"
            f"{text}\n\n"
            "The translation must be accurate, grammatically correct and culturally "
            "appropriate. Return it in the translatedText field."
        )
        return await self._generate_json(prompt, TRANSLATE_SCHEMA)

    async def suggest(self, text: str, source_lang: str, target_lang: str, tone: str) -> Dict[str, Any]:
        prompt = (
            "You are an expert translator helping a user improve a translation.\n\n"
            f"Original text: {text}\n"
            f"Source language: {language_label(source_lang)}\n"
            f"Target language: {language_label(target_lang)}\n"
            f"Tone: {tone}\n\n"
            "List contextual suggestions, alternative translations and any cultural "
            "notes the user should know about."
        )
        return await self._generate_json(prompt, SUGGEST_SCHEMA)

    async def check_grammar(self, text: str, source_lang: str, target_lang: str) -> Dict[str, Any]:
        prompt = (
            "You are a grammar expert. Review the following text, translated from "
            f"{language_label(source_lang)} to {language_label(target_lang)}, for "
            "grammatical errors.\n\n"
            f"Text: {text}\n\n"
            "Return the corrected text and a list of suggested corrections."
        )
        return await self._generate_json(prompt, GRAMMAR_SCHEMA)

    async def synthesize_speech(self, text: str) -> Dict[str, Any]:
        """
        Returns {"media": "data:audio/wav;base64,..."}, or {"media": None}
        when the model answered without audio.
        """
        data = await self._generate(
            self.settings.gemini_tts_model,
            {
                "contents": [{"role": "user", "parts": [{"text": text}]}],
                "generationConfig": {
                    "responseModalities": ["AUDIO"],
                    "speechConfig": {
                        "voiceConfig": {
                            "prebuiltVoiceConfig": {"voiceName": self.settings.gemini_tts_voice}
                        }
                    },
                },
            },
        )
        inline = self._first_part(data).get("inlineData") or {}
        encoded = inline.get("data")
        if not encoded:
            logger.warning("Speech model returned no audio payload")
            return {"media": None}

        wav = pcm_to_wav(base64.b64decode(encoded))
        return {"media": "data:audio/wav;base64," + base64.b64encode(wav).decode("ascii")}
