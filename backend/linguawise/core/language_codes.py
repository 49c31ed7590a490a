# backend/linguawise/core/language_codes.py
"""
Language and Tone Catalogue

This module holds the languages and tones offered by the translator and
resolves language codes to their display labels.

Codes arriving from clients or stored records are not always in the same
shape ('EN', 'en-US', 'zh-Hans', 'pt_BR'), so every lookup normalizes the
code to a BCP-47 tag first and then reduces it to the catalogue key.
"""
import langcodes        # For normalizing and validating BCP47 language codes

from linguawise.models import TONES


SUPPORTED_LANGUAGES = [
    {"code": "en", "label": "English"},
    {"code": "es", "label": "Spanish"},
    {"code": "fr", "label": "French"},
    {"code": "de", "label": "German"},
    {"code": "it", "label": "Italian"},
    {"code": "pt", "label": "Portuguese"},
    {"code": "ja", "label": "Japanese"},
    {"code": "ko", "label": "Korean"},
    {"code": "zh", "label": "Chinese (Simplified)"},
    {"code": "ru", "label": "Russian"},
]

TONE_OPTIONS = [{"code": tone, "label": tone.capitalize()} for tone in TONES]

_LABELS = {lang["code"]: lang["label"] for lang in SUPPORTED_LANGUAGES}

# Catalogue keys for tags whose primary subtag alone is ambiguous
CATALOGUE_EXCEPTIONS = {
    "zh-Hans": "zh",
    "zh-CN": "zh",
    "zh-Hant": "zh-Hant",   # Traditional Chinese is not offered
    "zh-TW": "zh-Hant",
}


def normalize_code(code: str) -> str:
    """
    Standardize a language tag into BCP-47 format (e.g. 'en_us' -> 'en-US').
    Returns the stripped input unchanged if it is not a valid tag.
    """
    code = (code or "").strip()
    if not code:
        return code
    try:
        return langcodes.standardize_tag(code.replace("_", "-"))
    except (ValueError, LookupError):
        return code


def catalogue_key(code: str) -> str:
    """Reduce a language tag to the key used in SUPPORTED_LANGUAGES."""
    tag = normalize_code(code)
    if tag in CATALOGUE_EXCEPTIONS:
        return CATALOGUE_EXCEPTIONS[tag]
    if tag in _LABELS:
        return tag
    try:
        return langcodes.get(tag).language or tag
    except (ValueError, LookupError):
        return tag


def language_label(code: str) -> str:
    """Display label for a language code, or the raw code if unknown."""
    return _LABELS.get(catalogue_key(code), code)


def is_supported(code: str) -> bool:
    return catalogue_key(code) in _LABELS
