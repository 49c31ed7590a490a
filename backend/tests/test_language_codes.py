import pytest

from linguawise.core.language_codes import (
    SUPPORTED_LANGUAGES,
    TONE_OPTIONS,
    catalogue_key,
    is_supported,
    language_label,
    normalize_code,
)


@pytest.mark.parametrize("code, label", [
    ("es", "Spanish"),
    ("ES", "Spanish"),
    ("es-MX", "Spanish"),
    ("pt_BR", "Portuguese"),
    ("zh", "Chinese (Simplified)"),
    ("zh-Hans", "Chinese (Simplified)"),
])
def test_language_label(code, label) -> None:
    assert language_label(code) == label


def test_unknown_codes_fall_back_to_raw_code() -> None:
    assert language_label("tlh") == "tlh"
    assert language_label("zh-Hant") == "zh-Hant"
    assert language_label("not a code!") == "not a code!"


def test_normalize_code() -> None:
    assert normalize_code(" en_us ") == "en-US"
    assert normalize_code("") == ""


def test_catalogue() -> None:
    assert catalogue_key("en-GB") == "en"
    assert is_supported("ru")
    assert not is_supported("tlh")
    assert len(SUPPORTED_LANGUAGES) == 10
    assert [tone["code"] for tone in TONE_OPTIONS] == ["formal", "informal", "technical", "casual"]
    assert TONE_OPTIONS[0]["label"] == "Formal"
