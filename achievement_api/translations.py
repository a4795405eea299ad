from typing import Any, Dict, Optional, Union

SUPPORTED_LANGUAGES = {
    "ru": "Русский",
    "en": "English",
    "tr": "Türkçe",
    "fr": "Français",
    "de": "Deutsch",
    "ar": "العربية",
    "gr": "Ελληνικά",
}
LANGS = tuple(SUPPORTED_LANGUAGES)
DEFAULT_LANGUAGE = "en"

# Accepted at the API boundary: a plain string (stored under DEFAULT_LANGUAGE)
# or a map of language code to text.
TranslationInput = Union[str, Dict[str, Any]]
Localized = Union[str, Dict[str, str]]


def normalize(value: Any) -> Dict[str, str]:
    """
    Builds a complete translation map: every supported language is present,
    missing or non-string values become "" and unknown codes are dropped.
    """
    if not isinstance(value, dict):
        value = {}
    return {lang: value[lang] if isinstance(value.get(lang), str) else "" for lang in LANGS}


def pick(value: Any, lang: str) -> str:
    """Returns the text for `lang` only; there is no fallback language."""
    if isinstance(value, dict) and isinstance(value.get(lang), str):
        return value[lang]
    return ""


def localize(value: Any, lang: Optional[str]) -> Localized:
    """Single string when a language was requested, the full map otherwise."""
    if lang:
        return pick(value, lang)
    return normalize(value)


def resolve_translation_input(value: TranslationInput) -> Dict[str, str]:
    if isinstance(value, str):
        value = {DEFAULT_LANGUAGE: value}
    return normalize(value)


def has_any_translation(translations: Dict[str, str]) -> bool:
    return any(text.strip() for text in translations.values())


def normalize_lang(raw: Optional[str]) -> Optional[str]:
    """'ru-RU' / 'ru_RU' -> 'ru'. Empty input means no language was requested."""
    if not raw:
        return None
    code = raw.replace("_", "-").split("-")[0].strip().lower()
    return code or None
