"""
Supported languages and their writing systems.

Language names are the lowercase English names used by the data files
("english", "hindi", ...). Two-letter codes are accepted as aliases
anywhere a language is passed in.
"""

from __future__ import annotations

import re
from dataclasses import dataclass


@dataclass(frozen=True)
class Language:
    """A supported language and the script it is written in."""
    name: str
    code: str
    display: str
    script: str
    script_range: str  # regex character class for the script block


LANGUAGES: dict[str, Language] = {
    "english": Language("english", "en", "English", "latin", "A-Za-z"),
    "hindi": Language("hindi", "hi", "Hindi", "devanagari", "\u0900-\u097F"),
    "gujarati": Language("gujarati", "gu", "Gujarati", "gujarati", "\u0A80-\u0AFF"),
    "marathi": Language("marathi", "mr", "Marathi", "devanagari", "\u0900-\u097F"),
    "kannada": Language("kannada", "kn", "Kannada", "kannada", "\u0C80-\u0CFF"),
}

_ALIASES = {lang.code: name for name, lang in LANGUAGES.items()}


def normalize_language(value: str) -> str:
    """Return the canonical language name for a name or code.

    Unknown languages are returned lowercased and stripped so callers can
    still pass them through to the model; they just get no script rules.
    """
    key = (value or "").strip().lower()
    return _ALIASES.get(key, key)


def get_language(value: str) -> Language | None:
    return LANGUAGES.get(normalize_language(value))


def display_name(value: str) -> str:
    lang = get_language(value)
    return lang.display if lang else (value or "").strip().title()


def script_of(value: str) -> str | None:
    lang = get_language(value)
    return lang.script if lang else None


def needs_transliteration(source_lang: str, target_lang: str) -> bool:
    """True when source and target are written in different scripts."""
    source_script = script_of(source_lang)
    target_script = script_of(target_lang)
    if target_script is None:
        return False
    return source_script != target_script


def contains_script(text: str, language: str) -> bool:
    """Whether the text has at least one character in the language's script."""
    lang = get_language(language)
    if lang is None:
        return False
    return re.search(f"[{lang.script_range}]", text or "") is not None
