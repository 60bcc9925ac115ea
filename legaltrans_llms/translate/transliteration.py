"""
Transliteration policy and residual-script checks.

Legal translations into Indian languages must come out entirely in the
target script: names, addresses and company names are rendered
phonetically ("John Smith" -> "जॉन स्मिथ"), never passed through in Latin
letters. This module provides:

- ``transliteration_rules``: the policy block injected into prompts
- ``find_residual_words``: Latin or source-script words left in a translation
- ``script_confidence``: output confidence from the residual ratio
- ``transliterate_word``: a crude phonetic fallback used only when the
  post-processor is asked to repair residual words
"""

from __future__ import annotations

import re

from legaltrans_llms.languages import contains_script, display_name, get_language, normalize_language, script_of

# Abbreviations that legitimately survive in Latin script
ALLOWED_ABBREVIATIONS = frozenset({"Ltd", "Pvt", "Inc", "LLC", "Dr", "Mr", "Mrs", "Ms"})

_LATIN_WORD = re.compile(r"\b[A-Za-z]{3,}\b")

TRANSLITERATION_EXAMPLES = {
    "hindi": [
        ("John Smith", "जॉन स्मिथ"),
        ("ABC Corporation", "एबीसी कॉर्पोरेशन"),
        ("123 Main Street", "123 मेन स्ट्रीट"),
        ("New Delhi", "नई दिल्ली"),
    ],
    "gujarati": [
        ("John Smith", "જોન સ્મિથ"),
        ("ABC Corporation", "એબીસી કોર્પોરેશન"),
        ("123 Main Street", "123 મેઇન સ્ટ્રીટ"),
        ("Ahmedabad", "અમદાવાદ"),
    ],
    "marathi": [
        ("John Smith", "जॉन स्मिथ"),
        ("ABC Corporation", "एबीसी कॉर्पोरेशन"),
        ("123 Main Street", "123 मेन स्ट्रीट"),
        ("Mumbai", "मुंबई"),
    ],
    "kannada": [
        ("John Smith", "ಜಾನ್ ಸ್ಮಿತ್"),
        ("ABC Corporation", "ಎಬಿಸಿ ಕಾರ್ಪೊರೇಶನ್"),
        ("123 Main Street", "123 ಮೈನ್ ಸ್ಟ್ರೀಟ್"),
        ("Bangalore", "ಬೆಂಗಳೂರು"),
    ],
}

# Letter-level phonetic maps; digraphs are tried before single letters.
_DEVANAGARI = {
    "a": "अ", "aa": "आ", "i": "इ", "ii": "ई", "u": "उ", "uu": "ऊ",
    "e": "ए", "ai": "ऐ", "o": "ओ", "au": "औ",
    "k": "क", "kh": "ख", "g": "ग", "gh": "घ", "ch": "च", "chh": "छ",
    "j": "ज", "jh": "झ", "t": "ट", "th": "ठ", "d": "ड", "dh": "ढ",
    "n": "ण", "p": "प", "ph": "फ", "b": "ब", "bh": "भ", "m": "म",
    "y": "य", "r": "र", "l": "ल", "v": "व", "w": "व", "sh": "श",
    "s": "स", "h": "ह",
}

PHONETIC_MAPS: dict[str, dict[str, str]] = {
    "hindi": _DEVANAGARI,
    "marathi": _DEVANAGARI,
    "gujarati": {
        "a": "અ", "aa": "આ", "i": "ઇ", "ii": "ઈ", "u": "ઉ", "uu": "ઊ",
        "e": "એ", "ai": "ઐ", "o": "ઓ", "au": "ઔ",
        "k": "ક", "kh": "ખ", "g": "ગ", "gh": "ઘ", "ch": "ચ", "chh": "છ",
        "j": "જ", "jh": "ઝ", "t": "ટ", "th": "ઠ", "d": "ડ", "dh": "ઢ",
        "n": "ણ", "p": "પ", "ph": "ફ", "b": "બ", "bh": "ભ", "m": "મ",
        "y": "ય", "r": "ર", "l": "લ", "v": "વ", "w": "વ", "sh": "શ",
        "s": "સ", "h": "હ",
    },
    "kannada": {
        "a": "ಅ", "aa": "ಆ", "i": "ಇ", "ii": "ಈ", "u": "ಉ", "uu": "ಊ",
        "e": "ಏ", "ai": "ಐ", "o": "ಓ", "au": "ಔ",
        "k": "ಕ", "kh": "ಖ", "g": "ಗ", "gh": "ಘ", "ch": "ಚ", "chh": "ಛ",
        "j": "ಜ", "jh": "ಝ", "t": "ಟ", "th": "ಠ", "d": "ಡ", "dh": "ಢ",
        "n": "ಣ", "p": "ಪ", "ph": "ಫ", "b": "ಬ", "bh": "ಭ", "m": "ಮ",
        "y": "ಯ", "r": "ರ", "l": "ಲ", "v": "ವ", "w": "ವ", "sh": "ಶ",
        "s": "ಸ", "h": "ಹ",
    },
}


def transliteration_examples(target_lang: str) -> str:
    examples = TRANSLITERATION_EXAMPLES.get(normalize_language(target_lang), [])
    if not examples:
        return ""
    lines = ["Examples of proper transliteration:"]
    lines.extend(f'- "{src}" → "{tgt}"' for src, tgt in examples)
    return "\n".join(lines)


def transliteration_rules(target_lang: str) -> str:
    """Policy block for the prompt; empty for English targets."""
    if script_of(target_lang) in (None, "latin"):
        return ""
    name = display_name(target_lang)
    parts = [
        "CRITICAL TRANSLITERATION RULES:",
        f"1. ALL proper nouns (names of people, places, companies) MUST be transliterated phonetically into {name} script",
        "2. ALL addresses, including street and locality names, MUST be transliterated",
        "3. Company names and acronyms MUST be transliterated phonetically",
        "4. Numbers may remain as Arabic numerals (1, 2, 3)",
        f"5. ZERO source-script words are acceptable in the output: every word must be written in {name} script",
    ]
    examples = transliteration_examples(target_lang)
    if examples:
        parts.extend(["", examples])
    parts.extend([
        "",
        f"Remember: the goal is 100% {name} output. Even a word that is originally English "
        f"must be written in {name} script.",
    ])
    return "\n".join(parts)


def _source_script_words(text: str, target_lang: str, source_lang: str | None) -> list[str]:
    """Words written in a non-Latin source script that differs from the target's."""
    if not source_lang:
        return []
    source_script = script_of(source_lang)
    if source_script in (None, "latin", script_of(target_lang)):
        return []
    if not contains_script(text, source_lang):
        return []
    return re.findall(f"[{get_language(source_lang).script_range}]+", text)


def find_residual_words(text: str, target_lang: str, source_lang: str | None = None) -> list[str]:
    """Words left in the wrong script after translation.

    Latin words of 3+ letters count against non-Latin targets, except
    allowed abbreviations (Ltd, Pvt, Mr, ...). When ``source_lang`` uses
    a non-Latin script other than the target's, untranslated words in
    that script count too ("यह" left in a Gujarati translation).
    """
    if script_of(target_lang) is None:
        return []
    residual: list[str] = []
    if script_of(target_lang) != "latin":
        residual += [w for w in _LATIN_WORD.findall(text or "") if w not in ALLOWED_ABBREVIATIONS]
    residual += _source_script_words(text or "", target_lang, source_lang)
    return residual


def script_confidence(translated_text: str, target_lang: str, source_lang: str | None = None) -> int:
    """Confidence (0-100) that the output is fully in the target script.

    English targets score a flat 95 and empty output scores 0. Otherwise
    confidence drops by 2 points per percent of residual words.
    """
    if normalize_language(target_lang) == "english":
        return 95
    if not (translated_text or "").strip():
        return 0
    residual = len(find_residual_words(translated_text, target_lang, source_lang))
    total = len(translated_text.split())
    ratio = residual / max(total, 1)
    return int(max(0.0, min(100.0, 100 - ratio * 200)) + 0.5)


def transliterate_word(word: str, target_lang: str) -> str:
    """Letter-by-letter phonetic rendering of a Latin word.

    Unknown characters (digits, punctuation) pass through. This is a
    last-resort repair, not a transliteration engine.
    """
    mapping = PHONETIC_MAPS.get(normalize_language(target_lang))
    if not mapping:
        return word

    lowered = word.lower()
    result = []
    i = 0
    while i < len(lowered):
        for size in (3, 2, 1):
            chunk = lowered[i:i + size]
            if len(chunk) == size and chunk in mapping:
                result.append(mapping[chunk])
                i += size
                break
        else:
            result.append(lowered[i])
            i += 1
    return "".join(result)


def transliterate_residuals(text: str, target_lang: str) -> tuple[str, list[str]]:
    """Replace residual Latin words with their phonetic fallback.

    Returns:
        (repaired text, words that were replaced)
    """
    residual = set(find_residual_words(text, target_lang))
    if not residual:
        return text, []

    def repl(match: re.Match) -> str:
        word = match.group(0)
        return transliterate_word(word, target_lang) if word in residual else word

    return _LATIN_WORD.sub(repl, text), sorted(residual)
