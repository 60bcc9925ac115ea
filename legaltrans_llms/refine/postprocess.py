from __future__ import annotations

import re
from dataclasses import dataclass, field
from typing import Iterable

from legaltrans_llms.translate.glossary import apply_glossary
from legaltrans_llms.translate.transliteration import find_residual_words, transliterate_residuals

# Clause and list markers that must survive translation
LIST_MARKER_PATTERNS = [
    r'^(\s*)(\d+\.\d+\.?)\s+',            # Hierarchical: 1.1 1.2
    r'^(\s*)(\d+\.)\s+',                  # Numbered: 1. 2. 3.
    r'^(\s*)(\d+\))\s+',                  # Numbered: 1) 2) 3)
    r'^(\s*)([ivxlcdm]+\.)\s+',           # Roman: i. ii. iii.
    r'^(\s*)([a-z]\.)\s+',                # Lettered: a. b. c.
    r'^(\s*)(\([a-z0-9]+\))\s+',          # Parenthesized: (a) (1)
    r'^(\s*)([-•●])\s+',                  # Bullet points
]


def extract_list_marker(text: str) -> tuple[str, str, str]:
    """Split a line into (indent, marker, content); ('', '', text) if unmarked."""
    for pattern in LIST_MARKER_PATTERNS:
        match = re.match(pattern, text, re.IGNORECASE)
        if match:
            return match.group(1), match.group(2), text[match.end():]
    return "", "", text


def missing_markers(source: str, translated: str) -> list[str]:
    """Clause markers present in the source but not in the translation."""
    def markers(text: str) -> list[str]:
        found = []
        for line in text.split("\n"):
            _, marker, _ = extract_list_marker(line)
            if marker:
                found.append(marker.lower())
        return found

    remaining = markers(translated)
    missing = []
    for marker in markers(source):
        if marker in remaining:
            remaining.remove(marker)
        else:
            missing.append(marker)
    return missing


def normalize_text(text: str) -> str:
    """Unify newlines, collapse runs of blank lines to one, strip the ends."""
    t = (text or "").replace("\r\n", "\n").replace("\r", "\n")
    t = re.sub(r"[ \t]+\n", "\n", t)
    t = re.sub(r"\n{3,}", "\n\n", t)
    return t.strip()


@dataclass
class PostProcessResult:
    text: str
    residual_words: list[str] = field(default_factory=list)
    transliterated: list[str] = field(default_factory=list)
    missing_markers: list[str] = field(default_factory=list)


class PostProcessor:
    """Clean up raw model output for one target language.

    Steps: newline normalisation, glossary enforcement, residual-script
    detection and (optionally) phonetic repair of residual words.
    """

    def __init__(self, target_lang: str, source_lang: str = "english", transliterate_residuals: bool = False):
        self.target_lang = target_lang
        self.source_lang = source_lang
        self.transliterate_residuals = transliterate_residuals

    def process(self, text: str, glossary: Iterable | None = (), source: str | None = None) -> PostProcessResult:
        """Clean ``text``; when ``source`` is given, report lost clause markers."""
        result = apply_glossary(normalize_text(text), glossary)

        repaired: list[str] = []
        if self.transliterate_residuals:
            result, repaired = transliterate_residuals(result, self.target_lang)

        return PostProcessResult(
            text=result,
            residual_words=find_residual_words(result, self.target_lang, self.source_lang),
            transliterated=repaired,
            missing_markers=missing_markers(source, result) if source else [],
        )
