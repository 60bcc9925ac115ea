"""
Legal terminology store.

Loads the static terminology/pattern table once and answers lookups from
memory afterwards. The table is JSON shaped as::

    {
      "metadata": {...},                         # optional, ignored
      "terminology": {"agreement": {"english": "agreement", "hindi": "समझौता", ...}},
      "patterns":    {"whereas clause": {"english": "WHEREAS ...", ...}}
    }

A missing or malformed table is fatal: ``load()`` raises
``TerminologyError`` and no translation can be grounded until the file
is fixed. The store is an explicit service object owned by the pipeline
and injected into the prompt composer and quality scorer.

Design Philosophy:
- Read-only after load; ``reload()`` exists for tests and data refreshes
- Concept keys are case-insensitive
- A missing language form is absent (None), never an empty string
"""

from __future__ import annotations

import json
import logging
from pathlib import Path
from typing import Optional

from legaltrans_llms.languages import normalize_language
from legaltrans_llms.models import PatternEntry, TerminologyEntry

logger = logging.getLogger(__name__)

# Concepts offered to the model first, independent of the input text, so
# the terminology block has a predictable size.
PRIORITY_TERMS = (
    "agreement",
    "contract",
    "whereas",
    "party",
    "witness",
    "petition",
    "court",
    "plaintiff",
    "defendant",
    "hereby",
    "affidavit",
    "consideration",
    "notice",
    "appeal",
    "jurisdiction",
)


class TerminologyError(RuntimeError):
    """The terminology table is missing or does not match the schema."""


def _parse_table(raw: object, section: str, path: Path) -> dict[str, dict[str, str]]:
    if not isinstance(raw, dict):
        raise TerminologyError(f"{path}: '{section}' must be an object")
    table: dict[str, dict[str, str]] = {}
    for key, forms in raw.items():
        if not isinstance(forms, dict):
            raise TerminologyError(f"{path}: {section}[{key!r}] must map languages to strings")
        parsed = {}
        for lang, value in forms.items():
            if not isinstance(value, str):
                raise TerminologyError(f"{path}: {section}[{key!r}][{lang!r}] is not a string")
            parsed[normalize_language(lang)] = value
        table[str(key)] = parsed
    return table


class TerminologyStore:
    """Process-wide, lazily loaded legal terminology table.

    Usage:
        store = TerminologyStore(TERMINOLOGY_FILE)
        store.load()                       # fail fast at startup
        store.lookup("Agreement", "hindi")  # -> "समझौता"
    """

    def __init__(self, path: str | Path):
        self.path = Path(path)
        self._terms: Optional[dict[str, TerminologyEntry]] = None
        self._patterns: Optional[dict[str, PatternEntry]] = None

    @property
    def is_loaded(self) -> bool:
        return self._terms is not None

    def load(self) -> TerminologyStore:
        """Load the table if not loaded yet.

        Raises:
            TerminologyError: file missing, invalid JSON or schema violation
        """
        if self._terms is not None:
            return self

        try:
            raw = json.loads(self.path.read_text(encoding="utf-8"))
        except FileNotFoundError as e:
            raise TerminologyError(f"Terminology file not found: {self.path}") from e
        except (OSError, json.JSONDecodeError) as e:
            raise TerminologyError(f"Cannot read terminology file {self.path}: {e}") from e

        if not isinstance(raw, dict) or "terminology" not in raw:
            raise TerminologyError(f"{self.path}: expected an object with a 'terminology' key")

        terms = _parse_table(raw["terminology"], "terminology", self.path)
        patterns = _parse_table(raw.get("patterns", {}), "patterns", self.path)

        self._terms = {
            key.lower(): TerminologyEntry(concept=key.lower(), forms=forms)
            for key, forms in terms.items()
        }
        self._patterns = {
            name: PatternEntry(name=name, forms=forms)
            for name, forms in patterns.items()
        }
        logger.info(
            "Loaded %d terms and %d patterns from %s",
            len(self._terms), len(self._patterns), self.path,
        )
        return self

    def reload(self) -> TerminologyStore:
        """Drop the cached table and read the file again."""
        self._terms = None
        self._patterns = None
        return self.load()

    def __len__(self) -> int:
        return len(self.entries())

    def entries(self) -> list[TerminologyEntry]:
        self.load()
        return list(self._terms.values())

    def lookup(self, concept: str, lang: str) -> Optional[str]:
        """Surface form of a concept in a language, or None."""
        self.load()
        entry = self._terms.get((concept or "").strip().lower())
        return entry.form(lang) if entry else None

    def top_terms(self, source_lang: str, target_lang: str, n: int = 10) -> list[tuple[str, str]]:
        """Up to ``n`` (source, target) term pairs for a language pair.

        Concepts in ``PRIORITY_TERMS`` come first in that order, then the
        rest of the table in file order. Concepts missing either language
        are skipped.
        """
        self.load()
        ordered = [c for c in PRIORITY_TERMS if c in self._terms]
        ordered += [c for c in self._terms if c not in PRIORITY_TERMS]

        pairs = []
        for concept in ordered:
            if len(pairs) >= n:
                break
            entry = self._terms[concept]
            source, target = entry.form(source_lang), entry.form(target_lang)
            if source and target:
                pairs.append((source, target))
        return pairs

    def patterns(self, source_lang: str, target_lang: str) -> list[tuple[str, str, str]]:
        """(name, source phrase, target phrase) for patterns in both languages."""
        self.load()
        found = []
        for entry in self._patterns.values():
            source, target = entry.form(source_lang), entry.form(target_lang)
            if source and target:
                found.append((entry.name, source, target))
        return found

    def count_matches(self, text: str, lang: str = "english") -> int:
        """Number of distinct concepts mentioned in the text.

        A concept counts once when its key or its ``lang`` surface form
        occurs anywhere in the text, ignoring case.
        """
        self.load()
        lowered = (text or "").lower()
        if not lowered.strip():
            return 0
        count = 0
        for entry in self._terms.values():
            form = entry.form(lang)
            if entry.concept in lowered or (form and form.lower() in lowered):
                count += 1
        return count
