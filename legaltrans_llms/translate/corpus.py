"""
Reference corpus of legal documents.

The corpus is a directory of JSON files, each holding one document
record or a list of records::

    {"id": "eng_agreement_001", "title": "...", "content": "...",
     "language": "english", "documentType": "agreement", "source": "template"}

It is used for few-shot grounding of prompts (excerpts of similar
documents) and as the corpus-similarity factor of the quality score.

Usage:
    from legaltrans_llms.translate.corpus import CorpusIndex

    corpus = CorpusIndex(CORPUS_DIR)
    docs = corpus.search("WHEREAS the parties agree ...", "hindi", limit=2)

Similarity is symmetric word overlap (Jaccard) over lowercase
whitespace tokens longer than three characters, scaled to 0-100.
"""

from __future__ import annotations

import json
import logging
from collections import Counter
from pathlib import Path
from typing import Optional

from legaltrans_llms.languages import normalize_language
from legaltrans_llms.models import CorpusDocument

logger = logging.getLogger(__name__)

INDEX_FILE = "index.json"


class CorpusError(RuntimeError):
    """A corpus file exists but cannot be parsed into documents."""


def _words(text: str) -> set[str]:
    return {w for w in text.lower().split() if len(w) > 3}


def similarity(text1: str, text2: str) -> float:
    """Jaccard word overlap of two texts as a percentage (0-100)."""
    words1, words2 = _words(text1 or ""), _words(text2 or "")
    if not words1 or not words2:
        return 0.0
    intersection = len(words1 & words2)
    union = len(words1) + len(words2) - intersection
    return (intersection / union) * 100 if union else 0.0


class CorpusIndex:
    """Lazily loaded, read-only index over the reference corpus.

    An absent corpus directory is not an error: the index is simply
    empty and every search returns ``[]``.
    """

    def __init__(self, directory: str | Path):
        self.directory = Path(directory)
        self._documents: Optional[list[CorpusDocument]] = None

    def _load(self) -> list[CorpusDocument]:
        if self._documents is not None:
            return self._documents

        if not self.directory.is_dir():
            logger.warning("Corpus directory not found: %s", self.directory)
            self._documents = []
            return self._documents

        documents: list[CorpusDocument] = []
        for path in sorted(self.directory.glob("*.json")):
            if path.name == INDEX_FILE:
                continue
            try:
                raw = json.loads(path.read_text(encoding="utf-8"))
                records = raw if isinstance(raw, list) else [raw]
                documents.extend(CorpusDocument.from_dict(r) for r in records)
            except (OSError, ValueError) as e:
                # json.JSONDecodeError is a ValueError too
                raise CorpusError(f"Invalid corpus file {path}: {e}") from e

        logger.info("Loaded %d documents into corpus from %s", len(documents), self.directory)
        self._documents = documents
        return documents

    def refresh(self) -> CorpusIndex:
        """Forget cached documents; the next access reloads the directory."""
        self._documents = None
        return self

    @property
    def documents(self) -> list[CorpusDocument]:
        return list(self._load())

    def __len__(self) -> int:
        return len(self._load())

    def search_scored(
        self,
        text: str,
        language: str,
        document_type: Optional[str] = None,
        limit: int = 5,
    ) -> list[tuple[CorpusDocument, float]]:
        """Rank documents of one language by similarity to ``text``.

        Args:
            text: Query text
            language: Only documents in this language are considered
            document_type: Optional type filter
            limit: Maximum number of results

        Returns:
            (document, similarity) pairs, highest similarity first; equal
            scores keep corpus order
        """
        language = normalize_language(language)
        candidates = [d for d in self._load() if d.language == language]
        if document_type:
            wanted = str(document_type).lower()
            candidates = [d for d in candidates if d.document_type == wanted]

        scored = [(doc, similarity(text, doc.content)) for doc in candidates]
        # list.sort is stable, so ties keep corpus order
        scored.sort(key=lambda item: item[1], reverse=True)
        return scored[:max(0, limit)]

    def search(
        self,
        text: str,
        language: str,
        document_type: Optional[str] = None,
        limit: int = 5,
    ) -> list[CorpusDocument]:
        """Documents most similar to ``text``, highest first."""
        return [doc for doc, _ in self.search_scored(text, language, document_type, limit)]

    def count_similar(
        self,
        text: str,
        language: str,
        document_type: Optional[str] = None,
        limit: int = 5,
    ) -> int:
        """Number of top-``limit`` documents sharing any vocabulary with ``text``."""
        return sum(1 for _, score in self.search_scored(text, language, document_type, limit) if score > 0)

    def examples(self, language: str, document_type: str, limit: int = 3) -> list[CorpusDocument]:
        """First documents of a language and type, in corpus order."""
        language = normalize_language(language)
        wanted = str(document_type).lower()
        matches = [d for d in self._load() if d.language == language and d.document_type == wanted]
        return matches[:limit]

    def stats(self) -> dict:
        """Document counts per language and document type."""
        docs = self._load()
        languages = Counter(d.language for d in docs)
        types = Counter(d.document_type for d in docs)
        return {
            "total_documents": len(docs),
            "languages": sorted(languages),
            "language_counts": dict(languages),
            "document_types": sorted(types),
            "type_counts": dict(types),
        }
