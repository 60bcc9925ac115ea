"""
Core data models for LegalTrans-LLMs.

All models are plain dataclasses. Everything produced by the pipeline is
a value object: computed once per request or per section and never
mutated afterwards. The only long-lived state in the system lives in the
Terminology Store and Corpus Index service objects, not here.

Design Philosophy:
- Value objects are frozen where they are immutable by contract
- Language fields always hold canonical names ("hindi", not "hi")
- ``to_dict()`` produces the camelCase shape consumed by renderers/UIs
"""

from __future__ import annotations

from dataclasses import dataclass, field
from enum import Enum
from typing import Any, Optional

from legaltrans_llms.languages import normalize_language


class Confidence(str, Enum):
    """Confidence band derived from an overall quality score."""
    HIGH = "high"
    MEDIUM = "medium"
    LOW = "low"


HIGH_CONFIDENCE = 80
MEDIUM_CONFIDENCE = 60


def confidence_for(overall: float) -> Confidence:
    """Map an overall score to its confidence band (>=80 high, >=60 medium)."""
    if overall >= HIGH_CONFIDENCE:
        return Confidence.HIGH
    if overall >= MEDIUM_CONFIDENCE:
        return Confidence.MEDIUM
    return Confidence.LOW


# ============================================================================
# Static reference data
# ============================================================================

@dataclass(frozen=True)
class TerminologyEntry:
    """A legal concept and its surface form in each language.

    Attributes:
        concept: Canonical concept key, stored lowercase (e.g. "agreement")
        forms: Language name -> term
    """
    concept: str
    forms: dict[str, str] = field(default_factory=dict)

    def form(self, lang: str) -> Optional[str]:
        """Surface form for a language, or None when the table has none."""
        value = self.forms.get(normalize_language(lang))
        return value or None


@dataclass(frozen=True)
class PatternEntry:
    """A named boilerplate phrase (e.g. a whereas clause) per language.

    Used for prompt grounding only, never for scoring.
    """
    name: str
    forms: dict[str, str] = field(default_factory=dict)

    def form(self, lang: str) -> Optional[str]:
        value = self.forms.get(normalize_language(lang))
        return value or None


@dataclass(frozen=True)
class CorpusDocument:
    """A reference legal document from the corpus."""
    id: str
    title: str
    content: str
    language: str
    document_type: str
    source: str
    url: Optional[str] = None
    date_added: Optional[str] = None

    @classmethod
    def from_dict(cls, data: dict[str, Any]) -> CorpusDocument:
        """Build a document from a corpus record.

        Accepts both camelCase (``documentType``) and snake_case keys.

        Raises:
            ValueError: if the record is not a mapping or misses a field
        """
        if not isinstance(data, dict):
            raise ValueError(f"corpus record must be an object, got {type(data).__name__}")

        def pick(*names: str) -> Any:
            for name in names:
                if name in data and data[name] is not None:
                    return data[name]
            raise ValueError(f"corpus record missing field {names[0]!r}")

        return cls(
            id=str(pick("id")),
            title=str(pick("title")),
            content=str(pick("content")),
            language=normalize_language(str(pick("language"))),
            document_type=str(pick("documentType", "document_type")).lower(),
            source=str(pick("source")),
            url=data.get("url"),
            date_added=data.get("dateAdded") or data.get("date_added"),
        )

    def excerpt(self, length: int = 200) -> str:
        return self.content[:length]


# ============================================================================
# Requests and results
# ============================================================================

@dataclass(frozen=True)
class TranslationRequest:
    """A single translation job. Constructed per call, never persisted.

    Attributes:
        text: Plain UTF-8 source text with paragraphs separated by blank lines
        source_lang: Source language name or code
        target_lang: Target language name or code
        document_type: Optional document-type tag; classified when absent
        glossary: User glossary terms, applied in the given order
    """
    text: str
    source_lang: str
    target_lang: str
    document_type: Optional[str] = None
    glossary: tuple = ()

    def with_text(self, text: str) -> TranslationRequest:
        """Copy of this request for a different slice of text."""
        return TranslationRequest(
            text=text,
            source_lang=self.source_lang,
            target_lang=self.target_lang,
            document_type=self.document_type,
            glossary=self.glossary,
        )


@dataclass(frozen=True)
class QualityFactors:
    """The three factor scores behind an overall quality score (0-100 each)."""
    terminology_match: float = 0
    corpus_similarity: float = 0
    complexity: float = 0

    def to_dict(self) -> dict:
        return {
            "terminologyMatch": self.terminology_match,
            "corpusSimilarity": self.corpus_similarity,
            "complexity": self.complexity,
        }


@dataclass(frozen=True)
class QualityScore:
    """Composite translation confidence.

    ``overall`` is the 40/30/30 weighted combination of the factors,
    clamped to [0, 100]; ``confidence`` is a pure function of it.
    """
    overall: int
    confidence: Confidence
    factors: QualityFactors
    details: str

    def to_dict(self) -> dict:
        return {
            "overall": self.overall,
            "confidence": self.confidence.value,
            "factors": self.factors.to_dict(),
            "details": self.details,
        }


@dataclass(frozen=True)
class SectionScore:
    """Score of one source section paired with its translation."""
    text: str
    translated_text: str
    score: QualityScore
    needs_review: bool

    def to_dict(self) -> dict:
        return {
            "text": self.text,
            "translatedText": self.translated_text,
            "score": self.score.to_dict(),
            "needsReview": self.needs_review,
        }


@dataclass(frozen=True)
class QualityReport:
    """Section-wise scores plus the document-level aggregate.

    Attributes:
        sections: Positionally paired section scores
        overall: Aggregate over ``sections``
        mismatched_sections: Source/translated section count difference
            (sections beyond the shorter side are not scored)
    """
    sections: list[SectionScore]
    overall: QualityScore
    mismatched_sections: int = 0

    @property
    def review_count(self) -> int:
        return sum(1 for s in self.sections if s.needs_review)

    def to_dict(self) -> dict:
        return {
            "overall": self.overall.to_dict(),
            "sections": [s.to_dict() for s in self.sections],
            "mismatchedSections": self.mismatched_sections,
        }


@dataclass
class TranslationOutcome:
    """Result of translating a document (single shot or chunked).

    Attributes:
        translated_text: Translation with paragraph breaks kept as blank lines
        confidence: 0-100 output confidence (mean over chunks)
        document_type: Tag used to ground the prompt
        chunk_count: Number of model calls made
        residual_words: Source-script words left in the output
        quality: Section-wise quality report, when assessed
    """
    translated_text: str
    confidence: int
    document_type: str
    chunk_count: int = 1
    residual_words: list[str] = field(default_factory=list)
    quality: Optional[QualityReport] = None

    def to_dict(self) -> dict:
        data = {
            "translatedText": self.translated_text,
            "confidence": self.confidence,
            "documentType": self.document_type,
            "chunkCount": self.chunk_count,
            "residualWords": list(self.residual_words),
        }
        if self.quality is not None:
            data["quality"] = self.quality.to_dict()
        return data
