"""
Quality Scorer: heuristic confidence for legal translations.

A translation is scored per section from three factors of the SOURCE
text, weighted 40/30/30:

- terminology match: legal concepts mentioned per ten source words
- corpus similarity: how many similar reference documents exist
- complexity: shorter words and sentences and fewer symbols score higher

The score does not judge the translation itself; it estimates how much
a reviewer should trust it. Sections scoring below 70 are flagged for
manual review, and a document score aggregates the sections.

Usage:
    scorer = QualityScorer(terminology)
    report = scorer.report(source, translated, corpus_match_count=2)
    print(report.overall.overall, report.review_count)
"""

from __future__ import annotations

import logging
import math
import re
from typing import Optional

from legaltrans_llms.config import REVIEW_THRESHOLD
from legaltrans_llms.models import (
    Confidence,
    QualityFactors,
    QualityReport,
    QualityScore,
    SectionScore,
    confidence_for,
)
from legaltrans_llms.translate.terminology import TerminologyStore

logger = logging.getLogger(__name__)

TERMINOLOGY_WEIGHT = 0.4
CORPUS_WEIGHT = 0.3
COMPLEXITY_WEIGHT = 0.3

# corpus matches needed for a full corpus score
CORPUS_SATURATION = 3

_SENTENCE_SPLIT = re.compile(r"[.!?]+")
_SPECIAL_CHAR = re.compile(r"[^a-zA-Z0-9\s]")
_SECTION_SPLIT = re.compile(r"\n\n+")


def round_half_up(value: float) -> int:
    return int(math.floor(value + 0.5))


def _clamp(value: float, low: float = 0.0, high: float = 100.0) -> float:
    return max(low, min(high, value))


def complexity_score(text: str) -> float:
    """Readability proxy in [0, 100]; simpler text scores higher.

    Mean of three clamped sub-scores: average word length (ideal <= 5),
    average sentence length in words (ideal <= 15) and the share of
    characters outside ASCII letters, digits and whitespace.
    """
    if not text or not text.strip():
        return 0.0
    words = text.split()
    if not words:
        return 0.0
    sentences = [s for s in _SENTENCE_SPLIT.split(text) if s.strip()]

    avg_word = sum(len(w) for w in words) / len(words)
    word_score = _clamp(100 - (avg_word - 5) * 10)

    avg_sentence = len(words) / max(1, len(sentences))
    sentence_score = _clamp(100 - (avg_sentence - 15) * 3)

    special = len(_SPECIAL_CHAR.findall(text))
    special_score = _clamp(100 - (special / len(text)) * 200)

    return _clamp((word_score + sentence_score + special_score) / 3)


def score_details(terminology: float, corpus: float, complexity: float) -> str:
    """Human-readable explanation of the three factor scores."""
    parts = []
    if terminology >= 70:
        parts.append("Strong terminology match with legal database")
    elif terminology >= 40:
        parts.append("Moderate terminology match")
    else:
        parts.append("Limited terminology match - may need review")

    if corpus >= 70:
        parts.append("similar documents found in corpus")
    elif corpus >= 40:
        parts.append("some similar documents found")
    else:
        parts.append("few similar documents in corpus")

    if complexity < 50:
        parts.append("complex text structure")

    return ", ".join(parts) + "."


def _empty_score(details: str) -> QualityScore:
    return QualityScore(overall=0, confidence=Confidence.LOW, factors=QualityFactors(), details=details)


def calculate_quality_score(
    source_text: str,
    translated_text: str,
    terminology_matches: int = 0,
    corpus_matches: int = 0,
) -> QualityScore:
    """Score one source/translation pair.

    Args:
        source_text: Source section
        translated_text: Its translation
        terminology_matches: Legal concepts found in the source
        corpus_matches: Similar reference documents (0-3 meaningful)

    Returns:
        QualityScore with ``overall`` in [0, 100]; factors are reported
        rounded, ``overall`` is computed from the unrounded factors

    Example:
        >>> calculate_quality_score("", "anything").details
        'Empty or invalid text'
    """
    if not source_text or not source_text.strip() or not translated_text or not translated_text.strip():
        return _empty_score("Empty or invalid text")

    word_count = len(source_text.split())
    terminology = min(100.0, terminology_matches / max(1.0, word_count / 10) * 100)
    corpus = min(100.0, corpus_matches / CORPUS_SATURATION * 100)
    complexity = complexity_score(source_text)

    overall = round_half_up(_clamp(
        terminology * TERMINOLOGY_WEIGHT
        + corpus * CORPUS_WEIGHT
        + complexity * COMPLEXITY_WEIGHT
    ))

    return QualityScore(
        overall=overall,
        confidence=confidence_for(overall),
        factors=QualityFactors(
            terminology_match=round_half_up(terminology),
            corpus_similarity=round_half_up(corpus),
            complexity=round_half_up(complexity),
        ),
        details=score_details(terminology, corpus, complexity),
    )


def split_into_sections(text: str) -> list[str]:
    """Paragraph sections separated by blank lines; whole text if none."""
    sections = [s.strip() for s in _SECTION_SPLIT.split(text or "")]
    sections = [s for s in sections if s]
    return sections or [text or ""]


def aggregate(sections: list[SectionScore]) -> QualityScore:
    """Document-level score: the mean of the section scores.

    Confidence is taken from the unrounded mean, so a document averaging
    79.6 is still "medium" while reporting ``overall=80``.
    """
    if not sections:
        return _empty_score("No sections to analyze")

    n = len(sections)
    avg_overall = sum(s.score.overall for s in sections) / n
    avg_terminology = sum(s.score.factors.terminology_match for s in sections) / n
    avg_corpus = sum(s.score.factors.corpus_similarity for s in sections) / n
    avg_complexity = sum(s.score.factors.complexity for s in sections) / n

    detail = score_details(avg_terminology, avg_corpus, avg_complexity)
    review = sum(1 for s in sections if s.needs_review)
    if review:
        details = f"{review} section(s) may need manual review. {detail}"
    else:
        details = f"All sections have good confidence. {detail}"

    return QualityScore(
        overall=round_half_up(avg_overall),
        confidence=confidence_for(avg_overall),
        factors=QualityFactors(
            terminology_match=round_half_up(avg_terminology),
            corpus_similarity=round_half_up(avg_corpus),
            complexity=round_half_up(avg_complexity),
        ),
        details=details,
    )


class QualityScorer:
    """Section-wise scorer backed by the terminology store.

    Args:
        terminology: Store used to count legal concepts per section
        review_threshold: Sections below this overall score need review
    """

    def __init__(self, terminology: TerminologyStore, review_threshold: int = REVIEW_THRESHOLD):
        self.terminology = terminology
        self.review_threshold = review_threshold
        self.last_mismatch = 0

    def analyze_document(
        self,
        source_text: str,
        translated_text: str,
        term_match_count: int = 0,
        corpus_match_count: int = 0,
        source_lang: str = "english",
    ) -> list[SectionScore]:
        """Score positionally paired sections.

        Pairs beyond the shorter side are not scored; the difference is
        logged and kept in ``last_mismatch``. ``term_match_count`` is
        accepted for callers that counted on the whole document, but
        terminology is recounted per section.
        """
        source_sections = split_into_sections(source_text)
        translated_sections = split_into_sections(translated_text)

        self.last_mismatch = abs(len(source_sections) - len(translated_sections))
        if self.last_mismatch:
            logger.warning(
                "Section count mismatch: %d source vs %d translated; scoring the first %d",
                len(source_sections), len(translated_sections),
                min(len(source_sections), len(translated_sections)),
            )

        corpus_per_section = corpus_match_count // len(source_sections)

        scores = []
        for source, translated in zip(source_sections, translated_sections):
            matches = self.terminology.count_matches(source, source_lang)
            score = calculate_quality_score(source, translated, matches, corpus_per_section)
            scores.append(SectionScore(
                text=source,
                translated_text=translated,
                score=score,
                needs_review=score.overall < self.review_threshold,
            ))
        return scores

    def aggregate(self, sections: list[SectionScore]) -> QualityScore:
        return aggregate(sections)

    def report(
        self,
        source_text: str,
        translated_text: str,
        corpus_match_count: int = 0,
        source_lang: str = "english",
        term_match_count: Optional[int] = None,
    ) -> QualityReport:
        """Sections, aggregate and mismatch count in one object."""
        if term_match_count is None:
            term_match_count = self.terminology.count_matches(source_text, source_lang)
        sections = self.analyze_document(
            source_text, translated_text, term_match_count, corpus_match_count, source_lang,
        )
        return QualityReport(
            sections=sections,
            overall=aggregate(sections),
            mismatched_sections=self.last_mismatch,
        )
