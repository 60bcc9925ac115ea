"""
Main translation pipeline for LegalTrans-LLMs.

This module orchestrates the complete translation workflow:
1. Classify the document type (unless the caller supplied one)
2. Split long documents into paragraph-aligned chunks
3. Compose a grounded prompt per chunk (terminology, corpus, policy)
4. Invoke the model backend
5. Post-process (normalise, enforce glossary, check script purity)
6. Score the result section by section

Design Philosophy:
- Pipeline is configurable via PipelineConfig
- Terminology store and corpus index are owned here and injected into
  the composer and scorer; the terminology table is loaded eagerly so a
  broken table fails at construction, not mid-document
- Chunks are translated sequentially, in order; any chunk failure
  aborts the whole document
"""

from __future__ import annotations

import logging
from dataclasses import dataclass, field
from pathlib import Path
from typing import Callable, Optional

from legaltrans_llms.chunking import PARAGRAPH_SEPARATOR, split_into_chunks
from legaltrans_llms.classify import DocumentType, classify, coerce_document_type
from legaltrans_llms.config import CORPUS_DIR, DEFAULT_BACKEND, DEFAULT_MODEL, MAX_CHUNK_CHARS, TERMINOLOGY_FILE
from legaltrans_llms.eval.quality import QualityScorer, round_half_up
from legaltrans_llms.models import QualityReport, TranslationOutcome, TranslationRequest
from legaltrans_llms.refine.postprocess import PostProcessor
from legaltrans_llms.refine.prompting import PromptComposer
from legaltrans_llms.translate.base import TranslationBackend, TranslationInvoker, create_backend
from legaltrans_llms.translate.corpus import CorpusIndex
from legaltrans_llms.translate.memory import TranslationMemory
from legaltrans_llms.translate.terminology import TerminologyStore
from legaltrans_llms.translate.transliteration import script_confidence

logger = logging.getLogger(__name__)

# Receives percent complete (0-100) after each chunk
ProgressCallback = Callable[[float], None]


@dataclass
class PipelineConfig:
    """Configuration for the translation pipeline."""
    backend: str = DEFAULT_BACKEND
    model: Optional[str] = DEFAULT_MODEL
    backend_kwargs: dict = field(default_factory=dict)

    terminology_file: Path = TERMINOLOGY_FILE
    corpus_dir: Path = CORPUS_DIR

    max_chunk_chars: int = MAX_CHUNK_CHARS
    max_terms: int = 10
    max_examples: int = 2

    # Replace leftover Latin words with a crude phonetic rendering
    transliterate_residuals: bool = False

    def to_dict(self) -> dict:
        """Serialize config for logging/debugging."""
        return {
            "backend": self.backend,
            "model": self.model,
            "terminology_file": str(self.terminology_file),
            "corpus_dir": str(self.corpus_dir),
            "max_chunk_chars": self.max_chunk_chars,
            "max_terms": self.max_terms,
            "max_examples": self.max_examples,
            "transliterate_residuals": self.transliterate_residuals,
        }


class TranslationPipeline:
    """Translate legal documents and score the result.

    Usage:
        pipeline = TranslationPipeline(PipelineConfig(backend="openai"))
        request = TranslationRequest(text, "english", "hindi")
        outcome = pipeline.run(request, on_progress=print)

        print(outcome.translated_text, outcome.quality.overall.overall)
    """

    def __init__(
        self,
        config: PipelineConfig | None = None,
        backend: TranslationBackend | None = None,
        terminology: TerminologyStore | None = None,
        corpus: CorpusIndex | None = None,
        memory: TranslationMemory | None = None,
    ):
        self.config = config or PipelineConfig()
        self.terminology = terminology or TerminologyStore(self.config.terminology_file)
        self.terminology.load()
        self.corpus = corpus or CorpusIndex(self.config.corpus_dir)
        self.memory = memory

        if backend is None:
            kwargs = dict(self.config.backend_kwargs)
            if self.config.model:
                kwargs.setdefault("model", self.config.model)
            backend = create_backend(self.config.backend, **kwargs)
        self.backend = backend

        self.composer = PromptComposer(self.terminology, self.corpus, memory=self.memory)
        self.invoker = TranslationInvoker(self.backend)
        self.scorer = QualityScorer(self.terminology)

        logger.debug("Pipeline ready: %s", self.config.to_dict())

    def resolve_document_type(self, request: TranslationRequest) -> DocumentType:
        return coerce_document_type(request.document_type) or classify(request.text)

    def _translate_once(self, request: TranslationRequest, document_type: DocumentType) -> TranslationOutcome:
        spec = self.composer.compose(
            request.text,
            request.source_lang,
            request.target_lang,
            document_type,
            glossary=request.glossary,
            max_terms=self.config.max_terms,
            max_examples=self.config.max_examples,
        )
        raw = self.invoker.invoke(spec, request.text)

        post = PostProcessor(
            request.target_lang,
            request.source_lang,
            transliterate_residuals=self.config.transliterate_residuals,
        ).process(raw, request.glossary, source=request.text)
        if post.missing_markers:
            logger.warning("Clause markers missing from translation: %s", ", ".join(post.missing_markers))
        if post.transliterated:
            logger.info("Transliterated %d residual words", len(post.transliterated))

        return TranslationOutcome(
            translated_text=post.text,
            confidence=script_confidence(post.text, request.target_lang, request.source_lang),
            document_type=document_type.value,
            residual_words=post.residual_words,
        )

    def translate(self, request: TranslationRequest) -> TranslationOutcome:
        """Translate the whole request in a single model call.

        Raises:
            TranslationFailed: the backend call failed
        """
        return self._translate_once(request, self.resolve_document_type(request))

    def translate_large(
        self,
        request: TranslationRequest,
        on_progress: ProgressCallback | None = None,
    ) -> TranslationOutcome:
        """Translate a document of any length, chunking when needed.

        Documents within ``max_chunk_chars`` go out in one call. Longer
        ones are split on paragraph boundaries and translated chunk by
        chunk in order; ``on_progress`` receives the percentage done
        after each chunk. The document type is decided once for the
        whole document. Any chunk failure propagates and no partial
        translation is returned.
        """
        document_type = self.resolve_document_type(request)

        chunks: list[str] = []
        if len(request.text) > self.config.max_chunk_chars:
            chunks = split_into_chunks(request.text, self.config.max_chunk_chars)

        # Short or blank documents go out as a single call.
        if not chunks:
            outcome = self._translate_once(request, document_type)
            if on_progress:
                on_progress(100.0)
            return outcome

        logger.info("Translating %d chars in %d chunks", len(request.text), len(chunks))

        results: list[TranslationOutcome] = []
        for i, chunk in enumerate(chunks):
            logger.debug("Chunk %d/%d (%d chars)", i + 1, len(chunks), len(chunk))
            results.append(self._translate_once(request.with_text(chunk), document_type))
            if on_progress:
                on_progress((i + 1) / len(chunks) * 100)

        residual = list(dict.fromkeys(w for r in results for w in r.residual_words))
        return TranslationOutcome(
            translated_text=PARAGRAPH_SEPARATOR.join(r.translated_text for r in results),
            confidence=round_half_up(sum(r.confidence for r in results) / len(results)),
            document_type=document_type.value,
            chunk_count=len(results),
            residual_words=residual,
        )

    def assess(
        self,
        source_text: str,
        translated_text: str,
        source_lang: str,
        target_lang: str,
        document_type: DocumentType | str | None = None,
    ) -> QualityReport:
        """Section-wise quality report for a finished translation.

        The corpus factor counts reference documents in the source
        language that share vocabulary with the source text, restricted
        to ``document_type`` when one is given.

        Raises:
            CorpusError: a corpus file is malformed
        """
        doc_type = coerce_document_type(document_type)
        corpus_matches = self.corpus.count_similar(
            source_text, source_lang, doc_type.value if doc_type else None, limit=5,
        )
        report = self.scorer.report(
            source_text, translated_text, corpus_match_count=corpus_matches, source_lang=source_lang,
        )
        logger.info(
            "Quality %s->%s: overall %d (%s), %d of %d sections need review",
            source_lang, target_lang, report.overall.overall, report.overall.confidence.value,
            report.review_count, len(report.sections),
        )
        return report

    def run(
        self,
        request: TranslationRequest,
        on_progress: ProgressCallback | None = None,
    ) -> TranslationOutcome:
        """Translate (chunking as needed) and attach the quality report."""
        outcome = self.translate_large(request, on_progress=on_progress)
        outcome.quality = self.assess(
            request.text, outcome.translated_text, request.source_lang, request.target_lang,
        )
        return outcome
