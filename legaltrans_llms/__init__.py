"""
LegalTrans-LLMs: grounded LLM translation of Indian legal documents

Translates legal text between English, Hindi, Gujarati, Marathi and
Kannada with a prompt grounded in a legal terminology table and a
reference corpus, then scores the result section by section so
reviewers know where to look.

Core components:
1. Document-type classification and terminology/corpus grounding
2. Chunked LLM translation with transliteration and glossary enforcement
3. Heuristic, section-wise quality scoring

License: MIT
"""

__version__ = "0.1.0"

from legaltrans_llms.classify import DocumentType, classify
from legaltrans_llms.models import QualityReport, QualityScore, TranslationOutcome, TranslationRequest
from legaltrans_llms.pipeline import PipelineConfig, TranslationPipeline

__all__ = [
    "DocumentType",
    "classify",
    "QualityReport",
    "QualityScore",
    "TranslationOutcome",
    "TranslationRequest",
    "PipelineConfig",
    "TranslationPipeline",
]
