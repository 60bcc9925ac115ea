"""
Translation services: model backends, terminology, corpus, glossaries,
translation memory and transliteration policy.
"""

from legaltrans_llms.translate.base import (
    BackendError,
    DummyBackend,
    GenerationResponse,
    TranslationBackend,
    TranslationFailed,
    TranslationInvoker,
    create_backend,
)
from legaltrans_llms.translate.corpus import CorpusError, CorpusIndex
from legaltrans_llms.translate.glossary import Glossary, GlossaryTerm, apply_glossary
from legaltrans_llms.translate.memory import TranslationMemory
from legaltrans_llms.translate.terminology import TerminologyError, TerminologyStore

__all__ = [
    "BackendError",
    "DummyBackend",
    "GenerationResponse",
    "TranslationBackend",
    "TranslationFailed",
    "TranslationInvoker",
    "create_backend",
    "CorpusError",
    "CorpusIndex",
    "Glossary",
    "GlossaryTerm",
    "apply_glossary",
    "TranslationMemory",
    "TerminologyError",
    "TerminologyStore",
]
