"""
Prompt Composer: grounded instructions for a legal translation call.

The composer gathers everything the model should see besides the source
text itself:

- legal terminology pairs for the language pair (priority terms first)
- boilerplate pattern examples (WHEREAS clauses, witness clauses, ...)
- excerpts of similar reference documents in the target language
- the transliteration policy when the target script differs
- structure rules (numbering, capitalised boilerplate, paragraph breaks)
- user glossary overrides and translation-memory suggestions

and returns them as a ``PromptSpec`` that renders the system prompt.
The user turn carries the source text unchanged.

Usage:
    composer = PromptComposer(terminology, corpus)
    spec = composer.compose(text, "english", "hindi", DocumentType.AGREEMENT)
    messages = [{"role": "system", "content": spec.system_prompt()},
                {"role": "user", "content": spec.user_message(text)}]
"""

from __future__ import annotations

import logging
from dataclasses import dataclass, field
from typing import Iterable, Optional

from legaltrans_llms.classify import DocumentType, coerce_document_type
from legaltrans_llms.languages import display_name, needs_transliteration
from legaltrans_llms.translate.corpus import CorpusError, CorpusIndex
from legaltrans_llms.translate.glossary import Glossary, GlossaryTerm, as_terms
from legaltrans_llms.translate.memory import TranslationMemory
from legaltrans_llms.translate.terminology import TerminologyStore
from legaltrans_llms.translate.transliteration import transliteration_rules

logger = logging.getLogger(__name__)

EXCERPT_CHARS = 200

STRUCTURE_RULES = """DOCUMENT STRUCTURE RULES:
1. Keep every clause number and list marker exactly as in the source (1., 2., (a), (b), i., ii.)
2. Keep capitalised boilerplate such as WHEREAS, NOW THEREFORE and IN WITNESS WHEREOF as the equivalent formal phrase, in capitals where the target script has them
3. Keep paragraph breaks: one blank line between paragraphs, as in the source
4. Do not merge, split, reorder or omit clauses
5. Output ONLY the translation, without notes or explanations"""


@dataclass
class CorpusExcerpt:
    title: str
    language: str
    text: str


@dataclass
class PromptSpec:
    """Everything needed to render the instruction block for one call.

    Empty sections are simply left out of the rendered prompt.
    """
    source_lang: str
    target_lang: str
    document_type: DocumentType
    terminology: list[tuple[str, str]] = field(default_factory=list)
    patterns: list[tuple[str, str, str]] = field(default_factory=list)
    corpus_examples: list[CorpusExcerpt] = field(default_factory=list)
    transliteration: str = ""
    glossary: list[GlossaryTerm] = field(default_factory=list)
    memory_suggestions: str = ""

    def system_prompt(self) -> str:
        source = display_name(self.source_lang)
        target = display_name(self.target_lang)
        parts = [
            "You are an expert legal translator specializing in Indian regional languages. "
            "Translate legal documents with the precision and formal register of an "
            "experienced court interpreter.",
            "",
            f"Document Type: {self.document_type.label}",
            f"Source Language: {source}",
            f"Target Language: {target}",
        ]

        if self.transliteration:
            parts.extend(["", self.transliteration])

        if self.terminology:
            parts.extend(["", "LEGAL TERMINOLOGY (use these exact translations):"])
            parts.extend(f"- {src} → {tgt}" for src, tgt in self.terminology)

        if self.patterns:
            parts.extend(["", "STANDARD LEGAL PHRASES:"])
            parts.extend(f'- {name}: "{src}" → "{tgt}"' for name, src, tgt in self.patterns)

        if self.corpus_examples:
            parts.extend(["", "REFERENCE EXAMPLES from similar legal documents:"])
            for i, example in enumerate(self.corpus_examples, 1):
                parts.append(f"Example {i} ({display_name(example.language)}):\n{example.text}...")

        if self.glossary:
            parts.extend(["", "MANDATORY GLOSSARY (these override all other terminology):"])
            # entries past the prompt limit are still enforced on the output
            parts.append(Glossary(terms=list(self.glossary)).to_prompt_string())

        if self.memory_suggestions:
            parts.extend(["", self.memory_suggestions])

        parts.extend(["", STRUCTURE_RULES, "", f"Translate the following {source} text into {target}:"])
        return "\n".join(parts)

    def user_message(self, text: str) -> str:
        return text


class PromptComposer:
    """Builds ``PromptSpec`` objects from the shared data services.

    Args:
        terminology: Loaded terminology store
        corpus: Reference corpus index
        memory: Optional translation memory for consistency suggestions
    """

    def __init__(
        self,
        terminology: TerminologyStore,
        corpus: CorpusIndex,
        memory: Optional[TranslationMemory] = None,
    ):
        self.terminology = terminology
        self.corpus = corpus
        self.memory = memory

    def corpus_examples(
        self,
        text: str,
        target_lang: str,
        document_type: DocumentType,
        limit: int = 2,
    ) -> list[CorpusExcerpt]:
        """Target-language reference excerpts, same document type first.

        Falls back to an unfiltered search when no document of the type
        exists. A broken corpus yields no examples.
        """
        try:
            docs = self.corpus.search(text, target_lang, document_type.value, limit=limit)
            if not docs:
                docs = self.corpus.search(text, target_lang, limit=limit)
        except CorpusError as e:
            logger.warning("Skipping corpus examples: %s", e)
            return []
        return [CorpusExcerpt(d.title, d.language, d.excerpt(EXCERPT_CHARS)) for d in docs]

    def compose(
        self,
        text: str,
        source_lang: str,
        target_lang: str,
        document_type: DocumentType | str | None = None,
        glossary: Iterable | None = (),
        max_terms: int = 10,
        max_examples: int = 2,
    ) -> PromptSpec:
        """Assemble the prompt for one translation call.

        Raises:
            TerminologyError: the terminology table cannot be loaded
        """
        doc_type = coerce_document_type(document_type) or DocumentType.GENERAL

        spec = PromptSpec(
            source_lang=source_lang,
            target_lang=target_lang,
            document_type=doc_type,
            terminology=self.terminology.top_terms(source_lang, target_lang, n=max_terms),
            patterns=self.terminology.patterns(source_lang, target_lang),
            corpus_examples=self.corpus_examples(text, target_lang, doc_type, limit=max_examples),
            glossary=as_terms(glossary),
        )

        if needs_transliteration(source_lang, target_lang):
            spec.transliteration = transliteration_rules(target_lang)

        if self.memory is not None:
            spec.memory_suggestions = self.memory.contextual_prompt(text, source_lang, target_lang)

        logger.debug(
            "Composed prompt: %d terms, %d patterns, %d examples, %d glossary entries",
            len(spec.terminology), len(spec.patterns), len(spec.corpus_examples), len(spec.glossary),
        )
        return spec
