"""
Tests for prompt composition and translation memory.

Run with: pytest tests/test_prompting.py -v
"""

import json

import pytest

from legaltrans_llms.classify import DocumentType
from legaltrans_llms.refine.prompting import EXCERPT_CHARS, PromptComposer, PromptSpec
from legaltrans_llms.translate.corpus import CorpusIndex
from legaltrans_llms.translate.glossary import GlossaryTerm
from legaltrans_llms.translate.memory import TranslationMemory


@pytest.fixture
def composer(terminology, corpus):
    return PromptComposer(terminology, corpus)


class TestPromptSpec:
    """Tests for rendering the system prompt."""

    def test_bare_spec_has_header_and_rules_only(self):
        prompt = PromptSpec("english", "hindi", DocumentType.GENERAL).system_prompt()
        assert "Document Type: General" in prompt
        assert "Source Language: English" in prompt
        assert "LEGAL TERMINOLOGY" not in prompt
        assert "REFERENCE EXAMPLES" not in prompt
        assert "DOCUMENT STRUCTURE RULES" in prompt
        assert prompt.endswith("Translate the following English text into Hindi:")

    def test_user_message_is_source_text(self):
        text = "1. WHEREAS the parties\n\n2. NOW THEREFORE"
        assert PromptSpec("english", "hindi", DocumentType.GENERAL).user_message(text) == text

    def test_glossary_section(self):
        spec = PromptSpec(
            "english", "hindi", DocumentType.LEASE,
            glossary=[GlossaryTerm("Lessor", "पट्टाकर्ता")],
        )
        assert 'MANDATORY GLOSSARY' in spec.system_prompt()
        assert '- "Lessor" → "पट्टाकर्ता"' in spec.system_prompt()

    def test_long_glossary_is_truncated_in_prompt(self):
        terms = [GlossaryTerm(f"Term{i}", f"शब्द{i}") for i in range(52)]
        prompt = PromptSpec("english", "hindi", DocumentType.LEASE, glossary=terms).system_prompt()
        assert '- "Term49" → "शब्द49"' in prompt
        assert "Term50" not in prompt
        assert "- ... and 2 more terms" in prompt


class TestPromptComposer:
    """Tests for grounding a prompt in terminology and corpus."""

    def test_compose_english_to_hindi(self, composer):
        spec = composer.compose("This service agreement", "english", "hindi", DocumentType.AGREEMENT)
        prompt = spec.system_prompt()

        assert spec.terminology[0] == ("agreement", "समझौता")
        assert spec.patterns == [("whereas clause", "WHEREAS the parties have agreed", "जबकि पक्षकार सहमत हुए हैं")]
        assert [e.title for e in spec.corpus_examples] == ["सेवा समझौता"]
        assert "CRITICAL TRANSLITERATION RULES" in prompt
        assert "REFERENCE EXAMPLES from similar legal documents:" in prompt
        assert "Example 1 (Hindi):" in prompt

    def test_max_terms(self, composer):
        spec = composer.compose("text", "english", "hindi", max_terms=2)
        assert spec.terminology == [("agreement", "समझौता"), ("contract", "अनुबंध")]

    def test_document_type_defaults_to_general(self, composer):
        assert composer.compose("text", "english", "hindi").document_type == DocumentType.GENERAL
        assert composer.compose("text", "english", "hindi", "Lease").document_type == DocumentType.LEASE

    def test_corpus_falls_back_to_any_type(self, composer):
        """No Hindi petition exists, so any Hindi document is used."""
        spec = composer.compose("याचिका", "english", "hindi", DocumentType.PETITION)
        assert [e.title for e in spec.corpus_examples] == ["सेवा समझौता"]

    def test_same_script_needs_no_transliteration(self, composer):
        spec = composer.compose("यह समझौता", "hindi", "marathi")
        assert spec.transliteration == ""
        assert spec.terminology == [("समझौता", "करार"), ("पक्षकार", "पक्षकार")]

    def test_broken_corpus_yields_no_examples(self, terminology, tmp_path, caplog):
        (tmp_path / "broken.json").write_text("[1, 2", encoding="utf-8")
        composer = PromptComposer(terminology, CorpusIndex(tmp_path))

        spec = composer.compose("This agreement", "english", "hindi", DocumentType.AGREEMENT)

        assert spec.corpus_examples == []
        assert spec.terminology
        assert "Skipping corpus examples" in caplog.text

    def test_excerpt_length(self, terminology, tmp_path):
        corpus_dir = tmp_path / "long_corpus"
        corpus_dir.mkdir()
        record = {
            "id": "hin_long", "title": "लंबा समझौता", "content": "समझौता " * 100,
            "language": "hindi", "documentType": "agreement", "source": "template",
        }
        (corpus_dir / "hin_long.json").write_text(json.dumps(record, ensure_ascii=False), encoding="utf-8")
        composer = PromptComposer(terminology, CorpusIndex(corpus_dir))

        example = composer.compose("agreement", "english", "hindi", DocumentType.AGREEMENT).corpus_examples[0]
        assert len(example.text) == EXCERPT_CHARS

    def test_glossary_pairs_accepted(self, composer):
        spec = composer.compose("text", "english", "hindi", glossary=[("Lessor", "पट्टाकर्ता")])
        assert spec.glossary == [GlossaryTerm("Lessor", "पट्टाकर्ता")]

    def test_memory_suggestions(self, terminology, corpus):
        memory = TranslationMemory()
        memory.add("The landlord shall repair", "मकान मालिक मरम्मत करेगा", "en", "hi")
        composer = PromptComposer(terminology, corpus, memory=memory)

        spec = composer.compose("The landlord refuses", "english", "hindi")
        assert spec.memory_suggestions.startswith("Reuse these prior translations")
        assert "- The landlord shall repair -> मकान मालिक मरम्मत करेगा" in spec.system_prompt()


class TestTranslationMemory:
    """Tests for the in-process translation memory."""

    def test_empty_pairs_ignored(self):
        memory = TranslationMemory()
        assert memory.add("", "x", "english", "hindi") is None
        assert memory.add("x", "", "english", "hindi") is None
        assert len(memory) == 0

    def test_duplicate_bumps_usage(self):
        memory = TranslationMemory()
        memory.add("The tenant", "किरायेदार", "english", "hindi")
        entry = memory.add("The tenant", "किरायेदार", "en", "hi")
        assert len(memory) == 1
        assert entry.usage_count == 2
        assert memory.stats() == {"total_pairs": 1, "total_usage": 2}

    def test_find_similar_ordering(self):
        """Most used first, then most recently used."""
        memory = TranslationMemory()
        memory.add("rent payable monthly", "मासिक किराया", "english", "hindi")
        memory.add("rent deposit refundable", "जमा राशि", "english", "hindi")
        memory.add("rent increase yearly", "वार्षिक वृद्धि", "english", "hindi")
        memory.add("rent payable monthly", "मासिक किराया", "english", "hindi")

        sources = [e.source for e in memory.find_similar("rent terms", "english", "hindi")]
        assert sources == ["rent payable monthly", "rent increase yearly", "rent deposit refundable"]

    def test_find_similar_respects_language_pair(self):
        memory = TranslationMemory()
        memory.add("rent payable monthly", "मासिक भाडे", "english", "marathi")
        assert memory.find_similar("rent payable", "english", "hindi") == []

    def test_short_words_do_not_match(self):
        memory = TranslationMemory()
        memory.add("the act of god", "दैवी घटना", "english", "hindi")
        assert memory.find_similar("act of god", "english", "hindi") == []
        assert memory.contextual_prompt("act of god", "english", "hindi") == ""

    def test_limit_and_snapshot(self):
        memory = TranslationMemory()
        for i in range(4):
            memory.add(f"clause number {i}", f"खंड {i}", "english", "hindi")
        assert len(memory.find_similar("clause", "english", "hindi", limit=2)) == 2
        assert memory.snapshot()[0] == ("clause number 0", "खंड 0")

    def test_to_dict(self):
        entry = TranslationMemory().add("The tenant", "किरायेदार", "english", "hindi", "lease")
        data = entry.to_dict()
        assert data["sourceText"] == "The tenant"
        assert data["documentType"] == "lease"
        assert data["usageCount"] == 1
