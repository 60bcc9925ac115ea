"""Shared fixtures: small terminology table, corpus directory and offline pipeline."""

import json

import pytest

from legaltrans_llms.pipeline import PipelineConfig, TranslationPipeline
from legaltrans_llms.translate.base import DummyBackend
from legaltrans_llms.translate.corpus import CorpusIndex
from legaltrans_llms.translate.terminology import TerminologyStore

TERMINOLOGY = {
    "metadata": {"version": "test"},
    "terminology": {
        "agreement": {"english": "agreement", "hindi": "समझौता", "marathi": "करार"},
        "contract": {"english": "contract", "hindi": "अनुबंध"},
        "party": {"english": "party", "hindi": "पक्षकार", "marathi": "पक्षकार"},
        "witness": {"english": "witness", "hindi": "साक्षी"},
        "court": {"english": "court", "hindi": "न्यायालय"},
        "tenant": {"english": "tenant", "hindi": "किरायेदार"},
        "decree": {"english": "decree", "marathi": "हुकूमनामा"},
    },
    "patterns": {
        "whereas clause": {"english": "WHEREAS the parties have agreed", "hindi": "जबकि पक्षकार सहमत हुए हैं"},
    },
}

CORPUS = [
    {
        "id": "hin_agreement_001",
        "title": "सेवा समझौता",
        "content": "सेवा समझौता यह समझौता पक्षकारों के बीच किया गया है",
        "language": "hindi",
        "documentType": "agreement",
        "source": "template",
    },
    {
        "id": "eng_agreement_001",
        "title": "Service Agreement",
        "content": "This service agreement is entered into between the parties named below",
        "language": "english",
        "documentType": "agreement",
        "source": "template",
    },
    {
        "id": "eng_petition_001",
        "title": "Writ Petition",
        "content": "The petitioner most respectfully submits this petition before the court",
        "language": "english",
        "documentType": "petition",
        "source": "template",
    },
]


@pytest.fixture
def terminology_file(tmp_path):
    path = tmp_path / "legal_terminology.json"
    path.write_text(json.dumps(TERMINOLOGY, ensure_ascii=False), encoding="utf-8")
    return path


@pytest.fixture
def terminology(terminology_file):
    return TerminologyStore(terminology_file).load()


@pytest.fixture
def corpus_dir(tmp_path):
    directory = tmp_path / "corpus"
    directory.mkdir()
    for record in CORPUS:
        (directory / f"{record['id']}.json").write_text(
            json.dumps(record, ensure_ascii=False), encoding="utf-8"
        )
    (directory / "index.json").write_text(json.dumps({"totalDocuments": len(CORPUS)}), encoding="utf-8")
    return directory


@pytest.fixture
def corpus(corpus_dir):
    return CorpusIndex(corpus_dir)


@pytest.fixture
def make_pipeline(terminology, corpus):
    """Build an offline pipeline around a given backend (echo by default)."""
    def factory(backend=None, **config_kwargs):
        config = PipelineConfig(backend="dummy", **config_kwargs)
        return TranslationPipeline(
            config,
            backend=backend or DummyBackend("echo"),
            terminology=terminology,
            corpus=corpus,
        )
    return factory
