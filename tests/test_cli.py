"""
Tests for the command-line interface.

Commands run offline: translation uses the dummy backend.

Run with: pytest tests/test_cli.py -v
"""

import pytest
from typer.testing import CliRunner

from legaltrans_llms import __version__
from legaltrans_llms.cli import app

runner = CliRunner()


@pytest.fixture(autouse=True)
def no_api_keys(monkeypatch):
    for var in ("OPENAI_API_KEY", "DEEPSEEK_API_KEY", "ANTHROPIC_API_KEY"):
        monkeypatch.delenv(var, raising=False)


class TestInfoCommands:
    def test_version(self):
        result = runner.invoke(app, ["--version"])
        assert result.exit_code == 0
        assert __version__ in result.output

    def test_classify(self):
        result = runner.invoke(app, ["classify", "--text", "This AGREEMENT is made between Party A and Party B"])
        assert result.exit_code == 0
        assert "agreement" in result.output

    def test_classify_requires_input(self):
        result = runner.invoke(app, ["classify"])
        assert result.exit_code == 1
        assert "Provide either --text or --input" in result.output

    def test_terms(self, terminology_file):
        result = runner.invoke(app, ["terms", "--target", "hi", "-n", "3", "--file", str(terminology_file)])
        assert result.exit_code == 0
        assert "समझौता" in result.output
        assert "किरायेदार" not in result.output

    def test_terms_missing_file(self, tmp_path):
        result = runner.invoke(app, ["terms", "--file", str(tmp_path / "missing.json")])
        assert result.exit_code == 1
        assert "not found" in result.output

    def test_corpus_stats(self, corpus_dir):
        result = runner.invoke(app, ["corpus", "stats", "--dir", str(corpus_dir)])
        assert result.exit_code == 0
        assert "language: english" in result.output

    def test_corpus_search(self, corpus_dir):
        result = runner.invoke(app, [
            "corpus", "search", "-q", "service agreement between parties", "--dir", str(corpus_dir),
        ])
        assert result.exit_code == 0
        assert "eng_agreement_001" in result.output

    def test_corpus_search_needs_query(self, corpus_dir):
        result = runner.invoke(app, ["corpus", "search", "--dir", str(corpus_dir)])
        assert result.exit_code == 1

    def test_corpus_examples(self, corpus_dir):
        result = runner.invoke(app, [
            "corpus", "examples", "-l", "english", "-d", "petition", "--dir", str(corpus_dir),
        ])
        assert result.exit_code == 0
        assert "eng_petition_001" in result.output
        assert "eng_agreement_001" not in result.output

    def test_corpus_examples_needs_type(self, corpus_dir):
        result = runner.invoke(app, ["corpus", "examples", "--dir", str(corpus_dir)])
        assert result.exit_code == 1
        assert "--type is required" in result.output

    def test_prompt_preview(self):
        result = runner.invoke(app, ["prompt", "--text", "This lease is made", "--target", "gujarati"])
        assert result.exit_code == 0
        assert "Document Type: Lease" in result.output
        assert "CRITICAL TRANSLITERATION RULES" in result.output


class TestTranslateCommand:
    def test_dummy_translation_json(self):
        result = runner.invoke(app, [
            "translate", "--backend", "dummy", "--json",
            "--text", "This AGREEMENT is made between Party A and Party B",
        ])
        assert result.exit_code == 0
        assert '"documentType": "agreement"' in result.output
        assert '"quality"' in result.output

    def test_output_file_and_glossary(self, tmp_path):
        glossary = tmp_path / "terms.csv"
        glossary.write_text("source,target\nAgreement,करार\n", encoding="utf-8")
        output = tmp_path / "out.txt"

        result = runner.invoke(app, [
            "translate", "--backend", "dummy", "--no-score",
            "--text", "This Agreement binds the parties.",
            "--glossary", str(glossary), "--output", str(output),
        ])

        assert result.exit_code == 0
        assert output.read_text(encoding="utf-8") == "This करार binds the parties."

    def test_unknown_backend(self):
        result = runner.invoke(app, ["translate", "--backend", "babelfish", "--text", "x"])
        assert result.exit_code == 1
        assert "Unknown translation backend" in result.output

    def test_score_command(self, tmp_path):
        source = tmp_path / "deed.txt"
        source.write_text("This agreement is binding.\n\nThe court shall decide.", encoding="utf-8")
        translated = tmp_path / "deed.hi.txt"
        translated.write_text("यह समझौता बाध्यकारी है।", encoding="utf-8")

        result = runner.invoke(app, ["score", "-S", str(source), "-T", str(translated), "--json"])

        assert result.exit_code == 0
        assert '"mismatchedSections": 1' in result.output


class TestKeysCommand:
    def test_status_from_env(self, monkeypatch):
        monkeypatch.setenv("OPENAI_API_KEY", "sk-test-0123456789abcd")
        result = runner.invoke(app, ["keys", "status", "openai"])
        assert result.exit_code == 0
        assert "sk-t...abcd" in result.output

    def test_unknown_action(self):
        result = runner.invoke(app, ["keys", "rotate", "openai"])
        assert result.exit_code == 1
        assert "Unknown action" in result.output

    def test_service_required(self):
        result = runner.invoke(app, ["keys", "status"])
        assert result.exit_code == 1
        assert "Service name required" in result.output
