"""
Tests for backends and the Translation Invoker.

LLM clients are replaced with mocks; no network access is needed.

Run with: pytest tests/test_invoker.py -v
"""

from types import SimpleNamespace
from unittest.mock import Mock, patch

import pytest

from legaltrans_llms.classify import DocumentType
from legaltrans_llms.refine.prompting import PromptSpec
from legaltrans_llms.translate.base import (
    BackendError,
    DummyBackend,
    GenerationResponse,
    TranslationFailed,
    TranslationInvoker,
    create_backend,
    extract_text,
    parse_response,
)
from legaltrans_llms.translate.llm import AnthropicBackend, DeepSeekBackend, LLMConfig, OpenAIBackend

MESSAGES = [
    {"role": "system", "content": "Translate legal text."},
    {"role": "user", "content": "WHEREAS the parties"},
]


@pytest.fixture
def spec():
    return PromptSpec("english", "hindi", DocumentType.AGREEMENT)


class TestDummyBackend:
    """Tests for the offline backend."""

    @pytest.mark.parametrize("mode,expected", [
        ("echo", "WHEREAS the parties"),
        ("upper", "WHEREAS THE PARTIES"),
        ("prefix", "[TRANSLATED] WHEREAS the parties"),
        ("empty", None),
    ])
    def test_modes(self, mode, expected):
        backend = DummyBackend(mode)
        assert backend.generate(MESSAGES).text == expected
        assert backend.calls == [MESSAGES]

    def test_unknown_mode(self):
        with pytest.raises(ValueError, match="Unknown dummy mode"):
            DummyBackend("reverse")


class TestResponseExtraction:
    """Tests for turning backend replies into text."""

    @pytest.mark.parametrize("raw,expected", [
        ("```\nयह समझौता\n```", "यह समझौता"),
        ("```text\nयह समझौता", "यह समझौता"),
        ("Translation: यह समझौता", "यह समझौता"),
        ("  here is the translation:  यह समझौता ", "यह समझौता"),
        ("यह समझौता", "यह समझौता"),
    ])
    def test_parse_response(self, raw, expected):
        assert parse_response(raw) == expected

    def test_text_reply(self):
        assert extract_text(GenerationResponse(text="अनुवाद")) == "अनुवाद"

    def test_structured_reply(self):
        response = GenerationResponse(text='{"translatedText": "अनुवाद"}', data={"translatedText": "अनुवाद"})
        assert extract_text(response) == "अनुवाद"

    def test_structured_reply_without_text_field(self):
        assert extract_text(GenerationResponse(text="{}", data={"score": 3})) is None

    def test_no_reply(self):
        assert extract_text(None) is None
        assert extract_text(GenerationResponse()) is None


class TestTranslationInvoker:
    """Tests for message building and failure handling."""

    def test_messages(self, spec):
        backend = DummyBackend("echo")
        result = TranslationInvoker(backend).invoke(spec, "WHEREAS the parties")
        assert result == "WHEREAS the parties"

        system, user = backend.calls[0]
        assert system == {"role": "system", "content": spec.system_prompt()}
        assert user == {"role": "user", "content": "WHEREAS the parties"}

    def test_missing_text_is_empty_string(self, spec, caplog):
        assert TranslationInvoker(DummyBackend("empty")).invoke(spec, "text") == ""
        assert "returned no text" in caplog.text

    def test_none_response_is_empty_string(self, spec):
        backend = Mock()
        backend.generate.return_value = None
        assert TranslationInvoker(backend).invoke(spec, "text") == ""

    def test_backend_error_is_wrapped(self, spec):
        backend = Mock()
        backend.name = "broken"
        backend.generate.side_effect = BackendError("401 unauthorized")

        with pytest.raises(TranslationFailed, match="401 unauthorized") as excinfo:
            TranslationInvoker(backend).invoke(spec, "text")
        assert isinstance(excinfo.value.__cause__, BackendError)

    def test_schema_is_forwarded(self, spec):
        backend = Mock()
        backend.generate.return_value = GenerationResponse(data={"translation": "अनुवाद"})
        schema = {"type": "object"}

        assert TranslationInvoker(backend).invoke(spec, "text", response_schema=schema) == "अनुवाद"
        assert backend.generate.call_args.kwargs["response_schema"] == schema


class TestCreateBackend:
    """Tests for the backend factory."""

    @pytest.mark.parametrize("name", ["dummy", "echo", "TEST"])
    def test_dummy_aliases(self, name):
        assert isinstance(create_backend(name), DummyBackend)

    def test_dummy_mode(self):
        assert create_backend("dummy", mode="upper").name == "dummy-upper"

    @pytest.mark.parametrize("name,cls", [
        ("openai", OpenAIBackend),
        ("gpt", OpenAIBackend),
        ("deepseek", DeepSeekBackend),
        ("ds", DeepSeekBackend),
        ("anthropic", AnthropicBackend),
        ("claude", AnthropicBackend),
    ])
    def test_llm_aliases(self, name, cls):
        assert type(create_backend(name, api_key="sk-test")) is cls

    def test_default_models(self):
        assert create_backend("deepseek").config.model == "deepseek-chat"
        assert create_backend("openai", model="gpt-4o-mini").config.model == "gpt-4o-mini"

    def test_unknown(self):
        with pytest.raises(ValueError, match="Unknown translation backend"):
            create_backend("babelfish")


class TestLLMBackends:
    """Tests for the OpenAI-compatible and Anthropic backends."""

    @patch("legaltrans_llms.translate.llm.OpenAI")
    def test_openai_generate(self, mock_openai):
        client = mock_openai.return_value
        client.chat.completions.create.return_value = SimpleNamespace(
            choices=[SimpleNamespace(message=SimpleNamespace(content="यह समझौता"))],
            usage=SimpleNamespace(total_tokens=42),
        )
        backend = OpenAIBackend(LLMConfig(model="gpt-4o", temperature=0.1), api_key="sk-test")

        response = backend.generate(MESSAGES)

        assert response.text == "यह समझौता"
        assert response.metadata["total_tokens"] == 42
        kwargs = client.chat.completions.create.call_args.kwargs
        assert kwargs["model"] == "gpt-4o"
        assert kwargs["messages"] == MESSAGES
        assert kwargs["temperature"] == 0.1
        assert "response_format" not in kwargs
        assert mock_openai.call_args.kwargs["api_key"] == "sk-test"

    @patch("legaltrans_llms.translate.llm.OpenAI")
    def test_openai_structured_output(self, mock_openai):
        client = mock_openai.return_value
        client.chat.completions.create.return_value = SimpleNamespace(
            choices=[SimpleNamespace(message=SimpleNamespace(content='{"translatedText": "अनुवाद"}'))],
            usage=None,
        )
        schema = {"type": "object", "properties": {"translatedText": {"type": "string"}}}

        response = OpenAIBackend(api_key="sk-test").generate(MESSAGES, response_schema=schema)

        assert response.data == {"translatedText": "अनुवाद"}
        response_format = client.chat.completions.create.call_args.kwargs["response_format"]
        assert response_format["json_schema"]["schema"] == schema

    @patch("legaltrans_llms.translate.llm.OpenAI")
    def test_openai_error_becomes_backend_error(self, mock_openai):
        mock_openai.return_value.chat.completions.create.side_effect = RuntimeError("timeout")
        with pytest.raises(BackendError, match="timeout"):
            OpenAIBackend(api_key="sk-test").generate(MESSAGES)

    @patch("legaltrans_llms.translate.llm.OpenAI")
    def test_deepseek_base_url(self, mock_openai):
        mock_openai.return_value.chat.completions.create.return_value = SimpleNamespace(choices=[], usage=None)
        response = DeepSeekBackend(api_key="sk-test").generate(MESSAGES)

        assert response.text is None
        assert mock_openai.call_args.kwargs["base_url"] == "https://api.deepseek.com/v1"

    @patch("legaltrans_llms.translate.llm.anthropic.Anthropic")
    def test_anthropic_generate(self, mock_anthropic):
        client = mock_anthropic.return_value
        client.messages.create.return_value = SimpleNamespace(content=[
            SimpleNamespace(type="text", text="यह "),
            SimpleNamespace(type="text", text="समझौता"),
        ])

        response = AnthropicBackend(api_key="sk-ant-test").generate(MESSAGES, response_schema={"type": "object"})

        assert response.text == "यह समझौता"
        kwargs = client.messages.create.call_args.kwargs
        assert kwargs["system"].startswith("Translate legal text.")
        assert "Respond ONLY with a JSON object" in kwargs["system"]
        assert kwargs["messages"] == [MESSAGES[1]]

    @patch("legaltrans_llms.translate.llm.KeyManager")
    def test_missing_key(self, mock_manager):
        mock_manager.return_value.get_key.return_value = None
        with pytest.raises(BackendError, match="OPENAI_API_KEY"):
            OpenAIBackend().generate(MESSAGES)
