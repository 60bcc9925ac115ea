"""
Tests for API key lookup and storage.

The OS keychain is never touched: every manager is built with
``use_keyring=False`` and a temporary config directory.

Run with: pytest tests/test_keys.py -v
"""

import json
import stat

import pytest

from legaltrans_llms.keys import KeyManager, env_var_for, mask_key, require_key


@pytest.fixture
def manager(tmp_path, monkeypatch):
    for var in ("OPENAI_API_KEY", "DEEPSEEK_API_KEY", "ANTHROPIC_API_KEY"):
        monkeypatch.delenv(var, raising=False)
    return KeyManager(config_dir=tmp_path / ".legaltrans", use_keyring=False)


class TestKeyManager:
    """Tests for env > keychain > config file lookup."""

    def test_missing(self, manager):
        assert manager.get_key("openai") is None
        info = manager.get_key_info("openai")
        assert (info.is_set, info.source, info.masked_value) == (False, "none", "")

    def test_env_var(self, manager, monkeypatch):
        monkeypatch.setenv("DEEPSEEK_API_KEY", "sk-deepseek-0123456789")
        assert manager.get_key("DeepSeek") == "sk-deepseek-0123456789"
        assert manager.get_key_info("deepseek").source == "env"

    def test_set_key_writes_private_config(self, manager):
        assert manager.set_key("openai", "sk-config-0123456789") == "config"
        assert json.loads(manager.config_file.read_text()) == {"openai": "sk-config-0123456789"}
        assert stat.S_IMODE(manager.config_file.stat().st_mode) == 0o600
        assert manager.get_key_info("openai").source == "config"

    def test_env_overrides_config(self, manager, monkeypatch):
        manager.set_key("openai", "sk-config-0123456789")
        monkeypatch.setenv("OPENAI_API_KEY", "sk-env-0123456789")
        assert manager.get_key("openai") == "sk-env-0123456789"

    def test_delete_key(self, manager):
        manager.set_key("anthropic", "sk-ant-0123456789")
        assert manager.delete_key("anthropic") is True
        assert manager.get_key("anthropic") is None
        assert manager.delete_key("anthropic") is False

    def test_unreadable_config_is_ignored(self, manager):
        manager.config_dir.mkdir(parents=True)
        manager.config_file.write_text("{broken", encoding="utf-8")
        assert manager.get_key("openai") is None

    def test_list_keys(self, manager, monkeypatch):
        monkeypatch.setenv("ANTHROPIC_API_KEY", "sk-ant-0123456789")
        infos = {info.service: info for info in manager.list_keys()}
        assert set(infos) == {"openai", "deepseek", "anthropic"}
        assert infos["anthropic"].is_set
        assert not infos["openai"].is_set


class TestHelpers:
    def test_mask_key(self):
        assert mask_key("sk-abcdefghijklmnop") == "sk-a...mnop"
        assert mask_key("short") == "*****"

    def test_env_var_for(self):
        assert env_var_for("openai") == "OPENAI_API_KEY"
        assert env_var_for("mistral") == "MISTRAL_API_KEY"

    def test_require_key(self, manager):
        with pytest.raises(ValueError, match="legaltrans keys set openai"):
            require_key("openai", manager)
        manager.set_key("openai", "sk-config-0123456789")
        assert require_key("openai", manager) == "sk-config-0123456789"
