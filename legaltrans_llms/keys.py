"""
API key management for LegalTrans-LLMs.

Keys for the LLM backends are looked up in this order:
1. Environment variable (preferred for CI/production)
2. OS keychain via keyring
3. Local config file (~/.legaltrans/keys.json)

Usage:
    from legaltrans_llms.keys import KeyManager

    km = KeyManager()
    km.set_key("openai", "sk-...")
    key = km.get_key("openai")
"""

from __future__ import annotations

import json
import logging
import os
from dataclasses import dataclass
from pathlib import Path
from typing import Optional

import keyring
from keyring.errors import KeyringError, PasswordDeleteError

logger = logging.getLogger(__name__)

# Supported services and their env var names
SERVICES = {
    "openai": "OPENAI_API_KEY",
    "deepseek": "DEEPSEEK_API_KEY",
    "anthropic": "ANTHROPIC_API_KEY",
}


def env_var_for(service: str) -> str:
    return SERVICES.get(service, f"{service.upper()}_API_KEY")


@dataclass
class KeyInfo:
    """Status of one service's API key."""
    service: str
    is_set: bool
    source: str  # 'env', 'keyring', 'config', 'none'
    masked_value: str  # e.g. "sk-a...wxyz"


class KeyManager:
    """Look up and store API keys for the translation backends."""

    SERVICE_NAME = "LegalTrans-LLMs"

    def __init__(self, config_dir: Optional[Path] = None, use_keyring: bool = True):
        self.config_dir = Path(config_dir) if config_dir else Path.home() / ".legaltrans"
        self.config_file = self.config_dir / "keys.json"
        self.use_keyring = use_keyring

    def _read_config(self) -> dict:
        if not self.config_file.exists():
            return {}
        try:
            return json.loads(self.config_file.read_text(encoding="utf-8"))
        except (OSError, json.JSONDecodeError) as e:
            logger.warning("Ignoring unreadable key file %s: %s", self.config_file, e)
            return {}

    def _from_keyring(self, service: str) -> Optional[str]:
        if not self.use_keyring:
            return None
        try:
            return keyring.get_password(self.SERVICE_NAME, service)
        except KeyringError as e:
            logger.debug("Keyring lookup failed for %s: %s", service, e)
            return None

    def _lookup(self, service: str) -> tuple[Optional[str], str]:
        service = service.lower()
        if value := os.getenv(env_var_for(service)):
            return value, "env"
        if value := self._from_keyring(service):
            return value, "keyring"
        if value := self._read_config().get(service):
            return value, "config"
        return None, "none"

    def get_key(self, service: str) -> Optional[str]:
        """API key for a service, or None if not configured anywhere."""
        return self._lookup(service)[0]

    def set_key(self, service: str, key: str) -> str:
        """Store a key, preferring the OS keychain.

        Returns:
            Storage location used ('keyring' or 'config')
        """
        service = service.lower()
        if self.use_keyring:
            try:
                keyring.set_password(self.SERVICE_NAME, service, key)
                return "keyring"
            except KeyringError as e:
                logger.info("Keyring unavailable (%s); writing %s", e, self.config_file)

        self.config_dir.mkdir(parents=True, exist_ok=True)
        config = self._read_config()
        config[service] = key
        self.config_file.write_text(json.dumps(config, indent=2), encoding="utf-8")
        self.config_file.chmod(0o600)
        return "config"

    def delete_key(self, service: str) -> bool:
        service = service.lower()
        deleted = False
        if self.use_keyring:
            try:
                keyring.delete_password(self.SERVICE_NAME, service)
                deleted = True
            except PasswordDeleteError:
                logger.debug("No keyring entry for %s", service)
            except KeyringError as e:
                logger.debug("Keyring delete failed for %s: %s", service, e)

        config = self._read_config()
        if service in config:
            del config[service]
            self.config_file.write_text(json.dumps(config, indent=2), encoding="utf-8")
            deleted = True
        return deleted

    def get_key_info(self, service: str) -> KeyInfo:
        value, source = self._lookup(service)
        return KeyInfo(
            service=service.lower(),
            is_set=value is not None,
            source=source,
            masked_value=mask_key(value) if value else "",
        )

    def list_keys(self) -> list[KeyInfo]:
        return [self.get_key_info(service) for service in SERVICES]


def mask_key(key: str) -> str:
    """Show the first and last four characters of a key only."""
    if len(key) <= 12:
        return "*" * len(key)
    return f"{key[:4]}...{key[-4:]}"


def require_key(service: str, manager: Optional[KeyManager] = None) -> str:
    """Get an API key or raise ValueError with setup instructions."""
    key = (manager or KeyManager()).get_key(service)
    if not key:
        raise ValueError(
            f"API key for '{service}' not found. "
            f"Set {env_var_for(service.lower())} or run: legaltrans keys set {service}"
        )
    return key
