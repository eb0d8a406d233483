import json
import os
from typing import Any, Dict, Optional

from .ai.errors import ConfigError
from .ai.providers import ADAPTER_TYPES, ProviderConfig


CONFIG_DIR_ENV = "SENPAI_CONFIG_DIR"

DEFAULT_CONFIG: Dict[str, Any] = {
    "provider": "server",
    "serverUrl": "http://localhost:3000",
    "apiKey": "",
    "jwt": "",
    "ollamaUrl": "http://localhost:11434",
    "model": "",
}

KNOWN_PROVIDERS = tuple(adapter.provider_id for adapter in ADAPTER_TYPES)


def default_config_dir() -> str:
    return os.getenv(CONFIG_DIR_ENV) or os.path.join(os.path.expanduser("~"), ".config", "senpai")


class ConfigStore:
    """
    Key/value settings persisted as a JSON file.

    The file is created with `DEFAULT_CONFIG` the first time it is needed and re-read on
    every access, so a value set by another invocation is always seen.
    """

    def __init__(self, config_dir: Optional[str] = None):
        self.config_dir = config_dir or default_config_dir()
        self.config_path = os.path.join(self.config_dir, "config.json")

    def exists(self) -> bool:
        return os.path.exists(self.config_path)

    def _write(self, config: Dict[str, Any]):
        try:
            os.makedirs(self.config_dir, exist_ok=True)
            with open(self.config_path, "w", encoding="utf-8") as config_file:
                json.dump(config, config_file, indent=2)
        except OSError as e:
            raise ConfigError(f"Could not write configuration file {self.config_path}: {e}")

    def get_all(self) -> Dict[str, Any]:
        if not self.exists():
            self._write(dict(DEFAULT_CONFIG))

        try:
            with open(self.config_path, "r", encoding="utf-8") as config_file:
                config = json.load(config_file)
        except (OSError, json.JSONDecodeError) as e:
            raise ConfigError(f"Error reading or parsing {self.config_path}: {e}")

        if not isinstance(config, dict):
            raise ConfigError(f"Error reading or parsing {self.config_path}: not a JSON object")
        return config

    def get(self, key: str) -> Any:
        return self.get_all().get(key)

    def set(self, key: str, value: Any):
        config = self.get_all()
        config[key] = value
        self._write(config)

    def reset(self):
        self._write(dict(DEFAULT_CONFIG))

    def provider_config(self) -> ProviderConfig:
        """A snapshot of the active provider settings for one request."""
        return ProviderConfig.from_settings(self.get_all())

    def validate(self) -> bool:
        """Checks that the active provider has the settings it needs to be called."""
        config = self.get_all()
        provider = config.get("provider")
        if not provider or provider not in KNOWN_PROVIDERS:
            return False

        if provider == "server":
            return bool(config.get("serverUrl") and config.get("jwt"))
        if provider == "ollama":
            return bool(config.get("ollamaUrl"))
        return bool(config.get("apiKey"))
