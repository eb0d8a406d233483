import json
import os
import tempfile
import unittest
from unittest.mock import patch

from senpai.ai.errors import ConfigError
from senpai.ai.providers.base import ProviderConfig
from senpai.config import DEFAULT_CONFIG, ConfigStore, default_config_dir


class TestConfigStore(unittest.TestCase):
    """Tests for the JSON-backed configuration store."""

    def setUp(self):
        self._tmp = tempfile.TemporaryDirectory()
        self.addCleanup(self._tmp.cleanup)
        self.config_dir = os.path.join(self._tmp.name, "senpai")
        self.store = ConfigStore(self.config_dir)

    def test_defaults_are_written_on_first_read(self):
        self.assertFalse(self.store.exists())

        config = self.store.get_all()

        self.assertEqual(config, DEFAULT_CONFIG)
        self.assertTrue(self.store.exists())
        with open(self.store.config_path, "r", encoding="utf-8") as f:
            self.assertEqual(json.load(f), DEFAULT_CONFIG)

    def test_set_is_visible_to_a_new_store(self):
        self.store.set("provider", "ollama")
        self.store.set("model", "mistral")

        other = ConfigStore(self.config_dir)

        self.assertEqual(other.get("provider"), "ollama")
        self.assertEqual(other.get("model"), "mistral")
        self.assertEqual(other.get("serverUrl"), DEFAULT_CONFIG["serverUrl"])

    def test_unknown_key(self):
        self.assertIsNone(self.store.get("nope"))

    def test_reset(self):
        self.store.set("provider", "groq")

        self.store.reset()

        self.assertEqual(self.store.get_all(), DEFAULT_CONFIG)

    def test_malformed_file_raises(self):
        os.makedirs(self.config_dir)
        with open(self.store.config_path, "w", encoding="utf-8") as f:
            f.write("{invalid json")

        with self.assertRaises(ConfigError) as cm:
            self.store.get_all()

        self.assertIn("Error reading or parsing", str(cm.exception))

    def test_non_object_file_raises(self):
        os.makedirs(self.config_dir)
        with open(self.store.config_path, "w", encoding="utf-8") as f:
            f.write("[1, 2]")

        with self.assertRaises(ConfigError):
            self.store.get_all()

    def test_validate(self):
        cases = [
            ({"provider": "server", "serverUrl": "http://localhost:3000", "jwt": ""}, False),
            ({"provider": "server", "serverUrl": "http://localhost:3000", "jwt": "token"}, True),
            ({"provider": "groq", "apiKey": ""}, False),
            ({"provider": "groq", "apiKey": "gsk_test"}, True),
            ({"provider": "ollama", "ollamaUrl": "http://localhost:11434"}, True),
            ({"provider": "ollama", "ollamaUrl": ""}, False),
            ({"provider": "skynet", "apiKey": "key"}, False),
            ({"provider": ""}, False),
        ]
        for settings, expected in cases:
            with self.subTest(settings=settings):
                self.store.reset()
                for key, value in settings.items():
                    self.store.set(key, value)

                self.assertEqual(self.store.validate(), expected)

    def test_provider_config_snapshot(self):
        self.store.set("jwt", "token")

        config = self.store.provider_config()

        self.assertEqual(
            config,
            ProviderConfig(
                provider_id="server",
                api_key=None,
                model=None,
                base_url="http://localhost:3000",
                auth_token="token",
            ),
        )

    @patch.dict(os.environ, {"SENPAI_CONFIG_DIR": "/tmp/senpai-test-config"})
    def test_config_dir_from_environment(self):
        self.assertEqual(default_config_dir(), "/tmp/senpai-test-config")
        self.assertEqual(
            ConfigStore().config_path, os.path.join("/tmp/senpai-test-config", "config.json")
        )


class TestProviderConfigFromSettings(unittest.TestCase):
    def test_ollama_uses_ollama_url(self):
        config = ProviderConfig.from_settings(
            {"provider": "ollama", "ollamaUrl": "http://gpu:11434", "serverUrl": "http://s", "model": "llama3.1:8b"}
        )
        self.assertEqual(config.base_url, "http://gpu:11434")
        self.assertEqual(config.model, "llama3.1:8b")

    def test_hosted_providers_use_base_url_override(self):
        config = ProviderConfig.from_settings(
            {"provider": "openai", "apiKey": "sk-test", "serverUrl": "http://s", "baseUrl": "https://proxy/v1"}
        )
        self.assertEqual(config.api_key, "sk-test")
        self.assertEqual(config.base_url, "https://proxy/v1")

    def test_empty_values_become_none(self):
        config = ProviderConfig.from_settings({"provider": "groq", "apiKey": "", "model": ""})
        self.assertIsNone(config.api_key)
        self.assertIsNone(config.model)
        self.assertIsNone(config.base_url)

    def test_missing_provider(self):
        self.assertEqual(ProviderConfig.from_settings({}).provider_id, "")
