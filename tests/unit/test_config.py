"""
Unit tests for configuration loading.
"""

import json

from android_i18n import config


class TestConfig:

    def test_missing_file_returns_defaults(self, isolated_config):
        assert not isolated_config.exists()
        assert config.load_config() == config.DEFAULT_CONFIG

    def test_initialize_creates_default_file(self, isolated_config):
        config.initialize_app()

        assert json.loads(isolated_config.read_text(encoding="utf-8"))["engine"] == "google"

    def test_stored_values_are_merged_over_defaults(self, isolated_config):
        isolated_config.parent.mkdir(parents=True)
        isolated_config.write_text(json.dumps({
            "engine": "llm",
            "llm": {"model": "local-model"},
            "translation": {"max_workers": 8},
        }), encoding="utf-8")

        loaded = config.load_config()

        assert loaded["engine"] == "llm"
        assert loaded["llm"]["model"] == "local-model"
        assert loaded["llm"]["api_url"] == config.DEFAULT_CONFIG["llm"]["api_url"]
        assert loaded["translation"]["max_workers"] == 8
        assert loaded["translation"]["source_language"] == "en"

    def test_corrupt_file_falls_back_to_defaults(self, isolated_config):
        isolated_config.parent.mkdir(parents=True)
        isolated_config.write_text("{not json", encoding="utf-8")

        assert config.load_config() == config.DEFAULT_CONFIG

    def test_save_then_load(self, isolated_config):
        stored = config.load_config()
        stored["google"]["api_key"] = "secret"
        config.save_config(stored)

        assert config.load_config()["google"]["api_key"] == "secret"

    def test_translation_settings_fill_defaults(self):
        settings = config.get_translation_settings({"translation": {"backoff_seconds": 0.5}})

        assert settings["backoff_seconds"] == 0.5
        assert settings["max_workers"] == config.DEFAULT_MAX_WORKERS
        assert settings["variable_patterns"] == config.DEFAULT_CONFIG["translation"]["variable_patterns"]

    def test_defaults_are_not_mutated(self):
        loaded = config.load_config()
        loaded["translation"]["max_workers"] = 99

        assert config.DEFAULT_CONFIG["translation"]["max_workers"] == config.DEFAULT_MAX_WORKERS
