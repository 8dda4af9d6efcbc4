"""
Pytest configuration and fixtures for the android-i18n tests.
"""

import threading
from pathlib import Path
from typing import Callable, Dict, List, Optional, Tuple

import pytest

from android_i18n import language_codes as lc
from android_i18n.backends.base import TranslationBackend
from android_i18n.config import CONFIG_ENV_VAR
from android_i18n.resources.android_xml import render_strings_xml
from android_i18n.translation.models import StringResource
from android_i18n.translation.orchestrator import TranslationOrchestrator


class FakeBackend(TranslationBackend):
    """
    Deterministic in-memory backend.

    Translates with a lookup table ((text, language code) -> value) and falls
    back to "<code>:<text>". `side_effect(text, target)` may raise to simulate
    backend errors.
    """

    name = "google"
    display_name = "Fake Translate"
    required_settings = ()

    def __init__(
        self,
        table: Optional[Dict[Tuple[str, str], str]] = None,
        side_effect: Optional[Callable] = None,
        supported: Optional[List[str]] = None,
    ):
        super().__init__({})
        self.table = table or {}
        self.side_effect = side_effect
        self._supported = supported
        self.calls: List[Tuple[str, str]] = []
        self._lock = threading.Lock()

    def supported_languages(self):
        if self._supported is None:
            return super().supported_languages()
        return {lc.get_language(code) for code in self._supported}

    def _translate(self, text, source, target):
        with self._lock:
            self.calls.append((text, target.code))
        if self.side_effect is not None:
            result = self.side_effect(text, target)
            if result is not None:
                return result
        return self.table.get((text, target.code), f"{target.code}:{text}")


@pytest.fixture(autouse=True)
def isolated_config(tmp_path, monkeypatch):
    """Point the config layer at a per-test file."""
    config_file = tmp_path / "config" / "config.json"
    monkeypatch.setenv(CONFIG_ENV_VAR, str(config_file))
    return config_file


@pytest.fixture
def fake_backend():
    return FakeBackend


@pytest.fixture
def language():
    """Look up a catalog language by code."""
    return lc.get_language


@pytest.fixture
def orchestrator():
    """Orchestrator with no backoff sleeps and default placeholder patterns."""
    return TranslationOrchestrator(
        max_retries=3,
        backoff_seconds=0,
        max_workers=2,
        variable_patterns=[r"%(\d+\$)?[-#+0,(]*\d*(\.\d+)?[sdfxXoeEgGcb%]", r"\{[A-Za-z0-9_]+\}"],
        sleep=lambda seconds: None,
    )


@pytest.fixture
def sources():
    return [StringResource("app_name", "Demo")]


def write_strings(path: Path, entries: Dict[str, str]) -> Path:
    path.parent.mkdir(parents=True, exist_ok=True)
    path.write_bytes(render_strings_xml(entries))
    return path


@pytest.fixture
def res_dir(tmp_path):
    """res/ directory with a two-string source file."""
    res = tmp_path / "app" / "src" / "main" / "res"
    write_strings(res / "values" / "strings.xml", {"app_name": "Demo", "greeting": "Hello %1$s"})
    return res


@pytest.fixture
def strings_writer():
    return write_strings
