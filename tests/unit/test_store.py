"""
Unit tests for the resource store and res/ layout helpers.
"""

from pathlib import Path

import pytest

from android_i18n.exceptions import PersistenceFailure, ResourceParseError
from android_i18n.resources import layout
from android_i18n.resources.store import ResourceStore
from android_i18n.translation.models import Origin, TranslationResult


@pytest.fixture
def store(res_dir):
    return ResourceStore(res_dir)


@pytest.fixture
def fr(language):
    return language("fr")


class TestLoadAndSave:

    def test_load_source(self, store):
        assert [resource.key for resource in store.load_source()] == ["app_name", "greeting"]

    def test_missing_language_file_is_empty(self, store, fr):
        assert store.load(fr) == {}

    def test_save_writes_values_directory(self, store, res_dir, fr):
        path = store.save(fr, {"app_name": "Démo"})

        assert path == res_dir / "values-fr" / "strings.xml"
        assert store.load(fr) == {"app_name": "Démo"}

    def test_snapshot_is_keyed_by_code(self, store, language, fr):
        store.save(fr, {"app_name": "Démo"})
        snapshot = store.snapshot([fr, language("zh-rCN")])

        assert snapshot == {"fr": {"app_name": "Démo"}, "zh-rCN": {}}

    def test_malformed_file_raises(self, store, res_dir, fr):
        path = res_dir / "values-fr" / "strings.xml"
        path.parent.mkdir(parents=True)
        path.write_text("<resources><string>", encoding="utf-8")

        with pytest.raises(ResourceParseError):
            store.load(fr)

    def test_save_failure_raises_persistence_failure(self, store, res_dir, fr):
        # A plain file where the values-fr directory should be
        (res_dir / "values-fr").write_text("not a directory", encoding="utf-8")

        with pytest.raises(PersistenceFailure):
            store.save(fr, {"app_name": "Démo"})

    def test_failed_write_keeps_previous_file(self, store, res_dir, fr, monkeypatch):
        store.save(fr, {"app_name": "Ancien"})

        def refuse(self, target):
            raise OSError("disk full")

        monkeypatch.setattr(Path, "replace", refuse)
        with pytest.raises(PersistenceFailure):
            store.save(fr, {"app_name": "Nouveau"})
        monkeypatch.undo()

        assert store.load(fr) == {"app_name": "Ancien"}
        assert [p.name for p in (res_dir / "values-fr").iterdir()] == ["strings.xml"]

    def test_existing_languages(self, store, language, fr):
        store.save(fr, {"app_name": "Démo"})
        store.save(language("zh-rCN"), {"app_name": "演示"})

        assert [lang.code for lang in store.existing_languages()] == ["fr", "zh-rCN"]


class TestMerge:

    def result(self, language, key, value, origin=Origin.TRANSLATED):
        return TranslationResult(key, language, value, origin)

    def test_keeps_existing_values_without_override(self, fr):
        merged = ResourceStore.merge(
            {"app_name": "Ancien", "other": "Autre"},
            [self.result(fr, "app_name", "Nouveau"), self.result(fr, "greeting", "Bonjour")],
            override=False,
        )

        assert merged == {"app_name": "Ancien", "other": "Autre", "greeting": "Bonjour"}
        assert list(merged) == ["app_name", "other", "greeting"]

    def test_override_replaces_values(self, fr):
        merged = ResourceStore.merge({"app_name": "Ancien"}, [self.result(fr, "app_name", "Nouveau")], True)

        assert merged == {"app_name": "Nouveau"}

    def test_empty_existing_value_is_filled(self, fr):
        merged = ResourceStore.merge({"app_name": ""}, [self.result(fr, "app_name", "Démo")], False)

        assert merged == {"app_name": "Démo"}

    def test_failed_results_are_skipped(self, fr):
        existing = {"app_name": "Ancien"}
        merged = ResourceStore.merge(existing, [self.result(fr, "app_name", "", Origin.FAILED)], True)

        assert merged == existing
        assert merged is not existing


class TestLayout:

    @pytest.mark.parametrize("path, expected", [
        ("app/src/main/res/values/strings.xml", True),
        ("app/src/main/res/values-zh-rCN/strings.xml", True),
        ("app/src/main/res/values-fr/strings.xml", False),
        ("app/src/main/res/values/colors.xml", False),
        ("strings.xml", False),
        (None, False),
    ])
    def test_is_string_xml(self, path, expected):
        assert layout.is_string_xml(path) is expected

    def test_res_dir_for(self, res_dir):
        assert layout.res_dir_for(res_dir / "values" / "strings.xml") == res_dir.resolve()

    def test_source_language_for(self):
        assert layout.source_language_for("res/values/strings.xml") is None
        assert layout.source_language_for("res/values-zh-rCN/strings.xml").code == "zh-rCN"
