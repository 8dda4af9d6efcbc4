"""
Unit tests for spreadsheet import and export.
"""

import io

import pytest
from openpyxl import Workbook, load_workbook

from android_i18n.exceptions import PersistenceFailure, SpreadsheetError
from android_i18n.resources.spreadsheet import SpreadsheetAdapter
from android_i18n.translation.models import Origin, StringResource, TranslationResult


def workbook_bytes(rows, title="Translations"):
    wb = Workbook()
    ws = wb.active
    ws.title = title
    for row in rows:
        ws.append(row)
    buffer = io.BytesIO()
    wb.save(buffer)
    return buffer.getvalue()


def read_rows(payload):
    return list(load_workbook(io.BytesIO(payload)).active.iter_rows(values_only=True))


@pytest.fixture
def adapter():
    return SpreadsheetAdapter()


class TestImport:

    def test_reads_language_columns(self, adapter, language):
        payload = workbook_bytes([
            ["key", "source", "fr", "zh-CN", "klingon"],
            ["app_name", "Demo", "Démo", "演示", "Qapla"],
            ["greeting", "Hello", None, "你好", None],
            [None, "orphan", "x", "y", None],
        ])

        table = adapter.import_table(payload)

        assert table == {
            language("fr"): {"app_name": "Démo"},
            language("zh-rCN"): {"app_name": "演示", "greeting": "你好"},
        }

    def test_reads_from_path(self, adapter, tmp_path, language):
        path = tmp_path / "in.xlsx"
        path.write_bytes(workbook_bytes([["key", "fr"], ["app_name", "Démo"]]))

        assert adapter.import_table(path) == {language("fr"): {"app_name": "Démo"}}

    def test_falls_back_to_active_sheet(self, adapter, language):
        payload = workbook_bytes([["key", "fr"], ["app_name", "Démo"]], title="Sheet1")

        assert adapter.import_table(payload) == {language("fr"): {"app_name": "Démo"}}

    def test_requires_key_column(self, adapter):
        with pytest.raises(SpreadsheetError):
            adapter.import_table(workbook_bytes([["name", "fr"], ["app_name", "Démo"]]))

    def test_rejects_non_workbook(self, adapter):
        with pytest.raises(SpreadsheetError):
            adapter.import_table(b"not a spreadsheet")


class TestExport:

    def test_columns_follow_requested_languages(self, adapter, language):
        zh, fr = language("zh-rCN"), language("fr")
        sources = [StringResource("app_name", "Demo"), StringResource("greeting", "Hello")]
        results = {
            "fr": [TranslationResult("app_name", fr, "Démo", Origin.PRESERVED_EXISTING)],
            "zh-rCN": [
                TranslationResult("app_name", zh, "演示", Origin.PRESERVED_EXISTING),
                TranslationResult("greeting", zh, "", Origin.FAILED, error="boom"),
            ],
        }

        rows = read_rows(adapter.export_table(results, [zh, fr], sources, include_source=True))

        assert rows == [
            ("key", "source", "zh-rCN", "fr"),
            ("app_name", "Demo", "演示", "Démo"),
        ]

    def test_empty_export_has_header_only(self, adapter, language):
        rows = read_rows(adapter.export_table({}, [language("fr")], [StringResource("app_name", "Demo")]))

        assert rows == [("key", "fr")]

    def test_save(self, adapter, tmp_path):
        path = adapter.save(tmp_path / "out" / "export.xlsx", b"payload")

        assert path.read_bytes() == b"payload"

    def test_save_failure(self, adapter, tmp_path):
        blocker = tmp_path / "out"
        blocker.write_text("file", encoding="utf-8")

        with pytest.raises(PersistenceFailure):
            adapter.save(blocker / "export.xlsx", b"payload")
