"""
Unit tests for the language catalog.
"""

import pytest

from android_i18n import language_codes as lc


class TestCatalog:

    @pytest.mark.parametrize("alias, code", [
        ("zh-CN", "zh-rCN"),
        ("zh-Hans", "zh-rCN"),
        ("zh-TW", "zh-rTW"),
        ("he", "iw"),
        ("id", "in"),
        ("no", "nb"),
        ("pt-BR", "pt-rBR"),
        (" fr ", "fr"),
    ])
    def test_aliases_resolve_to_android_qualifiers(self, alias, code):
        assert lc.get_language(alias).code == code

    def test_unknown_code(self):
        assert lc.get_language("xx") is None

    def test_engine_codes(self):
        zh = lc.get_language("zh-rCN")

        assert zh.code_for("google") == "zh-CN"
        assert zh.code_for("microsoft") == "zh-Hans"
        assert zh.code_for("llm") == "zh-CN"
        assert lc.get_language("iw").code_for("microsoft") == "he"

    def test_engine_coverage_differs(self):
        google = set(lc.languages_for_engine("google"))
        microsoft = set(lc.languages_for_engine("microsoft"))

        assert lc.get_language("la") in google - microsoft
        assert lc.get_language("mww") in microsoft - google
        assert set(lc.languages_for_engine("llm")) == set(lc.LANGUAGES.values())

    def test_languages_compare_by_code(self):
        assert lc.get_language("zh-CN") == lc.get_language("zh-rCN")
        assert len({lc.get_language("zh"), lc.get_language("zh-rCN")}) == 1

    def test_resolve_languages_skips_unknown_and_duplicates(self):
        resolved = lc.resolve_languages(["fr", "zh-CN", "xx", "zh-rCN", ""])

        assert [language.code for language in resolved] == ["fr", "zh-rCN"]

    def test_filter_supported_keeps_requested_order(self):
        fr, de, ja = (lc.get_language(code) for code in ("fr", "de", "ja"))

        assert lc.filter_supported([ja, fr, de, ja], {fr, ja}) == [ja, fr]

    @pytest.mark.parametrize("dir_name, code", [
        ("values-fr", "fr"),
        ("values-zh-rCN", "zh-rCN"),
        ("values", None),
        ("values-night", None),
        ("drawable-fr", None),
    ])
    def test_extract_language_from_dir(self, dir_name, code):
        language = lc.extract_language_from_dir(dir_name)
        assert (language.code if language else None) == code

    def test_resource_dir(self):
        assert lc.get_language("pt-rBR").resource_dir == "values-pt-rBR"
