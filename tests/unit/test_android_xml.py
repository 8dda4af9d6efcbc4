"""
Unit tests for the strings.xml reader and writer.
"""

import pytest

from android_i18n.exceptions import ResourceParseError
from android_i18n.resources.android_xml import (
    decode_android_string,
    encode_android_string,
    parse_strings_xml,
    read_strings,
    render_strings_xml,
)
from android_i18n.translation.models import StringResource


def as_dict(resources):
    return {resource.key: resource.source_value for resource in resources}


class TestEscapes:

    @pytest.mark.parametrize("raw, text", [
        ("Don\\'t", "Don't"),
        ('Say \\"hi\\"', 'Say "hi"'),
        ("Line1\\nLine2", "Line1\nLine2"),
        ("\\@home", "@home"),
        ('"  spaced  "', "  spaced  "),
        ("\\u00e9t\\u00e9", "été"),
    ])
    def test_decode(self, raw, text):
        assert decode_android_string(raw) == text

    @pytest.mark.parametrize("text, raw", [
        ("Don't", "Don\\'t"),
        ("Line1\nLine2", "Line1\\nLine2"),
        ("@home", "\\@home"),
        ("?attr", "\\?attr"),
        ("a\\b", "a\\\\b"),
        ("", ""),
    ])
    def test_encode(self, text, raw):
        assert encode_android_string(text) == raw


class TestParse:

    def test_reads_strings_in_order(self):
        payload = b"""<?xml version="1.0" encoding="utf-8"?>
<resources>
    <string name="app_name">Demo</string>
    <string name="welcome">Don\\'t panic</string>
    <color name="accent">#FF0000</color>
    <string name="build_id" translatable="false">abc123</string>
    <string name="app_name">Ignored duplicate</string>
</resources>
"""
        resources = parse_strings_xml(payload)

        assert resources == [
            StringResource("app_name", "Demo"),
            StringResource("welcome", "Don't panic"),
        ]

    def test_keeps_inline_markup(self):
        payload = '<resources><string name="rich">Hello <b>world</b>!</string></resources>'

        assert as_dict(parse_strings_xml(payload)) == {"rich": "Hello <b>world</b>!"}

    def test_malformed_payload_raises(self):
        with pytest.raises(ResourceParseError):
            parse_strings_xml(b"<resources><string name='a'>oops</resources>")

    def test_wrong_root_raises(self):
        with pytest.raises(ResourceParseError):
            parse_strings_xml(b"<manifest/>")

    def test_missing_file_raises(self, tmp_path):
        with pytest.raises(ResourceParseError):
            read_strings(tmp_path / "values" / "strings.xml")


class TestRender:

    def test_document_layout(self):
        payload = render_strings_xml({"app_name": "Démo", "quote": "L'appli"})

        assert payload.decode("utf-8") == (
            '<?xml version="1.0" encoding="utf-8"?>\n'
            "<resources>\n"
            '    <string name="app_name">Démo</string>\n'
            '    <string name="quote">L\\\'appli</string>\n'
            "</resources>\n"
        )

    def test_empty_mapping(self):
        assert b"<resources>\n</resources>" in render_strings_xml({})

    def test_values_survive_a_write(self):
        entries = {
            "app_name": "演示",
            "ampersand": "Tom & Jerry",
            "lines": "One\nTwo",
            "rich": "Tap <b>here</b> now",
            "at": "@handle",
        }

        assert as_dict(parse_strings_xml(render_strings_xml(entries))) == entries

    def test_xliff_placeholders_are_kept(self):
        payload = (
            '<resources xmlns:xliff="urn:oasis:names:tc:xliff:document:1.2">'
            '<string name="hi">Hi <xliff:g id="user">%1$s</xliff:g></string>'
            "</resources>"
        )
        value = as_dict(parse_strings_xml(payload))["hi"]
        rendered = render_strings_xml({"hi": value})

        assert b"xliff:g" in rendered
        assert as_dict(parse_strings_xml(rendered))["hi"] == value
