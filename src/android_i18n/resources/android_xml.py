"""
Android strings.xml reader and writer.

Only <string> entries are handled; <string-array> and <plurals> are left out
of translation runs. Values are kept in their logical form: Android
backslash escapes are decoded on read and re-applied on write. Inline markup
(<b>, <i>, <xliff:g>) is kept as serialized XML inside the value.
"""

import re
import xml.etree.ElementTree as ET
from pathlib import Path
from typing import List, Mapping, Union

from android_i18n.exceptions import ResourceParseError
from android_i18n.logger import get_logger
from android_i18n.translation.models import StringResource

logger = get_logger(__name__)

XLIFF_NS = "urn:oasis:names:tc:xliff:document:1.2"
ET.register_namespace("xliff", XLIFF_NS)

_ESCAPES = {
    "n": "\n",
    "t": "\t",
    "'": "'",
    '"': '"',
    "@": "@",
    "?": "?",
    "\\": "\\",
}
_ESCAPE_RE = re.compile(r"\\(u[0-9a-fA-F]{4}|.)", re.DOTALL)


def decode_android_string(raw: str) -> str:
    """
    Decode Android resource escapes into plain text.

    Examples:
        >>> decode_android_string("Don\\\\'t")
        "Don't"
        >>> decode_android_string('"  quoted  "')
        '  quoted  '
    """
    if raw is None:
        return ""
    text = raw
    if len(text) >= 2 and text.startswith('"') and text.endswith('"') and not text.endswith('\\"'):
        text = text[1:-1]

    def _replace(match):
        token = match.group(1)
        if token.startswith("u") and len(token) == 5:
            return chr(int(token[1:], 16))
        return _ESCAPES.get(token, token)

    return _ESCAPE_RE.sub(_replace, text)


def encode_android_string(text: str) -> str:
    """
    Escape plain text for an Android string resource.

    Examples:
        >>> encode_android_string("Don't")
        "Don\\\\'t"
        >>> encode_android_string("@home")
        '\\\\@home'
    """
    if not text:
        return ""
    s = text.replace("\r\n", "\n")
    s = s.replace("\\", "\\\\")
    s = s.replace("\n", "\\n").replace("\t", "\\t")
    s = s.replace("'", "\\'").replace('"', '\\"')
    if s[0] in ("@", "?"):
        s = "\\" + s
    return s


_TAG_RE = re.compile(r"(<[^<>]+>)")


def _encode_value(value: str) -> str:
    """Escape the text around inline tags, leaving the tags themselves intact."""
    if "<" not in value:
        return encode_android_string(value)
    parts = _TAG_RE.split(value)
    encoded = []
    for index, part in enumerate(parts):
        if index % 2 == 1:
            encoded.append(part)
        elif index == 0:
            encoded.append(encode_android_string(part))
        else:
            # Only the very start of the value needs the @/? reference escape
            encoded.append(encode_android_string(" " + part)[1:] if part else "")
    return "".join(encoded)


def _inner_xml(elem: ET.Element) -> str:
    """Element content with child markup serialized, or plain text when there is none."""
    if len(elem) == 0:
        return elem.text or ""
    parts = [_xml_escape(elem.text or "")]
    for child in elem:
        parts.append(ET.tostring(child, encoding="unicode"))
    return "".join(parts)


def _xml_escape(text: str) -> str:
    return text.replace("&", "&amp;").replace("<", "&lt;").replace(">", "&gt;")


def _set_inner_xml(elem: ET.Element, value: str) -> None:
    if "<" in value:
        try:
            fragment = ET.fromstring(f'<string xmlns:xliff="{XLIFF_NS}">{value}</string>')
        except ET.ParseError:
            fragment = None
        if fragment is not None and len(fragment):
            elem.text = fragment.text
            for child in fragment:
                elem.append(child)
            return
    elem.text = value


def parse_strings_xml(payload: Union[bytes, str]) -> List[StringResource]:
    """
    Parse a strings.xml payload into ordered string resources.

    Entries marked translatable="false" are skipped; a duplicated name keeps
    its first value.

    Raises:
        ResourceParseError: payload is not a <resources> document
    """
    try:
        root = ET.fromstring(payload)
    except ET.ParseError as e:
        raise ResourceParseError(f"Malformed strings.xml: {e}") from e

    if root.tag != "resources":
        raise ResourceParseError(f"Expected <resources> root element, found <{root.tag}>")

    resources: List[StringResource] = []
    seen = set()
    for elem in root.findall("string"):
        name = elem.get("name")
        if not name:
            continue
        if elem.get("translatable", "true").lower() == "false":
            continue
        if name in seen:
            logger.warning(f"Duplicate string name '{name}', keeping the first occurrence")
            continue
        seen.add(name)
        resources.append(StringResource(key=name, source_value=decode_android_string(_inner_xml(elem))))

    return resources


def render_strings_xml(entries: Mapping[str, str]) -> bytes:
    """Serialize a key -> value mapping as a strings.xml document."""
    root = ET.Element("resources")
    root.text = "\n    " if entries else "\n"
    last = None
    for key, value in entries.items():
        elem = ET.SubElement(root, "string", {"name": key})
        _set_inner_xml(elem, _encode_value(value or ""))
        elem.tail = "\n    "
        last = elem
    if last is not None:
        last.tail = "\n"

    body = ET.tostring(root, encoding="unicode")
    return ('<?xml version="1.0" encoding="utf-8"?>\n' + body + "\n").encode("utf-8")


def read_strings(path: Path) -> List[StringResource]:
    """Read a strings.xml file from disk."""
    try:
        payload = Path(path).read_bytes()
    except OSError as e:
        raise ResourceParseError(f"Cannot read {path}: {e}") from e
    return parse_strings_xml(payload)
