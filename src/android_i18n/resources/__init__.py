"""
Resources module - Android string files and spreadsheet interchange

This module provides:
- android_xml: strings.xml reader/writer
- layout: res/values-<code> path conventions
- ResourceStore: load, merge and atomically save per-language files
- SpreadsheetAdapter: .xlsx import/export
"""

from android_i18n.resources.android_xml import parse_strings_xml, read_strings, render_strings_xml
from android_i18n.resources.layout import is_string_xml
from android_i18n.resources.spreadsheet import SpreadsheetAdapter
from android_i18n.resources.store import ResourceStore
