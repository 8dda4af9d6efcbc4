"""
Android resource directory layout.

    res/
      values/strings.xml          source strings
      values-fr/strings.xml       French
      values-zh-rCN/strings.xml   Chinese (Simplified)
"""

from pathlib import Path
from typing import List, Optional, Union

from android_i18n import language_codes as lc
from android_i18n.language_codes import Language

STRINGS_FILE_NAME = "strings.xml"
SOURCE_DIR_NAME = "values"


def source_file(res_dir: Union[str, Path]) -> Path:
    return Path(res_dir) / SOURCE_DIR_NAME / STRINGS_FILE_NAME


def language_file(res_dir: Union[str, Path], language: Language) -> Path:
    return Path(res_dir) / language.resource_dir / STRINGS_FILE_NAME


def is_string_xml(path: Union[str, Path, None]) -> bool:
    """
    True for a strings.xml that can seed a translation run: the default
    'values' file or a Chinese one (values-zh*).

    Examples:
        >>> is_string_xml('app/src/main/res/values/strings.xml')
        True
        >>> is_string_xml('app/src/main/res/values-fr/strings.xml')
        False
        >>> is_string_xml('app/src/main/res/values/colors.xml')
        False
    """
    if path is None:
        return False
    path = Path(path)
    if path.name != STRINGS_FILE_NAME:
        return False
    parent = path.parent.name
    if not parent:
        return False
    return parent == SOURCE_DIR_NAME or parent.startswith("values-zh")


def res_dir_for(strings_file: Union[str, Path]) -> Path:
    """The res/ directory that holds a strings.xml file."""
    return Path(strings_file).resolve().parent.parent


def source_language_for(strings_file: Union[str, Path]) -> Optional[Language]:
    """Language of a values-<code> file; None for the default 'values' directory."""
    return lc.extract_language_from_dir(Path(strings_file).parent.name)


def existing_languages(res_dir: Union[str, Path]) -> List[Language]:
    """Catalog languages that already have a strings.xml under res_dir."""
    res_dir = Path(res_dir)
    if not res_dir.is_dir():
        return []
    found = []
    for child in sorted(res_dir.iterdir()):
        language = lc.extract_language_from_dir(child.name)
        if language and (child / STRINGS_FILE_NAME).is_file():
            found.append(language)
    return found
