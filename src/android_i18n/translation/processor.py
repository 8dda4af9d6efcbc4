"""
Translation Processing Module

Contains helpers applied around every backend call:
- Variable placeholder replacement and restoration
- Detection of placeholders lost by the backend
"""

import re
from typing import Dict, List, Tuple

from android_i18n.logger import get_logger

logger = get_logger(__name__)

_PLACEHOLDER_RE = re.compile(r"__VAR_\d+__")


def replace_variables_with_placeholders(
    text: str,
    variable_patterns: List[str],
    preserve_variables: bool = True,
) -> Tuple[str, Dict[str, str]]:
    """
    Replace format arguments and markup in text with opaque placeholders.

    Android strings carry format arguments (%1$s, %d), named arguments
    ({name}), line breaks and inline markup that a translation engine must
    not touch.

    Args:
        text: The text containing variables to replace
        variable_patterns: List of regex patterns to match variables
        preserve_variables: Whether to preserve variables (if False, returns unchanged)

    Returns:
        Tuple of (text_with_placeholders, placeholder_map)
        where placeholder_map is {"__VAR_0__": "%1$s", ...}
    """
    if not preserve_variables or not variable_patterns or not text:
        return text, {}

    protected_text = text
    placeholder_map: Dict[str, str] = {}
    placeholder_index = 0

    # Longest patterns first so overlapping patterns resolve the same way every time
    sorted_patterns = sorted(variable_patterns, key=len, reverse=True)

    for pattern in sorted_patterns:
        matches = [m for m in re.finditer(pattern, protected_text) if m.group(0)]
        # Replace from end to start to preserve positions
        for match in reversed(matches):
            var = match.group(0)
            if _PLACEHOLDER_RE.fullmatch(var):
                continue
            placeholder = f"__VAR_{placeholder_index}__"
            placeholder_map[placeholder] = var
            start, end = match.span()
            protected_text = protected_text[:start] + placeholder + protected_text[end:]
            placeholder_index += 1

    if placeholder_map:
        logger.debug(f"Replaced {len(placeholder_map)} variables with placeholders: {text[:50]} -> {protected_text[:50]}")

    return protected_text, placeholder_map


def restore_variables_from_placeholders(text: str, placeholder_map: Dict[str, str]) -> str:
    """
    Restore original variables from placeholders after translation.

    Placeholders are restored in reverse creation order so a variable that
    itself contains an earlier placeholder is expanded correctly.
    """
    if not placeholder_map:
        return text

    restored_text = text
    for placeholder in sorted(placeholder_map, key=lambda p: int(p[6:-2]), reverse=True):
        restored_text = restored_text.replace(placeholder, placeholder_map[placeholder])

    return restored_text


def missing_placeholders(translated_text: str, placeholder_map: Dict[str, str]) -> List[str]:
    """Placeholders the backend dropped from its output."""
    return [placeholder for placeholder in placeholder_map if placeholder not in translated_text]


def needs_translation(protected_text: str) -> bool:
    """False when nothing but placeholders and punctuation is left to translate."""
    remainder = _PLACEHOLDER_RE.sub("", protected_text)
    return any(ch.isalpha() for ch in remainder)
