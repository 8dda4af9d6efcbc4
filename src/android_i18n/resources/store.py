"""
Resource store module.

Loads the per-language strings.xml files of a res/ directory, merges run
results into them and writes them back atomically:
- Atomic file writing (temp file + rename)
- Non-destructive merge that keeps unrelated keys and their order
"""

import tempfile
from pathlib import Path
from typing import Dict, Iterable, List, Mapping, Union

from android_i18n.exceptions import PersistenceFailure
from android_i18n.language_codes import Language
from android_i18n.logger import get_logger
from android_i18n.resources import layout
from android_i18n.resources.android_xml import parse_strings_xml, read_strings, render_strings_xml
from android_i18n.translation.models import StringResource, TranslationResult

logger = get_logger(__name__)


def _has_value(value) -> bool:
    return value is not None and str(value).strip() != ""


class ResourceStore:
    """strings.xml files of one res/ directory."""

    def __init__(self, res_dir: Union[str, Path]):
        self.res_dir = Path(res_dir)

    def path_for(self, language: Language) -> Path:
        return layout.language_file(self.res_dir, language)

    @property
    def source_path(self) -> Path:
        return layout.source_file(self.res_dir)

    def load_source(self) -> List[StringResource]:
        """Translatable strings of values/strings.xml, in file order."""
        return read_strings(self.source_path)

    def existing_languages(self) -> List[Language]:
        return layout.existing_languages(self.res_dir)

    def load(self, language: Language) -> Dict[str, str]:
        """
        Current entries for a language; an empty dict when the file does not
        exist yet.

        Raises:
            ResourceParseError: the existing file is malformed
        """
        path = self.path_for(language)
        if not path.exists():
            logger.debug(f"No resource file for {language.code} yet: {path}")
            return {}
        entries = {resource.key: resource.source_value for resource in parse_strings_xml(path.read_bytes())}
        logger.debug(f"Loaded {len(entries)} entries for {language.code} from {path}")
        return entries

    def snapshot(self, languages: Iterable[Language]) -> Dict[str, Dict[str, str]]:
        """Read-only snapshot of every language, keyed by language code."""
        return {language.code: self.load(language) for language in languages}

    @staticmethod
    def merge(
        existing: Mapping[str, str],
        results: Iterable[TranslationResult],
        override: bool,
    ) -> Dict[str, str]:
        """
        Merge non-failed results into a copy of `existing`.

        A result is written when override is set or when `existing` has no
        (non-empty) value for its key. Untouched keys keep their value and
        their position; new keys are appended in result order.
        """
        merged = dict(existing)
        for result in results:
            if result.failed:
                continue
            if override or not _has_value(merged.get(result.key)):
                merged[result.key] = result.value
        return merged

    def save(self, language: Language, entries: Mapping[str, str]) -> Path:
        """
        Write entries to the language's strings.xml atomically.

        Either the whole file reflects the new mapping or the previous file is
        left intact.

        Raises:
            PersistenceFailure: the file could not be written
        """
        path = self.path_for(language)
        _atomic_write(path, render_strings_xml(entries))
        logger.info(f"Wrote {len(entries)} entries for {language.code}: {path}")
        return path


def _atomic_write(file_path: Path, payload: bytes) -> None:
    """
    Write bytes to a file atomically.

    1. Write to a temporary file in the same directory
    2. Rename it over the target
    3. If any step fails, the original file is unchanged
    """
    temp_path = None
    try:
        file_path.parent.mkdir(parents=True, exist_ok=True)

        # Create temp file in the same directory (for atomic rename)
        temp_fd, temp_name = tempfile.mkstemp(
            dir=file_path.parent,
            prefix=f".{file_path.stem}_",
            suffix=".xml.tmp"
        )
        temp_path = Path(temp_name)

        with open(temp_fd, 'wb') as f:
            f.write(payload)

        temp_path.replace(file_path)
        logger.debug(f"Atomic write successful: {file_path}")

    except OSError as e:
        if temp_path is not None and temp_path.exists():
            temp_path.unlink()
        raise PersistenceFailure(f"Atomic write of {file_path} failed: {e}",
                                 details={"path": str(file_path)}) from e
