"""
Spreadsheet interchange (.xlsx).

Layout of the single "Translations" sheet:

    | key      | source | fr    | zh-rCN |
    | app_name | Demo   | Démo  | 演示    |

The "source" column is optional. Language columns are headed by Android
qualifiers (common aliases such as zh-CN are accepted on import).
"""

import io
from pathlib import Path
from typing import BinaryIO, Dict, Mapping, Optional, Sequence, Union

from openpyxl import Workbook, load_workbook

from android_i18n import language_codes as lc
from android_i18n.exceptions import PersistenceFailure, SpreadsheetError
from android_i18n.language_codes import Language
from android_i18n.logger import get_logger
from android_i18n.translation.models import StringResource, TranslationResult

logger = get_logger(__name__)

SHEET_TITLE = "Translations"
KEY_HEADER = "key"
SOURCE_HEADER = "source"

SpreadsheetSource = Union[str, Path, bytes, BinaryIO]


def _cell_text(value) -> Optional[str]:
    if value is None:
        return None
    text = str(value)
    return text if text.strip() else None


class SpreadsheetAdapter:
    """Reads and writes the language x key translation table."""

    def __init__(self, sheet_title: str = SHEET_TITLE):
        self.sheet_title = sheet_title

    def import_table(self, source: SpreadsheetSource) -> Dict[Language, Dict[str, str]]:
        """
        Read a workbook into {Language: {key: value}}.

        Empty cells are treated as absent. Columns whose header is not a
        known language are ignored.

        Raises:
            SpreadsheetError: the workbook cannot be opened or has no key column
        """
        if isinstance(source, (bytes, bytearray)):
            source = io.BytesIO(source)
        elif isinstance(source, Path):
            source = str(source)
        try:
            wb = load_workbook(source, read_only=True, data_only=True)
        except Exception as e:
            raise SpreadsheetError(f"Cannot open spreadsheet: {e}") from e

        try:
            ws = wb[self.sheet_title] if self.sheet_title in wb.sheetnames else wb.active
            rows = ws.iter_rows(values_only=True)
            header = next(rows, None)
            if not header:
                raise SpreadsheetError("Spreadsheet is empty")

            header_values = [str(h).strip() if h is not None else "" for h in header]
            if KEY_HEADER not in header_values:
                raise SpreadsheetError(f"Spreadsheet header must contain a '{KEY_HEADER}' column")
            key_idx = header_values.index(KEY_HEADER)

            columns: Dict[int, Language] = {}
            for idx, title in enumerate(header_values):
                if idx == key_idx or not title or title == SOURCE_HEADER:
                    continue
                language = lc.get_language(title)
                if language is None:
                    logger.warning(f"Ignoring spreadsheet column '{title}': unknown language")
                    continue
                columns[idx] = language

            table: Dict[Language, Dict[str, str]] = {language: {} for language in columns.values()}
            for row in rows:
                if row is None or key_idx >= len(row):
                    continue
                key = _cell_text(row[key_idx])
                if key is None:
                    continue
                for idx, language in columns.items():
                    value = _cell_text(row[idx]) if idx < len(row) else None
                    if value is not None:
                        table[language][key.strip()] = value
        finally:
            wb.close()

        logger.info(
            f"Imported spreadsheet: {len(table)} languages, "
            f"{sum(len(values) for values in table.values())} values"
        )
        return table

    def export_table(
        self,
        results_by_language: Mapping[str, Sequence[TranslationResult]],
        languages: Sequence[Language],
        source_strings: Sequence[StringResource],
        include_source: bool = False,
    ) -> bytes:
        """
        Build the workbook for the given results.

        Columns follow `languages` (the requested order), rows follow
        `source_strings`. Keys without any non-failed value are left out.
        """
        values: Dict[str, Dict[str, str]] = {}
        for language in languages:
            for result in results_by_language.get(language.code, []):
                if not result.failed:
                    values.setdefault(result.key, {})[language.code] = result.value

        wb = Workbook()
        ws = wb.active
        ws.title = self.sheet_title

        headers = [KEY_HEADER]
        if include_source:
            headers.append(SOURCE_HEADER)
        headers.extend(language.code for language in languages)
        ws.append(headers)

        for resource in source_strings:
            row_values = values.get(resource.key)
            if not row_values:
                continue
            row = [resource.key]
            if include_source:
                row.append(resource.source_value)
            row.extend(row_values.get(language.code) for language in languages)
            ws.append(row)

        buffer = io.BytesIO()
        wb.save(buffer)
        return buffer.getvalue()

    def save(self, path: Union[str, Path], payload: bytes) -> Path:
        """Write exported bytes to disk, raising PersistenceFailure on error."""
        path = Path(path)
        try:
            path.parent.mkdir(parents=True, exist_ok=True)
            path.write_bytes(payload)
        except OSError as e:
            raise PersistenceFailure(f"Could not write spreadsheet {path}: {e}",
                                     details={"path": str(path)}) from e
        logger.info(f"Exported spreadsheet: {path}")
        return path
