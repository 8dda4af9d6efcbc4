"""
Translation Manager Module

Main TranslationManager class that coordinates one run for a strings.xml:
- Read the source strings and the per-language snapshot
- Resolve jobs through the orchestrator
- Merge and save resource files, or export a spreadsheet
- Build a per-string / per-language summary
"""

import time
from pathlib import Path
from typing import Any, Dict, Iterable, List, Optional, Union

from android_i18n import language_codes as lc
from android_i18n.backends.base import TranslationBackend
from android_i18n.exceptions import PersistenceFailure, RunError
from android_i18n.language_codes import Language
from android_i18n.logger import get_logger
from android_i18n.resources import layout
from android_i18n.resources.android_xml import read_strings
from android_i18n.resources.spreadsheet import SpreadsheetAdapter, SpreadsheetSource
from android_i18n.resources.store import ResourceStore
from android_i18n.translation.models import Origin, RunResult
from android_i18n.translation.orchestrator import CancelCheck, ProgressCallback, TranslationOrchestrator
from android_i18n.translation.progress import TranslationProgress

logger = get_logger(__name__)


class TranslationManager:
    """
    Manages translation runs for one Android res/ directory.

    Features:
    - Translates the source strings into the selected languages
    - Keeps existing translations unless override is requested
    - Imports translations from a spreadsheet (import implies override)
    - Exports current translations to a spreadsheet without touching files
    """

    def __init__(
        self,
        res_dir: Union[str, Path],
        backend: TranslationBackend,
        store: Optional[ResourceStore] = None,
        spreadsheet: Optional[SpreadsheetAdapter] = None,
        orchestrator: Optional[TranslationOrchestrator] = None,
        source_file: Optional[Union[str, Path]] = None,
    ):
        """
        Initialize translation manager.

        Args:
            res_dir: The res/ directory holding values*/strings.xml
            backend: Translation backend for network translation
            store: Resource store (defaults to one over res_dir)
            spreadsheet: Spreadsheet adapter for import/export
            orchestrator: Orchestrator (defaults to one built from config)
            source_file: Source strings.xml (defaults to values/strings.xml)
        """
        self.res_dir = Path(res_dir)
        self.backend = backend
        self.store = store or ResourceStore(self.res_dir)
        self.spreadsheet = spreadsheet or SpreadsheetAdapter()
        self.source_file = Path(source_file) if source_file else layout.source_file(self.res_dir)
        if orchestrator is None:
            # values-zh*/strings.xml seeds a run from Chinese instead of the configured default
            overrides = {}
            source_language = layout.source_language_for(self.source_file)
            if source_language is not None:
                overrides["source_language"] = source_language
            orchestrator = TranslationOrchestrator.from_config(engine=backend.name, **overrides)
        self.orchestrator = orchestrator
        self.failed_items: List[Dict[str, Any]] = []
        self.start_time: Optional[float] = None
        self.last_export: Optional[bytes] = None
        self._token_start: Optional[Dict[str, int]] = None

    def _token_usage(self) -> Optional[Dict[str, int]]:
        """Backend token counters, for engines that report them."""
        get_usage = getattr(self.backend, "get_total_token_usage", None)
        return dict(get_usage()) if get_usage else None

    def _resolve_languages(self, requested: Iterable[Union[str, Language]]) -> List[Language]:
        languages: List[Language] = []
        for item in requested:
            language = item if isinstance(item, Language) else lc.get_language(str(item))
            if language is None:
                logger.warning(f"Ignoring unknown language {item!r}")
                continue
            if language not in languages:
                languages.append(language)
        return languages

    def _collect_failed_items(self, run: RunResult, source_values: Dict[str, str]) -> None:
        self.failed_items = [
            {**result.to_dict(), "source_text": source_values.get(result.key, "")}
            for result in run.failed()
        ]

    def _build_result(
        self,
        run: RunResult,
        written_files: Dict[str, str],
        persistence_errors: Dict[str, str],
        export_file: Optional[str] = None,
    ) -> Dict[str, Any]:
        """Build the result dictionary."""
        elapsed_time = time.time() - self.start_time if self.start_time else 0
        counts = run.counts_by_origin()

        result = {
            "success": not self.failed_items and not persistence_errors and not run.cancelled,
            "status": run.status.value,
            "engine": self.backend.name,
            "languages": [language.code for language in run.languages],
            "total_jobs": run.total_jobs,
            "completed_jobs": run.completed_jobs,
            "counts": counts,
            "failed_items": self.failed_items,
            "written_files": written_files,
            "export_file": export_file,
            "persistence_errors": persistence_errors,
            "elapsed_time": elapsed_time,
        }
        token_usage = self._token_usage()
        if token_usage is not None and self._token_start is not None:
            result["token_usage"] = {
                name: count - self._token_start.get(name, 0) for name, count in token_usage.items()
            }

        logger.info(
            "Translation %s in %.1f seconds (translated=%d, imported=%d, preserved=%d, failed=%d, files=%d)",
            run.status.value,
            elapsed_time,
            counts[Origin.TRANSLATED.value],
            counts[Origin.IMPORTED.value],
            counts[Origin.PRESERVED_EXISTING.value],
            counts[Origin.FAILED.value],
            len(written_files),
        )
        return result

    def translate(
        self,
        languages: Iterable[Union[str, Language]],
        override: bool = False,
        import_only: bool = False,
        export_only: bool = False,
        import_source: Optional[SpreadsheetSource] = None,
        export_path: Optional[Union[str, Path]] = None,
        include_source: bool = False,
        progress_callback: Optional[ProgressCallback] = None,
        cancel_check: Optional[CancelCheck] = None,
    ) -> Dict[str, Any]:
        """
        Run a full translation for the selected languages.

        Args:
            languages: Target languages (Language objects or codes)
            override: Replace existing translations
            import_only: Use values from import_source instead of the backend
            export_only: Export current values to a spreadsheet instead
            import_source: Spreadsheet path, bytes or stream (import mode)
            export_path: Where to write the spreadsheet (export mode)
            include_source: Add a source column to the exported sheet
            progress_callback: Optional callback for progress updates
            cancel_check: Optional function to check for cancellation

        Returns:
            Dict with results including status, counts and written files

        Raises:
            RunError: no strings, no languages, or import without a source
            ResourceParseError: the source or an existing file is malformed
            SpreadsheetError: the import spreadsheet cannot be read
        """
        logger.info(f"Starting translation for {self.source_file}")
        self.start_time = time.time()
        self.failed_items = []
        self.last_export = None
        self._token_start = self._token_usage()

        sources = read_strings(self.source_file)
        if not sources:
            raise RunError("Source file does not contain any strings", code="no_source_strings")

        target_languages = self._resolve_languages(languages)
        if not target_languages:
            raise RunError("No target languages selected", code="no_languages")

        import_table = None
        if import_only and not export_only:
            if import_source is None:
                raise RunError("Import mode needs a spreadsheet to import from", code="no_import_source")
            import_table = self.spreadsheet.import_table(import_source)

        # Snapshot read once; the merge below runs against it, never against the live files
        existing = self.store.snapshot(target_languages)

        run = self.orchestrator.run(
            sources,
            target_languages,
            self.backend,
            override=override,
            import_only=import_only,
            export_only=export_only,
            existing_entries=existing,
            import_table=import_table,
            progress_callback=progress_callback,
            cancel_check=cancel_check,
        )
        self._collect_failed_items(run, {resource.key: resource.source_value for resource in sources})

        written_files: Dict[str, str] = {}
        persistence_errors: Dict[str, str] = {}
        export_file = None

        if export_only:
            self.last_export = self.spreadsheet.export_table(
                run.results, run.languages, sources, include_source=include_source
            )
            if export_path:
                self._notify(progress_callback, run, "exporting")
                try:
                    export_file = str(self.spreadsheet.save(export_path, self.last_export))
                except PersistenceFailure as e:
                    logger.error(f"Failed to export spreadsheet: {e}")
                    persistence_errors["export"] = str(e)
            return self._build_result(run, written_files, persistence_errors, export_file)

        # Imported values replace existing ones
        merge_override = override or import_only
        for language in run.languages:
            results = run.results_for(language)
            if not any(not result.failed for result in results):
                continue
            before = existing.get(language.code, {})
            merged = self.store.merge(before, results, merge_override)
            if merged == before:
                logger.debug(f"No changes for {language.code}")
                continue
            self._notify(progress_callback, run, "saving", language.code)
            try:
                written_files[language.code] = str(self.store.save(language, merged))
            except PersistenceFailure as e:
                logger.error(f"Failed to save {language.code}: {e}")
                persistence_errors[language.code] = str(e)

        return self._build_result(run, written_files, persistence_errors)

    @staticmethod
    def _notify(progress_callback: Optional[ProgressCallback], run: RunResult, phase: str,
                language_code: str = "") -> None:
        if progress_callback is None:
            return
        progress_callback(TranslationProgress(
            completed=run.completed_jobs,
            total=run.total_jobs,
            last_key="",
            last_language=language_code,
            phase=phase,
        ))
