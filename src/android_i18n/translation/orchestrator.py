"""
Translation Orchestrator Module

Expands source strings and target languages into jobs, resolves every job
by export, import, preservation or a backend call, and returns the results
grouped per language. Persistence is left to the caller.
"""

import threading
import time
from concurrent.futures import FIRST_COMPLETED, ThreadPoolExecutor, wait
from typing import Callable, Dict, Iterable, List, Mapping, Optional, Sequence, Tuple

from android_i18n import language_codes as lc
from android_i18n.backends.base import TranslationBackend
from android_i18n.config import (
    DEFAULT_BACKOFF_SECONDS,
    DEFAULT_MAX_RETRIES,
    DEFAULT_MAX_WORKERS,
    DEFAULT_SOURCE_LANGUAGE,
    get_translation_settings,
    load_config,
)
from android_i18n.exceptions import (
    RETRYABLE_ERRORS,
    MissingImportValue,
    RateLimited,
    RunError,
    TranslationError,
    UnsupportedLanguagePair,
)
from android_i18n.language_codes import Language
from android_i18n.logger import get_logger
from android_i18n.translation.models import (
    Origin,
    RunResult,
    RunStatus,
    StringResource,
    TranslationJob,
    TranslationResult,
)
from android_i18n.translation.processor import (
    missing_placeholders,
    needs_translation,
    replace_variables_with_placeholders,
    restore_variables_from_placeholders,
)
from android_i18n.translation.progress import TranslationProgress

logger = get_logger(__name__)

MAX_BACKOFF_SECONDS = 300.0
RATE_LIMIT_BACKOFF_FACTOR = 4

ProgressCallback = Callable[[TranslationProgress], Optional[bool]]
CancelCheck = Callable[[], bool]
Entries = Mapping[object, Mapping[str, str]]


def _has_value(value: Optional[str]) -> bool:
    return value is not None and str(value).strip() != ""


def _stopped(stop_event: Optional[threading.Event]) -> bool:
    return stop_event is not None and stop_event.is_set()


def entries_for(table: Optional[Entries], language: Language) -> Mapping[str, str]:
    """Per-language mapping from a table keyed by Language or by language code."""
    if not table:
        return {}
    if language in table:
        return table[language] or {}
    return table.get(language.code) or {}


class TranslationOrchestrator:
    """
    Runs one translation batch.

    Features:
    - Export > import > preserve > translate resolution per job
    - Bounded pool of in-flight backend calls
    - Retry with exponential backoff for rate limits and network errors
    - Progress events and cooperative cancellation on the calling thread
    """

    def __init__(
        self,
        max_retries: int = DEFAULT_MAX_RETRIES,
        backoff_seconds: float = DEFAULT_BACKOFF_SECONDS,
        max_workers: int = DEFAULT_MAX_WORKERS,
        source_language: Optional[Language] = None,
        preserve_variables: bool = True,
        variable_patterns: Optional[List[str]] = None,
        sleep: Callable[[float], None] = time.sleep,
    ):
        self.max_retries = max(1, int(max_retries))
        self.backoff_seconds = max(0.0, float(backoff_seconds))
        self.max_workers = max(1, int(max_workers))
        self.source_language = source_language or lc.get_language(DEFAULT_SOURCE_LANGUAGE)
        self.preserve_variables = preserve_variables
        self.variable_patterns = list(variable_patterns or [])
        self.sleep = sleep

    @classmethod
    def from_config(cls, config: Optional[dict] = None, engine: Optional[str] = None,
                    **overrides) -> "TranslationOrchestrator":
        """
        Build an orchestrator from the config: the translation section plus
        the retry count of the engine section.
        """
        config = config if config is not None else load_config()
        settings = get_translation_settings(config)
        engine_settings = config.get(engine or config.get("engine", ""), {}) or {}
        source_language = lc.get_language(settings.get("source_language", DEFAULT_SOURCE_LANGUAGE))
        if source_language is None:
            logger.warning(f"Unknown source language {settings.get('source_language')!r}, using English")
        kwargs = dict(
            max_retries=engine_settings.get("max_retries", DEFAULT_MAX_RETRIES),
            backoff_seconds=settings.get("backoff_seconds", DEFAULT_BACKOFF_SECONDS),
            max_workers=settings.get("max_workers", DEFAULT_MAX_WORKERS),
            source_language=source_language,
            preserve_variables=settings.get("preserve_variables", True),
            variable_patterns=settings.get("variable_patterns", []),
        )
        kwargs.update(overrides)
        return cls(**kwargs)

    # ------------------------------------------------------------------
    # Job set
    # ------------------------------------------------------------------

    def _unique_sources(self, source_strings: Iterable[StringResource]) -> List[StringResource]:
        seen = set()
        unique: List[StringResource] = []
        for resource in source_strings:
            if resource.key in seen:
                logger.warning(f"Duplicate key '{resource.key}' in source strings, keeping the first value")
                continue
            seen.add(resource.key)
            unique.append(resource)
        return unique

    def eligible_languages(self, target_languages: Iterable[Language], backend: TranslationBackend) -> List[Language]:
        """Requested languages the backend supports, minus the source language."""
        requested = list(target_languages)
        eligible = lc.filter_supported(requested, backend.supported_languages())
        excluded = [language.code for language in requested if language not in eligible]
        if excluded:
            logger.info(f"Languages not supported by {backend.display_name or backend.name}: {', '.join(excluded)}")
        if self.source_language in eligible:
            logger.info(f"Skipping source language {self.source_language.code}")
            eligible.remove(self.source_language)
        return eligible

    def build_jobs(self, sources: Sequence[StringResource], languages: Sequence[Language]) -> List[TranslationJob]:
        return [
            TranslationJob(key=resource.key, target_language=language, source_value=resource.source_value)
            for language in languages
            for resource in sources
        ]

    # ------------------------------------------------------------------
    # Resolution
    # ------------------------------------------------------------------

    def _resolve_locally(
        self,
        job: TranslationJob,
        override: bool,
        import_only: bool,
        export_only: bool,
        existing_entries: Optional[Entries],
        import_table: Optional[Entries],
    ) -> Optional[TranslationResult]:
        """Resolve a job without the backend, or return None when a call is needed."""
        language = job.target_language
        existing_value = entries_for(existing_entries, language).get(job.key)

        if export_only:
            return TranslationResult(job.key, language, existing_value, Origin.PRESERVED_EXISTING)

        if import_only:
            imported = entries_for(import_table, language).get(job.key)
            if _has_value(imported):
                return TranslationResult(job.key, language, str(imported), Origin.IMPORTED)
            error = MissingImportValue(
                f"No imported value for '{job.key}' in {language.code}",
                details={"key": job.key, "language": language.code},
            )
            return TranslationResult(job.key, language, "", Origin.FAILED, error=str(error))

        if not override and _has_value(existing_value):
            return TranslationResult(job.key, language, existing_value, Origin.PRESERVED_EXISTING)

        return None

    def _backoff(self, error: Exception, attempt: int) -> float:
        """Seconds to wait before the next attempt (attempt is 1-indexed)."""
        if isinstance(error, RateLimited):
            if error.retry_after is not None:
                return min(error.retry_after, MAX_BACKOFF_SECONDS)
            wait_time = self.backoff_seconds * RATE_LIMIT_BACKOFF_FACTOR * (2 ** (attempt - 1))
        else:
            wait_time = self.backoff_seconds * (2 ** (attempt - 1))
        return min(wait_time, MAX_BACKOFF_SECONDS)

    def translate_job(
        self,
        backend: TranslationBackend,
        job: TranslationJob,
        stop_event: Optional[threading.Event] = None,
    ) -> TranslationResult:
        """Translate one job with retries. Never raises; failures become FAILED results."""
        language = job.target_language
        protected_text, var_map = replace_variables_with_placeholders(
            job.source_value, self.variable_patterns, self.preserve_variables
        )
        if not needs_translation(protected_text):
            return TranslationResult(job.key, language, job.source_value, Origin.TRANSLATED)

        last_error: Optional[Exception] = None
        attempt = 0
        for attempt in range(1, self.max_retries + 1):
            try:
                translated = backend.translate(protected_text, self.source_language, language)
            except UnsupportedLanguagePair as e:
                logger.warning(f"[UNSUPPORTED] {job.key} ({language.code}): {e}")
                return TranslationResult(job.key, language, "", Origin.FAILED, error=str(e), attempts=attempt)
            except RETRYABLE_ERRORS as e:
                last_error = e
            except TranslationError as e:
                logger.error(f"  Non-recoverable error for {job.key} ({language.code}): {e}")
                return TranslationResult(job.key, language, "", Origin.FAILED, error=str(e), attempts=attempt)
            except Exception as e:
                logger.exception(f"Unexpected backend failure for {job.key} ({language.code})")
                return TranslationResult(job.key, language, "", Origin.FAILED, error=f"{type(e).__name__}: {e}",
                                         attempts=attempt)
            else:
                lost = missing_placeholders(translated, var_map)
                if not lost:
                    value = restore_variables_from_placeholders(translated, var_map)
                    logger.debug(f"[TRANSLATED] {job.key} ({language.code}) after {attempt} attempt(s)")
                    return TranslationResult(job.key, language, value, Origin.TRANSLATED, attempts=attempt)
                last_error = TranslationError(
                    f"Backend dropped placeholders {', '.join(var_map[p] for p in lost)}",
                    code="placeholder_lost",
                )

            if attempt >= self.max_retries:
                break
            if _stopped(stop_event):
                logger.info(f"Run cancelled, not retrying {job.key} ({language.code})")
                break
            wait_time = self._backoff(last_error, attempt)
            logger.warning(f"  Attempt {attempt} for {job.key} ({language.code}) failed: {last_error}. "
                           f"Waiting {wait_time}s before retry...")
            self.sleep(wait_time)
            if _stopped(stop_event):
                logger.info(f"Run cancelled during backoff, not retrying {job.key} ({language.code})")
                break

        logger.warning(f"[FAILED] {job.key} ({language.code}) after {attempt} attempt(s): {last_error}")
        return TranslationResult(job.key, language, "", Origin.FAILED, error=str(last_error), attempts=attempt)

    # ------------------------------------------------------------------
    # Run
    # ------------------------------------------------------------------

    def run(
        self,
        source_strings: Iterable[StringResource],
        target_languages: Iterable[Language],
        backend: TranslationBackend,
        override: bool = False,
        import_only: bool = False,
        export_only: bool = False,
        existing_entries: Optional[Entries] = None,
        import_table: Optional[Entries] = None,
        progress_callback: Optional[ProgressCallback] = None,
        cancel_check: Optional[CancelCheck] = None,
    ) -> RunResult:
        """
        Resolve every (string, language) job and group the results per language.

        Args:
            source_strings: Ordered source strings
            target_languages: Requested languages, in column/report order
            backend: Translation capability used when a call is needed
            override: Translate keys that already have a value
            import_only: Take values from import_table, no network calls
            export_only: Report current values, no network calls
            existing_entries: Snapshot per language (keyed by Language or code)
            import_table: Imported values per language (keyed by Language or code)
            progress_callback: Called after each resolved job; returning True
                requests cancellation
            cancel_check: Polled between jobs

        Returns:
            RunResult with status COMPLETED or CANCELLED

        Raises:
            RunError: no source strings or no target languages
        """
        sources = self._unique_sources(source_strings)
        requested = list(target_languages)
        if not sources:
            raise RunError("Source file does not contain any strings", code="no_source_strings")
        if not requested:
            raise RunError("No target languages selected", code="no_languages")

        languages = self.eligible_languages(requested, backend)
        jobs = self.build_jobs(sources, languages)
        if export_only:
            # Nothing to export for keys without a current value
            jobs = [job for job in jobs
                    if _has_value(entries_for(existing_entries, job.target_language).get(job.key))]

        total = len(jobs)
        start_time = time.time()
        mode = "export" if export_only else "import" if import_only else "override" if override else "missing_only"
        logger.info(f"Starting translation run: {len(sources)} strings x {len(languages)} languages "
                    f"= {total} jobs (mode={mode}, engine={backend.name})")

        resolved: Dict[Tuple[str, str], TranslationResult] = {}
        state = {"completed": 0, "cancelled": False}
        stop_event = threading.Event()

        def cancel_requested() -> bool:
            if not state["cancelled"] and cancel_check is not None and cancel_check():
                state["cancelled"] = True
            if state["cancelled"]:
                stop_event.set()
            return state["cancelled"]

        def record(result: TranslationResult) -> None:
            resolved[(result.key, result.target_language.code)] = result
            state["completed"] += 1
            if progress_callback is not None:
                progress = TranslationProgress(
                    completed=state["completed"],
                    total=total,
                    last_key=result.key,
                    last_language=result.target_language.code,
                    last_origin=result.origin.value,
                )
                if progress_callback(progress):
                    state["cancelled"] = True
                    stop_event.set()

        with ThreadPoolExecutor(max_workers=self.max_workers, thread_name_prefix="translate") as executor:
            in_flight = set()
            for job in jobs:
                if cancel_requested():
                    break

                local = self._resolve_locally(job, override, import_only, export_only, existing_entries, import_table)
                if local is not None:
                    record(local)
                    continue

                while len(in_flight) >= self.max_workers:
                    done, in_flight = wait(in_flight, return_when=FIRST_COMPLETED)
                    for future in done:
                        record(future.result())
                if cancel_requested():
                    break

                in_flight.add(executor.submit(self.translate_job, backend, job, stop_event))

            # In-flight calls finish their current attempt; no retries once cancelled
            while in_flight:
                done, in_flight = wait(in_flight, return_when=FIRST_COMPLETED)
                for future in done:
                    record(future.result())
                cancel_requested()

        if state["cancelled"] and state["completed"] < total:
            status = RunStatus.CANCELLED
        else:
            status = RunStatus.COMPLETED
        grouped = {
            language.code: [resolved[(resource.key, language.code)]
                            for resource in sources if (resource.key, language.code) in resolved]
            for language in languages
        }
        run_result = RunResult(
            status=status,
            languages=languages,
            results=grouped,
            total_jobs=total,
            completed_jobs=state["completed"],
        )

        counts = run_result.counts_by_origin()
        logger.info(
            "Translation run %s in %.1f seconds (%d/%d jobs, translated=%d, imported=%d, preserved=%d, failed=%d)",
            status.value,
            time.time() - start_time,
            state["completed"],
            total,
            counts[Origin.TRANSLATED.value],
            counts[Origin.IMPORTED.value],
            counts[Origin.PRESERVED_EXISTING.value],
            counts[Origin.FAILED.value],
        )
        return run_result
