"""
Asynchronous task helpers for long-running background jobs (translation runs).
"""

from __future__ import annotations

import threading
import time
import uuid
from dataclasses import dataclass, field, asdict
from typing import Any, Dict, List, Optional

from android_i18n.backends import TranslationBackend, create_backend
from android_i18n.logger import get_logger
from android_i18n.translation.manager import TranslationManager
from android_i18n.translation.progress import TranslationProgress

logger = get_logger(__name__)


@dataclass
class JobState:
    """In-memory representation of an asynchronous job."""

    job_id: str
    res_dir: str
    source_file: Optional[str] = None
    engine: Optional[str] = None
    languages: List[str] = field(default_factory=list)
    override: bool = False
    import_only: bool = False
    export_only: bool = False
    import_file: Optional[str] = None
    export_file: Optional[str] = None
    cancel_requested: bool = False
    state: str = "pending"  # pending|running|completed|failed|cancelled
    created_at: float = field(default_factory=time.time)
    started_at: Optional[float] = None
    finished_at: Optional[float] = None
    progress: Dict[str, Any] = field(default_factory=dict)
    result: Optional[Dict[str, Any]] = None
    error: Optional[str] = None
    last_update: float = field(default_factory=time.time)

    @property
    def finished(self) -> bool:
        return self.state in ("completed", "failed", "cancelled")

    def request_cancel(self):
        """Mark this job as requested for cancellation."""
        self.cancel_requested = True
        self.last_update = time.time()

    def to_dict(self) -> Dict[str, Any]:
        return asdict(self)


_jobs: Dict[str, JobState] = {}
_jobs_lock = threading.Lock()
_JOB_RETENTION_SECONDS = 600  # Retain job info for 10 minutes after completion


def create_translation_job(
    res_dir: str,
    languages: List[str],
    source_file: Optional[str] = None,
    engine: Optional[str] = None,
    override: bool = False,
    import_only: bool = False,
    export_only: bool = False,
    import_file: Optional[str] = None,
    export_file: Optional[str] = None,
    backend: Optional[TranslationBackend] = None,
) -> JobState:
    """
    Create and launch an asynchronous translation run for a res/ directory.

    Args:
        res_dir: The res/ directory to translate.
        languages: Android language qualifiers to translate into.
        source_file: Optional strings.xml to translate from.
        engine: Backend name; None uses the configured default.
        override: Replace existing translations.
        import_only: Take values from import_file instead of the backend.
        export_only: Write current values to export_file instead of files.
        backend: Already-built backend (otherwise built from config in the worker).

    Returns:
        JobState for the new job (already registered and running in background).
    """
    job_id = uuid.uuid4().hex
    job_state = JobState(
        job_id=job_id,
        res_dir=str(res_dir),
        source_file=str(source_file) if source_file else None,
        engine=backend.name if backend is not None else engine,
        languages=list(languages),
        override=override,
        import_only=import_only,
        export_only=export_only,
        import_file=import_file,
        export_file=export_file,
    )

    with _jobs_lock:
        _cleanup_jobs_locked()
        _jobs[job_id] = job_state

    thread = threading.Thread(
        target=_run_translation_job,
        args=(job_state, backend),
        name=f"translation-job-{job_id}",
        daemon=True,
    )
    thread.start()
    logger.info(
        "Translation job %s started for %s (languages=%s, engine=%s, override=%s, import=%s, export=%s)",
        job_id,
        job_state.res_dir,
        job_state.languages,
        job_state.engine or "default",
        override,
        import_only,
        export_only,
    )
    return job_state


def get_job(job_id: str) -> Optional[JobState]:
    """Fetch a job by ID (if still retained)."""
    with _jobs_lock:
        job = _jobs.get(job_id)
        if job and job.finished_at and (time.time() - job.finished_at) > _JOB_RETENTION_SECONDS:
            # Expired; remove
            _jobs.pop(job_id, None)
            return None
        return job


def cancel_job(job_id: str) -> bool:
    """
    Request cancellation of a running job.

    Args:
        job_id: The job ID to cancel.

    Returns:
        True if job was found and cancellation requested, False otherwise.
    """
    with _jobs_lock:
        job = _jobs.get(job_id)
        if not job:
            return False
        if job.finished:
            return False
        job.request_cancel()
        logger.info("Cancellation requested for job %s", job_id)
        return True


def serialize_job(job: JobState) -> Dict[str, Any]:
    """Convert JobState into JSON-safe dict."""
    with _jobs_lock:
        return job.to_dict()


def _run_translation_job(job: JobState, backend: Optional[TranslationBackend] = None):
    """Worker function executed in a background thread."""
    with _jobs_lock:
        job.state = "running"
        job.started_at = time.time()
        job.last_update = job.started_at
    try:
        backend = backend or create_backend(job.engine)
        manager = TranslationManager(job.res_dir, backend, source_file=job.source_file)

        def on_progress(progress: TranslationProgress):
            with _jobs_lock:
                job.progress = progress.to_dict()
                job.last_update = time.time()
                # Check for cancellation request
                if job.cancel_requested:
                    return True  # Signal to stop
            return False

        def check_cancel():
            """Check if job cancellation was requested."""
            with _jobs_lock:
                return job.cancel_requested

        result = manager.translate(
            job.languages,
            override=job.override,
            import_only=job.import_only,
            export_only=job.export_only,
            import_source=job.import_file,
            export_path=job.export_file,
            progress_callback=on_progress,
            cancel_check=check_cancel,
        )

        with _jobs_lock:
            job.result = result
            if result.get("status") == "cancelled":
                job.state = "cancelled"
            else:
                job.state = "completed" if result.get("success", True) else "failed"
            job.finished_at = time.time()
            job.last_update = job.finished_at
        logger.info(
            "Translation job %s finished (state=%s, counts=%s, written=%s)",
            job.job_id,
            job.state,
            result.get("counts"),
            sorted(result.get("written_files", {})),
        )
    except Exception as exc:
        error_type = type(exc).__name__
        error_message = str(exc)
        with _jobs_lock:
            job.state = "failed"
            job.error = f"{error_type}: {error_message}"
            job.finished_at = time.time()
            job.last_update = job.finished_at
        logger.exception(
            "✗ Translation job %s failed for %s: %s: %s",
            job.job_id,
            job.res_dir,
            error_type,
            error_message,
        )


def _cleanup_jobs_locked():
    """Remove completed jobs that exceeded retention period (call with lock held)."""
    now = time.time()
    expired = [
        job_id
        for job_id, job in _jobs.items()
        if job.finished_at and (now - job.finished_at) > _JOB_RETENTION_SECONDS
    ]
    for job_id in expired:
        _jobs.pop(job_id, None)
