"""Translation run API routes."""

from __future__ import annotations

from pathlib import Path
from typing import Any, Dict, List, Optional, Tuple

from flask import Blueprint, jsonify, request

import android_i18n.language_codes as lc
from android_i18n.backends import BACKENDS, create_backend
from android_i18n.config import ENGINE_DISPLAY_NAMES, load_config
from android_i18n.logger import get_logger
from android_i18n.resources import layout
from android_i18n.resources.store import ResourceStore
from android_i18n.web.tasks import cancel_job, create_translation_job, get_job, serialize_job

translation_bp = Blueprint("translation", __name__)
logger = get_logger(__name__)


def _error(message: str, status: int = 400, code: Optional[str] = None):
    payload: Dict[str, Any] = {"error": message}
    if code:
        payload["code"] = code
    return jsonify(payload), status


def _resolve_target(target: str) -> Tuple[Optional[Path], Optional[Path]]:
    """
    Accept either a res/ directory or a strings.xml that can seed a run.

    Returns (res_dir, source_file); both None when the target is unusable.
    """
    path = Path(target).expanduser()
    if path.is_file():
        if not layout.is_string_xml(path):
            return None, None
        return layout.res_dir_for(path), path
    if path.is_dir() and layout.source_file(path).is_file():
        return path, layout.source_file(path)
    return None, None


def _flag(data: Dict[str, Any], name: str) -> bool:
    value = data.get(name, False)
    if isinstance(value, str):
        return value.strip().lower() in ("true", "1", "yes")
    return bool(value)


@translation_bp.get("/languages")
def list_languages():
    """List the languages an engine can translate into, flagging those a res/ directory already has."""
    engine = request.args.get("engine") or load_config().get("engine", "google")
    if engine not in BACKENDS:
        return _error(f"Unknown translation engine '{engine}'", code="unknown_engine")

    existing = set()
    target = request.args.get("res_dir")
    if target:
        res_dir, _ = _resolve_target(target)
        if res_dir is None:
            return _error(f"No values/strings.xml found for {target}", status=404, code="resource_not_found")
        existing = set(ResourceStore(res_dir).existing_languages())

    languages = [
        {
            "code": language.code,
            "name": language.display_name,
            "engine_code": language.code_for(engine),
            "has_strings": language in existing,
        }
        for language in lc.languages_for_engine(engine)
    ]
    return jsonify({
        "engine": engine,
        "engine_name": ENGINE_DISPLAY_NAMES.get(engine, engine),
        "languages": languages,
    })


@translation_bp.post("/translate")
def start_translation_job():
    """Start an asynchronous translation run."""
    data: Dict[str, Any] = request.get_json(silent=True) or {}

    target = data.get("res_dir")
    if not target or not isinstance(target, str):
        return _error("res_dir is required", code="invalid_request")
    res_dir, source_file = _resolve_target(target)
    if res_dir is None:
        logger.warning("No translatable strings.xml found for %s", target)
        return _error(f"No values/strings.xml found for {target}", status=404, code="resource_not_found")

    override = _flag(data, "override")
    import_only = _flag(data, "import_only")
    export_only = _flag(data, "export_only")
    import_file = data.get("import_file")
    export_file = data.get("export_file")

    if import_only and not export_only and not import_file:
        return _error("import_file is required for import mode", code="invalid_request")
    if export_only and not export_file:
        return _error("export_file is required for export mode", code="invalid_request")

    # Config errors surface here instead of inside the job
    backend = create_backend(data.get("engine") or None)

    languages = data.get("languages")
    if languages is None:
        codes: List[str] = [language.code for language in lc.languages_for_engine(backend.name)]
    else:
        if not isinstance(languages, list) or not all(
            isinstance(code, str) and code.strip() for code in languages
        ):
            return _error("languages must be a list of language codes", code="invalid_languages")
        unknown = [code for code in languages if lc.get_language(code.strip()) is None]
        if unknown:
            return _error(f"Unknown languages: {', '.join(unknown)}", code="invalid_languages")
        codes = [language.code for language in lc.resolve_languages(code.strip() for code in languages)]
    if not codes:
        return _error("No target languages selected", code="invalid_languages")

    job = create_translation_job(
        str(res_dir),
        codes,
        source_file=str(source_file),
        override=override,
        import_only=import_only,
        export_only=export_only,
        import_file=import_file,
        export_file=export_file,
        backend=backend,
    )
    return jsonify({"job_id": job.job_id, "job": serialize_job(job)}), 202


@translation_bp.get("/jobs/<job_id>")
def get_translation_job(job_id: str):
    """Return status, latest progress and result of a run."""
    job = get_job(job_id)
    if not job:
        return _error("Job not found or expired", status=404, code="job_not_found")
    return jsonify(serialize_job(job))


@translation_bp.post("/jobs/<job_id>/cancel")
def cancel_translation_job(job_id: str):
    """Cancel a running translation job."""
    job = get_job(job_id)
    if not job:
        return _error("Job not found or expired", status=404, code="job_not_found")

    if cancel_job(job_id):
        return jsonify({"status": "cancellation_requested", "job_id": job_id})
    return _error("Job has already finished", code="job_finished")
