"""
Translation module - Core translation functionality

This module provides:
- TranslationOrchestrator: resolves (string, language) jobs for one run
- TranslationProgress: Progress tracking dataclass
- Value objects: StringResource, TranslationJob, TranslationResult, RunResult
- Processing utilities for placeholder protection

The end-to-end workflow lives in android_i18n.translation.manager.
"""

from android_i18n.translation.models import (
    Origin,
    RunResult,
    RunStatus,
    StringResource,
    TranslationJob,
    TranslationResult,
)
from android_i18n.translation.progress import TranslationProgress
from android_i18n.translation.orchestrator import TranslationOrchestrator
from android_i18n.translation.processor import (
    replace_variables_with_placeholders,
    restore_variables_from_placeholders,
)
