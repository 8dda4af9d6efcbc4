"""
Translation Data Classes

Value objects shared by the orchestrator, the resource store and the
spreadsheet adapter.
"""

from dataclasses import dataclass, field
from enum import Enum
from typing import Dict, List, Optional

from android_i18n.language_codes import Language


@dataclass(frozen=True)
class StringResource:
    """One translatable key of the source file."""
    key: str
    source_value: str


@dataclass(frozen=True)
class TranslationJob:
    """One (key, target language) unit of work."""
    key: str
    target_language: Language
    source_value: str


class Origin(str, Enum):
    """How the value of a result was obtained."""
    TRANSLATED = "translated"
    IMPORTED = "imported"
    PRESERVED_EXISTING = "preserved_existing"
    FAILED = "failed"


class RunStatus(str, Enum):
    COMPLETED = "completed"
    CANCELLED = "cancelled"


@dataclass
class TranslationResult:
    """Resolution of a single job."""
    key: str
    target_language: Language
    value: str
    origin: Origin
    error: Optional[str] = None
    attempts: int = 0

    @property
    def failed(self) -> bool:
        return self.origin is Origin.FAILED

    def to_dict(self) -> Dict[str, object]:
        return {
            "key": self.key,
            "language_code": self.target_language.code,
            "language_name": self.target_language.display_name,
            "value": self.value,
            "origin": self.origin.value,
            "error": self.error,
            "attempts": self.attempts,
        }


@dataclass
class RunResult:
    """Per-language results of one orchestrator run."""
    status: RunStatus
    languages: List[Language] = field(default_factory=list)
    results: Dict[str, List[TranslationResult]] = field(default_factory=dict)
    total_jobs: int = 0
    completed_jobs: int = 0

    @property
    def cancelled(self) -> bool:
        return self.status is RunStatus.CANCELLED

    def results_for(self, language: Language) -> List[TranslationResult]:
        return self.results.get(language.code, [])

    def all_results(self) -> List[TranslationResult]:
        return [result for language in self.languages for result in self.results_for(language)]

    def failed(self) -> List[TranslationResult]:
        return [result for result in self.all_results() if result.failed]

    def counts_by_origin(self) -> Dict[str, int]:
        counts = {origin.value: 0 for origin in Origin}
        for result in self.all_results():
            counts[result.origin.value] += 1
        return counts
