"""
Translation Progress Data Class

Contains the TranslationProgress dataclass for tracking translation progress.
"""

from dataclasses import dataclass, asdict
from typing import Any, Dict, Optional


@dataclass
class TranslationProgress:
    """Progress information emitted after each resolved job."""
    completed: int
    total: int
    last_key: str
    last_language: str
    last_origin: Optional[str] = None
    phase: str = "translating"       # "translating", "saving", "exporting", "done"

    @property
    def percent(self) -> float:
        if not self.total:
            return 100.0
        return round(self.completed * 100.0 / self.total, 1)

    def to_dict(self) -> Dict[str, Any]:
        payload = asdict(self)
        payload["percent"] = self.percent
        return payload
