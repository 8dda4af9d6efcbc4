"""Abstract base class for translation backends."""

from abc import ABC, abstractmethod
from typing import Any, Dict, Optional, Set

import httpx

from android_i18n import language_codes as lc
from android_i18n.config import PLACEHOLDER_API_KEY
from android_i18n.exceptions import BackendConfigError, UnsupportedLanguagePair
from android_i18n.language_codes import Language


class TranslationBackend(ABC):
    """
    Translation capability.

    A backend translates one text between two catalog languages. It declares
    which languages it serves through supported_languages(); a language
    without a code for this engine is unsupported.

    Subclasses set `name` (the engine key in config and in each Language's
    backend_codes) and implement _translate().
    """

    name: str = ""
    display_name: str = ""
    # Settings that must be present and not placeholders
    required_settings = ("api_key",)

    def __init__(self, settings: Optional[Dict[str, Any]] = None,
                 transport: Optional[httpx.BaseTransport] = None):
        self.settings = settings or {}
        self.transport = transport
        self._check_settings()

    def _check_settings(self) -> None:
        for setting in self.required_settings:
            value = self.settings.get(setting)
            if not value or value == PLACEHOLDER_API_KEY:
                raise BackendConfigError(
                    f"{self.display_name or self.name} {setting} not configured",
                    details={"engine": self.name, "missing_field": setting},
                )

    @property
    def timeout(self) -> Any:
        return self.settings.get("timeout", 30)

    def supported_languages(self) -> Set[Language]:
        return set(lc.languages_for_engine(self.name))

    def supports(self, language: Language) -> bool:
        return bool(language.code_for(self.name))

    def code_for(self, language: Language) -> str:
        if not self.supports(language):
            raise UnsupportedLanguagePair(
                f"{self.display_name or self.name} does not support {language.display_name} ({language.code})",
                details={"engine": self.name, "language": language.code},
            )
        return language.code_for(self.name)

    def translate(self, text: str, source: Language, target: Language) -> str:
        """
        Translate text from source to target.

        Raises:
            UnsupportedLanguagePair: either language is not served
            RateLimited: the engine throttled the call
            NetworkError: transport failure, timeout or server error
        """
        source_code = self.code_for(source)
        target_code = self.code_for(target)
        if not text.strip() or source_code == target_code:
            return text
        return self._translate(text, source, target)

    @abstractmethod
    def _translate(self, text: str, source: Language, target: Language) -> str:
        ...

    def __repr__(self) -> str:
        return f"{type(self).__name__}(name={self.name!r})"
