"""
Exceptions

All errors raised by android-i18n derive from TranslationError, which carries
an optional machine-readable code and a details dict for API responses.
Kept in one module to avoid circular imports between backends, resources and
the translation engine.
"""

from typing import Optional


class TranslationError(Exception):
    """Translation error with optional code and details."""

    default_code = "translation_error"

    def __init__(self, message: str, code: str = None, details: dict = None):
        super().__init__(message)
        self.code = code or self.default_code
        self.details = details or {}


class UnsupportedLanguagePair(TranslationError):
    """The active backend cannot translate between the two languages."""

    default_code = "unsupported_language_pair"


class RateLimited(TranslationError):
    """The backend rejected the call because of rate limiting."""

    default_code = "rate_limited"

    def __init__(self, message: str, retry_after: Optional[float] = None, **kwargs):
        super().__init__(message, **kwargs)
        self.retry_after = retry_after


class NetworkError(TranslationError):
    """Transport failure, timeout or server-side error."""

    default_code = "network_error"


class BackendConfigError(TranslationError):
    """Backend cannot be built or was rejected for its credentials."""

    default_code = "backend_config_error"


class MissingImportValue(TranslationError):
    """Import mode found no value for a key/language pair."""

    default_code = "missing_import_value"


class PersistenceFailure(TranslationError):
    """Writing a resource file or spreadsheet failed."""

    default_code = "persistence_failure"


class RunError(TranslationError):
    """A run cannot start (no source strings or no languages)."""

    default_code = "run_error"


class ResourceParseError(TranslationError):
    """A strings.xml payload could not be parsed."""

    default_code = "resource_parse_error"


class SpreadsheetError(TranslationError):
    """A spreadsheet could not be read."""

    default_code = "spreadsheet_error"


# Errors worth another attempt after a backoff
RETRYABLE_ERRORS = (RateLimited, NetworkError)
