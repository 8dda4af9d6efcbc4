"""
HTTP helpers shared by the backend implementations.

Every backend talks to its engine through httpx; this module turns httpx
timeouts, transport failures and HTTP status codes into the backend error
taxonomy so the orchestrator can decide what to retry.
"""

from typing import Any, Dict, Optional
import httpx

from android_i18n.logger import get_logger
from android_i18n.exceptions import (
    BackendConfigError,
    NetworkError,
    RateLimited,
    TranslationError,
    UnsupportedLanguagePair,
)

logger = get_logger(__name__)

# Substrings engines use in 400 responses when a language is not served
_UNSUPPORTED_LANGUAGE_HINTS = (
    "language pair",
    "target language",
    "source language",
    "invalid value",
    "not supported",
    "unsupported",
)


def get_httpx_timeout(timeout_config: Any) -> httpx.Timeout:
    """
    Convert timeout configuration to httpx.Timeout object.

    Args:
        timeout_config: Either a number (read timeout) or a dict with
            connect, write, read, pool keys

    Returns:
        httpx.Timeout object
    """
    if isinstance(timeout_config, dict):
        return httpx.Timeout(
            connect=timeout_config.get('connect', 10.0),
            write=timeout_config.get('write', 30.0),
            read=timeout_config.get('read', 30.0),
            pool=timeout_config.get('pool', 10.0),
        )
    timeout_value = float(timeout_config) if timeout_config else 30.0
    return httpx.Timeout(
        connect=10.0,
        write=30.0,
        read=timeout_value,
        pool=10.0,
    )


def _error_text(response: httpx.Response) -> str:
    try:
        error_json = response.json()
    except ValueError:
        return response.text[:500]

    if isinstance(error_json, dict) and "error" in error_json:
        error_detail = error_json["error"]
        if isinstance(error_detail, dict):
            return str(error_detail.get("message", error_detail))
        return str(error_detail)
    return str(error_json)[:500]


def _retry_after(response: httpx.Response) -> Optional[float]:
    value = response.headers.get("Retry-After")
    if not value:
        return None
    try:
        return max(float(value), 0.0)
    except ValueError:
        return None


def raise_for_backend_status(response: httpx.Response, provider: str) -> None:
    """Raise the backend error matching an unsuccessful HTTP response."""
    if response.is_success:
        return

    status_code = response.status_code
    error_text = _error_text(response)
    message = f"{provider} API error ({status_code}): {error_text}"
    details = {"provider": provider, "status_code": status_code}

    if status_code == 429:
        raise RateLimited(message, retry_after=_retry_after(response), details=details)
    if status_code >= 500:
        raise NetworkError(message, details=details)
    if status_code in (401, 403):
        raise BackendConfigError(message, details=details)
    if status_code == 400 and any(hint in error_text.lower() for hint in _UNSUPPORTED_LANGUAGE_HINTS):
        raise UnsupportedLanguagePair(message, details=details)
    raise TranslationError(message, code="backend_rejected", details=details)


def post_json(
    provider: str,
    url: str,
    *,
    timeout: Any = None,
    transport: Optional[httpx.BaseTransport] = None,
    params: Optional[Dict[str, Any]] = None,
    headers: Optional[Dict[str, str]] = None,
    body: Any = None,
) -> Any:
    """POST a JSON body and return the decoded JSON response."""
    try:
        with httpx.Client(timeout=get_httpx_timeout(timeout), transport=transport) as client:
            response = client.post(url, params=params, headers=headers, json=body)
    except httpx.TimeoutException as e:
        raise NetworkError(f"{provider} API request timeout", details={"provider": provider}) from e
    except httpx.HTTPError as e:
        raise NetworkError(f"{provider} API call failed: {e}", details={"provider": provider}) from e

    raise_for_backend_status(response, provider)

    try:
        return response.json()
    except ValueError as e:
        logger.error(f"{provider} returned a non-JSON body: {response.text[:200]}")
        raise NetworkError(f"{provider} returned malformed JSON", details={"provider": provider}) from e
