"""
Backends Module

Translation engines behind the TranslationBackend capability, and the
factory that builds the configured one.
"""

from typing import Dict, Optional, Type

import httpx

from android_i18n.backends.base import TranslationBackend
from android_i18n.backends.google import GoogleTranslateBackend
from android_i18n.backends.llm import LlmBackend
from android_i18n.backends.microsoft import MicrosoftTranslatorBackend
from android_i18n.config import ENGINE_DEFAULTS, load_config
from android_i18n.exceptions import BackendConfigError
from android_i18n.logger import get_logger

logger = get_logger(__name__)

BACKENDS: Dict[str, Type[TranslationBackend]] = {
    GoogleTranslateBackend.name: GoogleTranslateBackend,
    MicrosoftTranslatorBackend.name: MicrosoftTranslatorBackend,
    LlmBackend.name: LlmBackend,
}


def create_backend(
    engine: Optional[str] = None,
    config: Optional[dict] = None,
    transport: Optional[httpx.BaseTransport] = None,
) -> TranslationBackend:
    """
    Build the backend for `engine` (or the configured default) with its
    settings from config.

    Raises:
        BackendConfigError: unknown engine or missing credentials
    """
    config = config if config is not None else load_config()
    engine = engine or config.get("engine", "google")

    backend_cls = BACKENDS.get(engine)
    if backend_cls is None:
        raise BackendConfigError(
            f"Unknown translation engine '{engine}'",
            details={"engine": engine, "available": sorted(BACKENDS)},
        )

    settings = {**ENGINE_DEFAULTS, **config.get(engine, {})}
    backend = backend_cls(settings, transport=transport)
    logger.info(f"Initialized translation backend: {backend.display_name}")
    return backend


__all__ = [
    "BACKENDS",
    "TranslationBackend",
    "GoogleTranslateBackend",
    "MicrosoftTranslatorBackend",
    "LlmBackend",
    "create_backend",
]
