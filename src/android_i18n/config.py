import copy
import json
import os
from pathlib import Path
from typing import Dict, Any

from android_i18n.logger import get_logger

logger = get_logger(__name__)

# Translation run defaults
DEFAULT_MAX_RETRIES = 3
DEFAULT_BACKOFF_SECONDS = 1.0
DEFAULT_MAX_WORKERS = 4
DEFAULT_SOURCE_LANGUAGE = "en"

# Engine configuration constants
ENGINE_DISPLAY_NAMES = {
    "google": "Google Translate",
    "microsoft": "Microsoft Translator",
    "llm": "OpenAI-compatible LLM",
}

ENGINE_DEFAULTS = {
    "max_retries": DEFAULT_MAX_RETRIES,
    "timeout": 30
}

PLACEHOLDER_API_KEY = "YOUR_API_KEY_HERE"

# Get base directory (project root)
BASE_DIR = Path(__file__).resolve().parent.parent.parent
CONFIG_DIR = BASE_DIR / "config"
CONFIG_FILE = CONFIG_DIR / "config.json"
CONFIG_ENV_VAR = "ANDROID_I18N_CONFIG"

DEFAULT_SYSTEM_MESSAGE = "You are a professional translator of mobile app UI strings. Reply with the translation only."

DEFAULT_PROMPT = """Translate the following Android app string from {source_language_name} ({source_language_code}) to {target_language_name} ({target_language_code}).

Rules:
- Keep placeholders such as __VAR_0__, __VAR_1__ exactly as they appear
- Keep the tone short and suitable for a mobile user interface
- Return only the translated text, without quotes or explanations

Text:
{text}"""

# Default configuration template
DEFAULT_CONFIG = {
    "engine": "google",
    "google": {
        "api_key": PLACEHOLDER_API_KEY,
        "api_url": "https://translation.googleapis.com/language/translate/v2",
        "max_retries": DEFAULT_MAX_RETRIES,
        "timeout": 30
    },
    "microsoft": {
        "api_key": PLACEHOLDER_API_KEY,
        "api_url": "https://api.cognitive.microsofttranslator.com/translate",
        "region": "",
        "max_retries": DEFAULT_MAX_RETRIES,
        "timeout": 30
    },
    "llm": {
        "api_key": PLACEHOLDER_API_KEY,
        "api_url": "https://api.openai.com/v1/chat/completions",
        "model": "gpt-4o-mini",
        "max_retries": DEFAULT_MAX_RETRIES,
        "timeout": 120
    },
    "translation": {
        "source_language": DEFAULT_SOURCE_LANGUAGE,
        "max_workers": DEFAULT_MAX_WORKERS,
        "backoff_seconds": DEFAULT_BACKOFF_SECONDS,
        "preserve_variables": True,
        "variable_patterns": [
            r"%(\d+\$)?[-#+0,(]*\d*(\.\d+)?[sdfxXoeEgGcb%]",
            r"\{[A-Za-z0-9_]+\}",
            r"\n",
            r"<[^>]+>"
        ]
    },
    "log_mode": "off"
}


def get_config_file() -> Path:
    """Return the active config file path (env override first)."""
    override = os.environ.get(CONFIG_ENV_VAR)
    return Path(override) if override else CONFIG_FILE


def _deep_merge(base: Dict[str, Any], overrides: Dict[str, Any]) -> Dict[str, Any]:
    merged = copy.deepcopy(base)
    for key, value in overrides.items():
        if isinstance(value, dict) and isinstance(merged.get(key), dict):
            merged[key] = _deep_merge(merged[key], value)
        else:
            merged[key] = value
    return merged


def create_default_config():
    """Create the default config.json file."""
    config_file = get_config_file()
    config_file.parent.mkdir(parents=True, exist_ok=True)
    with open(config_file, 'w', encoding='utf-8') as f:
        json.dump(DEFAULT_CONFIG, f, indent=4, ensure_ascii=False)
    logger.info(f"Created default config file: {config_file}")


def initialize_app():
    """
    Initialize the application.
    Creates the default configuration file on first run.
    """
    logger.info("Initializing application...")
    if not get_config_file().exists():
        try:
            create_default_config()
        except OSError as e:
            logger.error(f"Failed to create default config: {e}")
            logger.warning("Application will use in-memory default configuration")
    logger.info("Application initialization complete")


def load_config() -> Dict[str, Any]:
    """Load the configuration file merged over the defaults."""
    config_file = get_config_file()
    if not config_file.exists():
        return copy.deepcopy(DEFAULT_CONFIG)

    try:
        with open(config_file, 'r', encoding='utf-8') as f:
            stored = json.load(f)
    except json.JSONDecodeError as e:
        logger.error(f"Failed to parse config file {config_file}: {e}")
        logger.warning("Using default configuration")
        return copy.deepcopy(DEFAULT_CONFIG)
    except OSError as e:
        logger.error(f"Failed to read config file {config_file}: {e}")
        logger.warning("Using default configuration")
        return copy.deepcopy(DEFAULT_CONFIG)

    if not isinstance(stored, dict):
        logger.warning("Config file does not contain an object, using default configuration")
        return copy.deepcopy(DEFAULT_CONFIG)

    logger.debug("Configuration loaded from file")
    return _deep_merge(DEFAULT_CONFIG, stored)


def save_config(config: Dict[str, Any]):
    """Save the configuration to the config file."""
    config_file = get_config_file()
    try:
        config_file.parent.mkdir(parents=True, exist_ok=True)
        with open(config_file, 'w', encoding='utf-8') as f:
            json.dump(config, f, indent=4, ensure_ascii=False)
        logger.info("Configuration saved")
    except OSError as e:
        logger.error(f"Failed to save config: {e}")
        raise

    from android_i18n.logger import refresh_log_mode
    refresh_log_mode()


def get_translation_settings(config: Dict[str, Any] = None) -> Dict[str, Any]:
    """Translation section of the config with defaults filled in."""
    config = config if config is not None else load_config()
    return _deep_merge(DEFAULT_CONFIG["translation"], config.get("translation", {}))
