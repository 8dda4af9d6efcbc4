
import logging
from pathlib import Path

LOG_DIR = Path(__file__).resolve().parent.parent.parent / "logs"
LOG_FILE = LOG_DIR / "app.log"

LOG_FORMAT = '%(asctime)s - %(name)s - %(levelname)s - %(message)s'

# Cache for log mode to avoid repeated config reads
_log_mode_cache = None


def _get_log_mode():
    """Get log mode from configuration."""
    global _log_mode_cache
    if _log_mode_cache is not None:
        return _log_mode_cache

    try:
        from android_i18n.config import load_config
        log_mode = load_config().get('log_mode', 'off')
    except Exception:
        # Config unreadable while bootstrapping: stay quiet
        return 'off'
    _log_mode_cache = log_mode
    return log_mode


def _level_for(log_mode: str) -> int:
    if log_mode == 'debug':
        return logging.DEBUG
    if log_mode == 'off':
        return logging.CRITICAL + 1
    return logging.INFO


def _file_handler() -> logging.FileHandler:
    LOG_DIR.mkdir(exist_ok=True)
    f_handler = logging.FileHandler(LOG_FILE, encoding='utf-8')
    f_handler.setLevel(logging.DEBUG)
    f_handler.setFormatter(logging.Formatter(LOG_FORMAT))
    return f_handler


def _apply_mode(logger: logging.Logger, log_mode: str) -> None:
    """Bring an already configured logger in line with log_mode."""
    level = _level_for(log_mode)
    logger.setLevel(level)

    has_file_handler = any(isinstance(h, logging.FileHandler) for h in logger.handlers)
    if log_mode != 'off' and not has_file_handler:
        logger.addHandler(_file_handler())
    elif log_mode == 'off' and has_file_handler:
        for handler in [h for h in logger.handlers if isinstance(h, logging.FileHandler)]:
            handler.close()
            logger.removeHandler(handler)

    for handler in logger.handlers:
        if isinstance(handler, logging.StreamHandler) and not isinstance(handler, logging.FileHandler):
            handler.setLevel(level)


def refresh_log_mode():
    """Clear the log mode cache and update every logger created by get_logger."""
    global _log_mode_cache
    _log_mode_cache = None

    log_mode = _get_log_mode()
    for logger_name in list(logging.Logger.manager.loggerDict.keys()):
        if not logger_name.startswith('android_i18n'):
            continue
        logger = logging.getLogger(logger_name)
        if logger.handlers:
            _apply_mode(logger, log_mode)


def get_logger(name: str) -> logging.Logger:
    logger = logging.getLogger(name)
    log_mode = _get_log_mode()

    # Prevent duplicate handlers if logger already configured
    if logger.handlers:
        _apply_mode(logger, log_mode)
        return logger

    logger.setLevel(_level_for(log_mode))

    if log_mode != 'off':
        logger.addHandler(_file_handler())

        c_handler = logging.StreamHandler()
        c_handler.setLevel(_level_for(log_mode))
        c_handler.setFormatter(logging.Formatter(LOG_FORMAT))
        logger.addHandler(c_handler)

    return logger
