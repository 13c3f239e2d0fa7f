"""
Logging setup for the JobFit API.

One console handler and one rotating file handler on the root logger.
Secrets never reach the log: configuration dumps go through ``sanitize_log_data``.
"""
import logging
import sys
from logging.handlers import RotatingFileHandler
from pathlib import Path
from typing import Any, Dict, Iterable

LOG_FILE_NAME = "jobfit.log"
LOG_FILE_MAX_BYTES = 10 * 1024 * 1024
LOG_FILE_BACKUPS = 5
REDACTED = "***REDACTED***"

SENSITIVE_KEY_PARTS = (
    "password", "token", "secret", "key", "cookie", "session", "database_url",
)

# Chatty at INFO: every request line, every outbound AI call
QUIET_LOGGERS = ("uvicorn", "uvicorn.access", "httpx", "httpcore", "openai", "multipart")


def setup_logging(log_level: str = "INFO", log_dir: str = "logs"):
    """
    Configure the root logger.
    
    Safe to call more than once: existing root handlers are replaced.
    
    Args:
        log_level: DEBUG, INFO, WARNING, ERROR or CRITICAL
        log_dir: Directory for ``jobfit.log`` (created if missing)
    """
    level = getattr(logging, log_level.upper(), logging.INFO)
    
    root = logging.getLogger()
    root.setLevel(level)
    for handler in list(root.handlers):
        root.removeHandler(handler)
        handler.close()
    
    console = logging.StreamHandler(sys.stdout)
    console.setLevel(level)
    console.setFormatter(logging.Formatter(
        "%(asctime)s - %(name)s - %(levelname)s - %(message)s",
        datefmt="%Y-%m-%d %H:%M:%S",
    ))
    root.addHandler(console)
    
    log_path = Path(log_dir)
    log_path.mkdir(parents=True, exist_ok=True)
    file_handler = RotatingFileHandler(
        log_path / LOG_FILE_NAME,
        maxBytes=LOG_FILE_MAX_BYTES,
        backupCount=LOG_FILE_BACKUPS,
        encoding="utf-8",
    )
    file_handler.setLevel(level)
    file_handler.setFormatter(logging.Formatter(
        "%(asctime)s - %(name)s - %(levelname)s - %(funcName)s:%(lineno)d - %(message)s",
        datefmt="%Y-%m-%d %H:%M:%S",
    ))
    root.addHandler(file_handler)
    
    for name in QUIET_LOGGERS:
        logging.getLogger(name).setLevel(logging.WARNING)


def _is_sensitive(key: str, parts: Iterable[str]) -> bool:
    lowered = key.lower()
    return any(part in lowered for part in parts)


def sanitize_log_data(data: Dict[str, Any], sensitive_parts: Iterable[str] = SENSITIVE_KEY_PARTS) -> Dict[str, Any]:
    """
    Copy of ``data`` with secret-looking values redacted, nested dicts included.
    
    Empty values stay as they are so a missing API key is still visible.
    """
    sensitive_parts = tuple(sensitive_parts)
    sanitized = {}
    for key, value in data.items():
        if isinstance(value, dict):
            sanitized[key] = sanitize_log_data(value, sensitive_parts)
        elif value and _is_sensitive(str(key), sensitive_parts):
            sanitized[key] = REDACTED
        else:
            sanitized[key] = value
    return sanitized
