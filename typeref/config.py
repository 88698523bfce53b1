"""
Environment configuration and logging setup for typeref.
"""

import os
import logging
import logging.handlers
from pathlib import Path

LOG_FORMAT = '%(asctime)s %(levelname)s [%(name)s] %(message)s'
DEFAULT_LOG_MAX_BYTES = 1024 * 1024
DEFAULT_LOG_BACKUPS = 3


def setup_logging(log_level: str = None, log_file: str = None,
                  max_bytes: int = None, backup_count: int = None):
    """Configure the root logger for a typeref run.

    Messages go to stderr, and also to a rotating log file when log_file is
    given. Settings not passed in come from get_config().

    Args:
        log_level: Logging level name (DEBUG, INFO, WARNING, ERROR, CRITICAL)
        log_file: Path of the log file (optional)
        max_bytes: Size at which the log file rotates
        backup_count: Number of rotated files kept
    """
    env = get_config()
    level = (log_level or env['LOG_LEVEL']).upper()
    numeric_level = getattr(logging, level, logging.WARNING)

    root_logger = logging.getLogger()
    root_logger.setLevel(numeric_level)
    for handler in root_logger.handlers[:]:
        root_logger.removeHandler(handler)

    handlers = [logging.StreamHandler()]
    if log_file:
        Path(log_file).parent.mkdir(parents=True, exist_ok=True)
        handlers.append(logging.handlers.RotatingFileHandler(
            log_file,
            maxBytes=max_bytes if max_bytes is not None else env['LOG_MAX_BYTES'],
            backupCount=backup_count if backup_count is not None else env['LOG_BACKUPS'],
            encoding='utf-8'
        ))

    formatter = logging.Formatter(LOG_FORMAT)
    for handler in handlers:
        handler.setLevel(numeric_level)
        handler.setFormatter(formatter)
        root_logger.addHandler(handler)

    logging.getLogger('typeref').debug(f"Logging at {level}" + (f" to {log_file}" if log_file else ""))


def _int_env(name: str, default: int) -> int:
    value = os.environ.get(name, '')
    return int(value) if value.isdigit() else default


def get_config():
    """Get application configuration from environment variables."""
    roots = os.environ.get('TYPEREF_SOURCE_ROOTS', '')
    return {
        'LOG_LEVEL': os.environ.get('TYPEREF_LOG_LEVEL', 'WARNING'),
        'LOG_FILE': os.environ.get('TYPEREF_LOG_FILE') or None,
        'LOG_MAX_BYTES': _int_env('TYPEREF_LOG_MAX_BYTES', DEFAULT_LOG_MAX_BYTES),
        'LOG_BACKUPS': _int_env('TYPEREF_LOG_BACKUPS', DEFAULT_LOG_BACKUPS),
        'SOURCE_ROOTS': [root for root in roots.split(os.pathsep) if root],
    }
