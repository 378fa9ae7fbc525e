"""
Logging configuration for ignore-filter.

Provides environment-aware logging that:
- Uses stderr exclusively so filtered paths on stdout stay clean
- Outputs JSON in container environments or when asked to
- Supports an optional rotating log file
- Includes custom TRACE level for per-directory resolution details
"""

import sys
import logging
import json
import os
from datetime import datetime, timezone
from pathlib import Path
from logging.handlers import RotatingFileHandler
from typing import Optional, Any

# Define TRACE level (lower number = more detailed)
TRACE_LEVEL = 5
logging.addLevelName(TRACE_LEVEL, "TRACE")


def trace(self, message, *args, **kwargs):
    if self.isEnabledFor(TRACE_LEVEL):
        self._log(TRACE_LEVEL, message, args, **kwargs)


logging.Logger.trace = trace


def add_trace_to_logger():
    """Ensure trace method is available on all logger instances"""
    if not hasattr(logging.Logger, 'trace'):
        logging.Logger.trace = trace


def _env_flag(name: str) -> bool:
    return os.environ.get(name, '').lower() in ('true', '1', 'yes')


class JsonFormatter(logging.Formatter):
    """JSON formatter for container and pipeline logs"""

    def format(self, record: logging.LogRecord) -> str:
        log_data = {
            'timestamp': datetime.now(timezone.utc).isoformat().replace('+00:00', 'Z'),
            'level': record.levelname,
            'component': record.name,
            'message': record.getMessage(),
            'pid': os.getpid(),
        }

        if hasattr(record, 'extra'):
            log_data.update(record.extra)

        if record.exc_info:
            log_data['exception'] = self.formatException(record.exc_info)

        return json.dumps(log_data)


def resolve_level(log_level: Optional[str] = None) -> int:
    """
    Turn a level name into a numeric level.

    Args:
        log_level: Level name; falls back to IGNORE_FILTER_LOG_LEVEL, then
            LOG_LEVEL, then WARNING

    Returns:
        Numeric logging level (TRACE is understood)
    """
    level_str = (
        log_level
        or os.environ.get('IGNORE_FILTER_LOG_LEVEL')
        or os.environ.get('LOG_LEVEL', 'WARNING')
    )
    if level_str.upper() == 'TRACE':
        return TRACE_LEVEL
    return getattr(logging, level_str.upper(), logging.WARNING)


def configure_logging(
    log_level: Optional[str] = None,
    log_file: Optional[str] = None,
    json_output: Optional[bool] = None,
    max_bytes: int = 10 * 1024 * 1024,  # 10MB
    backup_count: int = 5,
) -> None:
    """
    Configure logging based on environment.

    Args:
        log_level: Override log level (defaults to IGNORE_FILTER_LOG_LEVEL env var or WARNING)
        log_file: Optional path of a rotating log file, in addition to stderr
        json_output: Force JSON output on or off (defaults to on inside containers
            or when IGNORE_FILTER_LOG_JSON is set)
        max_bytes: Maximum size of log file before rotation
        backup_count: Number of backup files to keep
    """
    add_trace_to_logger()
    level = resolve_level(log_level)

    root_logger = logging.getLogger()
    root_logger.handlers = []

    in_docker = os.path.exists('/.dockerenv') or _env_flag('DOCKER_CONTAINER')
    if json_output is None:
        json_output = in_docker or _env_flag('IGNORE_FILTER_LOG_JSON')

    handler = logging.StreamHandler(sys.stderr)
    if json_output:
        handler.setFormatter(JsonFormatter())
    else:
        handler.setFormatter(logging.Formatter('%(levelname)s: %(name)s: %(message)s'))
    root_logger.addHandler(handler)

    if log_file:
        log_path = Path(log_file)
        log_path.parent.mkdir(parents=True, exist_ok=True)
        file_handler = RotatingFileHandler(
            str(log_path),
            maxBytes=max_bytes,
            backupCount=backup_count
        )
        file_handler.setFormatter(logging.Formatter(
            '%(asctime)s - %(name)s - %(levelname)s - %(message)s'
        ))
        root_logger.addHandler(file_handler)

    root_logger.setLevel(level)

    logger = logging.getLogger('ignore-filter')
    logger.debug(f"Logging configured - Level: {logging.getLevelName(level)}, JSON: {json_output}")


def get_logger(name: str) -> logging.Logger:
    """
    Get a logger instance with the given name.

    Args:
        name: Logger name (usually __name__)

    Returns:
        Logger instance with the trace method available
    """
    add_trace_to_logger()
    return logging.getLogger(name)


def log_with_context(
    logger: logging.Logger,
    level: int,
    message: str,
    **context: Any
) -> None:
    """
    Log a message with additional context fields.

    Args:
        logger: Logger instance
        level: Log level (e.g., logging.INFO)
        message: Log message
        **context: Additional fields to include in structured logs
    """
    extra = {'extra': context} if context else {}
    logger.log(level, message, extra=extra)
