"""
🔍 Logging for CueTimer
Console output (colored or JSON) plus rotating log files under
``~/.cuetimer/logs`` or ``$CUETIMER_LOG_DIR``.

Environment switches:
    CUETIMER_DEV=1          debug level
    CUETIMER_LOG_LEVEL      explicit level name
    CUETIMER_JSON_LOGS=1    one JSON object per line
    CUETIMER_FILE_LOGS=0    console only
    CUETIMER_SYSTEM_INFO=0  skip the host summary at startup
"""

import json
import logging
import logging.handlers
import os
import platform
import sys
from datetime import datetime, timezone
from pathlib import Path
from typing import Any, Dict

import psutil

PACKAGE_LOGGER = "cuetimer"

IS_DEV_MODE = '--dev' in sys.argv or os.getenv('CUETIMER_DEV') == '1'
ENABLE_JSON_LOGS = os.getenv('CUETIMER_JSON_LOGS', '0') == '1'
ENABLE_FILE_LOGGING = os.getenv('CUETIMER_FILE_LOGS', '1') != '0'
ENABLE_SYSTEM_INFO = os.getenv('CUETIMER_SYSTEM_INFO', '1') != '0'

LOG_LEVEL = logging.getLevelName(os.getenv('CUETIMER_LOG_LEVEL', 'DEBUG' if IS_DEV_MODE else 'INFO').upper())
if not isinstance(LOG_LEVEL, int):
    LOG_LEVEL = logging.INFO

LOG_DIR = Path(os.getenv('CUETIMER_LOG_DIR') or Path.home() / ".cuetimer" / "logs")
ROTATE_BYTES = 2 * 1024 * 1024
ROTATE_KEEP = 5

CONSOLE_FORMAT = '%(asctime)s | %(levelname)s | %(name)s | %(message)s'
FILE_FORMAT = '%(asctime)s | %(name)s | %(levelname)s | %(threadName)s | %(message)s'

# Attributes every LogRecord carries; anything else came in through ``extra``
_STANDARD_FIELDS = set(vars(logging.LogRecord("", 0, "", 0, "", None, None))) | {'message', 'asctime'}


class ColoredFormatter(logging.Formatter):
    """Console formatter that colors the level name."""

    COLORS = {
        logging.DEBUG: '\033[36m',
        logging.INFO: '\033[32m',
        logging.WARNING: '\033[33m',
        logging.ERROR: '\033[31m',
        logging.CRITICAL: '\033[35m',
    }
    RESET = '\033[0m'

    def format(self, record: logging.LogRecord) -> str:
        color = self.COLORS.get(record.levelno)
        if color is None:
            return super().format(record)
        plain = record.levelname
        record.levelname = f"{color}{plain}{self.RESET}"
        try:
            return super().format(record)
        finally:
            record.levelname = plain


class JSONFormatter(logging.Formatter):
    """One JSON object per record.

    Example output:
        {"level": "INFO", "logger": "cuetimer.core.commands",
         "message": "Cue due at 180s: horn.wav", "thread": "TimerTicker",
         "timestamp": "2026-03-01T18:30:00.123Z"}
    """

    def format(self, record: logging.LogRecord) -> str:
        entry: Dict[str, Any] = {
            'timestamp': datetime.fromtimestamp(record.created, tz=timezone.utc)
            .isoformat(timespec='milliseconds').replace('+00:00', 'Z'),
            'level': record.levelname,
            'logger': record.name,
            'thread': record.threadName,
            'message': record.getMessage(),
        }
        if record.levelno >= logging.WARNING:
            entry['source'] = f"{record.filename}:{record.lineno}"
        if record.exc_info:
            entry['exception'] = self.formatException(record.exc_info)

        for key, value in vars(record).items():
            if key in _STANDARD_FIELDS or key in entry:
                continue
            try:
                json.dumps(value)
            except (TypeError, ValueError):
                value = str(value)
            entry[key] = value

        return json.dumps(entry, ensure_ascii=True, sort_keys=True)


def _rotating_handler(filename: str, level: int) -> logging.Handler:
    handler = logging.handlers.RotatingFileHandler(
        LOG_DIR / filename, maxBytes=ROTATE_BYTES, backupCount=ROTATE_KEEP, encoding='utf-8'
    )
    handler.setLevel(level)
    handler.setFormatter(JSONFormatter() if ENABLE_JSON_LOGS else logging.Formatter(FILE_FORMAT))
    return handler


def setup_logger(name: str) -> logging.Logger:
    """Attach console and file handlers to ``name`` once and return it."""
    logger = logging.getLogger(name)
    if logger.handlers:
        return logger
    logger.setLevel(LOG_LEVEL)

    console = logging.StreamHandler()
    console.setLevel(LOG_LEVEL)
    console.setFormatter(JSONFormatter() if ENABLE_JSON_LOGS else ColoredFormatter(CONSOLE_FORMAT, '%H:%M:%S'))
    logger.addHandler(console)

    if ENABLE_FILE_LOGGING:
        try:
            LOG_DIR.mkdir(parents=True, exist_ok=True)
            logger.addHandler(_rotating_handler("cuetimer.log", LOG_LEVEL))
            logger.addHandler(_rotating_handler("cuetimer_errors.log", logging.ERROR))
        except OSError as e:
            logger.warning(f"File logging disabled ({LOG_DIR}): {e}")

    return logger


def setup_logging() -> logging.Logger:
    """Configure the package logger; module loggers inherit its handlers."""
    return setup_logger(PACKAGE_LOGGER)


def set_log_level(level_name: str) -> None:
    """Apply a level from settings; the error log file stays at ERROR."""
    level = logging.getLevelName(str(level_name).upper())
    if not isinstance(level, int):
        return
    logger = logging.getLogger(PACKAGE_LOGGER)
    logger.setLevel(level)
    for handler in logger.handlers:
        if handler.level != logging.ERROR:
            handler.setLevel(level)


def log_startup(module_name: str) -> None:
    logger = logging.getLogger(module_name)
    logger.info(f"🎵 Starting {module_name}")
    if ENABLE_FILE_LOGGING:
        logger.info(f"📂 Logs: {LOG_DIR}")
    if not ENABLE_SYSTEM_INFO:
        return
    try:
        memory = psutil.virtual_memory()
        logger.info(
            f"🖥️  {platform.platform()} | Python {platform.python_version()} | "
            f"{psutil.cpu_count(logical=True)} CPUs | {memory.available / (1024 ** 3):.1f}GB free"
        )
    except psutil.Error as e:
        logger.warning(f"Could not gather system info: {e}")


def log_shutdown(logger: logging.Logger, component_name: str) -> None:
    logger.info(f"🛑 Shutting down {component_name}")
    for handler in logger.handlers:
        handler.flush()


def log_structured(logger: logging.Logger, level: int, message: str, **context: Any) -> None:
    """Log ``message`` with context fields.

    JSON mode emits the fields as separate keys; otherwise they are appended
    as ``key=value`` pairs.

    Example:
        >>> log_structured(logger, logging.INFO, "Trigger file loaded",
        ...                config="round.yaml", cues=4)
    """
    if ENABLE_JSON_LOGS:
        logger.log(level, message, extra=context)
    elif context:
        pairs = " ".join(f"{k}={v}" for k, v in context.items())
        logger.log(level, f"{message} | {pairs}")
    else:
        logger.log(level, message)
