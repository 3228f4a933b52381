"""
Logging setup for sweeper runs: console, json or detailed output, optional log file
"""
import functools
import json
import logging
import logging.config
import sys
import time
from datetime import datetime, timezone
from pathlib import Path
from typing import Any, Dict, Optional

import colorlog

# Chatty SDK loggers are held at WARNING whatever the run level
QUIET_LOGGERS = ('boto3', 'botocore', 'urllib3')

DETAILED_FORMAT = '%(asctime)s %(levelname)-8s %(name)s:%(lineno)d %(message)s'
FILE_FORMAT = '%(asctime)s %(levelname)-8s %(name)s %(message)s'
DATE_FORMAT = '%Y-%m-%d %H:%M:%S'

LOG_COLORS = {
    'DEBUG': 'cyan',
    'INFO': 'green',
    'WARNING': 'yellow',
    'ERROR': 'red',
    'CRITICAL': 'red,bg_white'
}

_RECORD_ATTRIBUTES = set(vars(logging.LogRecord('', 0, '', 0, '', None, None))) | {'message', 'asctime'}


class StructuredFormatter(logging.Formatter):
    """One JSON object per record; extra= fields are carried through"""

    def format(self, record: logging.LogRecord) -> str:
        entry = {
            'timestamp': datetime.now(timezone.utc).isoformat(),
            'level': record.levelname,
            'logger': record.name,
            'message': record.getMessage(),
        }
        entry.update({k: v for k, v in vars(record).items() if k not in _RECORD_ATTRIBUTES})
        if record.exc_info:
            entry['exception'] = self.formatException(record.exc_info)
        return json.dumps(entry, default=str)


def _console_formatter(log_format: str, enable_color: bool) -> Dict[str, Any]:
    if log_format == 'json':
        return {'()': StructuredFormatter}
    if log_format == 'detailed':
        return {'format': DETAILED_FORMAT, 'datefmt': DATE_FORMAT}
    if enable_color and sys.stdout.isatty():
        return {
            '()': colorlog.ColoredFormatter,
            'format': '%(log_color)s%(levelname)-8s%(reset)s %(message)s',
            'log_colors': LOG_COLORS
        }
    return {'format': '%(levelname)-8s %(message)s'}


def setup_logging(log_level: str = 'INFO',
                  log_file: Optional[str] = None,
                  log_format: str = 'console',
                  enable_color: bool = True) -> None:
    """
    Configure the sweeper's loggers

    Args:
        log_level: DEBUG, INFO, WARNING, ERROR or CRITICAL (any case)
        log_file: Also write to this rotating file when given
        log_format: 'console', 'json' or 'detailed'
        enable_color: Colorize console output when stdout is a terminal
    """
    log_level = log_level.upper()

    formatters = {'console': _console_formatter(log_format, enable_color)}
    handlers = {
        'console': {
            'class': 'logging.StreamHandler',
            'level': log_level,
            'formatter': 'console',
            'stream': 'ext://sys.stdout'
        }
    }

    if log_file:
        Path(log_file).parent.mkdir(parents=True, exist_ok=True)
        formatters['file'] = (dict(formatters['console']) if log_format == 'json'
                              else {'format': FILE_FORMAT, 'datefmt': DATE_FORMAT})
        handlers['file'] = {
            'class': 'logging.handlers.RotatingFileHandler',
            'level': log_level,
            'formatter': 'file',
            'filename': log_file,
            'maxBytes': 100 * 1024 * 1024,
            'backupCount': 5,
            'encoding': 'utf-8'
        }

    handler_names = list(handlers)
    loggers = {name: {'level': 'WARNING', 'handlers': handler_names, 'propagate': False}
               for name in QUIET_LOGGERS}
    loggers['aws_tag_sweeper'] = {'level': log_level, 'handlers': handler_names, 'propagate': False}

    logging.config.dictConfig({
        'version': 1,
        'disable_existing_loggers': False,
        'formatters': formatters,
        'handlers': handlers,
        'loggers': loggers,
        'root': {'level': log_level, 'handlers': handler_names}
    })


def log_execution_time(func):
    """Log how long the wrapped call took, at DEBUG on success and ERROR on failure"""

    @functools.wraps(func)
    def wrapper(*args, **kwargs):
        logger = logging.getLogger(func.__module__)
        start = time.monotonic()
        try:
            result = func(*args, **kwargs)
        except Exception as e:
            logger.error(f"{func.__name__} failed after {time.monotonic() - start:.2f} seconds: {e}")
            raise
        logger.debug(f"{func.__name__} completed in {time.monotonic() - start:.2f} seconds")
        return result

    return wrapper
