"""Utility modules for logging and concurrent execution"""

from .concurrency import TaskResult, batched, run_concurrently
from .logging_config import StructuredFormatter, log_execution_time, setup_logging

__all__ = [
    'TaskResult',
    'batched',
    'run_concurrently',
    'StructuredFormatter',
    'log_execution_time',
    'setup_logging'
]
