"""Utility modules for retries and logging."""
from .connection import with_retry, RETRYABLE_EXCEPTIONS
from .logging_config import setup_logging, timed, perf_logger

__all__ = [
    "with_retry",
    "RETRYABLE_EXCEPTIONS",
    "setup_logging",
    "timed",
    "perf_logger",
]
