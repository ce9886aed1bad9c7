"""Logging configuration for the GNS3 topology provider.

Provides configurable logging with:
- File-based logging with rotation
- Console output for real-time debugging
- Timing decorator for lifecycle operations

Environment Variables:
    GNS3_PROVIDER_LOG_LEVEL: DEBUG, INFO, WARNING, ERROR (default: INFO)
    GNS3_PROVIDER_LOG_FILE: Path to log file (default: ~/.gns3-provider/provider.log)
    GNS3_PROVIDER_LOG_MAX_SIZE: Max log file size in MB (default: 10)
    GNS3_PROVIDER_LOG_BACKUPS: Number of backup files to keep (default: 5)

Usage:
    from gns3_provider.utils.logging_config import setup_logging, timed

    setup_logging()  # Call once, from the embedding process

    @timed("create")
    def create(self, state):
        ...
"""
import functools
import logging
import os
import time
from logging.handlers import RotatingFileHandler
from pathlib import Path
from typing import Callable, Any, Optional

# Performance logger - separate from main logger for easy filtering
perf_logger = logging.getLogger("gns3_provider.perf")


def get_log_level() -> int:
    """Get log level from environment."""
    level_str = os.environ.get("GNS3_PROVIDER_LOG_LEVEL", "INFO").upper()
    return getattr(logging, level_str, logging.INFO)


def get_log_file() -> Path:
    """Get log file path from environment."""
    default_path = Path.home() / ".gns3-provider" / "provider.log"
    path_str = os.environ.get("GNS3_PROVIDER_LOG_FILE", str(default_path))
    return Path(path_str)


def setup_logging() -> None:
    """Configure logging for the provider.

    Sets up:
    - Console handler (INFO+ by default, respects GNS3_PROVIDER_LOG_LEVEL)
    - File handler with rotation (DEBUG level - captures everything)
    """
    log_level = get_log_level()
    log_file = get_log_file()
    max_size_mb = int(os.environ.get("GNS3_PROVIDER_LOG_MAX_SIZE", "10"))
    backup_count = int(os.environ.get("GNS3_PROVIDER_LOG_BACKUPS", "5"))

    log_file.parent.mkdir(parents=True, exist_ok=True)

    main_format = logging.Formatter(
        "%(asctime)s.%(msecs)03d | %(name)-32s | %(levelname)-7s | %(message)s",
        datefmt="%Y-%m-%d %H:%M:%S"
    )

    console_handler = logging.StreamHandler()
    console_handler.setLevel(log_level)
    console_handler.setFormatter(main_format)

    file_handler = RotatingFileHandler(
        log_file,
        maxBytes=max_size_mb * 1024 * 1024,
        backupCount=backup_count,
        encoding="utf-8"
    )
    file_handler.setLevel(logging.DEBUG)
    file_handler.setFormatter(main_format)

    # perf_logger is a child of this logger, so it shares both handlers
    root_logger = logging.getLogger("gns3_provider")
    root_logger.setLevel(logging.DEBUG)  # Capture all, handlers filter
    root_logger.handlers.clear()
    root_logger.addHandler(console_handler)
    root_logger.addHandler(file_handler)

    root_logger.info(f"Logging initialized: level={logging.getLevelName(log_level)}, file={log_file}")


def timed(operation: str, resource_type: Optional[str] = None):
    """Decorator to log execution time of a lifecycle operation.

    Args:
        operation: Name of the operation (e.g., "create", "read", "delete")
        resource_type: Optional resource type (inferred from self.resource_type)
    """
    def decorator(func: Callable) -> Callable:
        @functools.wraps(func)
        def wrapper(*args, **kwargs) -> Any:
            kind = resource_type
            if kind is None and args and hasattr(args[0], "resource_type"):
                kind = args[0].resource_type

            start = time.perf_counter()
            try:
                result = func(*args, **kwargs)
                elapsed = (time.perf_counter() - start) * 1000
                perf_logger.info(
                    f"{operation:10s} | {kind or 'N/A':15s} | {elapsed:8.2f}ms | OK"
                )
                return result
            except Exception as e:
                elapsed = (time.perf_counter() - start) * 1000
                perf_logger.warning(
                    f"{operation:10s} | {kind or 'N/A':15s} | {elapsed:8.2f}ms | FAIL: {e}"
                )
                raise

        return wrapper

    return decorator
