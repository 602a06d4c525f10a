"""
Logging setup for the treatment pricing engine.

Resolvers are pure functions that may run on any request thread of the
hosting web server. Every record is stamped with its thread name so the
lines of one quote can be picked out when several quotes are priced at once.

What gets installed:
    - stdout handler, always
    - rotating application log, when file logging is on
    - rotating ERROR-only log, when file logging is on

Record layout:
    2026-10-18 10:15:30 [INFO    ] [MainThread] treatment_pricing.app - Starting application
    2026-10-18 10:15:31 [DEBUG   ] [Thread-3] treatment_pricing.modules.grid_lookup - Grid cell 80x100cm = 50.0
    2026-10-18 10:15:31 [INFO    ] [Thread-3] treatment_pricing.quote.a1b2c3d4 - Line priced: grid ...

Usage:
    # Once, from the app factory
    from logging_config import setup_logging, get_logger
    setup_logging(log_level="DEBUG")

    # Per module
    logger = get_logger(__name__)

    # Per quote
    quote_logger = get_quote_logger(quote_id)
"""

import logging
import sys
import threading
from logging.handlers import RotatingFileHandler
from pathlib import Path
from typing import Optional, Union


APP_LOGGER_NAME = "treatment_pricing"

LOG_FORMAT = "%(asctime)s [%(levelname)-8s] [%(thread_name)s] %(name)s - %(message)s"
DATE_FORMAT = "%Y-%m-%d %H:%M:%S"

# Rotation: 10 MB per file, 5 backups
MAX_LOG_BYTES = 10 * 1024 * 1024
LOG_BACKUP_COUNT = 5


# =============================================================================
# THREAD CONTEXT FILTER
# =============================================================================

class ThreadContextFilter(logging.Filter):
    """Stamps each record with ``thread_name`` and ``thread_id``."""

    def filter(self, record: logging.LogRecord) -> bool:
        record.thread_name = threading.current_thread().name
        record.thread_id = threading.get_ident()
        return True


# =============================================================================
# LOGGING SETUP
# =============================================================================

def _resolve_level(level: Union[int, str]) -> int:
    """Accept 20 or "INFO"; unknown names fall back to INFO."""
    if isinstance(level, int):
        return level
    resolved = logging.getLevelName(str(level).strip().upper())
    return resolved if isinstance(resolved, int) else logging.INFO


def _attach(
    logger: logging.Logger,
    handler: logging.Handler,
    level: int,
    formatter: logging.Formatter,
    thread_filter: logging.Filter,
) -> None:
    handler.setLevel(level)
    handler.setFormatter(formatter)
    handler.addFilter(thread_filter)
    logger.addHandler(handler)


def _rotating(path: Path) -> RotatingFileHandler:
    return RotatingFileHandler(
        filename=path,
        maxBytes=MAX_LOG_BYTES,
        backupCount=LOG_BACKUP_COUNT,
        encoding="utf-8"
    )


def setup_logging(
    app_name: str = APP_LOGGER_NAME,
    log_level: Union[int, str] = logging.INFO,
    log_dir: Optional[Path] = None,
    enable_file_logging: bool = False,
) -> logging.Logger:
    """
    Install handlers on the application's root logger.

    Safe to call more than once (each app created by the test suite calls
    it); existing handlers are replaced.

    Args:
        app_name: Root logger name (default: "treatment_pricing")
        log_level: Level as int or name (default: INFO)
        log_dir: Where log files go (default: ./logs next to this file)
        enable_file_logging: Also write rotating log files

    Returns:
        The configured root logger
    """
    level = _resolve_level(log_level)

    logger = logging.getLogger(app_name)
    logger.setLevel(level)
    logger.propagate = False
    logger.handlers.clear()

    formatter = logging.Formatter(fmt=LOG_FORMAT, datefmt=DATE_FORMAT)
    thread_filter = ThreadContextFilter()

    _attach(logger, logging.StreamHandler(sys.stdout), level, formatter, thread_filter)

    if enable_file_logging:
        log_dir = Path(log_dir) if log_dir else Path(__file__).parent / "logs"
        log_dir.mkdir(parents=True, exist_ok=True)

        app_log_file = log_dir / f"{app_name}.log"
        _attach(logger, _rotating(app_log_file), level, formatter, thread_filter)
        _attach(
            logger, _rotating(log_dir / f"{app_name}_error.log"),
            logging.ERROR, formatter, thread_filter,
        )
        logger.info(f"Writing logs to {app_log_file}")

    logger.info(f"Log level set to {logging.getLevelName(level)}")
    return logger


# =============================================================================
# LOGGER FACTORY FUNCTIONS
# =============================================================================

def get_logger(name: str) -> logging.Logger:
    """
    Logger for a module, nested under the application root logger.

    get_logger("modules.grid_lookup") -> "treatment_pricing.modules.grid_lookup"
    """
    if not name.startswith(APP_LOGGER_NAME):
        name = f"{APP_LOGGER_NAME}.{name}"
    return logging.getLogger(name)


def get_quote_logger(quote_id: str) -> logging.Logger:
    """
    Logger for one quote's pricing pass.

    Named "treatment_pricing.quote.<first 8 chars of quote_id>" so a
    single quote can be filtered out of a busy log.
    """
    return logging.getLogger(f"{APP_LOGGER_NAME}.quote.{quote_id[:8]}")
