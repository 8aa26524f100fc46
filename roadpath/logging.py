"""Logging setup shared by every roadpath module.

All modules log through children of the ``roadpath`` logger, which owns the
only handler. Route construction and searches log at DEBUG, so turning DEBUG
on (``enable_debug_logging()``, ``temporary_log_level("debug")`` or
``ROADPATH_LOG_LEVEL=DEBUG`` in the environment) traces every waypoint
resolution and search without touching the calling code.
"""

import logging
import os
import sys
from contextlib import contextmanager
from typing import Iterator, Optional, Union

ROOT_LOGGER_NAME = "roadpath"

# Read when the root logger is first configured
LOG_LEVEL_ENV = "ROADPATH_LOG_LEVEL"

DEFAULT_FORMAT = "%(asctime)s - %(name)s - %(levelname)s - %(message)s"

LogLevel = Union[int, str]

# Set once the package root logger has its handler
_ROOT_LOGGER_CONFIGURED = False


def resolve_level(level: LogLevel) -> int:
    """Turn a level name ("debug", "INFO", ...) or number into a level number.

    Raises:
        ValueError: If ``level`` is a name the logging module does not know.
    """
    if isinstance(level, int):
        return level
    value = logging.getLevelName(level.strip().upper())
    if not isinstance(value, int):
        raise ValueError(f"Unknown log level '{level}'.")
    return value


def level_from_env(default: int = logging.INFO) -> int:
    """Level named by ``ROADPATH_LOG_LEVEL``, or ``default`` if unset or invalid."""
    env_level = os.getenv(LOG_LEVEL_ENV)
    if not env_level:
        return default
    try:
        return resolve_level(env_level)
    except ValueError:
        return default


def setup_root_logger(
    level: Optional[LogLevel] = None,
    format_string: Optional[str] = None,
    handler: Optional[logging.Handler] = None,
) -> None:
    """Attach a single handler to the ``roadpath`` root logger.

    Repeated calls are no-ops until ``reset_logging()`` is called.

    Args:
        level: Level number or name. Defaults to ``ROADPATH_LOG_LEVEL``, then INFO.
        format_string: Custom format string (defaults to ``DEFAULT_FORMAT``).
        handler: Custom handler (optional, defaults to a stdout StreamHandler).
    """
    global _ROOT_LOGGER_CONFIGURED

    if _ROOT_LOGGER_CONFIGURED:
        return

    root_logger = logging.getLogger(ROOT_LOGGER_NAME)
    root_logger.setLevel(level_from_env() if level is None else resolve_level(level))
    root_logger.handlers.clear()

    if handler is None:
        handler = logging.StreamHandler(sys.stdout)
    handler.setFormatter(logging.Formatter(format_string or DEFAULT_FORMAT))
    root_logger.addHandler(handler)

    # Propagate so pytest's caplog sees the records
    root_logger.propagate = True

    _ROOT_LOGGER_CONFIGURED = True


def get_logger(name: str) -> logging.Logger:
    """Return a logger that inherits the ``roadpath`` root configuration.

    Args:
        name: Logger name (typically ``__name__`` of the calling module).

    Returns:
        Logger instance with level NOTSET so the root level applies.
    """
    setup_root_logger()

    logger = logging.getLogger(name)
    logger.setLevel(logging.NOTSET)
    return logger


def set_global_log_level(level: LogLevel) -> None:
    """Set the level of the ``roadpath`` root logger and its handlers.

    Args:
        level: Level number (``logging.DEBUG``) or name (``"debug"``).
    """
    setup_root_logger()

    value = resolve_level(level)
    root_logger = logging.getLogger(ROOT_LOGGER_NAME)
    root_logger.setLevel(value)
    for handler in root_logger.handlers:
        handler.setLevel(value)


def enable_debug_logging() -> None:
    """Trace route construction and searches."""
    set_global_log_level(logging.DEBUG)


def disable_debug_logging() -> None:
    """Back to INFO: only unreachable destinations are reported."""
    set_global_log_level(logging.INFO)


@contextmanager
def temporary_log_level(level: LogLevel) -> Iterator[None]:
    """Run a block at ``level``, then restore the previous root level."""
    setup_root_logger()

    root_logger = logging.getLogger(ROOT_LOGGER_NAME)
    previous = root_logger.level
    set_global_log_level(level)
    try:
        yield
    finally:
        set_global_log_level(previous)


def reset_logging() -> None:
    """Forget the root logger configuration (mainly for testing)."""
    global _ROOT_LOGGER_CONFIGURED
    _ROOT_LOGGER_CONFIGURED = False

    root_logger = logging.getLogger(ROOT_LOGGER_NAME)
    root_logger.handlers.clear()
    root_logger.setLevel(logging.NOTSET)


setup_root_logger()
