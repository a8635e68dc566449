"""
Logging configuration.

Central place to configure log output for the CLI and library code.
Modules obtain loggers via ``get_logger(__name__)``.
"""

import logging
import sys

_LOG_FORMAT = "%(asctime)s %(levelname)s %(name)s: %(message)s"
_ROOT_LOGGER_NAME = "opml_manager"
_PACKAGE_PREFIXES = ("opml_core", "opml_rss", "opml_cli")


def _resolve_level(level: int | str) -> int:
    if isinstance(level, int):
        return level
    resolved = logging.getLevelName(level.strip().upper())
    if not isinstance(resolved, int):
        raise ValueError(f"Unknown log level: {level}")
    return resolved


def init_logging(level: int | str = "INFO") -> None:
    """
    Configure logging for OPML Manager packages.

    Installs a single stderr handler on each package logger. Calling it
    again only updates the level.

    Args:
        level: Log level name or numeric level.

    Raises:
        ValueError: If the level name is unknown.
    """
    resolved = _resolve_level(level)
    formatter = logging.Formatter(_LOG_FORMAT)

    for name in (_ROOT_LOGGER_NAME, *_PACKAGE_PREFIXES):
        logger = logging.getLogger(name)
        logger.setLevel(resolved)
        if not any(getattr(h, "_opml_manager", False) for h in logger.handlers):
            handler = logging.StreamHandler(sys.stderr)
            handler.setFormatter(formatter)
            handler._opml_manager = True  # type: ignore[attr-defined]
            logger.addHandler(handler)
        logger.propagate = False


def get_logger(name: str) -> logging.Logger:
    """
    Get a logger for a module.

    Args:
        name: Usually ``__name__`` of the calling module.

    Returns:
        Logger instance.
    """
    if name.startswith(_PACKAGE_PREFIXES):
        return logging.getLogger(name)
    return logging.getLogger(f"{_ROOT_LOGGER_NAME}.{name}")
