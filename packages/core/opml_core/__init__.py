"""
OPML Manager Core Package.

This package contains shared configuration, logging, exceptions,
and schemas for the OPML Manager application.
"""

__version__ = "0.1.0"

from .logging_config import get_logger, init_logging

__all__ = ["init_logging", "get_logger"]
