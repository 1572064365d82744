"""
Logging setup for applications embedding JsonDB.

The package itself only creates module loggers; configuring handlers is
left to the application, which may call setup_logging() once at start-up.
In JSON mode every record is emitted as one JSON object per line.
"""

from __future__ import annotations

import logging
from typing import Optional

import json_log_formatter

from .config import Settings, get_settings

TEXT_FORMAT = "%(asctime)s - %(name)s - %(levelname)s - %(message)s"


def setup_logging(settings: Optional[Settings] = None) -> None:
    """Configure the root logger from settings.

    Args:
        settings: Settings to use (process-wide settings if not provided)
    """
    settings = settings or get_settings()
    level = getattr(logging, settings.log_level.upper(), logging.INFO)

    if settings.log_format == "json":
        formatter = json_log_formatter.JSONFormatter()
    else:
        formatter = logging.Formatter(TEXT_FORMAT)

    handler = logging.StreamHandler()
    handler.setFormatter(formatter)

    root_logger = logging.getLogger()
    root_logger.setLevel(level)
    root_logger.handlers = [handler]
