"""Logging configuration utilities for ghdiff."""

import logging
import os
import sys
from typing import Optional

from .settings import running_in_actions, runner_debug_enabled

_LOG_FORMAT = (
    "%(asctime)s | %(levelname)s | %(name)s | %(message)s"
)


def escape_data(value: str) -> str:
    """Escape a workflow command message."""
    return value.replace("%", "%25").replace("\r", "%0D").replace("\n", "%0A")


class ActionsLogHandler(logging.StreamHandler):
    """Render log records as GitHub Actions workflow commands."""

    def __init__(self, stream=None):
        super().__init__(stream or sys.stdout)

    def format(self, record: logging.LogRecord) -> str:
        message = record.getMessage()
        if record.levelno >= logging.ERROR:
            return f"::error::{escape_data(message)}"
        if record.levelno >= logging.WARNING:
            return f"::warning::{escape_data(message)}"
        if record.levelno >= logging.INFO:
            return message
        return f"::debug::{escape_data(message)}"


def configure_logging(level: Optional[str] = None) -> None:
    """Configure application-wide logging once."""
    if logging.getLogger().handlers:
        return

    default_level = "DEBUG" if runner_debug_enabled() else "INFO"
    log_level = level or os.getenv("LOG_LEVEL", default_level)

    if running_in_actions():
        # The runner decides whether ::debug:: lines are shown
        logging.basicConfig(level=log_level.upper(), handlers=[ActionsLogHandler()])
        return

    logging.basicConfig(level=log_level.upper(), format=_LOG_FORMAT)
