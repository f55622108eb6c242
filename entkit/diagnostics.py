"""
Structured diagnostic logging for entkit.

Thin helpers over the standard logging module. Every entry carries the
emitting component (e.g. "ItemStore") and an optional data payload as
record extras, so the JSON formatter renders them as fields.

Invariants:
    - Logging is observational only; it never alters control flow
    - Handler failures are absorbed by logging's own error path
"""

from __future__ import annotations

import logging
from typing import Any, Optional

import json_log_formatter

from .config import Settings

TEXT_FORMAT = "%(asctime)s - %(name)s - %(levelname)s - %(message)s"


def setup_logging(settings: Optional[Settings] = None) -> None:
    """Configure logging based on configuration.

    Args:
        settings: Engine settings (loaded from env if not provided)
    """
    settings = settings or Settings()
    level = getattr(logging, settings.log_level.upper(), logging.INFO)

    if settings.log_format == "json":
        formatter: logging.Formatter = json_log_formatter.JSONFormatter()
    else:
        formatter = logging.Formatter(TEXT_FORMAT)

    handler = logging.StreamHandler()
    handler.setFormatter(formatter)

    root_logger = logging.getLogger()
    root_logger.setLevel(level)
    root_logger.handlers = [handler]


def get_logger(component: str) -> logging.Logger:
    """Logger for a component, namespaced under "entkit"."""
    return logging.getLogger(f"entkit.{component}")


def debug_log(component: str, message: str, data: Any = None) -> None:
    get_logger(component).debug(
        f"[{component}] {message}", extra={"component": component, "data": data}
    )


def info_log(component: str, message: str, data: Any = None) -> None:
    get_logger(component).info(
        f"[{component}] {message}", extra={"component": component, "data": data}
    )


def warn_log(component: str, message: str, data: Any = None) -> None:
    get_logger(component).warning(
        f"[{component}] {message}", extra={"component": component, "data": data}
    )


def error_log(component: str, message: str, error: BaseException, data: Any = None) -> None:
    """Log a failure with its exception and the operation context."""
    get_logger(component).error(
        f"[{component}] {message}: {error}",
        exc_info=error,
        extra={"component": component, "data": data},
    )
