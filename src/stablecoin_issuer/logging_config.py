"""Structured logging configuration with per-transaction correlation IDs.

This module provides structured JSON logging with:
- A correlation ID per engine transaction (the transaction id)
- Contextual fields (component, user)
- Consistent log formatting for audit tooling
"""
from __future__ import annotations

import json
import logging
import sys
from contextvars import ContextVar
from datetime import datetime, timezone
from typing import Any, Optional

# Context variables for correlation tracking
correlation_id_var: ContextVar[Optional[str]] = ContextVar("correlation_id", default=None)
component_var: ContextVar[Optional[str]] = ContextVar("component", default=None)
user_id_var: ContextVar[Optional[str]] = ContextVar("user_id", default=None)

_CONTEXT_FIELDS = ("correlation_id", "component", "user_id")

_STANDARD_RECORD_FIELDS = frozenset((
    "name",
    "msg",
    "args",
    "asctime",
    "created",
    "filename",
    "funcName",
    "levelname",
    "levelno",
    "lineno",
    "module",
    "msecs",
    "message",
    "pathname",
    "process",
    "processName",
    "relativeCreated",
    "thread",
    "threadName",
    "taskName",
    "exc_info",
    "exc_text",
    "stack_info",
) + _CONTEXT_FIELDS)


class CorrelationIDFilter(logging.Filter):
    """Logging filter that adds correlation ID and context to log records."""

    def filter(self, record: logging.LogRecord) -> bool:
        record.correlation_id = correlation_id_var.get()
        record.component = component_var.get()
        record.user_id = user_id_var.get()
        return True


class StructuredFormatter(logging.Formatter):
    """JSON formatter for structured logging."""

    def format(self, record: logging.LogRecord) -> str:
        log_data = {
            "timestamp": datetime.now(timezone.utc).isoformat(),
            "level": record.levelname,
            "logger": record.name,
            "message": record.getMessage(),
            "module": record.module,
            "function": record.funcName,
            "line": record.lineno,
        }

        for key in _CONTEXT_FIELDS:
            value = getattr(record, key, None)
            if value:
                log_data[key] = value

        if record.exc_info:
            log_data["exception"] = self.formatException(record.exc_info)

        # Extra fields passed via ``extra=``
        for key, value in record.__dict__.items():
            if key not in _STANDARD_RECORD_FIELDS:
                log_data[key] = value

        return json.dumps(log_data, default=str)


def setup_logging(
    level: str = "INFO",
    json_format: bool = True,
    log_file: Optional[str] = None,
) -> None:
    """
    Configure structured logging for the application.

    Args:
        level: Logging level (DEBUG, INFO, WARNING, ERROR, CRITICAL)
        json_format: Use JSON structured logging (True) or simple format (False)
        log_file: Optional file path for logging output
    """
    root_logger = logging.getLogger()
    root_logger.setLevel(getattr(logging, level.upper()))

    for handler in root_logger.handlers[:]:
        root_logger.removeHandler(handler)

    if json_format:
        formatter: logging.Formatter = StructuredFormatter()
    else:
        formatter = logging.Formatter(
            "%(asctime)s - %(name)s - %(levelname)s - "
            "[%(correlation_id)s] %(message)s",
            datefmt="%Y-%m-%d %H:%M:%S",
        )

    console_handler = logging.StreamHandler(sys.stdout)
    console_handler.setFormatter(formatter)
    console_handler.addFilter(CorrelationIDFilter())
    root_logger.addHandler(console_handler)

    if log_file:
        file_handler = logging.FileHandler(log_file)
        file_handler.setFormatter(formatter)
        file_handler.addFilter(CorrelationIDFilter())
        root_logger.addHandler(file_handler)


def setup_logging_from_settings(settings) -> None:
    """Configure logging from IssuerSettings."""
    setup_logging(level=settings.log_level, json_format=settings.log_json)


def get_correlation_id() -> Optional[str]:
    return correlation_id_var.get()


class LogContext:
    """Context manager for temporary logging context."""

    def __init__(
        self,
        correlation_id: Optional[str] = None,
        component: Optional[str] = None,
        user_id: Optional[str] = None,
    ):
        self.correlation_id = correlation_id
        self.component = component
        self.user_id = user_id
        self._tokens: list = []

    def __enter__(self) -> "LogContext":
        if self.correlation_id:
            self._tokens.append((correlation_id_var, correlation_id_var.set(self.correlation_id)))
        if self.component:
            self._tokens.append((component_var, component_var.set(self.component)))
        if self.user_id:
            self._tokens.append((user_id_var, user_id_var.set(self.user_id)))
        return self

    def __exit__(self, exc_type, exc_val, exc_tb) -> None:
        for var, token in reversed(self._tokens):
            var.reset(token)
        self._tokens.clear()


def log_compliance(
    logger: logging.Logger,
    level: str,
    message: str,
    action: Optional[str] = None,
    user_id: Optional[str] = None,
    **kwargs: Any,
) -> None:
    """Log a compliance action (blacklist, recall, freeze, pause) with context."""
    extra = kwargs.copy()
    if action:
        extra["compliance_action"] = action
    if user_id:
        extra["subject_user_id"] = user_id
    getattr(logger, level.lower())(message, extra=extra)
