"""
Docstore - Logging Configuration
================================

Structured JSON or human-readable logging with request-scoped context
(correlation id, operation id, acting profile) propagated through
contextvars.

Usage:
    from docstore.observability import setup_logging, get_logger, OperationLogger

    setup_logging(level="INFO", json_format=True)
    logger = get_logger(__name__)

    with OperationLogger(logger, "duplicate_file", profile_id=str(profile_id)):
        ...
"""

import contextvars
import json
import logging
import sys
import traceback
from datetime import datetime, timedelta, timezone
from typing import Any
from uuid import uuid4

_correlation_id: contextvars.ContextVar[str | None] = contextvars.ContextVar('correlation_id', default=None)
_operation_id: contextvars.ContextVar[str | None] = contextvars.ContextVar('operation_id', default=None)
_profile_id: contextvars.ContextVar[str | None] = contextvars.ContextVar('profile_id', default=None)

def get_correlation_id() -> str | None:
    return _correlation_id.get()

def set_correlation_id(correlation_id: str | None) -> contextvars.Token:
    return _correlation_id.set(correlation_id)

def get_operation_id() -> str | None:
    return _operation_id.get()

def set_operation_id(operation_id: str | None) -> contextvars.Token:
    return _operation_id.set(operation_id)

def get_profile_id() -> str | None:
    return _profile_id.get()

def set_profile_id(profile_id: str | None) -> contextvars.Token:
    return _profile_id.set(profile_id)

def generate_correlation_id() -> str:
    return f"corr-{uuid4().hex[:12]}"

def generate_operation_id() -> str:
    return f"op-{uuid4().hex[:12]}"


class OperationContext:
    """Context manager binding request ids to every log line emitted inside it."""

    def __init__(self, correlation_id: str | None = None, operation_id: str | None = None,
                 profile_id: str | None = None):
        self.correlation_id = correlation_id
        self.operation_id = operation_id
        self.profile_id = profile_id
        self._tokens: list[contextvars.Token] = []

    def __enter__(self):
        if self.correlation_id:
            self._tokens.append(set_correlation_id(self.correlation_id))
        if self.operation_id:
            self._tokens.append(set_operation_id(self.operation_id))
        if self.profile_id:
            self._tokens.append(set_profile_id(self.profile_id))
        return self

    def __exit__(self, exc_type, exc_val, exc_tb):
        for token in reversed(self._tokens):
            token.var.reset(token)
        return False


def _context_ids() -> dict[str, str]:
    """Context ids bound to the current task, skipping unset ones."""
    ids = {
        "correlation_id": get_correlation_id(),
        "operation_id": get_operation_id(),
        "profile_id": get_profile_id(),
    }
    return {key: value for key, value in ids.items() if value}


class StructuredFormatter(logging.Formatter):
    """One JSON object per record, carrying the bound context ids."""

    def __init__(self, include_location: bool = True, extra_fields: dict[str, Any] | None = None):
        super().__init__()
        self.include_location = include_location
        self.extra_fields = dict(extra_fields or {})

    def _exception_payload(self, exc_info) -> dict[str, Any]:
        exc_type, exc_value, _ = exc_info
        return {
            "type": getattr(exc_type, "__name__", None),
            "message": None if exc_value is None else str(exc_value),
            "traceback": "".join(traceback.format_exception(*exc_info)) if exc_type else None,
        }

    def format(self, record: logging.LogRecord) -> str:
        stamp = datetime.fromtimestamp(record.created, tz=timezone.utc)
        payload: dict[str, Any] = {
            "timestamp": stamp.isoformat(),
            "level": record.levelname,
            "logger": record.name,
            "message": record.getMessage(),
            **_context_ids(),
        }
        if self.include_location:
            payload["location"] = f"{record.pathname}:{record.lineno} in {record.funcName}"
        if record.exc_info:
            payload["exception"] = self._exception_payload(record.exc_info)
        data = getattr(record, "extra_data", None)
        if data is not None:
            payload["data"] = data
        payload.update(self.extra_fields)
        return json.dumps(payload, default=str)


class ContextFormatter(logging.Formatter):
    """Plain-text formatter prefixing each line with the bound context ids."""

    DEFAULT_FORMAT = "%(asctime)s %(levelname)-8s %(name)s %(context)s- %(message)s"

    def __init__(self, fmt: str | None = None, datefmt: str | None = None):
        super().__init__(fmt=fmt or self.DEFAULT_FORMAT, datefmt=datefmt or "%Y-%m-%dT%H:%M:%S")

    def format(self, record: logging.LogRecord) -> str:
        ids = _context_ids()
        record.context = "".join(f"{key.split('_')[0]}={value} " for key, value in ids.items())
        return super().format(record)


def setup_logging(level: str = "INFO", json_format: bool = False, include_location: bool = True,
                  extra_fields: dict[str, Any] | None = None) -> None:
    """Setup root logging to stdout with the chosen formatter."""
    root_logger = logging.getLogger()
    root_logger.setLevel(getattr(logging, level.upper()))
    root_logger.handlers.clear()

    formatter = StructuredFormatter(include_location=include_location, extra_fields=extra_fields) if json_format else ContextFormatter()

    console_handler = logging.StreamHandler(sys.stdout)
    console_handler.setFormatter(formatter)
    root_logger.addHandler(console_handler)

    logging.getLogger("sqlalchemy.engine").setLevel(logging.WARNING)


def get_logger(name: str) -> logging.Logger:
    """Get a configured logger."""
    return logging.getLogger(name)


class OperationLogger:
    """
    Context manager wrapping one management operation.

    Binds fresh operation/correlation ids for the duration of the block and
    emits ``operation_start`` then ``operation_success`` or
    ``operation_failed`` records with the elapsed milliseconds. Exceptions
    are never suppressed.
    """

    def __init__(self, logger: logging.Logger, operation_name: str, profile_id: str | None = None,
                 correlation_id: str | None = None, **context_data):
        self.logger = logger
        self.operation_name = operation_name
        self.profile_id = profile_id
        self.correlation_id = correlation_id or get_correlation_id() or generate_correlation_id()
        self.operation_id = generate_operation_id()
        self.context_data = context_data
        self.start_time: datetime | None = None
        self._context = OperationContext(correlation_id=self.correlation_id, operation_id=self.operation_id,
                                         profile_id=self.profile_id)

    def _emit(self, level: int, event: str, message: str, exc_info=None, **data) -> None:
        payload = {"event": event, "operation": self.operation_name, **data}
        self.logger.log(level, message, exc_info=exc_info, extra={"extra_data": payload})

    def __enter__(self):
        self.start_time = datetime.now(timezone.utc)
        self._context.__enter__()
        self._emit(logging.INFO, "operation_start", f"{self.operation_name} started", **self.context_data)
        return self

    def __exit__(self, exc_type, exc_val, exc_tb):
        elapsed = self.duration_ms
        try:
            if exc_type is None:
                self._emit(logging.INFO, "operation_success", f"{self.operation_name} done in {elapsed}ms",
                           duration_ms=elapsed)
            else:
                self._emit(logging.WARNING, "operation_failed",
                           f"{self.operation_name} failed after {elapsed}ms: {exc_val}",
                           exc_info=(exc_type, exc_val, exc_tb), duration_ms=elapsed)
        finally:
            self._context.__exit__(exc_type, exc_val, exc_tb)
        return False

    @property
    def duration_ms(self) -> int:
        if self.start_time is None:
            return 0
        return int((datetime.now(timezone.utc) - self.start_time) / timedelta(milliseconds=1))
