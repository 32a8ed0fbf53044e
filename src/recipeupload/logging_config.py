"""Logging for the recipe upload service.

Every record carries the ids bound in the current context (HTTP request,
Celery task, authenticated user, draft being processed). Development logs
are single human-readable lines; production logs are one JSON object per line.
"""

import json
import logging
import os
import sys
from contextvars import ContextVar, Token
from datetime import datetime, timezone
from typing import Any

request_id_ctx: ContextVar[str | None] = ContextVar("request_id", default=None)
task_id_ctx: ContextVar[str | None] = ContextVar("task_id", default=None)
user_id_ctx: ContextVar[str | None] = ContextVar("user_id", default=None)
draft_id_ctx: ContextVar[str | None] = ContextVar("draft_id", default=None)

# field name -> (context variable, short label, characters shown in text logs)
_CONTEXT_FIELDS: dict[str, tuple[ContextVar, str, int | None]] = {
    "request_id": (request_id_ctx, "req", 8),
    "task_id": (task_id_ctx, "task", 8),
    "user_id": (user_id_ctx, "user", None),
    "draft_id": (draft_id_ctx, "draft", 8),
}

QUIET_LOGGERS: dict[str, int] = {
    "celery": logging.WARNING,
    "celery.task": logging.INFO,
    "httpx": logging.WARNING,
    "httpcore": logging.WARNING,
    "openai": logging.WARNING,
    "botocore": logging.WARNING,
    "boto3": logging.WARNING,
    "urllib3": logging.WARNING,
    "sqlalchemy.engine": logging.WARNING,
    "uvicorn": logging.INFO,
    "uvicorn.access": logging.WARNING,
}


def current_context() -> dict[str, str]:
    """Ids bound in the current context, unset ones omitted."""
    return {name: value for name, (var, _, _) in _CONTEXT_FIELDS.items() if (value := var.get())}


class StructuredJsonFormatter(logging.Formatter):
    """One JSON object per record."""

    def format(self, record: logging.LogRecord) -> str:
        entry: dict[str, Any] = {
            "timestamp": datetime.fromtimestamp(record.created, tz=timezone.utc).isoformat(),
            "level": record.levelname,
            "logger": record.name,
            "message": record.getMessage(),
            **current_context(),
            "location": f"{record.pathname}:{record.lineno} in {record.funcName}",
        }
        if record.exc_info:
            entry["exception"] = self.formatException(record.exc_info)
        return json.dumps(entry, default=str)


class ContextualFormatter(logging.Formatter):
    """``time | LEVEL | logger [ids] | message`` lines for local development."""

    def format(self, record: logging.LogRecord) -> str:
        labels = []
        for _, (var, label, width) in _CONTEXT_FIELDS.items():
            value = var.get()
            if value:
                labels.append(f"{label}={value[:width] if width else value}")
        context = f" [{', '.join(labels)}]" if labels else ""

        timestamp = datetime.fromtimestamp(record.created).strftime("%Y-%m-%d %H:%M:%S")
        line = f"{timestamp} | {record.levelname:<8} | {record.name}{context} | {record.getMessage()}"
        if record.exc_info:
            line = f"{line}\n{self.formatException(record.exc_info)}"
        return line


class ContextLogger(logging.LoggerAdapter):
    """Adapter copying the context ids into each record's ``extra``."""

    def process(self, msg: str, kwargs: dict) -> tuple[str, dict]:
        kwargs["extra"] = {**current_context(), **kwargs.get("extra", {})}
        return msg, kwargs


def get_logger(name: str) -> ContextLogger:
    """Get a context-aware logger for the given module name."""
    return ContextLogger(logging.getLogger(name), {})


def _use_json(environment: str) -> bool:
    fmt = os.getenv("LOG_FORMAT", "").lower()
    if fmt:
        return fmt == "json"
    return environment.lower() == "production" and not sys.stdout.isatty()


def configure_logging(
    log_level: str | None = None,
    json_format: bool | None = None,
    log_file: str | None = None,
) -> None:
    """
    Configure root logging for the API process or a Celery worker.

    Args:
        log_level: Minimum level; defaults to the ``log_level`` setting.
        json_format: Force JSON (True) or text (False) output. If None, JSON is
            used when ``LOG_FORMAT=json`` or in production without a TTY.
        log_file: Optional file to write logs to as well.
    """
    from recipeupload.config import get_settings

    settings = get_settings()
    level_name = (log_level or settings.log_level).upper()
    level = getattr(logging, level_name, logging.INFO)
    if json_format is None:
        json_format = _use_json(settings.environment)

    formatter = StructuredJsonFormatter() if json_format else ContextualFormatter()
    handlers: list[logging.Handler] = [logging.StreamHandler(sys.stdout)]
    if log_file:
        handlers.append(logging.FileHandler(log_file))

    root = logging.getLogger()
    for handler in root.handlers[:]:
        root.removeHandler(handler)
    for handler in handlers:
        handler.setFormatter(formatter)
        handler.setLevel(level)
        root.addHandler(handler)
    root.setLevel(level)

    logging.getLogger("recipeupload").setLevel(level)
    for name, quiet_level in QUIET_LOGGERS.items():
        logging.getLogger(name).setLevel(quiet_level)

    get_logger(__name__).info(
        f"Logging configured: level={level_name}, format={'json' if json_format else 'text'}"
    )


class LoggingContext:
    """
    Bind context ids for the duration of a ``with`` block.

    Only the ids passed (not None) are bound; previous values are restored on exit.
    """

    def __init__(
        self,
        request_id: str | None = None,
        task_id: str | None = None,
        user_id: str | None = None,
        draft_id: str | None = None,
    ):
        self._values = {
            "request_id": request_id,
            "task_id": task_id,
            "user_id": user_id,
            "draft_id": draft_id,
        }
        self._tokens: list[tuple[ContextVar, Token]] = []

    def __enter__(self) -> "LoggingContext":
        for name, value in self._values.items():
            if value is not None:
                var = _CONTEXT_FIELDS[name][0]
                self._tokens.append((var, var.set(value)))
        return self

    def __exit__(self, *args: Any) -> None:
        while self._tokens:
            var, token = self._tokens.pop()
            var.reset(token)
