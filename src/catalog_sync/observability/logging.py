"""Logging setup for catalog-sync.

Two output formats share one set of request-scoped context variables:
- JsonFormatter: one JSON object per line, for log shipping
- ConsoleFormatter: aligned single-line records, for APP_ENV=dev

The request id, correlation id and tenant id are bound by the HTTP
middleware (or by LogContext in scripts) and attached to every record
emitted while they are set.
"""

from __future__ import annotations

import contextvars
import logging
import sys
from datetime import UTC, datetime
from typing import Any

import orjson

request_id_var: contextvars.ContextVar[str] = contextvars.ContextVar("request_id", default="")
correlation_id_var: contextvars.ContextVar[str] = contextvars.ContextVar(
    "correlation_id", default=""
)
tenant_id_var: contextvars.ContextVar[str] = contextvars.ContextVar("tenant_id", default="")

_CONTEXT_VARS: dict[str, contextvars.ContextVar[str]] = {
    "request_id": request_id_var,
    "correlation_id": correlation_id_var,
    "tenant_id": tenant_id_var,
}

# Attributes every LogRecord carries; anything else came in through extra=
_RECORD_ATTRS = frozenset(vars(logging.makeLogRecord({}))) | {"message", "asctime"}

# Chatty client libraries
_QUIET_LOGGERS = ("elastic_transport", "pymongo", "redis", "httpx", "uvicorn.access")


def current_context() -> dict[str, str]:
    """Context ids bound to the current task, skipping unset ones."""
    return {key: var.get() for key, var in _CONTEXT_VARS.items() if var.get()}


class JsonFormatter(logging.Formatter):
    """Render records as single-line JSON.

    Example:
        {"timestamp": "...", "level": "INFO", "logger": "catalog_sync.sync.service",
         "message": "Indexed document 65f0...", "request_id": "...", "tenant_id": "acme"}
    """

    def format(self, record: logging.LogRecord) -> str:
        payload: dict[str, Any] = {
            "timestamp": datetime.fromtimestamp(record.created, UTC).isoformat(),
            "level": record.levelname,
            "logger": record.name,
            "message": record.getMessage(),
            "module": record.module,
            "function": record.funcName,
            "line": record.lineno,
        }
        payload.update(current_context())

        for key, value in vars(record).items():
            if key not in _RECORD_ATTRS and not key.startswith("_"):
                payload[key] = value

        if record.exc_info and record.exc_info[0] is not None:
            exc_type, exc, _ = record.exc_info
            payload["exception"] = {
                "type": exc_type.__name__,
                "message": str(exc),
                "traceback": self.formatException(record.exc_info),
            }

        return orjson.dumps(payload, default=str).decode()


class ConsoleFormatter(logging.Formatter):
    """Human-readable records for local development.

    2026-01-10 12:34:56 | INFO     | catalog_sync.sync.service | Indexed ... | tenant=acme
    """

    LEVEL_COLORS = {
        logging.DEBUG: "\033[36m",
        logging.INFO: "\033[32m",
        logging.WARNING: "\033[33m",
        logging.ERROR: "\033[31m",
        logging.CRITICAL: "\033[35m",
    }
    RESET = "\033[0m"

    def __init__(self, use_colors: bool = True) -> None:
        super().__init__()
        self.use_colors = use_colors and sys.stderr.isatty()

    def format(self, record: logging.LogRecord) -> str:
        when = datetime.fromtimestamp(record.created).strftime("%Y-%m-%d %H:%M:%S")
        level = f"{record.levelname:8}"
        if self.use_colors:
            level = f"{self.LEVEL_COLORS.get(record.levelno, '')}{level}{self.RESET}"

        line = f"{when} | {level} | {record.name} | {record.getMessage()}"

        context = current_context()
        tags = []
        if "request_id" in context:
            tags.append(f"req={context['request_id'][:8]}")
        if "tenant_id" in context:
            tags.append(f"tenant={context['tenant_id']}")
        if tags:
            line += " | " + " ".join(tags)

        if record.exc_info:
            line += "\n" + self.formatException(record.exc_info)
        return line


def configure_logging(
    json_format: bool = True,
    level: str = "INFO",
    use_colors: bool = True,
) -> None:
    """Install a single stderr handler on the root logger.

    Args:
        json_format: JSON lines when True, console format otherwise
        level: Root log level name (LOG_LEVEL)
        use_colors: Colorize levels in console format when attached to a TTY
    """
    handler = logging.StreamHandler(sys.stderr)
    handler.setFormatter(JsonFormatter() if json_format else ConsoleFormatter(use_colors))

    root = logging.getLogger()
    root.handlers[:] = [handler]
    root.setLevel(level.upper())

    for name in _QUIET_LOGGERS:
        logging.getLogger(name).setLevel(logging.WARNING)


class LogContext:
    """Bind context ids for a block of code.

    Usage:
        with LogContext(tenant_id="acme"):
            logger.info("Reindexing")  # carries tenant_id
    """

    def __init__(self, **ids: str) -> None:
        self.ids = {key: value for key, value in ids.items() if key in _CONTEXT_VARS}
        self._tokens: list[tuple[contextvars.ContextVar[str], contextvars.Token[str]]] = []

    def __enter__(self) -> LogContext:
        for key, value in self.ids.items():
            var = _CONTEXT_VARS[key]
            self._tokens.append((var, var.set(value)))
        return self

    def __exit__(self, *args: Any) -> None:
        while self._tokens:
            var, token = self._tokens.pop()
            var.reset(token)
