"""Structured Logging — JSON formatter, request correlation, and per-layer loggers.

Invariants:
    - All logs include timestamp, level, logger name, and message
    - request_id surfaced on every record emitted while a request is in flight
    - Extra fields (user_id, layer, error_code, ...) surfaced when present
    - Secret-looking keys in the `context` extra are always replaced with [REDACTED]
    - JSON format in production, human-readable in development

Design Decisions:
    - JSONFormatter over third-party libs: zero dependencies, full control
    - request_id in a ContextVar: set by RequestIdMiddleware, read by the formatter,
      so no layer has to thread it through call signatures
    - LayerLogger merges per-call extra with the adapter's context (stdlib
      LoggerAdapter would drop the per-call extra)
    - setup_logging called once on startup via lifespan
"""

import json
import logging
from contextvars import ContextVar
from datetime import datetime, timezone
from typing import Any

request_id_var: ContextVar[str | None] = ContextVar("request_id", default=None)

_SURFACED_KEYS = (
    "user_id", "layer", "operation", "error_code", "path", "method",
    "status_code", "duration_ms", "attempt",
)

_SENSITIVE_FRAGMENTS = (
    "password", "token", "authorization", "secret", "api_key", "apikey", "cookie",
)

REDACTED = "[REDACTED]"


def redact(data: Any) -> Any:
    """Recursively replace values whose key looks like a secret."""
    if isinstance(data, dict):
        return {
            k: REDACTED if _is_sensitive(k) else redact(v)
            for k, v in data.items()
        }
    if isinstance(data, (list, tuple)):
        return [redact(v) for v in data]
    return data


def _is_sensitive(key: Any) -> bool:
    lowered = str(key).lower()
    return any(fragment in lowered for fragment in _SENSITIVE_FRAGMENTS)


class JSONFormatter(logging.Formatter):
    """Format logs as JSON for structured logging in production."""

    def format(self, record: logging.LogRecord) -> str:
        log = {
            "timestamp": datetime.now(timezone.utc).isoformat(),
            "level": record.levelname,
            "logger": record.name,
            "message": record.getMessage(),
        }
        request_id = record.__dict__.get("request_id") or request_id_var.get()
        if request_id:
            log["request_id"] = request_id
        for key in _SURFACED_KEYS:
            val = record.__dict__.get(key)
            if val is not None:
                log[key] = val
        context = record.__dict__.get("context")
        if context:
            log["context"] = redact(context)
        if record.exc_info:
            log["exception"] = self.formatException(record.exc_info)
        return json.dumps(log, ensure_ascii=False, default=str)


class LayerLogger(logging.LoggerAdapter):
    """Logger stamped with layer context (handler / service / repository / adapter)."""

    def process(self, msg, kwargs):
        kwargs["extra"] = {**self.extra, **kwargs.get("extra", {})}
        return msg, kwargs


def layer_logger(name: str, layer: str, **context: Any) -> LayerLogger:
    return LayerLogger(logging.getLogger(name), {"layer": layer, **context})


def setup_logging(level: str = "INFO", fmt: str = "json"):
    """Configure logging for the application."""
    handler = logging.StreamHandler()
    if fmt == "json":
        handler.setFormatter(JSONFormatter())
    else:
        handler.setFormatter(logging.Formatter(
            "%(asctime)s %(levelname)s %(name)s - %(message)s",
        ))
    logging.root.addHandler(handler)
    logging.root.setLevel(getattr(logging, level.upper(), logging.INFO))
